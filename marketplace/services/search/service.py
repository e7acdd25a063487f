import logging

from marketplace.core.config import settings
from marketplace.core.exception import SearchValidationError
from marketplace.infrastructure.database import DATA_STORE_ERRORS
from marketplace.services.monitoring.prometheus import record_search, track_search_latency
from marketplace.services.search.normalizer import normalize_search_params
from marketplace.services.search.paginator import Paginator
from marketplace.services.search.planner import QueryPlanner
from marketplace.services.search.query import ListingFilters, SearchQuery, SearchResult

logger = logging.getLogger(__name__)


class SearchService:
    """강좌 검색 파이프라인 (Normalizer -> Planner -> Paginator)

    검색어 길이 오류는 호출자에게 그대로 전달하고, 데이터 저장소 오류는
    로그를 남긴 뒤 빈 결과로 바꿔 돌려준다.
    """

    def __init__(self, planner: QueryPlanner, paginator: Paginator):
        self.planner = planner
        self.paginator = paginator

    async def search(
        self,
        keyword: str | None = None,
        page: str | int | None = None,
        sort_by: str | None = None,
        category: str | int | None = None,
        sort_order: str | None = None,
    ) -> tuple[SearchQuery, SearchResult]:
        """공개 키워드 검색 - 항상 활성 강좌만"""
        try:
            query = normalize_search_params(
                keyword=keyword,
                page=page,
                sort_by=sort_by,
                category=category,
                sort_order=sort_order,
                page_size=settings.search_page_size,
            )
        except SearchValidationError:
            record_search("rejected")
            raise

        result = await self.execute(query, active_only=True)
        return query, result

    async def execute(
        self,
        query: SearchQuery,
        filters: ListingFilters | None = None,
        active_only: bool = True,
    ) -> SearchResult:
        planned = self.planner.plan(query, filters=filters, active_only=active_only)
        try:
            with track_search_latency():
                result = await self.paginator.paginate(
                    planned, page=query.page, page_size=query.page_size
                )
        except DATA_STORE_ERRORS as e:
            logger.error(f"[SEARCH] Data store failure for {query}: {e}", exc_info=True)
            record_search("degraded")
            return SearchResult.degraded(page=query.page, page_size=query.page_size)

        record_search("ok")
        return result

    async def list_courses(
        self,
        category: str | int | None = None,
        page: str | int | None = None,
        filters: ListingFilters | None = None,
    ) -> tuple[SearchQuery, SearchResult]:
        """카테고리/가격/평점/난이도 목록 - 최신 업데이트 순"""
        query = normalize_search_params(
            page=page,
            sort_by="newest",
            category=category,
            page_size=settings.listing_page_size,
        )
        result = await self.execute(
            query, filters=filters, active_only=settings.listing_active_only
        )
        return query, result
