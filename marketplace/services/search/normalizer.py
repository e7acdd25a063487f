import html
import logging

from marketplace.core.config import settings
from marketplace.core.exception import SearchValidationError
from marketplace.services.search.constants import (
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    ESCAPE_QUOTES,
    NO_CATEGORY,
    ORDER_OVERRIDABLE,
    SORT_SELECTIONS,
    SortKey,
    SortOrder,
)
from marketplace.services.search.query import SearchQuery

logger = logging.getLogger(__name__)


def normalize_keyword(raw: str | None, max_length: int | None = None) -> str:
    """검색어 trim, 길이 검증, HTML 이스케이프

    Raises:
        SearchValidationError: trim 후 길이가 max_length 를 넘는 경우
    """
    limit = max_length if max_length is not None else settings.search_max_keyword_length
    keyword = (raw or "").strip()
    if len(keyword) > limit:
        raise SearchValidationError(length=len(keyword), max_length=limit)
    return html.escape(keyword, quote=ESCAPE_QUOTES)


def parse_page(raw: str | int | None) -> int:
    """양의 정수가 아니면 1"""
    if raw is None:
        return 1
    try:
        page = int(str(raw).strip())
    except ValueError:
        return 1
    return page if page >= 1 else 1


def parse_category(raw: str | int | None) -> int | None:
    """카테고리 id 파싱. 0, 빈 값, 숫자가 아닌 값은 필터 없음"""
    if raw is None:
        return None
    try:
        category = int(str(raw).strip())
    except ValueError:
        logger.debug(f"Ignoring non-numeric category filter: {raw!r}")
        return None
    return None if category == NO_CATEGORY else category


def resolve_sort(
    raw_sort_by: str | None, raw_sort_order: str | None = None
) -> tuple[SortKey, SortOrder]:
    """요청 sortBy 를 (정렬 키, 방향) 으로 변환. 알 수 없는 값은 relevance/asc"""
    selection = SORT_SELECTIONS.get((raw_sort_by or "").strip().lower())
    if selection is None:
        return DEFAULT_SORT_BY, DEFAULT_SORT_ORDER

    sort_by, sort_order = selection
    requested = (raw_sort_order or "").strip().lower()
    if sort_by in ORDER_OVERRIDABLE and requested in ("asc", "desc"):
        sort_order = requested  # type: ignore[assignment]
    return sort_by, sort_order


def normalize_search_params(
    keyword: str | None = None,
    page: str | int | None = None,
    sort_by: str | None = None,
    category: str | int | None = None,
    sort_order: str | None = None,
    page_size: int | None = None,
) -> SearchQuery:
    """원시 요청 파라미터를 SearchQuery 로 정규화

    검색어 길이 초과만 오류이고 나머지 잘못된 값은 기본값으로 대체된다.
    """
    normalized_keyword = normalize_keyword(keyword)
    resolved_sort_by, resolved_sort_order = resolve_sort(sort_by, sort_order)

    return SearchQuery(
        keyword=normalized_keyword,
        category=parse_category(category),
        sort_by=resolved_sort_by,
        sort_order=resolved_sort_order,
        page=parse_page(page),
        page_size=page_size or settings.search_page_size,
    )
