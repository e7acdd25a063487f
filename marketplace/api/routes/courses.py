import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, Form, Query

from marketplace.api.dependencies import (
    get_category_repository,
    get_course_repository,
    get_feedback_repository,
    get_search_service,
)
from marketplace.core.exception import CourseNotFoundError
from marketplace.infrastructure.database import DATA_STORE_ERRORS
from marketplace.schemas.course import (
    CategoryOption,
    CourseCard,
    CourseDetail,
    FeedbackItem,
    HomeHighlights,
)
from marketplace.schemas.search import SearchResponse
from marketplace.services.catalog import CategoryRepository, CourseRepository, FeedbackRepository
from marketplace.services.search import ListingFilters, SearchService

router = APIRouter()
logger = logging.getLogger(__name__)


async def _load_filter_categories(repo: CategoryRepository) -> list[CategoryOption]:
    """필터 옵션 조회. 실패해도 검색 화면은 렌더링되어야 한다"""
    try:
        rows = await repo.list_for_filter()
    except DATA_STORE_ERRORS as e:
        logger.error(f"[SEARCH] Failed to load filter categories: {e}", exc_info=True)
        return []
    return [CategoryOption(**row) for row in rows]


async def _run_search(
    service: SearchService,
    category_repo: CategoryRepository,
    keyword: str | None,
    page: str | None,
    sort_by: str | None,
    category: str | None,
    sort_order: str | None = None,
) -> SearchResponse:
    query, result = await service.search(
        keyword=keyword, page=page, sort_by=sort_by, category=category, sort_order=sort_order
    )
    categories = await _load_filter_categories(category_repo)
    return SearchResponse.from_result(query, result, categories)


@router.get("/search", response_model=SearchResponse)
async def search_courses(
    q: str | None = Query(None, description="Keyword (websearch syntax)"),
    page: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
    category: str | None = Query(None),
    service: SearchService = Depends(get_search_service),
    category_repo: CategoryRepository = Depends(get_category_repository),
) -> SearchResponse:
    """강좌 키워드 검색"""
    return await _run_search(service, category_repo, q, page, sort_by, category, sort_order)


@router.post("/search", response_model=SearchResponse)
async def search_courses_form(
    q: str | None = Query(None),
    search_input: str | None = Form(None, alias="searchInput"),
    page: str | None = Form(None),
    sort_by: str | None = Form(None, alias="sortBy"),
    category: str | None = Form(None),
    service: SearchService = Depends(get_search_service),
    category_repo: CategoryRepository = Depends(get_category_repository),
) -> SearchResponse:
    """검색 폼 제출"""
    keyword = q if q is not None else search_input
    return await _run_search(service, category_repo, keyword, page, sort_by, category)


@router.get("", response_model=SearchResponse)
async def list_courses(
    category: str | None = Query(None),
    page: str | None = Query(None),
    level: str | None = Query(None),
    price_min: Decimal | None = Query(None, ge=0),
    price_max: Decimal | None = Query(None, ge=0),
    rating: float | None = Query(None, ge=0, le=5),
    on_sale: bool = Query(False),
    service: SearchService = Depends(get_search_service),
    category_repo: CategoryRepository = Depends(get_category_repository),
) -> SearchResponse:
    """카테고리/가격/평점/난이도 필터 목록"""
    filters = ListingFilters(
        price_min=price_min,
        price_max=price_max,
        min_rating=rating,
        level=level or None,
        on_sale=on_sale,
    )
    query, result = await service.list_courses(category=category, page=page, filters=filters)
    categories = await _load_filter_categories(category_repo)
    return SearchResponse.from_result(query, result, categories)


@router.get("/home", response_model=HomeHighlights)
async def home_highlights(
    repo: CourseRepository = Depends(get_course_repository),
) -> HomeHighlights:
    """홈 화면 강좌 묶음"""
    return HomeHighlights.model_validate(await repo.home_highlights())


@router.get("/{course_id}", response_model=CourseDetail)
async def get_course(
    course_id: int,
    repo: CourseRepository = Depends(get_course_repository),
) -> CourseDetail:
    """강좌 상세"""
    course = await repo.get_course_detail(course_id)
    if course is None:
        raise CourseNotFoundError(course_id)
    return CourseDetail.model_validate(course)


@router.get("/{course_id}/related", response_model=list[CourseCard])
async def get_related_courses(
    course_id: int,
    limit: int = Query(5, ge=1, le=20),
    repo: CourseRepository = Depends(get_course_repository),
) -> list[CourseCard]:
    """같은 카테고리의 관련 강좌"""
    related = await repo.find_related(course_id, limit=limit)
    return [CourseCard.model_validate(course) for course in related]


@router.get("/{course_id}/feedback", response_model=list[FeedbackItem])
async def get_course_feedback(
    course_id: int,
    repo: FeedbackRepository = Depends(get_feedback_repository),
) -> list[FeedbackItem]:
    """강좌 리뷰 목록"""
    rows = await repo.list_for_course(course_id)
    return [FeedbackItem.model_validate(row) for row in rows]
