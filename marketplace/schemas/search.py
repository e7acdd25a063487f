from pydantic import BaseModel

from marketplace.schemas.course import CategoryOption, CourseCard
from marketplace.services.search.query import SearchQuery, SearchResult


class PageLinkSchema(BaseModel):
    value: int
    is_current: bool


class Pagination(BaseModel):
    """페이지 이동 정보 (전체 페이지가 2 이상일 때만 제공)"""

    current_page: int
    total_pages: int
    has_prev: bool
    has_next: bool
    pages: list[PageLinkSchema]


class SearchResponse(BaseModel):
    """검색 결과 응답 스키마"""

    q: str
    amount: int
    total_pages: int
    current_page: int
    courses: list[CourseCard]
    categories: list[CategoryOption] = []
    pagination: Pagination | None = None
    current_sort: str
    current_category: int | None = None
    error_message: str | None = None

    @classmethod
    def from_result(
        cls,
        query: SearchQuery,
        result: SearchResult,
        categories: list[CategoryOption] | None = None,
    ) -> "SearchResponse":
        pagination = None
        if result.total_pages > 1:
            pagination = Pagination(
                current_page=result.current_page,
                total_pages=result.total_pages,
                has_prev=result.has_prev,
                has_next=result.has_next,
                pages=[
                    PageLinkSchema(value=link.value, is_current=link.is_current)
                    for link in result.pages
                ],
            )

        return cls(
            q=query.keyword,
            amount=result.total_count,
            total_pages=result.total_pages,
            current_page=result.current_page,
            courses=[CourseCard.model_validate(item) for item in result.items],
            categories=categories or [],
            pagination=pagination,
            current_sort=query.sort_selection,
            current_category=query.category,
            error_message="An error occurred while searching" if result.error else None,
        )
