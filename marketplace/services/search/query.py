import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from marketplace.services.search.constants import (
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    SortKey,
    SortOrder,
)


@dataclass(frozen=True)
class SearchQuery:
    """정규화된 검색 요청

    keyword 는 비어 있거나 trim + HTML 이스케이프가 끝난 값이고,
    page 는 항상 1 이상이다.
    """

    keyword: str = ""
    category: int | None = None
    sort_by: SortKey = DEFAULT_SORT_BY
    sort_order: SortOrder = DEFAULT_SORT_ORDER
    page: int = 1
    page_size: int = 6

    @property
    def sort_selection(self) -> str:
        """화면에 되돌려 줄 정렬 선택값"""
        if self.sort_by == "price":
            return f"price-{self.sort_order}"
        return self.sort_by


@dataclass(frozen=True)
class ListingFilters:
    """목록 화면용 추가 필터 (모두 AND 결합)"""

    price_min: Decimal | None = None
    price_max: Decimal | None = None
    min_rating: float | None = None
    level: str | None = None
    on_sale: bool = False

    @property
    def is_empty(self) -> bool:
        return (
            self.price_min is None
            and self.price_max is None
            and self.min_rating is None
            and self.level is None
            and not self.on_sale
        )


@dataclass(frozen=True)
class PageLink:
    value: int
    is_current: bool


def total_pages_for(total_count: int, page_size: int) -> int:
    """max(1, ceil(total_count / page_size))"""
    return max(1, math.ceil(total_count / page_size))


@dataclass(frozen=True)
class SearchResult:
    """페이지 단위 검색 결과 봉투"""

    items: list[dict[str, Any]]
    total_count: int
    current_page: int
    page_size: int
    error: bool = False
    total_pages: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "total_pages", total_pages_for(self.total_count, self.page_size))

    @property
    def pages(self) -> list[PageLink]:
        return [
            PageLink(value=number, is_current=number == self.current_page)
            for number in range(1, self.total_pages + 1)
        ]

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @classmethod
    def degraded(cls, page: int, page_size: int) -> "SearchResult":
        """데이터 저장소 장애 시 반환하는 빈 결과"""
        return cls(items=[], total_count=0, current_page=page, page_size=page_size, error=True)
