from typing import Final, Literal

"""강좌 검색 파이프라인 상수 정의 모듈"""

SortKey = Literal["relevance", "rating", "price", "newest", "popular"]
SortOrder = Literal["asc", "desc"]

DEFAULT_SORT_BY: Final[SortKey] = "relevance"
DEFAULT_SORT_ORDER: Final[SortOrder] = "asc"

# 요청 sortBy 값 -> (정규화된 정렬 키, 기본 방향)
SORT_SELECTIONS: Final[dict[str, tuple[SortKey, SortOrder]]] = {
    "relevance": ("relevance", "asc"),
    "rating": ("rating", "desc"),
    "price": ("price", "asc"),
    "price-asc": ("price", "asc"),
    "price-desc": ("price", "desc"),
    "newest": ("newest", "desc"),
    "popular": ("popular", "desc"),
}

# 요청된 sortOrder 를 따르는 정렬 키
ORDER_OVERRIDABLE: Final[frozenset[str]] = frozenset({"rating"})

# 정렬 키 -> (courses 컬럼, 고정 방향 또는 None)
SORT_COLUMNS: Final[dict[str, tuple[str, SortOrder | None]]] = {
    "rating": ("rating", None),
    "price": ("current_price", None),
    "newest": ("latest_update", "desc"),
    "popular": ("total_enrollment", "desc"),
}

# 0 은 "카테고리 필터 없음"
NO_CATEGORY: Final[int] = 0

# 따옴표는 이스케이프하지 않음 (websearch 구문 검색용)
ESCAPE_QUOTES: Final[bool] = False
