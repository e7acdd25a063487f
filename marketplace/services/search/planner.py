from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from sqlalchemy import (
    ColumnElement,
    Interval,
    Select,
    UnaryExpression,
    cast,
    func,
    literal_column,
    select,
)
from sqlalchemy.dialects.postgresql import REGCONFIG

from marketplace.core.config import settings
from marketplace.models.course import CategoryL2, Course, Instructor, public_course_columns
from marketplace.services.search.constants import NO_CATEGORY, SORT_COLUMNS, SortOrder
from marketplace.services.search.query import ListingFilters, SearchQuery


class Predicate(Protocol):
    def clause(self) -> ColumnElement[bool]: ...


@dataclass(frozen=True)
class ActiveOnly:
    def clause(self) -> ColumnElement[bool]:
        return Course.is_active.is_(True)


@dataclass(frozen=True)
class FullTextMatch:
    """악센트 제거 후 websearch 구문으로 fts 벡터와 매칭"""

    keyword: str
    config: str = "simple"

    def clause(self) -> ColumnElement[bool]:
        tsquery = func.websearch_to_tsquery(
            cast(self.config, REGCONFIG), func.remove_accent(self.keyword)
        )
        return Course.fts.op("@@")(tsquery)


@dataclass(frozen=True)
class CategoryEquals:
    category_id: int

    def clause(self) -> ColumnElement[bool]:
        return Course.category_id == self.category_id


@dataclass(frozen=True)
class PriceRange:
    minimum: Decimal | None = None
    maximum: Decimal | None = None

    def clause(self) -> ColumnElement[bool]:
        if self.minimum is not None and self.maximum is not None:
            return Course.price.between(self.minimum, self.maximum)
        if self.minimum is not None:
            return Course.price >= self.minimum
        return Course.price <= self.maximum


@dataclass(frozen=True)
class MinRating:
    threshold: float

    def clause(self) -> ColumnElement[bool]:
        return Course.rating >= self.threshold


@dataclass(frozen=True)
class LevelEquals:
    level: str

    def clause(self) -> ColumnElement[bool]:
        return Course.level == self.level


@dataclass(frozen=True)
class OnSaleOnly:
    def clause(self) -> ColumnElement[bool]:
        return Course.is_onsale.is_(True)


@dataclass(frozen=True)
class UpdatedWithinDays:
    """데이터베이스 기준 날짜(CURRENT_DATE)로부터 days 일 이내 업데이트"""

    days: int

    def clause(self) -> ColumnElement[bool]:
        interval = literal_column(f"interval '{int(self.days)} day'", Interval())
        return Course.latest_update >= func.current_date() - interval


@dataclass(frozen=True)
class ExcludeCourse:
    course_id: int

    def clause(self) -> ColumnElement[bool]:
        return Course.course_id != self.course_id


@dataclass(frozen=True)
class Ordering:
    column: str
    direction: SortOrder

    def clause(self) -> UnaryExpression:
        column = getattr(Course, self.column)
        return column.desc() if self.direction == "desc" else column.asc()


@dataclass(frozen=True)
class PlannedQuery:
    """조건 + 정렬로 이루어진 불변 쿼리 계획

    count_statement 와 page_statement 는 같은 조건에서 만들어지므로
    두 쿼리를 독립적으로 실행해도 결과가 서로 맞는다.
    """

    predicates: tuple[Predicate, ...]
    ordering: Ordering | None = None

    def clauses(self) -> list[ColumnElement[bool]]:
        return [predicate.clause() for predicate in self.predicates]

    def count_statement(self) -> Select:
        return select(func.count(Course.course_id)).select_from(Course).where(*self.clauses())

    def page_statement(self, limit: int, offset: int) -> Select:
        statement = (
            select(
                *public_course_columns(),
                Instructor.name.label("instructor_name"),
                CategoryL2.category_name.label("category_name"),
            )
            .select_from(Course)
            .outerjoin(Instructor, Course.instructor_id == Instructor.instructor_id)
            .outerjoin(CategoryL2, Course.category_id == CategoryL2.id)
            .where(*self.clauses())
        )
        if self.ordering is not None:
            statement = statement.order_by(self.ordering.clause())
        return statement.limit(limit).offset(offset)


def resolve_ordering(query: SearchQuery) -> Ordering | None:
    """정렬 키를 컬럼/방향으로 변환. relevance 는 정렬 절 없음"""
    mapping = SORT_COLUMNS.get(query.sort_by)
    if mapping is None:
        return None
    column, fixed_direction = mapping
    return Ordering(column=column, direction=fixed_direction or query.sort_order)


class QueryPlanner:
    """SearchQuery 를 PlannedQuery 로 변환 (I/O 없음)"""

    def __init__(self, fts_config: str | None = None):
        self.fts_config = fts_config or settings.fts_config

    def plan(
        self,
        query: SearchQuery,
        filters: ListingFilters | None = None,
        active_only: bool = True,
    ) -> PlannedQuery:
        predicates: list[Predicate] = []

        if active_only:
            predicates.append(ActiveOnly())

        if query.keyword:
            predicates.append(FullTextMatch(keyword=query.keyword, config=self.fts_config))

        if query.category is not None and query.category != NO_CATEGORY:
            predicates.append(CategoryEquals(category_id=query.category))

        if filters is not None and not filters.is_empty:
            predicates.extend(self._listing_predicates(filters))

        return PlannedQuery(predicates=tuple(predicates), ordering=resolve_ordering(query))

    def _listing_predicates(self, filters: ListingFilters) -> list[Predicate]:
        predicates: list[Predicate] = []
        if filters.price_min is not None or filters.price_max is not None:
            predicates.append(PriceRange(minimum=filters.price_min, maximum=filters.price_max))
        if filters.min_rating:
            predicates.append(MinRating(threshold=filters.min_rating))
        if filters.level:
            predicates.append(LevelEquals(level=filters.level))
        if filters.on_sale:
            predicates.append(OnSaleOnly())
        return predicates
