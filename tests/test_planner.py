from collections.abc import Callable
from decimal import Decimal
from typing import Any

import pytest

from marketplace.services.search.planner import (
    ActiveOnly,
    CategoryEquals,
    FullTextMatch,
    LevelEquals,
    MinRating,
    OnSaleOnly,
    Ordering,
    PriceRange,
    QueryPlanner,
    UpdatedWithinDays,
)
from marketplace.services.search.query import ListingFilters, SearchQuery

CompileSql = Callable[[Any], tuple[str, dict[str, Any]]]


@pytest.fixture
def planner() -> QueryPlanner:
    return QueryPlanner(fts_config="simple")


class TestPlan:
    def test_empty_query_only_filters_active(self, planner: QueryPlanner) -> None:
        planned = planner.plan(SearchQuery())

        assert planned.predicates == (ActiveOnly(),)
        assert planned.ordering is None

    def test_keyword_and_category(self, planner: QueryPlanner) -> None:
        planned = planner.plan(SearchQuery(keyword="python", category=5))

        assert planned.predicates == (
            ActiveOnly(),
            FullTextMatch(keyword="python", config="simple"),
            CategoryEquals(category_id=5),
        )

    def test_category_zero_is_not_a_filter(self, planner: QueryPlanner) -> None:
        planned = planner.plan(SearchQuery(category=0))
        assert planned.predicates == (ActiveOnly(),)

    def test_inactive_courses_can_be_included_for_listing(self, planner: QueryPlanner) -> None:
        planned = planner.plan(SearchQuery(category=2), active_only=False)
        assert planned.predicates == (CategoryEquals(category_id=2),)

    @pytest.mark.parametrize(
        "sort_by, sort_order, expected",
        [
            ("relevance", "asc", None),
            ("rating", "desc", Ordering("rating", "desc")),
            ("rating", "asc", Ordering("rating", "asc")),
            ("price", "asc", Ordering("current_price", "asc")),
            ("price", "desc", Ordering("current_price", "desc")),
            ("newest", "asc", Ordering("latest_update", "desc")),
            ("popular", "asc", Ordering("total_enrollment", "desc")),
        ],
    )
    def test_ordering(
        self, planner: QueryPlanner, sort_by: str, sort_order: str, expected: Ordering | None
    ) -> None:
        planned = planner.plan(SearchQuery(sort_by=sort_by, sort_order=sort_order))  # type: ignore[arg-type]
        assert planned.ordering == expected

    def test_listing_filters(self, planner: QueryPlanner) -> None:
        filters = ListingFilters(
            price_min=Decimal("10"),
            price_max=Decimal("50"),
            min_rating=4.0,
            level="Beginner",
            on_sale=True,
        )

        planned = planner.plan(SearchQuery(), filters=filters)

        assert planned.predicates == (
            ActiveOnly(),
            PriceRange(minimum=Decimal("10"), maximum=Decimal("50")),
            MinRating(threshold=4.0),
            LevelEquals(level="Beginner"),
            OnSaleOnly(),
        )

    def test_empty_listing_filters_add_nothing(self, planner: QueryPlanner) -> None:
        assert ListingFilters().is_empty
        planned = planner.plan(SearchQuery(), filters=ListingFilters())
        assert planned.predicates == (ActiveOnly(),)

    def test_same_query_plans_equal(self, planner: QueryPlanner) -> None:
        query = SearchQuery(keyword="sql", category=3, sort_by="rating", sort_order="desc")
        assert planner.plan(query) == planner.plan(query)


class TestStatements:
    def test_full_text_match_sql(self, planner: QueryPlanner, compile_sql: CompileSql) -> None:
        planned = planner.plan(SearchQuery(keyword="python"))

        sql, params = compile_sql(planned.count_statement())

        assert "courses.is_active IS true" in sql
        assert "courses.fts @@ websearch_to_tsquery(CAST(" in sql
        assert "AS REGCONFIG), remove_accent(" in sql
        assert "python" in params.values()
        assert "simple" in params.values()

    def test_count_statement(self, planner: QueryPlanner, compile_sql: CompileSql) -> None:
        planned = planner.plan(SearchQuery(category=5, sort_by="rating", sort_order="desc"))

        sql, params = compile_sql(planned.count_statement())

        assert sql.startswith("SELECT count(courses.course_id)")
        assert "courses.category_id = " in sql
        assert 5 in params.values()
        assert "ORDER BY" not in sql
        assert "LIMIT" not in sql

    def test_page_statement(self, planner: QueryPlanner, compile_sql: CompileSql) -> None:
        planned = planner.plan(SearchQuery(category=5, sort_by="rating", sort_order="desc"))

        sql, params = compile_sql(planned.page_statement(limit=6, offset=12))

        assert "instructor.name AS instructor_name" in sql
        assert '"categoryL2".category_name AS category_name' in sql
        assert "LEFT OUTER JOIN instructor" in sql
        assert "courses.fts" not in sql.split("FROM")[0]
        assert "ORDER BY courses.rating DESC" in sql
        assert "LIMIT" in sql and "OFFSET" in sql
        assert 6 in params.values()
        assert 12 in params.values()

    def test_count_and_page_share_predicates(
        self, planner: QueryPlanner, compile_sql: CompileSql
    ) -> None:
        planned = planner.plan(SearchQuery(keyword="data", category=9))

        count_sql, _ = compile_sql(planned.count_statement())
        page_sql, _ = compile_sql(planned.page_statement(limit=6, offset=0))

        count_where = count_sql.split("WHERE", 1)[1].strip()
        page_where = page_sql.split("WHERE", 1)[1].split("LIMIT", 1)[0].strip()
        assert count_where == page_where

    def test_relevance_has_no_order_by(
        self, planner: QueryPlanner, compile_sql: CompileSql
    ) -> None:
        planned = planner.plan(SearchQuery(keyword="rust"))
        sql, _ = compile_sql(planned.page_statement(limit=6, offset=0))
        assert "ORDER BY" not in sql

    def test_price_orders_by_current_price(
        self, planner: QueryPlanner, compile_sql: CompileSql
    ) -> None:
        planned = planner.plan(SearchQuery(sort_by="price", sort_order="desc"))
        sql, _ = compile_sql(planned.page_statement(limit=6, offset=0))
        assert "ORDER BY courses.current_price DESC" in sql

    def test_price_range_bounds(self, compile_sql: CompileSql) -> None:
        sql, _ = compile_sql(PriceRange(minimum=Decimal("5")).clause())
        assert sql.startswith("courses.price >= ")

        sql, _ = compile_sql(PriceRange(maximum=Decimal("5")).clause())
        assert sql.startswith("courses.price <= ")

        sql, _ = compile_sql(PriceRange(minimum=Decimal("5"), maximum=Decimal("9")).clause())
        assert "BETWEEN" in sql

    def test_recent_update_uses_database_date(self, compile_sql: CompileSql) -> None:
        sql, params = compile_sql(UpdatedWithinDays(7).clause())

        assert sql == "courses.latest_update >= CURRENT_DATE - interval '7 day'"
        assert params == {}
