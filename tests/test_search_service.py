from collections.abc import Callable
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from marketplace.core.exception import SearchValidationError
from marketplace.services.search import ListingFilters, SearchResult, SearchService
from marketplace.services.search.planner import (
    ActiveOnly,
    CategoryEquals,
    FullTextMatch,
    OnSaleOnly,
    Ordering,
    PriceRange,
)


def _result(items: list[dict[str, Any]], total: int, page: int = 1, size: int = 6) -> SearchResult:
    return SearchResult(items=items, total_count=total, current_page=page, page_size=size)


class TestSearch:
    async def test_search_runs_planned_query(
        self,
        search_service: SearchService,
        mock_paginator: AsyncMock,
        course_row: Callable[..., dict[str, Any]],
    ) -> None:
        mock_paginator.paginate.return_value = _result([course_row(1)], total=1)

        query, result = await search_service.search(
            keyword=" python ", page="1", sort_by="rating", category="3"
        )

        assert query.keyword == "python"
        assert result.total_count == 1

        planned = mock_paginator.paginate.call_args.args[0]
        assert planned.predicates == (
            ActiveOnly(),
            FullTextMatch(keyword="python", config="simple"),
            CategoryEquals(category_id=3),
        )
        assert planned.ordering == Ordering("rating", "desc")
        assert mock_paginator.paginate.call_args.kwargs == {"page": 1, "page_size": 6}

    async def test_too_long_keyword_never_reaches_store(
        self, search_service: SearchService, mock_paginator: AsyncMock
    ) -> None:
        with pytest.raises(SearchValidationError):
            await search_service.search(keyword="x" * 101)

        mock_paginator.paginate.assert_not_called()

    async def test_store_failure_returns_degraded_result(
        self, search_service: SearchService, mock_paginator: AsyncMock
    ) -> None:
        mock_paginator.paginate.side_effect = OperationalError(
            "SELECT", {}, Exception("connection refused")
        )

        query, result = await search_service.search(keyword="python", page="2")

        assert result.error
        assert result.items == []
        assert result.total_count == 0
        assert result.total_pages == 1
        assert result.current_page == 2
        assert query.keyword == "python"

    async def test_refused_connection_returns_degraded_result(
        self, search_service: SearchService, mock_paginator: AsyncMock
    ) -> None:
        mock_paginator.paginate.side_effect = ConnectionRefusedError(
            111, "Connect call failed"
        )

        _, result = await search_service.search(keyword="python")

        assert result.error
        assert result.items == []
        assert result.total_pages == 1

    async def test_same_request_plans_same_query(
        self, search_service: SearchService, mock_paginator: AsyncMock
    ) -> None:
        mock_paginator.paginate.return_value = _result([], total=0)

        await search_service.search(keyword="sql", page="2", sort_by="price-desc")
        await search_service.search(keyword="sql", page="2", sort_by="price-desc")

        first, second = mock_paginator.paginate.call_args_list
        assert first == second

    async def test_empty_keyword_lists_active_courses(
        self, search_service: SearchService, mock_paginator: AsyncMock
    ) -> None:
        mock_paginator.paginate.return_value = _result([], total=0)

        await search_service.search()

        planned = mock_paginator.paginate.call_args.args[0]
        assert planned.predicates == (ActiveOnly(),)
        assert planned.ordering is None


class TestListCourses:
    async def test_listing_uses_newest_order_and_listing_page_size(
        self, search_service: SearchService, mock_paginator: AsyncMock
    ) -> None:
        mock_paginator.paginate.return_value = _result([], total=0, size=9)
        filters = ListingFilters(price_max=Decimal("20"), on_sale=True)

        query, _ = await search_service.list_courses(category="4", page="2", filters=filters)

        assert query.sort_by == "newest"
        assert query.page_size == 9
        planned = mock_paginator.paginate.call_args.args[0]
        assert planned.predicates == (
            ActiveOnly(),
            CategoryEquals(category_id=4),
            PriceRange(maximum=Decimal("20")),
            OnSaleOnly(),
        )
        assert planned.ordering == Ordering("latest_update", "desc")
        assert mock_paginator.paginate.call_args.kwargs == {"page": 2, "page_size": 9}

    async def test_listing_store_failure_is_degraded(
        self, search_service: SearchService, mock_paginator: AsyncMock
    ) -> None:
        mock_paginator.paginate.side_effect = OperationalError("SELECT", {}, Exception("down"))

        _, result = await search_service.list_courses(category="4")

        assert result.error
        assert result.items == []
