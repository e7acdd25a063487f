from marketplace.services.search.normalizer import normalize_search_params
from marketplace.services.search.paginator import Paginator
from marketplace.services.search.planner import PlannedQuery, QueryPlanner
from marketplace.services.search.query import ListingFilters, PageLink, SearchQuery, SearchResult
from marketplace.services.search.service import SearchService

__all__ = [
    "SearchService",
    "QueryPlanner",
    "PlannedQuery",
    "Paginator",
    "SearchQuery",
    "SearchResult",
    "ListingFilters",
    "PageLink",
    "normalize_search_params",
]
