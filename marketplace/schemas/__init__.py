from marketplace.schemas.course import (
    AdminCourse,
    CategoryGroup,
    CategoryOption,
    CourseCard,
    CourseDetail,
    CourseStatusResponse,
    FeedbackItem,
    HomeHighlights,
)
from marketplace.schemas.search import Pagination, SearchResponse

__all__ = [
    "AdminCourse",
    "CategoryGroup",
    "CategoryOption",
    "CourseCard",
    "CourseDetail",
    "CourseStatusResponse",
    "FeedbackItem",
    "HomeHighlights",
    "Pagination",
    "SearchResponse",
]
