from marketplace.services.catalog.category_repository import CategoryRepository
from marketplace.services.catalog.course_repository import CourseRepository
from marketplace.services.catalog.feedback_repository import FeedbackRepository

__all__ = [
    "CourseRepository",
    "CategoryRepository",
    "FeedbackRepository",
]
