from marketplace.core.config import settings
from marketplace.core.exception import (
    CourseDeletionError,
    CourseNotFoundError,
    MarketplaceError,
    SearchValidationError,
)

from .security import security

__all__ = [
    "settings",
    "MarketplaceError",
    "SearchValidationError",
    "CourseNotFoundError",
    "CourseDeletionError",
    "security",
]
