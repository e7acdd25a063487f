import logging
from typing import Any

from fastapi import status

logger = logging.getLogger(__name__)


class MarketplaceError(Exception):
    """마켓플레이스 기본 예외 클래스"""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        logger.error(f"{self.__class__.__name__}: {message}")
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 형태로 변환"""
        return {
            "error": self.error_code or "InternalServerError",
            "message": self.message,
            "details": self.details,
        }


class SearchValidationError(MarketplaceError):
    """검색어 길이 초과"""

    def __init__(self, length: int, max_length: int):
        super().__init__(
            message=f"Search query too long: {length} characters (max {max_length})",
            error_code="SEARCH_QUERY_TOO_LONG",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"length": length, "max_length": max_length},
        )


class CourseNotFoundError(MarketplaceError):
    """강좌를 찾을 수 없을 때 발생하는 예외"""

    def __init__(self, course_id: int):
        super().__init__(
            message=f"Course {course_id} not found",
            error_code="COURSE_NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"course_id": course_id},
        )


class CourseDeletionError(MarketplaceError):
    """강좌 삭제 트랜잭션 실패"""

    def __init__(self, course_id: int, message: str):
        super().__init__(
            message=f"Failed to delete course {course_id}: {message}",
            error_code="COURSE_DELETION_FAILED",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"course_id": course_id},
        )

