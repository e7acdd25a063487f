from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.engagement import Feedback, Student


class FeedbackRepository:
    """강좌 리뷰 데이터 접근 객체"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_course(self, course_id: int) -> list[dict[str, Any]]:
        """강좌 리뷰 목록 (최신순)"""
        student_name = func.coalesce(Student.name, func.concat("Student ", Student.id))
        result = await self.db.execute(
            select(
                Feedback.id,
                Feedback.rating,
                Feedback.feedback,
                Feedback.created_at,
                Student.id.label("student_id"),
                student_name.label("student_name"),
            )
            .outerjoin(Student, Feedback.student == Student.id)
            .where(Feedback.course == course_id)
            .order_by(Feedback.created_at.desc())
        )
        return [dict(row) for row in result.mappings().all()]
