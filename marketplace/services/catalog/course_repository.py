import json
import logging
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.exception import CourseDeletionError
from marketplace.models.course import CategoryL2, Course, Instructor, public_course_columns
from marketplace.models.engagement import Enrollment, Feedback, WatchlistCourse
from marketplace.models.learning import Lecture, Video, VideoProgress
from marketplace.services.monitoring.prometheus import course_deletion_counter
from marketplace.services.search.planner import (
    ActiveOnly,
    CategoryEquals,
    ExcludeCourse,
    Ordering,
    PlannedQuery,
    UpdatedWithinDays,
)

logger = logging.getLogger(__name__)

OTHER_COURSES_LIMIT = 4
HIGHLIGHT_WEEK_LIMIT = 4
HIGHLIGHT_WEEK_DAYS = 7
HIGHLIGHT_LIST_LIMIT = 10


def parse_instructor_bio(raw_bio: str | None) -> tuple[str, str]:
    """
    instructor.bio 파싱

    bio 는 {"bio_text" | "original_bio", "expertise"} 형태의 JSON 이거나 평문이다.

    Returns:
        (bio, expertise)
    """
    if not raw_bio:
        return "", ""
    try:
        parsed = json.loads(raw_bio)
    except json.JSONDecodeError:
        return raw_bio, ""

    if not isinstance(parsed, dict):
        return raw_bio, ""
    bio = parsed.get("bio_text") or parsed.get("original_bio") or ""
    return bio, parsed.get("expertise") or ""


class CourseRepository:
    """강좌 관련 데이터 접근 객체"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fetch_cards(self, planned: PlannedQuery, limit: int) -> list[dict[str, Any]]:
        result = await self.db.execute(planned.page_statement(limit=limit, offset=0))
        return [dict(row) for row in result.mappings().all()]

    async def get_course_detail(self, course_id: int) -> dict[str, Any] | None:
        """강좌 상세 (강사 정보, 강사의 다른 강좌, 영상 목록 포함)"""
        result = await self.db.execute(
            select(
                *public_course_columns(),
                Instructor.name.label("instructor_name"),
                Instructor.bio.label("instructor_bio_raw"),
                Instructor.total_students.label("instructor_student_count"),
                CategoryL2.category_name.label("category_name"),
            )
            .join(Instructor, Course.instructor_id == Instructor.instructor_id)
            .join(CategoryL2, Course.category_id == CategoryL2.id)
            .where(Course.course_id == course_id)
        )
        row = result.mappings().first()
        if row is None:
            return None

        course = dict(row)
        bio, expertise = parse_instructor_bio(course.pop("instructor_bio_raw"))
        course["instructor_bio"] = bio
        course["instructor_expertise"] = expertise

        instructor_id = course["instructor_id"]
        stats = await self.db.execute(
            select(func.count(Course.course_id), func.avg(Course.rating)).where(
                Course.instructor_id == instructor_id
            )
        )
        course_count, average_rating = stats.one()
        course["instructor_course_count"] = int(course_count or 0)
        course["instructor_rating"] = round(float(average_rating or 0), 1)

        others = await self.db.execute(
            select(
                Course.course_id,
                Course.title,
                Course.image_url,
                Course.rating,
                Course.total_enrollment,
            )
            .where(
                Course.instructor_id == instructor_id,
                Course.course_id != course_id,
                Course.is_active.is_(True),
            )
            .order_by(Course.total_enrollment.desc())
            .limit(OTHER_COURSES_LIMIT)
        )
        course["other_courses"] = [dict(other) for other in others.mappings().all()]

        videos = await self.db.execute(
            select(Video.id, Video.title, Video.video_url, Video.duration, Video.lecture_id)
            .join(Lecture, Video.lecture_id == Lecture.id)
            .where(Lecture.course_id == course_id)
            .order_by(Video.id.asc())
        )
        course["videos"] = [dict(video) for video in videos.mappings().all()]
        return course

    async def find_related(self, course_id: int, limit: int = 5) -> list[dict[str, Any]]:
        """같은 카테고리의 다른 강좌 (수강생 수 순)"""
        category_id = await self.db.scalar(
            select(Course.category_id).where(Course.course_id == course_id)
        )
        if not category_id:
            return []

        planned = PlannedQuery(
            predicates=(ActiveOnly(), CategoryEquals(category_id), ExcludeCourse(course_id)),
            ordering=Ordering("total_enrollment", "desc"),
        )
        return await self._fetch_cards(planned, limit)

    async def home_highlights(self) -> dict[str, list[dict[str, Any]]]:
        """홈 화면 강좌 묶음"""
        top_rated_week = PlannedQuery(
            predicates=(ActiveOnly(), UpdatedWithinDays(HIGHLIGHT_WEEK_DAYS)),
            ordering=Ordering("rating", "desc"),
        )
        most_reviewed = PlannedQuery(
            predicates=(ActiveOnly(),), ordering=Ordering("total_reviews", "desc")
        )
        latest = PlannedQuery(
            predicates=(ActiveOnly(),), ordering=Ordering("latest_update", "desc")
        )

        return {
            "top_rated_week": await self._fetch_cards(top_rated_week, HIGHLIGHT_WEEK_LIMIT),
            "most_reviewed": await self._fetch_cards(most_reviewed, HIGHLIGHT_LIST_LIMIT),
            "latest": await self._fetch_cards(latest, HIGHLIGHT_LIST_LIMIT),
        }

    async def list_admin(
        self, category_id: int | None = None, instructor_id: int | None = None
    ) -> list[dict[str, Any]]:
        """관리자 강좌 목록"""
        query = (
            select(
                Course.course_id.label("id"),
                Course.title,
                Course.is_complete,
                Course.is_active,
                Course.current_price.label("price"),
                Instructor.name.label("lecturer_name"),
                CategoryL2.category_name,
            )
            .join(Instructor, Course.instructor_id == Instructor.instructor_id)
            .join(CategoryL2, Course.category_id == CategoryL2.id)
            .order_by(Course.course_id.asc())
        )
        if category_id:
            query = query.where(Course.category_id == category_id)
        if instructor_id:
            query = query.where(Course.instructor_id == instructor_id)

        result = await self.db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def set_active(self, course_id: int, is_active: bool) -> bool:
        """강좌 잠금/해제. 대상이 없으면 False"""
        result = await self.db.execute(
            update(Course).where(Course.course_id == course_id).values(is_active=is_active)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def delete_course(self, course_id: int) -> bool:
        """
        강좌와 종속 데이터를 하나의 트랜잭션으로 삭제

        외래 키 순서: feedback -> enrollment -> watchlist -> video_process
        -> video -> lecture -> courses. 실패하면 전부 롤백된다.

        Returns:
            강좌 행이 삭제되었으면 True
        """
        try:
            async with self.db.begin():
                await self.db.execute(delete(Feedback).where(Feedback.course == course_id))
                await self.db.execute(delete(Enrollment).where(Enrollment.course_id == course_id))
                await self.db.execute(
                    delete(WatchlistCourse).where(WatchlistCourse.course_id == course_id)
                )

                lecture_ids = list(
                    (
                        await self.db.scalars(
                            select(Lecture.id).where(Lecture.course_id == course_id)
                        )
                    ).all()
                )
                if lecture_ids:
                    video_ids = list(
                        (
                            await self.db.scalars(
                                select(Video.id).where(Video.lecture_id.in_(lecture_ids))
                            )
                        ).all()
                    )
                    if video_ids:
                        await self.db.execute(
                            delete(VideoProgress).where(VideoProgress.video_id.in_(video_ids))
                        )
                        await self.db.execute(delete(Video).where(Video.id.in_(video_ids)))
                    await self.db.execute(delete(Lecture).where(Lecture.id.in_(lecture_ids)))

                result = await self.db.execute(delete(Course).where(Course.course_id == course_id))
                deleted = result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error(f"[ADMIN] Course deletion rolled back for {course_id}: {e}", exc_info=True)
            course_deletion_counter.labels(status="failed").inc()
            raise CourseDeletionError(course_id, str(e)) from e

        course_deletion_counter.labels(status="deleted" if deleted else "missing").inc()
        logger.info(f"[ADMIN] Course {course_id} deletion finished: deleted={deleted}")
        return deleted
