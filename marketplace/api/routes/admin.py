import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from marketplace.api.dependencies import get_course_repository, get_current_admin
from marketplace.core.exception import CourseNotFoundError
from marketplace.schemas.course import AdminCourse, CourseStatusResponse
from marketplace.services.catalog import CourseRepository

router = APIRouter(dependencies=[Depends(get_current_admin)])
logger = logging.getLogger(__name__)


@router.get("/courses", response_model=list[AdminCourse])
async def list_courses(
    category_id: int | None = Query(None),
    instructor_id: int | None = Query(None),
    repo: CourseRepository = Depends(get_course_repository),
) -> list[AdminCourse]:
    """관리자 강좌 목록"""
    rows = await repo.list_admin(category_id=category_id, instructor_id=instructor_id)
    return [AdminCourse.model_validate(row) for row in rows]


async def _set_active(
    repo: CourseRepository, course_id: int, is_active: bool
) -> CourseStatusResponse:
    if not await repo.set_active(course_id, is_active):
        raise CourseNotFoundError(course_id)
    logger.info(f"[ADMIN] Course {course_id} is_active={is_active}")
    return CourseStatusResponse(course_id=course_id, is_active=is_active)


@router.post("/courses/{course_id}/lock", response_model=CourseStatusResponse)
async def lock_course(
    course_id: int,
    repo: CourseRepository = Depends(get_course_repository),
) -> CourseStatusResponse:
    """강좌 잠금 - 공개 검색에서 제외"""
    return await _set_active(repo, course_id, is_active=False)


@router.post("/courses/{course_id}/unlock", response_model=CourseStatusResponse)
async def unlock_course(
    course_id: int,
    repo: CourseRepository = Depends(get_course_repository),
) -> CourseStatusResponse:
    """강좌 잠금 해제"""
    return await _set_active(repo, course_id, is_active=True)


@router.delete("/courses/{course_id}")
async def delete_course(
    course_id: int,
    repo: CourseRepository = Depends(get_course_repository),
) -> dict[str, Any]:
    """강좌와 종속 데이터 삭제"""
    if not await repo.delete_course(course_id):
        raise CourseNotFoundError(course_id)
    return {"status": "success", "message": f"Course {course_id} deleted"}
