from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from marketplace.models.course import resolve_image_url


class CategoryOption(BaseModel):
    """검색 필터용 카테고리"""

    id: int
    name: str


class CategoryTopic(CategoryOption):
    course_count: int = 0


class CategoryGroup(BaseModel):
    """L1 카테고리와 하위 L2 목록"""

    id: int
    name: str
    topics: list[CategoryTopic] = []


class CourseCard(BaseModel):
    """목록/검색 결과용 강좌 요약"""

    course_id: int
    title: str
    short_description: str | None = None
    image_url: str | None = None
    category_id: int | None = None
    category_name: str | None = None
    instructor_id: int | None = None
    instructor_name: str | None = None
    price: Decimal = Decimal("0")
    current_price: Decimal | None = None
    is_onsale: bool = False
    rating: float = Field(0.0, ge=0.0, le=5.0)
    total_enrollment: int = 0
    total_reviews: int = 0
    level: str | None = None
    latest_update: datetime | None = None

    @field_validator("image_url", mode="before")
    @classmethod
    def default_image(cls, v: str | None) -> str:
        return resolve_image_url(v)


class OtherCourse(BaseModel):
    course_id: int
    title: str
    image_url: str | None = None
    rating: float = 0.0
    total_enrollment: int = 0

    @field_validator("image_url", mode="before")
    @classmethod
    def default_image(cls, v: str | None) -> str:
        return resolve_image_url(v)


class CourseVideo(BaseModel):
    id: int
    lecture_id: int
    title: str
    video_url: str | None = None
    duration: int | None = None


class CourseDetail(CourseCard):
    """강좌 상세 응답 스키마"""

    full_description: str | None = None
    is_complete: bool = False
    instructor_bio: str = ""
    instructor_expertise: str = ""
    instructor_student_count: int | None = None
    instructor_course_count: int = 0
    instructor_rating: float = 0.0
    other_courses: list[OtherCourse] = []
    videos: list[CourseVideo] = []


class FeedbackItem(BaseModel):
    id: int
    rating: int = Field(..., ge=1, le=5)
    feedback: str | None = None
    created_at: datetime
    student_id: int | None = None
    student_name: str | None = None


class HomeHighlights(BaseModel):
    """홈 화면 강좌 묶음"""

    top_rated_week: list[CourseCard]
    most_reviewed: list[CourseCard]
    latest: list[CourseCard]


class AdminCourse(BaseModel):
    """관리자 강좌 목록 항목"""

    id: int
    title: str
    is_complete: bool
    is_active: bool
    price: Decimal | None = None
    lecturer_name: str
    category_name: str


class CourseStatusResponse(BaseModel):
    course_id: int
    is_active: bool
