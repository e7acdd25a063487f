from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import TSVECTOR
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base

DEFAULT_COURSE_IMAGE = "/static/default/default-course.jpg"
LEGACY_DEFAULT_IMAGES = frozenset(
    {
        "",
        "/upload/images/default-course.jpg",
        "/src/public/upload/images/default-course.jpg",
    }
)


class CategoryL1(Base):
    """상위 카테고리 (도메인)"""

    __tablename__ = "categoryL1"

    id = Column(Integer, primary_key=True, index=True)
    category_name = Column(String(100), nullable=False)

    topics = relationship("CategoryL2", back_populates="parent")

    def __repr__(self) -> str:
        return f"<CategoryL1(id={self.id}, name='{self.category_name}')>"


class CategoryL2(Base):
    """하위 카테고리 (주제) - 강좌는 L2 만 참조"""

    __tablename__ = "categoryL2"

    id = Column(Integer, primary_key=True, index=True)
    category_name = Column(String(100), nullable=False)
    categoryL1_id = Column(Integer, ForeignKey("categoryL1.id"), nullable=False)

    parent = relationship("CategoryL1", back_populates="topics")
    courses = relationship("Course", back_populates="category")

    def __repr__(self) -> str:
        return f"<CategoryL2(id={self.id}, name='{self.category_name}')>"


class Instructor(Base):
    """강사 모델"""

    __tablename__ = "instructor"

    instructor_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)  # JSON 또는 평문
    total_students = Column(Integer, default=0)

    courses = relationship("Course", back_populates="instructor")

    def __repr__(self) -> str:
        return f"<Instructor(id={self.instructor_id}, name='{self.name}')>"


class Course(Base):
    """강좌 모델"""

    __tablename__ = "courses"

    course_id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    short_description = Column(Text, nullable=True)
    full_description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    category_id = Column(Integer, ForeignKey("categoryL2.id"), nullable=True, index=True)
    instructor_id = Column(Integer, ForeignKey("instructor.instructor_id"), nullable=False)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    current_price = Column(Numeric(12, 2), nullable=True)
    is_onsale = Column(Boolean, default=False, nullable=False)
    rating = Column(Float, default=0.0, nullable=False)
    total_enrollment = Column(Integer, default=0, nullable=False)
    total_reviews = Column(Integer, default=0, nullable=False)
    level = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_complete = Column(Boolean, default=False, nullable=False)
    latest_update = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)
    # 인덱싱 시점에 악센트 제거된 title/description
    fts = Column(TSVECTOR, nullable=True)

    category = relationship("CategoryL2", back_populates="courses")
    instructor = relationship("Instructor", back_populates="courses")

    __table_args__ = (Index("ix_courses_fts", "fts", postgresql_using="gin"),)

    def __repr__(self) -> str:
        return f"<Course(id={self.course_id}, title='{self.title[:50]}...')>"


def resolve_image_url(image_url: str | None) -> str:
    """비어 있거나 레거시 기본 이미지 경로면 정적 기본 이미지로 대체"""
    if image_url is None or image_url in LEGACY_DEFAULT_IMAGES:
        return DEFAULT_COURSE_IMAGE
    return image_url


def public_course_columns() -> list:
    """화면 노출용 courses 컬럼 (tsvector 제외)"""
    return [column for column in Course.__table__.c if column.name != "fts"]
