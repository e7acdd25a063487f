from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.sql import func

from .base import Base


class Student(Base):
    """수강생 모델"""

    __tablename__ = "student"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Student(id={self.id})>"


class Enrollment(Base):
    """수강 등록"""

    __tablename__ = "enrollment"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("student.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.course_id"), nullable=False, index=True)
    enrolled_at = Column(DateTime, default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="unique_student_course_enrollment"),
    )

    def __repr__(self) -> str:
        return f"<Enrollment(student_id={self.student_id}, course_id={self.course_id})>"


class Feedback(Base):
    """강좌 리뷰"""

    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, index=True)
    course = Column(Integer, ForeignKey("courses.course_id"), nullable=False, index=True)
    student = Column(Integer, ForeignKey("student.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    feedback = Column(Text, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<Feedback(id={self.id}, course={self.course}, rating={self.rating})>"


class WatchlistCourse(Base):
    """관심 강좌"""

    __tablename__ = "watchlist_course"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("student.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.course_id"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="unique_student_course_watchlist"),
    )

    def __repr__(self) -> str:
        return f"<WatchlistCourse(student_id={self.student_id}, course_id={self.course_id})>"
