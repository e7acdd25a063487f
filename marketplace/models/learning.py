from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import Base


class Lecture(Base):
    """강좌 챕터"""

    __tablename__ = "lecture"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.course_id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)

    videos = relationship("Video", back_populates="lecture")

    def __repr__(self) -> str:
        return f"<Lecture(id={self.id}, course_id={self.course_id})>"


class Video(Base):
    """강의 영상"""

    __tablename__ = "video"

    id = Column(Integer, primary_key=True, index=True)
    lecture_id = Column(Integer, ForeignKey("lecture.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    video_url = Column(String(500), nullable=True)
    duration = Column(Integer, nullable=True)  # 초

    lecture = relationship("Lecture", back_populates="videos")

    def __repr__(self) -> str:
        return f"<Video(id={self.id}, lecture_id={self.lecture_id})>"


class VideoProgress(Base):
    """학생별 영상 시청 진행도"""

    __tablename__ = "video_process"

    id = Column(Integer, primary_key=True, index=True)
    video_id = Column(Integer, ForeignKey("video.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("student.id"), nullable=False, index=True)
    watched_seconds = Column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<VideoProgress(video_id={self.video_id}, student_id={self.student_id})>"
