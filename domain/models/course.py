"""
Academy courses and platform-wide settings.
"""

from sqlalchemy import (
    Column,
    Text,
    DateTime,
    ForeignKey,
    Integer,
    Boolean,
    JSON,
    Uuid,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.models.user import enum_column
from domain.enums import CourseLevel


class Course(Base):
    """Video course built with the course wizard"""

    __tablename__ = "course"

    course_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    description = Column(Text)
    category = Column(Text)
    level = Column(
        enum_column(CourseLevel, "course_level"),
        nullable=False,
        default=CourseLevel.BEGINNER,
    )
    price_tokens = Column(Integer, nullable=False, default=0)
    video_url = Column(Text)
    cover_image_url = Column(Text)
    photo_urls = Column(JSON, nullable=False, default=list)
    is_published = Column(Boolean, nullable=False, default=False)
    author_id = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    steps = relationship(
        "CourseStep",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="CourseStep.position",
        lazy="selectin",
    )

    @property
    def total_duration_minutes(self) -> int:
        return sum(s.duration_minutes or 0 for s in self.steps)


class CourseStep(Base):
    """Lesson inside a course"""

    __tablename__ = "course_step"

    course_step_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id = Column(
        Uuid, ForeignKey("course.course_id", ondelete="CASCADE"), nullable=False
    )
    position = Column(Integer, nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=5)

    course = relationship("Course", back_populates="steps")


class PlatformSetting(Base):
    """Admin-managed key/value setting"""

    __tablename__ = "platform_setting"

    setting_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    key = Column(Text, nullable=False)
    value = Column(JSON)
    description = Column(Text)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (UniqueConstraint("key", name="uq_platform_setting_key"),)
