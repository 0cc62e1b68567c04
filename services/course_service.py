"""Academy courses and admin-managed platform settings."""

from typing import List
from sqlalchemy.orm import Session
import logging
import uuid

from domain.models import Course, CourseStep, PlatformSetting
from domain.schemas.course_schemas import (
    CourseCreate,
    CourseStepIn,
    CourseUpdate,
    PlatformSettingUpsert,
)
from repositories import CourseRepository, PlatformSettingRepository
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("chefos.courses")


def build_course_steps(steps: List[CourseStepIn]) -> List[CourseStep]:
    return [
        CourseStep(
            position=idx,
            title=step.title.strip(),
            description=step.description.strip(),
            duration_minutes=step.duration_minutes,
        )
        for idx, step in enumerate(steps, start=1)
    ]


class CourseService:
    @staticmethod
    def list_courses(db: Session, published_only: bool = False) -> List[Course]:
        return CourseRepository(db).list_courses(published_only=published_only)

    @staticmethod
    def get_course(db: Session, course_id: uuid.UUID) -> Course:
        course = CourseRepository(db).get_by_id(course_id)
        if not course:
            raise NotFoundError(f"Course not found: {course_id}")
        return course

    @staticmethod
    def create_course(db: Session, author_id: uuid.UUID, payload: CourseCreate) -> Course:
        """New courses start as drafts."""
        course = Course(
            title=payload.title.strip(),
            description=payload.description,
            category=payload.category,
            level=payload.level,
            price_tokens=payload.price_tokens,
            video_url=payload.video_url,
            cover_image_url=payload.cover_image_url,
            photo_urls=list(payload.photo_urls),
            is_published=False,
            author_id=author_id,
            steps=build_course_steps(payload.steps),
        )
        course = CourseRepository(db).create(course)
        logger.info(
            f"Course '{course.title}' created with {len(course.steps)} steps "
            f"({course.total_duration_minutes} min)"
        )
        return course

    @staticmethod
    def update_course(db: Session, course_id: uuid.UUID, payload: CourseUpdate) -> Course:
        course = CourseService.get_course(db, course_id)
        changes = payload.model_dump(exclude_unset=True, exclude={"steps"})
        for field, value in changes.items():
            setattr(course, field, value)
        if payload.steps is not None:
            if course.is_published and not payload.steps:
                raise ServiceValidationError("A published course must keep at least one step")
            course.steps = build_course_steps(payload.steps)
        db.commit()
        db.refresh(course)
        logger.info(f"Course {course_id} updated: {sorted(changes)}")
        return course

    @staticmethod
    def delete_course(db: Session, course_id: uuid.UUID) -> bool:
        return CourseRepository(db).delete(course_id)

    @staticmethod
    def set_published(db: Session, course_id: uuid.UUID, is_published: bool) -> Course:
        course = CourseService.get_course(db, course_id)
        if is_published and not course.steps:
            raise ServiceValidationError(
                "Cannot publish a course without steps", code="COURSE_HAS_NO_STEPS"
            )
        course.is_published = is_published
        db.commit()
        db.refresh(course)
        logger.info(f"Course {course_id} published={is_published}")
        return course


class PlatformSettingService:
    @staticmethod
    def list_settings(db: Session) -> List[PlatformSetting]:
        return PlatformSettingRepository(db).list_all()

    @staticmethod
    def get_setting(db: Session, key: str) -> PlatformSetting:
        setting = PlatformSettingRepository(db).get_by_key(key)
        if not setting:
            raise NotFoundError(f"Setting not found: {key}")
        return setting

    @staticmethod
    def upsert_setting(db: Session, key: str, payload: PlatformSettingUpsert) -> PlatformSetting:
        setting_repo = PlatformSettingRepository(db)
        setting = setting_repo.get_by_key(key)
        if setting:
            setting.value = payload.value
            if payload.description is not None:
                setting.description = payload.description
        else:
            setting = PlatformSetting(
                key=key, value=payload.value, description=payload.description
            )
            db.add(setting)
        db.commit()
        db.refresh(setting)
        logger.info(f"Platform setting '{key}' saved")
        return setting

    @staticmethod
    def delete_setting(db: Session, key: str) -> bool:
        setting = PlatformSettingRepository(db).get_by_key(key)
        if not setting:
            return False
        db.delete(setting)
        db.commit()
        logger.info(f"Platform setting '{key}' deleted")
        return True
