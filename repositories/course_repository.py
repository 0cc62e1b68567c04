"""
Course and platform setting repositories
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Course, PlatformSetting


class CourseRepository(BaseRepository[Course]):
    def __init__(self, db: Session):
        super().__init__(db, Course)

    def get_by_id(self, course_id: UUID) -> Optional[Course]:
        return self.db.query(Course).filter(Course.course_id == course_id).first()

    def list_courses(self, published_only: bool = False) -> List[Course]:
        query = self.db.query(Course)
        if published_only:
            query = query.filter(Course.is_published.is_(True))
        return query.order_by(Course.created_at.desc(), Course.title).all()


class PlatformSettingRepository(BaseRepository[PlatformSetting]):
    def __init__(self, db: Session):
        super().__init__(db, PlatformSetting)

    def get_by_id(self, setting_id: UUID) -> Optional[PlatformSetting]:
        return (
            self.db.query(PlatformSetting)
            .filter(PlatformSetting.setting_id == setting_id)
            .first()
        )

    def get_by_key(self, key: str) -> Optional[PlatformSetting]:
        return self.db.query(PlatformSetting).filter(PlatformSetting.key == key).first()

    def list_all(self) -> List[PlatformSetting]:
        return self.db.query(PlatformSetting).order_by(PlatformSetting.key).all()
