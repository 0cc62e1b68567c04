"""
User Repository - Data access layer for accounts and per-user settings
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from repositories.base import BaseRepository
from domain.models import AppUser, UserSettings
from domain.enums import Language
from app.exceptions import ConflictError


class UserRepository(BaseRepository[AppUser]):
    """Repository for user data access"""

    def __init__(self, db: Session):
        super().__init__(db, AppUser)

    def get_by_id(self, user_id: UUID) -> Optional[AppUser]:
        return self.db.query(AppUser).filter(AppUser.user_id == user_id).first()

    def get_for_update(self, user_id: UUID) -> Optional[AppUser]:
        """Get user with a row lock, for balance changes"""
        query = self.db.query(AppUser).filter(AppUser.user_id == user_id)
        return self._locked(query).first()

    def get_by_email(self, email: str) -> Optional[AppUser]:
        return self.db.query(AppUser).filter(AppUser.email == email).first()

    def list_users(
        self, search: str = None, skip: int = 0, limit: int = 50
    ) -> List[AppUser]:
        query = self.db.query(AppUser)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(
                AppUser.email.ilike(pattern) | AppUser.display_name.ilike(pattern)
            )
        return query.order_by(AppUser.created_at).offset(skip).limit(limit).all()

    def create_user(
        self, email: str, display_name: str = None, language: Language = Language.PL
    ) -> AppUser:
        """Create a new user"""
        user = AppUser(
            email=email, display_name=display_name, language=language, token_balance=0
        )
        try:
            self.db.add(user)
            self.db.flush()
            return user
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(
                f"User with email {email} already exists", code="EMAIL_EXISTS"
            )


class UserSettingsRepository(BaseRepository[UserSettings]):
    """Repository for the per-user settings document"""

    def __init__(self, db: Session):
        super().__init__(db, UserSettings)

    def get_by_id(self, user_id: UUID) -> Optional[UserSettings]:
        return (
            self.db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
        )

    def upsert(self, user_id: UUID, data: dict) -> UserSettings:
        """Replace the stored document; caller commits"""
        row = self.get_by_id(user_id)
        if row:
            # JSON columns are not mutation-tracked; assign a fresh dict
            row.data = dict(data)
        else:
            row = UserSettings(user_id=user_id, data=dict(data))
            self.db.add(row)
        self.db.flush()
        return row
