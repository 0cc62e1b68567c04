from typing import Any, Dict
from sqlalchemy.orm import Session
import copy
import logging
import uuid

from domain.models import AppUser, TokenTransaction
from domain.enums import TransactionType, UserRole
from domain.schemas.profile_schemas import (
    UserCreate,
    ProfileUpdateRequest,
    UserSettingsResponse,
)
from repositories import UserRepository, UserSettingsRepository
from app.config import settings
from app.exceptions import NotFoundError, ConflictError, ServiceValidationError

logger = logging.getLogger("chefos.profile")

DEFAULT_USER_SETTINGS: Dict[str, Any] = {
    "time_format": "24h",
    "unit_system": "metric",
    "theme": "system",
    "notifications": {"email": True, "push": False, "expiring_products": True},
    "privacy": {"public_profile": True, "show_email": False},
    "culinary": {
        "skill_level": "beginner",
        "goals": [],
        "allergies": [],
        "excluded_products": [],
        "diet": None,
    },
    "ai": {"tips_enabled": True, "tone": "friendly"},
    "fridge": {"priority": "expiring_first", "expiring_soon_days": 2},
    "budget": {"monthly_limit": None, "currency": "PLN"},
}

# Language lives on the profile, not in the settings document
READ_ONLY_SETTINGS = {"language"}


def deep_merge(base: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``patch`` into a copy of ``base``; nested dicts merge key by key."""
    merged = copy.deepcopy(base)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ProfileService:
    @staticmethod
    def create_user(db: Session, payload: UserCreate) -> AppUser:
        """
        Register a user account.

        A configured welcome bonus is credited through the token ledger so the
        balance always equals the sum of transactions.

        Raises:
            ConflictError: email already registered (409 EMAIL_EXISTS)
        """
        user_repo = UserRepository(db)
        if user_repo.get_by_email(payload.email):
            raise ConflictError(
                f"User with email {payload.email} already exists", code="EMAIL_EXISTS"
            )

        try:
            user = user_repo.create_user(
                email=payload.email,
                display_name=payload.display_name,
                language=payload.language,
            )
            bonus = settings.new_user_bonus_tokens
            if bonus > 0:
                user.token_balance = bonus
                db.add(
                    TokenTransaction(
                        user_id=user.user_id,
                        type=TransactionType.BONUS,
                        amount=bonus,
                        balance_after=bonus,
                        description="Welcome bonus",
                    )
                )
            db.commit()
            db.refresh(user)
        except ConflictError:
            raise
        except Exception:
            db.rollback()
            logger.exception("Failed to create user %s", payload.email)
            raise

        logger.info(f"Created user {user.user_id} ({user.email})")
        return user

    @staticmethod
    def get_user(db: Session, user_id: uuid.UUID) -> AppUser:
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User not found: {user_id}")
        return user

    @staticmethod
    def update_profile(
        db: Session, user_id: uuid.UUID, payload: ProfileUpdateRequest
    ) -> AppUser:
        user = ProfileService.get_user(db, user_id)
        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(user, field, value)
        db.commit()
        db.refresh(user)
        logger.info(f"Updated profile of user {user_id}: {sorted(changes)}")
        return user

    @staticmethod
    def get_settings(db: Session, user_id: uuid.UUID) -> UserSettingsResponse:
        """Stored settings merged over defaults, so new sections appear automatically."""
        ProfileService.get_user(db, user_id)
        row = UserSettingsRepository(db).get_by_id(user_id)
        stored = row.data if row else {}
        return UserSettingsResponse(
            user_id=user_id,
            settings=deep_merge(DEFAULT_USER_SETTINGS, stored or {}),
            updated_at=row.updated_at if row else None,
        )

    @staticmethod
    def patch_settings(
        db: Session, user_id: uuid.UUID, patch: Dict[str, Any]
    ) -> UserSettingsResponse:
        """
        Deep-merge a partial settings document.

        Raises:
            ServiceValidationError: patch touches a read-only key (language)
        """
        forbidden = READ_ONLY_SETTINGS & set(patch)
        if forbidden:
            raise ServiceValidationError(
                "Language cannot be updated via the settings API; update the profile instead",
                details={"fields": sorted(forbidden)},
            )

        ProfileService.get_user(db, user_id)
        settings_repo = UserSettingsRepository(db)
        row = settings_repo.get_by_id(user_id)
        current = row.data if row else {}
        merged = deep_merge(current or {}, patch)
        row = settings_repo.upsert(user_id, merged)
        db.commit()
        db.refresh(row)
        logger.info(f"Patched settings of user {user_id}: {sorted(patch)}")
        return UserSettingsResponse(
            user_id=user_id,
            settings=deep_merge(DEFAULT_USER_SETTINGS, row.data),
            updated_at=row.updated_at,
        )

    # ==================== Admin ====================

    @staticmethod
    def list_users(db: Session, search: str = None, limit: int = 50, offset: int = 0):
        return UserRepository(db).list_users(search=search, skip=offset, limit=limit)

    @staticmethod
    def set_role(
        db: Session, admin_id: uuid.UUID, user_id: uuid.UUID, role: UserRole
    ) -> AppUser:
        """Admins cannot demote themselves, so at least one admin remains."""
        if admin_id == user_id and role != UserRole.ADMIN:
            raise ServiceValidationError("Admins cannot remove their own admin role")
        user = ProfileService.get_user(db, user_id)
        user.role = role
        db.commit()
        db.refresh(user)
        logger.info(f"Admin {admin_id} set role of user {user_id} to {role.value}")
        return user
