"""User registration and profile routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from domain.models import get_db_session, AppUser
from domain.schemas.profile_schemas import (
    UserCreate,
    UserResponse,
    ProfileUpdateRequest,
    UserSettingsResponse,
    UserSettingsPatch,
)
from services.profile_service import ProfileService
from api.dependencies import get_current_user

router = APIRouter(tags=["Users"])
logger = logging.getLogger("chefos.api.users")


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db_session)):
    """Register a user; a duplicate email answers 409 EMAIL_EXISTS."""
    return ProfileService.create_user(db, payload)


@router.get("/profile", response_model=UserResponse)
def get_profile(user: AppUser = Depends(get_current_user)):
    return user


@router.patch("/profile", response_model=UserResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return ProfileService.update_profile(db, user.user_id, payload)


@router.get("/profile/settings", response_model=UserSettingsResponse)
def get_settings(
    user: AppUser = Depends(get_current_user), db: Session = Depends(get_db_session)
):
    """Stored settings merged over the defaults"""
    return ProfileService.get_settings(db, user.user_id)


@router.patch("/profile/settings", response_model=UserSettingsResponse)
def patch_settings(
    payload: UserSettingsPatch,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """
    Deep-merge a partial settings document.

    Example body: ``{"settings": {"notifications": {"push": true}}}`` keeps the
    other notification flags untouched. ``language`` is rejected with 400;
    change it through ``PATCH /profile``.
    """
    return ProfileService.patch_settings(db, user.user_id, payload.settings)
