"""Admin platform settings (key/value)"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
import logging

from domain.models import get_db_session, AppUser
from domain.schemas.course_schemas import PlatformSettingUpsert, PlatformSettingResponse
from services.course_service import PlatformSettingService
from api.dependencies import require_admin
from api.responses import MessageResponse
from app.exceptions import NotFoundError

router = APIRouter(prefix="/admin/settings", tags=["Admin: Settings"])
logger = logging.getLogger("chefos.api.admin_settings")


@router.get("", response_model=List[PlatformSettingResponse])
def list_settings(
    admin: AppUser = Depends(require_admin), db: Session = Depends(get_db_session)
):
    return PlatformSettingService.list_settings(db)


@router.get("/{key}", response_model=PlatformSettingResponse)
def get_setting(
    key: str, admin: AppUser = Depends(require_admin), db: Session = Depends(get_db_session)
):
    return PlatformSettingService.get_setting(db, key)


@router.put("/{key}", response_model=PlatformSettingResponse)
def upsert_setting(
    key: str,
    payload: PlatformSettingUpsert,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return PlatformSettingService.upsert_setting(db, key, payload)


@router.delete("/{key}", response_model=MessageResponse)
def delete_setting(
    key: str, admin: AppUser = Depends(require_admin), db: Session = Depends(get_db_session)
):
    if not PlatformSettingService.delete_setting(db, key):
        raise NotFoundError(f"Setting not found: {key}")
    return MessageResponse(message="Setting deleted")
