"""Fridge loss history routes"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from domain.models import get_db_session, AppUser
from domain.schemas.fridge_schemas import LossHistoryResponse
from services.fridge_service import FridgeService
from api.dependencies import get_current_user

router = APIRouter(prefix="/history", tags=["History"])


@router.get("/losses", response_model=LossHistoryResponse)
def list_losses(
    days: int = Query(30, ge=1, le=365, description="Look-back window in days"),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """Discarded products over the window, newest first, with loss totals."""
    return FridgeService.loss_history(db, user.user_id, days)
