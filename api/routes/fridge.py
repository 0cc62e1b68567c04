"""Fridge inventory routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from domain.models import get_db_session, AppUser
from domain.schemas.fridge_schemas import (
    FridgeItemCreate,
    FridgeItemQuantityUpdate,
    FridgeItemResponse,
    FridgeItemDeleted,
    FridgePriceCreate,
    FridgePriceResponse,
    FridgeStatsResponse,
    FridgeListResponse,
    FridgeDiscardRequest,
    LossEventResponse,
)
from services.fridge_service import FridgeService
from api.dependencies import get_current_user
from app.config import settings
from app.exceptions import NotFoundError

router = APIRouter(prefix="/fridge", tags=["Fridge"])
logger = logging.getLogger("chefos.api.fridge")


@router.get("/items", response_model=FridgeListResponse)
def list_items(
    user: AppUser = Depends(get_current_user), db: Session = Depends(get_db_session)
):
    """All batches, soonest expiry first, with freshness flags and totals."""
    return FridgeService.list_items(db, user.user_id)


@router.post(
    "/items", response_model=FridgeItemResponse, status_code=status.HTTP_201_CREATED
)
def add_item(
    payload: FridgeItemCreate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return FridgeService.add_item(db, user.user_id, payload)


@router.get("/stats", response_model=FridgeStatsResponse)
def get_stats(
    user: AppUser = Depends(get_current_user), db: Session = Depends(get_db_session)
):
    return FridgeService.get_stats(db, user.user_id)


@router.get("/expiring", response_model=List[FridgeItemResponse])
def expiring_soon(
    days: Optional[int] = Query(None, ge=0, le=60, description="Window in days"),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    window = settings.expiring_soon_days if days is None else days
    return FridgeService.get_expiring_soon(db, user.user_id, window)


@router.patch("/items/{fridge_item_id}", response_model=Optional[FridgeItemResponse])
def update_quantity(
    fridge_item_id: UUID,
    payload: FridgeItemQuantityUpdate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """Set the remaining quantity; 0 removes the batch and returns null."""
    return FridgeService.update_quantity(db, user.user_id, fridge_item_id, payload.quantity)


@router.delete("/items/{fridge_item_id}", response_model=FridgeItemDeleted)
def delete_item(
    fridge_item_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    if not FridgeService.remove_item(db, user.user_id, fridge_item_id):
        raise NotFoundError(f"Fridge item not found: {fridge_item_id}")
    return FridgeItemDeleted(fridge_item_id=fridge_item_id)


@router.get("/items/{fridge_item_id}/prices", response_model=List[FridgePriceResponse])
def list_prices(
    fridge_item_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return FridgeService.list_prices(db, user.user_id, fridge_item_id)


@router.post(
    "/items/{fridge_item_id}/prices",
    response_model=FridgePriceResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_price(
    fridge_item_id: UUID,
    payload: FridgePriceCreate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return FridgeService.add_price(
        db,
        user.user_id,
        fridge_item_id,
        payload.price_per_unit,
        currency=payload.currency,
        source=payload.source,
    )


@router.post(
    "/items/{fridge_item_id}/discard",
    response_model=LossEventResponse,
    status_code=status.HTTP_201_CREATED,
)
def discard_item(
    fridge_item_id: UUID,
    payload: FridgeDiscardRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """Throw away a batch (or part of it) and log the loss with a reason."""
    return FridgeService.discard_item(db, user.user_id, fridge_item_id, payload)
