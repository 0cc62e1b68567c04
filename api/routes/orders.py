"""Order history routes"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from domain.models import get_db_session, AppUser
from domain.schemas.commerce_schemas import OrderResponse
from services.cart_service import CartService
from api.dependencies import get_current_user

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger("chefos.api.orders")


@router.get("", response_model=List[OrderResponse])
def list_orders(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return CartService.list_orders(db, user.user_id, limit=limit, offset=offset)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return CartService.get_order(db, user.user_id, order_id)
