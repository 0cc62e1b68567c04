"""Cart and checkout routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from uuid import UUID
import logging

from domain.models import get_db_session, AppUser
from domain.schemas.commerce_schemas import (
    CartItemAdd,
    CartItemUpdate,
    CartSummary,
    CheckoutRequest,
    CheckoutResponse,
)
from services.cart_service import CartService
from api.dependencies import get_current_user

router = APIRouter(prefix="/cart", tags=["Cart"])
logger = logging.getLogger("chefos.api.cart")


@router.get("", response_model=CartSummary)
def get_cart(
    user: AppUser = Depends(get_current_user), db: Session = Depends(get_db_session)
):
    return CartService.get_cart(db, user.user_id)


@router.post("/items", response_model=CartSummary, status_code=status.HTTP_201_CREATED)
def add_item(
    payload: CartItemAdd,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """Adding a recipe that is already in the cart increases its quantity."""
    return CartService.add_item(db, user.user_id, payload.recipe_id, payload.quantity)


@router.patch("/items/{recipe_id}", response_model=CartSummary)
def set_quantity(
    recipe_id: UUID,
    payload: CartItemUpdate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return CartService.set_quantity(db, user.user_id, recipe_id, payload.quantity)


@router.delete("/items/{recipe_id}", response_model=CartSummary)
def remove_item(
    recipe_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return CartService.remove_item(db, user.user_id, recipe_id)


@router.delete("", response_model=CartSummary)
def clear_cart(
    user: AppUser = Depends(get_current_user), db: Session = Depends(get_db_session)
):
    return CartService.clear(db, user.user_id)


@router.post("/checkout", response_model=CheckoutResponse)
def checkout(
    payload: CheckoutRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """
    Pay for the cart with chef tokens.

    Repeating the same ``idempotency_key`` returns the original order with
    ``replayed: true`` and does not charge again.
    """
    return CartService.checkout(db, user.user_id, payload)
