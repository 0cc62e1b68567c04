"""Admin user management and ingredient catalog maintenance"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from domain.models import get_db_session, AppUser
from domain.schemas.profile_schemas import UserResponse, RoleUpdateRequest
from domain.schemas.commerce_schemas import TokenGrantRequest, TransactionResponse
from domain.schemas.recipe_schemas import IngredientCreate, IngredientUpdate, IngredientResponse
from services.profile_service import ProfileService
from services.recipe_service import RecipeService
from services.wallet_service import WalletService
from api.dependencies import require_admin
from api.responses import MessageResponse
from app.exceptions import NotFoundError

router = APIRouter(prefix="/admin", tags=["Admin: Users"])
logger = logging.getLogger("chefos.api.admin_users")


@router.get("/users", response_model=List[UserResponse])
def list_users(
    search: Optional[str] = Query(None, description="Email or display name fragment"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return ProfileService.list_users(db, search=search, limit=limit, offset=offset)


@router.patch("/users/{user_id}/role", response_model=UserResponse)
def change_role(
    user_id: UUID,
    payload: RoleUpdateRequest,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return ProfileService.set_role(db, admin.user_id, user_id, payload.role)


@router.post(
    "/users/{user_id}/tokens",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
def grant_tokens(
    user_id: UUID,
    payload: TokenGrantRequest,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return WalletService.grant(db, admin.user_id, user_id, payload.amount, payload.reason)


@router.post(
    "/ingredients",
    response_model=IngredientResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_ingredient(
    payload: IngredientCreate,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return RecipeService.create_ingredient(db, payload)


@router.patch("/ingredients/{ingredient_id}", response_model=IngredientResponse)
def update_ingredient(
    ingredient_id: UUID,
    payload: IngredientUpdate,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return RecipeService.update_ingredient(db, ingredient_id, payload)


@router.delete("/ingredients/{ingredient_id}", response_model=MessageResponse)
def delete_ingredient(
    ingredient_id: UUID,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    """409 INGREDIENT_IN_USE while recipes or fridge items reference it."""
    if not RecipeService.delete_ingredient(db, ingredient_id):
        raise NotFoundError(f"Ingredient not found: {ingredient_id}")
    return MessageResponse(message="Ingredient deleted")
