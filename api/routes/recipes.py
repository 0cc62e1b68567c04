"""
Recipe catalog routes: browsing, fridge matching, cooking, bookmarks and
single-recipe purchase.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from domain.models import get_db_session, AppUser
from domain.enums import Difficulty
from domain.mappers import RecipeMapper
from domain.schemas.recipe_schemas import (
    IngredientResponse,
    RecipeSummary,
    RecipeDetail,
    RecipePurchaseResponse,
)
from domain.schemas.matching_schemas import (
    RecipeMatchListResponse,
    AvailableRecipesResponse,
    CookRecipeRequest,
    CookRecipeResponse,
)
from services.recipe_service import RecipeService
from services.assistant_service import AssistantService
from api.dependencies import get_current_user, get_optional_user
from api.responses import MessageResponse, PaginatedResponse, paginated_response
from app.exceptions import NotFoundError

router = APIRouter(prefix="/recipes", tags=["Recipes"])
logger = logging.getLogger("chefos.api.recipes")


@router.get("", response_model=PaginatedResponse[RecipeSummary])
def list_recipes(
    search: Optional[str] = Query(None, description="Search in title and description"),
    category: Optional[str] = Query(None),
    country: Optional[str] = Query(None),
    difficulty: Optional[Difficulty] = Query(None),
    max_time: Optional[int] = Query(None, ge=1, description="Maximum minutes"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db_session),
):
    """Published recipes, newest first."""
    items, total = RecipeService.list_recipes(
        db,
        search=search,
        category=category,
        country=country,
        difficulty=difficulty,
        max_time=max_time,
        page=page,
        page_size=page_size,
    )
    return paginated_response(
        [RecipeMapper.to_summary(r) for r in items], total, page, page_size
    )


# Static paths are declared before /{recipe_id}

@router.get("/match", response_model=RecipeMatchListResponse)
def match_recipes(
    min_coverage: Optional[float] = Query(None, ge=0, le=100),
    max_missing_cost: Optional[float] = Query(None, ge=0),
    max_time: Optional[int] = Query(None, ge=1),
    countries: Optional[List[str]] = Query(None),
    sort: Optional[str] = Query(
        None, description="coverage | score | time | missing_cost | used_value"
    ),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """
    Published recipes matched against the caller's fridge.

    Each match carries coverage, score, used and missing ingredients, scenario
    and economy (value used from the fridge, cost of what is missing, value
    saved from expiring products).
    """
    matches = AssistantService.get_matches(
        db,
        user.user_id,
        min_coverage=min_coverage,
        max_missing_cost=max_missing_cost,
        max_time_minutes=max_time,
        countries=countries,
        sort=sort,
        order=order,
        limit=limit,
    )
    return RecipeMatchListResponse(count=len(matches), recipes=matches)


@router.get("/available", response_model=AvailableRecipesResponse)
def available_recipes(
    user: AppUser = Depends(get_current_user), db: Session = Depends(get_db_session)
):
    """Matches grouped into can cook / almost (1-2 missing) / need to buy."""
    return AssistantService.get_available(db, user.user_id)


@router.get("/saved", response_model=List[RecipeSummary])
def list_saved(
    user: AppUser = Depends(get_current_user), db: Session = Depends(get_db_session)
):
    return [RecipeMapper.to_summary(r) for r in RecipeService.list_saved(db, user.user_id)]


@router.get("/owned", response_model=List[RecipeSummary])
def list_owned(
    user: AppUser = Depends(get_current_user), db: Session = Depends(get_db_session)
):
    return [RecipeMapper.to_summary(r) for r in RecipeService.list_owned(db, user.user_id)]


@router.get("/ingredients", response_model=List[IngredientResponse])
def search_ingredients(
    q: Optional[str] = Query(None, description="Name prefix or fragment"),
    category: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db_session),
):
    """Ingredient catalog lookup used by the fridge and recipe forms."""
    return RecipeService.search_ingredients(db, q, category, limit)


@router.get("/{recipe_id}", response_model=RecipeDetail)
def get_recipe(
    recipe_id: UUID,
    user: Optional[AppUser] = Depends(get_optional_user),
    db: Session = Depends(get_db_session),
):
    """Steps stay hidden unless the recipe is free, owned or authored by the caller."""
    return RecipeService.get_detail(db, recipe_id, user)


@router.post("/{recipe_id}/cook", response_model=CookRecipeResponse)
def cook_recipe(
    recipe_id: UUID,
    payload: CookRecipeRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """
    Cook from the fridge: stock is taken earliest-expiry first.

    400 INSUFFICIENT_INGREDIENTS lists shortages; 409 DUPLICATE_COOK when the
    idempotency key was already used.
    """
    return AssistantService.cook_recipe(
        db,
        user.user_id,
        recipe_id,
        payload.servings_multiplier,
        payload.idempotency_key,
    )


@router.post("/{recipe_id}/save", response_model=MessageResponse)
def save_recipe(
    recipe_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    RecipeService.save_recipe(db, user.user_id, recipe_id)
    return MessageResponse(message="Recipe saved")


@router.delete("/{recipe_id}/save", response_model=MessageResponse)
def unsave_recipe(
    recipe_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    if not RecipeService.unsave_recipe(db, user.user_id, recipe_id):
        raise NotFoundError(f"Recipe {recipe_id} is not saved")
    return MessageResponse(message="Recipe removed from saved")


@router.post(
    "/{recipe_id}/purchase",
    response_model=RecipePurchaseResponse,
    status_code=status.HTTP_201_CREATED,
)
def purchase_recipe(
    recipe_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return RecipeService.purchase_recipe(db, user.user_id, recipe_id)
