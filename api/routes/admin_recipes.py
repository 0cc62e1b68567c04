"""
Admin recipe management, including the AI recipe wizard.

The wizard works in two phases: ``/preview-ai`` returns a structured draft
without storing anything, ``/save`` commits the (edited) draft.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
import logging

from domain.models import get_db_session, AppUser
from domain.mappers import RecipeMapper
from domain.schemas.recipe_schemas import RecipeCreate, RecipeUpdate, RecipeDetail, RecipeSummary
from domain.schemas.course_schemas import PublishRequest
from domain.schemas.wizard_schemas import AIRecipeInput, AIRecipePreview, SaveRecipeRequest
from services.recipe_service import RecipeService
from services.recipe_wizard_service import RecipeWizardService
from api.dependencies import require_admin
from api.responses import MessageResponse, PaginatedResponse, paginated_response
from app.exceptions import NotFoundError

router = APIRouter(prefix="/admin/recipes", tags=["Admin: Recipes"])
logger = logging.getLogger("chefos.api.admin_recipes")


def _detail(recipe) -> RecipeDetail:
    return RecipeMapper.to_detail(recipe, locked=False)


@router.get("", response_model=PaginatedResponse[RecipeSummary])
def list_all_recipes(
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    """Every recipe, drafts included"""
    items, total = RecipeService.list_recipes(
        db, search=search, page=page, page_size=page_size, published_only=False
    )
    return paginated_response(
        [RecipeMapper.to_summary(r) for r in items], total, page, page_size
    )


@router.post("", response_model=RecipeDetail, status_code=status.HTTP_201_CREATED)
def create_recipe(
    payload: RecipeCreate,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return _detail(RecipeService.create_recipe(db, admin.user_id, payload))


@router.post("/preview-ai", response_model=AIRecipePreview)
def preview_ai_recipe(
    payload: AIRecipeInput,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    """Structure raw cooking notes into a draft. Nothing is saved; 502 AI_UNAVAILABLE on provider failure."""
    return RecipeWizardService.preview(db, payload)


@router.post("/save", response_model=RecipeDetail, status_code=status.HTTP_201_CREATED)
def save_wizard_recipe(
    payload: SaveRecipeRequest,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    """
    Commit a wizard draft.

    ``on_conflict``: ``fail`` (409 RECIPE_NAME_EXISTS with
    ``error.details.suggestions``), ``rename`` or ``overwrite``.
    """
    return _detail(RecipeWizardService.save(db, admin.user_id, payload))


@router.post("/create-ai", response_model=RecipeDetail, status_code=status.HTTP_201_CREATED)
def create_ai_recipe(
    payload: AIRecipeInput,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    """Preview and save in one call"""
    return _detail(RecipeWizardService.create_ai(db, admin.user_id, payload))


@router.get("/{recipe_id}", response_model=RecipeDetail)
def get_recipe(
    recipe_id: UUID,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return _detail(RecipeService.get_recipe(db, recipe_id, include_unpublished=True))


@router.patch("/{recipe_id}", response_model=RecipeDetail)
def update_recipe(
    recipe_id: UUID,
    payload: RecipeUpdate,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return _detail(RecipeService.update_recipe(db, recipe_id, payload))


@router.post("/{recipe_id}/publish", response_model=RecipeDetail)
def publish_recipe(
    recipe_id: UUID,
    payload: PublishRequest = PublishRequest(),
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return _detail(RecipeService.set_published(db, recipe_id, payload.is_published))


@router.delete("/{recipe_id}", response_model=MessageResponse)
def delete_recipe(
    recipe_id: UUID,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    if not RecipeService.delete_recipe(db, recipe_id):
        raise NotFoundError(f"Recipe not found: {recipe_id}")
    logger.info(f"Admin {admin.user_id} deleted recipe {recipe_id}")
    return MessageResponse(message="Recipe deleted")
