"""Recipe catalog: browsing, detail locking, bookmarks, direct purchase and admin CRUD."""

from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
import logging
import re
import unicodedata
import uuid

from domain.models import (
    AppUser,
    Recipe,
    RecipeIngredient,
    RecipeStep,
    RecipePurchase,
    SavedRecipe,
    Ingredient,
)
from domain.enums import TransactionType
from domain.mappers import RecipeMapper
from domain.schemas.recipe_schemas import (
    RecipeCreate,
    RecipeUpdate,
    RecipeDetail,
    RecipeIngredientIn,
    RecipeStepIn,
    RecipePurchaseResponse,
    IngredientCreate,
    IngredientUpdate,
)
from repositories import (
    RecipeRepository,
    SavedRecipeRepository,
    PurchaseRepository,
    IngredientRepository,
    UserRepository,
)
from services.wallet_service import WalletService
from app.exceptions import NotFoundError, ConflictError, ServiceValidationError

logger = logging.getLogger("chefos.recipes")


def canonicalize(title: str) -> str:
    """Language-neutral slug: lowercase, accents stripped, words joined by '-'."""
    normalized = unicodedata.normalize("NFKD", title.strip().lower())
    without_marks = "".join(c for c in normalized if not unicodedata.combining(c))
    slug = re.sub(r"[\W_]+", "-", without_marks).strip("-")
    return slug or "recipe"


def build_ingredient_lines(lines: List[RecipeIngredientIn]) -> List[RecipeIngredient]:
    return [
        RecipeIngredient(
            ingredient_id=line.ingredient_id,
            name=line.name.strip(),
            quantity=line.quantity,
            unit=line.unit,
            optional=line.optional,
            position=idx,
        )
        for idx, line in enumerate(lines)
    ]


def build_step_lines(steps: List[RecipeStepIn]) -> List[RecipeStep]:
    return [
        RecipeStep(position=idx, text=step.text.strip(), time_minutes=step.time_minutes)
        for idx, step in enumerate(steps, start=1)
    ]


class RecipeService:
    # ==================== Catalog ====================

    @staticmethod
    def list_recipes(
        db: Session,
        search: str = None,
        category: str = None,
        country: str = None,
        difficulty: str = None,
        max_time: int = None,
        page: int = 1,
        page_size: int = 20,
        published_only: bool = True,
    ) -> Tuple[List[Recipe], int]:
        return RecipeRepository(db).search(
            search=search,
            category=category,
            country=country,
            difficulty=difficulty,
            max_time=max_time,
            published_only=published_only,
            skip=(page - 1) * page_size,
            limit=page_size,
        )

    @staticmethod
    def get_recipe(db: Session, recipe_id: uuid.UUID, include_unpublished: bool = False) -> Recipe:
        recipe = RecipeRepository(db).get_by_id(recipe_id)
        if not recipe or (not recipe.is_published and not include_unpublished):
            raise NotFoundError(f"Recipe not found: {recipe_id}")
        return recipe

    @staticmethod
    def is_unlocked(db: Session, recipe: Recipe, user: Optional[AppUser]) -> bool:
        """Free, authored or purchased recipes expose their steps."""
        if recipe.price_tokens == 0:
            return True
        if user is None:
            return False
        if user.is_admin or recipe.author_id == user.user_id:
            return True
        return PurchaseRepository(db).owns(user.user_id, recipe.recipe_id)

    @staticmethod
    def get_detail(
        db: Session, recipe_id: uuid.UUID, user: Optional[AppUser]
    ) -> RecipeDetail:
        recipe = RecipeService.get_recipe(
            db, recipe_id, include_unpublished=bool(user and user.is_admin)
        )
        owned = bool(user) and PurchaseRepository(db).owns(user.user_id, recipe_id)
        saved = bool(user) and SavedRecipeRepository(db).get(user.user_id, recipe_id) is not None
        locked = not RecipeService.is_unlocked(db, recipe, user)
        return RecipeMapper.to_detail(recipe, locked=locked, owned=owned, saved=saved)

    # ==================== Bookmarks ====================

    @staticmethod
    def save_recipe(db: Session, user_id: uuid.UUID, recipe_id: uuid.UUID) -> SavedRecipe:
        """Idempotent: saving twice keeps a single bookmark."""
        RecipeService.get_recipe(db, recipe_id)
        saved_repo = SavedRecipeRepository(db)
        existing = saved_repo.get(user_id, recipe_id)
        if existing:
            return existing
        saved = saved_repo.create(SavedRecipe(user_id=user_id, recipe_id=recipe_id))
        logger.info(f"User {user_id} saved recipe {recipe_id}")
        return saved

    @staticmethod
    def unsave_recipe(db: Session, user_id: uuid.UUID, recipe_id: uuid.UUID) -> bool:
        saved_repo = SavedRecipeRepository(db)
        existing = saved_repo.get(user_id, recipe_id)
        if not existing:
            return False
        db.delete(existing)
        db.commit()
        return True

    @staticmethod
    def list_saved(db: Session, user_id: uuid.UUID) -> List[Recipe]:
        return [s.recipe for s in SavedRecipeRepository(db).get_by_user_id(user_id)]

    @staticmethod
    def list_owned(db: Session, user_id: uuid.UUID) -> List[Recipe]:
        return [p.recipe for p in PurchaseRepository(db).get_by_user_id(user_id)]

    # ==================== Purchase ====================

    @staticmethod
    def purchase_recipe(
        db: Session, user_id: uuid.UUID, recipe_id: uuid.UUID
    ) -> RecipePurchaseResponse:
        """
        Buy a single recipe outside the cart.

        Raises:
            ConflictError: recipe already owned (ALREADY_OWNED)
            ServiceValidationError: not enough tokens (INSUFFICIENT_TOKENS)
        """
        recipe = RecipeService.get_recipe(db, recipe_id)
        purchase_repo = PurchaseRepository(db)
        if purchase_repo.owns(user_id, recipe_id):
            raise ConflictError("Recipe already owned", code="ALREADY_OWNED")

        try:
            user = UserRepository(db).get_for_update(user_id)
            if not user:
                raise NotFoundError(f"User not found: {user_id}")
            if recipe.price_tokens > 0:
                WalletService.post_transaction(
                    db,
                    user,
                    -recipe.price_tokens,
                    TransactionType.SPEND,
                    description=f"Recipe: {recipe.title}",
                    reference=str(recipe.recipe_id),
                )
            purchase = RecipePurchase(
                user_id=user_id, recipe_id=recipe_id, price_tokens=recipe.price_tokens
            )
            db.add(purchase)
            db.commit()
            db.refresh(purchase)
        except Exception:
            db.rollback()
            raise

        logger.info(
            f"User {user_id} bought recipe {recipe_id} for {recipe.price_tokens} tokens"
        )
        return RecipePurchaseResponse(
            recipe_id=recipe_id,
            price_tokens=recipe.price_tokens,
            balance=user.token_balance,
            purchased_at=purchase.purchased_at,
        )

    # ==================== Admin CRUD ====================

    @staticmethod
    def create_recipe(db: Session, author_id: uuid.UUID, payload: RecipeCreate) -> Recipe:
        recipe = Recipe(
            title=payload.title.strip(),
            canonical_name=canonicalize(payload.title),
            language=payload.language,
            description=payload.description,
            country=payload.country,
            category=payload.category,
            difficulty=payload.difficulty,
            time_minutes=payload.time_minutes,
            servings=payload.servings,
            calories=payload.calories,
            price_tokens=payload.price_tokens,
            image_url=payload.image_url,
            is_published=payload.is_published,
            author_id=author_id,
            ingredients=build_ingredient_lines(payload.ingredients),
            steps=build_step_lines(payload.steps),
        )
        recipe = RecipeRepository(db).create(recipe)
        logger.info(f"Recipe '{recipe.title}' created ({recipe.recipe_id})")
        return recipe

    @staticmethod
    def update_recipe(db: Session, recipe_id: uuid.UUID, payload: RecipeUpdate) -> Recipe:
        recipe = RecipeService.get_recipe(db, recipe_id, include_unpublished=True)
        changes = payload.model_dump(exclude_unset=True, exclude={"ingredients", "steps"})
        for field, value in changes.items():
            setattr(recipe, field, value)
        if "title" in changes:
            recipe.canonical_name = canonicalize(recipe.title)
        if payload.ingredients is not None:
            recipe.ingredients = build_ingredient_lines(payload.ingredients)
        if payload.steps is not None:
            recipe.steps = build_step_lines(payload.steps)
        db.commit()
        db.refresh(recipe)
        logger.info(f"Recipe {recipe_id} updated: {sorted(changes)}")
        return recipe

    @staticmethod
    def delete_recipe(db: Session, recipe_id: uuid.UUID) -> bool:
        return RecipeRepository(db).delete(recipe_id)

    @staticmethod
    def set_published(db: Session, recipe_id: uuid.UUID, is_published: bool) -> Recipe:
        recipe = RecipeService.get_recipe(db, recipe_id, include_unpublished=True)
        if is_published and not recipe.ingredients:
            raise ServiceValidationError("Cannot publish a recipe without ingredients")
        recipe.is_published = is_published
        db.commit()
        db.refresh(recipe)
        return recipe

    # ==================== Ingredient catalog ====================

    @staticmethod
    def search_ingredients(db: Session, query: str = None, category: str = None, limit: int = 20) -> List[Ingredient]:
        return IngredientRepository(db).search(query, category, limit)

    @staticmethod
    def create_ingredient(db: Session, payload: IngredientCreate) -> Ingredient:
        ingredient_repo = IngredientRepository(db)
        if ingredient_repo.get_by_name(payload.name):
            raise ConflictError(
                f"Ingredient '{payload.name}' already exists", code="INGREDIENT_EXISTS"
            )
        return ingredient_repo.create(Ingredient(**payload.model_dump()))

    @staticmethod
    def update_ingredient(
        db: Session, ingredient_id: uuid.UUID, payload: IngredientUpdate
    ) -> Ingredient:
        ingredient = IngredientRepository(db).get_by_id(ingredient_id)
        if not ingredient:
            raise NotFoundError(f"Ingredient not found: {ingredient_id}")
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(ingredient, field, value)
        db.commit()
        db.refresh(ingredient)
        return ingredient

    @staticmethod
    def delete_ingredient(db: Session, ingredient_id: uuid.UUID) -> bool:
        ingredient_repo = IngredientRepository(db)
        if ingredient_repo.is_referenced(ingredient_id):
            raise ConflictError(
                "Ingredient is used by recipes or fridge items", code="INGREDIENT_IN_USE"
            )
        return ingredient_repo.delete(ingredient_id)
