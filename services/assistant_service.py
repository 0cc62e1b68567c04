"""
Cooking assistant: fridge-to-recipe matching, one-at-a-time selection, and
cooking a recipe from fridge stock.
"""

from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from datetime import date
from decimal import Decimal
import logging
import uuid

from domain.enums import SelectionOutcome
from domain.schemas.matching_schemas import (
    AssistantNextResponse,
    AvailableRecipesResponse,
    CookRecipeResponse,
    FridgeStock,
    IngredientUsage,
    RecipeMatch,
)
from repositories import (
    AssistantViewRepository,
    CookingLogRepository,
    FridgeRepository,
    IngredientRepository,
    RecipeRepository,
    UserRepository,
)
from services import matching
from services.fridge_service import FridgeService
from app.config import settings
from app.exceptions import ConflictError, NotFoundError, ServiceValidationError

logger = logging.getLogger("chefos.assistant")


class AssistantService:
    @staticmethod
    def _catalog_prices(db: Session, recipes) -> Dict[uuid.UUID, float]:
        """Catalog price per base unit for every ingredient the recipes reference."""
        ids = {
            line.ingredient_id
            for recipe in recipes
            for line in recipe.ingredients
            if line.ingredient_id is not None
        }
        prices = {}
        for ingredient_id, ingredient in IngredientRepository(db).get_many(ids).items():
            if ingredient.price_per_unit is None:
                continue
            prices[ingredient_id] = matching.price_per_base_unit(
                float(ingredient.price_per_unit), ingredient.default_unit
            )
        return prices

    @staticmethod
    def compute_matches(
        db: Session, user_id: uuid.UUID, today: Optional[date] = None
    ) -> List[RecipeMatch]:
        """Every published recipe matched against the user's current fridge."""
        recipes = RecipeRepository(db).get_published()
        stock = FridgeService.get_stock(db, user_id)
        return matching.match_all(
            recipes,
            stock,
            today=today or date.today(),
            prices=AssistantService._catalog_prices(db, recipes),
            currency=settings.fiat_currency,
            expiring_days=settings.expiring_soon_days,
        )

    @staticmethod
    def get_matches(
        db: Session,
        user_id: uuid.UUID,
        min_coverage: Optional[float] = None,
        max_missing_cost: Optional[float] = None,
        max_time_minutes: Optional[int] = None,
        countries: Optional[List[str]] = None,
        sort: Optional[str] = None,
        order: str = "desc",
        limit: Optional[int] = None,
    ) -> List[RecipeMatch]:
        matches = AssistantService.compute_matches(db, user_id)
        matches = matching.filter_matches(
            matches,
            min_coverage=min_coverage,
            max_missing_cost=max_missing_cost,
            max_time_minutes=max_time_minutes,
            countries=countries,
        )
        if sort is not None and sort not in matching.SORT_KEYS:
            raise ServiceValidationError(
                f"Unsupported sort key: {sort}",
                details={"allowed": sorted(matching.SORT_KEYS)},
            )
        matches = matching.sort_matches(matches, sort=sort, order=order)
        return matches[: limit or settings.assistant_match_limit]

    @staticmethod
    def get_available(db: Session, user_id: uuid.UUID) -> AvailableRecipesResponse:
        matches = matching.sort_matches(AssistantService.compute_matches(db, user_id))
        return AvailableRecipesResponse(**matching.categorize(matches))

    @staticmethod
    def next_recipe(
        db: Session,
        user_id: uuid.UUID,
        exclude_recipe_ids: Optional[List[uuid.UUID]] = None,
    ) -> AssistantNextResponse:
        """
        Pick the best unseen recipe for the fridge and remember it as viewed.

        Candidates are recipes the fridge actually contributes to (at least one
        used ingredient) or that need nothing at all. Client-side exclusions are
        merged into the stored viewed set.
        """
        if not UserRepository(db).get_by_id(user_id):
            raise NotFoundError(f"User not found: {user_id}")

        view_repo = AssistantViewRepository(db)
        viewed = view_repo.get_viewed_ids(user_id) | set(exclude_recipe_ids or [])
        all_matches = AssistantService.compute_matches(db, user_id)
        candidates = [m for m in all_matches if m.used_count > 0 or m.can_cook]
        selection = matching.select_next(candidates, viewed)

        if selection.outcome == SelectionOutcome.OK:
            view_repo.mark_viewed(user_id, selection.recipe.recipe_id)
            db.commit()
            viewed.add(selection.recipe.recipe_id)
            logger.info(
                f"Assistant picked '{selection.recipe.title}' for user {user_id} "
                f"(coverage={selection.recipe.coverage}, score={selection.recipe.score})"
            )
        else:
            logger.info(f"Assistant outcome for user {user_id}: {selection.outcome.value}")

        return AssistantNextResponse(
            success=selection.outcome == SelectionOutcome.OK,
            code=selection.outcome,
            recipe=selection.recipe,
            viewed_count=len(viewed),
            fridge_items=FridgeRepository(db).count_for_user(user_id),
            total_recipes=len(all_matches),
        )

    @staticmethod
    def reset_viewed(db: Session, user_id: uuid.UUID) -> int:
        count = AssistantViewRepository(db).clear(user_id)
        db.commit()
        logger.info(f"Cleared {count} viewed recipes for user {user_id}")
        return count

    # ==================== Cooking ====================

    @staticmethod
    def cook_recipe(
        db: Session,
        user_id: uuid.UUID,
        recipe_id: uuid.UUID,
        servings_multiplier: float,
        idempotency_key: str,
        today: Optional[date] = None,
    ) -> CookRecipeResponse:
        """
        Cook a recipe: check stock, decrement fridge batches FIFO, log cooking.

        Flow:
        1. Reject a replayed idempotency key (409 DUPLICATE_COOK)
        2. Match the recipe against locked fridge stock
        3. Any missing required ingredient aborts with 400 and the shortages
        4. Consume batches earliest-expiry first; emptied batches are removed
        5. Write the cooking log and commit once
        """
        today = today or date.today()
        if not UserRepository(db).get_by_id(user_id):
            raise NotFoundError(f"User not found: {user_id}")
        recipe = RecipeRepository(db).get_by_id(recipe_id)
        if not recipe:
            raise NotFoundError(f"Recipe not found: {recipe_id}")

        cooking_repo = CookingLogRepository(db)
        if cooking_repo.get_by_key(user_id, idempotency_key):
            raise AssistantService._duplicate_cook(idempotency_key)

        fridge_repo = FridgeRepository(db)
        try:
            items = fridge_repo.get_items_for_decrement(user_id, with_lock=True)
            stock = [FridgeService.stock_entry(item) for item in items]
            match = matching.match_recipe(
                recipe,
                stock,
                servings_multiplier=servings_multiplier,
                today=today,
                prices=AssistantService._catalog_prices(db, [recipe]),
                currency=settings.fiat_currency,
                expiring_days=settings.expiring_soon_days,
            )
            if match.missing_ingredients:
                shortages = [
                    {
                        "ingredient_id": str(m.ingredient_id) if m.ingredient_id else None,
                        "name": m.name,
                        "needed": m.quantity,
                        "available": m.available,
                        "missing": m.missing_quantity,
                        "unit": m.unit,
                    }
                    for m in match.missing_ingredients
                ]
                names = ", ".join(s["name"] for s in shortages[:3])
                if len(shortages) > 3:
                    names += f" and {len(shortages) - 3} more"
                raise ServiceValidationError(
                    f"Cannot cook '{recipe.title}': missing ingredients in fridge ({names})",
                    details={"shortages": shortages},
                    code="INSUFFICIENT_INGREDIENTS",
                )

            usage = []
            for used in match.used_ingredients:
                remaining = AssistantService._consume_fifo(
                    db, AssistantService._batches_for(items, used), used.quantity, used.name
                )
                usage.append(
                    IngredientUsage(
                        name=used.name,
                        quantity_used=used.quantity,
                        unit=used.unit,
                        remaining_in_fridge=round(remaining, 3),
                    )
                )

            cooking_repo.add_log(
                user_id, recipe_id, Decimal(str(servings_multiplier)), idempotency_key
            )
            db.commit()
        except IntegrityError:
            db.rollback()
            if cooking_repo.get_by_key(user_id, idempotency_key):
                raise AssistantService._duplicate_cook(idempotency_key)
            raise
        except Exception:
            db.rollback()
            raise

        logger.info(
            f"User {user_id} cooked '{recipe.title}' x{servings_multiplier}; "
            f"used {len(usage)} ingredients worth {match.economy.used_value}"
        )
        return CookRecipeResponse(
            success=True,
            message=f"Cooked '{recipe.title}'",
            recipe_id=recipe_id,
            ingredients_used=usage,
            used_value=match.economy.used_value,
            waste_risk_saved=match.economy.waste_risk_saved,
            currency=match.economy.currency,
        )

    @staticmethod
    def _duplicate_cook(idempotency_key: str) -> ConflictError:
        return ConflictError(
            "This cooking request was already processed",
            details={"idempotency_key": idempotency_key},
            code="DUPLICATE_COOK",
        )

    @staticmethod
    def _batches_for(items, used) -> list:
        """Fridge batches backing one used ingredient, mirroring the match lookup."""
        _, base_unit = matching.to_base_unit(1, used.unit)
        compatible = [
            i for i in items if matching.to_base_unit(1, i.unit)[1] == base_unit
        ]
        if used.ingredient_id is not None:
            by_id = [i for i in compatible if i.ingredient_id == used.ingredient_id]
            if by_id:
                return by_id
        name = used.name.strip().lower()
        return [i for i in compatible if i.name.strip().lower() == name]

    @staticmethod
    def _consume_fifo(db: Session, items, required_base: float, name: str) -> float:
        """
        Take ``required_base`` (in base units) from batches in the given order.
        Returns what is left of this ingredient across all batches, in base units.
        Emptied batches are zeroed and deleted so later lines skip them.
        """
        remaining_needed = required_base
        left = 0.0
        for item in items:
            if float(item.quantity) <= 0:
                continue
            quantity, _ = matching.to_base_unit(item.quantity, item.unit)
            factor = quantity / float(item.quantity) if float(item.quantity) else 1
            if remaining_needed > 0:
                take = min(quantity, remaining_needed)
                remaining_needed -= take
                quantity -= take
                if quantity <= 1e-9:
                    logger.debug(f"Fridge batch {item.fridge_item_id} used up")
                    item.quantity = Decimal("0")
                    db.delete(item)
                    continue
                item.quantity = Decimal(str(round(quantity / factor, 3)))
            left += quantity
        if remaining_needed > 1e-9:
            raise ServiceValidationError(
                f"Not enough {name} in fridge",
                details={"name": name, "missing": round(remaining_needed, 3)},
                code="INSUFFICIENT_INGREDIENTS",
            )
        return left
