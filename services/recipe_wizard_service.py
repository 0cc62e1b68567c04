"""
AI recipe wizard.

Two phases: ``preview`` turns a title, catalog ingredients and one free-form
text block into a structured draft without storing anything; ``save`` commits
an (optionally edited) draft and resolves title collisions.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
import logging
import uuid

from adapters import llm_adapter
from domain.enums import ConflictPolicy, Difficulty
from domain.models import Recipe, RecipeIngredient, RecipeStep
from domain.schemas.wizard_schemas import (
    AIRecipeInput,
    AIRecipePreview,
    NameSuggestion,
    Nutrition,
    PreviewIngredient,
    PreviewStep,
    SaveRecipeRequest,
)
from repositories import IngredientRepository, RecipeRepository
from services.recipe_service import canonicalize
from app.config import settings
from app.exceptions import ConflictError, ExternalServiceError, ServiceValidationError

logger = logging.getLogger("chefos.wizard")

# grams per unit for total_weight; ml and l are counted as water density
_WEIGHT_UNITS = {"g": 1.0, "kg": 1000.0, "ml": 1.0, "l": 1000.0}
_SUGGESTION_COUNT = 3


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return None


def normalize_steps(raw_steps: Any) -> List[PreviewStep]:
    """Drop empty steps, keep the model's order, renumber 1..n."""
    if not isinstance(raw_steps, list):
        return []
    cleaned = []
    for idx, step in enumerate(raw_steps):
        if isinstance(step, str):
            step = {"text": step}
        if not isinstance(step, dict):
            continue
        text = str(step.get("text") or "").strip()
        if not text:
            continue
        order = _as_int(step.get("order"))
        cleaned.append((order if order is not None else idx + 1, idx, text, _as_int(step.get("time"))))
    cleaned.sort(key=lambda s: (s[0], s[1]))
    return [
        PreviewStep(order=n, text=text, time=time if time and time > 0 else None)
        for n, (_, _, text, time) in enumerate(cleaned, start=1)
    ]


def total_weight_grams(ingredients: List[PreviewIngredient]) -> Optional[float]:
    """Sum of weighable ingredients in grams; None when nothing is weighable."""
    total = 0.0
    counted = False
    for ingredient in ingredients:
        factor = _WEIGHT_UNITS.get(ingredient.unit.strip().lower())
        if factor is None:
            continue
        total += ingredient.amount * factor
        counted = True
    return round(total, 1) if counted else None


def normalize_draft(
    data: Dict[str, Any], payload: AIRecipeInput, ingredients: List[PreviewIngredient]
) -> AIRecipePreview:
    steps = normalize_steps(data.get("steps"))

    time_minutes = _as_int(data.get("time_minutes"))
    if not time_minutes or time_minutes <= 0:
        step_time = sum(s.time or 0 for s in steps)
        time_minutes = step_time or None

    difficulty = str(data.get("difficulty") or "").strip().lower()
    if difficulty not in {d.value for d in Difficulty}:
        difficulty = Difficulty.MEDIUM.value

    calories = _as_int(data.get("calories"))
    if calories is not None and calories < 0:
        calories = None
    raw_nutrition = data.get("nutrition") if isinstance(data.get("nutrition"), dict) else {}
    nutrition = Nutrition(
        calories=calories or 0,
        protein=float(raw_nutrition.get("protein") or 0),
        carbs=float(raw_nutrition.get("carbs") or 0),
        fat=float(raw_nutrition.get("fat") or 0),
    )

    servings = _as_int(data.get("servings")) or 1
    servings = min(max(servings, 1), 100)

    title = payload.title.strip()
    description = str(data.get("description") or "").strip()
    return AIRecipePreview(
        title=title,
        language=payload.language,
        canonical_name=canonicalize(title),
        description=description or None,
        servings=servings,
        time_minutes=time_minutes,
        difficulty=difficulty,
        calories=calories,
        nutrition=nutrition,
        total_weight=total_weight_grams(ingredients),
        ingredients=ingredients,
        steps=steps,
    )


class RecipeWizardService:
    @staticmethod
    def _known_ingredients(db: Session, ids) -> dict:
        """Catalog rows for ``ids``; any id missing from the catalog is a 400."""
        catalog = IngredientRepository(db).get_many(ids)
        unknown = [str(i) for i in ids if i not in catalog]
        if unknown:
            raise ServiceValidationError(
                "Unknown ingredients in recipe",
                details={"ingredient_ids": unknown},
                code="UNKNOWN_INGREDIENT",
            )
        return catalog

    @staticmethod
    def _catalog_ingredients(db: Session, payload: AIRecipeInput) -> List[PreviewIngredient]:
        """Resolve every input line against the ingredient catalog."""
        catalog = RecipeWizardService._known_ingredients(
            db, [line.ingredient_id for line in payload.ingredients]
        )
        return [
            PreviewIngredient(
                ingredient_id=line.ingredient_id,
                name=catalog[line.ingredient_id].name,
                amount=line.quantity,
                unit=line.unit.strip().lower(),
            )
            for line in payload.ingredients
        ]

    @staticmethod
    def preview(db: Session, payload: AIRecipeInput) -> AIRecipePreview:
        """
        Structure raw cooking notes into a draft. Nothing is stored.

        Raises:
            ServiceValidationError: an ingredient is not in the catalog
            ExternalServiceError: wizard disabled or the AI call failed
        """
        if not settings.ai_enabled:
            raise ExternalServiceError("AI recipe wizard is disabled")
        ingredients = RecipeWizardService._catalog_ingredients(db, payload)

        data = llm_adapter.structure_recipe(
            title=payload.title,
            ingredients=[
                {"name": i.name, "quantity": i.amount, "unit": i.unit} for i in ingredients
            ],
            raw_cooking_text=payload.raw_cooking_text,
            language=payload.language.value,
        )
        draft = normalize_draft(data, payload, ingredients)
        logger.info(
            f"AI preview for '{draft.title}': {len(draft.steps)} steps, "
            f"{draft.time_minutes} min, difficulty={draft.difficulty.value}"
        )
        return draft

    @staticmethod
    def suggest_titles(db: Session, title: str, language) -> List[NameSuggestion]:
        """Free alternative titles: '<title> (2)', '<title> (3)', ..."""
        recipe_repo = RecipeRepository(db)
        base = title.strip()
        taken_titles = recipe_repo.titles_like(base)
        taken_names = recipe_repo.canonical_names()
        suggestions = []
        n = 2
        while len(suggestions) < _SUGGESTION_COUNT:
            candidate = f"{base} ({n})"
            if (
                candidate.lower() not in taken_titles
                and canonicalize(candidate) not in taken_names
            ):
                suggestions.append(NameSuggestion(title=candidate, language=language))
            n += 1
        return suggestions

    @staticmethod
    def save(db: Session, author_id: uuid.UUID, payload: SaveRecipeRequest) -> Recipe:
        """
        Commit a draft.

        On a name collision (same canonical name, or same title in the same
        language) the ``on_conflict`` policy decides:
        fail -> 409 RECIPE_NAME_EXISTS with suggestions in details,
        rename -> saved under the first suggestion,
        overwrite -> the existing recipe's content is replaced.
        """
        if not payload.ingredients:
            raise ServiceValidationError("Recipe needs at least one ingredient")
        RecipeWizardService._known_ingredients(
            db,
            [line.ingredient_id for line in payload.ingredients if line.ingredient_id is not None],
        )

        recipe_repo = RecipeRepository(db)
        title = payload.title.strip()
        canonical_name = canonicalize(title)
        existing = recipe_repo.find_name_conflict(canonical_name, title, payload.language)

        if existing and payload.on_conflict == ConflictPolicy.FAIL:
            suggestions = RecipeWizardService.suggest_titles(db, title, payload.language)
            raise ConflictError(
                f"Recipe '{title}' already exists",
                details={
                    "existing_recipe_id": str(existing.recipe_id),
                    "suggestions": [s.model_dump(mode="json") for s in suggestions],
                },
                code="RECIPE_NAME_EXISTS",
            )
        if existing and payload.on_conflict == ConflictPolicy.RENAME:
            title = RecipeWizardService.suggest_titles(db, title, payload.language)[0].title
            canonical_name = canonicalize(title)
            logger.info(f"Recipe title collision resolved by renaming to '{title}'")
            existing = None

        try:
            recipe = existing or Recipe(author_id=author_id, is_published=False)
            recipe.title = title
            recipe.canonical_name = canonical_name
            recipe.language = payload.language
            recipe.description = payload.description
            recipe.servings = payload.servings
            recipe.time_minutes = payload.time_minutes or sum(s.time or 0 for s in payload.steps) or 30
            recipe.difficulty = payload.difficulty
            recipe.calories = payload.calories if payload.calories is not None else (
                payload.nutrition.calories if payload.nutrition else None
            )
            recipe.country = payload.country
            recipe.category = payload.category
            recipe.price_tokens = payload.price_tokens
            recipe.ingredients = [
                RecipeIngredient(
                    ingredient_id=line.ingredient_id,
                    name=line.name.strip(),
                    quantity=line.amount,
                    unit=line.unit,
                    position=idx,
                )
                for idx, line in enumerate(payload.ingredients)
            ]
            recipe.steps = [
                RecipeStep(position=n, text=step.text.strip(), time_minutes=step.time)
                for n, step in enumerate(
                    sorted(payload.steps, key=lambda s: s.order), start=1
                )
            ]
            if existing is None:
                db.add(recipe)
            db.commit()
            db.refresh(recipe)
        except Exception:
            db.rollback()
            raise

        action = "overwritten" if existing else "created"
        logger.info(f"Wizard recipe '{recipe.title}' {action} ({recipe.recipe_id})")
        return recipe

    @staticmethod
    def create_ai(db: Session, author_id: uuid.UUID, payload: AIRecipeInput) -> Recipe:
        """Preview and save in one call; a name collision fails with suggestions."""
        draft = RecipeWizardService.preview(db, payload)
        return RecipeWizardService.save(
            db,
            author_id,
            SaveRecipeRequest(**draft.model_dump(), on_conflict=ConflictPolicy.FAIL),
        )
