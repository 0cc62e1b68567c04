"""
Recipe domain mappers.
Handles transformation between recipe ORM models and catalog DTOs.
"""

from domain.models import Recipe
from domain.schemas.recipe_schemas import (
    RecipeSummary,
    RecipeDetail,
    RecipeIngredientOut,
    RecipeStepOut,
)


class RecipeMapper:
    """Mapper for recipe catalog transformations."""

    @staticmethod
    def to_summary(recipe: Recipe) -> RecipeSummary:
        return RecipeSummary.model_validate(recipe)

    @staticmethod
    def to_detail(
        recipe: Recipe, locked: bool, owned: bool = False, saved: bool = False
    ) -> RecipeDetail:
        """
        Convert a Recipe ORM model to RecipeDetail.

        Ingredients are always visible so the fridge match can be shown before
        purchase; steps are withheld while the recipe is locked for the caller.
        """
        summary = RecipeSummary.model_validate(recipe)
        return RecipeDetail(
            **summary.model_dump(),
            ingredients=[
                RecipeIngredientOut.model_validate(i) for i in recipe.ingredients
            ],
            steps=(
                []
                if locked
                else [RecipeStepOut.model_validate(s) for s in recipe.steps]
            ),
            is_locked=locked,
            is_owned=owned,
            is_saved=saved,
        )
