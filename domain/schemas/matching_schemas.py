"""Pydantic schemas for fridge-to-recipe matching and the cooking assistant."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.enums import MatchScenario, SelectionOutcome


class FridgeStock(BaseModel):
    """Available quantity of one ingredient, already converted to its base unit."""

    ingredient_id: Optional[UUID] = None
    name: str
    quantity: float
    unit: str
    price_per_unit: Optional[float] = None  # per base unit (g, ml, pcs)
    expires_at: Optional[date] = None


class MatchedIngredient(BaseModel):
    ingredient_id: Optional[UUID] = None
    name: str
    quantity: float
    unit: str
    available: float
    expiring_soon: bool = False


class MissingIngredient(BaseModel):
    ingredient_id: Optional[UUID] = None
    name: str
    quantity: float
    unit: str
    available: float = 0
    missing_quantity: float
    estimated_cost: float = 0


class MatchEconomy(BaseModel):
    used_value: float = 0
    cost_to_complete: float = 0
    total_recipe_cost: float = 0
    waste_risk_saved: float = 0
    currency: str = "PLN"


class RecipeMatch(BaseModel):
    """One recipe evaluated against the user's fridge."""

    recipe_id: UUID
    title: str
    canonical_name: str
    country: Optional[str] = None
    category: Optional[str] = None
    difficulty: Optional[str] = None
    image_url: Optional[str] = None
    cooking_time: int
    servings: int
    coverage: float = Field(..., ge=0, le=100)
    score: float = Field(..., ge=0, le=100)
    used_ingredients: List[MatchedIngredient] = []
    missing_ingredients: List[MissingIngredient] = []
    used_count: int = 0
    missing_count: int = 0
    can_cook: bool = False
    scenario: MatchScenario
    economy: MatchEconomy


class RecipeMatchListResponse(BaseModel):
    count: int
    recipes: List[RecipeMatch]


class AvailableRecipesResponse(BaseModel):
    """Matches grouped by how close the user is to cooking them."""

    can_cook: List[RecipeMatch]
    almost_cook: List[RecipeMatch]
    need_to_buy: List[RecipeMatch]
    can_cook_count: int
    almost_cook_count: int
    need_to_buy_count: int
    total_count: int


class Selection(BaseModel):
    outcome: SelectionOutcome
    recipe: Optional[RecipeMatch] = None
    candidates: int = 0
    viewed_count: int = 0


class AssistantNextRequest(BaseModel):
    exclude_recipe_ids: List[UUID] = []


class AssistantNextResponse(BaseModel):
    success: bool
    code: SelectionOutcome
    recipe: Optional[RecipeMatch] = None
    viewed_count: int
    fridge_items: int
    total_recipes: int


class CookRecipeRequest(BaseModel):
    servings_multiplier: float = Field(default=1, gt=0, le=20)
    idempotency_key: str = Field(..., min_length=1, max_length=200)


class IngredientUsage(BaseModel):
    name: str
    quantity_used: float
    unit: str
    remaining_in_fridge: float


class CookRecipeResponse(BaseModel):
    success: bool
    message: str
    recipe_id: UUID
    ingredients_used: List[IngredientUsage]
    used_value: float
    waste_risk_saved: float
    currency: str
