"""Pydantic schemas for the AI recipe wizard (preview, then commit)."""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.enums import ConflictPolicy, Difficulty, Language


class AIRecipeIngredientIn(BaseModel):
    ingredient_id: UUID
    quantity: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1)


class AIRecipeInput(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    ingredients: List[AIRecipeIngredientIn] = Field(..., min_length=1)
    raw_cooking_text: str = Field(..., min_length=1)
    language: Language = Language.PL


class PreviewStep(BaseModel):
    order: int
    text: str
    time: Optional[int] = None


class PreviewIngredient(BaseModel):
    ingredient_id: Optional[UUID] = None
    name: str
    amount: float
    unit: str


class Nutrition(BaseModel):
    calories: int = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0


class AIRecipePreview(BaseModel):
    """Normalized draft; also the payload accepted by save after user edits."""

    title: str = Field(..., min_length=1, max_length=200)
    language: Language = Language.PL
    canonical_name: Optional[str] = None
    description: Optional[str] = None
    servings: int = Field(1, ge=1, le=100)
    time_minutes: Optional[int] = Field(None, ge=0)
    difficulty: Difficulty = Difficulty.MEDIUM
    calories: Optional[int] = Field(None, ge=0)
    nutrition: Optional[Nutrition] = None
    total_weight: Optional[float] = None
    country: Optional[str] = None
    category: Optional[str] = None
    price_tokens: int = Field(0, ge=0)
    ingredients: List[PreviewIngredient] = []
    steps: List[PreviewStep] = []


class SaveRecipeRequest(AIRecipePreview):
    on_conflict: ConflictPolicy = ConflictPolicy.FAIL


class NameSuggestion(BaseModel):
    title: str
    language: Language
