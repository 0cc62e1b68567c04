"""Pydantic schemas for the recipe catalog and the ingredient master table."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.enums import Difficulty, Language


class IngredientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    category: Optional[str] = None
    default_unit: str = "g"
    price_per_unit: Optional[float] = Field(None, ge=0)
    shelf_life_days: Optional[int] = Field(None, ge=0, le=3650)

    @field_validator("name")
    def normalize_name(cls, v):
        return v.strip().lower()


class IngredientUpdate(BaseModel):
    category: Optional[str] = None
    default_unit: Optional[str] = None
    price_per_unit: Optional[float] = Field(None, ge=0)
    shelf_life_days: Optional[int] = Field(None, ge=0, le=3650)


class IngredientResponse(BaseModel):
    ingredient_id: UUID
    name: str
    category: Optional[str]
    default_unit: str
    price_per_unit: Optional[float]
    shelf_life_days: Optional[int]

    model_config = ConfigDict(from_attributes=True)


class RecipeIngredientIn(BaseModel):
    ingredient_id: Optional[UUID] = None
    name: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1)
    optional: bool = False


class RecipeIngredientOut(BaseModel):
    ingredient_id: Optional[UUID]
    name: str
    quantity: float
    unit: str
    optional: bool

    model_config = ConfigDict(from_attributes=True)


class RecipeStepIn(BaseModel):
    text: str = Field(..., min_length=1)
    time_minutes: Optional[int] = Field(None, ge=0)


class RecipeStepOut(BaseModel):
    position: int
    text: str
    time_minutes: Optional[int]

    model_config = ConfigDict(from_attributes=True)


class RecipeCreate(BaseModel):
    """Admin recipe creation (manual form)."""

    title: str = Field(..., min_length=1, max_length=200)
    language: Language = Language.PL
    description: Optional[str] = None
    country: Optional[str] = None
    category: Optional[str] = None
    difficulty: Difficulty = Difficulty.MEDIUM
    time_minutes: int = Field(30, ge=1, le=1440)
    servings: int = Field(1, ge=1, le=100)
    calories: Optional[int] = Field(None, ge=0)
    price_tokens: int = Field(0, ge=0)
    image_url: Optional[str] = None
    is_published: bool = False
    ingredients: List[RecipeIngredientIn] = []
    steps: List[RecipeStepIn] = []


class RecipeUpdate(BaseModel):
    """Partial update; lists replace the existing lines when given."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    country: Optional[str] = None
    category: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    time_minutes: Optional[int] = Field(None, ge=1, le=1440)
    servings: Optional[int] = Field(None, ge=1, le=100)
    calories: Optional[int] = Field(None, ge=0)
    price_tokens: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    is_published: Optional[bool] = None
    ingredients: Optional[List[RecipeIngredientIn]] = None
    steps: Optional[List[RecipeStepIn]] = None


class RecipeSummary(BaseModel):
    recipe_id: UUID
    title: str
    canonical_name: str
    language: Language
    description: Optional[str]
    country: Optional[str]
    category: Optional[str]
    difficulty: Difficulty
    time_minutes: int
    servings: int
    calories: Optional[int]
    price_tokens: int
    image_url: Optional[str]
    is_published: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RecipeDetail(RecipeSummary):
    """Full recipe; steps are empty while the content is locked."""

    ingredients: List[RecipeIngredientOut]
    steps: List[RecipeStepOut]
    is_locked: bool = False
    is_owned: bool = False
    is_saved: bool = False


class RecipePurchaseResponse(BaseModel):
    recipe_id: UUID
    price_tokens: int
    balance: int
    purchased_at: Optional[datetime] = None
