"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.user import AppUser, UserSettings
from domain.models.ingredient import Ingredient
from domain.models.fridge import FridgeItem, FridgePrice, FridgeLoss
from domain.models.recipe import (
    Recipe,
    RecipeIngredient,
    RecipeStep,
    SavedRecipe,
    CookingLog,
    AssistantView,
)
from domain.models.commerce import (
    CartItem,
    Order,
    OrderItem,
    RecipePurchase,
    TokenTransaction,
)
from domain.models.course import Course, CourseStep, PlatformSetting

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # User models
    "AppUser",
    "UserSettings",
    # Ingredient models
    "Ingredient",
    # Fridge models
    "FridgeItem",
    "FridgePrice",
    "FridgeLoss",
    # Recipe models
    "Recipe",
    "RecipeIngredient",
    "RecipeStep",
    "SavedRecipe",
    "CookingLog",
    "AssistantView",
    # Commerce models
    "CartItem",
    "Order",
    "OrderItem",
    "RecipePurchase",
    "TokenTransaction",
    # Academy / admin models
    "Course",
    "CourseStep",
    "PlatformSetting",
]
