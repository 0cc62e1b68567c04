"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.user_repository import UserRepository, UserSettingsRepository
from repositories.ingredient_repository import IngredientRepository
from repositories.fridge_repository import FridgeRepository
from repositories.recipe_repository import (
    RecipeRepository,
    SavedRecipeRepository,
    AssistantViewRepository,
)
from repositories.cooking_log_repository import CookingLogRepository
from repositories.commerce_repository import (
    CartRepository,
    OrderRepository,
    PurchaseRepository,
    TransactionRepository,
)
from repositories.course_repository import CourseRepository, PlatformSettingRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "UserSettingsRepository",
    "IngredientRepository",
    "FridgeRepository",
    "RecipeRepository",
    "SavedRecipeRepository",
    "AssistantViewRepository",
    "CookingLogRepository",
    "CartRepository",
    "OrderRepository",
    "PurchaseRepository",
    "TransactionRepository",
    "CourseRepository",
    "PlatformSettingRepository",
]
