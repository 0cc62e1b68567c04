"""
Domain mappers package.
Handles transformation between ORM models and DTOs (Data Transfer Objects).
"""

from domain.mappers.recipe_mapper import RecipeMapper
from domain.mappers.fridge_mapper import FridgeMapper, freshness_for

__all__ = ["RecipeMapper", "FridgeMapper", "freshness_for"]
