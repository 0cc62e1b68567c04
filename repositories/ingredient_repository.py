"""
Ingredient Repository - master ingredient catalog
"""

from typing import Dict, Iterable, List, Optional
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Ingredient, FridgeItem, RecipeIngredient


class IngredientRepository(BaseRepository[Ingredient]):
    """Repository for ingredient data access"""

    def __init__(self, db: Session):
        super().__init__(db, Ingredient)

    def get_by_id(self, ingredient_id: UUID) -> Optional[Ingredient]:
        return (
            self.db.query(Ingredient)
            .filter(Ingredient.ingredient_id == ingredient_id)
            .first()
        )

    def get_by_name(self, name: str) -> Optional[Ingredient]:
        return (
            self.db.query(Ingredient)
            .filter(func.lower(Ingredient.name) == name.strip().lower())
            .first()
        )

    def get_many(self, ingredient_ids: Iterable[UUID]) -> Dict[UUID, Ingredient]:
        """Fetch several ingredients in one query, keyed by id"""
        ids = list(set(ingredient_ids))
        if not ids:
            return {}
        rows = (
            self.db.query(Ingredient).filter(Ingredient.ingredient_id.in_(ids)).all()
        )
        return {row.ingredient_id: row for row in rows}

    def search(self, query: str = None, category: str = None, limit: int = 20) -> List[Ingredient]:
        q = self.db.query(Ingredient)
        if query:
            q = q.filter(Ingredient.name.ilike(f"%{query.strip()}%"))
        if category:
            q = q.filter(Ingredient.category == category)
        return q.order_by(Ingredient.name).limit(limit).all()

    def is_referenced(self, ingredient_id: UUID) -> bool:
        """True while any fridge batch or recipe line points at the ingredient"""
        in_fridge = (
            self.db.query(FridgeItem.fridge_item_id)
            .filter(FridgeItem.ingredient_id == ingredient_id)
            .first()
        )
        in_recipe = (
            self.db.query(RecipeIngredient.recipe_ingredient_id)
            .filter(RecipeIngredient.ingredient_id == ingredient_id)
            .first()
        )
        return in_fridge is not None or in_recipe is not None
