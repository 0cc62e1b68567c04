"""
Recipe Repository - catalog queries and per-user recipe activity
"""

from typing import List, Optional, Set, Tuple
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Recipe, SavedRecipe, AssistantView
from domain.enums import Language


class RecipeRepository(BaseRepository[Recipe]):
    """Repository for recipe catalog data access"""

    def __init__(self, db: Session):
        super().__init__(db, Recipe)

    def get_by_id(self, recipe_id: UUID) -> Optional[Recipe]:
        return self.db.query(Recipe).filter(Recipe.recipe_id == recipe_id).first()

    def get_published(self) -> List[Recipe]:
        """Every published recipe, used as the matching candidate set"""
        return (
            self.db.query(Recipe)
            .filter(Recipe.is_published.is_(True))
            .order_by(Recipe.created_at, Recipe.title)
            .all()
        )

    def search(
        self,
        search: str = None,
        category: str = None,
        country: str = None,
        difficulty: str = None,
        max_time: int = None,
        published_only: bool = True,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Recipe], int]:
        """Filtered page of recipes plus the total count before paging"""
        query = self.db.query(Recipe)
        if published_only:
            query = query.filter(Recipe.is_published.is_(True))
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                Recipe.title.ilike(pattern) | Recipe.description.ilike(pattern)
            )
        if category:
            query = query.filter(Recipe.category == category)
        if country:
            query = query.filter(Recipe.country == country)
        if difficulty:
            query = query.filter(Recipe.difficulty == difficulty)
        if max_time:
            query = query.filter(Recipe.time_minutes <= max_time)

        total = query.count()
        items = (
            query.order_by(Recipe.created_at.desc(), Recipe.title)
            .offset(skip)
            .limit(limit)
            .all()
        )
        return items, total

    def find_name_conflict(
        self, canonical_name: str, title: str, language: Language, exclude_id: UUID = None
    ) -> Optional[Recipe]:
        """Recipe with the same canonical name, or same title (case-insensitive) in the language"""
        query = self.db.query(Recipe).filter(
            (Recipe.canonical_name == canonical_name)
            | (
                (func.lower(Recipe.title) == title.strip().lower())
                & (Recipe.language == language)
            )
        )
        if exclude_id:
            query = query.filter(Recipe.recipe_id != exclude_id)
        return query.first()

    def titles_like(self, prefix: str) -> Set[str]:
        """Lower-cased titles starting with ``prefix``, taken literally."""
        literal = (
            prefix.strip().lower()
            .replace("\\", "\\\\")
            .replace("%", "\\%")
            .replace("_", "\\_")
        )
        rows = (
            self.db.query(Recipe.title)
            .filter(func.lower(Recipe.title).like(f"{literal}%", escape="\\"))
            .all()
        )
        return {r[0].lower() for r in rows}

    def canonical_names(self) -> Set[str]:
        return {r[0] for r in self.db.query(Recipe.canonical_name).all()}


class SavedRecipeRepository(BaseRepository[SavedRecipe]):
    """Bookmarked recipes"""

    def __init__(self, db: Session):
        super().__init__(db, SavedRecipe)

    def get(self, user_id: UUID, recipe_id: UUID) -> Optional[SavedRecipe]:
        return (
            self.db.query(SavedRecipe)
            .filter(SavedRecipe.user_id == user_id, SavedRecipe.recipe_id == recipe_id)
            .first()
        )

    def get_by_id(self, entity_id):
        user_id, recipe_id = entity_id
        return self.get(user_id, recipe_id)

    def get_by_user_id(self, user_id: UUID) -> List[SavedRecipe]:
        return (
            self.db.query(SavedRecipe)
            .filter(SavedRecipe.user_id == user_id)
            .order_by(SavedRecipe.saved_at.desc())
            .all()
        )


class AssistantViewRepository(BaseRepository[AssistantView]):
    """Recipes already shown by the cooking assistant"""

    def __init__(self, db: Session):
        super().__init__(db, AssistantView)

    def get_by_id(self, entity_id):
        user_id, recipe_id = entity_id
        return (
            self.db.query(AssistantView)
            .filter(
                AssistantView.user_id == user_id, AssistantView.recipe_id == recipe_id
            )
            .first()
        )

    def get_viewed_ids(self, user_id: UUID) -> Set[UUID]:
        rows = (
            self.db.query(AssistantView.recipe_id)
            .filter(AssistantView.user_id == user_id)
            .all()
        )
        return {r[0] for r in rows}

    def mark_viewed(self, user_id: UUID, recipe_id: UUID) -> AssistantView:
        existing = self.get_by_id((user_id, recipe_id))
        if existing:
            return existing
        view = AssistantView(user_id=user_id, recipe_id=recipe_id)
        self.db.add(view)
        self.db.flush()
        return view

    def clear(self, user_id: UUID) -> int:
        count = (
            self.db.query(AssistantView)
            .filter(AssistantView.user_id == user_id)
            .delete()
        )
        self.db.flush()
        return count
