"""
Base repository interface for data access layer.
Follows the Repository pattern to keep SQLAlchemy queries out of services.
"""

from typing import Generic, TypeVar, Optional, List, Type
from uuid import UUID
from sqlalchemy.orm import Session, Query
from abc import ABC

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common CRUD operations.

    Methods named ``add_*`` / ``flush`` leave the transaction open so a service
    can group several writes into one commit; ``create`` / ``update`` /
    ``delete`` commit immediately.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: UUID) -> Optional[ModelType]:
        """
        Get entity by ID.

        Subclasses override this with their specific ID column
        (user_id, fridge_item_id, recipe_id, ...).
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement get_by_id() with specific ID field"
        )

    def get_all(self, skip: int = 0, limit: int = 100) -> List[ModelType]:
        """Get all entities with pagination"""
        return self.db.query(self.model).offset(skip).limit(limit).all()

    def count(self) -> int:
        return self.db.query(self.model).count()

    def create(self, entity: ModelType) -> ModelType:
        """Create new entity"""
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def add(self, entity: ModelType) -> ModelType:
        """Stage entity in the current transaction without committing"""
        self.db.add(entity)
        self.db.flush()
        return entity

    def update(self, entity: ModelType) -> ModelType:
        """Update existing entity"""
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity_id: UUID) -> bool:
        """Delete entity by ID"""
        entity = self.get_by_id(entity_id)
        if entity:
            self.db.delete(entity)
            self.db.commit()
            return True
        return False

    def exists(self, entity_id: UUID) -> bool:
        """Check if entity exists"""
        return self.get_by_id(entity_id) is not None

    def _locked(self, query: Query) -> Query:
        """Apply SELECT ... FOR UPDATE where the backend supports row locks."""
        if self.db.get_bind().dialect.name == "sqlite":
            return query
        return query.with_for_update(of=self.model)
