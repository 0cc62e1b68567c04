"""
Cooking Log Repository - recipes cooked from fridge stock
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import CookingLog


class CookingLogRepository(BaseRepository[CookingLog]):
    def __init__(self, db: Session):
        super().__init__(db, CookingLog)

    def get_by_id(self, cook_id: UUID) -> Optional[CookingLog]:
        return self.db.query(CookingLog).filter(CookingLog.cook_id == cook_id).first()

    def get_by_key(self, user_id: UUID, idempotency_key: str) -> Optional[CookingLog]:
        return (
            self.db.query(CookingLog)
            .filter(
                CookingLog.user_id == user_id,
                CookingLog.idempotency_key == idempotency_key,
            )
            .first()
        )

    def get_user_history(self, user_id: UUID, limit: int = 50) -> List[CookingLog]:
        return (
            self.db.query(CookingLog)
            .filter(CookingLog.user_id == user_id)
            .order_by(CookingLog.cooked_at.desc())
            .limit(limit)
            .all()
        )

    def add_log(
        self, user_id: UUID, recipe_id: UUID, servings_multiplier, idempotency_key: str
    ) -> CookingLog:
        """Stage a cooking log entry; the cooking transaction commits it"""
        entry = CookingLog(
            user_id=user_id,
            recipe_id=recipe_id,
            servings_multiplier=servings_multiplier,
            idempotency_key=idempotency_key,
        )
        self.db.add(entry)
        self.db.flush()
        return entry
