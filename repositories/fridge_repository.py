"""
Fridge Repository - Data access layer for fridge inventory
"""

from typing import List, Optional
from uuid import UUID
from datetime import date, timedelta
from sqlalchemy.orm import Session
from sqlalchemy import and_

from repositories.base import BaseRepository
from domain.models import FridgeItem, FridgePrice, FridgeLoss


class FridgeRepository(BaseRepository[FridgeItem]):
    """Repository for fridge item data access"""

    def __init__(self, db: Session):
        super().__init__(db, FridgeItem)

    def get_by_id(self, fridge_item_id: UUID) -> Optional[FridgeItem]:
        return (
            self.db.query(FridgeItem)
            .filter(FridgeItem.fridge_item_id == fridge_item_id)
            .first()
        )

    def get_for_user(self, user_id: UUID, fridge_item_id: UUID) -> Optional[FridgeItem]:
        """Get item only if it belongs to the user"""
        return (
            self.db.query(FridgeItem)
            .filter(
                and_(
                    FridgeItem.fridge_item_id == fridge_item_id,
                    FridgeItem.user_id == user_id,
                )
            )
            .first()
        )

    def get_by_user_id(self, user_id: UUID) -> List[FridgeItem]:
        """All items for a user; soonest expiry first, undated last"""
        return (
            self.db.query(FridgeItem)
            .filter(FridgeItem.user_id == user_id)
            .order_by(FridgeItem.expires_at.is_(None), FridgeItem.expires_at)
            .all()
        )

    def get_items_for_decrement(
        self, user_id: UUID, ingredient_id: UUID = None, with_lock: bool = False
    ) -> List[FridgeItem]:
        """
        Batches in FIFO order (earliest expiry first), optionally for one ingredient.
        Batches without an expiry date are consumed last.
        """
        query = self.db.query(FridgeItem).filter(
            and_(FridgeItem.user_id == user_id, FridgeItem.quantity > 0)
        )
        if ingredient_id is not None:
            query = query.filter(FridgeItem.ingredient_id == ingredient_id)
        query = query.order_by(
            FridgeItem.expires_at.is_(None),
            FridgeItem.expires_at,
            FridgeItem.created_at,
        )
        if with_lock:
            query = self._locked(query)
        return query.all()

    def get_expiring_items(
        self, user_id: UUID, within_days: int, today: date = None
    ) -> List[FridgeItem]:
        today = today or date.today()
        cutoff_date = today + timedelta(days=within_days)
        return (
            self.db.query(FridgeItem)
            .filter(
                and_(
                    FridgeItem.user_id == user_id,
                    FridgeItem.expires_at.isnot(None),
                    FridgeItem.expires_at <= cutoff_date,
                )
            )
            .order_by(FridgeItem.expires_at)
            .all()
        )

    def count_for_user(self, user_id: UUID) -> int:
        return self.db.query(FridgeItem).filter(FridgeItem.user_id == user_id).count()

    def add_price(self, item: FridgeItem, price_per_unit, currency: str, source: str = None) -> FridgePrice:
        price = FridgePrice(
            fridge_item_id=item.fridge_item_id,
            price_per_unit=price_per_unit,
            currency=currency,
            source=source,
        )
        self.db.add(price)
        self.db.flush()
        return price

    def get_prices(self, fridge_item_id: UUID) -> List[FridgePrice]:
        return (
            self.db.query(FridgePrice)
            .filter(FridgePrice.fridge_item_id == fridge_item_id)
            .order_by(FridgePrice.created_at.desc())
            .all()
        )

    def add_loss(self, loss: FridgeLoss) -> FridgeLoss:
        self.db.add(loss)
        self.db.flush()
        return loss

    def get_losses(self, user_id: UUID, since: date) -> List[FridgeLoss]:
        """Losses discarded on or after ``since``, newest first"""
        return (
            self.db.query(FridgeLoss)
            .filter(FridgeLoss.user_id == user_id, FridgeLoss.discarded_on >= since)
            .order_by(FridgeLoss.discarded_on.desc(), FridgeLoss.created_at.desc())
            .all()
        )
