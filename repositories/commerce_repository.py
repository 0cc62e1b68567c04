"""
Commerce Repositories - cart lines, orders, recipe ownership and the token ledger
"""

from typing import List, Optional, Set
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import CartItem, Order, RecipePurchase, TokenTransaction
from domain.enums import TransactionType


class CartRepository(BaseRepository[CartItem]):
    """Repository for cart lines"""

    def __init__(self, db: Session):
        super().__init__(db, CartItem)

    def get_by_id(self, cart_item_id: UUID) -> Optional[CartItem]:
        return (
            self.db.query(CartItem).filter(CartItem.cart_item_id == cart_item_id).first()
        )

    def get_line(self, user_id: UUID, recipe_id: UUID) -> Optional[CartItem]:
        return (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id, CartItem.recipe_id == recipe_id)
            .first()
        )

    def get_by_user_id(self, user_id: UUID) -> List[CartItem]:
        return (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.added_at)
            .all()
        )

    def clear(self, user_id: UUID) -> int:
        count = self.db.query(CartItem).filter(CartItem.user_id == user_id).delete()
        self.db.flush()
        return count


class OrderRepository(BaseRepository[Order]):
    """Repository for completed orders"""

    def __init__(self, db: Session):
        super().__init__(db, Order)

    def get_by_id(self, order_id: UUID) -> Optional[Order]:
        return self.db.query(Order).filter(Order.order_id == order_id).first()

    def get_for_user(self, user_id: UUID, order_id: UUID) -> Optional[Order]:
        return (
            self.db.query(Order)
            .filter(Order.order_id == order_id, Order.user_id == user_id)
            .first()
        )

    def get_by_key(self, user_id: UUID, idempotency_key: str) -> Optional[Order]:
        return (
            self.db.query(Order)
            .filter(Order.user_id == user_id, Order.idempotency_key == idempotency_key)
            .first()
        )

    def get_by_user_id(self, user_id: UUID, skip: int = 0, limit: int = 50) -> List[Order]:
        return (
            self.db.query(Order)
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )


class PurchaseRepository(BaseRepository[RecipePurchase]):
    """Recipe ownership records"""

    def __init__(self, db: Session):
        super().__init__(db, RecipePurchase)

    def get_by_id(self, purchase_id: UUID) -> Optional[RecipePurchase]:
        return (
            self.db.query(RecipePurchase)
            .filter(RecipePurchase.purchase_id == purchase_id)
            .first()
        )

    def owns(self, user_id: UUID, recipe_id: UUID) -> bool:
        return (
            self.db.query(RecipePurchase)
            .filter(
                RecipePurchase.user_id == user_id,
                RecipePurchase.recipe_id == recipe_id,
            )
            .first()
            is not None
        )

    def owned_recipe_ids(self, user_id: UUID) -> Set[UUID]:
        rows = (
            self.db.query(RecipePurchase.recipe_id)
            .filter(RecipePurchase.user_id == user_id)
            .all()
        )
        return {r[0] for r in rows}

    def get_by_user_id(self, user_id: UUID) -> List[RecipePurchase]:
        return (
            self.db.query(RecipePurchase)
            .filter(RecipePurchase.user_id == user_id)
            .order_by(RecipePurchase.purchased_at.desc())
            .all()
        )


class TransactionRepository(BaseRepository[TokenTransaction]):
    """Chef token ledger"""

    def __init__(self, db: Session):
        super().__init__(db, TokenTransaction)

    def get_by_id(self, transaction_id: UUID) -> Optional[TokenTransaction]:
        return (
            self.db.query(TokenTransaction)
            .filter(TokenTransaction.transaction_id == transaction_id)
            .first()
        )

    def get_by_user_id(
        self,
        user_id: UUID,
        tx_type: TransactionType = None,
        skip: int = 0,
        limit: int = 50,
    ) -> List[TokenTransaction]:
        query = self.db.query(TokenTransaction).filter(
            TokenTransaction.user_id == user_id
        )
        if tx_type:
            query = query.filter(TokenTransaction.type == tx_type)
        return (
            query.order_by(TokenTransaction.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def totals(self, user_id: UUID):
        """(earned, spent) as positive sums of credits and debits"""
        earned = (
            self.db.query(func.coalesce(func.sum(TokenTransaction.amount), 0))
            .filter(TokenTransaction.user_id == user_id, TokenTransaction.amount > 0)
            .scalar()
        )
        spent = (
            self.db.query(func.coalesce(func.sum(TokenTransaction.amount), 0))
            .filter(TokenTransaction.user_id == user_id, TokenTransaction.amount < 0)
            .scalar()
        )
        return int(earned or 0), -int(spent or 0)
