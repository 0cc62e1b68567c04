"""
Cart, orders, recipe ownership and the chef token ledger.
"""

from sqlalchemy import (
    Column,
    Text,
    DateTime,
    ForeignKey,
    Integer,
    Uuid,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.models.user import enum_column
from domain.enums import OrderStatus, TransactionType


class CartItem(Base):
    """Recipe waiting in a user's cart"""

    __tablename__ = "cart_item"

    cart_item_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    recipe_id = Column(
        Uuid, ForeignKey("recipe.recipe_id", ondelete="CASCADE"), nullable=False
    )
    quantity = Column(Integer, nullable=False, default=1)
    added_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("AppUser", back_populates="cart_items")
    recipe = relationship("Recipe", lazy="joined")

    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", name="uq_cart_user_recipe"),
        CheckConstraint("quantity >= 1", name="ck_cart_quantity_positive"),
    )


class Order(Base):
    """Completed checkout"""

    __tablename__ = "orders"

    order_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    status = Column(
        enum_column(OrderStatus, "order_status"),
        nullable=False,
        default=OrderStatus.COMPLETED,
    )
    total_tokens = Column(Integer, nullable=False)
    idempotency_key = Column(Text)
    contact_name = Column(Text)
    contact_email = Column(Text)
    contact_phone = Column(Text)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "idempotency_key", name="uq_order_user_key"),
    )


class OrderItem(Base):
    """Line of a completed order, priced at checkout time"""

    __tablename__ = "order_item"

    order_item_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(
        Uuid, ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False
    )
    recipe_id = Column(Uuid, ForeignKey("recipe.recipe_id", ondelete="SET NULL"))
    title = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price_tokens = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="items")


class RecipePurchase(Base):
    """Ownership of a recipe's full content"""

    __tablename__ = "recipe_purchase"

    purchase_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    recipe_id = Column(
        Uuid, ForeignKey("recipe.recipe_id", ondelete="CASCADE"), nullable=False
    )
    order_id = Column(Uuid, ForeignKey("orders.order_id", ondelete="SET NULL"))
    price_tokens = Column(Integer, nullable=False, default=0)
    purchased_at = Column(DateTime(timezone=True), server_default=func.now())

    recipe = relationship("Recipe", lazy="joined")

    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", name="uq_purchase_user_recipe"),
    )


class TokenTransaction(Base):
    """Chef token ledger entry; amount is signed"""

    __tablename__ = "token_transaction"

    transaction_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    type = Column(enum_column(TransactionType, "transaction_type"), nullable=False)
    amount = Column(Integer, nullable=False)
    balance_after = Column(Integer, nullable=False)
    description = Column(Text)
    reference = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("AppUser", back_populates="transactions")
