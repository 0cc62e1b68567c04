"""
Fridge inventory models.
"""

from sqlalchemy import (
    Column,
    Text,
    DateTime,
    ForeignKey,
    Numeric,
    Date,
    Uuid,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.models.user import enum_column
from domain.enums import LossReason


class FridgeItem(Base):
    """A batch of one ingredient in a user's fridge"""

    __tablename__ = "fridge_item"

    fridge_item_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ingredient_id = Column(
        Uuid, ForeignKey("ingredient.ingredient_id"), nullable=False
    )
    quantity = Column(Numeric(12, 3), nullable=False, default=0)
    quantity_total = Column(Numeric(12, 3))
    unit = Column(Text, nullable=False)
    price_per_unit = Column(Numeric(10, 2))
    currency = Column(Text)
    expires_at = Column(Date)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("AppUser", back_populates="fridge_items")
    ingredient = relationship("Ingredient", lazy="joined")
    prices = relationship(
        "FridgePrice",
        back_populates="fridge_item",
        cascade="all, delete-orphan",
        order_by="FridgePrice.created_at",
    )

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_fridge_quantity_nonneg"),
    )

    @property
    def name(self) -> str:
        return self.ingredient.name if self.ingredient else ""


class FridgePrice(Base):
    """Price observations for a fridge item"""

    __tablename__ = "fridge_price"

    price_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    fridge_item_id = Column(
        Uuid,
        ForeignKey("fridge_item.fridge_item_id", ondelete="CASCADE"),
        nullable=False,
    )
    price_per_unit = Column(Numeric(10, 2), nullable=False)
    currency = Column(Text, nullable=False)
    source = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    fridge_item = relationship("FridgeItem", back_populates="prices")


class FridgeLoss(Base):
    """A discarded fridge batch, kept after the batch itself is gone"""

    __tablename__ = "fridge_loss"

    loss_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ingredient_id = Column(
        Uuid, ForeignKey("ingredient.ingredient_id", ondelete="SET NULL")
    )
    name = Column(Text, nullable=False)
    quantity = Column(Numeric(12, 3), nullable=False)
    unit = Column(Text, nullable=False)
    loss_value = Column(Numeric(10, 2), nullable=False, default=0)
    currency = Column(Text, nullable=False)
    reason = Column(enum_column(LossReason, "loss_reason"), nullable=False)
    context = Column(Text)
    added_on = Column(Date)
    expires_at = Column(Date)
    discarded_on = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("AppUser", back_populates="fridge_losses")
