"""
Ingredient model - Master ingredient table.
Single source of truth for all ingredients across the system.
"""

from sqlalchemy import Column, Text, Integer, Numeric, DateTime, Uuid, UniqueConstraint
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class Ingredient(Base):
    """
    Master ingredient table - single source of truth.

    Recipes, fridge items and the AI wizard reference ingredients by
    ingredient_id. price_per_unit is quoted per kg, per l, or per piece,
    matching default_unit.
    """

    __tablename__ = "ingredient"

    ingredient_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, index=True)
    category = Column(Text)
    default_unit = Column(Text, nullable=False, default="g")
    price_per_unit = Column(Numeric(10, 2))
    shelf_life_days = Column(Integer)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (UniqueConstraint("name", name="uq_ingredient_name"),)

    def __repr__(self):
        return f"<Ingredient(id={self.ingredient_id}, name='{self.name}')>"
