"""
Recipe catalog models and per-user recipe activity.
"""

from sqlalchemy import (
    Column,
    Text,
    DateTime,
    ForeignKey,
    Numeric,
    Integer,
    Boolean,
    Uuid,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.models.user import enum_column
from domain.enums import Difficulty, Language


class Recipe(Base):
    """Catalog recipe, sold for chef tokens"""

    __tablename__ = "recipe"

    recipe_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    canonical_name = Column(Text, nullable=False, index=True)
    language = Column(enum_column(Language, "language"), nullable=False, default=Language.PL)
    description = Column(Text)
    country = Column(Text)
    category = Column(Text)
    difficulty = Column(
        enum_column(Difficulty, "difficulty"), nullable=False, default=Difficulty.MEDIUM
    )
    time_minutes = Column(Integer, nullable=False, default=30)
    servings = Column(Integer, nullable=False, default=1)
    calories = Column(Integer)
    price_tokens = Column(Integer, nullable=False, default=0)
    image_url = Column(Text)
    is_published = Column(Boolean, nullable=False, default=False)
    author_id = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.position",
        lazy="selectin",
    )
    steps = relationship(
        "RecipeStep",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeStep.position",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("price_tokens >= 0", name="ck_recipe_price_nonneg"),
        CheckConstraint("servings >= 1", name="ck_recipe_servings_positive"),
    )


class RecipeIngredient(Base):
    """Ingredient line of a recipe"""

    __tablename__ = "recipe_ingredient"

    recipe_ingredient_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    recipe_id = Column(
        Uuid, ForeignKey("recipe.recipe_id", ondelete="CASCADE"), nullable=False
    )
    ingredient_id = Column(Uuid, ForeignKey("ingredient.ingredient_id"))
    name = Column(Text, nullable=False)
    quantity = Column(Numeric(12, 3), nullable=False)
    unit = Column(Text, nullable=False)
    optional = Column(Boolean, nullable=False, default=False)
    position = Column(Integer, nullable=False, default=0)

    recipe = relationship("Recipe", back_populates="ingredients")


class RecipeStep(Base):
    """Cooking step of a recipe"""

    __tablename__ = "recipe_step"

    recipe_step_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    recipe_id = Column(
        Uuid, ForeignKey("recipe.recipe_id", ondelete="CASCADE"), nullable=False
    )
    position = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    time_minutes = Column(Integer)

    recipe = relationship("Recipe", back_populates="steps")


class SavedRecipe(Base):
    """Recipe bookmarked by a user"""

    __tablename__ = "saved_recipe"

    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), primary_key=True
    )
    recipe_id = Column(
        Uuid, ForeignKey("recipe.recipe_id", ondelete="CASCADE"), primary_key=True
    )
    saved_at = Column(DateTime(timezone=True), server_default=func.now())

    recipe = relationship("Recipe", lazy="joined")


class CookingLog(Base):
    """Recipe cooked from fridge stock"""

    __tablename__ = "cooking_log"

    cook_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    recipe_id = Column(
        Uuid, ForeignKey("recipe.recipe_id", ondelete="CASCADE"), nullable=False
    )
    servings_multiplier = Column(Numeric(6, 2), nullable=False, default=1)
    idempotency_key = Column(Text, nullable=False)
    cooked_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "idempotency_key", name="uq_cooking_log_key"),
    )


class AssistantView(Base):
    """Recipe already shown to a user by the cooking assistant"""

    __tablename__ = "assistant_view"

    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), primary_key=True
    )
    recipe_id = Column(
        Uuid, ForeignKey("recipe.recipe_id", ondelete="CASCADE"), primary_key=True
    )
    viewed_at = Column(DateTime(timezone=True), server_default=func.now())
