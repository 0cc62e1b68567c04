"""
User-related database models.
"""

from sqlalchemy import (
    Column,
    Text,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    Uuid,
    Enum as SQLEnum,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import UserRole, Language


def enum_column(enum_cls, name: str):
    """Enum column persisted by value ("admin"), not by member name."""
    return SQLEnum(
        enum_cls, name=name, values_callable=lambda e: [m.value for m in e]
    )


class AppUser(Base):
    """User account model"""

    __tablename__ = "app_user"

    user_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, unique=True, nullable=False)
    display_name = Column(Text)
    phone = Column(Text)
    telegram = Column(Text)
    avatar_url = Column(Text)
    role = Column(enum_column(UserRole, "user_role"), nullable=False, default=UserRole.USER)
    language = Column(
        enum_column(Language, "language"), nullable=False, default=Language.PL
    )
    token_balance = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    settings = relationship(
        "UserSettings",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    fridge_items = relationship(
        "FridgeItem", back_populates="user", cascade="all, delete-orphan"
    )
    fridge_losses = relationship(
        "FridgeLoss", back_populates="user", cascade="all, delete-orphan"
    )
    cart_items = relationship(
        "CartItem", back_populates="user", cascade="all, delete-orphan"
    )
    transactions = relationship(
        "TokenTransaction", back_populates="user", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("token_balance >= 0", name="ck_user_token_balance_nonneg"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserSettings(Base):
    """Per-user settings document (core, culinary, AI, fridge, budget sections)"""

    __tablename__ = "user_settings"

    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        primary_key=True,
    )
    data = Column(JSON, nullable=False, default=dict)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("AppUser", back_populates="settings")
