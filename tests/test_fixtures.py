"""
Shared test fixtures and utilities for the ChefOS test suite.

This module contains common mock objects, helper functions, and test client setup
that are reused across multiple test files to ensure consistency and reduce duplication.
"""

import uuid
from types import SimpleNamespace
from datetime import datetime, date, timedelta, timezone
import sqlalchemy
from decimal import Decimal


# Helper function to generate unique emails
def unique_email(prefix: str = "test") -> str:
    """Generate unique email address using UUID to avoid conflicts"""
    return f"{prefix}-{uuid.uuid4()}@example.com"


# Realistic default user profiles
REALISTIC_USERS = {
    "default": {"display_name": "Anna Kowalska", "email_prefix": "anna.kowalska"},
    "chef": {"display_name": "Marek Nowak", "email_prefix": "marek.nowak"},
    "admin": {"display_name": "Olga Petrova", "email_prefix": "olga.petrova"},
}


# Prevent SQLAlchemy from importing DBAPI (psycopg2) during module import.
_real_create_engine = getattr(sqlalchemy, "create_engine", None)


def _dummy_create_engine(*args, **kwargs):
    """
    Simple dummy engine object; init_database is disabled below so it won't be used.
    This prevents actual database connections during testing.
    """
    return SimpleNamespace(begin=lambda *a, **k: None)


sqlalchemy.create_engine = _dummy_create_engine

# Import models and disable their init_database so TestClient startup is safe.
import domain.models as db_models

db_models.init_database = lambda: None

# Restore original create_engine in case other imports need it
if _real_create_engine is not None:
    sqlalchemy.create_engine = _real_create_engine

from fastapi.testclient import TestClient
from main import app
from api.dependencies import get_current_user, get_optional_user
from domain.enums import UserRole, Language, Difficulty, TransactionType, OrderStatus

# Create TestClient after we've disabled DB init
client = TestClient(app)


def _now():
    return datetime.now(timezone.utc)


# =============================================================================
# MOCK OBJECT FACTORIES
# =============================================================================


def make_user(
    user_id=None, email=None, display_name=None, role=UserRole.USER, token_balance=0,
    profile_type="default",
):
    """
    Create a mock user object for testing with realistic data.

    Args:
        user_id: Optional UUID for the user. Generates new UUID if not provided.
        email: User's email address. Auto-generates if not provided.
        display_name: Display name. Uses realistic default if not provided.
        role: UserRole.USER or UserRole.ADMIN.
        token_balance: Chef token balance.
        profile_type: Type of user profile (default, chef, admin).

    Returns:
        SimpleNamespace: Mock user object with the attributes routes read.

    Example:
        >>> admin = make_user(role=UserRole.ADMIN)
        >>> admin.is_admin
        True
    """
    profile = REALISTIC_USERS.get(profile_type, REALISTIC_USERS["default"])
    now = _now()
    return SimpleNamespace(
        user_id=user_id or uuid.uuid4(),
        email=email or unique_email(profile["email_prefix"]),
        display_name=display_name or profile["display_name"],
        phone=None,
        telegram=None,
        avatar_url=None,
        role=role,
        language=Language.PL,
        token_balance=token_balance,
        is_admin=role == UserRole.ADMIN,
        created_at=now,
        updated_at=now,
    )


def make_recipe(
    recipe_id=None,
    title="Pancakes",
    price_tokens=0,
    is_published=True,
    time_minutes=20,
    ingredients=None,
    steps=None,
):
    """
    Create a mock recipe with realistic ingredient lines.

    Default: pancakes for one with 200 ml milk, 2 eggs and 100 g flour.
    """
    rid = recipe_id or uuid.uuid4()
    if ingredients is None:
        ingredients = [
            SimpleNamespace(ingredient_id=uuid.uuid4(), name="milk", quantity=Decimal("200"), unit="ml", optional=False),
            SimpleNamespace(ingredient_id=uuid.uuid4(), name="egg", quantity=Decimal("2"), unit="pcs", optional=False),
            SimpleNamespace(ingredient_id=uuid.uuid4(), name="flour", quantity=Decimal("100"), unit="g", optional=False),
        ]
    if steps is None:
        steps = [
            SimpleNamespace(position=1, text="Whisk milk, eggs and flour.", time_minutes=5),
            SimpleNamespace(position=2, text="Fry thin pancakes on a hot pan.", time_minutes=15),
        ]
    return SimpleNamespace(
        recipe_id=rid,
        title=title,
        canonical_name=title.lower().replace(" ", "-"),
        language=Language.PL,
        description="Thin Polish pancakes",
        country="Poland",
        category="breakfast",
        difficulty=Difficulty.EASY,
        time_minutes=time_minutes,
        servings=1,
        calories=450,
        price_tokens=price_tokens,
        image_url=None,
        is_published=is_published,
        author_id=None,
        created_at=_now(),
        ingredients=ingredients,
        steps=steps,
    )


def make_fridge_item(
    fridge_item_id=None,
    user_id=None,
    ingredient_id=None,
    name="milk",
    quantity=Decimal("1000"),
    unit="ml",
    price_per_unit=Decimal("4.50"),
    expires_at=None,
):
    """
    Create a mock fridge batch. Default: 1 l of milk at 4.50 PLN/l expiring in 5 days.
    """
    if expires_at is None:
        expires_at = date.today() + timedelta(days=5)
    return SimpleNamespace(
        fridge_item_id=fridge_item_id or uuid.uuid4(),
        user_id=user_id or uuid.uuid4(),
        ingredient_id=ingredient_id or uuid.uuid4(),
        name=name,
        ingredient=SimpleNamespace(name=name, category="dairy"),
        quantity=quantity,
        quantity_total=quantity,
        unit=unit,
        price_per_unit=price_per_unit,
        currency="PLN",
        expires_at=expires_at,
        created_at=_now(),
    )


def make_transaction(user_id=None, amount=100, tx_type=TransactionType.PURCHASE, balance_after=100):
    return SimpleNamespace(
        transaction_id=uuid.uuid4(),
        user_id=user_id or uuid.uuid4(),
        type=tx_type,
        amount=amount,
        balance_after=balance_after,
        description=None,
        reference="card",
        created_at=_now(),
    )


def make_order(user_id=None, items=None, total_tokens=30):
    if items is None:
        items = [
            SimpleNamespace(recipe_id=uuid.uuid4(), title="Pierogi", quantity=1, unit_price_tokens=30)
        ]
    return SimpleNamespace(
        order_id=uuid.uuid4(),
        user_id=user_id or uuid.uuid4(),
        status=OrderStatus.COMPLETED,
        total_tokens=total_tokens,
        contact_name=None,
        contact_email=None,
        contact_phone=None,
        notes=None,
        items=items,
        created_at=_now(),
    )


# =============================================================================
# AUTHENTICATION OVERRIDES
# =============================================================================


def _no_db():
    yield None


def login_as(user):
    """
    Route every request through ``user`` and a null session.

    Route tests monkeypatch the service layer, so no database is touched.
    Call ``logout()`` (or use the ``as_user``/``as_admin`` fixtures) afterwards.
    """
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_optional_user] = lambda: user
    app.dependency_overrides[db_models.get_db_session] = _no_db
    return user


def logout():
    app.dependency_overrides.clear()


# =============================================================================
# DATABASE SESSION FIXTURE FOR INTEGRATION TESTS
# =============================================================================

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from app.config import settings
from typing import Generator


@pytest.fixture
def as_user():
    user = login_as(make_user(token_balance=100))
    yield user
    logout()


@pytest.fixture
def as_admin():
    user = login_as(make_user(role=UserRole.ADMIN, profile_type="admin"))
    yield user
    logout()


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a database session for integration tests.

    Each test gets a fresh in-memory SQLite database with every table
    created, so services run their real queries and commits.

    Yields:
        Session: SQLAlchemy database session
    """
    engine = create_engine(
        settings.test_database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db_models.Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        db_models.Base.metadata.drop_all(bind=engine)
        engine.dispose()


# =============================================================================
# SEED HELPERS FOR THE SQLITE SESSION
# =============================================================================


def seed_user(db, balance=0, role=UserRole.USER, email=None, display_name="Anna Kowalska"):
    """Persist a user; a positive balance is written through the ledger."""
    user = db_models.AppUser(
        email=email or unique_email("anna"),
        display_name=display_name,
        role=role,
        token_balance=balance,
    )
    db.add(user)
    db.flush()
    if balance:
        db.add(
            db_models.TokenTransaction(
                user_id=user.user_id,
                type=TransactionType.PURCHASE,
                amount=balance,
                balance_after=balance,
            )
        )
    db.commit()
    return user


def seed_ingredient(db, name, default_unit="g", price=None, shelf_life_days=None, category=None):
    """``price`` is per kg, per l or per piece."""
    ingredient = db_models.Ingredient(
        name=name,
        default_unit=default_unit,
        price_per_unit=Decimal(str(price)) if price is not None else None,
        shelf_life_days=shelf_life_days,
        category=category,
    )
    db.add(ingredient)
    db.commit()
    return ingredient


def seed_recipe(db, title, lines, price_tokens=0, is_published=True, time_minutes=20, steps=None):
    """
    Persist a recipe.

    Args:
        lines: [(Ingredient, quantity, unit)] required ingredient lines
    """
    recipe = db_models.Recipe(
        title=title,
        canonical_name=title.strip().lower().replace(" ", "-"),
        price_tokens=price_tokens,
        is_published=is_published,
        time_minutes=time_minutes,
        ingredients=[
            db_models.RecipeIngredient(
                ingredient_id=ingredient.ingredient_id,
                name=ingredient.name,
                quantity=Decimal(str(quantity)),
                unit=unit,
                position=idx,
            )
            for idx, (ingredient, quantity, unit) in enumerate(lines)
        ],
        steps=[
            db_models.RecipeStep(position=n, text=text)
            for n, text in enumerate(steps or ["Cook everything."], start=1)
        ],
    )
    db.add(recipe)
    db.commit()
    return recipe


def seed_fridge_item(db, user, ingredient, quantity, unit, days=None, price=None):
    """A fridge batch expiring ``days`` from today (None = no date)."""
    item = db_models.FridgeItem(
        user_id=user.user_id,
        ingredient_id=ingredient.ingredient_id,
        quantity=Decimal(str(quantity)),
        quantity_total=Decimal(str(quantity)),
        unit=unit,
        price_per_unit=Decimal(str(price)) if price is not None else None,
        currency="PLN",
        expires_at=date.today() + timedelta(days=days) if days is not None else None,
    )
    db.add(item)
    db.commit()
    return item


@pytest.fixture
def anonymous():
    """No identity header handling overrides; only the session is nulled."""
    app.dependency_overrides[db_models.get_db_session] = _no_db
    yield
    logout()
