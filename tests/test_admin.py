"""
Tests for administration: courses, platform settings, ingredient catalog,
manual recipe CRUD and the admin-only guard on every /admin route.
"""

import uuid
from types import SimpleNamespace

import pytest
from sqlalchemy.orm import Session

from test_fixtures import (
    client,
    db_session,
    as_user,
    as_admin,
    make_transaction,
    make_user,
    seed_user,
    seed_ingredient,
    seed_recipe,
    seed_fridge_item,
)
from domain.enums import CourseLevel, TransactionType, UserRole
from domain.models import Recipe
from domain.schemas.course_schemas import (
    CourseCreate,
    CourseStepIn,
    CourseUpdate,
    PlatformSettingUpsert,
)
from domain.schemas.recipe_schemas import (
    IngredientCreate,
    IngredientUpdate,
    RecipeCreate,
    RecipeIngredientIn,
    RecipeStepIn,
    RecipeUpdate,
)
from services.course_service import CourseService, PlatformSettingService
from services.profile_service import ProfileService
from services.recipe_service import RecipeService
from services.wallet_service import WalletService
from app.exceptions import ConflictError, NotFoundError, ServiceValidationError


def knife_skills(steps=True):
    return CourseCreate(
        title="Knife Skills",
        description="Basic cuts for home cooks",
        level=CourseLevel.BEGINNER,
        price_tokens=20,
        photo_urls=["https://cdn.example.com/knife.jpg"],
        steps=(
            [
                CourseStepIn(title="Holding the knife", description="Pinch grip.", duration_minutes=5),
                CourseStepIn(title="Julienne", description="Thin strips.", duration_minutes=12),
            ]
            if steps
            else []
        ),
    )


# =============================================================================
# COURSES
# =============================================================================


def test_create_course_is_a_draft(db_session: Session):
    """
    Verifies:
    - steps numbered from 1, total duration summed
    - course starts unpublished and is hidden from the public list
    """
    course = CourseService.create_course(db_session, None, knife_skills())

    assert course.is_published is False
    assert [s.position for s in course.steps] == [1, 2]
    assert course.total_duration_minutes == 17
    assert CourseService.list_courses(db_session, published_only=True) == []
    assert len(CourseService.list_courses(db_session)) == 1


def test_publish_course_without_steps_rejected(db_session: Session):
    course = CourseService.create_course(db_session, None, knife_skills(steps=False))

    with pytest.raises(ServiceValidationError) as exc:
        CourseService.set_published(db_session, course.course_id, True)

    assert exc.value.code == "COURSE_HAS_NO_STEPS"


def test_published_course_cannot_lose_all_steps(db_session: Session):
    course = CourseService.create_course(db_session, None, knife_skills())
    CourseService.set_published(db_session, course.course_id, True)

    with pytest.raises(ServiceValidationError):
        CourseService.update_course(db_session, course.course_id, CourseUpdate(steps=[]))

    updated = CourseService.update_course(
        db_session,
        course.course_id,
        CourseUpdate(
            title="Knife Skills 101",
            steps=[CourseStepIn(title="Brunoise", description="Tiny cubes.", duration_minutes=8)],
        ),
    )
    assert updated.title == "Knife Skills 101"
    assert updated.total_duration_minutes == 8
    assert len(CourseService.list_courses(db_session, published_only=True)) == 1


def test_delete_course(db_session: Session):
    course_id = CourseService.create_course(db_session, None, knife_skills()).course_id

    assert CourseService.delete_course(db_session, course_id) is True
    with pytest.raises(NotFoundError):
        CourseService.get_course(db_session, course_id)


# =============================================================================
# PLATFORM SETTINGS
# =============================================================================


def test_platform_setting_upsert_and_delete(db_session: Session):
    PlatformSettingService.upsert_setting(
        db_session, "token_rate", PlatformSettingUpsert(value={"pln": 0.1}, description="PLN per token")
    )
    updated = PlatformSettingService.upsert_setting(
        db_session, "token_rate", PlatformSettingUpsert(value={"pln": 0.12})
    )

    assert updated.value == {"pln": 0.12}
    assert updated.description == "PLN per token"
    assert len(PlatformSettingService.list_settings(db_session)) == 1

    assert PlatformSettingService.delete_setting(db_session, "token_rate") is True
    assert PlatformSettingService.delete_setting(db_session, "token_rate") is False
    with pytest.raises(NotFoundError):
        PlatformSettingService.get_setting(db_session, "token_rate")


# =============================================================================
# INGREDIENT CATALOG
# =============================================================================


def test_create_ingredient_normalizes_and_rejects_duplicates(db_session: Session):
    created = RecipeService.create_ingredient(
        db_session, IngredientCreate(name="  Sour Cream ", category="dairy", shelf_life_days=10)
    )

    assert created.name == "sour cream"
    with pytest.raises(ConflictError) as exc:
        RecipeService.create_ingredient(db_session, IngredientCreate(name="sour cream"))
    assert exc.value.code == "INGREDIENT_EXISTS"


def test_update_ingredient_partial(db_session: Session):
    dill = seed_ingredient(db_session, "dill", "g", price=30.0, category="herbs")

    updated = RecipeService.update_ingredient(
        db_session, dill.ingredient_id, IngredientUpdate(shelf_life_days=5)
    )

    assert updated.shelf_life_days == 5
    assert updated.category == "herbs"
    assert float(updated.price_per_unit) == 30.0


def test_delete_ingredient_in_use(db_session: Session):
    user = seed_user(db_session)
    beet = seed_ingredient(db_session, "beetroot", "g")
    unused = seed_ingredient(db_session, "saffron", "g")
    seed_fridge_item(db_session, user, beet, 500, "g")

    with pytest.raises(ConflictError) as exc:
        RecipeService.delete_ingredient(db_session, beet.ingredient_id)

    assert exc.value.code == "INGREDIENT_IN_USE"
    assert RecipeService.delete_ingredient(db_session, unused.ingredient_id) is True


# =============================================================================
# MANUAL RECIPE CRUD
# =============================================================================


def test_create_update_publish_recipe(db_session: Session):
    flour = seed_ingredient(db_session, "flour", "g")
    recipe = RecipeService.create_recipe(
        db_session,
        None,
        RecipeCreate(
            title="Placki Ziemniaczane",
            ingredients=[
                RecipeIngredientIn(ingredient_id=flour.ingredient_id, name="flour", quantity=50, unit="g")
            ],
            steps=[RecipeStepIn(text="Grate potatoes."), RecipeStepIn(text="Fry.")],
        ),
    )

    assert recipe.canonical_name == "placki-ziemniaczane"
    assert [s.position for s in recipe.steps] == [1, 2]

    updated = RecipeService.update_recipe(
        db_session, recipe.recipe_id, RecipeUpdate(title="Potato Pancakes", price_tokens=15)
    )
    assert updated.canonical_name == "potato-pancakes"
    assert updated.price_tokens == 15
    assert len(updated.ingredients) == 1

    published = RecipeService.set_published(db_session, recipe.recipe_id, True)
    assert published.is_published is True


def test_publish_recipe_without_ingredients(db_session: Session):
    recipe = RecipeService.create_recipe(db_session, None, RecipeCreate(title="Air"))

    with pytest.raises(ServiceValidationError):
        RecipeService.set_published(db_session, recipe.recipe_id, True)


def test_delete_recipe(db_session: Session):
    flour = seed_ingredient(db_session, "flour", "g")
    recipe_id = seed_recipe(db_session, "Bread", [(flour, 500, "g")]).recipe_id

    assert RecipeService.delete_recipe(db_session, recipe_id) is True
    assert db_session.query(Recipe).count() == 0


# =============================================================================
# ROUTES
# =============================================================================


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/api/v1/admin/recipes"),
        ("get", "/api/v1/admin/courses"),
        ("get", "/api/v1/admin/settings"),
        ("get", "/api/v1/admin/users"),
        ("delete", f"/api/v1/admin/ingredients/{uuid.uuid4()}"),
    ],
)
def test_admin_routes_forbidden_for_users(as_user, method, path):
    response = getattr(client, method)(path)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ADMIN_REQUIRED"


def test_publish_course_route_error(as_admin, monkeypatch):
    def fake_publish(db, course_id, is_published):
        raise ServiceValidationError("no steps", code="COURSE_HAS_NO_STEPS")

    monkeypatch.setattr(CourseService, "set_published", staticmethod(fake_publish))

    response = client.post(f"/api/v1/admin/courses/{uuid.uuid4()}/publish")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "COURSE_HAS_NO_STEPS"


def test_public_course_hidden_while_draft(monkeypatch, as_user):
    draft = SimpleNamespace(is_published=False)
    monkeypatch.setattr(CourseService, "get_course", staticmethod(lambda db, cid: draft))

    response = client.get(f"/api/v1/courses/{uuid.uuid4()}")

    assert response.status_code == 404


def test_grant_tokens_route(as_admin, monkeypatch):
    user_id = uuid.uuid4()
    seen = {}

    def fake_grant(db, admin_id, uid, amount, reason):
        seen.update(admin_id=admin_id, user_id=uid, amount=amount)
        return make_transaction(user_id=uid, amount=amount, tx_type=TransactionType.BONUS, balance_after=amount)

    monkeypatch.setattr(WalletService, "grant", staticmethod(fake_grant))

    response = client.post(f"/api/v1/admin/users/{user_id}/tokens", json={"amount": 25})

    assert response.status_code == 201
    assert response.json()["type"] == "bonus"
    assert seen == {"admin_id": as_admin.user_id, "user_id": user_id, "amount": 25}


def test_change_role_route(as_admin, monkeypatch):
    target = make_user(role=UserRole.ADMIN, profile_type="chef")
    monkeypatch.setattr(
        ProfileService, "set_role", staticmethod(lambda db, admin_id, uid, role: target)
    )

    response = client.patch(f"/api/v1/admin/users/{target.user_id}/role", json={"role": "admin"})

    assert response.status_code == 200
    assert response.json()["role"] == "admin"


def test_setting_routes(as_admin, monkeypatch):
    row = SimpleNamespace(key="support_email", value="help@chefos.app", description=None, updated_at=None)
    monkeypatch.setattr(
        PlatformSettingService, "upsert_setting", staticmethod(lambda db, key, payload: row)
    )
    monkeypatch.setattr(
        PlatformSettingService, "delete_setting", staticmethod(lambda db, key: False)
    )

    put = client.put("/api/v1/admin/settings/support_email", json={"value": "help@chefos.app"})
    delete = client.delete("/api/v1/admin/settings/missing")

    assert put.status_code == 200
    assert put.json()["value"] == "help@chefos.app"
    assert delete.status_code == 404
