"""
Tests for the AI recipe wizard.

The OpenAI call is replaced by monkeypatching ``llm_adapter.structure_recipe``
so every test is offline. Covers draft normalization, preview, the three name
conflict policies, and the admin routes that expose them.
"""

import uuid

import pytest
from sqlalchemy.orm import Session

from test_fixtures import (
    client,
    db_session,
    as_admin,
    as_user,
    make_recipe,
    seed_ingredient,
    seed_recipe,
)
from adapters import llm_adapter
from domain.enums import ConflictPolicy, Difficulty, Language
from domain.models import Recipe
from domain.schemas.wizard_schemas import (
    AIRecipeInput,
    AIRecipeIngredientIn,
    PreviewIngredient,
    PreviewStep,
    SaveRecipeRequest,
)
from repositories import RecipeRepository
from services.recipe_wizard_service import (
    RecipeWizardService,
    normalize_steps,
    total_weight_grams,
)
from app.config import settings
from app.exceptions import ConflictError, ExternalServiceError, ServiceValidationError

MODEL_DRAFT = {
    "title": "Pierogi Ruskie",
    "description": "  Dumplings with potato and cheese.  ",
    "servings": 4,
    "difficulty": "HARD",
    "calories": 620,
    "nutrition": {"protein": 18, "carbs": 80, "fat": 22},
    "steps": [
        {"order": 2, "text": "Fill and fold the dough.", "time": 30},
        {"order": 1, "text": "Mix flour and water.", "time": 15},
        {"order": 3, "text": "   "},
        "Boil for 5 minutes.",
    ],
}


@pytest.fixture
def fake_llm(monkeypatch):
    calls = []

    def structure_recipe(title, ingredients, raw_cooking_text, language):
        calls.append(
            {"title": title, "ingredients": ingredients, "text": raw_cooking_text, "language": language}
        )
        return dict(MODEL_DRAFT)

    monkeypatch.setattr(llm_adapter, "structure_recipe", structure_recipe)
    return calls


@pytest.fixture
def catalog(db_session: Session):
    return {
        "flour": seed_ingredient(db_session, "flour", "g"),
        "potato": seed_ingredient(db_session, "potato", "g"),
        "egg": seed_ingredient(db_session, "egg", "pcs"),
    }


def wizard_input(catalog, title="Pierogi Ruskie"):
    return AIRecipeInput(
        title=title,
        ingredients=[
            AIRecipeIngredientIn(ingredient_id=catalog["flour"].ingredient_id, quantity=0.5, unit="KG"),
            AIRecipeIngredientIn(ingredient_id=catalog["potato"].ingredient_id, quantity=400, unit="g"),
            AIRecipeIngredientIn(ingredient_id=catalog["egg"].ingredient_id, quantity=1, unit="pcs"),
        ],
        raw_cooking_text="Make dough, fill with potato and cheese, boil.",
        language=Language.PL,
    )


def draft_request(title="Pierogi Ruskie", on_conflict=ConflictPolicy.FAIL, steps=None):
    return SaveRecipeRequest(
        title=title,
        language=Language.PL,
        ingredients=[PreviewIngredient(name="flour", amount=500, unit="g")],
        steps=steps or [PreviewStep(order=1, text="Cook.", time=10)],
        on_conflict=on_conflict,
    )


# =============================================================================
# NORMALIZATION
# =============================================================================


def test_normalize_steps_orders_and_renumbers():
    steps = normalize_steps(MODEL_DRAFT["steps"])

    assert [s.text for s in steps] == [
        "Mix flour and water.",
        "Fill and fold the dough.",
        "Boil for 5 minutes.",
    ]
    assert [s.order for s in steps] == [1, 2, 3]
    assert steps[2].time is None


def test_normalize_steps_rejects_garbage():
    assert normalize_steps(None) == []
    assert normalize_steps("not a list") == []
    assert normalize_steps([42, {"text": ""}]) == []


def test_normalize_steps_ignores_infinite_numbers():
    steps = normalize_steps([{"order": float("inf"), "text": "Boil.", "time": float("inf")}])

    assert [(s.order, s.text, s.time) for s in steps] == [(1, "Boil.", None)]


def test_total_weight_counts_weighable_units():
    ingredients = [
        PreviewIngredient(name="flour", amount=0.5, unit="kg"),
        PreviewIngredient(name="milk", amount=250, unit="ml"),
        PreviewIngredient(name="egg", amount=2, unit="pcs"),
    ]
    assert total_weight_grams(ingredients) == 750.0
    assert total_weight_grams([PreviewIngredient(name="egg", amount=2, unit="pcs")]) is None


# =============================================================================
# PREVIEW
# =============================================================================


def test_preview_builds_normalized_draft(db_session: Session, catalog, fake_llm):
    """
    Verifies:
    - catalog names and lower-cased units are sent to the model
    - difficulty is normalized, time falls back to the sum of step times
    - total weight = 500 g flour + 400 g potato
    - nothing is stored
    """
    draft = RecipeWizardService.preview(db_session, wizard_input(catalog))

    assert fake_llm[0]["ingredients"][0] == {"name": "flour", "quantity": 0.5, "unit": "kg"}
    assert fake_llm[0]["language"] == "pl"
    assert draft.title == "Pierogi Ruskie"
    assert draft.canonical_name == "pierogi-ruskie"
    assert draft.description == "Dumplings with potato and cheese."
    assert draft.difficulty == Difficulty.HARD
    assert draft.time_minutes == 45
    assert draft.servings == 4
    assert draft.nutrition.calories == 620
    assert draft.nutrition.protein == 18
    assert draft.total_weight == 900.0
    assert db_session.query(Recipe).count() == 0


def test_preview_unknown_ingredient(db_session: Session, catalog, fake_llm):
    payload = wizard_input(catalog)
    stray = uuid.uuid4()
    payload.ingredients.append(AIRecipeIngredientIn(ingredient_id=stray, quantity=1, unit="g"))

    with pytest.raises(ServiceValidationError) as exc:
        RecipeWizardService.preview(db_session, payload)

    assert exc.value.code == "UNKNOWN_INGREDIENT"
    assert exc.value.details["ingredient_ids"] == [str(stray)]
    assert fake_llm == []


def test_preview_disabled(db_session: Session, catalog, monkeypatch):
    monkeypatch.setattr(settings, "ai_enabled", False)

    with pytest.raises(ExternalServiceError):
        RecipeWizardService.preview(db_session, wizard_input(catalog))


def test_preview_without_client_is_unavailable(db_session: Session, catalog):
    llm_adapter.close()

    with pytest.raises(ExternalServiceError) as exc:
        RecipeWizardService.preview(db_session, wizard_input(catalog))

    assert exc.value.http_status == 502
    assert exc.value.code == "AI_UNAVAILABLE"


# =============================================================================
# SAVE AND CONFLICTS
# =============================================================================


def test_save_creates_unpublished_recipe(db_session: Session):
    recipe = RecipeWizardService.save(db_session, None, draft_request())

    assert recipe.is_published is False
    assert recipe.canonical_name == "pierogi-ruskie"
    assert recipe.time_minutes == 10
    assert [s.position for s in recipe.steps] == [1]


def test_save_conflict_fail_suggests_free_titles(db_session: Session):
    flour = seed_ingredient(db_session, "flour", "g")
    existing = seed_recipe(db_session, "Pierogi Ruskie", [(flour, 500, "g")])
    seed_recipe(db_session, "Pierogi Ruskie (2)", [(flour, 500, "g")])

    with pytest.raises(ConflictError) as exc:
        RecipeWizardService.save(db_session, None, draft_request())

    assert exc.value.code == "RECIPE_NAME_EXISTS"
    assert exc.value.details["existing_recipe_id"] == str(existing.recipe_id)
    assert [s["title"] for s in exc.value.details["suggestions"]] == [
        "Pierogi Ruskie (3)",
        "Pierogi Ruskie (4)",
        "Pierogi Ruskie (5)",
    ]
    assert exc.value.details["suggestions"][0]["language"] == "pl"


def test_save_conflict_is_case_insensitive(db_session: Session):
    flour = seed_ingredient(db_session, "flour", "g")
    seed_recipe(db_session, "Pierogi Ruskie", [(flour, 500, "g")])

    with pytest.raises(ConflictError):
        RecipeWizardService.save(db_session, None, draft_request(title="  pierogi ruskie "))


def test_save_conflict_rename(db_session: Session):
    flour = seed_ingredient(db_session, "flour", "g")
    seed_recipe(db_session, "Pierogi Ruskie", [(flour, 500, "g")])

    recipe = RecipeWizardService.save(
        db_session, None, draft_request(on_conflict=ConflictPolicy.RENAME)
    )

    assert recipe.title == "Pierogi Ruskie (2)"
    assert recipe.canonical_name == "pierogi-ruskie-2"
    assert db_session.query(Recipe).count() == 2


def test_save_conflict_overwrite_keeps_identity(db_session: Session):
    flour = seed_ingredient(db_session, "flour", "g")
    existing_id = seed_recipe(db_session, "Pierogi Ruskie", [(flour, 500, "g")]).recipe_id

    recipe = RecipeWizardService.save(
        db_session,
        None,
        draft_request(
            on_conflict=ConflictPolicy.OVERWRITE,
            steps=[
                PreviewStep(order=2, text="Boil.", time=5),
                PreviewStep(order=1, text="Fold.", time=20),
            ],
        ),
    )

    assert recipe.recipe_id == existing_id
    assert [s.text for s in recipe.steps] == ["Fold.", "Boil."]
    assert recipe.time_minutes == 25
    assert db_session.query(Recipe).count() == 1


def test_save_without_ingredients(db_session: Session):
    request = draft_request()
    request.ingredients = []

    with pytest.raises(ServiceValidationError):
        RecipeWizardService.save(db_session, None, request)


def test_save_rejects_ingredient_missing_from_catalog(db_session: Session, catalog):
    request = draft_request()
    stray_id = uuid.uuid4()
    request.ingredients = [
        PreviewIngredient(ingredient_id=catalog["flour"].ingredient_id, name="flour", amount=500, unit="g"),
        PreviewIngredient(ingredient_id=stray_id, name="quark", amount=250, unit="g"),
    ]

    with pytest.raises(ServiceValidationError) as exc:
        RecipeWizardService.save(db_session, None, request)

    assert exc.value.code == "UNKNOWN_INGREDIENT"
    assert exc.value.details == {"ingredient_ids": [str(stray_id)]}
    assert db_session.query(Recipe).count() == 0


def test_save_links_catalog_ingredients(db_session: Session, catalog):
    request = draft_request()
    request.ingredients = [
        PreviewIngredient(ingredient_id=catalog["flour"].ingredient_id, name="flour", amount=500, unit="g"),
        PreviewIngredient(name="salt", amount=5, unit="g"),
    ]

    recipe = RecipeWizardService.save(db_session, None, request)

    assert [i.ingredient_id for i in recipe.ingredients] == [catalog["flour"].ingredient_id, None]


def test_title_lookup_treats_wildcards_literally(db_session: Session, catalog):
    seed_recipe(db_session, "50 x Rye (2)", [(catalog["flour"], 500, "g")])
    seed_recipe(db_session, "50% Rye (3)", [(catalog["flour"], 500, "g")])
    seed_recipe(db_session, "Rye_Bread", [(catalog["flour"], 500, "g")])

    repo = RecipeRepository(db_session)

    assert repo.titles_like("50% Rye") == {"50% rye (3)"}
    assert repo.titles_like("Rye_") == {"rye_bread"}


def test_create_ai_previews_and_saves(db_session: Session, catalog, fake_llm):
    recipe = RecipeWizardService.create_ai(db_session, None, wizard_input(catalog))

    assert recipe.title == "Pierogi Ruskie"
    assert len(recipe.ingredients) == 3
    assert len(recipe.steps) == 3
    assert recipe.difficulty == Difficulty.HARD

    with pytest.raises(ConflictError):
        RecipeWizardService.create_ai(db_session, None, wizard_input(catalog))


# =============================================================================
# ROUTES
# =============================================================================


def test_wizard_routes_require_admin(as_user):
    response = client.post("/api/v1/admin/recipes/save", json={"title": "x"})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ADMIN_REQUIRED"


def test_save_route_returns_conflict_envelope(as_admin, monkeypatch):
    def fake_save(db, author_id, payload):
        raise ConflictError(
            "Recipe 'Pierogi' already exists",
            details={"suggestions": [{"title": "Pierogi (2)", "language": "pl"}]},
            code="RECIPE_NAME_EXISTS",
        )

    monkeypatch.setattr(RecipeWizardService, "save", staticmethod(fake_save))

    response = client.post(
        "/api/v1/admin/recipes/save",
        json={
            "title": "Pierogi",
            "ingredients": [{"name": "flour", "amount": 500, "unit": "g"}],
            "steps": [{"order": 1, "text": "Cook."}],
        },
    )

    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["error"]["details"]["suggestions"][0]["title"] == "Pierogi (2)"


def test_save_route_returns_detail(as_admin, monkeypatch):
    recipe = make_recipe(title="Pierogi", is_published=False)
    monkeypatch.setattr(
        RecipeWizardService, "save", staticmethod(lambda db, author_id, payload: recipe)
    )

    response = client.post(
        "/api/v1/admin/recipes/save",
        json={
            "title": "Pierogi",
            "ingredients": [{"name": "flour", "amount": 500, "unit": "g"}],
            "steps": [{"order": 1, "text": "Cook."}],
            "on_conflict": "rename",
        },
    )

    assert response.status_code == 201
    assert response.json()["title"] == "Pierogi"
    assert len(response.json()["steps"]) == 2


def test_preview_route_ai_unavailable(as_admin, monkeypatch):
    def fake_preview(db, payload):
        raise ExternalServiceError("AI provider request failed")

    monkeypatch.setattr(RecipeWizardService, "preview", staticmethod(fake_preview))

    response = client.post(
        "/api/v1/admin/recipes/preview-ai",
        json={
            "title": "Bigos",
            "ingredients": [{"ingredient_id": str(uuid.uuid4()), "quantity": 1, "unit": "kg"}],
            "raw_cooking_text": "Stew cabbage with meat for hours.",
        },
    )

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "AI_UNAVAILABLE"
