"""
Tests for fridge-to-recipe matching.

The matching module is pure: recipes are SimpleNamespace objects, the fridge is
a list of FridgeStock in base units and ``today`` is fixed, so every number
below can be checked by hand.

Scoring reminder:
    score = 0.7 * coverage + 10 per expiring used ingredient (max 30)
            - min(cost_to_complete, 20)
"""

import uuid
from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from domain.enums import MatchScenario, SelectionOutcome
from domain.schemas.matching_schemas import FridgeStock, MatchEconomy, RecipeMatch
from services import matching

TODAY = date(2026, 3, 10)

MILK = uuid.uuid4()
EGG = uuid.uuid4()
FLOUR = uuid.uuid4()


def line(ingredient_id, name, quantity, unit, optional=False):
    return SimpleNamespace(
        ingredient_id=ingredient_id, name=name, quantity=quantity, unit=unit, optional=optional
    )


def pancakes(**overrides):
    data = dict(
        recipe_id=uuid.uuid4(),
        title="Pancakes",
        canonical_name="pancakes",
        country="Poland",
        category="breakfast",
        difficulty="easy",
        image_url=None,
        time_minutes=20,
        servings=1,
        ingredients=[
            line(MILK, "milk", 200, "ml"),
            line(EGG, "egg", 2, "pcs"),
            line(FLOUR, "flour", 100, "g"),
        ],
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def stock(ingredient_id, name, quantity, unit, price=None, days=None):
    return FridgeStock(
        ingredient_id=ingredient_id,
        name=name,
        quantity=quantity,
        unit=unit,
        price_per_unit=price,
        expires_at=TODAY + timedelta(days=days) if days is not None else None,
    )


FULL_FRIDGE = [
    stock(MILK, "milk", 1000, "ml", price=0.0045, days=1),
    stock(EGG, "egg", 6, "pcs", price=0.8, days=10),
    stock(FLOUR, "flour", 1000, "g", price=0.004, days=30),
]


def make_match(coverage, score, used_count=1, cooking_time=30, missing_count=0, country=None):
    return RecipeMatch(
        recipe_id=uuid.uuid4(),
        title=f"Recipe {coverage}/{score}",
        canonical_name="recipe",
        country=country,
        cooking_time=cooking_time,
        servings=1,
        coverage=coverage,
        score=score,
        used_count=used_count,
        missing_count=missing_count,
        can_cook=missing_count == 0,
        scenario=matching.scenario_for(missing_count),
        economy=MatchEconomy(),
    )


# =============================================================================
# UNIT CONVERSION
# =============================================================================


def test_to_base_unit_conversions():
    assert matching.to_base_unit(1.5, "kg") == (1500.0, "g")
    assert matching.to_base_unit(2, "L") == (2000.0, "ml")
    assert matching.to_base_unit(3, "szt") == (3.0, "pcs")
    # Unknown units stay as their own base
    assert matching.to_base_unit(1, "tbsp") == (1.0, "tbsp")


def test_price_per_base_unit():
    """Prices are quoted per kg / l / piece."""
    assert matching.price_per_base_unit(4.5, "l") == pytest.approx(0.0045)
    assert matching.price_per_base_unit(4.0, "g") == pytest.approx(0.004)
    assert matching.price_per_base_unit(0.8, "pcs") == pytest.approx(0.8)
    assert matching.price_per_base_unit(None, "g") is None


def test_is_expiring_soon_window():
    assert matching.is_expiring_soon(TODAY, TODAY)
    assert matching.is_expiring_soon(TODAY + timedelta(days=2), TODAY)
    assert not matching.is_expiring_soon(TODAY + timedelta(days=3), TODAY)
    # Already expired products do not earn the bonus
    assert not matching.is_expiring_soon(TODAY - timedelta(days=1), TODAY)
    assert not matching.is_expiring_soon(None, TODAY)


# =============================================================================
# MATCH_RECIPE
# =============================================================================


def test_full_match_scores_coverage_and_expiring_bonus():
    """
    Verifies:
    - all three ingredients stocked -> coverage 100, CAN_COOK_NOW
    - milk expires tomorrow -> +10 bonus, score = 70 + 10 = 80
    - used_value = 0.9 (milk) + 1.6 (eggs) + 0.4 (flour)
    """
    m = matching.match_recipe(pancakes(), FULL_FRIDGE, today=TODAY)

    assert m.coverage == 100.0
    assert m.score == 80.0
    assert m.can_cook is True
    assert m.scenario == MatchScenario.CAN_COOK_NOW
    assert m.used_count == 3 and m.missing_count == 0
    assert m.economy.used_value == pytest.approx(2.9)
    assert m.economy.waste_risk_saved == pytest.approx(0.9)
    assert m.economy.cost_to_complete == 0
    milk = next(i for i in m.used_ingredients if i.name == "milk")
    assert milk.expiring_soon is True


def test_partial_match_estimates_missing_cost_from_catalog():
    """
    Only milk in the fridge; eggs and flour priced from the catalog.

    coverage = 33.3, cost_to_complete = 1.6 + 0.4 = 2.0
    score = 0.7 * 33.3 + 10 - 2.0 = 31.31 -> 31.3
    """
    fridge = [stock(MILK, "milk", 1000, "ml", price=0.0045, days=1)]
    prices = {EGG: 0.8, FLOUR: 0.004}

    m = matching.match_recipe(pancakes(), fridge, today=TODAY, prices=prices)

    assert m.coverage == 33.3
    assert m.economy.cost_to_complete == pytest.approx(2.0)
    assert m.score == 31.3
    assert m.scenario == MatchScenario.ALMOST_READY
    missing = {i.name: i for i in m.missing_ingredients}
    assert missing["egg"].missing_quantity == 2
    assert missing["egg"].estimated_cost == pytest.approx(1.6)


def test_units_are_converted_before_comparison():
    recipe = pancakes(ingredients=[line(FLOUR, "flour", 0.5, "kg")])
    fridge = [stock(FLOUR, "flour", 600, "g", price=0.004, days=30)]

    m = matching.match_recipe(recipe, fridge, today=TODAY)

    assert m.can_cook
    assert m.used_ingredients[0].quantity == 500
    assert m.used_ingredients[0].unit == "g"


def test_incompatible_units_do_not_count():
    """Eggs by weight cannot satisfy eggs by piece."""
    recipe = pancakes(ingredients=[line(EGG, "egg", 2, "pcs")])
    fridge = [stock(EGG, "egg", 100, "g")]

    m = matching.match_recipe(recipe, fridge, today=TODAY)

    assert not m.can_cook
    assert m.missing_ingredients[0].available == 0


def test_stock_found_by_name_when_ids_differ():
    recipe = pancakes(ingredients=[line(MILK, "Milk", 200, "ml")])
    fridge = [stock(None, "milk", 500, "ml")]

    m = matching.match_recipe(recipe, fridge, today=TODAY)

    assert m.can_cook


def test_servings_multiplier_scales_requirements():
    recipe = pancakes(ingredients=[line(MILK, "milk", 200, "ml")])
    fridge = [stock(MILK, "milk", 300, "ml")]

    m = matching.match_recipe(recipe, fridge, servings_multiplier=2, today=TODAY)

    assert not m.can_cook
    shortage = m.missing_ingredients[0]
    assert shortage.quantity == 400
    assert shortage.available == 300
    assert shortage.missing_quantity == 100


def test_earliest_expiring_batch_is_used_first():
    """
    Two milk batches; the one expiring tomorrow covers the whole requirement,
    so the full value of the used milk counts as saved from waste.
    """
    recipe = pancakes(ingredients=[line(MILK, "milk", 200, "ml")])
    fridge = [
        stock(MILK, "milk", 1000, "ml", price=0.004, days=10),
        stock(MILK, "milk", 200, "ml", price=0.005, days=1),
    ]

    m = matching.match_recipe(recipe, fridge, today=TODAY)

    assert m.used_ingredients[0].expiring_soon is True
    assert m.economy.used_value == pytest.approx(1.0)
    assert m.economy.waste_risk_saved == pytest.approx(1.0)


def test_repeated_ingredient_lines_draw_from_shared_stock():
    """150 g of flour covers the first 100 g line; the second sees only 50 g."""
    recipe = pancakes(
        ingredients=[line(FLOUR, "flour", 100, "g"), line(FLOUR, "flour", 100, "g")]
    )
    fridge = [stock(FLOUR, "flour", 150, "g", price=0.004, days=30)]

    match = matching.match_recipe(recipe, fridge, today=TODAY)

    assert match.used_count == 1
    assert match.can_cook is False
    assert match.missing_ingredients[0].available == 50
    assert match.missing_ingredients[0].missing_quantity == 50
    assert match.economy.used_value == pytest.approx(0.4)


def test_optional_ingredients_are_ignored():
    recipe = pancakes(
        ingredients=[line(MILK, "milk", 200, "ml"), line(None, "sugar", 10, "g", optional=True)]
    )
    fridge = [stock(MILK, "milk", 500, "ml")]

    m = matching.match_recipe(recipe, fridge, today=TODAY)

    assert m.coverage == 100.0
    assert m.missing_count == 0


def test_recipe_without_required_ingredients_is_fully_covered():
    recipe = pancakes(ingredients=[line(None, "salt", 1, "g", optional=True)])
    m = matching.match_recipe(recipe, [], today=TODAY)
    assert m.coverage == 100.0
    assert m.can_cook


def test_missing_cost_penalty_is_capped():
    recipe = pancakes(ingredients=[line(FLOUR, "saffron", 10, "g")])
    m = matching.match_recipe(recipe, [], today=TODAY, prices={FLOUR: 50.0})
    # 500 PLN missing, penalty capped at 20, score clamped at 0
    assert m.economy.cost_to_complete == pytest.approx(500.0)
    assert m.score == 0.0


def test_scenario_thresholds():
    assert matching.scenario_for(0) == MatchScenario.CAN_COOK_NOW
    assert matching.scenario_for(2) == MatchScenario.ALMOST_READY
    assert matching.scenario_for(3) == MatchScenario.NEED_MORE


# =============================================================================
# ORDERING, FILTERING, SELECTION
# =============================================================================


def test_selection_ordering_tie_breaks():
    """coverage DESC, then score DESC, then used_count DESC, then shorter time."""
    a = make_match(80, 50, used_count=2, cooking_time=30)
    b = make_match(80, 60, used_count=1, cooking_time=60)
    c = make_match(80, 60, used_count=3, cooking_time=90)
    d = make_match(80, 60, used_count=3, cooking_time=15)
    e = make_match(90, 10)

    ordered = matching.sort_matches([a, b, c, d, e])

    assert ordered == [e, d, c, b, a]


def test_sort_by_named_key_and_unknown_key():
    fast = make_match(50, 50, cooking_time=10)
    slow = make_match(50, 50, cooking_time=90)

    assert matching.sort_matches([slow, fast], sort="time", order="asc") == [fast, slow]
    with pytest.raises(ValueError):
        matching.sort_matches([fast], sort="popularity")


def test_filter_matches():
    pl = make_match(100, 70, cooking_time=20, country="Poland")
    it = make_match(40, 30, cooking_time=90, country="Italy")

    assert matching.filter_matches([pl, it], min_coverage=50) == [pl]
    assert matching.filter_matches([pl, it], max_time_minutes=30) == [pl]
    assert matching.filter_matches([pl, it], countries=["italy"]) == [it]
    assert matching.filter_matches([pl, it]) == [pl, it]


def test_select_next_skips_viewed():
    best = make_match(100, 80)
    second = make_match(60, 40)

    selection = matching.select_next([second, best], {best.recipe_id})

    assert selection.outcome == SelectionOutcome.OK
    assert selection.recipe.recipe_id == second.recipe_id


def test_select_next_outcomes_without_recipe():
    assert matching.select_next([], set()).outcome == SelectionOutcome.NO_RECIPES_FOR_FRIDGE

    only = make_match(100, 80)
    selection = matching.select_next([only], {only.recipe_id})
    assert selection.outcome == SelectionOutcome.ALL_RECIPES_VIEWED
    assert selection.recipe is None


def test_categorize_groups_by_missing_count():
    groups = matching.categorize(
        [make_match(100, 70), make_match(60, 40, missing_count=1), make_match(20, 10, missing_count=4)]
    )
    assert groups["can_cook_count"] == 1
    assert groups["almost_cook_count"] == 1
    assert groups["need_to_buy_count"] == 1
    assert groups["total_count"] == 3
