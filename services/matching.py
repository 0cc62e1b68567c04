"""Rules-based recipe matching against a user's fridge.

Everything here is a pure function over plain data: recipes are any objects
exposing the Recipe attributes (ORM rows or SimpleNamespace in tests) and the
fridge is a list of FridgeStock already expressed in base units. No database
or clock access happens in this module; callers pass ``today``.

Scoring:
    score = 0.7 * coverage
            + 10 per used ingredient expiring within EXPIRING_SOON_DAYS (max 30)
            - min(cost_to_complete, 20)
    clamped to [0, 100] and rounded to one decimal.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple
from uuid import UUID

from domain.enums import MatchScenario, SelectionOutcome
from domain.schemas.matching_schemas import (
    FridgeStock,
    MatchEconomy,
    MatchedIngredient,
    MissingIngredient,
    RecipeMatch,
    Selection,
)

EXPIRING_SOON_DAYS = 2
COVERAGE_WEIGHT = 0.7
EXPIRING_BONUS = 10
EXPIRING_BONUS_CAP = 30
MISSING_COST_PENALTY_CAP = 20

# unit -> (base unit, factor)
_UNIT_TABLE = {
    "g": ("g", 1),
    "kg": ("g", 1000),
    "ml": ("ml", 1),
    "l": ("ml", 1000),
    "pcs": ("pcs", 1),
    "pc": ("pcs", 1),
    "szt": ("pcs", 1),
}

SORT_KEYS = {
    "score": lambda m: m.score,
    "coverage": lambda m: m.coverage,
    "time": lambda m: m.cooking_time,
    "missing_cost": lambda m: m.economy.cost_to_complete,
    "used_value": lambda m: m.economy.used_value,
}


def to_base_unit(quantity: float, unit: Optional[str]) -> Tuple[float, str]:
    """Convert to g / ml / pcs. Unknown units are their own base."""
    key = (unit or "").strip().lower()
    base, factor = _UNIT_TABLE.get(key, (key, 1))
    return float(quantity) * factor, base


def price_per_base_unit(price: Optional[float], unit: Optional[str]) -> Optional[float]:
    """Catalog and fridge prices are quoted per kg, per l or per piece."""
    if price is None:
        return None
    _, base = to_base_unit(1, unit)
    if base in ("g", "ml"):
        return float(price) / 1000
    return float(price)


def is_expiring_soon(expires_at: Optional[date], today: date, days: int = EXPIRING_SOON_DAYS) -> bool:
    if expires_at is None:
        return False
    return 0 <= (expires_at - today).days <= days


def _stock_key(ingredient_id, name: str) -> Tuple[Optional[UUID], str]:
    return ingredient_id, (name or "").strip().lower()


def _index_stock(stock: Iterable[FridgeStock]):
    by_id: Dict[UUID, List[FridgeStock]] = defaultdict(list)
    by_name: Dict[str, List[FridgeStock]] = defaultdict(list)
    for entry in stock:
        if entry.quantity <= 0:
            continue
        if entry.ingredient_id is not None:
            by_id[entry.ingredient_id].append(entry)
        by_name[(entry.name or "").strip().lower()].append(entry)
    return by_id, by_name


def _batches_for(ingredient, base_unit: str, by_id, by_name) -> List[FridgeStock]:
    """Stock batches for one recipe line in FIFO order (earliest expiry first)."""
    ingredient_id, name = _stock_key(ingredient.ingredient_id, ingredient.name)
    candidates = by_id.get(ingredient_id) if ingredient_id is not None else None
    if not candidates:
        candidates = by_name.get(name, [])
    compatible = [b for b in candidates if b.unit == base_unit]
    return sorted(compatible, key=lambda b: (b.expires_at is None, b.expires_at or date.max))


def match_recipe(
    recipe,
    stock: Sequence[FridgeStock],
    servings_multiplier: float = 1,
    today: Optional[date] = None,
    prices: Optional[Dict[UUID, float]] = None,
    currency: str = "PLN",
    expiring_days: int = EXPIRING_SOON_DAYS,
) -> RecipeMatch:
    """
    Evaluate one recipe against the fridge.

    Args:
        recipe: object with recipe_id, title, canonical_name, time_minutes,
            servings and ``ingredients`` (ingredient_id, name, quantity, unit, optional)
        stock: fridge batches in base units
        servings_multiplier: scales every required quantity
        today: reference date for expiry checks
        prices: catalog price per base unit keyed by ingredient id, used to
            estimate the cost of missing ingredients
        currency: label for the economy block
        expiring_days: horizon for the expiring-soon bonus and waste_risk_saved
    """
    today = today or date.today()
    prices = prices or {}
    by_id, by_name = _index_stock(stock)
    # base units already promised to earlier lines, per batch
    drawn: Dict[int, float] = defaultdict(float)

    used: List[MatchedIngredient] = []
    missing: List[MissingIngredient] = []
    used_value = 0.0
    cost_to_complete = 0.0
    total_cost = 0.0
    waste_risk_saved = 0.0
    expiring_used = 0
    required_count = 0

    for ingredient in recipe.ingredients:
        if ingredient.optional:
            continue
        required_count += 1

        required, base_unit = to_base_unit(
            float(ingredient.quantity) * servings_multiplier, ingredient.unit
        )
        batches = _batches_for(ingredient, base_unit, by_id, by_name)
        available = sum(b.quantity - drawn[id(b)] for b in batches)
        catalog_price = prices.get(ingredient.ingredient_id)

        if available >= required:
            remaining = required
            line_value = 0.0
            line_at_risk = 0.0
            expiring = False
            for batch in batches:
                if remaining <= 0:
                    break
                take = min(remaining, batch.quantity - drawn[id(batch)])
                if take <= 0:
                    continue
                drawn[id(batch)] += take
                unit_price = batch.price_per_unit
                if unit_price is None:
                    unit_price = catalog_price or 0.0
                line_value += take * unit_price
                if is_expiring_soon(batch.expires_at, today, expiring_days):
                    expiring = True
                    line_at_risk += take * unit_price
                remaining -= take

            used_value += line_value
            waste_risk_saved += line_at_risk
            total_cost += line_value
            if expiring:
                expiring_used += 1
            used.append(
                MatchedIngredient(
                    ingredient_id=ingredient.ingredient_id,
                    name=ingredient.name,
                    quantity=round(required, 3),
                    unit=base_unit,
                    available=round(available, 3),
                    expiring_soon=expiring,
                )
            )
        else:
            missing_quantity = required - available
            unit_price = catalog_price
            if unit_price is None and batches and batches[0].price_per_unit is not None:
                unit_price = batches[0].price_per_unit
            estimated = missing_quantity * (unit_price or 0.0)
            cost_to_complete += estimated
            total_cost += required * (unit_price or 0.0)
            missing.append(
                MissingIngredient(
                    ingredient_id=ingredient.ingredient_id,
                    name=ingredient.name,
                    quantity=round(required, 3),
                    unit=base_unit,
                    available=round(available, 3),
                    missing_quantity=round(missing_quantity, 3),
                    estimated_cost=round(estimated, 2),
                )
            )

    if required_count == 0:
        coverage = 100.0
    else:
        coverage = round(len(used) / required_count * 100, 1)

    score = (
        COVERAGE_WEIGHT * coverage
        + min(EXPIRING_BONUS * expiring_used, EXPIRING_BONUS_CAP)
        - min(cost_to_complete, MISSING_COST_PENALTY_CAP)
    )
    score = round(max(0.0, min(100.0, score)), 1)

    return RecipeMatch(
        recipe_id=recipe.recipe_id,
        title=recipe.title,
        canonical_name=recipe.canonical_name,
        country=getattr(recipe, "country", None),
        category=getattr(recipe, "category", None),
        difficulty=_enum_value(getattr(recipe, "difficulty", None)),
        image_url=getattr(recipe, "image_url", None),
        cooking_time=int(recipe.time_minutes or 0),
        servings=int(recipe.servings or 1),
        coverage=coverage,
        score=score,
        used_ingredients=used,
        missing_ingredients=missing,
        used_count=len(used),
        missing_count=len(missing),
        can_cook=not missing,
        scenario=scenario_for(len(missing)),
        economy=MatchEconomy(
            used_value=round(used_value, 2),
            cost_to_complete=round(cost_to_complete, 2),
            total_recipe_cost=round(total_cost, 2),
            waste_risk_saved=round(waste_risk_saved, 2),
            currency=currency,
        ),
    )


def _enum_value(value):
    return getattr(value, "value", value)


def scenario_for(missing_count: int) -> MatchScenario:
    if missing_count == 0:
        return MatchScenario.CAN_COOK_NOW
    if missing_count <= 2:
        return MatchScenario.ALMOST_READY
    return MatchScenario.NEED_MORE


def match_all(
    recipes: Iterable,
    stock: Sequence[FridgeStock],
    today: Optional[date] = None,
    prices: Optional[Dict[UUID, float]] = None,
    currency: str = "PLN",
    expiring_days: int = EXPIRING_SOON_DAYS,
) -> List[RecipeMatch]:
    return [
        match_recipe(
            r,
            stock,
            today=today,
            prices=prices,
            currency=currency,
            expiring_days=expiring_days,
        )
        for r in recipes
    ]


def selection_key(match: RecipeMatch):
    """coverage DESC, score DESC, used_count DESC, cooking_time ASC"""
    return (-match.coverage, -match.score, -match.used_count, match.cooking_time)


def sort_matches(
    matches: Iterable[RecipeMatch], sort: Optional[str] = None, order: str = "desc"
) -> List[RecipeMatch]:
    """
    Order matches. Without ``sort`` the assistant selection ordering is used and
    ``order`` is ignored. Sorting is stable, so equal keys keep catalog order.
    """
    if sort is None:
        return sorted(matches, key=selection_key)
    if sort not in SORT_KEYS:
        raise ValueError(f"Unsupported sort key: {sort}")
    return sorted(matches, key=SORT_KEYS[sort], reverse=(order == "desc"))


def filter_matches(
    matches: Iterable[RecipeMatch],
    min_coverage: Optional[float] = None,
    max_missing_cost: Optional[float] = None,
    max_time_minutes: Optional[int] = None,
    countries: Optional[Iterable[str]] = None,
) -> List[RecipeMatch]:
    wanted = {c.strip().lower() for c in countries or [] if c and c.strip()}
    result = []
    for m in matches:
        if min_coverage is not None and m.coverage < min_coverage:
            continue
        if max_missing_cost is not None and m.economy.cost_to_complete > max_missing_cost:
            continue
        if max_time_minutes is not None and m.cooking_time > max_time_minutes:
            continue
        if wanted and (m.country or "").lower() not in wanted:
            continue
        result.append(m)
    return result


def select_next(matches: Sequence[RecipeMatch], viewed_ids: Set[UUID]) -> Selection:
    """Top unseen match by the selection ordering."""
    if not matches:
        return Selection(outcome=SelectionOutcome.NO_RECIPES_FOR_FRIDGE)
    unseen = [m for m in matches if m.recipe_id not in viewed_ids]
    if not unseen:
        return Selection(
            outcome=SelectionOutcome.ALL_RECIPES_VIEWED,
            candidates=len(matches),
            viewed_count=len(viewed_ids),
        )
    return Selection(
        outcome=SelectionOutcome.OK,
        recipe=sort_matches(unseen)[0],
        candidates=len(matches),
        viewed_count=len(viewed_ids),
    )


def categorize(matches: Iterable[RecipeMatch]) -> dict:
    """Split into can_cook (0 missing), almost_cook (1-2) and need_to_buy (3+)."""
    groups = {"can_cook": [], "almost_cook": [], "need_to_buy": []}
    for m in matches:
        if m.missing_count == 0:
            groups["can_cook"].append(m)
        elif m.missing_count <= 2:
            groups["almost_cook"].append(m)
        else:
            groups["need_to_buy"].append(m)
    total = sum(len(v) for v in groups.values())
    return {
        **groups,
        "can_cook_count": len(groups["can_cook"]),
        "almost_cook_count": len(groups["almost_cook"]),
        "need_to_buy_count": len(groups["need_to_buy"]),
        "total_count": total,
    }
