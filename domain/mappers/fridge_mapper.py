"""
Fridge domain mappers.
"""

from datetime import date
from typing import Optional

from domain.enums import Freshness
from domain.models import FridgeItem, FridgeLoss
from domain.schemas.fridge_schemas import FridgeItemResponse, LossEventResponse

DANGER_DAYS = 1
WARNING_DAYS = 3


def freshness_for(days_left: Optional[int]) -> Freshness:
    """Items without an expiry date are treated as fresh."""
    if days_left is None:
        return Freshness.FRESH
    if days_left <= DANGER_DAYS:
        return Freshness.DANGER
    if days_left <= WARNING_DAYS:
        return Freshness.WARNING
    return Freshness.FRESH


class FridgeMapper:
    """Mapper for fridge item transformations."""

    @staticmethod
    def to_response(item: FridgeItem, today: Optional[date] = None) -> FridgeItemResponse:
        today = today or date.today()
        days_left = (item.expires_at - today).days if item.expires_at else None
        ingredient = item.ingredient
        return FridgeItemResponse(
            fridge_item_id=item.fridge_item_id,
            ingredient_id=item.ingredient_id,
            name=item.name,
            category=ingredient.category if ingredient else None,
            quantity=float(item.quantity),
            quantity_total=(
                float(item.quantity_total) if item.quantity_total is not None else None
            ),
            unit=item.unit,
            price_per_unit=(
                float(item.price_per_unit) if item.price_per_unit is not None else None
            ),
            currency=item.currency,
            expires_at=item.expires_at,
            days_left=days_left,
            freshness=freshness_for(days_left),
            created_at=item.created_at,
        )

    @staticmethod
    def to_loss_event(loss: FridgeLoss) -> LossEventResponse:
        return LossEventResponse(
            loss_id=loss.loss_id,
            ingredient_id=loss.ingredient_id,
            name=loss.name,
            quantity=float(loss.quantity),
            unit=loss.unit,
            loss=float(loss.loss_value),
            currency=loss.currency,
            reason=loss.reason,
            added_date=loss.added_on,
            expiry_date=loss.expires_at,
            discarded_on=loss.discarded_on,
            context=loss.context,
        )
