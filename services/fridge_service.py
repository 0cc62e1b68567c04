from typing import List, Optional
from sqlalchemy.orm import Session
from collections import Counter
from datetime import date, timedelta
import logging
import uuid

from domain.models import FridgeItem, FridgePrice, FridgeLoss
from domain.mappers import FridgeMapper
from domain.schemas.fridge_schemas import (
    FridgeItemCreate,
    FridgeItemResponse,
    FridgeStatsResponse,
    FridgeListResponse,
    FridgeDiscardRequest,
    LossEventResponse,
    LossHistoryResponse,
    LossSummary,
)
from domain.schemas.matching_schemas import FridgeStock
from repositories import FridgeRepository, IngredientRepository, UserRepository
from services.matching import to_base_unit, price_per_base_unit
from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("chefos.fridge")


class FridgeService:
    @staticmethod
    def list_items(
        db: Session, user_id: uuid.UUID, today: Optional[date] = None
    ) -> FridgeListResponse:
        """All items with freshness flags, soonest expiry first, plus stats."""
        today = today or date.today()
        items = FridgeRepository(db).get_by_user_id(user_id)
        return FridgeListResponse(
            items=[FridgeMapper.to_response(i, today) for i in items],
            stats=FridgeService._stats_for(items, today),
        )

    @staticmethod
    def add_item(
        db: Session,
        user_id: uuid.UUID,
        payload: FridgeItemCreate,
        today: Optional[date] = None,
    ) -> FridgeItemResponse:
        """
        Add a batch of one ingredient.

        Each call creates its own batch so that FIFO consumption can tell
        batches with different expiry dates apart. When ``expires_at`` is not
        given it is estimated from the ingredient's shelf life. When no price
        is given the catalog price is used.

        Raises:
            NotFoundError: user or ingredient does not exist
        """
        today = today or date.today()
        if not UserRepository(db).get_by_id(user_id):
            raise NotFoundError(f"User not found: {user_id}")
        ingredient = IngredientRepository(db).get_by_id(payload.ingredient_id)
        if not ingredient:
            raise NotFoundError(f"Ingredient not found: {payload.ingredient_id}")

        expires_at = payload.expires_at
        if expires_at is None and ingredient.shelf_life_days is not None:
            expires_at = today + timedelta(days=ingredient.shelf_life_days)
            logger.debug(
                f"Estimated expiry for {ingredient.name}: {expires_at} "
                f"({ingredient.shelf_life_days} days)"
            )

        price = payload.price_per_unit
        if price is None and ingredient.price_per_unit is not None:
            price = float(ingredient.price_per_unit)
        currency = payload.currency or settings.fiat_currency

        fridge_repo = FridgeRepository(db)
        try:
            item = FridgeItem(
                user_id=user_id,
                ingredient_id=ingredient.ingredient_id,
                quantity=payload.quantity,
                quantity_total=payload.quantity,
                unit=payload.unit or ingredient.default_unit,
                price_per_unit=price,
                currency=currency,
                expires_at=expires_at,
            )
            fridge_repo.add(item)
            if payload.price_per_unit is not None:
                fridge_repo.add_price(item, payload.price_per_unit, currency, "manual")
            db.commit()
            db.refresh(item)
        except Exception:
            db.rollback()
            raise

        logger.info(
            f"User {user_id} added {payload.quantity} {item.unit} of {ingredient.name}"
        )
        return FridgeMapper.to_response(item, today)

    @staticmethod
    def update_quantity(
        db: Session, user_id: uuid.UUID, fridge_item_id: uuid.UUID, quantity: float
    ) -> Optional[FridgeItemResponse]:
        """Set the remaining quantity. Zero removes the item and returns None."""
        if quantity < 0:
            raise ServiceValidationError("Quantity cannot be negative")
        fridge_repo = FridgeRepository(db)
        item = fridge_repo.get_for_user(user_id, fridge_item_id)
        if not item:
            raise NotFoundError(f"Fridge item not found: {fridge_item_id}")

        if quantity == 0:
            db.delete(item)
            db.commit()
            logger.info(f"Fridge item {fridge_item_id} removed (quantity reached 0)")
            return None

        item.quantity = quantity
        if item.quantity_total is None or quantity > float(item.quantity_total):
            item.quantity_total = quantity
        db.commit()
        db.refresh(item)
        return FridgeMapper.to_response(item)

    @staticmethod
    def remove_item(db: Session, user_id: uuid.UUID, fridge_item_id: uuid.UUID) -> bool:
        item = FridgeRepository(db).get_for_user(user_id, fridge_item_id)
        if not item:
            return False
        db.delete(item)
        db.commit()
        logger.info(f"Fridge item {fridge_item_id} deleted by user {user_id}")
        return True

    @staticmethod
    def discard_item(
        db: Session,
        user_id: uuid.UUID,
        fridge_item_id: uuid.UUID,
        payload: FridgeDiscardRequest,
        today: Optional[date] = None,
    ) -> LossEventResponse:
        """
        Throw away all or part of a batch and record it as a loss.

        The loss is valued at the batch price, or at the catalog price when the
        batch has none. Discarding the whole remainder deletes the batch.

        Raises:
            NotFoundError: batch does not belong to the user
            ServiceValidationError: more than what is left (QUANTITY_EXCEEDS_STOCK)
        """
        today = today or date.today()
        fridge_repo = FridgeRepository(db)
        item = fridge_repo.get_for_user(user_id, fridge_item_id)
        if not item:
            raise NotFoundError(f"Fridge item not found: {fridge_item_id}")

        remaining = float(item.quantity)
        quantity = remaining if payload.quantity is None else payload.quantity
        if quantity > remaining + 1e-9:
            raise ServiceValidationError(
                "Cannot discard more than is left in the batch",
                details={"remaining": remaining, "requested": quantity},
                code="QUANTITY_EXCEEDS_STOCK",
            )

        base_quantity, _ = to_base_unit(quantity, item.unit)
        unit_price = None
        if item.price_per_unit is not None:
            unit_price = price_per_base_unit(float(item.price_per_unit), item.unit)
        elif item.ingredient is not None and item.ingredient.price_per_unit is not None:
            unit_price = price_per_base_unit(
                float(item.ingredient.price_per_unit), item.ingredient.default_unit
            )
        value = round(base_quantity * (unit_price or 0.0), 2)

        try:
            loss = fridge_repo.add_loss(
                FridgeLoss(
                    user_id=user_id,
                    ingredient_id=item.ingredient_id,
                    name=item.name,
                    quantity=quantity,
                    unit=item.unit,
                    loss_value=value,
                    currency=item.currency or settings.fiat_currency,
                    reason=payload.reason,
                    context=payload.context,
                    added_on=item.created_at.date() if item.created_at else None,
                    expires_at=item.expires_at,
                    discarded_on=today,
                )
            )
            if remaining - quantity <= 1e-9:
                db.delete(item)
            else:
                item.quantity = round(remaining - quantity, 3)
            db.commit()
            db.refresh(loss)
        except Exception:
            db.rollback()
            raise

        logger.info(
            f"User {user_id} discarded {quantity} {loss.unit} of {loss.name} "
            f"({payload.reason.value}), loss {value} {loss.currency}"
        )
        return FridgeMapper.to_loss_event(loss)

    @staticmethod
    def loss_history(
        db: Session, user_id: uuid.UUID, days: int = 30, today: Optional[date] = None
    ) -> LossHistoryResponse:
        """Losses from the last ``days`` days (today included) with totals."""
        today = today or date.today()
        losses = FridgeRepository(db).get_losses(user_id, today - timedelta(days=days))
        events = [FridgeMapper.to_loss_event(loss) for loss in losses]
        total = round(sum(e.loss for e in events), 2)
        return LossHistoryResponse(
            days=days,
            currency=settings.fiat_currency,
            events=events,
            summary=LossSummary(
                total_products=len(events),
                total_value=total,
                avg_value=round(total / len(events), 2) if events else 0.0,
                by_reason=dict(Counter(e.reason.value for e in events)),
            ),
        )

    @staticmethod
    def add_price(
        db: Session,
        user_id: uuid.UUID,
        fridge_item_id: uuid.UUID,
        price_per_unit: float,
        currency: Optional[str] = None,
        source: Optional[str] = None,
    ) -> FridgePrice:
        """Record a price observation; the latest one becomes the item's price."""
        fridge_repo = FridgeRepository(db)
        item = fridge_repo.get_for_user(user_id, fridge_item_id)
        if not item:
            raise NotFoundError(f"Fridge item not found: {fridge_item_id}")
        currency = currency or item.currency or settings.fiat_currency
        price = fridge_repo.add_price(item, price_per_unit, currency, source)
        item.price_per_unit = price_per_unit
        item.currency = currency
        db.commit()
        db.refresh(price)
        return price

    @staticmethod
    def list_prices(
        db: Session, user_id: uuid.UUID, fridge_item_id: uuid.UUID
    ) -> List[FridgePrice]:
        fridge_repo = FridgeRepository(db)
        if not fridge_repo.get_for_user(user_id, fridge_item_id):
            raise NotFoundError(f"Fridge item not found: {fridge_item_id}")
        return fridge_repo.get_prices(fridge_item_id)

    @staticmethod
    def get_stats(
        db: Session, user_id: uuid.UUID, today: Optional[date] = None
    ) -> FridgeStatsResponse:
        today = today or date.today()
        items = FridgeRepository(db).get_by_user_id(user_id)
        return FridgeService._stats_for(items, today)

    @staticmethod
    def get_expiring_soon(
        db: Session, user_id: uuid.UUID, days: int, today: Optional[date] = None
    ) -> List[FridgeItemResponse]:
        today = today or date.today()
        items = FridgeRepository(db).get_expiring_items(user_id, days, today)
        return [FridgeMapper.to_response(i, today) for i in items]

    @staticmethod
    def stock_entry(item: FridgeItem) -> FridgeStock:
        """One fridge batch converted to base units for matching."""
        quantity, base_unit = to_base_unit(item.quantity, item.unit)
        price = float(item.price_per_unit) if item.price_per_unit is not None else None
        return FridgeStock(
            ingredient_id=item.ingredient_id,
            name=item.name,
            quantity=quantity,
            unit=base_unit,
            price_per_unit=price_per_base_unit(price, item.unit),
            expires_at=item.expires_at,
        )

    @staticmethod
    def get_stock(db: Session, user_id: uuid.UUID) -> List[FridgeStock]:
        return [
            FridgeService.stock_entry(item)
            for item in FridgeRepository(db).get_by_user_id(user_id)
        ]

    @staticmethod
    def _stats_for(items: List[FridgeItem], today: date) -> FridgeStatsResponse:
        """Value is computed on the remaining quantity, not the purchased one."""
        total_value = 0.0
        expiring = 0
        expired = 0
        categories = Counter()
        for item in items:
            if item.price_per_unit is not None:
                quantity, _ = to_base_unit(item.quantity, item.unit)
                unit_price = price_per_base_unit(float(item.price_per_unit), item.unit)
                total_value += quantity * unit_price
            if item.expires_at is not None:
                days_left = (item.expires_at - today).days
                if days_left < 0:
                    expired += 1
                elif days_left <= settings.expiring_soon_days:
                    expiring += 1
            category = item.ingredient.category if item.ingredient else None
            categories[category or "other"] += 1

        return FridgeStatsResponse(
            total_items=len(items),
            total_value=round(total_value, 2),
            expiring_soon=expiring,
            expired=expired,
            currency=settings.fiat_currency,
            items_by_category=dict(categories),
        )
