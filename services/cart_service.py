"""Server-side cart and token checkout."""

from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging
import uuid

from domain.models import CartItem, Order, OrderItem, RecipePurchase
from domain.enums import OrderStatus, TransactionType
from domain.schemas.commerce_schemas import (
    CartLine,
    CartSummary,
    CheckoutRequest,
    CheckoutResponse,
    OrderResponse,
)
from repositories import (
    CartRepository,
    OrderRepository,
    PurchaseRepository,
    UserRepository,
)
from services.recipe_service import RecipeService
from services.wallet_service import WalletService
from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("chefos.cart")


class CartService:
    @staticmethod
    def get_cart(db: Session, user_id: uuid.UUID) -> CartSummary:
        """Lines priced at the current catalog price; item_count sums quantities."""
        lines = CartRepository(db).get_by_user_id(user_id)
        owned = PurchaseRepository(db).owned_recipe_ids(user_id)
        items = [
            CartLine(
                recipe_id=line.recipe_id,
                title=line.recipe.title,
                image_url=line.recipe.image_url,
                price_tokens=line.recipe.price_tokens,
                quantity=line.quantity,
                line_total=line.recipe.price_tokens * line.quantity,
                already_owned=line.recipe_id in owned,
            )
            for line in lines
        ]
        return CartSummary(
            items=items,
            item_count=sum(i.quantity for i in items),
            total_tokens=sum(i.line_total for i in items),
            currency=settings.token_currency,
        )

    @staticmethod
    def add_item(
        db: Session, user_id: uuid.UUID, recipe_id: uuid.UUID, quantity: int = 1
    ) -> CartSummary:
        """Adding a recipe already in the cart increments its quantity."""
        RecipeService.get_recipe(db, recipe_id)
        cart_repo = CartRepository(db)
        line = cart_repo.get_line(user_id, recipe_id)
        if line:
            line.quantity += quantity
        else:
            cart_repo.add(CartItem(user_id=user_id, recipe_id=recipe_id, quantity=quantity))
        db.commit()
        logger.info(f"User {user_id} added recipe {recipe_id} x{quantity} to cart")
        return CartService.get_cart(db, user_id)

    @staticmethod
    def set_quantity(
        db: Session, user_id: uuid.UUID, recipe_id: uuid.UUID, quantity: int
    ) -> CartSummary:
        """Quantity 0 removes the line."""
        if quantity < 0:
            raise ServiceValidationError("Quantity cannot be negative")
        cart_repo = CartRepository(db)
        line = cart_repo.get_line(user_id, recipe_id)
        if not line:
            raise NotFoundError(f"Recipe {recipe_id} is not in the cart")
        if quantity == 0:
            db.delete(line)
        else:
            line.quantity = quantity
        db.commit()
        return CartService.get_cart(db, user_id)

    @staticmethod
    def remove_item(db: Session, user_id: uuid.UUID, recipe_id: uuid.UUID) -> CartSummary:
        line = CartRepository(db).get_line(user_id, recipe_id)
        if not line:
            raise NotFoundError(f"Recipe {recipe_id} is not in the cart")
        db.delete(line)
        db.commit()
        return CartService.get_cart(db, user_id)

    @staticmethod
    def clear(db: Session, user_id: uuid.UUID) -> CartSummary:
        CartRepository(db).clear(user_id)
        db.commit()
        return CartService.get_cart(db, user_id)

    @staticmethod
    def checkout(
        db: Session, user_id: uuid.UUID, payload: CheckoutRequest
    ) -> CheckoutResponse:
        """
        Pay for the whole cart with chef tokens.

        One database transaction: lock the user, charge the total as a single
        ``spend`` ledger entry, write the order and its lines, grant ownership
        of recipes not owned yet, empty the cart.

        Replaying an idempotency key returns the original order without
        charging again.

        Raises:
            ServiceValidationError: empty cart (EMPTY_CART) or not enough
                tokens (INSUFFICIENT_TOKENS, details carry balance/required)
        """
        order_repo = OrderRepository(db)
        user_repo = UserRepository(db)

        replay = CartService._replay(db, user_id, payload.idempotency_key)
        if replay:
            return replay

        try:
            user = user_repo.get_for_update(user_id)
            if not user:
                raise NotFoundError(f"User not found: {user_id}")

            cart_repo = CartRepository(db)
            lines = cart_repo.get_by_user_id(user_id)
            if not lines:
                raise ServiceValidationError("Cart is empty", code="EMPTY_CART")

            total = sum(line.recipe.price_tokens * line.quantity for line in lines)
            if user.token_balance < total:
                raise ServiceValidationError(
                    "Insufficient chef tokens",
                    details={"balance": user.token_balance, "required": total},
                    code="INSUFFICIENT_TOKENS",
                )

            order = Order(
                user_id=user_id,
                status=OrderStatus.COMPLETED,
                total_tokens=total,
                idempotency_key=payload.idempotency_key,
                contact_name=payload.contact_name,
                contact_email=payload.contact_email,
                contact_phone=payload.contact_phone,
                notes=payload.notes,
                items=[
                    OrderItem(
                        recipe_id=line.recipe_id,
                        title=line.recipe.title,
                        quantity=line.quantity,
                        unit_price_tokens=line.recipe.price_tokens,
                    )
                    for line in lines
                ],
            )
            order_repo.add(order)

            if total > 0:
                WalletService.post_transaction(
                    db,
                    user,
                    -total,
                    TransactionType.SPEND,
                    description=f"Order of {len(lines)} recipe(s)",
                    reference=str(order.order_id),
                )

            owned = PurchaseRepository(db).owned_recipe_ids(user_id)
            for line in lines:
                if line.recipe_id in owned:
                    continue
                db.add(
                    RecipePurchase(
                        user_id=user_id,
                        recipe_id=line.recipe_id,
                        order_id=order.order_id,
                        price_tokens=line.recipe.price_tokens,
                    )
                )
                owned.add(line.recipe_id)

            cart_repo.clear(user_id)
            db.commit()
            db.refresh(order)
        except IntegrityError:
            # a concurrent checkout with the same key won the insert
            db.rollback()
            replay = CartService._replay(db, user_id, payload.idempotency_key)
            if replay:
                return replay
            raise
        except Exception:
            db.rollback()
            raise

        logger.info(
            f"Order {order.order_id} completed for user {user_id}: "
            f"{total} tokens, {len(order.items)} line(s)"
        )
        return CheckoutResponse(
            order=OrderResponse.model_validate(order),
            balance=user.token_balance,
            replayed=False,
        )

    @staticmethod
    def _replay(db: Session, user_id: uuid.UUID, idempotency_key: str):
        existing = OrderRepository(db).get_by_key(user_id, idempotency_key)
        if not existing:
            return None
        user = UserRepository(db).get_by_id(user_id)
        logger.info(f"Checkout replay for user {user_id} (key={idempotency_key})")
        return CheckoutResponse(
            order=OrderResponse.model_validate(existing),
            balance=user.token_balance,
            replayed=True,
        )

    @staticmethod
    def list_orders(db: Session, user_id: uuid.UUID, limit: int = 50, offset: int = 0) -> List[Order]:
        return OrderRepository(db).get_by_user_id(user_id, skip=offset, limit=limit)

    @staticmethod
    def get_order(db: Session, user_id: uuid.UUID, order_id: uuid.UUID) -> Order:
        order = OrderRepository(db).get_for_user(user_id, order_id)
        if not order:
            raise NotFoundError(f"Order not found: {order_id}")
        return order
