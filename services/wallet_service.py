"""Chef token wallet: balance, ledger history, purchases, transfers and grants."""

from typing import List, Optional
from sqlalchemy.orm import Session
import logging
import uuid

from domain.models import AppUser, TokenTransaction
from domain.enums import TransactionType
from domain.schemas.commerce_schemas import WalletSummary
from repositories import UserRepository, TransactionRepository
from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("chefos.wallet")


class WalletService:
    @staticmethod
    def post_transaction(
        db: Session,
        user: AppUser,
        amount: int,
        tx_type: TransactionType,
        description: str = None,
        reference: str = None,
    ) -> TokenTransaction:
        """
        Apply a signed balance change and record it in the ledger.

        Does not commit; callers group it with the rest of their unit of work.
        The user row should already be locked (UserRepository.get_for_update).

        Raises:
            ServiceValidationError: the change would make the balance negative
                (code INSUFFICIENT_TOKENS)
        """
        new_balance = user.token_balance + amount
        if new_balance < 0:
            raise ServiceValidationError(
                "Insufficient chef tokens",
                details={"balance": user.token_balance, "required": -amount},
                code="INSUFFICIENT_TOKENS",
            )
        user.token_balance = new_balance
        tx = TokenTransaction(
            user_id=user.user_id,
            type=tx_type,
            amount=amount,
            balance_after=new_balance,
            description=description,
            reference=reference,
        )
        db.add(tx)
        db.flush()
        return tx

    @staticmethod
    def _locked_user(db: Session, user_id: uuid.UUID) -> AppUser:
        user = UserRepository(db).get_for_update(user_id)
        if not user:
            raise NotFoundError(f"User not found: {user_id}")
        return user

    @staticmethod
    def get_summary(db: Session, user_id: uuid.UUID) -> WalletSummary:
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User not found: {user_id}")
        earned, spent = TransactionRepository(db).totals(user_id)
        return WalletSummary(
            balance=user.token_balance,
            earned=earned,
            spent=spent,
            currency=settings.token_currency,
        )

    @staticmethod
    def list_transactions(
        db: Session,
        user_id: uuid.UUID,
        tx_type: Optional[TransactionType] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[TokenTransaction]:
        return TransactionRepository(db).get_by_user_id(
            user_id, tx_type=tx_type, skip=offset, limit=limit
        )

    @staticmethod
    def purchase_tokens(
        db: Session, user_id: uuid.UUID, amount: int, payment_method: str
    ) -> TokenTransaction:
        """
        Credit tokens bought with money. Payment capture happens upstream;
        this records the result.
        """
        if not settings.token_purchase_min <= amount <= settings.token_purchase_max:
            raise ServiceValidationError(
                f"Token amount must be between {settings.token_purchase_min} "
                f"and {settings.token_purchase_max}",
                details={
                    "min": settings.token_purchase_min,
                    "max": settings.token_purchase_max,
                },
            )
        try:
            user = WalletService._locked_user(db, user_id)
            tx = WalletService.post_transaction(
                db,
                user,
                amount,
                TransactionType.PURCHASE,
                description=f"Purchased {amount} {settings.token_currency}",
                reference=payment_method,
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"User {user_id} purchased {amount} tokens via {payment_method}")
        return tx

    @staticmethod
    def transfer(
        db: Session,
        sender_id: uuid.UUID,
        recipient_id: uuid.UUID,
        amount: int,
        note: str = None,
    ) -> TokenTransaction:
        """
        Move tokens between two wallets. Writes a transfer_out for the sender
        and a transfer_in for the recipient in one transaction.
        """
        if sender_id == recipient_id:
            raise ServiceValidationError(
                "Cannot send tokens to yourself", code="SELF_TRANSFER"
            )
        if amount <= 0:
            raise ServiceValidationError("Transfer amount must be positive")

        try:
            # Lock in a stable order so two opposite transfers cannot deadlock
            first, second = sorted([sender_id, recipient_id], key=str)
            locked = {
                first: WalletService._locked_user(db, first),
                second: WalletService._locked_user(db, second),
            }
            sender, recipient = locked[sender_id], locked[recipient_id]

            out_tx = WalletService.post_transaction(
                db,
                sender,
                -amount,
                TransactionType.TRANSFER_OUT,
                description=note or f"Sent to {recipient.display_name or recipient.email}",
                reference=str(recipient.user_id),
            )
            WalletService.post_transaction(
                db,
                recipient,
                amount,
                TransactionType.TRANSFER_IN,
                description=note or f"Received from {sender.display_name or sender.email}",
                reference=str(sender.user_id),
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"Transferred {amount} tokens from {sender_id} to {recipient_id}")
        return out_tx

    @staticmethod
    def grant(
        db: Session, admin_id: uuid.UUID, user_id: uuid.UUID, amount: int, reason: str = None
    ) -> TokenTransaction:
        """Admin bonus credit"""
        if amount <= 0:
            raise ServiceValidationError("Grant amount must be positive")
        try:
            user = WalletService._locked_user(db, user_id)
            tx = WalletService.post_transaction(
                db,
                user,
                amount,
                TransactionType.BONUS,
                description=reason or "Granted by administrator",
                reference=str(admin_id),
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"Admin {admin_id} granted {amount} tokens to {user_id}")
        return tx
