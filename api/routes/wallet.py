"""Chef token wallet routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from domain.models import get_db_session, AppUser
from domain.enums import TransactionType
from domain.schemas.commerce_schemas import (
    WalletSummary,
    TransactionResponse,
    TokenPurchaseRequest,
    TokenTransferRequest,
)
from services.wallet_service import WalletService
from api.dependencies import get_current_user

router = APIRouter(prefix="/wallet", tags=["Wallet"])
logger = logging.getLogger("chefos.api.wallet")


@router.get("", response_model=WalletSummary)
def get_wallet(
    user: AppUser = Depends(get_current_user), db: Session = Depends(get_db_session)
):
    """Balance plus lifetime earned and spent"""
    return WalletService.get_summary(db, user.user_id)


@router.get("/transactions", response_model=List[TransactionResponse])
def list_transactions(
    type: Optional[TransactionType] = Query(None, description="Filter by entry type"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return WalletService.list_transactions(
        db, user.user_id, tx_type=type, limit=limit, offset=offset
    )


@router.post(
    "/purchase", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED
)
def purchase_tokens(
    payload: TokenPurchaseRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    return WalletService.purchase_tokens(
        db, user.user_id, payload.amount, payload.payment_method
    )


@router.post(
    "/transfer", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED
)
def transfer_tokens(
    payload: TokenTransferRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """Send tokens to another user; returns the sender's ledger entry."""
    return WalletService.transfer(
        db, user.user_id, payload.recipient_id, payload.amount, payload.note
    )
