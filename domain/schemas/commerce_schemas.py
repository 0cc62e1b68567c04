"""Pydantic schemas for the cart, orders and the chef token wallet."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from domain.enums import OrderStatus, TransactionType


# ==================== Cart ====================


class CartItemAdd(BaseModel):
    recipe_id: UUID
    quantity: int = Field(1, ge=1, le=99)


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=0, le=99)


class CartLine(BaseModel):
    recipe_id: UUID
    title: str
    image_url: Optional[str] = None
    price_tokens: int
    quantity: int
    line_total: int
    already_owned: bool = False


class CartSummary(BaseModel):
    items: List[CartLine]
    item_count: int
    total_tokens: int
    currency: str


# ==================== Orders ====================


class CheckoutRequest(BaseModel):
    idempotency_key: str = Field(..., min_length=1, max_length=200)
    contact_name: Optional[str] = Field(None, max_length=120)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=40)
    notes: Optional[str] = Field(None, max_length=1000)


class OrderItemResponse(BaseModel):
    recipe_id: Optional[UUID]
    title: str
    quantity: int
    unit_price_tokens: int

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    order_id: UUID
    status: OrderStatus
    total_tokens: int
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    notes: Optional[str] = None
    items: List[OrderItemResponse]
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CheckoutResponse(BaseModel):
    order: OrderResponse
    balance: int
    replayed: bool = False


# ==================== Wallet ====================


class WalletSummary(BaseModel):
    balance: int
    earned: int
    spent: int
    currency: str


class TransactionResponse(BaseModel):
    transaction_id: UUID
    type: TransactionType
    amount: int
    balance_after: int
    description: Optional[str] = None
    reference: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TokenPurchaseRequest(BaseModel):
    amount: int = Field(..., gt=0)
    payment_method: str = Field("card", min_length=1, max_length=40)


class TokenTransferRequest(BaseModel):
    recipient_id: UUID
    amount: int = Field(..., gt=0)
    note: Optional[str] = Field(None, max_length=200)


class TokenGrantRequest(BaseModel):
    amount: int = Field(..., gt=0)
    reason: Optional[str] = Field(None, max_length=200)
