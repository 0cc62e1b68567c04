"""Pydantic schemas for the fridge inventory."""

from datetime import date, datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.enums import Freshness, LossReason


class FridgeItemCreate(BaseModel):
    ingredient_id: UUID
    quantity: float = Field(..., gt=0)
    unit: Optional[str] = None  # defaults to the ingredient's unit
    price_per_unit: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    expires_at: Optional[date] = None


class FridgeItemQuantityUpdate(BaseModel):
    quantity: float = Field(..., ge=0)


class FridgeItemResponse(BaseModel):
    fridge_item_id: UUID
    ingredient_id: UUID
    name: str
    category: Optional[str] = None
    quantity: float
    quantity_total: Optional[float] = None
    unit: str
    price_per_unit: Optional[float] = None
    currency: Optional[str] = None
    expires_at: Optional[date] = None
    days_left: Optional[int] = None
    freshness: Freshness = Freshness.FRESH
    created_at: Optional[datetime] = None


class FridgeItemDeleted(BaseModel):
    status: str = "deleted"
    fridge_item_id: UUID


class FridgePriceCreate(BaseModel):
    price_per_unit: float = Field(..., ge=0)
    currency: Optional[str] = None
    source: Optional[str] = Field(None, max_length=120)


class FridgePriceResponse(BaseModel):
    price_id: UUID
    fridge_item_id: UUID
    price_per_unit: float
    currency: str
    source: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class FridgeStatsResponse(BaseModel):
    total_items: int
    total_value: float
    expiring_soon: int
    expired: int
    currency: str
    items_by_category: dict = {}


class FridgeListResponse(BaseModel):
    items: List[FridgeItemResponse]
    stats: FridgeStatsResponse


class FridgeDiscardRequest(BaseModel):
    reason: LossReason
    quantity: Optional[float] = Field(None, gt=0)  # defaults to the whole batch
    context: Optional[str] = Field(None, max_length=500)


class LossEventResponse(BaseModel):
    loss_id: UUID
    ingredient_id: Optional[UUID] = None
    name: str
    quantity: float
    unit: str
    loss: float
    currency: str
    reason: LossReason
    added_date: Optional[date] = None
    expiry_date: Optional[date] = None
    discarded_on: date
    context: Optional[str] = None


class LossSummary(BaseModel):
    total_products: int
    total_value: float
    avg_value: float
    by_reason: Dict[str, int] = {}


class LossHistoryResponse(BaseModel):
    days: int
    currency: str
    events: List[LossEventResponse]
    summary: LossSummary
