from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from domain.enums import Language, UserRole


class UserCreate(BaseModel):
    email: EmailStr
    display_name: Optional[str] = Field(None, max_length=120)
    language: Language = Language.PL

    @field_validator("email")
    def normalize_email(cls, v):
        return v.strip().lower()


class UserResponse(BaseModel):
    user_id: UUID
    email: str
    display_name: Optional[str]
    phone: Optional[str] = None
    telegram: Optional[str] = None
    avatar_url: Optional[str] = None
    role: UserRole
    language: Language
    token_balance: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdateRequest(BaseModel):
    """Only the provided fields are changed."""

    display_name: Optional[str] = Field(None, max_length=120)
    phone: Optional[str] = Field(None, max_length=40)
    telegram: Optional[str] = Field(None, max_length=64)
    avatar_url: Optional[str] = None
    language: Optional[Language] = None


class UserSettingsResponse(BaseModel):
    user_id: UUID
    settings: Dict[str, Any]
    updated_at: Optional[datetime] = None


class UserSettingsPatch(BaseModel):
    """Nested sections are merged key by key into the stored document."""

    settings: Dict[str, Any] = Field(..., min_length=1)


class RoleUpdateRequest(BaseModel):
    role: UserRole
