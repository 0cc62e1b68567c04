"""Pydantic schemas for academy courses and platform settings."""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.enums import CourseLevel


class CourseStepIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    duration_minutes: int = Field(5, ge=1, le=600)


class CourseStepOut(BaseModel):
    position: int
    title: str
    description: str
    duration_minutes: int

    model_config = ConfigDict(from_attributes=True)


class CourseCreate(BaseModel):
    """Course wizard payload: basic info, media, lessons."""

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = None
    level: CourseLevel = CourseLevel.BEGINNER
    price_tokens: int = Field(0, ge=0)
    video_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    photo_urls: List[str] = []
    steps: List[CourseStepIn] = []


class CourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = None
    level: Optional[CourseLevel] = None
    price_tokens: Optional[int] = Field(None, ge=0)
    video_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    photo_urls: Optional[List[str]] = None
    steps: Optional[List[CourseStepIn]] = None


class CourseResponse(BaseModel):
    course_id: UUID
    title: str
    description: Optional[str]
    category: Optional[str]
    level: CourseLevel
    price_tokens: int
    video_url: Optional[str]
    cover_image_url: Optional[str]
    photo_urls: List[str]
    is_published: bool
    total_duration_minutes: int
    steps: List[CourseStepOut]
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PublishRequest(BaseModel):
    is_published: bool = True


class PlatformSettingUpsert(BaseModel):
    value: Any
    description: Optional[str] = None


class PlatformSettingResponse(BaseModel):
    key: str
    value: Any
    description: Optional[str]
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
