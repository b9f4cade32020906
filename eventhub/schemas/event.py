"""Pydantic schemas for Events."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator, model_validator

from eventhub.models.attendee import RSVPStatus
from eventhub.models.event import EventCategory, EventStatus, Currency
from eventhub.schemas.common import Pagination
from eventhub.schemas.user import UserStats, UserSummary
from eventhub.timeutils import ensure_utc, is_valid_timezone


class Location(BaseModel):
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: Optional[str] = None
    country: str = Field(..., min_length=1, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


def _clean_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Title is required")
    return v


def _clean_tags(v: list[str]) -> list[str]:
    tags = [t.strip() for t in v if t.strip()]
    if any(len(t) > 50 for t in tags):
        raise ValueError("Tag cannot be more than 50 characters")
    return tags


def _check_timezone_name(v: str) -> str:
    if not is_valid_timezone(v):
        raise ValueError(f"Unknown timezone: {v}")
    return v


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    location: Location
    start_time_utc: datetime
    end_time_utc: datetime
    timezone: str = "UTC"
    registration_deadline: Optional[datetime] = None
    category: EventCategory
    capacity: int = Field(..., ge=1, le=10000)
    price: float = Field(0, ge=0)
    currency: Currency = Currency.USD
    image: str = ""
    tags: list[str] = []
    requirements: str = Field("", max_length=1000)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    website: Optional[str] = None
    status: EventStatus = EventStatus.published

    @field_validator("start_time_utc", "end_time_utc", "registration_deadline")
    @classmethod
    def _to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, v: str) -> str:
        return _clean_title(v)

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, v: str) -> str:
        return _check_timezone_name(v)

    @model_validator(mode="after")
    def _check_window(self) -> "EventCreate":
        if self.end_time_utc <= self.start_time_utc:
            raise ValueError("End time must be after start time")
        return self


class EventUpdate(BaseModel):
    """Partial update; omitted fields keep their value, only nullable columns accept null."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    location: Optional[Location] = None
    start_time_utc: Optional[datetime] = None
    end_time_utc: Optional[datetime] = None
    timezone: Optional[str] = None
    registration_deadline: Optional[datetime] = None
    category: Optional[EventCategory] = None
    capacity: Optional[int] = Field(None, ge=1, le=10000)
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[Currency] = None
    image: Optional[str] = None
    tags: Optional[list[str]] = None
    requirements: Optional[str] = Field(None, max_length=1000)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    website: Optional[str] = None
    status: Optional[EventStatus] = None

    @field_validator(
        "title", "description", "location", "start_time_utc", "end_time_utc", "timezone",
        "category", "capacity", "price", "currency", "image", "tags", "requirements", "status",
    )
    @classmethod
    def _not_null(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("start_time_utc", "end_time_utc", "registration_deadline")
    @classmethod
    def _to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, v: str) -> str:
        return _clean_title(v)

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, v: str) -> str:
        return _check_timezone_name(v)

    @model_validator(mode="after")
    def _check_window(self) -> "EventUpdate":
        if self.start_time_utc and self.end_time_utc and self.end_time_utc <= self.start_time_utc:
            raise ValueError("End time must be after start time")
        return self


class AttendeeOut(BaseModel):
    user_id: str
    joined_at: datetime
    status: RSVPStatus

    model_config = {"from_attributes": True}


class EventOut(BaseModel):
    event_id: str
    title: str
    description: str
    location: Location
    start_time_utc: datetime
    end_time_utc: datetime
    timezone: str
    registration_deadline: Optional[datetime] = None
    category: EventCategory
    capacity: int
    price: float
    currency: Currency
    image: str
    tags: list[str] = []
    requirements: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    website: Optional[str] = None
    organizer_id: Optional[str] = None
    organizer: Optional[UserSummary] = None
    status: EventStatus
    is_approved: bool
    approved_at: Optional[datetime] = None
    attendees: list[AttendeeOut] = []
    attendee_count: int
    available_spots: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EventResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    event: EventOut
    user_rsvp: Optional[RSVPStatus] = None


class EventListResponse(BaseModel):
    success: bool = True
    events: list[EventOut]
    pagination: Pagination


class EventApproval(BaseModel):
    is_approved: bool


class UserDashboardResponse(BaseModel):
    success: bool = True
    stats: UserStats
    upcoming_events: list[EventOut]
    created_events: list[EventOut]
