"""Pydantic schemas for RSVPs."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from eventhub.models.attendee import RSVPStatus
from eventhub.schemas.common import Pagination
from eventhub.schemas.user import UserSummary


class RSVPRequest(BaseModel):
    status: RSVPStatus = RSVPStatus.attending
    notes: Optional[str] = Field(None, max_length=500)
    guests: Optional[int] = Field(None, ge=0, le=10)
    special_requests: Optional[str] = Field(None, max_length=300)


class RSVPEventSummary(BaseModel):
    event_id: str
    title: str
    start_time_utc: datetime
    end_time_utc: datetime
    city: str
    capacity: int

    model_config = {"from_attributes": True}


class RSVPOut(BaseModel):
    rsvp_id: str
    user_id: str
    event_id: str
    status: RSVPStatus
    guests: int
    notes: str
    special_requests: str
    is_checked_in: bool
    check_in_time: Optional[datetime] = None
    responded_at: datetime
    created_at: datetime
    updated_at: datetime
    total_attendees: int
    user: Optional[UserSummary] = None
    event: Optional[RSVPEventSummary] = None

    model_config = {"from_attributes": True}


class RSVPResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    rsvp: RSVPOut


class RSVPListResponse(BaseModel):
    success: bool = True
    rsvps: list[RSVPOut]
    pagination: Pagination


class StatusStat(BaseModel):
    count: int = 0
    total_guests: int = 0


class RSVPStats(BaseModel):
    attending: StatusStat = Field(default_factory=StatusStat)
    maybe: StatusStat = Field(default_factory=StatusStat)
    not_attending: StatusStat = Field(default_factory=StatusStat)


class EventRSVPListResponse(BaseModel):
    success: bool = True
    rsvps: list[RSVPOut]
    counts: dict[str, int]
    pagination: Pagination


class RSVPStatsResponse(BaseModel):
    success: bool = True
    stats: RSVPStats
