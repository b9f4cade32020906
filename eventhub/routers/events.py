"""Event API routes: delegates to event_service for invariant enforcement."""
import logging
from datetime import datetime
from typing import Literal, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.auth import get_current_user, get_optional_user
from eventhub.database import get_db
from eventhub.models.event import EventCategory, EventStatus
from eventhub.models.user import User
from eventhub.pagination import PageParams, paginate
from eventhub.schemas.common import MessageResponse
from eventhub.schemas.event import EventCreate, EventListResponse, EventResponse, EventUpdate
from eventhub.services import event_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=EventListResponse)
def list_events(
    category: Optional[EventCategory] = Query(None),
    location: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    date: Optional[datetime] = Query(None, description="Events starting on this UTC day"),
    sort_by: Literal["start_time_utc", "created_at", "title", "price"] = Query("start_time_utc"),
    sort_order: Literal["asc", "desc"] = Query("asc"),
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
):
    """List published, approved, upcoming events."""
    query = event_service.public_events_query(db, category, location, search, date, sort_by, sort_order)
    events, pagination = paginate(query, params)
    return EventListResponse(events=events, pagination=pagination)


@router.get("/my/created", response_model=EventListResponse)
def my_events(
    event_status: Optional[EventStatus] = Query(None, alias="status"),
    params: PageParams = Depends(),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Events organised by the caller, any status."""
    events, pagination = paginate(event_service.organizer_events_query(db, user, event_status), params)
    return EventListResponse(events=events, pagination=pagination)


@router.get("/{event_id}", response_model=EventResponse)
def get_event(
    event_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Fetch a single event with attendees and the caller's RSVP status."""
    event, user_rsvp = event_service.get_event_for_viewer(db, event_id, viewer)
    return EventResponse(event=event, user_rsvp=user_rsvp)


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    event = event_service.create_event(db, user, payload.model_dump())
    return EventResponse(message="Event created successfully", event=event)


@router.put("/{event_id}", response_model=EventResponse)
def update_event(
    event_id: str,
    payload: EventUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Partial update by the organizer (or a user with role admin)."""
    event = event_service.update_event(db, event_id, user, payload.model_dump(exclude_unset=True))
    return EventResponse(message="Event updated successfully", event=event)


@router.delete("/{event_id}", response_model=MessageResponse)
def delete_event(event_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    event_service.delete_event(db, event_id, user)
    return MessageResponse(message="Event deleted successfully")
