"""Core event service: creation, updates, deletion and public listing.

Responsibilities:
- Authorization hook: only the organizer (or a user with role ``admin``) may
  update or delete an event
- Start times must lie in the future whenever they are set
- Visibility: unpublished/unapproved events exist only for their organizer
- Deleting an event removes its RSVPs, comments and attendee list
- Attendees are told about updates (best effort)
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from eventhub.errors import AuthorizationError, NotFoundError, ValidationError
from eventhub.models.attendee import RSVPStatus
from eventhub.models.comment import Comment
from eventhub.models.event import Event, EventCategory, EventStatus
from eventhub.models.rsvp import RSVP
from eventhub.models.user import User, UserRole
from eventhub.services import notification_service
from eventhub.timeutils import ensure_utc, utcnow

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "start_time_utc": Event.start_time_utc,
    "created_at": Event.created_at,
    "title": Event.title,
    "price": Event.price,
}

LOCATION_FIELDS = ("address", "city", "state", "country", "latitude", "longitude")


def like_pattern(text: str) -> str:
    """Case-insensitive substring pattern with LIKE wildcards escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _check_authorization(event: Event, actor: User, action: str) -> None:
    """Only the organizer or a user with role admin may modify an event."""
    if event.organizer_id != actor.user_id and actor.role != UserRole.admin:
        raise AuthorizationError(f"Not authorized to {action} this event")


def _check_future(start_utc: datetime) -> None:
    if ensure_utc(start_utc) <= utcnow():
        raise ValidationError("Event date must be in the future")


def get_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    return event


def is_publicly_visible(event: Event) -> bool:
    return event.status == EventStatus.published and event.is_approved


def get_event_for_viewer(db: Session, event_id: str, viewer: Optional[User]) -> tuple[Event, Optional[RSVPStatus]]:
    """Fetch an event honouring visibility; also return the viewer's RSVP status."""
    event = get_event(db, event_id)
    if not is_publicly_visible(event):
        privileged = viewer is not None and (
            viewer.user_id == event.organizer_id or viewer.role == UserRole.admin
        )
        if not privileged:
            raise NotFoundError("Event not found")

    user_rsvp = None
    if viewer is not None:
        rsvp = db.query(RSVP).filter(RSVP.event_id == event_id, RSVP.user_id == viewer.user_id).first()
        user_rsvp = rsvp.status if rsvp else None
    return event, user_rsvp


def create_event(db: Session, organizer: User, data: dict[str, Any]) -> Event:
    """Create an event owned by ``organizer`` from validated payload data."""
    _check_future(data["start_time_utc"])

    location = data.pop("location")
    event = Event(**data, **location, organizer_id=organizer.user_id)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s) by organizer %s", event.title, event.event_id, organizer.user_id)
    return event


def update_event(db: Session, event_id: str, actor: User, updates: dict[str, Any]) -> Event:
    """Apply a partial update and notify attending users."""
    event = get_event(db, event_id)
    _check_authorization(event, actor, "update")

    if updates.get("start_time_utc") is not None:
        _check_future(updates["start_time_utc"])

    location = updates.pop("location", None)
    if location:
        for field in LOCATION_FIELDS:
            if field in location:
                setattr(event, field, location[field])

    for field, value in updates.items():
        if hasattr(event, field) and field not in ("event_id", "organizer_id", "created_at"):
            setattr(event, field, value)

    if ensure_utc(event.end_time_utc) <= ensure_utc(event.start_time_utc):
        raise ValidationError("End time must be after start time")

    event.updated_at = utcnow()
    db.commit()
    db.refresh(event)
    logger.info("Updated event %s by user %s", event_id, actor.user_id)

    for entry in event.attendees:
        if entry.status == RSVPStatus.attending and entry.user is not None:
            notification_service.send_event_update(entry.user, event)
    return event


def purge_event(db: Session, event: Event) -> None:
    """Delete an event together with its RSVPs, comments and attendee list (no commit)."""
    db.query(RSVP).filter(RSVP.event_id == event.event_id).delete(synchronize_session=False)
    comments = db.query(Comment).filter(Comment.event_id == event.event_id).all()
    # Replies first so no parent row disappears under a child
    for comment in sorted(comments, key=lambda c: c.parent_id is None):
        db.delete(comment)
    db.flush()
    db.delete(event)


def delete_event(db: Session, event_id: str, actor: User) -> None:
    event = get_event(db, event_id)
    _check_authorization(event, actor, "delete")
    purge_event(db, event)
    db.commit()
    logger.info("Deleted event %s by user %s", event_id, actor.user_id)


def public_events_query(
    db: Session,
    category: Optional[EventCategory] = None,
    location: Optional[str] = None,
    search: Optional[str] = None,
    on_date: Optional[datetime] = None,
    sort_by: str = "start_time_utc",
    sort_order: str = "asc",
) -> Query:
    """Published, approved, upcoming events matching the filters."""
    query = db.query(Event).filter(
        Event.status == EventStatus.published,
        Event.is_approved.is_(True),
    )

    if on_date is not None:
        day_start = ensure_utc(on_date).replace(hour=0, minute=0, second=0, microsecond=0)
        query = query.filter(
            Event.start_time_utc >= max(day_start, utcnow()),
            Event.start_time_utc < day_start + timedelta(days=1),
        )
    else:
        query = query.filter(Event.start_time_utc >= utcnow())

    if category is not None:
        query = query.filter(Event.category == category)

    if location:
        pattern = like_pattern(location)
        query = query.filter(or_(
            Event.city.ilike(pattern, escape="\\"),
            Event.country.ilike(pattern, escape="\\"),
            Event.address.ilike(pattern, escape="\\"),
        ))

    if search:
        pattern = like_pattern(search.strip())
        query = query.filter(or_(
            Event.title.ilike(pattern, escape="\\"),
            Event.description.ilike(pattern, escape="\\"),
            Event.city.ilike(pattern, escape="\\"),
            Event.country.ilike(pattern, escape="\\"),
            Event.address.ilike(pattern, escape="\\"),
        ))

    column = SORTABLE_FIELDS.get(sort_by, Event.start_time_utc)
    query = query.order_by(column.desc() if sort_order == "desc" else column.asc(), Event.event_id)
    return query


def organizer_events_query(db: Session, organizer: User, event_status: Optional[EventStatus] = None) -> Query:
    query = db.query(Event).filter(Event.organizer_id == organizer.user_id)
    if event_status is not None:
        query = query.filter(Event.status == event_status)
    return query.order_by(Event.created_at.desc())
