"""RSVP write paths (upsert, delete, check-in) plus per-event statistics.

Capacity is enforced inside the RSVP transaction: the event row is locked,
attending entries for other users are recounted, and only then is the RSVP
written and mirrored onto the attendee list.
"""
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from eventhub.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from eventhub.models.attendee import RSVPStatus
from eventhub.models.event import Event, EventStatus
from eventhub.models.rsvp import RSVP
from eventhub.models.user import User
from eventhub.services import notification_service
from eventhub.services.attendance_service import count_attending, remove_attendance, sync_attendance
from eventhub.timeutils import ensure_utc, utcnow

logger = logging.getLogger(__name__)


def _lock_event(db: Session, event_id: str) -> Event:
    event = (
        db.query(Event)
        .filter(Event.event_id == event_id)
        .populate_existing()
        .with_for_update()
        .first()
    )
    if not event:
        raise NotFoundError("Event not found")
    return event


def _check_rsvp_allowed(event: Event, user: User) -> None:
    if event.organizer_id == user.user_id:
        raise ValidationError("Event organizers cannot RSVP to their own events")
    if event.status != EventStatus.published or not event.is_approved:
        raise ValidationError("Event is not open for RSVPs")
    if event.registration_deadline and utcnow() > ensure_utc(event.registration_deadline):
        raise ValidationError("Registration deadline has passed")


def upsert_rsvp(
    db: Session,
    event_id: str,
    user: User,
    status: RSVPStatus,
    notes: Optional[str] = None,
    guests: Optional[int] = None,
    special_requests: Optional[str] = None,
) -> tuple[RSVP, bool]:
    """Create or update the caller's RSVP. Returns ``(rsvp, created)``."""
    event = _lock_event(db, event_id)
    _check_rsvp_allowed(event, user)

    if status == RSVPStatus.attending and count_attending(event, exclude_user_id=user.user_id) >= event.capacity:
        raise ValidationError("Event has reached maximum capacity")

    rsvp = db.query(RSVP).filter(RSVP.user_id == user.user_id, RSVP.event_id == event_id).first()
    created = rsvp is None
    if created:
        rsvp = RSVP(
            user_id=user.user_id,
            event_id=event_id,
            status=status,
            notes=notes or "",
            guests=guests or 0,
            special_requests=special_requests or "",
        )
        db.add(rsvp)
    else:
        rsvp.status = status
        if notes is not None:
            rsvp.notes = notes
        if guests is not None:
            rsvp.guests = guests
        if special_requests is not None:
            rsvp.special_requests = special_requests
        rsvp.responded_at = utcnow()

    try:
        db.flush()
        sync_attendance(db, rsvp)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Duplicate RSVP for user %s on event %s", user.user_id, event_id)
        raise ConflictError("RSVP already exists for this event")
    db.refresh(rsvp)

    logger.info("User %s RSVP'd '%s' to event %s (%s)", user.user_id, status.value, event_id,
                "created" if created else "updated")

    if event.organizer is not None:
        notification_service.notify_organizer_rsvp(
            event.organizer, user, event, "created" if created else "updated", status.value,
        )
    if status == RSVPStatus.attending:
        notification_service.send_rsvp_confirmation(user, event)
    return rsvp, created


def delete_rsvp(db: Session, event_id: str, user: User) -> None:
    rsvp = db.query(RSVP).filter(RSVP.user_id == user.user_id, RSVP.event_id == event_id).first()
    if not rsvp:
        raise NotFoundError("RSVP not found")

    db.delete(rsvp)
    remove_attendance(db, event_id, user.user_id)
    db.commit()
    logger.info("User %s cancelled RSVP for event %s", user.user_id, event_id)

    event = db.get(Event, event_id)
    if event is not None and event.organizer is not None:
        notification_service.notify_organizer_rsvp(event.organizer, user, event, "cancelled")


def get_event_for_organizer(db: Session, event_id: str, user: User) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    if event.organizer_id != user.user_id:
        raise AuthorizationError("Only event organizers can view RSVPs")
    return event


def status_counts(db: Session, event_id: str) -> dict[str, int]:
    rows = (
        db.query(RSVP.status, func.count(RSVP.rsvp_id))
        .filter(RSVP.event_id == event_id)
        .group_by(RSVP.status)
        .all()
    )
    counts = {s.value: 0 for s in RSVPStatus}
    for status, count in rows:
        counts[status.value] = count
    return counts


def event_stats(db: Session, event_id: str) -> dict[str, dict[str, int]]:
    rows = (
        db.query(RSVP.status, func.count(RSVP.rsvp_id), func.coalesce(func.sum(RSVP.guests), 0))
        .filter(RSVP.event_id == event_id)
        .group_by(RSVP.status)
        .all()
    )
    stats = {s.value: {"count": 0, "total_guests": 0} for s in RSVPStatus}
    for status, count, guests in rows:
        stats[status.value] = {"count": count, "total_guests": int(guests)}
    return stats


def check_in(db: Session, event_id: str, organizer: User, user_id: str) -> RSVP:
    """Organizer marks an attending guest as arrived."""
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    if event.organizer_id != organizer.user_id:
        raise AuthorizationError("Only event organizers can check in attendees")

    rsvp = db.query(RSVP).filter(RSVP.user_id == user_id, RSVP.event_id == event_id).first()
    if not rsvp:
        raise NotFoundError("RSVP not found")
    if rsvp.status != RSVPStatus.attending:
        raise ValidationError("Only attending guests can be checked in")
    if rsvp.is_checked_in:
        raise ValidationError("Attendee is already checked in")

    rsvp.is_checked_in = True
    rsvp.check_in_time = utcnow()
    db.commit()
    db.refresh(rsvp)
    logger.info("Checked in user %s at event %s", user_id, event_id)
    return rsvp


def get_user_rsvp(db: Session, event_id: str, user: User) -> RSVP:
    rsvp = db.query(RSVP).filter(RSVP.user_id == user.user_id, RSVP.event_id == event_id).first()
    if not rsvp:
        raise NotFoundError("RSVP not found")
    return rsvp


def user_rsvps_query(db: Session, user: User, status: Optional[RSVPStatus] = None) -> Query:
    query = db.query(RSVP).filter(RSVP.user_id == user.user_id)
    if status is not None:
        query = query.filter(RSVP.status == status)
    return query.order_by(RSVP.responded_at.desc())


def event_rsvps_query(db: Session, event_id: str, status: Optional[RSVPStatus] = None) -> Query:
    query = db.query(RSVP).filter(RSVP.event_id == event_id)
    if status is not None:
        query = query.filter(RSVP.status == status)
    return query.order_by(RSVP.created_at.asc())
