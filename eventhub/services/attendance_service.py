"""Attendance synchronization: keeps ``Event.attendees`` mirrored from RSVPs.

RSVP rows are the source of truth; the attendee list is a cache of every
non-``not_attending`` RSVP. These functions are called explicitly by each RSVP
write path inside the same transaction, so the caller's commit publishes the
RSVP and its attendee entry together.
"""
import logging

from sqlalchemy.orm import Session

from eventhub.models.attendee import EventAttendee, RSVPStatus
from eventhub.models.event import Event
from eventhub.models.rsvp import RSVP

logger = logging.getLogger(__name__)


def _drop_entry(db: Session, event: Event, user_id: str) -> bool:
    stale = [a for a in event.attendees if a.user_id == user_id]
    for entry in stale:
        event.attendees.remove(entry)
    if stale:
        # Flush the delete so a fresh entry with the same key can be inserted
        db.flush()
    return bool(stale)


def sync_attendance(db: Session, rsvp: RSVP) -> None:
    """Mirror one RSVP onto its event's attendee list. No-op if the event is gone."""
    event = db.get(Event, rsvp.event_id)
    if event is None:
        logger.warning("Attendance sync skipped: event %s no longer exists", rsvp.event_id)
        return

    _drop_entry(db, event, rsvp.user_id)
    if rsvp.status != RSVPStatus.not_attending:
        event.attendees.append(
            EventAttendee(
                user_id=rsvp.user_id,
                joined_at=rsvp.created_at,
                status=rsvp.status,
            )
        )
    db.flush()
    logger.debug("Synced attendance for user %s on event %s (%s)", rsvp.user_id, rsvp.event_id, rsvp.status.value)


def remove_attendance(db: Session, event_id: str, user_id: str) -> None:
    """Drop a user's attendee entry after their RSVP is deleted."""
    event = db.get(Event, event_id)
    if event is None:
        logger.warning("Attendance removal skipped: event %s no longer exists", event_id)
        return
    if _drop_entry(db, event, user_id):
        logger.debug("Removed attendee %s from event %s", user_id, event_id)


def count_attending(event: Event, exclude_user_id: str | None = None) -> int:
    """Attending entries, optionally ignoring one user (their own re-RSVP)."""
    return sum(
        1 for a in event.attendees
        if a.status == RSVPStatus.attending and a.user_id != exclude_user_id
    )
