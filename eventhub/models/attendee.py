"""EventAttendee ORM model: the event's attendee list, mirrored from RSVPs."""
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship

from eventhub.database import Base
from eventhub.timeutils import utcnow


class RSVPStatus(str, enum.Enum):
    attending = "attending"
    maybe = "maybe"
    not_attending = "not_attending"


class EventAttendee(Base):
    __tablename__ = "event_attendees"

    # Composite key: at most one entry per user per event
    event_id = Column(String(36), ForeignKey("events.event_id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    status = Column(SAEnum(RSVPStatus, native_enum=False), nullable=False, default=RSVPStatus.attending)

    event = relationship("Event", back_populates="attendees")
    user = relationship("User")
