"""RSVP ORM model: source of truth for event attendance."""
import uuid
from sqlalchemy import (
    Column, String, Integer, Boolean, DateTime, ForeignKey, Index, UniqueConstraint, Enum as SAEnum,
)
from sqlalchemy.orm import relationship

from eventhub.database import Base
from eventhub.models.attendee import RSVPStatus
from eventhub.timeutils import utcnow


class RSVP(Base):
    __tablename__ = "rsvps"
    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_rsvp_user_event"),
        Index("ix_rsvps_event_status", "event_id", "status"),
        Index("ix_rsvps_user_status", "user_id", "status"),
    )

    rsvp_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    event_id = Column(String(36), ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False)
    status = Column(SAEnum(RSVPStatus, native_enum=False), nullable=False, default=RSVPStatus.attending)
    guests = Column(Integer, nullable=False, default=0)
    notes = Column(String(500), nullable=False, default="")
    special_requests = Column(String(300), nullable=False, default="")
    is_checked_in = Column(Boolean, nullable=False, default=False)
    check_in_time = Column(DateTime(timezone=True), nullable=True)
    responded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User")
    event = relationship("Event")

    @property
    def total_attendees(self) -> int:
        return 1 + (self.guests or 0)
