"""Event ORM model."""
import enum
import uuid
from sqlalchemy import (
    Column, String, Text, DateTime, Integer, Float, Boolean, JSON, ForeignKey, Enum as SAEnum,
)
from sqlalchemy.orm import relationship

from eventhub.database import Base
from eventhub.models.attendee import RSVPStatus
from eventhub.timeutils import utcnow


class EventStatus(str, enum.Enum):
    draft = "draft"
    published = "published"
    cancelled = "cancelled"
    completed = "completed"


class EventCategory(str, enum.Enum):
    technology = "Technology"
    business = "Business"
    arts_culture = "Arts & Culture"
    sports_fitness = "Sports & Fitness"
    health_wellness = "Health & Wellness"
    food_drink = "Food & Drink"
    music = "Music"
    education = "Education"
    social = "Social"
    networking = "Networking"
    other = "Other"


class Currency(str, enum.Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"
    CAD = "CAD"
    AUD = "AUD"


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)

    # Structured location
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    start_time_utc = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time_utc = Column(DateTime(timezone=True), nullable=False)
    timezone = Column(String(50), nullable=False, default="UTC")  # IANA tz
    registration_deadline = Column(DateTime(timezone=True), nullable=True)

    category = Column(SAEnum(EventCategory, native_enum=False), nullable=False, index=True)
    capacity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False, default=0)
    currency = Column(SAEnum(Currency, native_enum=False), nullable=False, default=Currency.USD)
    image = Column(String(500), nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)
    requirements = Column(String(1000), nullable=False, default="")
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    website = Column(String(500), nullable=True)

    # Nullable: stripped rather than cascade-deleted when the organizer account goes
    organizer_id = Column(String(36), ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True, index=True)
    status = Column(SAEnum(EventStatus, native_enum=False), nullable=False, default=EventStatus.published, index=True)
    is_approved = Column(Boolean, nullable=False, default=True, index=True)
    approved_by_admin_id = Column(String(36), ForeignKey("admins.admin_id", ondelete="SET NULL"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    organizer = relationship("User", foreign_keys=[organizer_id])
    attendees = relationship(
        "EventAttendee",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventAttendee.joined_at",
    )

    @property
    def attendee_count(self) -> int:
        return sum(1 for a in self.attendees if a.status == RSVPStatus.attending)

    @property
    def available_spots(self) -> int:
        return self.capacity - self.attendee_count

    @property
    def location(self) -> dict:
        return {
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "country": self.country,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }
