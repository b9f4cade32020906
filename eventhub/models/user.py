"""User ORM model: end-user identity space."""
import enum
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Enum as SAEnum

from eventhub.database import Base
from eventhub.timeutils import utcnow


class UserRole(str, enum.Enum):
    user = "user"
    admin = "admin"


class UserStatus(str, enum.Enum):
    active = "active"
    blocked = "blocked"


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    bio = Column(String(500), nullable=False, default="")
    profile_pic = Column(String(500), nullable=False, default="")
    role = Column(SAEnum(UserRole, native_enum=False), nullable=False, default=UserRole.user, index=True)
    status = Column(SAEnum(UserStatus, native_enum=False), nullable=False, default=UserStatus.active, index=True)
    reset_password_token = Column(String(64), nullable=True, index=True)  # sha256 hex
    reset_password_expires = Column(DateTime(timezone=True), nullable=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def is_blocked(self) -> bool:
        return self.status == UserStatus.blocked
