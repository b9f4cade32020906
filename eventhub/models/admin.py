"""Admin ORM model: separate identity space from User."""
import enum
import uuid
from sqlalchemy import Column, String, Integer, DateTime, JSON, ForeignKey, Enum as SAEnum

from eventhub.database import Base
from eventhub.timeutils import utcnow, ensure_utc


class AdminRole(str, enum.Enum):
    admin = "admin"
    super_admin = "super-admin"


class AdminStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"


class Permission(str, enum.Enum):
    manage_users = "manage-users"
    manage_events = "manage-events"
    manage_comments = "manage-comments"
    view_analytics = "view-analytics"
    manage_admins = "manage-admins"
    system_settings = "system-settings"


class Admin(Base):
    __tablename__ = "admins"

    admin_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    role = Column(SAEnum(AdminRole, native_enum=False), nullable=False, default=AdminRole.admin, index=True)
    permissions = Column(JSON, nullable=False, default=list)  # list of Permission values
    status = Column(SAEnum(AdminStatus, native_enum=False), nullable=False, default=AdminStatus.active, index=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    login_attempts = Column(Integer, nullable=False, default=0)
    lock_until = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String(36), ForeignKey("admins.admin_id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def is_locked(self) -> bool:
        return self.lock_until is not None and ensure_utc(self.lock_until) > utcnow()

    def has_permission(self, permission: Permission | str) -> bool:
        value = permission.value if isinstance(permission, Permission) else permission
        return self.role == AdminRole.super_admin or value in (self.permissions or [])
