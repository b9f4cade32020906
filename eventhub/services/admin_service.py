"""Admin identity space: attempt-tracked login, admin management and the
moderation dashboard.
"""
import logging
from datetime import timedelta
from typing import Any, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from eventhub.config import settings
from eventhub.errors import AuthenticationError, AuthorizationError, ConflictError, NotFoundError
from eventhub.models.admin import Admin, AdminRole, AdminStatus, Permission
from eventhub.models.attendee import RSVPStatus
from eventhub.models.comment import Comment
from eventhub.models.event import Event
from eventhub.models.rsvp import RSVP
from eventhub.models.user import User, UserStatus
from eventhub.services.auth_service import hash_password, verify_password
from eventhub.services.event_service import like_pattern
from eventhub.timeutils import utcnow

logger = logging.getLogger(__name__)

MAX_LOGIN_ATTEMPTS = 5
LOCK_DURATION = timedelta(hours=2)
RECENT_WINDOW = timedelta(days=30)


def default_permissions(role: AdminRole) -> list[str]:
    if role == AdminRole.super_admin:
        return [p.value for p in Permission]
    return [
        Permission.manage_users.value,
        Permission.manage_events.value,
        Permission.manage_comments.value,
        Permission.view_analytics.value,
    ]


def login_with_attempts(db: Session, email: str, password: str) -> Admin:
    """Check credentials, counting failures; five in a row lock the account for two hours."""
    admin = db.query(Admin).filter(Admin.email == email.strip().lower()).first()
    if not admin or admin.status != AdminStatus.active:
        raise AuthenticationError("Invalid credentials")
    if admin.is_locked:
        logger.warning("Login refused for locked admin %s", admin.admin_id)
        raise AuthorizationError("Account is temporarily locked due to too many failed login attempts")

    if not verify_password(password, admin.password_hash):
        admin.login_attempts = (admin.login_attempts or 0) + 1
        if admin.login_attempts >= MAX_LOGIN_ATTEMPTS:
            admin.lock_until = utcnow() + LOCK_DURATION
            logger.warning("Admin %s locked after %d failed attempts", admin.admin_id, admin.login_attempts)
        db.commit()
        raise AuthenticationError("Invalid credentials")

    admin.login_attempts = 0
    admin.lock_until = None
    admin.last_login = utcnow()
    db.commit()
    db.refresh(admin)
    logger.info("Admin %s logged in", admin.admin_id)
    return admin


def create_admin(
    db: Session,
    email: str,
    password: str,
    name: str,
    role: AdminRole = AdminRole.admin,
    permissions: Optional[list[Permission]] = None,
    created_by: Optional[Admin] = None,
) -> Admin:
    email = email.strip().lower()
    if db.query(Admin).filter(Admin.email == email).first():
        raise ConflictError("Admin already exists with this email")

    admin = Admin(
        email=email,
        password_hash=hash_password(password),
        name=name.strip(),
        role=role,
        permissions=[p.value for p in permissions] if permissions is not None else default_permissions(role),
        created_by=created_by.admin_id if created_by else None,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Created %s %s", role.value, admin.admin_id)
    return admin


def create_super_admin(db: Session, email: str, password: str, name: str) -> Admin:
    return create_admin(db, email, password, name, role=AdminRole.super_admin)


def bootstrap_super_admin(db: Session) -> Optional[Admin]:
    """Create the configured super-admin once; later startups leave it alone."""
    if not settings.SUPER_ADMIN_EMAIL or not settings.SUPER_ADMIN_PASSWORD:
        return None
    existing = db.query(Admin).filter(Admin.email == settings.SUPER_ADMIN_EMAIL.strip().lower()).first()
    if existing:
        return existing
    return create_super_admin(db, settings.SUPER_ADMIN_EMAIL, settings.SUPER_ADMIN_PASSWORD, settings.SUPER_ADMIN_NAME)


def list_admins(db: Session) -> list[Admin]:
    return db.query(Admin).order_by(Admin.created_at.desc()).all()


# --- Dashboard ---------------------------------------------------------------

def dashboard_stats(db: Session) -> dict[str, Any]:
    since = utcnow() - RECENT_WINDOW
    now = utcnow()

    rsvp_distribution = {s.value: 0 for s in RSVPStatus}
    for status, count in db.query(RSVP.status, func.count(RSVP.rsvp_id)).group_by(RSVP.status).all():
        rsvp_distribution[status.value] = count

    top_organizers = (
        db.query(User.user_id, User.name, User.email, func.count(Event.event_id).label("event_count"))
        .join(Event, Event.organizer_id == User.user_id)
        .group_by(User.user_id, User.name, User.email)
        .order_by(func.count(Event.event_id).desc())
        .limit(5)
        .all()
    )
    upcoming = (
        db.query(Event)
        .filter(Event.start_time_utc > now)
        .order_by(Event.start_time_utc.asc())
        .limit(5)
        .all()
    )

    return {
        "overview": {
            "total_users": db.query(User).count(),
            "total_events": db.query(Event).count(),
            "total_rsvps": db.query(RSVP).count(),
            "total_comments": db.query(Comment).count(),
        },
        "recent": {
            "new_users": db.query(User).filter(User.created_at >= since).count(),
            "new_events": db.query(Event).filter(Event.created_at >= since).count(),
            "new_rsvps": db.query(RSVP).filter(RSVP.responded_at >= since).count(),
        },
        "upcoming_events": [
            {"event_id": e.event_id, "title": e.title, "start_time_utc": e.start_time_utc}
            for e in upcoming
        ],
        "top_organizers": [
            {"user_id": row.user_id, "name": row.name, "email": row.email, "event_count": row.event_count}
            for row in top_organizers
        ],
        "rsvp_distribution": rsvp_distribution,
    }


def recent_activity(db: Session, limit: int = 50) -> list[dict[str, Any]]:
    """Newest signups and event creations, merged newest first."""
    users = db.query(User).order_by(User.created_at.desc()).limit(limit).all()
    events = db.query(Event).order_by(Event.created_at.desc()).limit(limit).all()

    activities = [
        {
            "type": "user_joined",
            "data": {"user_id": u.user_id, "name": u.name, "email": u.email},
            "timestamp": u.created_at,
        }
        for u in users
    ] + [
        {
            "type": "event_created",
            "data": {"event_id": e.event_id, "title": e.title, "organizer_id": e.organizer_id},
            "timestamp": e.created_at,
        }
        for e in events
    ]
    activities.sort(key=lambda a: a["timestamp"], reverse=True)
    return activities[:limit]


# --- User and event moderation ----------------------------------------------

def users_query(db: Session, search: Optional[str] = None, user_status: Optional[UserStatus] = None) -> Query:
    query = db.query(User)
    if search:
        pattern = like_pattern(search.strip())
        query = query.filter(or_(User.name.ilike(pattern, escape="\\"), User.email.ilike(pattern, escape="\\")))
    if user_status is not None:
        query = query.filter(User.status == user_status)
    return query.order_by(User.created_at.desc())


def toggle_user_status(db: Session, user_id: str, admin: Admin) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    user.status = UserStatus.active if user.status == UserStatus.blocked else UserStatus.blocked
    db.commit()
    db.refresh(user)
    logger.info("Admin %s set user %s to %s", admin.admin_id, user_id, user.status.value)
    return user


def events_query(db: Session, search: Optional[str] = None, when: Optional[str] = None) -> Query:
    """All events regardless of visibility; ``when`` is ``upcoming`` or ``past``."""
    query = db.query(Event)
    if search:
        pattern = like_pattern(search.strip())
        query = query.filter(or_(
            Event.title.ilike(pattern, escape="\\"),
            Event.description.ilike(pattern, escape="\\"),
        ))
    if when == "upcoming":
        query = query.filter(Event.start_time_utc >= utcnow())
    elif when == "past":
        query = query.filter(Event.start_time_utc < utcnow())
    return query.order_by(Event.created_at.desc())


def set_event_approval(db: Session, event_id: str, admin: Admin, is_approved: bool) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    event.is_approved = is_approved
    event.approved_by_admin_id = admin.admin_id
    event.approved_at = utcnow() if is_approved else None
    db.commit()
    db.refresh(event)
    logger.info("Admin %s %s event %s", admin.admin_id, "approved" if is_approved else "unapproved", event_id)
    return event
