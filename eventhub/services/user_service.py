"""User accounts: signup/login, password reset, profile edits and deletion."""
import logging
from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from eventhub.errors import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from eventhub.models.attendee import RSVPStatus
from eventhub.models.comment import Comment, CommentLike, CommentReport
from eventhub.models.event import Event, EventStatus
from eventhub.models.rsvp import RSVP
from eventhub.models.user import User, UserStatus
from eventhub.services import notification_service
from eventhub.services.attendance_service import remove_attendance
from eventhub.services.auth_service import generate_reset_token, hash_password, hash_reset_token, verify_password
from eventhub.services.event_service import like_pattern
from eventhub.timeutils import ensure_utc, utcnow

logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = "DELETE"


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == _normalize_email(email)).first()


def signup(db: Session, name: str, email: str, password: str) -> User:
    if get_user_by_email(db, email):
        raise ConflictError("User already exists with this email")

    user = User(name=name.strip(), email=_normalize_email(email), password_hash=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User %s signed up", user.user_id)
    notification_service.send_welcome_email(user)
    return user


def login(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid email or password")
    if user.is_blocked:
        raise AuthorizationError("Account has been blocked. Please contact support.")
    logger.info("User %s logged in", user.user_id)
    return user


def request_password_reset(db: Session, email: str) -> None:
    """Store a hashed reset token and email the raw one; silent for unknown emails."""
    user = get_user_by_email(db, email)
    if not user:
        logger.info("Password reset requested for unknown email")
        return
    raw, digest, expires = generate_reset_token()
    user.reset_password_token = digest
    user.reset_password_expires = expires
    db.commit()
    logger.info("Password reset token issued for user %s", user.user_id)
    notification_service.send_password_reset_email(user, raw)


def reset_password(db: Session, raw_token: str, new_password: str) -> User:
    user = (
        db.query(User)
        .filter(User.reset_password_token == hash_reset_token(raw_token))
        .first()
    )
    if (
        not user
        or user.reset_password_expires is None
        or ensure_utc(user.reset_password_expires) <= utcnow()
    ):
        raise ValidationError("Invalid or expired reset token")

    user.password_hash = hash_password(new_password)
    user.reset_password_token = None
    user.reset_password_expires = None
    db.commit()
    db.refresh(user)
    logger.info("Password reset for user %s", user.user_id)
    return user


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def user_stats(db: Session, user: User) -> dict[str, int]:
    return {
        "events_created": db.query(Event).filter(Event.organizer_id == user.user_id).count(),
        "events_attended": (
            db.query(RSVP)
            .filter(RSVP.user_id == user.user_id, RSVP.status == RSVPStatus.attending)
            .count()
        ),
        "comments_posted": db.query(Comment).filter(Comment.author_id == user.user_id).count(),
    }


def dashboard(db: Session, user: User, limit: int = 5) -> dict[str, Any]:
    """Upcoming events the user is attending plus their most recent organised events."""
    now = utcnow()
    upcoming = (
        db.query(Event)
        .join(RSVP, RSVP.event_id == Event.event_id)
        .filter(
            RSVP.user_id == user.user_id,
            RSVP.status == RSVPStatus.attending,
            Event.start_time_utc >= now,
        )
        .order_by(Event.start_time_utc.asc())
        .limit(limit)
        .all()
    )
    created = (
        db.query(Event)
        .filter(Event.organizer_id == user.user_id)
        .order_by(Event.created_at.desc())
        .limit(limit)
        .all()
    )
    return {"stats": user_stats(db, user), "upcoming_events": upcoming, "created_events": created}


def update_profile(db: Session, user: User, updates: dict[str, Any]) -> User:
    for field in ("name", "bio", "profile_pic"):
        if updates.get(field) is not None:
            setattr(user, field, updates[field].strip() if field == "name" else updates[field])
    db.commit()
    db.refresh(user)
    logger.info("Updated profile of user %s", user.user_id)
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise ValidationError("Current password is incorrect")
    if len(new_password) < 6:
        raise ValidationError("New password must be at least 6 characters long")
    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info("Password changed for user %s", user.user_id)


def change_email(db: Session, user: User, new_email: str, password: str) -> User:
    if not verify_password(password, user.password_hash):
        raise ValidationError("Password is incorrect")
    email = _normalize_email(new_email)
    existing = get_user_by_email(db, email)
    if existing and existing.user_id != user.user_id:
        raise ConflictError("Email is already in use")
    user.email = email
    user.email_verified = False
    db.commit()
    db.refresh(user)
    logger.info("Email changed for user %s", user.user_id)
    return user


def search_users(db: Session, text: str) -> Query:
    text = text.strip()
    if len(text) < 2:
        raise ValidationError("Search query must be at least 2 characters long")
    pattern = like_pattern(text)
    return (
        db.query(User)
        .filter(
            User.status == UserStatus.active,
            or_(User.name.ilike(pattern, escape="\\"), User.email.ilike(pattern, escape="\\")),
        )
        .order_by(User.name.asc())
    )


def delete_user_data(db: Session, user: User) -> None:
    """Remove a user and everything they own (no commit).

    Refused while the user organises upcoming events that are not cancelled.
    Past or cancelled events stay, with the organizer reference cleared.
    """
    upcoming = (
        db.query(Event)
        .filter(
            Event.organizer_id == user.user_id,
            Event.start_time_utc >= utcnow(),
            Event.status != EventStatus.cancelled,
        )
        .count()
    )
    if upcoming:
        raise ValidationError(
            "Cannot delete account while organizing upcoming events. Please cancel or transfer them first."
        )

    for rsvp in db.query(RSVP).filter(RSVP.user_id == user.user_id).all():
        remove_attendance(db, rsvp.event_id, user.user_id)
        db.delete(rsvp)

    comments = db.query(Comment).filter(Comment.author_id == user.user_id).all()
    # Replies to the user's comments belong to the thread and go with it
    for comment in sorted(comments, key=lambda c: c.parent_id is None):
        db.delete(comment)
    db.query(CommentLike).filter(CommentLike.user_id == user.user_id).delete(synchronize_session=False)
    db.query(CommentReport).filter(CommentReport.user_id == user.user_id).delete(synchronize_session=False)

    db.query(Event).filter(Event.organizer_id == user.user_id).update(
        {Event.organizer_id: None}, synchronize_session="fetch",
    )
    db.flush()
    db.delete(user)


def delete_account(db: Session, user: User, password: str, confirmation: str) -> None:
    if not verify_password(password, user.password_hash):
        raise ValidationError("Password is incorrect")
    if confirmation != DELETE_CONFIRMATION:
        raise ValidationError('Please type "DELETE" to confirm account deletion')
    user_id = user.user_id
    delete_user_data(db, user)
    db.commit()
    logger.info("User %s deleted their account", user_id)
