"""Comment threading, likes, reports and moderation.

Threads are two levels deep: a top-level comment (``parent_id`` is null) and
its replies. Top-level comments list newest-first, replies oldest-first.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Query, Session, selectinload

from eventhub.errors import AuthorizationError, NotFoundError, ValidationError
from eventhub.models.admin import Admin
from eventhub.models.comment import Comment, CommentLike, CommentReport, DELETED_PLACEHOLDER, ReportReason
from eventhub.models.event import Event
from eventhub.models.user import User
from eventhub.schemas.comment import CommentOut
from eventhub.schemas.user import UserSummary
from eventhub.services import notification_service
from eventhub.timeutils import utcnow

logger = logging.getLogger(__name__)


def get_comment(db: Session, comment_id: str) -> Comment:
    comment = db.query(Comment).filter(Comment.comment_id == comment_id).first()
    if not comment:
        raise NotFoundError("Comment not found")
    return comment


def create_comment(
    db: Session,
    event_id: str,
    author: User,
    content: str,
    parent_id: Optional[str] = None,
) -> Comment:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")

    parent = None
    if parent_id:
        parent = db.query(Comment).filter(Comment.comment_id == parent_id).first()
        if not parent:
            raise NotFoundError("Parent comment not found")
        if parent.event_id != event_id:
            raise ValidationError("Parent comment does not belong to this event")
        if parent.parent_id is not None:
            raise ValidationError("Replies to replies are not supported")

    comment = Comment(
        event_id=event_id,
        author_id=author.user_id,
        content=content,
        parent_id=parent.comment_id if parent else None,
    )
    if parent is not None:
        parent.replies.append(comment)
    else:
        db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info("Comment %s created on event %s by user %s (parent=%s)",
                comment.comment_id, event_id, author.user_id, parent_id)

    if event.organizer is not None and event.organizer_id != author.user_id:
        notification_service.notify_new_comment(event.organizer, author, event, content)
    if parent is not None and parent.author_id != author.user_id and parent.author is not None:
        notification_service.notify_reply(parent.author, author, event, content)
    return comment


def update_comment(db: Session, comment_id: str, requester: User, content: str) -> Comment:
    comment = get_comment(db, comment_id)
    if comment.author_id != requester.user_id:
        raise AuthorizationError("You can only edit your own comments")
    if comment.is_deleted:
        raise ValidationError("Deleted comments cannot be edited")

    comment.content = content
    comment.is_edited = True
    comment.edited_at = utcnow()
    db.commit()
    db.refresh(comment)
    logger.info("Comment %s edited by user %s", comment_id, requester.user_id)
    return comment


def delete_comment(db: Session, comment_id: str, requester: User) -> None:
    """Hard delete by the author or the event organizer; top-level takes its replies along."""
    comment = get_comment(db, comment_id)
    event = db.query(Event).filter(Event.event_id == comment.event_id).first()
    is_author = comment.author_id == requester.user_id
    is_organizer = event is not None and event.organizer_id == requester.user_id
    if not is_author and not is_organizer:
        raise AuthorizationError("You can only delete your own comments or comments on your events")

    if comment.parent_id is None:
        removed = delete_replies(db, comment)
        logger.info("Deleted %d replies of comment %s", removed, comment_id)

    db.delete(comment)
    db.commit()
    logger.info("Comment %s deleted by user %s", comment_id, requester.user_id)


def delete_replies(db: Session, comment: Comment) -> int:
    """Delete every direct reply of ``comment`` (no commit)."""
    replies = db.query(Comment).filter(Comment.parent_id == comment.comment_id).all()
    for reply in replies:
        db.delete(reply)
    db.flush()
    db.expire(comment, ["replies"])
    return len(replies)


def toggle_like(db: Session, comment_id: str, user: User) -> tuple[int, bool]:
    """Like if absent, unlike if present. Returns ``(like_count, has_liked)``."""
    comment = get_comment(db, comment_id)
    existing = next((like for like in comment.likes if like.user_id == user.user_id), None)
    if existing is not None:
        comment.likes.remove(existing)
        has_liked = False
    else:
        comment.likes.append(CommentLike(user_id=user.user_id))
        has_liked = True
    db.commit()
    db.refresh(comment)
    logger.info("User %s %s comment %s", user.user_id, "liked" if has_liked else "unliked", comment_id)
    return comment.like_count, has_liked


def report_comment(db: Session, comment_id: str, user: User, reason: ReportReason) -> Comment:
    comment = get_comment(db, comment_id)
    comment.is_reported = True
    comment.reports.append(CommentReport(user_id=user.user_id, reason=reason))
    db.commit()
    db.refresh(comment)
    logger.info("Comment %s reported by user %s (%s)", comment_id, user.user_id, reason.value)
    return comment


def event_comments_query(db: Session, event_id: str) -> Query:
    """Approved top-level comments for an event, newest first, replies preloaded."""
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    return (
        db.query(Comment)
        .options(
            selectinload(Comment.author),
            selectinload(Comment.likes),
            selectinload(Comment.replies).selectinload(Comment.author),
            selectinload(Comment.replies).selectinload(Comment.likes),
        )
        .filter(
            Comment.event_id == event_id,
            Comment.parent_id.is_(None),
            Comment.is_approved.is_(True),
        )
        .order_by(Comment.created_at.desc())
    )


def user_comments_query(db: Session, user: User) -> Query:
    return (
        db.query(Comment)
        .filter(Comment.author_id == user.user_id)
        .order_by(Comment.created_at.desc())
    )


# --- Moderation (admin identity space) ---------------------------------------

def soft_delete(db: Session, comment_id: str, admin: Admin) -> Comment:
    """Keep the row, hide the text."""
    comment = get_comment(db, comment_id)
    if comment.is_deleted:
        raise ValidationError("Comment is already deleted")
    comment.is_deleted = True
    comment.deleted_at = utcnow()
    comment.content = DELETED_PLACEHOLDER
    comment.moderated_by_admin_id = admin.admin_id
    comment.moderated_at = utcnow()
    db.commit()
    db.refresh(comment)
    logger.info("Comment %s soft-deleted by admin %s", comment_id, admin.admin_id)
    return comment


def set_approval(db: Session, comment_id: str, admin: Admin, is_approved: bool) -> Comment:
    comment = get_comment(db, comment_id)
    comment.is_approved = is_approved
    comment.moderated_by_admin_id = admin.admin_id
    comment.moderated_at = utcnow()
    db.commit()
    db.refresh(comment)
    logger.info("Comment %s %s by admin %s", comment_id,
                "approved" if is_approved else "hidden", admin.admin_id)
    return comment


def reported_comments_query(db: Session) -> Query:
    return (
        db.query(Comment)
        .filter(Comment.is_reported.is_(True), Comment.is_deleted.is_(False))
        .order_by(Comment.updated_at.desc())
    )


def serialize_comment(comment: Comment, viewer_id: Optional[str] = None, with_replies: bool = True) -> CommentOut:
    """Build the API shape, with ``has_liked`` resolved for ``viewer_id``."""
    replies = []
    if with_replies and comment.parent_id is None:
        replies = [
            serialize_comment(reply, viewer_id, with_replies=False)
            for reply in comment.replies
            if reply.is_approved
        ]
    return CommentOut(
        comment_id=comment.comment_id,
        event_id=comment.event_id,
        author_id=comment.author_id,
        author=UserSummary.model_validate(comment.author) if comment.author else None,
        content=comment.content,
        parent_id=comment.parent_id,
        like_count=comment.like_count,
        reply_count=comment.reply_count,
        has_liked=viewer_id is not None and any(like.user_id == viewer_id for like in comment.likes),
        is_edited=comment.is_edited,
        edited_at=comment.edited_at,
        is_deleted=comment.is_deleted,
        is_reported=comment.is_reported,
        is_approved=comment.is_approved,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        replies=replies,
    )
