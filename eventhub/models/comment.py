"""Comment, CommentLike and CommentReport ORM models."""
import enum
import uuid
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index, Enum as SAEnum
from sqlalchemy.orm import relationship

from eventhub.database import Base
from eventhub.timeutils import utcnow

DELETED_PLACEHOLDER = "[This comment has been deleted]"


class ReportReason(str, enum.Enum):
    spam = "spam"
    inappropriate = "inappropriate"
    harassment = "harassment"
    other = "other"


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_event_created", "event_id", "created_at"),
        Index("ix_comments_deleted_approved", "is_deleted", "is_approved"),
    )

    comment_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False)
    author_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    parent_id = Column(String(36), ForeignKey("comments.comment_id", ondelete="CASCADE"), nullable=True, index=True)
    is_edited = Column(Boolean, nullable=False, default=False)
    edited_at = Column(DateTime(timezone=True), nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    is_reported = Column(Boolean, nullable=False, default=False)
    is_approved = Column(Boolean, nullable=False, default=True)
    moderated_by_admin_id = Column(String(36), ForeignKey("admins.admin_id", ondelete="SET NULL"), nullable=True)
    moderated_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    author = relationship("User")
    event = relationship("Event")
    parent = relationship("Comment", remote_side=[comment_id], back_populates="replies")
    # Replies are listed oldest-first
    replies = relationship(
        "Comment",
        back_populates="parent",
        order_by="Comment.created_at",
        cascade="all, delete-orphan",
    )
    likes = relationship("CommentLike", back_populates="comment", cascade="all, delete-orphan")
    reports = relationship("CommentReport", back_populates="comment", cascade="all, delete-orphan")

    @property
    def like_count(self) -> int:
        return len(self.likes)

    @property
    def reply_count(self) -> int:
        return sum(1 for reply in self.replies if reply.is_approved)


class CommentLike(Base):
    __tablename__ = "comment_likes"

    comment_id = Column(String(36), ForeignKey("comments.comment_id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    liked_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    comment = relationship("Comment", back_populates="likes")


class CommentReport(Base):
    __tablename__ = "comment_reports"

    report_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    comment_id = Column(String(36), ForeignKey("comments.comment_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    reason = Column(SAEnum(ReportReason, native_enum=False), nullable=False)
    reported_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    comment = relationship("Comment", back_populates="reports")
