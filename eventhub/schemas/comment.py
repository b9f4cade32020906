"""Pydantic schemas for Comments."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from eventhub.models.comment import ReportReason
from eventhub.schemas.common import Pagination
from eventhub.schemas.user import UserSummary


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)
    parent_comment_id: Optional[str] = None

    @field_validator("content")
    @classmethod
    def _strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be empty")
        return v


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)

    @field_validator("content")
    @classmethod
    def _strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be empty")
        return v


class CommentReportRequest(BaseModel):
    reason: ReportReason


class CommentModeration(BaseModel):
    is_approved: bool


class CommentOut(BaseModel):
    comment_id: str
    event_id: str
    author_id: str
    author: Optional[UserSummary] = None
    content: str
    parent_id: Optional[str] = None
    like_count: int = 0
    reply_count: int = 0
    has_liked: bool = False
    is_edited: bool
    edited_at: Optional[datetime] = None
    is_deleted: bool
    is_reported: bool
    is_approved: bool
    created_at: datetime
    updated_at: datetime
    replies: list[CommentOut] = []


class CommentResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    comment: CommentOut


class CommentListResponse(BaseModel):
    success: bool = True
    comments: list[CommentOut]
    pagination: Pagination


class LikeResponse(BaseModel):
    success: bool = True
    message: str
    comment_id: str
    like_count: int
    has_liked: bool


CommentOut.model_rebuild()
