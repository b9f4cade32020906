"""Comment routes: threads, likes and reports."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventhub.auth import get_current_user, get_optional_user
from eventhub.database import get_db
from eventhub.models.user import User
from eventhub.pagination import CommentPageParams, paginate
from eventhub.schemas.comment import (
    CommentCreate, CommentListResponse, CommentReportRequest, CommentResponse, CommentUpdate, LikeResponse,
)
from eventhub.schemas.common import MessageResponse
from eventhub.services import comment_service
from eventhub.services.comment_service import serialize_comment

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/events/{event_id}", response_model=CommentListResponse)
def event_comments(
    event_id: str,
    params: CommentPageParams = Depends(),
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Top-level comments newest first, each with its approved replies oldest first."""
    comments, pagination = paginate(comment_service.event_comments_query(db, event_id), params)
    viewer_id = viewer.user_id if viewer else None
    return CommentListResponse(
        comments=[serialize_comment(c, viewer_id) for c in comments],
        pagination=pagination,
    )


@router.get("/my", response_model=CommentListResponse)
def my_comments(
    params: CommentPageParams = Depends(),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    comments, pagination = paginate(comment_service.user_comments_query(db, user), params)
    return CommentListResponse(
        comments=[serialize_comment(c, user.user_id, with_replies=False) for c in comments],
        pagination=pagination,
    )


@router.post("/events/{event_id}", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_comment(
    event_id: str,
    payload: CommentCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    comment = comment_service.create_comment(db, event_id, user, payload.content, payload.parent_comment_id)
    return CommentResponse(message="Comment created successfully", comment=serialize_comment(comment, user.user_id))


@router.put("/{comment_id}", response_model=CommentResponse)
def update_comment(
    comment_id: str,
    payload: CommentUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    comment = comment_service.update_comment(db, comment_id, user, payload.content)
    return CommentResponse(message="Comment updated successfully", comment=serialize_comment(comment, user.user_id))


@router.delete("/{comment_id}", response_model=MessageResponse)
def delete_comment(comment_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    comment_service.delete_comment(db, comment_id, user)
    return MessageResponse(message="Comment deleted successfully")


@router.post("/{comment_id}/like", response_model=LikeResponse)
def toggle_like(comment_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    like_count, has_liked = comment_service.toggle_like(db, comment_id, user)
    return LikeResponse(
        message="Comment liked" if has_liked else "Comment unliked",
        comment_id=comment_id,
        like_count=like_count,
        has_liked=has_liked,
    )


@router.post("/{comment_id}/report", response_model=MessageResponse)
def report_comment(
    comment_id: str,
    payload: CommentReportRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    comment_service.report_comment(db, comment_id, user, payload.reason)
    return MessageResponse(message="Comment reported successfully")
