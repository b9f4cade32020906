"""Admin moderation routes. Each group is gated by one admin permission."""
import logging
from typing import Literal, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.auth import require_permission
from eventhub.database import get_db
from eventhub.errors import NotFoundError
from eventhub.models.admin import Admin, Permission
from eventhub.models.user import User, UserStatus
from eventhub.pagination import AdminPageParams, CommentPageParams, paginate
from eventhub.schemas.admin import (
    ActivityResponse, AdminCreate, AdminListResponse, AdminResponse, DashboardStatsResponse,
)
from eventhub.schemas.comment import CommentListResponse, CommentModeration, CommentResponse
from eventhub.schemas.common import MessageResponse
from eventhub.schemas.event import EventApproval, EventListResponse, EventResponse
from eventhub.schemas.user import UserListResponse, UserResponse
from eventhub.services import admin_service, comment_service, event_service, user_service
from eventhub.services.comment_service import serialize_comment

logger = logging.getLogger(__name__)
router = APIRouter()


# --- Dashboard ---------------------------------------------------------------

@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
def dashboard_stats(
    admin: Admin = Depends(require_permission(Permission.view_analytics)),
    db: Session = Depends(get_db),
):
    return DashboardStatsResponse(stats=admin_service.dashboard_stats(db))


@router.get("/dashboard/activity", response_model=ActivityResponse)
def dashboard_activity(
    limit: int = Query(50, ge=1, le=200),
    admin: Admin = Depends(require_permission(Permission.view_analytics)),
    db: Session = Depends(get_db),
):
    return ActivityResponse(activities=admin_service.recent_activity(db, limit))


# --- Users -------------------------------------------------------------------

@router.get("/users", response_model=UserListResponse)
def list_users(
    search: Optional[str] = Query(None),
    user_status: Optional[UserStatus] = Query(None, alias="status"),
    params: AdminPageParams = Depends(),
    admin: Admin = Depends(require_permission(Permission.manage_users)),
    db: Session = Depends(get_db),
):
    users, pagination = paginate(admin_service.users_query(db, search, user_status), params)
    return UserListResponse(users=users, pagination=pagination)


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    admin: Admin = Depends(require_permission(Permission.manage_users)),
    db: Session = Depends(get_db),
):
    """Delete a user with the same cascade as self-service account deletion."""
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    user_service.delete_user_data(db, user)
    db.commit()
    logger.info("Admin %s deleted user %s", admin.admin_id, user_id)
    return MessageResponse(message="User deleted successfully")


@router.patch("/users/{user_id}/status", response_model=UserResponse)
def toggle_user_status(
    user_id: str,
    admin: Admin = Depends(require_permission(Permission.manage_users)),
    db: Session = Depends(get_db),
):
    """Flip a user between active and blocked."""
    user = admin_service.toggle_user_status(db, user_id, admin)
    verb = "blocked" if user.is_blocked else "activated"
    return UserResponse(message=f"User {verb} successfully", user=user)


# --- Events ------------------------------------------------------------------

@router.get("/events", response_model=EventListResponse)
def list_events(
    search: Optional[str] = Query(None),
    when: Optional[Literal["upcoming", "past"]] = Query(None, alias="status"),
    params: AdminPageParams = Depends(),
    admin: Admin = Depends(require_permission(Permission.manage_events)),
    db: Session = Depends(get_db),
):
    events, pagination = paginate(admin_service.events_query(db, search, when), params)
    return EventListResponse(events=events, pagination=pagination)


@router.delete("/events/{event_id}", response_model=MessageResponse)
def delete_event(
    event_id: str,
    admin: Admin = Depends(require_permission(Permission.manage_events)),
    db: Session = Depends(get_db),
):
    event = event_service.get_event(db, event_id)
    event_service.purge_event(db, event)
    db.commit()
    logger.info("Admin %s deleted event %s", admin.admin_id, event_id)
    return MessageResponse(message="Event deleted successfully")


@router.patch("/events/{event_id}/approval", response_model=EventResponse)
def set_event_approval(
    event_id: str,
    payload: EventApproval,
    admin: Admin = Depends(require_permission(Permission.manage_events)),
    db: Session = Depends(get_db),
):
    event = admin_service.set_event_approval(db, event_id, admin, payload.is_approved)
    verb = "approved" if payload.is_approved else "unapproved"
    return EventResponse(message=f"Event {verb} successfully", event=event)


# --- Comments ----------------------------------------------------------------

@router.get("/comments/reported", response_model=CommentListResponse)
def reported_comments(
    params: CommentPageParams = Depends(),
    admin: Admin = Depends(require_permission(Permission.manage_comments)),
    db: Session = Depends(get_db),
):
    comments, pagination = paginate(comment_service.reported_comments_query(db), params)
    return CommentListResponse(
        comments=[serialize_comment(c, with_replies=False) for c in comments],
        pagination=pagination,
    )


@router.delete("/comments/{comment_id}", response_model=CommentResponse)
def soft_delete_comment(
    comment_id: str,
    admin: Admin = Depends(require_permission(Permission.manage_comments)),
    db: Session = Depends(get_db),
):
    """Replace the text with a placeholder and keep the row in its thread."""
    comment = comment_service.soft_delete(db, comment_id, admin)
    return CommentResponse(message="Comment deleted successfully", comment=serialize_comment(comment))


@router.patch("/comments/{comment_id}/moderation", response_model=CommentResponse)
def moderate_comment(
    comment_id: str,
    payload: CommentModeration,
    admin: Admin = Depends(require_permission(Permission.manage_comments)),
    db: Session = Depends(get_db),
):
    comment = comment_service.set_approval(db, comment_id, admin, payload.is_approved)
    verb = "approved" if payload.is_approved else "hidden"
    return CommentResponse(message=f"Comment {verb} successfully", comment=serialize_comment(comment))


# --- Admins ------------------------------------------------------------------

@router.get("/admins", response_model=AdminListResponse)
def list_admins(
    admin: Admin = Depends(require_permission(Permission.manage_admins)),
    db: Session = Depends(get_db),
):
    return AdminListResponse(admins=admin_service.list_admins(db))


@router.post("/admins", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
def create_admin(
    payload: AdminCreate,
    admin: Admin = Depends(require_permission(Permission.manage_admins)),
    db: Session = Depends(get_db),
):
    new_admin = admin_service.create_admin(
        db,
        payload.email,
        payload.password,
        payload.name,
        role=payload.role,
        permissions=payload.permissions,
        created_by=admin,
    )
    return AdminResponse(message="Admin created successfully", admin=new_admin)
