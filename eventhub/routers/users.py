"""User API routes: profile, account settings and search."""
import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eventhub.auth import get_current_user
from eventhub.database import get_db
from eventhub.models.user import User
from eventhub.pagination import PageParams, paginate
from eventhub.schemas.common import MessageResponse
from eventhub.schemas.event import UserDashboardResponse
from eventhub.schemas.user import (
    AccountDelete, AuthResponse, EmailChange, PasswordChange, ProfileResponse, ProfileUpdate,
    PublicProfileResponse, UserResponse, UserSearchResponse,
)
from eventhub.services import user_service
from eventhub.services.auth_service import create_access_token

logger = logging.getLogger(__name__)
router = APIRouter()


def _profile(db: Session, user: User) -> dict:
    return {
        "user_id": user.user_id,
        "email": user.email,
        "name": user.name,
        "bio": user.bio,
        "profile_pic": user.profile_pic,
        "role": user.role,
        "status": user.status,
        "email_verified": user.email_verified,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
        "stats": user_service.user_stats(db, user),
    }


@router.get("/me", response_model=ProfileResponse)
def my_profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """The caller's profile with activity stats."""
    return ProfileResponse(user=_profile(db, user))


@router.get("/dashboard", response_model=UserDashboardResponse)
def dashboard(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return UserDashboardResponse(**user_service.dashboard(db, user))


@router.put("/profile", response_model=UserResponse)
def update_profile(payload: ProfileUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    user = user_service.update_profile(db, user, payload.model_dump(exclude_unset=True))
    return UserResponse(message="Profile updated successfully", user=user)


@router.put("/password", response_model=MessageResponse)
def change_password(payload: PasswordChange, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    user_service.change_password(db, user, payload.current_password, payload.new_password)
    return MessageResponse(message="Password updated successfully")


@router.put("/email", response_model=AuthResponse)
def change_email(payload: EmailChange, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Change the login email; the response carries a fresh token."""
    user = user_service.change_email(db, user, payload.new_email, payload.password)
    return AuthResponse(message="Email updated successfully", token=create_access_token(user.user_id), user=user)


@router.delete("/account", response_model=MessageResponse)
def delete_account(payload: AccountDelete, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    user_service.delete_account(db, user, payload.password, payload.confirm_delete)
    return MessageResponse(message="Account deleted successfully")


@router.get("/search", response_model=UserSearchResponse)
def search_users(
    q: str = Query(..., description="Name or email fragment, at least 2 characters"),
    params: PageParams = Depends(),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    users, pagination = paginate(user_service.search_users(db, q), params)
    return UserSearchResponse(users=users, pagination=pagination)


@router.get("/{user_id}", response_model=PublicProfileResponse)
def public_profile(user_id: str, viewer: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Public subset of another user's profile."""
    user = user_service.get_user(db, user_id)
    return PublicProfileResponse(user={
        "user_id": user.user_id,
        "name": user.name,
        "profile_pic": user.profile_pic,
        "bio": user.bio,
        "created_at": user.created_at,
        "stats": user_service.user_stats(db, user),
    })
