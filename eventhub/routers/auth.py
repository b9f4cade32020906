"""Authentication routes for both identity spaces."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventhub.auth import get_current_admin, get_current_user
from eventhub.database import get_db
from eventhub.models.admin import Admin
from eventhub.models.user import User
from eventhub.schemas.admin import AdminAuthResponse, AdminLoginRequest
from eventhub.schemas.common import MessageResponse
from eventhub.schemas.user import (
    AuthResponse, ForgotPasswordRequest, LoginRequest, ResetPasswordRequest, SignupRequest, UserResponse,
)
from eventhub.services import admin_service, user_service
from eventhub.services.auth_service import TOKEN_TYPE_ADMIN, create_access_token

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    """Register a user and return a login token."""
    user = user_service.signup(db, payload.name, payload.email, payload.password)
    return AuthResponse(message="User created successfully", token=create_access_token(user.user_id), user=user)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = user_service.login(db, payload.email, payload.password)
    return AuthResponse(message="Login successful", token=create_access_token(user.user_id), user=user)


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return UserResponse(user=user)


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(payload: ForgotPasswordRequest, db: Session = Depends(get_db)):
    """Always answers the same way so the endpoint cannot probe for accounts."""
    user_service.request_password_reset(db, payload.email)
    return MessageResponse(message="If an account exists with that email, a reset link has been sent")


@router.put("/reset-password/{token}", response_model=AuthResponse)
def reset_password(token: str, payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    user = user_service.reset_password(db, token, payload.password)
    return AuthResponse(message="Password reset successful", token=create_access_token(user.user_id), user=user)


@router.post("/admin/login", response_model=AdminAuthResponse)
def admin_login(payload: AdminLoginRequest, db: Session = Depends(get_db)):
    admin = admin_service.login_with_attempts(db, payload.email, payload.password)
    return AdminAuthResponse(
        message="Admin login successful",
        token=create_access_token(admin.admin_id, TOKEN_TYPE_ADMIN),
        admin=admin,
    )


@router.post("/admin/logout", response_model=MessageResponse)
def admin_logout(admin: Admin = Depends(get_current_admin)):
    """Tokens are stateless; the client discards its copy."""
    logger.info("Admin %s logged out", admin.admin_id)
    return MessageResponse(message="Logged out successfully")
