"""Auth gate: FastAPI dependencies for the User and Admin identity spaces."""
import logging
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.errors import AuthenticationError, AuthorizationError
from eventhub.models.admin import Admin, AdminStatus, Permission
from eventhub.models.user import User, UserStatus
from eventhub.services.auth_service import (
    InvalidTokenError, TOKEN_TYPE_ADMIN, TOKEN_TYPE_USER, decode_access_token,
)

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    return credentials.credentials or None


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Require a valid user token for an existing, non-blocked user."""
    token = _bearer_token(credentials)
    if not token:
        raise AuthenticationError("Access denied. No token provided.")
    try:
        claims = decode_access_token(token, TOKEN_TYPE_USER)
    except InvalidTokenError as exc:
        logger.info("Rejected user token: %s", exc)
        raise AuthenticationError("Token is not valid.")

    user = db.query(User).filter(User.user_id == claims["sub"]).first()
    if not user:
        raise AuthenticationError("Token is not valid. User not found.")
    if user.status == UserStatus.blocked:
        raise AuthorizationError("Account has been blocked. Please contact support.")
    return user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Like ``get_current_user`` but any problem yields an anonymous caller."""
    token = _bearer_token(credentials)
    if not token:
        return None
    try:
        claims = decode_access_token(token, TOKEN_TYPE_USER)
    except InvalidTokenError:
        return None
    user = db.query(User).filter(User.user_id == claims["sub"]).first()
    if not user or user.status == UserStatus.blocked:
        return None
    return user


def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Admin:
    """Require a valid admin token for an existing, active, unlocked admin."""
    token = _bearer_token(credentials)
    if not token:
        raise AuthenticationError("Access denied. Admin authentication required.")
    try:
        claims = decode_access_token(token, TOKEN_TYPE_ADMIN)
    except InvalidTokenError as exc:
        logger.info("Rejected admin token: %s", exc)
        raise AuthenticationError("Token is not valid.")

    admin = db.query(Admin).filter(Admin.admin_id == claims["sub"]).first()
    if not admin:
        raise AuthenticationError("Token is not valid. Admin not found.")
    if admin.status != AdminStatus.active:
        raise AuthorizationError("Admin account is not active.")
    if admin.is_locked:
        raise AuthorizationError("Admin account is temporarily locked.")
    return admin


def require_permission(permission: Permission) -> Callable[..., Admin]:
    """Dependency factory: the authenticated admin must hold ``permission``."""

    def _checker(admin: Admin = Depends(get_current_admin)) -> Admin:
        if not admin.has_permission(permission):
            raise AuthorizationError(f"Access denied. {permission.value} permission required.")
        return admin

    return _checker
