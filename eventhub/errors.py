"""Error taxonomy shared by services and routers.

Each class is an ``HTTPException`` so services can raise it directly, the
same way they raise ``HTTPException``; the handlers registered in
``eventhub.main`` render every one of them as ``{"success": false, "message": ...}``.
"""
from typing import Any, Optional

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Missing or malformed input."""

    def __init__(self, message: str = "Validation failed", errors: Optional[Any] = None):
        detail: Any = message if errors is None else {"message": message, "errors": errors}
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AuthenticationError(HTTPException):
    """Missing, invalid or expired token, or bad credentials."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(HTTPException):
    """Valid identity lacking the rights for the action."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=message)


class NotFoundError(HTTPException):
    """Referenced entity does not exist."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=message)


class ConflictError(HTTPException):
    """Uniqueness violation (duplicate email, duplicate RSVP...)."""

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=message)
