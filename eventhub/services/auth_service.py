"""Password hashing, token signing and password-reset tokens."""
import hashlib
import logging
import secrets
from datetime import datetime, timedelta
from typing import Any

import bcrypt
import jwt

from eventhub.config import settings
from eventhub.timeutils import utcnow

logger = logging.getLogger(__name__)

TOKEN_TYPE_USER = "user"
TOKEN_TYPE_ADMIN = "admin"
RESET_TOKEN_TTL = timedelta(minutes=10)


class InvalidTokenError(Exception):
    """Raised when a bearer token is malformed, forged or expired."""


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(subject: str, token_type: str = TOKEN_TYPE_USER) -> str:
    """Sign a token carrying the identity id, its identity space and expiry."""
    now = utcnow()
    payload = {
        "sub": subject,
        "type": token_type,
        "iat": now,
        "exp": now + timedelta(days=settings.JWT_EXPIRE_DAYS),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, token_type: str = TOKEN_TYPE_USER) -> dict[str, Any]:
    """Verify signature, expiry and identity space; return the claims."""
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(str(exc)) from exc
    if claims.get("type") != token_type or not claims.get("sub"):
        raise InvalidTokenError("Token is not valid for this identity space")
    return claims


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_reset_token() -> tuple[str, str, datetime]:
    """Return (raw token to email, sha256 to store, expiry)."""
    raw = secrets.token_hex(20)
    return raw, hash_reset_token(raw), utcnow() + RESET_TOKEN_TTL
