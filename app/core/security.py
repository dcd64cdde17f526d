"""
Security utilities - signed session tokens.

The browser carries a session token (HTTP-only cookie or Bearer header)
that names the Google account it connected. Nothing is kept in
browser storage and nothing is kept in process memory.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt  # python-jose library for JWT encoding/decoding

from app.core.config import settings


SESSION_TOKEN_TYPE = "session"


def generate_session_id() -> str:
    """Random id stored in the token's "jti" claim and on the user row."""
    return secrets.token_urlsafe(16)


def create_session_token(
    email: str,
    session_id: Optional[str] = None,
    expires_delta: timedelta | None = None,
) -> tuple[str, str]:
    """
    Create a signed session token for a user email.

    Args:
        email: Stored in the "sub" claim
        session_id: Optional explicit "jti"; generated when omitted
        expires_delta: Custom lifetime; defaults to SESSION_TOKEN_EXPIRE_MINUTES

    Returns:
        (token, session_id)

    JWT payload:
        {"sub": "user@example.com", "type": "session", "jti": "...", "exp": ...}

    The payload is signed, not encrypted. Only the email goes in it,
    never OAuth tokens.
    """
    session_id = session_id or generate_session_id()
    expire = datetime.now(timezone.utc) + (
        expires_delta
        if expires_delta
        else timedelta(minutes=settings.SESSION_TOKEN_EXPIRE_MINUTES)
    )

    to_encode = {
        "sub": email,
        "type": SESSION_TOKEN_TYPE,
        "jti": session_id,
        "exp": expire,
    }
    token = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return token, session_id


def decode_session_token(token: str) -> Optional[str]:
    """
    Validate a session token and extract the email.

    Returns:
        The email, or None if the token is expired, tampered with,
        signed with another key, or not a session token.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    if payload.get("type") != SESSION_TOKEN_TYPE:
        return None

    email = payload.get("sub")
    if not email or not isinstance(email, str):
        return None

    return email
