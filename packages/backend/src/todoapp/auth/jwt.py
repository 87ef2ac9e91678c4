"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
A single token type is issued at register/login and is valid for 24 hours.
Nothing is stored server-side, so there is no way to revoke a token early.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from todoapp.config import settings
from todoapp.errors import InvalidTokenError


def issue_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed token whose `sub` claim is the user id."""
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.token_expire_hours)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Verify signature and expiry, returning the full claim set.

    Raises InvalidTokenError on failure.
    """
    if not token:
        raise InvalidTokenError("Token is missing")
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidTokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(f"Invalid token: {e}")


def verify_token(token: str) -> str:
    """Verify a token and return the user id it was issued for."""
    return decode_token(token)["sub"]
