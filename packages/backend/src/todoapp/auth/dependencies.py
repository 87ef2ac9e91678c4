"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to classify the
request's credentials. Every request ends up in exactly one of three
states, computed once and passed down instead of re-parsing headers
in each route:

1. NoToken            : no Authorization header, or no token after "Bearer"
2. ValidUser(user_id) : token verified
3. InvalidToken       : token present but malformed/expired/mis-signed

Task routes accept all three (see todoapp.auth.policy). Routes that
really need a user use get_current_user, which turns NoToken into 401
and InvalidToken into 403.
"""

import uuid
from dataclasses import dataclass
from typing import Optional, Union

from fastapi import Depends, Header, HTTPException

from todoapp.auth.jwt import verify_token
from todoapp.errors import InvalidTokenError


@dataclass(frozen=True)
class NoToken:
    """The request carried no bearer token."""


@dataclass(frozen=True)
class ValidUser:
    """The request carried a token that verified to this user."""

    user_id: uuid.UUID


@dataclass(frozen=True)
class InvalidToken:
    """The request carried a token that failed verification."""

    reason: str


AuthState = Union[NoToken, ValidUser, InvalidToken]


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of an `Authorization: Bearer <token>` header.

    Returns None when the header is absent, uses another scheme, or has
    no token segment.
    """
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) < 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def resolve_auth_state(authorization: Optional[str]) -> AuthState:
    """Classify an Authorization header value into an AuthState."""
    token = extract_bearer_token(authorization)
    if token is None:
        return NoToken()
    try:
        subject = verify_token(token)
        return ValidUser(user_id=uuid.UUID(subject))
    except InvalidTokenError as e:
        return InvalidToken(reason=e.message)
    except ValueError:
        return InvalidToken(reason="Token subject is not a user id")


async def get_auth_state(
    authorization: Optional[str] = Header(None),
) -> AuthState:
    """Soft auth dependency: never fails, always returns a state."""
    return resolve_auth_state(authorization)


async def get_current_user(
    state: AuthState = Depends(get_auth_state),
) -> ValidUser:
    """Hard auth dependency: 401 without a token, 403 with a bad one."""
    if isinstance(state, ValidUser):
        return state
    if isinstance(state, InvalidToken):
        raise HTTPException(status_code=403, detail="Invalid token")
    raise HTTPException(
        status_code=401,
        detail="Access token required",
        headers={"WWW-Authenticate": "Bearer"},
    )
