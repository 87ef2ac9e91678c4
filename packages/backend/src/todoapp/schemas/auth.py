"""Pydantic schemas for registration, login and the current user.

Learn: Request fields are Optional on purpose. A missing or empty field
is reported by the auth service as a 400 ValidationError (with a readable
message) rather than FastAPI's generic 422.
"""

import uuid
from typing import Optional

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserRead(BaseModel):
    """Redacted identity view, never includes the password hash."""

    id: uuid.UUID
    email: str
    name: str

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserRead
