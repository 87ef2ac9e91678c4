"""Auth service — registration and login.

Learn: Service layer separates business logic from HTTP routing.
Routes translate the errors raised here (ValidationError, ConflictError,
AuthenticationError) into HTTP responses.

Login failures are deliberately generic: an unknown email and a wrong
password produce the same AuthenticationError, so the API can't be used
to discover which emails are registered.
"""

import asyncio
import uuid
from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.auth.jwt import issue_token
from todoapp.auth.password import hash_password, verify_password
from todoapp.db.models import User
from todoapp.errors import AuthenticationError, ConflictError, ValidationError

logger = structlog.get_logger()

INVALID_CREDENTIALS = "Invalid email or password"


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass
class AuthResult:
    token: str
    user: User


class AuthService:
    """Business logic for identities and credentials."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalars().first()

    # ─── Register ────────────────────────────────────────

    async def register(
        self,
        email: Optional[str],
        password: Optional[str],
        name: Optional[str],
    ) -> AuthResult:
        """Create an identity and issue its first token.

        Raises:
            ValidationError: if email, password or name is missing/empty
            ConflictError: if the email is already registered
        """
        if not (email and email.strip()) or not password or not (name and name.strip()):
            raise ValidationError("Email, password, and name are required")

        email = normalize_email(email)
        if await self.find_by_email(email):
            raise ConflictError("User already exists with this email")

        # bcrypt is CPU-bound; keep it off the event loop.
        password_hash = await asyncio.to_thread(hash_password, password)
        user = User(email=email, name=name.strip(), password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email.
            await self.db.rollback()
            raise ConflictError("User already exists with this email")

        logger.info("auth.registered", user_id=str(user.id), email=user.email)
        return AuthResult(token=issue_token(str(user.id)), user=user)

    # ─── Login ───────────────────────────────────────────

    async def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """Check credentials and issue a fresh token.

        Earlier tokens for the same user stay valid until they expire.
        """
        if not (email and email.strip()) or not password:
            raise ValidationError("Email and password are required")

        user = await self.find_by_email(email)
        if not user or not await asyncio.to_thread(verify_password, password, user.password_hash):
            logger.info("auth.login_failed", email=normalize_email(email))
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("auth.logged_in", user_id=str(user.id))
        return AuthResult(token=issue_token(str(user.id)), user=user)
