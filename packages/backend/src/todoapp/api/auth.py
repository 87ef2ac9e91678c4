"""Auth API — registration, login, current user.

Learn: Routes for user authentication:
- POST /api/register → create an account, returns a token
- POST /api/login → email/password → token
- GET /api/me → the identity behind a bearer token (token required)

Every failure the service reports maps to 400, including a duplicate
email and bad credentials, matching what existing clients expect.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.auth.dependencies import ValidUser, get_current_user
from todoapp.db.engine import get_db
from todoapp.errors import TodoAppError
from todoapp.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserRead
from todoapp.services.auth_service import AuthService

router = APIRouter()


def _auth_svc(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, svc: AuthService = Depends(_auth_svc)):
    """Create a new user account and log it in."""
    try:
        result = await svc.register(email=body.email, password=body.password, name=body.name)
    except TodoAppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {
        "message": "User registered successfully",
        "token": result.token,
        "user": result.user,
    }


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, svc: AuthService = Depends(_auth_svc)):
    """Login with email and password → bearer token."""
    try:
        result = await svc.login(email=body.email, password=body.password)
    except TodoAppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {
        "message": "Login successful",
        "token": result.token,
        "user": result.user,
    }


@router.get("/me", response_model=UserRead)
async def get_me(
    caller: ValidUser = Depends(get_current_user),
    svc: AuthService = Depends(_auth_svc),
):
    """Get the current authenticated user's info."""
    user = await svc.get_user(caller.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
