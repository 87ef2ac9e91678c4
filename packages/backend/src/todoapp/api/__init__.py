"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Learn: No router-level auth dependency here. Task routes resolve the
caller's AuthState themselves because they must keep working for
anonymous and invalid-token callers; /api/me opts into strict auth
with get_current_user.
"""

from fastapi import APIRouter

from todoapp.api.auth import router as auth_router
from todoapp.api.health import router as health_router
from todoapp.api.tasks import router as tasks_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(tasks_router, tags=["todos"])
