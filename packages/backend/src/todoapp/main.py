"""FastAPI application factory.

Learn: App factory pattern: create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (database connection, table
creation). Middleware, CORS, error handlers and routers all registered here.
"""

from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from todoapp import __version__
from todoapp.api import api_router
from todoapp.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown. The first database connection is retried once; if that
    fails too, startup fails.
    """
    logger.info(
        "todoapp.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )
    if settings.uses_default_secret:
        logger.warning(
            "todoapp.insecure_jwt_secret",
            hint="set TODOAPP_JWT_SECRET before deploying",
        )

    from todoapp.db.engine import connect_db, engine
    await connect_db(engine)

    yield

    logger.info("todoapp.shutdown")
    await engine.dispose()


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Error body with `detail`, mirrored as `message` for browser clients."""
    content = {"detail": exc.detail}
    if isinstance(exc.detail, str):
        content["message"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors: 400, not FastAPI's 422."""
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    """Log unexpected failures; only expose the message in debug mode."""
    logger.exception("todoapp.unhandled_error", error=str(exc))
    detail = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(status_code=500, content={"detail": detail, "message": detail})


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Todo API",
        description="Personal to-do lists with optional bearer-token ownership",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → Security → RequestId → handler

    from todoapp.middleware.request_id import RequestIdMiddleware
    from todoapp.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Origin",
            "X-Requested-With",
            "Content-Type",
            "Accept",
            "Authorization",
        ],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/", include_in_schema=False)
    async def root():
        return {"message": "Todo API with Authentication is running!"}

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: todoapp.main:app)
app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run("todoapp.main:app", host=settings.host, port=settings.port)
