from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import configure_logging, logger
from app.routers.auth import router as auth_router
from app.routers.public import router as public_router
from app.routers.simulate import router as simulate_router
from app.routers.simulations import router as simulations_router
from app.routers.users import router as users_router
from core.settings import get_settings
from db.session import engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Ensure DB connections are cleanly closed on shutdown
    await engine.dispose()


def _error_body(detail: Any) -> dict[str, Any]:
    """Render an error detail as ``{"error": ..., "details": ...}``."""

    if isinstance(detail, dict) and "error" in detail:
        return detail
    return {"error": detail}


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(allowed_origins: Sequence[str] | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        allowed_origins: Optional list of CORS origins to allow. Falls back to
            ``CORS_ORIGINS`` and then to local development defaults.

    Returns:
        Configured FastAPI application.
    """

    settings = get_settings()
    configure_logging(settings.debug)
    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

    cors_origins = list(
        allowed_origins
        or settings.cors_origins
        or [
            "http://localhost",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Routers
    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(simulate_router, prefix="/simulate", tags=["simulate"])
    app.include_router(simulations_router, prefix="/simulations", tags=["simulations"])
    app.include_router(public_router, prefix="/public/simulations", tags=["public"])
    app.include_router(users_router, prefix="/users", tags=["users"])

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
