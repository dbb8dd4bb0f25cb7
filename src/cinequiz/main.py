# src/cinequiz/main.py
"""Main entry point for the CineQuiz application."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from cinequiz.api import (
    attempts_router,
    movies_router,
    users_router,
    verification_router,
)
from cinequiz.core.errors import CineQuizError, RateLimited
from cinequiz.core.logging_config import configure_logging
from cinequiz.core.settings import settings
from cinequiz.db.session import create_tables
from cinequiz.db.time import utcnow
from cinequiz.schemas import ErrorResponse

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="CineQuiz API",
    description="Daily movie-guessing trivia API",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_429_TOO_MANY_REQUESTS: {"model": ErrorResponse},
}

# Include API routers
app.include_router(movies_router, prefix="/api", responses=ERROR_RESPONSES)
app.include_router(attempts_router, prefix="/api", responses=ERROR_RESPONSES)
app.include_router(users_router, prefix="/api", responses=ERROR_RESPONSES)
app.include_router(verification_router)


@app.exception_handler(CineQuizError)
async def handle_domain_error(request: Request, exc: CineQuizError) -> JSONResponse:
    """Render validation, gating and lookup failures as structured JSON."""
    headers: dict[str, str] = {}
    if isinstance(exc, RateLimited) and exc.reset_at is not None:
        retry_after = exc.retry_after
        if retry_after is None:
            retry_after = exc.retry_after_seconds(utcnow())
        headers["Retry-After"] = str(retry_after)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=headers)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide their details outside debug mode."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    message = f"{type(exc).__name__}: {exc}" if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "internal_error", "message": message},
    )


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings.log_level)
    if settings.auto_create_tables:
        create_tables()
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "CineQuiz API",
        "version": settings.app_version,
        "description": "Daily movie-guessing trivia API",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("cinequiz.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
