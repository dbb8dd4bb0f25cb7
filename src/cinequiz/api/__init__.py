# src/cinequiz/api/__init__.py
"""HTTP API routers."""

from .endpoints import (
    attempts_router,
    movies_router,
    users_router,
    verification_router,
)

__all__ = [
    "attempts_router",
    "movies_router",
    "users_router",
    "verification_router",
]
