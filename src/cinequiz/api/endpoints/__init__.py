# src/cinequiz/api/endpoints/__init__.py
"""API endpoint modules."""

from .attempts import router as attempts_router
from .movies import router as movies_router
from .users import router as users_router
from .verification import router as verification_router

__all__ = [
    "attempts_router",
    "movies_router",
    "users_router",
    "verification_router",
]
