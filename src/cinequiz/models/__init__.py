# src/cinequiz/models/__init__.py
"""SQLAlchemy models for the CineQuiz application."""

from .attempt import Attempt
from .movie import Movie
from .user import SolvedMovie, User

__all__ = [
    "Attempt",
    "Movie",
    "SolvedMovie",
    "User",
]
