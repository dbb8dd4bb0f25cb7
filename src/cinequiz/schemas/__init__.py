# src/cinequiz/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
They are shared by the server endpoints and the HTTP client.
"""

from .attempt import AttemptCountResponse, AttemptResponse, WalletConnectResponse
from .common import ErrorResponse, MessageResponse
from .movie import CheckAnswerRequest, CheckAnswerResponse, DailyMovieResponse, TimeInfo
from .user import (
    IncrementScoreRequest,
    MovieSolvedResponse,
    ParticipationResponse,
    ScoreResponse,
    SubmitUserRequest,
    SubmitUserResponse,
    UserInfo,
    UserScoreResponse,
)

__all__ = [
    "AttemptCountResponse", "AttemptResponse", "WalletConnectResponse",
    "ErrorResponse", "MessageResponse",
    "CheckAnswerRequest", "CheckAnswerResponse", "DailyMovieResponse", "TimeInfo",
    "IncrementScoreRequest", "MovieSolvedResponse", "ParticipationResponse",
    "ScoreResponse", "SubmitUserRequest", "SubmitUserResponse", "UserInfo",
    "UserScoreResponse",
]
