"""Movie-related Pydantic schemas."""

from datetime import date, datetime

from pydantic import Field

from .common import CamelModel


class TimeInfo(CamelModel):
    """Rotation timing for the current daily movie."""

    current_date: date = Field(..., description="Reference-zone calendar date of the movie")
    next_change: datetime = Field(..., description="Instant the next movie becomes active")
    time_zone: str = Field(..., description="Reference time zone name")
    seconds_until_next_change: int = Field(..., ge=0)


class DailyMovieResponse(CamelModel):
    """Today's movie as served to players."""

    title: str
    screenshot: str = Field(..., description="Screenshot URL")
    time_info: TimeInfo


class CheckAnswerRequest(CamelModel):
    """A guess to compare against today's movie on the server."""

    answer: str = Field(..., max_length=300)


class CheckAnswerResponse(CamelModel):
    """Result of a server-side answer comparison."""

    success: bool
    message: str
