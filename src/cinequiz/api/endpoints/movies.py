# src/cinequiz/api/endpoints/movies.py
"""Daily movie endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from cinequiz.api.dependencies import NowDep, SessionDep
from cinequiz.core.settings import settings
from cinequiz.schemas.movie import (
    CheckAnswerRequest,
    CheckAnswerResponse,
    DailyMovieResponse,
    TimeInfo,
)
from cinequiz.services.movie_selector import check_answer, daily_movie

router = APIRouter(tags=["movies"])


@router.get(
    "/daily-movie",
    summary="Fetch today's movie and rotation timing",
    response_model=DailyMovieResponse,
)
async def get_daily_movie(db: SessionDep, now: NowDep) -> DailyMovieResponse:
    """Return the movie of the current reference-zone day."""
    movie = daily_movie(db, now)
    return DailyMovieResponse(
        title=movie.title,
        screenshot=movie.screenshot,
        time_info=TimeInfo(
            current_date=movie.current_date,
            next_change=movie.next_rotation,
            time_zone=settings.reference_timezone,
            seconds_until_next_change=movie.seconds_until_rotation(now),
        ),
    )


@router.post(
    "/check-answer",
    summary="Compare a guess with today's movie",
    response_model=CheckAnswerResponse,
)
async def post_check_answer(
    payload: CheckAnswerRequest,
    db: SessionDep,
    now: NowDep,
) -> CheckAnswerResponse:
    if check_answer(db, payload.answer, now):
        return CheckAnswerResponse(success=True, message="Correct!")
    return CheckAnswerResponse(success=False, message="Try again!")
