"""Deterministic selection of the daily movie."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from cinequiz.core.errors import EmptyCatalog
from cinequiz.db.time import day_of_year, local_date, next_rotation, reference_zone
from cinequiz.models import Movie
from cinequiz.services.identity import titles_match


@dataclass(frozen=True)
class DailyMovie:
    """The movie active for one reference-zone calendar day."""

    title: str
    screenshot: str
    day_of_year: int
    index: int
    current_date: date
    next_rotation: datetime

    def seconds_until_rotation(self, now: datetime) -> int:
        """Return whole seconds left before the next movie, never negative."""
        return max(0, int((self.next_rotation - now).total_seconds()))


def select_index(day: int, count: int) -> int:
    """Map a zero-based day of year onto a catalog of ``count`` movies."""
    if count <= 0:
        raise EmptyCatalog()
    return day % count


def daily_movie(db: Session, now: datetime) -> DailyMovie:
    """Return the movie for the calendar day containing ``now``.

    Args:
        db: Database session
        now: Current instant (timezone-aware)

    Returns:
        The selected movie with its rotation timing

    Raises:
        EmptyCatalog: If no movie has been seeded
    """
    zone = reference_zone()
    count = db.query(func.count(Movie.id)).scalar() or 0
    day = day_of_year(now, zone)
    index = select_index(day, count)

    movie = db.query(Movie).order_by(Movie.id).offset(index).first()
    if movie is None:
        raise EmptyCatalog()

    return DailyMovie(
        title=movie.title,
        screenshot=movie.screenshot,
        day_of_year=day,
        index=index,
        current_date=local_date(now, zone),
        next_rotation=next_rotation(now, zone),
    )


def check_answer(db: Session, answer: str, now: datetime) -> bool:
    """Return True when ``answer`` names today's movie."""
    return titles_match(answer, daily_movie(db, now).title)


def seed_movies(db: Session, movies: list[tuple[str, str]]) -> list[Movie]:
    """Insert ``(title, screenshot)`` pairs in order and commit them."""
    rows = [Movie(title=title, screenshot=screenshot) for title, screenshot in movies]
    db.add_all(rows)
    db.commit()
    return rows
