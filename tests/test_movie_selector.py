"""Tests for the daily movie rotation."""

from datetime import UTC, date, datetime

import pytest
from fastapi import status

from cinequiz.core.errors import EmptyCatalog
from cinequiz.db.time import day_of_year, next_rotation
from cinequiz.services.movie_selector import check_answer, daily_movie, select_index
from tests.conftest import FROZEN_NOW


def test_select_index_wraps_around_catalog() -> None:
    assert [select_index(day, 3) for day in range(5)] == [0, 1, 2, 0, 1]


def test_select_index_rejects_empty_catalog() -> None:
    with pytest.raises(EmptyCatalog):
        select_index(10, 0)


def test_daily_movie_is_deterministic(db_session, movies) -> None:
    first = daily_movie(db_session, FROZEN_NOW)
    second = daily_movie(db_session, FROZEN_NOW)
    assert first == second
    # Day 74 of a three-movie catalog.
    assert first.index == 2
    assert first.title == "Alien"


def test_consecutive_days_cycle_through_catalog(db_session, movies) -> None:
    titles = []
    for day in range(1, 5):
        now = datetime(2024, 1, day, 11, 0, tzinfo=UTC)
        titles.append(daily_movie(db_session, now).title)
    assert titles == ["Inception", "Heat", "Alien", "Inception"]


def test_rotation_follows_paris_midnight(db_session, movies) -> None:
    # 23:30 UTC on 31 December is already 1 January in Paris.
    late = datetime(2023, 12, 31, 23, 30, tzinfo=UTC)
    movie = daily_movie(db_session, late)
    assert movie.day_of_year == 0
    assert movie.current_date == date(2024, 1, 1)
    assert movie.next_rotation == datetime(2024, 1, 1, 23, 0, tzinfo=UTC)


def test_next_rotation_handles_dst_change() -> None:
    # Paris moves to summer time on 31 March 2024.
    now = datetime(2024, 3, 30, 12, 0, tzinfo=UTC)
    assert next_rotation(now) == datetime(2024, 3, 30, 23, 0, tzinfo=UTC)
    now = datetime(2024, 3, 31, 12, 0, tzinfo=UTC)
    assert next_rotation(now) == datetime(2024, 3, 31, 22, 0, tzinfo=UTC)


def test_day_of_year_is_zero_based() -> None:
    assert day_of_year(datetime(2024, 1, 1, 12, 0, tzinfo=UTC)) == 0
    assert day_of_year(FROZEN_NOW) == 74


def test_daily_movie_empty_catalog(db_session) -> None:
    with pytest.raises(EmptyCatalog):
        daily_movie(db_session, FROZEN_NOW)


def test_check_answer_normalizes_guess(db_session, inception) -> None:
    assert check_answer(db_session, "  inCEPtion ", FROZEN_NOW)
    assert not check_answer(db_session, "Interstellar", FROZEN_NOW)
    assert not check_answer(db_session, "   ", FROZEN_NOW)


def test_daily_movie_endpoint(client, movies) -> None:
    r = client.get("/api/daily-movie")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["title"] == "Alien"
    assert data["screenshot"] == "https://img.cinequiz.app/alien.jpg"
    info = data["timeInfo"]
    assert info["currentDate"] == "2024-03-15"
    assert info["timeZone"] == "Europe/Paris"
    # 11:00 in Paris leaves 13 hours until midnight.
    assert info["secondsUntilNextChange"] == 13 * 3600


def test_daily_movie_endpoint_empty_catalog(client) -> None:
    r = client.get("/api/daily-movie")
    assert r.status_code == status.HTTP_404_NOT_FOUND
    assert r.json() == {"error": "empty_catalog", "message": "No movie found"}


def test_check_answer_endpoint(client, movies) -> None:
    r = client.post("/api/check-answer", json={"answer": "alien"})
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"success": True, "message": "Correct!"}

    r = client.post("/api/check-answer", json={"answer": "Aliens"})
    assert r.json() == {"success": False, "message": "Try again!"}
