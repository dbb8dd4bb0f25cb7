"""Tests for the async API client against the in-process application."""

import httpx
import pytest

from cinequiz.client.api import ApiError, BypassOptions, CineQuizClient
from cinequiz.api.endpoints.verification import VERIFIED_TEXT
from tests.conftest import ADMIN_CODE, WALLET


def _client(app) -> CineQuizClient:
    return CineQuizClient("http://test", transport=httpx.ASGITransport(app=app))


@pytest.mark.asyncio
async def test_daily_movie_round_trip(app, inception) -> None:
    async with _client(app) as api:
        movie = await api.daily_movie()
        answer = await api.check_answer("INCEPTION")
    assert movie.title == "Inception"
    assert movie.time_info.time_zone == "Europe/Paris"
    assert answer.success is True


@pytest.mark.asyncio
async def test_error_payload_is_raised(app) -> None:
    async with _client(app) as api:
        with pytest.raises(ApiError) as excinfo:
            await api.daily_movie()
    assert excinfo.value.status_code == 404
    assert excinfo.value.code == "empty_catalog"
    assert excinfo.value.message == "No movie found"
    assert not excinfo.value.rate_limited


@pytest.mark.asyncio
async def test_attempt_calls(app) -> None:
    async with _client(app) as api:
        for _ in range(5):
            await api.record_attempt(WALLET)
        with pytest.raises(ApiError) as excinfo:
            await api.record_attempt(WALLET)
        counts = await api.get_attempts(WALLET)
        reset = await api.reset_attempts(WALLET)
        after = await api.get_attempts(WALLET)
    assert excinfo.value.rate_limited
    assert excinfo.value.code == "too_many_attempts"
    assert "resetAt" in excinfo.value.payload
    assert counts.remaining_attempts == 0
    assert reset.message == "Attempts reset successfully"
    assert after.attempts == 0


@pytest.mark.asyncio
async def test_submission_flow(app, inception, mailer) -> None:
    async with _client(app) as api:
        submitted = await api.submit_user("cobb@gmail.com", WALLET)
        text = await api.verify_email(mailer.last_token)
        participation = await api.check_participation(WALLET)
        bypassed = await api.check_participation(WALLET, BypassOptions(admin_code=ADMIN_CODE))
        score = await api.increment_score(WALLET, "Inception")
        totals = await api.user_score(WALLET)
        solved = await api.check_movie_solved(WALLET)
    assert submitted.requires_verification is True
    assert text == VERIFIED_TEXT
    assert participation.has_participated is True
    assert participation.user_info is not None
    assert participation.user_info.is_email_verified is True
    assert bypassed.has_participated is False
    assert score.new_score == 1
    assert totals.solved_movies == ["Inception"]
    assert solved.is_solved is True


@pytest.mark.asyncio
async def test_bypass_headers(app) -> None:
    async with _client(app) as api:
        first = await api.submit_user("cobb@gmail.com", WALLET, BypassOptions(test_mode=True))
        second = await api.submit_user("cobb@gmail.com", WALLET, BypassOptions(test_mode=True))
    assert first.requires_verification is False
    assert second.requires_verification is False


@pytest.mark.asyncio
async def test_wallet_connect_gate(app) -> None:
    async with _client(app) as api:
        result = await api.wallet_connect()
    assert result.success is True


@pytest.mark.asyncio
async def test_transport_failure_becomes_api_error() -> None:
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with CineQuizClient("http://test", transport=httpx.MockTransport(_refuse)) as api:
        with pytest.raises(ApiError) as excinfo:
            await api.daily_movie()
    assert excinfo.value.status_code is None
