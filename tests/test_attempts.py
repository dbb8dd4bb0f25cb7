"""Tests for the attempt tracker and the wallet-connect throttle."""

from datetime import timedelta

import pytest
from fastapi import status

from cinequiz.core.errors import AttemptNotRecorded, TooManyAttempts
from cinequiz.services.attempts import _MAX_RACE_RETRIES, AttemptTracker
from cinequiz.services.identity import Identity
from tests.conftest import FROZEN_NOW, WALLET

IDENTITY = Identity("wallet", WALLET)


def test_sixth_attempt_in_window_is_rejected(db_session) -> None:
    tracker = AttemptTracker(max_attempts=5, window_seconds=60)
    remaining = []
    for i in range(5):
        status_ = tracker.record_attempt(db_session, IDENTITY, FROZEN_NOW + timedelta(seconds=i))
        remaining.append(status_.remaining_attempts)
    assert remaining == [4, 3, 2, 1, 0]

    with pytest.raises(TooManyAttempts) as excinfo:
        tracker.record_attempt(db_session, IDENTITY, FROZEN_NOW + timedelta(seconds=10))
    assert excinfo.value.reset_at == FROZEN_NOW + timedelta(seconds=60)
    # The rejected attempt was not counted.
    assert tracker.get_attempts(db_session, IDENTITY, FROZEN_NOW + timedelta(seconds=10)) == 5


def test_window_expiry_restarts_counter(db_session) -> None:
    tracker = AttemptTracker(max_attempts=2, window_seconds=60)
    tracker.record_attempt(db_session, IDENTITY, FROZEN_NOW)
    tracker.record_attempt(db_session, IDENTITY, FROZEN_NOW)

    later = FROZEN_NOW + timedelta(seconds=61)
    assert tracker.get_attempts(db_session, IDENTITY, later) == 0
    status_ = tracker.record_attempt(db_session, IDENTITY, later)
    assert status_.attempts == 1
    assert status_.reset_at == later + timedelta(seconds=60)


def test_contended_counter_is_not_reported_as_counted(db_session, mocker) -> None:
    # Another writer wins every race to open the window.
    opened = mocker.patch("cinequiz.services.attempts.insert_if_absent", return_value=False)
    tracker = AttemptTracker(max_attempts=5, window_seconds=60)

    with pytest.raises(AttemptNotRecorded):
        tracker.record_attempt(db_session, IDENTITY, FROZEN_NOW)
    assert opened.call_count == _MAX_RACE_RETRIES
    assert tracker.get_attempts(db_session, IDENTITY, FROZEN_NOW) == 0


def test_scopes_and_identities_are_independent(db_session) -> None:
    guesses = AttemptTracker("guess", max_attempts=1, window_seconds=60)
    connects = AttemptTracker("wallet-connect", max_attempts=1, window_seconds=60)
    guesses.record_attempt(db_session, IDENTITY, FROZEN_NOW)
    connects.record_attempt(db_session, IDENTITY, FROZEN_NOW)
    guesses.record_attempt(db_session, Identity("ip", "203.0.113.9"), FROZEN_NOW)

    with pytest.raises(TooManyAttempts):
        guesses.record_attempt(db_session, IDENTITY, FROZEN_NOW)


def test_reset_attempts_clears_counter(db_session) -> None:
    tracker = AttemptTracker(max_attempts=1, window_seconds=60)
    tracker.record_attempt(db_session, IDENTITY, FROZEN_NOW)
    tracker.reset_attempts(db_session, IDENTITY)
    assert tracker.get_attempts(db_session, IDENTITY, FROZEN_NOW) == 0
    assert tracker.record_attempt(db_session, IDENTITY, FROZEN_NOW).attempts == 1


def test_attempt_endpoints_enforce_limit(client) -> None:
    params = {"walletAddress": WALLET}
    for expected in range(1, 6):
        r = client.post("/api/attempt", params=params)
        assert r.status_code == status.HTTP_200_OK
        body = r.json()
        assert body["attempts"] == expected
        assert body["remainingAttempts"] == 5 - expected

    r = client.post("/api/attempt", params=params)
    assert r.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    body = r.json()
    assert body["error"] == "too_many_attempts"
    assert "resetAt" in body
    assert r.headers["Retry-After"] == "60"

    r = client.get("/api/attempt", params=params)
    assert r.json() == {"attempts": 5, "remainingAttempts": 0}


def test_attempt_endpoint_window_reset(client, clock) -> None:
    params = {"walletAddress": WALLET}
    for _ in range(5):
        client.post("/api/attempt", params=params)
    clock.advance(seconds=61)

    r = client.post("/api/attempt", params=params)
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["attempts"] == 1


def test_attempts_fall_back_to_ip(client) -> None:
    client.post("/api/attempt")
    r = client.get("/api/attempt")
    assert r.json() == {"attempts": 1, "remainingAttempts": 4}

    # A wallet identity has its own budget.
    r = client.get("/api/attempt", params={"walletAddress": WALLET})
    assert r.json()["attempts"] == 0


def test_attempt_endpoint_rejects_bad_address(client) -> None:
    r = client.get("/api/attempt", params={"walletAddress": "not-a-wallet"})
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["error"] == "invalid_address"


def test_reset_attempts_endpoint(client) -> None:
    params = {"walletAddress": WALLET}
    for _ in range(5):
        client.post("/api/attempt", params=params)

    r = client.post("/api/reset-attempts", params=params)
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"message": "Attempts reset successfully"}
    assert client.post("/api/attempt", params=params).status_code == status.HTTP_200_OK


def test_wallet_connect_throttle(client) -> None:
    for _ in range(10):
        r = client.post("/api/wallet-connect")
        assert r.status_code == status.HTTP_200_OK
        assert r.json() == {"success": True}

    r = client.post("/api/wallet-connect")
    assert r.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert r.json()["error"] == "too_many_attempts"
