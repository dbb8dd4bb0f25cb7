# src/cinequiz/api/endpoints/attempts.py
"""Guess attempt counters and the wallet-connect throttle."""

from __future__ import annotations

from fastapi import APIRouter

from cinequiz.api.dependencies import (
    AttemptTrackerDep,
    ClientIpDep,
    IdentityDep,
    NowDep,
    SessionDep,
    WalletConnectTrackerDep,
)
from cinequiz.schemas.attempt import (
    AttemptCountResponse,
    AttemptResponse,
    WalletConnectResponse,
)
from cinequiz.schemas.common import MessageResponse
from cinequiz.services.identity import Identity

router = APIRouter(tags=["attempts"])


@router.get(
    "/attempt",
    summary="Current attempt count",
    response_model=AttemptCountResponse,
)
async def get_attempt(
    db: SessionDep,
    identity: IdentityDep,
    tracker: AttemptTrackerDep,
    now: NowDep,
) -> AttemptCountResponse:
    attempts = tracker.get_attempts(db, identity, now)
    return AttemptCountResponse(
        attempts=attempts,
        remaining_attempts=tracker.remaining(attempts),
    )


@router.post(
    "/attempt",
    summary="Record a guess attempt",
    response_model=AttemptResponse,
)
async def post_attempt(
    db: SessionDep,
    identity: IdentityDep,
    tracker: AttemptTrackerDep,
    now: NowDep,
) -> AttemptResponse:
    """Count one guess; the request is rejected with 429 once the window is spent."""
    status = tracker.record_attempt(db, identity, now)
    return AttemptResponse(
        attempts=status.attempts,
        remaining_attempts=status.remaining_attempts,
        reset_at=status.reset_at,
    )


@router.post(
    "/reset-attempts",
    summary="Clear the caller's attempt counter",
    response_model=MessageResponse,
)
async def post_reset_attempts(
    db: SessionDep,
    identity: IdentityDep,
    tracker: AttemptTrackerDep,
) -> MessageResponse:
    tracker.reset_attempts(db, identity)
    return MessageResponse(message="Attempts reset successfully")


@router.post(
    "/wallet-connect",
    summary="Rate-limit gate before connecting a wallet",
    response_model=WalletConnectResponse,
)
async def post_wallet_connect(
    db: SessionDep,
    client_ip: ClientIpDep,
    tracker: WalletConnectTrackerDep,
    now: NowDep,
) -> WalletConnectResponse:
    """Allow a connection attempt unless the caller's IP exhausted its budget."""
    tracker.record_attempt(db, Identity("ip", client_ip), now)
    return WalletConnectResponse(success=True)
