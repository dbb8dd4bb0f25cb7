"""Shared API dependencies."""

from datetime import datetime
from typing import Annotated

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from cinequiz.db.session import get_db
from cinequiz.db.time import utcnow
from cinequiz.services.attempts import (
    AttemptTracker,
    get_attempt_tracker,
    get_wallet_connect_tracker,
)
from cinequiz.services.identity import Identity, resolve_identity
from cinequiz.services.mailer import Mailer, get_mailer
from cinequiz.services.participation import ParticipationGate, get_participation_gate

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_now() -> datetime:
    """Return the request's notion of the current instant."""
    return utcnow()


def get_client_ip(request: Request) -> str:
    """Return the caller's network address."""
    if request.client is None:
        return "unknown"
    return request.client.host


def get_identity(
    client_ip: Annotated[str, Depends(get_client_ip)],
    wallet_address: Annotated[str | None, Query(alias="walletAddress")] = None,
) -> Identity:
    """Resolve the caller's identity, preferring a wallet address over the IP.

    Raises:
        InvalidAddress: If a malformed wallet address is supplied
    """
    return resolve_identity(wallet_address, client_ip)


def get_attempt_tracker_dep() -> AttemptTracker:
    return get_attempt_tracker()


def get_wallet_connect_tracker_dep() -> AttemptTracker:
    return get_wallet_connect_tracker()


def get_mailer_dep() -> Mailer:
    return get_mailer()


def get_participation_gate_dep() -> ParticipationGate:
    return get_participation_gate()


NowDep = Annotated[datetime, Depends(get_now)]
ClientIpDep = Annotated[str, Depends(get_client_ip)]
IdentityDep = Annotated[Identity, Depends(get_identity)]
AttemptTrackerDep = Annotated[AttemptTracker, Depends(get_attempt_tracker_dep)]
WalletConnectTrackerDep = Annotated[AttemptTracker, Depends(get_wallet_connect_tracker_dep)]
MailerDep = Annotated[Mailer, Depends(get_mailer_dep)]
ParticipationGateDep = Annotated[ParticipationGate, Depends(get_participation_gate_dep)]
