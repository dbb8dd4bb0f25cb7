"""Attempt counter schemas."""

from datetime import datetime

from pydantic import Field

from .common import CamelModel


class AttemptCountResponse(CamelModel):
    """Attempts used in the caller's current window."""

    attempts: int = Field(..., ge=0)
    remaining_attempts: int = Field(..., ge=0)


class AttemptResponse(AttemptCountResponse):
    """Outcome of recording one guess attempt."""

    reset_at: datetime = Field(..., description="End of the current attempt window")


class WalletConnectResponse(CamelModel):
    """Acknowledges that a wallet connection may proceed."""

    success: bool = True
