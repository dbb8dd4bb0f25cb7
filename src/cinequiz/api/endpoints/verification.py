# src/cinequiz/api/endpoints/verification.py
"""Email verification link target."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

from cinequiz.api.dependencies import NowDep, SessionDep
from cinequiz.core.errors import InvalidOrExpiredToken
from cinequiz.services.verification import verify

router = APIRouter(tags=["verification"])

VERIFIED_TEXT = "Email verified successfully! You can now close this window."


@router.get(
    "/verify-email/{token}",
    summary="Consume an email verification link",
    response_class=PlainTextResponse,
)
async def verify_email(token: str, db: SessionDep, now: NowDep) -> PlainTextResponse:
    """Mark the email behind ``token`` as verified.

    Opened from a mail client, so both outcomes are plain text.
    """
    try:
        verify(db, token, now)
    except InvalidOrExpiredToken as err:
        return PlainTextResponse(err.message, status_code=status.HTTP_400_BAD_REQUEST)
    return PlainTextResponse(VERIFIED_TEXT)
