"""Email verification tokens."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from cinequiz.core.errors import InvalidOrExpiredToken
from cinequiz.core.settings import settings
from cinequiz.models import User

logger = logging.getLogger(__name__)


def generate_token() -> str:
    """Return a random hex token of the configured byte length."""
    return secrets.token_hex(settings.verification_token_bytes)


def verification_link(token: str) -> str:
    """Return the public URL that consumes ``token``."""
    return f"{settings.verification_base_url}/{token}"


def issue_verification(user: User, now: datetime) -> str:
    """Attach a fresh pending token to ``user`` and return it.

    Any previous token is replaced. The caller commits the session.
    """
    token = generate_token()
    user.is_email_verified = False
    user.verification_token = token
    user.verification_expires = now + timedelta(hours=settings.verification_token_ttl_hours)
    return token


def mark_verified(user: User) -> None:
    """Verify ``user`` directly and drop any pending token."""
    user.is_email_verified = True
    user.verification_token = None
    user.verification_expires = None


def verify(db: Session, token: str, now: datetime) -> None:
    """Consume a verification token.

    The match, the expiry check and the state change are one conditional
    UPDATE, so a token can be consumed at most once.

    Raises:
        InvalidOrExpiredToken: If the token is unknown, already used or expired
    """
    if not token:
        raise InvalidOrExpiredToken()

    updated = (
        db.query(User)
        .filter(User.verification_token == token, User.verification_expires >= now)
        .update(
            {
                User.is_email_verified: True,
                User.verification_token: None,
                User.verification_expires: None,
            },
            synchronize_session=False,
        )
    )
    if not updated:
        logger.info("Rejected invalid or expired verification token")
        raise InvalidOrExpiredToken()
    db.commit()
    logger.info("Email verified")
