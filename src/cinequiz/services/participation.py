"""One-submission-per-day participation rule."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from cinequiz.core.settings import settings
from cinequiz.db.time import local_date, reference_zone, same_calendar_day, start_of_day
from cinequiz.models import User
from cinequiz.services.identity import Identity


@dataclass(frozen=True)
class ParticipationStatus:
    """Result of a participation check."""

    has_participated: bool
    user: User | None = None


def is_bypass(admin_code: str | None, test_mode: bool) -> bool:
    """Return True when the daily limit must not apply.

    The admin code only counts when a secret is configured; comparison is
    constant-time.
    """
    if test_mode:
        return True
    configured = settings.admin_code
    if not configured or not admin_code:
        return False
    return secrets.compare_digest(admin_code.encode(), configured.encode())


class ParticipationGate:
    """Answers whether an identity already submitted on the current day."""

    @staticmethod
    def find_user(db: Session, identity: Identity, now: datetime) -> User | None:
        """Return the identity's record relevant to today's check.

        Wallet identities map to their own record. IP identities map to the
        most recent submission made from that address today.
        """
        if identity.kind == "wallet":
            return db.get(User, identity.value)

        day_start = start_of_day(local_date(now, reference_zone()))
        return (
            db.query(User)
            .filter(User.submitted_ip == identity.value, User.last_participation_at >= day_start)
            .order_by(User.last_participation_at.desc())
            .first()
        )

    def has_participated_today(
        self,
        db: Session,
        identity: Identity,
        now: datetime,
        admin_code: str | None = None,
        test_mode: bool = False,
    ) -> ParticipationStatus:
        """Check the identity against today's participation record.

        Args:
            db: Database session
            identity: Wallet or IP identity of the caller
            now: Current instant
            admin_code: Optional operator secret enabling the bypass
            test_mode: Whether the caller runs in test mode (bypass)

        Returns:
            ParticipationStatus with the stored user when they did participate
        """
        if is_bypass(admin_code, test_mode):
            return ParticipationStatus(has_participated=False)

        user = self.find_user(db, identity, now)
        if user is None or user.last_participation_at is None:
            return ParticipationStatus(has_participated=False)

        if same_calendar_day(user.last_participation_at, now):
            return ParticipationStatus(has_participated=True, user=user)
        return ParticipationStatus(has_participated=False)


def get_participation_gate() -> ParticipationGate:
    """Return a participation gate instance."""
    return ParticipationGate()
