"""Fixed-window attempt counters stored in the shared database.

Counters are centralised so that several API processes enforce one budget.
The increment is a single conditional UPDATE guarded by the cap, so
concurrent requests can never push a counter past the maximum.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Final

from sqlalchemy.orm import Session

from cinequiz.core.errors import AttemptNotRecorded, TooManyAttempts
from cinequiz.core.settings import settings
from cinequiz.models import Attempt
from cinequiz.services.identity import Identity
from cinequiz.services.storage import insert_if_absent

logger = logging.getLogger(__name__)

_MAX_RACE_RETRIES: Final[int] = 3


@dataclass(frozen=True)
class AttemptStatus:
    """Counter state after an attempt was recorded."""

    attempts: int
    remaining_attempts: int
    reset_at: datetime


class AttemptTracker:
    """Per-identity attempt budget over a fixed window."""

    def __init__(
        self,
        scope: str = "guess",
        *,
        max_attempts: int | None = None,
        window_seconds: int | None = None,
    ) -> None:
        self.scope = scope
        self.max_attempts = max_attempts or settings.max_attempts_per_window
        self.window = timedelta(seconds=window_seconds or settings.attempt_window_seconds)

    def _key(self, identity: Identity) -> str:
        return f"{self.scope}:{identity.key}"

    def remaining(self, attempts: int) -> int:
        """Return how many attempts are left, never negative."""
        return max(0, self.max_attempts - attempts)

    def _active(self, record: Attempt | None, now: datetime) -> bool:
        return record is not None and record.window_start > now - self.window

    def get_attempts(self, db: Session, identity: Identity, now: datetime) -> int:
        """Return the attempts used in the identity's current window."""
        record = db.get(Attempt, self._key(identity), populate_existing=True)
        if not self._active(record, now):
            return 0
        return int(record.attempt_count)  # type: ignore[union-attr]

    def record_attempt(self, db: Session, identity: Identity, now: datetime) -> AttemptStatus:
        """Count one attempt for ``identity``.

        Raises:
            TooManyAttempts: If the window's budget is already spent. The
                counter is left unchanged.
            AttemptNotRecorded: If concurrent writers kept the counter from
                being updated.
        """
        key = self._key(identity)
        cutoff = now - self.window

        for _ in range(_MAX_RACE_RETRIES):
            incremented = (
                db.query(Attempt)
                .filter(
                    Attempt.identity == key,
                    Attempt.window_start > cutoff,
                    Attempt.attempt_count < self.max_attempts,
                )
                .update(
                    {Attempt.attempt_count: Attempt.attempt_count + 1},
                    synchronize_session=False,
                )
            )
            if incremented:
                break

            record = db.get(Attempt, key, populate_existing=True)
            if self._active(record, now):
                reset_at = record.window_start + self.window  # type: ignore[union-attr]
                logger.info("Attempt limit reached for %s (scope=%s)", identity.kind, self.scope)
                raise TooManyAttempts(reset_at=reset_at, now=now)

            if record is None:
                opened = insert_if_absent(
                    db,
                    Attempt,
                    {"identity": key, "window_start": now, "attempt_count": 1},
                    index_elements=["identity"],
                )
            else:
                # Expired window: restart it unless another request already did.
                opened = (
                    db.query(Attempt)
                    .filter(Attempt.identity == key, Attempt.window_start <= cutoff)
                    .update(
                        {Attempt.window_start: now, Attempt.attempt_count: 1},
                        synchronize_session=False,
                    )
                )
            if opened:
                break
        else:
            db.rollback()
            logger.warning("Attempt counter contended, gave up (scope=%s)", self.scope)
            raise AttemptNotRecorded()
        db.commit()

        record = db.get(Attempt, key, populate_existing=True)
        attempts = int(record.attempt_count) if record else 0
        window_start = record.window_start if record else now
        return AttemptStatus(
            attempts=attempts,
            remaining_attempts=self.remaining(attempts),
            reset_at=window_start + self.window,
        )

    def reset_attempts(self, db: Session, identity: Identity) -> None:
        """Forget the identity's counter."""
        db.query(Attempt).filter(Attempt.identity == self._key(identity)).delete(
            synchronize_session=False
        )
        db.commit()


def get_attempt_tracker() -> AttemptTracker:
    """Return the tracker that throttles guesses."""
    return AttemptTracker("guess")


def get_wallet_connect_tracker() -> AttemptTracker:
    """Return the tracker that throttles wallet connection requests."""
    return AttemptTracker(
        "wallet-connect",
        max_attempts=settings.wallet_connect_max_attempts,
        window_seconds=settings.wallet_connect_window_seconds,
    )
