"""Game controller driving a player's session against the API.

The controller never lets an API failure escape to its caller; failures end
up in the ``ErrorBanner`` instead, which clears itself after a few seconds.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from cinequiz.client.api import ApiError, CineQuizClient
from cinequiz.client.session import GameSession
from cinequiz.client.timers import OneShotTimer, RepeatingTimer
from cinequiz.client.wallet import WalletConnector, WalletState
from cinequiz.db.time import ensure_aware, utcnow
from cinequiz.services.identity import titles_match

logger = logging.getLogger(__name__)

BANNER_TIMEOUT_SECONDS = 3.0
COUNTDOWN_INTERVAL_SECONDS = 1.0

CORRECT_TEXT = "Correct!"
INCORRECT_TEXT = "Try again!"
ALREADY_SOLVED_TEXT = "You've already solved this movie!"
CONNECT_WALLET_TEXT = "Please connect your wallet first to make a guess."
ALREADY_SUBMITTED_TEXT = (
    "You have already submitted your information today. "
    "Come back tomorrow for a new challenge!"
)
SUBMITTED_TEXT = "Information submitted successfully! Thank you for participating."


class ErrorBanner:
    """A single transient error message."""

    def __init__(self, timeout: float = BANNER_TIMEOUT_SECONDS) -> None:
        self.message: str | None = None
        self._timer = OneShotTimer(timeout, self.clear)

    def show(self, message: str) -> None:
        self.message = message
        self._timer.restart()

    def clear(self) -> None:
        self.message = None

    def close(self) -> None:
        self._timer.cancel()
        self.clear()


def format_countdown(remaining: timedelta) -> str:
    total = max(0, int(remaining.total_seconds()))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d} : {minutes:02d} : {seconds:02d}"


class GameController:
    def __init__(
        self,
        client: CineQuizClient,
        session: GameSession,
        wallet: WalletConnector | None = None,
        *,
        banner: ErrorBanner | None = None,
        countdown_interval: float = COUNTDOWN_INTERVAL_SECONDS,
    ) -> None:
        self.client = client
        self.session = session
        self.wallet = wallet
        self.banner = banner or ErrorBanner()
        self.countdown_text: str | None = None
        self.submission_message: str | None = None
        self._countdown_timer = RepeatingTimer(countdown_interval, self._tick)
        if wallet is not None:
            wallet.subscribe(self.on_wallet_change)
            self.session.wallet_address = wallet.address

    async def load(self) -> bool:
        """Fetch today's movie and prepare the guess input."""
        try:
            self.session.current_movie = await self.client.daily_movie()
        except ApiError as exc:
            logger.error("Error loading game: %s", exc)
            self.banner.show("Error loading game. Please try again later.")
            return False
        self.session.input_enabled = self.session.wallet_address is not None
        await self.refresh_solved_state()
        return True

    def start(self) -> None:
        self._countdown_timer.start()

    async def close(self) -> None:
        await self._countdown_timer.stop()
        self.banner.close()
        if self.wallet is not None:
            self.wallet.unsubscribe(self.on_wallet_change)

    async def on_wallet_change(self, state: WalletState, address: str | None) -> None:
        self.session.wallet_address = address if state is WalletState.CONNECTED else None
        self.session.input_enabled = self.session.wallet_address is not None and not self.session.solved
        if self.session.wallet_address is not None:
            await self.refresh_solved_state()

    async def refresh_solved_state(self) -> None:
        """Hide the guess input when today's movie is already solved."""
        address = self.session.wallet_address
        if not address:
            return
        try:
            status = await self.client.check_movie_solved(address)
        except ApiError as exc:
            logger.warning("Failed to check movie status: %s", exc)
            self.banner.show("Failed to check movie status")
            return
        if status.is_solved:
            self.session.solved = True
            self.session.input_enabled = False
            self.session.result_text = ALREADY_SOLVED_TEXT

    async def guess(self, text: str) -> bool | None:
        """Evaluate a guess.

        Returns None when the guess was not evaluated (blank input, no wallet,
        throttled or failed), otherwise whether it was correct.
        """
        if not text or not text.strip():
            return None
        address = self.session.wallet_address
        if not address:
            self.banner.show(CONNECT_WALLET_TEXT)
            return None
        movie = self.session.current_movie
        if movie is None or self.session.solved:
            return None
        if self.wallet is not None:
            self.wallet.touch()

        try:
            await self.client.record_attempt(address)
        except ApiError as exc:
            self.banner.show(exc.message)
            return None

        correct = titles_match(text, movie.title)
        self.session.result_text = CORRECT_TEXT if correct else INCORRECT_TEXT
        if not correct:
            return False

        self.session.solved = True
        self.session.input_enabled = False
        try:
            await self.client.increment_score(address, movie.title)
        except ApiError as exc:
            # The player keeps their correct answer; the user record appears on submission.
            logger.info("Score not updated for %s: %s", address, exc)
        await self._offer_submission()
        return True

    async def _offer_submission(self) -> None:
        try:
            participation = await self.client.check_participation(
                self.session.wallet_address, self.session.bypass
            )
        except ApiError as exc:
            logger.warning("Error checking participation: %s", exc)
            self.banner.show("Error checking participation status")
            return
        self.session.show_submission_form = not participation.has_participated
        if participation.has_participated:
            self.submission_message = ALREADY_SUBMITTED_TEXT

    async def submit(self, email: str) -> bool:
        address = self.session.wallet_address
        if not address:
            self.banner.show(CONNECT_WALLET_TEXT)
            return False
        try:
            result = await self.client.submit_user(email.strip(), address, self.session.bypass)
        except ApiError as exc:
            self.submission_message = exc.message or "An error occurred"
            return False
        self.submission_message = result.message if result.requires_verification else SUBMITTED_TEXT
        self.session.show_submission_form = False
        return True

    def countdown(self, now: datetime | None = None) -> str | None:
        """Render the time left until the next movie."""
        movie = self.session.current_movie
        if movie is None:
            return None
        now = ensure_aware(now) if now is not None else utcnow()
        return format_countdown(ensure_aware(movie.time_info.next_change) - now)

    def rotation_due(self, now: datetime | None = None) -> bool:
        movie = self.session.current_movie
        if movie is None:
            return False
        now = ensure_aware(now) if now is not None else utcnow()
        return now >= ensure_aware(movie.time_info.next_change)

    async def _tick(self) -> None:
        if self.rotation_due():
            self.session.reset_for_new_movie()
            await self.load()
        self.countdown_text = self.countdown()


__all__ = ["ErrorBanner", "GameController", "format_countdown"]
