"""Per-player client state passed explicitly to the game controller."""

from __future__ import annotations

from dataclasses import dataclass

from cinequiz.client.api import BypassOptions
from cinequiz.schemas import DailyMovieResponse


@dataclass
class GameSession:
    admin_code: str | None = None
    test_mode: bool = False
    current_movie: DailyMovieResponse | None = None
    wallet_address: str | None = None
    input_enabled: bool = False
    solved: bool = False
    show_submission_form: bool = False
    result_text: str | None = None

    @property
    def bypass(self) -> BypassOptions:
        return BypassOptions(admin_code=self.admin_code or None, test_mode=self.test_mode)

    def reset_for_new_movie(self) -> None:
        """Forget per-movie state after the daily rotation."""
        self.current_movie = None
        self.solved = False
        self.show_submission_form = False
        self.result_text = None
