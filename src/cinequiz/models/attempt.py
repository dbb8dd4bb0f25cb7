# src/cinequiz/models/attempt.py
"""Rolling attempt counters used for rate limiting."""

from datetime import datetime

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from cinequiz.db.session import Base
from cinequiz.db.types import UTCDateTime


class Attempt(Base):
    """Attempt count of one identity within its current window.

    ``identity`` is a scoped key such as ``guess:wallet:<address>``. A row whose
    window has elapsed is ignored and overwritten by the next attempt.
    """

    __tablename__ = "attempts"

    identity: Mapped[str] = mapped_column(Text, primary_key=True)
    window_start: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    attempt_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
