"""SQLAlchemy models for player identities and their score state."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cinequiz.db.session import Base
from cinequiz.db.time import utcnow
from cinequiz.db.types import UTCDateTime


class User(Base):
    """Player identity keyed by wallet address."""

    __tablename__ = "users"

    wallet_address: Mapped[str] = mapped_column(String(44), primary_key=True)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    is_email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verification_token: Mapped[str | None] = mapped_column(Text, unique=True, nullable=True)
    verification_expires: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    correct_answers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_participation_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        index=True,
    )
    submitted_ip: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    solved: Mapped[list[SolvedMovie]] = relationship(
        "SolvedMovie",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="SolvedMovie.solved_at",
    )

    @property
    def solved_titles(self) -> list[str]:
        """Return solved movie titles in the order they were credited."""
        return [row.movie_title for row in self.solved]


class SolvedMovie(Base):
    """Membership row of a user's solved-movie set.

    The composite primary key makes each title appear at most once per user.
    """

    __tablename__ = "solved_movies"

    wallet_address: Mapped[str] = mapped_column(
        String(44),
        ForeignKey("users.wallet_address", ondelete="CASCADE"),
        primary_key=True,
    )
    movie_title: Mapped[str] = mapped_column(Text, primary_key=True)
    solved_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    user: Mapped[User] = relationship("User", back_populates="solved")
