# src/cinequiz/models/movie.py
"""Movie catalog model."""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from cinequiz.db.session import Base


class Movie(Base):
    """A guessable movie and the screenshot shown to players.

    Rows are seed data. The integer primary key defines the stable ordering
    used by the daily rotation.
    """

    __tablename__ = "movies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    screenshot: Mapped[str] = mapped_column(Text, nullable=False)
