"""initial schema

Revision ID: 5c1e0a7d2b41
Revises:
Create Date: 2026-10-19 09:12:44.318204

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e0a7d2b41"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the movie catalog, user, solved-movie and attempt tables."""
    op.create_table(
        "movies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("screenshot", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "users",
        sa.Column("wallet_address", sa.String(length=44), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("is_email_verified", sa.Boolean(), nullable=False),
        sa.Column("verification_token", sa.Text(), nullable=True),
        sa.Column("verification_expires", sa.DateTime(), nullable=True),
        sa.Column("correct_answers", sa.Integer(), nullable=False),
        sa.Column("last_participation_at", sa.DateTime(), nullable=True),
        sa.Column("submitted_ip", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("wallet_address"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("verification_token"),
    )
    op.create_index(
        op.f("ix_users_last_participation_at"), "users", ["last_participation_at"], unique=False
    )
    op.create_index(op.f("ix_users_submitted_ip"), "users", ["submitted_ip"], unique=False)
    op.create_table(
        "solved_movies",
        sa.Column("wallet_address", sa.String(length=44), nullable=False),
        sa.Column("movie_title", sa.Text(), nullable=False),
        sa.Column("solved_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["wallet_address"], ["users.wallet_address"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("wallet_address", "movie_title"),
    )
    op.create_table(
        "attempts",
        sa.Column("identity", sa.Text(), nullable=False),
        sa.Column("window_start", sa.DateTime(), nullable=False),
        sa.Column("attempt_count", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("identity"),
    )


def downgrade() -> None:
    """Drop every CineQuiz table."""
    op.drop_table("attempts")
    op.drop_table("solved_movies")
    op.drop_index(op.f("ix_users_submitted_ip"), table_name="users")
    op.drop_index(op.f("ix_users_last_participation_at"), table_name="users")
    op.drop_table("users")
    op.drop_table("movies")
