"""Tests for the Alembic migration environment."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "migrations"


def test_upgrade_and_downgrade_follow_alembic_url(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'migrate.db'}"
    monkeypatch.setenv("ALEMBIC_URL", url)
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))

    command.upgrade(config, "head")
    engine = create_engine(url)
    try:
        tables = set(inspect(engine).get_table_names())
        assert {"movies", "users", "solved_movies", "attempts", "alembic_version"} <= tables

        command.downgrade(config, "base")
        assert inspect(engine).get_table_names() == ["alembic_version"]
    finally:
        engine.dispose()
