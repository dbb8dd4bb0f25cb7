"""Dialect-aware write helpers."""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from cinequiz.db.session import Base


def insert_if_absent(
    db: Session,
    model: type[Base],
    values: dict[str, Any],
    *,
    index_elements: list[str],
) -> bool:
    """Insert one row unless its unique key already exists.

    The check and the write happen in a single ``INSERT ... ON CONFLICT DO
    NOTHING`` statement, so two concurrent callers cannot both insert.

    Args:
        db: Database session
        model: Mapped class to insert into
        values: Column values for the new row
        index_elements: Columns of the unique key guarding the insert

    Returns:
        True if a row was inserted, False if the key was already present
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(model).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(model).values(**values)
    else:  # pragma: no cover - unsupported backends
        raise RuntimeError(f"insert_if_absent is not supported on {dialect}")

    result = db.execute(stmt.on_conflict_do_nothing(index_elements=index_elements))
    return bool(result.rowcount)
