"""Logging configuration shared by the API process."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the whole process.

    Args:
        level: Logging level name such as ``"INFO"`` or ``"DEBUG"``.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger("cinequiz").setLevel(numeric_level)
