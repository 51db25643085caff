"""Shared utilities module."""

from __future__ import annotations

from ffl_standings.utils.assertions import (
    assert_columns,
    assert_game_frame,
    assert_standings_frame,
)
from ffl_standings.utils.logger import (
    DEBUG,
    NORMAL,
    QUIET,
    VERBOSE,
    configure_logging,
    get_logger,
)

__all__ = [
    "DEBUG",
    "NORMAL",
    "QUIET",
    "VERBOSE",
    "assert_columns",
    "assert_game_frame",
    "assert_standings_frame",
    "configure_logging",
    "get_logger",
]
