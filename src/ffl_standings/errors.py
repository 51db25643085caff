"""Exception hierarchy for the standings engine.

Only conditions that make a whole view impossible are raised.  Per-game and
per-team problems (unplayed or malformed games, teams without a division)
are recovered where they occur and never reach the caller.
"""

from __future__ import annotations


class StandingsError(Exception):
    """Base exception for all standings-engine errors."""


class DataUnavailableError(StandingsError):
    """The game log, division data, or odds table could not be loaded."""


class SeasonNotFoundError(StandingsError, KeyError):
    """A season-scoped query named a season absent from the game log."""


class ProjectionUnavailableError(StandingsError):
    """Neither the simulation engine nor the linear fallback produced rows."""
