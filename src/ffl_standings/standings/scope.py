"""Immutable query scope passed into every standings computation.

A :class:`QueryScope` carries everything that selects *which* standings to
build: the season (or all-time), the week cutoff, the scoring universe, the
display sort, and whether to project to season end.  The engine keeps no
state between calls; changing any filter means building a new scope.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from typing import Literal

from ffl_standings.ingest.schema import ScoreMode, parse_int

SortDirection = Literal["asc", "desc"]

ALL_TIME_LABEL: str = "All Time"
ALL_WEEKS_LABEL: str = "All"


class SortKey(enum.Enum):
    """Columns a standings table can be ordered by."""

    TEAM = "team"
    WINS = "wins"
    LOSSES = "losses"
    WIN_PCT = "win_pct"
    PLAYOFF_PCT = "playoff_pct"
    POINTS_FOR = "points_for"
    POINTS_AGAINST = "points_against"
    POINT_DIFF = "point_diff"
    OVERALL_WINS = "overall_wins"


@dataclass(frozen=True)
class QueryScope:
    """Selection of games and presentation options for one standings view.

    Attributes:
        season: Season year, or ``None`` for the All-Time view.
        week: Inclusive week cutoff for a season (``None`` = all weeks).  In
            the All-Time view a week selects that single week number across
            every season.  Week ``0`` of a season is the pre-season view.
        score_mode: ``"starters"`` or ``"bench"``.
        sort_key: Display ordering within each division.
        sort_direction: ``"desc"`` (default) or ``"asc"``.
        project: Replace current standings with season-end projections.
    """

    season: int | None = None
    week: int | None = None
    score_mode: ScoreMode = "starters"
    sort_key: SortKey = SortKey.WIN_PCT
    sort_direction: SortDirection = "desc"
    project: bool = False

    def __post_init__(self) -> None:
        if self.week is not None and self.week < 0:
            msg = f"week must be >= 0, got {self.week}"
            raise ValueError(msg)
        if self.project and self.season is None:
            msg = "Projections are only available for a single season"
            raise ValueError(msg)

    # -- constructors ---------------------------------------------------------

    @classmethod
    def season_through(cls, season: int, week: int | None = None, **options: object) -> QueryScope:
        """Scope for *season* including every week ``<= week``."""
        return cls(season=season, week=week, **options)  # type: ignore[arg-type]

    @classmethod
    def all_time(cls, **options: object) -> QueryScope:
        """Scope over every valid game in the log."""
        return cls(season=None, week=None, **options)  # type: ignore[arg-type]

    @classmethod
    def week_across_seasons(cls, week: int, **options: object) -> QueryScope:
        """Scope over week number *week* of every season."""
        return cls(season=None, week=week, **options)  # type: ignore[arg-type]

    @classmethod
    def parse(cls, season: str | int | None, week: str | int | None = None, **options: object) -> QueryScope:
        """Build a scope from selector strings such as ``"All Time"`` / ``"All"``.

        Examples:
            >>> QueryScope.parse("2023", "5").week
            5
            >>> QueryScope.parse("All Time", "All").is_all_time
            True
        """
        season_value = None if season in (None, ALL_TIME_LABEL) else parse_int(season)
        week_value = None if week in (None, ALL_WEEKS_LABEL) else parse_int(week)
        return cls(season=season_value, week=week_value, **options)  # type: ignore[arg-type]

    def replace(self, **changes: object) -> QueryScope:
        """Return a copy with *changes* applied."""
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]

    # -- predicates -----------------------------------------------------------

    @property
    def is_all_time(self) -> bool:
        """``True`` for both All-Time views (all weeks or one week across seasons)."""
        return self.season is None

    @property
    def is_week_across_seasons(self) -> bool:
        return self.season is None and self.week is not None

    @property
    def is_preseason(self) -> bool:
        """``True`` for week 0 of a specific season."""
        return self.season is not None and self.week == 0

    @property
    def label(self) -> str:
        """Human-readable title for the view."""
        if self.season is None:
            title = "All-Time Standings" if self.week is None else f"All-Time Week {self.week} Standings"
        elif self.week == 0:
            title = f"{self.season} Season, Pre-Season Divisions"
        elif self.week is None:
            title = f"{self.season} Season Standings"
        else:
            title = f"{self.season} Season, Week {self.week} Standings"
        if self.project and not self.is_preseason:
            title += " (Projected Season End)"
        return title
