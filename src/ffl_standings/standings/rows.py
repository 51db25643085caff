"""Display rows and the grouped standings table.

A :class:`StandingsRow` is a :class:`TeamRecord` dressed for display: its
division, rank, streak text, playoff odds, magic/elimination text and
overall record.  Rows are mutable while the engine fills them in (the
sorter assigns ``rank``, the magic calculator ``magic_elim``) and are
handed to callers inside an immutable-by-convention :class:`StandingsTable`.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass, field

import pandas as pd  # type: ignore[import-untyped]

from ffl_standings.standings.records import TeamRecord
from ffl_standings.standings.scope import QueryScope
from ffl_standings.utils.assertions import assert_standings_frame

NO_MAGIC: str = "--"
NO_OVERALL: str = "--"


@dataclass(frozen=True)
class ProjectionDetails:
    """Simulation extras attached to a projected row."""

    avg_points_against: float | None = None
    playoff_probability: float | None = None
    championship_probability: float | None = None
    best_case: tuple[int, int] | None = None
    worst_case: tuple[int, int] | None = None
    finish_distribution: dict[int, float] = field(default_factory=dict)


@dataclass
class StandingsRow:
    """One team's line in a standings table.

    ``wins`` and ``losses`` are floats only for projected rows, where they
    are average simulated season-end totals.
    """

    team: str
    division: str = ""
    wins: float = 0
    losses: float = 0
    games: int = 0
    win_pct: float = 0.0
    points_for: float = 0.0
    points_against: float = 0.0
    avg_points_for: float = 0.0
    avg_points_against: float = 0.0
    point_differential: float = 0.0
    avg_point_differential: float = 0.0
    streak_display: str = "None"
    longest_win_streak: int = 0
    longest_loss_streak: int = 0
    highest_score: float = 0.0
    lowest_score: float = 0.0
    games_200_plus: int = 0
    rank: int = 0
    playoff_pct: float | None = None
    magic_elim: str = NO_MAGIC
    overall_wins: int = 0
    overall_losses: int = 0
    overall_record: str = NO_OVERALL
    is_projected: bool = False
    is_all_time: bool = False
    is_preseason: bool = False
    projection: ProjectionDetails | None = None

    @classmethod
    def from_record(cls, record: TeamRecord, **extra: object) -> StandingsRow:
        """Copy the counting stats of *record*; *extra* sets display fields."""
        row = cls(
            team=record.team,
            wins=record.wins,
            losses=record.losses,
            games=record.games,
            win_pct=record.win_pct,
            points_for=record.points_for,
            points_against=record.points_against,
            avg_points_for=record.avg_points_for,
            avg_points_against=record.avg_points_against,
            point_differential=record.point_differential,
            avg_point_differential=record.avg_point_differential,
            streak_display=record.current_streak.display,
            longest_win_streak=record.longest_win_streak,
            longest_loss_streak=record.longest_loss_streak,
            highest_score=record.highest_score,
            lowest_score=record.lowest_score,
            games_200_plus=record.games_200_plus,
        )
        for name, value in extra.items():
            setattr(row, name, value)
        return row

    @property
    def record_display(self) -> str:
        """``"9-5"``; projected rows show one decimal (``"9.4-4.6"``)."""
        if self.is_projected:
            return f"{self.wins:.1f}-{self.losses:.1f}"
        return f"{int(self.wins)}-{int(self.losses)}"

    @property
    def playoff_display(self) -> str:
        """Playoff odds as ``"62%"``, or ``"N/A"`` when unavailable."""
        if self.playoff_pct is None or math.isnan(self.playoff_pct):
            return "N/A"
        return f"{self.playoff_pct:.0f}%"


_FRAME_COLUMNS: list[str] = [
    "division",
    "rank",
    "team",
    "wins",
    "losses",
    "games",
    "win_pct",
    "points_for",
    "points_against",
    "avg_points_for",
    "avg_points_against",
    "point_differential",
    "streak",
    "playoff_pct",
    "magic_elim",
    "overall_record",
    "is_projected",
]


@dataclass
class StandingsTable:
    """Standings grouped by division, in display order.

    Attributes:
        scope: The query that produced the table.
        divisions: ``{division name: rows}``.  Division order is display
            order; the All-Time views use a single ``""`` division.
        title: Human-readable heading.
        projection_failed: Set when a projection was requested but could
            not be produced and regular standings were returned instead.
    """

    scope: QueryScope
    divisions: dict[str, list[StandingsRow]]
    title: str = ""
    projection_failed: bool = False

    def __iter__(self) -> Iterator[tuple[str, list[StandingsRow]]]:
        return iter(self.divisions.items())

    def __len__(self) -> int:
        return sum(len(rows) for rows in self.divisions.values())

    def rows(self) -> list[StandingsRow]:
        """All rows, flattened in display order."""
        return [row for rows in self.divisions.values() for row in rows]

    def find(self, team: str) -> StandingsRow | None:
        """Return *team*'s row, or ``None`` if it is not in the table."""
        for row in self.rows():
            if row.team == team:
                return row
        return None

    def to_frame(self) -> pd.DataFrame:
        """Return the table as a validated DataFrame, one row per team."""
        records = [
            {
                "division": row.division,
                "rank": row.rank,
                "team": row.team,
                "wins": float(row.wins),
                "losses": float(row.losses),
                "games": row.games,
                "win_pct": row.win_pct,
                "points_for": row.points_for,
                "points_against": row.points_against,
                "avg_points_for": row.avg_points_for,
                "avg_points_against": row.avg_points_against,
                "point_differential": row.point_differential,
                "streak": row.streak_display,
                "playoff_pct": float("nan") if row.playoff_pct is None else row.playoff_pct,
                "magic_elim": row.magic_elim,
                "overall_record": row.overall_record,
                "is_projected": row.is_projected,
            }
            for row in self.rows()
        ]
        df = pd.DataFrame(records, columns=_FRAME_COLUMNS)
        df = df.astype({"rank": "int64", "games": "int64", "win_pct": "float64", "playoff_pct": "float64"})
        assert_standings_frame(df)
        return df
