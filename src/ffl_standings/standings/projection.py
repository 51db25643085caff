"""Season-end projections.

:class:`ProjectionAdapter` turns either a Monte-Carlo simulation (any
object implementing :class:`ProjectionEngine`) or, when that is absent or
fails, a linear extrapolation of current records into projected
:class:`StandingsRow` objects.  Projected rows go through the same division
grouping and sorting as regular rows.

Each ``project`` call is stamped with a generation number.  A caller that
runs projections off the main thread can compare a result with
:meth:`ProjectionAdapter.is_current` and drop it if a newer request has
been issued since.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal, Protocol, runtime_checkable

from ffl_standings.errors import ProjectionUnavailableError
from ffl_standings.standings.records import TeamRecord
from ffl_standings.standings.rows import ProjectionDetails, StandingsRow

logger = logging.getLogger(__name__)

PROJECTED_STREAK: str = "TBD"

ProjectionSource = Literal["simulation", "linear", "current"]


@dataclass(frozen=True)
class PerTeamProjection:
    """Simulated season-end outlook for one team.

    Probabilities are percentages (0-100).  ``best_case`` and ``worst_case``
    are ``(wins, losses)`` records; ``finish_distribution`` maps a division
    finishing place to the percentage of trials ending there.
    """

    team: str
    avg_wins: float
    avg_points: float
    avg_points_against: float | None = None
    playoff_probability: float | None = None
    championship_probability: float | None = None
    best_case: tuple[int, int] | None = None
    worst_case: tuple[int, int] | None = None
    finish_distribution: dict[int, float] = field(default_factory=dict)


@runtime_checkable
class ProjectionEngine(Protocol):
    """Capability to simulate the rest of a season."""

    def run_simulation(self, season: int, trials: int) -> list[PerTeamProjection]:
        """Return one projection per team of *season* over *trials* runs."""
        ...


@dataclass(frozen=True)
class ProjectionResult:
    """Projected rows plus where they came from.

    Attributes:
        rows: Projected rows, ordered by (wins, win %, point differential).
        generation: Request number assigned by the adapter.
        source: ``"simulation"``, ``"linear"`` (extrapolation), or
            ``"current"`` (season already over; current records flagged
            projected).
    """

    rows: list[StandingsRow]
    generation: int
    source: ProjectionSource


def _projection_order(rows: list[StandingsRow]) -> list[StandingsRow]:
    return sorted(rows, key=lambda r: (-r.wins, -r.win_pct, -r.point_differential))


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------


def rows_from_simulation(
    projections: list[PerTeamProjection],
    regular_season_weeks: int,
) -> list[StandingsRow]:
    """Map simulation results onto projected rows over a full season.

    When the engine reports no points-against figure it is estimated from
    points scored and projected win share.
    """
    weeks = regular_season_weeks
    rows = []
    for p in projections:
        win_share = p.avg_wins / weeks
        points_against = (
            p.avg_points_against if p.avg_points_against is not None else p.avg_points * (1 - win_share)
        )
        differential = p.avg_points - points_against
        rows.append(
            StandingsRow(
                team=p.team,
                wins=p.avg_wins,
                losses=weeks - p.avg_wins,
                games=weeks,
                win_pct=win_share,
                points_for=p.avg_points,
                points_against=points_against,
                avg_points_for=p.avg_points / weeks,
                avg_points_against=points_against / weeks,
                point_differential=differential,
                avg_point_differential=differential / weeks,
                streak_display=PROJECTED_STREAK,
                is_projected=True,
                projection=ProjectionDetails(
                    avg_points_against=p.avg_points_against,
                    playoff_probability=p.playoff_probability,
                    championship_probability=p.championship_probability,
                    best_case=p.best_case,
                    worst_case=p.worst_case,
                    finish_distribution=dict(p.finish_distribution),
                ),
            )
        )
    return rows


def linear_projection(
    records: Mapping[str, TeamRecord],
    current_week: int,
    regular_season_weeks: int,
) -> tuple[list[StandingsRow], ProjectionSource]:
    """Extrapolate each team's current pace over the remaining weeks.

    ``wins + remaining * wins / games`` and likewise for points, with
    projected wins kept to one decimal.  A team without games is projected
    to an even split.  When no weeks remain the current records are
    returned, flagged as projected.

    Examples:
        A 6-2 team with 6 weeks left projects to ``6 + 6 * 0.75 = 10.5``
        wins and ``3.5`` losses over a 14-week season.
    """
    weeks = regular_season_weeks
    remaining = weeks - current_week
    rows = []
    for record in records.values():
        row = StandingsRow.from_record(record, is_projected=True)
        if remaining <= 0:
            rows.append(row)
            continue
        if record.games == 0:
            row.wins = row.losses = weeks / 2
            row.win_pct = 0.5
            rows.append(row)
            continue
        projected_wins = record.wins + remaining * (record.wins / record.games)
        projected_points = record.points_for + remaining * (record.points_for / record.games)
        row.wins = round(projected_wins, 1)
        row.losses = weeks - row.wins
        row.win_pct = projected_wins / weeks
        row.points_for = float(round(projected_points))
        row.avg_points_for = row.points_for / weeks
        row.avg_points_against = record.points_against / weeks
        row.point_differential = row.points_for - record.points_against
        row.avg_point_differential = row.point_differential / weeks
        row.games = weeks
        rows.append(row)
    return rows, "current" if remaining <= 0 else "linear"


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


class ProjectionAdapter:
    """Produce projected standings rows, degrading to linear extrapolation.

    Args:
        engine: Monte-Carlo capability, or ``None`` to always extrapolate.
        trials: Simulated seasons per projection.
    """

    def __init__(self, engine: ProjectionEngine | None = None, trials: int = 1000) -> None:
        self._engine = engine
        self._trials = trials
        self._counter = itertools.count(1)
        self._latest = 0
        self._lock = threading.Lock()

    @property
    def engine(self) -> ProjectionEngine | None:
        return self._engine

    def _next_generation(self) -> int:
        with self._lock:
            self._latest = next(self._counter)
            return self._latest

    def is_current(self, result: ProjectionResult) -> bool:
        """``True`` unless a later :meth:`project` call has been made."""
        with self._lock:
            return result.generation == self._latest

    def project(
        self,
        records: Mapping[str, TeamRecord],
        season: int,
        current_week: int,
        regular_season_weeks: int,
    ) -> ProjectionResult:
        """Project *season* to its end from the standings at *current_week*.

        Args:
            records: Current per-team records for the season; used by the
                linear fallback.
            season: Season to project.
            current_week: Last week included in *records*.
            regular_season_weeks: Season length.

        Returns:
            :class:`ProjectionResult` with rows in projection order.

        Raises:
            ProjectionUnavailableError: If neither the simulation nor the
                linear fallback produced any rows.
        """
        generation = self._next_generation()

        if self._engine is not None:
            try:
                projections = self._engine.run_simulation(season, self._trials)
            except Exception:
                logger.warning(
                    "Projection engine failed for %d; using linear extrapolation", season, exc_info=True
                )
            else:
                if projections:
                    rows = rows_from_simulation(projections, regular_season_weeks)
                    logger.info("Projected %d teams for %d by simulation", len(rows), season)
                    return ProjectionResult(_projection_order(rows), generation, "simulation")
                logger.warning("Projection engine returned nothing for %d; extrapolating instead", season)

        rows, source = linear_projection(records, current_week, regular_season_weeks)
        if not rows:
            msg = f"No teams to project for season {season}"
            raise ProjectionUnavailableError(msg)
        logger.info("Projected %d teams for %d by %s extrapolation", len(rows), season, source)
        return ProjectionResult(_projection_order(rows), generation, source)
