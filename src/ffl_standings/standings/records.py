"""Per-team record aggregation.

Collapses the long-format game frame into one :class:`TeamRecord` per team
for whatever slice of games a :class:`QueryScope` selects.  Only games that
survived :func:`build_game_frame` are counted, so byes, unplayed games and
malformed scores never reach a total.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pandas as pd  # type: ignore[import-untyped]

from ffl_standings.standings.frame import CHRONOLOGICAL_ORDER, select_scope
from ffl_standings.standings.scope import QueryScope
from ffl_standings.standings.streaks import NO_STREAK, Streak, signed_streaks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeamRecord:
    """Aggregate results of one team over a set of valid games.

    ``current_streak`` here is the run at the end of the aggregated games;
    the engine replaces it with the cross-season streak for season views.
    """

    team: str
    wins: int = 0
    losses: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    games: int = 0
    current_streak: Streak = NO_STREAK
    longest_win_streak: int = 0
    longest_loss_streak: int = 0
    highest_score: float = 0.0
    lowest_score: float = 0.0
    games_200_plus: int = 0
    seasons: tuple[int, ...] = field(default_factory=tuple)

    @property
    def win_pct(self) -> float:
        return self.wins / self.games if self.games > 0 else 0.0

    @property
    def avg_points_for(self) -> float:
        return self.points_for / self.games if self.games > 0 else 0.0

    @property
    def avg_points_against(self) -> float:
        return self.points_against / self.games if self.games > 0 else 0.0

    @property
    def point_differential(self) -> float:
        return self.points_for - self.points_against

    @property
    def avg_point_differential(self) -> float:
        return self.point_differential / self.games if self.games > 0 else 0.0


def aggregate(
    frame: pd.DataFrame,
    scope: QueryScope | None = None,
    *,
    club_200_threshold: float = 200.0,
) -> dict[str, TeamRecord]:
    """Aggregate the games *scope* selects into per-team records.

    Args:
        frame: Game frame from :func:`build_game_frame`.
        scope: Games to include; ``None`` aggregates the whole frame.
        club_200_threshold: Inclusive floor of a 200-club game.

    Returns:
        ``{team: TeamRecord}`` for every team with at least one counted game,
        keyed in team-name order.  Always ``wins + losses == games``.
    """
    scoped = select_scope(frame, scope) if scope is not None else frame
    if scoped.empty:
        return {}

    scoped = scoped.sort_values(["team", *CHRONOLOGICAL_ORDER], kind="stable", na_position="last")
    scoped = scoped.assign(
        streak=signed_streaks(scoped["won"], by=scoped["team"]),
        club_200=scoped["score"] >= club_200_threshold,
    )
    grouped = scoped.groupby("team", sort=True)
    summary = grouped.agg(
        wins=("won", "sum"),
        games=("won", "size"),
        points_for=("score", "sum"),
        points_against=("opp_score", "sum"),
        highest_score=("score", "max"),
        lowest_score=("score", "min"),
        games_200_plus=("club_200", "sum"),
        current=("streak", "last"),
        longest_up=("streak", "max"),
        longest_down=("streak", "min"),
    )
    seasons = grouped["season"].unique()

    records: dict[str, TeamRecord] = {}
    for team, row in summary.iterrows():
        wins = int(row["wins"])
        games = int(row["games"])
        records[str(team)] = TeamRecord(
            team=str(team),
            wins=wins,
            losses=games - wins,
            points_for=float(row["points_for"]),
            points_against=float(row["points_against"]),
            games=games,
            current_streak=Streak.from_signed(int(row["current"])),
            longest_win_streak=max(int(row["longest_up"]), 0),
            longest_loss_streak=max(-int(row["longest_down"]), 0),
            highest_score=float(row["highest_score"]),
            lowest_score=float(row["lowest_score"]),
            games_200_plus=int(row["games_200_plus"]),
            seasons=tuple(sorted(int(s) for s in seasons[team])),
        )
    logger.debug("Aggregated %d games into %d team records", len(scoped), len(records))
    return records


def aggregate_team(
    frame: pd.DataFrame,
    team: str,
    scope: QueryScope | None = None,
    *,
    club_200_threshold: float = 200.0,
) -> TeamRecord:
    """Return one team's record; an all-zero record if it has no games."""
    subset = frame[frame["team"] == team]
    return aggregate(subset, scope, club_200_threshold=club_200_threshold).get(team, TeamRecord(team=team))
