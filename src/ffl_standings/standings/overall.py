"""All-play "overall" record used by the All-Time views.

Instead of counting only the head-to-head result against the scheduled
opponent, a team is compared against every other team that played in the
same season and week: one win for each lower score, one loss for each
higher score.  Equal scores count for neither side.  The totals therefore
exceed the number of games actually played.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd  # type: ignore[import-untyped]

from ffl_standings.standings.rows import NO_OVERALL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverallRecord:
    """All-play wins and losses."""

    wins: int = 0
    losses: int = 0

    @property
    def display(self) -> str:
        """``"W-L"``, or ``"--"`` for a team that never played."""
        if self.wins == 0 and self.losses == 0:
            return NO_OVERALL
        return f"{self.wins}-{self.losses}"


def overall_records(frame: pd.DataFrame, week: int | None = None) -> dict[str, OverallRecord]:
    """Compute the all-play record of every team in *frame*.

    Vectorized as a per-(season, week) rank: the number of scores strictly
    below a team's score is its ``min`` rank minus one, and the number
    strictly above is the group size minus its ``max`` rank.

    Args:
        frame: Game frame from :func:`build_game_frame` (valid games only).
        week: Restrict to this week number in every season.

    Returns:
        ``{team: OverallRecord}`` for every team with a counted game.
    """
    if week is not None:
        frame = frame[frame["week"] == week]
    if frame.empty:
        return {}

    by_week = frame.groupby(["season", "week"])["score"]
    below = by_week.rank(method="min") - 1
    above = by_week.transform("size") - by_week.rank(method="max")
    totals = (
        pd.DataFrame({"team": frame["team"], "wins": below, "losses": above})
        .groupby("team", sort=True)[["wins", "losses"]]
        .sum()
    )
    logger.debug("Computed overall records for %d teams", len(totals))
    return {
        str(team): OverallRecord(wins=int(row["wins"]), losses=int(row["losses"]))
        for team, row in totals.iterrows()
    }


def overall_record(frame: pd.DataFrame, team: str, week: int | None = None) -> OverallRecord:
    """All-play record of one team; ``OverallRecord()`` if it never played."""
    return overall_records(frame, week).get(team, OverallRecord())
