"""Tie-break sorting and ranking of standings rows.

Points columns sort by their per-game averages so that teams with
different game counts compare fairly.  Sorting by win percentage treats
percentages within a tolerance as tied and breaks the tie on total point
differential, higher first, whatever the requested direction.
"""

from __future__ import annotations

import functools
import math
from collections.abc import Callable

from ffl_standings.standings.rows import StandingsRow
from ffl_standings.standings.scope import SortDirection, SortKey

DEFAULT_TOLERANCE: float = 0.001


def _playoff_value(row: StandingsRow) -> float:
    # Missing odds sort as 0%.
    if row.playoff_pct is None or math.isnan(row.playoff_pct):
        return 0.0
    return row.playoff_pct


_SORT_VALUES: dict[SortKey, Callable[[StandingsRow], float]] = {
    SortKey.WINS: lambda r: float(r.wins),
    SortKey.LOSSES: lambda r: float(r.losses),
    SortKey.WIN_PCT: lambda r: r.win_pct,
    SortKey.PLAYOFF_PCT: _playoff_value,
    SortKey.POINTS_FOR: lambda r: r.avg_points_for,
    SortKey.POINTS_AGAINST: lambda r: r.avg_points_against,
    SortKey.POINT_DIFF: lambda r: r.avg_point_differential,
    SortKey.OVERALL_WINS: lambda r: float(r.overall_wins),
}


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def compare_rows(
    a: StandingsRow,
    b: StandingsRow,
    key: SortKey,
    direction: SortDirection = "desc",
    tolerance: float = DEFAULT_TOLERANCE,
) -> int:
    """Three-way comparison of two rows under *key* and *direction*.

    Returns a negative number when *a* belongs above *b*.
    """
    if key is SortKey.TEAM:
        result = _sign((a.team > b.team) - (a.team < b.team))
        return result if direction == "asc" else -result
    # The tolerance is applied pairwise, so it is not transitive: a chain of
    # near-equal percentages can compare cyclically and then order follows input.
    if key is SortKey.WIN_PCT and abs(a.win_pct - b.win_pct) < tolerance:
        return _sign(b.point_differential - a.point_differential)
    value = _SORT_VALUES[key]
    result = _sign(value(a) - value(b))
    return result if direction == "asc" else -result


def sort_rows(
    rows: list[StandingsRow],
    key: SortKey = SortKey.WIN_PCT,
    direction: SortDirection = "desc",
    tolerance: float = DEFAULT_TOLERANCE,
) -> list[StandingsRow]:
    """Return *rows* ordered by *key* and assign 1-based ranks.

    The sort is stable: rows that compare equal keep their input order.
    Each returned row's ``rank`` is set to its position.

    Args:
        rows: Rows of a single division (or the All-Time group).
        key: Column to order by.
        direction: ``"desc"`` or ``"asc"``.
        tolerance: Win-percentage tie window for :attr:`SortKey.WIN_PCT`.
    """
    ordered = sorted(
        rows,
        key=functools.cmp_to_key(lambda a, b: compare_rows(a, b, key, direction, tolerance)),
    )
    for position, row in enumerate(ordered, start=1):
        row.rank = position
    return ordered


def sort_alphabetically(rows: list[StandingsRow]) -> list[StandingsRow]:
    """Order by team name ascending and rank; used for the pre-season view."""
    return sort_rows(rows, SortKey.TEAM, "asc")
