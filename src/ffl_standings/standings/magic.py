"""Magic and elimination numbers.

For a team currently in a playoff position, the *magic number* is how many
of its own wins (or losses by the first team outside the cut) clinch a
spot.  For a team outside, the *elimination number* is how many of its own
losses (or wins by the last team inside the cut) end its chances.

Display values:

* ``"X"`` clinched
* ``"E"`` eliminated
* ``"3"`` magic or elimination number
* ``"--"`` not applicable (no format for the season, week 0, All-Time,
  projected rows, or no regular-season weeks left)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ffl_standings.config import PlayoffFormat, StandingsSettings
from ffl_standings.standings.rows import NO_MAGIC, StandingsRow

logger = logging.getLogger(__name__)

CLINCHED: str = "X"
ELIMINATED: str = "E"

__all__ = [
    "CLINCHED",
    "ELIMINATED",
    "NO_MAGIC",
    "PlayoffFormat",
    "annotate_magic_numbers",
    "magic_or_elim",
    "race_order",
]


def race_order(rows: Sequence[StandingsRow]) -> list[StandingsRow]:
    """Order rows for the playoff race: wins, then win %, then points for.

    The sort is stable, so fully tied teams keep their given order.
    """
    return sorted(rows, key=lambda r: (-r.wins, -r.win_pct, -r.points_for))


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def _clinch_or_elimination(
    row: StandingsRow,
    contenders: Sequence[StandingsRow],
    position: int,
    slots: int,
    remaining_weeks: int,
) -> str:
    if position <= slots:
        if len(contenders) <= slots:
            return CLINCHED
        cutoff = contenders[slots]
        magic = cutoff.wins + remaining_weeks + 1 - row.wins
        return CLINCHED if magic <= 0 else _format_number(magic)

    last_in = contenders[slots - 1]
    max_possible = row.wins + remaining_weeks
    elimination = max_possible + 1 - last_in.wins - 1
    return ELIMINATED if elimination <= 0 else _format_number(elimination)


def magic_or_elim(
    row: StandingsRow,
    division_rows: Sequence[StandingsRow],
    season: int | None,
    current_week: int | None,
    settings: StandingsSettings,
    *,
    league_rows: Sequence[StandingsRow] | None = None,
) -> str:
    """Return the magic/elimination display value for *row*.

    Args:
        row: The team being evaluated; its ``rank`` must already be set.
        division_rows: Rows of the team's division.
        season: Season of the view; ``None`` for All-Time.
        current_week: Week cutoff of the view.
        settings: Supplies the season's :class:`PlayoffFormat`.
        league_rows: Every row of the view; the contender pool for an
            overall (league-wide) bracket.  Defaults to *division_rows*.

    In a per-division format the team's displayed rank decides which side
    of the cut it is on.  In an overall bracket its position in the pooled
    race order does, since ranks are only assigned within divisions.
    """
    if season is None or not current_week or row.is_projected:
        return NO_MAGIC
    fmt = settings.playoff_format(season)
    if fmt is None:
        return NO_MAGIC
    remaining = fmt.regular_season_weeks - current_week
    if remaining <= 0:
        return NO_MAGIC

    if fmt.is_overall_bracket:
        contenders = race_order(league_rows if league_rows is not None else division_rows)
        position = next(i for i, r in enumerate(contenders, start=1) if r.team == row.team)
    else:
        contenders = race_order(division_rows)
        position = row.rank
    return _clinch_or_elimination(row, contenders, position, fmt.playoff_slots, remaining)


def annotate_magic_numbers(
    divisions: dict[str, list[StandingsRow]],
    season: int | None,
    current_week: int | None,
    settings: StandingsSettings,
) -> None:
    """Fill ``magic_elim`` on every row of a grouped, ranked table in place."""
    league_rows = [row for rows in divisions.values() for row in rows]
    for rows in divisions.values():
        for row in rows:
            row.magic_elim = magic_or_elim(
                row,
                rows,
                season,
                current_week,
                settings,
                league_rows=league_rows,
            )
    logger.debug(
        "Annotated magic numbers for %d rows (season=%s, week=%s)", len(league_rows), season, current_week
    )
