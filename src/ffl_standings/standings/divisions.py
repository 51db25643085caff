"""Grouping of standings rows into divisions."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ffl_standings.ingest.registry import DivisionRegistry
from ffl_standings.standings.rows import StandingsRow

logger = logging.getLogger(__name__)

UNKNOWN_DIVISION: str = "Unknown"
ALL_TIME_DIVISION: str = ""


def group_by_division(
    rows: Iterable[StandingsRow],
    season: int | None,
    registry: DivisionRegistry,
) -> dict[str, list[StandingsRow]]:
    """Partition *rows* by their division in *season*.

    Divisions appear in the order the registry lists them; divisions
    without any rows are omitted.  Teams the registry does not place go to
    a trailing ``"Unknown"`` group.  With ``season=None`` (All-Time views)
    every row lands in one ``""`` group.

    Each row's ``division`` attribute is set to the group it lands in.
    """
    rows = list(rows)
    if season is None:
        for row in rows:
            row.division = ALL_TIME_DIVISION
        return {ALL_TIME_DIVISION: rows}

    groups: dict[str, list[StandingsRow]] = {name: [] for name in registry.divisions_for(season)}
    unknown: list[StandingsRow] = []
    for row in rows:
        name = registry.division_of(row.team, season)
        if name is None:
            unknown.append(row)
            row.division = UNKNOWN_DIVISION
        else:
            groups[name].append(row)
            row.division = name

    if unknown:
        logger.debug(
            "%d team(s) have no division in %d: %s",
            len(unknown),
            season,
            ", ".join(r.team for r in unknown),
        )
        groups.setdefault(UNKNOWN_DIVISION, []).extend(unknown)
    return {name: members for name, members in groups.items() if members}
