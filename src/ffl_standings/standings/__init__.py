"""Standings computation: records, streaks, ranking, playoff race, projections."""

from __future__ import annotations

from ffl_standings.standings.divisions import ALL_TIME_DIVISION, UNKNOWN_DIVISION, group_by_division
from ffl_standings.standings.engine import StandingsEngine
from ffl_standings.standings.frame import build_game_frame, select_scope
from ffl_standings.standings.magic import (
    CLINCHED,
    ELIMINATED,
    PlayoffFormat,
    annotate_magic_numbers,
    magic_or_elim,
    race_order,
)
from ffl_standings.standings.odds import PlayoffOddsTable, band
from ffl_standings.standings.overall import OverallRecord, overall_record, overall_records
from ffl_standings.standings.projection import (
    PerTeamProjection,
    ProjectionAdapter,
    ProjectionEngine,
    ProjectionResult,
    linear_projection,
)
from ffl_standings.standings.records import TeamRecord, aggregate, aggregate_team
from ffl_standings.standings.rows import NO_MAGIC, ProjectionDetails, StandingsRow, StandingsTable
from ffl_standings.standings.scope import QueryScope, SortKey
from ffl_standings.standings.simulation import MonteCarloProjectionEngine
from ffl_standings.standings.sorting import compare_rows, sort_rows
from ffl_standings.standings.streaks import (
    NO_STREAK,
    LongestStreaks,
    Streak,
    current_streak,
    current_streaks,
    longest_streak_table,
    longest_streaks,
    signed_streaks,
    week_streak,
)

__all__ = [
    "ALL_TIME_DIVISION",
    "CLINCHED",
    "ELIMINATED",
    "LongestStreaks",
    "MonteCarloProjectionEngine",
    "NO_MAGIC",
    "NO_STREAK",
    "OverallRecord",
    "PerTeamProjection",
    "PlayoffFormat",
    "PlayoffOddsTable",
    "ProjectionAdapter",
    "ProjectionDetails",
    "ProjectionEngine",
    "ProjectionResult",
    "QueryScope",
    "SortKey",
    "StandingsEngine",
    "StandingsRow",
    "StandingsTable",
    "Streak",
    "TeamRecord",
    "UNKNOWN_DIVISION",
    "aggregate",
    "aggregate_team",
    "annotate_magic_numbers",
    "band",
    "build_game_frame",
    "compare_rows",
    "current_streak",
    "current_streaks",
    "group_by_division",
    "linear_projection",
    "longest_streak_table",
    "longest_streaks",
    "magic_or_elim",
    "overall_record",
    "overall_records",
    "race_order",
    "select_scope",
    "signed_streaks",
    "sort_rows",
    "week_streak",
]
