"""Standings orchestration.

:class:`StandingsEngine` is the single entry point: ``compute(scope)``
runs record aggregation, streaks, division grouping, sorting, playoff odds,
magic numbers and (optionally) projection for one :class:`QueryScope` and
returns a :class:`StandingsTable`.

The engine keeps no state between calls.  Every computation re-reads the
game log from its store and builds fresh rows, so two calls with the same
scope over an unchanged log return equal tables.
"""

from __future__ import annotations

import logging

import pandas as pd  # type: ignore[import-untyped]

from ffl_standings.config import StandingsSettings
from ffl_standings.errors import ProjectionUnavailableError, SeasonNotFoundError
from ffl_standings.ingest.registry import DivisionRegistry
from ffl_standings.ingest.repository import GameLogStore
from ffl_standings.ingest.schema import ScoreMode
from ffl_standings.standings.divisions import group_by_division
from ffl_standings.standings.frame import build_game_frame
from ffl_standings.standings.magic import annotate_magic_numbers
from ffl_standings.standings.odds import PlayoffOddsTable
from ffl_standings.standings.overall import overall_records
from ffl_standings.standings.projection import ProjectionAdapter
from ffl_standings.standings.records import TeamRecord, aggregate
from ffl_standings.standings.rows import StandingsRow, StandingsTable
from ffl_standings.standings.scope import QueryScope
from ffl_standings.standings.sorting import sort_alphabetically, sort_rows
from ffl_standings.standings.streaks import Streak, current_streaks, longest_streak_table

logger = logging.getLogger(__name__)


class StandingsEngine:
    """Compute standings tables from a game log.

    Args:
        store: Game log.
        registry: Division membership by season.
        odds: Historical playoff odds; ``None`` leaves ``playoff_pct`` empty.
        settings: Playoff formats and thresholds; defaults when ``None``.
        projector: Projection adapter used for ``scope.project``; defaults
            to linear extrapolation only.

    Example:
        >>> engine = StandingsEngine(store, registry, odds)  # doctest: +SKIP
        >>> table = engine.compute(QueryScope.season_through(2023, 5))  # doctest: +SKIP
        >>> table.title  # doctest: +SKIP
        '2023 Season, Week 5 Standings'
    """

    def __init__(
        self,
        store: GameLogStore,
        registry: DivisionRegistry,
        odds: PlayoffOddsTable | None = None,
        settings: StandingsSettings | None = None,
        projector: ProjectionAdapter | None = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._odds = odds
        self._settings = settings or StandingsSettings()
        self._projector = projector or ProjectionAdapter(trials=self._settings.projection_trials)

    @property
    def settings(self) -> StandingsSettings:
        return self._settings

    @property
    def projector(self) -> ProjectionAdapter:
        return self._projector

    # -- public API -----------------------------------------------------------

    def compute(self, scope: QueryScope) -> StandingsTable:
        """Build the standings table for *scope*.

        Raises:
            SeasonNotFoundError: If ``scope.season`` is not in the game log.
            DataUnavailableError: If the store cannot load the game log.
        """
        if scope.season is not None and scope.season not in self._store.seasons():
            msg = f"Season {scope.season} is not in the game log"
            raise SeasonNotFoundError(msg)

        frame = build_game_frame(self._store.all_games(), scope.score_mode)
        if scope.is_all_time:
            table = self._all_time(frame, scope)
        elif scope.is_preseason:
            table = self._preseason(frame, scope)
        else:
            table = self._season(frame, scope)
        logger.info("Computed %s: %d teams in %d division(s)", table.title, len(table), len(table.divisions))
        return table

    def record_book(self, score_mode: ScoreMode = "starters") -> pd.DataFrame:
        """Longest win, loss, high-score and low-score streaks for every team."""
        frame = build_game_frame(self._store.all_games(), score_mode)
        return longest_streak_table(
            frame,
            high_score_threshold=self._settings.high_score_threshold,
            low_score_threshold=self._settings.low_score_threshold,
        )

    def latest_scope(self, **options: object) -> QueryScope:
        """Scope for the most recently played week, or the newest season's week 0.

        Raises:
            SeasonNotFoundError: If the game log is empty.
        """
        latest = self._store.latest_played()
        if latest is not None:
            return QueryScope.season_through(latest[0], latest[1], **options)
        seasons = self._store.seasons()
        if not seasons:
            msg = "The game log has no seasons"
            raise SeasonNotFoundError(msg)
        return QueryScope.season_through(seasons[-1], 0, **options)

    # -- views ----------------------------------------------------------------

    def _preseason(self, frame: pd.DataFrame, scope: QueryScope) -> StandingsTable:
        assert scope.season is not None
        streaks = current_streaks(frame, scope.season, 0)
        rows = [
            StandingsRow(
                team=team,
                streak_display=streaks[team].display if team in streaks else "None",
                is_preseason=True,
            )
            for team in self._store.teams(scope.season)
        ]
        divisions = group_by_division(rows, scope.season, self._registry)
        divisions = {name: sort_alphabetically(members) for name, members in divisions.items()}
        return StandingsTable(scope=scope, divisions=divisions, title=scope.label)

    def _season(self, frame: pd.DataFrame, scope: QueryScope) -> StandingsTable:
        assert scope.season is not None
        season = scope.season
        records = aggregate(frame, scope, club_200_threshold=self._settings.club_200_threshold)
        current_week = scope.week if scope.week is not None else self._last_week(frame, season)

        rows: list[StandingsRow] | None = None
        projection_failed = False
        if scope.project:
            # Teams with byes or an unplayed schedule so far project from an empty record.
            pending = {
                team: TeamRecord(team=team) for team in self._store.teams(season) if team not in records
            }
            try:
                result = self._projector.project(
                    {**records, **pending},
                    season,
                    current_week or 0,
                    self._settings.regular_season_weeks(season),
                )
            except ProjectionUnavailableError as exc:
                logger.warning("Projection unavailable, showing current standings: %s", exc)
                projection_failed = True
            else:
                rows = result.rows

        if rows is None:
            streaks = current_streaks(frame, season, scope.week)
            rows = [self._season_row(record, streaks.get(record.team)) for record in records.values()]

        for row in rows:
            row.playoff_pct = self._odds.lookup(row.wins, row.losses) if self._odds is not None else None

        divisions = self._group_and_sort(rows, season, scope)
        annotate_magic_numbers(divisions, season, current_week, self._settings)
        title = scope.replace(project=False).label if projection_failed else scope.label
        return StandingsTable(
            scope=scope, divisions=divisions, title=title, projection_failed=projection_failed
        )

    def _all_time(self, frame: pd.DataFrame, scope: QueryScope) -> StandingsTable:
        # Streaks here come from the aggregated games themselves: the whole
        # history, or only the selected week across seasons.
        records = aggregate(frame, scope, club_200_threshold=self._settings.club_200_threshold)
        overall = overall_records(frame, scope.week)
        rows = []
        for record in records.values():
            row = StandingsRow.from_record(record, is_all_time=True)
            if record.team in overall:
                row.overall_wins = overall[record.team].wins
                row.overall_losses = overall[record.team].losses
                row.overall_record = overall[record.team].display
            rows.append(row)
        divisions = self._group_and_sort(rows, None, scope)
        return StandingsTable(scope=scope, divisions=divisions, title=scope.label)

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _season_row(record: TeamRecord, streak: Streak | None) -> StandingsRow:
        row = StandingsRow.from_record(record)
        if streak is not None:
            row.streak_display = streak.display
        return row

    @staticmethod
    def _last_week(frame: pd.DataFrame, season: int) -> int | None:
        weeks = frame.loc[frame["season"] == season, "week"]
        return int(weeks.max()) if not weeks.empty else None

    def _group_and_sort(
        self,
        rows: list[StandingsRow],
        season: int | None,
        scope: QueryScope,
    ) -> dict[str, list[StandingsRow]]:
        divisions = group_by_division(rows, season, self._registry)
        return {
            name: sort_rows(members, scope.sort_key, scope.sort_direction, self._settings.win_pct_tolerance)
            for name, members in divisions.items()
        }
