"""Unit tests for the projection adapter and its linear fallback."""

from __future__ import annotations

import logging

import pytest

from ffl_standings.errors import ProjectionUnavailableError
from ffl_standings.standings import (
    PerTeamProjection,
    ProjectionAdapter,
    ProjectionEngine,
    TeamRecord,
    linear_projection,
)
from ffl_standings.standings.projection import PROJECTED_STREAK, rows_from_simulation


def _records() -> dict[str, TeamRecord]:
    return {
        "Alpha": TeamRecord(team="Alpha", wins=6, losses=2, points_for=1000.0, points_against=900.0, games=8),
        "Bravo": TeamRecord(team="Bravo", wins=2, losses=6, points_for=880.0, points_against=960.0, games=8),
    }


class _FixedEngine:
    def __init__(self, projections: list[PerTeamProjection]) -> None:
        self.projections = projections
        self.calls: list[tuple[int, int]] = []

    def run_simulation(self, season: int, trials: int) -> list[PerTeamProjection]:
        self.calls.append((season, trials))
        return self.projections


class _BrokenEngine:
    def run_simulation(self, season: int, trials: int) -> list[PerTeamProjection]:
        msg = "simulation crashed"
        raise RuntimeError(msg)


@pytest.mark.smoke
@pytest.mark.unit
class TestLinearProjection:
    def test_pace_extrapolation(self) -> None:
        rows, source = linear_projection(_records(), 8, 14)
        assert source == "linear"
        alpha = next(r for r in rows if r.team == "Alpha")
        assert alpha.wins == 10.5
        assert alpha.losses == pytest.approx(3.5)
        assert alpha.win_pct == pytest.approx(0.75)
        assert alpha.points_for == 1750.0
        assert alpha.points_against == 900.0
        assert alpha.point_differential == pytest.approx(850.0)
        assert alpha.games == 14
        assert alpha.is_projected
        assert alpha.record_display == "10.5-3.5"

    def test_wins_rounded_to_one_decimal(self) -> None:
        records = {"Alpha": TeamRecord(team="Alpha", wins=2, losses=1, points_for=300.0, games=3)}
        rows, _ = linear_projection(records, 3, 14)
        assert rows[0].wins == 9.3
        assert rows[0].losses == pytest.approx(4.7)

    def test_team_without_games_splits_evenly(self) -> None:
        rows, _ = linear_projection({"Alpha": TeamRecord(team="Alpha")}, 0, 14)
        assert (rows[0].wins, rows[0].losses, rows[0].win_pct) == (7, 7, 0.5)

    def test_finished_season_returns_current_records(self) -> None:
        rows, source = linear_projection(_records(), 14, 14)
        assert source == "current"
        alpha = next(r for r in rows if r.team == "Alpha")
        assert (alpha.wins, alpha.losses, alpha.games) == (6, 2, 8)
        assert alpha.is_projected


@pytest.mark.unit
class TestRowsFromSimulation:
    def test_mapping(self) -> None:
        projection = PerTeamProjection(
            team="Alpha",
            avg_wins=9.8,
            avg_points=1700.0,
            avg_points_against=1500.0,
            playoff_probability=81.0,
            championship_probability=22.5,
            best_case=(12, 2),
            worst_case=(7, 7),
            finish_distribution={1: 60.0, 2: 40.0},
        )
        (row,) = rows_from_simulation([projection], 14)
        assert row.wins == 9.8
        assert row.losses == pytest.approx(4.2)
        assert row.win_pct == pytest.approx(0.7)
        assert row.point_differential == pytest.approx(200.0)
        assert row.streak_display == PROJECTED_STREAK
        assert row.projection is not None
        assert row.projection.playoff_probability == 81.0
        assert row.projection.finish_distribution == {1: 60.0, 2: 40.0}

    def test_points_against_estimated_when_missing(self) -> None:
        (row,) = rows_from_simulation([PerTeamProjection(team="Alpha", avg_wins=7.0, avg_points=1400.0)], 14)
        assert row.points_against == pytest.approx(700.0)


@pytest.mark.unit
class TestProjectionAdapter:
    def test_engine_protocol(self) -> None:
        assert isinstance(_FixedEngine([]), ProjectionEngine)

    def test_simulation_preferred(self) -> None:
        engine = _FixedEngine(
            [
                PerTeamProjection(team="Bravo", avg_wins=4.0, avg_points=1500.0),
                PerTeamProjection(team="Alpha", avg_wins=10.0, avg_points=1750.0),
            ]
        )
        adapter = ProjectionAdapter(engine, trials=250)
        result = adapter.project(_records(), 2023, 8, 14)
        assert result.source == "simulation"
        assert [r.team for r in result.rows] == ["Alpha", "Bravo"]
        assert engine.calls == [(2023, 250)]

    def test_engine_failure_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        adapter = ProjectionAdapter(_BrokenEngine())
        with caplog.at_level(logging.WARNING, logger="ffl_standings"):
            result = adapter.project(_records(), 2023, 8, 14)
        assert result.source == "linear"
        assert [r.team for r in result.rows] == ["Alpha", "Bravo"]
        assert "using linear extrapolation" in caplog.text

    def test_empty_simulation_falls_back(self) -> None:
        result = ProjectionAdapter(_FixedEngine([])).project(_records(), 2023, 8, 14)
        assert result.source == "linear"

    def test_no_engine(self) -> None:
        adapter = ProjectionAdapter()
        assert adapter.engine is None
        assert adapter.project(_records(), 2023, 8, 14).rows[0].wins == 10.5

    def test_nothing_to_project(self) -> None:
        with pytest.raises(ProjectionUnavailableError, match="No teams to project"):
            ProjectionAdapter(_FixedEngine([])).project({}, 2023, 8, 14)

    def test_generations(self) -> None:
        adapter = ProjectionAdapter()
        first = adapter.project(_records(), 2023, 8, 14)
        assert adapter.is_current(first)
        second = adapter.project(_records(), 2023, 9, 14)
        assert second.generation > first.generation
        assert not adapter.is_current(first)
        assert adapter.is_current(second)
