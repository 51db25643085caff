"""Unit tests for the game log stores."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from ffl_standings.errors import DataUnavailableError, StandingsError
from ffl_standings.ingest import Game, InMemoryGameLogStore, JsonGameLogStore, ParquetGameLogStore


@pytest.mark.smoke
@pytest.mark.unit
class TestGameLogQueries:
    def test_seasons_and_weeks(self, sample_store: InMemoryGameLogStore) -> None:
        assert sample_store.seasons() == [2022, 2023]
        assert sample_store.weeks_for(2023) == [1, 2, 3, 4]
        assert sample_store.weeks_for(1999) == []

    def test_teams_exclude_bye(self, sample_store: InMemoryGameLogStore) -> None:
        assert sample_store.teams() == ["Alpha", "Bravo", "Charlie", "Delta"]
        assert sample_store.teams(2022) == ["Alpha", "Bravo", "Charlie", "Delta"]

    def test_games_for_filters(self, sample_store: InMemoryGameLogStore) -> None:
        assert len(sample_store.games_for()) == 25
        assert {g.season for g in sample_store.games_for(2022)} == {2022}
        assert max(g.week for g in sample_store.games_for(2023, 2)) == 2

    def test_week_without_season_rejected(self, sample_store: InMemoryGameLogStore) -> None:
        with pytest.raises(ValueError, match="requires a season"):
            sample_store.games_for(week=3)

    def test_latest_played_uses_game_id(self, sample_store: InMemoryGameLogStore) -> None:
        assert sample_store.latest_played() == (2023, 3)

    def test_latest_played_without_ids(self, make_matchup: Any) -> None:
        store = InMemoryGameLogStore(
            make_matchup(2021, 9, "Alpha", 100.0, "Bravo", 90.0)
            + make_matchup(2021, 2, "Charlie", 100.0, "Delta", 90.0)
        )
        assert store.latest_played() == (2021, 9)

    def test_latest_played_none_when_unplayed(self, make_matchup: Any) -> None:
        store = InMemoryGameLogStore(make_matchup(2024, 1, "Alpha", None, "Bravo", None))
        assert store.latest_played() is None

    def test_store_returns_copies(self, sample_store: InMemoryGameLogStore) -> None:
        sample_store.all_games().clear()
        assert len(sample_store.all_games()) == 25


@pytest.mark.unit
class TestJsonGameLogStore:
    def test_loads_display_keys(self, temp_data_dir: Path, raw_game_records: list[dict[str, Any]]) -> None:
        path = temp_data_dir / "league_data.json"
        path.write_text(json.dumps(raw_game_records))
        store = JsonGameLogStore(path)
        games = store.all_games()
        assert len(games) == 24
        first = games[0]
        assert (first.season, first.week, first.team, first.opponent) == (2022, 1, "Alpha", "Bravo")
        assert first.scores() == pytest.approx((120.0, 100.0, 20.0))
        assert sum(g.is_played() for g in games) == 20

    def test_accepts_games_object(self, temp_data_dir: Path) -> None:
        path = temp_data_dir / "wrapped.json"
        record = {"Season": 2023, "Week": 1, "Team": "Alpha", "Opponent": "Bravo"}
        path.write_text(json.dumps({"games": [record, "not a record"]}))
        assert len(JsonGameLogStore(path).all_games()) == 1

    def test_missing_file(self, temp_data_dir: Path) -> None:
        store = JsonGameLogStore(temp_data_dir / "absent.json")
        with pytest.raises(DataUnavailableError, match="Cannot load game log"):
            store.all_games()

    def test_invalid_json(self, temp_data_dir: Path) -> None:
        path = temp_data_dir / "broken.json"
        path.write_text("{not json")
        with pytest.raises(StandingsError):
            JsonGameLogStore(path).all_games()

    def test_wrong_shape(self, temp_data_dir: Path) -> None:
        path = temp_data_dir / "shape.json"
        path.write_text(json.dumps({"records": []}))
        with pytest.raises(DataUnavailableError, match="must contain a list"):
            JsonGameLogStore(path).all_games()


@pytest.mark.unit
class TestParquetGameLogStore:
    def test_save_and_reload(self, temp_data_dir: Path, sample_games: list[Game]) -> None:
        store = ParquetGameLogStore(temp_data_dir)
        store.save_games(sample_games)

        assert (temp_data_dir / "games" / "season=2022" / "data.parquet").exists()
        assert (temp_data_dir / "games" / "season=2023" / "data.parquet").exists()

        reloaded = ParquetGameLogStore(temp_data_dir).all_games()
        assert len(reloaded) == len(sample_games)
        assert {g.season for g in reloaded} == {2022, 2023}
        key = lambda g: (g.season, g.week, g.team, g.opponent)  # noqa: E731
        assert [g.model_dump() for g in sorted(reloaded, key=key)] == [
            g.model_dump() for g in sorted(sample_games, key=key)
        ]

    def test_unplayed_scores_stay_none(self, temp_data_dir: Path, sample_games: list[Game]) -> None:
        store = ParquetGameLogStore(temp_data_dir)
        store.save_games(sample_games)
        week4 = [g for g in store.all_games() if g.season == 2023 and g.week == 4]
        assert len(week4) == 4
        assert all(g.team_score is None and not g.is_played() for g in week4)

    def test_save_nothing_is_noop(self, temp_data_dir: Path) -> None:
        ParquetGameLogStore(temp_data_dir).save_games([])
        assert not (temp_data_dir / "games").exists()

    def test_missing_directory(self, temp_data_dir: Path) -> None:
        with pytest.raises(DataUnavailableError, match="No Parquet game log"):
            ParquetGameLogStore(temp_data_dir).all_games()
