"""Shared pytest fixtures for the ffl_standings test suite.

The sample league has four teams in two divisions and two seasons:

=======  ====  ==========================  ==========================
Season   Week  Game 1                      Game 2
=======  ====  ==========================  ==========================
2022     1     Alpha 120.0 - Bravo 100.0   Charlie 90.0 - Delta 110.0
2022     2     Alpha 95.0 - Charlie 105.0  Bravo 130.0 - Delta 125.0
2023     1     Alpha 150.2 - Bravo 140.1   Charlie 100.0 - Delta 80.0
2023     2     Alpha 160.0 - Charlie 90.0  Bravo 70.0 - Delta 99.5
2023     3     Alpha 110.0 - Delta 120.0   Bravo 101.0 - Charlie 100.0
2023     4     Alpha vs Bravo (unplayed)   Charlie vs Delta (unplayed)
=======  ====  ==========================  ==========================

Divisions are East (Alpha, Bravo) and West (Charlie, Delta) in both
seasons.  A scored bye row in 2023 week 3 must never be counted.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from ffl_standings.ingest import DivisionRegistry, Game, InMemoryGameLogStore
from ffl_standings.standings import PlayoffOddsTable

MatchupFactory = Callable[..., list[Game]]

_SCHEDULE: list[tuple[int, int, str, float | None, str, float | None]] = [
    (2022, 1, "Alpha", 120.0, "Bravo", 100.0),
    (2022, 1, "Charlie", 90.0, "Delta", 110.0),
    (2022, 2, "Alpha", 95.0, "Charlie", 105.0),
    (2022, 2, "Bravo", 130.0, "Delta", 125.0),
    (2023, 1, "Alpha", 150.2, "Bravo", 140.1),
    (2023, 1, "Charlie", 100.0, "Delta", 80.0),
    (2023, 2, "Alpha", 160.0, "Charlie", 90.0),
    (2023, 2, "Bravo", 70.0, "Delta", 99.5),
    (2023, 3, "Alpha", 110.0, "Delta", 120.0),
    (2023, 3, "Bravo", 101.0, "Charlie", 100.0),
    (2023, 4, "Alpha", None, "Bravo", None),
    (2023, 4, "Charlie", None, "Delta", None),
]

DIVISIONS: dict[int, dict[str, list[str]]] = {
    2022: {"East": ["Alpha", "Bravo"], "West": ["Charlie", "Delta"]},
    2023: {"East": ["Alpha", "Bravo"], "West": ["Charlie", "Delta"]},
}


def matchup(
    season: int,
    week: int,
    team: str,
    score: float | None,
    opponent: str,
    opp_score: float | None,
    game_id: int | None = None,
    bench: tuple[float, float] | None = None,
) -> list[Game]:
    """Both sides of one matchup as canonical games."""
    played = score is not None and opp_score is not None
    diff = round(score - opp_score, 2) if played else None  # type: ignore[operator]
    bench_diff = round(bench[0] - bench[1], 2) if bench is not None else None
    return [
        Game(
            season=season,
            week=week,
            team=team,
            opponent=opponent,
            team_score=score,
            opponent_score=opp_score,
            score_diff=diff,
            bench_score=bench[0] if bench else None,
            opponent_bench_score=bench[1] if bench else None,
            bench_score_diff=bench_diff,
            game_id=game_id,
        ),
        Game(
            season=season,
            week=week,
            team=opponent,
            opponent=team,
            team_score=opp_score,
            opponent_score=score,
            score_diff=-diff if diff is not None else None,
            bench_score=bench[1] if bench else None,
            opponent_bench_score=bench[0] if bench else None,
            bench_score_diff=-bench_diff if bench_diff is not None else None,
            game_id=game_id,
        ),
    ]


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo any ``configure_logging`` call so caplog keeps working."""
    yield
    root = logging.getLogger("ffl_standings")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Path:
    """Isolated directory for files written by a test."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def make_matchup() -> MatchupFactory:
    """Factory returning both sides of a matchup (see :func:`matchup`)."""
    return matchup


@pytest.fixture
def sample_games() -> list[Game]:
    """The two-season sample league, plus one scored bye row."""
    games: list[Game] = []
    for game_id, (season, week, team, score, opponent, opp_score) in enumerate(_SCHEDULE, start=1):
        games.extend(matchup(season, week, team, score, opponent, opp_score, game_id=game_id))
    games.append(
        Game(
            season=2023,
            week=3,
            team="Bye",
            opponent="Alpha",
            team_score=0.0,
            opponent_score=200.0,
            score_diff=-200.0,
        )
    )
    return games


@pytest.fixture
def sample_store(sample_games: list[Game]) -> InMemoryGameLogStore:
    return InMemoryGameLogStore(sample_games)


@pytest.fixture
def sample_registry() -> DivisionRegistry:
    return DivisionRegistry(DIVISIONS)


@pytest.fixture
def sample_odds() -> PlayoffOddsTable:
    return PlayoffOddsTable({(0, 0): 50.0, (2, 1): 71.4, (1, 2): 38.2, (1, 0): 60.0, (0, 1): 40.0})


@pytest.fixture
def raw_game_records() -> list[dict[str, Any]]:
    """Raw export rows using the league's display-style keys."""
    records: list[dict[str, Any]] = []
    for game_id, (season, week, team, score, opponent, opp_score) in enumerate(_SCHEDULE, start=1):
        for side, other, s, o in ((team, opponent, score, opp_score), (opponent, team, opp_score, score)):
            records.append(
                {
                    "Season": str(season),
                    "Week": str(week),
                    "Season Period": "Regular Season",
                    "Team": side,
                    "Opponent": other,
                    "Team Score": "" if s is None else f'"{s}"',
                    "Opponent Score": "" if o is None else o,
                    "Score Diff": "" if s is None or o is None else round(s - o, 2),
                    "Game ID": game_id,
                }
            )
    return records


@pytest.fixture
def league_files(temp_data_dir: Path, raw_game_records: list[dict[str, Any]]) -> dict[str, Path]:
    """The sample league written out as the three JSON files the CLI reads."""
    games = temp_data_dir / "league_data.json"
    games.write_text(json.dumps(raw_game_records))
    divisions = temp_data_dir / "divisions.json"
    divisions.write_text(json.dumps({str(season): divs for season, divs in DIVISIONS.items()}))
    odds = temp_data_dir / "playoff_chances_by_record.json"
    odds.write_text(
        json.dumps(
            {
                "records": [
                    {"win_count": 2, "loss_count": 1, "playoff_percentage": 71.4},
                    {"win_count": 1, "loss_count": 2, "playoff_percentage": 38.2},
                ]
            }
        )
    )
    return {"games": games, "divisions": divisions, "odds": odds}
