"""Unit tests for the pandera-backed frame assertions."""

from __future__ import annotations

import pandas as pd  # type: ignore[import-untyped]
import pytest
from pandera.errors import SchemaError

from ffl_standings.utils.assertions import (
    assert_columns,
    assert_game_frame,
    assert_standings_frame,
)


def _game_frame(**overrides: object) -> pd.DataFrame:
    data: dict[str, object] = {
        "season": [2023, 2023],
        "week": [1, 1],
        "team": ["Alpha", "Bravo"],
        "opponent": ["Bravo", "Alpha"],
        "score": [120.5, 101.0],
        "opp_score": [101.0, 120.5],
        "diff": [19.5, -19.5],
        "won": [True, False],
    }
    data.update(overrides)
    return pd.DataFrame(data)


def _standings_frame(**overrides: object) -> pd.DataFrame:
    data: dict[str, object] = {
        "division": ["East", "East"],
        "rank": [1, 2],
        "team": ["Alpha", "Bravo"],
        "games": [3, 3],
        "win_pct": [0.667, 0.333],
        "playoff_pct": [71.0, float("nan")],
    }
    data.update(overrides)
    return pd.DataFrame(data)


@pytest.mark.smoke
@pytest.mark.unit
class TestAssertColumns:
    def test_present_columns_pass(self) -> None:
        assert_columns(pd.DataFrame({"Team": ["A"], "Season": [2023]}), ["Team", "Season"])

    def test_extra_columns_allowed(self) -> None:
        assert_columns(pd.DataFrame({"Team": ["A"], "Extra": [0]}), ["Team"])

    def test_missing_column_raises(self) -> None:
        with pytest.raises(SchemaError, match="Score"):
            assert_columns(pd.DataFrame({"Team": ["A"]}), ["Team", "Score"])

    def test_no_required_columns_is_a_no_op(self) -> None:
        assert_columns(pd.DataFrame(), [])


@pytest.mark.smoke
@pytest.mark.unit
class TestAssertGameFrame:
    def test_valid_frame_passes(self) -> None:
        assert_game_frame(_game_frame())

    def test_negative_week_rejected(self) -> None:
        with pytest.raises(SchemaError):
            assert_game_frame(_game_frame(week=[-1, 1]))

    def test_null_score_rejected(self) -> None:
        with pytest.raises(SchemaError):
            assert_game_frame(_game_frame(score=[120.5, None]))

    def test_missing_won_column_rejected(self) -> None:
        with pytest.raises(SchemaError):
            assert_game_frame(_game_frame().drop(columns=["won"]))


@pytest.mark.smoke
@pytest.mark.unit
class TestAssertStandingsFrame:
    def test_valid_frame_with_missing_odds_passes(self) -> None:
        assert_standings_frame(_standings_frame())

    def test_win_pct_above_one_rejected(self) -> None:
        with pytest.raises(SchemaError):
            assert_standings_frame(_standings_frame(win_pct=[1.2, 0.0]))

    def test_zero_rank_rejected(self) -> None:
        with pytest.raises(SchemaError):
            assert_standings_frame(_standings_frame(rank=[0, 1]))

    def test_empty_frame_only_needs_columns(self) -> None:
        assert_standings_frame(_standings_frame().iloc[0:0])
        with pytest.raises(SchemaError):
            assert_standings_frame(pd.DataFrame())
