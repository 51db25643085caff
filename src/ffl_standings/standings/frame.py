"""Long-format game frame shared by the aggregation components.

Every standings computation starts by turning the game log into one
DataFrame row per *valid* team-game: non-bye, with all three score fields of
the active score mode present.  Unplayed and malformed games are dropped
here, once, so the aggregators never see them.

Columns: ``season``, ``week``, ``team``, ``opponent``, ``score``,
``opp_score``, ``diff``, ``won``, ``game_id``, ``season_period``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import pandas as pd  # type: ignore[import-untyped]

from ffl_standings.ingest.schema import Game, ScoreMode
from ffl_standings.standings.scope import QueryScope
from ffl_standings.utils.assertions import assert_game_frame

logger = logging.getLogger(__name__)

FRAME_COLUMNS: tuple[str, ...] = (
    "season",
    "week",
    "team",
    "opponent",
    "score",
    "opp_score",
    "diff",
    "won",
    "game_id",
    "season_period",
)

CHRONOLOGICAL_ORDER: list[str] = ["season", "week", "game_id"]


def _empty_frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "season": pd.Series(dtype="int64"),
            "week": pd.Series(dtype="int64"),
            "team": pd.Series(dtype=str),
            "opponent": pd.Series(dtype=str),
            "score": pd.Series(dtype="float64"),
            "opp_score": pd.Series(dtype="float64"),
            "diff": pd.Series(dtype="float64"),
            "won": pd.Series(dtype=bool),
            "game_id": pd.Series(dtype="float64"),
            "season_period": pd.Series(dtype=str),
        }
    )


def build_game_frame(games: Iterable[Game], score_mode: ScoreMode = "starters") -> pd.DataFrame:
    """Return the valid games of *games* in long format, chronologically sorted.

    A game counts as a win iff its score difference is strictly positive;
    the recorded difference is authoritative even when it disagrees with the
    two scores.

    Args:
        games: Canonical game records (any order).
        score_mode: Which score triple to read.

    Returns:
        DataFrame sorted by ``(season, week, game_id)``.  ``game_id`` is
        float so that missing IDs can be NaN; they sort last within a week.
    """
    records = []
    skipped = 0
    for g in games:
        if g.is_bye:
            continue
        triple = g.scores(score_mode)
        if triple is None:
            skipped += 1
            continue
        score, opp_score, diff = triple
        records.append(
            (
                g.season,
                g.week,
                g.team,
                g.opponent,
                score,
                opp_score,
                diff,
                diff > 0,
                float(g.game_id) if g.game_id is not None else float("nan"),
                g.season_period,
            )
        )
    if skipped:
        logger.debug("Left out %d unplayed or malformed %s games", skipped, score_mode)
    if not records:
        return _empty_frame()

    df = pd.DataFrame.from_records(records, columns=list(FRAME_COLUMNS))
    df = df.astype({"season": "int64", "week": "int64", "won": bool, "game_id": "float64"})
    df = df.sort_values(CHRONOLOGICAL_ORDER, kind="stable", na_position="last").reset_index(drop=True)
    assert_game_frame(df)
    return df


def select_scope(frame: pd.DataFrame, scope: QueryScope) -> pd.DataFrame:
    """Filter *frame* to the games a scope covers.

    * season + week: that season, weeks ``<= week`` (all weeks if ``None``).
    * all-time: every game.
    * week across seasons: that week number in every season.
    """
    if scope.season is None:
        if scope.week is None:
            return frame
        return frame[frame["week"] == scope.week]
    mask = frame["season"] == scope.season
    if scope.week is not None:
        mask &= frame["week"] <= scope.week
    return frame[mask]


def through(frame: pd.DataFrame, season: int, week: int | None) -> pd.DataFrame:
    """Games in seasons before *season*, plus *season* through *week*."""
    mask = frame["season"] < season
    if week is None:
        mask |= frame["season"] == season
    else:
        mask |= (frame["season"] == season) & (frame["week"] <= week)
    return frame[mask]
