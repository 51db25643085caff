"""DataFrame validation helpers backed by Pandera.

Guards the two frame shapes the engine exchanges with the outside world:
the long-format *game frame* built from a game log, and the *standings
frame* exported from a :class:`~ffl_standings.standings.rows.StandingsTable`.

All helpers propagate ``pandera.errors.SchemaError`` on failure.

Usage:
    >>> import pandas as pd
    >>> from ffl_standings.utils.assertions import assert_columns
    >>> df = pd.DataFrame({"Team": ["A"], "Season": [2023]})
    >>> assert_columns(df, ["Team", "Season"])
"""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd  # type: ignore[import-untyped]
import pandera.pandas as pa

_GAME_FRAME_SCHEMA = pa.DataFrameSchema(
    {
        "season": pa.Column(int),
        "week": pa.Column(int, checks=pa.Check.ge(0)),
        "team": pa.Column(str),
        "opponent": pa.Column(str),
        "score": pa.Column(float),
        "opp_score": pa.Column(float),
        "diff": pa.Column(float),
        "won": pa.Column(bool),
    },
    strict=False,
)

_STANDINGS_FRAME_SCHEMA = pa.DataFrameSchema(
    {
        "division": pa.Column(str),
        "rank": pa.Column(int, checks=pa.Check.ge(1)),
        "team": pa.Column(str),
        "games": pa.Column(checks=pa.Check.ge(0)),
        "win_pct": pa.Column(float, checks=[pa.Check.ge(0.0), pa.Check.le(1.0)]),
        "playoff_pct": pa.Column(float, nullable=True, coerce=True),
    },
    strict=False,
)


def assert_columns(df: pd.DataFrame, required: Sequence[str]) -> None:
    """Validate that all *required* columns exist in *df*.

    Raises:
        pa.errors.SchemaError: If any required column is missing.
    """
    if not required:
        return
    pa.DataFrameSchema(
        {col: pa.Column() for col in required},
        strict=False,
    ).validate(df)


def assert_game_frame(df: pd.DataFrame) -> None:
    """Validate a long-format game frame (one row per valid team-game).

    Checks column presence and dtypes, and that no score field is null:
    the frame builder drops unplayed and malformed games before this point.

    Raises:
        pa.errors.SchemaError: On a missing column, wrong dtype, or null.
    """
    _GAME_FRAME_SCHEMA.validate(df)


def assert_standings_frame(df: pd.DataFrame) -> None:
    """Validate an exported standings frame.

    ``win_pct`` must lie in ``[0, 1]`` and ``rank`` is 1-based.

    Raises:
        pa.errors.SchemaError: If a bound or column is violated.
    """
    if df.empty:
        assert_columns(df, list(_STANDINGS_FRAME_SCHEMA.columns))
        return
    _STANDINGS_FRAME_SCHEMA.validate(df)
