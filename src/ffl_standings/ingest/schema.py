"""Pydantic v2 schema for the canonical fantasy-football game record.

A game log row describes one side of one matchup: ``team`` vs ``opponent``
in a given season and week.  Every downstream component reads only this
model, whatever key spelling the upstream export used (see
:mod:`ffl_standings.ingest.normalization`).

Scores are optional.  ``None`` is the "not yet played" sentinel and is also
what an unparseable score becomes, so a malformed game is indistinguishable
from an unplayed one and is skipped the same way.
"""

from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ScoreMode = Literal["starters", "bench"]
"""Which scoring universe to aggregate: starting lineups or bench slots."""

BYE: str = "Bye"
"""Team/opponent placeholder for a bye week.  Never counted."""

_SCORE_FIELDS: tuple[str, ...] = (
    "team_score",
    "opponent_score",
    "score_diff",
    "bench_score",
    "opponent_bench_score",
    "bench_score_diff",
)


def parse_optional_float(value: Any) -> float | None:
    """Parse a score-like value, returning ``None`` when it is not a number.

    Quoted numeric strings (``'"12.5"'``) are accepted; blanks, ``None``,
    ``NaN`` and non-numeric text become ``None``.

    Examples:
        >>> parse_optional_float("150.2")
        150.2
        >>> parse_optional_float('"-3.4"')
        -3.4
        >>> parse_optional_float("") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).replace('"', "").replace("'", "").strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return None if math.isnan(number) else number


def parse_int(value: Any) -> int:
    """Parse a season/week value (``2023``, ``"2023"``, ``"5.0"``) to ``int``.

    Raises:
        ValueError: If the value has no integer interpretation.
    """
    if isinstance(value, bool):
        msg = f"Expected an integer, got {value!r}"
        raise ValueError(msg)
    if isinstance(value, int):
        return value
    number = parse_optional_float(value)
    if number is None or not number.is_integer():
        msg = f"Expected an integer, got {value!r}"
        raise ValueError(msg)
    return int(number)


class Game(BaseModel):
    """One side of a single fantasy matchup."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    season: int = Field(..., ge=1900, alias="Season")
    week: int = Field(..., ge=0, alias="Week")
    league_week: int | None = Field(default=None, alias="League Week")
    season_period: str = Field(default="Regular Season", alias="Season Period")
    team: str = Field(..., min_length=1, alias="Team")
    opponent: str = Field(..., min_length=1, alias="Opponent")
    team_score: float | None = Field(default=None, alias="Team Score")
    opponent_score: float | None = Field(default=None, alias="Opponent Score")
    score_diff: float | None = Field(default=None, alias="Score Diff")
    bench_score: float | None = Field(default=None, alias="Bench Score")
    opponent_bench_score: float | None = Field(default=None, alias="Opponent Bench Score")
    bench_score_diff: float | None = Field(default=None, alias="Bench Score Diff")
    game_id: int | None = Field(default=None, alias="Game ID")

    @field_validator("season", "week", mode="before")
    @classmethod
    def _coerce_int(cls, value: Any) -> int:
        return parse_int(value)

    @field_validator("league_week", "game_id", mode="before")
    @classmethod
    def _coerce_optional_int(cls, value: Any) -> int | None:
        number = parse_optional_float(value)
        return int(number) if number is not None else None

    @field_validator(*_SCORE_FIELDS, mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> float | None:
        return parse_optional_float(value)

    @field_validator("team", "opponent", "season_period", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @property
    def is_bye(self) -> bool:
        """``True`` when either side is the bye placeholder."""
        return self.team == BYE or self.opponent == BYE

    def scores(self, mode: ScoreMode = "starters") -> tuple[float, float, float] | None:
        """Return ``(score, opponent_score, diff)`` for *mode*, or ``None``.

        ``None`` means the game is unplayed or malformed in that mode and must
        be left out of every aggregate.
        """
        if mode == "bench":
            values = (self.bench_score, self.opponent_bench_score, self.bench_score_diff)
        else:
            values = (self.team_score, self.opponent_score, self.score_diff)
        if values[0] is None or values[1] is None or values[2] is None:
            return None
        return values[0], values[1], values[2]

    def is_played(self, mode: ScoreMode = "starters") -> bool:
        """``True`` for a non-bye game with all three scores present in *mode*."""
        return not self.is_bye and self.scores(mode) is not None
