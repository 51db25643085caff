"""Win/loss and score-threshold streaks.

All streak functions read the long-format frame from
:func:`ffl_standings.standings.frame.build_game_frame` and rely on its
chronological ``(season, week, game_id)`` order.  Streaks run across season
boundaries: a team that closed 2022 on three wins and opened 2023 with a
win is on a four-game winning streak.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import pandas as pd  # type: ignore[import-untyped]

from ffl_standings.standings.frame import CHRONOLOGICAL_ORDER, through

logger = logging.getLogger(__name__)

StreakKind = Literal["W", "L"]


@dataclass(frozen=True)
class Streak:
    """A current run of consecutive results.  ``length == 0`` means none."""

    length: int = 0
    kind: StreakKind | None = None

    @classmethod
    def from_signed(cls, value: int) -> Streak:
        """Build from a signed streak (``+N`` wins, ``-N`` losses, ``0`` none)."""
        if value > 0:
            return cls(length=int(value), kind="W")
        if value < 0:
            return cls(length=int(-value), kind="L")
        return NO_STREAK

    @property
    def signed(self) -> int:
        if self.kind is None:
            return 0
        return self.length if self.kind == "W" else -self.length

    @property
    def display(self) -> str:
        """``"3W"``, ``"2L"`` or ``"None"``."""
        if self.kind is None or self.length == 0:
            return "None"
        return f"{self.length}{self.kind}"


NO_STREAK = Streak()


@dataclass(frozen=True)
class LongestStreaks:
    """Longest runs in a team's full game history."""

    win: int = 0
    loss: int = 0
    high_score: int = 0
    low_score: int = 0


# ---------------------------------------------------------------------------
# Vectorized core
# ---------------------------------------------------------------------------


def signed_streaks(flags: pd.Series, by: pd.Series | None = None) -> pd.Series:
    """Compute the signed run length at every position of *flags*.

    Returns +N where *flags* has been ``True`` for N consecutive rows and -N
    where it has been ``False`` for N rows.  Vectorized using cumsum-based
    grouping; no iterrows.

    Args:
        flags: Boolean Series in chronological order.
        by: Optional group labels aligned with *flags* (e.g. team names); a
            change of label also breaks the run.

    Returns:
        Integer Series named ``"streak"``.
    """
    if flags.empty:
        return pd.Series([], dtype=int, name="streak")

    # Force group break at position 0 by filling NaN shift with the opposite
    change = flags != flags.shift(fill_value=not bool(flags.iloc[0]))
    if by is not None:
        change |= by != by.shift(fill_value=object())
    run_len = flags.groupby(change.cumsum()).cumcount() + 1
    return run_len.where(flags, -run_len).rename("streak")


def _longest_true_run(flags: pd.Series) -> int:
    if flags.empty:
        return 0
    return max(int(signed_streaks(flags).max()), 0)


def _team_games(frame: pd.DataFrame, team: str) -> pd.DataFrame:
    return frame[frame["team"] == team].sort_values(CHRONOLOGICAL_ORDER, kind="stable", na_position="last")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def current_streak(frame: pd.DataFrame, team: str, season: int, week: int) -> Streak:
    """Return *team*'s streak going into the end of *season* week *week*.

    Every valid game in earlier seasons and in *season* through *week*
    counts, so week ``0`` reports the streak a team carried out of the
    previous season.

    Examples:
        A team that lost its last two 2022 games and won its 2023 opener has
        ``Streak(length=1, kind="W")`` as of 2023 week 1.
    """
    history = _team_games(through(frame, season, week), team)
    if history.empty:
        return NO_STREAK
    return Streak.from_signed(int(signed_streaks(history["won"]).iloc[-1]))


def current_streaks(frame: pd.DataFrame, season: int, week: int | None) -> dict[str, Streak]:
    """:func:`current_streak` for every team with history, in one pass."""
    history = through(frame, season, week)
    if history.empty:
        return {}
    history = history.sort_values(["team", *CHRONOLOGICAL_ORDER], kind="stable", na_position="last")
    streak = signed_streaks(history["won"], by=history["team"])
    last = streak.groupby(history["team"]).last()
    return {str(team): Streak.from_signed(int(value)) for team, value in last.items()}


def week_streak(frame: pd.DataFrame, team: str, week: int) -> Streak:
    """Streak of *team*'s results in week number *week* taken across seasons.

    Used by the single-week All-Time view: "won week 3 in each of the last
    four seasons" is a 4W streak.
    """
    games = _team_games(frame[frame["week"] == week], team)
    if games.empty:
        return NO_STREAK
    return Streak.from_signed(int(signed_streaks(games["won"]).iloc[-1]))


def longest_streaks(
    frame: pd.DataFrame,
    team: str,
    *,
    high_score_threshold: float = 150.0,
    low_score_threshold: float = 100.0,
) -> LongestStreaks:
    """Longest win, loss, high-score and low-score runs in *team*'s history.

    Args:
        frame: Full game frame (all seasons).
        team: Team name.
        high_score_threshold: A game at or above this score extends the
            high-score run.
        low_score_threshold: A game strictly below this score extends the
            low-score run.
    """
    games = _team_games(frame, team)
    if games.empty:
        return LongestStreaks()
    won = games["won"]
    return LongestStreaks(
        win=_longest_true_run(won),
        loss=_longest_true_run(~won),
        high_score=_longest_true_run(games["score"] >= high_score_threshold),
        low_score=_longest_true_run(games["score"] < low_score_threshold),
    )


def longest_streak_table(
    frame: pd.DataFrame,
    *,
    high_score_threshold: float = 150.0,
    low_score_threshold: float = 100.0,
) -> pd.DataFrame:
    """Return :func:`longest_streaks` for every team as a DataFrame.

    Columns: ``team``, ``win``, ``loss``, ``high_score``, ``low_score``;
    sorted by team name.
    """
    rows = []
    for team in sorted(frame["team"].unique()):
        streaks = longest_streaks(
            frame,
            str(team),
            high_score_threshold=high_score_threshold,
            low_score_threshold=low_score_threshold,
        )
        rows.append(
            {
                "team": str(team),
                "win": streaks.win,
                "loss": streaks.loss,
                "high_score": streaks.high_score,
                "low_score": streaks.low_score,
            }
        )
    logger.debug("Computed longest streaks for %d teams", len(rows))
    return pd.DataFrame(rows, columns=["team", "win", "loss", "high_score", "low_score"])
