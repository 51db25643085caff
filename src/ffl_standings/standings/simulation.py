"""Vectorized Monte-Carlo season simulator.

Completed games are fixed.  Every unplayed regular-season matchup is
simulated by drawing each side's score from a normal distribution fitted to
that team's completed games in the season; teams with fewer than two
completed games use the league-wide distribution instead.

All trials run at once: scores are drawn as a ``(trials, matchups)`` array
and folded into per-team totals with one matrix product per side, so there
is no per-trial Python loop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from ffl_standings.config import StandingsSettings
from ffl_standings.errors import ProjectionUnavailableError
from ffl_standings.ingest.registry import DivisionRegistry
from ffl_standings.ingest.repository import GameLogStore
from ffl_standings.ingest.schema import Game
from ffl_standings.standings.divisions import UNKNOWN_DIVISION
from ffl_standings.standings.projection import PerTeamProjection

logger = logging.getLogger(__name__)

#: Minimum completed games before a team's own score distribution is used.
MIN_GAMES_FOR_TEAM_FIT: int = 2

#: Best/worst case percentiles of simulated wins.
_BEST_PERCENTILE: float = 95.0
_WORST_PERCENTILE: float = 5.0


@dataclass(frozen=True)
class SeasonSnapshot:
    """Season state the simulator starts from.

    Attributes:
        teams: Team names, sorted; array positions follow this order.
        wins: Completed wins per team, shape ``(n_teams,)``.
        points_for: Completed points scored per team.
        points_against: Completed points allowed per team.
        games: Completed plus scheduled regular-season games per team.
        score_mean: Score distribution mean per team.
        score_std: Score distribution standard deviation per team.
        home: Team index of one side of each unplayed matchup.
        away: Team index of the other side.
    """

    teams: tuple[str, ...]
    wins: npt.NDArray[np.float64]
    points_for: npt.NDArray[np.float64]
    points_against: npt.NDArray[np.float64]
    games: npt.NDArray[np.int64]
    score_mean: npt.NDArray[np.float64]
    score_std: npt.NDArray[np.float64]
    home: npt.NDArray[np.intp]
    away: npt.NDArray[np.intp]


def build_snapshot(games: list[Game], regular_season_weeks: int) -> SeasonSnapshot:
    """Split a season's regular-season games into fixed results and open matchups.

    Raises:
        ProjectionUnavailableError: If the season has no regular-season
            games or no completed game to fit a score distribution to.
    """
    regular = [g for g in games if not g.is_bye and g.week <= regular_season_weeks]
    if not regular:
        msg = "No regular-season games to simulate"
        raise ProjectionUnavailableError(msg)

    teams = tuple(sorted({g.team for g in regular} | {g.opponent for g in regular}))
    index = {team: i for i, team in enumerate(teams)}
    n = len(teams)

    wins = np.zeros(n, dtype=np.float64)
    points_for = np.zeros(n, dtype=np.float64)
    points_against = np.zeros(n, dtype=np.float64)
    games_count = np.zeros(n, dtype=np.int64)
    scores: list[list[float]] = [[] for _ in teams]
    open_matchups: set[tuple[int, str, str]] = set()

    for g in regular:
        i = index[g.team]
        triple = g.scores("starters")
        if triple is None:
            first, second = sorted((g.team, g.opponent))
            open_matchups.add((g.week, first, second))
            continue
        score, opp_score, diff = triple
        if diff > 0:
            wins[i] += 1
        points_for[i] += score
        points_against[i] += opp_score
        games_count[i] += 1
        scores[i].append(score)

    all_scores = [s for team_scores in scores for s in team_scores]
    if not all_scores:
        msg = "No completed games to fit score distributions to"
        raise ProjectionUnavailableError(msg)
    league_mean = float(np.mean(all_scores))
    league_std = float(np.std(all_scores))

    score_mean = np.full(n, league_mean)
    score_std = np.full(n, league_std)
    for i, team_scores in enumerate(scores):
        if len(team_scores) >= MIN_GAMES_FOR_TEAM_FIT:
            score_mean[i] = np.mean(team_scores)
            score_std[i] = np.std(team_scores, ddof=1)

    ordered = sorted(open_matchups)
    home = np.array([index[a] for _, a, _ in ordered], dtype=np.intp)
    away = np.array([index[b] for _, _, b in ordered], dtype=np.intp)
    games_count += np.bincount(home, minlength=n) + np.bincount(away, minlength=n)

    return SeasonSnapshot(
        teams=teams,
        wins=wins,
        points_for=points_for,
        points_against=points_against,
        games=games_count,
        score_mean=score_mean,
        score_std=score_std,
        home=home,
        away=away,
    )


def _places(keys: npt.NDArray[np.float64]) -> npt.NDArray[np.int64]:
    """1-based finishing place of each column per row (highest key = 1)."""
    order = np.argsort(-keys, axis=1, kind="stable")
    return np.argsort(order, axis=1, kind="stable") + 1  # type: ignore[no-any-return]


class MonteCarloProjectionEngine:
    """:class:`~ffl_standings.standings.projection.ProjectionEngine` backed by simulation.

    Args:
        store: Game log to read the season from.
        registry: Division membership, for finishing places and the
            per-division playoff cut.
        settings: Supplies season length and playoff format.
        seed: Seed for ``numpy.random.default_rng``; ``None`` is
            nondeterministic.
    """

    def __init__(
        self,
        store: GameLogStore,
        registry: DivisionRegistry,
        settings: StandingsSettings | None = None,
        seed: int | None = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._settings = settings or StandingsSettings()
        self._seed = seed

    def run_simulation(self, season: int, trials: int) -> list[PerTeamProjection]:
        """Simulate the remainder of *season* *trials* times.

        Returns:
            One :class:`PerTeamProjection` per team, sorted by team name.
            Probabilities are percentages rounded to one decimal.

        Raises:
            ProjectionUnavailableError: If the season cannot be simulated.
            ValueError: If ``trials < 1``.
        """
        if trials < 1:
            msg = f"trials must be >= 1, got {trials}"
            raise ValueError(msg)

        weeks = self._settings.regular_season_weeks(season)
        snapshot = build_snapshot(self._store.games_for(season), weeks)
        rng = np.random.default_rng(self._seed)
        n = len(snapshot.teams)

        # (trials, matchups) score draws for each side
        shape = (trials, len(snapshot.home))
        home, away = snapshot.home, snapshot.away
        home_scores = rng.normal(snapshot.score_mean[home], snapshot.score_std[home], size=shape)
        away_scores = rng.normal(snapshot.score_mean[away], snapshot.score_std[away], size=shape)

        # One-hot matchup -> team incidence, so totals are a matrix product
        home_onehot = np.zeros((len(snapshot.home), n))
        home_onehot[np.arange(len(snapshot.home)), snapshot.home] = 1.0
        away_onehot = np.zeros((len(snapshot.away), n))
        away_onehot[np.arange(len(snapshot.away)), snapshot.away] = 1.0

        wins = (
            snapshot.wins
            + (home_scores > away_scores).astype(np.float64) @ home_onehot
            + (away_scores > home_scores).astype(np.float64) @ away_onehot
        )
        points = snapshot.points_for + home_scores @ home_onehot + away_scores @ away_onehot
        points_against = snapshot.points_against + away_scores @ home_onehot + home_scores @ away_onehot

        # Wins first, season points as the tie-break
        keys = wins * 1e6 + points
        league_place = _places(keys)
        division_place = np.zeros_like(league_place)
        for members in self._division_members(season, snapshot.teams).values():
            division_place[:, members] = _places(keys[:, members])

        fmt = self._settings.playoff_format(season)
        if fmt is None:
            made_playoffs = None
        elif fmt.is_overall_bracket:
            made_playoffs = league_place <= fmt.playoff_slots
        else:
            made_playoffs = division_place <= fmt.playoff_slots

        best = np.percentile(wins, _BEST_PERCENTILE, axis=0)
        worst = np.percentile(wins, _WORST_PERCENTILE, axis=0)

        results = []
        for i, team in enumerate(snapshot.teams):
            total = int(snapshot.games[i])
            best_wins = int(round(best[i]))
            worst_wins = int(round(worst[i]))
            places, counts = np.unique(division_place[:, i], return_counts=True)
            results.append(
                PerTeamProjection(
                    team=team,
                    avg_wins=float(wins[:, i].mean()),
                    avg_points=float(points[:, i].mean()),
                    avg_points_against=float(points_against[:, i].mean()),
                    playoff_probability=(
                        None if made_playoffs is None else round(100.0 * float(made_playoffs[:, i].mean()), 1)
                    ),
                    championship_probability=round(100.0 * float((league_place[:, i] == 1).mean()), 1),
                    best_case=(best_wins, total - best_wins),
                    worst_case=(worst_wins, total - worst_wins),
                    finish_distribution={
                        int(p): round(100.0 * int(c) / trials, 1) for p, c in zip(places, counts, strict=True)
                    },
                )
            )
        logger.info(
            "Simulated %d open matchups for %d teams over %d trials (season %d)",
            len(snapshot.home),
            n,
            trials,
            season,
        )
        return results

    def _division_members(self, season: int, teams: tuple[str, ...]) -> dict[str, list[int]]:
        members: dict[str, list[int]] = {}
        for i, team in enumerate(teams):
            division = self._registry.division_of(team, season) or UNKNOWN_DIVISION
            members.setdefault(division, []).append(i)
        return members
