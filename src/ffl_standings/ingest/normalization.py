"""Map historical game-log key spellings onto the canonical :class:`Game`.

League exports have used several spellings for the same field over the
years (``"Team Score"``, ``"team_score"``, ``"teamScore"``...).  This module
is the single place that knows about them; everything downstream reads
:class:`~ffl_standings.ingest.schema.Game` attributes only.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from ffl_standings.ingest.schema import Game

logger = logging.getLogger(__name__)

# Canonical field name -> accepted spellings, checked in order.  Keys are
# compared after folding case and dropping spaces/underscores, so only
# genuinely different words need listing.
_FIELD_VARIANTS: dict[str, tuple[str, ...]] = {
    "season": ("Season", "year"),
    "week": ("Week",),
    "league_week": ("League Week",),
    "season_period": ("Season Period", "period"),
    "team": ("Team", "team_name", "owner"),
    "opponent": ("Opponent", "opponent_name", "opp"),
    "team_score": ("Team Score", "score", "points"),
    "opponent_score": ("Opponent Score", "opp_score", "opponent_points"),
    "score_diff": ("Score Diff", "diff", "margin"),
    "bench_score": ("Bench Score",),
    "opponent_bench_score": ("Opponent Bench Score", "opp_bench_score"),
    "bench_score_diff": ("Bench Score Diff", "bench_diff"),
    "game_id": ("Game ID", "id"),
}

_FOLD_RE = re.compile(r"[\s_\-]")


def _fold(key: str) -> str:
    return _FOLD_RE.sub("", key).lower()


_FOLDED_LOOKUP: dict[str, str] = {}
for _canonical, _variants in _FIELD_VARIANTS.items():
    for _name in (_canonical, *_variants):
        _FOLDED_LOOKUP.setdefault(_fold(_name), _canonical)


def canonical_key(key: str) -> str | None:
    """Return the canonical field name for a raw *key*, or ``None``.

    Examples:
        >>> canonical_key("Team Score")
        'team_score'
        >>> canonical_key("teamScore")
        'team_score'
        >>> canonical_key("Roster") is None
        True
    """
    return _FOLDED_LOOKUP.get(_fold(key))


def normalize_record(raw: Mapping[str, Any]) -> Game:
    """Convert one raw game-log mapping into a canonical :class:`Game`.

    Unknown keys are ignored.  When two raw keys map to the same canonical
    field the first non-blank one wins.

    Raises:
        pydantic.ValidationError: If the record lacks a usable season, week,
            team, or opponent.
    """
    fields: dict[str, Any] = {}
    for key, value in raw.items():
        canonical = canonical_key(str(key))
        if canonical is None:
            continue
        if canonical in fields and fields[canonical] not in (None, ""):
            continue
        fields[canonical] = value
    return Game.model_validate(fields)


def normalize_records(raw_records: Iterable[Mapping[str, Any]]) -> list[Game]:
    """Normalize a raw game log, dropping records that cannot be games.

    A record without a season, week, team, or opponent is not a game at all;
    it is skipped and counted at DEBUG level.  Records that merely lack
    scores are kept: they are scheduled but unplayed games.
    """
    games: list[Game] = []
    skipped = 0
    for raw in raw_records:
        try:
            games.append(normalize_record(raw))
        except ValidationError as exc:
            skipped += 1
            logger.debug("Skipping unusable game-log record %r: %s", raw, exc.errors()[0]["msg"])
    if skipped:
        logger.debug("Skipped %d unusable game-log records of %d", skipped, skipped + len(games))
    return games
