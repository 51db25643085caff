"""Historical playoff-odds lookup by win-loss record.

The league publishes ``playoff_chances_by_record.json``::

    {"records": [
        {"win_count": 9, "loss_count": 5, "playoff_percentage": 78.6},
        ...
    ]}

A team's playoff percentage is simply the historical share of teams with
the same record that made the playoffs.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ffl_standings.errors import DataUnavailableError

logger = logging.getLogger(__name__)

# Upper bounds (inclusive) of each display band, in ascending order.
_BANDS: tuple[tuple[float, str], ...] = (
    (20.0, "very-low"),
    (40.0, "low"),
    (50.0, "medium-low"),
    (60.0, "medium"),
    (80.0, "good"),
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class PlayoffOddsTable:
    """Lookup of playoff-qualification percentage by ``(wins, losses)``.

    Args:
        odds: Mapping of ``(wins, losses) -> percentage`` (0-100).
    """

    def __init__(self, odds: Mapping[tuple[int, int], float] | None = None) -> None:
        self._odds: dict[tuple[int, int], float] = dict(odds or {})

    def __len__(self) -> int:
        return len(self._odds)

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> PlayoffOddsTable:
        """Build from ``win_count`` / ``loss_count`` / ``playoff_percentage`` dicts.

        Entries missing a field or with non-numeric values are skipped.
        """
        odds: dict[tuple[int, int], float] = {}
        for entry in records:
            try:
                key = (int(entry["win_count"]), int(entry["loss_count"]))
                odds.setdefault(key, float(entry["playoff_percentage"]))
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping malformed odds entry %r", entry)
        return cls(odds)

    @classmethod
    def from_json(cls, path: Path) -> PlayoffOddsTable:
        """Load ``playoff_chances_by_record.json``.

        Raises:
            DataUnavailableError: If the file cannot be read or lacks a
                ``"records"`` list.
        """
        try:
            payload: Any = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            msg = f"Cannot load playoff odds {path}: {exc}"
            raise DataUnavailableError(msg) from exc
        records = payload.get("records") if isinstance(payload, dict) else None
        if not isinstance(records, list):
            msg = f"Playoff odds {path} must contain a 'records' list"
            raise DataUnavailableError(msg)
        table = cls.from_records([r for r in records if isinstance(r, dict)])
        logger.info("Loaded %d playoff-odds records from %s", len(table), path)
        return table

    def lookup(self, wins: float, losses: float) -> float | None:
        """Return the playoff percentage for a record, or ``None``.

        A ``0-0`` record has no meaningful odds and always returns ``None``,
        even when the table carries an entry for it.  Fractional (projected)
        records are rounded to the nearest whole record first.

        Examples:
            >>> table = PlayoffOddsTable({(0, 0): 50.0, (9, 5): 78.6})
            >>> table.lookup(9, 5)
            78.6
            >>> table.lookup(0, 0) is None
            True
        """
        key = (_round_half_up(wins), _round_half_up(losses))
        if key == (0, 0):
            return None
        return self._odds.get(key)


def band(percentage: float | None) -> str:
    """Return the display band of a playoff percentage (``""`` if missing).

    Examples:
        >>> band(20.0)
        'very-low'
        >>> band(95.0)
        'excellent'
    """
    if percentage is None or math.isnan(percentage):
        return ""
    for upper, name in _BANDS:
        if percentage <= upper:
            return name
    return "excellent"
