"""Season-by-season division membership.

Wraps the league's ``divisions.json``::

    {
        "2023": {"East": ["Team A", "Team B"], "West": ["Team C", "Team D"]},
        "2024": {...}
    }

Division order within a season is preserved as written; the standings
display lists divisions in that order.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from ffl_standings.errors import DataUnavailableError
from ffl_standings.ingest.schema import parse_int

logger = logging.getLogger(__name__)


class DivisionRegistry:
    """Lookup of division membership by season.

    Args:
        divisions: Mapping of ``season -> {division name -> [team, ...]}``.
    """

    def __init__(self, divisions: Mapping[int, Mapping[str, Sequence[str]]]) -> None:
        self._divisions: dict[int, dict[str, list[str]]] = {
            int(season): {str(name): list(teams) for name, teams in season_divs.items()}
            for season, season_divs in divisions.items()
        }
        self._team_index: dict[tuple[int, str], str] = {}
        for season, season_divs in self._divisions.items():
            for name, teams in season_divs.items():
                for team in teams:
                    self._team_index.setdefault((season, team), name)

    @classmethod
    def from_json(cls, path: Path) -> DivisionRegistry:
        """Construct from a ``divisions.json`` file.

        Raises:
            DataUnavailableError: If the file cannot be read or parsed, or is
                not shaped as ``{season: {division: [teams]}}``.
        """
        try:
            payload: Any = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            msg = f"Cannot load division data {path}: {exc}"
            raise DataUnavailableError(msg) from exc
        if not isinstance(payload, dict):
            msg = f"Division data {path} must be an object keyed by season"
            raise DataUnavailableError(msg)

        divisions: dict[int, dict[str, list[str]]] = {}
        for season_key, season_divs in payload.items():
            try:
                season = parse_int(season_key)
            except ValueError:
                logger.debug("Ignoring non-season key %r in %s", season_key, path)
                continue
            if not isinstance(season_divs, dict):
                msg = f"Division data for season {season_key!r} in {path} must be an object"
                raise DataUnavailableError(msg)
            divisions[season] = {
                str(name): [str(t) for t in teams]
                for name, teams in season_divs.items()
                if isinstance(teams, list)
            }
        return cls(divisions)

    def seasons(self) -> list[int]:
        """Seasons with division data, ascending."""
        return sorted(self._divisions)

    def divisions_for(self, season: int) -> dict[str, list[str]]:
        """Return ``{division: [teams]}`` for *season* (empty if unknown)."""
        return {name: list(teams) for name, teams in self._divisions.get(season, {}).items()}

    def division_of(self, team: str, season: int) -> str | None:
        """Return *team*'s division in *season*, or ``None`` if unassigned."""
        return self._team_index.get((season, team))
