"""Engine configuration: playoff formats by season plus numeric thresholds.

Settings are pydantic models so a JSON override file is validated the same
way as the built-in defaults::

    {
        "playoff_formats": {
            "2026": {"regular_season_weeks": 14, "playoff_slots": 4}
        },
        "projection_trials": 2000
    }

Formats in an override file are merged over the defaults, so a file only
has to name the seasons it adds or changes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ffl_standings.errors import DataUnavailableError


class PlayoffFormat(BaseModel):
    """Playoff structure of one season.

    Exactly one slot rule applies: ``playoff_slots`` counts teams per
    division, or teams league-wide when ``is_overall_bracket`` is set.
    """

    model_config = ConfigDict(frozen=True)

    regular_season_weeks: int = Field(..., ge=1)
    playoff_slots: int = Field(..., ge=1)
    is_overall_bracket: bool = False


def _default_formats() -> dict[int, PlayoffFormat]:
    return {
        2019: PlayoffFormat(regular_season_weeks=13, playoff_slots=4),
        2020: PlayoffFormat(regular_season_weeks=13, playoff_slots=2),
        2021: PlayoffFormat(regular_season_weeks=14, playoff_slots=8, is_overall_bracket=True),
        2022: PlayoffFormat(regular_season_weeks=14, playoff_slots=2),
        2023: PlayoffFormat(regular_season_weeks=14, playoff_slots=4),
        2024: PlayoffFormat(regular_season_weeks=14, playoff_slots=4),
        2025: PlayoffFormat(regular_season_weeks=14, playoff_slots=4),
    }


class StandingsSettings(BaseModel):
    """Tunable parameters shared by every standings computation.

    Attributes:
        playoff_formats: Season year -> :class:`PlayoffFormat`.  Seasons
            missing here get no magic/elimination numbers.
        default_regular_season_weeks: Season length assumed by projections
            for seasons without a configured format.
        win_pct_tolerance: Win percentages closer than this are tied and
            fall through to the point-differential tie-break.
        projection_trials: Monte-Carlo trials per projection.
        high_score_threshold: Inclusive floor of a "150+" game.
        low_score_threshold: Exclusive ceiling of an "under 100" game.
        club_200_threshold: Inclusive floor of a 200-club game.
        default_sort_key: Sort key used when a scope does not name one.
        default_sort_direction: ``"desc"`` or ``"asc"``.
    """

    model_config = ConfigDict(frozen=True)

    playoff_formats: dict[int, PlayoffFormat] = Field(default_factory=_default_formats)
    default_regular_season_weeks: int = Field(default=14, ge=1)
    win_pct_tolerance: float = Field(default=0.001, gt=0.0)
    projection_trials: int = Field(default=1000, ge=1)
    high_score_threshold: float = 150.0
    low_score_threshold: float = 100.0
    club_200_threshold: float = 200.0
    default_sort_key: str = "win_pct"
    default_sort_direction: Literal["asc", "desc"] = "desc"

    def playoff_format(self, season: int) -> PlayoffFormat | None:
        """Return the configured format for *season*, or ``None`` if unknown."""
        return self.playoff_formats.get(season)

    def regular_season_weeks(self, season: int) -> int:
        """Regular-season length for *season*, falling back to the default."""
        fmt = self.playoff_format(season)
        return fmt.regular_season_weeks if fmt is not None else self.default_regular_season_weeks


def load_settings(path: Path | None = None) -> StandingsSettings:
    """Build settings from defaults, optionally overridden by a JSON file.

    Args:
        path: JSON override file.  ``None`` returns the defaults.

    Returns:
        Validated :class:`StandingsSettings`.

    Raises:
        DataUnavailableError: If the file is missing, is not JSON, or fails
            validation.
    """
    if path is None:
        return StandingsSettings()
    try:
        raw: dict[str, Any] = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Cannot read settings file {path}: {exc}"
        raise DataUnavailableError(msg) from exc

    formats = dict(_default_formats())
    for season, fmt in raw.pop("playoff_formats", {}).items():
        try:
            formats[int(season)] = PlayoffFormat.model_validate(fmt)
        except (ValueError, ValidationError) as exc:
            msg = f"Invalid playoff format for season {season!r} in {path}: {exc}"
            raise DataUnavailableError(msg) from exc
    try:
        return StandingsSettings(playoff_formats=formats, **raw)
    except ValidationError as exc:
        msg = f"Invalid settings in {path}: {exc}"
        raise DataUnavailableError(msg) from exc
