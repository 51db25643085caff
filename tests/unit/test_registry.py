"""Unit tests for DivisionRegistry."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ffl_standings.errors import DataUnavailableError
from ffl_standings.ingest import DivisionRegistry


@pytest.mark.smoke
@pytest.mark.unit
class TestDivisionRegistry:
    def test_lookups(self, sample_registry: DivisionRegistry) -> None:
        assert sample_registry.seasons() == [2022, 2023]
        assert list(sample_registry.divisions_for(2023)) == ["East", "West"]
        assert sample_registry.division_of("Delta", 2023) == "West"

    def test_unknown_season_and_team(self, sample_registry: DivisionRegistry) -> None:
        assert sample_registry.divisions_for(1999) == {}
        assert sample_registry.division_of("Echo", 2023) is None
        assert sample_registry.division_of("Alpha", 1999) is None

    def test_divisions_for_returns_copy(self, sample_registry: DivisionRegistry) -> None:
        sample_registry.divisions_for(2023)["East"].append("Echo")
        assert sample_registry.divisions_for(2023)["East"] == ["Alpha", "Bravo"]


@pytest.mark.unit
class TestDivisionRegistryFromJson:
    def test_string_season_keys(self, temp_data_dir: Path) -> None:
        path = temp_data_dir / "divisions.json"
        path.write_text(
            json.dumps({"2024": {"North": ["A", "B"], "South": ["C"]}, "notes": "ignored", "2023": {}})
        )
        registry = DivisionRegistry.from_json(path)
        assert registry.seasons() == [2023, 2024]
        assert list(registry.divisions_for(2024)) == ["North", "South"]
        assert registry.division_of("C", 2024) == "South"

    def test_missing_file(self, temp_data_dir: Path) -> None:
        with pytest.raises(DataUnavailableError):
            DivisionRegistry.from_json(temp_data_dir / "absent.json")

    @pytest.mark.parametrize("payload", [["East"], {"2024": ["A", "B"]}])
    def test_bad_shape(self, temp_data_dir: Path, payload: object) -> None:
        path = temp_data_dir / "divisions.json"
        path.write_text(json.dumps(payload))
        with pytest.raises(DataUnavailableError):
            DivisionRegistry.from_json(path)
