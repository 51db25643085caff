"""Game log ingestion: canonical schema, normalization, and stores."""

from __future__ import annotations

from ffl_standings.ingest.normalization import canonical_key, normalize_record, normalize_records
from ffl_standings.ingest.registry import DivisionRegistry
from ffl_standings.ingest.repository import (
    GameLogStore,
    InMemoryGameLogStore,
    JsonGameLogStore,
    ParquetGameLogStore,
)
from ffl_standings.ingest.schema import BYE, Game, ScoreMode

__all__ = [
    "BYE",
    "DivisionRegistry",
    "Game",
    "GameLogStore",
    "InMemoryGameLogStore",
    "JsonGameLogStore",
    "ParquetGameLogStore",
    "ScoreMode",
    "canonical_key",
    "normalize_record",
    "normalize_records",
]
