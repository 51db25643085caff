"""Game log stores.

Defines the abstract :class:`GameLogStore` port the standings engine reads
from, and three implementations:

* :class:`InMemoryGameLogStore`: wraps an already-normalized list.
* :class:`JsonGameLogStore`: the league's flat JSON export.
* :class:`ParquetGameLogStore`: a season-partitioned Parquet copy.

Stores are read-only from the engine's point of view; the file-backed ones
load lazily on first access and keep the parsed games for their lifetime.
"""

from __future__ import annotations

import abc
import json
import logging
from pathlib import Path
from typing import Any

import pyarrow as pa  # type: ignore[import-untyped]
import pyarrow.dataset as ds  # type: ignore[import-untyped]
import pyarrow.parquet as pq  # type: ignore[import-untyped]
from pandera.errors import SchemaError

from ffl_standings.errors import DataUnavailableError
from ffl_standings.ingest.normalization import normalize_records
from ffl_standings.ingest.schema import BYE, Game
from ffl_standings.utils.assertions import assert_columns

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Abstract store
# ---------------------------------------------------------------------------


class GameLogStore(abc.ABC):
    """Read-only access to the league's game log."""

    @abc.abstractmethod
    def all_games(self) -> list[Game]:
        """Return every game record, played or not, in log order."""

    def games_for(self, season: int | None = None, week: int | None = None) -> list[Game]:
        """Return games filtered by *season* and, within it, weeks ``<= week``.

        ``games_for()`` is the whole log, ``games_for(2023)`` one season and
        ``games_for(2023, 5)`` that season through week 5 inclusive.

        Raises:
            ValueError: If *week* is given without *season*.
        """
        if week is not None and season is None:
            msg = "A week cutoff requires a season"
            raise ValueError(msg)
        games = self.all_games()
        if season is not None:
            games = [g for g in games if g.season == season]
        if week is not None:
            games = [g for g in games if g.week <= week]
        return games

    def seasons(self) -> list[int]:
        """Return all seasons present in the log, ascending."""
        return sorted({g.season for g in self.all_games()})

    def weeks_for(self, season: int) -> list[int]:
        """Return the weeks present in *season*, ascending."""
        return sorted({g.week for g in self.all_games() if g.season == season})

    def teams(self, season: int | None = None) -> list[str]:
        """Return the sorted team names (byes excluded), optionally for one season."""
        names: set[str] = set()
        for g in self.all_games():
            if season is not None and g.season != season:
                continue
            names.update(n for n in (g.team, g.opponent) if n != BYE)
        return sorted(names)

    def latest_played(self) -> tuple[int, int] | None:
        """Return ``(season, week)`` of the most recent played game.

        Recency is by ``game_id`` (larger is newer), falling back to
        ``(season, week)`` for records without one.  ``None`` when nothing
        has been played yet.
        """
        played = [g for g in self.all_games() if g.is_played()]
        if not played:
            return None
        latest = max(played, key=lambda g: (g.game_id if g.game_id is not None else -1, g.season, g.week))
        return latest.season, latest.week


class InMemoryGameLogStore(GameLogStore):
    """Store over an in-memory list of canonical games."""

    def __init__(self, games: list[Game]) -> None:
        self._games = list(games)

    def all_games(self) -> list[Game]:
        return list(self._games)


# ---------------------------------------------------------------------------
# JSON store
# ---------------------------------------------------------------------------


class JsonGameLogStore(GameLogStore):
    """Store backed by the league's flat JSON export.

    The file holds a list of raw records (or an object with a ``"games"``
    list).  Key spellings are normalized on load.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._games: list[Game] | None = None

    def all_games(self) -> list[Game]:
        if self._games is None:
            self._games = self._load()
        return list(self._games)

    def _load(self) -> list[Game]:
        try:
            payload: Any = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            msg = f"Cannot load game log {self._path}: {exc}"
            raise DataUnavailableError(msg) from exc

        if isinstance(payload, dict):
            payload = payload.get("games")
        if not isinstance(payload, list):
            msg = f"Game log {self._path} must contain a list of game records"
            raise DataUnavailableError(msg)

        games = normalize_records(r for r in payload if isinstance(r, dict))
        logger.info("Loaded %d game records from %s", len(games), self._path)
        return games


# ---------------------------------------------------------------------------
# Parquet store
# ---------------------------------------------------------------------------

_GAME_SCHEMA = pa.schema([
    ("season", pa.int64()),
    ("week", pa.int64()),
    ("league_week", pa.int64()),
    ("season_period", pa.string()),
    ("team", pa.string()),
    ("opponent", pa.string()),
    ("team_score", pa.float64()),
    ("opponent_score", pa.float64()),
    ("score_diff", pa.float64()),
    ("bench_score", pa.float64()),
    ("opponent_bench_score", pa.float64()),
    ("bench_score_diff", pa.float64()),
    ("game_id", pa.int64()),
])

_REQUIRED_COLUMNS: tuple[str, ...] = ("season", "week", "team", "opponent")


class ParquetGameLogStore(GameLogStore):
    """Store backed by season-partitioned Parquet files.

    Directory layout::

        {base_path}/
            games/
                season={year}/
                    data.parquet
    """

    def __init__(self, base_path: Path) -> None:
        self._base_path = base_path
        self._games: list[Game] | None = None

    def all_games(self) -> list[Game]:
        if self._games is None:
            self._games = self._load()
        return list(self._games)

    def _load(self) -> list[Game]:
        games_dir = self._base_path / "games"
        if not games_dir.exists():
            msg = f"No Parquet game log under {self._base_path}"
            raise DataUnavailableError(msg)

        dataset = ds.dataset(
            games_dir,
            format="parquet",
            partitioning=ds.partitioning(pa.schema([("season", pa.int64())]), flavor="hive"),
        )
        df = dataset.to_table().to_pandas()
        try:
            assert_columns(df, _REQUIRED_COLUMNS)
        except SchemaError as exc:
            msg = f"Parquet game log under {self._base_path} is missing columns: {exc}"
            raise DataUnavailableError(msg) from exc

        # pyarrow hands back NaN for null floats and pandas NA for null ints;
        # both must reach the schema as None.
        df = df.astype(object).where(df.notna(), None)
        games = [Game(**row) for row in df.to_dict(orient="records")]
        logger.info("Loaded %d game records from %s", len(games), games_dir)
        return games

    def save_games(self, games: list[Game]) -> None:
        """Persist *games*, overwriting each season partition they touch."""
        if not games:
            return

        by_season: dict[int, list[Game]] = {}
        for g in games:
            by_season.setdefault(g.season, []).append(g)

        write_schema = pa.schema([f for f in _GAME_SCHEMA if f.name != "season"])
        for season, season_games in by_season.items():
            partition_dir = self._base_path / "games" / f"season={season}"
            partition_dir.mkdir(parents=True, exist_ok=True)
            data = {field.name: [getattr(g, field.name) for g in season_games] for field in write_schema}
            table = pa.Table.from_pydict(data, schema=write_schema)
            pq.write_table(table, partition_dir / "data.parquet")
        self._games = None

