"""Typer CLI application for ffl-standings."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ffl_standings.config import load_settings
from ffl_standings.errors import StandingsError
from ffl_standings.ingest import DivisionRegistry, GameLogStore, JsonGameLogStore, ParquetGameLogStore
from ffl_standings.standings import (
    MonteCarloProjectionEngine,
    PlayoffOddsTable,
    ProjectionAdapter,
    QueryScope,
    SortKey,
    StandingsEngine,
    StandingsTable,
    band,
)
from ffl_standings.utils.logger import configure_logging

app = typer.Typer(help="Fantasy-football standings and playoff-race CLI")
console = Console()

_BAND_STYLES: dict[str, str] = {
    "very-low": "red",
    "low": "red",
    "medium-low": "yellow",
    "medium": "yellow",
    "good": "green",
    "excellent": "bold green",
}


@app.callback()
def _callback(
    log_level: str | None = typer.Option(None, "--log-level", help="quiet, normal, verbose or debug"),
) -> None:
    """ffl-standings CLI: standings, playoff race and record book."""
    try:
        configure_logging(log_level)
    except ValueError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc


def _open_store(games: Path) -> GameLogStore:
    """JSON export for a file, season-partitioned Parquet for a directory."""
    if games.is_dir():
        return ParquetGameLogStore(games)
    return JsonGameLogStore(games)


def _parse_sort_key(sort: str) -> SortKey:
    try:
        return SortKey(sort)
    except ValueError:
        choices = ", ".join(k.value for k in SortKey)
        console.print(f"[red]Error: Unknown sort key {escape(repr(sort))}[/red]")
        console.print(f"Available sort keys: {choices}")
        raise typer.Exit(code=1) from None


def _render_table(table: StandingsTable) -> None:
    """Print one Rich table per division."""
    all_time = table.scope.is_all_time
    projected = any(row.is_projected for row in table.rows())
    if table.projection_failed:
        console.print("[yellow]Projection unavailable; showing current standings.[/yellow]")
    if len(table) == 0:
        console.print(f"[yellow]{table.title}: no games found.[/yellow]")
        return

    for division, rows in table:
        title = table.title if not division else f"{table.title}: {division}"
        out = Table(title=title)
        out.add_column("Rank", justify="right")
        out.add_column("Team", style="cyan", no_wrap=True)
        out.add_column("W-L", justify="right")
        out.add_column("Win %", justify="right")
        out.add_column("PF", justify="right")
        out.add_column("PA", justify="right")
        out.add_column("Diff", justify="right")
        out.add_column("Streak", justify="right")
        out.add_column("Overall" if all_time else "Playoff %", justify="right")
        if projected:
            out.add_column("Sim Playoff %", justify="right")
            out.add_column("Title %", justify="right")
        elif not all_time:
            out.add_column("Magic/Elim", justify="right")

        for row in rows:
            if all_time:
                third = row.overall_record
            else:
                style = _BAND_STYLES.get(band(row.playoff_pct), "")
                third = f"[{style}]{row.playoff_display}[/{style}]" if style else row.playoff_display
            cells = [
                str(row.rank),
                row.team,
                row.record_display,
                f"{row.win_pct:.3f}",
                f"{row.points_for:.1f}",
                f"{row.points_against:.1f}",
                f"{row.point_differential:+.1f}",
                row.streak_display,
                third,
            ]
            if projected:
                details = row.projection
                playoff = details.playoff_probability if details is not None else None
                title_odds = details.championship_probability if details is not None else None
                cells.append("--" if playoff is None else f"{playoff:.1f}%")
                cells.append("--" if title_odds is None else f"{title_odds:.1f}%")
            elif not all_time:
                cells.append(row.magic_elim)
            out.add_row(*cells)
        console.print(out)


@app.command()
def standings(  # noqa: PLR0913
    games: Path = typer.Option(..., "--games", help="Game log JSON file or Parquet directory"),
    divisions: Path = typer.Option(..., "--divisions", help="divisions.json"),
    odds: Path | None = typer.Option(None, "--odds", help="playoff_chances_by_record.json"),
    settings_path: Path | None = typer.Option(None, "--settings", help="JSON settings override"),
    season: str | None = typer.Option(None, "--season", help="Season year or 'All Time'"),
    week: str | None = typer.Option(None, "--week", help="Week number, 0 for pre-season, or 'All'"),
    bench: bool = typer.Option(False, "--bench", help="Use bench scores instead of starters"),
    sort: str | None = typer.Option(None, "--sort", help="Sort key (default: win_pct)"),
    ascending: bool = typer.Option(False, "--asc", help="Sort ascending"),
    project: bool = typer.Option(False, "--project", help="Project standings to season end"),
    trials: int | None = typer.Option(None, "--trials", help="Monte-Carlo trials for --project"),
    seed: int | None = typer.Option(None, "--seed", help="Random seed for --project"),
) -> None:
    """Render division standings for a season, week or the All-Time view."""
    try:
        settings = load_settings(settings_path)
        store = _open_store(games)
        registry = DivisionRegistry.from_json(divisions)
        odds_table = PlayoffOddsTable.from_json(odds) if odds is not None else None
    except StandingsError as exc:
        console.print(f"[red]Standings unavailable: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    simulator = MonteCarloProjectionEngine(store, registry, settings, seed=seed)
    projector = ProjectionAdapter(simulator, trials=trials or settings.projection_trials)
    engine = StandingsEngine(store, registry, odds_table, settings, projector)

    options: dict[str, object] = {
        "score_mode": "bench" if bench else "starters",
        "sort_key": _parse_sort_key(sort or settings.default_sort_key),
        "sort_direction": "asc" if ascending else settings.default_sort_direction,
        "project": project,
    }
    try:
        if season is None:
            # A bare --week refers to the most recent season, not the All-Time week view.
            latest = engine.latest_scope(**options)
            scope = latest if week is None else QueryScope.parse(latest.season, week, **options)
        else:
            scope = QueryScope.parse(season, week, **options)
        table = engine.compute(scope)
    except ValueError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc
    except StandingsError as exc:
        console.print(f"[red]Standings unavailable: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    _render_table(table)


@app.command()
def records(
    games: Path = typer.Option(..., "--games", help="Game log JSON file or Parquet directory"),
    settings_path: Path | None = typer.Option(None, "--settings", help="JSON settings override"),
    bench: bool = typer.Option(False, "--bench", help="Use bench scores instead of starters"),
) -> None:
    """Print each team's longest streaks across the full game history."""
    try:
        settings = load_settings(settings_path)
        engine = StandingsEngine(_open_store(games), DivisionRegistry({}), settings=settings)
        book = engine.record_book("bench" if bench else "starters")
    except StandingsError as exc:
        console.print(f"[red]Record book unavailable: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    if book.empty:
        console.print("[yellow]No played games found.[/yellow]")
        return

    high = f"{settings.high_score_threshold:g}+"
    low = f"Under {settings.low_score_threshold:g}"
    out = Table(title="Longest Streaks")
    out.add_column("Team", style="cyan", no_wrap=True)
    out.add_column("Win", justify="right")
    out.add_column("Loss", justify="right")
    out.add_column(high, justify="right")
    out.add_column(low, justify="right")
    for entry in book.itertuples(index=False):
        out.add_row(entry.team, str(entry.win), str(entry.loss), str(entry.high_score), str(entry.low_score))
    console.print(out)


def main() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    main()
