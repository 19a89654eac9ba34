"""Typer CLI entrypoint for airport-sync."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Callable

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigRepository, SyncConfig
from .errors import SyncError
from .logging_conf import configure_logging, error_log_path, sync_log_path, tail_log
from .orchestrator import SyncOrchestrator, SyncSummary

app = typer.Typer(
    help="Sync the paginated airport dataset into JSON/CSV snapshots.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(name="config", help="Inspect configuration.", no_args_is_help=True)
log_app = typer.Typer(name="log", help="Inspect log files.", no_args_is_help=True)

console = Console()


def _default_orchestrator(config: SyncConfig, progress_enabled: bool) -> SyncOrchestrator:
    return SyncOrchestrator(config, progress_enabled=progress_enabled)


@dataclass
class AppState:
    repository: ConfigRepository
    verbose: bool = False
    orchestrator_factory: Callable[[SyncConfig, bool], SyncOrchestrator] = field(
        default=_default_orchestrator
    )


def build_state(verbose: bool) -> AppState:
    repository = ConfigRepository()
    repository.locator.ensure_directories()
    configure_logging(verbose=verbose)
    return AppState(repository=repository, verbose=verbose)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _progress_default_enabled() -> bool:
    return bool(getattr(sys.stdout, "isatty", lambda: False)())


def _render_summary(summary: SyncSummary) -> Table:
    table = Table(title="Sync result", box=box.SIMPLE_HEAD)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Declared total", str(summary.declared_total))
    table.add_row("Records fetched", str(summary.fetched))
    table.add_row("Pages", str(summary.pages))
    table.add_row("JSON changed", "yes" if summary.json_changed else "no")
    table.add_row("CSV changed", "yes" if summary.csv_changed else "no")
    table.add_row("Version", summary.version or "-")
    return table


def _summary_message(summary: SyncSummary) -> str:
    if not summary.changed:
        return "No data changes detected. Nothing written."
    if summary.dry_run:
        return "Changes detected (dry run). Nothing written."
    return f"Changes written, version bumped to {summary.version}."


app.add_typer(config_app, name="config")
app.add_typer(log_app, name="log")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    ctx.obj = build_state(verbose)


@app.command("update", help="Fetch the full dataset and publish it if it changed.")
def update(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="Compare only; never write."),
    quiet: bool = typer.Option(False, "--quiet", help="Print a one-line result only."),
) -> None:
    state = _get_state(ctx)
    logger = configure_logging(verbose=state.verbose)
    try:
        config = state.repository.load()
        orchestrator = state.orchestrator_factory(config, _progress_default_enabled() and not quiet)
        summary = orchestrator.run(dry_run=dry_run)
    except SyncError as exc:
        logger.error("sync_failed", error=str(exc), error_type=type(exc).__name__)
        console.print(f"Sync failed: {exc}", style="red")
        raise typer.Exit(code=1)

    if summary.count_mismatch:
        console.print(
            f"Warning: expected {summary.declared_total} records but fetched {summary.fetched}.",
            style="yellow",
        )
    if not quiet:
        console.print(_render_summary(summary))
    style = "green" if summary.written else "dim"
    console.print(_summary_message(summary), style=style)


@config_app.command("show", help="Print the effective configuration (API key masked).")
def config_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    try:
        config = state.repository.load()
    except SyncError as exc:
        console.print(f"Invalid configuration: {exc}", style="red")
        raise typer.Exit(code=1)
    table = Table(title="Configuration", box=box.SIMPLE_HEAD)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="green", overflow="fold")
    for key, value in config.masked().items():
        table.add_row(key, "-" if value is None else str(value))
    console.print(table)


@log_app.command("tail", help="Show the last lines of the sync or error log.")
def log_tail(
    lines: int = typer.Option(50, "--lines", "-n", min=1, help="Number of lines to show."),
    errors: bool = typer.Option(False, "--errors", help="Read the error log instead."),
) -> None:
    path = error_log_path() if errors else sync_log_path()
    content = tail_log(path, lines)
    if not content:
        console.print(f"No log entries in {path}.", style="yellow")
        raise typer.Exit(code=0)
    for line in content:
        console.print(line.rstrip("\n"), markup=False, highlight=False)


__all__ = ["AppState", "app", "build_state"]
