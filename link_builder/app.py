"""Typer CLI entrypoint for link-builder."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigLocator, ConfigRepository
from .errors import LinkBuilderError
from .logging_conf import configure_logging
from .orchestrator import ImportSummary, Orchestrator
from .previews import PreviewRunResult
from .ui import ProgressReporter

app = typer.Typer(
    help="Extract links from a chat export and build link previews.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()


@dataclass
class AppState:
    orchestrator: Orchestrator


def build_state(verbose: bool, config_path: Path | None = None) -> AppState:
    locator = ConfigLocator()
    configure_logging(verbose, log_dir=locator.logs_dir)
    repository = ConfigRepository(locator, path=config_path)
    config = repository.load()
    return AppState(orchestrator=Orchestrator(config))


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if not isinstance(state, AppState):
        raise RuntimeError("Application state is not initialised")
    return state


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(code=1)


def _render_import_summary(summary: ImportSummary) -> Table:
    table = Table(title="URL import", box=box.SIMPLE_HEAVY)
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    table.add_row("Total URLs read", str(summary.total))
    table.add_row("Valid URLs", str(summary.valid))
    table.add_row("Invalid URLs", str(summary.invalid))
    table.add_row("Ignored URLs", str(summary.ignored))
    return table


def _render_preview_summary(result: PreviewRunResult) -> Table:
    table = Table(title="Link previews", box=box.SIMPLE_HEAVY)
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    table.add_row("Previews written", str(result.total))
    table.add_row("From cache", str(result.cached))
    table.add_row("Fetched", str(result.fetched))
    table.add_row("Skipped", str(result.skipped))
    return table


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to a YAML configuration file."),
) -> None:
    try:
        ctx.obj = build_state(verbose, config)
    except LinkBuilderError as exc:
        _fail(str(exc))


@app.command("import", help="Extract, validate and deduplicate links from a chat export.")
def import_urls(
    ctx: typer.Context,
    input_path: Optional[Path] = typer.Option(None, "--input", help="Chat export JSON file."),
    output_path: Optional[Path] = typer.Option(None, "--output", help="Where to write the URL list."),
    validate_head: Optional[bool] = typer.Option(
        None, "--validate-head/--no-validate-head", help="Probe every URL with a HEAD request."
    ),
    ignore: Optional[str] = typer.Option(
        None, "--ignore", help="Regular expression of URLs to ignore (overrides IMPORT_IGNORE)."
    ),
    workers: Optional[int] = typer.Option(None, "--workers", min=1, help="Validator pool size."),
) -> None:
    state = _get_state(ctx)
    try:
        summary = state.orchestrator.run_import(
            input_path,
            output_path,
            validate_head=validate_head,
            ignore_pattern=ignore,
            workers=workers,
        )
    except (LinkBuilderError, OSError) as exc:
        _fail(f"Import failed: {exc}")
    console.print(_render_import_summary(summary))
    console.print(f"[green]URLs saved to {summary.output_path}[/green]")


@app.command("previews", help="Generate link previews for an imported URL list.")
def generate_previews(
    ctx: typer.Context,
    input_path: Optional[Path] = typer.Option(None, "--input", help="URL list produced by `import`."),
    output_path: Optional[Path] = typer.Option(None, "--output", help="Preview output / cache file."),
    progress: Optional[bool] = typer.Option(
        None, "--progress/--no-progress", help="Show a progress bar while fetching."
    ),
) -> None:
    state = _get_state(ctx)
    show_progress = state.orchestrator.config.previews.show_progress if progress is None else progress
    reporter = ProgressReporter(enabled=show_progress, console=console)
    try:
        result = state.orchestrator.run_previews(input_path, output_path, progress=reporter)
    except (LinkBuilderError, OSError) as exc:
        _fail(f"Preview generation failed: {exc}")
    console.print(_render_preview_summary(result))
    saved_to = output_path or state.orchestrator.config.previews.output_path
    console.print(f"[green]Previews saved to {saved_to}[/green]")


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
