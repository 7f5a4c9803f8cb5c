"""Compare command — diff a snapshot against a baseline and grade budgets."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..diff.engine import compare_snapshots
from ..diff.insights import ERROR, WARNING, exceeds_budget
from ..diff.models import NoBaseline
from ..exceptions import BundleInsightError
from ..logging_config import setup_logging
from ..snapshot.serialization import dumps
from . import app
from ._common import console, load_snapshot_file, resolve_config
from ._output import ComparisonFormatter


@app.command(name="compare")
def compare(
    current_json: Path = typer.Argument(
        ...,
        help="Snapshot JSON for the current build",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    baseline_json: Optional[Path] = typer.Argument(
        None,
        help="Snapshot JSON to compare against (omit or missing: no baseline)",
        dir_okay=False,
    ),
    target: str = typer.Option(
        "previous",
        "--target",
        "-t",
        help="Label for the baseline in the summary (e.g. main, previous)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    fail_on_error: Optional[float] = typer.Option(
        None,
        "--fail-on-error",
        help="Exit 1 if total size grew by more than this percent",
        min=0.0,
    ),
    warn_on: Optional[float] = typer.Option(
        None,
        "--warn-on",
        help="Print a warning if total size grew by more than this percent",
        min=0.0,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Include unchanged artifacts",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Append JSON-lines debug logs (with structured warnings) to this file",
        dir_okay=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        hidden=True,
    ),
) -> None:
    """Compare a snapshot against a baseline snapshot.

    [bold cyan]Examples:[/bold cyan]

      bundle-insight compare current.json main.json --target main

      bundle-insight compare current.json previous.json --fail-on-error 10 --warn-on 5
    """
    logger = setup_logging(
        verbose=verbose, quiet=json_output, log_file=str(log_file) if log_file else None
    )

    try:
        settings = resolve_config(config=config, verbose=verbose)
        current = load_snapshot_file(current_json)
        baseline = None
        if baseline_json is not None and baseline_json.exists():
            baseline = load_snapshot_file(baseline_json)
        comparison = compare_snapshots(current, baseline, target=target, config=settings)
    except BundleInsightError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error in compare")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if json_output:
        print(dumps(comparison))
    else:
        ComparisonFormatter(console=console).render(comparison, verbose=verbose)

    if isinstance(comparison, NoBaseline):
        return

    grade = exceeds_budget(comparison, error_percent=fail_on_error, warning_percent=warn_on)
    growth = comparison.total_size.diff_percent
    if grade == ERROR:
        if not json_output:
            console.print(
                f"[red]Bundle size grew {growth:.1f}%, over the {fail_on_error}% limit[/red]"
            )
        raise typer.Exit(1)
    if grade == WARNING and not json_output:
        console.print(
            f"[yellow]Bundle size grew {growth:.1f}%, over the {warn_on}% warning level[/yellow]"
        )
