"""Analyze command — build description in, snapshot out."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..exceptions import BundleInsightError
from ..logging_config import setup_logging
from ..snapshot.capture import capture_snapshot
from ..snapshot.serialization import dumps
from . import app
from ._common import console, load_build, resolve_config
from ._output import SnapshotFormatter


@app.command(name="analyze")
def analyze(
    build_json: Path = typer.Argument(
        ...,
        help="Build description JSON (artifacts, units, source files)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write the snapshot JSON to this file",
        dir_okay=False,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show every package and each degradation",
    ),
    no_measure: bool = typer.Option(
        False,
        "--no-measure",
        help="Do not compute missing compressed sizes from artifact text",
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
    """Capture a size snapshot from a build description.

    [bold cyan]Examples:[/bold cyan]

      bundle-insight analyze dist/build.json

      bundle-insight analyze dist/build.json --out .bundle/snapshot.json

      bundle-insight analyze dist/build.json --json
    """
    logger = setup_logging(
        verbose=verbose, quiet=json_output, log_file=str(log_file) if log_file else None
    )

    try:
        settings = resolve_config(config=config, verbose=verbose, no_measure=no_measure)
        build = load_build(build_json)
        snapshot = capture_snapshot(build, settings)
    except BundleInsightError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error in analyze")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(dumps(snapshot), encoding="utf-8")
        logger.info("Snapshot written to %s", out)

    if json_output:
        print(dumps(snapshot))
    else:
        SnapshotFormatter(console=console).render(snapshot, verbose=verbose)
        if out is not None:
            console.print(f"[green]Snapshot saved to {out}[/green]")
