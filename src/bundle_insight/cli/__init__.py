"""CLI entry point — registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="bundle-insight",
    help="Bundle Insight - Build Artifact Size Analyzer",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
) -> None:
    """
    Analyze frontend build output: package weight, duplicate versions,
    import cycles, and size changes between builds.

    [bold cyan]Examples:[/bold cyan]

      bundle-insight analyze build.json --out snapshot.json

      bundle-insight compare snapshot.json baseline.json --fail-on-error 10
    """
    if version:
        console.print(
            f"[bold cyan]Bundle Insight[/bold cyan] version [green]{__version__}[/green]"
        )
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .compare import compare as _compare  # noqa: F401, E402
