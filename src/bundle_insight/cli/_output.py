"""Rich terminal rendering for snapshots and comparisons."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..diff.models import ChangeStatus, Comparison, NoBaseline
from ..rules.models import Severity
from ..sizes import format_size
from ..snapshot.models import Snapshot

_STATUS_STYLES = {
    ChangeStatus.ADDED: "green",
    ChangeStatus.REMOVED: "red",
    ChangeStatus.CHANGED: "yellow",
    ChangeStatus.UNCHANGED: "dim",
}

_SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}

_MAX_PACKAGES = 15


def _signed_size(diff: float) -> str:
    sign = "+" if diff > 0 else "-" if diff < 0 else ""
    return f"{sign}{format_size(diff)}"


def _signed_percent(value: float) -> str:
    return f"{value:+.1f}%"


class SnapshotFormatter:
    """Render a Snapshot to a Rich console."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    def render(self, snapshot: Snapshot, verbose: bool = False) -> None:
        c = self._console
        c.print(
            f"[bold]Build[/bold] {escape(snapshot.commit)} on {escape(snapshot.branch)}: "
            f"{snapshot.artifact_count} artifact(s), "
            f"[bold]{format_size(snapshot.total_size_bytes)}[/bold]"
        )
        compressed = ", ".join(
            f"{algo} {format_size(size)}" for algo, size in snapshot.total_compressed_sizes.items()
        )
        if compressed:
            c.print(f"  [dim]{compressed}[/dim]")

        self._render_artifacts(snapshot)
        if snapshot.packages:
            self._render_packages(snapshot, verbose)
        if snapshot.graph is not None and snapshot.graph.cycles:
            c.print(f"[yellow]{len(snapshot.graph.cycles)} import cycle(s) detected[/yellow]")

        for warning in snapshot.warnings:
            c.print(f"[yellow]![/yellow] {escape(warning)}")
        for rec in snapshot.recommendations:
            style = _SEVERITY_STYLES[rec.severity]
            c.print(f"[{style}]{rec.severity.value.upper()}[/{style}] {escape(rec.message)}")
            c.print(f"    [dim]{escape(rec.action)}[/dim]")
        if verbose:
            for degradation in snapshot.degradations:
                c.print(f"[dim]{escape(str(degradation))}[/dim]")

    def _render_artifacts(self, snapshot: Snapshot) -> None:
        table = Table(title="Artifacts", show_lines=False)
        table.add_column("Name")
        table.add_column("Kind")
        table.add_column("Size", justify="right")
        for algorithm in snapshot.total_compressed_sizes:
            table.add_column(algorithm, justify="right")
        for artifact in sorted(snapshot.artifacts, key=lambda a: a.size_bytes, reverse=True):
            row = [escape(artifact.name), artifact.kind.value, format_size(artifact.size_bytes)]
            row.extend(
                format_size(artifact.compressed(algorithm))
                for algorithm in snapshot.total_compressed_sizes
            )
            table.add_row(*row)
        self._console.print(table)

    def _render_packages(self, snapshot: Snapshot, verbose: bool) -> None:
        table = Table(title="Packages")
        table.add_column("Package")
        table.add_column("Size", justify="right")
        table.add_column("%", justify="right")
        table.add_column("Units", justify="right")
        table.add_column("Notes")
        packages = snapshot.packages if verbose else snapshot.packages[:_MAX_PACKAGES]
        for package in packages:
            notes = []
            if package.duplicate:
                versions = ", ".join(v.version for v in package.versions)
                notes.append(f"[red]duplicate ({versions})[/red]")
            if not package.tree_shakeable:
                notes.append("[dim]not tree-shakeable[/dim]")
            table.add_row(
                escape(package.name),
                format_size(package.total_size_bytes),
                f"{package.percent_of_total:.1f}",
                str(package.unit_count),
                " ".join(notes),
            )
        self._console.print(table)


class ComparisonFormatter:
    """Render a Comparison (or NoBaseline) to a Rich console."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    def render(self, comparison, verbose: bool = False) -> None:
        c = self._console
        if isinstance(comparison, NoBaseline):
            c.print(
                f"[yellow]No baseline to compare against ({escape(comparison.target)}).[/yellow] "
                f"[dim]{comparison.reason}[/dim]"
            )
            return

        c.print(f"[bold]{escape(comparison.summary)}[/bold]")
        c.print(
            f"  [dim]{escape(comparison.target_commit)} -> {escape(comparison.current_commit)}[/dim]"
        )
        self._render_totals(comparison)
        self._render_bundles(comparison, verbose)
        for insight in comparison.insights:
            c.print(f"  {escape(insight)}")

    def _render_totals(self, comparison: Comparison) -> None:
        table = Table(title="Totals")
        table.add_column("Metric")
        table.add_column("Previous", justify="right")
        table.add_column("Current", justify="right")
        table.add_column("Change", justify="right")
        table.add_column("%", justify="right")
        rows = [("size", comparison.total_size)]
        rows.extend(comparison.compressed.items())
        for label, change in rows:
            table.add_row(
                label,
                format_size(change.previous),
                format_size(change.current),
                _signed_size(change.diff),
                _signed_percent(change.diff_percent),
            )
        if comparison.build_duration is not None:
            d = comparison.build_duration
            table.add_row(
                "build time",
                f"{d.previous:.0f} ms",
                f"{d.current:.0f} ms",
                f"{d.diff:+.0f} ms",
                _signed_percent(d.diff_percent),
            )
        self._console.print(table)

    def _render_bundles(self, comparison: Comparison, verbose: bool) -> None:
        table = Table(title="Artifacts")
        table.add_column("Name")
        table.add_column("Status")
        table.add_column("Change", justify="right")
        table.add_column("%", justify="right")
        for change in comparison.by_bundle:
            if change.status is ChangeStatus.UNCHANGED and not verbose:
                continue
            style = _STATUS_STYLES[change.status]
            table.add_row(
                escape(change.name),
                f"[{style}]{change.status.value}[/{style}]",
                _signed_size(change.diff),
                _signed_percent(change.diff_percent),
            )
        self._console.print(table)
