"""Diff engine — computes structured deltas between two Snapshots.

The algorithm works in two passes:
  1. Aggregates: total size, each compressed total, build duration.
  2. Artifacts: match by name, classify as added/removed/changed/unchanged,
     then order by absolute change.

Summary and insight text come from ``insights``; nothing here formats
strings, so the numbers stay reusable by any renderer.
"""

from typing import Dict, List, Optional, Sequence, Union

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions.taxonomy import ErrorCode
from ..logging_config import get_logger
from ..snapshot.models import Snapshot
from ..units.models import OutputArtifact
from .insights import generate_insights, generate_summary
from .models import BundleChange, ChangeStatus, Comparison, NoBaseline, SizeChange

logger = get_logger(__name__)

# |diff%| below this counts as unchanged
UNCHANGED_PERCENT = 0.1

ADDED_PERCENT = 100.0
REMOVED_PERCENT = -100.0


def size_change(current: float, previous: float) -> SizeChange:
    """Delta between two numbers; percent is 0 when the previous value is 0."""
    diff = current - previous
    diff_percent = 0.0 if previous == 0 else diff / previous * 100.0
    return SizeChange(current=current, previous=previous, diff=diff, diff_percent=diff_percent)


def compare_bundles(
    current: Sequence[OutputArtifact],
    baseline: Sequence[OutputArtifact],
    unchanged_threshold: float = UNCHANGED_PERCENT,
) -> List[BundleChange]:
    """Classify every artifact name from either side exactly once.

    Records are collected in current order, then removed ones in baseline
    order, and sorted by absolute diff descending. The sort is stable, so
    equal diffs keep that encounter order.
    """
    baseline_by_name = {a.name: a for a in baseline}
    current_names = {a.name for a in current}
    changes: List[BundleChange] = []

    for artifact in current:
        previous = baseline_by_name.get(artifact.name)
        if previous is None:
            changes.append(
                BundleChange(
                    name=artifact.name,
                    current=artifact.size_bytes,
                    previous=None,
                    diff=artifact.size_bytes,
                    diff_percent=ADDED_PERCENT,
                    status=ChangeStatus.ADDED,
                )
            )
            continue

        delta = size_change(artifact.size_bytes, previous.size_bytes)
        status = (
            ChangeStatus.UNCHANGED
            if abs(delta.diff_percent) < unchanged_threshold
            else ChangeStatus.CHANGED
        )
        changes.append(
            BundleChange(
                name=artifact.name,
                current=artifact.size_bytes,
                previous=previous.size_bytes,
                diff=int(delta.diff),
                diff_percent=delta.diff_percent,
                status=status,
            )
        )

    for artifact in baseline:
        if artifact.name in current_names:
            continue
        changes.append(
            BundleChange(
                name=artifact.name,
                current=None,
                previous=artifact.size_bytes,
                diff=-artifact.size_bytes,
                diff_percent=REMOVED_PERCENT,
                status=ChangeStatus.REMOVED,
            )
        )

    changes.sort(key=lambda c: abs(c.diff), reverse=True)
    return changes


def _compressed_changes(current: Snapshot, baseline: Snapshot) -> Dict[str, SizeChange]:
    algorithms = list(current.total_compressed_sizes)
    for algorithm in baseline.total_compressed_sizes:
        if algorithm not in algorithms:
            algorithms.append(algorithm)
    return {
        algorithm: size_change(
            current.total_compressed_sizes.get(algorithm, 0),
            baseline.total_compressed_sizes.get(algorithm, 0),
        )
        for algorithm in algorithms
    }


def compare_snapshots(
    current: Snapshot,
    baseline: Optional[Snapshot],
    target: str = "previous",
    config: Optional[AnalysisConfig] = None,
) -> Union[Comparison, NoBaseline]:
    """Diff ``current`` against ``baseline``.

    A missing baseline is a normal state, not an error: the caller gets a
    ``NoBaseline`` and decides how to present it.
    """
    if baseline is None:
        logger.info("[%s] No baseline for %s; skipping comparison", ErrorCode.BI400.value, target)
        return NoBaseline(target=target, current_commit=current.commit)

    thresholds = (config or DEFAULT_CONFIG).thresholds

    total_size = size_change(current.total_size_bytes, baseline.total_size_bytes)
    by_bundle = compare_bundles(current.artifacts, baseline.artifacts, thresholds.unchanged_percent)

    comparison = Comparison(
        target=target,
        target_commit=baseline.commit,
        current_commit=current.commit,
        total_size=total_size,
        compressed=_compressed_changes(current, baseline),
        build_duration=size_change(current.build_duration_ms, baseline.build_duration_ms),
        by_bundle=by_bundle,
        summary=generate_summary(total_size, target, thresholds),
        insights=generate_insights(by_bundle, total_size, thresholds),
    )

    logger.debug(
        "Compared %s against %s: %d artifact change(s)",
        current.commit,
        baseline.commit,
        len(by_bundle) - len(comparison.changes_with_status(ChangeStatus.UNCHANGED)),
    )
    return comparison
