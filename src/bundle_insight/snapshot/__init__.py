"""Snapshots: one build's complete, immutable metrics record."""

from .capture import capture_snapshot, kind_breakdown, validate_artifacts
from .models import BuildInput, KindBreakdown, Snapshot
from .serialization import (
    build_input_from_dict,
    comparison_to_dict,
    dumps,
    loads_snapshot,
    snapshot_from_dict,
    snapshot_to_dict,
    to_jsonable,
)

__all__ = [
    "BuildInput",
    "KindBreakdown",
    "Snapshot",
    "build_input_from_dict",
    "capture_snapshot",
    "comparison_to_dict",
    "dumps",
    "kind_breakdown",
    "loads_snapshot",
    "snapshot_from_dict",
    "snapshot_to_dict",
    "to_jsonable",
    "validate_artifacts",
]
