"""Diff layer — snapshot-to-snapshot size comparison."""

from .engine import UNCHANGED_PERCENT, compare_bundles, compare_snapshots, size_change
from .insights import exceeds_budget, generate_insights, generate_summary
from .models import BundleChange, ChangeStatus, Comparison, NoBaseline, SizeChange

__all__ = [
    "UNCHANGED_PERCENT",
    "BundleChange",
    "ChangeStatus",
    "Comparison",
    "NoBaseline",
    "SizeChange",
    "compare_bundles",
    "compare_snapshots",
    "exceeds_budget",
    "generate_insights",
    "generate_summary",
    "size_change",
]
