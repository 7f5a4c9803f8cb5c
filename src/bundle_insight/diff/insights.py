"""Presentation rules over a finished comparison.

These never feed back into the numbers; swap them out for a different
renderer without touching the engine.
"""

from typing import List, Optional, Sequence

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..sizes import format_size
from .models import BundleChange, ChangeStatus, Comparison, SizeChange

PASS = "pass"
WARNING = "warning"
ERROR = "error"


def generate_summary(
    total_size: SizeChange, target: str, thresholds: Optional[ThresholdConfig] = None
) -> str:
    thresholds = thresholds or DEFAULT_THRESHOLDS
    if abs(total_size.diff_percent) < thresholds.unchanged_percent:
        return f"Bundle size unchanged from {target}"

    direction = "larger" if total_size.diff > 0 else "smaller"
    emoji = "📈" if total_size.diff > 0 else "📉"
    return (
        f"{emoji} Bundle is {format_size(total_size.diff)} "
        f"({abs(total_size.diff_percent):.1f}%) {direction} than {target}"
    )


def generate_insights(
    changes: Sequence[BundleChange],
    total_size: SizeChange,
    thresholds: Optional[ThresholdConfig] = None,
) -> List[str]:
    """Rule-based callouts, in a fixed order.

    1. Total growth above the regression threshold, or shrink beyond the
       improvement threshold.
    2. The largest changed artifact that grew, when it grew by more than
       ``largest_increase_bytes``.
    3. Count and size of added artifacts.
    4. Count and size of removed artifacts.
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    insights: List[str] = []

    if total_size.diff_percent > thresholds.regression_percent:
        insights.append(f"⚠️ Total bundle size increased by {total_size.diff_percent:.1f}%")
    elif total_size.diff_percent < -thresholds.improvement_percent:
        insights.append(
            f"✅ Great job! Bundle size reduced by {abs(total_size.diff_percent):.1f}%"
        )

    # changes are sorted by |diff|, so the first growing one is the largest
    largest = next(
        (c for c in changes if c.status is ChangeStatus.CHANGED and c.diff > 0), None
    )
    if largest is not None and largest.diff > thresholds.largest_increase_bytes:
        insights.append(
            f"📦 {largest.name} grew by {format_size(largest.diff)} "
            f"({largest.diff_percent:.1f}%)"
        )

    added = [c for c in changes if c.status is ChangeStatus.ADDED]
    if added:
        total_added = sum(c.diff for c in added)
        insights.append(f"➕ {len(added)} new bundle(s) added ({format_size(total_added)})")

    removed = [c for c in changes if c.status is ChangeStatus.REMOVED]
    if removed:
        total_removed = abs(sum(c.diff for c in removed))
        insights.append(
            f"➖ {len(removed)} bundle(s) removed ({format_size(total_removed)} saved)"
        )

    return insights


def exceeds_budget(
    comparison: Comparison,
    error_percent: Optional[float] = None,
    warning_percent: Optional[float] = None,
) -> str:
    """Grade total growth against percent budgets: "pass", "warning" or "error".

    A budget left as None is not checked. Growth must strictly exceed a
    budget to trip it.
    """
    growth = comparison.total_size.diff_percent
    if error_percent is not None and growth > error_percent:
        return ERROR
    if warning_percent is not None and growth > warning_percent:
        return WARNING
    return PASS
