"""Data models for snapshot diffing — deltas at total and per-artifact level."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


@dataclass(frozen=True)
class SizeChange:
    """Change in one aggregate number between two snapshots."""

    current: float
    previous: float
    diff: float  # current - previous
    diff_percent: float  # 0 when previous is 0


class ChangeStatus(Enum):
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class BundleChange:
    """Per-artifact delta. ``current`` is None when removed, ``previous`` when added."""

    name: str
    current: Optional[int]
    previous: Optional[int]
    diff: int
    diff_percent: float
    status: ChangeStatus


@dataclass(frozen=True)
class Comparison:
    """Complete diff between a current snapshot and its baseline.

    ``by_bundle`` is ordered largest absolute change first. ``summary`` and
    ``insights`` are presentation text derived from the numbers; renderers
    that want their own wording can ignore them.
    """

    target: str
    target_commit: str
    current_commit: str
    total_size: SizeChange
    compressed: Dict[str, SizeChange] = field(default_factory=dict)
    build_duration: Optional[SizeChange] = None
    by_bundle: List[BundleChange] = field(default_factory=list)
    summary: str = ""
    insights: List[str] = field(default_factory=list)

    def changes_with_status(self, status: ChangeStatus) -> List[BundleChange]:
        return [c for c in self.by_bundle if c.status is status]


@dataclass(frozen=True)
class NoBaseline:
    """Returned instead of a Comparison when there is nothing to compare against."""

    target: str
    current_commit: str
    reason: str = "no baseline snapshot available"
