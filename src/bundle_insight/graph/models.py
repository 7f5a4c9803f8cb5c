"""Data models for the unit dependency graph.

Edges are directed: ``adjacency[A]`` contains B means unit A imports B.
Depth counts import edges from the nearest entry node (a unit nothing
imports).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Set

from ..exceptions.taxonomy import AnalysisWarning


class NodeReason(Enum):
    """Why a unit is part of the graph."""

    ENTRY = "entry"
    STATIC_IMPORT = "static-import"


class CycleImpact(Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass
class DependencyGraphNode:
    """One node per compilation unit."""

    id: str
    imported_ids: List[str] = field(default_factory=list)
    imported_by_ids: Set[str] = field(default_factory=set)
    depth: int = 0
    reason: NodeReason = NodeReason.ENTRY
    circular: bool = False
    circular_chain: List[str] = field(default_factory=list)


@dataclass
class CycleReport:
    """A circular import chain, in traversal order."""

    chain: List[str]
    impact: CycleImpact = CycleImpact.WARNING

    @property
    def key(self) -> str:
        """Rotation-independent identity of the cycle."""
        return cycle_key(self.chain)


def cycle_key(chain: List[str]) -> str:
    return "->".join(sorted(chain))


@dataclass
class PackageVersion:
    """All units of one package that share an embedded version."""

    version: str
    size_bytes: int = 0
    unit_ids: List[str] = field(default_factory=list)


@dataclass
class DuplicatePackage:
    """A package bundled at more than one version."""

    package: str
    versions: List[PackageVersion] = field(default_factory=list)

    @property
    def total_size_bytes(self) -> int:
        return sum(v.size_bytes for v in self.versions)

    @property
    def largest_version_bytes(self) -> int:
        return max((v.size_bytes for v in self.versions), default=0)


@dataclass
class DanglingEdge:
    """An import whose target is not in the unit set."""

    source_id: str
    target_id: str


@dataclass
class DependencyGraph:
    """Graph over one snapshot's units plus derived structures."""

    nodes: Dict[str, DependencyGraphNode] = field(default_factory=dict)
    cycles: List[CycleReport] = field(default_factory=list)
    duplicates: List[DuplicatePackage] = field(default_factory=list)

    # Data-quality reporting
    dangling_edges: List[DanglingEdge] = field(default_factory=list)
    unreachable_ids: List[str] = field(default_factory=list)
    warnings: List[AnalysisWarning] = field(default_factory=list)

    @property
    def entry_ids(self) -> List[str]:
        return [n.id for n in self.nodes.values() if n.reason is NodeReason.ENTRY]

    @property
    def max_depth(self) -> int:
        return max((n.depth for n in self.nodes.values()), default=0)

    @property
    def duplicate_packages(self) -> List[str]:
        return [d.package for d in self.duplicates]

    def duplicate_for(self, package: str):
        """Duplicate entry for a package name, or None."""
        for dup in self.duplicates:
            if dup.package == package:
                return dup
        return None
