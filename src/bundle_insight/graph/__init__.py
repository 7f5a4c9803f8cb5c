"""Dependency graph: depth from entries, circular imports, duplicate packages."""

from .algorithms import compute_depths, find_cycles, find_duplicate_packages
from .builder import build_dependency_graph
from .models import (
    CycleImpact,
    CycleReport,
    DanglingEdge,
    DependencyGraph,
    DependencyGraphNode,
    DuplicatePackage,
    NodeReason,
    PackageVersion,
)

__all__ = [
    "CycleImpact",
    "CycleReport",
    "DanglingEdge",
    "DependencyGraph",
    "DependencyGraphNode",
    "DuplicatePackage",
    "NodeReason",
    "PackageVersion",
    "build_dependency_graph",
    "compute_depths",
    "find_cycles",
    "find_duplicate_packages",
]
