"""Stateless optimization rules over package aggregates and the graph.

One recommendation per triggering condition, in evaluation order:
large packages, duplicate packages, circular imports, non-tree-shakeable
packages.
"""

from typing import List, Optional, Sequence

from ..aggregation.models import PackageAggregate
from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..graph.models import CycleImpact, DependencyGraph
from ..sizes import format_size, round_half_up
from ..units.models import FIRST_PARTY
from ..units.paths import extract_package_name
from .models import Recommendation, RecommendationKind, Severity

_CYCLE_SEVERITY = {
    CycleImpact.WARNING: Severity.WARNING,
    CycleImpact.ERROR: Severity.ERROR,
}


def large_package_rules(
    packages: Sequence[PackageAggregate], thresholds: ThresholdConfig
) -> List[Recommendation]:
    recommendations = []
    for package in packages:
        if package.name == FIRST_PARTY or package.total_size_bytes <= thresholds.large_package_bytes:
            continue
        severity = (
            Severity.ERROR
            if package.total_size_bytes > thresholds.very_large_package_bytes
            else Severity.WARNING
        )
        recommendations.append(
            Recommendation(
                kind=RecommendationKind.CODE_SPLITTING,
                severity=severity,
                message=f"{package.name} is large ({format_size(package.total_size_bytes)})",
                action="Consider code-splitting or lazy loading this dependency",
                potential_savings_bytes=round_half_up(
                    package.total_size_bytes * thresholds.lazy_load_savings_ratio
                ),
                affected_packages=[package.name],
            )
        )
    return recommendations


def duplicate_rules(graph: DependencyGraph) -> List[Recommendation]:
    """Savings assume only the largest bundled version has to stay."""
    recommendations = []
    for dup in graph.duplicates:
        recommendations.append(
            Recommendation(
                kind=RecommendationKind.DUPLICATE,
                severity=Severity.WARNING,
                message=f"{dup.package} is bundled at {len(dup.versions)} versions",
                action="Deduplicate by aligning dependents on a single version",
                potential_savings_bytes=dup.total_size_bytes - dup.largest_version_bytes,
                affected_packages=[dup.package],
                example="Versions: " + ", ".join(v.version for v in dup.versions),
            )
        )
    return recommendations


def cycle_rules(graph: DependencyGraph) -> List[Recommendation]:
    recommendations = []
    for cycle in graph.cycles:
        affected: List[str] = []
        for unit_id in cycle.chain:
            name = extract_package_name(unit_id)
            if name not in affected:
                affected.append(name)
        example = " -> ".join(cycle.chain[:3])
        if len(cycle.chain) > 3:
            example += " -> ..."
        recommendations.append(
            Recommendation(
                kind=RecommendationKind.CIRCULAR,
                severity=_CYCLE_SEVERITY[cycle.impact],
                message=f"Circular import across {len(cycle.chain)} module(s)",
                action="Refactor to break the circular import",
                affected_packages=affected,
                example=example,
            )
        )
    return recommendations


def tree_shaking_rules(
    packages: Sequence[PackageAggregate], thresholds: ThresholdConfig
) -> List[Recommendation]:
    recommendations = []
    for package in packages:
        if package.tree_shakeable or package.total_size_bytes <= thresholds.non_tree_shakeable_bytes:
            continue
        recommendations.append(
            Recommendation(
                kind=RecommendationKind.TREE_SHAKING,
                severity=Severity.INFO,
                message=f"{package.name} is not tree-shakeable",
                action="Consider an ES module build or a tree-shakeable alternative",
                potential_savings_bytes=round_half_up(
                    package.total_size_bytes * thresholds.tree_shaking_savings_ratio
                ),
                affected_packages=[package.name],
            )
        )
    return recommendations


def generate_recommendations(
    packages: Sequence[PackageAggregate],
    graph: Optional[DependencyGraph] = None,
    thresholds: Optional[ThresholdConfig] = None,
) -> List[Recommendation]:
    """Evaluate every rule; graph rules are skipped when no graph was built."""
    thresholds = thresholds or DEFAULT_THRESHOLDS
    recommendations = large_package_rules(packages, thresholds)
    if graph is not None:
        recommendations += duplicate_rules(graph)
        recommendations += cycle_rules(graph)
    recommendations += tree_shaking_rules(packages, thresholds)
    return recommendations
