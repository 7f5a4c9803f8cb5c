"""Roll unit (or source-attribution) metrics up to packages."""

from typing import Dict, Iterable, List, Optional, Sequence

from ..attribution.engine import package_sizes
from ..attribution.models import SourceAttribution
from ..graph.models import DependencyGraph
from ..logging_config import get_logger
from ..sizes import percent, round_half_up
from ..units.models import CompilationUnit, OutputArtifact
from .models import PackageAggregate

logger = get_logger(__name__)


def compression_ratios(
    artifacts: Sequence[OutputArtifact], algorithms: Iterable[str]
) -> Dict[str, float]:
    """Build-wide compressed/raw ratio per algorithm (0 for an empty build)."""
    total = sum(a.size_bytes for a in artifacts)
    ratios: Dict[str, float] = {}
    for algorithm in algorithms:
        compressed = sum(a.compressed(algorithm) for a in artifacts)
        ratios[algorithm] = compressed / total if total else 0.0
    return ratios


def aggregate_packages(
    artifacts: Sequence[OutputArtifact],
    units: Optional[Iterable[CompilationUnit]] = None,
    attributions: Optional[Iterable[SourceAttribution]] = None,
    graph: Optional[DependencyGraph] = None,
    algorithms: Iterable[str] = ("gzip", "brotli"),
) -> List[PackageAggregate]:
    """Group units by package; fall back to source attributions without units.

    Compressed sizes use a unit's own compressed figures when the build tool
    reported them, else the build-wide compression ratio applied to its size.
    ``duplicate`` and ``versions`` come from the graph's duplicate detection;
    without a graph ``duplicate`` is False.

    Returns:
        Aggregates sorted by total size, largest first (stable).
    """
    algorithms = tuple(algorithms)
    artifact_total = sum(a.size_bytes for a in artifacts)
    ratios = compression_ratios(artifacts, algorithms)

    unit_list = list(units) if units is not None else []
    if unit_list:
        packages = _from_units(unit_list, artifacts, ratios)
    elif attributions is not None:
        packages = _from_attributions(list(attributions), ratios)
    else:
        logger.debug("No units or attributions; package aggregation skipped")
        return []

    for package in packages.values():
        package.percent_of_total = percent(package.total_size_bytes, artifact_total)
        duplicate = graph.duplicate_for(package.name) if graph is not None else None
        if duplicate is not None:
            package.duplicate = True
            package.versions = list(duplicate.versions)

    return sorted(packages.values(), key=lambda p: p.total_size_bytes, reverse=True)


def _from_units(
    units: List[CompilationUnit],
    artifacts: Sequence[OutputArtifact],
    ratios: Dict[str, float],
) -> Dict[str, PackageAggregate]:
    artifacts_of: Dict[str, set] = {}
    for artifact in artifacts:
        for unit_id in artifact.member_unit_ids:
            artifacts_of.setdefault(unit_id, set()).add(artifact.name)

    packages: Dict[str, PackageAggregate] = {}
    for unit in units:
        package = packages.get(unit.package_name)
        if package is None:
            package = packages[unit.package_name] = PackageAggregate(
                name=unit.package_name,
                compressed_sizes={algorithm: 0 for algorithm in ratios},
            )
            if unit.imported_by_ids:
                package.first_imported_by = sorted(unit.imported_by_ids)[0]

        package.total_size_bytes += unit.size_bytes
        package.unit_count += 1
        package.artifact_membership |= unit.artifact_names
        package.artifact_membership |= artifacts_of.get(unit.id, set())
        if not unit.tree_shakeable:
            package.tree_shakeable = False

        for algorithm, ratio in ratios.items():
            if algorithm in unit.compressed_sizes:
                package.compressed_sizes[algorithm] += unit.compressed_sizes[algorithm]
            else:
                package.compressed_sizes[algorithm] += round_half_up(unit.size_bytes * ratio)

    return packages


def _from_attributions(
    attributions: List[SourceAttribution], ratios: Dict[str, float]
) -> Dict[str, PackageAggregate]:
    packages: Dict[str, PackageAggregate] = {
        name: PackageAggregate(
            name=name,
            total_size_bytes=size,
            compressed_sizes={
                algorithm: round_half_up(size * ratio) for algorithm, ratio in ratios.items()
            },
        )
        for name, size in package_sizes(attributions).items()
    }
    for item in attributions:
        package = packages[item.package_name]
        package.unit_count += 1
        package.artifact_membership |= item.artifact_membership
    return packages
