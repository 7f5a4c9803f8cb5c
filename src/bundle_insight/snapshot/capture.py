"""Capture a Snapshot from already-loaded build metadata.

One call runs the whole single-pass pipeline:

    validate -> totals -> graph -> attribution -> aggregation -> rules

Each stage runs only when its inputs exist. Missing units disable the graph
and unit-based attribution; a missing or malformed position map disables
attribution for that artifact alone. Degradations are recorded on the
snapshot, never raised.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from .. import __version__
from ..aggregation.aggregator import aggregate_packages
from ..attribution.engine import attribute_artifacts
from ..compression import COMPRESSORS, measure
from ..config import DEFAULT_CONFIG, AnalysisConfig, ThresholdConfig
from ..exceptions import InvalidInputError
from ..exceptions.taxonomy import AnalysisWarning, ErrorCode
from ..graph.builder import build_dependency_graph
from ..logging_config import get_logger, log_warning
from ..rules.engine import generate_recommendations
from ..sizes import format_size
from ..units.index import link_units
from ..units.models import ArtifactKind, OutputArtifact
from ..units.paths import is_font, is_image
from .models import SCHEMA_VERSION, BuildInput, KindBreakdown, Snapshot

logger = get_logger(__name__)


def validate_artifacts(artifacts: Sequence[OutputArtifact]) -> None:
    """Reject structurally invalid artifact lists.

    Raises:
        InvalidInputError: On an empty or duplicate name, or a negative size.
    """
    seen: set = set()
    for artifact in artifacts:
        if not artifact.name:
            raise InvalidInputError("artifacts.name", "artifact name must not be empty")
        if artifact.name in seen:
            raise InvalidInputError("artifacts.name", "duplicate artifact name", artifact.name)
        seen.add(artifact.name)
        if artifact.size_bytes < 0:
            raise InvalidInputError(
                f"artifacts[{artifact.name}].size_bytes", "must be >= 0", artifact.size_bytes
            )
        for algorithm, size in artifact.compressed_sizes.items():
            if size < 0:
                raise InvalidInputError(
                    f"artifacts[{artifact.name}].compressed_sizes.{algorithm}", "must be >= 0", size
                )


def kind_breakdown(artifacts: Sequence[OutputArtifact]) -> KindBreakdown:
    breakdown = KindBreakdown()
    for artifact in artifacts:
        if artifact.kind is ArtifactKind.CODE:
            breakdown.code += artifact.size_bytes
        elif artifact.kind is ArtifactKind.STYLE:
            breakdown.style += artifact.size_bytes
        elif artifact.kind is ArtifactKind.MARKUP:
            breakdown.markup += artifact.size_bytes
        elif artifact.kind is ArtifactKind.ASSET and is_image(artifact.name):
            breakdown.images += artifact.size_bytes
        elif artifact.kind is ArtifactKind.ASSET and is_font(artifact.name):
            breakdown.fonts += artifact.size_bytes
        else:
            breakdown.other += artifact.size_bytes
    return breakdown


def size_warnings(artifacts: Sequence[OutputArtifact], thresholds: ThresholdConfig) -> List[str]:
    """Budget hints: total build size and oversized code artifacts."""
    warnings: List[str] = []
    total = sum(a.size_bytes for a in artifacts)
    if total > thresholds.total_size_warning_bytes:
        warnings.append(
            f"Total build size ({format_size(total)}) exceeds "
            f"{format_size(thresholds.total_size_warning_bytes)}"
        )
    for artifact in artifacts:
        if artifact.kind is ArtifactKind.CODE and artifact.size_bytes > thresholds.artifact_size_warning_bytes:
            warnings.append(f"{artifact.name} is large ({format_size(artifact.size_bytes)})")
    return warnings


def _complete_compressed_sizes(
    build: BuildInput, config: AnalysisConfig, degradations: List[AnalysisWarning]
) -> List[OutputArtifact]:
    """Copy artifacts, measuring or zero-filling missing compressed sizes."""
    completed: List[OutputArtifact] = []
    for artifact in build.artifacts:
        missing = [a for a in config.compression_algorithms if a not in artifact.compressed_sizes]
        if not missing:
            completed.append(artifact)
            continue

        sizes: Dict[str, int] = dict(artifact.compressed_sizes)
        source = build.sources.get(artifact.name)
        if config.measure_compression and source is not None and source.compiled_text is not None:
            measurable = [a for a in missing if a in COMPRESSORS]
            sizes.update(measure(source.compiled_text, measurable))
            missing = [a for a in missing if a not in COMPRESSORS]

        if missing:
            sizes.update({algorithm: 0 for algorithm in missing})
            warning = AnalysisWarning(
                code=ErrorCode.BI100,
                message=f"{artifact.name} has no {', '.join(missing)} size; counted as 0",
                context={"artifact": artifact.name, "algorithms": missing},
            )
            degradations.append(warning)
            log_warning(logger, warning, logging.DEBUG)
        completed.append(replace(artifact, compressed_sizes=sizes))
    return completed


def capture_snapshot(build: BuildInput, config: Optional[AnalysisConfig] = None) -> Snapshot:
    """Build an immutable Snapshot from one build's metadata.

    Raises:
        InvalidInputError: If the artifact list is structurally invalid.
    """
    config = config or DEFAULT_CONFIG
    thresholds = config.thresholds
    validate_artifacts(build.artifacts)

    degradations: List[AnalysisWarning] = []
    artifacts = _complete_compressed_sizes(build, config, degradations)

    total_size = sum(a.size_bytes for a in artifacts)
    algorithms = list(config.compression_algorithms)
    for artifact in artifacts:
        for algorithm in artifact.compressed_sizes:
            if algorithm not in algorithms:
                algorithms.append(algorithm)
    total_compressed = {
        algorithm: sum(a.compressed(algorithm) for a in artifacts) for algorithm in algorithms
    }

    units = list(build.units) if build.units else None
    graph = None
    units_by_id: Dict = {}
    if units:
        units_by_id = link_units(units)
        graph = build_dependency_graph(units, thresholds)
        degradations.extend(graph.warnings)

    attributions = None
    if units or build.sources:
        attribution = attribute_artifacts(artifacts, units_by_id, build.sources, thresholds)
        degradations.extend(attribution.warnings)
        attributions = attribution.attributions

    packages = None
    if units or attributions:
        packages = aggregate_packages(
            artifacts,
            units=units,
            attributions=attributions,
            graph=graph,
            algorithms=config.compression_algorithms,
        )

    recommendations = generate_recommendations(packages or [], graph, thresholds)

    logger.info(
        "Captured snapshot: %d artifacts, %s total, %d degradation(s)",
        len(artifacts),
        format_size(total_size),
        len(degradations),
    )

    return Snapshot(
        timestamp=build.timestamp or datetime.now(timezone.utc).isoformat(),
        commit=build.commit,
        branch=build.branch,
        build_duration_ms=build.build_duration_ms,
        tool_version=__version__,
        schema_version=SCHEMA_VERSION,
        artifacts=artifacts,
        total_size_bytes=total_size,
        total_compressed_sizes=total_compressed,
        by_kind=kind_breakdown(artifacts),
        units=units,
        packages=packages,
        graph=graph,
        attributions=attributions,
        warnings=size_warnings(artifacts, thresholds),
        recommendations=recommendations,
        degradations=degradations,
    )
