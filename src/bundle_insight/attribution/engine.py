"""Attribution engine — choose a strategy per artifact and merge the results.

Strategy per artifact:
  1. Unit sizes (fast path): every member unit is known, so each package's
     share is the sum of its member unit sizes.
  2. Position-map sampling (slow path): map and compiled text both given.
  3. Otherwise skip the artifact. A malformed or half-supplied map yields a
     recoverable warning; the rest of the build is still attributed.

Artifacts are independent of each other, so the loop could be parallelised;
the merge step only sums and unions.
"""

from collections import OrderedDict
from typing import Dict, Iterable, List, Mapping, Optional, Set

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..exceptions import PositionMapError
from ..exceptions.taxonomy import AnalysisWarning, ErrorCode
from ..logging_config import get_logger, log_warning
from ..units.models import ArtifactKind, CompilationUnit, OutputArtifact
from ..units.paths import clean_source_path
from .models import ArtifactSource, AttributionResult, SourceAttribution
from .sampling import attribute_from_position_map

logger = get_logger(__name__)

STRATEGY_UNITS = "units"
STRATEGY_POSITION_MAP = "position-map"


def attribute_from_units(
    artifact: OutputArtifact,
    units_by_id: Mapping[str, CompilationUnit],
    member_ids: Optional[Iterable[str]] = None,
) -> List[SourceAttribution]:
    """One attribution per known member unit, sized exactly.

    ``member_ids`` defaults to the artifact's own ``member_unit_ids``.
    """
    results: List[SourceAttribution] = []
    ids = artifact.member_unit_ids if member_ids is None else member_ids
    for unit_id in sorted(ids):
        unit = units_by_id.get(unit_id)
        if unit is None:
            continue
        results.append(
            SourceAttribution(
                source_path=clean_source_path(unit.id),
                package_name=unit.package_name,
                estimated_size_bytes=unit.size_bytes,
                line_count=0,
                artifact_membership={artifact.name},
            )
        )
    return results


def package_sizes(attributions: Iterable[SourceAttribution]) -> Dict[str, int]:
    """Sum attributed bytes per package, in first-encounter order."""
    sizes: Dict[str, int] = {}
    for attribution in attributions:
        sizes[attribution.package_name] = (
            sizes.get(attribution.package_name, 0) + attribution.estimated_size_bytes
        )
    return sizes


def merge_source_attributions(
    attribution_lists: Iterable[Iterable[SourceAttribution]],
) -> List[SourceAttribution]:
    """Merge per-artifact attributions of the same source path.

    Sizes and line counts are summed, artifact membership is unioned.
    Sorted by estimated size, largest first (stable).
    """
    merged: "OrderedDict[str, SourceAttribution]" = OrderedDict()
    for attributions in attribution_lists:
        for item in attributions:
            existing = merged.get(item.source_path)
            if existing is None:
                merged[item.source_path] = SourceAttribution(
                    source_path=item.source_path,
                    package_name=item.package_name,
                    estimated_size_bytes=item.estimated_size_bytes,
                    line_count=item.line_count,
                    artifact_membership=set(item.artifact_membership),
                )
            else:
                existing.estimated_size_bytes += item.estimated_size_bytes
                existing.line_count += item.line_count
                existing.artifact_membership |= item.artifact_membership

    return sorted(merged.values(), key=lambda a: a.estimated_size_bytes, reverse=True)


def attribute_artifacts(
    artifacts: Iterable[OutputArtifact],
    units_by_id: Mapping[str, CompilationUnit],
    sources: Optional[Mapping[str, ArtifactSource]] = None,
    thresholds: Optional[ThresholdConfig] = None,
) -> AttributionResult:
    """Attribute every artifact's size back to original sources."""
    thresholds = thresholds or DEFAULT_THRESHOLDS
    sources = sources or {}
    result = AttributionResult()
    per_artifact: List[List[SourceAttribution]] = []

    # Membership may be recorded on either side
    members_of: Dict[str, Set[str]] = {}
    for unit in units_by_id.values():
        for name in unit.artifact_names:
            members_of.setdefault(name, set()).add(unit.id)

    for artifact in artifacts:
        source = sources.get(artifact.name)
        members = set(artifact.member_unit_ids) | members_of.get(artifact.name, set())
        known = [uid for uid in members if uid in units_by_id]
        all_known = bool(members) and len(known) == len(members)

        if all_known:
            per_artifact.append(attribute_from_units(artifact, units_by_id, members))
            result.strategies[artifact.name] = STRATEGY_UNITS
            continue

        if source is not None and source.complete:
            try:
                attributions = attribute_from_position_map(
                    source.position_map,
                    source.compiled_text,
                    artifact.size_bytes,
                    artifact.name,
                    thresholds.samples_per_line,
                )
            except PositionMapError as e:
                _warn(result, ErrorCode.BI300, str(e), artifact.name)
                result.skipped_artifacts.append(artifact.name)
                continue

            if not attributions:
                _warn(
                    result,
                    ErrorCode.BI302,
                    f"Position map for {artifact.name} resolved no original sources",
                    artifact.name,
                )
            per_artifact.append(attributions)
            result.strategies[artifact.name] = STRATEGY_POSITION_MAP
            continue

        if known:
            missing = len(members) - len(known)
            _warn(
                result,
                ErrorCode.BI101,
                f"{missing} member unit(s) of {artifact.name} are not in the unit set; "
                "attribution is partial",
                artifact.name,
            )
            per_artifact.append(attribute_from_units(artifact, units_by_id, members))
            result.strategies[artifact.name] = STRATEGY_UNITS
            continue

        if source is not None and source.partial:
            missing_part = "position map" if source.position_map is None else "compiled text"
            _warn(
                result,
                ErrorCode.BI301,
                f"Skipping attribution for {artifact.name}: {missing_part} missing",
                artifact.name,
            )
            result.skipped_artifacts.append(artifact.name)
        elif artifact.kind is ArtifactKind.CODE:
            _warn(
                result,
                ErrorCode.BI301,
                f"Skipping attribution for {artifact.name}: no unit detail or position map",
                artifact.name,
            )
            result.skipped_artifacts.append(artifact.name)
        else:
            logger.debug("No attribution input for %s; skipped", artifact.name)

    result.attributions = merge_source_attributions(per_artifact)
    return result


def _warn(result: AttributionResult, code: ErrorCode, message: str, artifact_name: str) -> None:
    warning = AnalysisWarning(code=code, message=message, context={"artifact": artifact_name})
    result.warnings.append(warning)
    log_warning(logger, warning)
