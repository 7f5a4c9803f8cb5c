"""JSON-ready conversion for snapshots and comparisons.

``to_jsonable`` flattens dataclasses, enums and sets into plain dicts, lists
and scalars. ``snapshot_from_dict`` reverses ``snapshot_to_dict`` so that a
stored snapshot can serve as a diff baseline.
"""

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from ..aggregation.models import PackageAggregate
from ..attribution.models import ArtifactSource, SourceAttribution
from ..exceptions import InvalidInputError
from ..exceptions.taxonomy import AnalysisWarning, ErrorCode
from ..graph.models import (
    CycleImpact,
    CycleReport,
    DanglingEdge,
    DependencyGraph,
    DependencyGraphNode,
    DuplicatePackage,
    NodeReason,
    PackageVersion,
)
from ..rules.models import Recommendation, RecommendationKind, Severity
from ..units.index import unit_from_path
from ..units.models import ArtifactKind, CompilationUnit, OutputArtifact, UnitKind
from ..units.paths import artifact_kind_for_name
from .models import SCHEMA_VERSION, BuildInput, KindBreakdown, Snapshot


def to_jsonable(obj: Any) -> Any:
    """Recursively convert a value tree into JSON-compatible primitives."""
    if isinstance(obj, AnalysisWarning):
        return obj.to_json()
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (set, frozenset)):
        return sorted(to_jsonable(v) for v in obj)
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    return obj


def snapshot_to_dict(snapshot: Snapshot) -> Dict[str, Any]:
    return to_jsonable(snapshot)


def comparison_to_dict(comparison: Any) -> Dict[str, Any]:
    """Comparison or NoBaseline as plain JSON data."""
    return to_jsonable(comparison)


def dumps(obj: Any, indent: Optional[int] = 2) -> str:
    return json.dumps(to_jsonable(obj), indent=indent)


# ── Loading ──────────────────────────────────────────────────────────


def artifact_from_dict(data: Dict[str, Any]) -> OutputArtifact:
    return OutputArtifact(
        name=data["name"],
        size_bytes=int(data["size_bytes"]),
        compressed_sizes={k: int(v) for k, v in data.get("compressed_sizes", {}).items()},
        kind=ArtifactKind(data.get("kind", ArtifactKind.OTHER.value)),
        member_unit_ids=set(data.get("member_unit_ids", [])),
    )


def unit_from_dict(data: Dict[str, Any]) -> CompilationUnit:
    return CompilationUnit(
        id=data["id"],
        size_bytes=int(data.get("size_bytes", 0)),
        imported_ids=list(data.get("imported_ids", [])),
        imported_by_ids=set(data.get("imported_by_ids", [])),
        package_name=data.get("package_name", "first-party"),
        kind=UnitKind(data.get("kind", UnitKind.FIRST_PARTY.value)),
        tree_shakeable=bool(data.get("tree_shakeable", True)),
        artifact_names=set(data.get("artifact_names", [])),
        compressed_sizes={k: int(v) for k, v in data.get("compressed_sizes", {}).items()},
    )


def _version_from_dict(data: Dict[str, Any]) -> PackageVersion:
    return PackageVersion(
        version=data["version"],
        size_bytes=int(data.get("size_bytes", 0)),
        unit_ids=list(data.get("unit_ids", [])),
    )


def _package_from_dict(data: Dict[str, Any]) -> PackageAggregate:
    return PackageAggregate(
        name=data["name"],
        total_size_bytes=int(data.get("total_size_bytes", 0)),
        compressed_sizes=dict(data.get("compressed_sizes", {})),
        unit_count=int(data.get("unit_count", 0)),
        artifact_membership=set(data.get("artifact_membership", [])),
        tree_shakeable=bool(data.get("tree_shakeable", True)),
        duplicate=bool(data.get("duplicate", False)),
        versions=[_version_from_dict(v) for v in data.get("versions", [])],
        percent_of_total=float(data.get("percent_of_total", 0.0)),
        first_imported_by=data.get("first_imported_by"),
    )


def _attribution_from_dict(data: Dict[str, Any]) -> SourceAttribution:
    return SourceAttribution(
        source_path=data["source_path"],
        package_name=data["package_name"],
        estimated_size_bytes=int(data["estimated_size_bytes"]),
        line_count=int(data.get("line_count", 0)),
        artifact_membership=set(data.get("artifact_membership", [])),
    )


def _warning_from_dict(data: Dict[str, Any]) -> AnalysisWarning:
    return AnalysisWarning(
        code=ErrorCode(data["code"]),
        message=data["message"],
        context=dict(data.get("context", {})),
    )


def _graph_from_dict(data: Dict[str, Any]) -> DependencyGraph:
    graph = DependencyGraph()
    for node_id, node in data.get("nodes", {}).items():
        graph.nodes[node_id] = DependencyGraphNode(
            id=node.get("id", node_id),
            imported_ids=list(node.get("imported_ids", [])),
            imported_by_ids=set(node.get("imported_by_ids", [])),
            depth=int(node.get("depth", 0)),
            reason=NodeReason(node.get("reason", NodeReason.ENTRY.value)),
            circular=bool(node.get("circular", False)),
            circular_chain=list(node.get("circular_chain", [])),
        )
    graph.cycles = [
        CycleReport(chain=list(c["chain"]), impact=CycleImpact(c.get("impact", "warning")))
        for c in data.get("cycles", [])
    ]
    graph.duplicates = [
        DuplicatePackage(
            package=d["package"], versions=[_version_from_dict(v) for v in d.get("versions", [])]
        )
        for d in data.get("duplicates", [])
    ]
    graph.dangling_edges = [
        DanglingEdge(source_id=e["source_id"], target_id=e["target_id"])
        for e in data.get("dangling_edges", [])
    ]
    graph.unreachable_ids = list(data.get("unreachable_ids", []))
    graph.warnings = [_warning_from_dict(w) for w in data.get("warnings", [])]
    return graph


def _recommendation_from_dict(data: Dict[str, Any]) -> Recommendation:
    return Recommendation(
        kind=RecommendationKind(data["kind"]),
        severity=Severity(data["severity"]),
        message=data["message"],
        action=data["action"],
        potential_savings_bytes=data.get("potential_savings_bytes"),
        affected_packages=list(data.get("affected_packages", [])),
        example=data.get("example"),
    )


def _optional_list(data: Dict[str, Any], key: str, loader) -> Optional[List[Any]]:
    value = data.get(key)
    if value is None:
        return None
    return [loader(item) for item in value]


def snapshot_from_dict(data: Dict[str, Any]) -> Snapshot:
    """Rebuild a Snapshot from ``snapshot_to_dict`` output.

    Raises:
        InvalidInputError: If required keys are missing or have the wrong type.
    """
    try:
        artifacts = [artifact_from_dict(a) for a in data.get("artifacts", [])]
        by_kind = KindBreakdown(**data.get("by_kind", {}))
        graph = _graph_from_dict(data["graph"]) if data.get("graph") is not None else None
        return Snapshot(
            timestamp=data.get("timestamp", ""),
            commit=data.get("commit", "unknown"),
            branch=data.get("branch", "unknown"),
            build_duration_ms=float(data.get("build_duration_ms", 0.0)),
            tool_version=data.get("tool_version", ""),
            schema_version=int(data.get("schema_version", SCHEMA_VERSION)),
            artifacts=artifacts,
            total_size_bytes=int(data.get("total_size_bytes", sum(a.size_bytes for a in artifacts))),
            total_compressed_sizes={
                k: int(v) for k, v in data.get("total_compressed_sizes", {}).items()
            },
            by_kind=by_kind,
            units=_optional_list(data, "units", unit_from_dict),
            packages=_optional_list(data, "packages", _package_from_dict),
            graph=graph,
            attributions=_optional_list(data, "attributions", _attribution_from_dict),
            warnings=list(data.get("warnings", [])),
            recommendations=[_recommendation_from_dict(r) for r in data.get("recommendations", [])],
            degradations=[_warning_from_dict(w) for w in data.get("degradations", [])],
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidInputError("snapshot", f"cannot load snapshot: {e}")


def loads_snapshot(text: str) -> Snapshot:
    try:
        data = json.loads(text)
    except ValueError as e:
        raise InvalidInputError("snapshot", f"invalid JSON: {e}")
    if not isinstance(data, dict):
        raise InvalidInputError("snapshot", "expected a JSON object")
    return snapshot_from_dict(data)


# ── Build description ────────────────────────────────────────────────


def build_artifact_from_dict(data: Dict[str, Any]) -> OutputArtifact:
    """Artifact from a build description; kind inferred from the name if absent."""
    if "kind" not in data:
        data = dict(data, kind=artifact_kind_for_name(data["name"]).value)
    return artifact_from_dict(data)


def build_unit_from_dict(data: Dict[str, Any]) -> CompilationUnit:
    """Unit from a build description; package and kind derived from the id if absent."""
    if "package_name" in data and "kind" in data:
        return unit_from_dict(data)
    unit = unit_from_path(
        data["id"],
        int(data.get("size_bytes", 0)),
        imported_ids=data.get("imported_ids", []),
        artifact_names=data.get("artifact_names", []),
        tree_shakeable=data.get("tree_shakeable"),
    )
    unit.compressed_sizes = {k: int(v) for k, v in data.get("compressed_sizes", {}).items()}
    return unit


def build_input_from_dict(
    data: Dict[str, Any], sources: Optional[Dict[str, ArtifactSource]] = None
) -> BuildInput:
    """BuildInput from a JSON build description.

    Raises:
        InvalidInputError: If required keys are missing or have the wrong type.
    """
    try:
        artifacts = [build_artifact_from_dict(a) for a in data["artifacts"]]
        units = data.get("units")
        return BuildInput(
            artifacts=artifacts,
            units=[build_unit_from_dict(u) for u in units] if units is not None else None,
            sources=sources or {},
            commit=data.get("commit", "unknown"),
            branch=data.get("branch", "unknown"),
            build_duration_ms=float(data.get("build_duration_ms", 0.0)),
            timestamp=data.get("timestamp"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidInputError("build", f"cannot load build description: {e}")
