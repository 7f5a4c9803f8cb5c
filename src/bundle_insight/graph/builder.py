"""Build the unit dependency graph from compilation units.

The forward edges (``imported_ids``) are the source of truth. Importers are
re-derived here rather than read from ``imported_by_ids``, so a stale
back-reference index cannot skew depth or entry detection.
"""

from typing import Dict, Iterable, List, Optional

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..exceptions.taxonomy import AnalysisWarning, ErrorCode
from ..logging_config import get_logger, log_warning
from ..units.models import CompilationUnit
from .algorithms import compute_depths, find_cycles, find_duplicate_packages
from .models import DanglingEdge, DependencyGraph, DependencyGraphNode, NodeReason

logger = get_logger(__name__)


def build_dependency_graph(
    units: Iterable[CompilationUnit],
    thresholds: Optional[ThresholdConfig] = None,
) -> DependencyGraph:
    """Build a DependencyGraph over one snapshot's units.

    Imports that name a unit outside the set are dropped from traversal and
    recorded as dangling edges. Units in a cycle that no entry node reaches
    keep depth 0 and are listed in ``unreachable_ids``.
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    unit_list = list(units)
    known = {u.id for u in unit_list}

    adjacency: Dict[str, List[str]] = {}
    reverse: Dict[str, set] = {u.id: set() for u in unit_list}
    dangling: List[DanglingEdge] = []

    for unit in unit_list:
        targets: List[str] = []
        for target_id in unit.imported_ids:
            if target_id not in known:
                dangling.append(DanglingEdge(source_id=unit.id, target_id=target_id))
                continue
            if target_id not in targets:
                targets.append(target_id)
            reverse[target_id].add(unit.id)
        adjacency[unit.id] = targets

    entry_ids = [u.id for u in unit_list if not reverse[u.id]]
    depths = compute_depths(adjacency, entry_ids)
    entries = set(entry_ids)

    graph = DependencyGraph(dangling_edges=dangling)
    for unit in unit_list:
        graph.nodes[unit.id] = DependencyGraphNode(
            id=unit.id,
            imported_ids=adjacency[unit.id],
            imported_by_ids=reverse[unit.id],
            depth=depths.get(unit.id, 0),
            reason=NodeReason.ENTRY if unit.id in entries else NodeReason.STATIC_IMPORT,
        )
        if unit.id not in depths:
            graph.unreachable_ids.append(unit.id)

    graph.cycles = find_cycles(adjacency, adjacency.keys(), thresholds.cycle_error_length)
    for cycle in graph.cycles:
        for node_id in cycle.chain:
            node = graph.nodes[node_id]
            node.circular = True
            node.circular_chain = cycle.chain

    graph.duplicates = find_duplicate_packages(unit_list)

    _record_data_quality(graph)

    logger.debug(
        "Built dependency graph: %d nodes, %d entries, %d cycles, %d duplicate packages",
        len(graph.nodes),
        len(entry_ids),
        len(graph.cycles),
        len(graph.duplicates),
    )
    return graph


def _record_data_quality(graph: DependencyGraph) -> None:
    if graph.dangling_edges:
        sample = graph.dangling_edges[0]
        warning = AnalysisWarning(
            code=ErrorCode.BI200,
            message=(
                f"{len(graph.dangling_edges)} import(s) reference units outside the unit set "
                f"(e.g. {sample.source_id} -> {sample.target_id})"
            ),
            context={"count": len(graph.dangling_edges)},
        )
        graph.warnings.append(warning)
        log_warning(logger, warning)

    if graph.unreachable_ids:
        warning = AnalysisWarning(
            code=ErrorCode.BI202,
            message=f"{len(graph.unreachable_ids)} unit(s) are not reachable from any entry",
            context={"count": len(graph.unreachable_ids)},
        )
        graph.warnings.append(warning)
        log_warning(logger, warning)
