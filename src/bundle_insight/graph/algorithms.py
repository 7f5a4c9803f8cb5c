"""Graph algorithms: entry depth, cycle detection, duplicate packages."""

from collections import deque
from typing import Dict, Iterable, List, Set

from ..exceptions.taxonomy import ErrorCode
from ..logging_config import get_logger
from ..units.models import UNKNOWN_VERSION, CompilationUnit, UnitKind
from ..units.paths import extract_version
from .models import CycleImpact, CycleReport, DuplicatePackage, PackageVersion, cycle_key

logger = get_logger(__name__)


def compute_depths(adjacency: Dict[str, List[str]], entry_ids: Iterable[str]) -> Dict[str, int]:
    """Minimum import distance from any entry node (multi-source BFS).

    All entries are seeded at depth 0 together, so each node keeps the first
    depth at which it is reached. Nodes unreachable from every entry are
    absent from the result.
    """
    depth: Dict[str, int] = {}
    queue: deque[str] = deque()

    for entry in entry_ids:
        if entry not in depth:
            depth[entry] = 0
            queue.append(entry)

    while queue:
        node = queue.popleft()
        next_depth = depth[node] + 1
        for neighbor in adjacency.get(node, []):
            if neighbor not in depth:
                depth[neighbor] = next_depth
                queue.append(neighbor)

    return depth


def tarjan_scc(adjacency: Dict[str, List[str]], nodes: Iterable[str]) -> List[Set[str]]:
    """Tarjan's algorithm for strongly connected components (iterative).

    Uses an explicit call stack to avoid Python recursion limits on deep
    import chains. Edges to nodes outside ``nodes`` are ignored.
    """
    node_list = list(nodes)
    known = set(node_list)
    counter = 0
    scc_stack: List[str] = []
    on_stack: Set[str] = set()
    index: Dict[str, int] = {}
    lowlink: Dict[str, int] = {}
    result: List[Set[str]] = []

    for root in node_list:
        if root in index:
            continue

        index[root] = lowlink[root] = counter
        counter += 1
        scc_stack.append(root)
        on_stack.add(root)
        call_stack: list[tuple] = [
            (root, iter([w for w in adjacency.get(root, []) if w in known]))
        ]

        while call_stack:
            v, it = call_stack[-1]
            pushed = False
            for w in it:
                if w not in index:
                    index[w] = lowlink[w] = counter
                    counter += 1
                    scc_stack.append(w)
                    on_stack.add(w)
                    call_stack.append((w, iter([n for n in adjacency.get(w, []) if n in known])))
                    pushed = True
                    break
                elif w in on_stack:
                    lowlink[v] = min(lowlink[v], index[w])

            if not pushed:
                call_stack.pop()
                if call_stack:
                    caller = call_stack[-1][0]
                    lowlink[caller] = min(lowlink[caller], lowlink[v])

                if lowlink[v] == index[v]:
                    component: Set[str] = set()
                    while True:
                        w = scc_stack.pop()
                        on_stack.discard(w)
                        component.add(w)
                        if w == v:
                            break
                    result.append(component)

    return result


def find_cycles(
    adjacency: Dict[str, List[str]],
    nodes: Iterable[str],
    error_length: int = 5,
) -> List[CycleReport]:
    """Circular import chains via depth-first search (iterative).

    Only strongly connected components that contain a cycle are searched.
    Inside one, a DFS with its own visited set starts from every member no
    reported cycle has covered yet; when an edge points at a node still on
    the path, the path slice from that node is a cycle. A root always closes
    at least one cycle through itself, so every member of a cyclic component
    ends up in some reported chain. Cycles are deduplicated on their sorted
    member ids, so the same ring reached from a different start is reported
    once. A self-import is a one-node cycle.
    """
    node_list = list(nodes)
    component_of: Dict[str, Set[str]] = {}
    for component in tarjan_scc(adjacency, node_list):
        if len(component) > 1:
            for node in component:
                component_of[node] = component
        else:
            (node,) = component
            if node in adjacency.get(node, []):
                component_of[node] = component

    cycles: List[CycleReport] = []
    seen: set[str] = set()
    covered: set[str] = set()

    for root in node_list:
        if root in covered or root not in component_of:
            continue

        component = component_of[root]
        visited: set[str] = {root}
        path: List[str] = [root]
        position: Dict[str, int] = {root: 0}
        call_stack: list[tuple] = [(root, iter(adjacency.get(root, [])))]

        while call_stack:
            v, it = call_stack[-1]
            pushed = False
            for w in it:
                if w in position:
                    chain = path[position[w]:]
                    key = cycle_key(chain)
                    if key not in seen:
                        seen.add(key)
                        covered.update(chain)
                        impact = CycleImpact.ERROR if len(chain) > error_length else CycleImpact.WARNING
                        cycles.append(CycleReport(chain=list(chain), impact=impact))
                elif w not in visited and w in component:
                    visited.add(w)
                    position[w] = len(path)
                    path.append(w)
                    call_stack.append((w, iter(adjacency.get(w, []))))
                    pushed = True
                    break

            if not pushed:
                call_stack.pop()
                path.pop()
                del position[v]

    return cycles


def group_package_versions(units: Iterable[CompilationUnit]) -> Dict[str, Dict[str, PackageVersion]]:
    """Library units grouped by package, then by embedded version.

    Packages and versions keep first-encounter order.
    """
    groups: Dict[str, Dict[str, PackageVersion]] = {}
    for unit in units:
        if unit.kind is not UnitKind.LIBRARY:
            continue
        version = extract_version(unit.id)
        if version == UNKNOWN_VERSION:
            logger.debug("[%s] No version in %s", ErrorCode.BI201.value, unit.id)
        versions = groups.setdefault(unit.package_name, {})
        entry = versions.get(version)
        if entry is None:
            entry = versions[version] = PackageVersion(version=version)
        entry.size_bytes += unit.size_bytes
        entry.unit_ids.append(unit.id)
    return groups


def find_duplicate_packages(units: Iterable[CompilationUnit]) -> List[DuplicatePackage]:
    """Packages present at more than one version group.

    Two groups of identical size are still two groups: duplication is about
    version plurality, not size difference.
    """
    return [
        DuplicatePackage(package=package, versions=list(versions.values()))
        for package, versions in group_package_versions(units).items()
        if len(versions) > 1
    ]
