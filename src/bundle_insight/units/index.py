"""Back-reference index over compilation units.

``imported_by_ids`` is derived state: the inverse of every unit's
``imported_ids``. These helpers are the only code that writes it.
"""

from typing import Dict, Iterable, List, Optional

from .models import CompilationUnit
from .paths import classify_unit_kind, extract_package_name, is_tree_shakeable


def link_units(units: Iterable[CompilationUnit]) -> Dict[str, CompilationUnit]:
    """Rebuild every unit's ``imported_by_ids`` from scratch.

    Import targets that are not in the unit set are left alone; the graph
    builder reports them as dangling edges.

    Returns:
        Units keyed by id, in input order.
    """
    by_id: Dict[str, CompilationUnit] = {}
    for unit in units:
        by_id[unit.id] = unit
        unit.imported_by_ids = set()

    for unit in by_id.values():
        for target_id in unit.imported_ids:
            target = by_id.get(target_id)
            if target is not None:
                target.imported_by_ids.add(unit.id)

    return by_id


def add_unit(units_by_id: Dict[str, CompilationUnit], unit: CompilationUnit) -> None:
    """Insert a unit and synchronise back-references in both directions.

    Raises:
        ValueError: If a unit with the same id is already present.
    """
    if unit.id in units_by_id:
        raise ValueError(f"duplicate compilation unit id: {unit.id}")

    units_by_id[unit.id] = unit
    unit.imported_by_ids = {
        other.id for other in units_by_id.values() if unit.id in other.imported_ids
    }

    for target_id in unit.imported_ids:
        target = units_by_id.get(target_id)
        if target is not None:
            target.imported_by_ids.add(unit.id)


def set_imports(
    units_by_id: Dict[str, CompilationUnit], unit_id: str, imported_ids: List[str]
) -> None:
    """Replace a unit's imports, keeping back-references consistent."""
    unit = units_by_id[unit_id]

    for old_id in set(unit.imported_ids) - set(imported_ids):
        target = units_by_id.get(old_id)
        if target is not None:
            target.imported_by_ids.discard(unit_id)

    unit.imported_ids = list(imported_ids)
    for target_id in unit.imported_ids:
        target = units_by_id.get(target_id)
        if target is not None:
            target.imported_by_ids.add(unit_id)


def is_consistent(units_by_id: Dict[str, CompilationUnit]) -> bool:
    """True when every ``imported_by_ids`` is exactly the inverse of imports."""
    expected: Dict[str, set] = {uid: set() for uid in units_by_id}
    for unit in units_by_id.values():
        for target_id in unit.imported_ids:
            if target_id in expected:
                expected[target_id].add(unit.id)
    return all(units_by_id[uid].imported_by_ids == ids for uid, ids in expected.items())


def unit_from_path(
    path: str,
    size_bytes: int,
    imported_ids: Optional[List[str]] = None,
    artifact_names: Optional[Iterable[str]] = None,
    tree_shakeable: Optional[bool] = None,
) -> CompilationUnit:
    """Build a unit whose package, kind and tree-shakeability come from its path."""
    return CompilationUnit(
        id=path,
        size_bytes=size_bytes,
        imported_ids=list(imported_ids or []),
        package_name=extract_package_name(path),
        kind=classify_unit_kind(path),
        tree_shakeable=is_tree_shakeable(path) if tree_shakeable is None else tree_shakeable,
        artifact_names=set(artifact_names or ()),
    )
