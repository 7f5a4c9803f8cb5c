"""Tests for units/index.py - back-reference maintenance."""

import pytest

from bundle_insight.units import (
    CompilationUnit,
    UnitKind,
    add_unit,
    is_consistent,
    link_units,
    set_imports,
    unit_from_path,
)


def _unit(uid, imports=()):
    return CompilationUnit(id=uid, size_bytes=10, imported_ids=list(imports))


class TestLinkUnits:
    def test_builds_inverse_index(self):
        units = link_units([_unit("a", ["b", "c"]), _unit("b", ["c"]), _unit("c")])

        assert units["a"].imported_by_ids == set()
        assert units["b"].imported_by_ids == {"a"}
        assert units["c"].imported_by_ids == {"a", "b"}
        assert is_consistent(units)

    def test_discards_stale_back_references(self):
        stale = _unit("b")
        stale.imported_by_ids = {"ghost"}
        units = link_units([_unit("a", ["b"]), stale])
        assert units["b"].imported_by_ids == {"a"}

    def test_ignores_targets_outside_the_set(self):
        units = link_units([_unit("a", ["missing"])])
        assert is_consistent(units)
        assert "missing" not in units


class TestIncrementalUpdates:
    def test_add_unit_links_both_directions(self):
        units = link_units([_unit("a", ["b"])])
        add_unit(units, _unit("b", ["a"]))

        assert units["b"].imported_by_ids == {"a"}
        assert units["a"].imported_by_ids == {"b"}
        assert is_consistent(units)

    def test_add_unit_rejects_duplicate_id(self):
        units = link_units([_unit("a")])
        with pytest.raises(ValueError):
            add_unit(units, _unit("a"))

    def test_set_imports_moves_back_references(self):
        units = link_units([_unit("a", ["b"]), _unit("b"), _unit("c")])
        set_imports(units, "a", ["c"])

        assert units["b"].imported_by_ids == set()
        assert units["c"].imported_by_ids == {"a"}
        assert is_consistent(units)

    def test_inconsistency_detected(self):
        units = link_units([_unit("a", ["b"]), _unit("b")])
        units["b"].imported_by_ids.clear()
        assert not is_consistent(units)


class TestUnitFromPath:
    def test_library_unit(self):
        unit = unit_from_path("node_modules/moment/moment.js", 500, artifact_names=["vendor.js"])

        assert unit.package_name == "moment"
        assert unit.kind is UnitKind.LIBRARY
        assert not unit.tree_shakeable
        assert unit.artifact_names == {"vendor.js"}

    def test_explicit_tree_shakeable_wins(self):
        unit = unit_from_path("node_modules/moment/moment.js", 500, tree_shakeable=True)
        assert unit.tree_shakeable
