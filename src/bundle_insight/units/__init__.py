"""Compilation-unit model: units, artifacts, and path conventions."""

from .index import add_unit, is_consistent, link_units, set_imports, unit_from_path
from .models import (
    FIRST_PARTY,
    UNKNOWN_VERSION,
    VENDOR_RUNTIME,
    ArtifactKind,
    CompilationUnit,
    OutputArtifact,
    UnitKind,
)
from .paths import (
    artifact_kind_for_name,
    classify_unit_kind,
    clean_source_path,
    extract_package_name,
    extract_version,
    is_tree_shakeable,
)

__all__ = [
    "FIRST_PARTY",
    "UNKNOWN_VERSION",
    "VENDOR_RUNTIME",
    "ArtifactKind",
    "CompilationUnit",
    "OutputArtifact",
    "UnitKind",
    "add_unit",
    "artifact_kind_for_name",
    "classify_unit_kind",
    "clean_source_path",
    "extract_package_name",
    "extract_version",
    "is_consistent",
    "is_tree_shakeable",
    "link_units",
    "set_imports",
    "unit_from_path",
]
