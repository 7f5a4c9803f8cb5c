"""Data models for build input — compilation units and emitted artifacts.

Both are constructed once per analysis run from already-loaded build metadata
and are treated as read-only afterwards. The only derived field is
``CompilationUnit.imported_by_ids``, which is maintained by ``units.index``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Set

FIRST_PARTY = "first-party"
VENDOR_RUNTIME = "vendor-runtime"
UNKNOWN_VERSION = "unknown"


class UnitKind(Enum):
    """Where a compilation unit's code comes from."""

    FIRST_PARTY = "first-party"
    LIBRARY = "library"
    VENDOR_RUNTIME = "vendor-runtime"


class ArtifactKind(Enum):
    """What kind of file an output artifact is."""

    CODE = "code"
    STYLE = "style"
    ASSET = "asset"
    MARKUP = "markup"
    OTHER = "other"


@dataclass
class CompilationUnit:
    """One source-level unit of code tracked before bundling.

    ``imported_by_ids`` is a back-reference index: it must always be the
    exact inverse of every other unit's ``imported_ids``. Never edit it by
    hand; use ``link_units`` / ``add_unit`` / ``set_imports``.
    """

    id: str
    size_bytes: int = 0
    imported_ids: List[str] = field(default_factory=list)
    imported_by_ids: Set[str] = field(default_factory=set)
    package_name: str = FIRST_PARTY
    kind: UnitKind = UnitKind.FIRST_PARTY
    tree_shakeable: bool = True

    # Artifacts this unit was emitted into
    artifact_names: Set[str] = field(default_factory=set)
    # Optional per-unit compressed estimates reported by the build tool
    compressed_sizes: Dict[str, int] = field(default_factory=dict)


@dataclass
class OutputArtifact:
    """One emitted file.

    ``size_bytes`` is ground truth. Sums over member units are an estimate
    and need not match it (shared runtime glue, dead-code elimination).
    """

    name: str
    size_bytes: int
    compressed_sizes: Dict[str, int] = field(default_factory=dict)
    kind: ArtifactKind = ArtifactKind.OTHER
    member_unit_ids: Set[str] = field(default_factory=set)

    def compressed(self, algorithm: str) -> int:
        """Compressed size for one algorithm, 0 when not measured."""
        return self.compressed_sizes.get(algorithm, 0)
