"""Per-package rollup model."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ..graph.models import PackageVersion


@dataclass
class PackageAggregate:
    """Everything one package contributes to a build.

    ``percent_of_total`` is measured against the sum of artifact sizes, which
    need not equal the sum of package totals.
    """

    name: str
    total_size_bytes: int = 0
    compressed_sizes: Dict[str, int] = field(default_factory=dict)
    unit_count: int = 0
    artifact_membership: Set[str] = field(default_factory=set)
    tree_shakeable: bool = True
    duplicate: bool = False
    versions: List[PackageVersion] = field(default_factory=list)
    percent_of_total: float = 0.0
    first_imported_by: Optional[str] = None
