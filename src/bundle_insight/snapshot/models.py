"""Data models for build snapshots — immutable records of a single build."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..aggregation.models import PackageAggregate
from ..attribution.models import ArtifactSource, SourceAttribution
from ..exceptions.taxonomy import AnalysisWarning
from ..graph.models import DependencyGraph
from ..rules.models import Recommendation
from ..units.models import CompilationUnit, OutputArtifact

SCHEMA_VERSION = 1


@dataclass
class KindBreakdown:
    """Artifact bytes per kind; assets split into images and fonts."""

    code: int = 0
    style: int = 0
    images: int = 0
    fonts: int = 0
    markup: int = 0
    other: int = 0


@dataclass
class BuildInput:
    """Already-loaded build metadata for one analysis run.

    ``units`` may be None when the build tool gave no unit-level detail;
    graph and unit-based attribution are then skipped. ``sources`` maps an
    artifact name to its compiled text and position map.
    """

    artifacts: List[OutputArtifact]
    units: Optional[List[CompilationUnit]] = None
    sources: Dict[str, ArtifactSource] = field(default_factory=dict)
    commit: str = "unknown"
    branch: str = "unknown"
    build_duration_ms: float = 0.0
    timestamp: Optional[str] = None  # ISO-8601, defaults to capture time


@dataclass(frozen=True)
class Snapshot:
    """Complete, immutable record of one build's metrics.

    Every field is a plain value or a collection of plain values so the
    snapshot can be serialised to JSON by whatever storage layer the caller
    uses.
    """

    # ── Metadata ──────────────────────────────────────────────────
    timestamp: str
    commit: str = "unknown"
    branch: str = "unknown"
    build_duration_ms: float = 0.0
    tool_version: str = ""
    schema_version: int = SCHEMA_VERSION

    # ── Artifacts and totals ──────────────────────────────────────
    artifacts: List[OutputArtifact] = field(default_factory=list)
    total_size_bytes: int = 0
    total_compressed_sizes: Dict[str, int] = field(default_factory=dict)
    by_kind: KindBreakdown = field(default_factory=KindBreakdown)

    # ── Optional detail ───────────────────────────────────────────
    units: Optional[List[CompilationUnit]] = None
    packages: Optional[List[PackageAggregate]] = None
    graph: Optional[DependencyGraph] = None
    attributions: Optional[List[SourceAttribution]] = None

    # ── Hints and degradations ────────────────────────────────────
    warnings: List[str] = field(default_factory=list)
    recommendations: List[Recommendation] = field(default_factory=list)
    degradations: List[AnalysisWarning] = field(default_factory=list)

    @property
    def artifact_count(self) -> int:
        return len(self.artifacts)

    def artifact(self, name: str) -> Optional[OutputArtifact]:
        for artifact in self.artifacts:
            if artifact.name == name:
                return artifact
        return None
