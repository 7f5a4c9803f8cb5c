"""Data models for source attribution."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Union

from ..exceptions.taxonomy import AnalysisWarning

PositionMap = Union[str, bytes, Dict[str, Any]]


@dataclass
class SourceAttribution:
    """Estimated share of compiled output that came from one original file.

    ``line_count`` is the number of distinct original lines that survived
    into the output, not the file's total line count.
    """

    source_path: str
    package_name: str
    estimated_size_bytes: int
    line_count: int = 0
    artifact_membership: Set[str] = field(default_factory=set)


@dataclass
class ArtifactSource:
    """Compiled text and position map for one artifact.

    Both are needed for sampling; either alone disables attribution for the
    artifact.
    """

    artifact_name: str
    position_map: Optional[PositionMap] = None
    compiled_text: Optional[str] = None

    @property
    def complete(self) -> bool:
        return self.position_map is not None and self.compiled_text is not None

    @property
    def partial(self) -> bool:
        return (self.position_map is None) != (self.compiled_text is None)


@dataclass
class AttributionResult:
    """Attributions for a whole build plus any per-artifact degradations."""

    attributions: List[SourceAttribution] = field(default_factory=list)
    warnings: List[AnalysisWarning] = field(default_factory=list)
    skipped_artifacts: List[str] = field(default_factory=list)
    # artifact name -> "units" | "position-map"
    strategies: Dict[str, str] = field(default_factory=dict)
