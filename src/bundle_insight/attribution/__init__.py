"""Source attribution: which original files produced an artifact's bytes."""

from .engine import (
    attribute_artifacts,
    attribute_from_units,
    merge_source_attributions,
    package_sizes,
)
from .models import ArtifactSource, AttributionResult, SourceAttribution
from .sampling import attribute_from_position_map, decode_position_map

__all__ = [
    "ArtifactSource",
    "AttributionResult",
    "SourceAttribution",
    "attribute_artifacts",
    "attribute_from_position_map",
    "attribute_from_units",
    "decode_position_map",
    "merge_source_attributions",
    "package_sizes",
]
