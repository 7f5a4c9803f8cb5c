"""
Bundle Insight - Build Artifact Size Analysis

Turns the metadata a frontend build already produces (emitted files,
compiled modules, position maps) into size snapshots: per-package weight,
dependency cycles, duplicate library versions, and a diff against a
previous build with actionable insights.
"""

__version__ = "0.1.0"

from .diff import Comparison, NoBaseline, compare_snapshots
from .snapshot import BuildInput, Snapshot, capture_snapshot
from .units import CompilationUnit, OutputArtifact

# One-call entry point: build metadata in, snapshot out
analyze_build = capture_snapshot

__all__ = [
    "analyze_build",  # Main entry point
    "compare_snapshots",
    "BuildInput",
    "CompilationUnit",
    "Comparison",
    "NoBaseline",
    "OutputArtifact",
    "Snapshot",
    "capture_snapshot",
]
