"""Shared CLI helpers: console, config resolution, and file loading."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console

from ..attribution.models import ArtifactSource
from ..config import AnalysisConfig, load_config
from ..exceptions import InvalidInputError
from ..snapshot.models import BuildInput, Snapshot
from ..snapshot.serialization import build_input_from_dict, loads_snapshot

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    verbose: bool = False,
    quiet: bool = False,
    no_measure: bool = False,
) -> AnalysisConfig:
    """Build config from CLI options."""
    overrides: Dict[str, Any] = {}
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    if no_measure:
        overrides["measure_compression"] = False
    return load_config(config_file=config, **overrides)


def _read_text(path: Path, field: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidInputError(field, f"cannot read {path}: {e.strerror}", str(path))


def _read_json(path: Path, field: str) -> Any:
    text = _read_text(path, field)
    try:
        return json.loads(text)
    except ValueError as e:
        raise InvalidInputError(field, f"invalid JSON in {path}: {e}")


def _load_sources(entries: Dict[str, Any], base_dir: Path) -> Dict[str, ArtifactSource]:
    """Read per-artifact map/text files named in the build description.

    A file that is named but missing on disk is treated as absent, so the
    artifact degrades instead of failing the whole run.
    """
    sources: Dict[str, ArtifactSource] = {}
    for name, entry in entries.items():
        position_map = None
        compiled_text = None
        if entry.get("map"):
            map_path = base_dir / entry["map"]
            if map_path.exists():
                position_map = _read_text(map_path, f"sources[{name}].map")
        if entry.get("text"):
            text_path = base_dir / entry["text"]
            if text_path.exists():
                compiled_text = _read_text(text_path, f"sources[{name}].text")
        sources[name] = ArtifactSource(
            artifact_name=name, position_map=position_map, compiled_text=compiled_text
        )
    return sources


def load_build(path: Path) -> BuildInput:
    """Load a build description JSON, resolving source files next to it."""
    data = _read_json(path, "build")
    if not isinstance(data, dict):
        raise InvalidInputError("build", "expected a JSON object")
    sources = _load_sources(data.get("sources") or {}, path.parent)
    return build_input_from_dict(data, sources)


def load_snapshot_file(path: Path) -> Snapshot:
    return loads_snapshot(_read_text(path, "snapshot"))
