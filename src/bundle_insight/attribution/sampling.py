"""Position-map sampling: estimate per-source size in minified output.

For each compiled line, up to ``samples_per_line`` evenly spaced columns are
resolved through the position map to an original ``(source, line)``. Each
source accumulates the *set* of original lines it touched; repeated hits on
one original line count once. After the scan::

    bytes_per_line = artifact_bytes / compiled_line_count
    estimate(source) = round(distinct_lines(source) * bytes_per_line)

Known imprecision, kept on purpose: a source whose code was eliminated
touches no lines and gets no estimate, and estimates do not sum to the
artifact size. They are not renormalised.
"""

import json
from typing import Dict, List, Set

import sourcemap
from sourcemap.exceptions import SourceMapDecodeError

from ..exceptions import PositionMapError
from ..sizes import round_half_up
from ..units.paths import clean_source_path, extract_package_name
from .models import PositionMap, SourceAttribution


def decode_position_map(position_map: PositionMap, artifact_name: str):
    """Decode a standard (v3) position map into a lookup index.

    Raises:
        PositionMapError: If the payload is not a decodable v3 map.
    """
    try:
        if isinstance(position_map, (str, bytes)):
            payload = json.loads(position_map)
        else:
            payload = dict(position_map)
    except (TypeError, ValueError) as e:
        raise PositionMapError(artifact_name, f"invalid JSON: {e}")

    if not isinstance(payload, dict):
        raise PositionMapError(artifact_name, "payload is not an object")
    if "sections" in payload:
        raise PositionMapError(artifact_name, "indexed maps with sections are not supported")
    if not isinstance(payload.get("sources"), list) or not isinstance(payload.get("mappings"), str):
        raise PositionMapError(artifact_name, "missing 'sources' or 'mappings'")

    payload.setdefault("names", [])
    if not all(isinstance(s, str) for s in payload["sources"]):
        raise PositionMapError(artifact_name, "'sources' entries must be strings")
    source_root = payload.pop("sourceRoot", None)
    if source_root:
        root = str(source_root).rstrip("/")
        payload["sources"] = [f"{root}/{s}" if s else s for s in payload["sources"]]

    try:
        return sourcemap.loads(json.dumps(payload))
    except SourceMapDecodeError as e:
        raise PositionMapError(artifact_name, str(e) or type(e).__name__)
    except Exception as e:
        # The decoder's own assertion handling can surface as AttributeError
        raise PositionMapError(artifact_name, f"{type(e).__name__}: {e}")


def sample_columns(line_length: int, samples_per_line: int = 10) -> range:
    """Evenly spaced columns, at most ``samples_per_line`` of them."""
    step = max(1, line_length // samples_per_line)
    return range(0, line_length, step)[:samples_per_line]


def collect_touched_lines(index, compiled_text: str, samples_per_line: int = 10) -> Dict[str, Set[int]]:
    """Distinct original line numbers touched per source, in first-hit order."""
    touched: Dict[str, Set[int]] = {}

    for line_no, line in enumerate(compiled_text.split("\n")):
        if not line.strip():
            continue
        for column in sample_columns(len(line), samples_per_line):
            try:
                token = index.lookup(line_no, column)
            except IndexError:
                # No mapping at or before this column
                continue
            if not token.src:
                continue
            touched.setdefault(token.src, set()).add(token.src_line)

    return touched


def attribute_from_position_map(
    position_map: PositionMap,
    compiled_text: str,
    size_bytes: int,
    artifact_name: str,
    samples_per_line: int = 10,
) -> List[SourceAttribution]:
    """Estimate how many of an artifact's bytes each original source produced.

    Raises:
        PositionMapError: If the position map cannot be decoded.
    """
    index = decode_position_map(position_map, artifact_name)
    touched = collect_touched_lines(index, compiled_text, samples_per_line)

    total_lines = len(compiled_text.split("\n"))
    bytes_per_line = size_bytes / total_lines

    results: List[SourceAttribution] = []
    for source, lines in touched.items():
        path = clean_source_path(source)
        results.append(
            SourceAttribution(
                source_path=path,
                package_name=extract_package_name(path),
                estimated_size_bytes=round_half_up(len(lines) * bytes_per_line),
                line_count=len(lines),
                artifact_membership={artifact_name},
            )
        )

    results.sort(key=lambda a: a.estimated_size_bytes, reverse=True)
    return results
