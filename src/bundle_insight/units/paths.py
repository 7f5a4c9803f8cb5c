"""Path conventions: package, version and kind from a module or source path.

Recognised layouts::

    node_modules/react/index.js                          -> react
    node_modules/@scope/pkg/lib/a.js                     -> @scope/pkg
    node_modules/lodash@4.17.21/lodash.js                -> lodash  (version 4.17.21)
    node_modules/.pnpm/react@18.0.0/node_modules/react/  -> react   (version 18.0.0)
    node_modules/.vite/deps/react-dom_client.js          -> react-dom
    webpack/runtime/..., \\0virtual, virtual:...          -> vendor-runtime
    anything else                                        -> first-party
"""

import re
from typing import Optional

from .models import FIRST_PARTY, UNKNOWN_VERSION, VENDOR_RUNTIME, ArtifactKind, UnitKind

LIBRARY_MARKER = "node_modules/"
RUNTIME_PREFIXES = ("\0", "virtual:", "webpack/", "(webpack)/", "vite/")

# Prebundle cache directories nest a flat "deps" folder below the cache segment
_CACHE_SUBDIRS = frozenset({"deps", "deps_ssr", "deps_temp"})

_PACKAGE_RE = re.compile(r"(@[^/]+/[^/@]+|[^/@]+)")
_VERSION_RE = re.compile(r"(@[^/]+/[^/@]+|[^/@.][^/@]*)@([^/]+)")
_STAGED_VERSION_RE = re.compile(r"\.pnpm/(@[^/+]+\+[^/@]+|[^/@]+)@([^/_]+)")

_IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".ico", ".avif"})
_FONT_EXTENSIONS = frozenset({".woff", ".woff2", ".ttf", ".eot", ".otf"})


def normalize_path(path: str) -> str:
    return path.replace("\\", "/")


def is_runtime_path(path: str) -> bool:
    return normalize_path(path).startswith(RUNTIME_PREFIXES)


def classify_unit_kind(path: str) -> UnitKind:
    """Classify a unit as library, vendor runtime or first-party code."""
    normalized = normalize_path(path)
    if LIBRARY_MARKER in normalized:
        return UnitKind.LIBRARY
    if normalized.startswith(RUNTIME_PREFIXES):
        return UnitKind.VENDOR_RUNTIME
    return UnitKind.FIRST_PARTY


def extract_package_name(path: str) -> str:
    """Package a path belongs to.

    Returns the library name for vendored paths, ``"vendor-runtime"`` for
    bundler glue, ``"first-party"`` for application code and ``"unknown"``
    for a vendored path whose name cannot be found.
    """
    normalized = normalize_path(path)

    if LIBRARY_MARKER not in normalized:
        if normalized.startswith(RUNTIME_PREFIXES):
            return VENDOR_RUNTIME
        return FIRST_PARTY

    # Nested installs: the innermost node_modules owns the file
    tail = normalized.rsplit(LIBRARY_MARKER, 1)[1]
    match = _PACKAGE_RE.match(tail)
    if not match:
        return "unknown"

    name = match.group(1)
    if name.startswith("."):
        return _package_past_cache_dir(tail, match.end()) or "unknown"
    return name


def _package_past_cache_dir(path: str, cache_end: int) -> Optional[str]:
    """Scan the segments after a ``node_modules/.<tool>`` cache directory."""
    segments = [s for s in path[cache_end:].split("/") if s]
    while segments and segments[0] in _CACHE_SUBDIRS:
        segments.pop(0)
    if not segments:
        return None

    head = segments[0]
    if head.startswith("@") and len(segments) > 1:
        return f"{head}/{segments[1]}"
    if len(segments) == 1:
        # Flattened prebundle file: "react-dom_client.js", "@vue_runtime-core.js"
        stem = head.split(".", 1)[0]
        if stem.startswith("@"):
            scope, _, rest = stem[1:].partition("_")
            return f"@{scope}/{rest}" if rest else stem
        return stem.split("_", 1)[0] or None
    return head


def extract_version(path: str) -> str:
    """Version embedded in a vendored path segment, else ``"unknown"``."""
    normalized = normalize_path(path)

    staged = _STAGED_VERSION_RE.search(normalized)
    if staged:
        return staged.group(2)

    if LIBRARY_MARKER not in normalized:
        return UNKNOWN_VERSION

    match = _VERSION_RE.match(normalized.rsplit(LIBRARY_MARKER, 1)[1])
    if match:
        return match.group(2)

    return UNKNOWN_VERSION


def is_tree_shakeable(path: str) -> bool:
    """Best-effort guess: first-party code yes, libraries only when ESM."""
    normalized = normalize_path(path)
    if LIBRARY_MARKER not in normalized:
        return True
    return "/esm/" in normalized or "/es/" in normalized or normalized.endswith(".mjs")


def clean_source_path(source: str) -> str:
    """Shorten a position-map source path for display."""
    cleaned = normalize_path(source)
    cleaned = re.sub(r"^webpack:///?", "", cleaned)
    cleaned = cleaned.split("?", 1)[0]
    if LIBRARY_MARKER in cleaned:
        return re.sub(r"^.*/node_modules/", "node_modules/", cleaned)
    return re.sub(r"^.*/src/", "src/", cleaned)


def _extension(name: str) -> str:
    base = name.rsplit("/", 1)[-1].lower()
    if "." not in base:
        return ""
    return "." + base.rsplit(".", 1)[-1]


def artifact_kind_for_name(name: str) -> ArtifactKind:
    """Classify an emitted file by extension."""
    ext = _extension(name)
    if ext in (".js", ".mjs", ".cjs"):
        return ArtifactKind.CODE
    if ext == ".css":
        return ArtifactKind.STYLE
    if ext in (".html", ".htm"):
        return ArtifactKind.MARKUP
    if ext in _IMAGE_EXTENSIONS or ext in _FONT_EXTENSIONS:
        return ArtifactKind.ASSET
    return ArtifactKind.OTHER


def is_image(name: str) -> bool:
    return _extension(name) in _IMAGE_EXTENSIONS


def is_font(name: str) -> bool:
    return _extension(name) in _FONT_EXTENSIONS
