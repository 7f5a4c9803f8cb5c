"""Shared test fixtures for Bundle Insight tests."""

import pytest

from bundle_insight.units.models import ArtifactKind, OutputArtifact
from bundle_insight.units.index import unit_from_path


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def cycle_units():
    """Three first-party units importing each other in a ring, plus an entry."""
    return [
        unit_from_path("src/main.js", 100, imported_ids=["src/a.js"]),
        unit_from_path("src/a.js", 200, imported_ids=["src/b.js"]),
        unit_from_path("src/b.js", 300, imported_ids=["src/c.js"]),
        unit_from_path("src/c.js", 400, imported_ids=["src/a.js"]),
    ]


@pytest.fixture
def duplicate_units():
    """An app importing two bundled versions of lodash."""
    return [
        unit_from_path(
            "src/index.js",
            1_000,
            imported_ids=[
                "node_modules/lodash@4.17.21/lodash.js",
                "node_modules/legacy/node_modules/lodash@3.10.1/index.js",
            ],
        ),
        unit_from_path("node_modules/lodash@4.17.21/lodash.js", 70_000),
        unit_from_path("node_modules/legacy/node_modules/lodash@3.10.1/index.js", 50_000),
    ]


@pytest.fixture
def simple_artifacts():
    """Code, style and image artifacts with compressed sizes."""
    return [
        OutputArtifact(
            name="main.js",
            size_bytes=10_000,
            compressed_sizes={"gzip": 3_000, "brotli": 2_500},
            kind=ArtifactKind.CODE,
        ),
        OutputArtifact(
            name="main.css",
            size_bytes=2_000,
            compressed_sizes={"gzip": 500, "brotli": 400},
            kind=ArtifactKind.STYLE,
        ),
        OutputArtifact(
            name="logo.png",
            size_bytes=8_000,
            compressed_sizes={"gzip": 8_000, "brotli": 8_000},
            kind=ArtifactKind.ASSET,
        ),
    ]


def make_position_map(sources, line_mappings):
    """Build a v3 position map.

    ``line_mappings`` has one entry per compiled line: None for a line with
    no mapping, else a list of ``(column, source_index, source_line)``.
    Columns are absolute; the VLQ encoding is relative and handled here.
    """
    prev_source = 0
    prev_line = 0
    groups = []
    for segments in line_mappings:
        encoded = []
        prev_column = 0
        for column, source_index, source_line in segments or []:
            encoded.append(
                _vlq(column - prev_column)
                + _vlq(source_index - prev_source)
                + _vlq(source_line - prev_line)
                + _vlq(0)
            )
            prev_column = column
            prev_source = source_index
            prev_line = source_line
        groups.append(",".join(encoded))
    return {"version": 3, "sources": list(sources), "names": [], "mappings": ";".join(groups)}


_BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"


def _vlq(value):
    value = (-value << 1) | 1 if value < 0 else value << 1
    out = ""
    while True:
        digit = value & 31
        value >>= 5
        if value:
            digit |= 32
        out += _BASE64[digit]
        if not value:
            return out


@pytest.fixture
def position_map():
    """The ``make_position_map`` builder."""
    return make_position_map
