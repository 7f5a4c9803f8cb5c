"""Tests for the bundle-insight command line."""

import json

import pytest
from typer.testing import CliRunner

from bundle_insight import __version__
from bundle_insight.cli import app
from bundle_insight.snapshot import BuildInput, capture_snapshot, dumps, loads_snapshot
from bundle_insight.units import ArtifactKind, OutputArtifact

runner = CliRunner()


def _write_snapshot(path, size, commit):
    artifact = OutputArtifact("main.js", size, {"gzip": size // 3, "brotli": size // 4}, ArtifactKind.CODE)
    snapshot = capture_snapshot(BuildInput(artifacts=[artifact], commit=commit, timestamp="t"))
    path.write_text(dumps(snapshot))
    return path


@pytest.fixture
def build_json(tmp_path):
    build = {
        "commit": "abc123",
        "branch": "main",
        "artifacts": [
            {
                "name": "main.js",
                "size_bytes": 1_000,
                "compressed_sizes": {"gzip": 400, "brotli": 300},
                "member_unit_ids": ["src/index.js", "node_modules/react/index.js"],
            },
            {"name": "main.css", "size_bytes": 200, "compressed_sizes": {"gzip": 80, "brotli": 60}},
        ],
        "units": [
            {"id": "src/index.js", "size_bytes": 300, "imported_ids": ["node_modules/react/index.js"]},
            {"id": "node_modules/react/index.js", "size_bytes": 700},
        ],
    }
    path = tmp_path / "build.json"
    path.write_text(json.dumps(build))
    return path


class TestAnalyze:
    def test_writes_snapshot(self, build_json, tmp_path):
        out = tmp_path / "out" / "snapshot.json"
        result = runner.invoke(app, ["analyze", str(build_json), "--out", str(out)])

        assert result.exit_code == 0, result.output
        snapshot = loads_snapshot(out.read_text())
        assert snapshot.commit == "abc123"
        assert snapshot.total_size_bytes == 1_200
        assert [p.name for p in snapshot.packages] == ["react", "first-party"]

    def test_json_output(self, build_json):
        result = runner.invoke(app, ["analyze", str(build_json), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["branch"] == "main"
        assert data["by_kind"]["style"] == 200

    def test_table_output(self, build_json):
        result = runner.invoke(app, ["analyze", str(build_json)])

        assert result.exit_code == 0, result.output
        assert "Packages" in result.output
        assert "react" in result.output

    def test_log_file_records_structured_warnings(self, tmp_path):
        build = tmp_path / "build.json"
        build.write_text(json.dumps({"artifacts": [{"name": "vendor.js", "size_bytes": 100}]}))
        log_path = tmp_path / "run.log"

        result = runner.invoke(app, ["analyze", str(build), "--json", "--log-file", str(log_path)])

        assert result.exit_code == 0, result.output
        records = [json.loads(line) for line in log_path.read_text().splitlines()]
        codes = [r["warning"]["code"] for r in records if "warning" in r]
        assert codes == ["BI100"]

    def test_source_files_resolved_next_to_build(self, tmp_path, position_map):
        (tmp_path / "main.js").write_text("a\nb")
        (tmp_path / "main.js.map").write_text(
            json.dumps(position_map(["src/a.js", "node_modules/lodash/map.js"], [[(0, 0, 0)], [(0, 1, 0)]]))
        )
        build = {
            "artifacts": [{"name": "main.js", "size_bytes": 100}],
            "sources": {"main.js": {"map": "main.js.map", "text": "main.js"}},
        }
        path = tmp_path / "build.json"
        path.write_text(json.dumps(build))

        result = runner.invoke(app, ["analyze", str(path), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert {p["name"] for p in data["packages"]} == {"first-party", "lodash"}
        # compressed sizes measured from the compiled text
        assert data["artifacts"][0]["compressed_sizes"]["gzip"] > 0

    def test_invalid_build(self, tmp_path):
        path = tmp_path / "build.json"
        path.write_text('{"artifacts": [{"name": "a.js", "size_bytes": -5}]}')
        result = runner.invoke(app, ["analyze", str(path)])

        assert result.exit_code == 1
        assert "Error" in result.output


class TestCompare:
    def test_growth_summary(self, tmp_path):
        current = _write_snapshot(tmp_path / "current.json", 1_500_000, "head")
        baseline = _write_snapshot(tmp_path / "baseline.json", 1_000_000, "base")

        result = runner.invoke(app, ["compare", str(current), str(baseline), "--target", "main"])

        assert result.exit_code == 0, result.output
        assert "larger than main" in result.output

    def test_no_baseline(self, tmp_path):
        current = _write_snapshot(tmp_path / "current.json", 100, "head")
        result = runner.invoke(app, ["compare", str(current), str(tmp_path / "missing.json")])

        assert result.exit_code == 0, result.output
        assert "No baseline" in result.output

    def test_fail_on_error_budget(self, tmp_path):
        current = _write_snapshot(tmp_path / "current.json", 1_500, "head")
        baseline = _write_snapshot(tmp_path / "baseline.json", 1_000, "base")

        result = runner.invoke(app, ["compare", str(current), str(baseline), "--fail-on-error", "10"])
        assert result.exit_code == 1

    def test_warn_on_budget(self, tmp_path):
        current = _write_snapshot(tmp_path / "current.json", 1_500, "head")
        baseline = _write_snapshot(tmp_path / "baseline.json", 1_000, "base")

        result = runner.invoke(app, ["compare", str(current), str(baseline), "--warn-on", "10"])
        assert result.exit_code == 0
        assert "warning level" in result.output

    def test_json_output(self, tmp_path):
        current = _write_snapshot(tmp_path / "current.json", 1_100, "head")
        baseline = _write_snapshot(tmp_path / "baseline.json", 1_000, "base")

        result = runner.invoke(app, ["compare", str(current), str(baseline), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["by_bundle"][0]["status"] == "changed"
        assert data["total_size"]["diff"] == 100


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
