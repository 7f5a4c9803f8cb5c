"""Tests for attribution/ - position-map sampling and strategy selection."""

import json

import pytest

from bundle_insight.attribution import (
    ArtifactSource,
    attribute_artifacts,
    attribute_from_position_map,
    merge_source_attributions,
    package_sizes,
)
from bundle_insight.attribution.models import SourceAttribution
from bundle_insight.attribution.sampling import decode_position_map, sample_columns
from bundle_insight.exceptions import ErrorCode, PositionMapError
from bundle_insight.units import ArtifactKind, OutputArtifact, link_units, unit_from_path


def _compiled(lines, width=40):
    return "\n".join("x" * width for _ in range(lines))


class TestSampleColumns:
    def test_evenly_spaced(self):
        assert list(sample_columns(100, 10)) == [0, 10, 20, 30, 40, 50, 60, 70, 80, 90]

    def test_short_line_samples_every_column(self):
        assert list(sample_columns(3, 10)) == [0, 1, 2]

    def test_never_more_than_requested(self):
        assert len(sample_columns(105, 10)) == 10


class TestPositionMapSampling:
    def test_distinct_lines_times_bytes_per_line(self, position_map):
        # 100 compiled lines, the first 40 each map to a distinct line of one source
        mappings = [[(0, 0, i)] for i in range(40)] + [None] * 60
        pmap = position_map(["src/app.js"], mappings)

        results = attribute_from_position_map(pmap, _compiled(100), 10_000, "main.js")

        assert len(results) == 1
        assert results[0].source_path == "src/app.js"
        assert results[0].line_count == 40
        assert results[0].estimated_size_bytes == 4_000
        assert results[0].artifact_membership == {"main.js"}

    def test_repeated_hits_on_one_line_count_once(self, position_map):
        # Every compiled line maps back to line 0 of the source
        mappings = [[(0, 0, 0)] for _ in range(10)]
        pmap = position_map(["src/app.js"], mappings)

        results = attribute_from_position_map(pmap, _compiled(10), 1_000, "main.js")
        assert results[0].line_count == 1
        assert results[0].estimated_size_bytes == 100

    def test_sources_classified_and_sorted(self, position_map):
        sources = ["webpack:///./src/app.js", "webpack:///./node_modules/react/index.js"]
        mappings = [[(0, 0, 0)], [(0, 1, 0)], [(0, 1, 1)], [(0, 1, 2)]]
        pmap = position_map(sources, mappings)

        results = attribute_from_position_map(pmap, _compiled(4), 400, "main.js")

        assert [(r.source_path, r.package_name) for r in results] == [
            ("node_modules/react/index.js", "react"),
            ("src/app.js", "first-party"),
        ]
        assert [r.estimated_size_bytes for r in results] == [300, 100]

    def test_accepts_json_text(self, position_map):
        pmap = json.dumps(position_map(["src/a.js"], [[(0, 0, 0)]]))
        results = attribute_from_position_map(pmap, "abc", 3, "a.js")
        assert results[0].estimated_size_bytes == 3

    def test_source_root_is_joined(self, position_map):
        pmap = position_map(["app.js"], [[(0, 0, 0)]])
        pmap["sourceRoot"] = "/project/src/"
        results = attribute_from_position_map(pmap, "abc", 3, "a.js")
        assert results[0].source_path == "src/app.js"

    def test_blank_lines_count_but_are_not_sampled(self, position_map):
        pmap = position_map(["src/a.js"], [[(0, 0, 0)], None])
        results = attribute_from_position_map(pmap, "abc\n", 100, "a.js")
        # two compiled lines, one touched
        assert results[0].estimated_size_bytes == 50

    @pytest.mark.parametrize(
        "payload",
        ["not json", "[]", json.dumps({"version": 3, "sources": []}), json.dumps({"sections": []})],
    )
    def test_malformed_map_raises(self, payload):
        with pytest.raises(PositionMapError):
            decode_position_map(payload, "main.js")

    @pytest.mark.parametrize(
        "payload",
        [
            json.dumps({"version": 3, "sources": ["src/a.js"], "names": [], "mappings": "DAAA"}),
            json.dumps({"version": 3, "sources": [7], "names": [], "mappings": "AAAA"}),
            json.dumps({"version": 3, "sources": [None], "names": [], "mappings": "AAAA"}),
        ],
        ids=["negative-column", "numeric-source", "null-source"],
    )
    def test_undecodable_map_raises_position_map_error(self, payload):
        with pytest.raises(PositionMapError):
            decode_position_map(payload, "main.js")


class TestMergeAttributions:
    def test_same_source_across_artifacts_merged(self):
        a = SourceAttribution("src/x.js", "first-party", 100, 2, {"a.js"})
        b = SourceAttribution("src/x.js", "first-party", 50, 1, {"b.js"})
        c = SourceAttribution("src/y.js", "first-party", 120, 3, {"b.js"})

        merged = merge_source_attributions([[a], [b, c]])

        assert [m.source_path for m in merged] == ["src/x.js", "src/y.js"]
        assert merged[0].estimated_size_bytes == 150
        assert merged[0].line_count == 3
        assert merged[0].artifact_membership == {"a.js", "b.js"}


class TestPackageSizes:
    def test_sums_per_package_in_first_encounter_order(self):
        attributions = [
            SourceAttribution("node_modules/react/index.js", "react", 700),
            SourceAttribution("src/index.js", "first-party", 300),
            SourceAttribution("node_modules/react/cjs/react.js", "react", 50),
        ]

        assert list(package_sizes(attributions).items()) == [("react", 750), ("first-party", 300)]

    def test_empty(self):
        assert package_sizes([]) == {}


class TestStrategySelection:
    def _units(self):
        return link_units(
            [
                unit_from_path("src/index.js", 300),
                unit_from_path("node_modules/react/index.js", 700),
            ]
        )

    def test_units_fast_path(self):
        artifact = OutputArtifact(
            "main.js",
            1_000,
            kind=ArtifactKind.CODE,
            member_unit_ids={"src/index.js", "node_modules/react/index.js"},
        )
        result = attribute_artifacts([artifact], self._units())

        assert result.strategies == {"main.js": "units"}
        assert {a.package_name: a.estimated_size_bytes for a in result.attributions} == {
            "react": 700,
            "first-party": 300,
        }
        assert result.warnings == []

    def test_membership_recorded_on_units_only(self):
        units = link_units(
            [
                unit_from_path("src/index.js", 300, artifact_names=["main.js"]),
                unit_from_path("node_modules/react/index.js", 700, artifact_names=["main.js"]),
                unit_from_path("src/admin.js", 50, artifact_names=["admin.js"]),
            ]
        )
        artifact = OutputArtifact("main.js", 1_000, kind=ArtifactKind.CODE)
        result = attribute_artifacts([artifact], units)

        assert result.strategies == {"main.js": "units"}
        assert result.warnings == []
        assert {a.package_name: a.estimated_size_bytes for a in result.attributions} == {
            "react": 700,
            "first-party": 300,
        }

    def test_position_map_when_units_unknown(self, position_map):
        artifact = OutputArtifact("main.js", 100, kind=ArtifactKind.CODE)
        source = ArtifactSource(
            "main.js", position_map(["src/a.js"], [[(0, 0, 0)]]), "abc"
        )
        result = attribute_artifacts([artifact], {}, {"main.js": source})

        assert result.strategies == {"main.js": "position-map"}
        assert result.attributions[0].estimated_size_bytes == 100

    def test_malformed_map_skips_only_that_artifact(self, position_map):
        good = OutputArtifact("good.js", 100, kind=ArtifactKind.CODE)
        bad = OutputArtifact("bad.js", 100, kind=ArtifactKind.CODE)
        sources = {
            "good.js": ArtifactSource("good.js", position_map(["src/a.js"], [[(0, 0, 0)]]), "abc"),
            "bad.js": ArtifactSource("bad.js", "{broken", "abc"),
        }
        result = attribute_artifacts([bad, good], {}, sources)

        assert result.skipped_artifacts == ["bad.js"]
        assert [w.code for w in result.warnings] == [ErrorCode.BI300]
        assert [a.source_path for a in result.attributions] == ["src/a.js"]

    @pytest.mark.parametrize(
        "bad_map",
        [
            {"version": 3, "sources": ["src/a.js"], "names": [], "mappings": "DAAA"},
            {"version": 3, "sources": [7], "names": [], "mappings": "AAAA"},
        ],
    )
    def test_undecodable_map_skips_only_that_artifact(self, position_map, bad_map):
        good = OutputArtifact("good.js", 100, kind=ArtifactKind.CODE)
        bad = OutputArtifact("bad.js", 100, kind=ArtifactKind.CODE)
        sources = {
            "good.js": ArtifactSource("good.js", position_map(["src/a.js"], [[(0, 0, 0)]]), "abc"),
            "bad.js": ArtifactSource("bad.js", json.dumps(bad_map), "abc"),
        }
        result = attribute_artifacts([bad, good], {}, sources)

        assert result.skipped_artifacts == ["bad.js"]
        assert [w.code for w in result.warnings] == [ErrorCode.BI300]
        assert result.strategies == {"good.js": "position-map"}

    def test_half_supplied_source_warns(self):
        artifact = OutputArtifact("main.js", 100, kind=ArtifactKind.CODE)
        source = ArtifactSource("main.js", position_map=None, compiled_text="abc")
        result = attribute_artifacts([artifact], {}, {"main.js": source})

        assert result.skipped_artifacts == ["main.js"]
        assert [w.code for w in result.warnings] == [ErrorCode.BI301]

    def test_partial_units_fall_back_with_warning(self):
        artifact = OutputArtifact(
            "main.js", 1_000, kind=ArtifactKind.CODE, member_unit_ids={"src/index.js", "src/gone.js"}
        )
        result = attribute_artifacts([artifact], self._units())

        assert [w.code for w in result.warnings] == [ErrorCode.BI101]
        assert [a.source_path for a in result.attributions] == ["src/index.js"]

    def test_unmapped_map_warns(self, position_map):
        artifact = OutputArtifact("main.js", 100, kind=ArtifactKind.CODE)
        source = ArtifactSource("main.js", position_map(["src/a.js"], [None]), "abc")
        result = attribute_artifacts([artifact], {}, {"main.js": source})

        assert [w.code for w in result.warnings] == [ErrorCode.BI302]
        assert result.attributions == []

    def test_assets_skipped_quietly(self):
        artifact = OutputArtifact("logo.png", 100, kind=ArtifactKind.ASSET)
        result = attribute_artifacts([artifact], {}, {})
        assert result.warnings == []
        assert result.attributions == []
