"""Tests for rules/engine.py - optimization recommendations."""

from bundle_insight.aggregation.models import PackageAggregate
from bundle_insight.config import ThresholdConfig
from bundle_insight.graph import build_dependency_graph
from bundle_insight.graph.models import CycleImpact, CycleReport, DependencyGraph
from bundle_insight.rules import RecommendationKind, Severity, generate_recommendations

KIB = 1024


class TestLargePackages:
    def test_warning_between_thresholds(self):
        recs = generate_recommendations([PackageAggregate("moment", total_size_bytes=200 * KIB)])

        assert len(recs) == 1
        assert recs[0].kind is RecommendationKind.CODE_SPLITTING
        assert recs[0].severity is Severity.WARNING
        assert recs[0].potential_savings_bytes == round(200 * KIB * 0.7)
        assert recs[0].affected_packages == ["moment"]

    def test_error_above_second_threshold(self):
        recs = generate_recommendations([PackageAggregate("three", total_size_bytes=600 * KIB)])
        assert recs[0].severity is Severity.ERROR

    def test_at_threshold_not_flagged(self):
        assert generate_recommendations([PackageAggregate("x", total_size_bytes=100 * KIB)]) == []

    def test_first_party_not_flagged(self):
        assert generate_recommendations([PackageAggregate("first-party", total_size_bytes=900 * KIB)]) == []

    def test_thresholds_are_configurable(self):
        thresholds = ThresholdConfig(large_package_bytes=1, very_large_package_bytes=2)
        recs = generate_recommendations([PackageAggregate("x", total_size_bytes=3)], thresholds=thresholds)
        assert recs[0].severity is Severity.ERROR


class TestGraphRules:
    def test_duplicate_savings_keep_largest(self, duplicate_units):
        graph = build_dependency_graph(duplicate_units)
        recs = generate_recommendations([], graph)

        assert len(recs) == 1
        assert recs[0].kind is RecommendationKind.DUPLICATE
        assert recs[0].potential_savings_bytes == 50_000
        assert "4.17.21" in recs[0].example and "3.10.1" in recs[0].example

    def test_cycle_severity_from_impact(self):
        graph = DependencyGraph(
            cycles=[
                CycleReport(["src/a.js", "src/b.js"], CycleImpact.WARNING),
                CycleReport([f"src/m{i}.js" for i in range(6)], CycleImpact.ERROR),
            ]
        )
        recs = generate_recommendations([], graph)

        assert [r.kind for r in recs] == [RecommendationKind.CIRCULAR] * 2
        assert [r.severity for r in recs] == [Severity.WARNING, Severity.ERROR]
        assert recs[0].affected_packages == ["first-party"]
        assert recs[1].example.endswith("-> ...")

    def test_graph_rules_need_a_graph(self):
        assert generate_recommendations([]) == []


class TestTreeShaking:
    def test_non_tree_shakeable_over_floor(self):
        package = PackageAggregate("lodash", total_size_bytes=60 * KIB, tree_shakeable=False)
        recs = generate_recommendations([package])

        assert [r.kind for r in recs] == [RecommendationKind.TREE_SHAKING]
        assert recs[0].severity is Severity.INFO
        assert recs[0].potential_savings_bytes == round(60 * KIB * 0.3)

    def test_small_package_ignored(self):
        package = PackageAggregate("tiny", total_size_bytes=10 * KIB, tree_shakeable=False)
        assert generate_recommendations([package]) == []


class TestOrdering:
    def test_rule_evaluation_order(self, duplicate_units):
        graph = build_dependency_graph(duplicate_units)
        packages = [PackageAggregate("moment", total_size_bytes=300 * KIB, tree_shakeable=False)]
        recs = generate_recommendations(packages, graph)

        assert [r.kind for r in recs] == [
            RecommendationKind.CODE_SPLITTING,
            RecommendationKind.DUPLICATE,
            RecommendationKind.TREE_SHAKING,
        ]
