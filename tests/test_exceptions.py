"""Tests for the exception hierarchy and warning taxonomy."""

from bundle_insight.exceptions import (
    AnalysisError,
    AnalysisWarning,
    BundleInsightError,
    ConfigurationError,
    ErrorCode,
    InvalidConfigError,
    InvalidInputError,
    PositionMapError,
)


class TestErrorCode:
    def test_code_ranges(self):
        """Input BI1xx, graph BI2xx, attribution BI3xx, diff BI4xx."""
        assert ErrorCode.BI100.value == "BI100"
        assert ErrorCode.BI200.value == "BI200"
        assert ErrorCode.BI300.value == "BI300"
        assert ErrorCode.BI400.value == "BI400"


class TestAnalysisWarning:
    def test_string_form(self):
        warning = AnalysisWarning(ErrorCode.BI301, "no map", {"artifact": "a.js"})
        assert str(warning) == "[BI301] no map"

    def test_json_form(self):
        warning = AnalysisWarning(ErrorCode.BI200, "dangling", {"count": 2})
        assert warning.to_json() == {"code": "BI200", "message": "dangling", "context": {"count": 2}}


class TestHierarchy:
    def test_everything_is_a_bundle_insight_error(self):
        for exc in (
            InvalidInputError("artifacts", "bad"),
            PositionMapError("a.js", "bad"),
            InvalidConfigError("thresholds", {}, "bad"),
        ):
            assert isinstance(exc, BundleInsightError)

    def test_families(self):
        assert issubclass(InvalidInputError, AnalysisError)
        assert issubclass(PositionMapError, AnalysisError)
        assert issubclass(InvalidConfigError, ConfigurationError)

    def test_details_in_message(self):
        exc = InvalidInputError("artifacts.name", "duplicate artifact name", "a.js")
        assert str(exc) == (
            "Invalid build input: artifacts.name "
            "(field=artifacts.name, reason=duplicate artifact name, value=a.js)"
        )
        assert exc.value == "a.js"

    def test_position_map_error_fields(self):
        exc = PositionMapError("main.js", "missing 'mappings'")
        assert exc.artifact_name == "main.js"
        assert "main.js" in str(exc)
