"""Exception hierarchy for Bundle Insight."""

from .analysis import AnalysisError, InvalidInputError, PositionMapError
from .base import BundleInsightError
from .config import ConfigurationError, InvalidConfigError
from .taxonomy import AnalysisWarning, ErrorCode

__all__ = [
    "BundleInsightError",
    "AnalysisError",
    "InvalidInputError",
    "PositionMapError",
    "ConfigurationError",
    "InvalidConfigError",
    "AnalysisWarning",
    "ErrorCode",
]
