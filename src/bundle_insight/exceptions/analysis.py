"""Analysis-related exceptions: malformed build input, position maps."""

from typing import Optional

from .base import BundleInsightError


class AnalysisError(BundleInsightError):
    """Base class for analysis-related errors."""
    pass


class InvalidInputError(AnalysisError):
    """Raised when build metadata handed to the core is structurally invalid."""

    def __init__(self, field: str, reason: str, value: Optional[object] = None):
        details = {"field": field, "reason": reason}
        if value is not None:
            details["value"] = str(value)

        super().__init__(f"Invalid build input: {field}", details=details)
        self.field = field
        self.reason = reason
        self.value = value


class PositionMapError(AnalysisError):
    """Raised when a position map cannot be decoded."""

    def __init__(self, artifact_name: str, reason: str):
        super().__init__(
            f"Cannot decode position map for {artifact_name}",
            details={"artifact": artifact_name, "reason": reason},
        )
        self.artifact_name = artifact_name
        self.reason = reason
