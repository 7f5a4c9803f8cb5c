"""Error codes and recoverable warnings.

Error Code Convention:
    BI1xx - Build input errors
    BI2xx - Graph errors
    BI3xx - Attribution errors
    BI4xx - Diff errors
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Structured codes for degradations and failures."""

    # Build input (BI1xx)
    BI100 = "BI100"  # Artifact missing compressed sizes
    BI101 = "BI101"  # Unit listed by artifact but not in unit set

    # Graph (BI2xx)
    BI200 = "BI200"  # Import target not in unit set (dangling edge)
    BI201 = "BI201"  # Version not extractable from unit id
    BI202 = "BI202"  # Units unreachable from any entry node

    # Attribution (BI3xx)
    BI300 = "BI300"  # Position map malformed
    BI301 = "BI301"  # Position map or compiled text missing
    BI302 = "BI302"  # Position map resolved no sources

    # Diff (BI4xx)
    BI400 = "BI400"  # No baseline snapshot


@dataclass
class AnalysisWarning:
    """A recoverable degradation recorded during an analysis run.

    Attributes:
        code: Structured code for categorization
        message: Human-readable description
        context: Additional context (artifact name, unit id, counts)
    """

    code: ErrorCode
    message: str
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def to_json(self) -> dict[str, Any]:
        """Structured logging format."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context,
        }
