"""Optimization recommendation model."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class RecommendationKind(Enum):
    CODE_SPLITTING = "code-splitting"
    DUPLICATE = "duplicate"
    CIRCULAR = "circular"
    TREE_SHAKING = "tree-shaking"


class Severity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Recommendation:
    kind: RecommendationKind
    severity: Severity
    message: str
    action: str
    potential_savings_bytes: Optional[int] = None
    affected_packages: List[str] = field(default_factory=list)
    example: Optional[str] = None
