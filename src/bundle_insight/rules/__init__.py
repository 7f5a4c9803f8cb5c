"""Optimization rule engine."""

from .engine import generate_recommendations
from .models import Recommendation, RecommendationKind, Severity

__all__ = ["Recommendation", "RecommendationKind", "Severity", "generate_recommendations"]
