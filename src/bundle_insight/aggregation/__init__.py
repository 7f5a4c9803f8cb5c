"""Package aggregation."""

from .aggregator import aggregate_packages, compression_ratios
from .models import PackageAggregate

__all__ = ["PackageAggregate", "aggregate_packages", "compression_ratios"]
