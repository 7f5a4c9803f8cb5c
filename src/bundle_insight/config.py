"""Configuration loading and management for Bundle Insight.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.bundle-insight.toml)
    3. Project config (./bundle-insight.toml)
    4. Explicit config file (--config)
    5. Environment variables (BUNDLE_INSIGHT_*)
    6. CLI overrides (passed as kwargs)

The analysis core never calls ``load_config``; it receives an explicit
``AnalysisConfig`` (or falls back to ``DEFAULT_CONFIG``).

Example:
    >>> config = load_config(verbose=True)
    >>> config.verbosity
    'verbose'
    >>> config.thresholds.cycle_error_length
    5
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

# Type aliases for clarity
Verbosity = Literal["quiet", "normal", "verbose"]

KIB = 1024


@dataclass(frozen=True)
class ThresholdConfig:
    """Policy thresholds used by the graph, diff, and rule engines.

    None of these are laws; they are the defaults the reports have always
    used and can be tuned per project through the ``[thresholds]`` table.

    Attributes:
        Graph:
            cycle_error_length: Cycles longer than this are ERROR impact

        Attribution:
            samples_per_line: Column samples taken per compiled line

        Diff:
            unchanged_percent: |diff%| below this is "unchanged"
            regression_percent: Total growth above this raises a warning insight
            improvement_percent: Total shrink beyond this raises a positive insight
            largest_increase_bytes: Single-artifact growth callout floor

        Rules:
            large_package_bytes: Package size that triggers a split suggestion
            very_large_package_bytes: Above this the suggestion is an error
            lazy_load_savings_ratio: Share of a large package assumed deferrable
            non_tree_shakeable_bytes: Floor for the tree-shaking suggestion
            tree_shaking_savings_ratio: Share assumed removable by tree-shaking

        Snapshot warnings:
            total_size_warning_bytes: Total build size budget
            artifact_size_warning_bytes: Per code-artifact size budget
    """

    # === Graph ===
    cycle_error_length: int = 5

    # === Attribution ===
    samples_per_line: int = 10

    # === Diff ===
    unchanged_percent: float = 0.1
    regression_percent: float = 10.0
    improvement_percent: float = 10.0
    largest_increase_bytes: int = 50 * KIB

    # === Rules ===
    large_package_bytes: int = 100 * KIB
    very_large_package_bytes: int = 500 * KIB
    lazy_load_savings_ratio: float = 0.7
    non_tree_shakeable_bytes: int = 50 * KIB
    tree_shaking_savings_ratio: float = 0.3

    # === Snapshot warnings ===
    total_size_warning_bytes: int = 500 * KIB
    artifact_size_warning_bytes: int = 250 * KIB

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        if self.cycle_error_length < 1:
            raise ValueError("cycle_error_length must be at least 1")
        if self.samples_per_line < 1:
            raise ValueError("samples_per_line must be at least 1")

        for field_name in ("unchanged_percent", "regression_percent", "improvement_percent"):
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} must be non-negative")

        for field_name in ("lazy_load_savings_ratio", "tree_shaking_savings_ratio"):
            value = getattr(self, field_name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{field_name} must be between 0.0 and 1.0")

        if self.very_large_package_bytes < self.large_package_bytes:
            raise ValueError("very_large_package_bytes must be >= large_package_bytes")


# Default threshold configuration (singleton)
DEFAULT_THRESHOLDS = ThresholdConfig()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        verbosity: Logging verbosity level
        compression_algorithms: Algorithms reported for every artifact
        measure_compression: Compute compressed sizes from artifact text when
            the build metadata does not carry them
        thresholds: Policy thresholds (nested config)
    """

    verbosity: Verbosity = "normal"
    compression_algorithms: tuple[str, ...] = ("gzip", "brotli")
    measure_compression: bool = True

    # Algorithm thresholds (nested config)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def __post_init__(self) -> None:
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError(f"verbosity must be quiet, normal or verbose, got {self.verbosity!r}")
        if not self.compression_algorithms:
            raise ValueError("compression_algorithms must not be empty")


DEFAULT_CONFIG = AnalysisConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Configuration sources are merged in priority order (lowest to highest):
        1. Defaults (AnalysisConfig field defaults)
        2. Global config (~/.bundle-insight.toml)
        3. Project config (./bundle-insight.toml)
        4. Explicit config file (if config_file provided)
        5. Environment variables (BUNDLE_INSIGHT_* prefix)
        6. CLI overrides (kwargs)

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".bundle-insight.toml"
    if global_config.exists():
        merged.update(_load_toml_checked(global_config, "global config"))

    project_config = Path.cwd() / "bundle-insight.toml"
    if project_config.exists():
        merged.update(_load_toml_checked(project_config, "project config"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_checked(config_file, "config file"))

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    if "compression_algorithms" in merged:
        merged["compression_algorithms"] = tuple(merged["compression_algorithms"])

    thresholds_dict = merged.pop("thresholds", None)
    if thresholds_dict is not None:
        if isinstance(thresholds_dict, dict):
            try:
                merged["thresholds"] = ThresholdConfig(**thresholds_dict)
            except (TypeError, ValueError) as e:
                raise InvalidConfigError("thresholds", thresholds_dict, str(e))
        elif isinstance(thresholds_dict, ThresholdConfig):
            merged["thresholds"] = thresholds_dict
        else:
            raise InvalidConfigError("thresholds", thresholds_dict, "expected a table")

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_toml_checked(path: Path, label: str) -> dict:
    try:
        return _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from BUNDLE_INSIGHT_* environment variables.

    Supported environment variables:
        BUNDLE_INSIGHT_VERBOSITY: quiet/normal/verbose
        BUNDLE_INSIGHT_MEASURE_COMPRESSION: bool (true/false/1/0)

    Returns:
        Dict of field_name -> parsed_value for any BUNDLE_INSIGHT_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"BUNDLE_INSIGHT_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns None for types that can't be expressed as a single env value
    (tuples, nested configs).
    """
    origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
