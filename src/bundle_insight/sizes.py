"""Human-readable byte counts and rounding helpers."""

import math

_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(num_bytes: float) -> str:
    """Format a byte count using 1024-based units, sign dropped.

    >>> format_size(0)
    '0 B'
    >>> format_size(1536)
    '1.5 KB'
    """
    value = float(abs(num_bytes))
    if value == 0:
        return "0 B"
    exponent = 0
    while value >= 1024 and exponent < len(_UNITS) - 1:
        value /= 1024
        exponent += 1
    value = round(value, 2)
    if value == int(value):
        return f"{int(value)} {_UNITS[exponent]}"
    return f"{value} {_UNITS[exponent]}"


def percent(part: float, whole: float) -> float:
    """Return part/whole as a percentage, 0.0 when whole is 0."""
    if whole == 0:
        return 0.0
    return part / whole * 100.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))
