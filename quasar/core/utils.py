"""
Utility functions for cell coercion and numeric guards.
"""

import math
import re
import logging

logger = logging.getLogger(__name__)

# Leading optional sign + digits, after whitespace has been trimmed
_INT_PREFIX = re.compile(r'^[+-]?\d+')
# Leading decimal literal: 12, 12.5, .5, 1e-3
_FLOAT_PREFIX = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


def clean_cell(value):
    """Trim a raw CSV cell; None becomes the empty string."""
    if value is None:
        return ""
    return str(value).strip()


def parse_int(value):
    """Parse the leading integer of a cell.

    "45" -> 45, "45.7" -> 45, " 12abc" -> 12, "abc" -> 0, "" -> 0.
    Never raises.
    """
    match = _INT_PREFIX.match(clean_cell(value))
    if not match:
        return 0
    return int(match.group(0))


def parse_float(value):
    """Parse the leading decimal number of a cell, defaulting to 0.0."""
    match = _FLOAT_PREFIX.match(clean_cell(value))
    if not match:
        return 0.0
    try:
        parsed = float(match.group(0))
    except ValueError:
        return 0.0
    if math.isnan(parsed) or math.isinf(parsed):
        return 0.0
    return parsed


def round_half_up(value):
    """Round to the nearest integer with .5 going up (0.5 -> 1, -0.5 -> 0).

    Python's round() uses banker's rounding, which would make 2.5 -> 2.
    """
    return int(math.floor(value + 0.5))


def safe_mean(values):
    """Arithmetic mean of an iterable; 0.0 when empty.

    Uses math.fsum so the result does not depend on element order.
    """
    values = list(values)
    if not values:
        return 0.0
    return math.fsum(values) / len(values)


def safe_percentage(part, whole):
    """part / whole * 100, or 0.0 if whole is zero."""
    if not whole:
        return 0.0
    return part / whole * 100


def validate_columns(headers, required_cols):
    """Return required columns absent from headers, preserving required order."""
    present = set(headers)
    missing = [c for c in required_cols if c not in present]
    if missing:
        logger.warning(f"Missing columns: {missing}")
    return missing
