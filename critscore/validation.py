"""
Validation Logic for critscore.

Two kinds of checks live here:

1. Config checks are fatal. They raise ConfigError and run once,
   before any record is read.
2. Cell parsing is never fatal. A cell that is not a finite number
   is dropped from the record and scoring continues.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

from .domain import ConfigError, Distribution, Record


# =============================================================================
# CELL PARSING (Row-Level, Recoverable)
# =============================================================================

def parse_cell(raw: str) -> Optional[float]:
    """
    Parse a raw CSV cell into a finite float.

    Returns None for empty, malformed, NaN and infinite values.
    Surrounding whitespace and digit separators ("1_000") count as
    malformed.
    """
    if raw != raw.strip() or "_" in raw:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def make_record(header: Sequence[str], row: Sequence[str]) -> Record:
    """
    Build a Record from a header and a row of raw cells.

    Cells are matched to the header by position. Missing trailing
    cells and unparsable cells are left out of the record.
    """
    record: Record = {}
    for name, raw in zip(header, row):
        value = parse_cell(raw)
        if value is None:
            continue
        record[name] = value
    return record


# =============================================================================
# CONFIG CHECKS (Fatal)
# =============================================================================

def require_number(value: Any, key: str, field_name: str) -> float:
    """
    Coerce a config value to a finite float.

    Raises:
        ConfigError: If value is not a finite number
    """
    # bool is an int subclass; "weight: true" is a typo, not a weight
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number, got {value!r}", field_name)
    value = float(value)
    if not math.isfinite(value):
        raise ConfigError(f"{key} must be finite, got {value!r}", field_name)
    return value


def validate_weight(weight: float, field_name: str) -> None:
    """
    Raises:
        ConfigError: If weight is negative
    """
    if weight < 0:
        raise ConfigError(f"weight must not be negative, got {weight}", field_name)


def validate_bounds(lower: float, upper: float, field_name: str) -> None:
    """
    Validate that the bounds form a range.

    Equal bounds are allowed (degenerate range).

    Raises:
        ConfigError: If upper is below lower
    """
    if upper < lower:
        raise ConfigError(
            f"upper bound {upper} is below lower bound {lower}",
            field_name,
        )


def parse_distribution(value: Any, field_name: str) -> Distribution:
    """
    Raises:
        ConfigError: If value does not name a known distribution
    """
    try:
        return Distribution(str(value).lower())
    except ValueError:
        known = ", ".join(d.value for d in Distribution)
        raise ConfigError(
            f"unknown distribution {value!r} (expected one of: {known})",
            field_name,
        ) from None


def parse_flag(value: Any, key: str, field_name: str) -> bool:
    """
    Raises:
        ConfigError: If value is not a boolean
    """
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}", field_name)
    return value
