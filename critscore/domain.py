"""
Core Domain Objects for critscore.

Domain Objects:
    Record          — One input row as field name → numeric value
    Distribution    — Curve applied to a normalized field value
    FieldSpec       — Scoring configuration for a single field
    AlgorithmConfig — Algorithm name plus all configured fields
    ScoredRow       — Raw input cells with the formatted score appended

Errors:
    ScorerError         — Base for every fatal condition
    ConfigError         — The config cannot be loaded or is invalid
    HeaderConflictError — The result column already exists in the input
    InputError          — The input cannot be scored at all
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# =============================================================================
# ERRORS
# =============================================================================

class ScorerError(Exception):
    """Base class for fatal scoring errors."""


class ConfigError(ScorerError):
    """
    Raised when a configuration is unreadable or invalid.

    Always raised before any record is processed.
    """

    def __init__(self, reason: str, field_name: Optional[str] = None):
        self.reason = reason
        self.field_name = field_name
        if field_name:
            super().__init__(f"field '{field_name}': {reason}")
        else:
            super().__init__(reason)


class HeaderConflictError(ScorerError):
    """Raised when the result column name is already in the input header."""

    def __init__(self, column: str):
        self.column = column
        super().__init__(f"header already contains field {column}")


class InputError(ScorerError):
    """Raised when the input has no usable header row."""


# =============================================================================
# RECORD
# =============================================================================

# Field name → finite value. Absent fields are simply not present.
Record = dict[str, float]

# Raw input cells with the formatted score as the last cell.
ScoredRow = tuple[str, ...]


# =============================================================================
# FIELD SPEC
# =============================================================================

class Distribution(Enum):
    """Curve applied to a field's normalized value."""
    LINEAR = "linear"
    ZIPFIAN = "zipfian"


@dataclass(frozen=True)
class FieldSpec:
    """
    Scoring configuration for one field.

    Invariants (checked at load time, see validation.py):
    - weight >= 0
    - lower <= upper, both finite
    """
    upper: float
    lower: float = 0.0
    weight: float = 1.0
    distribution: Distribution = Distribution.LINEAR
    smaller_is_better: bool = False

    @property
    def bound_range(self) -> float:
        return self.upper - self.lower

    @property
    def is_degenerate(self) -> bool:
        """Equal bounds: every value counts as fully satisfied."""
        return self.upper == self.lower


# =============================================================================
# ALGORITHM CONFIG
# =============================================================================

@dataclass(frozen=True)
class AlgorithmConfig:
    """
    A loaded scoring configuration.

    Parsed once per run and read-only afterwards.
    """
    name: str
    fields: dict[str, FieldSpec] = field(default_factory=dict)

    @property
    def total_weight(self) -> float:
        """Sum of all configured weights."""
        return sum(spec.weight for spec in self.fields.values())
