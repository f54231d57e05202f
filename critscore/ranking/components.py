"""
Field Transforms for critscore.

Turns one raw signal value into a bounded, curve-shaped contribution:

    1. Absent value        → no contribution
    2. Clamp               → [lower, upper]
    3. Smaller-is-better   → mirror within the bounds
    4. Normalize           → [0, 1] (degenerate range → 1.0)
    5. Distribution curve  → linear or zipfian
    6. Weight              → multiply

The transform is total: it never raises for a loaded FieldSpec.
NaN and infinite values are dropped while parsing and never get here.
"""

from __future__ import annotations

import math
from typing import Callable, Optional

from ..domain import Distribution, FieldSpec


# =============================================================================
# DISTRIBUTION CURVES
# =============================================================================

def linear_curve(normalized: float, bound_range: float) -> float:
    return normalized


def zipfian_curve(normalized: float, bound_range: float) -> float:
    """
    Logarithmic curve: ln(1 + n·R) / ln(1 + R), R = upper - lower.

    Maps 0 → 0 and 1 → 1. Concave, so growth flattens for values
    already close to the upper bound. A wider range bends harder.
    """
    if bound_range <= 0:
        return normalized
    return math.log1p(normalized * bound_range) / math.log1p(bound_range)


CURVES: dict[Distribution, Callable[[float, float], float]] = {
    Distribution.LINEAR: linear_curve,
    Distribution.ZIPFIAN: zipfian_curve,
}


# =============================================================================
# TRANSFORM STEPS
# =============================================================================

def clamp(spec: FieldSpec, raw: float) -> float:
    """Clamp a raw value into the field's bounds."""
    return min(max(raw, spec.lower), spec.upper)


def normalize(spec: FieldSpec, value: float) -> float:
    """
    Map a clamped value linearly onto [0, 1].

    Smaller-is-better fields are mirrored first, so a larger
    result always means more critical.
    """
    if spec.is_degenerate:
        return 1.0
    if spec.smaller_is_better:
        value = spec.upper - (value - spec.lower)
    return (value - spec.lower) / spec.bound_range


def normalized_value(spec: FieldSpec, raw: Optional[float]) -> Optional[float]:
    """
    Steps 1-5: the curve-shaped value in [0, 1], before weighting.

    Returns None when the field is absent from the record.
    """
    if raw is None:
        return None
    value = normalize(spec, clamp(spec, raw))
    return CURVES[spec.distribution](value, spec.bound_range)


def contribution(spec: FieldSpec, raw: Optional[float]) -> float:
    """
    A field's weighted contribution to the aggregate.

    An absent field contributes 0.0.
    """
    value = normalized_value(spec, raw)
    if value is None:
        return 0.0
    return spec.weight * value
