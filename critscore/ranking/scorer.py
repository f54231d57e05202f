"""
Scoring Algorithms for critscore.

An algorithm is bound to an AlgorithmConfig at construction and turns
a Record into one finite, non-negative score. Algorithms are selected
by name through an explicit AlgorithmRegistry; nothing registers itself
on import.

Algorithms:
    pike                     — weighted geometric mean (default)
    weighted_arithmetic_mean — weighted arithmetic mean

Only fields present in the record take part. A record that matches no
positively weighted field scores 0.0.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import Callable, Iterator, Optional

from ..domain import AlgorithmConfig, ConfigError, FieldSpec, Record
from .components import contribution, normalized_value

logger = logging.getLogger(__name__)


# Added before the logarithm so a zero value does not become -inf.
PIKE_EPSILON = 1e-9


# =============================================================================
# ALGORITHM INTERFACE
# =============================================================================

class ScoringAlgorithm(ABC):
    """Computes a score for a record from a bound AlgorithmConfig."""

    name: str = ""

    def __init__(self, config: AlgorithmConfig):
        self.config = config

    def present_fields(self, record: Record) -> Iterator[tuple[FieldSpec, float]]:
        """Yield (spec, raw value) for each configured field in the record."""
        for field_name, spec in self.config.fields.items():
            raw = record.get(field_name)
            if raw is not None:
                yield spec, raw

    @abstractmethod
    def score(self, record: Record) -> float:
        ...


# =============================================================================
# PIKE (Weighted Geometric Mean)
# =============================================================================

class PikeAlgorithm(ScoringAlgorithm):
    """
    score = exp( Σ wᵢ·ln(vᵢ + ε) / Σ wᵢ )

    vᵢ is the curve-shaped normalized value of field i and wᵢ its
    weight. Scaling every weight by the same factor leaves the score
    unchanged.
    """

    name = "pike"

    def score(self, record: Record) -> float:
        total_weight = 0.0
        log_sum = 0.0
        for spec, raw in self.present_fields(record):
            if spec.weight == 0:
                continue
            value = normalized_value(spec, raw)
            log_sum += spec.weight * math.log(value + PIKE_EPSILON)
            total_weight += spec.weight

        if total_weight == 0:
            return 0.0
        return math.exp(log_sum / total_weight)


# =============================================================================
# WEIGHTED ARITHMETIC MEAN
# =============================================================================

class WeightedArithmeticMean(ScoringAlgorithm):
    """score = Σ contributionᵢ / Σ wᵢ"""

    name = "weighted_arithmetic_mean"

    def score(self, record: Record) -> float:
        total_weight = 0.0
        total = 0.0
        for spec, raw in self.present_fields(record):
            total += contribution(spec, raw)
            total_weight += spec.weight

        if total_weight == 0:
            return 0.0
        return total / total_weight


# =============================================================================
# REGISTRY
# =============================================================================

AlgorithmFactory = Callable[[AlgorithmConfig], ScoringAlgorithm]


class AlgorithmRegistry:
    """Maps algorithm names to factories."""

    def __init__(self):
        self._factories: dict[str, AlgorithmFactory] = {}

    def register(self, name: str, factory: AlgorithmFactory) -> None:
        if name in self._factories:
            raise ValueError(f"algorithm {name!r} is already registered")
        self._factories[name] = factory

    def names(self) -> list[str]:
        return sorted(self._factories)

    def build(self, config: AlgorithmConfig) -> ScoringAlgorithm:
        """
        Construct the algorithm named by the config.

        Raises:
            ConfigError: If no algorithm is registered under that name
        """
        factory = self._factories.get(config.name)
        if factory is None:
            raise ConfigError(
                f"unknown algorithm {config.name!r} "
                f"(expected one of: {', '.join(self.names())})"
            )
        logger.debug("Using algorithm %s", config.name)
        return factory(config)


def default_registry() -> AlgorithmRegistry:
    """A fresh registry holding the built-in algorithms."""
    registry = AlgorithmRegistry()
    registry.register(PikeAlgorithm.name, PikeAlgorithm)
    registry.register(WeightedArithmeticMean.name, WeightedArithmeticMean)
    return registry


def build_algorithm(
    config: AlgorithmConfig,
    registry: Optional[AlgorithmRegistry] = None,
) -> ScoringAlgorithm:
    """Build the configured algorithm, using the built-ins by default."""
    if registry is None:
        registry = default_registry()
    return registry.build(config)
