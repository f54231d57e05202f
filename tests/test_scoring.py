"""
Tests for Scoring Algorithms.

These tests verify:
1. Pike (weighted geometric mean) scores
2. Invariance under scaling all weights
3. Absent and unparsable fields never fail
4. Weighted arithmetic mean
5. Registry lookup and unknown algorithm rejection
6. Record building from raw CSV cells
"""

import math

import pytest

from critscore.domain import AlgorithmConfig, ConfigError, Distribution, FieldSpec
from critscore.ranking.scorer import (
    PIKE_EPSILON,
    AlgorithmRegistry,
    PikeAlgorithm,
    ScoringAlgorithm,
    WeightedArithmeticMean,
    build_algorithm,
    default_registry,
)
from critscore.validation import make_record, parse_cell


# =============================================================================
# TEST FIXTURES
# =============================================================================

def make_config(name: str = "pike", **fields: FieldSpec) -> AlgorithmConfig:
    """Helper to create an AlgorithmConfig for testing."""
    return AlgorithmConfig(name=name, fields=dict(fields))


def two_field_config(name: str = "pike", scale: float = 1.0) -> AlgorithmConfig:
    return make_config(
        name,
        a=FieldSpec(upper=10.0, weight=1.0 * scale),
        b=FieldSpec(upper=100.0, weight=3.0 * scale, distribution=Distribution.ZIPFIAN),
    )


# =============================================================================
# PIKE ALGORITHM
# =============================================================================

class TestPikeAlgorithm:
    """Weighted geometric mean."""

    def test_single_field(self):
        """{x: 5} in [0, 10] scores 0.5."""
        algorithm = PikeAlgorithm(make_config(x=FieldSpec(upper=10.0)))

        score = algorithm.score({"x": 5.0})

        assert score == pytest.approx(0.5, abs=1e-6)
        assert f"{score:.5f}" == "0.50000"

    def test_weighted_geometric_mean(self):
        """Weights act as exponents: 0.5^(1/4) · 1.0^(3/4)."""
        config = make_config(
            a=FieldSpec(upper=10.0, weight=1.0),
            b=FieldSpec(upper=10.0, weight=3.0),
        )
        algorithm = PikeAlgorithm(config)

        score = algorithm.score({"a": 5.0, "b": 10.0})

        assert score == pytest.approx(0.5 ** 0.25, abs=1e-6)

    def test_zero_value_scores_near_zero(self):
        """A zero value is lifted only by epsilon."""
        algorithm = PikeAlgorithm(make_config(x=FieldSpec(upper=10.0)))

        score = algorithm.score({"x": 0.0})

        assert score == pytest.approx(PIKE_EPSILON)
        assert f"{score:.5f}" == "0.00000"

    @pytest.mark.parametrize("scale", [0.001, 0.5, 2.5, 1000.0])
    def test_invariant_under_weight_scaling(self, scale):
        """Scaling every weight by the same factor leaves the score alone."""
        record = {"a": 7.0, "b": 33.0}
        base = PikeAlgorithm(two_field_config()).score(record)
        scaled = PikeAlgorithm(two_field_config(scale=scale)).score(record)

        assert scaled == pytest.approx(base, rel=1e-12)

    def test_all_fields_absent_scores_zero(self):
        algorithm = PikeAlgorithm(two_field_config())

        assert algorithm.score({}) == 0.0
        assert algorithm.score({"unrelated": 5.0}) == 0.0

    def test_zero_weights_score_zero(self):
        algorithm = PikeAlgorithm(make_config(x=FieldSpec(upper=10.0, weight=0.0)))

        assert algorithm.score({"x": 10.0}) == 0.0

    def test_missing_field_uses_remaining_fields(self):
        """A record without b scores on a alone."""
        algorithm = PikeAlgorithm(two_field_config())
        only_a = PikeAlgorithm(make_config(a=FieldSpec(upper=10.0)))

        assert algorithm.score({"a": 5.0}) == pytest.approx(only_a.score({"a": 5.0}))

    def test_score_is_finite_and_non_negative(self):
        algorithm = PikeAlgorithm(two_field_config())

        for record in [{}, {"a": 0.0}, {"a": -1e9, "b": 1e9}, {"a": 10.0, "b": 100.0}]:
            score = algorithm.score(record)
            assert math.isfinite(score)
            assert score >= 0.0

    def test_scoring_is_deterministic(self):
        algorithm = PikeAlgorithm(two_field_config())
        record = {"a": 3.0, "b": 12.0}

        assert algorithm.score(record) == algorithm.score(record)


# =============================================================================
# WEIGHTED ARITHMETIC MEAN
# =============================================================================

class TestWeightedArithmeticMean:
    """Σ contribution / Σ weight."""

    def test_weighted_mean(self):
        config = make_config(
            "weighted_arithmetic_mean",
            a=FieldSpec(upper=10.0, weight=1.0),
            b=FieldSpec(upper=10.0, weight=3.0),
        )
        algorithm = WeightedArithmeticMean(config)

        assert algorithm.score({"a": 5.0, "b": 10.0}) == pytest.approx((0.5 + 3.0) / 4.0)

    def test_zero_value_scores_zero(self):
        algorithm = WeightedArithmeticMean(make_config(x=FieldSpec(upper=10.0)))

        assert algorithm.score({"x": 0.0}) == 0.0

    def test_all_fields_absent_scores_zero(self):
        algorithm = WeightedArithmeticMean(two_field_config())

        assert algorithm.score({}) == 0.0


# =============================================================================
# REGISTRY
# =============================================================================

class TestRegistry:
    """Algorithm selection by name."""

    def test_default_names(self):
        assert default_registry().names() == ["pike", "weighted_arithmetic_mean"]

    def test_build_pike(self):
        algorithm = build_algorithm(two_field_config("pike"))

        assert isinstance(algorithm, PikeAlgorithm)
        assert algorithm.config.name == "pike"

    def test_build_weighted_arithmetic_mean(self):
        algorithm = build_algorithm(two_field_config("weighted_arithmetic_mean"))

        assert isinstance(algorithm, WeightedArithmeticMean)

    def test_unknown_algorithm_fails(self):
        """No silent fallback to a default algorithm."""
        with pytest.raises(ConfigError, match="unknown algorithm 'sparrow'"):
            build_algorithm(two_field_config("sparrow"))

    def test_registries_are_independent(self):
        """Registering on one registry does not leak into another."""
        class MaxAlgorithm(ScoringAlgorithm):
            name = "max"

            def score(self, record):
                return max((v for _, v in self.present_fields(record)), default=0.0)

        registry = default_registry()
        registry.register(MaxAlgorithm.name, MaxAlgorithm)

        algorithm = build_algorithm(two_field_config("max"), registry)
        assert algorithm.score({"a": 2.0, "b": 7.0}) == 7.0
        assert "max" not in default_registry().names()

    def test_duplicate_registration_fails(self):
        registry = AlgorithmRegistry()
        registry.register("pike", PikeAlgorithm)

        with pytest.raises(ValueError):
            registry.register("pike", PikeAlgorithm)


# =============================================================================
# RECORD BUILDING
# =============================================================================

class TestRecordBuilding:
    """Raw cells → Record. Bad cells are dropped, never fatal."""

    def test_numeric_cells_parsed(self):
        record = make_record(["x", "y"], ["5", "-1.5e2"])

        assert record == {"x": 5.0, "y": -150.0}

    def test_unparsable_cells_absent(self):
        record = make_record(["name", "x", "y"], ["acme", "", "12"])

        assert record == {"y": 12.0}

    @pytest.mark.parametrize("raw", ["NaN", "nan", "Inf", "-inf", "infinity", "1e400"])
    def test_non_finite_cells_absent(self, raw):
        assert parse_cell(raw) is None
        assert make_record(["x"], [raw]) == {}

    @pytest.mark.parametrize("raw", [" 5", "5 ", "\t5", "1_000", "1_0.5"])
    def test_padded_and_separated_cells_absent(self, raw):
        """Cells a strict float parser rejects are not scored."""
        assert parse_cell(raw) is None
        assert make_record(["x"], [raw]) == {}

    def test_short_row_leaves_fields_absent(self):
        """A row missing the x cell scores on the remaining fields."""
        header = ["a", "x"]
        record = make_record(header, ["5"])

        assert record == {"a": 5.0}
        algorithm = PikeAlgorithm(make_config(
            a=FieldSpec(upper=10.0),
            x=FieldSpec(upper=10.0),
        ))
        assert algorithm.score(record) == pytest.approx(0.5, abs=1e-6)

    def test_extra_cells_ignored(self):
        assert make_record(["x"], ["1", "2", "3"]) == {"x": 1.0}
