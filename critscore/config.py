"""
Configuration Loading for critscore.

A config file names the algorithm and the fields it scores:

    algorithm: pike
    fields:
      legacy.created_since:
        weight: 1
        upper: 120
        distribution: zipfian

Per-field defaults:
    weight            1
    lower             0
    distribution      linear
    smaller_is_better false

`upper` is required. Any problem raises ConfigError before a single
record is read.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Union

import yaml

from .domain import AlgorithmConfig, ConfigError, Distribution, FieldSpec
from .validation import (
    parse_distribution,
    parse_flag,
    require_number,
    validate_bounds,
    validate_weight,
)

logger = logging.getLogger(__name__)


FIELD_KEYS = {"weight", "lower", "upper", "distribution", "smaller_is_better"}
TOP_LEVEL_KEYS = {"algorithm", "fields"}


# =============================================================================
# PARSING
# =============================================================================

def parse_field_spec(field_name: str, data: Any) -> FieldSpec:
    """Build a validated FieldSpec from one entry of the `fields` mapping."""
    if not isinstance(data, dict):
        raise ConfigError("field config must be a mapping", field_name)

    unknown = set(data) - FIELD_KEYS
    if unknown:
        raise ConfigError(f"unknown keys: {', '.join(sorted(map(str, unknown)))}", field_name)

    if "upper" not in data:
        raise ConfigError("upper bound is required", field_name)

    upper = require_number(data["upper"], "upper", field_name)
    lower = require_number(data.get("lower", 0), "lower", field_name)
    weight = require_number(data.get("weight", 1), "weight", field_name)
    distribution = (
        parse_distribution(data["distribution"], field_name)
        if "distribution" in data
        else Distribution.LINEAR
    )
    smaller_is_better = parse_flag(
        data.get("smaller_is_better", False), "smaller_is_better", field_name
    )

    validate_weight(weight, field_name)
    validate_bounds(lower, upper, field_name)

    return FieldSpec(
        upper=upper,
        lower=lower,
        weight=weight,
        distribution=distribution,
        smaller_is_better=smaller_is_better,
    )


def parse_config(data: Any) -> AlgorithmConfig:
    """
    Build an AlgorithmConfig from a deserialized config document.

    Raises:
        ConfigError: If the document is malformed
    """
    if not isinstance(data, dict):
        raise ConfigError("config must be a mapping")

    unknown = set(data) - TOP_LEVEL_KEYS
    if unknown:
        raise ConfigError(f"unknown keys: {', '.join(sorted(map(str, unknown)))}")

    name = data.get("algorithm")
    if not isinstance(name, str) or not name.strip():
        raise ConfigError("algorithm must be a non-empty string")

    raw_fields = data.get("fields")
    if not isinstance(raw_fields, dict) or not raw_fields:
        raise ConfigError("fields must be a non-empty mapping")

    fields = {
        str(field_name): parse_field_spec(str(field_name), spec)
        for field_name, spec in raw_fields.items()
    }

    config = AlgorithmConfig(name=name.strip(), fields=fields)
    if config.total_weight == 0:
        logger.warning("No field has a positive weight; every record will score 0")
    return config


# =============================================================================
# LOADING
# =============================================================================

def load_config(path: Union[str, Path]) -> AlgorithmConfig:
    """
    Load and validate a YAML config file.

    Raises:
        ConfigError: If the file cannot be read or parsed, or is invalid
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse config {path}: {e}") from e

    config = parse_config(data)
    logger.debug(
        "Loaded config %s: algorithm=%s fields=%d",
        path, config.name, len(config.fields),
    )
    return config
