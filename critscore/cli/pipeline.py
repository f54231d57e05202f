"""
Pipeline Driver for critscore.

Ties the stages together into a single pass:

    1. Read the header and derive the output header
    2. Score every row and buffer it in a RankedCollector
    3. Drain the collector to the writer, highest score first

Nothing is written for rows until every row has been scored.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable, Iterator, Optional, Sequence

from ..domain import HeaderConflictError, InputError, ScoredRow
from ..ranking.collector import RankedCollector
from ..ranking.scorer import ScoringAlgorithm
from ..validation import make_record

logger = logging.getLogger(__name__)


SCORE_FORMAT = "{:.5f}"
COLUMN_SUFFIX = "_score"

_NON_COLUMN_CHARS = re.compile(r"[^a-z0-9_]")


# =============================================================================
# HEADER HANDLING
# =============================================================================

def generate_column_name(config_path: str, override: Optional[str] = None) -> str:
    """
    Derive the result column name.

    An explicit override wins. Otherwise the config file name is used
    without its directory and extension, lower-cased, with every
    character outside [a-z0-9_] replaced by "_", plus "_score".

        Legacy-Config.YAML → legacy_config_score
    """
    if override:
        return override
    stem = PurePath(config_path).stem.lower()
    return _NON_COLUMN_CHARS.sub("_", stem) + COLUMN_SUFFIX


def make_out_header(header: Sequence[str], column: str) -> list[str]:
    """
    Append the result column to the input header.

    Raises:
        HeaderConflictError: If the header already has that column
    """
    if column in header:
        raise HeaderConflictError(column)
    return [*header, column]


def format_score(score: float) -> str:
    return SCORE_FORMAT.format(score)


# =============================================================================
# PIPELINE RESULT
# =============================================================================

@dataclass
class PipelineResult:
    """Summary of one scoring run."""
    out_header: list[str]
    rows_scored: int = 0


# =============================================================================
# PIPELINE EXECUTION
# =============================================================================

def skip_blank_lines(reader: Iterable[list[str]]) -> Iterator[list[str]]:
    """Drop empty lines; csv.reader yields them as []."""
    return (row for row in reader if row)


def read_header(rows: Iterator[list[str]]) -> list[str]:
    """
    Raises:
        InputError: If the input is empty
    """
    try:
        return next(rows)
    except StopIteration:
        raise InputError("input has no header row") from None


def score_rows(
    header: Sequence[str],
    rows: Iterable[Sequence[str]],
    algorithm: ScoringAlgorithm,
) -> RankedCollector:
    """Score every row and collect it with its formatted score appended."""
    collector = RankedCollector()
    for row in rows:
        record = make_record(header, row)
        score = algorithm.score(record)
        scored: ScoredRow = (*row, format_score(score))
        collector.insert(scored, score)
    return collector


def run_pipeline(
    reader: Iterable[list[str]],
    writer,
    algorithm: ScoringAlgorithm,
    column: str,
) -> PipelineResult:
    """
    Score all rows from reader and write them, ranked, to writer.

    Args:
        reader: csv.reader-like iterable; the first row is the header
        writer: csv.writer-like object with writerow()
        algorithm: The configured ScoringAlgorithm
        column: Name of the result column

    Returns:
        PipelineResult with the output header and row count

    Raises:
        InputError: If the input has no header
        HeaderConflictError: If column is already in the header
    """
    rows = skip_blank_lines(reader)
    header = read_header(rows)
    out_header = make_out_header(header, column)
    writer.writerow(out_header)

    collector = score_rows(header, rows, algorithm)
    result = PipelineResult(out_header=out_header, rows_scored=collector.size())
    logger.info("Scored %d rows", result.rows_scored)

    for row in collector.drain():
        writer.writerow(row)

    return result
