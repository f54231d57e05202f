# critscore: Criticality Scorer
"""
Scores rows of numeric signals with a configurable weighted formula
and emits them ranked by descending score.
"""

__version__ = "0.1.0"
