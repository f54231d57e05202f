# CLI package for critscore
"""
Command-line interface for scoring a CSV of collected signals.

Usage:
    critscore --config pike.yml IN_CSV OUT_CSV
"""
