# Ranking package for critscore
"""
Field transforms, scoring algorithms and the ranked collector.

Every score is a pure function of the record and the loaded config.
"""
