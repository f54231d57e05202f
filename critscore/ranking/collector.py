"""
Ranked Collector for critscore.

Buffers every scored row of a run and emits them by descending score.
Equal scores come out in insertion order, so the output is the same
on every run regardless of how the heap shuffles entries.

The heap is a flat list ordered by (-score, sequence). Sequence numbers
are unique, so the row itself is never compared.

Memory grows with the input; there is no spill to disk.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Iterator

from ..domain import ScoredRow


class RankedCollector:
    """
    Max-heap of scored rows.

    Usage follows two phases: insert every row, then drain.
    """

    def __init__(self):
        self._heap: list[tuple[float, int, ScoredRow]] = []
        self._sequence = itertools.count()

    def insert(self, row: ScoredRow, score: float) -> None:
        """Add a row. O(log n)."""
        heapq.heappush(self._heap, (-score, next(self._sequence), row))

    def size(self) -> int:
        return len(self._heap)

    def __len__(self) -> int:
        return len(self._heap)

    def pop_highest(self) -> ScoredRow:
        """
        Remove and return the highest-scoring row.

        Raises:
            IndexError: If the collector is empty
        """
        if not self._heap:
            raise IndexError("pop from an empty RankedCollector")
        _, _, row = heapq.heappop(self._heap)
        return row

    def drain(self) -> Iterator[ScoredRow]:
        """Pop every row, highest score first."""
        while self._heap:
            yield self.pop_highest()
