"""
Stable binary-heap min-priority queue.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    """
    Min-priority queue over (item, priority) pairs.

    Equal priorities pop in insertion order, which keeps traversals that
    use the queue reproducible.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, T]] = []
        self._counter = itertools.count()

    def push(self, item: T, priority: float) -> None:
        heapq.heappush(self._heap, (priority, next(self._counter), item))

    def pop(self) -> T | None:
        """Remove and return the lowest-priority item, or None if empty."""
        if not self._heap:
            return None
        _, _, item = heapq.heappop(self._heap)
        return item

    def peek(self) -> T | None:
        return self._heap[0][2] if self._heap else None

    def drain(self) -> list[T]:
        """Pop everything, lowest priority first."""
        items = []
        while self._heap:
            items.append(heapq.heappop(self._heap)[2])
        return items

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __iter__(self) -> Iterator[T]:
        """Iterate current contents in pop order without removing them."""
        return (item for _, _, item in sorted(self._heap))

    def __contains__(self, item: object) -> bool:
        return any(entry[2] == item for entry in self._heap)
