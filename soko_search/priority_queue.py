from __future__ import annotations
import heapq
from typing import Generic, List, Tuple, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    """Min-heap on priority; equal priorities pop in insertion order."""

    def __init__(self) -> None:
        self._h: List[Tuple[int, int, T]] = []
        self._tiebreak = 0

    def push(self, priority: int, item: T) -> None:
        self._tiebreak += 1
        heapq.heappush(self._h, (priority, self._tiebreak, item))

    def pop(self) -> Tuple[int, T]:
        priority, _, item = heapq.heappop(self._h)
        return priority, item

    def __len__(self) -> int:
        return len(self._h)
