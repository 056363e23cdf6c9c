from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class SearchProgress:
    expanded: int      # expanded (non-duplicate) nodes
    max_depth: int     # largest g seen on a popped node
    lower_bound: int   # largest f seen; no solution is shorter than this
    frontier: int


ProgressCallback = Callable[[SearchProgress], None]


class ProgressTracker:
    """Counts pops and reports every `frequency` of them to an optional callback."""

    def __init__(self, callback: Optional[ProgressCallback] = None, frequency: int = 7919) -> None:
        if frequency <= 0:
            raise ValueError("frequency must be positive")
        self.callback = callback
        self.frequency = frequency
        self.counter = 0
        self.max_depth = 0
        self.max_f = 0

    def update(self, g: int, h: int, frontier: int) -> None:
        self.counter += 1
        self.max_depth = max(self.max_depth, g)
        self.max_f = max(self.max_f, g + h)
        if self.callback is not None and self.counter % self.frequency == 0:
            self.callback(self.snapshot(frontier))

    def finish(self, frontier: int) -> None:
        if self.callback is not None:
            self.callback(self.snapshot(frontier))

    def snapshot(self, frontier: int) -> SearchProgress:
        return SearchProgress(self.counter, self.max_depth, self.max_f, frontier)
