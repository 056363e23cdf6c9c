from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Tuple
import logging
import time

from soko_core.actions import Action, actions_to_string
from soko_core.board import StaticBoard
from soko_core.deadlocks import has_dead_crate
from soko_core.moves import generate
from soko_core.state import BoardState
from soko_heuristics.classic import INF, h_unsatisfied_goal_distance, h_zero
from .path import PathLink, read_path
from .priority_queue import PriorityQueue
from .progress import ProgressCallback, ProgressTracker

logger = logging.getLogger(__name__)

HeuristicFn = Callable[[StaticBoard, BoardState], int]
# (g, h, state, back-pointer)
Node = Tuple[int, int, BoardState, Optional[PathLink]]


class SearchStatus(str, Enum):
    SOLVED = "solved"
    UNSOLVABLE = "unsolvable"
    BUDGET_EXCEEDED = "budget_exceeded"


@dataclass(frozen=True)
class SearchBudget:
    max_nodes: Optional[int] = None    # expanded (non-duplicate) nodes
    max_time: Optional[float] = None   # seconds of wall time


@dataclass
class SearchResult:
    status: SearchStatus
    actions: List[Action] = field(default_factory=list)
    nodes: int = 0
    generated: int = 0
    runtime: float = 0.0
    max_depth: int = 0
    lower_bound: int = 0
    reason: Optional[str] = None  # which budget stopped the search

    @property
    def success(self) -> bool:
        return self.status is SearchStatus.SOLVED

    @property
    def solution_len(self) -> int:
        return len(self.actions) if self.success else -1

    def to_dict(self) -> Dict[str, object]:
        return {
            "status": self.status.value,
            "success": self.success,
            "nodes": self.nodes,
            "generated": self.generated,
            "runtime": self.runtime,
            "solution_len": self.solution_len,
            "solution": actions_to_string(self.actions),
            "reason": self.reason or "",
        }


def astar(
    board: StaticBoard,
    start: BoardState,
    h_fn: Optional[HeuristicFn] = None,
    budget: Optional[SearchBudget] = None,
    on_progress: Optional[ProgressCallback] = None,
    should_stop: Optional[Callable[[], bool]] = None,
    progress_every: int = 7919,
) -> SearchResult:
    """A* over push states; a step costs the length of its walk plus the push.

    States are marked visited when popped, so the frontier may hold stale
    duplicates that are skipped later. Budgets and `should_stop` are checked
    once per pop.
    """
    h_fn = h_fn or h_unsatisfied_goal_distance
    budget = budget or SearchBudget()
    t0 = time.perf_counter()
    tracker = ProgressTracker(on_progress, progress_every)
    openq: PriorityQueue[Node] = PriorityQueue()
    visited: Set[BoardState] = set()
    expanded = 0
    generated = 0

    def finish(status: SearchStatus, actions: Optional[List[Action]] = None,
               reason: Optional[str] = None) -> SearchResult:
        tracker.finish(len(openq))
        res = SearchResult(
            status=status,
            actions=actions or [],
            nodes=expanded,
            generated=generated,
            runtime=time.perf_counter() - t0,
            max_depth=tracker.max_depth,
            lower_bound=tracker.max_f,
            reason=reason,
        )
        logger.info("search %s after %d nodes (%d generated) in %.3fs%s",
                    status.value, res.nodes, res.generated, res.runtime,
                    f" [{reason}]" if reason else "")
        return res

    if has_dead_crate(board, start):
        logger.debug("start state has a crate on a dead tile")
        return finish(SearchStatus.UNSOLVABLE)
    h0 = h_fn(board, start)
    if h0 >= INF:
        # start is already in deadlock
        return finish(SearchStatus.UNSOLVABLE)
    openq.push(h0, (0, h0, start, None))

    while len(openq) > 0:
        if should_stop is not None and should_stop():
            return finish(SearchStatus.BUDGET_EXCEEDED, reason="cancelled")
        if budget.max_time is not None and (time.perf_counter() - t0) > budget.max_time:
            return finish(SearchStatus.BUDGET_EXCEEDED, reason="max_time")
        if budget.max_nodes is not None and expanded >= budget.max_nodes:
            return finish(SearchStatus.BUDGET_EXCEEDED, reason="max_nodes")

        _, (g, h, s, link) = openq.pop()
        if s in visited:
            continue
        visited.add(s)
        expanded += 1
        tracker.update(g, h, len(openq))

        if board.is_goal_state(s):
            return finish(SearchStatus.SOLVED, read_path(link))

        for child, segment in generate(board, s):
            if child in visited:
                continue
            generated += 1
            hc = h_fn(board, child)
            if hc >= INF:
                continue
            gc = g + len(segment)
            openq.push(gc + hc, (gc, hc, child, PathLink(link, segment)))

    return finish(SearchStatus.UNSOLVABLE)


def search(
    board: StaticBoard,
    start: BoardState,
    budget: Optional[SearchBudget] = None,
    h_fn: Optional[HeuristicFn] = None,
    **kwargs,
) -> SearchResult:
    """Entry point for callers: solve `start` on `board` within an optional budget."""
    return astar(board, start, h_fn=h_fn, budget=budget, **kwargs)


def uniform_cost_search(
    board: StaticBoard,
    start: BoardState,
    budget: Optional[SearchBudget] = None,
) -> SearchResult:
    """Uninformed baseline over the same push model (A* with h = 0)."""
    return astar(board, start, h_fn=h_zero, budget=budget)
