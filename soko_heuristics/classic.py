from __future__ import annotations
from typing import List

import numpy as np
from scipy.optimize import linear_sum_assignment

from soko_core.board import UNREACHABLE, StaticBoard
from soko_core.errors import ConsistencyError
from soko_core.state import BoardState, iter_bits

INF = 10 ** 9


def _open_crates(board: StaticBoard, state: BoardState) -> List[int]:
    """Crates not resting on a goal."""
    return list(iter_bits(state.crates & ~board.goal_mask))


# ---- classical heuristics

def h_zero(board: StaticBoard, state: BoardState) -> int:
    return 0


def h_goal_distance(board: StaticBoard, state: BoardState) -> int:
    """Sum over crates not on a goal of the push distance to the nearest goal, filled or not.

    Looser than h_unsatisfied_goal_distance. A crate with no distance to any
    goal sits on a tile the analyzer should have marked dead.
    """
    h = 0
    for c in _open_crates(board, state):
        d = board.nearest_goal[c]
        if d == UNREACHABLE:
            raise ConsistencyError(f"crate at {board.coord(c)} has no path to any goal")
        h += d
    return h


def h_unsatisfied_goal_distance(board: StaticBoard, state: BoardState) -> int:
    """Sum over crates not on a goal of the push distance to the nearest empty goal.

    Two crates may count the same goal. When a crate has to use a goal that is
    taken, the parked crate moves on towards an empty one, and the distance
    fields obey the triangle inequality, so the chain of pushes is at least the
    distance to that empty goal: the sum never exceeds the pushes left.
    Falls back to all goals for a crate that reaches no empty one.
    """
    crates = _open_crates(board, state)
    if not crates:
        return 0
    empty = [i for i, g in enumerate(board.goals) if not state.has_crate(g)]
    sub = board.distances[np.ix_(empty, crates)]
    h = 0
    for j, c in enumerate(crates):
        col = sub[:, j]
        col = col[col != UNREACHABLE]
        if col.size:
            h += int(col.min())
            continue
        d = board.nearest_goal[c]
        if d == UNREACHABLE:
            raise ConsistencyError(f"crate at {board.coord(c)} has no path to any goal")
        h += d
    return h


def h_assignment(board: StaticBoard, state: BoardState) -> int:
    """Cost = optimal matching of crates → goals by goal-distance fields.
    Crates and goals that are already matched cost 0; no complete matching → INF."""
    crates = list(iter_bits(state.crates))
    n = len(board.goals)
    if n == 0 or not crates:
        return 0

    C = board.distances[:, crates].T.astype(np.int64)
    C[C == UNREACHABLE] = INF
    r, c = linear_sum_assignment(C)
    total = int(C[r, c].sum())
    return INF if total >= INF else total
