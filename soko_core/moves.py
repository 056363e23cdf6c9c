from collections import deque
from typing import Dict, Iterable, List, Optional, Tuple

from .actions import DIRECTIONS, Action
from .board import StaticBoard
from .deadlocks import is_frozen
from .errors import IllegalMoveError
from .state import BoardState, has_bit, set_bit

Successor = Tuple[BoardState, Tuple[Action, ...]]


def _walkable(board: StaticBoard, state: BoardState, idx: Optional[int]) -> bool:
    return idx is not None and not board.is_wall(idx) and not state.has_crate(idx)


def player_reachable(board: StaticBoard, state: BoardState) -> int:
    """Returns the bitmask of cells reachable by the player without pushing crates."""
    start = state.player
    visited = set_bit(0, start)
    q = deque([start])

    while q:
        cur = q.popleft()
        for _, nb in board.neighbors(cur):
            if _walkable(board, state, nb) and not has_bit(visited, nb):
                visited = set_bit(visited, nb)
                q.append(nb)
    return visited


def _walk_to(parent: Dict[int, Tuple[int, Action]], start: int, end: int) -> List[Action]:
    walk: List[Action] = []
    cur = end
    while cur != start:
        cur, a = parent[cur]
        walk.append(a)
    walk.reverse()
    return walk


def generate(board: StaticBoard, state: BoardState) -> List[Successor]:
    """Generates states after *pushing crates*, each with the walk+push that reaches it.

    Algorithm:
      1) BFS over player cells from the current position, crates are obstacles,
      2) for each dequeued cell check the 4 neighbours: a crate there can be pushed
         when the cell beyond it is inside the grid, free and not dead,
      3) after pushing, the player stands on the crate's old cell; the actions are
         the BFS walk to the push origin followed by the push direction.
    Successors with a frozen pair of crates are dropped.
    """
    start = state.player
    parent: Dict[int, Tuple[int, Action]] = {}
    visited = set_bit(0, start)
    q = deque([start])
    succs: List[Successor] = []

    while q:
        cur = q.popleft()
        for a in DIRECTIONS:
            nb = board.step(cur, a)
            if nb is None or board.is_wall(nb):
                continue
            if state.has_crate(nb):
                dest = board.step(nb, a)
                if not _walkable(board, state, dest) or board.is_dead(dest):
                    continue
                child = state.moved_crate(nb, dest, player=nb)
                if is_frozen(board, child):
                    continue
                # each (crate, direction) pair is seen from a single origin cell,
                # so every child appears once per call
                succs.append((child, tuple(_walk_to(parent, start, cur)) + (a,)))
            elif not has_bit(visited, nb):
                visited = set_bit(visited, nb)
                parent[nb] = (cur, a)
                q.append(nb)
    return succs


# ---- replay

def apply_action(board: StaticBoard, state: BoardState, action: Action) -> BoardState:
    """Apply a single walk or push step. Raises IllegalMoveError if the step is blocked."""
    nxt = board.step(state.player, action)
    if nxt is None or board.is_wall(nxt):
        raise IllegalMoveError(f"{action.name} walks into a wall at {board.coord(state.player)}")
    if not state.has_crate(nxt):
        return BoardState(nxt, state.crates)
    dest = board.step(nxt, action)
    if not _walkable(board, state, dest):
        raise IllegalMoveError(f"{action.name} pushes a blocked crate at {board.coord(nxt)}")
    return state.moved_crate(nxt, dest, player=nxt)


def replay(board: StaticBoard, state: BoardState, actions: Iterable[Action]) -> BoardState:
    for a in actions:
        state = apply_action(board, state, a)
    return state
