from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional, Tuple

from .actions import Action, step_index
from .state import BoardState, bit, has_bit, iter_bits, set_bit

if TYPE_CHECKING:
    from .board import StaticBoard

# (vertical wall side, horizontal wall side) pairs that make an L-shaped corner
_L_SHAPES: Tuple[Tuple[Action, Action], ...] = (
    (Action.UP, Action.LEFT),
    (Action.UP, Action.RIGHT),
    (Action.DOWN, Action.LEFT),
    (Action.DOWN, Action.RIGHT),
)

# --- low-level helpers -------------------------------------------------------

def _is_wall_like(walls: int, idx: Optional[int]) -> bool:
    """Treat outside the grid as a wall for deadlock checks."""
    return idx is None or has_bit(walls, idx)


def corner_shapes(walls: int, width: int, height: int, idx: int) -> List[Tuple[Action, Action]]:
    """All L-shapes of two orthogonal walls meeting at `idx`."""
    return [
        (vert, horiz) for vert, horiz in _L_SHAPES
        if _is_wall_like(walls, step_index(idx, vert, width, height))
        and _is_wall_like(walls, step_index(idx, horiz, width, height))
    ]


def _scan_run(walls: int, goals: int, width: int, height: int,
              start: int, direction: Action, side: Action) -> int:
    """Scan from a dead corner along a wall.

    Returns the bitset of the run when every tile up to the next wall keeps a
    wall on `side` and no tile is a goal; 0 otherwise.
    """
    run = bit(start)
    cur = step_index(start, direction, width, height)
    while not _is_wall_like(walls, cur):
        if has_bit(goals, cur):
            return 0
        if not _is_wall_like(walls, step_index(cur, side, width, height)):
            return 0
        run = set_bit(run, cur)
        cur = step_index(cur, direction, width, height)
    return run

# --- static analysis ---------------------------------------------------------

def find_dead_squares(width: int, height: int, walls: int, goals: int, interior: int) -> int:
    """Bitset of interior tiles that make the level unsolvable once a crate is on them.

    Non-goal corners are dead. From each dead corner the wall-hugging runs along
    the row and along the column are dead too when they end in another wall
    without passing a goal or a gap in the wall.
    """
    dead = 0
    for idx in iter_bits(interior):
        if has_bit(goals, idx):
            continue
        shapes = corner_shapes(walls, width, height, idx)
        if not shapes:
            continue
        dead = set_bit(dead, idx)
        for vert, horiz in shapes:
            # along the row, hugging the wall above/below
            dead |= _scan_run(walls, goals, width, height, idx, horiz.opposite, vert)
            # along the column, hugging the wall left/right
            dead |= _scan_run(walls, goals, width, height, idx, vert.opposite, horiz)
    return dead

# --- dynamic rules -----------------------------------------------------------

def _pinned(board: "StaticBoard", idx: int, a: Action, b: Action) -> bool:
    return board.is_wall_like(board.step(idx, a)) or board.is_wall_like(board.step(idx, b))


def is_frozen_pair(board: "StaticBoard", state: BoardState, idx: int) -> bool:
    """Crate on `idx` and its right/lower neighbour block each other against walls."""
    right = board.step(idx, Action.RIGHT)
    if right is not None and state.has_crate(right):
        if _pinned(board, idx, Action.UP, Action.DOWN) and _pinned(board, right, Action.UP, Action.DOWN):
            if not (board.is_goal(idx) and board.is_goal(right)):
                return True

    down = board.step(idx, Action.DOWN)
    if down is not None and state.has_crate(down):
        if _pinned(board, idx, Action.LEFT, Action.RIGHT) and _pinned(board, down, Action.LEFT, Action.RIGHT):
            if not (board.is_goal(idx) and board.is_goal(down)):
                return True
    return False


def is_frozen(board: "StaticBoard", state: BoardState) -> bool:
    """Cheap, incomplete deadlock test: any frozen pair of crates not both on goals."""
    return any(is_frozen_pair(board, state, c) for c in iter_bits(state.crates))


def has_dead_crate(board: "StaticBoard", state: BoardState) -> bool:
    return (state.crates & board.dead) != 0
