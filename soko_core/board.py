from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple
import logging

import numpy as np

from .actions import DIRECTIONS, Action, step_index
from .deadlocks import find_dead_squares
from .errors import LevelNotEnclosedError
from .state import BoardState, Coord, bit, has_bit, iter_bits, mask_from, set_bit

logger = logging.getLogger(__name__)

UNREACHABLE = -1


@dataclass(frozen=True, eq=False)
class StaticBoard:
    """
    Static analysis of one level, shared read-only by every state of a search.

    Masks are int bitsets indexed by idx = y*width + x.
    goals: goal tile indices in ascending order; row i of `distances` belongs to goals[i].
    distances: (len(goals), width*height) push-distance fields, UNREACHABLE where not reached.
    nearest_goal: per-tile minimum over all rows of `distances`.
    """

    width: int
    height: int
    walls: int
    goals: Tuple[int, ...]
    goal_mask: int
    interior: int
    dead: int
    distances: np.ndarray
    nearest_goal: Tuple[int, ...]

    @property
    def size(self) -> int:
        return self.width * self.height

    # ---- conversions
    def idx(self, x: int, y: int) -> int:
        return y * self.width + x

    def coord(self, idx: int) -> Coord:
        return (idx % self.width, idx // self.width)

    # ---- tile tests
    def is_wall(self, idx: int) -> bool:
        return has_bit(self.walls, idx)

    def is_wall_like(self, idx: Optional[int]) -> bool:
        return idx is None or has_bit(self.walls, idx)

    def is_goal(self, idx: int) -> bool:
        return has_bit(self.goal_mask, idx)

    def is_dead(self, idx: int) -> bool:
        return has_bit(self.dead, idx)

    def is_interior(self, idx: int) -> bool:
        return has_bit(self.interior, idx)

    def step(self, idx: int, action: Action) -> Optional[int]:
        return step_index(idx, action, self.width, self.height)

    def neighbors(self, idx: int) -> Iterator[Tuple[Action, int]]:
        """4-neighbourhood without diagonals, in DIRECTIONS order."""
        for a in DIRECTIONS:
            nb = self.step(idx, a)
            if nb is not None:
                yield a, nb

    def goal_distance(self, goal_no: int, idx: int) -> Optional[int]:
        d = int(self.distances[goal_no, idx])
        return None if d == UNREACHABLE else d

    # ---- state properties
    def is_goal_state(self, state: BoardState) -> bool:
        """Every goal tile holds a crate."""
        return (state.crates & self.goal_mask) == self.goal_mask


# ---- analysis passes

def _grid_neighbors(idx: int, width: int, height: int) -> Iterator[int]:
    for a in DIRECTIONS:
        nb = step_index(idx, a, width, height)
        if nb is not None:
            yield nb


def flood_interior(width: int, height: int, walls: int, agent: int) -> int:
    """Bitset of tiles the agent can walk to, ignoring crates.

    Raises LevelNotEnclosedError when the fill touches the grid border.
    """
    seen = bit(agent)
    q = deque([agent])
    while q:
        cur = q.popleft()
        x, y = cur % width, cur // width
        if x == 0 or y == 0 or x == width - 1 or y == height - 1:
            raise LevelNotEnclosedError((x, y))
        for nb in _grid_neighbors(cur, width, height):
            if not has_bit(walls, nb) and not has_bit(seen, nb):
                seen = set_bit(seen, nb)
                q.append(nb)
    return seen


def goal_distance_field(width: int, height: int, walls: int, dead: int, goal: int) -> np.ndarray:
    """BFS hop counts from `goal` through tiles that are neither walls nor dead."""
    field = np.full(width * height, UNREACHABLE, dtype=np.int32)
    field[goal] = 0
    blocked = walls | dead
    q = deque([goal])
    while q:
        cur = q.popleft()
        d = int(field[cur]) + 1
        for nb in _grid_neighbors(cur, width, height):
            if not has_bit(blocked, nb) and field[nb] == UNREACHABLE:
                field[nb] = d
                q.append(nb)
    return field


def _nearest(distances: np.ndarray, size: int) -> Tuple[int, ...]:
    if distances.shape[0] == 0:
        return (UNREACHABLE,) * size
    big = np.iinfo(np.int32).max
    masked = np.where(distances >= 0, distances, big).min(axis=0)
    masked[masked == big] = UNREACHABLE
    return tuple(masked.tolist())


def analyze(
    width: int,
    height: int,
    walls: Iterable[Coord],
    goals: Iterable[Coord],
    crates: Iterable[Coord],
    agent: Coord,
) -> StaticBoard:
    """Build the static board from validated coordinates.

    Only fails (LevelNotEnclosedError) when the agent can walk off the grid.
    """
    wall_mask = mask_from(y * width + x for x, y in walls)
    goal_idx = tuple(sorted(y * width + x for x, y in goals))
    goal_mask = mask_from(goal_idx)
    agent_idx = agent[1] * width + agent[0]

    interior = flood_interior(width, height, wall_mask, agent_idx)
    dead = find_dead_squares(width, height, wall_mask, goal_mask, interior)

    if goal_idx:
        distances = np.stack([goal_distance_field(width, height, wall_mask, dead, g) for g in goal_idx])
    else:
        distances = np.empty((0, width * height), dtype=np.int32)
    nearest = _nearest(distances, width * height)

    # a crate on a tile no goal field reaches can never be solved either
    for idx in iter_bits(interior & ~goal_mask & ~dead):
        if nearest[idx] == UNREACHABLE:
            dead = set_bit(dead, idx)

    board = StaticBoard(
        width=width,
        height=height,
        walls=wall_mask,
        goals=goal_idx,
        goal_mask=goal_mask,
        interior=interior,
        dead=dead,
        distances=distances,
        nearest_goal=nearest,
    )
    stuck = sum(1 for x, y in crates if board.is_dead(y * width + x))
    logger.debug("analyzed %dx%d level: %d goals, %d interior tiles, %d dead tiles, %d crates start dead",
                 width, height, len(goal_idx), bin(interior).count("1"), bin(dead).count("1"), stuck)
    return board


def initial_state(board: StaticBoard, crates: Iterable[Coord], agent: Coord) -> BoardState:
    return BoardState.from_coords(board.width, agent, crates)
