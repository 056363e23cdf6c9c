from __future__ import annotations
from enum import Enum
from typing import Dict, Iterable, List, Optional


class Action(Enum):
    """Single agent step. Value is (dx, dy, display char)."""

    UP = (0, -1, "u")
    DOWN = (0, 1, "d")
    LEFT = (-1, 0, "l")
    RIGHT = (1, 0, "r")

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def char(self) -> str:
        return self.value[2]

    @property
    def opposite(self) -> "Action":
        return _OPPOSITE[self]


# Fixed expansion order; the push generator depends on it for reproducible output.
DIRECTIONS = (Action.UP, Action.DOWN, Action.LEFT, Action.RIGHT)

_OPPOSITE: Dict[Action, Action] = {
    Action.UP: Action.DOWN,
    Action.DOWN: Action.UP,
    Action.LEFT: Action.RIGHT,
    Action.RIGHT: Action.LEFT,
}

_BY_CHAR: Dict[str, Action] = {a.char: a for a in DIRECTIONS}


def step_index(idx: int, action: Action, width: int, height: int) -> Optional[int]:
    """Neighbour of `idx` in the given direction, or None when it falls off the grid."""
    x = idx % width + action.dx
    y = idx // width + action.dy
    if 0 <= x < width and 0 <= y < height:
        return y * width + x
    return None


def actions_to_string(actions: Iterable[Action]) -> str:
    return "".join(a.char for a in actions)


def actions_from_string(s: str) -> List[Action]:
    """Inverse of actions_to_string. Upper-case (push-marked LURD) letters are accepted too."""
    out: List[Action] = []
    for ch in s:
        a = _BY_CHAR.get(ch.lower())
        if a is None:
            raise ValueError(f"unknown action character: {ch!r}")
        out.append(a)
    return out
