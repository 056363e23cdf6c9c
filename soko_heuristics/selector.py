from __future__ import annotations
from typing import Callable, Dict

from soko_core.board import StaticBoard
from soko_core.state import BoardState
from soko_heuristics.classic import h_assignment, h_goal_distance, h_unsatisfied_goal_distance, h_zero

Heuristic = Callable[[StaticBoard, BoardState], int]

HEURISTICS: Dict[str, Heuristic] = {
    "zero": h_zero,
    "goal_distance": h_goal_distance,
    "unsatisfied": h_unsatisfied_goal_distance,
    "assignment": h_assignment,
}


def get_heuristic(name: str) -> Heuristic:
    name = name.lower()
    try:
        return HEURISTICS[name]
    except KeyError:
        raise ValueError(f"unknown heuristic: {name}") from None
