from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Set, Tuple

from .board import StaticBoard, analyze, initial_state
from .errors import (
    CrateGoalMismatchError,
    EmptyLevelError,
    InvalidSymbolError,
    MissingPlayerError,
    MultiplePlayersError,
)
from .state import BoardState, Coord

TOK_WALL = "#"
TOK_GOAL = "."
TOK_CRATE = ("$", "b")
TOK_CRATE_ON_GOAL = ("*", "B")
TOK_PLAYER = ("@", "p")
TOK_PLAYER_ON_GOAL = ("+", "P")
TOK_FLOOR = (" ", "-", "_")


@dataclass
class LevelLayout:
    """Coordinates scanned from level text, before any static analysis."""

    width: int
    height: int
    walls: Set[Coord] = field(default_factory=set)
    goals: Set[Coord] = field(default_factory=set)
    crates: Set[Coord] = field(default_factory=set)
    players: List[Coord] = field(default_factory=list)


def _level_lines(level_str: str) -> List[str]:
    """Right-trimmed lines from the first non-blank line up to the next blank one."""
    lines: List[str] = []
    for line in level_str.splitlines():
        line = line.rstrip()
        if line == "":
            if lines:
                break
            continue
        lines.append(line)
    return lines


def scan_level(level_str: str) -> LevelLayout:
    """Parses ASCII level into coordinate sets and validates it.

    Supported characters:
      '#': wall
      '.': goal
      '$', 'b': crate
      '*', 'B': crate on goal
      '@', 'p': player
      '+', 'P': player on goal
      ' ', '-', '_': floor
    Short rows are padded with floor on the right.
    """
    lines = _level_lines(level_str)
    if not lines:
        raise EmptyLevelError()
    height = len(lines)
    width = max(len(line) for line in lines)
    layout = LevelLayout(width=width, height=height)

    for y, line in enumerate(lines):
        for x, ch in enumerate(line):
            pos = (x, y)
            if ch == TOK_WALL:
                layout.walls.add(pos)
            elif ch == TOK_GOAL:
                layout.goals.add(pos)
            elif ch in TOK_CRATE:
                layout.crates.add(pos)
            elif ch in TOK_CRATE_ON_GOAL:
                layout.crates.add(pos)
                layout.goals.add(pos)
            elif ch in TOK_PLAYER:
                layout.players.append(pos)
            elif ch in TOK_PLAYER_ON_GOAL:
                layout.players.append(pos)
                layout.goals.add(pos)
            elif ch not in TOK_FLOOR:
                raise InvalidSymbolError(ch, pos)

    if not layout.players:
        raise MissingPlayerError()
    if len(layout.players) > 1:
        raise MultiplePlayersError(len(layout.players))
    if len(layout.crates) != len(layout.goals):
        raise CrateGoalMismatchError(len(layout.crates), len(layout.goals))
    return layout


def parse_level_str(level_str: str) -> Tuple[StaticBoard, BoardState]:
    """Scan, validate and analyze a level. Returns the static board and the start state."""
    layout = scan_level(level_str)
    agent = layout.players[0]
    board = analyze(layout.width, layout.height, layout.walls, layout.goals, layout.crates, agent)
    return board, initial_state(board, layout.crates, agent)


def parse_level_file(path: str) -> Tuple[StaticBoard, BoardState]:
    with open(path, "r", encoding="utf-8") as f:
        return parse_level_str(f.read())
