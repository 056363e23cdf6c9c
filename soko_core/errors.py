from __future__ import annotations
from typing import Tuple


class LevelError(ValueError):
    """Malformed level text or layout. Raised before any search runs."""


class EmptyLevelError(LevelError):
    def __init__(self) -> None:
        super().__init__("Level is empty")


class InvalidSymbolError(LevelError):
    def __init__(self, symbol: str, pos: Tuple[int, int]) -> None:
        self.symbol = symbol
        self.pos = pos
        super().__init__(f"Level contains invalid character {symbol!r} at {pos}")


class MissingPlayerError(LevelError):
    def __init__(self) -> None:
        super().__init__("Level has no player")


class MultiplePlayersError(LevelError):
    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Level has more than one player ({count})")


class CrateGoalMismatchError(LevelError):
    def __init__(self, crates: int, goals: int) -> None:
        self.crates = crates
        self.goals = goals
        super().__init__(f"Number of crates ({crates}) and number of goals ({goals}) are not the same")


class AnalysisError(LevelError):
    """The layout scanned fine but cannot be turned into a static board."""


class LevelNotEnclosedError(AnalysisError):
    def __init__(self, escape: Tuple[int, int]) -> None:
        self.escape = escape
        super().__init__(f"Level is not enclosed in walls (agent can reach border tile {escape})")


class IllegalMoveError(ValueError):
    """A replayed action walks into a wall or pushes a blocked crate."""


class ConsistencyError(RuntimeError):
    """Analyzer and push generator disagree; indicates a logic defect, not a bad level."""
