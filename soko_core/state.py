from dataclasses import dataclass
from typing import Iterable, List, Tuple

# Bit helpers
__all__ = [
    "BoardState",
    "Coord",
    "bit",
    "has_bit",
    "set_bit",
    "clear_bit",
    "iter_bits",
    "mask_from",
]

Coord = Tuple[int, int]


def bit(idx: int) -> int:
    return 1 << idx

def has_bit(mask: int, idx: int) -> bool:
    return (mask >> idx) & 1 == 1

def set_bit(mask: int, idx: int) -> int:
    return mask | bit(idx)

def clear_bit(mask: int, idx: int) -> int:
    return mask & ~bit(idx)


def iter_bits(mask: int) -> Iterable[int]:
    """Iterates over the indices of set bits, lowest first."""
    while mask:
        low = mask & -mask
        yield low.bit_length() - 1
        mask ^= low


def mask_from(indices: Iterable[int]) -> int:
    m = 0
    for idx in indices:
        m = set_bit(m, idx)
    return m


@dataclass(frozen=True, slots=True)
class BoardState:
    """
    Mutable part of a Sokoban configuration, stored as an immutable value.

    player: tile index of the agent (idx = y*width + x).
    crates: bitset, one bit per tile, set where a crate sits.

    The crate set is a plain int, so two states holding the same occupied tiles
    compare and hash equal no matter in which order the crates were added.
    Everything static (walls, goals, dead tiles) lives on the StaticBoard.
    """

    player: int
    crates: int

    @classmethod
    def from_coords(cls, width: int, player: Coord, crates: Iterable[Coord]) -> "BoardState":
        px, py = player
        return cls(player=py * width + px,
                   crates=mask_from(y * width + x for x, y in crates))

    # ---- occupancy
    def has_crate(self, idx: int) -> bool:
        return has_bit(self.crates, idx)

    def with_crate(self, idx: int) -> "BoardState":
        return BoardState(self.player, set_bit(self.crates, idx))

    def without_crate(self, idx: int) -> "BoardState":
        return BoardState(self.player, clear_bit(self.crates, idx))

    def moved_crate(self, src: int, dst: int, player: int) -> "BoardState":
        """Copy with the crate on `src` moved to `dst` and the agent on `player`."""
        return BoardState(player, set_bit(clear_bit(self.crates, src), dst))

    def crate_count(self) -> int:
        return bin(self.crates).count("1")

    # ---- enumeration
    def crate_indices(self) -> List[int]:
        return list(iter_bits(self.crates))

    def crate_coords(self, width: int) -> List[Coord]:
        return [(idx % width, idx // width) for idx in iter_bits(self.crates)]

    def player_coord(self, width: int) -> Coord:
        return (self.player % width, self.player // width)
