from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple

from soko_core.actions import Action


@dataclass(frozen=True, slots=True)
class PathLink:
    """One step of a persistent path: the actions added on top of `parent`.

    Links are shared by every node that extends them, so a frontier of n nodes
    holds n links rather than n copies of their full paths.
    """

    parent: Optional["PathLink"]
    segment: Tuple[Action, ...]


def read_path(link: Optional[PathLink]) -> List[Action]:
    segments: List[Tuple[Action, ...]] = []
    while link is not None:
        segments.append(link.segment)
        link = link.parent
    segments.reverse()
    return [a for seg in segments for a in seg]
