"""
Move geometry - Expands a card's movement pattern into board paths.

A movement pattern is a list of paths. Each path is a sequence of
offsets relative to the card, written from the first player's point of
view: (dx, dy) or (dx, dy, jump). A step marked `jump` is passed over,
never landed on.

The second player sees the board rotated by 180 degrees, so its offsets
are flipped (negated) to give both players the same move set from their
own side of the board.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence

from .state import is_on_board


Offset = Sequence  # (dx, dy) or (dx, dy, jump)
MovePattern = Sequence[Sequence[Offset]]


@dataclass(frozen=True)
class PathStep:
    """One cell along a move path."""
    x: int
    y: int
    jump: bool = False

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)


MovePath = list[PathStep]


def resolve_moves(
    origin: tuple[int, int],
    pattern: MovePattern,
    flip: bool = False,
) -> list[MovePath]:
    """
    Build the candidate paths for a card at `origin`.

    Paths are cut at the first step leaving the board; paths that
    start off-board are dropped.
    """
    ox, oy = origin
    sign = -1 if flip else 1
    paths: list[MovePath] = []

    for offsets in pattern:
        path: MovePath = []
        for offset in offsets:
            dx, dy = offset[0], offset[1]
            jump = bool(offset[2]) if len(offset) > 2 else False
            x, y = ox + sign * dx, oy + sign * dy
            if not is_on_board(x, y):
                break
            path.append(PathStep(x=x, y=y, jump=jump))
        if path:
            paths.append(path)

    return paths


# Common patterns

def line(dx: int, dy: int, length: int) -> list[tuple[int, int]]:
    """A straight path of `length` steps in direction (dx, dy)."""
    return [(dx * i, dy * i) for i in range(1, length + 1)]


ORTHOGONAL = [(0, 1), (1, 0), (0, -1), (-1, 0)]
DIAGONAL = [(1, 1), (1, -1), (-1, 1), (-1, -1)]


def rays(directions: list[tuple[int, int]], length: int) -> list[list[tuple[int, int]]]:
    """One straight path per direction."""
    return [line(dx, dy, length) for dx, dy in directions]
