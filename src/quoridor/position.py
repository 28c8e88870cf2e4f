"""
A cell on the board

(placed in its own module as every other module of the engine needs to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Quoridor is played on a 9x9 board. Walls are anchored on the (N-1)x(N-1) grid of intersections in between.
BOARD_SIZE = 9

Vector = tuple[int, int]

# Scan order used whenever the engine lists destinations. Row 0 is the top edge of the board.
UP: Vector = (-1, 0)
DOWN: Vector = (1, 0)
LEFT: Vector = (0, -1)
RIGHT: Vector = (0, 1)
DIRECTIONS: tuple[Vector, ...] = (UP, DOWN, LEFT, RIGHT)


@dataclass(frozen=True, order=True)
class Position:
    row: int
    col: int

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_SIZE) and (0 <= self.col < BOARD_SIZE)

    def shifted(self, direction: Vector, steps: int = 1) -> Position:
        dr, dc = direction
        return Position(self.row + dr * steps, self.col + dc * steps)

    def neighbors(self) -> list[Position]:
        """In-bounds orthogonal neighbors, ignoring walls"""
        return [
            cell
            for cell in (self.shifted(direction) for direction in DIRECTIONS)
            if cell.is_within_bounds()
        ]


def are_adjacent(a: Position, b: Position) -> bool:
    """Manhattan distance of exactly 1"""
    return abs(a.row - b.row) + abs(a.col - b.col) == 1


def midpoint(a: Position, b: Position) -> Position | None:
    """The cell jumped over when moving two cells along one axis. None for any other pair."""
    dr = b.row - a.row
    dc = b.col - a.col
    if (abs(dr), abs(dc)) not in ((2, 0), (0, 2)):
        return None
    return Position(a.row + dr // 2, a.col + dc // 2)

