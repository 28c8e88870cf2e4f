"""
Path Oracle
---

Reachability and shortest-path queries over the 9x9 grid, with edges removed wherever a wall blocks them.

Pawns never block a path here: only walls do. This is what guarantees a wall can never seal a player in for good,
while pawns simply move out of the way again.
"""

from collections import deque
from dataclasses import dataclass
from enum import StrEnum

from src.quoridor.position import BOARD_SIZE, Position
from src.quoridor.walls import WallSet


class Axis(StrEnum):
    ROW = "row"
    COLUMN = "column"


@dataclass(frozen=True)
class Goal:
    """A full row or column of the board a player has to reach."""

    axis: Axis
    line: int

    def is_reached(self, position: Position) -> bool:
        if self.axis == Axis.ROW:
            return position.row == self.line
        return position.col == self.line

    def cells(self) -> list[Position]:
        if self.axis == Axis.ROW:
            return [Position(self.line, col) for col in range(BOARD_SIZE)]
        return [Position(row, self.line) for row in range(BOARD_SIZE)]


def shortest_path_length(start: Position, goal: Goal, walls: WallSet) -> int | None:
    """
    Breadth-first search from start until any goal cell is found.

    Returns the number of single steps needed, or None when every goal cell is cut off.
    O(N^2) per query: each cell is visited at most once.
    """
    if goal.is_reached(start):
        return 0

    visited = {start}
    queue: deque[tuple[Position, int]] = deque([(start, 0)])
    while queue:
        cell, distance = queue.popleft()
        for neighbor in cell.neighbors():
            if neighbor in visited or walls.is_blocked(cell, neighbor):
                continue
            if goal.is_reached(neighbor):
                return distance + 1
            visited.add(neighbor)
            queue.append((neighbor, distance + 1))
    return None


def has_path(start: Position, goal: Goal, walls: WallSet) -> bool:
    return shortest_path_length(start, goal, walls) is not None
