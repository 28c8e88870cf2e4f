"""
Walls and the edges they block.

A wall is anchored on an intersection of the (N-1)x(N-1) wall grid and spans two unit edges:
* (r, c, horizontal) blocks moving between rows r and r+1, in columns c and c+1
* (r, c, vertical) blocks moving between columns c and c+1, in rows r and r+1
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Self

from src.core.exceptions import InvalidStateError
from src.core.shared_types import Orientation
from src.quoridor.position import BOARD_SIZE, Position

WALL_GRID_SIZE = BOARD_SIZE - 1

Edge = tuple[Position, Position]


def edge(a: Position, b: Position) -> Edge:
    """Edges are undirected: always store the smaller cell first"""
    return (a, b) if a <= b else (b, a)


@dataclass(frozen=True, order=True)
class Wall:
    row: int
    col: int
    orientation: Orientation

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < WALL_GRID_SIZE) and (0 <= self.col < WALL_GRID_SIZE)

    @property
    def is_horizontal(self) -> bool:
        return self.orientation == Orientation.HORIZONTAL

    def blocked_edges(self) -> tuple[Edge, Edge]:
        r, c = self.row, self.col
        if self.is_horizontal:
            return (
                edge(Position(r, c), Position(r + 1, c)),
                edge(Position(r, c + 1), Position(r + 1, c + 1)),
            )
        return (
            edge(Position(r, c), Position(r, c + 1)),
            edge(Position(r + 1, c), Position(r + 1, c + 1)),
        )

    def conflicting_slots(self) -> list[Self]:
        """
        Walls that cannot coexist with this one.
        ---

        * anything anchored on the same intersection (same slot, or crossing it in the other orientation)
        * a wall of the same orientation shifted by one along its own length, as the two would share an edge
        """
        other = (
            Orientation.VERTICAL if self.is_horizontal else Orientation.HORIZONTAL
        )
        shifts = [(0, -1), (0, 1)] if self.is_horizontal else [(-1, 0), (1, 0)]
        conflicts = [
            type(self)(self.row, self.col, self.orientation),
            type(self)(self.row, self.col, other),
        ]
        conflicts.extend(
            type(self)(self.row + dr, self.col + dc, self.orientation)
            for dr, dc in shifts
        )
        return conflicts


def all_wall_slots() -> list[Wall]:
    """Every anchor/orientation combination on the board (row-major, horizontal first)."""
    return [
        Wall(row, col, orientation)
        for row in range(WALL_GRID_SIZE)
        for col in range(WALL_GRID_SIZE)
        for orientation in (Orientation.HORIZONTAL, Orientation.VERTICAL)
    ]


class WallSet:
    """
    The walls placed in a match.

    Keeps placement order (needed for serialization and undo) next to an index of blocked edges,
    so that path searches can ask "is this edge blocked?" in constant time.
    """

    def __init__(self, walls: Iterable[Wall] = ()) -> None:
        self._walls: list[Wall] = []
        self._blocked: set[Edge] = set()
        for wall in walls:
            self.add(wall)

    def __contains__(self, wall: object) -> bool:
        return wall in self._walls

    def __iter__(self) -> Iterator[Wall]:
        return iter(self._walls)

    def __len__(self) -> int:
        return len(self._walls)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WallSet):
            return NotImplemented
        return self._walls == other._walls

    def __repr__(self) -> str:
        return f"WallSet({self._walls!r})"

    def add(self, wall: Wall) -> None:
        if wall in self._walls:
            raise InvalidStateError(f"Wall already placed: {wall}")
        self._walls.append(wall)
        self._blocked.update(wall.blocked_edges())

    def remove(self, wall: Wall) -> None:
        if wall not in self._walls:
            raise InvalidStateError(f"Wall was never placed: {wall}")
        self._walls.remove(wall)
        self._rebuild_index()

    def with_wall(self, wall: Wall) -> WallSet:
        """Copy with one extra wall. Used to test a placement without touching the original."""
        return WallSet([*self._walls, wall])

    def is_blocked(self, a: Position, b: Position) -> bool:
        return edge(a, b) in self._blocked

    def overlaps(self, wall: Wall) -> bool:
        return any(slot in self._walls for slot in wall.conflicting_slots())

    def _rebuild_index(self) -> None:
        self._blocked = {e for w in self._walls for e in w.blocked_edges()}
