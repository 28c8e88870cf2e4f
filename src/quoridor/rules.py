"""
Move legality
---

Pure checks for pawn steps, jumps and wall placements. Nothing in here mutates state:
the Match only applies an action after it got accepted here.
"""

from dataclasses import dataclass
from typing import Collection, Iterable, Optional, Self

from src.core.shared_types import ErrorKind
from src.quoridor.pathing import Goal, has_path
from src.quoridor.position import (
    DIRECTIONS,
    Position,
    are_adjacent,
    midpoint,
)
from src.quoridor.walls import Wall, WallSet

# (position, goal) of a player whose path to the goal must survive a wall placement
Runner = tuple[Position, Goal]


@dataclass(frozen=True)
class Verdict:
    """Outcome of a legality check: accepted, or rejected with the reason why."""

    reason: Optional[ErrorKind] = None

    @classmethod
    def accept(cls) -> Self:
        return cls()

    @classmethod
    def reject(cls, reason: ErrorKind) -> Self:
        return cls(reason)

    @property
    def accepted(self) -> bool:
        return self.reason is None

    def __bool__(self) -> bool:
        return self.accepted


# --- PAWN MOVES ---
def validate_step(from_position: Position, to: Position, walls: WallSet) -> bool:
    """A single step to a neighboring cell that is on the board and not cut off by a wall"""
    return (
        to.is_within_bounds()
        and are_adjacent(from_position, to)
        and not walls.is_blocked(from_position, to)
    )


def validate_jump(
    from_position: Position,
    to: Position,
    occupied: Collection[Position],
    walls: WallSet,
) -> bool:
    """
    Straight jump over an adjacent pawn
    ---

    * `to` lies exactly two cells away along one axis, on the board, and is free
    * the cell in between holds another pawn (`occupied` lists the cells of the OTHER active players)
    * neither of the two edges crossed is blocked by a wall

    NOTE: Diagonal side-steps around a blocked jump are not part of these rules.
    """
    over = midpoint(from_position, to)
    if over is None or not to.is_within_bounds():
        return False
    if over not in occupied or to in occupied:
        return False
    return not (walls.is_blocked(from_position, over) or walls.is_blocked(over, to))


def step_rejection(
    from_position: Position,
    to: Position,
    occupied: Collection[Position],
    walls: WallSet,
) -> Optional[ErrorKind]:
    """Reason a pawn move to `to` is refused, or None if it is a legal step or jump."""
    if not to.is_within_bounds():
        return ErrorKind.OUT_OF_BOUNDS
    if to in occupied:
        return ErrorKind.ILLEGAL_STEP
    if validate_step(from_position, to, walls):
        return None
    if validate_jump(from_position, to, occupied, walls):
        return None
    return ErrorKind.ILLEGAL_STEP


def legal_destinations(
    from_position: Position, occupied: Collection[Position], walls: WallSet
) -> list[Position]:
    """
    All cells the pawn can move to, in scan order:
    up, down, left, right, jump-up, jump-down, jump-left, jump-right
    """
    steps = [
        to
        for to in (from_position.shifted(direction) for direction in DIRECTIONS)
        if validate_step(from_position, to, walls) and to not in occupied
    ]
    jumps = [
        to
        for to in (from_position.shifted(direction, 2) for direction in DIRECTIONS)
        if validate_jump(from_position, to, occupied, walls)
    ]
    return steps + jumps


# --- WALLS ---
def validate_wall_placement(
    wall: Wall, walls: WallSet, runners: Iterable[Runner]
) -> Verdict:
    """
    Checked in order:
    1. the anchor lies on the wall grid
    2. the wall does not overlap or cross a wall already placed
    3. every active player (not just the one placing it) keeps a path to their goal
    """
    if not wall.is_within_bounds():
        return Verdict.reject(ErrorKind.OUT_OF_BOUNDS)

    if walls.overlaps(wall):
        return Verdict.reject(ErrorKind.WALL_OVERLAP)

    with_wall = walls.with_wall(wall)
    for position, goal in runners:
        if not has_path(position, goal, with_wall):
            return Verdict.reject(ErrorKind.PATH_BLOCKED)

    return Verdict.accept()
