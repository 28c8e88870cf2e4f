"""Unit tests for src/quoridor/pathing.py"""

from src.core.shared_types import Orientation
from src.quoridor.pathing import Axis, Goal, has_path, shortest_path_length
from src.quoridor.position import Position
from src.quoridor.walls import Wall, WallSet

H = Orientation.HORIZONTAL
V = Orientation.VERTICAL

TOP_ROW = Goal(Axis.ROW, 0)
BOTTOM_ROW = Goal(Axis.ROW, 8)
RIGHT_COLUMN = Goal(Axis.COLUMN, 8)


def test_goal_reached() -> None:
    assert TOP_ROW.is_reached(Position(0, 7))
    assert not TOP_ROW.is_reached(Position(1, 0))
    assert RIGHT_COLUMN.is_reached(Position(3, 8))
    assert not RIGHT_COLUMN.is_reached(Position(8, 3))


def test_goal_cells() -> None:
    assert len(TOP_ROW.cells()) == 9
    assert all(cell.row == 0 for cell in TOP_ROW.cells())
    assert all(cell.col == 8 for cell in RIGHT_COLUMN.cells())


def test_straight_path_on_empty_board() -> None:
    assert shortest_path_length(Position(8, 4), TOP_ROW, WallSet()) == 8
    assert shortest_path_length(Position(4, 0), RIGHT_COLUMN, WallSet()) == 8


def test_already_on_goal() -> None:
    assert shortest_path_length(Position(0, 2), TOP_ROW, WallSet()) == 0


def test_wall_forces_a_detour() -> None:
    """Wall right above (8,4) and (8,5): one step sideways before going up."""
    walls = WallSet([Wall(7, 4, H)])
    assert shortest_path_length(Position(8, 4), TOP_ROW, walls) == 9


def test_vertical_walls_do_not_block_going_straight_up() -> None:
    walls = WallSet([Wall(row, 3, V) for row in (0, 2, 4, 6)])
    assert shortest_path_length(Position(8, 4), TOP_ROW, walls) == 8


def test_sealed_off_goal_row() -> None:
    """
    Horizontal walls between rows 7 and 8 cover columns 1-8.
    Column 0 is closed off with a vertical wall next to (6,0)/(7,0) and a horizontal one on top of (6,0).
    """
    walls = WallSet(
        [
            Wall(7, 1, H),
            Wall(7, 3, H),
            Wall(7, 5, H),
            Wall(7, 7, H),
            Wall(6, 0, V),
            Wall(5, 0, H),
        ]
    )
    assert shortest_path_length(Position(0, 4), BOTTOM_ROW, walls) is None
    assert not has_path(Position(0, 4), BOTTOM_ROW, walls)
    # ... while anyone inside the pocket can still walk along row 8
    assert has_path(Position(6, 0), BOTTOM_ROW, walls)


def test_path_exists_with_one_gap_left() -> None:
    walls = WallSet([Wall(7, 1, H), Wall(7, 3, H), Wall(7, 5, H), Wall(7, 7, H)])
    # only column 0 leads into row 8
    assert shortest_path_length(Position(0, 4), BOTTOM_ROW, walls) == 4 + 8
