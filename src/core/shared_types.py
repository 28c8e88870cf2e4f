"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class GameMode(StrEnum):
    TWO_PLAYER = "two_player"
    FOUR_PLAYER = "four_player"


class Orientation(StrEnum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class BotLevel(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


class ErrorKind(StrEnum):
    """The reasons an action can get rejected."""

    NOT_YOUR_TURN = "not_your_turn"
    OUT_OF_BOUNDS = "out_of_bounds"
    ILLEGAL_STEP = "illegal_step"
    NO_WALLS_REMAINING = "no_walls_remaining"
    WALL_OVERLAP = "wall_overlap"
    PATH_BLOCKED = "path_blocked"
    INVALID_STATE = "invalid_state"
