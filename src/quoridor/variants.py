"""
Setup rules that depend on the game mode: which seats exist, where pawns start, what they need to reach and how many walls they get.
"""

from dataclasses import dataclass, field
from typing import Optional

from src.core.exceptions import InvalidStateError
from src.core.shared_types import GameMode
from src.quoridor.pathing import Axis, Goal
from src.quoridor.players import PlayerSlot
from src.quoridor.position import BOARD_SIZE, Position

LAST = BOARD_SIZE - 1
MIDDLE = BOARD_SIZE // 2

# Seating order doubles as turn order.
SLOTS_BY_MODE: dict[GameMode, tuple[PlayerSlot, ...]] = {
    GameMode.TWO_PLAYER: (PlayerSlot.ONE, PlayerSlot.TWO),
    GameMode.FOUR_PLAYER: (
        PlayerSlot.ONE,
        PlayerSlot.TWO,
        PlayerSlot.THREE,
        PlayerSlot.FOUR,
    ),
}

# Every pawn starts in the middle of one edge and races to the opposite edge.
SPAWNS: dict[PlayerSlot, Position] = {
    PlayerSlot.ONE: Position(LAST, MIDDLE),
    PlayerSlot.TWO: Position(0, MIDDLE),
    PlayerSlot.THREE: Position(MIDDLE, 0),
    PlayerSlot.FOUR: Position(MIDDLE, LAST),
}

GOALS: dict[PlayerSlot, Goal] = {
    PlayerSlot.ONE: Goal(Axis.ROW, 0),
    PlayerSlot.TWO: Goal(Axis.ROW, LAST),
    PlayerSlot.THREE: Goal(Axis.COLUMN, LAST),
    PlayerSlot.FOUR: Goal(Axis.COLUMN, 0),
}

# 20 walls in play either way: 10 each with two players, 5 each with four.
WALLS_PER_PLAYER: dict[GameMode, int] = {
    GameMode.TWO_PLAYER: 10,
    GameMode.FOUR_PLAYER: 5,
}


@dataclass(frozen=True)
class MatchConfig:
    mode: GameMode = GameMode.TWO_PLAYER
    walls_per_player: Optional[int] = field(default=None)

    def __post_init__(self) -> None:
        if self.walls_per_player is not None and self.walls_per_player < 0:
            raise InvalidStateError(
                f"Wall allowance cannot be negative: {self.walls_per_player}"
            )

    @property
    def slots(self) -> tuple[PlayerSlot, ...]:
        return SLOTS_BY_MODE[self.mode]

    @property
    def wall_allowance(self) -> int:
        if self.walls_per_player is None:
            return WALLS_PER_PLAYER[self.mode]
        return self.walls_per_player


def goal_for(slot: PlayerSlot) -> Goal:
    return GOALS[slot]
