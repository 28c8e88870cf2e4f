"""Player seats and the state attached to each of them"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from src.core.shared_types import BotLevel
from src.quoridor.position import Position


class PlayerSlot(IntEnum):
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4


@dataclass
class PlayerData:
    """
    Everything the engine tracks per seat.

    NOTE: a seat exists for every slot of the game mode from the start. `is_active` tells whether someone actually plays it
    (False for a seat nobody joined, or for a player that got eliminated).
    """

    position: Position
    spawn: Position
    walls_remaining: int
    is_active: bool = False
    is_bot: bool = False
    difficulty: Optional[BotLevel] = None

    def seat(self, is_bot: bool = False, difficulty: Optional[BotLevel] = None) -> None:
        self.is_active = True
        self.is_bot = is_bot
        self.difficulty = difficulty if is_bot else None

    def unseat(self) -> None:
        self.is_active = False
