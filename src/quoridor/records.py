"""Entries of the move log. The log is append-only, except for undo which pops the tail."""

from dataclasses import dataclass

from src.quoridor.players import PlayerSlot
from src.quoridor.position import Position
from src.quoridor.walls import Wall


@dataclass(frozen=True)
class MoveRecord:
    player: PlayerSlot
    from_position: Position
    to: Position


@dataclass(frozen=True)
class WallPlacementRecord:
    player: PlayerSlot
    wall: Wall


GameRecord = MoveRecord | WallPlacementRecord
