"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
The structured record of a match: everything needed to rebuild a Match that behaves exactly like the original
(same legal steps, same legal walls, same turn order).
Kept free of domain types, so persistence and transport layers never need to import the engine.
"""

from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.core.shared_types import BotLevel, GameMode, Orientation, Status

# Type aliases to make MatchModel easier to read
SlotNumber = int


class RecordModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class PositionModel(RecordModel):
    row: int
    col: int


class WallModel(RecordModel):
    row: int
    col: int
    orientation: Orientation


class PlayerModel(RecordModel):
    position: PositionModel
    walls_remaining: int
    is_active: bool
    is_bot: bool
    difficulty: Optional[BotLevel] = None


class MoveRecordModel(RecordModel):
    type: Literal["move"] = "move"
    player: SlotNumber
    from_position: PositionModel
    to: PositionModel


class WallRecordModel(RecordModel):
    type: Literal["wall"] = "wall"
    player: SlotNumber
    wall: WallModel


HistoryRecordModel = Annotated[
    MoveRecordModel | WallRecordModel, Field(discriminator="type")
]


class MatchModel(RecordModel):
    """Transport-safe representation of a match used between API, Service, repository and Match layers."""

    mode: GameMode
    status: Status
    winner: Optional[SlotNumber] = None
    walls_per_player: Optional[int] = None
    players: dict[SlotNumber, PlayerModel]
    walls: list[WallModel] = Field(default_factory=list)
    current_player_index: int = 0
    history: list[HistoryRecordModel] = Field(default_factory=list)
