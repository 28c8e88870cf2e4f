"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.models import MatchModel, PositionModel, WallModel
from src.core.shared_types import BotLevel, GameMode, Orientation, Status

SlotNumber = int

MAX_SLOT = 4


def _validate_slot(value: int) -> int:
    if not 1 <= value <= MAX_SLOT:
        raise InvalidRequestError(
            f"Cannot interpret player: {value!r} as a seat. Pick one from 1-{MAX_SLOT}."
        )
    return value


# --- REQUEST MODELS ---
class CreateMatchRequest(BaseModel):
    mode: GameMode = GameMode.TWO_PLAYER
    walls_per_player: Optional[int] = None

    @field_validator("walls_per_player")
    @classmethod
    def validate_walls_per_player(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 0:
            raise InvalidRequestError(
                f"Wall allowance cannot be negative: {value!r}"
            )
        return value


class MatchRequest(BaseModel):
    """Any request that only needs to know which match it is about (get, start, undo, bot turn, reset, delete)."""

    match_id: UUID


class JoinMatchRequest(BaseModel):
    match_id: UUID
    player: SlotNumber

    @field_validator("player")
    @classmethod
    def validate_player(cls, value: int) -> int:
        return _validate_slot(value)


class AddBotRequest(BaseModel):
    match_id: UUID
    difficulty: BotLevel = BotLevel.MEDIUM


class PlayerRequest(BaseModel):
    """Requests about one seat: legal steps, legal walls, elimination, forfeiting a turn."""

    match_id: UUID
    player: SlotNumber

    @field_validator("player")
    @classmethod
    def validate_player(cls, value: int) -> int:
        return _validate_slot(value)


class MoveRequest(BaseModel):
    match_id: UUID
    player: SlotNumber
    row: int
    col: int

    @field_validator("player")
    @classmethod
    def validate_player(cls, value: int) -> int:
        return _validate_slot(value)


class WallRequest(BaseModel):
    match_id: UUID
    player: SlotNumber
    row: int
    col: int
    orientation: Orientation

    @field_validator("player")
    @classmethod
    def validate_player(cls, value: int) -> int:
        return _validate_slot(value)


# --- RESPONSE MODELS ---
class MatchResponse(BaseModel):
    match_id: UUID
    status: Status
    current_player: Optional[SlotNumber]
    winner: Optional[SlotNumber]
    state: MatchModel


class LegalStepsResponse(BaseModel):
    match_id: UUID
    player: SlotNumber
    legal_steps: list[PositionModel]


class LegalWallsResponse(BaseModel):
    match_id: UUID
    player: SlotNumber
    legal_walls: list[WallModel]
