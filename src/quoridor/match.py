"""
The Match class is the entrypoint into the domain layer for the service layer.
It owns the per-player state, applies accepted actions, keeps the move log, detects the winner and passes the turn on.

Every public method validates fully before touching any state: a rejected action raises and leaves the match exactly as it was.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional, Self

from pydantic import ValidationError

from src.core.exceptions import (
    ERRORS_BY_KIND,
    InvalidStateError,
    NoWallsRemainingError,
    NotYourTurnError,
)
from src.core.models import (
    MatchModel,
    MoveRecordModel,
    PlayerModel,
    PositionModel,
    WallModel,
    WallRecordModel,
)
from src.core.shared_types import BotLevel, GameMode, Status
from src.quoridor.bot import Action, StepAction, choose_action, difficulty_for
from src.quoridor.pathing import Goal, has_path, shortest_path_length
from src.quoridor.players import PlayerData, PlayerSlot
from src.quoridor.position import Position
from src.quoridor.records import GameRecord, MoveRecord, WallPlacementRecord
from src.quoridor.rules import (
    Runner,
    legal_destinations,
    step_rejection,
    validate_wall_placement,
)
from src.quoridor.variants import SPAWNS, MatchConfig, goal_for
from src.quoridor.walls import Wall, WallSet, all_wall_slots

logger = logging.getLogger(__name__)


@dataclass
class Match:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    config: MatchConfig
    players: dict[PlayerSlot, PlayerData]
    walls: WallSet = field(default_factory=WallSet)
    status: Status = Status.WAITING
    current_player_index: int = 0
    winner: Optional[PlayerSlot] = None
    history: list[GameRecord] = field(default_factory=list)

    @classmethod
    def new_match(
        cls,
        mode: GameMode = GameMode.TWO_PLAYER,
        config: Optional[MatchConfig] = None,
    ) -> Self:
        """
        Fresh match, waiting for players.

        Every seat of the mode gets its pawn on the spawn cell and the full wall allowance.
        Only the first seat (the player creating the match) is taken; others join with `add_player` / `add_bot`.
        """
        config = config or MatchConfig(mode=mode)
        players = {
            slot: PlayerData(
                position=SPAWNS[slot],
                spawn=SPAWNS[slot],
                walls_remaining=config.wall_allowance,
            )
            for slot in config.slots
        }
        players[config.slots[0]].seat()
        return cls(config=config, players=players)

    # --- DERIVED VALUES ---
    @property
    def mode(self) -> GameMode:
        return self.config.mode

    @property
    def turn_order(self) -> tuple[PlayerSlot, ...]:
        return self.config.slots

    @property
    def active_players(self) -> list[PlayerSlot]:
        return [slot for slot in self.turn_order if self.players[slot].is_active]

    @property
    def current_player(self) -> PlayerSlot:
        return self.turn_order[self.current_player_index]

    def goal(self, player: PlayerSlot) -> Goal:
        return goal_for(player)

    def distance_to_goal(
        self, player: PlayerSlot, position: Optional[Position] = None
    ) -> Optional[int]:
        """Shortest number of steps to the goal (walls only, pawns ignored). None when cut off."""
        start = position or self.players[player].position
        return shortest_path_length(start, self.goal(player), self.walls)

    # --- SEATING ---
    def add_player(
        self,
        slot: PlayerSlot,
        is_bot: bool = False,
        difficulty: Optional[BotLevel] = None,
    ) -> None:
        """Take an open seat before the match starts."""
        self._assert_status(Status.WAITING)
        self._assert_seat_exists(slot)
        if self.players[slot].is_active:
            raise InvalidStateError(f"Seat {slot} is already taken.")

        if is_bot and difficulty is None:
            difficulty = BotLevel.MEDIUM
        self.players[slot].seat(is_bot=is_bot, difficulty=difficulty)
        logger.debug("Seat %s taken (bot=%s, difficulty=%s)", slot, is_bot, difficulty)

    def add_bot(self, difficulty: BotLevel = BotLevel.MEDIUM) -> PlayerSlot:
        """Seat a bot in the lowest open seat."""
        self._assert_status(Status.WAITING)
        open_seats = [
            slot for slot in self.turn_order if not self.players[slot].is_active
        ]
        if not open_seats:
            raise InvalidStateError("Cannot add a bot. All seats are taken.")
        slot = open_seats[0]
        self.add_player(slot, is_bot=True, difficulty=difficulty)
        return slot

    def start(self) -> None:
        self._assert_status(Status.WAITING)
        active = self.active_players
        if len(active) < 2:
            raise InvalidStateError(
                f"Cannot start a match with {len(active)} player(s). Need at least 2."
            )
        self.current_player_index = self.turn_order.index(active[0])
        self.status = Status.IN_PROGRESS
        logger.info("Match started: mode=%s players=%s", self.mode, active)

    def eliminate(self, player: PlayerSlot) -> None:
        """
        Remove a player from the match.
        ---

        * While waiting: frees the seat again.
        * While in progress (e.g. the caller's turn timer ran out): the pawn leaves the board at a turn boundary.
          The turn moves on if it was theirs, and the last player standing wins.
        """
        if self.status == Status.FINISHED:
            raise InvalidStateError("Match is already finished.")
        self._assert_seat_exists(player)
        if not self.players[player].is_active:
            raise InvalidStateError(f"Player {player} is not active.")

        was_current = (
            self.status == Status.IN_PROGRESS and player == self.current_player
        )
        self.players[player].unseat()
        if self.status == Status.WAITING:
            logger.debug("Seat %s freed", player)
            return

        logger.info("Player %s eliminated", player)
        remaining = self.active_players
        if len(remaining) == 1:
            self._finish(remaining[0])
        elif was_current:
            self._advance_turn()

    def forfeit_turn(self, player: PlayerSlot) -> None:
        """Pass the turn without acting. Nothing is added to the move log."""
        self._assert_status(Status.IN_PROGRESS)
        self._assert_your_turn(player)
        self._advance_turn()
        logger.debug("Player %s forfeited the turn", player)

    def reset(self) -> None:
        """Start over with the same seats: fresh board, full allowances, empty history."""
        fresh = type(self).new_match(config=self.config)
        for slot, data in self.players.items():
            if data.is_active:
                fresh.players[slot].seat(is_bot=data.is_bot, difficulty=data.difficulty)
            else:
                fresh.players[slot].unseat()
        self.players = fresh.players
        self.walls = fresh.walls
        self.status = fresh.status
        self.current_player_index = fresh.current_player_index
        self.winner = fresh.winner
        self.history = fresh.history
        logger.info("Match reset")

    # --- LEGAL ACTIONS ---
    def legal_steps(self, player: PlayerSlot) -> list[Position]:
        """
        Cells the player's pawn can move to (steps and jumps), in scan order.

        Does not require it to be that player's turn, so a UI can show them ahead of time.
        """
        self._assert_status(Status.IN_PROGRESS)
        self._assert_active(player)
        return legal_destinations(
            self.players[player].position,
            self._occupied_cells(excluding=player),
            self.walls,
        )

    def legal_walls(self, player: PlayerSlot) -> list[Wall]:
        """Every wall placement that would currently be accepted for the player."""
        self._assert_status(Status.IN_PROGRESS)
        self._assert_active(player)
        if self.players[player].walls_remaining <= 0:
            return []
        runners = self._runners()
        return [
            wall
            for wall in all_wall_slots()
            if validate_wall_placement(wall, self.walls, runners)
        ]

    # --- ACTIONS ---
    def apply_move(self, player: PlayerSlot, to: Position) -> None:
        """
        Attempt to move the pawn
        -----

        1. match in progress and it is your turn
        2. the target is a legal step or jump
        3. update the position and the move log
        4. you reached your goal? You win. Otherwise the next player is up.
        """
        self._assert_status(Status.IN_PROGRESS)
        self._assert_your_turn(player)

        mover = self.players[player]
        rejection = step_rejection(
            mover.position, to, self._occupied_cells(excluding=player), self.walls
        )
        if rejection is not None:
            raise ERRORS_BY_KIND[rejection](
                f"Player {player} cannot move from {mover.position} to {to}."
            )

        record = MoveRecord(player=player, from_position=mover.position, to=to)
        mover.position = to
        self.history.append(record)
        logger.debug("Player %s moved %s -> %s", player, record.from_position, to)

        if self.goal(player).is_reached(to):
            self._finish(player)
        else:
            self._advance_turn()

    def apply_wall(self, player: PlayerSlot, wall: Wall) -> None:
        """
        Attempt to place a wall
        -----

        1. match in progress, your turn and you still have walls left
        2. the wall is in bounds, does not overlap, and strands nobody
        3. pay for it, place it, log it, next player (placing a wall never wins the game)
        """
        self._assert_status(Status.IN_PROGRESS)
        self._assert_your_turn(player)

        placer = self.players[player]
        if placer.walls_remaining <= 0:
            raise NoWallsRemainingError(f"Player {player} has no walls left.")

        verdict = validate_wall_placement(wall, self.walls, self._runners())
        if verdict.reason is not None:
            raise ERRORS_BY_KIND[verdict.reason](f"Wall not allowed: {wall}")

        placer.walls_remaining -= 1
        self.walls.add(wall)
        self.history.append(WallPlacementRecord(player=player, wall=wall))
        logger.debug("Player %s placed %s", player, wall)
        self._advance_turn()

    def undo(self) -> None:
        """
        Take back the last logged action and restore the match to exactly the state before it.
        ---

        * a move puts the pawn back where it came from
        * a wall is removed and refunded to whoever placed it
        * the turn goes back to the player who made the undone action
        * undoing the winning move reopens the match
        """
        if not self.history:
            raise InvalidStateError("Nothing to undo.")

        record = self.history[-1]
        if self.status == Status.FINISHED:
            reopens = (
                isinstance(record, MoveRecord)
                and record.player == self.winner
                and self.goal(record.player).is_reached(record.to)
            )
            if not reopens:
                raise InvalidStateError(
                    "Cannot undo: the match did not end on the last logged move."
                )
        else:
            self._assert_status(Status.IN_PROGRESS)

        owner = self.players[record.player]
        if not owner.is_active:
            raise InvalidStateError(
                f"Cannot undo an action of player {record.player}, who is no longer active."
            )

        self.history.pop()
        if isinstance(record, MoveRecord):
            owner.position = record.from_position
        else:
            self.walls.remove(record.wall)
            owner.walls_remaining += 1

        self.status = Status.IN_PROGRESS
        self.winner = None
        self.current_player_index = self.turn_order.index(record.player)
        logger.debug("Undid %s", record)

    def bot_turn(self, rng: Optional[random.Random] = None) -> Action:
        """Let the bot in the current seat pick an action and apply it. The caller owns any 'thinking' delay."""
        self._assert_status(Status.IN_PROGRESS)
        player = self.current_player
        seat = self.players[player]
        if not seat.is_bot:
            raise InvalidStateError(f"Player {player} is not a bot.")

        difficulty = difficulty_for(seat.difficulty or BotLevel.MEDIUM)
        action = choose_action(self, player, difficulty, rng)
        if isinstance(action, StepAction):
            self.apply_move(player, action.to)
        else:
            self.apply_wall(player, action.wall)
        return action

    # --- SERIALIZATION ---
    @classmethod
    def from_model(cls, model: MatchModel) -> Self:
        """Rebuild a Match from its record. Anything inconsistent is refused rather than repaired."""
        config = MatchConfig(mode=model.mode, walls_per_player=model.walls_per_player)

        # seats
        if set(model.players.keys()) != {int(slot) for slot in config.slots}:
            raise InvalidStateError(
                f"Expected seats {[int(slot) for slot in config.slots]} for {model.mode}, got {sorted(model.players)}."
            )
        players: dict[PlayerSlot, PlayerData] = {}
        for slot in config.slots:
            record = model.players[int(slot)]
            position = _position_from_model(record.position)
            if record.walls_remaining < 0:
                raise InvalidStateError(f"Negative wall count for player {slot}.")
            players[slot] = PlayerData(
                position=position,
                spawn=SPAWNS[slot],
                walls_remaining=record.walls_remaining,
                is_active=record.is_active,
                is_bot=record.is_bot,
                difficulty=record.difficulty if record.is_bot else None,
            )
        occupied = [data.position for data in players.values() if data.is_active]
        if len(occupied) != len(set(occupied)):
            raise InvalidStateError("Two active players share a cell.")

        # walls
        walls = WallSet()
        for wall_model in model.walls:
            wall = Wall(wall_model.row, wall_model.col, wall_model.orientation)
            if not wall.is_within_bounds():
                raise InvalidStateError(f"Wall out of bounds: {wall}")
            if walls.overlaps(wall):
                raise InvalidStateError(f"Overlapping wall: {wall}")
            walls.add(wall)

        # turn pointer and result
        if not 0 <= model.current_player_index < len(config.slots):
            raise InvalidStateError(
                f"Invalid current player index: {model.current_player_index}"
            )
        winner = _slot_from_model(model.winner, config) if model.winner is not None else None
        if (model.status == Status.FINISHED) != (winner is not None):
            raise InvalidStateError("A finished match needs a winner, and only a finished match has one.")

        history = [_record_from_model(entry, config) for entry in model.history]

        # the log has to explain the board
        _check_wall_log(history, walls, players, config)
        _check_move_log(history, players)
        for slot, data in players.items():
            if data.is_active and not has_path(data.position, goal_for(slot), walls):
                raise InvalidStateError(f"Player {slot} has no path to their goal.")

        match = cls(
            config=config,
            players=players,
            walls=walls,
            status=model.status,
            current_player_index=model.current_player_index,
            winner=winner,
            history=history,
        )
        if match.status == Status.IN_PROGRESS and not players[match.current_player].is_active:
            raise InvalidStateError("The current player is not active.")
        return match

    def to_model(self) -> MatchModel:
        """Encode back into a format the Service layer uses"""
        return MatchModel(
            mode=self.mode,
            status=self.status,
            winner=int(self.winner) if self.winner is not None else None,
            walls_per_player=self.config.walls_per_player,
            players={
                int(slot): PlayerModel(
                    position=_position_to_model(data.position),
                    walls_remaining=data.walls_remaining,
                    is_active=data.is_active,
                    is_bot=data.is_bot,
                    difficulty=data.difficulty,
                )
                for slot, data in self.players.items()
            },
            walls=[_wall_to_model(wall) for wall in self.walls],
            current_player_index=self.current_player_index,
            history=[_record_to_model(record) for record in self.history],
        )

    # -- PRIVATE HELPERS ---
    def _assert_status(self, expected: Status) -> None:
        if self.status != expected:
            raise InvalidStateError(
                f"Match is not {expected}. status: {self.status}"
            )

    def _assert_seat_exists(self, slot: PlayerSlot) -> None:
        if slot not in self.players:
            raise InvalidStateError(f"No seat {slot} in a {self.mode} match.")

    def _assert_active(self, player: PlayerSlot) -> None:
        self._assert_seat_exists(player)
        if not self.players[player].is_active:
            raise InvalidStateError(f"Player {player} is not active.")

    def _assert_your_turn(self, player: PlayerSlot) -> None:
        """Only the current player may act."""
        if player != self.current_player:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for player {self.current_player} to play first."
            )

    def _occupied_cells(self, excluding: PlayerSlot) -> set[Position]:
        return {
            data.position
            for slot, data in self.players.items()
            if data.is_active and slot != excluding
        }

    def _runners(self) -> list[Runner]:
        """Every active player together with their goal: all of them must keep a path."""
        return [
            (self.players[slot].position, self.goal(slot))
            for slot in self.active_players
        ]

    def _advance_turn(self) -> None:
        """
        Round-robin over the seating order, skipping inactive seats.
        The order is read once, so the result is stable even if the set of active players changed in between.
        """
        order = self.turn_order
        for offset in range(1, len(order) + 1):
            index = (self.current_player_index + offset) % len(order)
            if self.players[order[index]].is_active:
                self.current_player_index = index
                return
        raise InvalidStateError("No active player left to take the turn.")

    def _finish(self, winner: PlayerSlot) -> None:
        self.status = Status.FINISHED
        self.winner = winner
        self.current_player_index = self.turn_order.index(winner)
        logger.info("Match finished: player %s wins", winner)


# --- ENCODING HELPERS ---
def encode_match(match: Match) -> str:
    """JSON text of the match record, for persistence or network relay."""
    return match.to_model().model_dump_json()


def decode_match(text: str) -> Match:
    """Inverse of encode_match. Malformed input raises InvalidStateError."""
    try:
        model = MatchModel.model_validate_json(text)
    except ValidationError as exc:
        raise InvalidStateError(f"Malformed match record: {exc}") from exc
    return Match.from_model(model)


def _position_to_model(position: Position) -> PositionModel:
    return PositionModel(row=position.row, col=position.col)


def _position_from_model(model: PositionModel) -> Position:
    position = Position(model.row, model.col)
    if not position.is_within_bounds():
        raise InvalidStateError(f"Position out of bounds: {position}")
    return position


def _wall_to_model(wall: Wall) -> WallModel:
    return WallModel(row=wall.row, col=wall.col, orientation=wall.orientation)


def _slot_from_model(number: int, config: MatchConfig) -> PlayerSlot:
    if number not in {int(slot) for slot in config.slots}:
        raise InvalidStateError(f"No seat {number} in a {config.mode} match.")
    return PlayerSlot(number)


def _record_to_model(record: GameRecord) -> MoveRecordModel | WallRecordModel:
    if isinstance(record, MoveRecord):
        return MoveRecordModel(
            player=int(record.player),
            from_position=_position_to_model(record.from_position),
            to=_position_to_model(record.to),
        )
    return WallRecordModel(player=int(record.player), wall=_wall_to_model(record.wall))


def _record_from_model(
    model: MoveRecordModel | WallRecordModel, config: MatchConfig
) -> GameRecord:
    player = _slot_from_model(model.player, config)
    if isinstance(model, MoveRecordModel):
        return MoveRecord(
            player=player,
            from_position=_position_from_model(model.from_position),
            to=_position_from_model(model.to),
        )
    wall = Wall(model.wall.row, model.wall.col, model.wall.orientation)
    if not wall.is_within_bounds():
        raise InvalidStateError(f"Wall out of bounds: {wall}")
    return WallPlacementRecord(player=player, wall=wall)


def _check_wall_log(
    history: list[GameRecord],
    walls: WallSet,
    players: dict[PlayerSlot, PlayerData],
    config: MatchConfig,
) -> None:
    """Placed walls are exactly the logged ones (same order), and every seat paid one wall for each of its placements."""
    logged = [record for record in history if isinstance(record, WallPlacementRecord)]
    if [record.wall for record in logged] != list(walls):
        raise InvalidStateError("Walls on the board do not match the logged placements.")

    for slot, data in players.items():
        placed = sum(record.player == slot for record in logged)
        if config.wall_allowance - data.walls_remaining != placed:
            raise InvalidStateError(
                f"Player {slot} has {data.walls_remaining} wall(s) left after placing {placed} "
                f"out of {config.wall_allowance}."
            )


def _check_move_log(
    history: list[GameRecord], players: dict[PlayerSlot, PlayerData]
) -> None:
    """Each logged move starts where the previous move of that player ended; the last one ends on the current position."""
    last_seen: dict[PlayerSlot, Position] = {}
    for record in history:
        if not isinstance(record, MoveRecord):
            continue
        previous = last_seen.get(record.player)
        if previous is not None and record.from_position != previous:
            raise InvalidStateError(
                f"Player {record.player} moved from {record.from_position}, but was last on {previous}."
            )
        last_seen[record.player] = record.to

    for slot, position in last_seen.items():
        if players[slot].position != position:
            raise InvalidStateError(
                f"Player {slot} is on {players[slot].position}, but the log ends on {position}."
            )
