"""Orchestration of communication from API models to business logic and the repository (and the reverse direction)."""

import logging
import random
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional
from uuid import UUID

from src.api.models import (
    AddBotRequest,
    CreateMatchRequest,
    JoinMatchRequest,
    LegalStepsResponse,
    LegalWallsResponse,
    MatchRequest,
    MatchResponse,
    MoveRequest,
    PlayerRequest,
    WallRequest,
)
from src.core.exceptions import RepositoryError
from src.core.models import MatchModel, PositionModel, WallModel
from src.core.shared_types import Status
from src.db.repository import MatchRepository
from src.quoridor.match import Match
from src.quoridor.players import PlayerSlot
from src.quoridor.position import Position
from src.quoridor.variants import MatchConfig
from src.quoridor.walls import Wall

logger = logging.getLogger(__name__)


class MatchService:
    """
    Orchestration of layers for Quoridor matches.

    Every match gets its own lock: calls about one match run one at a time, in the order they acquire it,
    while different matches never wait on each other.
    """

    def __init__(
        self, repository: MatchRepository, rng: Optional[random.Random] = None
    ) -> None:
        self.repo = repository
        self.rng = rng
        self._locks: dict[UUID, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # -- Match lifecycle ---
    def create_match(self, request: CreateMatchRequest) -> MatchResponse:
        """First player requested a new match. They get seat 1."""
        config = MatchConfig(mode=request.mode, walls_per_player=request.walls_per_player)
        new_match = Match.new_match(config=config)
        stored_match, match_id = self.repo.create_match(new_match.to_model())
        logger.info("Created match %s (%s)", match_id, request.mode)
        return self._create_match_response(match_id, stored_match)

    def join_match(self, request: JoinMatchRequest) -> MatchResponse:
        return self._update(
            request.match_id,
            lambda match: match.add_player(PlayerSlot(request.player)),
        )

    def add_bot(self, request: AddBotRequest) -> MatchResponse:
        return self._update(
            request.match_id, lambda match: match.add_bot(request.difficulty)
        )

    def start_match(self, request: MatchRequest) -> MatchResponse:
        return self._update(request.match_id, lambda match: match.start())

    def reset_match(self, request: MatchRequest) -> MatchResponse:
        return self._update(request.match_id, lambda match: match.reset())

    def eliminate_player(self, request: PlayerRequest) -> MatchResponse:
        """Used by the surrounding timer when a player's time runs out."""
        return self._update(
            request.match_id, lambda match: match.eliminate(PlayerSlot(request.player))
        )

    def forfeit_turn(self, request: PlayerRequest) -> MatchResponse:
        return self._update(
            request.match_id,
            lambda match: match.forfeit_turn(PlayerSlot(request.player)),
        )

    def get_match(self, request: MatchRequest) -> MatchResponse:
        """
        Retrieve current match state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        with self._locked(request.match_id):
            model = self._fetch_match(request.match_id)
        return self._create_match_response(request.match_id, model)

    def delete_match(self, request: MatchRequest) -> None:
        with self._locked(request.match_id):
            self.repo.delete_match(request.match_id)
        with self._locks_guard:
            self._locks.pop(request.match_id, None)

    # -- Legal actions ---
    def legal_steps(self, request: PlayerRequest) -> LegalStepsResponse:
        with self._locked(request.match_id):
            match = Match.from_model(self._fetch_match(request.match_id))
        steps = match.legal_steps(PlayerSlot(request.player))
        return LegalStepsResponse(
            match_id=request.match_id,
            player=request.player,
            legal_steps=[PositionModel(row=cell.row, col=cell.col) for cell in steps],
        )

    def legal_walls(self, request: PlayerRequest) -> LegalWallsResponse:
        with self._locked(request.match_id):
            match = Match.from_model(self._fetch_match(request.match_id))
        walls = match.legal_walls(PlayerSlot(request.player))
        return LegalWallsResponse(
            match_id=request.match_id,
            player=request.player,
            legal_walls=[
                WallModel(row=wall.row, col=wall.col, orientation=wall.orientation)
                for wall in walls
            ],
        )

    # -- Actions ---
    def move(self, request: MoveRequest) -> MatchResponse:
        return self._update(
            request.match_id,
            lambda match: match.apply_move(
                PlayerSlot(request.player), Position(request.row, request.col)
            ),
        )

    def place_wall(self, request: WallRequest) -> MatchResponse:
        return self._update(
            request.match_id,
            lambda match: match.apply_wall(
                PlayerSlot(request.player),
                Wall(request.row, request.col, request.orientation),
            ),
        )

    def undo(self, request: MatchRequest) -> MatchResponse:
        return self._update(request.match_id, lambda match: match.undo())

    def bot_turn(self, request: MatchRequest) -> MatchResponse:
        """Called by the frontend when the current player is a bot, after whatever thinking pause it wants to show."""
        return self._update(request.match_id, lambda match: match.bot_turn(self.rng))

    # -- Internal helpers --
    def _update(
        self, match_id: UUID, operation: Callable[[Match], object]
    ) -> MatchResponse:
        """
        Load, act, store.
        ---

        The Match raises before changing anything when an action gets rejected, so a failing operation never reaches the repository.
        """
        with self._locked(match_id):
            match = Match.from_model(self._fetch_match(match_id))
            operation(match)
            stored = match.to_model()
            self.repo.update_match(match_id, stored)
        return self._create_match_response(match_id, stored)

    @contextmanager
    def _locked(self, match_id: UUID) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault(match_id, threading.Lock())
        try:
            with lock:
                yield
        except RepositoryError:
            # no such match: forget the lock again
            with self._locks_guard:
                self._locks.pop(match_id, None)
            raise

    def _create_match_response(self, match_id: UUID, model: MatchModel) -> MatchResponse:
        """Convert info in MatchModel to a MatchResponse (for match with given ID.)"""
        slots = sorted(model.players)
        current_player = (
            slots[model.current_player_index]
            if model.status != Status.WAITING
            else None
        )
        return MatchResponse(
            match_id=match_id,
            status=model.status,
            current_player=current_player,
            winner=model.winner,
            state=model,
        )

    def _fetch_match(self, match_id: UUID) -> MatchModel:
        """Attempt to find the match in the repository and raise error if it fails."""
        match_model = self.repo.get_match(match_id)
        if match_model is None:
            raise RepositoryError(f"Match with {match_id=} not found.")
        return match_model
