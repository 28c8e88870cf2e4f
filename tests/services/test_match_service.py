"""Unit tests for src/services/match_service.py"""

import random
import threading
from typing import Generator
from uuid import UUID, uuid4

import pytest

from src.api.models import (
    AddBotRequest,
    CreateMatchRequest,
    JoinMatchRequest,
    MatchRequest,
    MatchResponse,
    MoveRequest,
    PlayerRequest,
    WallRequest,
)
from src.core.exceptions import (
    GameError,
    IllegalStepError,
    InvalidStateError,
    NotYourTurnError,
    RepositoryError,
    WallOverlapError,
)
from src.core.models import PositionModel
from src.core.shared_types import BotLevel, GameMode, Status
from src.db.memory_repository import InMemoryMatchRepository
from src.services.match_service import MatchService


@pytest.fixture
def repository() -> Generator[InMemoryMatchRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = InMemoryMatchRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(repository: InMemoryMatchRepository) -> MatchService:
    return MatchService(repository, rng=random.Random(0))


@pytest.fixture
def match_id(service: MatchService) -> UUID:
    """Two humans, match started."""
    created = service.create_match(CreateMatchRequest())
    service.join_match(JoinMatchRequest(match_id=created.match_id, player=2))
    service.start_match(MatchRequest(match_id=created.match_id))
    return created.match_id


# --- CREATE / JOIN / START ----
def test_create_match(service: MatchService, repository: InMemoryMatchRepository) -> None:
    response = service.create_match(CreateMatchRequest(mode=GameMode.FOUR_PLAYER))

    assert isinstance(response, MatchResponse)
    assert response.status == Status.WAITING
    assert response.current_player is None
    assert response.winner is None
    assert sorted(response.state.players) == [1, 2, 3, 4]
    assert repository.get_match(response.match_id) == response.state


def test_create_with_allowance(service: MatchService) -> None:
    response = service.create_match(CreateMatchRequest(walls_per_player=4))
    assert all(player.walls_remaining == 4 for player in response.state.players.values())


def test_start_needs_two(service: MatchService) -> None:
    created = service.create_match(CreateMatchRequest())
    with pytest.raises(InvalidStateError):
        service.start_match(MatchRequest(match_id=created.match_id))


def test_join_and_start(service: MatchService, match_id: UUID) -> None:
    response = service.get_match(MatchRequest(match_id=match_id))
    assert response.status == Status.IN_PROGRESS
    assert response.current_player == 1


def test_add_bot(service: MatchService) -> None:
    created = service.create_match(CreateMatchRequest())
    response = service.add_bot(
        AddBotRequest(match_id=created.match_id, difficulty=BotLevel.EASY)
    )
    bot = response.state.players[2]
    assert bot.is_active and bot.is_bot
    assert bot.difficulty == BotLevel.EASY


def test_unknown_match(service: MatchService) -> None:
    with pytest.raises(RepositoryError):
        service.get_match(MatchRequest(match_id=uuid4()))
    with pytest.raises(RepositoryError):
        service.move(MoveRequest(match_id=uuid4(), player=1, row=7, col=4))


def test_unknown_matches_leave_no_locks_behind(
    service: MatchService, match_id: UUID
) -> None:
    known = dict(service._locks)
    for _ in range(50):
        with pytest.raises(RepositoryError):
            service.get_match(MatchRequest(match_id=uuid4()))
        with pytest.raises(RepositoryError):
            service.undo(MatchRequest(match_id=uuid4()))
    assert service._locks == known
    assert match_id in service._locks


# --- ACTIONS ----
def test_move(service: MatchService, match_id: UUID) -> None:
    response = service.move(MoveRequest(match_id=match_id, player=1, row=7, col=4))

    assert response.current_player == 2
    assert response.state.players[1].position == PositionModel(row=7, col=4)
    assert response.state.history[-1].type == "move"


def test_rejected_actions_are_not_stored(
    service: MatchService, repository: InMemoryMatchRepository, match_id: UUID
) -> None:
    before = repository.get_match(match_id)

    with pytest.raises(NotYourTurnError):
        service.move(MoveRequest(match_id=match_id, player=2, row=1, col=4))
    with pytest.raises(IllegalStepError):
        service.move(MoveRequest(match_id=match_id, player=1, row=6, col=4))

    assert repository.get_match(match_id) == before


def test_place_wall(service: MatchService, match_id: UUID) -> None:
    response = service.place_wall(
        WallRequest(match_id=match_id, player=1, row=4, col=4, orientation="horizontal")
    )
    assert response.state.players[1].walls_remaining == 9
    assert len(response.state.walls) == 1

    with pytest.raises(WallOverlapError):
        service.place_wall(
            WallRequest(match_id=match_id, player=2, row=4, col=4, orientation="vertical")
        )


def test_undo(service: MatchService, match_id: UUID) -> None:
    before = service.get_match(MatchRequest(match_id=match_id))
    service.move(MoveRequest(match_id=match_id, player=1, row=7, col=4))
    response = service.undo(MatchRequest(match_id=match_id))
    assert response == before


def test_legal_steps_and_walls(service: MatchService, match_id: UUID) -> None:
    steps = service.legal_steps(PlayerRequest(match_id=match_id, player=2))
    assert steps.legal_steps == [
        PositionModel(row=1, col=4),
        PositionModel(row=0, col=3),
        PositionModel(row=0, col=5),
    ]
    walls = service.legal_walls(PlayerRequest(match_id=match_id, player=2))
    assert len(walls.legal_walls) == 128


def test_forfeit_and_eliminate(service: MatchService, match_id: UUID) -> None:
    response = service.forfeit_turn(PlayerRequest(match_id=match_id, player=1))
    assert response.current_player == 2

    response = service.eliminate_player(PlayerRequest(match_id=match_id, player=2))
    assert response.status == Status.FINISHED
    assert response.winner == 1


def test_reset(service: MatchService, match_id: UUID) -> None:
    service.move(MoveRequest(match_id=match_id, player=1, row=7, col=4))
    response = service.reset_match(MatchRequest(match_id=match_id))
    assert response.status == Status.WAITING
    assert response.state.history == []
    assert response.state.players[2].is_active


def test_bot_turn(service: MatchService) -> None:
    created = service.create_match(CreateMatchRequest())
    service.add_bot(AddBotRequest(match_id=created.match_id, difficulty=BotLevel.EXPERT))
    service.start_match(MatchRequest(match_id=created.match_id))
    service.move(MoveRequest(match_id=created.match_id, player=1, row=7, col=4))

    response = service.bot_turn(MatchRequest(match_id=created.match_id))
    assert response.current_player == 1
    assert response.state.players[2].position == PositionModel(row=1, col=4)


def test_delete(service: MatchService, match_id: UUID) -> None:
    service.delete_match(MatchRequest(match_id=match_id))
    with pytest.raises(RepositoryError):
        service.get_match(MatchRequest(match_id=match_id))


# --- CONCURRENCY ----
def test_concurrent_moves_on_one_match(service: MatchService, match_id: UUID) -> None:
    """Both players fire at once: exactly one move is accepted, the other sees the updated turn"""
    barrier = threading.Barrier(2)
    errors: list[GameError] = []

    def play(player: int, row: int) -> None:
        barrier.wait()
        try:
            service.move(MoveRequest(match_id=match_id, player=player, row=row, col=4))
        except GameError as exc:
            errors.append(exc)

    threads = [
        threading.Thread(target=play, args=(1, 7)),
        threading.Thread(target=play, args=(2, 1)),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    history = service.get_match(MatchRequest(match_id=match_id)).state.history
    # player 2 may have moved right after player 1, or been told to wait
    assert len(history) + len(errors) == 2
    assert history[0].player == 1
