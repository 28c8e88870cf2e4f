"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing multiple layers.
"""

import pytest

from src.core.shared_types import GameMode
from src.quoridor.match import Match
from src.quoridor.players import PlayerSlot


@pytest.fixture
def two_player_match() -> Match:
    """Two humans, match started, player 1 to move."""
    match = Match.new_match(GameMode.TWO_PLAYER)
    match.add_player(PlayerSlot.TWO)
    match.start()
    return match


@pytest.fixture
def four_player_match() -> Match:
    """Four humans, match started, player 1 to move."""
    match = Match.new_match(GameMode.FOUR_PLAYER)
    for slot in (PlayerSlot.TWO, PlayerSlot.THREE, PlayerSlot.FOUR):
        match.add_player(slot)
    match.start()
    return match
