"""
Bot policy
---

A greedy, stateless move selector: no lookahead, no memory between turns.

* With probability `mistake_chance` the bot ignores the heuristic and plays any legal step (or any legal wall if it cannot move).
* Otherwise it takes the step/jump that leaves it the shortest path to its goal, first one in scan order on ties.
* If no step gets it closer, it spends a wall instead (random legal placement), as long as it has any left.

The thinking time of a difficulty is data for the caller to wait on. `choose_action` itself returns immediately.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional, Protocol

from src.core.exceptions import InvalidStateError
from src.core.shared_types import BotLevel
from src.quoridor.players import PlayerData, PlayerSlot
from src.quoridor.position import Position
from src.quoridor.walls import Wall

logger = logging.getLogger(__name__)


class MatchView(Protocol):
    """Just the parts of a Match the bot needs"""

    players: dict[PlayerSlot, PlayerData]

    def legal_steps(self, player: PlayerSlot) -> list[Position]: ...
    def legal_walls(self, player: PlayerSlot) -> list[Wall]: ...
    def distance_to_goal(
        self, player: PlayerSlot, position: Optional[Position] = None
    ) -> Optional[int]: ...


@dataclass(frozen=True)
class StepAction:
    to: Position


@dataclass(frozen=True)
class WallAction:
    wall: Wall


Action = StepAction | WallAction


@dataclass(frozen=True)
class BotDifficulty:
    level: BotLevel
    thinking_time_ms: int
    mistake_chance: float


BOT_DIFFICULTIES: dict[BotLevel, BotDifficulty] = {
    BotLevel.EASY: BotDifficulty(BotLevel.EASY, 1500, 0.30),
    BotLevel.MEDIUM: BotDifficulty(BotLevel.MEDIUM, 1000, 0.15),
    BotLevel.HARD: BotDifficulty(BotLevel.HARD, 600, 0.05),
    BotLevel.EXPERT: BotDifficulty(BotLevel.EXPERT, 300, 0.0),
}


def difficulty_for(level: BotLevel) -> BotDifficulty:
    return BOT_DIFFICULTIES[level]


def choose_action(
    match: MatchView,
    player: PlayerSlot,
    difficulty: BotDifficulty,
    rng: Optional[random.Random] = None,
) -> Action:
    rng = rng or random.Random()
    steps = match.legal_steps(player)

    if rng.random() < difficulty.mistake_chance:
        blunder = _random_action(match, player, steps, rng)
        logger.debug("Bot %s (%s) blunders: %s", player, difficulty.level, blunder)
        return blunder

    best = _best_step(match, player, steps)
    current_distance = match.distance_to_goal(player)
    if best is not None and _is_closer(best[1], current_distance):
        action: Action = StepAction(best[0])
    else:
        walls = _affordable_walls(match, player)
        if walls:
            action = WallAction(rng.choice(walls))
        elif best is not None:
            action = StepAction(best[0])
        else:
            raise InvalidStateError(f"Player {player} has no legal action.")

    logger.debug("Bot %s (%s) chooses %s", player, difficulty.level, action)
    return action


# -- PRIVATE HELPERS ---
def _best_step(
    match: MatchView, player: PlayerSlot, steps: list[Position]
) -> Optional[tuple[Position, Optional[int]]]:
    """Step with the shortest remaining path. min() keeps the first of equal candidates, so scan order breaks ties."""
    if not steps:
        return None
    scored = [(to, match.distance_to_goal(player, to)) for to in steps]
    return min(scored, key=lambda item: _sort_key(item[1]))


def _sort_key(distance: Optional[int]) -> float:
    return float("inf") if distance is None else distance


def _is_closer(distance: Optional[int], current: Optional[int]) -> bool:
    return _sort_key(distance) < _sort_key(current)


def _affordable_walls(match: MatchView, player: PlayerSlot) -> list[Wall]:
    if match.players[player].walls_remaining <= 0:
        return []
    return match.legal_walls(player)


def _random_action(
    match: MatchView, player: PlayerSlot, steps: list[Position], rng: random.Random
) -> Action:
    if steps:
        return StepAction(rng.choice(steps))
    walls = _affordable_walls(match, player)
    if walls:
        return WallAction(rng.choice(walls))
    raise InvalidStateError(f"Player {player} has no legal action.")
