"""
Pytest fixtures for Take Six tests.
"""

import random

import pytest

from ..bots.policy import FirstChoicePolicy
from ..config import GameConfig
from ..engine_core.cards import Card
from ..engine_core.state import MatchState, create_seats
from ..session import PromptOrchestrator, SeatManager


@pytest.fixture
def config() -> GameConfig:
    """Standard table with a short prompt timeout."""
    return GameConfig(prompt_timeout=0.05)


@pytest.fixture
def match_state(config: GameConfig) -> MatchState:
    """Fresh table with four unbound seats."""
    return MatchState(config=config, seats=create_seats(config))


@pytest.fixture
def seat_manager(match_state: MatchState) -> SeatManager:
    return SeatManager(match_state)


@pytest.fixture
def orchestrator(config: GameConfig) -> PromptOrchestrator:
    return PromptOrchestrator(config.prompt_timeout)


@pytest.fixture
def policy() -> FirstChoicePolicy:
    return FirstChoicePolicy()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


def cards(*ranks: int) -> list[Card]:
    """Cards of the given ranks with the standard weight."""
    return [Card(rank=rank, cows=3) for rank in ranks]


@pytest.fixture
def board_5_23_61_88() -> list[list[Card]]:
    """Four single-card rows with active ranks 5, 23, 61 and 88."""
    return [cards(5), cards(23), cards(61), cards(88)]
