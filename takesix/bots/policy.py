"""
Bot Policy - Automatic decisions for seats nobody controls.

A FallbackPolicy answers the same three questions a participant is asked:
- Which card of the hand to play
- Which row to take when the card fits nowhere
- Whether to play another match

It is used for unbound seats and whenever a participant fails to answer
validly in time.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine_core.snapshot import SeatSnapshot, BoardSnapshot


class FallbackPolicy(ABC):
    """
    Abstract base class for fallback policies.

    Policies only see snapshots, so they cannot change the table.

    Every policy takes an optional seed so a seeded run replays the same
    automatic choices.
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    @abstractmethod
    def choose_card(self, seat: SeatSnapshot, board: BoardSnapshot) -> int:
        """
        Pick a card to play.

        Args:
            seat: The seat's view (hand, cows)
            board: Current rows

        Returns:
            Index into the seat's hand
        """
        pass

    @abstractmethod
    def choose_row(self, seat: SeatSnapshot, board: BoardSnapshot) -> int:
        """Pick the row to take. Returns a row index."""
        pass

    def play_again(self, seat: SeatSnapshot) -> bool:
        """Automatic seats never ask for a rematch."""
        return False

    def get_name(self) -> str:
        """Get the policy's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(FallbackPolicy):
    """
    Random policy - picks cards and rows uniformly at random.

    This is the default autoplay.
    """

    def choose_card(self, seat: SeatSnapshot, board: BoardSnapshot) -> int:
        if not seat.hand:
            raise ValueError("No cards in hand")
        return self.rng.randrange(len(seat.hand))

    def choose_row(self, seat: SeatSnapshot, board: BoardSnapshot) -> int:
        if not board.rows:
            raise ValueError("No rows on the board")
        return self.rng.randrange(len(board.rows))


class FirstChoicePolicy(FallbackPolicy):
    """
    First-choice policy - always the first card and the first row.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def choose_card(self, seat: SeatSnapshot, board: BoardSnapshot) -> int:
        if not seat.hand:
            raise ValueError("No cards in hand")
        return 0

    def choose_row(self, seat: SeatSnapshot, board: BoardSnapshot) -> int:
        if not board.rows:
            raise ValueError("No rows on the board")
        return 0


class CheapestRowPolicy(RandomPolicy):
    """
    Plays a random card but, when forced to take a row, takes the one
    carrying the fewest cows (lowest index on ties).
    """

    def choose_row(self, seat: SeatSnapshot, board: BoardSnapshot) -> int:
        if not board.rows:
            raise ValueError("No rows on the board")
        return min(range(len(board.rows)), key=board.row_cows)


POLICIES: dict[str, type[FallbackPolicy]] = {
    "random": RandomPolicy,
    "first": FirstChoicePolicy,
    "cheapest-row": CheapestRowPolicy,
}
