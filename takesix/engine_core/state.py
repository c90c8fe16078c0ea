"""
Game State - Seats and the match context owned by the round engine.

Design principles:
- One explicit context object per match (no process-wide globals)
- Seats are created once and reused from match to match
- Backends never hold references into this state; they get snapshots
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING

from ..config import GameConfig, DEFAULT_CONFIG
from .board import Board
from .cards import Card, Deck
from .errors import InvalidChoice

if TYPE_CHECKING:
    from ..backends.base import Backend


class GamePhase(Enum):
    """High-level phases of a round."""
    WAITING = "waiting"
    DEALING = "dealing"
    TRICK = "trick"
    SCORING = "scoring"
    GAME_OVER = "game_over"


@dataclass
class SeatBinding:
    """A participant attached to a seat, and the backend serving it."""
    participant_id: str
    backend: Backend


@dataclass
class Seat:
    """
    A fixed play position.

    An unbound seat plays automatically. The last participant id is kept
    after unbinding so the same participant can re-attach to this seat.
    """
    index: int
    name: str
    hand: list[Card] = field(default_factory=list)
    cow_count: int = 0
    binding: SeatBinding | None = None
    last_participant_id: str | None = None

    @property
    def is_bound(self) -> bool:
        return self.binding is not None

    @property
    def participant_id(self) -> str | None:
        return self.binding.participant_id if self.binding else None

    def bind(self, participant_id: str, backend: Backend):
        self.binding = SeatBinding(participant_id=participant_id, backend=backend)
        self.last_participant_id = participant_id

    def unbind(self):
        self.binding = None

    def reset(self):
        """Zero the score and empty the hand (start of a match)."""
        self.cow_count = 0
        self.hand = []


def validate_card_choice(seat: Seat, hand_index: Any):
    """Raise InvalidChoice unless hand_index points into the seat's hand."""
    if not isinstance(hand_index, int) or isinstance(hand_index, bool):
        raise InvalidChoice(f"Card choice must be an integer, got {hand_index!r}")
    if hand_index < 0 or hand_index >= len(seat.hand):
        raise InvalidChoice(
            f"Invalid card choice {hand_index} for a hand of {len(seat.hand)}"
        )


def choose_from_hand(seat: Seat, hand_index: int) -> Card:
    """
    Remove and return the card at hand_index.

    Raises:
        InvalidChoice: index outside the current hand
    """
    validate_card_choice(seat, hand_index)
    return seat.hand.pop(hand_index)


def create_seats(config: GameConfig = DEFAULT_CONFIG) -> list[Seat]:
    """Allocate the seats, named Player 1..N."""
    return [Seat(index=i, name=f"Player {i + 1}") for i in range(config.player_count)]


@dataclass
class MatchState:
    """
    Complete state of the table during a match.

    The round engine is the only writer.
    """
    config: GameConfig
    seats: list[Seat]
    board: Board = field(default_factory=list)
    deck: Deck = field(default_factory=list)

    phase: GamePhase = GamePhase.WAITING
    match_number: int = 0
    round_number: int = 0
    trick_number: int = 0

    # Human-readable history of the current match
    events: list[str] = field(default_factory=list)

    def new_match(self):
        """Reset seats and table for a new match."""
        for seat in self.seats:
            seat.reset()
        self.board = []
        self.deck = []
        self.events = []
        self.match_number += 1
        self.round_number = 0
        self.trick_number = 0
        self.phase = GamePhase.WAITING

    def bound_seats(self) -> list[Seat]:
        return [seat for seat in self.seats if seat.is_bound]

    def loser(self) -> Seat | None:
        """First seat (by index) at or above the cow threshold."""
        for seat in self.seats:
            if seat.cow_count >= self.config.max_cow_count:
                return seat
        return None

    def standings(self) -> list[Seat]:
        """Seats sorted by cow count, lowest (best) first."""
        return sorted(self.seats, key=lambda seat: seat.cow_count)

    def card_count(self) -> int:
        """Cards currently in the deck, the hands and on the board."""
        return (
            len(self.deck)
            + sum(len(seat.hand) for seat in self.seats)
            + sum(len(row) for row in self.board)
        )
