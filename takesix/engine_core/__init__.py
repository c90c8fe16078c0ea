"""
Engine Core - Cards, board and table state.

The engine core holds the game rules that do not need any player input:
1. Builds and shuffles the deck
2. Lays out the board rows
3. Finds the row a card attaches to
4. Moves penalty from claimed rows to seats
"""

from .cards import Card, Deck, create_deck, shuffle, shuffled_deck, take_card, move_card
from .board import Board, Row, initialize_board, active_cards, select_target_row, claim_row
from .state import GamePhase, Seat, SeatBinding, MatchState, choose_from_hand, validate_card_choice, create_seats
from .snapshot import SeatSnapshot, BoardSnapshot, PlayerGameState, Standing
from .errors import (
    TakeSixError,
    NoCardAvailable,
    InvalidChoice,
    ParticipantTimeout,
    ParticipantDisconnected,
    UnknownParticipant,
    SeatsFull,
    NoPendingPrompt,
)

__all__ = [
    "Card",
    "Deck",
    "create_deck",
    "shuffle",
    "shuffled_deck",
    "take_card",
    "move_card",
    "Board",
    "Row",
    "initialize_board",
    "active_cards",
    "select_target_row",
    "claim_row",
    "GamePhase",
    "Seat",
    "SeatBinding",
    "MatchState",
    "choose_from_hand",
    "validate_card_choice",
    "create_seats",
    "SeatSnapshot",
    "BoardSnapshot",
    "PlayerGameState",
    "Standing",
    "TakeSixError",
    "NoCardAvailable",
    "InvalidChoice",
    "ParticipantTimeout",
    "ParticipantDisconnected",
    "UnknownParticipant",
    "SeatsFull",
    "NoPendingPrompt",
]
