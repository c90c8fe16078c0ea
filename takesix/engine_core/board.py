"""
Board - The rows cards are placed on and the placement rule.

Geometry:
- a fixed number of rows, indexed 0..row_count-1 (never re-sorted)
- each row is an ordered list; its active card is the last one
- a card attaches to the "closest row below": the row whose active rank
  is the largest value still lower than or equal to the card's rank
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .cards import Card, Deck, move_card, total_cows

if TYPE_CHECKING:
    from .state import Seat


Row = list[Card]
Board = list[Row]


def initialize_board(deck: Deck, row_count: int = 4) -> Board:
    """Draw one card from the deck into each row."""
    board: Board = []
    for _ in range(row_count):
        row: Row = []
        move_card(deck, row)
        board.append(row)
    return board


def active_cards(board: Board) -> list[Card]:
    """Last card of each row, in row order."""
    return [row[-1] for row in board]


def select_target_row(rank: int, board: Board) -> int | None:
    """
    Find the row a card of the given rank attaches to.

    Returns None when every active rank is above the card; the player
    then has to pick a row to take.
    """
    target: int | None = None
    target_rank = 0
    for row_index, card in enumerate(active_cards(board)):
        if target_rank < card.rank <= rank:
            target = row_index
            target_rank = card.rank
    return target


def row_cows(row: Row) -> int:
    """Penalty collected when the row is claimed."""
    return total_cows(row)


def claim_row(row: Row, seat: Seat) -> list[Card]:
    """
    Give the row's cows to the seat and empty the row.

    The claimed cards leave the game; they are returned for logging only.
    """
    seat.cow_count += row_cows(row)
    claimed = list(row)
    row.clear()
    return claimed


def place_card(card: Card, row: Row) -> None:
    """Append a played card to a row."""
    row.append(card)
