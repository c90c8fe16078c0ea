"""
Tests for the board and the placement rule.
"""

import pytest

from ..engine_core.board import (
    active_cards,
    claim_row,
    initialize_board,
    place_card,
    row_cows,
    select_target_row,
)
from ..engine_core.state import Seat
from .conftest import cards


class TestInitializeBoard:

    def test_one_card_per_row(self):
        deck = cards(10, 20, 30, 40, 50)
        board = initialize_board(deck)
        assert board == [cards(50), cards(40), cards(30), cards(20)]
        assert deck == cards(10)

    def test_active_cards_keep_row_order(self):
        board = [cards(40), cards(3, 90), cards(12)]
        assert [card.rank for card in active_cards(board)] == [40, 90, 12]


class TestSelectTargetRow:
    """The closest row below a card."""

    @pytest.mark.parametrize(
        "rank,expected",
        [
            (8, 0),
            (5, 0),
            (23, 1),
            (60, 1),
            (62, 2),
            (90, 3),
            (104, 3),
        ],
    )
    def test_largest_active_rank_not_above_card(self, board_5_23_61_88, rank, expected):
        assert select_target_row(rank, board_5_23_61_88) == expected

    @pytest.mark.parametrize("rank", [1, 3, 4])
    def test_no_row_below_card(self, board_5_23_61_88, rank):
        assert select_target_row(rank, board_5_23_61_88) is None

    def test_rows_are_not_assumed_sorted(self):
        board = [cards(88), cards(61), cards(5), cards(23)]
        assert select_target_row(8, board) == 2
        assert select_target_row(70, board) == 1

    def test_uses_last_card_of_each_row(self):
        board = [cards(2, 30), cards(10, 11)]
        assert select_target_row(20, board) == 1


class TestClaimRow:

    def test_full_row_adds_fifteen_cows(self):
        seat = Seat(index=0, name="Player 1", cow_count=4)
        row = cards(10, 20, 30, 40, 50)

        claimed = claim_row(row, seat)

        assert seat.cow_count == 19
        assert row == []
        assert claimed == cards(10, 20, 30, 40, 50)

    def test_row_cows(self):
        assert row_cows(cards(1, 2)) == 6
        assert row_cows([]) == 0

    def test_place_card_appends(self):
        row = cards(10)
        place_card(cards(12)[0], row)
        assert row == cards(10, 12)
