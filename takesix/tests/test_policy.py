"""
Tests for fallback policies.
"""

import pytest

from ..bots import POLICIES, CheapestRowPolicy, FirstChoicePolicy, RandomPolicy
from ..engine_core.snapshot import BoardSnapshot, SeatSnapshot
from .conftest import cards


@pytest.fixture
def seat() -> SeatSnapshot:
    return SeatSnapshot(
        seat_index=0, name="Player 1", participant_id=None, hand=tuple(cards(4, 50, 99)), cow_count=0
    )


@pytest.fixture
def board() -> BoardSnapshot:
    return BoardSnapshot.of([cards(10, 11, 12), cards(20), cards(30, 31), cards(40)])


class TestPolicies:

    def test_random_choices_in_range(self, seat, board):
        policy = RandomPolicy(seed=3)
        for _ in range(50):
            assert 0 <= policy.choose_card(seat, board) < 3
            assert 0 <= policy.choose_row(seat, board) < 4

    def test_random_is_seeded(self, seat, board):
        first = [RandomPolicy(seed=5).choose_row(seat, board) for _ in range(5)]
        second = [RandomPolicy(seed=5).choose_row(seat, board) for _ in range(5)]
        assert first == second

    def test_random_rows_cover_board(self, seat, board):
        policy = RandomPolicy(seed=11)
        assert {policy.choose_row(seat, board) for _ in range(200)} == {0, 1, 2, 3}

    def test_first_choice(self, seat, board):
        policy = FirstChoicePolicy()
        assert policy.choose_card(seat, board) == 0
        assert policy.choose_row(seat, board) == 0

    def test_cheapest_row(self, seat, board):
        assert CheapestRowPolicy(seed=1).choose_row(seat, board) == 1

    def test_never_asks_for_rematch(self, seat):
        assert not RandomPolicy().play_again(seat)

    def test_empty_hand(self, board):
        empty = SeatSnapshot(seat_index=0, name="P", participant_id=None, hand=(), cow_count=0)
        with pytest.raises(ValueError):
            FirstChoicePolicy().choose_card(empty, board)

    def test_registry(self):
        assert set(POLICIES) == {"random", "first", "cheapest-row"}
        assert POLICIES["cheapest-row"]().get_name() == "CheapestRowPolicy"

    @pytest.mark.parametrize("name", sorted(POLICIES))
    def test_seeded_policies_repeat(self, name, seat, board):
        first = POLICIES[name](4)
        second = POLICIES[name](4)
        picks = [(first.choose_card(seat, board), first.choose_row(seat, board)) for _ in range(10)]
        assert picks == [(second.choose_card(seat, board), second.choose_row(seat, board)) for _ in range(10)]
