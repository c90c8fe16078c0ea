"""
Tests for the round engine.

Tests:
- Dealing and card conservation
- Placement: append, full row, no row below
- Cards resolve by ascending rank
- Participants are prompted and notified
"""

import asyncio

import pytest

from ..backends.base import PromptKind
from ..config import GameConfig
from ..engine_core.state import GamePhase, MatchState, create_seats
from ..session import CardChoice, PromptOrchestrator, RoundEngine, validate_row_choice
from ..engine_core.errors import InvalidChoice
from .conftest import cards
from .fakes import ScriptedBackend, SilentBackend


@pytest.fixture
def engine(match_state, orchestrator, policy, rng):
    return RoundEngine(match_state, orchestrator, policy, rng)


def total_cards(state: MatchState) -> int:
    """Cards on the table plus the cards already claimed (3 cows each)."""
    claimed = sum(seat.cow_count for seat in state.seats) // state.config.card_cows
    return state.card_count() + claimed


class TestDeal:

    def test_deal_layout(self, engine, match_state):
        engine.deal()

        assert [len(row) for row in match_state.board] == [1, 1, 1, 1]
        assert all(len(seat.hand) == 10 for seat in match_state.seats)
        assert len(match_state.deck) == 60
        assert match_state.card_count() == 104

    def test_every_card_dealt_once(self, engine, match_state):
        engine.deal()
        ranks = [card.rank for card in match_state.deck]
        ranks += [card.rank for seat in match_state.seats for card in seat.hand]
        ranks += [card.rank for row in match_state.board for card in row]
        assert sorted(ranks) == list(range(1, 105))


class TestResolveChoice:

    def test_card_appends_to_closest_row(self, engine, match_state):
        match_state.board = [cards(5), cards(23), cards(61), cards(88)]
        asyncio.run(engine.resolve_choice(CardChoice(seat_index=0, card=cards(8)[0])))

        assert match_state.board[0] == cards(5, 8)
        assert match_state.seats[0].cow_count == 0

    def test_full_row_is_claimed(self, engine, match_state):
        match_state.board = [cards(10, 11, 12, 13, 14), cards(30), cards(50), cards(70)]
        asyncio.run(engine.resolve_choice(CardChoice(seat_index=1, card=cards(15)[0])))

        assert match_state.seats[1].cow_count == 15
        assert match_state.board[0] == cards(15)

    def test_no_row_below_asks_participant(self, engine, match_state):
        backend = ScriptedBackend({PromptKind.ROW_CHOICE: 2})
        match_state.seats[0].bind("alice", backend)
        match_state.board = [cards(20), cards(30), cards(40, 41), cards(50)]

        asyncio.run(engine.resolve_choice(CardChoice(seat_index=0, card=cards(3)[0])))

        assert backend.requests == [PromptKind.ROW_CHOICE]
        assert match_state.seats[0].cow_count == 6
        assert match_state.board[2] == cards(3)

    def test_no_row_below_autoplay_takes_policy_row(self, engine, match_state):
        match_state.board = [cards(20, 21), cards(30), cards(40), cards(50)]

        asyncio.run(engine.resolve_choice(CardChoice(seat_index=3, card=cards(3)[0])))

        # FirstChoicePolicy takes row 0
        assert match_state.seats[3].cow_count == 6
        assert match_state.board[0] == cards(3)

    def test_invalid_row_answer_falls_back(self, engine, match_state):
        match_state.seats[0].bind("alice", ScriptedBackend({PromptKind.ROW_CHOICE: 9}))
        match_state.board = [cards(20), cards(30), cards(40), cards(50)]

        asyncio.run(engine.resolve_choice(CardChoice(seat_index=0, card=cards(3)[0])))

        assert match_state.board[0] == cards(3)
        assert match_state.seats[0].is_bound

    @pytest.mark.parametrize("row_index", [-1, 4, "0", 1.0, False])
    def test_validate_row_choice(self, row_index):
        with pytest.raises(InvalidChoice):
            validate_row_choice(4, row_index)


class TestTrick:

    def test_cards_resolve_by_ascending_rank(self, engine, match_state):
        """Player 2's 25 fills the row before Player 1's 30 arrives."""
        match_state.board = [cards(10), cards(20, 21, 22, 23), cards(50), cards(80)]
        for seat, ranks in zip(match_state.seats, [(30,), (25,), (5,), (99,)]):
            seat.hand = cards(*ranks)

        asyncio.run(engine.play_trick())

        seats = match_state.seats
        assert seats[0].cow_count == 15
        assert seats[1].cow_count == 0
        assert seats[2].cow_count == 3
        assert match_state.board == [cards(5), cards(30), cards(50), cards(80, 99)]
        placed = [event for event in match_state.events if "placed" in event]
        assert placed == [
            "Player 3 placed card 5 in row 0",
            "Player 2 placed card 25 in row 1",
            "Player 1 placed card 30 in row 1",
            "Player 4 placed card 99 in row 3",
        ]

    def test_choices_are_made_before_placement(self, engine, match_state):
        seen_boards = []

        def choose(player, board):
            seen_boards.append(board)
            return 0

        backends = [ScriptedBackend({PromptKind.CARD_CHOICE: choose}) for _ in range(4)]
        for index, (seat, backend) in enumerate(zip(match_state.seats, backends)):
            seat.bind(f"p{index}", backend)
            seat.hand = cards(30 + index)
        match_state.board = [cards(10), cards(20), cards(50), cards(80)]

        asyncio.run(engine.play_trick())

        assert len(seen_boards) == 4
        assert all(board == seen_boards[0] for board in seen_boards)

    def test_bound_seats_notified_once_per_trick(self, engine, match_state):
        backend = ScriptedBackend()
        match_state.seats[0].bind("alice", backend)
        engine.deal()

        asyncio.run(engine.play_trick())

        assert len(backend.states) == 1
        assert len(backend.states[0].seat.hand) == 9

    def test_silent_participant_is_autoplayed(self, engine, match_state):
        match_state.seats[0].bind("alice", SilentBackend())
        engine.deal()

        asyncio.run(engine.play_trick())

        assert not match_state.seats[0].is_bound
        assert all(len(seat.hand) == 9 for seat in match_state.seats)


class TestRound:

    def test_round_conserves_cards(self, engine, match_state):
        asyncio.run(engine.play_round())

        assert all(seat.hand == [] for seat in match_state.seats)
        assert total_cards(match_state) == 104
        assert match_state.round_number == 1
        assert match_state.trick_number == 10

    def test_scores_persist_across_rounds(self, engine, match_state):
        async def two_rounds():
            await engine.play_round()
            after_first = [seat.cow_count for seat in match_state.seats]
            await engine.play_round()
            return after_first

        after_first = asyncio.run(two_rounds())
        after_second = [seat.cow_count for seat in match_state.seats]
        assert all(b >= a for a, b in zip(after_first, after_second))

    def test_round_reports_loser(self, policy, rng):
        config = GameConfig(max_cow_count=3, prompt_timeout=0.05)
        state = MatchState(config=config, seats=create_seats(config))
        engine = RoundEngine(state, PromptOrchestrator(config.prompt_timeout), policy, rng)

        loser = asyncio.run(engine.play_round())

        # 44 cards cannot fit on four rows of five, so somebody took a row
        assert loser is not None
        assert loser.cow_count >= 3
        assert loser is next(seat for seat in state.seats if seat.cow_count >= 3)
        assert state.phase == GamePhase.GAME_OVER
