"""
Round Engine - Deal, ten tricks, scoring.

A round:
1. Shuffle a fresh deck, lay one card on each row
2. Deal the hands round-robin
3. Play one trick per card in hand:
   a. Every seat picks a card (in seat order, before anything is placed)
   b. Chosen cards are sorted by rank
   c. Each card is placed in turn; later cards see earlier placements
4. Check whether a seat reached the cow threshold

Placement of a card:
- No row below it: the player picks a row, takes it, card starts the row
- Closest row below is full: the player takes it, card starts the row
- Otherwise the card is appended to that row
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import random
from typing import Any

from ..backends.base import PromptKind
from ..bots.policy import FallbackPolicy
from ..engine_core.board import claim_row, initialize_board, place_card, select_target_row
from ..engine_core.cards import Card, move_card, shuffled_deck
from ..engine_core.errors import InvalidChoice
from ..engine_core.snapshot import BoardSnapshot, PlayerGameState, SeatSnapshot
from ..engine_core.state import (
    GamePhase,
    MatchState,
    Seat,
    choose_from_hand,
    validate_card_choice,
)
from .prompts import PromptOrchestrator

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CardChoice:
    """A card a seat committed to during the choice phase."""
    seat_index: int
    card: Card


def validate_row_choice(row_count: int, row_index: Any):
    """Raise InvalidChoice unless row_index is a row of the board."""
    if not isinstance(row_index, int) or isinstance(row_index, bool):
        raise InvalidChoice(f"Row choice must be an integer, got {row_index!r}")
    if row_index < 0 or row_index >= row_count:
        raise InvalidChoice(f"Invalid row choice {row_index}")


class RoundEngine:
    """
    Plays rounds on a MatchState.

    Usage:
        engine = RoundEngine(state, orchestrator, RandomPolicy())
        loser = await engine.play_round()
    """

    def __init__(
        self,
        state: MatchState,
        orchestrator: PromptOrchestrator,
        policy: FallbackPolicy,
        rng: random.Random | None = None,
    ):
        self.state = state
        self.orchestrator = orchestrator
        self.policy = policy
        self.rng = rng

    @property
    def config(self):
        return self.state.config

    async def play_round(self) -> Seat | None:
        """
        Play a full round.

        Returns:
            The seat that reached the cow threshold, or None
        """
        self.state.round_number += 1
        self.state.trick_number = 0
        log.info("Round %d starts", self.state.round_number)

        try:
            self.deal()
            for _ in range(self.config.hand_size):
                await self.play_trick()
        finally:
            self.orchestrator.cancel_all()

        self.state.phase = GamePhase.SCORING
        loser = self.state.loser()
        if loser is not None:
            self.state.phase = GamePhase.GAME_OVER
            self.log_event(f"{loser.name} reached {loser.cow_count} cows")
        return loser

    def deal(self):
        """Fresh deck, one card per row, then hand_size cards to every seat."""
        state = self.state
        state.phase = GamePhase.DEALING
        for seat in state.seats:
            seat.hand = []

        state.deck = shuffled_deck(self.config, self.rng)
        state.board = initialize_board(state.deck, self.config.row_count)
        for _ in range(self.config.hand_size):
            for seat in state.seats:
                move_card(state.deck, seat.hand)

    async def play_trick(self):
        """Collect one card per seat, then place them by ascending rank."""
        self.state.phase = GamePhase.TRICK
        self.state.trick_number += 1

        choices = await self.collect_choices()
        for choice in sorted(choices, key=lambda c: c.card.rank):
            await self.resolve_choice(choice)

        await self.notify_state_changed()

    async def collect_choices(self) -> list[CardChoice]:
        """Ask every seat for a card, in seat order."""
        choices: list[CardChoice] = []
        board = BoardSnapshot.of(self.state.board)
        for seat in self.state.seats:
            hand_index = await self.orchestrator.prompt(
                seat,
                PromptKind.CARD_CHOICE,
                board,
                validate=lambda index, seat=seat: validate_card_choice(seat, index),
                fallback=lambda seat=seat: self.policy.choose_card(SeatSnapshot.of(seat), board),
            )
            card = choose_from_hand(seat, hand_index)
            choices.append(CardChoice(seat_index=seat.index, card=card))
            self.log_event(f"{seat.name} chose card {card.rank}")
        return choices

    async def resolve_choice(self, choice: CardChoice):
        """Place one chosen card on the board."""
        board = self.state.board
        seat = self.state.seats[choice.seat_index]
        card = choice.card

        row_index = select_target_row(card.rank, board)
        if row_index is None:
            row_index = await self.ask_row(seat)
            claim_row(board[row_index], seat)
            self.log_event(
                f"{seat.name} takes row {row_index} and has {seat.cow_count} cows"
            )
        elif len(board[row_index]) >= self.config.max_row_size:
            claim_row(board[row_index], seat)
            self.log_event(
                f"Row {row_index} was full. {seat.name} takes it and has {seat.cow_count} cows"
            )

        place_card(card, board[row_index])
        self.log_event(f"{seat.name} placed card {card.rank} in row {row_index}")

    async def ask_row(self, seat: Seat) -> int:
        """Row to take when a card fits nowhere (random row on fallback)."""
        board = BoardSnapshot.of(self.state.board)
        row_count = len(self.state.board)
        return await self.orchestrator.prompt(
            seat,
            PromptKind.ROW_CHOICE,
            board,
            validate=lambda index: validate_row_choice(row_count, index),
            fallback=lambda: self.policy.choose_row(SeatSnapshot.of(seat), board),
        )

    async def notify_state_changed(self):
        """Send every bound seat its snapshot, once per trick."""
        for seat in self.state.bound_seats():
            snapshot = PlayerGameState(
                seat=SeatSnapshot.of(seat),
                board=BoardSnapshot.of(self.state.board),
            )
            try:
                await seat.binding.backend.notify_seat_state_changed(snapshot)
            except Exception:
                log.exception("Could not notify %s of the new state", seat.participant_id)

    def log_event(self, event: str):
        self.state.events.append(event)
        log.info(event)
