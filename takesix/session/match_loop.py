"""
Match Loop - Rounds until someone loses, then offer a rematch.

The loop:
1. Wait until at least one participant is seated
2. Reset seats, play rounds until a seat reaches the cow threshold
3. Compute standings (fewest cows first)
4. Tell every backend the match ended
5. Ask each seated participant whether to play again
6. Participants who decline (or do not answer) are released
7. Repeat while someone wants to continue
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import random
from typing import Any, TYPE_CHECKING

from ..backends.base import PromptKind
from ..bots.policy import FallbackPolicy
from ..engine_core.errors import InvalidChoice
from ..engine_core.snapshot import SeatSnapshot, Standing, build_standings
from ..engine_core.state import MatchState, Seat
from .prompts import PromptOrchestrator
from .round_engine import RoundEngine
from .seats import SeatManager

if TYPE_CHECKING:
    from ..backends.base import Backend

log = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the match loop."""
    IDLE = "idle"
    WAITING_PARTICIPANT = "waiting_participant"
    PLAYING = "playing"
    OFFERING_REMATCH = "offering_rematch"
    FINISHED = "finished"


@dataclass
class MatchResult:
    """Outcome of one match."""
    match_number: int
    loser: Standing
    standings: list[Standing]
    rounds_played: int
    events: list[str] = field(default_factory=list)


def validate_play_again(answer: Any):
    if not isinstance(answer, bool):
        raise InvalidChoice(f"Play-again answer must be a boolean, got {answer!r}")


class MatchLoop:
    """
    The main match driver.

    Usage:
        loop = MatchLoop(state, seats, orchestrator, backends, RandomPolicy())
        results = await loop.run()
    """

    def __init__(
        self,
        state: MatchState,
        seats: SeatManager,
        orchestrator: PromptOrchestrator,
        backends: list[Backend],
        policy: FallbackPolicy,
        rng: random.Random | None = None,
    ):
        self.state = state
        self.seats = seats
        self.orchestrator = orchestrator
        self.backends = backends
        self.policy = policy
        self.engine = RoundEngine(state, orchestrator, policy, rng)
        self.loop_state = LoopState.IDLE

    async def run(self) -> list[MatchResult]:
        """Play matches until nobody wants to continue."""
        results: list[MatchResult] = []
        while True:
            if not self.seats.any_bound():
                self.loop_state = LoopState.WAITING_PARTICIPANT
                log.info("Waiting for a participant to join")
                await self.seats.wait_for_participant()

            result = await self.play_match()
            results.append(result)
            await self.end_match(result)

            staying = await self.offer_rematch()
            if not staying:
                log.info("No players left. Game over.")
                self.loop_state = LoopState.FINISHED
                return results
            log.info("%d player(s) stay for another match", len(staying))

    async def play_match(self) -> MatchResult:
        """Play rounds from fresh seats until a seat loses."""
        self.loop_state = LoopState.PLAYING
        self.state.new_match()
        log.info("Match %d starts", self.state.match_number)

        loser: Seat | None = None
        while loser is None:
            loser = await self.engine.play_round()

        standings = build_standings(self.state.standings())
        loser_standing = next(s for s in standings if s.seat_index == loser.index)

        log.info("The loser is %s with %d cows", loser.name, loser.cow_count)
        for standing in standings:
            log.info("%d. %s: %d cows", standing.position, standing.name, standing.cow_count)

        return MatchResult(
            match_number=self.state.match_number,
            loser=loser_standing,
            standings=standings,
            rounds_played=self.state.round_number,
            events=list(self.state.events),
        )

    async def end_match(self, result: MatchResult):
        """Notify every backend and drop any scheduled prompt work."""
        self.orchestrator.cancel_all()
        for backend in self.backends:
            try:
                await backend.notify_match_ended(result.standings)
            except Exception:
                log.exception("Backend %s failed to handle the end of the match", backend.name)

    async def offer_rematch(self) -> list[Seat]:
        """Ask seated participants to play again; release the others."""
        self.loop_state = LoopState.OFFERING_REMATCH
        staying: list[Seat] = []
        for seat in self.state.bound_seats():
            wants_more = await self.orchestrator.prompt(
                seat,
                PromptKind.PLAY_AGAIN,
                None,
                validate=validate_play_again,
                fallback=lambda seat=seat: self.policy.play_again(SeatSnapshot.of(seat)),
            )
            if wants_more and seat.is_bound:
                staying.append(seat)
            else:
                self.seats.release(seat)
        self.orchestrator.cancel_all()
        return staying
