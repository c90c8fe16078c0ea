"""
API Service - Business logic layer between API and game.

The service:
1. Owns the single table (seats, orchestrator, match loop)
2. Routes HTTP joins and answers to the HTTP backend
3. Runs the match loop as a background task
4. Formats responses for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
import logging
import random
from typing import Any, TypeVar

from ..backends import Backend, HttpBackend, PromptKind, WebSocketBackend
from ..bots.policy import FallbackPolicy, RandomPolicy
from ..config import GameConfig
from ..engine_core.state import MatchState, create_seats
from ..session import MatchLoop, MatchResult, PromptOrchestrator, SeatManager
from .schemas import (
    AnswerResponse,
    ChangeNameRequest,
    JoinRequest,
    PlayerStateMessage,
    PlayerStateResponse,
    PromptName,
    PromptsResponse,
    SeatListResponse,
    SeatSummary,
    StandingInfo,
    StandingsResponse,
)

log = logging.getLogger(__name__)

B = TypeVar("B", bound=Backend)


def default_backends() -> list[Backend]:
    return [HttpBackend(), WebSocketBackend()]


@dataclass
class GameService:
    """
    Main game service.

    Usage:
        service = GameService()
        await service.start()

        # Seat a participant
        state = service.join(JoinRequest(player_id="p1", player_name="Alice"))

        # Answer a prompt
        service.answer("p1", PromptKind.CARD_CHOICE, 3)
    """
    config: GameConfig = field(default_factory=GameConfig.from_env)
    policy: FallbackPolicy = field(default_factory=RandomPolicy)
    backends: list[Backend] = field(default_factory=default_backends)
    rng: random.Random | None = None

    def __post_init__(self):
        self.state = MatchState(config=self.config, seats=create_seats(self.config))
        self.seats = SeatManager(self.state)
        self.orchestrator = PromptOrchestrator(self.config.prompt_timeout)
        self.match_loop = MatchLoop(
            self.state,
            self.seats,
            self.orchestrator,
            self.backends,
            self.policy,
            self.rng,
        )
        for backend in self.backends:
            backend.attach(self.seats)
        self._task: asyncio.Task | None = None

    def backend(self, backend_type: type[B]) -> B:
        for backend in self.backends:
            if isinstance(backend, backend_type):
                return backend
        raise LookupError(f"No {backend_type.__name__} configured")

    @property
    def http(self) -> HttpBackend:
        return self.backend(HttpBackend)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self, run_match: bool = True):
        """Start every backend, then the match loop in the background."""
        for backend in self.backends:
            await backend.start()
        if run_match:
            self._task = asyncio.create_task(self.match_loop.run())
            self._task.add_done_callback(self._loop_finished)

    async def stop(self):
        self.orchestrator.cancel_all()
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        for backend in self.backends:
            await backend.close()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _loop_finished(self, task: asyncio.Task):
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            log.error("Match loop crashed", exc_info=error)
        else:
            log.info("Match loop finished after %d match(es)", len(task.result()))

    async def simulate(self, matches: int = 1) -> list[MatchResult]:
        """Play whole matches with every seat on autoplay."""
        results = []
        for _ in range(matches):
            result = await self.match_loop.play_match()
            await self.match_loop.end_match(result)
            results.append(result)
        return results

    # =========================================================================
    # Participants
    # =========================================================================

    def join(self, request: JoinRequest) -> PlayerStateResponse:
        """
        Seat a participant through the HTTP backend.

        Raises:
            SeatsFull: every seat is held by another participant
        """
        self.http.join(request.player_id, request.player_name)
        return self.get_player_state(request.player_id)

    def change_name(self, request: ChangeNameRequest) -> PlayerStateResponse:
        self.http.rename(request.player_id, request.player_name)
        return self.get_player_state(request.player_id)

    def get_player_state(self, participant_id: str) -> PlayerStateResponse:
        """
        Raises:
            UnknownParticipant: no seat is bound to the participant
        """
        state = self.seats.player_game_state(participant_id)
        return PlayerStateResponse.from_state(state)

    def get_prompts(self, participant_id: str) -> PromptsResponse:
        state = self.seats.player_game_state(participant_id)
        return PromptsResponse(
            participant_id=participant_id,
            prompts=[PromptName(kind.value) for kind in self.http.pending_kinds(participant_id)],
            state=PlayerStateMessage.from_state(state),
        )

    def answer(self, participant_id: str, kind: PromptKind, value: Any) -> AnswerResponse:
        """
        Resolve a prompt the HTTP backend is waiting on.

        Raises:
            UnknownParticipant: no seat is bound to the participant
            NoPendingPrompt: the participant was not asked this question
        """
        self.seats.get_seat(participant_id)
        self.http.answer(participant_id, kind, value)
        return AnswerResponse(accepted=True, prompt=PromptName(kind.value))

    # =========================================================================
    # Table
    # =========================================================================

    def list_seats(self) -> SeatListResponse:
        return SeatListResponse(
            seats=[
                SeatSummary(
                    seat_index=seat.index,
                    name=seat.name,
                    cow_count=seat.cow_count,
                    is_bound=seat.is_bound,
                )
                for seat in self.state.seats
            ],
            match_number=self.state.match_number,
            round_number=self.state.round_number,
        )

    def get_standings(self) -> StandingsResponse:
        return StandingsResponse(
            standings=[
                StandingInfo.model_validate(standing)
                for standing in self.http.last_standings
            ]
        )
