"""
Remote Backend - Shared behaviour of network backends.

A request opens a pending prompt, announces it to the participant and
waits for the answer to arrive through answer(). The wait has no timeout
of its own: the prompt orchestrator cancels it when the participant takes
too long.
"""

from __future__ import annotations
from abc import abstractmethod
import logging
from typing import Any, TYPE_CHECKING

from .base import Backend, PromptKind
from .pending import PendingPrompts

if TYPE_CHECKING:
    from ..engine_core.snapshot import SeatSnapshot, BoardSnapshot, Standing
    from ..engine_core.state import Seat

log = logging.getLogger(__name__)


class RemoteBackend(Backend):
    """Backend whose participants answer asynchronously over the network."""

    def __init__(self):
        super().__init__()
        self.pending = PendingPrompts()

    # =========================================================================
    # Participant-side operations
    # =========================================================================

    def join(self, participant_id: str, name: str | None = None) -> Seat:
        """Seat the participant (idempotent)."""
        seats = self.emit_participant_joined(participant_id, name)
        return seats[0]

    def rename(self, participant_id: str, name: str) -> Seat:
        seats = self.emit_participant_renamed(participant_id, name)
        return seats[0]

    def answer(self, participant_id: str, kind: PromptKind, value: Any):
        """
        Resolve a pending prompt with the participant's answer.

        Raises:
            NoPendingPrompt: the participant was not asked this question
        """
        self.pending.resolve(participant_id, kind, value)
        log.debug("%s answered %s with %r", participant_id, kind.value, value)

    def pending_kinds(self, participant_id: str) -> list[PromptKind]:
        return self.pending.kinds_for(participant_id)

    # =========================================================================
    # Backend contract
    # =========================================================================

    async def request_card_choice(self, player: SeatSnapshot, board: BoardSnapshot) -> int:
        return await self._ask(PromptKind.CARD_CHOICE, player, board)

    async def request_row_choice(self, player: SeatSnapshot, board: BoardSnapshot) -> int:
        return await self._ask(PromptKind.ROW_CHOICE, player, board)

    async def request_play_again(self, player: SeatSnapshot) -> bool:
        return await self._ask(PromptKind.PLAY_AGAIN, player, None)

    async def notify_match_ended(self, standings: list[Standing]):
        self.pending.cancel_all()

    async def close(self):
        self.pending.cancel_all()

    async def _ask(
        self,
        kind: PromptKind,
        player: SeatSnapshot,
        board: BoardSnapshot | None,
    ) -> Any:
        participant_id = player.participant_id
        if participant_id is None:
            raise ValueError(f"{player.name} has no participant to ask")

        # The slot exists before the participant hears about the prompt
        future = self.pending.open(participant_id, kind)
        try:
            await self.announce(kind, player, board)
            return await future
        finally:
            self.pending.discard(participant_id, kind, future)

    @abstractmethod
    async def announce(
        self,
        kind: PromptKind,
        player: SeatSnapshot,
        board: BoardSnapshot | None,
    ):
        """Let the participant know a prompt is waiting."""
        pass
