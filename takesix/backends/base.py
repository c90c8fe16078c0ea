"""
Backend Interface - Contract between the game and whoever controls a seat.

A backend:
- Reports participants joining and renaming themselves (to a listener)
- Answers decision requests for the participants it serves
- Receives read-only snapshots after state changes
- Is told when a match ends so it can release its resources

The game only depends on this interface; console, HTTP and WebSocket are
interchangeable variants.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..engine_core.snapshot import SeatSnapshot, BoardSnapshot, PlayerGameState, Standing
    from ..engine_core.state import Seat


class PromptKind(str, Enum):
    """The decisions a participant can be asked for."""
    CARD_CHOICE = "card-choice"
    ROW_CHOICE = "row-choice"
    PLAY_AGAIN = "play-again"


class ParticipantListener(ABC):
    """Receives participant events emitted by backends."""

    @abstractmethod
    def participant_joined(
        self,
        backend: Backend,
        participant_id: str,
        name: str | None = None,
    ) -> Seat:
        """Bind the participant to a seat and return it."""
        pass

    @abstractmethod
    def participant_renamed(self, participant_id: str, name: str) -> Seat:
        """Change the display name of the participant's seat."""
        pass

    @abstractmethod
    def player_game_state(self, participant_id: str) -> PlayerGameState:
        """Snapshot of the participant's seat and the board."""
        pass


class Backend(ABC):
    """
    Abstract base class for seat backends.

    Requests are coroutines; the orchestrator may cancel them at any time
    (timeout, new prompt), so implementations must clean up on cancellation.
    """

    name: str = "backend"

    def __init__(self):
        self._listeners: list[ParticipantListener] = []

    def attach(self, listener: ParticipantListener):
        """Register the listener that consumes join/rename events."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    # =========================================================================
    # Events emitted towards the game
    # =========================================================================

    def emit_participant_joined(self, participant_id: str, name: str | None = None) -> list[Seat]:
        return [
            listener.participant_joined(self, participant_id, name)
            for listener in self._listeners
        ]

    def emit_participant_renamed(self, participant_id: str, name: str) -> list[Seat]:
        return [
            listener.participant_renamed(participant_id, name)
            for listener in self._listeners
        ]

    def game_state_for(self, participant_id: str) -> PlayerGameState | None:
        """Ask the first listener for a participant snapshot."""
        if not self._listeners:
            return None
        return self._listeners[0].player_game_state(participant_id)

    # =========================================================================
    # Decision requests
    # =========================================================================

    async def request(
        self,
        kind: PromptKind,
        player: SeatSnapshot,
        board: BoardSnapshot | None = None,
    ) -> Any:
        """Dispatch a prompt kind to the matching request method."""
        if kind == PromptKind.CARD_CHOICE:
            return await self.request_card_choice(player, board)
        if kind == PromptKind.ROW_CHOICE:
            return await self.request_row_choice(player, board)
        if kind == PromptKind.PLAY_AGAIN:
            return await self.request_play_again(player)
        raise ValueError(f"Unknown prompt kind: {kind}")

    @abstractmethod
    async def request_card_choice(self, player: SeatSnapshot, board: BoardSnapshot) -> int:
        """Return an index into the player's current hand."""
        pass

    @abstractmethod
    async def request_row_choice(self, player: SeatSnapshot, board: BoardSnapshot) -> int:
        """Return the index of the row to take."""
        pass

    @abstractmethod
    async def request_play_again(self, player: SeatSnapshot) -> bool:
        """Return True if the participant wants another match."""
        pass

    # =========================================================================
    # Notifications from the game
    # =========================================================================

    async def notify_seat_state_changed(self, state: PlayerGameState):
        """Push a fresh snapshot for real-time display."""

    async def notify_match_ended(self, standings: list[Standing]):
        """Release per-match resources (pending prompts, UI)."""

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self):
        """Called once when the game service starts."""

    async def close(self):
        """Called once when the game service stops."""
