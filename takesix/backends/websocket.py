"""
WebSocket Backend - Bidirectional participants.

Messages from client:
- join: {"type": "join", "player_id": "...", "player_name": "..."}
- change-name: {"type": "change-name", "player_name": "..."}
- choose-card: {"type": "choose-card", "card_index": 3}
- choose-row: {"type": "choose-row", "row_index": 1}
- play-again: {"type": "play-again", "play_again": true}
- ping: Keep-alive

Messages from server ({"type": ..., "payload": ...}):
- game-state: Seat and board changed, and after every accepted message
- card-choice-prompted / row-choice-prompted / play-again-prompted
- match-ended: Final standings
- pong
- error: {"error": "..."}

The transport is anything with an async send_json(); the FastAPI
endpoint passes its WebSocket.
"""

from __future__ import annotations
import logging
from typing import Any, Awaitable, Callable, TYPE_CHECKING

from pydantic import ValidationError

from ..engine_core.errors import (
    NoPendingPrompt,
    ParticipantDisconnected,
    TakeSixError,
    UnknownParticipant,
)
from ..engine_core.snapshot import BoardSnapshot, PlayerGameState
from .base import PromptKind
from .messages import (
    ChangeNameMessage,
    ChooseCardMessage,
    ChooseRowMessage,
    JoinMessage,
    PlayAgainMessage,
    PlayerStateMessage,
    standings_payload,
)
from .remote import RemoteBackend

if TYPE_CHECKING:
    from ..engine_core.snapshot import SeatSnapshot, Standing

log = logging.getLogger(__name__)


class WebSocketConnection:
    """One client socket and the participant it speaks for, once joined."""

    def __init__(self, websocket: Any):
        self.websocket = websocket
        self.participant_id: str | None = None

    async def send(self, event: str, payload: Any = None):
        await self.websocket.send_json({"type": event, "payload": payload})

    async def send_error(self, message: str):
        await self.send("error", {"error": message})


class WebSocketBackend(RemoteBackend):
    """Backend pushing prompts and state to connected sockets."""

    name = "websocket"

    def __init__(self):
        super().__init__()
        self._connections: dict[str, WebSocketConnection] = {}
        self._handlers: dict[str, Callable[[WebSocketConnection, dict], Awaitable[None]]] = {
            "join": self._on_join,
            "change-name": self._on_change_name,
            "choose-card": self._on_choose_card,
            "choose-row": self._on_choose_row,
            "play-again": self._on_play_again,
            "ping": self._on_ping,
        }

    # =========================================================================
    # Connection handling
    # =========================================================================

    def open_connection(self, websocket: Any) -> WebSocketConnection:
        return WebSocketConnection(websocket)

    async def handle_message(self, connection: WebSocketConnection, data: dict):
        """Dispatch one decoded client message."""
        message_type = data.get("type") if isinstance(data, dict) else None
        handler = self._handlers.get(message_type)
        if handler is None:
            await connection.send_error(f"Unknown message type: {message_type}")
            return

        try:
            await handler(connection, data)
        except ValidationError:
            await connection.send_error(f"Invalid {message_type} data")
        except NoPendingPrompt:
            await connection.send_error("Invalid request")
        except TakeSixError as e:
            await connection.send_error(str(e))

    async def disconnect(self, connection: WebSocketConnection):
        """Forget the socket; prompts waiting on it fail immediately."""
        participant_id = connection.participant_id
        log.info("Connection closed: %s", participant_id or "anonymous")
        if participant_id is None:
            return
        if self._connections.get(participant_id) is connection:
            del self._connections[participant_id]
            self.pending.fail(participant_id, ParticipantDisconnected(participant_id))

    def is_connected(self, participant_id: str) -> bool:
        return participant_id in self._connections

    # =========================================================================
    # Message handlers
    # =========================================================================

    async def _on_join(self, connection: WebSocketConnection, data: dict):
        message = JoinMessage.model_validate(data)
        self.join(message.player_id, message.player_name)

        connection.participant_id = message.player_id
        self._connections[message.player_id] = connection
        await self._send_state(connection)

    async def _on_change_name(self, connection: WebSocketConnection, data: dict):
        message = ChangeNameMessage.model_validate(data)
        self.rename(self._participant(connection), message.player_name)
        await self._send_state(connection)

    async def _on_choose_card(self, connection: WebSocketConnection, data: dict):
        message = ChooseCardMessage.model_validate(data)
        self.answer(self._participant(connection), PromptKind.CARD_CHOICE, message.card_index)
        await self._send_state(connection)

    async def _on_choose_row(self, connection: WebSocketConnection, data: dict):
        message = ChooseRowMessage.model_validate(data)
        self.answer(self._participant(connection), PromptKind.ROW_CHOICE, message.row_index)
        await self._send_state(connection)

    async def _on_play_again(self, connection: WebSocketConnection, data: dict):
        message = PlayAgainMessage.model_validate(data)
        self.answer(self._participant(connection), PromptKind.PLAY_AGAIN, message.play_again)
        await self._send_state(connection)

    async def _on_ping(self, connection: WebSocketConnection, data: dict):
        await connection.send("pong")

    def _participant(self, connection: WebSocketConnection) -> str:
        if connection.participant_id is None:
            raise UnknownParticipant("anonymous")
        return connection.participant_id

    async def _send_state(self, connection: WebSocketConnection):
        state = self.game_state_for(connection.participant_id)
        if state is not None:
            await connection.send("game-state", PlayerStateMessage.from_state(state).model_dump())

    # =========================================================================
    # Pushing to participants
    # =========================================================================

    async def _send(self, participant_id: str, event: str, payload: Any = None):
        connection = self._connections.get(participant_id)
        if connection is None:
            log.error("Participant %s not connected", participant_id)
            return
        try:
            await connection.send(event, payload)
        except Exception:
            log.warning("Dropping dead connection of %s", participant_id)
            await self.disconnect(connection)

    async def announce(
        self,
        kind: PromptKind,
        player: SeatSnapshot,
        board: BoardSnapshot | None,
    ):
        if not self.is_connected(player.participant_id):
            raise ParticipantDisconnected(player.participant_id)
        state = PlayerGameState(seat=player, board=board or BoardSnapshot(rows=()))
        await self._send(
            player.participant_id,
            f"{kind.value}-prompted",
            PlayerStateMessage.from_state(state).model_dump(),
        )

    async def notify_seat_state_changed(self, state: PlayerGameState):
        if state.seat.participant_id is None:
            return
        await self._send(
            state.seat.participant_id,
            "game-state",
            PlayerStateMessage.from_state(state).model_dump(),
        )

    async def notify_match_ended(self, standings: list[Standing]):
        await super().notify_match_ended(standings)
        payload = standings_payload(standings)
        for participant_id in list(self._connections):
            await self._send(participant_id, "match-ended", payload)

    async def close(self):
        await super().close()
        self._connections.clear()
