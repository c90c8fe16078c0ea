"""
Test backends with scripted behaviour.
"""

import asyncio

from ..backends.base import Backend, PromptKind
from ..engine_core.errors import ParticipantDisconnected


class ScriptedBackend(Backend):
    """
    Answers every prompt from a script.

    answers maps a prompt kind to a value, or to a callable taking the
    player snapshot (and the board for card/row prompts).
    """

    name = "scripted"

    def __init__(self, answers=None, delay: float = 0.0):
        super().__init__()
        self.answers = answers or {}
        self.delay = delay
        self.requests: list[PromptKind] = []
        self.states = []
        self.ended = []

    async def _answer(self, kind, *args):
        self.requests.append(kind)
        if self.delay:
            await asyncio.sleep(self.delay)
        answer = self.answers.get(kind, 0)
        return answer(*args) if callable(answer) else answer

    async def request_card_choice(self, player, board):
        return await self._answer(PromptKind.CARD_CHOICE, player, board)

    async def request_row_choice(self, player, board):
        return await self._answer(PromptKind.ROW_CHOICE, player, board)

    async def request_play_again(self, player):
        return await self._answer(PromptKind.PLAY_AGAIN, player)

    async def notify_seat_state_changed(self, state):
        self.states.append(state)

    async def notify_match_ended(self, standings):
        self.ended.append(standings)


class SilentBackend(ScriptedBackend):
    """Never answers."""

    name = "silent"

    def __init__(self):
        super().__init__()
        self.cancelled = 0

    async def _answer(self, kind, *args):
        self.requests.append(kind)
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise


class DisconnectedBackend(ScriptedBackend):
    """Reports the participant gone on every prompt."""

    name = "disconnected"

    async def _answer(self, kind, player, *args):
        self.requests.append(kind)
        raise ParticipantDisconnected(player.participant_id)


class BrokenBackend(ScriptedBackend):
    """Fails with an unexpected error on every prompt."""

    name = "broken"

    async def _answer(self, kind, *args):
        self.requests.append(kind)
        raise RuntimeError("backend exploded")


class FakeSocket:
    """Stands in for a WebSocket: records what is sent."""

    def __init__(self, fail: bool = False):
        self.sent: list[dict] = []
        self.fail = fail

    async def send_json(self, data):
        if self.fail:
            raise ConnectionError("socket closed")
        self.sent.append(data)

    def of_type(self, message_type: str) -> list[dict]:
        return [message for message in self.sent if message["type"] == message_type]
