"""
Pending Prompts - Outstanding questions waiting for a remote answer.

Each entry is keyed by (participant id, prompt kind) and holds the future
the backend request awaits. Opening a prompt for a key that already has
one cancels the old future, so there is never more than one live answer
slot per key.
"""

from __future__ import annotations
import asyncio
from typing import Any

from ..engine_core.errors import NoPendingPrompt
from .base import PromptKind

PromptKey = tuple[str, PromptKind]


class PendingPrompts:
    """Registry of unanswered prompts."""

    def __init__(self):
        self._pending: dict[PromptKey, asyncio.Future] = {}

    def open(self, participant_id: str, kind: PromptKind) -> asyncio.Future:
        """Create the answer slot for a key, replacing any previous one."""
        key = (participant_id, kind)
        previous = self._pending.pop(key, None)
        if previous is not None and not previous.done():
            previous.cancel()
        future = asyncio.get_running_loop().create_future()
        self._pending[key] = future
        return future

    def discard(self, participant_id: str, kind: PromptKind, future: asyncio.Future):
        """Remove the slot if it still holds this future."""
        key = (participant_id, kind)
        if self._pending.get(key) is future:
            del self._pending[key]

    def resolve(self, participant_id: str, kind: PromptKind, value: Any):
        """
        Deliver an answer.

        Raises:
            NoPendingPrompt: nothing is waiting for this key
        """
        key = (participant_id, kind)
        future = self._pending.pop(key, None)
        if future is None or future.done():
            raise NoPendingPrompt(participant_id, kind.value)
        future.set_result(value)

    def fail(self, participant_id: str, error: Exception):
        """Fail every prompt of a participant (e.g. on disconnect)."""
        for key in [key for key in self._pending if key[0] == participant_id]:
            future = self._pending.pop(key)
            if not future.done():
                future.set_exception(error)

    def kinds_for(self, participant_id: str) -> list[PromptKind]:
        return [kind for pid, kind in self._pending if pid == participant_id]

    def cancel_all(self):
        for future in self._pending.values():
            if not future.done():
                future.cancel()
        self._pending.clear()

    def __contains__(self, key: PromptKey) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)
