"""
HTTP Backend - Participants that join and answer through REST calls.

HTTP clients cannot be pushed to: they poll GET /players/{id}/prompts to
see what they are asked and GET /players/{id}/state for the table. The
backend keeps the standings of the last finished match for GET /standings.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from .base import PromptKind
from .remote import RemoteBackend

if TYPE_CHECKING:
    from ..engine_core.snapshot import SeatSnapshot, BoardSnapshot, Standing

log = logging.getLogger(__name__)


class HttpBackend(RemoteBackend):
    """Polling backend used by the REST endpoints."""

    name = "http"

    def __init__(self):
        super().__init__()
        self.last_standings: list[Standing] = []

    async def announce(
        self,
        kind: PromptKind,
        player: SeatSnapshot,
        board: BoardSnapshot | None,
    ):
        log.info("Waiting for %s answer from %s", kind.value, player.participant_id)

    async def notify_match_ended(self, standings: list[Standing]):
        await super().notify_match_ended(standings)
        self.last_standings = list(standings)
