"""
Backends module - Ways a participant can control a seat.

Provides:
- Backend: The contract the game depends on
- ConsoleBackend: Terminal play for one participant
- HttpBackend: Join and answer through REST calls (polling)
- WebSocketBackend: Push prompts and state over a socket
"""

from .base import Backend, ParticipantListener, PromptKind
from .pending import PendingPrompts
from .remote import RemoteBackend
from .console import ConsoleBackend
from .http import HttpBackend
from .websocket import WebSocketBackend, WebSocketConnection

__all__ = [
    "Backend",
    "ParticipantListener",
    "PromptKind",
    "PendingPrompts",
    "RemoteBackend",
    "ConsoleBackend",
    "HttpBackend",
    "WebSocketBackend",
    "WebSocketConnection",
]
