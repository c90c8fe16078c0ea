"""
API Module - Network interface to the table.

Exposes the game over REST and WebSocket:
1. Participants join (or rejoin) a seat
2. They poll or are pushed the questions they are asked
3. They answer before the prompt timeout
4. They read their seat, the board and the final standings

All state is in memory. No user accounts required.
"""

from .schemas import (
    # Requests
    JoinRequest,
    ChangeNameRequest,
    CardChoiceRequest,
    RowChoiceRequest,
    PlayAgainRequest,
    # Responses
    PlayerStateResponse,
    PromptsResponse,
    AnswerResponse,
    SeatListResponse,
    StandingsResponse,
    HealthResponse,
    ErrorResponse,
    ErrorCode,
)
from .service import GameService
from .app import create_app

__all__ = [
    # Requests
    "JoinRequest",
    "ChangeNameRequest",
    "CardChoiceRequest",
    "RowChoiceRequest",
    "PlayAgainRequest",
    # Responses
    "PlayerStateResponse",
    "PromptsResponse",
    "AnswerResponse",
    "SeatListResponse",
    "StandingsResponse",
    "HealthResponse",
    "ErrorResponse",
    "ErrorCode",
    # Service
    "GameService",
    "create_app",
]
