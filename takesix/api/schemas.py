"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between HTTP clients and the game.
Seat, board and standings shapes are shared with the WebSocket backend
and live in backends.messages; they are re-exported here.

Error Codes:
- PARTICIPANT_NOT_FOUND: No seat is bound to the participant id
- SEATS_FULL: Every seat is taken by another participant
- NO_PENDING_PROMPT: The participant was not asked this question
- VALIDATION_ERROR: Request body is malformed
- INTERNAL_ERROR: Unexpected server error
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field, StrictBool, StrictInt

from ..backends.messages import (
    CardInfo,
    RowInfo,
    SeatInfo,
    PlayerStateMessage,
    StandingInfo,
)


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    PARTICIPANT_NOT_FOUND = "PARTICIPANT_NOT_FOUND"
    SEATS_FULL = "SEATS_FULL"
    NO_PENDING_PROMPT = "NO_PENDING_PROMPT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class PromptName(str, Enum):
    """Questions a participant can be asked."""
    CARD_CHOICE = "card-choice"
    ROW_CHOICE = "row-choice"
    PLAY_AGAIN = "play-again"


# =============================================================================
# Request Models
# =============================================================================

class JoinRequest(BaseModel):
    """Take a seat, or get back the seat already held."""
    player_id: str = Field(..., min_length=1, description="Stable participant id")
    player_name: Optional[str] = Field(
        None, min_length=3, description="Display name; keeps the current one if omitted"
    )


class ChangeNameRequest(BaseModel):
    """Rename the seat a participant holds."""
    player_id: str = Field(..., min_length=1)
    player_name: str = Field(..., min_length=3)


class CardChoiceRequest(BaseModel):
    """Answer to a card-choice prompt."""
    card_index: StrictInt = Field(..., description="Index into the current hand")


class RowChoiceRequest(BaseModel):
    """Answer to a row-choice prompt."""
    row_index: StrictInt = Field(..., description="Row to take")


class PlayAgainRequest(BaseModel):
    """Answer to a play-again prompt."""
    play_again: StrictBool


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class PlayerStateResponse(PlayerStateMessage):
    """Seat and board as seen by one participant."""
    api_version: str = "v1"


class PromptsResponse(BaseModel):
    """Questions currently waiting for the participant's answer."""
    participant_id: str
    prompts: list[PromptName] = Field(default_factory=list)
    state: PlayerStateMessage
    api_version: str = "v1"


class AnswerResponse(BaseModel):
    """Acknowledgement of an answer."""
    accepted: bool
    prompt: PromptName


class SeatSummary(BaseModel):
    """Public view of one seat (no hand)."""
    seat_index: int
    name: str
    cow_count: int
    is_bound: bool


class SeatListResponse(BaseModel):
    """Response listing the table's seats."""
    seats: list[SeatSummary]
    match_number: int
    round_number: int


class StandingsResponse(BaseModel):
    """Leader board of the last finished match."""
    standings: list[StandingInfo] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str


__all__ = [
    "ErrorCode",
    "PromptName",
    "JoinRequest",
    "ChangeNameRequest",
    "CardChoiceRequest",
    "RowChoiceRequest",
    "PlayAgainRequest",
    "ErrorResponse",
    "PlayerStateResponse",
    "PromptsResponse",
    "AnswerResponse",
    "SeatSummary",
    "SeatListResponse",
    "StandingsResponse",
    "HealthResponse",
    "CardInfo",
    "RowInfo",
    "SeatInfo",
    "PlayerStateMessage",
    "StandingInfo",
]
