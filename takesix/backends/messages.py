"""
Wire Messages - Pydantic models exchanged with remote participants.

Outgoing models are built from engine snapshots; incoming models validate
what clients send before anything reaches the game.

Envelope (WebSocket): {"type": "<event>", "payload": {...}}
"""

from typing import Optional
from pydantic import BaseModel, Field, StrictBool, StrictInt

from ..engine_core.snapshot import PlayerGameState, Standing


# =============================================================================
# Outgoing
# =============================================================================

class CardInfo(BaseModel):
    """Card information for display."""
    rank: int
    cows: int

    model_config = {"from_attributes": True}


class RowInfo(BaseModel):
    """One row of the board."""
    row_index: int
    cards: list[CardInfo] = Field(default_factory=list)
    cows: int = Field(0, description="Penalty collected by whoever takes the row")


class SeatInfo(BaseModel):
    """A participant's own seat."""
    seat_index: int
    name: str
    participant_id: Optional[str] = None
    hand: list[CardInfo] = Field(default_factory=list)
    cow_count: int = 0


class PlayerStateMessage(BaseModel):
    """Seat and board as shown to one participant."""
    seat: SeatInfo
    board: list[RowInfo] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: PlayerGameState) -> "PlayerStateMessage":
        seat = state.seat
        return cls(
            seat=SeatInfo(
                seat_index=seat.seat_index,
                name=seat.name,
                participant_id=seat.participant_id,
                hand=[CardInfo.model_validate(card) for card in seat.hand],
                cow_count=seat.cow_count,
            ),
            board=[
                RowInfo(
                    row_index=row_index,
                    cards=[CardInfo.model_validate(card) for card in row],
                    cows=state.board.row_cows(row_index),
                )
                for row_index, row in enumerate(state.board.rows)
            ],
        )


class StandingInfo(BaseModel):
    """One line of the leader board."""
    position: int
    seat_index: int
    name: str
    cow_count: int

    model_config = {"from_attributes": True}


def standings_payload(standings: list[Standing]) -> dict:
    return {
        "standings": [
            StandingInfo.model_validate(standing).model_dump()
            for standing in standings
        ]
    }


# =============================================================================
# Incoming
# =============================================================================

class JoinMessage(BaseModel):
    """A participant takes (or re-takes) a seat."""
    player_id: str = Field(min_length=1)
    player_name: Optional[str] = Field(None, min_length=3)


class ChangeNameMessage(BaseModel):
    player_name: str = Field(min_length=3)


class ChooseCardMessage(BaseModel):
    card_index: StrictInt = Field(description="Index into the current hand")


class ChooseRowMessage(BaseModel):
    row_index: StrictInt = Field(description="Row to take (0-3)")


class PlayAgainMessage(BaseModel):
    play_again: StrictBool
