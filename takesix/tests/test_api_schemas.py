"""
Tests for API and wire schemas.

Tests:
- Snapshot conversion
- Request validation
- Error response shape
"""

import pytest
from pydantic import ValidationError

from ..api.schemas import (
    CardChoiceRequest,
    ErrorCode,
    ErrorResponse,
    JoinRequest,
    PlayAgainRequest,
    PlayerStateResponse,
    RowChoiceRequest,
)
from ..backends.messages import JoinMessage, PlayerStateMessage, standings_payload
from ..engine_core.snapshot import BoardSnapshot, PlayerGameState, SeatSnapshot, Standing
from .conftest import cards


@pytest.fixture
def player_state() -> PlayerGameState:
    return PlayerGameState(
        seat=SeatSnapshot(
            seat_index=1,
            name="Bob",
            participant_id="bob",
            hand=tuple(cards(12, 77)),
            cow_count=9,
        ),
        board=BoardSnapshot(rows=(tuple(cards(3, 8)), tuple(cards(40)))),
    )


class TestPlayerState:

    def test_from_state(self, player_state):
        message = PlayerStateMessage.from_state(player_state)

        assert message.seat.seat_index == 1
        assert [card.rank for card in message.seat.hand] == [12, 77]
        assert [row.cows for row in message.board] == [6, 3]
        assert [row.row_index for row in message.board] == [0, 1]

    def test_response_carries_api_version(self, player_state):
        data = PlayerStateResponse.from_state(player_state).model_dump()
        assert data["api_version"] == "v1"
        assert data["seat"]["participant_id"] == "bob"

    def test_standings_payload(self):
        payload = standings_payload(
            [Standing(position=1, seat_index=0, name="Alice", cow_count=3, participant_id="alice")]
        )
        assert payload == {
            "standings": [{"position": 1, "seat_index": 0, "name": "Alice", "cow_count": 3}]
        }


class TestRequests:

    def test_join_name_optional(self):
        assert JoinRequest(player_id="alice").player_name is None
        assert JoinMessage(player_id="alice", player_name="Alice").player_name == "Alice"

    @pytest.mark.parametrize(
        "data",
        [
            {"player_id": ""},
            {"player_id": "alice", "player_name": "Al"},
            {},
        ],
    )
    def test_join_rejected(self, data):
        with pytest.raises(ValidationError):
            JoinRequest(**data)

    def test_answers_are_strict(self):
        assert CardChoiceRequest(card_index=3).card_index == 3
        with pytest.raises(ValidationError):
            CardChoiceRequest(card_index="3")
        with pytest.raises(ValidationError):
            RowChoiceRequest(row_index=1.5)
        with pytest.raises(ValidationError):
            PlayAgainRequest(play_again="yes")

    def test_out_of_range_indexes_reach_the_game(self):
        """Range is checked against the live hand, not by the schema."""
        assert CardChoiceRequest(card_index=42).card_index == 42
        assert RowChoiceRequest(row_index=-1).row_index == -1


class TestErrorResponse:

    def test_shape(self):
        data = ErrorResponse(
            error="No free seat for participant e",
            error_code=ErrorCode.SEATS_FULL,
        ).model_dump()

        assert data["error_code"] == "SEATS_FULL"
        assert data["details"] is None
        assert data["api_version"] == "v1"
