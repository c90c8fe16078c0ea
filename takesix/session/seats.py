"""
Seat Manager - Binds participants to seats.

BINDING RULES:
- A seat is bound to at most one participant; unbound seats autoplay
- Joining is idempotent: the same participant id always gets the same seat
- A participant that was demoted (timeout, disconnect) re-attaches to the
  seat it had, with its score and hand intact
- A join without a name keeps the seat's current name

Seats are allocated once; they survive from match to match.
"""

from __future__ import annotations
import asyncio
import logging
from typing import TYPE_CHECKING

from ..backends.base import ParticipantListener
from ..engine_core.errors import SeatsFull, UnknownParticipant
from ..engine_core.snapshot import BoardSnapshot, PlayerGameState, SeatSnapshot
from ..engine_core.state import MatchState, Seat

if TYPE_CHECKING:
    from ..backends.base import Backend

log = logging.getLogger(__name__)


class SeatManager(ParticipantListener):
    """
    Tracks which participant controls which seat.

    Receives join/rename events from every backend.
    """

    def __init__(self, state: MatchState):
        self.state = state
        self._joined = asyncio.Event()

    @property
    def seats(self) -> list[Seat]:
        return self.state.seats

    # =========================================================================
    # Listener events
    # =========================================================================

    def participant_joined(
        self,
        backend: Backend,
        participant_id: str,
        name: str | None = None,
    ) -> Seat:
        """
        Bind a participant to a seat.

        Raises:
            SeatsFull: every seat is bound to another participant
        """
        seat = self._seat_for_join(participant_id)
        if seat is None:
            raise SeatsFull(participant_id)

        seat.bind(participant_id, backend)
        if name:
            seat.name = name

        log.info(
            "Participant %s joined via %s as %s (seat %d)",
            participant_id, backend.name, seat.name, seat.index,
        )
        self._joined.set()
        return seat

    def participant_renamed(self, participant_id: str, name: str) -> Seat:
        seat = self.get_seat(participant_id)
        log.info("%s renamed to %s", seat.name, name)
        seat.name = name
        return seat

    def player_game_state(self, participant_id: str) -> PlayerGameState:
        """
        Snapshot for one participant.

        Raises:
            UnknownParticipant: no seat is bound to the participant
        """
        seat = self.get_seat(participant_id)
        return PlayerGameState(
            seat=SeatSnapshot.of(seat),
            board=BoardSnapshot.of(self.state.board),
        )

    # =========================================================================
    # Lookups
    # =========================================================================

    def find_seat(self, participant_id: str) -> Seat | None:
        """Seat currently bound to the participant, if any."""
        for seat in self.seats:
            if seat.participant_id == participant_id:
                return seat
        return None

    def get_seat(self, participant_id: str) -> Seat:
        seat = self.find_seat(participant_id)
        if seat is None:
            raise UnknownParticipant(participant_id)
        return seat

    def any_bound(self) -> bool:
        return any(seat.is_bound for seat in self.seats)

    def _seat_for_join(self, participant_id: str) -> Seat | None:
        seat = self.find_seat(participant_id)
        if seat is not None:
            return seat

        free = [seat for seat in self.seats if not seat.is_bound]
        for seat in free:
            if seat.last_participant_id == participant_id:
                return seat
        for seat in free:
            if seat.last_participant_id is None:
                return seat
        return free[0] if free else None

    # =========================================================================
    # Seat lifecycle
    # =========================================================================

    def release(self, seat: Seat):
        """Hand a seat back to automatic play."""
        if seat.is_bound:
            log.info("%s (%s) left the table", seat.name, seat.participant_id)
        seat.unbind()

    def reset_seats(self):
        """Zero every score and empty every hand."""
        for seat in self.seats:
            seat.reset()

    async def wait_for_participant(self):
        """Suspend until at least one seat is bound."""
        while not self.any_bound():
            self._joined.clear()
            await self._joined.wait()
