"""
Snapshots - Read-only projections of the table handed to backends.

Every snapshot is built fresh from tuples of immutable cards, so nothing a
backend does to it can reach the live state.
"""

from __future__ import annotations
from dataclasses import dataclass

from .board import Board, row_cows
from .cards import Card
from .state import Seat


@dataclass(frozen=True)
class SeatSnapshot:
    """A seat as seen by its participant."""
    seat_index: int
    name: str
    participant_id: str | None
    hand: tuple[Card, ...]
    cow_count: int

    @classmethod
    def of(cls, seat: Seat) -> SeatSnapshot:
        return cls(
            seat_index=seat.index,
            name=seat.name,
            participant_id=seat.participant_id,
            hand=tuple(seat.hand),
            cow_count=seat.cow_count,
        )


@dataclass(frozen=True)
class BoardSnapshot:
    """The rows on the table."""
    rows: tuple[tuple[Card, ...], ...]

    @classmethod
    def of(cls, board: Board) -> BoardSnapshot:
        return cls(rows=tuple(tuple(row) for row in board))

    def row_cows(self, row_index: int) -> int:
        return row_cows(list(self.rows[row_index]))


@dataclass(frozen=True)
class PlayerGameState:
    """What a participant is shown after a state change."""
    seat: SeatSnapshot
    board: BoardSnapshot


@dataclass(frozen=True)
class Standing:
    """One line of the final leader board."""
    position: int
    seat_index: int
    name: str
    cow_count: int
    participant_id: str | None = None


def build_standings(seats: list[Seat]) -> list[Standing]:
    """Leader board from seats already sorted best first."""
    return [
        Standing(
            position=position,
            seat_index=seat.index,
            name=seat.name,
            cow_count=seat.cow_count,
            participant_id=seat.participant_id,
        )
        for position, seat in enumerate(seats, start=1)
    ]
