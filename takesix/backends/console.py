"""
Console Backend - One participant playing from the terminal.

On start the participant is asked for a name and joins as "cli". Prompts
are numbered menus read from stdin on a worker thread, so the event loop
keeps running (and the timeout keeps ticking) while the player thinks.

A prompt that times out cannot interrupt the blocked input() call; the
next line typed is then read by that stale call and discarded.
"""

from __future__ import annotations
import asyncio
from typing import Any, Callable, Sequence, TYPE_CHECKING

from .base import Backend

if TYPE_CHECKING:
    from ..engine_core.snapshot import SeatSnapshot, BoardSnapshot, PlayerGameState, Standing

MIN_NAME_LENGTH = 3


def draw_board(board: BoardSnapshot) -> str:
    """One line per row: the ranks, then the cows the row carries."""
    return "\n".join(
        f"Row {index + 1}: {' '.join(str(card.rank) for card in row)}"
        f"  ({board.row_cows(index)} cows)"
        for index, row in enumerate(board.rows)
    )


class ConsoleBackend(Backend):
    """Interactive text backend."""

    name = "console"

    def __init__(
        self,
        participant_id: str = "cli",
        input_func: Callable[[str], str] = input,
        output: Callable[[str], Any] = print,
    ):
        super().__init__()
        self.participant_id = participant_id
        self._input = input_func
        self._output = output
        self._join_task: asyncio.Task | None = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self):
        self._join_task = asyncio.create_task(self.ask_name_and_join())

    async def close(self):
        if self._join_task is not None and not self._join_task.done():
            self._join_task.cancel()

    async def ask_name_and_join(self):
        name = await self.read_name()
        self.emit_participant_joined(self.participant_id)
        self.emit_participant_renamed(self.participant_id, name)

    async def read_name(self) -> str:
        while True:
            name = (await self._read("Enter your name: ")).strip()
            if len(name) >= MIN_NAME_LENGTH:
                return name
            self._output(f"Name must be at least {MIN_NAME_LENGTH} characters long")

    # =========================================================================
    # Prompts
    # =========================================================================

    async def request_card_choice(self, player: SeatSnapshot, board: BoardSnapshot) -> int:
        choices = sorted(
            (
                (f"Card {card.rank} Cows: {card.cows}", hand_index, card.rank)
                for hand_index, card in enumerate(player.hand)
            ),
            key=lambda choice: choice[2],
        )
        return await self.select(
            f"{draw_board(board)}\n{player.name}, choose a card:",
            [(label, hand_index) for label, hand_index, _ in choices],
        )

    async def request_row_choice(self, player: SeatSnapshot, board: BoardSnapshot) -> int:
        return await self.select(
            f"{draw_board(board)}\n{player.name}, choose a row to take:",
            [(f"Row {index + 1}", index) for index in range(len(board.rows))],
        )

    async def request_play_again(self, player: SeatSnapshot) -> bool:
        return await self.select(
            "Do you want to play again?",
            [("Yes", True), ("No", False)],
        )

    async def select(self, message: str, choices: Sequence[tuple[str, Any]]) -> Any:
        """Numbered menu; re-asks until a listed number is typed."""
        self._output(message)
        for number, (label, _) in enumerate(choices, start=1):
            self._output(f"  {number}) {label}")

        while True:
            answer = (await self._read("> ")).strip()
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return choices[int(answer) - 1][1]
            self._output(f"Type a number between 1 and {len(choices)}")

    # =========================================================================
    # Notifications
    # =========================================================================

    async def notify_seat_state_changed(self, state: PlayerGameState):
        self._output(f"{state.seat.name}: {state.seat.cow_count} cows")

    async def notify_match_ended(self, standings: list[Standing]):
        self._output("The leader board is:")
        for standing in standings:
            self._output(f"{standing.position}. {standing.name}: {standing.cow_count} cows")

    async def _read(self, prompt: str) -> str:
        return await asyncio.to_thread(self._input, prompt)
