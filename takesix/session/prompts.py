"""
Prompt Orchestrator - Gets a decision for a seat without stalling the match.

For a bound seat the request to the backend races a per-participant timer:
1. Unbound seat: the fallback answers immediately
2. Response first: validated; an invalid answer uses the fallback once,
   the seat stays bound
3. Timer first: the participant is considered gone, the seat is unbound
   and the fallback answers

When the response and the timer settle in the same loop iteration, the
response wins.

The orchestrator holds no game rules: validation and fallback are passed
in by the caller, so the same protocol serves card, row and rematch prompts.
"""

from __future__ import annotations
import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Union, TYPE_CHECKING

from ..backends.base import PromptKind
from ..engine_core.errors import InvalidChoice, ParticipantDisconnected, ParticipantTimeout
from ..engine_core.snapshot import SeatSnapshot

if TYPE_CHECKING:
    from ..engine_core.state import Seat, SeatBinding

log = logging.getLogger(__name__)

Validator = Callable[[Any], None]
Fallback = Callable[[], Union[Any, Awaitable[Any]]]


async def _settle(fallback: Fallback) -> Any:
    """Call a fallback that may be sync or async."""
    result = fallback()
    if inspect.isawaitable(result):
        result = await result
    return result


class PromptOrchestrator:
    """
    Races backend requests against timeouts.

    Usage:
        orchestrator = PromptOrchestrator(timeout=30.0)

        hand_index = await orchestrator.prompt(
            seat,
            PromptKind.CARD_CHOICE,
            board_snapshot,
            validate=lambda i: validate_card_choice(seat, i),
            fallback=lambda: policy.choose_card(...),
        )
    """

    def __init__(self, timeout: float):
        self.timeout = timeout

        # One timer per participant, one request per (participant, kind)
        self._timers: dict[str, asyncio.Task] = {}
        self._requests: dict[tuple[str, PromptKind], asyncio.Task] = {}

    async def prompt(
        self,
        seat: Seat,
        kind: PromptKind,
        payload: Any,
        validate: Validator | None,
        fallback: Fallback,
    ) -> Any:
        """
        Obtain a decision for the seat.

        Args:
            seat: Seat being asked
            kind: Which decision
            payload: Board snapshot shown with the prompt (None for rematch)
            validate: Raises InvalidChoice if the answer is unusable
            fallback: Produces the automatic answer

        Returns:
            The backend's answer if it came in time and validated,
            the fallback's answer otherwise
        """
        binding = seat.binding
        if binding is None:
            return await _settle(fallback)

        participant_id = binding.participant_id
        key = (participant_id, kind)
        self._cancel_timer(participant_id)
        self._cancel_request(key)

        request = asyncio.ensure_future(
            binding.backend.request(kind, SeatSnapshot.of(seat), payload)
        )
        timer = asyncio.ensure_future(asyncio.sleep(self.timeout))
        self._requests[key] = request
        self._timers[participant_id] = timer

        try:
            done, _ = await asyncio.wait(
                {request, timer}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            request.cancel()
            timer.cancel()
            raise
        finally:
            if self._requests.get(key) is request:
                del self._requests[key]
            if self._timers.get(participant_id) is timer:
                del self._timers[participant_id]

        if request in done:
            timer.cancel()
            return await self._accept(seat, binding, kind, request, validate, fallback)

        request.cancel()
        if timer.cancelled():
            # Superseded by a newer prompt or cancel_all; the participant did not time out
            log.info("%s prompt for %s was superseded, using fallback", kind.value, participant_id)
            return await _settle(fallback)

        self._demote(seat, binding, ParticipantTimeout(participant_id, self.timeout))
        return await _settle(fallback)

    async def _accept(
        self,
        seat: Seat,
        binding: SeatBinding,
        kind: PromptKind,
        request: asyncio.Task,
        validate: Validator | None,
        fallback: Fallback,
    ) -> Any:
        """Handle a request that settled before the timer."""
        if request.cancelled():
            log.warning(
                "%s prompt for %s was cancelled, using fallback",
                kind.value, binding.participant_id,
            )
            return await _settle(fallback)

        try:
            response = request.result()
        except ParticipantDisconnected as e:
            self._demote(seat, binding, e)
            return await _settle(fallback)
        except Exception:
            log.exception(
                "Backend %s failed on %s prompt for %s, using fallback",
                binding.backend.name, kind.value, binding.participant_id,
            )
            return await _settle(fallback)

        if validate is not None:
            try:
                validate(response)
            except InvalidChoice as e:
                log.warning(
                    "Invalid %s answer from %s: %s; using fallback",
                    kind.value, binding.participant_id, e,
                )
                return await _settle(fallback)

        return response

    def _demote(self, seat: Seat, binding: SeatBinding, reason: Exception):
        """Unbind the seat, unless someone else re-attached meanwhile."""
        if seat.binding is binding:
            seat.unbind()
            log.warning("%s: %s is now played automatically", reason, seat.name)

    def _cancel_timer(self, participant_id: str):
        timer = self._timers.pop(participant_id, None)
        if timer is not None:
            timer.cancel()

    def _cancel_request(self, key: tuple[str, PromptKind]):
        request = self._requests.pop(key, None)
        if request is not None:
            request.cancel()

    def cancel_all(self):
        """Cancel every outstanding timer and request."""
        for task in [*self._timers.values(), *self._requests.values()]:
            task.cancel()
        self._timers.clear()
        self._requests.clear()

    @property
    def pending_count(self) -> int:
        """Number of requests currently in flight."""
        return len(self._requests)
