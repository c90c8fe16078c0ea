"""
Engine Errors - Exception taxonomy.

Only NoCardAvailable is fatal: it means an internal invariant was broken.
Every decision failure is recovered by the prompt orchestrator, and lookup
failures are surfaced to the caller (the API turns them into error responses).
"""


class TakeSixError(Exception):
    """Base class for all game errors."""


class NoCardAvailable(TakeSixError):
    """Raised when taking a card from an empty container or a missing index."""


class InvalidChoice(TakeSixError):
    """Raised when a decision value is out of range for the current state."""


class ParticipantTimeout(TakeSixError):
    """Raised when a participant did not answer within the allotted window."""

    def __init__(self, participant_id: str, timeout: float):
        self.participant_id = participant_id
        self.timeout = timeout
        super().__init__(
            f"Participant {participant_id} did not answer within {timeout:g}s"
        )


class ParticipantDisconnected(TakeSixError):
    """Raised by a backend when it lost the connection to a participant."""

    def __init__(self, participant_id: str):
        self.participant_id = participant_id
        super().__init__(f"Participant {participant_id} disconnected")


class UnknownParticipant(TakeSixError):
    """Raised when no seat is bound to the given participant id."""

    def __init__(self, participant_id: str):
        self.participant_id = participant_id
        super().__init__(f"Participant {participant_id} not found")


class SeatsFull(TakeSixError):
    """Raised when a participant joins while every seat is taken."""

    def __init__(self, participant_id: str):
        self.participant_id = participant_id
        super().__init__(f"No free seat for participant {participant_id}")


class NoPendingPrompt(TakeSixError):
    """Raised when answering a prompt that is not outstanding."""

    def __init__(self, participant_id: str, kind: str):
        self.participant_id = participant_id
        self.kind = kind
        super().__init__(f"No pending {kind} prompt for participant {participant_id}")
