"""
Session Module - Runs matches for the seats at the table.

A session is the in-memory lifetime of the table:
- Seats are bound to participants as they join
- Decisions are requested through the prompt orchestrator
- The round engine plays deals and tricks
- The match loop chains matches while participants want more

Sessions are EPHEMERAL:
- No persistence to database
- Everything is lost when the process stops
"""

from .prompts import PromptOrchestrator
from .seats import SeatManager
from .round_engine import RoundEngine, CardChoice, validate_row_choice
from .match_loop import MatchLoop, MatchResult, LoopState

__all__ = [
    "PromptOrchestrator",
    "SeatManager",
    "RoundEngine",
    "CardChoice",
    "validate_row_choice",
    "MatchLoop",
    "MatchResult",
    "LoopState",
]
