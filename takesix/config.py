"""
Game Configuration - Constants for the game variant and their overrides.

The defaults describe the standard table:
- 4 seats, 104 cards, 10 cards per hand
- 4 rows, a row is claimed when a 6th card would land on it
- every card carries 3 cows
- the match ends once a seat reaches 66 cows

A few values can be overridden from the environment, the way the API module
reads its deployment settings.
"""

from __future__ import annotations
from dataclasses import dataclass
import os


@dataclass(frozen=True)
class GameConfig:
    """Immutable set of game constants."""
    player_count: int = 4
    card_count: int = 104
    hand_size: int = 10
    row_count: int = 4
    max_row_size: int = 5
    max_cow_count: int = 66
    card_cows: int = 3

    # Seconds a remote participant has to answer a prompt
    prompt_timeout: float = 30.0

    def __post_init__(self):
        needed = self.row_count + self.player_count * self.hand_size
        if needed > self.card_count:
            raise ValueError(
                f"Deck of {self.card_count} cards cannot deal {needed} cards"
            )
        if self.prompt_timeout <= 0:
            raise ValueError("prompt_timeout must be positive")

    @classmethod
    def from_env(cls) -> GameConfig:
        """
        Build a config from TAKESIX_* environment variables.

        Unset variables keep their defaults.
        """
        defaults = cls()
        return cls(
            player_count=int(os.getenv("TAKESIX_PLAYER_COUNT", defaults.player_count)),
            max_cow_count=int(os.getenv("TAKESIX_MAX_COW_COUNT", defaults.max_cow_count)),
            prompt_timeout=float(os.getenv("TAKESIX_PROMPT_TIMEOUT", defaults.prompt_timeout)),
        )


DEFAULT_CONFIG = GameConfig()
