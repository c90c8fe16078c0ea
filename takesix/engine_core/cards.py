"""
Cards - Card identity, deck creation, shuffling and card transfers.

A card lives in exactly one container at a time (the deck, a hand or a
board row). Containers are plain lists; the last element is the "top".
"""

from __future__ import annotations
from dataclasses import dataclass
import random
import secrets

from ..config import GameConfig, DEFAULT_CONFIG
from .errors import NoCardAvailable


@dataclass(frozen=True)
class Card:
    """
    A card instance.

    Ranks are unique across the deck, so the rank is the identity.
    """
    rank: int
    cows: int

    def __str__(self) -> str:
        return str(self.rank)


Deck = list[Card]


def create_deck(config: GameConfig = DEFAULT_CONFIG) -> Deck:
    """Create the full deck, ordered by rank (1..card_count)."""
    return [
        Card(rank=rank, cows=config.card_cows)
        for rank in range(1, config.card_count + 1)
    ]


def shuffle(deck: Deck, rng: random.Random | None = None) -> Deck:
    """
    Shuffle the deck in place (Fisher-Yates) and return it.

    Walks from the last index down to 1 and swaps index i with a
    uniformly chosen index in [0, i]. Uses the OS entropy source unless
    an explicit generator is given.
    """
    rng = rng or secrets.SystemRandom()
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randrange(i + 1)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def shuffled_deck(
    config: GameConfig = DEFAULT_CONFIG,
    rng: random.Random | None = None,
) -> Deck:
    """Create a fresh deck and shuffle it."""
    return shuffle(create_deck(config), rng)


def take_card(container: list[Card], index: int | None = None) -> Card:
    """
    Remove and return a card from a container.

    Takes the last card when no index is given; otherwise removes the card
    at that index, keeping the order of the others.

    Raises:
        NoCardAvailable: the container is empty or has no card at index
    """
    if index is None:
        if not container:
            raise NoCardAvailable("No card to take: container is empty")
        return container.pop()

    if index < 0 or index >= len(container):
        raise NoCardAvailable(
            f"No card to take at index {index} (container holds {len(container)})"
        )
    return container.pop(index)


def move_card(
    source: list[Card],
    target: list[Card],
    index: int | None = None,
) -> Card:
    """Move one card from source to target (appended at the end)."""
    card = take_card(source, index)
    target.append(card)
    return card


def total_cows(cards: list[Card]) -> int:
    """Sum of the penalty carried by a list of cards."""
    return sum(card.cows for card in cards)
