"""
Bots module - Automatic play for unattended seats.

Provides:
- FallbackPolicy: Interface for automatic decisions
- RandomPolicy: Uniform random cards and rows (default)
- FirstChoicePolicy: Deterministic first card / first row
- CheapestRowPolicy: Random cards, takes the cheapest row
"""

from .policy import FallbackPolicy, RandomPolicy, FirstChoicePolicy, CheapestRowPolicy, POLICIES

__all__ = [
    "FallbackPolicy",
    "RandomPolicy",
    "FirstChoicePolicy",
    "CheapestRowPolicy",
    "POLICIES",
]
