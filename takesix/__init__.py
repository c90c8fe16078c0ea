"""
TakeSix - Penalty card game server with remote and automatic players.

A "Take 6"-style game for a fixed number of seats. Each seat is played by a
connected participant or, absent one, by an automatic fallback policy.
The package provides:
- Deck, board and seat model
- Round engine (deal, tricks, row placement, scoring)
- Prompt orchestration (remote decisions raced against a timeout)
- Backends: console, HTTP and WebSocket
"""

__version__ = "0.1.0"
