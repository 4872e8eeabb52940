"""
Zoondo - Two-player card battle engine

An authoritative rules engine for a tactical card game on a 6x6 board.
The engine owns the match state and provides:
- Movement and combat resolution
- An action stack for powers and prompts
- Turn sequencing with paced combat results
- Per-player filtered state (fog of war)
"""

__version__ = "0.1.0"
