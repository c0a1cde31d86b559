"""
Stars - Dice Game Engine

A deterministic engine for the Stars dice game: roll eight dice, bank
faces, and claim or steal numbered tiles worth star points.
The package provides:
- An immutable game state and pure transitions
- Legal action generation
- In-memory game sessions
- An HTTP API and a terminal game
"""

__version__ = "0.1.0"
