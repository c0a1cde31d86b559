"""
API Module - HTTP interface to the engine.

Exposes games via a REST API for browser or mobile views.
A view:
1. Opens a game
2. Edits the players and starts the game
3. Sends actions (roll, pick, pick-tile, steal-tile, next)
4. Renders the returned state snapshot

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    ActionRequest,
    # Responses
    GameStateResponse,
    ActionResponse,
    ScoreboardResponse,
    ErrorResponse,
    GameListResponse,
    EndGameResponse,
    HealthResponse,
    # Shared
    PlayerInfo,
    ScoreLine,
    TileInfo,
    EmptySlot,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "ActionRequest",
    # Responses
    "GameStateResponse",
    "ActionResponse",
    "ScoreboardResponse",
    "ErrorResponse",
    "GameListResponse",
    "EndGameResponse",
    "HealthResponse",
    # Shared
    "PlayerInfo",
    "ScoreLine",
    "TileInfo",
    "EmptySlot",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
