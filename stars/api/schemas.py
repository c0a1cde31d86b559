"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a presentation layer (browser,
mobile, terminal) and the engine. All responses carry explicit types
for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Game does not exist or has been ended
- STALE_STATE: Request was built on an older version of the state
- INVALID_ACTION: Request could not be turned into an action
- Any reducer code (ACTION_NOT_ALLOWED, FACE_NOT_SELECTABLE, ...)
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field

from ..engine_core.action import Action, ActionPayload, ActionType
from ..engine_core.state import Face


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Machine-readable error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    STALE_STATE = "STALE_STATE"
    INVALID_ACTION = "INVALID_ACTION"
    WRONG_SCREEN = "WRONG_SCREEN"
    ACTION_NOT_ALLOWED = "ACTION_NOT_ALLOWED"
    NO_DICE_LEFT = "NO_DICE_LEFT"
    FACE_NOT_SELECTABLE = "FACE_NOT_SELECTABLE"
    TILE_NOT_SELECTABLE = "TILE_NOT_SELECTABLE"
    STEAL_NOT_ALLOWED = "STEAL_NOT_ALLOWED"
    NO_PLAYERS = "NO_PLAYERS"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    NO_HANDLER = "NO_HANDLER"


# =============================================================================
# Shared Models
# =============================================================================

class TileInfo(BaseModel):
    """A tile and its star value."""
    kind: Literal["tile"] = "tile"
    value: int = Field(..., ge=21, le=36)
    stars: int = Field(..., ge=1, le=4)


class EmptySlot(BaseModel):
    """A player stack with no tile on top."""
    kind: Literal["empty"] = "empty"


TileSlot = Annotated[Union[TileInfo, EmptySlot], Field(discriminator="kind")]


class PlayerInfo(BaseModel):
    """Player information for display."""
    index: int
    player_id: str
    name: str = Field("", description="Name as entered; may be empty")
    display_name: str = Field(..., description="Name, or 'Player N' when empty")
    tiles: list[int] = Field(default_factory=list, description="Most recent first")
    tile_count: int = 0
    score: int = 0
    top_tile: TileSlot
    is_current_turn: bool = False


class ScoreLine(BaseModel):
    """One line of the end-game scoreboard."""
    index: int
    name: str
    tiles: list[int] = Field(default_factory=list)
    score: int = 0
    is_winner: bool = False


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to open a new game."""
    seed: Optional[int] = Field(None, description="Seed for reproducible dice")
    player_names: Optional[list[str]] = Field(
        None, max_length=16, description="Player names; two unnamed players if omitted"
    )


class ActionRequest(BaseModel):
    """
    Request to apply one action.

    Only the fields the action type uses need to be set.
    """
    action_type: ActionType
    face: Optional[Union[int, str]] = Field(None, description="1-5, 'star' or '*' (pick)")
    tile: Optional[int] = Field(None, description="Tile value (pick-tile)")
    player_index: Optional[int] = Field(
        None, description="Target player (rename-player, steal-tile)"
    )
    player_id: Optional[str] = Field(None, description="Player to remove (remove-player)")
    name: Optional[str] = Field(None, description="New name (rename-player)")
    expected_version: Optional[int] = Field(
        None, description="State version the request was built on"
    )

    def to_action(self) -> Action:
        """Build the engine action. Raises ValueError for a bad face."""
        face = Face.parse(self.face) if self.face is not None else None
        return Action(
            action_type=self.action_type,
            payload=ActionPayload(
                face=face,
                tile=self.tile,
                player_index=self.player_index,
                player_id=self.player_id,
                name=self.name,
            ),
        )


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete game state plus everything a view needs to enable controls."""
    session_id: str
    version: int
    screen: str
    phase: str
    current_player_idx: int
    players: list[PlayerInfo] = Field(default_factory=list)

    # Turn state
    thrown: list[str] = Field(default_factory=list)
    chosen: list[str] = Field(default_factory=list)
    chosen_total: int = 0
    dice_left: int = 8

    # Tile pool
    available_tiles: list[TileInfo] = Field(default_factory=list)
    removed_tiles: list[int] = Field(default_factory=list)

    # Derived, for enabling controls
    selectable_faces: list[str] = Field(default_factory=list)
    selectable_tiles: list[int] = Field(default_factory=list)
    claimable_tiles: list[int] = Field(default_factory=list)
    stealable_players: list[int] = Field(default_factory=list)
    allowed_actions: list[str] = Field(default_factory=list)
    can_roll: bool = False

    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Response after an accepted action."""
    success: bool = True
    changes: list[str] = Field(default_factory=list)
    game_state: GameStateResponse
    api_version: str = "v1"


class ScoreboardResponse(BaseModel):
    """Scores for every player."""
    session_id: str
    game_over: bool
    scores: list[ScoreLine] = Field(default_factory=list)
    api_version: str = "v1"


class GameListResponse(BaseModel):
    """Response listing open games."""
    games: list[str]
    count: int


class EndGameResponse(BaseModel):
    """Response after closing a game."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
