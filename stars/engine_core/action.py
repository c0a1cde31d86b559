"""
Action System - Actions, payloads, and results.

Actions represent:
1. Setup edits (add, rename, remove players; start the game)
2. Turn actions (roll, pick a face, pick or steal a tile, accept a dead turn)
3. System actions (new game)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Face


class ActionType(Enum):
    """Types of actions in the system."""
    # Setup screen
    ADD_PLAYER = "add-player"
    RENAME_PLAYER = "rename-player"
    REMOVE_PLAYER = "remove-player"
    START_GAME = "start-game"

    # Turn actions (gated by phase)
    ROLL = "roll"
    PICK = "pick"
    PICK_TILE = "pick-tile"
    STEAL_TILE = "steal-tile"
    NEXT = "next"  # Accept a dead turn and lose the top tile

    # System actions
    NEW_GAME = "new-game"


SETUP_ACTIONS = frozenset({
    ActionType.ADD_PLAYER,
    ActionType.RENAME_PLAYER,
    ActionType.REMOVE_PLAYER,
    ActionType.START_GAME,
})

TURN_ACTIONS = frozenset({
    ActionType.ROLL,
    ActionType.PICK,
    ActionType.PICK_TILE,
    ActionType.STEAL_TILE,
    ActionType.NEXT,
})


@dataclass(frozen=True)
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    Validation happens in the reducer.
    """
    face: Face | None = None
    tile: int | None = None
    player_index: int | None = None
    player_id: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class Action:
    """
    A complete action to be applied to the game state.

    Build actions with the factory classmethods rather than by hand.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def add_player(cls) -> Action:
        return cls(action_type=ActionType.ADD_PLAYER)

    @classmethod
    def rename_player(cls, index: int, name: str) -> Action:
        return cls(
            action_type=ActionType.RENAME_PLAYER,
            payload=ActionPayload(player_index=index, name=name),
        )

    @classmethod
    def remove_player(cls, player_id: str) -> Action:
        return cls(
            action_type=ActionType.REMOVE_PLAYER,
            payload=ActionPayload(player_id=player_id),
        )

    @classmethod
    def start_game(cls) -> Action:
        return cls(action_type=ActionType.START_GAME)

    @classmethod
    def roll(cls) -> Action:
        return cls(action_type=ActionType.ROLL)

    @classmethod
    def pick(cls, face: Face | str | int) -> Action:
        """Factory for picking every thrown die showing `face`."""
        return cls(
            action_type=ActionType.PICK,
            payload=ActionPayload(face=Face.parse(face)),
        )

    @classmethod
    def pick_tile(cls, tile: int) -> Action:
        return cls(
            action_type=ActionType.PICK_TILE,
            payload=ActionPayload(tile=tile),
        )

    @classmethod
    def steal_tile(cls, from_player: int) -> Action:
        """Factory for stealing the top tile of the player at `from_player`."""
        return cls(
            action_type=ActionType.STEAL_TILE,
            payload=ActionPayload(player_index=from_player),
        )

    @classmethod
    def next(cls) -> Action:
        return cls(action_type=ActionType.NEXT)

    @classmethod
    def new_game(cls) -> Action:
        return cls(action_type=ActionType.NEW_GAME)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Errors (if failed)
    - Human-readable changes (for UI/logging)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
        )
