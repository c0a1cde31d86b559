"""
Reducer - Applies actions to game state.

The reducer is the single point of state change for sessions, the API
and the CLI. All of them go through apply_action().

Design principles:
- (state, action) -> ActionResult, never raising for a rejected action
- Validates screen, phase and move legality before applying
- Delegates the actual change to the pure transition functions
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .state import GameState, Screen
from .action import Action, ActionType, ActionResult, SETUP_ACTIONS, TURN_ACTIONS
from .dice import FaceSource, RandomFaceSource
from .queries import (
    is_action_allowed,
    available_tiles,
    selectable_tiles,
    selectable_faces,
    stealable_players,
    dice_left,
    display_name,
    sum_chosen,
)
from . import transitions
from .transitions import InvalidStateTransition


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Holds no game state. The face source is the only thing it keeps,
    so that rolls stay reproducible for a seeded source.
    """
    face_source: FaceSource = field(default_factory=RandomFaceSource)

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            message, code = validation_error
            return ActionResult.failure(message, error_code=code)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        try:
            return handler(state, action)
        except InvalidStateTransition as e:
            return ActionResult.failure(str(e), error_code="INVALID_TRANSITION")

    def _validate_action(self, state: GameState, action: Action) -> tuple[str, str] | None:
        """
        Validate that an action is legal in the current state.

        Returns (message, error code) if invalid, None if valid.
        """
        action_type = action.action_type
        payload = action.payload

        if action_type in SETUP_ACTIONS and state.screen != Screen.SETUP:
            return "Players can only be edited before the game starts", "WRONG_SCREEN"

        if action_type in TURN_ACTIONS:
            if state.screen != Screen.GAME:
                return "No game in progress", "WRONG_SCREEN"
            if not is_action_allowed(state, action_type):
                return (
                    f"Cannot {action_type.value} during {state.phase.value}",
                    "ACTION_NOT_ALLOWED",
                )

        if action_type == ActionType.START_GAME and not state.players:
            return "Add at least one player first", "NO_PLAYERS"

        if action_type == ActionType.ROLL and dice_left(state) <= 0:
            return "No dice left to roll", "NO_DICE_LEFT"

        if action_type == ActionType.PICK:
            if payload.face is None:
                return "Pick which face?", "FACE_NOT_SELECTABLE"
            if payload.face not in selectable_faces(state):
                return f"Face {payload.face.label} cannot be picked", "FACE_NOT_SELECTABLE"

        if action_type == ActionType.PICK_TILE:
            tile = payload.tile
            if tile not in selectable_tiles(state) or tile not in available_tiles(state):
                return f"Tile {tile} cannot be claimed", "TILE_NOT_SELECTABLE"

        if action_type == ActionType.STEAL_TILE:
            if payload.player_index not in stealable_players(state):
                return (
                    f"Cannot steal from player at index {payload.player_index}",
                    "STEAL_NOT_ALLOWED",
                )

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.ADD_PLAYER: self._handle_add_player,
            ActionType.RENAME_PLAYER: self._handle_rename_player,
            ActionType.REMOVE_PLAYER: self._handle_remove_player,
            ActionType.START_GAME: self._handle_start_game,
            ActionType.ROLL: self._handle_roll,
            ActionType.PICK: self._handle_pick,
            ActionType.PICK_TILE: self._handle_pick_tile,
            ActionType.STEAL_TILE: self._handle_steal_tile,
            ActionType.NEXT: self._handle_next,
            ActionType.NEW_GAME: self._handle_new_game,
        }
        return handlers.get(action_type)

    # =========================================================================
    # Setup handlers
    # =========================================================================

    def _handle_add_player(self, state: GameState, action: Action) -> ActionResult:
        new_state = transitions.add_player(state)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Added Player {new_state.num_players}"],
        )

    def _handle_rename_player(self, state: GameState, action: Action) -> ActionResult:
        index = action.payload.player_index
        if index is None:
            return ActionResult.failure("No player index given", error_code="INVALID_TRANSITION")
        name = action.payload.name or ""
        new_state = transitions.rename_player(state, name, index)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Player {index + 1} is now {display_name(new_state.players[index], index)}"],
        )

    def _handle_remove_player(self, state: GameState, action: Action) -> ActionResult:
        player_id = action.payload.player_id
        player = state.get_player(player_id) if player_id else None
        if not player:
            return ActionResult.failure(
                f"Player {player_id} not found", error_code="INVALID_TRANSITION"
            )
        index = state.players.index(player)
        new_state = transitions.remove_player(state, player)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Removed {display_name(player, index)}"],
        )

    def _handle_start_game(self, state: GameState, action: Action) -> ActionResult:
        new_state = transitions.start_game(state)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Game started with {new_state.num_players} players"],
        )

    def _handle_new_game(self, state: GameState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(transitions.new_game(), changes=["New game"])

    # =========================================================================
    # Turn handlers
    # =========================================================================

    def _current_name(self, state: GameState) -> str:
        return display_name(state.current_player, state.current_player_idx)

    def _handle_roll(self, state: GameState, action: Action) -> ActionResult:
        new_state = transitions.roll(state, self.face_source)
        thrown = " ".join(face.label for face in new_state.thrown)
        changes = [f"{self._current_name(state)} rolled {thrown}"]
        if not selectable_faces(new_state):
            changes.append(f"{self._current_name(state)} died")
        return ActionResult.success_with_state(new_state, changes=changes)

    def _handle_pick(self, state: GameState, action: Action) -> ActionResult:
        face = action.payload.face
        new_state = transitions.pick(state, face)
        if new_state is None:
            return ActionResult.failure(
                f"Face {face.label} cannot be picked", error_code="FACE_NOT_SELECTABLE"
            )
        count = len(new_state.chosen) - len(state.chosen)
        return ActionResult.success_with_state(
            new_state,
            changes=[
                f"{self._current_name(state)} kept {count} x {face.label} "
                f"(total {sum_chosen(new_state.chosen)})"
            ],
        )

    def _handle_pick_tile(self, state: GameState, action: Action) -> ActionResult:
        tile = action.payload.tile
        new_state = transitions.pick_tile(state, tile)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{self._current_name(state)} claimed tile {tile}"],
        )

    def _handle_steal_tile(self, state: GameState, action: Action) -> ActionResult:
        index = action.payload.player_index
        victim = state.players[index]
        new_state = transitions.steal_tile(state, index)
        return ActionResult.success_with_state(
            new_state,
            changes=[
                f"{self._current_name(state)} stole tile {victim.top_tile} "
                f"from {display_name(victim, index)}"
            ],
        )

    def _handle_next(self, state: GameState, action: Action) -> ActionResult:
        new_state = transitions.lose_tile(state)
        lost = state.current_player.top_tile
        removed = sorted(new_state.removed_tiles - state.removed_tiles)
        changes = []
        if lost is not None:
            changes.append(f"{self._current_name(state)} returned tile {lost}")
        if removed:
            changes.append(f"Tile {removed[0]} removed from the game")
        return ActionResult.success_with_state(new_state, changes=changes)


def apply_action(state: GameState, action: Action, face_source: FaceSource | None = None) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer (with a fresh random face source unless one is
    given) and applies the action.
    """
    reducer = Reducer(face_source=face_source) if face_source else Reducer()
    return reducer.apply(state, action)
