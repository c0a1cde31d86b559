"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. The terminal UI to show available commands
2. Random play in tests
3. The API, to report which actions are enabled

Design: Generates Action objects, not just action types.
Every generated action is accepted by the Reducer.
"""

from __future__ import annotations

from .state import GameState, Screen, Phase, FACES
from .action import Action
from .queries import (
    available_tiles,
    selectable_tiles,
    selectable_faces,
    stealable_players,
    can_roll,
)


class ActionGenerator:
    """Generates legal actions for the current game state."""

    def generate(self, state: GameState) -> list[Action]:
        """
        Generate all legal actions.

        Returns a list of fully-specified Action objects.
        """
        if state.screen == Screen.END_GAME:
            return [Action.new_game()]

        if state.screen == Screen.SETUP:
            return self._generate_setup_actions(state)

        actions = []
        if state.phase == Phase.ROLL:
            if can_roll(state):
                actions.append(Action.roll())
            actions.extend(self._generate_tile_actions(state))
        elif state.phase == Phase.PICK:
            actions.extend(self._generate_pick_actions(state))
        elif state.phase == Phase.DEAD:
            actions.append(Action.next())

        actions.append(Action.new_game())
        return actions

    def _generate_setup_actions(self, state: GameState) -> list[Action]:
        """
        Generate actions available during setup.

        Renames are open-ended, so none are generated.
        """
        actions = [Action.add_player()]
        actions.extend(Action.remove_player(p.player_id) for p in state.players)
        if state.players:
            actions.append(Action.start_game())
        actions.append(Action.new_game())
        return actions

    def _generate_pick_actions(self, state: GameState) -> list[Action]:
        faces = selectable_faces(state)
        return [Action.pick(face) for face in FACES if face in faces]

    def _generate_tile_actions(self, state: GameState) -> list[Action]:
        claimable = selectable_tiles(state)
        actions = [
            Action.pick_tile(tile)
            for tile in available_tiles(state)
            if tile in claimable
        ]
        actions.extend(Action.steal_tile(i) for i in stealable_players(state))
        return actions


def legal_actions(state: GameState) -> list[Action]:
    """Convenience function to get legal actions."""
    return ActionGenerator().generate(state)
