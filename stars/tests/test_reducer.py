"""
Tests for the reducer (state transitions).

Tests:
- Action application
- Screen and phase validation
- Move legality (faces, tiles, steals)
- Error handling
"""

import pytest

from ..engine_core.state import GameState, Player, Face, Phase, Screen
from ..engine_core.action import Action, ActionType, ActionPayload
from ..engine_core.dice import ScriptedFaceSource
from ..engine_core.reducer import Reducer, apply_action
from ..engine_core.queries import available_tiles, selectable_tiles
from .conftest import faces


class TestSetupActions:
    """Tests for the setup screen."""

    def test_add_rename_start(self, fresh_state):
        """Players can be edited and the game started."""
        reducer = Reducer()
        result = reducer.apply(fresh_state, Action.add_player())
        assert result.success
        assert result.new_state.num_players == 3

        result = reducer.apply(result.new_state, Action.rename_player(2, "Cy"))
        assert result.success
        assert result.new_state.players[2].name == "Cy"
        assert "Cy" in result.state_changes[0]

        result = reducer.apply(result.new_state, Action.start_game())
        assert result.success
        assert result.new_state.screen == Screen.GAME

    def test_remove_player(self, fresh_state):
        target = fresh_state.players[1]
        result = apply_action(fresh_state, Action.remove_player(target.player_id))
        assert result.success
        assert result.new_state.get_player(target.player_id) is None

    def test_remove_unknown_player_fails(self, fresh_state):
        result = apply_action(fresh_state, Action.remove_player("ghost"))
        assert not result.success
        assert result.error_code == "INVALID_TRANSITION"

    def test_rename_out_of_range_fails(self, fresh_state):
        result = apply_action(fresh_state, Action.rename_player(7, "Nobody"))
        assert not result.success
        assert result.error_code == "INVALID_TRANSITION"

    def test_start_without_players_fails(self):
        result = apply_action(GameState(players=()), Action.start_game())
        assert not result.success
        assert result.error_code == "NO_PLAYERS"

    def test_setup_actions_rejected_during_game(self, two_player_state):
        """Players cannot be edited once the game has started."""
        for action in (Action.add_player(), Action.rename_player(0, "X"), Action.start_game()):
            result = apply_action(two_player_state, action)
            assert not result.success
            assert result.error_code == "WRONG_SCREEN"


class TestPhaseValidation:
    """Tests for phase gating."""

    def test_turn_actions_rejected_during_setup(self, fresh_state):
        result = apply_action(fresh_state, Action.roll())
        assert not result.success
        assert result.error_code == "WRONG_SCREEN"

    def test_roll_rejected_in_pick_phase(self, two_player_state):
        state = two_player_state._copy_with(phase=Phase.PICK, thrown=faces("1 2"))
        result = apply_action(state, Action.roll())
        assert not result.success
        assert result.error_code == "ACTION_NOT_ALLOWED"
        assert "pick-phase" in result.error

    def test_pick_rejected_in_roll_phase(self, two_player_state):
        state = two_player_state._copy_with(thrown=faces("1 2"))
        result = apply_action(state, Action.pick(Face.ONE))
        assert not result.success
        assert result.error_code == "ACTION_NOT_ALLOWED"

    def test_only_next_in_dead_phase(self, two_player_state):
        state = two_player_state._copy_with(phase=Phase.DEAD)
        assert apply_action(state, Action.roll()).error_code == "ACTION_NOT_ALLOWED"
        assert apply_action(state, Action.next()).success

    def test_turn_actions_rejected_after_game_end(self, two_player_state):
        state = two_player_state._copy_with(screen=Screen.END_GAME)
        result = apply_action(state, Action.roll())
        assert result.error_code == "WRONG_SCREEN"

    def test_roll_with_no_dice_left(self, two_player_state):
        state = two_player_state._copy_with(chosen=faces("* * * * 4 4 4 4"))
        result = apply_action(state, Action.roll())
        assert not result.success
        assert result.error_code == "NO_DICE_LEFT"


class TestRollAndPick:
    """Tests for roll and pick through the reducer."""

    def test_roll_uses_face_source(self, two_player_state, script):
        reducer = script("1 2 3 4 5 * * *")
        result = reducer.apply(two_player_state, Action.roll())

        assert result.success
        assert result.new_state.thrown == faces("1 2 3 4 5 * * *")
        assert result.new_state.phase == Phase.PICK
        assert "rolled" in result.state_changes[0]

    def test_dead_roll_is_reported(self, two_player_state, script):
        state = two_player_state._copy_with(chosen=faces("4 4 4 4"))
        result = script("4 4 4 4").apply(state, Action.roll())

        assert result.success
        assert result.new_state.phase == Phase.DEAD
        assert any("died" in change for change in result.state_changes)

    def test_pick_unselectable_face(self, two_player_state):
        """Picking a face not on the table is rejected and nothing changes."""
        state = two_player_state._copy_with(phase=Phase.PICK, thrown=faces("1 2 2"))
        result = apply_action(state, Action.pick(Face.STAR))

        assert not result.success
        assert result.error_code == "FACE_NOT_SELECTABLE"
        assert result.new_state is None

    def test_pick_without_face(self, two_player_state):
        state = two_player_state._copy_with(phase=Phase.PICK, thrown=faces("1 2 2"))
        result = apply_action(state, Action(action_type=ActionType.PICK))
        assert result.error_code == "FACE_NOT_SELECTABLE"

    def test_pick_reports_total(self, two_player_state):
        state = two_player_state._copy_with(phase=Phase.PICK, thrown=faces("* * 2"))
        result = apply_action(state, Action.pick("star"))

        assert result.success
        assert result.new_state.chosen == faces("* *")
        assert "total 10" in result.state_changes[0]


class TestTileActions:
    """Tests for claiming, stealing and losing tiles through the reducer."""

    def test_claim_selectable_tile(self, two_player_state):
        state = two_player_state._copy_with(chosen=faces("* * * 4 4"))
        result = apply_action(state, Action.pick_tile(22))

        assert result.success
        assert result.new_state.players[0].tiles == (22,)
        assert result.new_state.current_player_idx == 1

    def test_claim_above_sum_fails(self, two_player_state):
        state = two_player_state._copy_with(chosen=faces("* * * 4 4"))
        result = apply_action(state, Action.pick_tile(24))
        assert not result.success
        assert result.error_code == "TILE_NOT_SELECTABLE"

    def test_claim_without_star_fails(self, two_player_state):
        state = two_player_state._copy_with(chosen=faces("5 5 5 5 4 4"))
        result = apply_action(state, Action.pick_tile(21))
        assert result.error_code == "TILE_NOT_SELECTABLE"

    def test_claim_owned_tile_fails(self, two_player_state):
        """The exact sum is selectable but an owned tile must be stolen instead."""
        state = two_player_state.with_player_at(1, Player(player_id="p2", tiles=(23,)))
        state = state._copy_with(chosen=faces("* * * 4 4"))
        assert 23 in selectable_tiles(state)

        result = apply_action(state, Action.pick_tile(23))

        assert result.error_code == "TILE_NOT_SELECTABLE"

    def test_steal_exact_match(self, two_player_state):
        state = two_player_state.with_player_at(1, Player(player_id="p2", name="", tiles=(23,)))
        state = state._copy_with(chosen=faces("* * * 4 4"))
        result = apply_action(state, Action.steal_tile(1))

        assert result.success
        assert result.new_state.players[0].tiles == (23,)
        assert result.new_state.players[1].tiles == ()
        assert result.state_changes == ["Ada stole tile 23 from Player 2"]

    def test_steal_without_match_fails(self, two_player_state):
        state = two_player_state.with_player_at(1, Player(player_id="p2", tiles=(24,)))
        state = state._copy_with(chosen=faces("* * * 4 4"))
        result = apply_action(state, Action.steal_tile(1))
        assert not result.success
        assert result.error_code == "STEAL_NOT_ALLOWED"

    def test_steal_from_self_fails(self, two_player_state):
        state = two_player_state.with_player_at(0, Player(player_id="p1", tiles=(23,)))
        state = state._copy_with(chosen=faces("* * * 4 4"))
        result = apply_action(state, Action.steal_tile(0))
        assert result.error_code == "STEAL_NOT_ALLOWED"

    def test_next_loses_tile(self, two_player_state):
        state = two_player_state.with_player_at(0, Player(player_id="p1", name="Ada", tiles=(25,)))
        state = state._copy_with(phase=Phase.DEAD)
        result = apply_action(state, Action.next())

        assert result.success
        assert result.new_state.players[0].tiles == ()
        assert result.new_state.removed_tiles == frozenset({36})
        assert result.state_changes == [
            "Ada returned tile 25",
            "Tile 36 removed from the game",
        ]


class TestSystemActions:
    """Tests for new game and unknown actions."""

    def test_new_game_from_end(self, two_player_state):
        state = two_player_state._copy_with(screen=Screen.END_GAME)
        result = apply_action(state, Action.new_game())

        assert result.success
        assert result.new_state.screen == Screen.SETUP
        assert result.new_state.num_players == 2
        assert len(available_tiles(result.new_state)) == 16

    def test_handler_table_covers_every_action(self):
        reducer = Reducer(face_source=ScriptedFaceSource([]))
        for action_type in ActionType:
            assert reducer._get_handler(action_type) is not None

    def test_payload_defaults(self):
        assert Action.roll().payload == ActionPayload()
