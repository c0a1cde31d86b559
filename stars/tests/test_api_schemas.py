"""
Tests for API Pydantic schemas.

Validates that:
- Request/response models serialize correctly
- Error codes are properly structured
- Tile slots are discriminated by kind
- Action requests turn into engine actions
"""

import pytest
from pydantic import BaseModel, ValidationError


class TestPydanticSchemas:
    """Tests for Pydantic schema validation."""

    def test_tile_slot_discriminator(self):
        """A player's top slot is either a tile or explicitly empty."""
        from stars.api.schemas import TileSlot, TileInfo, EmptySlot

        class Holder(BaseModel):
            slot: TileSlot

        assert isinstance(Holder(slot={"kind": "empty"}).slot, EmptySlot)
        slot = Holder(slot={"kind": "tile", "value": 30, "stars": 3}).slot
        assert slot == TileInfo(value=30, stars=3)

        with pytest.raises(ValidationError):
            Holder(slot={"kind": "hole"})

    def test_tile_range(self):
        from stars.api.schemas import TileInfo

        with pytest.raises(ValidationError):
            TileInfo(value=20, stars=1)
        with pytest.raises(ValidationError):
            TileInfo(value=36, stars=5)

    def test_player_info_requires_top_tile(self):
        from stars.api.schemas import PlayerInfo, EmptySlot

        with pytest.raises(ValidationError):
            PlayerInfo(index=0, player_id="p1", display_name="Player 1")

        info = PlayerInfo(
            index=0, player_id="p1", display_name="Player 1", top_tile=EmptySlot()
        )
        data = info.model_dump()
        assert data["top_tile"] == {"kind": "empty"}
        assert data["name"] == ""
        assert data["tiles"] == []

    def test_error_response_schema(self):
        """ErrorResponse carries a machine-readable code."""
        from stars.api.schemas import ErrorResponse, ErrorCode

        response = ErrorResponse(
            error="Face 5 was not thrown",
            error_code=ErrorCode.FACE_NOT_SELECTABLE,
            details={"action_type": "pick"},
        )

        data = response.model_dump(mode="json")
        assert data["error_code"] == "FACE_NOT_SELECTABLE"
        assert data["details"]["action_type"] == "pick"
        assert data["api_version"] == "v1"

    def test_error_codes_match_reducer(self):
        """Every code the reducer can emit has a schema value."""
        from stars.api.schemas import ErrorCode

        for code in (
            "WRONG_SCREEN",
            "ACTION_NOT_ALLOWED",
            "NO_DICE_LEFT",
            "FACE_NOT_SELECTABLE",
            "TILE_NOT_SELECTABLE",
            "STEAL_NOT_ALLOWED",
            "NO_PLAYERS",
            "INVALID_TRANSITION",
            "NO_HANDLER",
        ):
            assert ErrorCode(code).value == code

    def test_create_game_request(self):
        from stars.api.schemas import CreateGameRequest

        request = CreateGameRequest()
        assert request.seed is None
        assert request.player_names is None

        with pytest.raises(ValidationError):
            CreateGameRequest(player_names=[f"P{i}" for i in range(17)])


class TestActionRequest:
    """Tests for ActionRequest.to_action."""

    def test_pick_star(self):
        from stars.api.schemas import ActionRequest
        from stars.engine_core import Action, Face

        for token in ("*", "star", "STAR"):
            request = ActionRequest(action_type="pick", face=token)
            assert request.to_action() == Action.pick(Face.STAR)

    def test_pick_number(self):
        from stars.api.schemas import ActionRequest
        from stars.engine_core import Action, Face

        assert ActionRequest(action_type="pick", face="3").to_action() == Action.pick(Face.THREE)

    def test_bad_face_raises(self):
        from stars.api.schemas import ActionRequest

        with pytest.raises(ValueError):
            ActionRequest(action_type="pick", face="6").to_action()

    def test_tile_and_steal(self):
        from stars.api.schemas import ActionRequest
        from stars.engine_core import Action

        assert ActionRequest(action_type="pick-tile", tile=25).to_action() == Action.pick_tile(25)
        assert (
            ActionRequest(action_type="steal-tile", player_index=1).to_action()
            == Action.steal_tile(1)
        )

    def test_rename(self):
        from stars.api.schemas import ActionRequest
        from stars.engine_core import Action

        request = ActionRequest(action_type="rename-player", player_index=0, name="Ada")
        assert request.to_action() == Action.rename_player(0, "Ada")

    def test_unknown_action_type(self):
        from stars.api.schemas import ActionRequest

        with pytest.raises(ValidationError):
            ActionRequest(action_type="fly")

    def test_game_state_response_defaults(self):
        from stars.api.schemas import GameStateResponse

        response = GameStateResponse(
            session_id="s", version=0, screen="setup", phase="roll-phase", current_player_idx=0
        )
        data = response.model_dump()
        assert data["dice_left"] == 8
        assert data["allowed_actions"] == []
        assert data["can_roll"] is False

    def test_integer_face(self):
        """Numeric faces from JSON clients are accepted."""
        from stars.api.schemas import ActionRequest
        from stars.engine_core import Action, Face

        request = ActionRequest.model_validate({"action_type": "pick", "face": 5})
        assert request.to_action() == Action.pick(Face.FIVE)
