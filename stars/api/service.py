"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine actions
2. Manages sessions
3. Formats state snapshots for views

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateGameRequest,
    ActionRequest,
    # Responses
    GameStateResponse,
    ActionResponse,
    ScoreboardResponse,
    ErrorResponse,
    # Shared
    PlayerInfo,
    ScoreLine,
    TileInfo,
    EmptySlot,
    ErrorCode,
)
from ..session import SessionManager, Session
from ..engine_core.state import Screen, POINTS, FACES
from ..engine_core.action import ActionType
from ..engine_core.queries import (
    available_tiles,
    selectable_tiles,
    selectable_faces,
    claimable_tiles,
    stealable_players,
    player_scores,
    winners,
    sum_chosen,
    dice_left,
    can_roll,
)
from ..engine_core.action_generator import legal_actions

logger = logging.getLogger(__name__)


def tile_info(tile: int) -> TileInfo:
    return TileInfo(value=tile, stars=POINTS[tile])


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Open a game
        state = service.create_game(CreateGameRequest(seed=7))

        # Play
        response = service.apply_action(state.session_id, ActionRequest(action_type="roll"))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_game(self, request: CreateGameRequest) -> GameStateResponse:
        """Open a new game on the setup screen."""
        session = self.session_manager.create_session(
            seed=request.seed,
            player_names=request.player_names,
        )
        return self.build_state_response(session)

    def get_game(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self.build_state_response(session)

    def apply_action(
        self, session_id: str, request: ActionRequest
    ) -> ActionResponse | ErrorResponse:
        """
        Apply one action to a game.

        Rejected actions come back as ErrorResponse with the reducer's
        error code; the game state is untouched.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        try:
            action = request.to_action()
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_ACTION)

        result = self.session_manager.dispatch(
            session_id, action, expected_version=request.expected_version
        )
        if not result.success:
            return ErrorResponse(
                error=result.error or "Action rejected",
                error_code=self._error_code(result.error_code),
                details={"action_type": request.action_type.value, "version": session.version},
            )

        return ActionResponse(
            changes=result.state_changes,
            game_state=self.build_state_response(session),
        )

    def get_scores(self, session_id: str) -> ScoreboardResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        players = session.state.players
        best = {s.index for s in winners(players)}
        return ScoreboardResponse(
            session_id=session_id,
            game_over=session.state.screen == Screen.END_GAME,
            scores=[
                ScoreLine(
                    index=s.index,
                    name=s.name,
                    tiles=list(s.tiles),
                    score=s.score,
                    is_winner=s.index in best,
                )
                for s in player_scores(players)
            ],
        )

    def end_game(self, session_id: str) -> bool:
        return self.session_manager.end_session(session_id)

    def list_games(self) -> list[str]:
        return self.session_manager.list_sessions()

    def build_state_response(self, session: Session) -> GameStateResponse:
        """Snapshot of a session's state with every derived view fact."""
        state = session.state
        scores = player_scores(state.players)
        faces = selectable_faces(state)

        allowed = []
        for action in legal_actions(state):
            if action.action_type.value not in allowed:
                allowed.append(action.action_type.value)
        if state.screen == Screen.SETUP and state.players:
            allowed.append(ActionType.RENAME_PLAYER.value)

        return GameStateResponse(
            session_id=session.session_id,
            version=session.version,
            screen=state.screen.value,
            phase=state.phase.value,
            current_player_idx=state.current_player_idx,
            players=[
                PlayerInfo(
                    index=i,
                    player_id=player.player_id,
                    name=player.name,
                    display_name=scores[i].name,
                    tiles=list(player.tiles),
                    tile_count=len(player.tiles),
                    score=scores[i].score,
                    top_tile=(
                        tile_info(player.top_tile)
                        if player.top_tile is not None else EmptySlot()
                    ),
                    is_current_turn=(
                        state.screen == Screen.GAME and i == state.current_player_idx
                    ),
                )
                for i, player in enumerate(state.players)
            ],
            thrown=[face.label for face in state.thrown],
            chosen=[face.label for face in state.chosen],
            chosen_total=sum_chosen(state.chosen),
            dice_left=dice_left(state),
            available_tiles=[tile_info(t) for t in available_tiles(state)],
            removed_tiles=sorted(state.removed_tiles),
            selectable_faces=[face.label for face in FACES if face in faces],
            selectable_tiles=sorted(selectable_tiles(state)),
            claimable_tiles=sorted(claimable_tiles(state)),
            stealable_players=stealable_players(state),
            allowed_actions=allowed,
            can_roll=state.screen == Screen.GAME and can_roll(state),
        )

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Game {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _error_code(self, code: str | None) -> ErrorCode:
        try:
            return ErrorCode(code)
        except ValueError:
            logger.warning("Unknown error code from engine: %s", code)
            return ErrorCode.INVALID_ACTION
