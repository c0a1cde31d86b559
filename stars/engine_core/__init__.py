"""
Engine Core - Deterministic game state management for Stars.

The engine is the runtime that:
1. Holds the immutable GameState
2. Answers queries about it (tiles, faces, scores)
3. Generates legal actions
4. Applies actions via the reducer
"""

from .state import GameState, Player, Face, Phase, Screen, POINTS, TILES, NUM_DICE, initial_state
from .action import Action, ActionType, ActionPayload, ActionResult
from .dice import FaceSource, RandomFaceSource, ScriptedFaceSource
from .queries import (
    PHASES,
    PlayerScore,
    is_action_allowed,
    sum_chosen,
    available_tiles,
    selectable_tiles,
    selectable_faces,
    score_of,
    player_scores,
    display_name,
    stealable_players,
    winners,
    claimable_tiles,
)
from .transitions import InvalidStateTransition
from .reducer import Reducer, apply_action
from .action_generator import ActionGenerator, legal_actions

__all__ = [
    "GameState",
    "Player",
    "Face",
    "Phase",
    "Screen",
    "POINTS",
    "TILES",
    "NUM_DICE",
    "initial_state",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "FaceSource",
    "RandomFaceSource",
    "ScriptedFaceSource",
    "PHASES",
    "PlayerScore",
    "is_action_allowed",
    "sum_chosen",
    "available_tiles",
    "selectable_tiles",
    "selectable_faces",
    "score_of",
    "player_scores",
    "display_name",
    "stealable_players",
    "winners",
    "claimable_tiles",
    "InvalidStateTransition",
    "Reducer",
    "apply_action",
    "ActionGenerator",
    "legal_actions",
]
