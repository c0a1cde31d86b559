"""
Transitions - Pure state -> state functions.

Each function takes the current state (plus action arguments) and
returns the next state. None of them mutate their input.

Game rules that the presentation layer gates through the queries
(phase, claimable tiles, stealable players) are checked by the
reducer. These functions only guard the structural preconditions
whose violation would corrupt the tile pool or the player list, and
raise InvalidStateTransition when one fails.
"""

from __future__ import annotations

from .state import GameState, Player, Face, Phase, Screen, POINTS, NUM_DICE, initial_state
from .dice import FaceSource
from .queries import available_tiles, selectable_faces, claimable_tiles, dice_left


class InvalidStateTransition(ValueError):
    """Raised when a transition's preconditions do not hold."""


def _check_player_index(state: GameState, index: int) -> None:
    if not 0 <= index < state.num_players:
        raise InvalidStateTransition(
            f"No player at index {index} ({state.num_players} players)"
        )


# =============================================================================
# Setup
# =============================================================================

def add_player(state: GameState) -> GameState:
    return state._copy_with(players=state.players + (Player(),))


def rename_player(state: GameState, name: str, index: int) -> GameState:
    _check_player_index(state, index)
    return state.with_player_at(index, state.players[index].with_name(name))


def remove_player(state: GameState, player: Player) -> GameState:
    """Remove the given player (matched by id)."""
    if state.get_player(player.player_id) is None:
        raise InvalidStateTransition(f"Player {player.player_id} is not in the game")
    players = tuple(p for p in state.players if p.player_id != player.player_id)
    current = state.current_player_idx if state.current_player_idx < len(players) else 0
    return state._copy_with(players=players, current_player_idx=current)


def start_game(state: GameState) -> GameState:
    if not state.players:
        raise InvalidStateTransition("Cannot start a game without players")
    return state._copy_with(
        screen=Screen.GAME,
        phase=Phase.ROLL,
        current_player_idx=0,
        thrown=(),
        chosen=(),
    )


def new_game() -> GameState:
    return initial_state()


# =============================================================================
# Turn flow
# =============================================================================

def set_phase(state: GameState, phase: Phase) -> GameState:
    return state._copy_with(phase=phase)


def check_end_game(state: GameState) -> GameState:
    """Move to the end-game screen once the pool is empty."""
    if not available_tiles(state):
        return state._copy_with(screen=Screen.END_GAME)
    return state


def next_turn(state: GameState) -> GameState:
    if not state.players:
        raise InvalidStateTransition("Cannot advance the turn without players")
    new_state = state._copy_with(
        current_player_idx=(state.current_player_idx + 1) % state.num_players,
        phase=Phase.ROLL,
        thrown=(),
        chosen=(),
    )
    return check_end_game(new_state)


def roll(state: GameState, source: FaceSource) -> GameState:
    """
    Throw every die not yet chosen this turn.

    The turn dies immediately when no thrown face is new.
    """
    thrown = tuple(source.next_face() for _ in range(dice_left(state)))
    new_state = state._copy_with(thrown=thrown)
    if not selectable_faces(new_state):
        return set_phase(new_state, Phase.DEAD)
    return set_phase(new_state, Phase.PICK)


def pick(state: GameState, face: Face) -> GameState | None:
    """
    Bank every thrown die showing `face`.

    Returns None, leaving the state untouched, when the face is not
    selectable.
    """
    if face not in selectable_faces(state):
        return None
    kept = tuple(f for f in state.thrown if f != face)
    picked = tuple(f for f in state.thrown if f == face)
    new_state = state._copy_with(thrown=kept, chosen=state.chosen + picked)
    # Every die kept and no tile can be taken: dead
    if len(new_state.chosen) == NUM_DICE and not claimable_tiles(new_state):
        return set_phase(new_state, Phase.DEAD)
    return set_phase(new_state, Phase.ROLL)


def lose_tile(state: GameState) -> GameState:
    """
    Dead-turn penalty.

    The current player's top tile goes back to the pool and the highest
    tile available before that is removed from the game.
    """
    pool = available_tiles(state)
    index = state.current_player_idx
    _check_player_index(state, index)
    _, player = state.players[index].pop_tile()
    new_state = state.with_player_at(index, player)
    if pool:
        new_state = new_state._copy_with(removed_tiles=state.removed_tiles | {pool[-1]})
    return next_turn(new_state)


def pick_tile(state: GameState, tile: int) -> GameState:
    """Give `tile` to the current player and end the turn."""
    if tile not in POINTS:
        raise InvalidStateTransition(f"{tile} is not a tile")
    if tile not in available_tiles(state):
        raise InvalidStateTransition(f"Tile {tile} is not available")
    index = state.current_player_idx
    _check_player_index(state, index)
    new_state = state.with_player_at(index, state.players[index].push_tile(tile))
    return next_turn(new_state)


def steal_tile(state: GameState, from_player: int) -> GameState:
    """Take the top tile of the player at `from_player` and end the turn."""
    _check_player_index(state, from_player)
    tile, victim = state.players[from_player].pop_tile()
    if tile is None:
        raise InvalidStateTransition(f"Player at index {from_player} has no tiles")
    return pick_tile(state.with_player_at(from_player, victim), tile)
