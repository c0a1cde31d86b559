"""
Queries - Facts derived from a game state.

Every function here is pure: it reads a state (or part of one) and
never returns a modified copy. The presentation layer uses these to
decide what to render and which controls to enable.
"""

from __future__ import annotations
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .state import GameState, Player, Face, Phase, POINTS, TILES, NUM_DICE
from .action import ActionType


# Actions each phase allows
PHASES: dict[Phase, frozenset[ActionType]] = {
    Phase.ROLL: frozenset({ActionType.ROLL, ActionType.PICK_TILE, ActionType.STEAL_TILE}),
    Phase.PICK: frozenset({ActionType.PICK}),
    Phase.DEAD: frozenset({ActionType.NEXT}),
}


@dataclass(frozen=True)
class PlayerScore:
    """Scoreboard line for one player."""
    index: int
    name: str
    tiles: tuple[int, ...]
    score: int


def is_action_allowed(state: GameState, action: ActionType) -> bool:
    """True iff the current phase permits the action."""
    return action in PHASES[state.phase]


def sum_chosen(chosen: Iterable[Face]) -> int:
    """Sum of chosen faces, a star counting as 5."""
    return sum(face.points for face in chosen)


def available_tiles(state: GameState) -> list[int]:
    """Tiles still in the pool, ascending."""
    taken = set(state.removed_tiles)
    for player in state.players:
        taken.update(player.tiles)
    return [tile for tile in TILES if tile not in taken]


def selectable_tiles(state: GameState) -> frozenset[int]:
    """
    Tile values the current player may claim.

    Claiming requires at least one chosen star. With a star, every
    available tile up to the chosen sum qualifies, and so does the sum
    itself even when that exact tile is not in the pool (this is what
    makes a steal possible).
    """
    if Face.STAR not in state.chosen:
        return frozenset()
    total = sum_chosen(state.chosen)
    tiles = {tile for tile in available_tiles(state) if tile <= total}
    tiles.add(total)
    return frozenset(tiles)


def selectable_faces(state: GameState) -> frozenset[Face]:
    """Faces thrown that have not already been chosen this turn."""
    return frozenset(state.thrown) - frozenset(state.chosen)


def score_of(tiles: Iterable[int]) -> int:
    return sum(POINTS[tile] for tile in tiles)


def display_name(player: Player, index: int) -> str:
    """The player's name, or "Player N" when they have none."""
    return player.name if player.name else f"Player {index + 1}"


def player_scores(players: Sequence[Player]) -> list[PlayerScore]:
    return [
        PlayerScore(
            index=i,
            name=display_name(player, i),
            tiles=player.tiles,
            score=score_of(player.tiles),
        )
        for i, player in enumerate(players)
    ]


def winners(players: Sequence[Player]) -> list[PlayerScore]:
    """Everyone sharing the highest score."""
    scores = player_scores(players)
    if not scores:
        return []
    best = max(s.score for s in scores)
    return [s for s in scores if s.score == best]


def dice_left(state: GameState) -> int:
    """Dice the current player can still throw this turn."""
    return NUM_DICE - len(state.chosen)


def can_roll(state: GameState) -> bool:
    return is_action_allowed(state, ActionType.ROLL) and dice_left(state) > 0


def stealable_players(state: GameState) -> list[int]:
    """
    Indices of opponents whose top tile the current player may steal.

    A steal needs a chosen star and a chosen sum exactly equal to the
    opponent's top tile.
    """
    claimable = selectable_tiles(state)
    return [
        i for i, player in enumerate(state.players)
        if i != state.current_player_idx
        and player.top_tile is not None
        and player.top_tile == sum_chosen(state.chosen)
        and player.top_tile in claimable
    ]


def claimable_tiles(state: GameState) -> frozenset[int]:
    """
    Selectable tiles the current player can actually take.

    Either still in the pool or on top of an opponent's stack.
    """
    tops = {
        player.top_tile for i, player in enumerate(state.players)
        if i != state.current_player_idx and player.top_tile is not None
    }
    return selectable_tiles(state) & (frozenset(available_tiles(state)) | tops)
