"""
Game State - The immutable value the engine operates on.

Design principles:
- Immutable: every transition returns a new state
- Serializable: plain enums, ints and tuples only
- Self-contained: nothing outside the state is needed to answer queries
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
import uuid


# Star value of every tile in the pool
POINTS: dict[int, int] = {
    21: 1, 22: 1, 23: 1, 24: 1,
    25: 2, 26: 2, 27: 2, 28: 2,
    29: 3, 30: 3, 31: 3, 32: 3,
    33: 4, 34: 4, 35: 4, 36: 4,
}

TILES: tuple[int, ...] = tuple(sorted(POINTS))
MIN_TILE = TILES[0]
MAX_TILE = TILES[-1]

NUM_DICE = 8


class Face(Enum):
    """Die faces. A star counts as 5 when summing."""
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    STAR = "star"

    @property
    def points(self) -> int:
        return 5 if self is Face.STAR else self.value

    @property
    def label(self) -> str:
        return "*" if self is Face.STAR else str(self.value)

    @classmethod
    def parse(cls, token: str | int | Face) -> Face:
        """
        Parse user input into a face.

        Accepts a Face, an int 1-5, or the strings "1"-"5", "star" and "*".
        """
        if isinstance(token, Face):
            return token
        text = str(token).strip().lower()
        if text in {"*", "star"}:
            return cls.STAR
        try:
            return cls(int(text))
        except ValueError:
            raise ValueError(f"Not a die face: {token!r}") from None


# Order faces are drawn from and displayed in
FACES: tuple[Face, ...] = tuple(Face)


class Phase(Enum):
    """Turn phases. Each phase restricts which actions are legal."""
    ROLL = "roll-phase"
    PICK = "pick-phase"
    DEAD = "dead-phase"


class Screen(Enum):
    """Top-level screens of a game."""
    SETUP = "setup"
    GAME = "game"
    END_GAME = "end-game"


def new_player_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Player:
    """
    A player and their tile stack.

    `tiles` is ordered most recently acquired first; only the head
    of the stack can be stolen or lost.
    """
    player_id: str = field(default_factory=new_player_id)
    name: str = ""
    tiles: tuple[int, ...] = ()

    @property
    def top_tile(self) -> int | None:
        """The tile on top of the stack, if any."""
        return self.tiles[0] if self.tiles else None

    def with_name(self, name: str) -> Player:
        return replace(self, name=name)

    def push_tile(self, tile: int) -> Player:
        """Return new player with tile on top of the stack."""
        return replace(self, tiles=(tile,) + self.tiles)

    def pop_tile(self) -> tuple[int | None, Player]:
        """Return (removed top tile, new player)."""
        if not self.tiles:
            return None, self
        return self.tiles[0], replace(self, tiles=self.tiles[1:])


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    All state changes go through the transition functions
    (directly or via the reducer).
    """
    players: tuple[Player, ...] = field(default_factory=lambda: (Player(), Player()))
    phase: Phase = Phase.ROLL
    current_player_idx: int = 0
    screen: Screen = Screen.SETUP

    # Turn state
    thrown: tuple[Face, ...] = ()
    chosen: tuple[Face, ...] = ()

    # Tiles permanently out of the game
    removed_tiles: frozenset[int] = frozenset()

    @property
    def current_player(self) -> Player:
        """Get the current player."""
        return self.players[self.current_player_idx]

    @property
    def num_players(self) -> int:
        return len(self.players)

    def get_player(self, player_id: str) -> Player | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def with_player_at(self, index: int, player: Player) -> GameState:
        """Return new state with the player at index replaced."""
        new_players = list(self.players)
        new_players[index] = player
        return self._copy_with(players=tuple(new_players))

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)


def initial_state() -> GameState:
    """Fresh game: two unnamed players on the setup screen."""
    return GameState()
