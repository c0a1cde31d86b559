"""
Pytest fixtures for Stars tests.
"""

import pytest

from ..engine_core.state import GameState, Player, Face, Phase, Screen, initial_state
from ..engine_core.dice import ScriptedFaceSource
from ..engine_core.reducer import Reducer


def faces(text: str) -> tuple[Face, ...]:
    """Shorthand for a run of faces: faces("* * 4 1")."""
    return tuple(Face.parse(token) for token in text.split())


@pytest.fixture
def fresh_state() -> GameState:
    """The state a new game starts in."""
    return initial_state()


@pytest.fixture
def two_player_state() -> GameState:
    """A started 2-player game, first player to roll."""
    return GameState(
        players=(
            Player(player_id="p1", name="Ada"),
            Player(player_id="p2", name=""),
        ),
        screen=Screen.GAME,
        phase=Phase.ROLL,
    )


@pytest.fixture
def three_player_state(two_player_state: GameState) -> GameState:
    """A started 3-player game, first player to roll."""
    return two_player_state._copy_with(
        players=two_player_state.players + (Player(player_id="p3", name="Cy"),)
    )


@pytest.fixture
def script():
    """Factory for a reducer whose dice follow a fixed script."""
    def make(*throws: str) -> Reducer:
        source = ScriptedFaceSource(face for throw in throws for face in faces(throw))
        return Reducer(face_source=source)
    return make
