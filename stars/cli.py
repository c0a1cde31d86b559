"""
Stars CLI - Command-line interface for the engine.

Usage:
    stars play [--seed N] [--player NAME ...]   Hot-seat game in the terminal
    stars rules                                 Print the rules
    stars serve [--host H] [--port P]           Run the HTTP API
"""

import argparse
import logging
import os
import sys

from .engine_core import (
    Action,
    ActionResult,
    GameState,
    Face,
    Phase,
    Player,
    Screen,
    POINTS,
    Reducer,
    RandomFaceSource,
    available_tiles,
    claimable_tiles,
    display_name,
    initial_state,
    player_scores,
    stealable_players,
    sum_chosen,
    winners,
)
from .engine_core.queries import can_roll

STARS_LOG_LEVEL = os.getenv("STARS_LOG_LEVEL", "WARNING")

logger = logging.getLogger(__name__)

RULES = """\
Stars

- The goal of the game is to own as many tiles with stars as possible.
- There are 16 tiles numbered 21 to 36, each worth between 1 and 4 stars.
- There are also 8 dice, numbered 1, 2, 3, 4, 5 and *. A * is worth 5 points.
- You start your turn by rolling all 8 dice. Choose one of the thrown faces;
  you keep all the dice showing that face.
- Then roll again with the remaining dice, or pick a tile if your total is
  high enough and you kept at least one *.
- When rolling again, you cannot pick a face you already chose this turn.
- You can also steal the top tile of another player if your total is exactly
  that tile and you kept at least one *.
- If a throw leaves nothing to pick, or you run out of dice with nothing to
  claim, you die: your top tile goes back to the table and the highest tile
  on the table is removed from the game.
- The game ends when no tiles are left on the table.
- The player with the most stars wins.
"""

SETUP_HELP = "Commands: add | rename N NAME | remove N | done | quit"
GAME_HELP = "Commands: roll | pick FACE | tile T | steal N | next | new | quit"
END_HELP = "Commands: new | quit"


# =============================================================================
# Rendering
# =============================================================================

def render_tile(tile: int | None) -> str:
    """A tile as "[27 **]", or an empty slot."""
    if tile is None:
        return "[       ]"
    return f"[{tile} {'*' * POINTS[tile]:<4}]"


def render_faces(faces) -> str:
    return " ".join(face.label for face in faces) if faces else "-"


def render_setup(state: GameState) -> str:
    lines = ["Players"]
    for i, player in enumerate(state.players):
        lines.append(f"  {i + 1}. {display_name(player, i)}")
    if not state.players:
        lines.append("  (none)")
    return "\n".join(lines)


def render_game(state: GameState) -> str:
    claimable = claimable_tiles(state)
    lines = []
    for i, player in enumerate(state.players):
        marker = ">" if i == state.current_player_idx else " "
        count = len(player.tiles)
        lines.append(
            f"{marker} {i + 1}. {display_name(player, i):<16} "
            f"{render_tile(player.top_tile)} {count} {'tile' if count == 1 else 'tiles'}"
        )
    lines.append("")
    lines.append("Table: " + " ".join(
        render_tile(t) + ("<" if t in claimable else "")
        for t in available_tiles(state)
    ))
    lines.append(f"Thrown: {render_faces(state.thrown)}")
    if state.chosen:
        lines.append(f"Chosen: {render_faces(state.chosen)}  Total: {sum_chosen(state.chosen)}")
    if state.phase == Phase.DEAD:
        lines.append("You died. Type 'next' to pass the dice.")
    else:
        lines.append(f"{display_name(state.current_player, state.current_player_idx)} ({state.phase.value})")
    return "\n".join(lines)


def render_end_game(state: GameState) -> str:
    best = {s.index for s in winners(state.players)}
    lines = ["Scoring"]
    for score in player_scores(state.players):
        crown = "*" if score.index in best else " "
        tiles = " ".join(render_tile(t) for t in score.tiles)
        lines.append(f"{crown} {score.name:<16} {score.score} points  {tiles}")
    return "\n".join(lines)


# =============================================================================
# Terminal game
# =============================================================================

class TerminalGame:
    """
    Hot-seat game driven by text commands.

    Input and output are injectable so a game can be scripted.
    """

    def __init__(self, reducer: Reducer, state: GameState | None = None,
                 input_fn=input, output_fn=print):
        self.reducer = reducer
        self.state = state or initial_state()
        self.input_fn = input_fn
        self.output_fn = output_fn
        self.running = False

    def run(self) -> GameState:
        """Play until the user quits or input runs out."""
        self.running = True
        while self.running:
            screen = self._screens()[self.state.screen]
            try:
                line = self.input_fn(screen() + "\n> ")
            except EOFError:
                break
            self.handle(line)
        return self.state

    def _screens(self):
        return {
            Screen.SETUP: lambda: render_setup(self.state) + "\n" + SETUP_HELP,
            Screen.GAME: lambda: render_game(self.state) + self._hint_line() + "\n" + GAME_HELP,
            Screen.END_GAME: lambda: render_end_game(self.state) + "\n" + END_HELP,
        }

    def handle(self, line: str) -> ActionResult | None:
        """Parse and apply one command. Returns None when nothing was applied."""
        words = line.split()
        if not words:
            return None
        command, args = words[0].lower(), words[1:]
        if command in {"quit", "exit", "q"}:
            self.running = False
            return None
        if command in {"help", "?"}:
            self.output_fn(RULES)
            return None

        try:
            action = self.parse_command(command, args)
        except ValueError as e:
            self.output_fn(f"! {e}")
            return None

        result = self.reducer.apply(self.state, action)
        if result.success:
            self.state = result.new_state
            for change in result.state_changes:
                self.output_fn(change)
        else:
            logger.debug("Rejected %s: %s", action.action_type.value, result.error_code)
            self.output_fn(f"! {result.error}")
        return result

    def parse_command(self, command: str, args: list[str]) -> Action:
        """Turn a command into an Action. Raises ValueError on bad input."""
        if command == "add":
            return Action.add_player()
        if command == "rename":
            index = self._player_number(args)
            return Action.rename_player(index, " ".join(args[1:]))
        if command == "remove":
            index = self._player_number(args)
            return Action.remove_player(self.state.players[index].player_id)
        if command == "done":
            return Action.start_game()
        if command == "roll":
            return Action.roll()
        if command == "pick":
            if not args:
                raise ValueError("Which face? (1-5 or *)")
            return Action.pick(Face.parse(args[0]))
        if command == "tile":
            if not args:
                raise ValueError("Which tile?")
            return Action.pick_tile(int(args[0]))
        if command == "steal":
            return Action.steal_tile(self._player_number(args))
        if command == "next":
            return Action.next()
        if command == "new":
            return Action.new_game()
        raise ValueError(f"Unknown command: {command}")

    def _player_number(self, args: list[str]) -> int:
        if not args:
            raise ValueError("Which player?")
        index = int(args[0]) - 1
        if not 0 <= index < self.state.num_players:
            raise ValueError(f"No player {args[0]}")
        return index

    def _hint_line(self) -> str:
        hint = self.hint()
        return f"\nYou can: {hint}" if hint else ""

    def hint(self) -> str:
        """Short reminder of what the current player can do."""
        if self.state.screen != Screen.GAME:
            return ""
        options = []
        if can_roll(self.state):
            options.append("roll")
        if claimable_tiles(self.state) & set(available_tiles(self.state)):
            options.append("take a tile")
        if stealable_players(self.state):
            options.append("steal")
        return ", ".join(options)


# =============================================================================
# Entry point
# =============================================================================

def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Stars - dice game",
        prog="stars",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    play_parser = subparsers.add_parser("play", help="Play a hot-seat game")
    play_parser.add_argument("--seed", type=int, help="Seed for reproducible dice")
    play_parser.add_argument(
        "--player", action="append", dest="players", metavar="NAME",
        help="Player name (repeat for each player)",
    )

    subparsers.add_parser("rules", help="Print the rules")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    logging.basicConfig(level=STARS_LOG_LEVEL.upper())

    if args.command == "play":
        cmd_play(args)
    elif args.command == "rules":
        print(RULES)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_play(args):
    """Play a game in the terminal."""
    state = initial_state()
    if args.players:
        state = state._copy_with(players=tuple(Player(name=n) for n in args.players))
    game = TerminalGame(Reducer(face_source=RandomFaceSource(args.seed)), state)
    game.run()


def cmd_serve(args):
    """Run the API with uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)
    uvicorn.run("stars.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
