"""
cli.py - Command-line interface for playing and exercising Pentago

This module provides a hot-seat terminal game on top of the engine and a
benchmark that times random self-play games.
"""

import argparse
import random
import sys
from typing import Callable, List, Optional, Tuple, Union

from pentago.debug import debug, DebugLevel
from pentago.game.rules import PentagoGame
from pentago.utils import (DEFAULT_COMPOSITE_SIZE, DEFAULT_NUM_PLAYERS,
                           DEFAULT_SUB_BOARD_SIZE, Phase, marker_symbol)

QUIT = "quit"

Command = Union[Tuple[int, int], Tuple[int, int, bool], str, None]


class SimpleCLI:
    """Simple command-line interface for Pentago."""

    def __init__(self, input_func: Callable[[str], str] = input):
        """
        Initialize the CLI.

        Args:
            input_func: Function used to read a line from the player
        """
        self.input_func = input_func
        self.game: Optional[PentagoGame] = None
        self.args = None

    def parse_args(self, argv: Optional[List[str]] = None) -> None:
        """Parse command-line arguments and configure logging."""
        parser = argparse.ArgumentParser(description='Pentago CLI')
        parser.add_argument('--debug', action='store_true', help='Enable debug logging')
        parser.add_argument('--debug-level', default='warning',
                            choices=[level.name.lower() for level in DebugLevel],
                            help='Logging level')
        parser.add_argument('--log-file', default=None, help='Also write logs to this file')

        # Options shared by every command that builds a game
        game_options = argparse.ArgumentParser(add_help=False)
        game_options.add_argument('--size', type=int, default=DEFAULT_COMPOSITE_SIZE,
                                  help='Sub-boards per side of the board')
        game_options.add_argument('--sub-size', type=int, default=DEFAULT_SUB_BOARD_SIZE,
                                  help='Cells per side of each sub-board')
        game_options.add_argument('--players', type=int, default=DEFAULT_NUM_PLAYERS,
                                  help='Number of players')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')
        subparsers.add_parser('play', parents=[game_options], help='Play a hot-seat game')
        benchmark_parser = subparsers.add_parser('benchmark', parents=[game_options],
                                                 help='Time random self-play games')
        benchmark_parser.add_argument('--games', type=int, default=100,
                                      help='Number of games to simulate')
        benchmark_parser.add_argument('--seed', type=int, default=None,
                                      help='Random seed for reproducible games')

        self.args = parser.parse_args(argv)

        if self.args.debug:
            debug.configure(level=DebugLevel.DEBUG)
        else:
            debug.set_from_string(self.args.debug_level)
        if self.args.log_file:
            debug.configure(log_file=self.args.log_file)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Run the CLI based on the parsed arguments."""
        if not self.args:
            self.parse_args(argv)

        if self.args.command == 'play':
            self.play_game()
        elif self.args.command == 'benchmark':
            self.benchmark()
        else:
            print("Please specify a command. Use --help for options.")
            sys.exit(1)

    def create_game(self) -> PentagoGame:
        """Build a game from the parsed size options."""
        try:
            return PentagoGame(self.args.size, self.args.sub_size, self.args.players)
        except ValueError as e:
            print(f"Invalid game configuration: {e}")
            sys.exit(2)

    def play_game(self) -> None:
        """Play a Pentago game interactively."""
        self.game = self.create_game()
        game = self.game

        for by in range(game.size):
            for bx in range(game.size):
                game.get_board(bx, by).subscribe_rotate(
                    lambda clockwise, bx=bx, by=by: print(
                        f"Sub-board ({bx}, {by}) rotated "
                        f"{'clockwise' if clockwise else 'counter-clockwise'}"))

        print("Starting a new Pentago game!")
        print("Place phase: enter 'x y'. Rotate phase: enter 'bx by cw' or 'bx by ccw'.")
        print("Enter 'q' to quit.")
        print(game.render())

        while not game.is_over():
            if game.get_phase() == Phase.PLACE and game.is_full():
                print("The board is full. It's a draw!")
                return

            command = self.get_human_command()
            if command is None:
                continue
            if command == QUIT:
                print("Quitting game.")
                return

            if game.get_phase() == Phase.PLACE:
                result = game.place_at(*command)
            else:
                result = game.rotate(*command)

            if result.is_success():
                print(game.render())
            else:
                print(f"Illegal move: {result.name.replace('_', ' ').lower()}")

        winner = game.get_winner()
        print(f"Game over! Player {winner} ({marker_symbol(winner)}) wins!")

    def get_human_command(self) -> Command:
        """
        Read one command for the current phase.

        Returns:
            (x, y) while placing, (bx, by, clockwise) while rotating, QUIT,
            or None if the input could not be parsed
        """
        game = self.game
        player = game.get_current_player()
        phase = game.get_phase()
        prompt = (f"Player {player} ({marker_symbol(player)}) place x y: " if phase == Phase.PLACE
                  else f"Player {player} ({marker_symbol(player)}) rotate bx by cw|ccw: ")

        try:
            user_input = self.input_func(prompt).strip().lower()
        except EOFError:
            return QUIT

        if user_input == 'q':
            return QUIT

        parts = user_input.split()
        try:
            if phase == Phase.PLACE:
                if len(parts) != 2:
                    raise ValueError("expected two numbers")
                return int(parts[0]), int(parts[1])

            if len(parts) != 3 or parts[2] not in ('cw', 'ccw'):
                raise ValueError("expected two numbers and a direction")
            return int(parts[0]), int(parts[1]), parts[2] == 'cw'
        except ValueError as e:
            print(f"Invalid input ({e}).")
            return None

    def benchmark(self) -> None:
        """Benchmark random self-play games."""
        rng = random.Random(self.args.seed)
        games = self.args.games
        print(f"Running benchmark with {games} games...")

        wins = {}
        draws = 0
        total_turns = 0

        debug.start_timer("game_simulation")
        for _ in range(games):
            game = self.create_game()
            winner, turns = play_random_game(game, rng)
            total_turns += turns
            if winner:
                wins[winner] = wins.get(winner, 0) + 1
            else:
                draws += 1
        simulation_time = debug.end_timer("game_simulation", "cli") or 0.0

        print(f"Played {games} games with {total_turns} total turns: "
              f"{simulation_time:.6f} seconds total, "
              f"{simulation_time / max(games, 1) * 1000:.6f} ms per game")
        for player in sorted(wins):
            print(f"Player {player} wins: {wins[player]}")
        print(f"Draws: {draws}")


def play_random_game(game: PentagoGame, rng: random.Random) -> Tuple[int, int]:
    """
    Play random legal moves until the game is won or the board fills.

    Returns:
        Tuple of (winner or 0, number of completed turns)
    """
    turns = 0
    while not game.is_over():
        placements = game.get_valid_placements()
        if not placements:
            break
        game.place_at(*rng.choice(placements))

        rotations = game.get_valid_rotations()
        if not rotations:
            break
        game.rotate(*rng.choice(rotations))
        turns += 1

    return game.get_winner(), turns


def main(argv: Optional[List[str]] = None):
    """Main entry point for the CLI."""
    cli = SimpleCLI()
    cli.run(argv)


if __name__ == "__main__":
    main()
