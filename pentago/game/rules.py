"""
rules.py - Game state management and Gymnasium environment for Pentago

This module provides:
1. PentagoGame, the engine that owns the sub-boards, the place/rotate turn
   cycle, the win scan and the change notifications
2. PentagoEnv, a gymnasium-compatible environment driving the engine
"""

from typing import Callable, Dict, List, Optional, Tuple, Union

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from pentago.debug import debug
from pentago.game.board import SubBoard
from pentago.utils import (DEFAULT_COMPOSITE_SIZE, DEFAULT_NUM_PLAYERS,
                           DEFAULT_SUB_BOARD_SIZE, EMPTY, WIN_LENGTH, MoveResult,
                           Phase, find_winning_run, is_valid_position,
                           render_board_ascii)

ChangeCallback = Callable[[], None]


class PentagoGame:
    """
    Pentago game engine.

    The composite board is a size x size arrangement of sub-boards. Composite
    coordinates (X, Y) map to sub-board (X // sub_board_size, Y // sub_board_size)
    and local cell (X % sub_board_size, Y % sub_board_size).

    Each turn the current player places one marker and then rotates one
    sub-board. The game ends for good the first time a run of WIN_LENGTH
    markers is found; is_over() performs that scan lazily.
    """

    def __init__(self, size: int = DEFAULT_COMPOSITE_SIZE,
                 sub_board_size: int = DEFAULT_SUB_BOARD_SIZE,
                 num_players: int = DEFAULT_NUM_PLAYERS):
        """
        Initialize a new game with empty sub-boards.

        Args:
            size: Sub-boards per side of the composite board
            sub_board_size: Cells per side of each sub-board
            num_players: Number of players taking turns

        Raises:
            ValueError: If any argument is not a positive integer
        """
        for name, value in (("size", size), ("sub_board_size", sub_board_size),
                            ("num_players", num_players)):
            if int(value) != value or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

        self.size = int(size)
        self.sub_board_size = int(sub_board_size)
        self.num_players = int(num_players)
        self.boards = [[SubBoard(self, self.sub_board_size) for _ in range(self.size)]
                       for _ in range(self.size)]

        self._player = 1
        self._phase = Phase.PLACE
        self._over = False
        self._winner = EMPTY
        self._callbacks: List[ChangeCallback] = []
        # Set while rotate subscribers run, before the turn switch
        self.rotation_in_progress = False

        debug.debug(f"Initializing PentagoGame: {self.size}x{self.size} boards of "
                    f"{self.sub_board_size}x{self.sub_board_size}, {self.num_players} players", "game")
        if self.width < WIN_LENGTH:
            debug.warning(f"Composite width {self.width} is below the winning run of "
                          f"{WIN_LENGTH}; no win is reachable", "game")

    @property
    def width(self) -> int:
        """Cells per side of the composite board."""
        return self.size * self.sub_board_size

    # Notifications

    def subscribe(self, callback: ChangeCallback) -> None:
        """Register a callback invoked with no arguments after every state change."""
        self._callbacks.append(callback)

    def _changed(self) -> None:
        for callback in self._callbacks:
            callback()

    # Read queries

    def get_board(self, bx: int, by: int) -> SubBoard:
        if not is_valid_position(bx, by, self.size):
            raise IndexError(f"Sub-board ({bx}, {by}) outside {self.size}x{self.size} grid")
        return self.boards[bx][by]

    def _locate(self, x: int, y: int) -> Tuple[SubBoard, int, int]:
        """Translate composite coordinates into (sub-board, local x, local y)."""
        n = self.sub_board_size
        return self.boards[x // n][y // n], x % n, y % n

    def get_marker_at(self, x: int, y: int) -> int:
        if not is_valid_position(x, y, self.width):
            raise IndexError(f"Cell ({x}, {y}) outside {self.width}x{self.width} board")
        board, lx, ly = self._locate(x, y)
        return board.get_marker(lx, ly)

    def get_current_player(self) -> int:
        return self._player

    def get_phase(self) -> Phase:
        return self._phase

    def _composite_grid(self) -> np.ndarray:
        """Assemble the sub-boards into one grid indexed [X, Y]."""
        n = self.sub_board_size
        grid = np.zeros((self.width, self.width), dtype=int)
        for bx in range(self.size):
            for by in range(self.size):
                grid[bx * n:(bx + 1) * n, by * n:(by + 1) * n] = self.boards[bx][by].grid
        return grid

    def get_state(self) -> np.ndarray:
        """
        Get the composite board as a numpy array.

        Returns:
            2D array indexed [Y, X], so each row of the array is a board row
        """
        return self._composite_grid().T.copy()

    def get_winning_line(self) -> List[Tuple[int, int]]:
        """
        Get the composite cells of the first winning run found by the win scan.

        Returns:
            List of (X, Y) positions, or an empty list if there is no winning run
        """
        return find_winning_run(self._composite_grid(), WIN_LENGTH)

    def get_winner(self) -> int:
        """
        Get the winning player.

        Returns:
            The latched winner once the game is over, otherwise the owner of the
            first winning run on the board, or 0 if there is none
        """
        if self._over:
            return self._winner
        line = self.get_winning_line()
        if not line:
            return EMPTY
        return self.get_marker_at(*line[0])

    def is_over(self) -> bool:
        """
        Check if the game is over, latching the result the first time a win is found.

        The latching call notifies subscribers; later calls are pure reads.
        """
        if not self._over:
            winner = self.get_winner()
            if winner != EMPTY:
                self._over = True
                self._winner = winner
                debug.info(f"Player {winner} wins along {self.get_winning_line()}", "game")
                self._changed()
        return self._over

    def is_full(self) -> bool:
        """Check if every composite cell holds a marker."""
        return all(np.all(board.grid != EMPTY) for row in self.boards for board in row)

    def can_place(self) -> bool:
        return self._phase == Phase.PLACE and not self.is_over()

    def can_rotate(self) -> bool:
        return (self._phase == Phase.ROTATE and not self.rotation_in_progress
                and not self.is_over())

    def get_valid_placements(self) -> List[Tuple[int, int]]:
        """
        Get the empty composite cells the current player may place on.

        Returns:
            (X, Y) positions in row-major order, empty outside the place phase
        """
        if not self.can_place():
            return []
        grid = self._composite_grid()
        return [(x, y) for y in range(self.width) for x in range(self.width)
                if grid[x, y] == EMPTY]

    def get_valid_rotations(self) -> List[Tuple[int, int, bool]]:
        """
        Get the rotations the current player may make.

        Returns:
            (bx, by, clockwise) tuples, counter-clockwise first for each sub-board,
            empty outside the rotate phase
        """
        if not self.can_rotate():
            return []
        return [(bx, by, clockwise)
                for by in range(self.size)
                for bx in range(self.size)
                for clockwise in (False, True)]

    # Transitions

    def advance_phase(self) -> None:
        """Toggle between the place and rotate phases."""
        self._phase = self._phase.other()
        debug.debug(f"Player {self._player} moves to {self._phase} phase", "game")
        self._changed()

    def switch_player(self) -> None:
        """Hand the turn to the next player and start their place phase."""
        self._player = self._player % self.num_players + 1
        self._phase = Phase.PLACE
        debug.debug(f"Switching to player {self._player}", "game")
        self._changed()

    # Commands

    def _check_turn(self, phase: Phase) -> MoveResult:
        if self.is_over():
            return MoveResult.GAME_OVER
        if self._phase != phase or (phase == Phase.ROTATE and self.rotation_in_progress):
            return MoveResult.WRONG_PHASE
        return MoveResult.OK

    def place(self, bx: int, by: int, x: int, y: int) -> MoveResult:
        """
        Place the current player's marker on local cell (x, y) of sub-board (bx, by).

        Returns:
            MoveResult describing whether the marker was placed
        """
        if not is_valid_position(bx, by, self.size):
            result = self._check_turn(Phase.PLACE)
            if result.is_success():
                result = MoveResult.OUT_OF_BOUNDS
            debug.debug(f"Placement on sub-board ({bx}, {by}) rejected: {result.name}", "game")
            return result
        return self.boards[bx][by].place(x, y)

    def place_at(self, x: int, y: int) -> MoveResult:
        """
        Place the current player's marker at composite coordinates (X, Y).

        Returns:
            MoveResult describing whether the marker was placed
        """
        if not is_valid_position(x, y, self.width):
            result = self._check_turn(Phase.PLACE)
            if result.is_success():
                result = MoveResult.OUT_OF_BOUNDS
            debug.debug(f"Placement at ({x}, {y}) rejected: {result.name}", "game")
            return result
        board, lx, ly = self._locate(x, y)
        return board.place(lx, ly)

    def rotate(self, bx: int, by: int, clockwise: bool) -> MoveResult:
        """
        Rotate sub-board (bx, by) a quarter turn, ending the current player's turn.

        Returns:
            MoveResult describing whether the rotation happened
        """
        if not is_valid_position(bx, by, self.size):
            result = self._check_turn(Phase.ROTATE)
            if result.is_success():
                result = MoveResult.OUT_OF_BOUNDS
            debug.debug(f"Rotation of sub-board ({bx}, {by}) rejected: {result.name}", "game")
            return result
        return self.boards[bx][by].rotate(clockwise)

    def render(self) -> str:
        """
        Render the game as a string.

        Returns:
            String representation of the composite board
        """
        return render_board_ascii(self._composite_grid(), self.sub_board_size)

    def __str__(self) -> str:
        return self.render()


class PentagoEnv(gym.Env):
    """
    Pentago environment following the Gymnasium interface.

    Actions below width * width place a marker at (a % width, a // width).
    The remaining actions rotate sub-board k = (a - width * width) // 2, with
    bx = k % size and by = k // size, clockwise when the offset is odd.
    Rewards are given from the point of view of the player who acted.
    """

    metadata = {'render_modes': ['ascii', 'human'], 'render_fps': 4}

    def __init__(self, render_mode: Optional[str] = None,
                 size: int = DEFAULT_COMPOSITE_SIZE,
                 sub_board_size: int = DEFAULT_SUB_BOARD_SIZE,
                 num_players: int = DEFAULT_NUM_PLAYERS):
        debug.debug("Initializing PentagoEnv", "env")

        self.size = size
        self.sub_board_size = sub_board_size
        self.num_players = num_players
        self.game = PentagoGame(size, sub_board_size, num_players)
        self.render_mode = render_mode

        width = self.game.width
        self.num_place_actions = width * width
        self.action_space = spaces.Discrete(self.num_place_actions + size * size * 2)
        self.observation_space = spaces.Box(
            low=0, high=num_players, shape=(width, width), dtype=np.int8
        )

        self.reward_win = 1.0
        self.reward_lose = -1.0
        self.reward_draw = 0.1
        self.reward_invalid_move = -0.5
        self.reward_step = -0.01

    def encode_placement(self, x: int, y: int) -> int:
        return y * self.game.width + x

    def encode_rotation(self, bx: int, by: int, clockwise: bool) -> int:
        return self.num_place_actions + (by * self.size + bx) * 2 + int(clockwise)

    def get_valid_actions(self) -> List[int]:
        """List the actions legal in the current phase."""
        actions = [self.encode_placement(x, y) for x, y in self.game.get_valid_placements()]
        actions += [self.encode_rotation(bx, by, cw) for bx, by, cw in self.game.get_valid_rotations()]
        return actions

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        """
        Reset the environment to a fresh game.

        Returns:
            Initial observation and info dictionary
        """
        debug.debug("Resetting environment", "env")
        super().reset(seed=seed)

        self.game = PentagoGame(self.size, self.sub_board_size, self.num_players)

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), self._get_info()

    def _apply(self, action: int) -> MoveResult:
        width = self.game.width
        if action < 0 or action >= self.action_space.n:
            return MoveResult.OUT_OF_BOUNDS
        if action < self.num_place_actions:
            return self.game.place_at(action % width, action // width)
        k, offset = divmod(action - self.num_place_actions, 2)
        return self.game.rotate(k % self.size, k // self.size, bool(offset))

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Take a step in the environment with a placement or rotation action.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        action = int(action)
        player = self.game.get_current_player()
        debug.debug(f"Environment step with action {action} for player {player}", "env")

        result = self._apply(action)
        if not result.is_success():
            debug.warning(f"Invalid action {action}: {result.name}", "env")
            info = self._get_info()
            info['illegal_action'] = result.name
            return self._get_observation(), self.reward_invalid_move, False, True, info

        reward = self.reward_step
        terminated = False
        if self.game.is_over():
            winner = self.game.get_winner()
            debug.info(f"Game over: player {winner} wins", "env")
            reward = self.reward_win if winner == player else self.reward_lose
            terminated = True
        elif self.game.get_phase() == Phase.PLACE and self.game.is_full():
            debug.info("Game over: board full", "env")
            reward = self.reward_draw
            terminated = True

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), reward, terminated, False, self._get_info()

    def render(self) -> Optional[Union[str, np.ndarray]]:
        """
        Render the current state of the environment.

        Returns:
            The board text in "ascii" mode, otherwise None
        """
        if self.render_mode == "ascii":
            return self.game.render()
        if self.render_mode == "human":
            print(self.game.render())
        return None

    def _get_observation(self) -> np.ndarray:
        return self.game.get_state().astype(np.int8)

    def _get_info(self) -> Dict:
        valid_actions = self.get_valid_actions()
        return {
            'valid_actions': valid_actions,
            'num_valid_actions': len(valid_actions),
            'current_player': self.game.get_current_player(),
            'phase': str(self.game.get_phase()),
            'winner': self.game.get_winner(),
            'winning_line': self.game.get_winning_line(),
        }

    def close(self):
        """Clean up resources."""
        pass
