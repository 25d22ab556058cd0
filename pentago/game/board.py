"""
board.py - Rotatable sub-board for the Pentago composite board

This module implements the SubBoard class, one square grid of player markers
that can be placed into and rotated a quarter turn. Turn and phase state belong
to the owning game, which is passed in and consulted for every command.
"""

from typing import Callable, List, TYPE_CHECKING

import numpy as np

from pentago.debug import debug
from pentago.utils import (DEFAULT_SUB_BOARD_SIZE, EMPTY, MoveResult, Phase,
                           is_valid_position, render_board_ascii, rotate_grid)

if TYPE_CHECKING:
    from pentago.game.rules import PentagoGame

RotateCallback = Callable[[bool], None]


class SubBoard:
    """
    One rotatable square of the composite board.

    The grid is indexed [x, y]. Markers are only written by place() and only
    moved by rotate(); a cell never goes back to empty.
    """

    def __init__(self, game: 'PentagoGame', size: int = DEFAULT_SUB_BOARD_SIZE):
        if size < 1:
            raise ValueError(f"Sub-board size must be positive, got {size}")
        self.game = game
        self.size = size
        self.grid = np.zeros((size, size), dtype=int)
        self._rotate_callbacks: List[RotateCallback] = []

    def subscribe_rotate(self, callback: RotateCallback) -> None:
        """Register a callback invoked with the direction after every rotation."""
        self._rotate_callbacks.append(callback)

    def can_place(self) -> bool:
        return self.game.get_phase() == Phase.PLACE and not self.game.is_over()

    def can_rotate(self) -> bool:
        return (self.game.get_phase() == Phase.ROTATE and not self.game.rotation_in_progress
                and not self.game.is_over())

    def is_empty(self, x: int, y: int) -> bool:
        return self.get_marker(x, y) == EMPTY

    def get_marker(self, x: int, y: int) -> int:
        if not is_valid_position(x, y, self.size):
            raise IndexError(f"Cell ({x}, {y}) outside {self.size}x{self.size} sub-board")
        return int(self.grid[x, y])

    def get_state(self) -> np.ndarray:
        """Return a copy of the grid, indexed [x, y]."""
        return self.grid.copy()

    def check_place(self, x: int, y: int) -> MoveResult:
        """
        Check whether the current player may place a marker at (x, y).

        Returns:
            MoveResult.OK if the placement is legal, otherwise the reason it is not
        """
        if self.game.is_over():
            return MoveResult.GAME_OVER
        if self.game.get_phase() != Phase.PLACE:
            return MoveResult.WRONG_PHASE
        if not is_valid_position(x, y, self.size):
            return MoveResult.OUT_OF_BOUNDS
        if self.grid[x, y] != EMPTY:
            return MoveResult.CELL_OCCUPIED
        return MoveResult.OK

    def place(self, x: int, y: int) -> MoveResult:
        """
        Place the current player's marker at (x, y) and hand the turn to the rotate phase.

        Illegal placements leave the board untouched and notify nobody.

        Args:
            x: Local column
            y: Local row

        Returns:
            MoveResult describing whether the marker was placed
        """
        result = self.check_place(x, y)
        if not result.is_success():
            debug.debug(f"Placement at ({x}, {y}) rejected: {result.name}", "board")
            return result

        player = self.game.get_current_player()
        debug.trace(f"Player {player} places at local ({x}, {y})", "board")
        self.grid[x, y] = player
        self.game.advance_phase()
        return result

    def rotate(self, clockwise: bool) -> MoveResult:
        """
        Rotate the sub-board a quarter turn and end the current player's turn.

        The grid is replaced in one step, then the rotate subscribers are told the
        direction, then the game switches to the next player.

        Args:
            clockwise: Direction of the quarter turn

        Returns:
            MoveResult describing whether the rotation happened
        """
        if self.game.is_over():
            result = MoveResult.GAME_OVER
        elif self.game.get_phase() != Phase.ROTATE or self.game.rotation_in_progress:
            result = MoveResult.WRONG_PHASE
        else:
            result = MoveResult.OK

        if not result.is_success():
            debug.debug(f"Rotation rejected: {result.name}", "board")
            return result

        debug.trace(f"Rotating {'clockwise' if clockwise else 'counter-clockwise'}", "board")
        self.grid = rotate_grid(self.grid, clockwise)
        self.game.rotation_in_progress = True
        try:
            for callback in self._rotate_callbacks:
                callback(clockwise)
        finally:
            self.game.rotation_in_progress = False
        self.game.switch_player()
        return result

    def render(self) -> str:
        """Render the sub-board on its own."""
        return render_board_ascii(self.grid, self.size)

    def __str__(self) -> str:
        return self.render()
