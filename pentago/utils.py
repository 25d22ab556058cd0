"""
utils.py - Constants, enumerations and grid helpers for the Pentago engine

This module provides the default board configuration, the turn phase and move
result enumerations, and the pure helper functions used by the win scan and
the ASCII renderer.
"""

from enum import Enum, auto
from typing import List, Tuple

import numpy as np

# Game constants
DEFAULT_COMPOSITE_SIZE = 2   # Sub-boards per side of the composite board
DEFAULT_SUB_BOARD_SIZE = 3   # Cells per side of a sub-board
DEFAULT_NUM_PLAYERS = 2
WIN_LENGTH = 5               # Run length needed to win

EMPTY = 0

# Marker symbols used by the renderers; players beyond these print their number
PLAYER_SYMBOLS = {EMPTY: ".", 1: "X", 2: "O", 3: "+", 4: "#"}


class Phase(Enum):
    """The two halves of a turn."""
    PLACE = "place"
    ROTATE = "rotate"

    def other(self) -> 'Phase':
        return Phase.ROTATE if self == Phase.PLACE else Phase.PLACE

    def __str__(self):
        return self.value


class MoveResult(Enum):
    """Outcome of a placement or rotation command."""
    OK = auto()
    GAME_OVER = auto()
    WRONG_PHASE = auto()
    OUT_OF_BOUNDS = auto()
    CELL_OCCUPIED = auto()

    def is_success(self) -> bool:
        """Check if the command changed the game state."""
        return self == MoveResult.OK


class Direction(Enum):
    """Enumeration representing directions for win checking."""
    EAST = auto()
    SOUTH = auto()
    SOUTH_EAST = auto()
    SOUTH_WEST = auto()  # Anti-diagonal


# Direction vectors (dx, dy), in the order the win scan tries them
DIRECTION_VECTORS = {
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
    Direction.SOUTH_EAST: (1, 1),
    Direction.SOUTH_WEST: (-1, 1),
}


def is_valid_position(x: int, y: int, width: int) -> bool:
    """Check if a position lies inside a square grid of the given width."""
    return 0 <= x < width and 0 <= y < width


def count_in_direction(grid: np.ndarray, x: int, y: int, dx: int, dy: int) -> int:
    """
    Count the run of equal markers starting at (x, y) and stepping by (dx, dy).

    Only the forward direction is walked; the start cell is included in the count.

    Args:
        grid: Square grid indexed [x, y]
        x: Start column
        y: Start row
        dx: Column step
        dy: Row step

    Returns:
        Length of the run, or 0 for a zero step
    """
    if dx == 0 and dy == 0:
        return 0

    width = grid.shape[0]
    marker = grid[x, y]
    count = 1
    cx, cy = x + dx, y + dy
    while is_valid_position(cx, cy, width) and grid[cx, cy] == marker:
        count += 1
        cx += dx
        cy += dy
    return count


def find_winning_run(grid: np.ndarray, run_length: int = WIN_LENGTH) -> List[Tuple[int, int]]:
    """
    Scan a composite grid for the first run of at least run_length markers.

    Cells are visited in row-major order (y outer, x inner) and each non-empty
    cell tries the directions in DIRECTION_VECTORS order.

    Args:
        grid: Square grid indexed [x, y]
        run_length: Minimum run length that counts as a win

    Returns:
        The (x, y) cells of the run found, or an empty list if there is none
    """
    width = grid.shape[0]
    for y in range(width):
        for x in range(width):
            if grid[x, y] == EMPTY:
                continue
            for dx, dy in DIRECTION_VECTORS.values():
                count = count_in_direction(grid, x, y, dx, dy)
                if count >= run_length:
                    return [(x + i * dx, y + i * dy) for i in range(count)]
    return []


def rotate_grid(grid: np.ndarray, clockwise: bool) -> np.ndarray:
    """
    Return a rotated copy of a square grid indexed [x, y].

    Clockwise gives G'[x, y] = G[y, n-1-x]; counter-clockwise gives
    G'[x, y] = G[n-1-y, x].
    """
    return np.rot90(grid, 1 if clockwise else -1).copy()


def marker_symbol(marker: int) -> str:
    return PLAYER_SYMBOLS.get(int(marker), str(int(marker)))


def render_board_ascii(grid: np.ndarray, sub_board_size: int) -> str:
    """
    Render a composite grid as ASCII art.

    Args:
        grid: Square grid indexed [x, y]
        sub_board_size: Width of a sub-board, used to draw separators

    Returns:
        ASCII representation of the board, one text row per y
    """
    width = grid.shape[0]
    boards_per_side = width // sub_board_size
    segment = "-" * (sub_board_size * 2 + 1)
    separator = "+" + "+".join([segment] * boards_per_side) + "+"

    header = "   "
    for x in range(width):
        header += " " + str(x % 10)
        if (x + 1) % sub_board_size == 0:
            header += "  "

    result = [header.rstrip(), "  " + separator]
    for y in range(width):
        line = f"{y % 10} |"
        for x in range(width):
            line += " " + marker_symbol(grid[x, y])
            if (x + 1) % sub_board_size == 0:
                line += " |"
        result.append(line)
        if (y + 1) % sub_board_size == 0:
            result.append("  " + separator)

    return "\n".join(result)
