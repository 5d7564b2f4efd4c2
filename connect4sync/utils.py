"""
utils.py - Constants, enumerations and helpers shared across connect4sync

Boards are addressed column-major as (column, row) with row 0 at the bottom,
so a token dropped into an empty column lands on row 0.
"""

from enum import Enum, IntEnum
from typing import Tuple

import numpy as np

# Game constants
COLS = 7
ROWS = 6
CONNECT_N = 4  # Number of pieces in a row to win

FIRST_MOVE = 1
# move_counter value once every slot holds a token
DRAW_THRESHOLD = ROWS * COLS + 1

DRAW_MARKER = "Draw."


class Owner(IntEnum):
    """Occupant of a slot, reused to name a side (whose turn, who won)."""
    NONE = 0
    PLAYER_ONE = 1
    PLAYER_TWO = 2

    def other(self) -> 'Owner':
        """Get the opposing side."""
        if self == Owner.PLAYER_ONE:
            return Owner.PLAYER_TWO
        elif self == Owner.PLAYER_TWO:
            return Owner.PLAYER_ONE
        return Owner.NONE

    def __str__(self):
        if self == Owner.NONE:
            return "."
        elif self == Owner.PLAYER_ONE:
            return "X"
        return "O"


class Direction(Enum):
    """Scan directions for four-in-a-row detection, as (d_column, d_row)."""
    HORIZONTAL = (1, 0)
    DIAGONAL = (1, 1)
    VERTICAL = (0, 1)
    ANTI_DIAGONAL = (-1, 1)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value


# Order in which win detection tries the directions
SCAN_ORDER = (Direction.HORIZONTAL, Direction.DIAGONAL, Direction.VERTICAL, Direction.ANTI_DIAGONAL)


def is_valid_position(column: int, row: int) -> bool:
    """
    Check if a position is within the board boundaries.

    Args:
        column: Column index
        row: Row index

    Returns:
        True if position is valid, False otherwise
    """
    return 0 <= column < COLS and 0 <= row < ROWS


def render_board_ascii(grid: np.ndarray) -> str:
    """
    Render a column-major grid as ASCII art, top row first.

    Args:
        grid: Array of shape (COLS, ROWS) holding Owner values

    Returns:
        ASCII representation of the board
    """
    lines = ["|" + "-" * (COLS * 2 - 1) + "|"]

    for row in range(ROWS - 1, -1, -1):
        cells = [str(Owner(int(grid[column, row]))) for column in range(COLS)]
        lines.append("|" + " ".join(cells) + "|")

    lines.append("|" + "-" * (COLS * 2 - 1) + "|")
    lines.append("|" + " ".join(str(column) for column in range(COLS)) + "|")

    return "\n".join(lines)
