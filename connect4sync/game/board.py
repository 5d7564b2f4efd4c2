"""
board.py - Board representation for Connect Four

This module implements the Board class: a fixed 7x6 grid of slots addressed
column-major as (column, row), row 0 being the bottom. The board only stores
owners and checks bounds; gravity is kept by the rules that decide where a
token lands, not by the board itself.
"""

from typing import Iterable, Sequence, Tuple

import numpy as np

from connect4sync.debug import debug
from connect4sync.errors import BoardIndexError
from connect4sync.utils import COLS, ROWS, Owner, is_valid_position, render_board_ascii

Cells = Tuple[Tuple[Owner, ...], ...]


class Board:
    """
    Represents a Connect Four game board.

    Each slot holds an Owner; Owner.NONE marks an empty slot.
    """

    def __init__(self):
        """Initialize an empty board."""
        self.grid = np.zeros((COLS, ROWS), dtype=np.int8)

    @classmethod
    def from_cells(cls, cells: Iterable[Sequence[int]]) -> 'Board':
        """
        Build a board from column-major cell values.

        Args:
            cells: COLS sequences of ROWS owner values each

        Returns:
            A new Board holding those values
        """
        board = cls()
        board.grid = np.array([[int(Owner(value)) for value in column] for column in cells], dtype=np.int8)
        if board.grid.shape != (COLS, ROWS):
            raise ValueError(f"Board must be {COLS}x{ROWS}, got {board.grid.shape}")
        return board

    def reset(self) -> None:
        """Clear every slot."""
        debug.debug("Resetting board", "board")
        self.grid.fill(Owner.NONE)

    def get(self, column: int, row: int) -> Owner:
        """
        Read the owner of a slot.

        Raises:
            BoardIndexError: if (column, row) is outside the board
        """
        if not is_valid_position(column, row):
            raise BoardIndexError(column, row)
        return Owner(int(self.grid[column, row]))

    def set(self, column: int, row: int, owner: Owner) -> None:
        """
        Write the owner of a slot unconditionally.

        Raises:
            BoardIndexError: if (column, row) is outside the board
        """
        if not is_valid_position(column, row):
            raise BoardIndexError(column, row)
        debug.trace(f"Setting slot ({column}, {row}) to {owner.name}", "board")
        self.grid[column, row] = owner

    def lowest_empty_row(self, column: int) -> int:
        """
        Get the row a token dropped into the column would land on.

        Args:
            column: A column index inside the board

        Returns:
            Lowest empty row, or -1 if the column is full
        """
        empty = np.flatnonzero(self.grid[column] == Owner.NONE)
        return int(empty[0]) if empty.size else -1

    def token_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def is_full(self) -> bool:
        return bool(np.all(self.grid != Owner.NONE))

    def cells(self) -> Cells:
        """Column-major snapshot of every slot."""
        return tuple(tuple(Owner(int(value)) for value in column) for column in self.grid)

    def render(self) -> str:
        return render_board_ascii(self.grid)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.grid, other.grid))

    def __str__(self) -> str:
        return self.render()
