"""
rules.py - Move validation and win/draw detection for Connect Four

Win detection scans the whole board after every placement rather than only
the neighbourhood of the last token. Directions are tried in SCAN_ORDER and
the scan stops at the first run of four, so results are deterministic.
"""

from typing import List, NamedTuple, Optional, Tuple

from connect4sync.debug import debug
from connect4sync.game.board import Board
from connect4sync.utils import (COLS, CONNECT_N, DRAW_THRESHOLD, ROWS, SCAN_ORDER,
                                Direction, Owner, is_valid_position)


class WinningRun(NamedTuple):
    """Where a four-in-a-row starts and which way it runs."""
    direction: Direction
    column: int
    row: int

    def slots(self) -> List[Tuple[int, int]]:
        d_col, d_row = self.direction.delta
        return [(self.column + d_col * i, self.row + d_row * i) for i in range(CONNECT_N)]


def check_move(board: Board, column: int) -> Tuple[bool, int]:
    """
    Decide whether a column accepts a token and where it lands.

    Args:
        board: The board to check
        column: Requested column

    Returns:
        (legal, landing_row); landing_row is -1 when the move is illegal
    """
    if not 0 <= column < COLS:
        debug.debug(f"Invalid move: column {column} out of bounds", "rules")
        return False, -1

    row = board.lowest_empty_row(column)
    if row < 0:
        debug.debug(f"Invalid move: column {column} is full", "rules")
        return False, -1

    return True, row


def find_connecting(board: Board, column: int, row: int, direction: Direction, owner: Owner) -> int:
    """
    Count consecutive slots held by owner, starting at (column, row).

    Returns:
        Length of the run, capped at CONNECT_N
    """
    d_col, d_row = direction.delta
    count = 0
    while count < CONNECT_N and is_valid_position(column, row) and board.get(column, row) == owner:
        count += 1
        column += d_col
        row += d_row
    return count


def check_for_four(board: Board, owner: Owner) -> Optional[WinningRun]:
    """
    Scan the entire board for a four-in-a-row held by owner.

    Args:
        board: The board to scan
        owner: Side whose tokens are counted

    Returns:
        The first winning run found, or None
    """
    if owner == Owner.NONE:
        return None

    for direction in SCAN_ORDER:
        for row in range(ROWS):
            for column in range(COLS):
                if find_connecting(board, column, row, direction, owner) == CONNECT_N:
                    debug.debug(f"Four for {owner.name} at ({column}, {row}) going {direction.name}", "rules")
                    return WinningRun(direction, column, row)
    return None


def is_draw(move_counter: int, winner: Owner) -> bool:
    """A draw is a full board (counter at DRAW_THRESHOLD) with no winner."""
    return winner == Owner.NONE and move_counter == DRAW_THRESHOLD


def floating_tokens(board: Board) -> List[Tuple[int, int]]:
    """
    Find tokens resting above an empty slot in the same column.

    Placement through check_move never produces these; they only show up in
    boards received from elsewhere.
    """
    floating = []
    for column in range(COLS):
        seen_empty = False
        for row in range(ROWS):
            if board.get(column, row) == Owner.NONE:
                seen_empty = True
            elif seen_empty:
                floating.append((column, row))
    return floating
