"""
state.py - The game state snapshot exchanged between peers
"""

from dataclasses import dataclass

from connect4sync.game.board import Board, Cells
from connect4sync.utils import Owner


@dataclass(frozen=True)
class GameState:
    """
    Everything a peer needs to reproduce the game locally.

    Attributes:
        player_ones_turn: True if PLAYER_ONE moves next
        board: Column-major slot owners
        winner: Winning side, Owner.NONE while undecided or drawn
        move_counter: Number of the next move (1 on an empty board)
    """
    player_ones_turn: bool
    board: Cells
    winner: Owner
    move_counter: int

    def to_board(self) -> Board:
        return Board.from_cells(self.board)
