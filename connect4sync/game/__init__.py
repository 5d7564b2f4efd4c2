"""
connect4sync.game - Core game mechanics for Connect Four

This package contains the board representation, move validation and
win/draw detection, player identities, game events and the Game session
that ties them together.
"""

from connect4sync.game.board import Board
from connect4sync.game.rules import check_move, check_for_four, is_draw
from connect4sync.game.player import Player, create_player
from connect4sync.game.state import GameState
from connect4sync.game.session import Game, Phase

__all__ = ['Board', 'check_move', 'check_for_four', 'is_draw', 'Player', 'create_player',
           'GameState', 'Game', 'Phase']
