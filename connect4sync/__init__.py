"""
connect4sync - Connect Four engine with peer state synchronization

This package provides the Connect Four rules engine (board, move validation,
win/draw detection, turn handling) and the protocol that keeps two game
instances in step over a bidirectional channel.
"""

# Version number
__version__ = '0.1.0'
