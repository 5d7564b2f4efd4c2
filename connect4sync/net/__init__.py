"""
connect4sync.net - Keeping two game instances in step

Snapshots of the full game state are encoded, pushed over a channel after
each local move and applied verbatim on the other side.
"""

from connect4sync.game.state import GameState
from connect4sync.net.codec import encode, decode
from connect4sync.net.channel import Channel, QueueChannel, SocketChannel, listen, connect
from connect4sync.net.sync import StateSynchronizer

__all__ = ['GameState', 'encode', 'decode', 'Channel', 'QueueChannel', 'SocketChannel',
           'listen', 'connect', 'StateSynchronizer']
