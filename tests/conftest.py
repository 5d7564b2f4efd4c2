import threading

import pytest

from connect4sync.game.session import Game
from connect4sync.net.channel import QueueChannel
from connect4sync.net.sync import StateSynchronizer

# Fills the board without a four for either side: columns 0/2, 1/3 and 4/6
# are played as interleaved pairs, column 5 last.
DRAW_SEQUENCE = ([0, 2, 2, 0] * 3) + ([1, 3, 3, 1] * 3) + ([4, 6, 6, 4] * 3) + [5] * 6

PEER_TIMEOUT = 5.0


class EventLog:
    """Collects events from a game's hooks."""

    def __init__(self, game):
        self.board = []
        self.over = []
        game.on_board_changed(self.board.append)
        game.on_game_over(self.over.append)


def play(game, columns):
    for column in columns:
        assert game.make_move(column), f"move in column {column} was rejected"


class PeerThread(threading.Thread):
    """Runs one side of a linked game and keeps any exception for the test."""

    def __init__(self, target):
        super().__init__(daemon=True)
        self._target_fn = target
        self.error = None

    def run(self):
        try:
            self._target_fn()
        except Exception as e:  # reported by finish()
            self.error = e

    def finish(self, timeout=10.0):
        self.join(timeout)
        assert not self.is_alive(), "peer thread is still blocked"
        if self.error is not None:
            raise self.error


@pytest.fixture
def game():
    return Game()


@pytest.fixture
def linked_games():
    host_end, join_end = QueueChannel.pair()
    host = Game(StateSynchronizer(host_end, timeout=PEER_TIMEOUT), go_first=True)
    joiner = Game(StateSynchronizer(join_end, timeout=PEER_TIMEOUT), go_first=False)
    yield host, joiner
    host_end.close()
    join_end.close()
