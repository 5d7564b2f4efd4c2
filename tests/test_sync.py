import threading

import pytest

from conftest import DRAW_SEQUENCE, EventLog, PeerThread, play
from connect4sync.errors import PeerTimeoutError, SnapshotError, SyncCancelledError
from connect4sync.game.events import Draw, Synced, Win
from connect4sync.game.session import Game, Phase
from connect4sync.net.channel import Channel, QueueChannel
from connect4sync.net.codec import decode, encode
from connect4sync.net.sync import StateSynchronizer
from connect4sync.utils import DRAW_THRESHOLD, Owner


class ScriptedChannel(Channel):
    """Records sent payloads and replays queued replies."""

    def __init__(self, replies=()):
        super().__init__()
        self.sent = []
        self.replies = list(replies)
        self.receives = 0

    def send(self, payload):
        self.sent.append(payload)

    def _receive_slice(self, wait):
        if self.replies:
            self.receives += 1
            return self.replies.pop(0)
        threading.Event().wait(wait)
        return None


def reply_after(columns, first=None):
    """Encoded state of a local game after playing columns."""
    game = first or Game()
    play(game, columns)
    return encode(game.snapshot())


def test_local_move_pushes_state_then_pulls_reply():
    channel = ScriptedChannel([reply_after([3, 4])])
    game = Game(StateSynchronizer(channel, timeout=1))
    log = EventLog(game)

    assert game.make_move(3)
    assert len(channel.sent) == 1
    pushed = decode(channel.sent[0])
    assert pushed.move_counter == 2 and pushed.player_ones_turn is False
    assert pushed.board[3][0] == Owner.PLAYER_ONE

    # the peer's reply has been applied
    assert channel.receives == 1
    assert game.move_counter == 3
    assert game.board.get(4, 0) == Owner.PLAYER_TWO
    assert game.active_player is game.player_one
    assert game.phase == Phase.LOCAL_TURN
    assert isinstance(log.board[-1], Synced)


def test_winning_move_sends_once_and_does_not_wait():
    game = Game(StateSynchronizer(ScriptedChannel(), timeout=0.2))
    game.apply_snapshot(decode(reply_after([3, 0, 3, 0, 3, 0])))
    channel = ScriptedChannel()
    game.synchronizer = StateSynchronizer(channel, timeout=0.2)
    log = EventLog(game)

    assert game.make_move(3)
    assert len(channel.sent) == 1
    assert channel.receives == 0
    final = decode(channel.sent[0])
    assert final.winner == Owner.PLAYER_ONE
    assert final.move_counter == 8
    assert log.over == [Win(game.player_one)]
    assert game.phase == Phase.GAME_OVER


def test_drawing_move_sends_once_and_does_not_wait():
    game = Game(StateSynchronizer(ScriptedChannel(), timeout=0.2), go_first=False)
    game.apply_snapshot(decode(reply_after(DRAW_SEQUENCE[:-1])))
    channel = ScriptedChannel()
    game.synchronizer = StateSynchronizer(channel, timeout=0.2)
    log = EventLog(game)

    assert game.make_move(DRAW_SEQUENCE[-1])
    assert len(channel.sent) == 1
    assert decode(channel.sent[0]).move_counter == DRAW_THRESHOLD
    assert log.over == [Draw()]


def test_illegal_move_sends_nothing():
    channel = ScriptedChannel()
    game = Game(StateSynchronizer(channel, timeout=0.2))
    assert game.make_move(9) is False
    assert channel.sent == []


def test_start_waits_only_when_peer_moves_first():
    host_channel = ScriptedChannel()
    host = Game(StateSynchronizer(host_channel, timeout=0.2), go_first=True)
    host.start()
    assert host_channel.receives == 0

    join_channel = ScriptedChannel([reply_after([2])])
    joiner = Game(StateSynchronizer(join_channel, timeout=0.2), go_first=False)
    joiner.start()
    assert join_channel.receives == 1
    assert joiner.board.get(2, 0) == Owner.PLAYER_ONE
    assert joiner.is_local_turn


def test_missing_reply_raises_peer_timeout():
    game = Game(StateSynchronizer(ScriptedChannel(), timeout=0.2))
    with pytest.raises(PeerTimeoutError):
        game.make_move(0)
    assert game.board.get(0, 0) == Owner.PLAYER_ONE
    assert game.phase == Phase.WAITING_FOR_PEER


def test_cancel_interrupts_waiting_game():
    channel = ScriptedChannel()
    synchronizer = StateSynchronizer(channel)
    game = Game(synchronizer, go_first=False)
    timer = threading.Timer(0.2, synchronizer.cancel)
    timer.start()
    try:
        with pytest.raises(SyncCancelledError):
            game.start()
    finally:
        timer.cancel()


def test_cancel_during_push_aborts_the_following_pull():
    synchronizer = StateSynchronizer(ScriptedChannel(), timeout=2)
    game = Game(synchronizer)
    game.on_board_changed(lambda event: synchronizer.cancel())
    with pytest.raises(SyncCancelledError):
        game.make_move(3)
    assert game.board.get(3, 0) == Owner.PLAYER_ONE


def test_networked_phase_starts_from_the_active_side():
    host = Game(StateSynchronizer(ScriptedChannel()), go_first=True)
    joiner = Game(StateSynchronizer(ScriptedChannel()), go_first=False)
    assert host.phase == Phase.LOCAL_TURN
    assert joiner.phase == Phase.WAITING_FOR_PEER


def test_rematch_leaves_the_winner_waiting():
    host = Game(StateSynchronizer(ScriptedChannel()), go_first=True)
    host.apply_snapshot(decode(reply_after([3, 0, 3, 0, 3, 0, 3])))
    assert host.winner == Owner.PLAYER_ONE

    host.setup_new_game()
    assert host.active_player is host.player_two
    assert host.phase == Phase.WAITING_FOR_PEER
    assert not host.is_local_turn


def test_strict_synchronizer_rejects_bad_snapshot():
    bad = reply_after([]).replace('"move_counter":1', '"move_counter":9')
    game = Game(StateSynchronizer(ScriptedChannel([bad]), timeout=0.2, strict=True), go_first=False)
    with pytest.raises(SnapshotError):
        game.start()


def test_linked_games_converge_on_a_win(linked_games):
    host, joiner = linked_games
    host_log, join_log = EventLog(host), EventLog(joiner)

    def host_side():
        play(host, [3, 3, 3, 3])

    def join_side():
        joiner.start()
        play(joiner, [0, 0, 0])

    threads = [PeerThread(host_side), PeerThread(join_side)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.finish()

    assert host.snapshot() == joiner.snapshot()
    assert host.winner == joiner.winner == Owner.PLAYER_ONE
    assert host_log.over == [Win(host.player_one)]
    assert join_log.over == [Win(joiner.player_one)]
    assert host.phase == joiner.phase == Phase.GAME_OVER


def test_linked_games_converge_on_a_draw(linked_games):
    host, joiner = linked_games
    host_log, join_log = EventLog(host), EventLog(joiner)

    def host_side():
        play(host, DRAW_SEQUENCE[0::2])

    def join_side():
        joiner.start()
        play(joiner, DRAW_SEQUENCE[1::2])

    threads = [PeerThread(host_side), PeerThread(join_side)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.finish()

    assert host.snapshot() == joiner.snapshot()
    assert host.move_counter == DRAW_THRESHOLD
    assert host_log.over == [Draw()]
    assert join_log.over == [Draw()]


def test_linked_rematch_loser_opens(linked_games):
    host, joiner = linked_games

    def host_side():
        play(host, [3, 3, 3, 3])
        host.setup_new_game()
        host.start()
        play(host, [6])

    def join_side():
        joiner.start()
        play(joiner, [0, 0, 0])
        joiner.setup_new_game()
        assert joiner.is_local_turn
        play(joiner, [1, 1])

    threads = [PeerThread(host_side), PeerThread(join_side)]
    for thread in threads:
        thread.start()

    threads[0].finish()
    # joiner still waits for an answer to its second move
    host.synchronizer.push(host.snapshot())
    threads[1].finish()

    assert host.board.get(1, 0) == host.board.get(1, 1) == Owner.PLAYER_TWO
    assert host.board.get(6, 0) == Owner.PLAYER_ONE
    assert joiner.board.get(6, 0) == Owner.PLAYER_ONE


def test_queue_channel_pair_round_trip():
    a, b = QueueChannel.pair()
    sender = StateSynchronizer(a, timeout=1)
    receiver = StateSynchronizer(b, timeout=1)
    state = decode(reply_after([1, 2, 3]))
    sender.push(state)
    assert receiver.pull() == state
