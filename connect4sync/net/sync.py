"""
sync.py - Pushing and pulling game state snapshots over a channel
"""

from typing import Optional

from connect4sync.debug import debug
from connect4sync.game.state import GameState
from connect4sync.net.channel import Channel
from connect4sync.net.codec import decode, encode


class StateSynchronizer:
    """
    Moves GameState snapshots between this instance and its peer.

    Args:
        channel: Connected channel to the peer
        timeout: Seconds to wait for the peer's state, None to wait indefinitely
        strict: Reject snapshots that fail the consistency checks
    """

    def __init__(self, channel: Channel, timeout: Optional[float] = None, strict: bool = False):
        self.channel = channel
        self.timeout = timeout
        self.strict = strict

    def push(self, state: GameState) -> None:
        debug.debug(f"Sending state at move {state.move_counter}", "sync")
        self.channel.send(encode(state))

    def pull(self) -> GameState:
        debug.debug("Waiting for peer state", "sync")
        state = decode(self.channel.receive(self.timeout), strict=self.strict)
        debug.debug(f"Got state at move {state.move_counter}", "sync")
        return state

    def cancel(self) -> None:
        self.channel.cancel()

    def close(self) -> None:
        self.channel.close()
