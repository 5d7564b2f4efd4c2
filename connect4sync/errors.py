"""
errors.py - Exception hierarchy for connect4sync

Illegal moves are not errors (make_move simply returns False); everything
here signals a programming error, a broken peer link or a bad config file.
"""


class Connect4SyncError(Exception):
    """Base class for all connect4sync errors."""


class BoardIndexError(Connect4SyncError, IndexError):
    """Raised when a board slot outside the 7x6 grid is addressed."""

    def __init__(self, column: int, row: int):
        super().__init__(f"Slot ({column}, {row}) is outside the board")
        self.column = column
        self.row = row


class SyncError(Connect4SyncError):
    """Base class for failures while exchanging state with the peer."""


class PeerTimeoutError(SyncError):
    """The peer did not deliver a snapshot before the receive deadline."""

    def __init__(self, timeout: float):
        super().__init__(f"No state received from peer within {timeout:.1f}s")
        self.timeout = timeout


class SyncCancelledError(SyncError):
    """A pending receive was aborted through the channel's cancel token."""


class ChannelClosedError(SyncError):
    """The peer disconnected or the transport failed."""


class SnapshotError(SyncError):
    """A received payload could not be decoded into a valid game state."""


class ConfigError(Connect4SyncError):
    """The settings file could not be read or holds invalid values."""
