"""
events.py - Notifications emitted by a game

Board events: Placed, Reset, Synced. Game-over events: Win, Draw.
Listeners can match on the event type; each event also carries a
human-readable message for consoles that just want to print something.
"""

from dataclasses import dataclass
from typing import Callable, List, Union

from connect4sync.debug import debug
from connect4sync.game.player import Player
from connect4sync.utils import DRAW_MARKER


@dataclass(frozen=True)
class Placed:
    player: Player
    column: int
    row: int

    @property
    def message(self) -> str:
        return f"{self.player.name} placed a token."


@dataclass(frozen=True)
class Reset:
    @property
    def message(self) -> str:
        return "New game."


@dataclass(frozen=True)
class Synced:
    """Local state was overwritten by a snapshot from the peer."""
    move_counter: int

    @property
    def message(self) -> str:
        return "Received game state."


@dataclass(frozen=True)
class Win:
    player: Player

    @property
    def message(self) -> str:
        return self.player.name


@dataclass(frozen=True)
class Draw:
    @property
    def message(self) -> str:
        return DRAW_MARKER


BoardEvent = Union[Placed, Reset, Synced]
GameOverEvent = Union[Win, Draw]


class EventHook:
    """Ordered list of listeners for one kind of event."""

    def __init__(self, name: str):
        self.name = name
        self._listeners: List[Callable] = []

    def subscribe(self, listener: Callable) -> Callable:
        self._listeners.append(listener)
        return listener

    def emit(self, event) -> None:
        debug.debug(f"{self.name}: {event.message}", "game")
        for listener in list(self._listeners):
            listener(event)
