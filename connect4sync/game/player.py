"""
player.py - Player identities

A player is just a name and the side it plays. Where moves come from
(keyboard, network peer) is decided outside the engine.
"""

from dataclasses import dataclass

from connect4sync.utils import Owner


@dataclass(frozen=True)
class Player:
    name: str
    side: Owner


def create_player(name: str, side: Owner) -> Player:
    """
    Create a player for one side of the board.

    Args:
        name: Display name
        side: Owner.PLAYER_ONE or Owner.PLAYER_TWO

    Returns:
        The new player
    """
    if side == Owner.NONE:
        raise ValueError("A player must play PLAYER_ONE or PLAYER_TWO")
    name = name.strip()
    if not name:
        raise ValueError("Player name must not be empty")
    return Player(name=name, side=Owner(side))
