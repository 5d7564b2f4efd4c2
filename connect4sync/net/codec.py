"""
codec.py - JSON encoding of game state snapshots

Decoding always checks the snapshot's shape (7x6 grid, known owner tags,
counter range). The consistency checks (token count against the counter,
gravity, a winner that really holds four) run only in strict mode; by default
a well-formed snapshot from the peer is trusted as-is.
"""

import json
from typing import Any, List

from connect4sync.debug import debug
from connect4sync.errors import SnapshotError
from connect4sync.game.rules import check_for_four, floating_tokens
from connect4sync.game.state import GameState
from connect4sync.utils import COLS, DRAW_THRESHOLD, FIRST_MOVE, ROWS, Owner

FIELDS = ('player_ones_turn', 'board', 'winner', 'move_counter')


def encode(state: GameState) -> str:
    """
    Encode a snapshot as a JSON string.

    Args:
        state: Snapshot to encode

    Returns:
        JSON text
    """
    payload = {
        'player_ones_turn': state.player_ones_turn,
        'board': [[int(owner) for owner in column] for column in state.board],
        'winner': int(state.winner),
        'move_counter': state.move_counter,
    }
    return json.dumps(payload, separators=(',', ':'))


def decode(payload: str, strict: bool = False) -> GameState:
    """
    Decode a JSON snapshot.

    Args:
        payload: JSON text produced by encode()
        strict: Also reject snapshots that no legal game could produce

    Returns:
        The decoded snapshot

    Raises:
        SnapshotError: if the payload is malformed (or inconsistent, in strict mode)
    """
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")

    missing = [name for name in FIELDS if name not in data]
    if missing:
        raise SnapshotError(f"Snapshot is missing fields: {', '.join(missing)}")

    player_ones_turn = data['player_ones_turn']
    if not isinstance(player_ones_turn, bool):
        raise SnapshotError("player_ones_turn must be a boolean")

    state = GameState(
        player_ones_turn=player_ones_turn,
        board=_decode_board(data['board']),
        winner=_decode_owner(data['winner'], 'winner'),
        move_counter=_decode_counter(data['move_counter']),
    )

    if strict:
        check_consistency(state)

    debug.trace(f"Decoded snapshot at move {state.move_counter}", "codec")
    return state


def check_consistency(state: GameState) -> None:
    """
    Reject snapshots that cannot come out of a legal sequence of moves.

    Raises:
        SnapshotError: describing the first inconsistency found
    """
    board = state.to_board()

    tokens = board.token_count()
    if tokens != state.move_counter - FIRST_MOVE:
        raise SnapshotError(f"Board holds {tokens} tokens but move counter is {state.move_counter}")

    ones = sum(owner == Owner.PLAYER_ONE for column in state.board for owner in column)
    twos = tokens - ones
    if abs(ones - twos) > 1:
        raise SnapshotError(f"Token counts {ones}/{twos} cannot come from alternating turns")

    floating = floating_tokens(board)
    if floating:
        raise SnapshotError(f"Tokens above empty slots at {floating}")

    if state.winner != Owner.NONE and check_for_four(board, state.winner) is None:
        raise SnapshotError(f"{state.winner.name} is named winner without four in a row")

    if state.winner == Owner.NONE:
        for side in (Owner.PLAYER_ONE, Owner.PLAYER_TWO):
            if check_for_four(board, side) is not None:
                raise SnapshotError(f"{side.name} holds four in a row but no winner is set")


def _decode_owner(value: Any, field: str) -> Owner:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotError(f"{field} must be an integer owner tag, got {value!r}")
    try:
        return Owner(value)
    except ValueError as e:
        raise SnapshotError(f"{field} has unknown owner tag {value}") from e


def _decode_board(value: Any):
    if not isinstance(value, list) or len(value) != COLS:
        raise SnapshotError(f"board must be a list of {COLS} columns")

    columns: List[tuple] = []
    for index, column in enumerate(value):
        if not isinstance(column, list) or len(column) != ROWS:
            raise SnapshotError(f"board column {index} must hold {ROWS} slots")
        columns.append(tuple(_decode_owner(slot, f"board[{index}]") for slot in column))
    return tuple(columns)


def _decode_counter(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotError(f"move_counter must be an integer, got {value!r}")
    if not FIRST_MOVE <= value <= DRAW_THRESHOLD:
        raise SnapshotError(f"move_counter {value} outside [{FIRST_MOVE}, {DRAW_THRESHOLD}]")
    return value

