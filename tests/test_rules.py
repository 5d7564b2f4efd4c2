import pytest

from connect4sync.game.board import Board
from connect4sync.game.rules import (WinningRun, check_for_four, check_move, find_connecting,
                                     floating_tokens, is_draw)
from connect4sync.utils import COLS, DRAW_THRESHOLD, ROWS, Direction, Owner

P1, P2 = Owner.PLAYER_ONE, Owner.PLAYER_TWO


def board_with(slots, owner=P1):
    board = Board()
    for column, row in slots:
        board.set(column, row, owner)
    return board


@pytest.mark.parametrize("column", [-1, COLS, 100])
def test_check_move_rejects_out_of_range(column):
    assert check_move(Board(), column) == (False, -1)


def test_check_move_reports_landing_row():
    board = board_with([(5, 0), (5, 1)])
    assert check_move(board, 5) == (True, 2)
    assert check_move(board, 0) == (True, 0)


def test_check_move_rejects_full_column():
    board = board_with([(1, row) for row in range(ROWS)])
    assert check_move(board, 1) == (False, -1)


@pytest.mark.parametrize("slots, expected", [
    ([(0, 0), (1, 0), (2, 0), (3, 0)], WinningRun(Direction.HORIZONTAL, 0, 0)),
    ([(2, 3), (3, 3), (4, 3), (5, 3)], WinningRun(Direction.HORIZONTAL, 2, 3)),
    ([(6, 1), (6, 2), (6, 3), (6, 4)], WinningRun(Direction.VERTICAL, 6, 1)),
    ([(0, 0), (1, 1), (2, 2), (3, 3)], WinningRun(Direction.DIAGONAL, 0, 0)),
    ([(3, 0), (2, 1), (1, 2), (0, 3)], WinningRun(Direction.ANTI_DIAGONAL, 3, 0)),
    ([(6, 2), (5, 3), (4, 4), (3, 5)], WinningRun(Direction.ANTI_DIAGONAL, 6, 2)),
])
def test_check_for_four_finds_each_direction(slots, expected):
    run = check_for_four(board_with(slots), P1)
    assert run == expected
    assert sorted(run.slots()) == sorted(slots)


@pytest.mark.parametrize("slots", [
    [(0, 0), (1, 0), (2, 0)],
    [(0, 0), (1, 0), (3, 0), (4, 0)],
    [(2, 0), (2, 1), (2, 3), (2, 4)],
    [(0, 0), (1, 1), (2, 2), (4, 4)],
])
def test_check_for_four_ignores_short_or_broken_runs(slots):
    assert check_for_four(board_with(slots), P1) is None


def test_check_for_four_only_counts_the_given_owner():
    board = board_with([(0, 0), (1, 0), (2, 0), (3, 0)], owner=P2)
    assert check_for_four(board, P1) is None
    assert check_for_four(board, P2) is not None
    assert check_for_four(board, Owner.NONE) is None


def test_horizontal_is_reported_before_vertical():
    board = board_with([(0, 0), (1, 0), (2, 0), (3, 0), (6, 0), (6, 1), (6, 2), (6, 3)])
    assert check_for_four(board, P1).direction == Direction.HORIZONTAL


def test_find_connecting_is_capped_at_four():
    board = board_with([(column, 0) for column in range(6)])
    assert find_connecting(board, 0, 0, Direction.HORIZONTAL, P1) == 4
    assert find_connecting(board, 4, 0, Direction.HORIZONTAL, P1) == 2
    assert find_connecting(board, 0, 1, Direction.HORIZONTAL, P1) == 0


def test_is_draw_only_at_threshold_without_winner():
    assert is_draw(DRAW_THRESHOLD, Owner.NONE)
    assert not is_draw(DRAW_THRESHOLD - 1, Owner.NONE)
    assert not is_draw(DRAW_THRESHOLD, P1)


def test_floating_tokens():
    board = board_with([(0, 0), (0, 1), (3, 2)])
    assert floating_tokens(board) == [(3, 2)]
