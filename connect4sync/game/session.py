"""
session.py - Turn and session control for a Connect Four match

The Game class owns the board, both players, the move counter and the
active-player pointer. make_move() runs validate -> place -> detect ->
advance turn and, when a peer is attached, pushes the resulting state and
waits for the peer's reply.
"""

from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Optional

from connect4sync.debug import debug
from connect4sync.game.board import Board
from connect4sync.game.events import Draw, EventHook, Placed, Reset, Synced, Win
from connect4sync.game.player import Player, create_player
from connect4sync.game.rules import WinningRun, check_for_four, check_move, is_draw
from connect4sync.game.state import GameState
from connect4sync.utils import DRAW_THRESHOLD, FIRST_MOVE, Owner

if TYPE_CHECKING:
    from connect4sync.net.sync import StateSynchronizer


class Phase(Enum):
    """Where an instance is in the turn cycle."""
    LOCAL_TURN = auto()
    SENDING_STATE = auto()
    WAITING_FOR_PEER = auto()
    GAME_OVER = auto()


class Game:
    """
    A single Connect Four match, optionally mirrored with a remote peer.

    Args:
        synchronizer: Link to the peer, or None for a hotseat game
        go_first: Whether this instance plays PLAYER_ONE when networked
        player_one_name: Display name of PLAYER_ONE
        player_two_name: Display name of PLAYER_TWO
    """

    def __init__(self, synchronizer: Optional["StateSynchronizer"] = None, go_first: bool = True,
                 player_one_name: str = "player1", player_two_name: str = "player2"):
        debug.debug("Initializing Game", "game")
        self.synchronizer = synchronizer
        self.board = Board()
        self.player_one = create_player(player_one_name, Owner.PLAYER_ONE)
        self.player_two = create_player(player_two_name, Owner.PLAYER_TWO)
        self.active_player: Player = self.player_one
        self.instance_id = Owner.PLAYER_ONE if go_first else Owner.PLAYER_TWO
        self.move_counter = FIRST_MOVE
        self.winner = Owner.NONE
        self.winning_run: Optional[WinningRun] = None
        self.phase = self._opening_phase()

        self.board_changed = EventHook("BoardChanged")
        self.game_over = EventHook("GameOver")

    def on_board_changed(self, listener: Callable) -> Callable:
        return self.board_changed.subscribe(listener)

    def on_game_over(self, listener: Callable) -> Callable:
        return self.game_over.subscribe(listener)

    @property
    def is_networked(self) -> bool:
        return self.synchronizer is not None

    @property
    def is_over(self) -> bool:
        return self.winner != Owner.NONE or self.move_counter >= DRAW_THRESHOLD

    @property
    def is_local_turn(self) -> bool:
        """True if this instance may call make_move now."""
        if self.is_over:
            return False
        return not self.is_networked or self.active_player.side == self.instance_id

    def player_for(self, side: Owner) -> Player:
        return self.player_one if side == Owner.PLAYER_ONE else self.player_two

    def setup_new_game(self) -> None:
        """
        Reset the board for a rematch.

        The loser of a decided game starts the next one; after a draw the
        active player is left as it was.
        """
        debug.info("Setting up new game", "game")
        self.move_counter = FIRST_MOVE
        self.board.reset()
        if self.winner != Owner.NONE:
            self.active_player = self.player_for(self.winner.other())
            self.winner = Owner.NONE
        self.winning_run = None
        self.phase = self._opening_phase()
        self.board_changed.emit(Reset())

    def start(self) -> None:
        """When networked and the peer moves first, wait for its move."""
        if self.is_networked and self.active_player.side != self.instance_id:
            self._receive_state()

    def make_move(self, column: int) -> bool:
        """
        Drop a token for the active player.

        Args:
            column: Column to play (0-indexed)

        Returns:
            True if the token was placed, False if the column is out of range or full
        """
        if self.is_over:
            debug.warning(f"Move in column {column} ignored, game is over", "game")
            return False

        legal, row = check_move(self.board, column)
        if not legal:
            return False

        mover = self.active_player
        self._place_token(column, row)

        debug.start_timer("win_check")
        run = check_for_four(self.board, mover.side)
        debug.end_timer("win_check", "game")
        if run is not None:
            self.winner = mover.side
            self.winning_run = run
            debug.info(f"{mover.name} wins on move {self.move_counter}", "game")

        self._advance_turn()

        if run is not None:
            self.phase = Phase.GAME_OVER
            self.game_over.emit(Win(mover))
        elif is_draw(self.move_counter, self.winner):
            debug.info("Game ends in a draw", "game")
            self.phase = Phase.GAME_OVER
            self.game_over.emit(Draw())

        if self.is_networked:
            self._send_state()

        return True

    def snapshot(self) -> GameState:
        return GameState(
            player_ones_turn=self.active_player is self.player_one,
            board=self.board.cells(),
            winner=self.winner,
            move_counter=self.move_counter,
        )

    def apply_snapshot(self, state: GameState) -> None:
        """
        Overwrite local state with a snapshot from the peer.

        The snapshot is taken as-is; the board is not re-validated here.
        """
        self.active_player = self.player_one if state.player_ones_turn else self.player_two
        self.board = state.to_board()
        self.winner = state.winner
        self.move_counter = state.move_counter
        self.winning_run = check_for_four(self.board, self.winner)
        self.phase = Phase.GAME_OVER if self.is_over else Phase.LOCAL_TURN

        self.board_changed.emit(Synced(self.move_counter))
        if self.winner != Owner.NONE:
            self.game_over.emit(Win(self.player_for(self.winner)))
        elif self.move_counter == DRAW_THRESHOLD:
            self.game_over.emit(Draw())

    def render(self) -> str:
        return self.board.render()

    def _opening_phase(self) -> Phase:
        if self.is_networked and self.active_player.side != self.instance_id:
            return Phase.WAITING_FOR_PEER
        return Phase.LOCAL_TURN

    def _place_token(self, column: int, row: int) -> None:
        self.board.set(column, row, self.active_player.side)
        self.board_changed.emit(Placed(self.active_player, column, row))

    def _advance_turn(self) -> None:
        self.move_counter += 1
        self.active_player = self.player_two if self.active_player is self.player_one else self.player_one
        debug.debug(f"Move {self.move_counter}: {self.active_player.name} to play", "game")

    def _send_state(self) -> None:
        finished = self.is_over
        self.phase = Phase.SENDING_STATE
        self.synchronizer.push(self.snapshot())
        if finished:
            self.phase = Phase.GAME_OVER
            return
        self._receive_state()

    def _receive_state(self) -> None:
        self.phase = Phase.WAITING_FOR_PEER
        state = self.synchronizer.pull()
        self.apply_snapshot(state)
