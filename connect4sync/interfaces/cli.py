"""
cli.py - Command-line interface for connect4sync

Commands:
    play    two players sharing one console (hotseat)
    host    wait for a peer to join, play PLAYER_ONE
    join    connect to a hosting peer, play PLAYER_TWO
    config  show the effective settings, optionally save them
"""

import argparse
import sys
from typing import List, Optional

from connect4sync.config import CONFIG_FILE, Settings, apply_overrides, load_settings, save_settings
from connect4sync.debug import debug
from connect4sync.errors import ConfigError, PeerTimeoutError, SyncError
from connect4sync.game.events import Placed, Reset, Synced, Win
from connect4sync.game.session import Game
from connect4sync.net.channel import Channel, connect, listen
from connect4sync.net.sync import StateSynchronizer
from connect4sync.utils import COLS

QUIT = -1


class SimpleCLI:
    """Console front end for hotseat and networked games."""

    def __init__(self, argv: Optional[List[str]] = None):
        self.argv = argv
        self.args = None
        self.settings = Settings()

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog='connect4sync',
            description='Connect Four with peer-to-peer state synchronization',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
    Examples:
    # Two players on this console
    python run.py play

    # Host a networked game, then join it from another machine
    python run.py host --port 8888 --name alice
    python run.py join --host 192.168.1.20 --port 8888 --name bob
            """,
        )
        parser.add_argument('--config', default=CONFIG_FILE, help='Settings file (JSON)')
        parser.add_argument('--debug', action='store_true', help='Shortcut for --debug_level debug')
        parser.add_argument('--debug_level', choices=['none', 'error', 'warning', 'info', 'debug', 'trace'],
                            help='Logging verbosity')
        parser.add_argument('--log_file', help='Also write log messages to this file')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', help='Play a hotseat game')
        play_parser.add_argument('--player_one', help='Name of the first player')
        play_parser.add_argument('--player_two', help='Name of the second player')

        for name, help_text in (('host', 'Host a networked game'), ('join', 'Join a networked game')):
            net_parser = subparsers.add_parser(name, help=help_text)
            net_parser.add_argument('--host', help='Address to bind (host) or connect to (join)')
            net_parser.add_argument('--port', type=int, help='TCP port')
            net_parser.add_argument('--timeout', type=float,
                                    help='Seconds to wait for the peer before giving up')
            net_parser.add_argument('--name', help='Your player name')
            net_parser.add_argument('--strict', action='store_true', default=None,
                                    help='Reject inconsistent snapshots from the peer')

        config_parser = subparsers.add_parser('config', help='Show effective settings')
        config_parser.add_argument('--save', action='store_true', help='Write them to the settings file')

        return parser

    def parse_args(self) -> None:
        """Parse command-line arguments and load settings."""
        self.args = self.build_parser().parse_args(self.argv)

        self.settings = load_settings(self.args.config)
        overrides = {
            'log_file': self.args.log_file,
            'debug_level': 'debug' if self.args.debug else self.args.debug_level,
        }
        if self.args.command == 'play':
            overrides.update(player_one=self.args.player_one, player_two=self.args.player_two)
        elif self.args.command in ('host', 'join'):
            side = 'player_one' if self.args.command == 'host' else 'player_two'
            overrides.update(host=self.args.host, port=self.args.port, timeout=self.args.timeout,
                             strict_snapshots=self.args.strict)
            overrides[side] = self.args.name
        self.settings = apply_overrides(self.settings, **overrides)

        debug.set_from_string(self.settings.debug_level)
        if self.settings.log_file:
            debug.configure(log_file=self.settings.log_file)

    def run(self) -> int:
        """Run the CLI based on the parsed arguments."""
        try:
            if not self.args:
                self.parse_args()

            if self.args.command == 'play':
                self.play_hotseat()
            elif self.args.command == 'host':
                self.play_networked(hosting=True)
            elif self.args.command == 'join':
                self.play_networked(hosting=False)
            elif self.args.command == 'config':
                self.show_config()
            else:
                print("Please specify a command. Use --help for options.")
                return 1
        except ConfigError as e:
            print(f"Configuration error: {e}")
            return 2
        except KeyboardInterrupt:
            print("\nInterrupted.")
            return 130
        return 0

    def new_game(self, synchronizer: Optional[StateSynchronizer] = None, go_first: bool = True) -> Game:
        game = Game(synchronizer, go_first=go_first,
                    player_one_name=self.settings.player_one,
                    player_two_name=self.settings.player_two)
        game.on_board_changed(lambda event: self.show_board(game, event))
        game.on_game_over(self.show_result)
        return game

    def show_board(self, game: Game, event) -> None:
        if isinstance(event, Placed):
            print(f"\n{event.message} (column {event.column})")
        elif isinstance(event, (Reset, Synced)):
            print(f"\n{event.message}")
        print(game.render())

    def show_result(self, event) -> None:
        if isinstance(event, Win):
            print(f"\nGame over! {event.player.name} wins!")
        else:
            print("\nGame over! It's a draw!")

    def play_hotseat(self) -> None:
        """Play a Connect Four game with both players at this console."""
        game = self.new_game()
        print("Starting a new Connect Four game!")
        print(f"Enter column number (0-{COLS - 1}) to make a move, 'q' to quit.")
        print(game.render())

        while True:
            while not game.is_over:
                move = self.get_human_move(game.active_player.name)
                if move is None:
                    continue
                if move == QUIT:
                    print("Quitting game.")
                    return
                if not game.make_move(move):
                    print(f"Column {move} is full.")

            if not self.ask_rematch():
                return
            game.setup_new_game()

    def play_networked(self, hosting: bool) -> None:
        """Play against a peer, hosting or joining."""
        settings = self.settings
        try:
            if hosting:
                print(f"Waiting for an opponent on {settings.host}:{settings.port} ...")
                channel = listen(settings.host, settings.port, settings.timeout)
            else:
                print(f"Connecting to {settings.host}:{settings.port} ...")
                channel = connect(settings.host, settings.port, settings.timeout)
        except SyncError as e:
            print(f"Could not reach a peer: {e}")
            return

        self._run_networked_match(channel, hosting)

    def _run_networked_match(self, channel: Channel, hosting: bool) -> None:
        synchronizer = StateSynchronizer(channel, self.settings.timeout, self.settings.strict_snapshots)
        game = self.new_game(synchronizer, go_first=hosting)
        me = game.player_for(game.instance_id)
        print(f"Connected. You are {me.name} ({str(me.side)}).")
        print(game.render())

        try:
            while True:
                if not game.is_local_turn:
                    print("Waiting for the other player ...")
                game.start()

                while not game.is_over:
                    move = self.get_human_move(me.name)
                    if move is None:
                        continue
                    if move == QUIT:
                        print("Leaving game.")
                        return
                    if not game.make_move(move):
                        print(f"Column {move} is full.")

                if not self.ask_rematch():
                    return
                game.setup_new_game()
        except PeerTimeoutError as e:
            print(f"\nGave up waiting: {e}")
        except SyncError as e:
            print(f"\nConnection to peer lost: {e}")
        finally:
            synchronizer.close()

    def get_human_move(self, player_name: str) -> Optional[int]:
        """
        Read a column from the console.

        Returns:
            Column index, QUIT, or None if the input was not understood
        """
        user_input = input(f"{player_name}'s move (0-{COLS - 1}, q): ").strip().lower()
        if user_input == 'q':
            return QUIT
        try:
            move = int(user_input)
        except ValueError:
            print("Invalid input. Please enter a column number or 'q'.")
            return None

        if not 0 <= move < COLS:
            print(f"Column must be between 0 and {COLS - 1}.")
            return None
        return move

    def ask_rematch(self) -> bool:
        return input("Play again? (y/n) [n]: ").strip().lower() == 'y'

    def show_config(self) -> None:
        for name, value in vars(self.settings).items():
            print(f"{name}: {value}")
        if self.args.save:
            save_settings(self.settings, self.args.config)
            print(f"Saved to {self.args.config}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    return SimpleCLI(argv).run()


if __name__ == "__main__":
    sys.exit(main())
