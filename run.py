#!/usr/bin/env python3
"""
run.py - Main entry point for connect4sync

    python run.py play                      # hotseat game on this console
    python run.py host --name alice         # wait for a peer, play first
    python run.py join --host HOST --name bob
    python run.py config --save             # write effective settings
"""

import sys

from connect4sync.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
