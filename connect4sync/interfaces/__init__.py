"""
connect4sync.interfaces - User interfaces for connect4sync

This package contains the console front end for hotseat and networked
games. It is not imported by the engine.
"""

__all__ = []
