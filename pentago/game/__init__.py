"""
pentago.game - Core game mechanics for Pentago

This package contains the sub-board representation, the game engine and
the Gymnasium environment built on top of it.
"""

from pentago.game.board import SubBoard
from pentago.game.rules import PentagoGame, PentagoEnv

__all__ = ['SubBoard', 'PentagoGame', 'PentagoEnv']
