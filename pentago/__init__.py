"""
pentago - Pentago game engine

This package provides the composite board of rotatable sub-boards, the
place/rotate turn cycle with change notifications, the five-in-a-row win scan,
a Gymnasium environment and a text interface for playing in the terminal.
"""

# Version number
__version__ = '0.1.0'
