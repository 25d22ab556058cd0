"""
pentago.interfaces - User interfaces for Pentago

This package contains the front ends that drive the game engine.
"""

# Don't import anything here to avoid circular imports
__all__ = []
