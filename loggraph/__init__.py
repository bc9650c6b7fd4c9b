"""
Reconstructs branch lines from the character art of `git log --graph`.
"""

__version__ = "0.1"

from loggraph.graph import LogGraph, LogFormatError, UnknownGlyphError, parseLog
