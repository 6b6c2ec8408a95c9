"""
toplevel interactive mode
"""

from .repl import REPL, main

__all__ = ['REPL', 'main']
