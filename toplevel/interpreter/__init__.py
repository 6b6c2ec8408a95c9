"""
toplevel directive interpreter
"""

from .loader import FileLoader, open_fd_port
from .context import ExecutionContext
from .replay import DirectiveInterpreter, run

__all__ = ['FileLoader', 'open_fd_port', 'ExecutionContext', 'DirectiveInterpreter', 'run']
