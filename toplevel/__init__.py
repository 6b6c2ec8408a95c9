"""
toplevel - command-line front end for a package-aware Python launcher

The command line is parsed into an ordered list of directives plus one
terminating action, then the directives are replayed against an execution
context of packages and structures.
"""

from .core.directives import ParseResult, TerminatorKind
from .parser import parse, expand_meta_args
from .interpreter import ExecutionContext, run
from .cli import main

__version__ = "0.1.0"

__all__ = ['ParseResult', 'TerminatorKind', 'parse', 'expand_meta_args',
           'ExecutionContext', 'run', 'main']
