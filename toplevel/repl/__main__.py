"""
Entry point for running a bare toplevel REPL as a module.

Usage: python3 -m toplevel.repl
"""

from .repl import main

if __name__ == "__main__":
    main()
