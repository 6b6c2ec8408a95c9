"""
Entry point for running toplevel as a module.

Usage: python3 -m toplevel [switch ...]
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
