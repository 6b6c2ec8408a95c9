"""
Usage reporting for command-line errors
"""

import sys
from typing import NoReturn, Optional, TextIO

from .diagnostics import format_diagnostic
from .exceptions import ArgError

EXIT_USAGE = -1

USAGE_TEXT = """\
Usage: toplevel [meta-arg] [switch ...] [end-option arg ...]

meta-arg: \\ <script-file-name>

switch:   -e <entry-point>      Specify top-level entry point.
          -o <structure>        Open structure in current package.
          -m <structure>        Switch to the structure's package.
          -n <new-package>      Switch to new package (#f for anonymous).

          -lm <file-name>       Load file into the config package.
          -le <file-name>       Load file into the exec package.
          -l  <file-name>       Load file into current package.

          -dm                   Do script module (load script into config package).
          -de                   Do script exec (load script into exec package).
          -ds                   Do script (load script into current package).

          +lp  <dir>            Add directory to front of library path.
          lp+  <dir>            Add directory to end of library path.
          +lpe <dir>            +lp with ~user and $VAR expansion.
          lpe+ <dir>            lp+ with ~user and $VAR expansion.
          +lpsd                 Add script directory to front of library path.
          lpsd+                 Add script directory to end of library path.
          -lp-clear             Clear the library path.
          -lp-default           Reset the library path to its default.

end-option: -s <script>         Specify script.
            -sfd <num>          Script is read from file descriptor <num>.
            -c <exp>            Evaluate expression.
            --                  Interactive session.
"""


def report_usage_error(error: ArgError, stream: Optional[TextIO] = None):
    """Print the offending switch and the usage synopsis"""
    stream = stream or sys.stderr
    color = hasattr(stream, "isatty") and stream.isatty()
    print(format_diagnostic(error.diagnostic, color=color), file=stream)
    print(USAGE_TEXT, file=stream, end="")
    stream.flush()


def usage_exit(error: ArgError, stream: Optional[TextIO] = None) -> NoReturn:
    """Report a usage error and terminate the process"""
    report_usage_error(error, stream)
    sys.exit(EXIT_USAGE)
