"""
toplevel File Loader

Reads Python source from a path or an open handle and executes it into a
package namespace.
"""

import logging
import os
from typing import Any, List, Tuple, TextIO, Union

from ..errors import ArgError, LoadError

logger = logging.getLogger(__name__)

Source = Union[str, os.PathLike, TextIO]


def open_fd_port(fd: int) -> TextIO:
    """Wrap a file descriptor in a text input handle.

    The handle does not own the descriptor: closing or collecting it leaves the
    descriptor open for whoever passed it to us.
    """
    try:
        return os.fdopen(fd, "r", encoding="utf-8", closefd=False)
    except (OSError, ValueError, OverflowError, TypeError) as e:
        raise ArgError("Bad file descriptor", "-sfd", str(fd)) from e


def source_name(source: Any) -> str:
    """Name used for tracebacks and log messages"""
    if hasattr(source, "read"):
        name = getattr(source, "name", None)
        if isinstance(name, int):
            return f"<fd {name}>"
        return name if isinstance(name, str) else "<input>"
    return os.fspath(source)


class FileLoader:
    """Executes files into packages"""

    def __init__(self, encoding: str = "utf-8", quiet: bool = False):
        self.encoding = encoding
        self.quiet = quiet  # Silence every load, not just -l ones
        self.history: List[str] = []  # Names of everything loaded, in order

    def load(self, source: Source, package, quiet: bool = False) -> None:
        """Load a file or handle into a package namespace"""
        name, text = self._read(source)

        if not (quiet or self.quiet):
            logger.info("Loading %s into %s", name, package)

        code = compile(text, name, "exec")
        self.history.append(name)
        exec(code, package.namespace)

    def evaluate(self, text: str, package, name: str = "<string>") -> Any:
        """Evaluate an expression, or execute statements, in a package.

        Returns the expression's value, or None for statements.
        """
        try:
            code = compile(text, name, "eval")
        except SyntaxError:
            exec(compile(text, name, "exec"), package.namespace)
            return None
        return eval(code, package.namespace)

    def _read(self, source: Source) -> Tuple[str, str]:
        name = source_name(source)

        if hasattr(source, "read"):
            try:
                return name, source.read()
            except OSError as e:
                raise LoadError(f"Cannot read {name}: {e.strerror or e}", name) from e
            except UnicodeDecodeError as e:
                raise LoadError(f"Cannot decode {name}: {e.reason}", name) from e

        try:
            with open(source, "r", encoding=self.encoding) as f:
                return name, f.read()
        except FileNotFoundError as e:
            raise LoadError(f"File not found: {name}", name) from e
        except UnicodeDecodeError as e:
            raise LoadError(f"Cannot decode {name}: {e.reason}", name) from e
        except OSError as e:
            raise LoadError(f"Cannot load {name}: {e.strerror or e}", name) from e
