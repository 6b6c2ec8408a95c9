"""
Library search path

Ordered list of directories searched for structure files. Adding a directory
that is already present moves it rather than duplicating it.
"""

import logging
import os
import re
from typing import Any, Iterator, List, Mapping, Optional, Sequence

from ..config import default_library_path
from ..core.directives import PathOp, PathOpKind
from ..errors import LibraryPathError

logger = logging.getLogger(__name__)

_VARIABLE = re.compile(r"\$(\w+)|\$\{(\w+)\}")


class LibraryPath:
    """Mutable list of library directories"""

    def __init__(self, default: Optional[Sequence[str]] = None, home: str = "/",
                 environ: Optional[Mapping[str, str]] = None):
        self.default: List[str] = list(default_library_path() if default is None else default)
        self.home = home
        self.environ = os.environ if environ is None else environ
        self.directories: List[str] = list(self.default)

    def __iter__(self) -> Iterator[str]:
        return iter(self.directories)

    def __len__(self) -> int:
        return len(self.directories)

    def prepend(self, directory: str):
        self._discard(directory)
        self.directories.insert(0, directory)

    def append(self, directory: str):
        self._discard(directory)
        self.directories.append(directory)

    def prepend_expanded(self, directory: str):
        self.prepend(self.expand(directory))

    def append_expanded(self, directory: str):
        self.append(self.expand(directory))

    def prepend_script_dir(self, script: Any):
        self.prepend(self.script_dir(script))

    def append_script_dir(self, script: Any):
        self.append(self.script_dir(script))

    def clear(self):
        self.directories = []

    def reset(self):
        self.directories = list(self.default)

    def expand(self, directory: str) -> str:
        """Expand ~, ~user and $VAR references"""
        if directory == "~" or directory.startswith("~/"):
            directory = self.home + directory[1:]
        elif directory.startswith("~"):
            directory = os.path.expanduser(directory)

        def substitute(match):
            name = match.group(1) or match.group(2)
            return self.environ.get(name, match.group(0))

        return _VARIABLE.sub(substitute, directory)

    def script_dir(self, script: Any) -> str:
        """Directory holding the terminator script"""
        if not isinstance(script, (str, os.PathLike)):
            raise LibraryPathError("Script directory is only known for a script named with -s")
        return os.path.dirname(os.path.abspath(script))

    def apply(self, op: PathOp, script: Any = None):
        """Carry out a PathOp directive"""
        kind = op.kind
        logger.debug("Library path %s %s", kind.value, op.directory or "")

        if kind is PathOpKind.PREPEND:
            self.prepend(op.directory)
        elif kind is PathOpKind.APPEND:
            self.append(op.directory)
        elif kind is PathOpKind.PREPEND_EXPAND:
            self.prepend_expanded(op.directory)
        elif kind is PathOpKind.APPEND_EXPAND:
            self.append_expanded(op.directory)
        elif kind is PathOpKind.PREPEND_SCRIPT_DIR:
            self.prepend_script_dir(script)
        elif kind is PathOpKind.APPEND_SCRIPT_DIR:
            self.append_script_dir(script)
        elif kind is PathOpKind.CLEAR:
            self.clear()
        elif kind is PathOpKind.RESET_DEFAULT:
            self.reset()
        else:
            raise LibraryPathError(f"Unknown library path operation: {kind}")

    def find(self, *candidates: str) -> Optional[str]:
        """First existing file among the candidates, searching each directory in order"""
        for directory in self.directories:
            for candidate in candidates:
                path = os.path.join(directory, candidate)
                if os.path.isfile(path):
                    return os.path.abspath(path)
        return None

    def _discard(self, directory: str):
        if directory in self.directories:
            self.directories.remove(directory)
