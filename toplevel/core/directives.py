"""
Launcher directives

A directive is one parsed, not-yet-executed switch. The parser produces an
ordered tuple of them; the interpreter replays that tuple against an
execution context. Directives carry no identity beyond their position.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple, Union


class LoadTarget(Enum):
    """Package a file or the script is loaded into"""
    CURRENT = "current"
    CONFIG = "config"
    EXEC = "exec"


class PathOpKind(Enum):
    """Library path mutations"""
    PREPEND = "prepend"
    APPEND = "append"
    PREPEND_EXPAND = "prepend-expand"
    APPEND_EXPAND = "append-expand"
    PREPEND_SCRIPT_DIR = "prepend-script-dir"
    APPEND_SCRIPT_DIR = "append-script-dir"
    CLEAR = "clear"
    RESET_DEFAULT = "reset-default"


class TerminatorKind(Enum):
    """How switch scanning ended"""
    NONE = "none"
    EXPR = "expr"
    SCRIPT = "script"
    SCRIPT_FD = "script-fd"


@dataclass(frozen=True)
class OpenStructure:
    """Open a named structure into the current package"""
    name: str


@dataclass(frozen=True)
class NewPackage:
    """Create a fresh package and make it current; None means anonymous"""
    name: Optional[str]


@dataclass(frozen=True)
class SwitchPackage:
    """Make the package behind a structure current"""
    name: str


@dataclass(frozen=True)
class LoadFile:
    """Load a file into the current, config or exec package"""
    target: LoadTarget
    path: str


@dataclass(frozen=True)
class PathOp:
    """Mutate the library search path"""
    kind: PathOpKind
    directory: Optional[str] = None


@dataclass(frozen=True)
class DoScript:
    """Load the terminator script into the given package"""
    target: LoadTarget


Directive = Union[OpenStructure, NewPackage, SwitchPackage, LoadFile, PathOp, DoScript]


@dataclass
class ParseResult:
    """Everything the parser extracted from the command line"""
    directives: Tuple[Directive, ...] = ()
    terminator_kind: TerminatorKind = TerminatorKind.NONE
    terminator_value: Any = None  # script path, input handle or expression text
    top_entry: Optional[str] = None
    residual_args: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_script(self) -> bool:
        return self.terminator_kind in (TerminatorKind.SCRIPT, TerminatorKind.SCRIPT_FD)

    @property
    def does_script(self) -> bool:
        """True when a -ds/-dm/-de directive will load the script itself"""
        return any(isinstance(d, DoScript) for d in self.directives)

