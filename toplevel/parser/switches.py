"""
Switch table for the launcher command line

Maps switch text to its arity and to what it produces: a directive, the
top-level entry, or a terminator that ends scanning.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from ..core.directives import (
    Directive, OpenStructure, NewPackage, SwitchPackage, LoadFile, PathOp, DoScript,
    LoadTarget, PathOpKind, TerminatorKind
)

NO_NAME = "#f"


class SwitchRole(Enum):
    DIRECTIVE = "directive"
    ENTRY = "entry"
    TERMINATOR = "terminator"


@dataclass(frozen=True)
class SwitchSpec:
    """How one switch is scanned"""
    text: str
    arity: int
    role: SwitchRole
    build: Optional[Callable[[Optional[str]], Directive]] = None
    needs_script: bool = False
    terminator: Optional[TerminatorKind] = None


def _package_name(arg: str) -> Optional[str]:
    return None if arg == NO_NAME else arg


def _directive(text: str, arity: int, build, needs_script: bool = False) -> SwitchSpec:
    return SwitchSpec(text, arity, SwitchRole.DIRECTIVE, build=build, needs_script=needs_script)


def _terminator(text: str, arity: int, kind: TerminatorKind) -> SwitchSpec:
    return SwitchSpec(text, arity, SwitchRole.TERMINATOR, terminator=kind)


_SPECS = [
    # Terminators
    _terminator("-c", 1, TerminatorKind.EXPR),
    _terminator("-s", 1, TerminatorKind.SCRIPT),
    _terminator("-sfd", 1, TerminatorKind.SCRIPT_FD),
    _terminator("--", 0, TerminatorKind.NONE),

    # No-argument directives
    _directive("-ds", 0, lambda _: DoScript(LoadTarget.CURRENT), needs_script=True),
    _directive("-dm", 0, lambda _: DoScript(LoadTarget.CONFIG), needs_script=True),
    _directive("-de", 0, lambda _: DoScript(LoadTarget.EXEC), needs_script=True),
    _directive("+lpsd", 0, lambda _: PathOp(PathOpKind.PREPEND_SCRIPT_DIR)),
    _directive("lpsd+", 0, lambda _: PathOp(PathOpKind.APPEND_SCRIPT_DIR)),
    _directive("-lp-default", 0, lambda _: PathOp(PathOpKind.RESET_DEFAULT)),
    _directive("-lp-clear", 0, lambda _: PathOp(PathOpKind.CLEAR)),

    # Single-argument directives
    _directive("-l", 1, lambda arg: LoadFile(LoadTarget.CURRENT, arg)),
    _directive("-lm", 1, lambda arg: LoadFile(LoadTarget.CONFIG, arg)),
    _directive("-le", 1, lambda arg: LoadFile(LoadTarget.EXEC, arg)),
    _directive("lp+", 1, lambda arg: PathOp(PathOpKind.APPEND, arg)),
    _directive("+lp", 1, lambda arg: PathOp(PathOpKind.PREPEND, arg)),
    _directive("lpe+", 1, lambda arg: PathOp(PathOpKind.APPEND_EXPAND, arg)),
    _directive("+lpe", 1, lambda arg: PathOp(PathOpKind.PREPEND_EXPAND, arg)),

    # Structure and package names
    _directive("-o", 1, lambda arg: OpenStructure(arg)),
    _directive("-n", 1, lambda arg: NewPackage(_package_name(arg))),
    _directive("-m", 1, lambda arg: SwitchPackage(arg)),

    SwitchSpec("-e", 1, SwitchRole.ENTRY),
]

SWITCHES: Dict[str, SwitchSpec] = {spec.text: spec for spec in _SPECS}


def lookup_switch(text: str) -> Optional[SwitchSpec]:
    """Find the spec for a switch, or None if it is not a switch"""
    return SWITCHES.get(text)
