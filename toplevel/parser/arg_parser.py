"""
toplevel Argument Parser

Scans the command line left to right and produces the ordered directives,
the terminator and the top-level entry. Parsing stops at the first
terminating switch; whatever follows it is passed through untouched.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, TextIO

from ..core.directives import Directive, ParseResult, TerminatorKind
from ..errors import ArgError
from ..interpreter.loader import open_fd_port
from .switches import SwitchRole, SwitchSpec, lookup_switch

MISSING_SCRIPT = "Script directive requires -s or -sfd"
CONFLICT = "Switch conflicts with earlier switch"


@dataclass
class ScanState:
    """Accumulator threaded through the scan"""
    directives: List[Directive] = field(default_factory=list)
    top_entry: Optional[str] = None
    script_switch: Optional[str] = None  # First -ds/-dm/-de seen

    @property
    def needs_script(self) -> bool:
        return self.script_switch is not None

    def result(self, kind: TerminatorKind, value=None, residual: Sequence[str] = ()) -> ParseResult:
        return ParseResult(
            directives=tuple(self.directives),
            terminator_kind=kind,
            terminator_value=value,
            top_entry=self.top_entry,
            residual_args=tuple(residual)
        )


def parse(args: Sequence[str],
          fd_opener: Callable[[int], TextIO] = open_fd_port) -> ParseResult:
    """Parse a command line (without the program name) into a ParseResult"""
    tokens = list(args)
    state = ScanState()
    pos = 0

    while pos < len(tokens):
        switch = tokens[pos]
        spec = lookup_switch(switch)
        if spec is None:
            raise ArgError("Unknown switch", switch)

        argument = None
        if spec.arity:
            if pos + 1 >= len(tokens):
                raise ArgError("Switch requires argument", switch)
            argument = tokens[pos + 1]
        pos += 1 + spec.arity

        if spec.role is SwitchRole.TERMINATOR:
            return _terminate(state, spec, argument, tokens[pos:], fd_opener)

        if spec.role is SwitchRole.ENTRY:
            state.top_entry = argument
            continue

        state.directives.append(spec.build(argument))
        if spec.needs_script and state.script_switch is None:
            state.script_switch = switch

    # Running out of switches acts like "--"
    _check_no_pending_script(state, None)
    return state.result(TerminatorKind.NONE)


def _terminate(state: ScanState, spec: SwitchSpec, argument: Optional[str],
               rest: Sequence[str], fd_opener: Callable[[int], TextIO]) -> ParseResult:
    kind = spec.terminator

    if kind is TerminatorKind.EXPR:
        if state.needs_script:
            raise ArgError(CONFLICT, spec.text, state.script_switch)
        if state.top_entry is not None:
            raise ArgError(CONFLICT, spec.text, "-e")
        return state.result(kind, argument, rest)

    if kind is TerminatorKind.SCRIPT:
        return state.result(kind, argument, rest)

    if kind is TerminatorKind.SCRIPT_FD:
        # Plain ASCII digits only; int() would also take "+7", " 7" and "7_0"
        if not (argument.isascii() and argument.isdigit()):
            raise ArgError("Bad file descriptor", spec.text, argument)
        return state.result(kind, fd_opener(int(argument)), rest)

    _check_no_pending_script(state, spec.text)
    return state.result(kind, None, rest)


def _check_no_pending_script(state: ScanState, terminator: Optional[str]):
    if not state.needs_script:
        return
    offending = [state.script_switch]
    if terminator:
        offending.append(terminator)
    raise ArgError(MISSING_SCRIPT, *offending)
