"""
toplevel Diagnostics

Formats usage errors and runtime conditions for the diagnostic stream. Colour
is only used when the target stream is a terminal.
"""

import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence


class ErrorSeverity(Enum):
    """Severity levels for diagnostic messages"""
    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


SEVERITY_COLORS = {
    ErrorSeverity.FATAL: "\033[95m",    # Magenta
    ErrorSeverity.ERROR: "\033[91m",    # Red
    ErrorSeverity.WARNING: "\033[93m",  # Yellow
    ErrorSeverity.NOTE: "\033[94m",     # Blue
}
RESET_COLOR = "\033[0m"


@dataclass
class Diagnostic:
    """A diagnostic message with context"""
    severity: ErrorSeverity
    code: str  # Error code like "U001"
    message: str
    offending: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)


def format_diagnostic(diagnostic: Diagnostic, color: bool = False) -> str:
    """Format a diagnostic for display"""
    severity = diagnostic.severity.value
    if color:
        severity = f"{SEVERITY_COLORS[diagnostic.severity]}{severity}{RESET_COLOR}"

    header = f"{severity}[{diagnostic.code}]: {diagnostic.message}"
    if diagnostic.offending:
        header += ": " + " ".join(diagnostic.offending)

    lines = [header]
    for note in diagnostic.notes:
        lines.append(f"note: {note}")
    return "\n".join(lines)


# Usage error codes, keyed by the parser's messages
USAGE_CODES = {
    "Unknown switch": "U001",
    "Switch requires argument": "U002",
    "Bad file descriptor": "U003",
    "Meta-argument expansion failed": "U004",
    "Script directive requires -s or -sfd": "U005",
    "Switch conflicts with earlier switch": "U006",
}


def usage_diagnostic(message: str, offending: Sequence[str] = ()) -> Diagnostic:
    """Generate a usage error"""
    return Diagnostic(
        severity=ErrorSeverity.ERROR,
        code=USAGE_CODES.get(message, "U000"),
        message=message,
        offending=list(offending)
    )


def condition_diagnostic(error: BaseException, fatal: bool = False) -> Diagnostic:
    """Describe a runtime condition raised during replay or the final action"""
    from .exceptions import ToplevelError

    if isinstance(error, ToplevelError):
        if error.diagnostic is not None:
            return error.diagnostic
        message = error.message
        notes = []
    else:
        message = f"{type(error).__name__}: {error}"
        # Only the innermost frame; the full trace is logged at DEBUG
        frames = traceback.extract_tb(error.__traceback__)
        notes = [f"raised at {frames[-1].filename}:{frames[-1].lineno}"] if frames else []

    return Diagnostic(
        severity=ErrorSeverity.FATAL if fatal else ErrorSeverity.ERROR,
        code="C001" if not fatal else "C999",
        message=message,
        notes=notes
    )
