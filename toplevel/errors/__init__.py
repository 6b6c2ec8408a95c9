"""
toplevel Error Handling System
"""

from .diagnostics import (
    Diagnostic,
    ErrorSeverity,
    format_diagnostic,
    usage_diagnostic,
    condition_diagnostic
)
from .exceptions import (
    ToplevelError,
    ArgError,
    ConfigError,
    LoadError,
    ModuleLoadError,
    StructureNotFound,
    LibraryPathError,
    InternalError
)
from .usage import EXIT_USAGE, USAGE_TEXT, report_usage_error, usage_exit

__all__ = [
    'Diagnostic',
    'ErrorSeverity',
    'format_diagnostic',
    'usage_diagnostic',
    'condition_diagnostic',
    'ToplevelError',
    'ArgError',
    'ConfigError',
    'LoadError',
    'ModuleLoadError',
    'StructureNotFound',
    'LibraryPathError',
    'InternalError',
    'EXIT_USAGE',
    'USAGE_TEXT',
    'report_usage_error',
    'usage_exit'
]
