"""
toplevel Exception Classes

Usage errors come from the argument parser and never reach the interpreter.
Everything else is a runtime condition raised while replaying directives or
running the final action.
"""

from typing import Optional, Sequence
from .diagnostics import Diagnostic


class ToplevelError(Exception):
    """Base exception for launcher errors"""
    
    def __init__(self, message: str, diagnostic: Optional[Diagnostic] = None):
        super().__init__(message)
        self.message = message
        self.diagnostic = diagnostic


class ArgError(ToplevelError):
    """Malformed command line"""
    
    def __init__(self, message: str, *offending: str):
        from .diagnostics import usage_diagnostic
        super().__init__(message, usage_diagnostic(message, offending))
        self.offending: Sequence[str] = offending
    
    def __str__(self) -> str:
        if not self.offending:
            return self.message
        return f"{self.message}: {' '.join(self.offending)}"


class ConfigError(ToplevelError):
    """Unreadable or malformed launcher configuration"""
    pass


class LoadError(ToplevelError):
    """A file could not be read for loading"""
    
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ModuleLoadError(ToplevelError):
    """A structure could not be loaded into its package"""
    
    def __init__(self, message: str, structure_name: Optional[str] = None):
        super().__init__(message)
        self.structure_name = structure_name


class StructureNotFound(ModuleLoadError):
    """No structure is registered or found on the library path"""
    
    def __init__(self, name: str):
        super().__init__(f"Structure not found: {name}", name)
        self.name = name


class LibraryPathError(ToplevelError):
    """Invalid library path operation"""
    pass


class InternalError(ToplevelError):
    """Parser and interpreter disagree about the directive vocabulary"""
    pass
