"""
toplevel core data model
"""

from .directives import (
    Directive,
    OpenStructure,
    NewPackage,
    SwitchPackage,
    LoadFile,
    PathOp,
    DoScript,
    LoadTarget,
    PathOpKind,
    TerminatorKind,
    ParseResult
)

__all__ = [
    'Directive',
    'OpenStructure',
    'NewPackage',
    'SwitchPackage',
    'LoadFile',
    'PathOp',
    'DoScript',
    'LoadTarget',
    'PathOpKind',
    'TerminatorKind',
    'ParseResult'
]
