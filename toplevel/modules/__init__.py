"""
toplevel packages, structures and library path
"""

from .module_system import Package, Structure, ModuleSystem
from .library_path import LibraryPath

__all__ = ['Package', 'Structure', 'ModuleSystem', 'LibraryPath']
