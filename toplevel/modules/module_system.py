"""
toplevel Module System

Packages, structures and the registry that binds structure names in the
config package:

- A package is a namespace that files are loaded into. Each package has its
  own builtins tower, copied from the package it was derived from.
- A structure is a named export interface over a package. Structures are
  registered by name in the config package and found there, or on the
  library path as ``<name>.py`` or ``<name>/__init__.py``.
- Structures backed by a source file are loaded lazily, once.
"""

import builtins
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set

from ..errors import ModuleLoadError, StructureNotFound

logger = logging.getLogger(__name__)

CONFIG_HELPERS = frozenset({"define_structure"})


class Package:
    """A namespace that code is loaded into"""

    def __init__(self, name: Optional[str] = None, tower: Optional[Dict[str, Any]] = None):
        self.name = name
        self.tower: Dict[str, Any] = dict(vars(builtins) if tower is None else tower)
        self.namespace: Dict[str, Any] = {
            "__builtins__": self.tower,
            "__name__": name or "__anonymous__",
        }

    @classmethod
    def derived_from(cls, parent: 'Package', name: Optional[str] = None) -> 'Package':
        """Create an empty package whose tower is a copy of the parent's"""
        return cls(name, parent.tower)

    def define(self, name: str, value: Any):
        self.namespace[name] = value

    def lookup(self, name: str) -> Any:
        """Look up a binding, falling back to the tower"""
        if name in self.namespace:
            return self.namespace[name]
        if name in self.tower:
            return self.tower[name]
        raise NameError(f"name '{name}' is not defined in {self}")

    def public_names(self) -> List[str]:
        names = self.namespace.get("__all__")
        if names is not None:
            return list(names)
        return [n for n in self.namespace if not n.startswith("_")]

    def __str__(self) -> str:
        return f"package {self.name}" if self.name else "anonymous package"

    def __repr__(self) -> str:
        return f"<{self}>"


@dataclass
class Structure:
    """A named export interface bound to a package"""
    name: str
    package: Package
    exports: Optional[List[str]] = None  # None exports every public name
    source: Optional[str] = None
    loaded: bool = False

    def bindings(self) -> Dict[str, Any]:
        """Exported name -> value"""
        names = self.package.public_names() if self.exports is None else self.exports
        values = {}
        for name in names:
            if name not in self.package.namespace:
                raise ModuleLoadError(f"'{name}' is exported by {self.name} but never defined",
                                      self.name)
            values[name] = self.package.namespace[name]
        return values


class ModuleSystem:
    """Registry and loader for structures"""

    def __init__(self, config: Package, user: Package, library_path, loader):
        self.config = config
        self.user = user
        self.library_path = library_path
        self.loader = loader
        self.loading: Set[str] = set()  # Prevent circular loads

        # Config files reach their helpers through the tower
        config.tower["define_structure"] = self.define_structure

    def register(self, structure: Structure) -> Structure:
        """Bind a structure by name in the config package"""
        if structure.name in CONFIG_HELPERS:
            raise ModuleLoadError(f"Structure name is reserved: {structure.name}", structure.name)
        logger.debug("Registering structure %s", structure.name)
        self.config.define(structure.name, structure)
        return structure

    def registered(self, name: str) -> Optional[Structure]:
        value = self.config.namespace.get(name)
        return value if isinstance(value, Structure) else None

    def structures(self) -> Iterable[Structure]:
        return [v for v in self.config.namespace.values() if isinstance(v, Structure)]

    def lookup(self, name: str) -> Structure:
        """Find a structure by name, searching the library path if needed"""
        structure = self.registered(name)
        if structure is not None:
            return structure

        path = self.library_path.find(f"{name}.py", os.path.join(name, "__init__.py"))
        if path is None:
            raise StructureNotFound(name)

        logger.debug("Found structure %s at %s", name, path)
        return self.register(Structure(
            name=name,
            package=Package.derived_from(self.user, name),
            source=path
        ))

    def define_structure(self, name: str, source: Optional[str] = None,
                         exports: Optional[Iterable[str]] = None) -> Structure:
        """Declare a structure, optionally backed by a source file"""
        return self.register(Structure(
            name=name,
            package=Package.derived_from(self.user, name),
            exports=list(exports) if exports is not None else None,
            source=source,
            loaded=source is None
        ))

    def ensure_loaded(self, structure: Structure):
        """Load a structure's source into its package, once"""
        if structure.loaded:
            return

        if structure.name in self.loading:
            raise ModuleLoadError(f"Circular structure load detected: {structure.name}",
                                  structure.name)

        self.loading.add(structure.name)
        try:
            self.loader.load(structure.source, structure.package)
            structure.loaded = True
        finally:
            self.loading.remove(structure.name)

    def open_into(self, structure: Structure, package: Package):
        """Copy a structure's exported bindings into a package"""
        package.namespace.update(structure.bindings())

    def open(self, name: str, package: Package) -> Structure:
        """Resolve, load and open a structure into a package"""
        structure = self.lookup(name)
        self.ensure_loaded(structure)
        self.open_into(structure, package)
        return structure
