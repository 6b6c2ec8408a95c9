"""
Execution context for directive replay

The one piece of mutable state the interpreter works on: which package is
current, plus the fixed user, config and exec packages and the collaborators
that load into them.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from ..config import LauncherConfig
from ..modules.library_path import LibraryPath
from ..modules.module_system import ModuleSystem, Package
from .loader import FileLoader


@dataclass
class ExecutionContext:
    """Packages and collaborators borrowed by the interpreter"""
    current: Package
    user: Package
    config: Package
    exec: Package
    modules: ModuleSystem
    library_path: LibraryPath
    loader: FileLoader
    command_line: List[str] = field(default_factory=list)

    @classmethod
    def create(cls, config: Optional[LauncherConfig] = None,
               loader: Optional[FileLoader] = None) -> 'ExecutionContext':
        """Fresh context whose current package is the user package"""
        config = config or LauncherConfig()
        loader = loader or FileLoader(quiet=config.quiet_loads)

        user = Package("user")

        def command_line() -> List[str]:
            return list(ctx.command_line)

        # Loaded code reads the command line through its tower
        user.tower["command_line"] = command_line

        config_package = Package.derived_from(user, "config")
        exec_package = Package.derived_from(user, "exec")
        library_path = LibraryPath(config.library_path, home=config.home)
        modules = ModuleSystem(config_package, user, library_path, loader)

        ctx = cls(
            current=user,
            user=user,
            config=config_package,
            exec=exec_package,
            modules=modules,
            library_path=library_path,
            loader=loader
        )
        return ctx

    @contextmanager
    def switched_to(self, package: Package) -> Iterator[Package]:
        """Make a package current for the duration of a block"""
        saved = self.current
        self.current = package
        try:
            yield package
        finally:
            self.current = saved
