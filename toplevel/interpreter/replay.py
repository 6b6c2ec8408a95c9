"""
toplevel Directive Interpreter

Replays parsed directives, in order, against an execution context. Each
directive is fully applied, including any change of the current package,
before the next one starts. Failures from loading or structure lookup
propagate unchanged and abort the rest of the replay.
"""

import logging
from typing import Any, Sequence

from ..core.directives import (
    Directive, OpenStructure, NewPackage, SwitchPackage, LoadFile, PathOp, DoScript,
    LoadTarget
)
from ..errors import InternalError
from ..modules.module_system import Package, Structure
from .context import ExecutionContext

logger = logging.getLogger(__name__)


class DirectiveInterpreter:
    """Applies directives to an execution context"""

    def __init__(self, ctx: ExecutionContext, terminator_value: Any = None):
        self.ctx = ctx
        self.terminator_value = terminator_value
        self.script_loaded = False

    def run(self, directives: Sequence[Directive]) -> bool:
        """Replay all directives; True if one of them loaded the script"""
        for directive in directives:
            logger.debug("Replaying %s", directive)
            self.execute(directive)
        return self.script_loaded

    def execute(self, directive: Directive):
        ctx = self.ctx

        if isinstance(directive, OpenStructure):
            ctx.modules.open(directive.name, ctx.current)

        elif isinstance(directive, NewPackage):
            self._new_package(directive.name)

        elif isinstance(directive, SwitchPackage):
            structure = ctx.modules.lookup(directive.name)
            ctx.current = structure.package
            ctx.modules.ensure_loaded(structure)

        elif isinstance(directive, LoadFile):
            self.load(directive.target, directive.path)

        elif isinstance(directive, PathOp):
            ctx.library_path.apply(directive, self.terminator_value)

        elif isinstance(directive, DoScript):
            self.load(directive.target, self.terminator_value)
            self.script_loaded = True

        else:
            raise InternalError(f"Unknown directive: {directive!r}")

    def load(self, target: LoadTarget, source: Any):
        """Load a file or handle following the rules for the target package"""
        ctx = self.ctx

        if target is LoadTarget.CURRENT:
            ctx.loader.load(source, ctx.current, quiet=True)
        elif target is LoadTarget.CONFIG:
            ctx.loader.load(source, ctx.config)
        elif target is LoadTarget.EXEC:
            with ctx.switched_to(ctx.exec):
                ctx.loader.load(source, ctx.current)
        else:
            raise InternalError(f"Unknown load target: {target!r}")

    def _new_package(self, name):
        ctx = self.ctx
        package = Package.derived_from(ctx.user, name)
        if name is not None:
            ctx.modules.register(Structure(name=name, package=package, exports=[], loaded=True))
        ctx.current = package


def run(directives: Sequence[Directive], terminator_value: Any, ctx: ExecutionContext) -> bool:
    """Replay directives against a context; True if a script was loaded"""
    return DirectiveInterpreter(ctx, terminator_value).run(directives)
