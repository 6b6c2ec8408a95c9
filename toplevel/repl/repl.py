"""
toplevel Interactive REPL (Read-Eval-Print Loop)

Reads Python from the terminal and evaluates it in the current package.
Lines starting with ':' are commands; commands the REPL does not know are
looked up as functions in the exec package.
"""

import atexit
import codeop
import readline
import sys
from typing import Callable, List, Optional, TextIO

from ..errors import ToplevelError
from ..interpreter.context import ExecutionContext
from ..interpreter.replay import DirectiveInterpreter
from ..core.directives import LoadTarget, SwitchPackage


class REPL:
    """The interactive session"""

    def __init__(self, ctx: ExecutionContext, history_file: Optional[str] = None,
                 input_fn: Callable[[str], str] = input, output: Optional[TextIO] = None):
        self.ctx = ctx
        self.history_file = history_file
        self.input_fn = input_fn
        self.output = output or sys.stdout
        self.buffer: List[str] = []

        if history_file:
            self._setup_history()

    def _setup_history(self):
        """Setup readline history"""
        try:
            readline.read_history_file(self.history_file)
        except OSError:
            # History is optional
            pass

        readline.set_history_length(1000)
        atexit.register(self._save_history)

    def _save_history(self):
        try:
            readline.write_history_file(self.history_file)
        except OSError:
            pass

    @property
    def prompt(self) -> str:
        if self.buffer:
            return "... "
        return f"{self.ctx.current.name or 'anonymous'}> "

    def run(self):
        """Run the REPL until EOF or :quit"""
        self._print_banner()

        while True:
            try:
                line = self.input_fn(self.prompt)

                if not self.buffer and line.strip().startswith(':'):
                    if self._handle_command(line.strip()):
                        continue
                    break

                self.buffer.append(line)
                source = '\n'.join(self.buffer)

                # None means the statement is not finished yet
                if codeop.compile_command(source, "<stdin>", "single") is None:
                    continue
                self.buffer = []

                if not source.strip():
                    continue

                result = self.ctx.loader.evaluate(source, self.ctx.current, "<stdin>")
                if result is not None:
                    self._print(repr(result))

            except KeyboardInterrupt:
                self._print("\nInterrupted")
                self.buffer = []

            except EOFError:
                self._print("")
                break

            except Exception as e:
                self._print(f"Error: {type(e).__name__}: {e}")
                self.buffer = []

    def _print(self, text: str):
        print(text, file=self.output)

    def _print_banner(self):
        self._print("toplevel interactive session")
        self._print("Type :help for help, :quit to exit")

    def _handle_command(self, command: str) -> bool:
        """Handle REPL commands. Returns True to continue, False to quit."""
        parts = command[1:].split()
        if not parts:
            return True
        cmd, args = parts[0], parts[1:]

        if cmd in ['quit', 'exit', 'q']:
            return False

        elif cmd == 'help':
            self._print_help()

        elif cmd == 'status':
            self._print_status()

        elif cmd in ['package', 'open', 'load'] and len(args) != 1:
            self._print(f"Usage: :{cmd} <{'file' if cmd == 'load' else 'structure'}>")

        elif cmd == 'package':
            self._run_directive(SwitchPackage(args[0]))

        elif cmd == 'open':
            self._guard(self.ctx.modules.open, args[0], self.ctx.current)

        elif cmd == 'load':
            self._guard(DirectiveInterpreter(self.ctx).load, LoadTarget.CURRENT, args[0])

        else:
            self._exec_command(cmd, args)

        return True

    def _run_directive(self, directive):
        self._guard(DirectiveInterpreter(self.ctx).execute, directive)

    def _guard(self, fn, *args):
        try:
            fn(*args)
        except ToplevelError as e:
            self._print(f"Error: {e}")

    def _exec_command(self, name: str, args: List[str]):
        """Call a function defined in the exec package"""
        command = self.ctx.exec.namespace.get(name)
        if not callable(command):
            self._print(f"Unknown command: :{name}")
            self._print("Type :help for help")
            return

        with self.ctx.switched_to(self.ctx.exec):
            result = command(*args)
        if result is not None:
            self._print(repr(result))

    def _print_help(self):
        self._print("""
toplevel REPL commands:
  :help               Show this help message
  :quit, :exit, :q    Exit the REPL
  :status             Show the current package and library path
  :package <name>     Make the structure's package current
  :open <name>        Open a structure into the current package
  :load <file>        Load a file into the current package
  :<command> args...  Call a function defined in the exec package (see -le)
""")

    def _print_status(self):
        structures = ', '.join(s.name for s in self.ctx.modules.structures()) or '(none)'
        library_path = ', '.join(self.ctx.library_path) or '(empty)'
        self._print(f"""
Current package: {self.ctx.current}
Structures:      {structures}
Library path:    {library_path}
Command line:    {' '.join(self.ctx.command_line)}
""")


def main(ctx: Optional[ExecutionContext] = None):
    """Entry point for the REPL"""
    repl = REPL(ctx or ExecutionContext.create())
    repl.run()
