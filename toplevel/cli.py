"""
toplevel command-line driver

Parses the command line, replays the directives and then runs the final
action: load the script if no directive did, evaluate -c, call the -e entry,
or start an interactive session.
"""

import logging
import sys
from typing import Any, Callable, List, Optional, Sequence, TextIO

from .config import LauncherConfig, configure_logging
from .core.directives import ParseResult, TerminatorKind
from .errors import (
    ArgError, InternalError, EXIT_USAGE, condition_diagnostic, format_diagnostic,
    report_usage_error
)
from .interpreter.context import ExecutionContext
from .interpreter.loader import source_name
from .interpreter.replay import run
from .parser import expand_meta_args, parse
from .repl.repl import REPL

logger = logging.getLogger(__name__)

PROGRAM_NAME = "toplevel"
EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point"""
    argv = sys.argv[1:] if argv is None else list(argv)

    try:
        result = parse(expand_meta_args(argv))
    except ArgError as e:
        report_usage_error(e)
        return EXIT_USAGE

    return run_guarded(lambda: launch(result))


def launch(result: ParseResult, config: Optional[LauncherConfig] = None,
           ctx: Optional[ExecutionContext] = None) -> int:
    """Replay the parsed directives and run the final action"""
    config = config or LauncherConfig.from_env()
    configure_logging(config.log_level)

    ctx = ctx or ExecutionContext.create(config)
    ctx.command_line = command_line(result)

    script_loaded = run(result.directives, result.terminator_value, ctx)
    return finish(result, ctx, script_loaded, config)


def command_line(result: ParseResult) -> List[str]:
    """The script (or program) name followed by the residual arguments"""
    if result.has_script:
        name = source_name(result.terminator_value)
    else:
        name = PROGRAM_NAME
    return [name] + list(result.residual_args)


def finish(result: ParseResult, ctx: ExecutionContext, script_loaded: bool,
           config: LauncherConfig) -> int:
    if result.has_script and not script_loaded:
        ctx.loader.load(result.terminator_value, ctx.current)

    if result.terminator_kind is TerminatorKind.EXPR:
        ctx.loader.evaluate(result.terminator_value, ctx.current, "<command line>")
        return EXIT_SUCCESS

    if result.top_entry is not None:
        entry = ctx.current.lookup(result.top_entry)
        return exit_status(entry(ctx.command_line))

    if result.has_script:
        return EXIT_SUCCESS

    REPL(ctx, history_file=config.history_file).run()
    return EXIT_SUCCESS


def exit_status(value: Any) -> int:
    """Process status for an entry point's return value"""
    if value is None:
        return EXIT_SUCCESS
    if isinstance(value, bool):
        return EXIT_SUCCESS if value else EXIT_FAILURE
    if isinstance(value, int):
        return value
    return EXIT_SUCCESS


def run_guarded(thunk: Callable[[], int], stream: Optional[TextIO] = None) -> int:
    """Run the launch once, turning any condition into a failure status"""
    stream = stream or sys.stderr
    try:
        return thunk()
    except SystemExit as e:
        if e.code is None or isinstance(e.code, int):
            return e.code or EXIT_SUCCESS
        return report_condition(e, stream)
    except InternalError as e:
        logger.critical("Internal error: %s", e)
        return report_condition(e, stream, fatal=True)
    except Exception as e:
        logger.debug("Unhandled condition", exc_info=True)
        return report_condition(e, stream)


def report_condition(error: BaseException, stream: TextIO, fatal: bool = False) -> int:
    """Print a condition to the diagnostic stream; always returns EXIT_FAILURE"""
    try:
        if isinstance(error, SystemExit):
            print(error.code, file=stream)
        else:
            color = hasattr(stream, "isatty") and stream.isatty()
            print(format_diagnostic(condition_diagnostic(error, fatal), color=color), file=stream)
        stream.flush()
    except Exception:
        # A failure while reporting exits without further output
        pass
    return EXIT_FAILURE
