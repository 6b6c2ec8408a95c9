"""
Tests for toplevel Error Handling and Diagnostics
"""

import io
import unittest

from toplevel.errors import (
    ArgError, ToplevelError, LoadError, StructureNotFound, ModuleLoadError,
    Diagnostic, ErrorSeverity, format_diagnostic, usage_diagnostic, condition_diagnostic,
    EXIT_USAGE, USAGE_TEXT, report_usage_error, usage_exit
)
from toplevel.parser import SWITCHES


class TestDiagnostics(unittest.TestCase):
    """Test diagnostic formatting"""

    def test_plain_format(self):
        diagnostic = Diagnostic(ErrorSeverity.ERROR, "U001", "Unknown switch", ["-zzz"])
        self.assertEqual(format_diagnostic(diagnostic), "error[U001]: Unknown switch: -zzz")

    def test_notes(self):
        diagnostic = Diagnostic(ErrorSeverity.WARNING, "C001", "Odd", notes=["first", "second"])
        self.assertEqual(format_diagnostic(diagnostic),
                         "warning[C001]: Odd\nnote: first\nnote: second")

    def test_color(self):
        diagnostic = Diagnostic(ErrorSeverity.ERROR, "U001", "Unknown switch")
        formatted = format_diagnostic(diagnostic, color=True)
        self.assertIn("\033[91merror\033[0m", formatted)

    def test_usage_codes(self):
        self.assertEqual(usage_diagnostic("Unknown switch").code, "U001")
        self.assertEqual(usage_diagnostic("Switch requires argument").code, "U002")
        self.assertEqual(usage_diagnostic("Something else").code, "U000")

    def test_condition_from_toplevel_error(self):
        diagnostic = condition_diagnostic(LoadError("File not found: a.py", "a.py"))
        self.assertEqual(diagnostic.message, "File not found: a.py")
        self.assertEqual(diagnostic.severity, ErrorSeverity.ERROR)
        self.assertEqual(diagnostic.notes, [])

    def test_condition_from_python_error(self):
        try:
            {}["key"]
        except KeyError as e:
            diagnostic = condition_diagnostic(e)
        self.assertEqual(diagnostic.message, "KeyError: 'key'")
        self.assertTrue(diagnostic.notes[0].startswith("raised at "))

    def test_fatal_condition(self):
        diagnostic = condition_diagnostic(RuntimeError("x"), fatal=True)
        self.assertEqual(diagnostic.severity, ErrorSeverity.FATAL)
        self.assertEqual(diagnostic.code, "C999")


class TestExceptions(unittest.TestCase):
    """Test exception classes"""

    def test_hierarchy(self):
        self.assertTrue(issubclass(ArgError, ToplevelError))
        self.assertTrue(issubclass(StructureNotFound, ModuleLoadError))

    def test_arg_error_str(self):
        self.assertEqual(str(ArgError("Unknown switch", "-q")), "Unknown switch: -q")
        self.assertEqual(str(ArgError("Meta-argument expansion failed")),
                         "Meta-argument expansion failed")

    def test_structure_not_found(self):
        error = StructureNotFound("utils")
        self.assertEqual(error.name, "utils")
        self.assertEqual(error.structure_name, "utils")


class TestUsageReporter(unittest.TestCase):
    """Test the usage synopsis"""

    def test_report(self):
        stream = io.StringIO()
        report_usage_error(ArgError("Unknown switch", "-zzz"), stream)
        text = stream.getvalue()
        self.assertTrue(text.startswith("error[U001]: Unknown switch: -zzz\n"))
        self.assertTrue(text.endswith(USAGE_TEXT))

    def test_usage_exit(self):
        stream = io.StringIO()
        with self.assertRaises(SystemExit) as cm:
            usage_exit(ArgError("Switch requires argument", "-l"), stream)
        self.assertEqual(cm.exception.code, EXIT_USAGE)
        self.assertIn("Switch requires argument: -l", stream.getvalue())

    def test_synopsis_mentions_every_switch(self):
        for switch in SWITCHES:
            self.assertIn(switch, USAGE_TEXT)


if __name__ == '__main__':
    unittest.main()
