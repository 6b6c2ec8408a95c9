"""
Tests for directive replay
"""

import io
import os
import shutil
import tempfile
import unittest

from toplevel.core.directives import (
    OpenStructure, NewPackage, SwitchPackage, LoadFile, PathOp, DoScript,
    LoadTarget, PathOpKind
)
from toplevel.config import LauncherConfig
from toplevel.errors import InternalError, LoadError, ModuleLoadError, StructureNotFound
from toplevel.interpreter import DirectiveInterpreter, ExecutionContext, FileLoader, run
from toplevel.modules import Structure
from toplevel.parser import parse


class RecordingLoader(FileLoader):
    """Loader that records loads instead of reading files"""

    def __init__(self):
        super().__init__()
        self.ctx = None
        self.calls = []

    def load(self, source, package, quiet=False):
        self.calls.append({
            "source": source,
            "package": package,
            "current": self.ctx.current if self.ctx else None,
            "quiet": quiet,
        })


def recording_context():
    loader = RecordingLoader()
    ctx = ExecutionContext.create(LauncherConfig(library_path=[]), loader=loader)
    loader.ctx = ctx
    return ctx, loader


class TestReplayOrder(unittest.TestCase):
    """Test sequential replay of parsed command lines"""

    def test_new_package_then_load(self):
        """-n foo -l a.py -s b.py: package first, then load into it, script untouched"""
        ctx, loader = recording_context()
        result = parse(["-n", "foo", "-l", "a.py", "-s", "b.py"])

        loaded = run(result.directives, result.terminator_value, ctx)

        self.assertFalse(loaded)
        self.assertEqual(ctx.current.name, "foo")
        self.assertIsNot(ctx.current, ctx.user)
        self.assertEqual(len(loader.calls), 1)
        self.assertEqual(loader.calls[0]["source"], "a.py")
        self.assertIs(loader.calls[0]["package"], ctx.current)
        self.assertTrue(loader.calls[0]["quiet"])
        self.assertEqual(result.terminator_value, "b.py")

    def test_empty_replay(self):
        ctx, loader = recording_context()
        self.assertFalse(run((), None, ctx))
        self.assertIs(ctx.current, ctx.user)
        self.assertEqual(loader.calls, [])

    def test_loads_follow_package_switches(self):
        """Each -l goes to whatever package is current at that point"""
        ctx, loader = recording_context()
        run([LoadFile(LoadTarget.CURRENT, "1"),
             NewPackage("p"),
             LoadFile(LoadTarget.CURRENT, "2"),
             NewPackage(None),
             LoadFile(LoadTarget.CURRENT, "3")], None, ctx)

        packages = [call["package"] for call in loader.calls]
        self.assertIs(packages[0], ctx.user)
        self.assertEqual(packages[1].name, "p")
        self.assertIsNone(packages[2].name)
        self.assertIs(ctx.current, packages[2])


class TestLoadTargets(unittest.TestCase):
    """Test -l, -lm and -le"""

    def test_config_load(self):
        ctx, loader = recording_context()
        run([LoadFile(LoadTarget.CONFIG, "cfg.py")], None, ctx)
        self.assertIs(loader.calls[0]["package"], ctx.config)
        self.assertFalse(loader.calls[0]["quiet"])
        self.assertIs(ctx.current, ctx.user)

    def test_exec_load_restores_current(self):
        """-le makes exec current during the load only"""
        ctx, loader = recording_context()
        run([NewPackage("work"), LoadFile(LoadTarget.EXEC, "cmds.py")], None, ctx)

        call = loader.calls[0]
        self.assertIs(call["package"], ctx.exec)
        self.assertIs(call["current"], ctx.exec)
        self.assertEqual(ctx.current.name, "work")

    def test_exec_load_restores_current_on_failure(self):
        """A failing -le still puts the current package back"""
        ctx = ExecutionContext.create(LauncherConfig(library_path=[]))
        with self.assertRaises(LoadError):
            run([LoadFile(LoadTarget.EXEC, "/nonexistent/cmds.py")], None, ctx)
        self.assertIs(ctx.current, ctx.user)


class TestDoScript(unittest.TestCase):
    """Test -ds, -dm and -de"""

    def test_targets(self):
        for target in LoadTarget:
            ctx, loader = recording_context()
            expected = {
                LoadTarget.CURRENT: ctx.user,
                LoadTarget.CONFIG: ctx.config,
                LoadTarget.EXEC: ctx.exec,
            }[target]

            loaded = run([DoScript(target)], "prog.py", ctx)

            self.assertTrue(loaded)
            self.assertEqual(loader.calls[0]["source"], "prog.py")
            self.assertIs(loader.calls[0]["package"], expected)
            self.assertIs(ctx.current, ctx.user)

    def test_script_handle(self):
        """A handle from -sfd is passed to the loader as is"""
        ctx, loader = recording_context()
        handle = io.StringIO("x = 1\n")
        self.assertTrue(run([DoScript(LoadTarget.CURRENT)], handle, ctx))
        self.assertIs(loader.calls[0]["source"], handle)


class TestPackagesAndStructures(unittest.TestCase):
    """Test -n, -m and -o against real files"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.ctx = ExecutionContext.create(LauncherConfig(library_path=[self.test_dir]))

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def create_file(self, name, content):
        path = os.path.join(self.test_dir, name)
        with open(path, 'w') as f:
            f.write(content)
        return path

    def test_named_package_is_registered(self):
        """-n foo registers a structure with an empty interface"""
        run([NewPackage("foo")], None, self.ctx)

        structure = self.ctx.config.namespace["foo"]
        self.assertIsInstance(structure, Structure)
        self.assertIs(structure.package, self.ctx.current)
        self.assertEqual(structure.exports, [])
        self.assertEqual(structure.bindings(), {})

    def test_package_named_after_config_helper(self):
        """-n cannot replace the helpers -lm files rely on"""
        with self.assertRaises(ModuleLoadError):
            run([NewPackage("define_structure")], None, self.ctx)
        self.assertIs(self.ctx.current, self.ctx.user)

        config_file = self.create_file("decl.py", "define_structure('later')\n")
        run([LoadFile(LoadTarget.CONFIG, config_file)], None, self.ctx)
        self.assertIsNotNone(self.ctx.modules.registered("later"))

    def test_quiet_loads_reach_the_loader(self):
        ctx = ExecutionContext.create(LauncherConfig(library_path=[], quiet_loads=True))
        self.assertTrue(ctx.loader.quiet)
        self.assertFalse(self.ctx.loader.quiet)

    def test_anonymous_package_is_not_registered(self):
        before = set(self.ctx.config.namespace)
        run([NewPackage(None)], None, self.ctx)
        self.assertEqual(set(self.ctx.config.namespace), before)
        self.assertIsNone(self.ctx.current.name)

    def test_new_package_tower_comes_from_user(self):
        """New packages see the user package's builtins"""
        self.ctx.user.tower["greeting"] = "hello"
        run([NewPackage("foo")], None, self.ctx)
        self.assertEqual(self.ctx.current.lookup("greeting"), "hello")
        self.assertIn("command_line", self.ctx.current.tower)

    def test_open_structure(self):
        """-o loads the structure once and copies its exports"""
        self.create_file("utils.py", "LOADS = []\nLOADS.append(1)\ndef double(x):\n    return 2 * x\n")

        run([OpenStructure("utils"), OpenStructure("utils")], None, self.ctx)

        double = self.ctx.user.namespace["double"]
        self.assertEqual(double(21), 42)
        self.assertEqual(self.ctx.user.namespace["LOADS"], [1])

    def test_open_unknown_structure(self):
        with self.assertRaises(StructureNotFound):
            run([OpenStructure("nowhere")], None, self.ctx)

    def test_switch_package(self):
        """-m makes the structure's package current before loading it"""
        self.create_file("tools.py", "value = command_line()\n")
        self.ctx.command_line = ["prog", "a"]

        run([SwitchPackage("tools"), LoadFile(LoadTarget.CURRENT, self.create_file(
            "more.py", "extra = value + ['b']\n"))], None, self.ctx)

        self.assertEqual(self.ctx.current.name, "tools")
        self.assertEqual(self.ctx.current.namespace["extra"], ["prog", "a", "b"])

    def test_switch_sees_current_during_load(self):
        """The switch is visible before the structure is loaded"""
        ctx, loader = recording_context()
        ctx.modules.define_structure("lazy", source="lazy.py")

        run([SwitchPackage("lazy")], None, ctx)

        call = loader.calls[0]
        self.assertEqual(call["source"], "lazy.py")
        self.assertIs(call["current"], call["package"])
        self.assertIs(ctx.current, call["package"])

    def test_failure_aborts_replay(self):
        """Nothing after a failing directive runs"""
        marker = self.create_file("marker.py", "reached = True\n")
        with self.assertRaises(LoadError):
            run([LoadFile(LoadTarget.CURRENT, os.path.join(self.test_dir, "missing.py")),
                 LoadFile(LoadTarget.CURRENT, marker)], None, self.ctx)
        self.assertNotIn("reached", self.ctx.user.namespace)


class TestPathOps(unittest.TestCase):
    """Test library path directives"""

    def test_delegates_to_library_path(self):
        ctx, _ = recording_context()
        run([PathOp(PathOpKind.APPEND, "b"), PathOp(PathOpKind.PREPEND, "a")], None, ctx)
        self.assertEqual(list(ctx.library_path), ["a", "b"])

    def test_script_dir_uses_terminator(self):
        ctx, _ = recording_context()
        run([PathOp(PathOpKind.PREPEND_SCRIPT_DIR)], "/opt/scripts/run.py", ctx)
        self.assertEqual(list(ctx.library_path), ["/opt/scripts"])


class TestInvariants(unittest.TestCase):
    """Test directive shapes the parser never produces"""

    def test_unknown_directive(self):
        ctx, _ = recording_context()
        with self.assertRaises(InternalError):
            run(["-o"], None, ctx)

    def test_unknown_load_target(self):
        ctx, _ = recording_context()
        with self.assertRaises(InternalError):
            DirectiveInterpreter(ctx).load("somewhere", "file.py")


if __name__ == '__main__':
    unittest.main()
