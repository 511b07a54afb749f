"""
Command-line processor tests (implicit aliases, terminators, shell mode, argv).

Scope
- Parameters are reachable through their declared aliases and through the
  implicit "--<name>" and "/<name>" aliases.
- Help and version terminators print and abort the parse (None is returned).
- Shell mode renders faults with the help table on stderr and exits with status 1.

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured by redirecting stdout/stderr; rich writes plain text to them.
"""
import contextlib
import io
import unittest
from pathlib import Path
from unittest import TestCase, mock

from cmdpro import *


class TestProcessor(TestCase):

    def setUp(self):
        self.processor = CommandLineProcessor("tool", version="tool 1.0", descr="demo tool")
        self.path = self.processor.add_parameter("path", ParameterType.PATH, descr="file path", aliases=["-p"])
        self.value = self.processor.add_parameter("value", ParameterType.UNSIGNED_INTEGER, descr="value", aliases=["-v"])

    def testDeclaredAliases(self):
        values = self.processor.parse(["-p", "/tmp/x", "-v", "42"])
        self.assertEqual(values.read_path(self.path), Path("/tmp/x"))
        self.assertEqual(values.read_unsigned_integer(self.value), 42)
        self.assertFalse(self.processor.aborted)

    def testImplicitAliases(self):
        self.assertEqual(self.processor.parse(["--path", "a"]).read_path("path"), Path("a"))
        self.assertEqual(self.processor.parse(["/path", "b"]).read_path("path"), Path("b"))
        self.assertEqual(self.path.aliases, ("-p", "--path", "/path"))

    def testFaultsRaiseOutsideShell(self):
        with self.assertRaises(UnrecognizedTokenError):
            self.processor.parse(["-z"])
        with self.assertRaises(ConversionFailureError):
            self.processor.parse(["-v", "-5"])

    def testValuesOfLastParse(self):
        self.assertIsNone(self.processor.values)
        self.assertIsNone(self.processor.get_parameter_value("value"))
        values = self.processor.parse(["-v", "3"])
        self.assertIs(self.processor.values, values)
        self.assertEqual(self.processor.get_parameter_value("value"), ResolvedValue(ParameterType.UNSIGNED_INTEGER, 3))
        self.assertEqual(self.processor.get_parameter_value(self.value).payload, 3)
        self.assertFalse(self.processor.get_parameter_value("path").present)
        self.assertIsNone(self.processor.get_parameter_value("missing"))

    def testRegistrationAfterParse(self):
        self.processor.parse([])
        with self.assertRaises(RuntimeError):
            self.processor.add_parameter("late", ParameterType.TEXT)

    def testRepr(self):
        self.assertTrue(repr(self.processor).startswith("command-line-processor("))


class TestRegistrationShortcuts(TestCase):

    def testSimpleParameterIsRequired(self):
        processor = CommandLineProcessor("tool")
        name = processor.add_simple_parameter("name", ParameterType.TEXT, "your name")
        self.assertTrue(name.required)
        self.assertEqual(name.aliases, ("--name", "/name"))
        with self.assertRaises(MissingRequiredParameterError):
            processor.parse([])
        self.assertEqual(processor.parse(["--name", "x"]).read_text("name"), "x")

    def testOptionalParameterDefault(self):
        processor = CommandLineProcessor("tool")
        processor.add_optional_parameter("level", ParameterType.SIGNED_INTEGER, -1)
        self.assertEqual(processor.parse([]).read_signed_integer("level"), -1)

    def testReservedTokensCannotBeAliases(self):
        processor = CommandLineProcessor("tool")
        for alias in ("--help", "--h", "--version", "--v"):
            with self.subTest(alias=alias):
                with self.assertRaises(DuplicateDefinitionError):
                    processor.add_parameter("option", ParameterType.FLAG, aliases=[alias])

    def testReservedImplicitAliasesAreLeftOut(self):
        processor = CommandLineProcessor("tool")
        h = processor.add_parameter("h", ParameterType.TEXT)
        v = processor.add_parameter("v", ParameterType.UNSIGNED_INTEGER, aliases=["-v"])
        self.assertEqual(h.aliases, ("/h",))
        self.assertEqual(v.aliases, ("-v", "/v"))
        values = processor.parse(["/h", "x", "-v", "1"])
        self.assertEqual(values.read_text(h), "x")
        self.assertEqual(values.read_unsigned_integer(v), 1)
        with contextlib.redirect_stdout(io.StringIO()):
            self.assertIsNone(processor.parse(["--h"]))
        self.assertTrue(processor.aborted)

    def testCustomPrefixes(self):
        processor = CommandLineProcessor("tool", prefixes=("-",))
        debug = processor.add_parameter("debug", ParameterType.FLAG)
        self.assertEqual(debug.aliases, ("-debug",))

    def testEmptyNameRejected(self):
        with self.assertRaises(ValueError):
            CommandLineProcessor("")


class TestTerminators(TestCase):

    def setUp(self):
        self.processor = CommandLineProcessor("tool", version="tool 1.0", descr="demo tool", colorful=False)
        self.processor.add_parameter("path", ParameterType.PATH, descr="file path", aliases=["-p"])
        self.processor.add_simple_parameter("name", ParameterType.TEXT)

    def testHelpAborts(self):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            values = self.processor.parse(["--help"])
        self.assertIsNone(values)
        self.assertTrue(self.processor.aborted)
        self.assertIsNone(self.processor.values)
        output = stdout.getvalue()
        self.assertIn("USAGE", output)
        self.assertIn("tool", output)
        self.assertIn("demo tool", output)
        self.assertIn("file path", output)

    def testShortHelpAfterValues(self):
        # requiredness is not checked once a terminator was met
        with contextlib.redirect_stdout(io.StringIO()):
            self.assertIsNone(self.processor.parse(["-p", "a", "--h"]))
        self.assertTrue(self.processor.aborted)

    def testVersionAborts(self):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            self.assertIsNone(self.processor.parse(["--version"]))
        self.assertTrue(self.processor.aborted)
        self.assertIn("tool 1.0", stdout.getvalue())

    def testMissingVersionText(self):
        processor = CommandLineProcessor("tool")
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            self.assertIsNone(processor.parse(["--v"]))
        self.assertIn("no version text has been set", stdout.getvalue())

    def testAbortIsResetByNextParse(self):
        with contextlib.redirect_stdout(io.StringIO()):
            self.processor.parse(["--help"])
        self.processor.parse(["--name", "x"])
        self.assertFalse(self.processor.aborted)


class TestCommandLine(TestCase):

    def testProgramNameIsSkipped(self):
        processor = CommandLineProcessor()
        processor.add_parameter("path", ParameterType.PATH, aliases=["-p"])
        values = processor.parse_command_line(["/usr/bin/tool", "-p", "x"])
        self.assertEqual(values.read_path("path"), Path("x"))
        self.assertEqual(processor.prog, "tool")

    def testExplicitNameIsKept(self):
        processor = CommandLineProcessor("demo")
        processor.parse_command_line(["/usr/bin/tool"])
        self.assertEqual(processor.prog, "demo")


class TestShellMode(TestCase):

    def setUp(self):
        self.processor = CommandLineProcessor("tool", shell=True, colorful=False)
        self.processor.add_parameter("value", ParameterType.UNSIGNED_INTEGER, descr="value", aliases=["-v"])
        self.processor.add_parameter("message", ParameterType.TEXT, aliases=["-m"])

    def testErrorPrintsHelpAndExits(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            self.processor.parse(["-z"])
        self.assertEqual(context.exception.code, 1)
        output = stderr.getvalue()
        self.assertIn("USAGE", output)
        self.assertIn("unrecognized token '-z'", output)

    def testConversionFailureExits(self):
        with contextlib.redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
            self.processor.parse(["-v", "-5"])

    def testWarningIsPrinted(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            values = self.processor.parse(["-m", ""])
        self.assertEqual(values.read_text("message"), "")
        self.assertIn("empty value", stderr.getvalue())

    def testWarningsSurviveAFailedParse(self):
        processor = CommandLineProcessor("tool", shell=True, colorful=False)
        processor.add_parameter("title", ParameterType.TEXT, aliases=["-t"])
        processor.add_parameter("number", ParameterType.UNSIGNED_INTEGER, aliases=["-n"])
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit):
            processor.parse(["-t", "", "-n", "x"])
        output = stderr.getvalue()
        self.assertIn("empty value", output)
        self.assertIn("cannot convert", output)
        self.assertLess(output.index("empty value"), output.index("cannot convert"))

    def testFailedHelpRenderingRestoresStdout(self):
        with mock.patch.object(self.processor, "_helper", side_effect=RuntimeError("rendering failed")):
            with contextlib.redirect_stderr(io.StringIO()), self.assertRaises(RuntimeError):
                self.processor.parse(["-z"])
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            self.assertIsNone(self.processor.parse(["--help"]))
        self.assertIn("USAGE", stdout.getvalue())

    def testWarningIsEmittedOutsideShell(self):
        processor = CommandLineProcessor("tool")
        processor.add_parameter("message", ParameterType.TEXT, aliases=["-m"])
        with self.assertWarns(EmptyValueWarning):
            processor.parse(["-m", ""])

    def testWarningsOutsideShellSurviveAFailedParse(self):
        processor = CommandLineProcessor("tool")
        processor.add_parameter("title", ParameterType.TEXT, aliases=["-t"])
        processor.add_parameter("number", ParameterType.UNSIGNED_INTEGER, aliases=["-n"])
        with self.assertWarns(EmptyValueWarning), self.assertRaises(ConversionFailureError):
            processor.parse(["-t", "", "-n", "x"])


if __name__ == '__main__':
    unittest.main()
