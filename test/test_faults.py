"""
Faults module behavioral tests.

Scope
- FaultCode stability and host remapping through __codes__.
- Error/warning hierarchy (which faults are also ValueErrors).
- trigger(): option merging, library mode (raise / warnings.warn) versus shell mode
  (rich output, SystemExit with 1 for errors and 0 for help).
- Rich rendering of the header, message and hint, plain and fancy.
- getdoc() lookups through __docs__.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured with in-memory consoles (color_system=None).
"""
import contextlib
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console
from rich.text import Text

from lexonaut.faults import *


def render(fault, width=100):
    buffer = io.StringIO()
    Console(file=buffer, width=width, color_system=None).print(fault)
    return buffer.getvalue()


class TestFaultCode(TestCase):
    def testCodesAreUnique(self):
        self.assertEqual(len({code.value for code in FaultCode}), len(FaultCode))

    def testNormalize(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "11101")

    def testNormalizeWithHostMapping(self):
        codes = {FaultCode.UNKNOWN_OPTION: "E-UNKNOWN"}
        with mock.patch.object(__import__("__main__"), "__codes__", codes, create=True):
            self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "E-UNKNOWN")
            self.assertEqual(FaultCode.MISSING_ARGUMENT.normalize(), "11102")


class TestHierarchy(TestCase):
    def testDeclarationErrorsAreValueErrors(self):
        self.assertTrue(issubclass(InvalidNameError, DeclarationError))
        self.assertTrue(issubclass(DuplicateNameError, ValueError))

    def testParseErrors(self):
        for fault in (UnknownOptionError, MissingArgumentError, ConversionError, UnexpectedArgumentError):
            with self.subTest(fault=fault.__name__):
                self.assertTrue(issubclass(fault, ParseError))
                self.assertTrue(issubclass(fault, CommandException))

    def testWarnings(self):
        self.assertTrue(issubclass(EmptyValueWarning, CommandWarning))
        self.assertTrue(issubclass(EmptyValueWarning, Warning))

    def testHelpRequestedIsNotAParseError(self):
        self.assertFalse(issubclass(HelpRequested, CommandException))


class TestCommandException(TestCase):
    def testMessageAndOptions(self):
        fault = UnknownOptionError("unknown short option '-x'", token="-x", index=1)
        self.assertEqual(str(fault), "unknown short option '-x'")
        self.assertEqual(fault.token, "-x")
        self.assertIsNone(fault.argument)
        with self.assertRaises(TypeError):
            fault.options["token"] = "-y"

    def testEmptyMessage(self):
        self.assertEqual(str(ParseError()), "")

    def testReplaceMergesOptions(self):
        fault = ConversionError("bad", token="x", expected="int")
        replaced = fault.__replace__(hint="use digits")
        self.assertIsNot(replaced, fault)
        self.assertIsInstance(replaced, ConversionError)
        self.assertEqual(replaced.expected, "int")
        self.assertEqual(replaced.options["hint"], "use digits")
        self.assertNotIn("hint", fault.options)


class TestTrigger(TestCase):
    def testRaisesInLibraryMode(self):
        with self.assertRaises(UnknownOptionError) as context:
            trigger(UnknownOptionError("unknown", token="-x"), hint="try --help")
        self.assertEqual(context.exception.token, "-x")
        self.assertEqual(context.exception.options["hint"], "try --help")

    def testExitsInShellMode(self):
        buffer = io.StringIO()
        with mock.patch("lexonaut.faults.console", Console(file=buffer, width=100, color_system=None)):
            with self.assertRaises(SystemExit) as context:
                trigger(
                    MissingArgumentError("option '--n' requires a value"),
                    shell=True,
                    prog="tool",
                    usage=Text("usage: tool [-n <n>]"),
                )
        self.assertEqual(context.exception.code, 1)
        self.assertIn("option '--n' requires a value", buffer.getvalue())
        self.assertIn("usage: tool [-n <n>]", buffer.getvalue())

    def testWarningInLibraryMode(self):
        with self.assertWarns(EmptyValueWarning):
            trigger(EmptyValueWarning("empty value"))

    def testWarningInShellMode(self):
        buffer = io.StringIO()
        with mock.patch("lexonaut.faults.console", Console(file=buffer, width=100, color_system=None)):
            trigger(EmptyValueWarning("empty value"), shell=True)
        self.assertIn("empty value", buffer.getvalue())

    def testHelpInLibraryMode(self):
        with self.assertRaises(HelpRequested) as context:
            trigger(HelpRequested(help=Text("usage: tool")))
        self.assertEqual(context.exception.help.plain, "usage: tool")

    def testHelpInShellMode(self):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout), self.assertRaises(SystemExit) as context:
            trigger(HelpRequested(help=Text("usage: tool")), shell=True)
        self.assertEqual(context.exception.code, 0)
        self.assertIn("usage: tool", stdout.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(object())


class TestRendering(TestCase):
    def testHeaderMessageAndHint(self):
        output = render(UnknownOptionError("unknown short option '-x'", prog="tool", hint="try 'tool --help'"))
        self.assertIn("[ tool — 11101 | Unknown Option ]", output)
        self.assertIn("unknown short option '-x'", output)
        self.assertIn("→ try 'tool --help'", output)

    def testTitleOverride(self):
        output = render(MissingArgumentError("missing", prog="tool", title="no value"))
        self.assertIn("| No Value ]", output)

    def testWarningHeader(self):
        output = render(EmptyValueWarning("empty value for option '-o'", prog="tool"))
        self.assertIn("[ tool — 12101 | Empty Value ]", output)

    def testFancyPanel(self):
        output = render(UnexpectedArgumentError("unexpected argument 'x'", prog="tool", fancy=True))
        self.assertIn("unexpected argument 'x'", output)
        self.assertIn("Unexpected Argument", output)


class TestGetdoc(TestCase):
    def testMissing(self):
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_OPTION))

    def testHostDocs(self):
        docs = {FaultCode.UNKNOWN_OPTION: "the option is not declared"}
        with mock.patch.object(__import__("__main__"), "__docs__", docs, create=True):
            self.assertEqual(getdoc(FaultCode.UNKNOWN_OPTION), "the option is not declared")

    def testRejectsNonCodes(self):
        with self.assertRaises(TypeError):
            getdoc(11101)


if __name__ == "__main__":
    unittest.main()
