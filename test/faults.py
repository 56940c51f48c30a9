# python
"""
Faults behavioral tests (codes, options, trigger and rendering).

Scope
- Validate per-fault default options (code, title, hint) and overrides.
- Validate trigger() raising outside shell mode and rendering inside it.
- Validate rich rendering in plain and fancy modes, and getdoc() lookups.

Conventions
- Test method names follow CamelCase per project convention.
- Shell-mode output is captured by patching the module console.
"""

from __future__ import annotations

import copy
import io
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from argot import (
    CommandException,
    InvalidInputError,
    UnknownCommandError,
    DuplicateCommandNameError,
    UnsupportedValueTypeError,
    ValueCoercionError,
    FaultCode,
    trigger,
    getdoc,
)


def render(renderable):
    stream = io.StringIO()
    Console(file=stream, width=120).print(renderable)
    return stream.getvalue()


class TestFaultOptions(TestCase):
    """Behavioral tests for fault defaults and copies."""

    def testCodesPerFault(self):
        self.assertEqual(InvalidInputError().code, FaultCode.INVALID_INPUT)
        self.assertEqual(UnknownCommandError().code, FaultCode.UNKNOWN_COMMAND)
        self.assertEqual(DuplicateCommandNameError().code, FaultCode.DUPLICATE_COMMAND_NAME)
        self.assertEqual(UnsupportedValueTypeError().code, FaultCode.UNSUPPORTED_VALUE_TYPE)
        self.assertEqual(ValueCoercionError().code, FaultCode.VALUE_COERCION_FAILURE)

    def testCodeValuesAreStable(self):
        self.assertEqual(int(FaultCode.INVALID_INPUT), 21101)
        self.assertEqual(int(FaultCode.UNKNOWN_COMMAND), 21102)
        self.assertEqual(int(FaultCode.DUPLICATE_COMMAND_NAME), 21201)
        self.assertEqual(int(FaultCode.UNSUPPORTED_VALUE_TYPE), 21301)
        self.assertEqual(int(FaultCode.VALUE_COERCION_FAILURE), 21302)

    def testNormalizeWithoutHostMapping(self):
        self.assertEqual(FaultCode.UNKNOWN_COMMAND.normalize(), "21102")

    def testAllFaultsShareBase(self):
        for fault in (InvalidInputError, UnknownCommandError, DuplicateCommandNameError,
                      UnsupportedValueTypeError, ValueCoercionError):
            self.assertTrue(issubclass(fault, CommandException))

    def testMessageAndStr(self):
        fault = InvalidInputError("'-c' is not satisfied")
        self.assertEqual(fault.message, "'-c' is not satisfied")
        self.assertEqual(str(fault), "'-c' is not satisfied")
        self.assertEqual(str(InvalidInputError()), "")

    def testOptionsOverrideDefaults(self):
        fault = InvalidInputError("boom", source="-c", hint="")
        self.assertEqual(fault.options["source"], "-c")
        self.assertEqual(fault.options["hint"], "")
        self.assertEqual(fault.options["title"], "invalid input")

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            InvalidInputError().options["code"] = FaultCode.UNKNOWN_COMMAND

    def testReplaceReturnsCopy(self):
        fault = UnknownCommandError("nope")
        replaced = copy.replace(fault, title="no such command", shell=True)
        self.assertIsNot(replaced, fault)
        self.assertIsInstance(replaced, UnknownCommandError)
        self.assertEqual(replaced.message, "nope")
        self.assertEqual(replaced.options["title"], "no such command")
        self.assertFalse(fault.options["shell"])


class TestTrigger(TestCase):
    """Behavioral tests for trigger()."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(ValueCoercionError):
            trigger(ValueCoercionError("cannot read 'abc' as integer"))

    def testRaisedFaultCarriesOverrides(self):
        with self.assertRaises(UnknownCommandError) as context:
            trigger(UnknownCommandError("nope"), source="tasks")
        self.assertEqual(context.exception.options["source"], "tasks")

    def testRendersInShell(self):
        stream = io.StringIO()
        with patch("argot.faults.console", Console(file=stream, width=120)):
            self.assertIsNone(trigger(UnknownCommandError("no command recognises 'hi'"), shell=True))
        output = stream.getvalue()
        self.assertIn("no command recognises 'hi'", output)
        self.assertIn("21102", output)

    def testRejectsNonFault(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


class TestRendering(TestCase):
    """Behavioral tests for rich rendering of faults."""

    def testPlainRendering(self):
        output = render(InvalidInputError("'-c' is not satisfied", source="-c"))
        self.assertIn("21101", output)
        self.assertIn("Invalid Input", output)
        self.assertIn("'-c' is not satisfied", output)
        self.assertIn("check the command with validate() before parsing it", output)

    def testFancyRendering(self):
        output = render(DuplicateCommandNameError("'-c' twice", fancy=True, colorful=True))
        self.assertIn("21201", output)
        self.assertIn("'-c' twice", output)

    def testHintOmittedWhenEmpty(self):
        output = render(InvalidInputError("boom", hint=""))
        self.assertNotIn("→", output)


class TestGetdoc(TestCase):
    """Behavioral tests for getdoc()."""

    def testMissingDocIsNone(self):
        self.assertIsNone(getdoc(FaultCode.INVALID_INPUT))

    def testHostDocs(self):
        docs = {FaultCode.UNKNOWN_COMMAND: "the text matched no command"}
        with patch.object(__import__("__main__"), "__docs__", docs, create=True):
            self.assertEqual(getdoc(FaultCode.UNKNOWN_COMMAND), "the text matched no command")

    def testRejectsNonCode(self):
        with self.assertRaises(TypeError):
            getdoc(21101)


if __name__ == "__main__":
    unittest.main()
