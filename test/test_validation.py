"""
Validation cycle tests (validate_argument, check_args, validate_args).

Scope
- Validate single-argument checks and their diagnostics.
- Validate the help gate (help flags, empty invocation) and its exit status.
- Validate first-failure-wins reporting, help after diagnostics and cleanup ordering.
- Validate short-name normalization of the returned mapping.

Conventions
- Test method names follow CamelCase per project convention.
- Consoles are replaced by uncolored in-memory consoles; exits are asserted
  through SystemExit.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from arghelper import (
    Argument,
    FaultCode,
    Halt,
    InvalidArgumentError,
    MissingArgumentError,
    Proceed,
    ScriptDefinition,
    build_help_text,
    check_args,
    validate_args,
    validate_argument,
)
from arghelper import faults, validation


def lines(text):
    return [line.rstrip() for line in text.splitlines()]


class ConsoleTestCase(TestCase):
    """Capture the help (stdout) and diagnostic (stderr) consoles."""

    def setUp(self):
        self.stdout = Console(file=io.StringIO(), color_system=None, width=200)
        self.stderr = Console(file=io.StringIO(), color_system=None, width=200)
        patches = (
            mock.patch.object(validation, "console", self.stdout),
            mock.patch.object(faults, "console", self.stderr),
        )
        for patch in patches:
            patch.start()
            self.addCleanup(patch.stop)

    @property
    def out(self):
        return self.stdout.file.getvalue()

    @property
    def err(self):
        return self.stderr.file.getvalue()

    def assertShowedHelp(self, definition):
        self.assertEqual(lines(self.out), lines(build_help_text(definition, colorful=False)))


class TestValidateArgument(ConsoleTestCase):
    """Behavioral tests for validate_argument."""

    def testChecksExistenceWithoutValidator(self):
        parsed = {"test": 1, "_": []}
        self.assertTrue(validate_argument(parsed, Argument("test")))
        self.assertFalse(validate_argument(parsed, Argument("test2")))

    def testNoDiagnosticOnSuccess(self):
        self.assertTrue(validate_argument({"test": "value", "_": []}, Argument("test")))
        self.assertEqual(self.err, "")

    def testDefaultErrorMessage(self):
        self.assertFalse(validate_argument({"_": []}, Argument("test2")))
        self.assertEqual(lines(self.err), ["test2: is a required argument"])

    def testOptionalArgumentMayBeAbsent(self):
        self.assertTrue(validate_argument({"_": []}, Argument("test", required=False)))

    def testUsesValidatorWhenProvided(self):
        called = []
        argument = Argument("test", validator=lambda value: called.append(value) or True)
        self.assertTrue(validate_argument({}, argument))
        self.assertEqual(called, [None])

    def testUsesCustomMessageWhenProvided(self):
        argument = Argument("test", message=lambda value: "validationFailedMessage called")
        self.assertFalse(validate_argument({}, argument))
        self.assertEqual(lines(self.err), ["test: validationFailedMessage called"])

    def testCustomMessageReceivesValue(self):
        argument = Argument(
            "env",
            validator=lambda value: value in ("dev", "prod"),
            message=lambda value: f"{value} is not either `dev` or `prod`",
        )
        self.assertFalse(validate_argument({"env": "qa"}, argument))
        self.assertEqual(lines(self.err), ["env: qa is not either `dev` or `prod`"])

    def testFallsBackToShortName(self):
        self.assertTrue(validate_argument({"t": 1}, Argument("test", short_name="t")))

    def testLongNameWinsOverShortName(self):
        argument = Argument("test", short_name="t", validator=lambda value: value == "long")
        self.assertTrue(validate_argument({"test": "long", "t": "short"}, argument))

    def testFailsWhenNothingPassed(self):
        self.assertFalse(validate_argument({"_": []}, Argument("test")))

    def testTypeChecked(self):
        with self.assertRaises(TypeError):
            validate_argument([], Argument("test"))
        with self.assertRaises(TypeError):
            validate_argument({}, "test")


class TestHelpGate(ConsoleTestCase):
    """Behavioral tests for help display and its exit status."""

    def testEmptyInvocationWithoutArgumentsReturnsEmptyMapping(self):
        self.assertEqual(validate_args([], ScriptDefinition()), {"_": []})
        self.assertEqual(self.out, "")

    def testEmptyInvocationShowsHelpWhenAnyArgRequired(self):
        definition = ScriptDefinition(any_arg_required=True)
        with self.assertRaises(SystemExit) as context:
            validate_args([], definition)
        self.assertEqual(context.exception.code, 0)
        self.assertShowedHelp(definition)

    def testLongHelpFlag(self):
        definition = ScriptDefinition()
        with self.assertRaises(SystemExit) as context:
            validate_args(["--help", "--whatever", "whateverValue"], definition)
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(lines(self.out), ["", "Arguments:", "", "  --help, -h    - show this help text"])

    def testShortHelpFlag(self):
        with self.assertRaises(SystemExit) as context:
            validate_args(["-h", "--whatever", "whateverValue"], ScriptDefinition())
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(lines(self.out), ["", "Arguments:", "", "  --help, -h    - show this help text"])

    def testCustomLongHelpFlag(self):
        with self.assertRaises(SystemExit) as context:
            validate_args(["--test", "--whatever", "whateverValue"], ScriptDefinition(help_flags=["test"]))
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(lines(self.out), ["", "Arguments:", "", "  --test    - show this help text"])

    def testCustomShortHelpFlag(self):
        with self.assertRaises(SystemExit) as context:
            validate_args(["-t", "--whatever", "whateverValue"], ScriptDefinition(help_flags=["test", "t"]))
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(lines(self.out), ["", "Arguments:", "", "  --test, -t    - show this help text"])

    def testHelpFlagTakesPrecedenceOverValidation(self):
        definition = ScriptDefinition([Argument("needed")], "script")
        outcome = check_args(["--help"], definition)
        self.assertEqual(outcome, Halt(0, None))
        self.assertEqual(self.err, "")
        self.assertShowedHelp(definition)

    def testHelpFlagIgnoresAnyArgRequired(self):
        for required in (False, True):
            with self.subTest(any_arg_required=required):
                outcome = check_args(["-h"], ScriptDefinition(any_arg_required=required))
                self.assertEqual(outcome.status, 0)

    def testCleanupRunsAfterHelp(self):
        seen = []
        outcome = check_args(["--help"], ScriptDefinition(), cleanup=lambda: seen.append(self.out))
        self.assertIsInstance(outcome, Halt)
        self.assertEqual(len(seen), 1)
        self.assertIn("show this help text", seen[0])


class TestValidationLoop(ConsoleTestCase):
    """Behavioral tests for argument validation and normalization."""

    def testExitsWhenArgumentFails(self):
        definition = ScriptDefinition([Argument("test", validator=lambda value: False)])
        with self.assertRaises(SystemExit) as context:
            validate_args(["--test"], definition)
        self.assertEqual(context.exception.code, 1)

    def testReturnsArgsWhenAllPass(self):
        definition = ScriptDefinition([Argument("test", validator=lambda value: True)])
        parsed = validate_args(["--test", "test value", "miscValue"], definition)
        self.assertEqual(parsed, {"test": "test value", "_": ["miscValue"]})

    def testCleanupCalledBeforeExit(self):
        seen = []
        definition = ScriptDefinition([Argument("arg", "whatever")])
        with self.assertRaises(SystemExit):
            validate_args([], definition, cleanup=lambda: seen.append("cleanup"))
        self.assertEqual(seen, ["cleanup"])

    def testCleanupNotCalledOnSuccess(self):
        seen = []
        validate_args(["--arg", "x"], ScriptDefinition([Argument("arg")]), cleanup=lambda: seen.append("cleanup"))
        self.assertEqual(seen, [])

    def testCleanupMustBeCallable(self):
        with self.assertRaises(TypeError):
            check_args([], ScriptDefinition(), cleanup="cleanup")

    def testTransformsShortNamesToFullNames(self):
        definition = ScriptDefinition([
            Argument("test", short_name="t"),
            Argument("test2", short_name="T"),
        ])
        parsed = validate_args(["--test", "fullNameValue", "-T", "shortNameValue"], definition)
        self.assertEqual(parsed, {"test": "fullNameValue", "test2": "shortNameValue", "_": []})
        self.assertNotIn("T", parsed)

    def testShortOnlyValueKeyedByLongName(self):
        definition = ScriptDefinition([Argument("firstArg", short_name="f")])
        parsed = validate_args(["-f", "firstArgValue"], definition)
        self.assertEqual(parsed, {"firstArg": "firstArgValue", "_": []})

    def testUnsuppliedOptionalArgumentIsNone(self):
        definition = ScriptDefinition([Argument("opt", short_name="o", required=False)])
        self.assertEqual(validate_args([], definition), {"_": [], "opt": None})

    def testEveryDeclaredArgumentKeyedByLongName(self):
        definition = ScriptDefinition([
            Argument("firstArg", short_name="f"),
            Argument("thirdArg", short_name="t", required=False),
            Argument("tolerant", validator=lambda value: True),
        ])
        parsed = validate_args(["-f", "one"], definition)
        self.assertEqual(parsed, {"_": [], "firstArg": "one", "thirdArg": None, "tolerant": None})
        self.assertIsNone(parsed["thirdArg"])

    def testArgumentSharingShortHelpFlagValidatesThroughLongName(self):
        definition = ScriptDefinition([Argument("host", "the host", short_name="h")], "d")
        self.assertEqual(validate_args(["--host", "x"], definition), {"_": [], "host": "x"})
        self.assertEqual(self.out, "")

    def testShortHelpFlagWinsOverSharedShortName(self):
        definition = ScriptDefinition([Argument("host", "the host", short_name="h")], "d")
        self.assertEqual(check_args(["-h"], definition), Halt(0, None))
        self.assertEqual(self.err, "")
        self.assertShowedHelp(definition)

    def testHelpShownOnFailureKeepsCarriageReturnLines(self):
        definition = ScriptDefinition([Argument("a", "x\ry")], "desc")
        outcome = check_args([], definition)
        self.assertEqual(outcome.status, 1)
        shown = lines(self.out)
        self.assertEqual(len(shown), 5)
        self.assertTrue(shown[2].startswith("  --a" + " " * 11 + "(required) - x"))
        self.assertEqual(shown[4], "  --help, -h    - show this help text")

    def testFailedValidationShowsDiagnosticThenHelp(self):
        created = []
        definition = ScriptDefinition([
            Argument(
                "test",
                validator=lambda value: False,
                message=lambda value: created.append(value) or "nope",
            ),
        ])
        outcome = check_args(["--test"], definition)
        self.assertEqual(created, [True])
        self.assertEqual(lines(self.err), ["test: nope"])
        self.assertShowedHelp(definition)
        self.assertEqual(outcome.status, 1)
        self.assertIsInstance(outcome.fault, InvalidArgumentError)
        self.assertEqual(outcome.fault.code, FaultCode.INVALID_ARGUMENT)
        self.assertIs(outcome.fault.argument, definition.arguments[0])

    def testMissingArgumentFault(self):
        definition = ScriptDefinition([Argument("needed", "a needed value")])
        outcome = check_args(["--other"], definition)
        self.assertIsInstance(outcome.fault, MissingArgumentError)
        self.assertEqual(outcome.fault.code, FaultCode.MISSING_ARGUMENT)
        self.assertIsNone(outcome.fault.value)
        self.assertEqual(str(outcome.fault), "needed: is a required argument")

    def testFirstFailureWins(self):
        checked = []

        def never(name):
            return lambda value: checked.append(name) and False

        definition = ScriptDefinition([
            Argument("first", validator=never("first")),
            Argument("second", validator=never("second")),
        ])
        outcome = check_args(["--first", "--second"], definition)
        self.assertEqual(outcome.status, 1)
        self.assertEqual(checked, ["first"])
        self.assertEqual(lines(self.err), ["first: is a required argument"])

    def testProceedOutcome(self):
        definition = ScriptDefinition([Argument("name", short_name="n")])
        outcome = check_args(["-n", "value"], definition)
        self.assertEqual(outcome, Proceed({"_": [], "name": "value"}))
        self.assertEqual(self.out, "")

    def testParseOptionsForwarded(self):
        definition = ScriptDefinition([Argument("zip")])
        parsed = validate_args(["--zip", "01234"], definition, parse_options={"string": ["zip"]})
        self.assertEqual(parsed["zip"], "01234")

    def testShellStringArgs(self):
        definition = ScriptDefinition([Argument("name")])
        parsed = validate_args("--name 'two words' rest", definition)
        self.assertEqual(parsed, {"_": ["rest"], "name": "two words"})

    def testSysArgvDefault(self):
        definition = ScriptDefinition([Argument("name")])
        with mock.patch("sys.argv", ["script.py", "--name", "value"]):
            outcome = check_args(validation.Unset, definition)
        self.assertEqual(outcome.values["name"], "value")

    def testArgsTypeChecked(self):
        with self.assertRaises(TypeError):
            check_args([1], ScriptDefinition())
        with self.assertRaises(TypeError):
            check_args(42, ScriptDefinition())

    def testDefinitionTypeChecked(self):
        with self.assertRaises(TypeError):
            check_args([], {"arguments": []})


if __name__ == "__main__":
    unittest.main()
