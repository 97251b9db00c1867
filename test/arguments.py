"""
Arguments module behavioral tests (leaf construction, matching, binding).

Scope
- Validate leaf construction guards (names, hints, types, choices).
- Validate leaf matching against classified tokens: consumption counts,
  fused/split values, conversion and validation failures, flags.
- Validate decorator helpers (option/flag/operand) and type inference.
- Validate usage/help fragments and deprecation notices.

Conventions
- Test method names follow CamelCase per project convention.
- Leaves are exercised directly through match(tokenize(...), cursor).
"""

from __future__ import annotations

import unittest
import warnings
from types import SimpleNamespace
from unittest import TestCase

from sextant import (
    Literal,
    Option,
    Flag,
    Operand,
    Ref,
    Result,
    Cardinality,
    FaultCode,
    OptionStyle,
    DeprecatedArgumentWarning,
    option,
    flag,
    operand,
    tokenize,
)


class TestLiteral(TestCase):
    """Behavioral tests for Literal."""

    def testMatchesExactWord(self):
        result = Literal("run").match(tokenize(["run"]), 0)
        self.assertTrue(result.matched)
        self.assertEqual(result.consumed, 1)

    def testCaseSensitive(self):
        self.assertTrue(Literal("run").match(tokenize(["Run"]), 0).no_match)

    def testNeverMatchesOptionTokens(self):
        self.assertTrue(Literal("run").match(tokenize(["--run"]), 0).no_match)

    def testRequiredByDefault(self):
        self.assertEqual(Literal("run").cardinality, Cardinality.required())

    def testNameGuards(self):
        with self.assertRaises(ValueError):
            Literal("")
        with self.assertRaises(ValueError):
            Literal("two words")
        with self.assertRaises(TypeError):
            Literal(3)

    def testHelp(self):
        self.assertEqual(Literal("run", "Run the thing").help(), [("run", "Run the thing")])


class TestOption(TestCase):
    """Behavioral tests for Option."""

    def setUp(self):
        self.config = SimpleNamespace(file_name="", number=0, values=[])

    def testRequiresAtLeastOneName(self):
        with self.assertRaises(TypeError):
            Option()

    def testInvalidNamesRejected(self):
        for name in ("o", "-1", "--_x", "---x", "-o x"):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    Option(name)

    def testDuplicateNamesRejected(self):
        with self.assertRaises(ValueError):
            Option("-o", "-o")

    def testSplitValue(self):
        opt = Option("-o", "--output", dest=Ref(self.config, "file_name"))
        result = opt.match(tokenize(["-o", "f.ext"]), 0)
        self.assertEqual(result, Result.ok(result.outcome, 2))
        self.assertEqual(self.config.file_name, "f.ext")

    def testFusedValues(self):
        opt = Option("-o", dest=Ref(self.config, "file_name"))
        for text in ("-o:f.ext", "-o=f.ext"):
            with self.subTest(text=text):
                self.config.file_name = ""
                result = opt.match(tokenize([text]), 0)
                self.assertEqual(result.consumed, 1)
                self.assertEqual(self.config.file_name, "f.ext")

    def testShortAndLongNamesEquivalent(self):
        opt = Option("-o", "--output", dest=Ref(self.config, "file_name"))
        opt.match(tokenize(["--output", "%stdout"]), 0)
        long = self.config.file_name
        self.config.file_name = ""
        opt.match(tokenize(["-o", "%stdout"]), 0)
        self.assertEqual(self.config.file_name, long)

    def testLongNameDoesNotMatchShortPrefix(self):
        opt = Option("--output", dest=Ref(self.config, "file_name"))
        self.assertTrue(opt.match(tokenize(["-output", "x"]), 0).no_match)

    def testOtherNamesDoNotMatch(self):
        opt = Option("-o", dest=Ref(self.config, "file_name"))
        self.assertTrue(opt.match(tokenize(["-n", "3"]), 0).no_match)
        self.assertTrue(opt.match(tokenize(["o"]), 0).no_match)
        self.assertTrue(opt.match(tokenize([]), 0).no_match)

    def testMissingValueAtEnd(self):
        result = Option("-o").match(tokenize(["-o"]), 0)
        self.assertIs(result.code, FaultCode.MISSING_VALUE)
        self.assertEqual(result.message, "Expected a value following '-o'")

    def testMissingValueBeforeOption(self):
        result = Option("-o").match(tokenize(["-o", "-f"]), 0)
        self.assertIs(result.code, FaultCode.MISSING_VALUE)

    def testMissingFusedValue(self):
        result = Option("-o").match(tokenize(["-o="]), 0)
        self.assertIs(result.code, FaultCode.MISSING_VALUE)

    def testNegativeNumberIsAValue(self):
        opt = Option("-n", dest=Ref(self.config, "number"))
        self.assertTrue(opt.match(tokenize(["-n", "-5"]), 0))
        self.assertEqual(self.config.number, -5)

    def testConversionFailureLeavesDestinationUntouched(self):
        opt = Option("-n", dest=Ref(self.config, "number"))
        result = opt.match(tokenize(["-n", "forty-two"]), 0)
        self.assertIs(result.code, FaultCode.CONVERSION_ERROR)
        self.assertEqual(result.message, "Unable to convert 'forty-two' to destination type")
        self.assertEqual(self.config.number, 0)

    def testChoicesRejectionLeavesDestinationUntouched(self):
        opt = Option("--mode", dest=Ref(self.config, "file_name"), choices=("fast", "safe"))
        result = opt.match(tokenize(["--mode=slow"]), 0)
        self.assertIs(result.code, FaultCode.VALIDATION_ERROR)
        self.assertEqual(result.message, "Value 'slow' not expected. Allowed values are: fast, safe")
        self.assertEqual(self.config.file_name, "")

    def testPredicateChoices(self):
        opt = Option("-n", dest=Ref(self.config, "number"), choices=lambda value: value % 2 == 0)
        self.assertTrue(opt.match(tokenize(["-n", "4"]), 0))
        result = opt.match(tokenize(["-n", "3"]), 0)
        self.assertEqual(result.message, "Value '3' not expected.")
        self.assertEqual(self.config.number, 4)

    def testListDestinationAccumulates(self):
        opt = Option("-v", dest=Ref(self.config, "values"), type=int)
        self.assertEqual(opt.cardinality, Cardinality.any())
        opt.match(tokenize(["-v", "1"]), 0)
        opt.match(tokenize(["-v=2"]), 0)
        self.assertEqual(self.config.values, [1, 2])

    def testTypeInferredFromDestination(self):
        self.assertIs(Option("-n", dest=Ref(self.config, "number")).type, int)
        self.assertIs(Option("-o").type, str)

    def testNonCallableTypeRejected(self):
        with self.assertRaises(TypeError):
            Option("-n", type=3)

    def testInvalidDestinationRejected(self):
        with self.assertRaises(TypeError):
            Option("-n", dest=3)

    def testDosStyleMatching(self):
        opt = Option("-o", "--output", dest=Ref(self.config, "file_name"))
        self.assertTrue(opt.match(tokenize(["/output:x"], OptionStyle.dos()), 0))
        self.assertEqual(self.config.file_name, "x")

    def testUsageAndHelp(self):
        opt = Option("-o", "--output", dest=Ref(self.config, "file_name"), hint="filename", descr="specifies output file")
        self.assertEqual(opt.usage(), "-o|--output <filename>")
        self.assertEqual(opt.help(), [("-o, --output <filename>", "specifies output file")])
        self.assertEqual(opt.help(OptionStyle.dos()), [("/o, /output <filename>", "specifies output file")])

    def testHintDefaults(self):
        self.assertEqual(Option("-o", dest=Ref(self.config, "file_name")).hint, "file-name")
        self.assertEqual(Option("-m", choices=("a", "b")).hint, "{a,b}")
        self.assertEqual(Option("-m").hint, "value")

    def testDeprecatedWarns(self):
        opt = Option("--old", deprecated=True)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            self.assertTrue(opt.match(tokenize(["--old", "x"]), 0))
        self.assertTrue(any(isinstance(warning.message, DeprecatedArgumentWarning) for warning in caught))


class TestFlag(TestCase):
    """Behavioral tests for Flag."""

    def testSetsReferenceToTrue(self):
        config = SimpleNamespace(flag=False)
        result = Flag("-f", dest=Ref(config, "flag")).match(tokenize(["-f", "something"]), 0)
        self.assertTrue(result.matched)
        self.assertEqual(result.consumed, 1)
        self.assertTrue(config.flag)

    def testFusedValueRejected(self):
        config = SimpleNamespace(flag=False)
        result = Flag("-f", dest=Ref(config, "flag")).match(tokenize(["-f=1"]), 0)
        self.assertIs(result.code, FaultCode.VALIDATION_ERROR)
        self.assertEqual(result.message, "Flag '-f' does not take a value")
        self.assertFalse(config.flag)

    def testTerminatorShortCircuits(self):
        result = Flag("-h", "--help", terminator=True).match(tokenize(["--help"]), 0)
        self.assertTrue(result.short_circuit)
        self.assertEqual(result.consumed, 1)

    def testUsageAndHelp(self):
        switch = Flag("-f", "--flag", descr="A flag")
        self.assertEqual(switch.usage(), "-f|--flag")
        self.assertEqual(switch.help(), [("-f, --flag", "A flag")])


class TestOperand(TestCase):
    """Behavioral tests for Operand."""

    def testConsumesOneArgument(self):
        config = SimpleNamespace(first="")
        result = Operand(dest=Ref(config, "first")).match(tokenize(["something", "else"]), 0)
        self.assertEqual(result.consumed, 1)
        self.assertEqual(config.first, "something")

    def testNeverClaimsOptionTokens(self):
        self.assertTrue(Operand().match(tokenize(["-f"]), 0).no_match)

    def testClaimsDashAndNegativeNumbers(self):
        values = []
        unit = Operand(dest=values.append)
        unit.match(tokenize(["-"]), 0)
        unit.match(tokenize(["-5"]), 0)
        self.assertEqual(values, ["-", "-5"])

    def testUsage(self):
        self.assertEqual(Operand("first arg").usage(), "<first arg>")

    def testHintMustBeString(self):
        with self.assertRaises(TypeError):
            Operand(3)


class TestDecorators(TestCase):
    """Behavioral tests for option/flag/operand decorators."""

    def testOptionDecoratorInfersTypeFromAnnotation(self):
        received = []

        @option("-i", hint="index")
        def onIndex(index: int):
            if not 0 <= index <= 10:
                return Result.runtime_error("index must be between 0 and 10")
            received.append(index)

        self.assertIsInstance(onIndex, Option)
        self.assertIs(onIndex.type, int)
        self.assertTrue(onIndex.match(tokenize(["-i", "3"]), 0))
        result = onIndex.match(tokenize(["-i", "42"]), 0)
        self.assertIs(result.code, FaultCode.RUNTIME_ERROR)
        self.assertEqual(result.message, "index must be between 0 and 10")
        self.assertEqual(received, [3])

    def testFlagDecoratorCallsWithoutArguments(self):
        calls = []

        @flag("-v", "--verbose")
        def onVerbose():
            calls.append(True)

        self.assertIsInstance(onVerbose, Flag)
        onVerbose.match(tokenize(["--verbose"]), 0)
        self.assertEqual(calls, [True])

    def testOperandDecorator(self):
        received = []

        @operand("file")
        def onFile(file):
            received.append(file)

        onFile.match(tokenize(["a.txt"]), 0)
        self.assertEqual(received, ["a.txt"])

    def testDecoratorRejectsDest(self):
        with self.assertRaises(TypeError):
            option("-o", dest=print)

    def testDecoratorRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            option("-o")(3)


if __name__ == "__main__":
    unittest.main()
