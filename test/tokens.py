"""
Tokens module behavioral tests (classification and option styles).

Scope
- Validate the option/argument classification for POSIX and DOS styles.
- Validate fused name/value splitting on both separators.
- Validate style construction guards and name rendering.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from sextant import OptionStyle, TokenKind, Tokens, tokenize


class TestClassification(TestCase):
    """Behavioral tests for OptionStyle.classify() and tokenize()."""

    def testShortOption(self):
        token = OptionStyle().classify("-o", 1)
        self.assertIs(token.kind, TokenKind.OPTION)
        self.assertEqual((token.name, token.body, token.long, token.value), ("-o", "o", False, None))

    def testLongOption(self):
        token = OptionStyle().classify("--output")
        self.assertTrue(token.is_option)
        self.assertEqual((token.body, token.long), ("output", True))

    def testFusedValueOnBothSeparators(self):
        style = OptionStyle()
        self.assertEqual(style.classify("-o:f.ext").value, "f.ext")
        self.assertEqual(style.classify("-o=f.ext").value, "f.ext")
        self.assertEqual(style.classify("--out=a:b").value, "a:b")

    def testEmptyFusedValueKept(self):
        token = OptionStyle().classify("-o=")
        self.assertTrue(token.is_option)
        self.assertEqual(token.value, "")

    def testDashesAndNumbersAreArguments(self):
        style = OptionStyle()
        for text in ("-", "--", "-5", "--5", "file", "%stdout", "-o_x"):
            with self.subTest(text=text):
                self.assertIs(style.classify(text).kind, TokenKind.ARGUMENT)

    def testDosStyle(self):
        style = OptionStyle.dos()
        token = style.classify("/f")
        self.assertTrue(token.is_option)
        self.assertIsNone(token.long)
        self.assertEqual(style.classify("/o:value").value, "value")
        self.assertFalse(style.classify("-f").is_option)

    def testTokenizeKeepsIndicesAndContext(self):
        tokens = tokenize(["-o", "f.ext"], OptionStyle(), offset=1, shell=False)
        self.assertIsInstance(tokens, Tokens)
        self.assertEqual([token.index for token in tokens], [1, 2])
        self.assertEqual(tokens.options["shell"], False)
        self.assertEqual(tokens.style, OptionStyle())

    def testTokenizeRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            tokenize(["-o", 3])


class TestOptionStyle(TestCase):
    """Behavioral tests for OptionStyle construction and rendering."""

    def testRenderPerStyle(self):
        self.assertEqual(OptionStyle().render("--output"), "--output")
        self.assertEqual(OptionStyle.dos().render("--output"), "/output")
        self.assertEqual(OptionStyle.dos().render("-o"), "/o")

    def testAmbiguous(self):
        self.assertFalse(OptionStyle().ambiguous)
        self.assertTrue(OptionStyle.dos().ambiguous)

    def testBlankPrefixRejected(self):
        with self.assertRaises(ValueError):
            OptionStyle(long=" ")

    def testAlphanumericSeparatorRejected(self):
        with self.assertRaises(ValueError):
            OptionStyle(separators="x")

    def testEquality(self):
        self.assertEqual(OptionStyle(), OptionStyle("--", "-", ":="))
        self.assertNotEqual(OptionStyle(), OptionStyle.dos())


if __name__ == "__main__":
    unittest.main()
