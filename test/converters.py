"""
Converter behavioral tests.

Scope
- Validate whole-string conversion for every built-in converter.
- Validate user extension via converter() and plain callables.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import decimal
import math
import unittest
from unittest import TestCase

from argosy import Boolean, Choice, ConversionError, Converter, Float, Integer, String, converter


class TestBoolean(TestCase):

    def testAcceptedSpellings(self):
        convert = Boolean()
        for raw in ("true", "TRUE", "yes", "on", "1"):
            self.assertIs(convert(raw), True, raw)
        for raw in ("false", "False", "no", "off", "0"):
            self.assertIs(convert(raw), False, raw)

    def testRejectsOtherText(self):
        for raw in ("", "maybe", "1 ", "truee", "2"):
            with self.assertRaises(ConversionError):
                Boolean()(raw)


class TestInteger(TestCase):

    def testSignedDecimal(self):
        convert = Integer()
        self.assertEqual(convert("42"), 42)
        self.assertEqual(convert("-42"), -42)
        self.assertEqual(convert("+7"), 7)
        self.assertEqual(convert("007"), 7)

    def testTrailingGarbageRejected(self):
        for raw in ("12abc", "1.5", " 12", "12 ", "1_000", "0x10", "", "-"):
            with self.assertRaises(ConversionError, msg=raw):
                Integer()(raw)

    def testUnsignedRejectsMinus(self):
        convert = Integer(signed=False)
        self.assertEqual(convert("42"), 42)
        with self.assertRaises(ConversionError):
            convert("-1")

    def testBitsBoundRange(self):
        self.assertEqual(Integer(bits=8)("-128"), -128)
        self.assertEqual(Integer(bits=8)("127"), 127)
        with self.assertRaises(ConversionError):
            Integer(bits=8)("128")
        self.assertEqual(Integer(signed=False, bits=8)("255"), 255)
        with self.assertRaises(ConversionError):
            Integer(signed=False, bits=8)("256")

    def testBounds(self):
        self.assertEqual(Integer().bounds, (None, None))
        self.assertEqual(Integer(signed=False).bounds, (0, None))
        self.assertEqual(Integer(bits=16).bounds, (-32768, 32767))

    def testInvalidBits(self):
        with self.assertRaises(TypeError):
            Integer(bits="8")
        with self.assertRaises(ValueError):
            Integer(bits=0)


class TestFloat(TestCase):

    def testDecimalForms(self):
        convert = Float()
        self.assertEqual(convert("3.5"), 3.5)
        self.assertEqual(convert("-2"), -2.0)
        self.assertEqual(convert(".5"), 0.5)
        self.assertEqual(convert("1."), 1.0)
        self.assertEqual(convert("1e3"), 1000.0)
        self.assertEqual(convert("2.5E-1"), 0.25)

    def testSpecialValues(self):
        self.assertTrue(math.isinf(Float()("inf")))
        self.assertTrue(math.isinf(Float()("-Infinity")))
        self.assertTrue(math.isnan(Float()("nan")))

    def testTrailingGarbageRejected(self):
        for raw in ("3.5x", " 3.5", "1_0.0", ".", "e5", "", "--1"):
            with self.assertRaises(ConversionError, msg=raw):
                Float()(raw)


class TestString(TestCase):

    def testIdentity(self):
        for raw in ("", " spaced ", "-x", "--"):
            self.assertEqual(String()(raw), raw)


class TestChoice(TestCase):

    def testMembership(self):
        convert = Choice("fast", "safe")
        self.assertEqual(convert("fast"), "fast")
        with self.assertRaises(ConversionError):
            convert("slow")

    def testInnerConverter(self):
        convert = Choice(1, 2, 3, type=Integer())
        self.assertEqual(convert("2"), 2)
        with self.assertRaises(ConversionError):
            convert("4")
        with self.assertRaises(ConversionError):
            convert("two")

    def testMetavarListsChoices(self):
        self.assertEqual(Choice("a", "b").metavar, "{a,b}")

    def testDuplicatesRejected(self):
        with self.assertRaises(ValueError):
            Choice("a", "a")

    def testEmptyRejected(self):
        with self.assertRaises(TypeError):
            Choice()


class TestUserConverters(TestCase):

    def testWrappedCallableErrorsBecomeConversionErrors(self):
        convert = converter(int)
        self.assertEqual(convert("5"), 5)
        with self.assertRaises(ConversionError):
            convert("five")

    def testDecoratorForm(self):
        @converter
        def even(raw):
            if int(raw) % 2:
                raise ValueError("expected an even number")
            return int(raw)

        self.assertEqual(even("4"), 4)
        with self.assertRaises(ConversionError) as context:
            even("3")
        self.assertEqual(context.exception.reason, "expected an even number")
        self.assertEqual(even.metavar, "EVEN")

    def testSubclassing(self):
        class Upper(Converter):
            def convert(self, raw, /):
                if not raw.isalpha():
                    raise ConversionError(raw, "expected letters")
                return raw.upper()

        self.assertEqual(Upper()("abc"), "ABC")
        with self.assertRaises(ConversionError):
            Upper()("ab1")

    def testArithmeticErrorsBecomeConversionErrors(self):
        convert = converter(decimal.Decimal)
        self.assertEqual(convert("1.5"), decimal.Decimal("1.5"))
        with self.assertRaises(ConversionError):
            convert("abc")

    def testNonCallableRejected(self):
        with self.assertRaises(TypeError):
            converter("int")

    def testNonStringInputRejected(self):
        with self.assertRaises(TypeError):
            Integer()(5)


if __name__ == "__main__":
    unittest.main()
