# python
"""
Conversions module behavioral tests (built-in converters, registries, faults).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from clapp import ConversionRegistry, ConversionError, FaultCode, converters, to_bool


class TestBuiltins(TestCase):

    def testPermissiveBool(self):
        for raw in ("", "1", "true"):
            with self.subTest(raw=raw):
                self.assertIs(to_bool(raw), True)
        for raw in ("false", "0", "no", "TRUE", "yes", "garbage"):
            with self.subTest(raw=raw):
                self.assertIs(to_bool(raw), False)

    def testNumbers(self):
        self.assertEqual(converters.convert(int, "123"), 123)
        self.assertEqual(converters.convert(float, "3.1415"), 3.1415)
        self.assertEqual(converters.convert(str, "text"), "text")

    def testInitialValues(self):
        self.assertEqual(converters.initial(str), "")
        self.assertEqual(converters.initial(int), 0)
        self.assertEqual(converters.initial(float), 0.0)
        self.assertIs(converters.initial(bool), False)
        self.assertIsNone(converters.initial("unknown"))

    def testMalformedNumber(self):
        with self.assertRaises(ConversionError) as context:
            converters.convert(int, "12a")
        fault = context.exception
        self.assertEqual(fault.options["raw"], "12a")
        self.assertIs(fault.options["type"], int)
        self.assertEqual(fault.options["code"], FaultCode.UNCONVERTIBLE_VALUE)
        self.assertIsInstance(fault.__cause__, ValueError)

    def testLookupFailureBecomesConversionError(self):
        registry = ConversionRegistry()
        registry.register("color", {"RED": 1, "GREEN": 2}.__getitem__)
        with self.assertRaises(ConversionError) as context:
            registry.convert("color", "BLUE")
        self.assertEqual(context.exception.options["raw"], "BLUE")
        self.assertIsInstance(context.exception.__cause__, KeyError)


class TestConversionRegistry(TestCase):

    def testChildFallsBackToParent(self):
        registry = ConversionRegistry(converters)
        self.assertIn(int, registry)
        self.assertEqual(registry.convert(int, "7"), 7)

    def testChildRegistrationDoesNotLeak(self):
        registry = ConversionRegistry(converters)
        registry.register("hex", lambda raw: int(raw, 16))
        self.assertEqual(registry.convert("hex", "ff"), 255)
        self.assertNotIn("hex", converters)

    def testDecoratorForm(self):
        registry = ConversionRegistry()

        @registry.register("pair", initial=("", ""))
        def pair(raw):
            left, right = raw.split(":")
            return left, right

        self.assertEqual(registry.convert("pair", "a:b"), ("a", "b"))
        self.assertEqual(registry.initial("pair"), ("", ""))
        with self.assertRaises(ConversionError):
            registry.convert("pair", "a")

    def testCallableTagsAreSupported(self):
        registry = ConversionRegistry()
        self.assertTrue(registry.supports(str.upper))
        self.assertEqual(registry.convert(str.upper, "abc"), "ABC")
        self.assertFalse(registry.supports("unknown"))
        with self.assertRaises(KeyError):
            registry.convert("unknown", "abc")

    def testRegisterValidation(self):
        registry = ConversionRegistry()
        with self.assertRaises(TypeError):
            registry.register([], str)
        with self.assertRaises(TypeError):
            registry.register("tag", "converter")
        with self.assertRaises(TypeError):
            ConversionRegistry("parent")

    def testUnhashableTagNotContained(self):
        self.assertNotIn([], converters)


if __name__ == "__main__":
    unittest.main()
