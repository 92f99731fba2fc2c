# python
"""
Options module behavioral tests (descriptor construction, metadata, handle).

Scope
- Validate keys: shell-style forms, emptiness, duplicates.
- Validate metadata normalization and shape rules (positional vs named, flags).
- Validate configure() on the mutable handle and callback invocation.

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None for any parameter; omit instead.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from clapp import Option, DeclarationError


class TestKeys(TestCase):
    """Lookup keys of named options."""

    def testShortAndLongKeys(self):
        option = Option("-c", "--cfg")
        self.assertEqual(option.keys, ("-c", "--cfg"))
        self.assertEqual(option.name, "-c/--cfg")
        self.assertFalse(option.positional)

    def testSingleHyphenLongKeyAndDigits(self):
        self.assertEqual(Option("-cfg").keys, ("-cfg",))
        self.assertEqual(Option("-i1").keys, ("-i1",))
        self.assertEqual(Option("--out-file").keys, ("--out-file",))

    def testMalformedKeysRejected(self):
        for key in ("cfg", "-", "--", "-1", "--a--b", "-a_b"):
            with self.subTest(key=key):
                with self.assertRaises(DeclarationError):
                    Option(key)

    def testEmptyKeyRejected(self):
        with self.assertRaises(DeclarationError):
            Option("  ")

    def testDuplicateKeysRejected(self):
        with self.assertRaises(DeclarationError):
            Option("-a", "-a")

    def testNonStringKeyRejected(self):
        with self.assertRaises(TypeError):
            Option(1)

    def testDeclarationErrorIsValueError(self):
        with self.assertRaises(ValueError):
            Option("bad")


class TestMetadata(TestCase):
    """Metadata normalization and shape rules."""

    def testDefaults(self):
        option = Option("-a")
        self.assertIs(option.type, str)
        self.assertEqual(option.value, "")
        self.assertFalse(option.was_set)
        self.assertFalse(option.has_default)
        self.assertIsNone(option.default)
        self.assertIsNone(option.metavar)
        self.assertIsNone(option.descr)
        self.assertEqual(option.choices, ())

    def testFlagDefaultsToBool(self):
        option = Option("-s", flag=True)
        self.assertIs(option.type, bool)
        self.assertIs(option.value, False)

    def testExplicitNoneDefaultIsADefault(self):
        option = Option("-a", default=None)
        self.assertTrue(option.has_default)
        self.assertIsNone(option.default)

    def testPositionalNeedsMetavar(self):
        self.assertTrue(Option(metavar="INPUT_FILE").positional)
        self.assertEqual(Option(metavar="INPUT_FILE").name, "INPUT_FILE")
        with self.assertRaises(DeclarationError):
            Option()

    def testPositionalShapeRules(self):
        for metadata in ({"metavar": "-FILE"},
                         {"metavar": "FILE", "flag": True},
                         {"metavar": "FILE", "overruling": True},
                         {"metavar": "FILE", "choices": ["a"]}):
            with self.subTest(**metadata):
                with self.assertRaises(DeclarationError):
                    Option(**metadata)

    def testFlagCannotHaveChoices(self):
        with self.assertRaises(DeclarationError):
            Option("-s", flag=True, choices=["a"])

    def testStringMetadataValidation(self):
        with self.assertRaises(ValueError):
            Option("-a", descr=" ")
        with self.assertRaises(TypeError):
            Option("-a", descr=None)
        with self.assertRaises(TypeError):
            Option("-a", metavar=3)

    def testChoicesValidation(self):
        self.assertEqual(Option("-m", choices=["slow", "fast"]).choices, ("slow", "fast"))
        self.assertEqual(Option("-m", choices={"slow", "fast"}).choices, ("fast", "slow"))
        with self.assertRaises(TypeError):
            Option("-m", choices="ab")
        with self.assertRaises(TypeError):
            Option("-m", choices=[1, 2])
        with self.assertRaises(ValueError):
            Option("-m", choices=["a", "a"])

    def testTypeValidation(self):
        self.assertIsNone(Option("-u", type=str.upper).value)
        with self.assertRaises(TypeError):
            Option("-u", type=object())

    def testBindingsMustBeCallable(self):
        with self.assertRaises(TypeError):
            Option("-a", store="target")
        with self.assertRaises(TypeError):
            Option("-a", callback=42)

    def testRepr(self):
        self.assertTrue(repr(Option("-a")).startswith("option(keys=('-a',)"))


class TestHandle(TestCase):
    """Mutable descriptor handle."""

    def testConfigureReturnsSelf(self):
        option = Option("-a")
        self.assertIs(option.configure(required=True, descr="Some option."), option)
        self.assertTrue(option.required)
        self.assertEqual(option.descr, "Some option.")

    def testConfigureRejectsKeysAndUnknownNames(self):
        option = Option("-a")
        with self.assertRaises(TypeError):
            option.configure(keys=("-b",))
        with self.assertRaises(TypeError):
            option.configure(colour="red")

    def testConfigureIsAtomic(self):
        option = Option("-a", choices=["x"])
        with self.assertRaises(DeclarationError):
            option.configure(required=True, flag=True)
        self.assertFalse(option.required)
        self.assertFalse(option.flag)

    def testConfigureTypeMovesInitialValue(self):
        option = Option("-n")
        option.configure(type=int)
        self.assertEqual(option.value, 0)

    def testConfigureFlagSwitchesToBool(self):
        option = Option("-s")
        option.configure(flag=True)
        self.assertIs(option.type, bool)
        self.assertIs(option.value, False)

    def testCallInvokesCallback(self):
        received = []
        option = Option("-a", callback=received.append)
        option()
        self.assertEqual(received, [""])

    def testCallWithoutCallback(self):
        self.assertIsNone(Option("-a")())


if __name__ == "__main__":
    unittest.main()
