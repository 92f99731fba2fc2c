# python
"""
Utils module behavioral tests (sentinel, helpers, ordinals, bindings).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from types import SimpleNamespace
from unittest import TestCase

from clapp.utils import Unset, UnsetType, binder, coalesce, mirror, ordinal, rename


class TestUnset(TestCase):

    def testSentinel(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")
        self.assertIs(UnsetType(), Unset)

    def testUnions(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", Unset | str))
        self.assertFalse(isinstance(None, str | Unset))

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestHelpers(TestCase):

    def testRename(self):
        def function():
            pass

        self.assertEqual(rename(function, "other").__name__, "other")

        @rename("decorated")
        def another():
            pass

        self.assertEqual(another.__qualname__, "decorated")
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename()

    def testMirrorCopiesContainers(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ["a", ["b"]]

        holder = Holder()
        self.assertEqual(holder.items, ("a", ("b",)))
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testOrdinal(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(112), "112th")


class TestBinder(TestCase):

    def testMappingTarget(self):
        settings = {}
        setter = binder(settings, "cfg")
        setter("config.json")
        self.assertEqual(settings, {"cfg": "config.json"})
        self.assertEqual(setter.__name__, "store_cfg")

    def testAttributeTarget(self):
        settings = SimpleNamespace()
        binder(settings, "silent")(True)
        self.assertIs(settings.silent, True)

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            binder({}, 1)


if __name__ == "__main__":
    unittest.main()
