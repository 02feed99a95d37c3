# python
"""
Utilities behavioral tests (sentinel, coalesce, mirror, pluralize, ordinal).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from frkcli.utils import Unset, UnsetType, coalesce, mirror, pluralize, ordinal, rename


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self):
        with self.assertRaises(TypeError):
            type("Sub", (UnsetType,), {})

    def testUnionInIsinstance(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))
        self.assertFalse(isinstance(None, str | Unset))


class TestCoalesce(TestCase):

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testPreservesFalsyValues(self):
        for value in (None, 0, "", ()):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class TestMirror(TestCase):

    def testReturnsCopies(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ["a", "b"]

        holder = Holder()
        self.assertEqual(holder.items, ("a", "b"))
        self.assertEqual(holder._items, ["a", "b"])

    def testReadOnly(self):
        class Holder:
            items = mirror("items")

        with self.assertRaises(AttributeError):
            Holder().items = ()

    def testRejectsNonString(self):
        with self.assertRaises(TypeError):
            mirror(1)


class TestRename(TestCase):

    def testDecoratorForm(self):
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")

    def testArity(self):
        with self.assertRaises(TypeError):
            rename()


class TestPluralize(TestCase):

    def testRules(self):
        cases = {
            "argument": "arguments",
            "positional argument": "positional arguments",
            "entry": "entries",
            "box": "boxes",
            "key": "keys",
            "Flag": "Flags",
            "OPTION": "OPTIONS",
        }
        for singular, plural in cases.items():
            with self.subTest(singular=singular):
                self.assertEqual(pluralize(singular), plural)

    def testEmpty(self):
        self.assertEqual(pluralize(""), "")


class TestOrdinal(TestCase):

    def testWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self):
        cases = {11: "11th", 12: "12th", 13: "13th", 21: "21st", 22: "22nd", 23: "23rd", 111: "111th", 101: "101st"}
        for number, label in cases.items():
            with self.subTest(number=number):
                self.assertEqual(ordinal(number), label)

    def testRejectsNonInteger(self):
        with self.assertRaises(TypeError):
            ordinal("1")


if __name__ == "__main__":
    unittest.main()
