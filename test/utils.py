"""
Tests for the internal helpers.

This module verifies:
- Unset singleton identity, falsiness and finality.
- coalesce() replacing only Unset.
- rename() in function and decorator forms.
- mirror() exposing immutable views of backing fields.
"""
import copy
import unittest
from types import MappingProxyType
from unittest import TestCase

import argline
from argline.utils import *


class UtilsTest(TestCase):
    """
    Test suite for argline.utils.
    """

    def testPackageMetadata(self) -> None:
        self.assertEqual(argline.__title__, "argline")
        self.assertEqual(argline.__author__, "argline developers")

    def testUnsetSingleton(self) -> None:
        self.assertIs(Unset, UnsetType())
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testUnsetFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Sub", (UnsetType,), {})

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")

    def testRenameFunctionForm(self) -> None:
        def f(): ...
        self.assertIs(rename(f, "g"), f)
        self.assertEqual(f.__name__, "g")
        self.assertEqual(f.__qualname__, "g")

    def testRenameDecoratorForm(self) -> None:
        @rename("work")
        def f(): ...
        self.assertEqual(f.__name__, "work")

    def testRenameRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "x")
        with self.assertRaises(TypeError):
            rename()

    def testMirror(self) -> None:
        class Holder:
            items = mirror("items")
            names = mirror("names")
            table = mirror("table")

            def __init__(self):
                self._items = [1, [2, 3]]
                self._names = {"a"}
                self._table = {"k": ["v"]}

        holder = Holder()
        self.assertEqual(holder.items, (1, (2, 3)))
        self.assertEqual(holder.names, frozenset({"a"}))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.table["k"], ("v",))
        with self.assertRaises(AttributeError):
            holder.items = ()


if __name__ == "__main__":
    unittest.main()
