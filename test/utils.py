"""
Tests for the internal helpers.

This module verifies:
- Unset: singleton identity, falsy semantics, stable repr, copy/pickle identity, finality.
- coalesce(): only Unset is replaced.
- rename(): function and decorator forms, argument validation.
- mirror(): read-only, frozen views over private backing fields.
"""
import copy
import pickle
import unittest
from types import MappingProxyType
from unittest import TestCase

from flagship.utils import *


class UnsetTest(TestCase):
    """Test suite for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopyAndPicklePreserveIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testUnion(self):
        self.assertIsInstance("x", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(1, str | Unset)

    def testCannotSubclass(self):
        with self.assertRaises(TypeError):
            type("Sub", (UnsetType,), {})


class CoalesceTest(TestCase):
    """Test suite for coalesce()."""

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalseyValues(self):
        for value in (None, 0, "", [], False):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):
    """Test suite for rename()."""

    def testFunctionForm(self):
        def f():
            pass

        self.assertIs(rename(f, "work"), f)
        self.assertEqual((f.__name__, f.__qualname__), ("work", "work"))

    def testDecoratorForm(self):
        @rename("work")
        def f():
            pass

        self.assertEqual(f.__name__, "work")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "work")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(len, "length")


class MirrorTest(TestCase):
    """Test suite for mirror()."""

    class Holder:
        items = mirror("items")
        mapping = mirror("mapping")
        names = mirror("names")
        missing = mirror("missing")

        def __init__(self):
            self._items = [1, 2]
            self._mapping = {"a": 1}
            self._names = {"x"}
            self._missing = Unset

    def testFreezesContainers(self):
        holder = self.Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.mapping, MappingProxyType)
        self.assertEqual(holder.names, frozenset({"x"}))

    def testUnsetReadsAsNone(self):
        self.assertIsNone(self.Holder().missing)

    def testReadOnly(self):
        holder = self.Holder()
        with self.assertRaises(AttributeError):
            holder.items = []

    def testPropertyName(self):
        self.assertEqual(self.Holder.items.fget.__name__, "items")

    def testRejectsNonStringName(self):
        with self.assertRaises(TypeError):
            mirror(1)


if __name__ == "__main__":
    unittest.main()
