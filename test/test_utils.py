"""
Tests for the internal utilities.

This module verifies semantic guarantees of the `Unset` sentinel and its helpers:
- Singleton identity, falsy semantics, and representation.
- Copying, deep copying, and pickling preserve identity.
- Finality (the type cannot be subclassed) and PEP 604 unions in isinstance checks.
- coalesce(), rename(), mirror(), and ordinal() contracts.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from lexonaut.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def setUp(self) -> None:
        self.unset: UnsetType = UnsetType()

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(self.unset, UnsetType())
        self.assertIs(Unset, self.unset)

    def testFalsy(self) -> None:
        """
        Unset is falsy but distinct from the other falsy values.
        """
        self.assertFalse(self.unset)
        self.assertIsNot(self.unset, None)
        self.assertNotEqual(self.unset, 0)
        self.assertNotEqual(self.unset, "")

    def testRepr(self) -> None:
        self.assertEqual(repr(self.unset), "Unset")
        self.assertEqual(str(self.unset), "Unset")

    def testCopyAndDeepcopy(self) -> None:
        """
        Copies resolve to the singleton itself.
        """
        self.assertIs(copy.copy(self.unset), self.unset)
        self.assertIs(copy.deepcopy(self.unset), self.unset)
        self.assertIs(copy.deepcopy([self.unset])[0], self.unset)

    def testPickleRoundTrip(self) -> None:
        for protocol in range(pickle.HIGHEST_PROTOCOL + 1):
            with self.subTest(protocol=protocol):
                self.assertIs(pickle.loads(pickle.dumps(self.unset, protocol)), self.unset)

    def testUnionInIsinstance(self) -> None:
        """
        `str | Unset` works as an isinstance target in both operand orders.
        """
        self.assertIsInstance(self.unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertIsInstance(self.unset, Unset | int)
        self.assertNotIsInstance(1.5, str | Unset)

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            class Derived(UnsetType):  # NOQA: F-841
                pass


class CoalesceTest(TestCase):
    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalsyValues(self) -> None:
        for value in (None, 0, "", [], False):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):
    def testDecorator(self) -> None:
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")

    def testRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename("name")(1)


class MirrorTest(TestCase):
    def setUp(self) -> None:
        class Holder:
            items = mirror("items")
            label = mirror("label")

            def __init__(self):
                self._items = [1, [2, 3], {4}]
                self._label = "holder"

        self.holder = Holder()

    def testReturnsImmutableCopies(self) -> None:
        self.assertEqual(self.holder.items, (1, (2, 3), frozenset({4})))
        self.assertEqual(self.holder.label, "holder")

    def testIsReadOnly(self) -> None:
        with self.assertRaises(AttributeError):
            self.holder.items = ()

    def testBackingFieldIsUntouched(self) -> None:
        self.holder.items
        self.assertEqual(self.holder._items, [1, [2, 3], {4}])

    def testRejectsNonStringName(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)


class OrdinalTest(TestCase):
    def testWords(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(2), "second")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self) -> None:
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(103), "103rd")
        self.assertEqual(ordinal(112), "112th")

    def testRejectsBadNumbers(self) -> None:
        with self.assertRaises(ValueError):
            ordinal(-1)
        with self.assertRaises(TypeError):
            ordinal(True)
        with self.assertRaises(TypeError):
            ordinal(1.0)


if __name__ == "__main__":
    unittest.main()
