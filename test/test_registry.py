"""
Registry behavioral tests.

Scope
- Name resolution through the short and long maps.
- Uniqueness of short and long names across the registry, and atomic enrollment
  (a failed declaration leaves no observable trace).
- Prefix agreement, freezing, positional ordering, and resetting values.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from lexonaut import (
    Flag,
    SingleValueOption,
    PositionalArgument,
    DuplicateNameError,
    InvalidNameError,
)
from lexonaut.reader import TokenReader
from lexonaut.registry import Registry


class TestRegistry(TestCase):
    def setUp(self):
        self.registry = Registry()
        self.every = self.registry.enroll(Flag("-a", "--all"))
        self.integer = self.registry.enroll(SingleValueOption("-i", "--integer", type=int, default=0))
        self.name = self.registry.enroll(PositionalArgument("name"))

    def snapshot(self):
        return (
            self.registry.arguments,
            sorted(self.registry.names()),
            self.registry.positionals,
        )

    def testLookup(self):
        self.assertIs(self.registry.short("a"), self.every)
        self.assertIs(self.registry.long("all"), self.every)
        self.assertIs(self.registry.long("integer"), self.integer)
        self.assertIsNone(self.registry.short("z"))
        self.assertIsNone(self.registry.long("zzz"))

    def testOrdering(self):
        self.assertEqual(self.registry.arguments, (self.every, self.integer, self.name))
        self.assertEqual(self.registry.options, (self.every, self.integer))
        self.assertEqual(self.registry.positionals, (self.name,))
        self.assertEqual(len(self.registry), 3)
        self.assertEqual(list(self.registry), [self.every, self.integer, self.name])

    def testNames(self):
        self.assertEqual(sorted(self.registry.names()), ["--all", "--integer", "-a", "-i"])

    def testContainsIsIdentity(self):
        self.assertIn(self.every, self.registry)
        self.assertNotIn(Flag("-a", "--all"), self.registry)

    def testDuplicateShort(self):
        before = self.snapshot()
        with self.assertRaises(DuplicateNameError):
            self.registry.enroll(Flag("-a"))
        self.assertEqual(self.snapshot(), before)

    def testDuplicateLong(self):
        before = self.snapshot()
        with self.assertRaises(DuplicateNameError):
            self.registry.enroll(Flag("--integer"))
        self.assertEqual(self.snapshot(), before)

    def testEnrollmentIsAtomic(self):
        """
        A fresh short name followed by a colliding long name registers nothing.
        """
        before = self.snapshot()
        for names in (("-z", "--all"), ("--zeta", "-i"), ("-y", "--yes", "--integer")):
            with self.subTest(names=names):
                with self.assertRaises(DuplicateNameError):
                    self.registry.enroll(Flag(*names))
                self.assertEqual(self.snapshot(), before)
                self.assertIsNone(self.registry.short("z"))
                self.assertIsNone(self.registry.long("zeta"))
                self.assertIsNone(self.registry.long("yes"))

    def testSameArgumentTwice(self):
        with self.assertRaises(DuplicateNameError):
            self.registry.enroll(self.name)

    def testPositionalNamesDoNotCollideWithLongs(self):
        self.registry.enroll(Flag("--name"))
        self.registry.enroll(PositionalArgument("all"))
        self.assertEqual(len(self.registry.positionals), 2)

    def testPrefixMismatch(self):
        with self.assertRaises(InvalidNameError):
            self.registry.enroll(Flag("+z"))

    def testRejectsNonArguments(self):
        with self.assertRaises(TypeError):
            self.registry.enroll("-z")

    def testFrozen(self):
        self.registry.freeze()
        with self.assertRaises(RuntimeError):
            self.registry.enroll(Flag("-z"))
        self.assertIsNone(self.registry.short("z"))

    def testReset(self):
        self.every.parse(TokenReader([]))
        self.integer.parse(TokenReader(["9"]))
        self.registry.reset()
        self.assertIs(self.every.get(), False)
        self.assertEqual(self.integer.get(), 0)
        self.assertIsNone(self.name.get())


class TestCustomPrefix(TestCase):
    def testLookupWithoutPrefix(self):
        registry = Registry("+")
        flag = registry.enroll(Flag("+a", "++all"))
        self.assertIs(registry.short("a"), flag)
        self.assertIs(registry.long("all"), flag)
        self.assertEqual(sorted(registry.names()), ["++all", "+a"])
        with self.assertRaises(InvalidNameError):
            registry.enroll(Flag("-b"))


if __name__ == "__main__":
    unittest.main()
