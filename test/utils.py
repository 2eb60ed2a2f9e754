"""
Helper tests (Unset sentinel, nullify, rename).

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from envflag.utils import Unset, UnsetType, nullify, rename


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})


class TestNullify(TestCase):

    def testUnsetTakesDefault(self):
        self.assertEqual(nullify(Unset, "fallback"), "fallback")

    def testFalsyValuesArePreserved(self):
        for value in (None, 0, ""):
            self.assertIs(nullify(value, "fallback"), value)


class TestRename(TestCase):

    def testDirect(self):
        function = rename(lambda: None, name="named")
        self.assertEqual((function.__name__, function.__qualname__), ("named", "named"))

    def testCurried(self):
        @rename("named")
        def function(): ...

        self.assertEqual(function.__name__, "named")

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            rename(print, name=1)


if __name__ == "__main__":
    unittest.main()
