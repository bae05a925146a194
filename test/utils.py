"""
Tests for the internal helpers.

This module verifies:
- The Unset sentinel: singleton identity, falsiness, representation, finality
  and PEP 604 unions.
- rename(): both call forms and its argument validation.
- view(): read-only properties over private fields.
"""
import unittest
from unittest import TestCase

from tristate.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), UnsetType())
        self.assertIs(Unset, UnsetType())

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, None)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testUnion(self) -> None:
        self.assertIsInstance("text", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(None, str | Unset)


class RenameTest(TestCase):
    """
    Test suite for `rename`.
    """

    def testDirectForm(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "other"), function)
        self.assertEqual(function.__name__, "other")
        self.assertEqual(function.__qualname__, "other")

    def testDecoratorForm(self) -> None:
        @rename("TriState")
        def function():
            pass

        self.assertEqual(function.__name__, "TriState")

    def testValidation(self) -> None:
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename(len, "other")
        with self.assertRaises(TypeError):
            rename("name")(1)


class ViewTest(TestCase):
    """
    Test suite for `view`.
    """

    def testReadOnly(self) -> None:
        class Record:
            name = view("name")

            def __init__(self):
                self._name = "tristate"

        record = Record()
        self.assertEqual(record.name, "tristate")
        with self.assertRaises(AttributeError):
            record.name = "other"

    def testValidation(self) -> None:
        with self.assertRaises(TypeError):
            view(1)


if __name__ == "__main__":
    unittest.main()
