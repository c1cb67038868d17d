import math
import unittest

from lba.core.environment import Environment
from lba.core.natives import STANDARD_LIBRARY, register_standard_library
from lba.core.tokens import Token, TokenType
from lba.core.values import (
    LbaClass, LbaInstance, NativeFunction, NativeInstance, is_equal, is_truthy, stringify,
)
from lba.lang.error import TypeMismatch, UndefinedProperty


def name(lexeme):
    return Token(TokenType.IDENTIFIER, lexeme)


class ValuesTestCase(unittest.TestCase):

    def test_stringify(self):
        klass = LbaClass("Point", {})
        cases = [
            (None, "nil"),
            (True, "true"),
            (False, "false"),
            (3.0, "3"),
            (-0.5, "-0.5"),
            (2.5, "2.5"),
            (math.inf, "Infinity"),
            (-math.inf, "-Infinity"),
            (math.nan, "NaN"),
            ("text", "text"),
            ([1.0, "two", [None, True]], "[1, two, [nil, true]]"),
            ([], "[]"),
            (klass, "<class Point>"),
            (LbaInstance(klass), "<instance of Point>"),
            (NativeFunction("clock", 0, None), "<native fn clock>"),
            (NativeInstance("Window", object(), description="<ui window: Main>"), "<ui window: Main>"),
            (NativeInstance("Dock", object()), "<ui dock>"),
        ]
        for value, expected in cases:
            self.assertEqual(expected, stringify(value), repr(value))

    def test_truthiness(self):
        should_pass = [True, 0.0, "", [], 1.0, "false", LbaClass("A", {})]
        should_fail = [None, False]

        for case in should_pass:
            self.assertTrue(is_truthy(case), repr(case))
        for case in should_fail:
            self.assertFalse(is_truthy(case), repr(case))

    def test_equality(self):
        items = [1.0]
        should_pass = [(None, None), (1.0, 1.0), ("a", "a"), (True, True), (items, items)]
        should_fail = [(None, False), (True, 1.0), (0.0, False), ("1", 1.0), ([1.0], [1.0]), (math.nan, math.nan)]

        for left, right in should_pass:
            self.assertTrue(is_equal(left, right), (left, right))
        for left, right in should_fail:
            self.assertFalse(is_equal(left, right), (left, right))

    def test_class_arity_and_statics(self):
        klass = LbaClass("A", {}, {"make": NativeFunction("make", 0, None)})
        self.assertEqual(0, klass.arity())
        self.assertIsInstance(klass.get(name("make")), NativeFunction)

        with self.assertRaises(UndefinedProperty) as context:
            klass.get(name("missing"))
        self.assertEqual("Undefined static method 'missing'.", context.exception.msg)

    def test_instance_fields(self):
        instance = LbaInstance(LbaClass("A", {}))
        instance.set(name("x"), 1.0)
        self.assertEqual(1.0, instance.get(name("x")))

        with self.assertRaises(UndefinedProperty) as context:
            instance.get(name("y"))
        self.assertEqual("Undefined property 'y'.", context.exception.msg)

    def test_native_instance_properties(self):
        method = NativeFunction("add", 1, None, kind="native method")
        handle = NativeInstance("Dock", object(), {"add": method})
        self.assertIs(method, handle.get(name("add")))
        self.assertEqual("<native method add>", str(method))

        with self.assertRaises(UndefinedProperty) as context:
            handle.get(name("remove"))
        self.assertEqual("Undefined property 'remove' on Dock.", context.exception.msg)


class StandardLibraryTestCase(unittest.TestCase):

    def setUp(self):
        self.environment = register_standard_library(Environment())

    def call(self, function, *arguments):
        return self.environment.get(name(function)).call(None, list(arguments))

    def test_registered(self):
        for function in STANDARD_LIBRARY:
            self.assertIs(function, self.environment.values[function.name])
        self.assertEqual(["clock", "len", "get"], list(self.environment.values))

    def test_clock(self):
        first = self.call("clock")
        self.assertIsInstance(first, float)
        self.assertLessEqual(first, self.call("clock"))

    def test_len(self):
        self.assertEqual(3.0, self.call("len", [1.0, 2.0, 3.0]))
        self.assertEqual(0.0, self.call("len", []))

        with self.assertRaises(TypeMismatch) as context:
            self.call("len", "abc")
        self.assertEqual("Argument to len() must be a list.", context.exception.msg)
        self.assertIsNone(context.exception.token)

    def test_get(self):
        items = ["a", "b", "c"]
        cases = {
            0.0: "a",
            2.0: "c",
            3.0: None,
            -1.0: None,
            1.5: None,
        }
        for index, expected in cases.items():
            self.assertEqual(expected, self.call("get", items, index), index)

        should_fail = [("abc", 0.0), (items, "0"), (items, True), (None, 0.0)]
        for arguments in should_fail:
            with self.assertRaises(TypeMismatch):
                self.call("get", *arguments)


if __name__ == '__main__':
    unittest.main()
