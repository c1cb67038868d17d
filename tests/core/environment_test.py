import unittest

from lba.core.environment import Environment
from lba.core.tokens import Token, TokenType
from lba.lang.error import UndefinedVariable


def name(lexeme):
    return Token(TokenType.IDENTIFIER, lexeme, line=3, column=4)


class EnvironmentTestCase(unittest.TestCase):

    def setUp(self):
        self.outer = Environment()
        self.outer.define("a", 1.0)
        self.outer.define("b", 2.0)
        self.inner = Environment(self.outer)
        self.inner.define("b", "shadow")

    def test_lookup_walks_the_chain(self):
        self.assertEqual(1.0, self.inner.get(name("a")))
        self.assertEqual("shadow", self.inner.get(name("b")))
        self.assertEqual(2.0, self.outer.get(name("b")))

    def test_assign_rebinds_nearest_frame(self):
        self.inner.assign(name("a"), 10.0)
        self.assertEqual(10.0, self.outer.get(name("a")))
        self.assertNotIn("a", self.inner.values)

        self.inner.assign(name("b"), "changed")
        self.assertEqual("changed", self.inner.get(name("b")))
        self.assertEqual(2.0, self.outer.get(name("b")))

    def test_redefine_overwrites(self):
        self.outer.define("a", None)
        self.assertIsNone(self.inner.get(name("a")))
        self.assertIn("a", self.inner)

    def test_undefined(self):
        for operation in (lambda: self.inner.get(name("missing")), lambda: self.inner.assign(name("missing"), 1.0)):
            with self.assertRaises(UndefinedVariable) as context:
                operation()
            self.assertEqual("Undefined variable 'missing'.", context.exception.msg)
            self.assertEqual((3, 4), (context.exception.line, context.exception.column))

        self.assertNotIn("missing", self.inner)

    def test_frames_are_shared(self):
        closure = Environment(self.inner)
        self.outer.define("late", True)
        self.assertIs(True, closure.get(name("late")))
        self.assertIs(self.outer, closure.find("late"))
        self.assertIsNone(closure.find("nowhere"))


if __name__ == '__main__':
    unittest.main()
