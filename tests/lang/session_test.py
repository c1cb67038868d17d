import io
import os
import tempfile
import unittest

from lba.lang.error import ErrorHandler, LbaException
from lba.lang.session import Session


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.stdout = io.StringIO()
        self.error_handler = ErrorHandler(fatal=False, stream=io.StringIO())

    def test_load_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "hello.lba")
            with open(path, "w", encoding="utf-8") as file:
                file.write('print "hello";\n')

            sess = Session(self.error_handler, path, stdout=self.stdout)

        self.assertEqual('print "hello";\n', sess.source)
        self.assertEqual(path, self.error_handler.path)
        self.assertTrue(sess.run())
        self.assertEqual("hello\n", self.stdout.getvalue())

    def test_unreadable_file(self):
        with self.assertRaises(LbaException) as context:
            Session(self.error_handler, os.path.join("no", "such", "file.lba"))
        self.assertTrue(context.exception.msg.endswith("could not be opened"))
        self.assertFalse(context.exception.diagnosis)

    def test_reserved_filename(self):
        with self.assertRaises(LbaException):
            Session(self.error_handler, Session.SH_FILE)

        sess = Session(self.error_handler, Session.SH_FILE, cmd_line=True)
        self.assertEqual("", sess.source)
        self.assertFalse(self.error_handler.fatal)

    def test_default_script(self):
        sess = Session(self.error_handler, Session.DEFAULT_SCRIPT, stdout=self.stdout)
        self.assertTrue(sess.run())
        self.assertEqual(["Hello from Lambda", "2", "42", "<ui window: Lambda Desktop>"],
                         self.stdout.getvalue().splitlines())
        self.assertEqual(1, len(sess.toolkit.windows))

    def test_preprocess_line(self):
        cases = {
            # (line, pending): (result, continued)
            ("print 1;  ", ""): ("print 1;", False),
            ("fn f() {", ""): ("fn f() {", True),
            ("return 1;", "fn f() {"): ("fn f() {\nreturn 1;", True),
            ("}", "fn f() {\nreturn 1;"): ("fn f() {\nreturn 1;\n}", False),
        }
        for (line, pending), expected in cases.items():
            self.assertEqual(expected, Session.preprocess_line(line, pending))

    def test_command_line_bindings_persist(self):
        sess = Session(self.error_handler, Session.SH_FILE, cmd_line=True, stdout=self.stdout)

        self.assertTrue(sess.run("let a = 10;"))
        self.assertTrue(sess.run("fn twice(x) { return x * 2; }"))
        self.assertFalse(sess.run("print nope;"))
        self.assertFalse(sess.run("print ;"))
        self.assertTrue(sess.run("print twice(a);"))

        self.assertEqual(["20"], self.stdout.getvalue().splitlines())

    def test_compile(self):
        sess = Session(self.error_handler, "<test>", source="")
        self.assertEqual(2, len(sess.compile("let a = 1; print a;")))

        self.assertIsNone(sess.compile("let @ = 1;"))
        messages = [error.msg for error in self.error_handler.errors]
        self.assertEqual([
            "Unexpected character '@'.",
            "at '=': Expect variable name.",
            "execution halted due to 2 syntax error(s)",
        ], messages)


if __name__ == '__main__':
    unittest.main()
