import io
import re
import unittest

from lba.lang.error import ErrorHandler
from lba.lang.session import Session
from lba.lang.shell import Shell


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()
        sess = Session(ErrorHandler(stream=self.stderr), Session.SH_FILE, cmd_line=True, stdout=self.stdout)
        self.shell = Shell(sess)

    def test_lines_share_bindings(self):
        for line in ["let a = 10;", "print a * 2;", "a = a + 1;", "print a;"]:
            self.assertFalse(self.shell.onecmd(line), line)
        self.assertEqual(["20", "11"], self.stdout.getvalue().splitlines())

    def test_line_continuation(self):
        self.shell.onecmd("fn twice(x) {")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)

        self.shell.onecmd("return x * 2;")
        self.shell.onecmd("}")
        self.assertEqual("> ", self.shell.prompt)

        self.shell.onecmd("print twice(4);")
        self.assertEqual(["8"], self.stdout.getvalue().splitlines())

    def test_errors_do_not_end_the_session(self):
        self.shell.onecmd("print nope;")
        self.shell.onecmd("print ;")
        self.shell.onecmd('print "still here";')

        self.assertEqual(["still here"], self.stdout.getvalue().splitlines())
        self.assertIn("Undefined variable 'nope'.", re.sub(r"\x1b\[[0-9;]*m", "", self.stderr.getvalue()))
        self.assertEqual([], self.shell.sess.error_handler.errors)

    def test_exit(self):
        self.assertFalse(self.shell.onecmd(""))
        self.assertTrue(self.shell.onecmd("exit"))


if __name__ == '__main__':
    unittest.main()
