import contextlib
import io
import json
import os
import tempfile
import unittest

from lba import main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.addCleanup(self.directory.cleanup)

    def script(self, source, name="script.lba"):
        path = os.path.join(self.directory.name, name)
        with open(path, "w", encoding="utf-8") as file:
            file.write(source)
        return path

    def run_main(self, *argv):
        """Returns (exit code, stdout, stderr) of lba invoked with argv."""
        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as context:
                main.main(list(argv))
        return context.exception.code, stdout.getvalue(), stderr.getvalue()

    def test_exit_codes(self):
        cases = {
            "print 1 + 2;": 0,
            "print ;": 65,
            "let a = @;": 65,
            "print 1; print nope;": 70,
            'print "a" - 1;': 70,
        }
        for source, expected in cases.items():
            code, __, __ = self.run_main(self.script(source))
            self.assertEqual(expected, code, source)

    def test_usage(self):
        code, out, __ = self.run_main("a.lba", "b.lba")
        self.assertEqual(main.EX_USAGE, code)
        self.assertIn("usage: lba", out)

    def test_missing_file(self):
        code, __, err = self.run_main(os.path.join(self.directory.name, "missing.lba"))
        self.assertEqual(1, code)
        self.assertIn("could not be opened", err)

    def test_output(self):
        code, out, err = self.run_main(self.script("let a = 10; let b = 20; print a + b;"))
        self.assertEqual((0, "30\n", ""), (code, out, err))

    def test_runtime_error_keeps_output(self):
        code, out, err = self.run_main(self.script("print 1;\nprint nope;"))
        self.assertEqual(70, code)
        self.assertEqual("1\n", out)
        self.assertIn("Undefined variable", err)

    def test_default_script(self):
        code, out, __ = self.run_main()
        self.assertEqual(0, code)
        self.assertEqual(["Hello from Lambda", "2", "42", "<ui window: Lambda Desktop>"], out.splitlines())

    def test_check(self):
        code, out, __ = self.run_main("--check", self.script("let a = 1;\nprint ;"))
        self.assertEqual(65, code)
        diagnostic, = json.loads(out)
        self.assertEqual("at ';': Expect expression.", diagnostic["message"])
        self.assertEqual({"line": 1, "character": 6}, diagnostic["range"]["start"])

        code, out, __ = self.run_main("--check", self.script("print nope;"))
        self.assertEqual((0, []), (code, json.loads(out)))

    def test_preview(self):
        preview = os.path.join(self.directory.name, "preview.html")
        code, out, __ = self.run_main("--preview", preview, self.script('ui w = Window("Demo");'))

        self.assertEqual(0, code)
        self.assertIn("App preview written to", out)
        with open(preview, encoding="utf-8") as file:
            self.assertIn("<h1>Demo</h1>", file.read())

    def test_preview_without_window(self):
        preview = os.path.join(self.directory.name, "preview.html")
        code, out, __ = self.run_main("--preview", preview, self.script("print 1;"))

        self.assertEqual((0, "1\n"), (code, out))
        self.assertFalse(os.path.exists(preview))


if __name__ == '__main__':
    unittest.main()
