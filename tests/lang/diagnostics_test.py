import json
import unittest

from lba.lang.diagnostics import Diagnostic, Position, Range, Severity, collect_errors, diagnose


class DiagnosticsTestCase(unittest.TestCase):

    def test_clean_source(self):
        should_pass = ["", "let a = 1; print a;", "** comment only **", "class A { static b() { return 1; } }"]
        for case in should_pass:
            self.assertEqual([], diagnose(case), case)

    def test_lex_errors_come_first(self):
        diagnostics = diagnose("print ;\nlet @ x = 1;")
        self.assertEqual(
            ["Unexpected character '@'.", "at ';': Expect expression."],
            [diagnostic.message for diagnostic in diagnostics],
        )

    def test_ranges_are_zero_based(self):
        diagnostic, = diagnose("let a = 1;\nlet b = 2 @;")
        self.assertEqual(Range(Position(1, 10), Position(1, 11)), diagnostic.range)

        diagnostic, = diagnose("let abc = 1\nprint abc;")
        self.assertEqual("at 'print': Expect ';' after variable declaration.", diagnostic.message)
        self.assertEqual(Range(Position(1, 0), Position(1, 5)), diagnostic.range)

    def test_to_dict(self):
        diagnostic, = diagnose("@")
        self.assertEqual({
            "range": {"start": {"line": 0, "character": 0}, "end": {"line": 0, "character": 1}},
            "message": "Unexpected character '@'.",
            "severity": 1,
            "source": "lba",
        }, diagnostic.to_dict())
        json.dumps(diagnostic.to_dict())

    def test_end_of_input_spans_one_character(self):
        diagnostic, = diagnose("print 1")
        self.assertEqual("at end: Expect ';' after value.", diagnostic.message)
        self.assertEqual(Range(Position(0, 7), Position(0, 8)), diagnostic.range)
        self.assertIs(Severity.ERROR, diagnostic.severity)

    def test_collect_errors(self):
        lex_errors, parse_errors = collect_errors('"open')
        self.assertEqual(["Unterminated string."], [error.msg for error in lex_errors])
        self.assertEqual([], parse_errors)

    def test_from_error_without_location(self):
        lex_errors, __ = collect_errors("#")
        error = lex_errors[0]
        error.line = None
        error.column = None
        self.assertEqual(Range(Position(0, 0), Position(0, 1)), Diagnostic.from_error(error).range)


if __name__ == '__main__':
    unittest.main()
