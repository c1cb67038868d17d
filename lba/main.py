"""Command-line entry point for the Lambda interpreter (the `lba` console script).

```
lba                 ; runs the bundled default script
lba SCRIPT          ; runs SCRIPT
lba -i              ; interactive mode
lba --check SCRIPT  ; prints lexer/parser diagnostics as JSON, does not run anything
```

Exit codes: 0 on success, 1 if the script cannot be read, 64 on bad usage, 65 on lex/parse errors, 70 on runtime errors.
"""

import argparse
import json
import logging
import sys

from lba.lang.diagnostics import diagnose
from lba.lang.error import ErrorHandler
from lba.lang.session import Session
from lba.lang.shell import Shell
from lba.ui.toolkit import render_preview

EX_USAGE = 64

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(prog="lba", description="Run a Lambda (.lba) script.")
    parser.add_argument("script", nargs="*", help="script to run (if empty, runs the bundled default script)")
    parser.add_argument("-i", "--interactive", action="store_true", help="start the interactive interpreter")
    parser.add_argument("--check", action="store_true", help="print lexer/parser diagnostics as JSON and exit")
    parser.add_argument("--preview", metavar="PATH", help="write an HTML preview of the script's UI to PATH")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def check(error_handler, path):
    """Prints the diagnostics of the script at path. Returns the exit code."""
    sess = Session(error_handler, path)
    diagnostics = diagnose(sess.source)
    print(json.dumps([diagnostic.to_dict() for diagnostic in diagnostics], indent=2))
    return 65 if diagnostics else 0


def write_preview(toolkit, path):
    html = render_preview(toolkit)
    if html is None:
        logger.info("no window was created, skipping preview")
        return

    with open(path, "w", encoding="utf-8") as file:
        file.write(html)
    print(f"[*] App preview written to {path}")


def main(argv=None):
    """Runs the Lambda interpreter. Called from the lba executable script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s - %(levelname)s - %(message)s",
    )

    if len(args.script) > 1:
        parser.print_usage()
        sys.exit(EX_USAGE)

    with ErrorHandler() as error_handler:
        if args.interactive:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()
            return

        path = args.script[0] if args.script else Session.DEFAULT_SCRIPT

        if args.check:
            sys.exit(check(error_handler, path))

        sess = Session(error_handler, path)
        sess.run()

        if args.preview:
            write_preview(sess.toolkit, args.preview)

    sys.exit(error_handler.exit_code)


if __name__ == "__main__":
    main()
