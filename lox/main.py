"""Runs Lox source files, or an interactive shell if no file is given. Also uses error handling context manager.
Installed as the lox executable script.
"""

import argparse

from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell


def main(argv=None):
    """Runs lox interpreter. Called from lox executable script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="lox", description="Lox tree-walking interpreter")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--tokens", action="store_true", help="print scanned tokens before running")
        parser.add_argument("--ast", action="store_true", help="print parsed statements before running")
        args = parser.parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, show_tokens=args.tokens, show_ast=args.ast)
            sess.run()

        else:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True, show_tokens=args.tokens, show_ast=args.ast)
            Shell(sess).cmdloop()


if __name__ == "__main__":
    main()
