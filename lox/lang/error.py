"""Error handling for the Lox language. The scanner, parser and interpreter only ever raise or hand over LoxExceptions,
which are plain structured values (line, location context, message). Presentation is ErrorHandler's job: if another
type of error makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored

from lox.syntax.tokens import TokenType


class LoxException(Exception):
    """Base for every error the Lox core can produce. where is the location context (e.g. " at 'x'"), lexeme is the
    offending source text and column its offset in the source line, both used to point at it when diagnosing.
    """
    EXIT_CODE = 1

    def __init__(self, line, msg, lexeme="", where="", internal=False, column=None):
        super().__init__(msg)
        self.line = line
        self.msg = msg
        self.lexeme = lexeme
        self.column = column
        self.where = where
        self.internal = internal

    def __str__(self):
        prefix = f"[line {self.line}] " if self.line is not None else ""
        return f"{prefix}Error{self.where}: {self.msg}"


class LexicalError(LoxException):
    """Unexpected character, unterminated string or unterminated block comment. Fatal to the current scan."""
    EXIT_CODE = 65

    def __init__(self, line, msg, lexeme="", column=None):
        super().__init__(line, msg, lexeme, column=column)


class TokenError(LoxException):
    """Error located at a token."""

    def __init__(self, token, msg):
        where = " at end" if token.type is TokenType.EOF else f" at '{token.lexeme}'"
        super().__init__(token.line, msg, token.lexeme, where, column=token.column)
        self.token = token


class ParseError(TokenError):
    """Syntax error. The parser recovers from these, but a program with any ParseError is never interpreted."""
    EXIT_CODE = 65


class LoxRuntimeError(TokenError):
    """Undefined variable, bad operand, non-callable callee or arity mismatch. Halts interpretation."""
    EXIT_CODE = 70


class ErrorHandler:
    """Reporting collaborator for Lox errors, and a context manager that turns anything raised inside it into a
    reported error.
    """
    ERROR = "red"
    HIGHLIGHT = "yellow"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}  # path: (number of first line, source lines), most recently registered last
        self.had_error = False
        self.had_runtime_error = False

    def register_file(self, path, source="", first_line=1):
        """Registers path and its source, so that errors can be located and diagnosed. Registering a path again
        replaces its source (the shell registers each line it reads).
        """
        self.traceback.pop(path, None)
        self.traceback[path] = (first_line, source.splitlines())

    def remove_file(self, path):
        self.traceback.pop(path, None)

    def reset(self):
        """Clears error state. Used in command-line mode after each line."""
        self.had_error = False
        self.had_runtime_error = False

    def _location(self, error):
        """Returns (path, source line) of error, if error has a line and a file is registered."""
        if not self.traceback or error.line is None:
            return None, None

        path, (first_line, lines) = next(reversed(self.traceback.items()))
        idx = error.line - first_line
        if 0 <= idx < len(lines):
            return path, lines[idx]
        return path, None

    @staticmethod
    def diagnose(error, line):
        """Returns line with the offending lexeme of error highlighted and underlined, or None if the lexeme cannot be
        found in line. The lexeme is looked for at error.column first, then anywhere in line.
        """
        lexeme = error.lexeme.split("\n")[0]
        if not lexeme:
            return None

        start = error.column
        if start is None or line[start:start + len(lexeme)] != lexeme:
            start = line.find(lexeme)
        if start == -1:
            return None
        end = start + len(lexeme)

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], ErrorHandler.HIGHLIGHT, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), ErrorHandler.HIGHLIGHT, attrs=["bold"])

        return diagnosis

    def report(self, error):
        """Prints error without exiting. Can be handed to the parser and interpreter as their reporter."""
        if isinstance(error, LoxRuntimeError):
            self.had_runtime_error = True
        else:
            self.had_error = True

        path, line = self._location(error)

        error_msg = ""
        if path is not None:
            error_msg += colored(f"{path}:{error.line}: ", attrs=["bold"])
        elif error.line is not None:
            error_msg += colored(f"[line {error.line}] ", attrs=["bold"])

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += f"{error.where}: {error.msg}"
        print(error_msg)

        if line is not None and not error.internal:
            diagnosis = ErrorHandler.diagnose(error, line)
            if diagnosis:
                print(diagnosis)

    def abort(self, exit_code):
        """Exits with exit_code if fatal, otherwise forgets the error so the next line starts clean."""
        if self.fatal:
            sys.exit(exit_code)
        self.reset()

    def throw(self, error):
        """Reports error, then exits if fatal."""
        self.report(error)
        self.abort(error.EXIT_CODE)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(LoxException(None, "keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(LoxException(None, "maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, LoxException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(LoxException(None, f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
