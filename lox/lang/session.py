"""Session control for Lox. Drives scanning, parsing and interpretation of source, either from a file or line by line
from the command line.
"""

from lox.lang.error import LexicalError, LoxException, ParseError
from lox.runtime.interpreter import Interpreter
from lox.syntax.parser import Parser
from lox.syntax.printer import AstPrinter
from lox.syntax.scanner import Scanner
from lox.syntax.tokens import TokenType


class Session:
    """Governs a Lox session. All code added to a session shares one interpreter, and so one global scope."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, output=print, show_tokens=False, show_ast=False):
        self.error_handler = error_handler

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.output = output

        self.show_tokens = show_tokens  # debug dumps, written to output before running
        self.show_ast = show_ast

        self.interpreter = Interpreter(output, reporter=error_handler.throw)
        self.to_exec = []  # statements parsed but not yet run

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise LoxException(None, f"'{path}' could not be opened")

            self.add(source)

        elif not cmd_line:
            raise LoxException(None, "'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Returns whether line needs to be continued on the next command-line line: that is, whether it ends inside
        a string, a block comment or an unclosed brace.
        """
        try:
            tokens = Scanner(line).scan_tokens()
        except LexicalError as error:
            return error.msg.startswith("Unterminated")

        depth = 0
        for token in tokens:
            if token.type is TokenType.LEFT_BRACE:
                depth += 1
            elif token.type is TokenType.RIGHT_BRACE:
                depth -= 1
        return depth > 0

    def add(self, source, line_num=1):
        """Scans and parses source, queueing its statements for run. line_num is the line number of source's first
        line. Parse errors are all reported; returns whether source parsed cleanly.
        """
        self.error_handler.register_file(self.path, source, line_num)  # in case error is raised

        tokens = Scanner(source, line_num).scan_tokens()
        if self.show_tokens:
            for token in tokens:
                self.output(str(token))

        parser = Parser(tokens, reporter=self.error_handler.report)
        statements = parser.parse()
        if parser.errors:
            self.error_handler.abort(ParseError.EXIT_CODE)
            return False

        if self.show_ast:
            printer = AstPrinter()
            for stmt in statements:
                self.output(printer.print(stmt))

        self.to_exec.extend(statements)
        return True

    def run(self):
        """Runs the queued statements. Runtime errors are reported through the error handler. Returns whether all
        statements ran without error.
        """
        statements, self.to_exec = self.to_exec, []
        return self.interpreter.interpret(statements)
