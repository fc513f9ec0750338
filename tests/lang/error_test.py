import io
import unittest
from contextlib import redirect_stdout

from lox.lang.error import ErrorHandler, LexicalError, LoxException, LoxRuntimeError, ParseError
from lox.runtime.interpreter import Interpreter
from lox.syntax.parser import parse
from lox.syntax.scanner import scan
from lox.syntax.tokens import Token, TokenType


def token(lexeme, line=1, token_type=TokenType.IDENTIFIER):
    return Token(token_type, lexeme, None, line)


class LoxExceptionTestCase(unittest.TestCase):

    def test_where(self):
        self.assertEqual(" at 'x'", ParseError(token("x"), "msg").where)
        self.assertEqual(" at end", ParseError(token("", token_type=TokenType.EOF), "msg").where)
        self.assertEqual("", LexicalError(3, "Unexpected character '#'.", "#").where)

    def test_str(self):
        cases = {
            "[line 2] Error at 'x': Expect expression.": ParseError(token("x", 2), "Expect expression."),
            "[line 1] Error: Unterminated string.": LexicalError(1, "Unterminated string."),
            "Error: keyboard interrupt": LoxException(None, "keyboard interrupt"),
        }
        for expected, case in cases.items():
            self.assertEqual(expected, str(case))

    def test_exit_codes(self):
        self.assertEqual(65, LexicalError.EXIT_CODE)
        self.assertEqual(65, ParseError.EXIT_CODE)
        self.assertEqual(70, LoxRuntimeError.EXIT_CODE)


class ErrorHandlerTestCase(unittest.TestCase):

    def report(self, handler, error):
        out = io.StringIO()
        with redirect_stdout(out):
            handler.report(error)
        return out.getvalue()

    def test_report(self):
        handler = ErrorHandler()
        out = self.report(handler, ParseError(token("x", 4), "Expect expression."))

        self.assertIn("[line 4] ", out)
        self.assertIn(" at 'x': Expect expression.", out)
        self.assertTrue(handler.had_error)
        self.assertFalse(handler.had_runtime_error)

        self.report(handler, LoxRuntimeError(token("y"), "Undefined variable 'y'."))
        self.assertTrue(handler.had_runtime_error)

        handler.reset()
        self.assertFalse(handler.had_error or handler.had_runtime_error)

    def test_report_with_source(self):
        handler = ErrorHandler()
        handler.register_file("script.lox", "var a = 1;\nprint a + b;\n")
        out = self.report(handler, LoxRuntimeError(token("b", 2), "Undefined variable 'b'."))

        self.assertIn("script.lox:2: ", out)
        self.assertIn("Undefined variable 'b'.", out)
        self.assertIn("print a + ", out)
        self.assertIn("^", out)

    def test_register_file_offset(self):
        handler = ErrorHandler()
        handler.register_file("<in>", "print nope;", first_line=12)
        out = self.report(handler, LoxRuntimeError(token("nope", 12), "Undefined variable 'nope'."))

        self.assertIn("<in>:12: ", out)
        self.assertIn("print ", out)

    def test_diagnose(self):
        error = ParseError(token("nope"), "msg")
        diagnosis = ErrorHandler.diagnose(error, "print nope;")
        self.assertIsNotNone(diagnosis)

        caret_line = diagnosis.split("\n")[1]
        self.assertEqual(" " * len("  print "), caret_line[:len("  print ")])
        self.assertIn("^~~~", caret_line)

        self.assertIsNone(ErrorHandler.diagnose(error, "something else"))
        self.assertIsNone(ErrorHandler.diagnose(ParseError(token("", token_type=TokenType.EOF), "msg"), "x"))

    def test_diagnose_repeated_lexeme(self):
        source = 'print 2 - 1 - "a";'
        errors = []
        Interpreter(output=lambda text: None, reporter=errors.append).interpret(parse(scan(source)))
        error, = errors
        self.assertEqual(12, error.column)

        caret_line = ErrorHandler.diagnose(error, source).split("\n")[1]
        self.assertEqual(" " * len("  print 2 - 1 "), caret_line[:len("  print 2 - 1 ")])
        self.assertIn("^", caret_line)

        # without a usable column, the first occurrence is underlined
        moved = LoxRuntimeError(Token(TokenType.MINUS, "-", None, 1, 3), "Operands must be numbers.")
        caret_line = ErrorHandler.diagnose(moved, source).split("\n")[1]
        self.assertEqual(" " * len("  print 2 "), caret_line[:len("  print 2 ")])
        self.assertNotEqual(" ", caret_line[len("  print 2 ")])

    def test_throw(self):
        cases = [
            (LexicalError(1, "Unexpected character '@'.", "@"), 65),
            (ParseError(token("x"), "Expect expression."), 65),
            (LoxRuntimeError(token("x"), "Operands must be numbers."), 70),
        ]
        for error, code in cases:
            with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit) as context:
                ErrorHandler().throw(error)
            self.assertEqual(code, context.exception.code, error)

        handler = ErrorHandler(fatal=False)
        with redirect_stdout(io.StringIO()):
            handler.throw(ParseError(token("x"), "Expect expression."))
        self.assertFalse(handler.had_error)  # non-fatal handlers start clean for the next line

    def test_context_manager(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with ErrorHandler(fatal=False):
                raise LexicalError(1, "Unterminated string.")
            with ErrorHandler(fatal=False):
                raise RecursionError()
            with ErrorHandler(fatal=False):
                raise KeyboardInterrupt()

        self.assertIn("Unterminated string.", out.getvalue())
        self.assertIn("maximum recursion depth exceeded", out.getvalue())
        self.assertIn("keyboard interrupt", out.getvalue())

    def test_context_manager_internal(self):
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(ValueError):
            with ErrorHandler(fatal=False):
                raise ValueError("boom")
        self.assertIn("[internal] ", out.getvalue())
        self.assertIn("ValueError: boom", out.getvalue())

    def test_context_manager_exit(self):
        with self.assertRaises(SystemExit) as context:
            with ErrorHandler():
                raise SystemExit(3)
        self.assertEqual(3, context.exception.code)


if __name__ == '__main__':
    unittest.main()
