import unittest

from lox.lang.error import LexicalError
from lox.syntax.scanner import Scanner, scan
from lox.syntax.tokens import Token, TokenType


def types(source):
    return [token.type for token in scan(source)]


class ScannerTestCase(unittest.TestCase):

    def test_empty(self):
        self.assertEqual([Token(TokenType.EOF, "", None, 1)], scan(""))

    def test_punctuation(self):
        expected = [
            TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
            TokenType.PLUS, TokenType.MINUS, TokenType.SEMICOLON, TokenType.EOF
        ]
        self.assertEqual(expected, types("(){}+-;"))

    def test_operators(self):
        cases = {
            "!": [TokenType.BANG],
            "!=": [TokenType.BANG_EQUAL],
            "= ==": [TokenType.EQUAL, TokenType.EQUAL_EQUAL],
            "<<=": [TokenType.LESS, TokenType.LESS_EQUAL],
            ">=>": [TokenType.GREATER_EQUAL, TokenType.GREATER],
            "===": [TokenType.EQUAL_EQUAL, TokenType.EQUAL],
            "/ * , .": [TokenType.SLASH, TokenType.STAR, TokenType.COMMA, TokenType.DOT],
        }
        for case, expected in cases.items():
            self.assertEqual(expected + [TokenType.EOF], types(case), case)

    def test_string(self):
        string, eof = scan('"abc"')
        self.assertEqual(TokenType.STRING, string.type)
        self.assertEqual('"abc"', string.lexeme)
        self.assertEqual("abc", string.literal)
        self.assertEqual(TokenType.EOF, eof.type)

        multiline, eof = scan('"a\nb"')
        self.assertEqual("a\nb", multiline.literal)
        self.assertEqual(2, multiline.line)
        self.assertEqual(2, eof.line)

        empty, __ = scan('""')
        self.assertEqual("", empty.literal)

    def test_number(self):
        cases = {"123": 123.0, "45.67": 45.67, "0": 0.0, "007": 7.0}
        for case, expected in cases.items():
            number, __ = scan(case)
            self.assertEqual(TokenType.NUMBER, number.type, case)
            self.assertIsInstance(number.literal, float, case)
            self.assertEqual(expected, number.literal, case)

        # no trailing/leading dot forms
        self.assertEqual([TokenType.NUMBER, TokenType.DOT, TokenType.EOF], types("1."))
        self.assertEqual([TokenType.DOT, TokenType.NUMBER, TokenType.EOF], types(".5"))
        self.assertEqual([TokenType.NUMBER, TokenType.DOT, TokenType.IDENTIFIER, TokenType.EOF], types("1.e"))

    def test_identifiers_and_keywords(self):
        cases = {
            "and": TokenType.AND, "class": TokenType.CLASS, "else": TokenType.ELSE, "false": TokenType.FALSE,
            "for": TokenType.FOR, "fun": TokenType.FUN, "if": TokenType.IF, "nil": TokenType.NIL,
            "or": TokenType.OR, "print": TokenType.PRINT, "return": TokenType.RETURN, "super": TokenType.SUPER,
            "this": TokenType.THIS, "true": TokenType.TRUE, "var": TokenType.VAR, "while": TokenType.WHILE,
            "orchid": TokenType.IDENTIFIER, "_private": TokenType.IDENTIFIER, "a1_b2": TokenType.IDENTIFIER,
            "Var": TokenType.IDENTIFIER,
        }
        for case, expected in cases.items():
            token, __ = scan(case)
            self.assertEqual(expected, token.type, case)
            self.assertEqual(case, token.lexeme, case)
            self.assertIsNone(token.literal, case)

    def test_comments_and_whitespace(self):
        cases = {
            "// nothing here": [],
            "a // b\nc": [TokenType.IDENTIFIER, TokenType.IDENTIFIER],
            "a /* b */ c": [TokenType.IDENTIFIER, TokenType.IDENTIFIER],
            "/* /* not nested */ a": [TokenType.IDENTIFIER],
            "/**/": [],
            " \t\r\n": [],
            "1/2": [TokenType.NUMBER, TokenType.SLASH, TokenType.NUMBER],
        }
        for case, expected in cases.items():
            self.assertEqual(expected + [TokenType.EOF], types(case), case)

        # first "*/" closes the comment, whatever came before it
        self.assertEqual(
            [TokenType.STAR, TokenType.SLASH, TokenType.EOF], types("/* /* inner */ */")
        )

    def test_lines(self):
        tokens = scan("a\nb\n/* c\n\nd */ e\n\"f\ng\" h")
        self.assertEqual([1, 2, 5, 7, 7, 7], [token.line for token in tokens])

        tokens = Scanner("a\nb", line=10).scan_tokens()
        self.assertEqual([10, 11, 11], [token.line for token in tokens])

    def test_errors(self):
        cases = {
            "@": (1, "Unexpected character '@'."),
            "a\n  #": (2, "Unexpected character '#'."),
            '"abc': (1, "Unterminated string."),
            '"a\nbc': (2, "Unterminated string."),
            "/* abc": (1, "Unterminated block comment."),
            "/* a\n*": (2, "Unterminated block comment."),
        }
        for case, (line, msg) in cases.items():
            with self.assertRaises(LexicalError, msg=case) as context:
                scan(case)
            self.assertEqual(line, context.exception.line, case)
            self.assertEqual(msg, context.exception.msg, case)

    def test_columns(self):
        tokens = scan('print 2 - 1 - "a";\n  x = "b\nc";')
        self.assertEqual([0, 6, 8, 10, 12, 14, 17, 2, 4, 6, 2, 3], [token.column for token in tokens])

        # columns are positional, not part of token identity
        self.assertEqual(Token(TokenType.MINUS, "-", None, 1), tokens[2])

        cases = {"@": 0, "a\n  #": 2, 'x "abc': 2, "a /* b": 2}
        for case, column in cases.items():
            with self.assertRaises(LexicalError, msg=case) as context:
                scan(case)
            self.assertEqual(column, context.exception.column, case)

    def test_idempotent(self):
        source = 'var a = 1;\nfun f(x) { return x * 2.5; } // done\nprint f(a) + "s";'
        self.assertEqual(scan(source), scan(source))
        self.assertEqual(TokenType.EOF, scan(source)[-1].type)
        self.assertEqual(1, types(source).count(TokenType.EOF))


if __name__ == '__main__':
    unittest.main()
