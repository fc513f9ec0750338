"""Lexical analysis for Lox: turns raw source text into a flat list of tokens.

Lexical grammar, loosely:

```
<token>      ::= "(" | ")" | "{" | "}" | "," | "." | "-" | "+" | ";" | "/" | "*"
               | "!" | "!=" | "=" | "==" | ">" | ">=" | "<" | "<="   ; two-character forms always win
<string>     ::= '"' <any char but '"'>* '"'                          ; may span lines, no escapes
<number>     ::= <digit>+ ( "." <digit>+ )?                           ; no leading/trailing dot, no exponent
<identifier> ::= <alpha> ( <alpha> | <digit> )*                      ; <alpha> is a-z, A-Z or "_"
<comment>    ::= "//" <any char but newline>* | "/*" <any char>* "*/" ; block comments do not nest
```
"""

from lox.lang.error import LexicalError
from lox.syntax.tokens import KEYWORDS, Token, TokenType


class Scanner:
    """Single left-to-right pass over source. A Scanner is good for one scan_tokens call."""
    SINGLE = {
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "-": TokenType.MINUS,
        "+": TokenType.PLUS,
        ";": TokenType.SEMICOLON,
        "*": TokenType.STAR,
    }
    # char: (type if followed by "=", type otherwise)
    DOUBLE = {
        "!": (TokenType.BANG_EQUAL, TokenType.BANG),
        "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
        "<": (TokenType.LESS_EQUAL, TokenType.LESS),
        ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
    }
    WHITESPACE = " \r\t"

    def __init__(self, source, line=1):
        """line is the line number of the first line of source."""
        self.source = source
        self.tokens = []

        self.start = 0    # offset of first char in the lexeme being scanned
        self.current = 0  # offset of char about to be consumed
        self.line = line
        self.line_start = 0  # offset of first char in the current line
        self.start_line_start = 0  # line_start of the line the lexeme begins on

    def scan_tokens(self):
        """Scans the whole source and returns the tokens, always terminated by a single EOF. Raises LexicalError on
        the first malformed lexeme.
        """
        while not self.is_at_end():
            self.start = self.current
            self.start_line_start = self.line_start
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line, self.current - self.line_start))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in Scanner.SINGLE:
            self.add_token(Scanner.SINGLE[char])
        elif char in Scanner.DOUBLE:
            matched, unmatched = Scanner.DOUBLE[char]
            self.add_token(matched if self.match("=") else unmatched)
        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.is_at_end():
                    self.advance()
            elif self.match("*"):
                self.block_comment()
            else:
                self.add_token(TokenType.SLASH)
        elif char in Scanner.WHITESPACE:
            pass
        elif char == "\n":
            self.newline()
        elif char == '"':
            self.string()
        elif Scanner.is_digit(char):
            self.number()
        elif Scanner.is_alpha(char):
            self.identifier()
        else:
            raise LexicalError(self.line, f"Unexpected character '{char}'.", char, self.column())

    def string(self):
        while self.peek() != '"' and not self.is_at_end():
            if self.advance() == "\n":
                self.newline()

        if self.is_at_end():
            raise LexicalError(self.line, "Unterminated string.", self.source[self.start:self.current],
                               self.column())

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while Scanner.is_digit(self.peek()):
            self.advance()

        # fractional part only if a digit follows the dot: "1." scans as NUMBER DOT
        if self.peek() == "." and Scanner.is_digit(self.peek_next()):
            self.advance()
            while Scanner.is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while Scanner.is_alphanumeric(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def block_comment(self):
        """Consumes through the first "*/". Interior "/*" is not special."""
        while not self.is_at_end():
            if self.peek() == "*" and self.peek_next() == "/":
                self.advance()
                self.advance()
                return

            if self.advance() == "\n":
                self.newline()

        raise LexicalError(self.line, "Unterminated block comment.", self.source[self.start:self.start + 2],
                           self.column())

    def add_token(self, token_type, literal=None):
        self.tokens.append(Token(token_type, self.source[self.start:self.current], literal, self.line, self.column()))

    def column(self):
        """Offset of the lexeme being scanned in the line it starts on."""
        return self.start - self.start_line_start

    def newline(self):
        self.line += 1
        self.line_start = self.current

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        """Consumes the next char only if it is expected."""
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        return "\0" if self.is_at_end() else self.source[self.current]

    def peek_next(self):
        return "\0" if self.current + 1 >= len(self.source) else self.source[self.current + 1]

    def is_at_end(self):
        return self.current >= len(self.source)

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    @staticmethod
    def is_alpha(char):
        return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"

    @staticmethod
    def is_alphanumeric(char):
        return Scanner.is_alpha(char) or Scanner.is_digit(char)


def scan(source, line=1):
    """Shortcut for Scanner(source, line).scan_tokens()."""
    return Scanner(source, line).scan_tokens()
