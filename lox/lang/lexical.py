"""Lexical analysis for Lox. Converts source text into a flat list of tokens in a single left-to-right pass.

Scanning never fails: malformed numbers, unterminated strings and unrecognized characters are recorded in
Lexer.errors and scanning carries on past them. The token list always ends with an EOF token.
"""

from lox.lang.error import LexicalError
from lox.lang.tokens import KEYWORDS, Token, TokenType


SINGLE_CHAR_TOKENS = {
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
EQUAL_SUFFIXED_TOKENS = {
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}

WHITESPACE = " \r\t\n"

# not including letters, digits and underscore
RECOGNIZABLE = set("(){},.*+-/;<>=!\"") | set(WHITESPACE)


def is_digit(char):
    return "0" <= char <= "9"


def is_alpha(char):
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


def is_alphanumeric(char):
    return is_alpha(char) or is_digit(char)


def is_recognizable(char):
    """Whether or not char can begin or continue some token (or is whitespace)."""
    return is_alphanumeric(char) or char in RECOGNIZABLE


class Lexer:
    """Scans source eagerly on construction. Results are in self.tokens and self.errors."""

    def __init__(self, source):
        self.source = source
        self.start = 0
        self.current = 0
        self.line = 1
        self.line_start = 0  # index of the first character of the current line
        self.column = 0      # offset of the current lexeme within its line

        self.tokens = []
        self.errors = []

        while not self.is_at_end:
            self.start = self.current
            self.column = self.start - self.line_start
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line, self.current - self.line_start))

    @property
    def is_at_end(self):
        return self.current >= len(self.source)

    @property
    def peek(self):
        return "\0" if self.is_at_end else self.source[self.current]

    @property
    def lexeme(self):
        return self.source[self.start:self.current]

    def advance(self):
        """Consumes and returns the current character."""
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        """Consumes the current character only if it is expected."""
        if self.peek != expected or self.is_at_end:
            return False
        self.current += 1
        return True

    def add_token(self, token_type, literal=None, line=None):
        self.tokens.append(Token(token_type, self.lexeme, literal, self.line if line is None else line, self.column))

    def error(self, msg, expr, line=None):
        self.errors.append(LexicalError(msg, expr, line=self.line if line is None else line, column=self.column))

    def scan_token(self):
        char = self.advance()

        if char in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[char])

        elif char in EQUAL_SUFFIXED_TOKENS:
            with_equal, without = EQUAL_SUFFIXED_TOKENS[char]
            self.add_token(with_equal if self.match("=") else without)

        elif char == "/":
            if self.match("/"):
                self.comment()
            else:
                self.add_token(TokenType.SLASH)

        elif char == "\n":
            self.line += 1
            self.line_start = self.current

        elif char in WHITESPACE:
            pass

        elif char == '"':
            self.string()

        elif is_digit(char):
            self.number()

        elif is_alpha(char):
            self.identifier()

        else:
            self.unrecognized()

    def comment(self):
        """Line comments run up to (not including) the next newline."""
        while self.peek != "\n" and not self.is_at_end:
            self.advance()

    def string(self):
        start_line = self.line
        while self.peek != '"' and not self.is_at_end:
            if self.peek == "\n":
                self.line += 1
                self.line_start = self.current + 1
            self.advance()

        if self.is_at_end:
            self.error("unterminated string", self.lexeme.split("\n")[0], line=start_line)
            return

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1], line=start_line)

    def number(self):
        while is_digit(self.peek) or self.peek == ".":
            self.advance()

        try:
            value = float(self.lexeme)
        except ValueError:
            self.error("malformed number '{}'", self.lexeme)
            return

        self.add_token(TokenType.NUMBER, value)

    def identifier(self):
        while is_alphanumeric(self.peek):
            self.advance()
        self.add_token(KEYWORDS.get(self.lexeme, TokenType.IDENTIFIER))

    def unrecognized(self):
        """Swallows a whole run of unrecognized characters so that it is reported once."""
        while not self.is_at_end and not is_recognizable(self.peek):
            self.advance()
        self.error("unexpected character(s) '{}'", self.lexeme)
