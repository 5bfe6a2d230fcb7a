import random
import unittest

from lox.lang.error import LexicalError
from lox.lang.lexical import Lexer
from lox.lang.tokens import Token, TokenType


def types(source):
    return [token.type for token in Lexer(source).tokens]


class LexerTestCase(unittest.TestCase):

    def test_operators(self):
        cases = {
            "(){},.-+;*/": [TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
                            TokenType.COMMA, TokenType.DOT, TokenType.MINUS, TokenType.PLUS, TokenType.SEMICOLON,
                            TokenType.STAR, TokenType.SLASH],
            "! != = == > >= < <=": [TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EQUAL_EQUAL,
                                    TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL],
            "!==": [TokenType.BANG_EQUAL, TokenType.EQUAL],
            "<==": [TokenType.LESS_EQUAL, TokenType.EQUAL],
        }
        for case, expected in cases.items():
            self.assertEqual(expected + [TokenType.EOF], types(case), case)

    def test_numbers(self):
        cases = {"123": 123.0, "1.5": 1.5, "0.25": 0.25, "1.": 1.0}
        for case, expected in cases.items():
            token = Lexer(case).tokens[0]
            self.assertIs(TokenType.NUMBER, token.type, case)
            self.assertEqual(expected, token.literal, case)
            self.assertEqual(case, token.lexeme, case)

        lexer = Lexer("1.2.3 + 4")
        self.assertEqual(1, len(lexer.errors))
        self.assertIn("malformed number '1.2.3'", lexer.errors[0].msg)
        self.assertEqual([TokenType.PLUS, TokenType.NUMBER, TokenType.EOF], [token.type for token in lexer.tokens])

    def test_identifiers_and_keywords(self):
        should_be_keywords = {
            "and": TokenType.AND, "class": TokenType.CLASS, "else": TokenType.ELSE, "false": TokenType.FALSE,
            "for": TokenType.FOR, "fun": TokenType.FUN, "if": TokenType.IF, "nil": TokenType.NIL, "or": TokenType.OR,
            "print": TokenType.PRINT, "return": TokenType.RETURN, "super": TokenType.SUPER, "this": TokenType.THIS,
            "true": TokenType.TRUE, "var": TokenType.VAR, "while": TokenType.WHILE,
        }
        for case, expected in should_be_keywords.items():
            self.assertEqual([expected, TokenType.EOF], types(case), case)

        should_be_identifiers = ["nil_", "_nil", "orchid", "x1", "_", "Var", "a_b_c"]
        for case in should_be_identifiers:
            self.assertEqual([TokenType.IDENTIFIER, TokenType.EOF], types(case), case)

        self.assertEqual([TokenType.NUMBER, TokenType.IDENTIFIER, TokenType.EOF], types("1abc"))

    def test_strings(self):
        token = Lexer('"hello world"').tokens[0]
        self.assertIs(TokenType.STRING, token.type)
        self.assertEqual("hello world", token.literal)
        self.assertEqual('"hello world"', token.lexeme)

        lexer = Lexer('"a\nb" x')
        string, identifier, eof = lexer.tokens
        self.assertEqual("a\nb", string.literal)
        self.assertEqual(1, string.line)
        self.assertEqual(2, identifier.line)
        self.assertEqual(2, eof.line)

    def test_unterminated_string(self):
        lexer = Lexer('print "never\nends')
        self.assertEqual([TokenType.PRINT, TokenType.EOF], [token.type for token in lexer.tokens])
        self.assertEqual(1, len(lexer.errors))
        self.assertIn("unterminated string", lexer.errors[0].msg)
        self.assertEqual(1, lexer.errors[0].line)

    def test_unrecognized_characters(self):
        lexer = Lexer("a @#$ b\n~")
        self.assertEqual([TokenType.IDENTIFIER, TokenType.IDENTIFIER, TokenType.EOF],
                         [token.type for token in lexer.tokens])
        self.assertEqual(2, len(lexer.errors))  # one per run of junk
        self.assertIn("'@#$'", lexer.errors[0].msg)
        self.assertEqual(2, lexer.errors[1].line)

        for error in lexer.errors:
            self.assertIsInstance(error, LexicalError)

    def test_comments_and_lines(self):
        lexer = Lexer("// a comment (with tokens)\nprint 1; // trailing\n\n  x")
        self.assertEqual([TokenType.PRINT, TokenType.NUMBER, TokenType.SEMICOLON, TokenType.IDENTIFIER, TokenType.EOF],
                         [token.type for token in lexer.tokens])
        self.assertEqual([2, 2, 2, 4, 4], [token.line for token in lexer.tokens])
        self.assertEqual([TokenType.SLASH, TokenType.EOF], types("/"))
        self.assertEqual([TokenType.EOF], types("// only a comment"))

    def test_columns(self):
        lexer = Lexer('var a\n  = "two\nlines" + 1;')
        self.assertEqual([(1, 0), (1, 4), (2, 2), (2, 4), (3, 7), (3, 9), (3, 10), (3, 11)],
                         [(token.line, token.column) for token in lexer.tokens])

        # equality ignores the column
        self.assertEqual(Token(TokenType.PLUS, "+", None, 3), lexer.tokens[4])

        self.assertEqual(3, Lexer("ok @").errors[0].column)

    def test_eof(self):
        should_pass = ["", "   ", "\n\n", "var a = 1;"]
        for case in should_pass:
            eof = Lexer(case).tokens[-1]
            self.assertIs(TokenType.EOF, eof.type, case)
            self.assertEqual("", eof.lexeme, case)


class LexerPropertyTestCase(unittest.TestCase):
    """Randomized properties over many generated inputs (seeded, so failures reproduce)."""
    ITERATIONS = 300

    TOKENS = ["(", ")", "{", "}", ",", ".", "-", "+", ";", "*", "/", "!", "!=", "=", "==", ">", ">=", "<", "<=",
              "and", "var", "nil", "while", "foo", "_x1", "camelCase", "12", "3.25", '"str"', '"multi\nline"', '""']
    SEPARATORS = [" ", "\n", "\t", "\r\n", "  "]
    IGNORED = ["// comment ( ) \"\n", "//\n", "@", "#$", "é", "~`", "λ"]

    def test_lexemes_reproduce_source(self):
        rng = random.Random(1234)
        for __ in range(LexerPropertyTestCase.ITERATIONS):
            source, expected = "", ""
            for __ in range(rng.randint(0, 25)):
                if rng.random() < 0.25:
                    source += rng.choice(LexerPropertyTestCase.IGNORED)
                else:
                    fragment = rng.choice(LexerPropertyTestCase.TOKENS)
                    source += fragment
                    expected += fragment
                source += rng.choice(LexerPropertyTestCase.SEPARATORS)

            lexed = "".join(token.lexeme for token in Lexer(source).tokens[:-1])
            self.assertEqual(expected, lexed, repr(source))

    def test_never_crashes(self):
        alphabet = 'ab_1.9"/\n @é(){}=!<>;\t+-*,\\'
        rng = random.Random(4321)
        for __ in range(LexerPropertyTestCase.ITERATIONS):
            source = "".join(rng.choice(alphabet) for __ in range(rng.randint(0, 40)))

            lexer = Lexer(source)
            self.assertIs(TokenType.EOF, lexer.tokens[-1].type, repr(source))
            for error in lexer.errors:
                self.assertIsInstance(error, LexicalError)


if __name__ == '__main__':
    unittest.main()
