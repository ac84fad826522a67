"""
Tests for the Kaleidoscope lexer.

Covers keyword/identifier classification, number literals (including the
loose strtod-style conversion), comments, EOF handling and source
locations.
"""

import unittest
import sys
import os
from io import StringIO

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kaleidoscope.lexer import Lexer, TokenType, tokenize_string, parse_number_text


def _types(source):
    return [token.type for token in tokenize_string(source)]


class TestLexer(unittest.TestCase):
    """Test cases for tokenization."""

    def test_whitespace_and_comments_only(self):
        for source in ["", "   ", "\t\r\n", "# just a comment", "  # one\n# two\r\n  \n"]:
            with self.subTest(source=source):
                tokens = tokenize_string(source)
                self.assertEqual(len(tokens), 1)
                self.assertEqual(tokens[0].type, TokenType.EOF)

    def test_keywords(self):
        source = "def extern if then else for in binary unary var"
        self.assertEqual(_types(source), [
            TokenType.DEF, TokenType.EXTERN, TokenType.IF, TokenType.THEN,
            TokenType.ELSE, TokenType.FOR, TokenType.IN, TokenType.BINARY,
            TokenType.UNARY, TokenType.VAR, TokenType.EOF,
        ])

    def test_keywords_have_no_value(self):
        token = tokenize_string("def")[0]
        self.assertIsNone(token.value)
        self.assertTrue(token.is_keyword)

    def test_identifiers(self):
        tokens = tokenize_string("foo x1 definitely Def")
        self.assertEqual([t.type for t in tokens[:-1]], [TokenType.IDENTIFIER] * 4)
        self.assertEqual([t.value for t in tokens[:-1]], ["foo", "x1", "definitely", "Def"])

    def test_identifier_must_start_with_letter(self):
        tokens = tokenize_string("_a")
        self.assertEqual(tokens[0].type, TokenType.CHAR)
        self.assertEqual(tokens[0].value, "_")
        self.assertEqual(tokens[1].type, TokenType.IDENTIFIER)
        self.assertEqual(tokens[1].value, "a")

    def test_numbers(self):
        tokens = tokenize_string("1 2.5 .5 10.")
        self.assertEqual([t.value for t in tokens[:-1]], [1.0, 2.5, 0.5, 10.0])
        self.assertTrue(all(t.type == TokenType.NUMBER for t in tokens[:-1]))

    def test_malformed_number_is_not_rejected(self):
        tokens = tokenize_string("1.2.3")
        self.assertEqual(len(tokens), 2)
        self.assertEqual(tokens[0].type, TokenType.NUMBER)
        self.assertEqual(tokens[0].lexeme, "1.2.3")
        self.assertEqual(tokens[0].value, 1.2)

    def test_parse_number_text(self):
        self.assertEqual(parse_number_text("42"), 42.0)
        self.assertEqual(parse_number_text("."), 0.0)
        self.assertEqual(parse_number_text(".."), 0.0)
        self.assertEqual(parse_number_text("3..4"), 3.0)

    def test_number_followed_by_identifier(self):
        tokens = tokenize_string("2x")
        self.assertEqual(tokens[0].type, TokenType.NUMBER)
        self.assertEqual(tokens[1].type, TokenType.IDENTIFIER)

    def test_single_character_tokens(self):
        tokens = tokenize_string("1+(x)|;")
        chars = [t.value for t in tokens if t.type == TokenType.CHAR]
        self.assertEqual(chars, ["+", "(", ")", "|", ";"])

    def test_non_ascii_characters_are_char_tokens(self):
        tokens = tokenize_string("é")
        self.assertEqual(tokens[0].type, TokenType.CHAR)
        self.assertEqual(tokens[0].value, "é")

    def test_comment_runs_to_end_of_line(self):
        tokens = tokenize_string("foo # bar baz\nqux")
        self.assertEqual([t.value for t in tokens[:-1]], ["foo", "qux"])

    def test_comment_terminated_by_carriage_return(self):
        tokens = tokenize_string("# note\rx")
        self.assertEqual(tokens[0].value, "x")

    def test_eof_is_sticky(self):
        lexer = Lexer.from_string("x")
        self.assertEqual(lexer.next_token().type, TokenType.IDENTIFIER)
        for _ in range(3):
            self.assertEqual(lexer.next_token().type, TokenType.EOF)

    def test_reads_from_stream(self):
        lexer = Lexer(StringIO("extern sin(x)"), "stream.kal")
        tokens = lexer.tokenize()
        self.assertEqual(tokens[0].type, TokenType.EXTERN)
        self.assertEqual(tokens[1].value, "sin")
        self.assertEqual(tokens[0].location.filename, "stream.kal")

    def test_locations(self):
        tokens = tokenize_string("a\n  b + 1", "loc.kal")
        a, b, plus, one = tokens[:4]
        self.assertEqual((a.location.line, a.location.column), (1, 1))
        self.assertEqual((b.location.line, b.location.column), (2, 3))
        self.assertEqual((plus.location.line, plus.location.column), (2, 5))
        self.assertEqual((one.location.line, one.location.column), (2, 7))
        self.assertEqual(b.location.offset, 4)
        self.assertEqual(str(a.location), "loc.kal:1:1")

    def test_crlf_is_one_line_break(self):
        tokens = tokenize_string("a\r\nb\r\n\r\n  c")
        self.assertEqual([(t.location.line, t.location.column) for t in tokens[:3]],
                         [(1, 1), (2, 1), (4, 3)])
        self.assertEqual(tokens[1].location.offset, 3)

    def test_line_break_variants(self):
        for source, line in [("a\rb", 2), ("a\nb", 2), ("a\n\rb", 3), ("a\r\rb", 3)]:
            with self.subTest(source=source):
                self.assertEqual(tokenize_string(source)[1].location.line, line)

    def test_eof_location_after_crlf(self):
        eof = tokenize_string("a\r\n")[-1]
        self.assertEqual((eof.location.line, eof.location.column), (2, 1))

    def test_independent_lexers_do_not_share_state(self):
        first = Lexer.from_string("a b")
        second = Lexer.from_string("c d")
        self.assertEqual(first.next_token().value, "a")
        self.assertEqual(second.next_token().value, "c")
        self.assertEqual(first.next_token().value, "b")
        self.assertEqual(second.next_token().value, "d")


if __name__ == '__main__':
    unittest.main()
