"""
Kaleidoscope Lexer - turns a character stream into tokens

Works one character at a time with a single character of lookahead
(`last_char`), so it can sit directly on top of an interactive stream
like stdin and never needs to see the rest of the input.

The lexer is total: every character sequence produces tokens, there is
no lexical error. Anything it doesn't recognise comes out as a CHAR
token and the parser decides what to make of it.
"""

import re
import logging
from io import StringIO
from typing import List, TextIO

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, WHITESPACE

logger = logging.getLogger(__name__)

# Longest leading "digits[.digits]" run, i.e. what strtod would consume
# from the digit/dot runs the lexer collects.
_NUMBER_PREFIX = re.compile(r"\d*(?:\.\d*)?")


def parse_number_text(text: str) -> float:
    """
    Convert a run of digits and dots to a float.

    Malformed runs are not rejected: "1.2.3" converts its valid prefix
    (1.2) and a lone "." converts to 0.0, same as strtod.
    """
    prefix = _NUMBER_PREFIX.match(text).group(0)
    if not any(c.isdigit() for c in prefix):
        return 0.0
    return float(prefix)


def _is_ident_start(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_ident_continue(char: str) -> bool:
    return char.isascii() and char.isalnum()


def _is_number_char(char: str) -> bool:
    return char == "." or (char.isascii() and char.isdigit())


class Lexer:
    """
    Kaleidoscope lexical analyzer.

    Pulls characters from a text stream on demand. All state (lookahead
    character and position) lives on the instance, so independent lexers
    never interfere with each other.
    """

    def __init__(self, stream: TextIO, filename: str = "<stdin>"):
        """
        Initialize the lexer over a text stream.

        Args:
            stream: Anything with a `read(1)` method returning str
            filename: Name used in source locations
        """
        self.stream = stream
        self.filename = filename

        # NUL means "nothing read yet"; it is skipped like whitespace.
        self.last_char = "\0"
        self.line = 1
        self.column = 0
        self.offset = 0
        self._line_pending = False
        self._prev_char = ""

    @classmethod
    def from_string(cls, source: str, filename: str = "<string>") -> "Lexer":
        """Create a lexer reading from an in-memory string."""
        return cls(StringIO(source), filename)

    def next_token(self) -> Token:
        """
        Return the next token from the stream.

        At end of input this keeps returning EOF tokens without consuming
        anything further.
        """
        while True:
            while self.last_char in WHITESPACE:
                self._read_char()

            if self.last_char == "":
                return Token(TokenType.EOF, "", None, self._eof_location())

            start = self._location()

            # identifier: [a-zA-Z][a-zA-Z0-9]*
            if _is_ident_start(self.last_char):
                chars = [self.last_char]
                self._read_char()
                while _is_ident_continue(self.last_char):
                    chars.append(self.last_char)
                    self._read_char()
                text = "".join(chars)
                token_type = KEYWORDS.get(text, TokenType.IDENTIFIER)
                value = text if token_type == TokenType.IDENTIFIER else None
                return Token(token_type, text, value, start)

            # number: [0-9.]+
            if _is_number_char(self.last_char):
                chars = []
                while _is_number_char(self.last_char):
                    chars.append(self.last_char)
                    self._read_char()
                text = "".join(chars)
                return Token(TokenType.NUMBER, text, parse_number_text(text), start)

            # comment until end of line
            if self.last_char == "#":
                while self.last_char not in ("", "\n", "\r"):
                    self._read_char()
                continue

            char = self.last_char
            self._read_char()
            return Token(TokenType.CHAR, char, char, start)

    def tokenize(self) -> List[Token]:
        """
        Drain the stream.

        Returns:
            List of tokens, ending with a single EOF token
        """
        tokens: List[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break
        logger.debug("tokenized %s into %d tokens", self.filename, len(tokens))
        return tokens

    def _read_char(self):
        """Read one character into `last_char`, updating line/column."""
        char = self.stream.read(1)
        if char:
            # "\r\n" is a single line break
            crlf = char == "\n" and self._prev_char == "\r"
            if self._line_pending and not crlf:
                self.line += 1
                self.column = 0
            self.column += 1
            self.offset += 1
            self._line_pending = char in ("\n", "\r")
            self._prev_char = char
        self.last_char = char

    def _location(self) -> SourceLocation:
        """Location of `last_char`."""
        return SourceLocation(self.filename, self.line, self.column, self.offset - 1)

    def _eof_location(self) -> SourceLocation:
        if self._line_pending:
            return SourceLocation(self.filename, self.line + 1, 1, self.offset)
        return SourceLocation(self.filename, self.line, self.column + 1, self.offset)


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for source locations

    Returns:
        List of tokens including the trailing EOF token
    """
    return Lexer.from_string(source, filename).tokenize()


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        OSError: If the file cannot be read
    """
    with open(filepath, "r", encoding="utf-8") as f:
        return Lexer(f, filepath).tokenize()
