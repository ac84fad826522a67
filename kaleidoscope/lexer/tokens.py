"""
Token definitions for the Kaleidoscope lexer.

Kaleidoscope has a deliberately tiny token vocabulary:
- Keywords (def, extern, if/then/else, for/in, var, binary, unary)
- Identifiers
- Number literals (every value in the language is a double)
- Single characters, which carry every operator and punctuation symbol,
  including operators the program declares for itself

"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """Enumeration of all token types in Kaleidoscope."""

    # Special
    EOF = auto()                    # End of input

    # Function declarations
    DEF = auto()                    # def
    EXTERN = auto()                 # extern

    # Control flow
    IF = auto()                     # if
    THEN = auto()                   # then
    ELSE = auto()                   # else
    FOR = auto()                    # for
    IN = auto()                     # in

    # User-defined operators
    BINARY = auto()                 # binary
    UNARY = auto()                  # unary

    # Mutable locals
    VAR = auto()                    # var

    # Primaries
    IDENTIFIER = auto()             # foo, x1
    NUMBER = auto()                 # 1.0, 42, .5

    # Any other single character: '+', '(', ';', '|', ...
    CHAR = auto()


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source text.

    Lines and columns are 1-based, offset is the 0-based character index.
    """
    filename: str
    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    A lexical token.

    `value` holds the semantic payload: the name for identifiers, the float
    for numbers, the character itself for CHAR tokens and None for keywords
    and EOF.
    """
    type: TokenType
    lexeme: str
    value: Any
    location: SourceLocation

    def __str__(self) -> str:
        if self.type == TokenType.EOF:
            return "EOF"
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.type in KEYWORDS.values()

    @property
    def is_identifier(self) -> bool:
        return self.type == TokenType.IDENTIFIER

    def is_char(self, char: str) -> bool:
        """Check if this token is the single character `char`."""
        return self.type == TokenType.CHAR and self.value == char

    def describe(self) -> str:
        """Human readable description used in diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.CHAR:
            return f"'{self.value}'"
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        if self.type == TokenType.NUMBER:
            return f"number {self.lexeme}"
        return f"keyword '{self.lexeme}'"


KEYWORDS = {
    "def": TokenType.DEF,
    "extern": TokenType.EXTERN,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "for": TokenType.FOR,
    "in": TokenType.IN,
    "binary": TokenType.BINARY,
    "unary": TokenType.UNARY,
    "var": TokenType.VAR,
}

# Characters skipped between tokens. NUL is the lexer's initial
# "nothing read yet" state.
WHITESPACE = frozenset(" \t\n\r\0")
