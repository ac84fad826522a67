"""
Kaleidoscope Lexer Package

Character-at-a-time tokenizer for the Kaleidoscope language.

Key Features:
- Works on any text stream, including interactive stdin
- One character of lookahead, no buffering of the rest of the input
- Total over its input: unknown characters become CHAR tokens
- Line/column tracking for diagnostics
"""

from .tokens import Token, TokenType, SourceLocation, KEYWORDS
from .lexer import Lexer, tokenize_string, tokenize_file, parse_number_text

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "KEYWORDS",
    "tokenize_string",
    "tokenize_file",
    "parse_number_text",
]
