"""
Kaleidoscope Front End Package

Tokenizer and parser for the Kaleidoscope language: a small,
expression-oriented language where every value is a double and programs
can declare their own unary and binary operators.

Architecture:
    kaleidoscope/
    ├── lexer/           # Character stream -> tokens
    ├── parser/          # Tokens -> AST, operator table, diagnostics
    ├── backend.py       # Code generation collaborator interface
    ├── driver.py        # Top-level read/parse/accept loop
    └── cli.py           # kaleidoscope-parse command

License: MIT
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .lexer import Lexer, Token, TokenType, SourceLocation
from .parser import Parser, OperatorTable, ParseError, format_ast
from .backend import Backend, RecordingBackend
from .driver import Driver

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "OperatorTable",
    "Backend",
    "RecordingBackend",
    "Driver",

    # Data
    "Token",
    "TokenType",
    "SourceLocation",
    "ParseError",
    "format_ast",

    # Version info
    "__version__",
    "__license__",
]
