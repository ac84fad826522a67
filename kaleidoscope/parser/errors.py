"""
Error handling for the Kaleidoscope parser.

Hard syntax failures are raised as ParseError subclasses. Each carries a
Diagnostic with the source location, an error code and help text. The
parser's public entry points catch them, record them and hand back "no
result", so a bad top-level form never takes the session down with it.

"""

from typing import Optional, List
from dataclasses import dataclass

from ..lexer.tokens import Token, SourceLocation


@dataclass
class Diagnostic:
    """A single error or warning with its location and optional hints."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        result = f"{self.severity.upper()}"
        if self.code:
            result += f"[{self.code}]"
        result += f": {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class ParseError(Exception):
    """
    Base class for hard syntax errors.

    Aborts the current top-level form only.
    """

    code = "K000"

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.location = location
        self.token = token
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=self.code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


class UnexpectedTokenError(ParseError):
    """A required token was missing or a token appeared where it can't."""
    code = "K001"


class InvalidPrecedenceError(ParseError):
    """Binary operator precedence outside 1..100."""
    code = "K002"


class ArityMismatchError(ParseError):
    """Operator prototype with the wrong number of operands."""
    code = "K003"


class DuplicateParameterError(ParseError):
    """The same parameter name appears twice in a prototype."""
    code = "K004"


class NestingTooDeepError(ParseError):
    """Expression nested deeper than the recursive descent can follow."""
    code = "K005"


PARSER_ERROR_CODES = {
    UnexpectedTokenError.code: "Unexpected token",
    InvalidPrecedenceError.code: "Invalid operator precedence",
    ArityMismatchError.code: "Invalid number of operands for operator",
    DuplicateParameterError.code: "Duplicate parameter name",
    NestingTooDeepError.code: "Expression nested too deeply",
}

MIN_PRECEDENCE = 1
MAX_PRECEDENCE = 100

_MISSING_TOKEN_SUGGESTIONS = {
    ")": ["Add a closing parenthesis ')'"],
    "(": ["Add an opening parenthesis '('"],
    "then": ["Every 'if' needs a 'then' branch"],
    "else": ["Every 'if' needs an 'else' branch, there is no one-armed if"],
    "in": ["Finish the loop or var header with 'in' followed by the body"],
}


# Helper functions for creating common parser errors

def create_unexpected_token_error(expected: str, found: Token,
                                  context: Optional[str] = None) -> UnexpectedTokenError:
    """Create an error for a missing or misplaced token."""
    message = f"Expected {expected}"
    if context:
        message += f" {context}"
    message += f", found {found.describe()}"

    return UnexpectedTokenError(
        message=message,
        location=found.location,
        token=found,
        help_text=f"The parser expected to see {expected} at this position.",
        suggestions=_MISSING_TOKEN_SUGGESTIONS.get(expected.strip("'"), [])
    )


def create_unknown_token_error(found: Token) -> UnexpectedTokenError:
    """Create an error for a token that cannot start an expression."""
    return UnexpectedTokenError(
        message=f"Unknown token {found.describe()} when expecting an expression",
        location=found.location,
        token=found,
        help_text="Expressions start with a number, an identifier, '(', "
                  "'if', 'for', 'var' or a prefix operator."
    )


def create_invalid_precedence_error(value: float, token: Token) -> InvalidPrecedenceError:
    """Create an error for an out-of-range operator precedence."""
    return InvalidPrecedenceError(
        message=f"Invalid precedence {token.lexeme}: must be {MIN_PRECEDENCE}..{MAX_PRECEDENCE}",
        location=token.location,
        token=token,
        help_text="Built-in operators use '<' = 10, '+' = 20, '-' = 30, '*' = 40.",
    )


def create_arity_mismatch_error(name: str, expected: int, found: int,
                                location: SourceLocation) -> ArityMismatchError:
    """Create an error for an operator with the wrong operand count."""
    kind = "unary" if expected == 1 else "binary"
    return ArityMismatchError(
        message=f"Invalid number of operands for operator '{name}': "
                f"expected {expected}, found {found}",
        location=location,
        help_text=f"A {kind} operator takes exactly {expected} "
                  f"operand{'s' if expected != 1 else ''}.",
    )


def create_duplicate_parameter_error(name: str, token: Token) -> DuplicateParameterError:
    """Create an error for a repeated parameter name."""
    return DuplicateParameterError(
        message=f"Duplicate parameter '{name}' in prototype",
        location=token.location,
        token=token,
        suggestions=[f"Rename one of the '{name}' parameters"]
    )


def create_nesting_too_deep_error(found: Token) -> NestingTooDeepError:
    """Create an error for an expression that exhausted the parser's stack."""
    return NestingTooDeepError(
        message=f"Expression nested too deeply near {found.describe()}",
        location=found.location,
        token=found,
        help_text="Parentheses and prefix operators can only nest a limited number of levels.",
        suggestions=["Split the expression into smaller functions"]
    )
