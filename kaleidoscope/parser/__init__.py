"""
Kaleidoscope Parser Package

Recursive descent + operator-precedence parser for Kaleidoscope,
producing immutable, tag-dispatched AST nodes.

Key Features:
- Precedence climbing over a live, program-extensible operator table
- User-defined unary and binary operators
- Hard errors as exceptions, recoverable "no result" as None
- Source locations on every node and diagnostic
"""

from .ast_nodes import (
    ASTNode, ASTNodeType, ASTVisitor, Expression,
    NumberLiteral, Variable, Unary, Binary, Call, If, For, VarIn,
    Prototype, FunctionDefinition, TopLevelForm,
)
from .operators import OperatorTable, DEFAULT_PRECEDENCE, DEFAULT_BINARY_PRECEDENCE
from .parser import Parser, parse_string, ANONYMOUS_FUNCTION_NAME
from .printer import ASTPrinter, format_ast
from .errors import (
    Diagnostic, ParseError, UnexpectedTokenError, InvalidPrecedenceError,
    ArityMismatchError, DuplicateParameterError, NestingTooDeepError,
)

__all__ = [
    # Core parser
    "Parser", "parse_string", "ANONYMOUS_FUNCTION_NAME",

    # Operator table
    "OperatorTable", "DEFAULT_PRECEDENCE", "DEFAULT_BINARY_PRECEDENCE",

    # AST nodes
    "ASTNode", "ASTNodeType", "ASTVisitor", "Expression",
    "NumberLiteral", "Variable", "Unary", "Binary", "Call", "If", "For", "VarIn",
    "Prototype", "FunctionDefinition", "TopLevelForm",
    "ASTPrinter", "format_ast",

    # Error handling
    "Diagnostic", "ParseError", "UnexpectedTokenError", "InvalidPrecedenceError",
    "ArityMismatchError", "DuplicateParameterError", "NestingTooDeepError",
]
