"""
Kaleidoscope Parser Implementation

Recursive descent for the statement-like forms (prototypes, if/for/var)
and operator-precedence climbing for binary expressions. The binary
operator table is live: a program can declare new operators, and once
the backend has accepted the declaration the very next top-level form
can use them.

Two ways a parse can fail:
- Hard errors (missing ')', missing 'then', bad precedence, ...) raise a
  ParseError. The public parse_* entry points catch it, record it in
  `self.errors` and return None.
  Input nested deeper than the Python stack allows is reported the same
  way, as a NestingTooDeepError.
- Running out of input where an expression is required returns None
  straight away. Every caller passes that None up unchanged, so a
  half-typed form produces no AST and no partial node.

"""

import logging
from typing import Callable, Dict, List, Optional, TypeVar

from ..lexer.lexer import Lexer
from ..lexer.tokens import Token, TokenType
from .ast_nodes import (
    Expression, NumberLiteral, Variable, Unary, Binary, Call, If, For, VarIn,
    Prototype, FunctionDefinition,
)
from .operators import OperatorTable, DEFAULT_BINARY_PRECEDENCE
from .errors import (
    ParseError, MIN_PRECEDENCE, MAX_PRECEDENCE,
    create_unexpected_token_error, create_unknown_token_error,
    create_invalid_precedence_error, create_arity_mismatch_error,
    create_duplicate_parameter_error, create_nesting_too_deep_error,
)

logger = logging.getLogger(__name__)

ANONYMOUS_FUNCTION_NAME = "__anon_expr"

# Operand count for each prototype kind.
_OPERATOR_ARITY = {
    TokenType.UNARY: 1,
    TokenType.BINARY: 2,
}

T = TypeVar("T")


class Parser:
    """
    Kaleidoscope parser session.

    Owns the lexer and the one-token cursor (`current_token`) and reads
    the operator table it was given. Nothing is shared between Parser
    instances unless the caller passes the same OperatorTable to both.
    """

    def __init__(self, lexer: Lexer, operators: Optional[OperatorTable] = None):
        """
        Initialize the parser.

        Args:
            lexer: Token source
            operators: Binary operator precedences; a fresh table seeded
                with the built-in operators is created if omitted
        """
        self.lexer = lexer
        self.operators = operators if operators is not None else OperatorTable()
        self.current_token: Optional[Token] = None
        self.errors: List[ParseError] = []

        self.prefix_parsers: Dict[TokenType, Callable[[], Optional[Expression]]] = {
            TokenType.IDENTIFIER: self._parse_identifier_expr,
            TokenType.NUMBER: self._parse_number_expr,
            TokenType.IF: self._parse_if_expr,
            TokenType.FOR: self._parse_for_expr,
            TokenType.VAR: self._parse_var_expr,
        }

    @classmethod
    def from_string(cls, source: str, filename: str = "<string>",
                    operators: Optional[OperatorTable] = None) -> "Parser":
        """Create a parser over a string with the first token already read."""
        parser = cls(Lexer.from_string(source, filename), operators)
        parser.advance()
        return parser

    def advance(self) -> Token:
        """Read the next token into `current_token` and return it."""
        self.current_token = self.lexer.next_token()
        return self.current_token

    @property
    def at_end(self) -> bool:
        return self.current_token is not None and self.current_token.type == TokenType.EOF

    # Top-level entry points

    def parse_definition(self) -> Optional[FunctionDefinition]:
        """definition := 'def' prototype expr"""
        return self._recover(self._parse_definition)

    def parse_extern(self) -> Optional[Prototype]:
        """extern := 'extern' prototype"""
        return self._recover(self._parse_extern)

    def parse_top_level_expression(self) -> Optional[FunctionDefinition]:
        """Parse a bare expression and wrap it in an anonymous nullary function."""
        return self._recover(self._parse_top_level_expression)

    def parse_expression(self) -> Optional[Expression]:
        return self._recover(self._parse_expression)

    def _recover(self, parse: Callable[[], Optional[T]]) -> Optional[T]:
        if self.current_token is None:
            self.advance()
        try:
            return parse()
        except ParseError as e:
            error = e
        except RecursionError:
            error = create_nesting_too_deep_error(self.current_token)
        self.errors.append(error)
        logger.warning("parse error: %s", error)
        return None

    def _parse_definition(self) -> Optional[FunctionDefinition]:
        def_token = self._consume(TokenType.DEF, "'def'")
        prototype = self._parse_prototype()
        body = self._parse_expression()
        if body is None:
            return None
        return FunctionDefinition(prototype, body, location=def_token.location)

    def _parse_extern(self) -> Prototype:
        self._consume(TokenType.EXTERN, "'extern'")
        return self._parse_prototype()

    def _parse_top_level_expression(self) -> Optional[FunctionDefinition]:
        location = self.current_token.location
        body = self._parse_expression()
        if body is None:
            return None
        prototype = Prototype(ANONYMOUS_FUNCTION_NAME, (), location=location)
        return FunctionDefinition(prototype, body, location=location)

    # Prototypes

    def _parse_prototype(self) -> Prototype:
        """
        prototype := identifier '(' identifier* ')'
                   | 'unary' opchar '(' identifier ')'
                   | 'binary' opchar number? '(' identifier identifier ')'
        """
        start = self.current_token
        precedence = 0

        if start.type == TokenType.IDENTIFIER:
            name = start.value
            self.advance()
        elif start.type in _OPERATOR_ARITY:
            kind = start.lexeme
            self.advance()
            op_token = self.current_token
            if op_token.type != TokenType.CHAR:
                raise create_unexpected_token_error(f"{kind} operator", op_token, f"after '{kind}'")
            name = kind + op_token.value
            self.advance()

            if start.type == TokenType.BINARY:
                precedence = DEFAULT_BINARY_PRECEDENCE
                if self.current_token.type == TokenType.NUMBER:
                    value = self.current_token.value
                    if value < MIN_PRECEDENCE or value > MAX_PRECEDENCE:
                        raise create_invalid_precedence_error(value, self.current_token)
                    precedence = int(value)
                    self.advance()
        else:
            raise create_unexpected_token_error("function name", start, "in prototype")

        self._consume_char("(", "in prototype")

        params: List[str] = []
        while self.current_token.type == TokenType.IDENTIFIER:
            param = self.current_token.value
            if param in params:
                raise create_duplicate_parameter_error(param, self.current_token)
            params.append(param)
            self.advance()

        self._consume_char(")", "in prototype")

        is_operator = start.type in _OPERATOR_ARITY
        if is_operator:
            arity = _OPERATOR_ARITY[start.type]
            if len(params) != arity:
                raise create_arity_mismatch_error(name, arity, len(params), start.location)
            logger.debug("parsed %s prototype '%s' (precedence %d)", start.lexeme, name, precedence)

        return Prototype(name, tuple(params), is_operator, precedence, location=start.location)

    # Expressions

    def _parse_expression(self) -> Optional[Expression]:
        """expr := unary (binop unary)*"""
        lhs = self._parse_unary()
        if lhs is None:
            return None
        return self._parse_bin_op_rhs(0, lhs)

    def _parse_bin_op_rhs(self, min_precedence: int, lhs: Expression) -> Optional[Expression]:
        """
        Fold `(binop unary)*` into `lhs` using precedence climbing.

        Only operators binding at least as tightly as `min_precedence` are
        consumed. Tighter operators to the right are absorbed into the
        right operand first; equal precedence associates to the left.
        """
        while True:
            op_token = self.current_token
            precedence = self.operators.precedence_of(op_token)
            if precedence < min_precedence:
                return lhs

            self.advance()
            rhs = self._parse_unary()
            if rhs is None:
                return None

            if precedence < self.operators.precedence_of(self.current_token):
                rhs = self._parse_bin_op_rhs(precedence + 1, rhs)
                if rhs is None:
                    return None

            lhs = Binary(op_token.value, lhs, rhs, location=op_token.location)

    def _parse_unary(self) -> Optional[Expression]:
        """unary := primary | unop unary"""
        token = self.current_token
        if token.type != TokenType.CHAR or token.value in ("(", ","):
            return self._parse_primary()

        self.advance()
        operand = self._parse_unary()
        if operand is None:
            return None
        return Unary(token.value, operand, location=token.location)

    def _parse_primary(self) -> Optional[Expression]:
        token = self.current_token
        if token.is_char("("):
            return self._parse_paren_expr()

        prefix_parser = self.prefix_parsers.get(token.type)
        if prefix_parser is not None:
            return prefix_parser()

        if token.type == TokenType.EOF:
            logger.debug("input ended where an expression was expected")
            return None
        raise create_unknown_token_error(token)

    def _parse_number_expr(self) -> NumberLiteral:
        token = self.current_token
        self.advance()
        return NumberLiteral(token.value, location=token.location)

    def _parse_paren_expr(self) -> Optional[Expression]:
        """'(' expr ')'"""
        self.advance()
        expr = self._parse_expression()
        if expr is None:
            return None
        self._consume_char(")", "after parenthesized expression")
        return expr

    def _parse_identifier_expr(self) -> Optional[Expression]:
        """identifier | identifier '(' (expr (',' expr)*)? ')'"""
        name_token = self.current_token
        self.advance()

        if not self.current_token.is_char("("):
            return Variable(name_token.value, location=name_token.location)

        self.advance()
        args: List[Expression] = []
        if not self.current_token.is_char(")"):
            while True:
                arg = self._parse_expression()
                if arg is None:
                    return None
                args.append(arg)

                if self.current_token.is_char(")"):
                    break
                if not self.current_token.is_char(","):
                    raise create_unexpected_token_error("')' or ','", self.current_token, "in argument list")
                self.advance()

        self.advance()
        return Call(name_token.value, tuple(args), location=name_token.location)

    def _parse_if_expr(self) -> Optional[Expression]:
        """'if' expr 'then' expr 'else' expr"""
        if_token = self.current_token
        self.advance()

        condition = self._parse_expression()
        if condition is None:
            return None

        self._consume(TokenType.THEN, "'then'")
        then_branch = self._parse_expression()
        if then_branch is None:
            return None

        self._consume(TokenType.ELSE, "'else'")
        else_branch = self._parse_expression()
        if else_branch is None:
            return None

        return If(condition, then_branch, else_branch, location=if_token.location)

    def _parse_for_expr(self) -> Optional[Expression]:
        """'for' ident '=' expr ',' expr (',' expr)? 'in' expr"""
        for_token = self.current_token
        self.advance()

        var_token = self._consume(TokenType.IDENTIFIER, "identifier", "after 'for'")
        self._consume_char("=", "after for loop variable")

        start = self._parse_expression()
        if start is None:
            return None
        self._consume_char(",", "after for start value")

        end = self._parse_expression()
        if end is None:
            return None

        step = None
        if self.current_token.is_char(","):
            self.advance()
            step = self._parse_expression()
            if step is None:
                return None

        self._consume(TokenType.IN, "'in'", "after for")
        body = self._parse_expression()
        if body is None:
            return None

        return For(var_token.value, start, end, step, body, location=for_token.location)

    def _parse_var_expr(self) -> Optional[Expression]:
        """'var' ident ('=' expr)? (',' ident ('=' expr)?)* 'in' expr"""
        var_token = self.current_token
        self.advance()

        bindings = []
        context = "after 'var'"
        while True:
            name_token = self._consume(TokenType.IDENTIFIER, "identifier", context)

            init = None
            if self.current_token.is_char("="):
                self.advance()
                init = self._parse_expression()
                if init is None:
                    return None
            bindings.append((name_token.value, init))

            if not self.current_token.is_char(","):
                break
            self.advance()
            context = "in var binding list"

        self._consume(TokenType.IN, "'in'", "after 'var' bindings")
        body = self._parse_expression()
        if body is None:
            return None

        return VarIn(tuple(bindings), body, location=var_token.location)

    # Utility methods

    def _consume(self, token_type: TokenType, expected: str, context: Optional[str] = None) -> Token:
        """Consume a token of the given type or raise UnexpectedTokenError."""
        token = self.current_token
        if token.type != token_type:
            raise create_unexpected_token_error(expected, token, context)
        self.advance()
        return token

    def _consume_char(self, char: str, context: Optional[str] = None) -> Token:
        token = self.current_token
        if not token.is_char(char):
            raise create_unexpected_token_error(f"'{char}'", token, context)
        self.advance()
        return token


def parse_string(source: str, filename: str = "<string>",
                 operators: Optional[OperatorTable] = None) -> Optional[Expression]:
    """
    Convenience function to parse a single expression from a string.

    Raises:
        ParseError: If the expression is malformed
    """
    parser = Parser.from_string(source, filename, operators)
    return parser._parse_expression()
