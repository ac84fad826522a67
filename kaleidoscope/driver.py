"""
Top-level driver loop.

Reads one top-level form at a time and hands it to the backend:

    ';'       skipped
    'def'     function definition
    'extern'  external declaration
    anything  bare expression, wrapped in an anonymous function

When a form yields no result the driver skips exactly one token and
carries on. That single-token skip is the whole error recovery strategy.
"""

import logging
from typing import Callable, Optional

from .backend import Backend, RecordingBackend
from .lexer.tokens import TokenType
from .parser.operators import OperatorTable
from .parser.ast_nodes import TopLevelForm
from .parser.parser import Parser

logger = logging.getLogger(__name__)


class Driver:
    """Feeds top-level forms from a parser session to a backend."""

    def __init__(self, parser: Parser, backend: Backend,
                 on_accept: Optional[Callable[[TopLevelForm], None]] = None):
        """
        Args:
            parser: Parser session to read forms from
            backend: Receives each parsed form
            on_accept: Called with every form the backend accepts, as soon
                as it is accepted
        """
        if parser.operators is not backend.operators:
            logger.warning("parser and backend use different operator tables; "
                           "declared operators will not be visible to the parser")
        self.parser = parser
        self.backend = backend
        self.on_accept = on_accept
        self.accepted = 0
        self.skipped = 0

    @classmethod
    def from_string(cls, source: str, filename: str = "<string>",
                    operators: Optional[OperatorTable] = None) -> "Driver":
        """Build a driver over `source` with a RecordingBackend sharing one table."""
        table = operators if operators is not None else OperatorTable()
        parser = Parser.from_string(source, filename, table)
        return cls(parser, RecordingBackend(table))

    def run(self) -> int:
        """
        Process forms until end of input.

        Returns:
            Number of forms the backend accepted
        """
        if self.parser.current_token is None:
            self.parser.advance()

        while not self.parser.at_end:
            self.step()

        logger.debug("driver finished: %d accepted, %d tokens skipped",
                     self.accepted, self.skipped)
        return self.accepted

    def step(self):
        """Handle whatever top-level form starts at the current token."""
        token = self.parser.current_token
        if token.is_char(";"):
            self.parser.advance()
        elif token.type == TokenType.DEF:
            self.handle_definition()
        elif token.type == TokenType.EXTERN:
            self.handle_extern()
        else:
            self.handle_top_level_expression()

    def handle_definition(self):
        function = self.parser.parse_definition()
        if function is None:
            self._skip_token()
            return
        logger.debug("parsed definition '%s'", function.name)
        if self.backend.accept_function(function):
            self._accepted(function)

    def handle_extern(self):
        prototype = self.parser.parse_extern()
        if prototype is None:
            self._skip_token()
            return
        logger.debug("parsed extern '%s'", prototype.name)
        if self.backend.accept_extern(prototype):
            self._accepted(prototype)

    def handle_top_level_expression(self):
        function = self.parser.parse_top_level_expression()
        if function is None:
            self._skip_token()
            return
        logger.debug("parsed top-level expression")
        if self.backend.accept_top_level_expression(function):
            self._accepted(function)

    def _accepted(self, form: TopLevelForm):
        self.accepted += 1
        if self.on_accept is not None:
            self.on_accept(form)

    def _skip_token(self):
        skipped = self.parser.current_token
        self.parser.advance()
        self.skipped += 1
        logger.info("skipped %s at %s to recover", skipped.describe(), skipped.location)
