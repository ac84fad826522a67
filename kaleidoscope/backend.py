"""
Backend interface for Kaleidoscope.

The backend is whatever consumes parsed top-level forms: a code
generator, a JIT, an interpreter. This package doesn't generate code
itself; it defines the contract and ships a recording backend that
accepts everything it's given.

Operator registration lives here rather than in the parser. A new binary
operator enters the OperatorTable only after the backend has accepted
the function that defines it, so it becomes usable from the next
top-level form on, never inside the form that declares it.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from .parser.ast_nodes import FunctionDefinition, Prototype, TopLevelForm
from .parser.operators import OperatorTable

logger = logging.getLogger(__name__)


class Backend(ABC):
    """
    Base class for code generation collaborators.

    Subclasses implement the `generate_*` hooks and report success with a
    boolean; the `accept_*` methods wrap them and keep the operator table
    in sync.
    """

    def __init__(self, operators: OperatorTable):
        self.operators = operators

    @abstractmethod
    def generate_function(self, function: FunctionDefinition) -> bool:
        """Generate code for a named function definition."""

    @abstractmethod
    def generate_extern(self, prototype: Prototype) -> bool:
        """Declare an external function."""

    @abstractmethod
    def generate_top_level_expression(self, function: FunctionDefinition) -> bool:
        """Generate (and typically run) an anonymous top-level expression."""

    def accept_function(self, function: FunctionDefinition) -> bool:
        if not self.generate_function(function):
            logger.info("backend rejected definition of '%s'", function.name)
            return False
        self.install_operator(function.prototype)
        return True

    def accept_extern(self, prototype: Prototype) -> bool:
        if not self.generate_extern(prototype):
            logger.info("backend rejected extern '%s'", prototype.name)
            return False
        return True

    def accept_top_level_expression(self, function: FunctionDefinition) -> bool:
        return self.generate_top_level_expression(function)

    def install_operator(self, prototype: Prototype):
        """Make a binary operator prototype visible to the parser."""
        if not prototype.is_binary_op:
            return
        symbol = prototype.operator_name
        self.operators.define(symbol, prototype.precedence)
        logger.info("registered binary operator '%s' with precedence %d",
                    symbol, prototype.precedence)


class RecordingBackend(Backend):
    """
    Backend that records every form it accepts, in order.

    Args:
        operators: Table to register new operators into
        reject: Optional predicate; forms it returns True for are refused,
            which stands in for a code generation failure
    """

    def __init__(self, operators: OperatorTable,
                 reject: Optional[Callable[[TopLevelForm], bool]] = None):
        super().__init__(operators)
        self.forms: List[TopLevelForm] = []
        self.reject = reject

    def _record(self, form: TopLevelForm) -> bool:
        if self.reject is not None and self.reject(form):
            return False
        self.forms.append(form)
        return True

    def generate_function(self, function: FunctionDefinition) -> bool:
        return self._record(function)

    def generate_extern(self, prototype: Prototype) -> bool:
        return self._record(prototype)

    def generate_top_level_expression(self, function: FunctionDefinition) -> bool:
        return self._record(function)


def create_recording_backend(operators: Optional[OperatorTable] = None) -> RecordingBackend:
    """Create a recording backend over `operators` (or a fresh default table)."""
    return RecordingBackend(operators if operators is not None else OperatorTable())
