"""
Binary operator precedence table.

Maps a single operator character to its precedence; higher binds
tighter. The table starts out with the built-in operators and grows as
the program declares new ones with `def binary<sym> <prec> (a b) ...`.
Entries are never removed.

Each parser session owns one table. It is read by the parser and
written by the backend once it has accepted an operator definition.
"""

import logging
from typing import Dict, ItemsView, Iterator, Mapping, Optional

from ..lexer.tokens import Token, TokenType

logger = logging.getLogger(__name__)

DEFAULT_PRECEDENCE: Mapping[str, int] = {
    "=": 2,
    "<": 10,
    "+": 20,
    "-": 30,
    "*": 40,
}

# Precedence of a `binary` declaration that doesn't give one.
DEFAULT_BINARY_PRECEDENCE = 30

NOT_AN_OPERATOR = -1


class OperatorTable:
    """Mutable operator-character -> precedence mapping."""

    def __init__(self, initial: Optional[Mapping[str, int]] = None):
        self._precedence: Dict[str, int] = {}
        seed = DEFAULT_PRECEDENCE if initial is None else initial
        for symbol, precedence in seed.items():
            self.define(symbol, precedence)

    @classmethod
    def with_defaults(cls) -> "OperatorTable":
        return cls()

    def precedence_of(self, token: Token) -> int:
        """
        Precedence of `token` as a binary operator.

        Returns -1 for anything that isn't a CHAR token with a positive
        entry in the table.
        """
        if token.type != TokenType.CHAR:
            return NOT_AN_OPERATOR
        precedence = self._precedence.get(token.value, NOT_AN_OPERATOR)
        if precedence <= 0:
            return NOT_AN_OPERATOR
        return precedence

    def define(self, symbol: str, precedence: int):
        """Insert or overwrite the precedence of `symbol`."""
        if len(symbol) != 1:
            raise ValueError(f"operator symbol must be a single character, got {symbol!r}")
        previous = self._precedence.get(symbol)
        self._precedence[symbol] = int(precedence)
        if previous is not None and previous != precedence:
            logger.debug("operator '%s' precedence %d -> %d", symbol, previous, precedence)

    def get(self, symbol: str, default: int = NOT_AN_OPERATOR) -> int:
        return self._precedence.get(symbol, default)

    def items(self) -> ItemsView[str, int]:
        return self._precedence.items()

    def copy(self) -> "OperatorTable":
        return OperatorTable(self._precedence)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._precedence

    def __iter__(self) -> Iterator[str]:
        return iter(self._precedence)

    def __len__(self) -> int:
        return len(self._precedence)

    def __repr__(self) -> str:
        entries = ", ".join(f"{sym!r}: {prec}" for sym, prec in sorted(self.items(), key=lambda kv: kv[1]))
        return f"OperatorTable({{{entries}}})"
