"""
Abstract Syntax Tree node definitions for Kaleidoscope.

The expression nodes form a closed set. Every node is an immutable
(frozen) dataclass tagged with an `ASTNodeType`; code that consumes the
tree dispatches on that tag through `ASTVisitor` rather than through
methods on the nodes themselves.

Source locations are carried along for diagnostics but are excluded from
equality, so two parses of the same text compare equal regardless of
where the text came from.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, List, Optional, Tuple, Union

from ..lexer.tokens import SourceLocation


class ASTNodeType(Enum):
    """Tags for every AST node type."""

    # Expressions
    NUMBER = "number"
    VARIABLE = "variable"
    UNARY = "unary"
    BINARY = "binary"
    CALL = "call"
    IF = "if"
    FOR = "for"
    VAR_IN = "var_in"

    # Top-level
    PROTOTYPE = "prototype"
    FUNCTION = "function"


class Expression:
    """Marker base for expression nodes."""
    node_type: ClassVar[ASTNodeType]

    def children(self) -> List["Expression"]:
        return []


@dataclass(frozen=True)
class NumberLiteral(Expression):
    """Numeric literal like `1.0`."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.NUMBER

    value: float
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Variable(Expression):
    """Reference to a named variable like `a`."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.VARIABLE

    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Unary(Expression):
    """Prefix operator application, e.g. `!x`."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.UNARY

    opcode: str
    operand: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def children(self) -> List[Expression]:
        return [self.operand]


@dataclass(frozen=True)
class Binary(Expression):
    """Binary operator application, e.g. `a + b`."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.BINARY

    operator: str
    lhs: Expression
    rhs: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def children(self) -> List[Expression]:
        return [self.lhs, self.rhs]


@dataclass(frozen=True)
class Call(Expression):
    """Function call, e.g. `foo(1, x)`."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.CALL

    callee: str
    arguments: Tuple[Expression, ...]
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def children(self) -> List[Expression]:
        return list(self.arguments)


@dataclass(frozen=True)
class If(Expression):
    """`if cond then a else b`; both branches are mandatory."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.IF

    condition: Expression
    then_branch: Expression
    else_branch: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def children(self) -> List[Expression]:
        return [self.condition, self.then_branch, self.else_branch]


@dataclass(frozen=True)
class For(Expression):
    """`for i = start, end[, step] in body`."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.FOR

    var_name: str
    start: Expression
    end: Expression
    step: Optional[Expression]
    body: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def children(self) -> List[Expression]:
        children = [self.start, self.end]
        if self.step is not None:
            children.append(self.step)
        children.append(self.body)
        return children


Binding = Tuple[str, Optional[Expression]]


@dataclass(frozen=True)
class VarIn(Expression):
    """`var a = 1, b in body`; bindings keep declaration order."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.VAR_IN

    bindings: Tuple[Binding, ...]
    body: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def children(self) -> List[Expression]:
        children = [init for _, init in self.bindings if init is not None]
        children.append(self.body)
        return children


# ============================================================================
# Top-level nodes
# ============================================================================

@dataclass(frozen=True)
class Prototype:
    """
    Function signature: name, parameter names and, for user-defined
    operators, the operator flag and binary precedence.

    Operator prototypes are named "unary<sym>" / "binary<sym>", so the
    operator symbol is always the last character of the name.
    """
    node_type: ClassVar[ASTNodeType] = ASTNodeType.PROTOTYPE

    name: str
    params: Tuple[str, ...]
    is_operator: bool = False
    precedence: int = 0
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def is_unary_op(self) -> bool:
        return self.is_operator and self.arity == 1

    @property
    def is_binary_op(self) -> bool:
        return self.is_operator and self.arity == 2

    @property
    def operator_name(self) -> str:
        """The operator symbol; only meaningful for operator prototypes."""
        if not self.is_operator:
            raise ValueError(f"prototype '{self.name}' does not define an operator")
        return self.name[-1]


@dataclass(frozen=True)
class FunctionDefinition:
    """A prototype together with its body expression."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.FUNCTION

    prototype: Prototype
    body: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    @property
    def name(self) -> str:
        return self.prototype.name


ASTNode = Union[Expression, Prototype, FunctionDefinition]
TopLevelForm = Union[Prototype, FunctionDefinition]


class ASTVisitor:
    """
    Dispatches on a node's `node_type` tag to `visit_<tag>` methods.

    Subclasses implement the handlers they need; a missing handler falls
    through to `generic_visit`, which raises.
    """

    def visit(self, node: ASTNode) -> Any:
        handler = getattr(self, f"visit_{node.node_type.value}", None)
        if handler is None:
            return self.generic_visit(node)
        return handler(node)

    def generic_visit(self, node: ASTNode) -> Any:
        raise NotImplementedError(
            f"{type(self).__name__} has no handler for {node.node_type.name} nodes"
        )
