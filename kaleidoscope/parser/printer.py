"""
S-expression rendering of Kaleidoscope ASTs.

    >>> format_ast(parse_string("1 + 2 * x"))
    '(binary + (number 1) (binary * (number 2) (variable x)))'
"""

from typing import List

from .ast_nodes import (
    ASTNode, ASTVisitor, NumberLiteral, Variable, Unary, Binary, Call, If, For,
    VarIn, Prototype, FunctionDefinition,
)


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


class ASTPrinter(ASTVisitor):
    """Renders nodes on a single line."""

    def visit_number(self, node: NumberLiteral) -> str:
        return f"(number {_format_number(node.value)})"

    def visit_variable(self, node: Variable) -> str:
        return f"(variable {node.name})"

    def visit_unary(self, node: Unary) -> str:
        return f"(unary {node.opcode} {self.visit(node.operand)})"

    def visit_binary(self, node: Binary) -> str:
        return f"(binary {node.operator} {self.visit(node.lhs)} {self.visit(node.rhs)})"

    def visit_call(self, node: Call) -> str:
        parts = [f"call {node.callee}"] + [self.visit(arg) for arg in node.arguments]
        return "(" + " ".join(parts) + ")"

    def visit_if(self, node: If) -> str:
        return (f"(if {self.visit(node.condition)} "
                f"{self.visit(node.then_branch)} {self.visit(node.else_branch)})")

    def visit_for(self, node: For) -> str:
        parts = [f"for {node.var_name}", self.visit(node.start), self.visit(node.end)]
        if node.step is not None:
            parts.append(self.visit(node.step))
        parts.append(self.visit(node.body))
        return "(" + " ".join(parts) + ")"

    def visit_var_in(self, node: VarIn) -> str:
        bindings: List[str] = []
        for name, init in node.bindings:
            if init is None:
                bindings.append(f"({name})")
            else:
                bindings.append(f"({name} {self.visit(init)})")
        return f"(var ({' '.join(bindings)}) {self.visit(node.body)})"

    def visit_prototype(self, node: Prototype) -> str:
        head = "operator" if node.is_operator else "prototype"
        text = f"({head} {node.name} ({' '.join(node.params)})"
        if node.is_binary_op:
            text += f" {node.precedence}"
        return text + ")"

    def visit_function(self, node: FunctionDefinition) -> str:
        return f"(def {self.visit(node.prototype)} {self.visit(node.body)})"


def format_ast(node: ASTNode) -> str:
    """Render any expression, prototype or function definition."""
    return ASTPrinter().visit(node)
