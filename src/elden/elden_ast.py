"""
Defines the abstract syntax tree (AST) node classes for the ELDEN language.

The tree is a closed set of node classes, one per syntactic variant:

Expressions (base `Expression`):
    Leaf(token)                          number, float, boolean, string or identifier
    Binary(left, operator, right)        left-associative binary operation
    Unary(operator, operand)             prefix `!`
    Grouping(inner)                      parenthesised sub-expression
    FunctionCall(identifier, args)       `name(a, b)` with token arguments
    ArrayLiteral(elements)               `[a, b]` with token elements

Statements (base `Statement`):
    Assign(identifier, value, declaration)
    If(cond, then_branch, else_branch)
    While(cond, body)
    Return(value)

Top level:
    Function(name, params, body)
    Program(functions)

Every node is built once by the parser and never mutated afterwards. Nodes can be
dumped with `to_dict()` into plain JSON-serializable dictionaries (`ASTDict`), and
two nodes compare equal when their dumps are equal.

Example:
    >>> x, y = Token("IDENT", "x"), Token("IDENT", "y")
    >>> Binary(Leaf(x), Token("PLUS", "+"), Leaf(y)).to_dict()["kind"]
    'binary'
"""

from typing import Any, TypedDict

from elden.elden_lexer import Token, TokenDict


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of an AST node used for serialization.

    Only the fields relevant to a node's kind are present.

    Fields:
        kind (str): The node kind (e.g. "binary", "if", "function").
        token (TokenDict): Leaf token.
        operator (TokenDict): Operator of a binary or unary node.
        left / right / operand / inner / cond / value (ASTDict): Sub-expressions.
        identifier / name (TokenDict): Assigned variable, called or declared function.
        declaration (bool): True for `let` assignments.
        args / elements / params (list[TokenDict]): Token lists.
        then_branch / else_branch / body (list[ASTDict]): Statement blocks.
        functions (list[ASTDict]): Program functions.
    """

    kind: str
    token: TokenDict
    operator: TokenDict
    left: "ASTDict"
    right: "ASTDict"
    operand: "ASTDict"
    inner: "ASTDict"
    cond: "ASTDict"
    value: "ASTDict"
    identifier: TokenDict
    name: TokenDict
    declaration: bool
    args: list[TokenDict]
    elements: list[TokenDict]
    params: list[TokenDict]
    then_branch: list["ASTDict"]
    else_branch: list["ASTDict"] | None
    body: list["ASTDict"]
    functions: list["ASTDict"]


class ASTNode:
    """
    Base class for every node in the ELDEN syntax tree.

    Subclasses set `kind` and implement `to_dict()`. Equality is structural over
    the dump, so nodes are unhashable.
    """

    kind: str = "node"

    def to_dict(self) -> ASTDict:
        raise NotImplementedError  # pragma: no cover

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ASTNode) or type(self) is not type(other):
            return False
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]


def _block_dict(stmts: list["Statement"]) -> list[ASTDict]:
    return [s.to_dict() for s in stmts]


def _preview(stmts: list[Any]) -> str:
    preview = ", ".join(repr(s) for s in stmts[:3])
    if len(stmts) > 3:
        preview += ", ..."
    return f"[{preview}]"


class Expression(ASTNode):
    pass


class Leaf(Expression):
    kind = "leaf"

    def __init__(self, token: Token) -> None:
        self.token = token

    def __repr__(self) -> str:
        return f"Leaf({self.token.value})"

    def to_dict(self) -> ASTDict:
        return {"kind": self.kind, "token": self.token.to_dict()}


class Binary(Expression):
    kind = "binary"

    def __init__(self, left: Expression, operator: Token, right: Expression) -> None:
        self.left = left
        self.operator = operator
        self.right = right

    def __repr__(self) -> str:
        return f"Binary({self.operator.value}, {self.left!r}, {self.right!r})"

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "left": self.left.to_dict(),
            "operator": self.operator.to_dict(),
            "right": self.right.to_dict(),
        }


class Unary(Expression):
    kind = "unary"

    def __init__(self, operator: Token, operand: Expression) -> None:
        self.operator = operator
        self.operand = operand

    def __repr__(self) -> str:
        return f"Unary({self.operator.value}, {self.operand!r})"

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "operator": self.operator.to_dict(),
            "operand": self.operand.to_dict(),
        }


class Grouping(Expression):
    kind = "grouping"

    def __init__(self, inner: Expression) -> None:
        self.inner = inner

    def __repr__(self) -> str:
        return f"Grouping({self.inner!r})"

    def to_dict(self) -> ASTDict:
        return {"kind": self.kind, "inner": self.inner.to_dict()}


class FunctionCall(Expression):
    kind = "call"

    def __init__(self, identifier: Token, args: list[Token]) -> None:
        self.identifier = identifier
        self.args = args

    def __repr__(self) -> str:
        args = ", ".join(a.value for a in self.args)
        return f"FunctionCall({self.identifier.value}({args}))"

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "identifier": self.identifier.to_dict(),
            "args": [a.to_dict() for a in self.args],
        }


class ArrayLiteral(Expression):
    kind = "array"

    def __init__(self, elements: list[Token]) -> None:
        self.elements = elements

    def __repr__(self) -> str:
        return f"ArrayLiteral([{', '.join(e.value for e in self.elements)}])"

    def to_dict(self) -> ASTDict:
        return {"kind": self.kind, "elements": [e.to_dict() for e in self.elements]}


class Statement(ASTNode):
    pass


class Assign(Statement):
    """`let x = expr;` (declaration=True) or `x = expr;` (declaration=False)."""

    kind = "assign"

    def __init__(
        self, identifier: Token, value: Expression, declaration: bool = False
    ) -> None:
        self.identifier = identifier
        self.value = value
        self.declaration = declaration

    def __repr__(self) -> str:
        prefix = "let " if self.declaration else ""
        return f"Assign({prefix}{self.identifier.value} = {self.value!r})"

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "identifier": self.identifier.to_dict(),
            "value": self.value.to_dict(),
            "declaration": self.declaration,
        }


class If(Statement):
    """Conditional; `else_branch` is None when there is no `else` at all.

    An `else if` chain is stored as an `else_branch` holding a single nested `If`.
    """

    kind = "if"

    def __init__(
        self,
        cond: Expression,
        then_branch: list[Statement],
        else_branch: list[Statement] | None = None,
    ) -> None:
        self.cond = cond
        self.then_branch = then_branch
        self.else_branch = else_branch

    def __repr__(self) -> str:
        parts = [repr(self.cond), f"then={_preview(self.then_branch)}"]
        if self.else_branch is not None:
            parts.append(f"else={_preview(self.else_branch)}")
        return f"If({', '.join(parts)})"

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "cond": self.cond.to_dict(),
            "then_branch": _block_dict(self.then_branch),
            "else_branch": (
                None if self.else_branch is None else _block_dict(self.else_branch)
            ),
        }


class While(Statement):
    kind = "while"

    def __init__(self, cond: Expression, body: list[Statement]) -> None:
        self.cond = cond
        self.body = body

    def __repr__(self) -> str:
        return f"While({self.cond!r}, body={_preview(self.body)})"

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "cond": self.cond.to_dict(),
            "body": _block_dict(self.body),
        }


class Return(Statement):
    kind = "return"

    def __init__(self, value: Expression) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Return({self.value!r})"

    def to_dict(self) -> ASTDict:
        return {"kind": self.kind, "value": self.value.to_dict()}


class Function(ASTNode):
    """A `func name(params) { body }` declaration.

    Attributes:
        name (Token): IDENT or the reserved MAIN token.
        params (list[Token]): Unique IDENT tokens, in declaration order.
        body (list[Statement]): The function's statements.
    """

    kind = "function"

    def __init__(
        self, name: Token, params: list[Token], body: list[Statement]
    ) -> None:
        self.name = name
        self.params = params
        self.body = body

    def __repr__(self) -> str:
        params = ", ".join(p.value for p in self.params)
        return f"Function({self.name.value}({params}), body={_preview(self.body)})"

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "name": self.name.to_dict(),
            "params": [p.to_dict() for p in self.params],
            "body": _block_dict(self.body),
        }


class Program(ASTNode):
    kind = "program"

    def __init__(self, functions: list[Function]) -> None:
        self.functions = functions

    def __repr__(self) -> str:
        return f"Program({_preview(self.functions)})"

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "functions": [f.to_dict() for f in self.functions],
        }


__all__ = [
    "ASTDict",
    "ASTNode",
    "ArrayLiteral",
    "Assign",
    "Binary",
    "Expression",
    "Function",
    "FunctionCall",
    "Grouping",
    "If",
    "Leaf",
    "Program",
    "Return",
    "Statement",
    "Unary",
    "While",
]
