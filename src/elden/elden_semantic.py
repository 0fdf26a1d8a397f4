"""
Semantic checks over a parsed ELDEN program.

Classes:
    SymbolType: What a name refers to (function, parameter or variable).
    Symbol: One declared name with its source location.
    SymbolTable: A stack of lexical scopes.
    SemanticAnalyzer: Walks a Program and reports declaration errors.

Checks performed:
    - duplicate function names
    - duplicate `let` bindings within one scope (parameters share the
      function's outermost scope)
    - use or assignment of an undeclared name
    - calls to names that are not functions or builtins, and arity mismatches
    - assignment to a function name

Unlike the parser, the analyzer does not stop at the first problem: it walks the
whole program and raises one `SemanticError` listing every error found.

Example:
    >>> program = parse_program(tokenize(source))
    >>> SemanticAnalyzer().analyze(program)
"""

import logging
from enum import Enum

from elden.elden_ast import (
    ArrayLiteral,
    Assign,
    Binary,
    Expression,
    Function,
    FunctionCall,
    Grouping,
    If,
    Leaf,
    Program,
    Return,
    Statement,
    Unary,
    While,
)
from elden.elden_constants import builtin_functions
from elden.elden_errors import DuplicateDeclaration, SemanticError, describe
from elden.elden_lexer import Token

logger = logging.getLogger(__name__)


class SymbolType(Enum):
    FUNCTION = "function"
    PARAMETER = "parameter"
    VARIABLE = "variable"


class Symbol:
    """A declared name.

    Attributes:
        name (str): The identifier.
        symbol_type (SymbolType): What kind of declaration introduced it.
        line (int): Line of the declaring token.
        col (int): Column of the declaring token.
        arity (int | None): Parameter count, for functions only.
    """

    def __init__(
        self,
        name: str,
        symbol_type: SymbolType,
        line: int = 0,
        col: int = 0,
        arity: int | None = None,
    ) -> None:
        self.name = name
        self.symbol_type = symbol_type
        self.line = line
        self.col = col
        self.arity = arity

    @classmethod
    def from_token(
        cls, token: Token, symbol_type: SymbolType, arity: int | None = None
    ) -> "Symbol":
        return cls(token.value, symbol_type, token.line, token.col, arity)

    def __repr__(self) -> str:
        return f"Symbol({self.name}, {self.symbol_type.value})"


class SymbolTable:
    """A stack of scopes; index 0 is the global scope and is never popped."""

    def __init__(self) -> None:
        self.scopes: list[dict[str, Symbol]] = [{}]

    @property
    def depth(self) -> int:
        return len(self.scopes) - 1

    def enter_scope(self) -> None:
        self.scopes.append({})

    def exit_scope(self) -> None:
        if len(self.scopes) == 1:
            raise RuntimeError("Cannot exit the global scope")
        self.scopes.pop()

    def declare(self, symbol: Symbol) -> None:
        """Declare `symbol` in the innermost scope.

        Raises:
            DuplicateDeclaration: If the innermost scope already has that name.
        """
        scope = self.scopes[-1]
        if symbol.name in scope:
            raise DuplicateDeclaration(symbol.name)
        scope[symbol.name] = symbol

    def lookup(self, name: str) -> Symbol | None:
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        return None


class SemanticAnalyzer:
    """
    Two-pass declaration checker for ELDEN programs.

    The first pass declares every function globally so calls may refer to
    functions declared later in the file. The second pass walks each function
    body in its own scope; `if`/`while` blocks open nested scopes.

    Attributes:
        symbol_table (SymbolTable): Scopes built during analysis.
        current_function (str | None): Name of the function being walked.
        errors (list[str]): Problems found so far.
    """

    def __init__(self) -> None:
        self.symbol_table = SymbolTable()
        self.current_function: str | None = None
        self.errors: list[str] = []

    def error(self, message: str, token: Token | None = None) -> None:
        if token is not None and token.line:
            message = f"line {token.line}, col {token.col}: {message}"
        if self.current_function is not None:
            message = f"in function '{self.current_function}': {message}"
        self.errors.append(message)

    def declare(
        self, token: Token, symbol_type: SymbolType, arity: int | None = None
    ) -> None:
        try:
            self.symbol_table.declare(Symbol.from_token(token, symbol_type, arity))
        except DuplicateDeclaration as e:
            self.error(str(e), token)

    def analyze(self, program: Program) -> SymbolTable:
        """Check `program` and return the global symbol table.

        Raises:
            SemanticError: If any check failed.
        """
        for function in program.functions:
            self.declare(function.name, SymbolType.FUNCTION, len(function.params))

        for function in program.functions:
            self.analyze_function(function)

        logger.debug(
            "semantic analysis of %d functions found %d errors",
            len(program.functions),
            len(self.errors),
        )
        if self.errors:
            raise SemanticError(self.errors)
        return self.symbol_table

    def analyze_function(self, function: Function) -> None:
        self.current_function = function.name.value
        self.symbol_table.enter_scope()
        for param in function.params:
            self.declare(param, SymbolType.PARAMETER)
        for stmt in function.body:
            self.analyze_statement(stmt)
        self.symbol_table.exit_scope()
        self.current_function = None

    def analyze_block(self, stmts: list[Statement]) -> None:
        self.symbol_table.enter_scope()
        for stmt in stmts:
            self.analyze_statement(stmt)
        self.symbol_table.exit_scope()

    def analyze_statement(self, stmt: Statement) -> None:
        if isinstance(stmt, Assign):
            self.analyze_expression(stmt.value)
            if stmt.declaration:
                self.declare(stmt.identifier, SymbolType.VARIABLE)
                return
            symbol = self.symbol_table.lookup(stmt.identifier.value)
            if symbol is None:
                self.error(
                    f"Assignment to undeclared variable {describe(stmt.identifier)}",
                    stmt.identifier,
                )
            elif symbol.symbol_type is SymbolType.FUNCTION:
                self.error(
                    f"Cannot assign to function '{stmt.identifier.value}'",
                    stmt.identifier,
                )
        elif isinstance(stmt, If):
            self.analyze_expression(stmt.cond)
            self.analyze_block(stmt.then_branch)
            if stmt.else_branch is not None:
                self.analyze_block(stmt.else_branch)
        elif isinstance(stmt, While):
            self.analyze_expression(stmt.cond)
            self.analyze_block(stmt.body)
        elif isinstance(stmt, Return):
            self.analyze_expression(stmt.value)
        else:
            raise TypeError(f"Unknown statement node: {stmt!r}")

    def analyze_expression(self, expr: Expression) -> None:
        if isinstance(expr, Leaf):
            self.check_value(expr.token)
        elif isinstance(expr, Binary):
            self.analyze_expression(expr.left)
            self.analyze_expression(expr.right)
        elif isinstance(expr, Unary):
            self.analyze_expression(expr.operand)
        elif isinstance(expr, Grouping):
            self.analyze_expression(expr.inner)
        elif isinstance(expr, FunctionCall):
            self.check_call(expr)
        elif isinstance(expr, ArrayLiteral):
            for elem in expr.elements:
                self.check_value(elem)
        else:
            raise TypeError(f"Unknown expression node: {expr!r}")

    def check_value(self, token: Token) -> None:
        """An identifier used as a value must name a parameter or variable."""
        if token.type != "IDENT":
            return
        symbol = self.symbol_table.lookup(token.value)
        if symbol is None:
            self.error(f"Use of undeclared identifier {describe(token)}", token)
        elif symbol.symbol_type is SymbolType.FUNCTION:
            self.error(f"Function '{token.value}' used as a value", token)

    def check_call(self, call: FunctionCall) -> None:
        for arg in call.args:
            self.check_value(arg)

        if call.identifier.type in builtin_functions:
            return
        symbol = self.symbol_table.lookup(call.identifier.value)
        if symbol is None:
            self.error(
                f"Call to undeclared function {describe(call.identifier)}",
                call.identifier,
            )
        elif symbol.symbol_type is not SymbolType.FUNCTION:
            self.error(
                f"'{call.identifier.value}' is not a function", call.identifier
            )
        elif symbol.arity is not None and symbol.arity != len(call.args):
            self.error(
                f"Function '{symbol.name}' expects {symbol.arity} arguments, got {len(call.args)}",
                call.identifier,
            )


__all__ = ["SemanticAnalyzer", "Symbol", "SymbolTable", "SymbolType"]
