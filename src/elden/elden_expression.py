"""
ELDEN expression parser.

Turns a slice of tokens into an expression tree by precedence climbing. Each
binary precedence level has its own method, which parses its left operand one
level up and then loops while the next token belongs to its level, folding
every `operator operand` pair into a left-leaning `Binary` node. Looping instead
of recursing on the right keeps equal-precedence chains left-associative.

Precedence, lowest to highest:
    1. `||`
    2. `&&`
    3. `==`  `!=`
    4. `>`  `>=`  `<`  `<=`
    5. `+`  `-`
    6. `*`  `/`  `%`
    7. prefix `!`
    8. primaries: literals, identifiers, calls `f(a, b)`, arrays `[a, b]`,
       groupings `( ... )`

Entry point:
    parse_expression(tokens) -> (Expression, consumed)

The top-level call must consume the whole slice; leftover tokens raise
`UnexpectedToken`.

Nesting through `( ... )` and prefix `!` is capped at `MAX_NESTING_DEPTH`;
deeper input raises `ExpressionTooDeep` instead of exhausting the interpreter
stack.
"""

import logging
from collections.abc import Callable, Sequence

from elden.elden_ast import (
    ArrayLiteral,
    Binary,
    Expression,
    FunctionCall,
    Grouping,
    Leaf,
    Unary,
)
from elden.elden_constants import (
    builtin_functions,
    literal_tokens,
    precedence_levels,
    unary_operators,
    value_tokens,
)
from elden.elden_errors import (
    ExpectedCloseParen,
    ExpectedClosingDelimiter,
    ExpectedExpressionAfterOperator,
    ExpressionTooDeep,
    UnexpectedEndOfInput,
    UnexpectedToken,
    UnexpectedTokenInArgumentList,
    UnexpectedTokenInArray,
    describe,
)
from elden.elden_lexer import Token

logger = logging.getLogger(__name__)

OR_OPS, AND_OPS, EQUALITY_OPS, RELATIONAL_OPS, ADDITIVE_OPS, MULTIPLICATIVE_OPS = (
    precedence_levels
)

# Each grouping level costs about fifteen Python frames (one per ladder method).
MAX_NESTING_DEPTH = 32

# Token types that can begin an operand.
OPERAND_START = value_tokens | set(builtin_functions) | unary_operators | {
    "LPAREN",
    "LBRACK",
}


class ExpressionParser:
    """
    Cursor over a read-only token slice for one expression parse.

    A fresh instance is created for every `parse_expression` call; nothing
    survives between calls.

    Attributes
    ----------
    tokens : Sequence[Token]
        The slice being parsed. Never mutated.
    position : int
        Index of the next unexamined token; equals the consumed count.
    depth : int
        Open groupings plus pending `!` operators around the current position.
    """

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = tokens
        self.position = 0
        self.depth = 0

    def at_end(self) -> bool:
        """
        Checks whether every token of the slice has been consumed.

        Returns:
            bool: True once `position` has reached the end of `tokens`.
        """
        return self.position >= len(self.tokens)

    def current(self) -> Token:
        """
        Returns the token at the cursor without consuming it.

        Returns:
            Token: The next unexamined token.

        Raises:
            UnexpectedEndOfInput: If the slice is exhausted.
        """
        if self.at_end():
            raise UnexpectedEndOfInput(
                "Unexpected end of input, expected an expression"
            )
        return self.tokens[self.position]

    def peek(self, offset: int = 1) -> Token | None:
        index = self.position + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def advance(self) -> Token:
        tok = self.current()
        self.position += 1
        return tok

    def check(self, *types: str) -> bool:
        """
        Tests the type of the token at the cursor.

        Args:
            *types (str): Accepted token types.

        Returns:
            bool: True if a token remains and its type is one of `types`.
        """
        return not self.at_end() and self.tokens[self.position].type in types

    def expect_operand(self, op: Token) -> None:
        """
        Ensures an operand can follow the operator `op` just consumed.

        Raises:
            ExpectedExpressionAfterOperator: If the slice ends, or the next token
                cannot begin an expression.
        """
        if self.at_end() or self.tokens[self.position].type not in OPERAND_START:
            raise ExpectedExpressionAfterOperator(
                f"Expected expression after operator {describe(op)}", op
            )

    def fold_binary(
        self, operators: tuple[str, ...], operand: Callable[[], Expression]
    ) -> Expression:
        """Parse `operand (op operand)*` for one precedence level, left-associatively."""
        left: Expression = operand()
        while self.check(*operators):
            op = self.advance()
            self.expect_operand(op)
            right: Expression = operand()
            left = Binary(left, op, right)
        return left

    def parse_or(self) -> Expression:
        return self.fold_binary(OR_OPS, self.parse_and)

    def parse_and(self) -> Expression:
        return self.fold_binary(AND_OPS, self.parse_equality)

    def parse_equality(self) -> Expression:
        return self.fold_binary(EQUALITY_OPS, self.parse_relational)

    def parse_relational(self) -> Expression:
        return self.fold_binary(RELATIONAL_OPS, self.parse_additive)

    def parse_additive(self) -> Expression:
        return self.fold_binary(ADDITIVE_OPS, self.parse_multiplicative)

    def parse_multiplicative(self) -> Expression:
        return self.fold_binary(MULTIPLICATIVE_OPS, self.parse_unary)

    def parse_unary(self) -> Expression:
        """
        Parses a run of prefix `!` operators and the primary they apply to.

        The run is collected in a loop and wrapped innermost-first, so `!!x`
        becomes `Unary(!, Unary(!, x))` without one call per operator.

        Returns:
            Expression: The primary, wrapped once per `!`.

        Raises:
            ExpectedExpressionAfterOperator: If a `!` is not followed by an operand.
            ExpressionTooDeep: If the run pushes nesting past `MAX_NESTING_DEPTH`.
        """
        ops: list[Token] = []
        while self.check(*unary_operators):
            op = self.advance()
            self.expect_operand(op)
            ops.append(op)
            self.enter_nesting(op)

        expr = self.parse_primary()
        self.depth -= len(ops)
        for op in reversed(ops):
            expr = Unary(op, expr)
        return expr

    def enter_nesting(self, tok: Token) -> None:
        if self.depth >= MAX_NESTING_DEPTH:
            raise ExpressionTooDeep(
                f"Expression nested too deeply at {describe(tok)} "
                f"(limit {MAX_NESTING_DEPTH})",
                tok,
            )
        self.depth += 1

    def parse_primary(self) -> Expression:
        """
        Parses the highest-precedence forms.

        Returns:
            Expression: A `Leaf` for a literal or identifier, a `FunctionCall`
            for an identifier or builtin followed by `(`, an `ArrayLiteral` for
            `[`, or a `Grouping` for `(`.

        Raises:
            UnexpectedToken: If the cursor holds anything else, including a
                builtin name that is not called.
            UnexpectedEndOfInput: If the slice is exhausted.
        """
        tok = self.current()

        if tok.type in literal_tokens:
            return Leaf(self.advance())

        if tok.type == "IDENT" or tok.type in builtin_functions:
            nxt = self.peek()
            if nxt is not None and nxt.type == "LPAREN":
                return self.parse_call()
            if tok.type == "IDENT":
                return Leaf(self.advance())
            raise UnexpectedToken(
                f"Builtin {describe(tok)} must be called with '('", tok
            )

        if tok.type == "LBRACK":
            return self.parse_array()

        if tok.type == "LPAREN":
            return self.parse_grouping()

        raise UnexpectedToken(f"Unexpected token {describe(tok)} in expression", tok)

    def parse_call(self) -> FunctionCall:
        """Parse `name ( [arg (, arg)*] )` where every argument is a single token."""
        name = self.advance()
        self.advance()  # (
        args: list[Token] = []

        def unclosed() -> ExpectedClosingDelimiter:
            return ExpectedClosingDelimiter(
                f"Expected ')' to close argument list of {describe(name)}", name
            )

        if self.at_end():
            raise unclosed()
        if self.check("RPAREN"):
            self.advance()
            return FunctionCall(name, args)

        while True:
            if self.at_end():
                raise unclosed()
            arg = self.tokens[self.position]
            if arg.type not in value_tokens:
                raise UnexpectedTokenInArgumentList(
                    f"Unexpected token {describe(arg)} in argument list of {describe(name)}",
                    arg,
                )
            args.append(self.advance())

            if self.at_end():
                raise unclosed()
            sep = self.advance()
            if sep.type == "RPAREN":
                return FunctionCall(name, args)
            if sep.type != "COMMA":
                raise UnexpectedTokenInArgumentList(
                    f"Expected ',' or ')' in argument list of {describe(name)}, got {describe(sep)}",
                    sep,
                )

    def parse_array(self) -> ArrayLiteral:
        """Parse `[ [elem (, elem)*] ]` where every element is a single token."""
        open_tok = self.advance()
        elements: list[Token] = []

        def unclosed() -> ExpectedClosingDelimiter:
            return ExpectedClosingDelimiter(
                f"Expected ']' to close array opened with {describe(open_tok)}",
                open_tok,
            )

        def misplaced(tok: Token) -> UnexpectedTokenInArray:
            if tok.type == "SEMICOLON":
                return UnexpectedTokenInArray(
                    f"Expected ']' before {describe(tok)}", tok
                )
            return UnexpectedTokenInArray(
                f"Unexpected token {describe(tok)} in array literal", tok
            )

        if self.at_end():
            raise unclosed()
        if self.check("RBRACK"):
            self.advance()
            return ArrayLiteral(elements)

        while True:
            if self.at_end():
                raise unclosed()
            elem = self.advance()
            if elem.type not in value_tokens:
                raise misplaced(elem)
            elements.append(elem)

            if self.at_end():
                raise unclosed()
            sep = self.advance()
            if sep.type == "RBRACK":
                return ArrayLiteral(elements)
            if sep.type != "COMMA":
                raise misplaced(sep)

    def parse_grouping(self) -> Grouping:
        """
        Parses `( expr )`, restarting the precedence ladder inside the parentheses.

        Returns:
            Grouping: The wrapped inner expression.

        Raises:
            ExpectedClosingDelimiter: If the slice ends before the `)`.
            ExpectedCloseParen: If the inner expression is followed by anything
                other than `)`.
            ExpressionTooDeep: If this `(` pushes nesting past `MAX_NESTING_DEPTH`.
        """
        open_tok = self.advance()
        self.enter_nesting(open_tok)
        if self.at_end():
            raise ExpectedClosingDelimiter(
                f"Expected ')' to close group opened with {describe(open_tok)}",
                open_tok,
            )
        inner = self.parse_or()
        if self.at_end():
            raise ExpectedClosingDelimiter(
                f"Expected ')' to close group opened with {describe(open_tok)}",
                open_tok,
            )
        close = self.advance()
        if close.type != "RPAREN":
            raise ExpectedCloseParen(
                f"Expected ')' after grouped expression, got {describe(close)}", close
            )
        self.depth -= 1
        return Grouping(inner)


def parse_expression(tokens: Sequence[Token]) -> tuple[Expression, int]:
    """Parse a whole token slice as one expression.

    Args:
        tokens: The expression's tokens, without any terminating `;`.

    Returns:
        tuple[Expression, int]: The tree and the number of tokens consumed, which
        is always `len(tokens)`.

    Raises:
        UnexpectedEndOfInput: If `tokens` is empty.
        UnexpectedToken: If tokens remain after a complete expression.
        ExpressionTooDeep: If groupings and `!` nest more than `MAX_NESTING_DEPTH` deep.
        ExpressionError, DelimiterError: On any malformed sub-expression.
    """
    parser = ExpressionParser(tokens)
    expr = parser.parse_or()
    if not parser.at_end():
        tok = tokens[parser.position]
        raise UnexpectedToken(
            f"Unexpected token {describe(tok)} after end of expression", tok
        )
    logger.debug("parsed expression from %d tokens", parser.position)
    return expr, parser.position


__all__ = ["MAX_NESTING_DEPTH", "ExpressionParser", "parse_expression"]
