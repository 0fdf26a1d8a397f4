"""
ELDEN statement parser.

Parses one statement from the front of a token slice and reports how many
tokens it used, so callers (blocks, function bodies) can advance their own
cursor. Nested blocks are parsed by recursion through `parse_block`.

Supported statements
--------------------
- Declarations and assignments: `let x = expr;`, `x = expr;`
- Returns: `return expr;`
- Conditionals: `if (cond) { ... }`, optionally followed by `else { ... }` or
  `else if (...) { ... }` chains
- Loops: `while (cond) { ... }`

Statement bodies that end in `;` are located with a flat forward scan for the
next `;`. Conditions are located by scanning for the `)` that brings the
parenthesis depth back to zero, so conditions may contain calls and groupings.

Entry points
------------
- `parse_statement(tokens)` -> (Statement, consumed)
- `parse_block(tokens)` -> (list[Statement], consumed)
"""

import logging
from collections.abc import Sequence

from elden.elden_ast import Assign, Expression, If, Return, Statement, While
from elden.elden_errors import (
    ExpectedClosingBrace,
    ExpectedClosingParen,
    ExpectedOpeningDelimiter,
    ExpectedStatement,
    InvalidAssignment,
    MissingSemicolon,
    UnexpectedEndOfInput,
    describe,
)
from elden.elden_expression import parse_expression
from elden.elden_lexer import Token

logger = logging.getLogger(__name__)


def find_semicolon(tokens: Sequence[Token]) -> int | None:
    """Index of the first `;` in `tokens`, or None."""
    for index, tok in enumerate(tokens):
        if tok.type == "SEMICOLON":
            return index
    return None


def find_matching(
    tokens: Sequence[Token], open_index: int, open_type: str, close_type: str
) -> int | None:
    """Find the token that closes the delimiter at `open_index`.

    Args:
        tokens: The slice to scan.
        open_index: Index of the opening delimiter.
        open_type: Token type that increases the depth (e.g. "LPAREN").
        close_type: Token type that decreases it (e.g. "RPAREN").

    Returns:
        int | None: Index of the closer that brings the depth back to zero, or
        None if the slice ends first.
    """
    depth = 0
    for index in range(open_index, len(tokens)):
        tok_type = tokens[index].type
        if tok_type == open_type:
            depth += 1
        elif tok_type == close_type:
            depth -= 1
            if depth == 0:
                return index
    return None


def parse_statement(tokens: Sequence[Token]) -> tuple[Statement, int]:
    """Parse the statement at the start of `tokens`.

    Returns:
        tuple[Statement, int]: The statement and the number of tokens it spans,
        including its terminating `;` or closing `}`.

    Raises:
        ExpectedStatement: If the first token cannot start a statement.
        ParseError: On any malformed statement or nested expression.
    """
    if not tokens:
        raise UnexpectedEndOfInput("No tokens provided, expected a statement")

    first = tokens[0]
    if first.type in ("LET", "IDENT"):
        stmt, consumed = parse_assignment(tokens)
    elif first.type == "RETURN":
        stmt, consumed = parse_return(tokens)
    elif first.type == "IF":
        stmt, consumed = parse_if(tokens)
    elif first.type == "WHILE":
        stmt, consumed = parse_while(tokens)
    else:
        raise ExpectedStatement(f"Expected a statement, got {describe(first)}", first)

    logger.debug("parsed %s statement spanning %d tokens", stmt.kind, consumed)
    return stmt, consumed


def parse_assignment(tokens: Sequence[Token]) -> tuple[Assign, int]:
    """Parse `[let] IDENT = expr ;`.

    Returns:
        tuple[Assign, int]: The assignment (flagged as a declaration for `let`)
        and the number of tokens up to and including the `;`.

    Raises:
        MissingSemicolon: If no `;` follows.
        InvalidAssignment: If the tokens before the `;` are not
            `[let] IDENT = <expr>`.
    """
    semi = find_semicolon(tokens)
    if semi is None:
        raise MissingSemicolon(
            "Syntax error, expected semicolon at end of statement", tokens[0]
        )

    body = tokens[:semi]
    declaration = tokens[0].type == "LET"
    offset = 1 if declaration else 0

    if len(body) < offset + 3:
        raise InvalidAssignment(
            "Syntax error, expected an assignment statement", tokens[0]
        )
    if body[offset].type != "IDENT":
        raise InvalidAssignment(
            "Assignment statement must start with an identifier", body[offset]
        )
    if body[offset + 1].type != "ASSIGN":
        raise InvalidAssignment(
            "Expected '=' after the identifier in assignment statement",
            body[offset + 1],
        )

    value, _ = parse_expression(body[offset + 2 :])
    return Assign(body[offset], value, declaration), semi + 1


def parse_return(tokens: Sequence[Token]) -> tuple[Return, int]:
    """Parse `return expr ;`."""
    semi = find_semicolon(tokens)
    if semi is None:
        raise MissingSemicolon(
            "Syntax error, expected semicolon at end of return statement", tokens[0]
        )
    value, _ = parse_expression(tokens[1:semi])
    return Return(value), semi + 1


def parse_condition(tokens: Sequence[Token], keyword: str) -> tuple[Expression, int]:
    """Parse the `( cond )` following an `if`/`while` keyword.

    Returns:
        tuple[Expression, int]: The condition and the index just past its `)`.
    """
    if len(tokens) < 2 or tokens[1].type != "LPAREN":
        raise ExpectedOpeningDelimiter(
            f"Syntax error, expected opening parenthesis for {keyword} statement",
            tokens[1] if len(tokens) > 1 else tokens[0],
        )

    close = find_matching(tokens, 1, "LPAREN", "RPAREN")
    if close is None:
        raise ExpectedClosingParen(
            f"Syntax error, expected closing parenthesis for {keyword} statement",
            tokens[1],
        )

    cond, _ = parse_expression(tokens[2:close])
    return cond, close + 1


def parse_body(
    tokens: Sequence[Token], cursor: int, keyword: str
) -> tuple[list[Statement], int]:
    """Parse the `{ ... }` body of an `if`, `else` or `while` at `cursor`.

    Returns:
        tuple[list[Statement], int]: The block and the index just past its `}`.

    Raises:
        ExpectedOpeningDelimiter: If `tokens[cursor]` is not `{`.
    """
    if cursor >= len(tokens) or tokens[cursor].type != "LBRACE":
        raise ExpectedOpeningDelimiter(
            f"Syntax error, expected opening brace for {keyword} statement",
            tokens[cursor] if cursor < len(tokens) else tokens[-1],
        )
    block, used = parse_block(tokens[cursor:])
    return block, cursor + used


def parse_if(tokens: Sequence[Token]) -> tuple[If, int]:
    """Parse `if (cond) { ... }` with an optional `else { ... }` or `else if ...`."""
    cond, cursor = parse_condition(tokens, "if")
    then_branch, cursor = parse_body(tokens, cursor, "if")

    else_branch: list[Statement] | None = None
    if cursor < len(tokens) and tokens[cursor].type == "ELSE":
        else_tok = tokens[cursor]
        cursor += 1
        if cursor < len(tokens) and tokens[cursor].type == "IF":
            nested, used = parse_if(tokens[cursor:])
            else_branch = [nested]
            cursor += used
        elif cursor < len(tokens) and tokens[cursor].type == "LBRACE":
            else_branch, cursor = parse_body(tokens, cursor, "else")
        else:
            raise ExpectedOpeningDelimiter(
                "Syntax error, expected '{' or 'if' after else", else_tok
            )

    return If(cond, then_branch, else_branch), cursor


def parse_while(tokens: Sequence[Token]) -> tuple[While, int]:
    """Parse `while (cond) { ... }`."""
    cond, cursor = parse_condition(tokens, "while")
    body, cursor = parse_body(tokens, cursor, "while")
    return While(cond, body), cursor


def parse_block(tokens: Sequence[Token]) -> tuple[list[Statement], int]:
    """Parse `{ stmt* }` at the start of `tokens`.

    Returns:
        tuple[list[Statement], int]: The statements and the number of tokens used,
        including both braces.

    Raises:
        ExpectedOpeningDelimiter: If `tokens` does not start with `{`.
        ExpectedClosingBrace: If the slice ends before the block's `}`.
    """
    if not tokens or tokens[0].type != "LBRACE":
        raise ExpectedOpeningDelimiter(
            "Syntax error, expected '{' at start of block",
            tokens[0] if tokens else None,
        )

    stmts: list[Statement] = []
    cursor = 1
    while True:
        if cursor >= len(tokens):
            raise ExpectedClosingBrace(
                "Syntax error, expected closing brace for block", tokens[0]
            )
        if tokens[cursor].type == "RBRACE":
            return stmts, cursor + 1
        stmt, used = parse_statement(tokens[cursor:])
        stmts.append(stmt)
        cursor += used


__all__ = [
    "find_matching",
    "find_semicolon",
    "parse_assignment",
    "parse_block",
    "parse_condition",
    "parse_if",
    "parse_return",
    "parse_statement",
    "parse_while",
]
