"""
ELDEN function parser and program assembler.

A program is a flat sequence of function declarations:

    func name(a, b) {
        let c = a + b;
        return c;
    }

    func main() {
        return add(1, 2);
    }

`parse_function` reads one declaration starting at an absolute token index and
returns the index just past it; `parse_program` drives it until the token
sequence is exhausted. The first failure aborts the whole parse and is reported
together with the index where the failing function began.
"""

import logging
from collections.abc import Sequence

from elden.elden_ast import Function, Program, Statement
from elden.elden_errors import (
    DuplicateParameter,
    ExpectedArgumentBetweenCommas,
    ExpectedClosingBrace,
    ExpectedClosingDelimiter,
    ExpectedFunctionKeyword,
    ExpectedFunctionName,
    ExpectedOpeningDelimiter,
    ExpectedParenBeforeBrace,
    FunctionError,
    FunctionParseError,
    ParseError,
    describe,
)
from elden.elden_lexer import Token
from elden.elden_statement import parse_statement

logger = logging.getLogger(__name__)


def parse_parameters(
    tokens: Sequence[Token], start: int, name: Token
) -> tuple[list[Token], int]:
    """Parse `( [IDENT (, IDENT)*] )` where `tokens[start]` is the `(`.

    Returns:
        tuple[list[Token], int]: The parameter tokens and the index past the `)`.
    """
    params: list[Token] = []
    seen: set[str] = set()
    expect_param = True  # at the start and after every comma
    index = start + 1

    while True:
        if index >= len(tokens):
            raise ExpectedClosingDelimiter(
                f"Expected ')' to close parameter list of {describe(name)}", name
            )
        tok = tokens[index]

        if tok.type == "RPAREN":
            if expect_param and params:
                raise ExpectedArgumentBetweenCommas(
                    f"Expected parameter between ',' and ')' in {describe(name)}", tok
                )
            return params, index + 1

        if tok.type == "LBRACE":
            raise ExpectedParenBeforeBrace(
                f"Expected ')' before '{{' in parameter list of {describe(name)}", tok
            )

        if tok.type == "COMMA":
            if expect_param:
                raise ExpectedArgumentBetweenCommas(
                    f"Expected parameter before ',' in {describe(name)}", tok
                )
            expect_param = True
        elif tok.type == "IDENT":
            if not expect_param:
                raise ExpectedArgumentBetweenCommas(
                    f"Expected ',' between parameters of {describe(name)}, got {describe(tok)}",
                    tok,
                )
            if tok.value in seen:
                raise DuplicateParameter(
                    f"Duplicate parameter '{tok.value}' in function {describe(name)}",
                    tok,
                )
            seen.add(tok.value)
            params.append(tok)
            expect_param = False
        else:
            raise FunctionError(
                f"Unexpected token {describe(tok)} in parameter list of {describe(name)}",
                tok,
            )
        index += 1


def parse_function(tokens: Sequence[Token], start: int) -> tuple[Function, int]:
    """Parse the function declaration beginning at `tokens[start]`.

    Returns:
        tuple[Function, int]: The function and the absolute index just past its `}`.

    Raises:
        FunctionError: On a malformed header.
        ExpectedClosingBrace: If the body is never closed.
        ParseError: On any error inside the body.
    """
    if start >= len(tokens) or tokens[start].type != "FUNC":
        got = describe(tokens[start]) if start < len(tokens) else "end of input"
        raise ExpectedFunctionKeyword(
            f"Expected 'func' keyword, got {got}",
            tokens[start] if start < len(tokens) else None,
        )
    func_tok = tokens[start]

    index = start + 1
    if index >= len(tokens) or tokens[index].type not in ("IDENT", "MAIN"):
        raise ExpectedFunctionName("Expected function name after 'func'", func_tok)
    name = tokens[index]

    index += 1
    if index >= len(tokens) or tokens[index].type != "LPAREN":
        raise ExpectedOpeningDelimiter(
            f"Expected '(' after function name {describe(name)}", name
        )
    params, index = parse_parameters(tokens, index, name)

    if index >= len(tokens) or tokens[index].type != "LBRACE":
        raise ExpectedOpeningDelimiter(
            f"Expected '{{' to open body of function {describe(name)}", name
        )
    index += 1

    body: list[Statement] = []
    while True:
        if index >= len(tokens):
            raise ExpectedClosingBrace(
                f"Expected closing brace for body of function {describe(name)}", name
            )
        if tokens[index].type == "RBRACE":
            index += 1
            break
        stmt, used = parse_statement(tokens[index:])
        body.append(stmt)
        index += used

    logger.debug(
        "parsed function %s (%d params, %d statements) spanning tokens [%d, %d)",
        name.value,
        len(params),
        len(body),
        start,
        index,
    )
    return Function(name, params, body), index


def parse_program(tokens: Sequence[Token]) -> Program:
    """Parse a full token sequence into a Program of functions in declaration order.

    Raises:
        FunctionParseError: Wrapping the first error, with the index where the
            failing function began.
    """
    functions: list[Function] = []
    index = 0
    while index < len(tokens):
        try:
            func, index = parse_function(tokens, index)
        except ParseError as e:
            raise FunctionParseError(index, e) from e
        functions.append(func)
    logger.debug("parsed program with %d functions", len(functions))
    return Program(functions)


__all__ = ["parse_function", "parse_parameters", "parse_program"]
