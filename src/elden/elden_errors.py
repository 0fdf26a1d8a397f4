"""
Exception taxonomy for the ELDEN front end.

All errors derive from Python's built-in `SyntaxError` so callers can catch the
precise class or any syntax failure at once. The parser is fail-fast: the first
error raised anywhere propagates unmodified to the caller, except at the program
level where it is wrapped in `FunctionParseError` with the index of the failing
function.

Hierarchy:
    LexError
        UnknownToken, UnterminatedString, MalformedNumber
    ParseError
        DelimiterError
            ExpectedClosingDelimiter, ExpectedCloseParen, ExpectedClosingParen,
            ExpectedOpeningDelimiter, ExpectedClosingBrace, MissingSemicolon
        ExpressionError
            UnexpectedEndOfInput, UnexpectedToken, ExpectedExpressionAfterOperator,
            UnexpectedTokenInArgumentList, UnexpectedTokenInArray, ExpressionTooDeep
        StatementError
            ExpectedStatement, InvalidAssignment
        FunctionError
            ExpectedFunctionKeyword, ExpectedFunctionName,
            ExpectedArgumentBetweenCommas, ExpectedParenBeforeBrace, DuplicateParameter
        FunctionParseError
    SemanticError
    DuplicateDeclaration
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from elden.elden_lexer import Token


def describe(token: Token) -> str:
    """Render a token for an error message, with its location when it has one."""
    if token.line:
        return f"'{token.value}' at line {token.line}, col {token.col}"
    return f"'{token.value}'"


class LexError(SyntaxError):
    """Raised by the tokenizer when the source text cannot be split into tokens.

    Attributes:
        line (int): 1-based line of the offending character.
        col (int): 1-based column of the offending character.
    """

    def __init__(self, message: str, line: int = 0, col: int = 0) -> None:
        super().__init__(message)
        self.line = line
        self.col = col


class UnknownToken(LexError):
    def __init__(self, char: str, line: int = 0, col: int = 0) -> None:
        super().__init__(
            f"Unknown token {char!r} at line {line}, col {col}", line, col
        )
        self.char = char


class UnterminatedString(LexError):
    def __init__(self, line: int = 0, col: int = 0) -> None:
        super().__init__(f"Unterminated string at line {line}, col {col}", line, col)


class MalformedNumber(LexError):
    def __init__(self, text: str, line: int = 0, col: int = 0) -> None:
        super().__init__(
            f"Malformed numeric literal {text!r} at line {line}, col {col}", line, col
        )
        self.literal = text


class ParseError(SyntaxError):
    """Base class for every error raised while building the AST.

    Attributes:
        token (Token | None): The token the parser was looking at, when known.
    """

    def __init__(self, message: str, token: Token | None = None) -> None:
        super().__init__(message)
        self.token = token


# Missing or mismatched delimiters
class DelimiterError(ParseError):
    pass


class ExpectedClosingDelimiter(DelimiterError):
    pass


class ExpectedCloseParen(DelimiterError):
    pass


class ExpectedClosingParen(DelimiterError):
    pass


class ExpectedOpeningDelimiter(DelimiterError):
    pass


class ExpectedClosingBrace(DelimiterError):
    pass


class MissingSemicolon(DelimiterError):
    pass


# Expressions
class ExpressionError(ParseError):
    pass


class UnexpectedEndOfInput(ExpressionError):
    pass


class UnexpectedToken(ExpressionError):
    pass


class ExpectedExpressionAfterOperator(ExpressionError):
    pass


class UnexpectedTokenInArgumentList(ExpressionError):
    pass


class UnexpectedTokenInArray(ExpressionError):
    pass


class ExpressionTooDeep(ExpressionError):
    pass


# Statements
class StatementError(ParseError):
    pass


class ExpectedStatement(StatementError):
    pass


class InvalidAssignment(StatementError):
    pass


# Function headers and bodies
class FunctionError(ParseError):
    pass


class ExpectedFunctionKeyword(FunctionError):
    pass


class ExpectedFunctionName(FunctionError):
    pass


class ExpectedArgumentBetweenCommas(FunctionError):
    pass


class ExpectedParenBeforeBrace(FunctionError):
    pass


class DuplicateParameter(FunctionError):
    pass


class FunctionParseError(ParseError):
    """Wraps the first error raised while parsing one function of a program.

    Attributes:
        index (int): Token index at which the failing function parse began.
        cause (ParseError): The underlying error.
    """

    def __init__(self, index: int, cause: ParseError) -> None:
        super().__init__(
            f"Error parsing function at index {index}: {cause}", cause.token
        )
        self.index = index
        self.cause = cause


class SemanticError(Exception):
    """Raised once semantic analysis finishes with one or more errors.

    Attributes:
        errors (list[str]): Every problem found, in discovery order.
    """

    def __init__(self, errors: list[str]) -> None:
        super().__init__("\n".join(errors))
        self.errors = errors


class DuplicateDeclaration(Exception):
    def __init__(self, name: str) -> None:
        super().__init__(f"Duplicate declaration of symbol: {name}")
        self.name = name


__all__ = [
    "DelimiterError",
    "DuplicateDeclaration",
    "DuplicateParameter",
    "ExpectedArgumentBetweenCommas",
    "ExpectedCloseParen",
    "ExpectedClosingBrace",
    "ExpectedClosingDelimiter",
    "ExpectedClosingParen",
    "ExpectedExpressionAfterOperator",
    "ExpectedFunctionKeyword",
    "ExpectedFunctionName",
    "ExpectedOpeningDelimiter",
    "ExpectedParenBeforeBrace",
    "ExpectedStatement",
    "ExpressionError",
    "ExpressionTooDeep",
    "FunctionError",
    "FunctionParseError",
    "InvalidAssignment",
    "LexError",
    "MalformedNumber",
    "MissingSemicolon",
    "ParseError",
    "SemanticError",
    "StatementError",
    "UnexpectedEndOfInput",
    "UnexpectedToken",
    "UnexpectedTokenInArgumentList",
    "UnexpectedTokenInArray",
    "UnknownToken",
    "describe",
]
