"""
Lexical analyzer for the ELDEN scripting language.

This module converts raw source text into an ordered list of tokens:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Functions:
    tokenize(source): Tokenize a whole source string.
    tokenize_with_main(source): Tokenize and also report where `main` appears.

Recognition order at each position (after skipping whitespace):
    1. Single-character delimiters `( ) { } [ ] , ; .`
    2. Double-quoted strings (no escape sequences)
    3. Two-character operators `!= == >= <= || &&` (longest match first)
    4. Integer and float literals (`12`, `3.25`; `3.` is NUMBER then DOT)
    5. One-character operators `+ - * / % > < = !`
    6. Identifiers, keywords and the boolean literals `true`/`false`

Raises:
    UnknownToken: On any character outside the language.
    UnterminatedString: If a string literal never closes.
    MalformedNumber: If a numeric literal runs straight into identifier characters.

Example:
    >>> tokenize("let x = 1;")
    [Token(LET, let), Token(IDENT, x), Token(ASSIGN, =), Token(NUMBER, 1), Token(SEMICOLON, ;)]
"""

import logging
from typing import Any, TypedDict

from elden.elden_constants import (
    boolean_literals,
    delimiter_tokens,
    double_operator_tokens,
    keyword_tokens,
    single_operator_tokens,
)
from elden.elden_errors import MalformedNumber, UnknownToken, UnterminatedString

logger = logging.getLogger(__name__)

WHITESPACE = " \t\r\n\f\v"


def _is_digit(ch: str) -> bool:
    return ch.isascii() and ch.isdigit()


def _is_alpha(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _is_ident_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "_")


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class TokenDict(TypedDict):
    type: str
    value: str
    line: int
    col: int


class Token:
    """Represents a single lexical token in the ELDEN language.

    Tokens are immutable once produced by the lexer.

    Attributes:
        type (str): The canonical token type (e.g. 'IDENT', 'NUMBER', 'EOF').
        value (str): The raw source text of the token (string contents without quotes).
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    __slots__ = ("type", "value", "line", "col")

    def __init__(self, type_: str, value: str, line: int = 0, col: int = 0):
        object.__setattr__(self, "type", type_)
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "col", col)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Token is immutable; cannot set {name!r}")

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))

    def to_dict(self) -> TokenDict:
        return {
            "type": self.type,
            "value": self.value,
            "line": self.line,
            "col": self.col,
        }


class Lexer:
    """Lexical analyzer for the ELDEN language.

    Takes a CharacterStream and produces Token objects one at a time; an `EOF`
    token marks the end of input and is returned on every call after it.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek() in WHITESPACE:
            self.advance()

    def read_string(self, line: int, col: int) -> Token:
        """Reads a double-quoted string; the opening quote is the current character."""
        self.advance()
        val = ""
        while not self.stream.end_of_file() and self.peek() != '"':
            val += self.advance()
        if self.stream.end_of_file():
            raise UnterminatedString(line, col)
        self.advance()
        return Token("STRING", val, line, col)

    def read_number(self, line: int, col: int) -> Token:
        """Reads an integer, or a float when a `.` is followed by at least one digit."""
        num = ""
        while _is_digit(self.peek()):
            num += self.advance()

        type_ = "NUMBER"
        if self.peek() == "." and _is_digit(self.peek(1)):
            type_ = "FLOAT"
            num += self.advance()
            while _is_digit(self.peek()):
                num += self.advance()

        if _is_ident_char(self.peek()):
            while _is_ident_char(self.peek()):
                num += self.advance()
            raise MalformedNumber(num, line, col)

        return Token(type_, num, line, col)

    def read_word(self, line: int, col: int) -> Token:
        """Reads an identifier and classifies it as keyword, boolean or IDENT."""
        ident = ""
        while _is_ident_char(self.peek()):
            ident += self.advance()
        if ident in keyword_tokens:
            return Token(keyword_tokens[ident], ident, line, col)
        if ident in boolean_literals:
            return Token(boolean_literals[ident], ident, line, col)
        return Token("IDENT", ident, line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            LexError: If a malformed token is encountered.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token("EOF", "EOF", self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Delimiters
        if ch in delimiter_tokens:
            self.advance()
            return Token(delimiter_tokens[ch], ch, line, col)

        # 2. String
        if ch == '"':
            return self.read_string(line, col)

        # 3. Two-character operators before their prefixes
        pair = ch + self.peek(1)
        if pair in double_operator_tokens:
            self.advance()
            self.advance()
            return Token(double_operator_tokens[pair], pair, line, col)

        # 4. Number or float
        if _is_digit(ch):
            return self.read_number(line, col)

        # 5. One-character operators
        if ch in single_operator_tokens:
            self.advance()
            return Token(single_operator_tokens[ch], ch, line, col)

        # 6. Identifier or keyword
        if _is_alpha(ch):
            return self.read_word(line, col)

        raise UnknownToken(ch, line, col)


def tokenize_with_main(source: str) -> tuple[list[Token], int | None]:
    """Tokenize `source` and report the index of the first `main` keyword.

    Returns:
        tuple[list[Token], int | None]: The tokens (without the EOF sentinel) and
        the index of the first MAIN token, or None if the program has no `main`.
    """
    lexer = Lexer(CharacterStream(source))
    tokens: list[Token] = []
    main_index: int | None = None
    while True:
        tok = lexer.next_token()
        if tok.type == "EOF":
            break
        if tok.type == "MAIN" and main_index is None:
            main_index = len(tokens)
        tokens.append(tok)
    logger.debug("tokenized %d tokens (main at %s)", len(tokens), main_index)
    return tokens, main_index


def tokenize(source: str) -> list[Token]:
    """Tokenize `source` into a list of tokens, without the EOF sentinel."""
    tokens, _ = tokenize_with_main(source)
    return tokens


__all__ = [
    "CharacterStream",
    "Lexer",
    "Token",
    "TokenDict",
    "tokenize",
    "tokenize_with_main",
]
