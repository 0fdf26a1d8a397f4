"""
Token tables for the ELDEN language.

Every lexeme the tokenizer recognises maps to a canonical token type name. The
tables are split by role so the lexer can apply them in its fixed priority order
(delimiters, strings, two-character operators, numbers, one-character operators,
words), and so the parsers can ask which level of the precedence ladder an
operator belongs to.

Exports:
    - delimiter_tokens: single-character delimiters
    - double_operator_tokens: two-character operators (matched before prefixes)
    - single_operator_tokens: one-character operators
    - keyword_tokens: reserved words
    - boolean_literals: words lexed as BOOLEAN
    - token_hashmap: union of all of the above
    - precedence_levels: binary operator levels, lowest to highest
"""

delimiter_tokens: dict[str, str] = {
    "(": "LPAREN",
    ")": "RPAREN",
    "{": "LBRACE",
    "}": "RBRACE",
    "[": "LBRACK",
    "]": "RBRACK",
    ",": "COMMA",
    ";": "SEMICOLON",
    ".": "DOT",
}

# `"` is not a delimiter: it always opens a string literal, so no QUOTE token exists.

double_operator_tokens: dict[str, str] = {
    "!=": "NE",
    "==": "EQ",
    ">=": "GE",
    "<=": "LE",
    "||": "OR",
    "&&": "AND",
}

single_operator_tokens: dict[str, str] = {
    "+": "PLUS",
    "-": "SUB",
    "*": "MULT",
    "/": "DIV",
    "%": "MOD",
    ">": "GT",
    "<": "LT",
    "=": "ASSIGN",
    "!": "NOT",
}

keyword_tokens: dict[str, str] = {
    "func": "FUNC",
    "main": "MAIN",
    "if": "IF",
    "else": "ELSE",
    "for": "FOR",
    "while": "WHILE",
    "let": "LET",
    "return": "RETURN",
    "print": "PRINT",
    "append": "APPEND",
    "length": "LENGTH",
}

boolean_literals: dict[str, str] = {
    "true": "BOOLEAN",
    "false": "BOOLEAN",
}

token_hashmap: dict[str, str] = {
    **delimiter_tokens,
    **double_operator_tokens,
    **single_operator_tokens,
    **keyword_tokens,
    **boolean_literals,
}

# Binary operator levels, lowest to highest. Unary `!` and primaries sit above these.
precedence_levels: list[tuple[str, ...]] = [
    ("OR",),
    ("AND",),
    ("EQ", "NE"),
    ("GT", "GE", "LT", "LE"),
    ("PLUS", "SUB"),
    ("MULT", "DIV", "MOD"),
]

unary_operators: set[str] = {"NOT"}

literal_tokens: set[str] = {"NUMBER", "FLOAT", "BOOLEAN", "STRING"}

# Tokens that may stand alone as a leaf, a call argument or an array element.
value_tokens: set[str] = literal_tokens | {"IDENT"}

# Keywords that name builtins and may be called like functions.
builtin_functions: dict[str, str] = {
    "PRINT": "print",
    "APPEND": "append",
    "LENGTH": "length",
}

__all__ = [
    "boolean_literals",
    "builtin_functions",
    "delimiter_tokens",
    "double_operator_tokens",
    "keyword_tokens",
    "literal_tokens",
    "precedence_levels",
    "single_operator_tokens",
    "token_hashmap",
    "unary_operators",
    "value_tokens",
]
