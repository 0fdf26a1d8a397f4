import pytest
from hypothesis import given
from hypothesis import strategies as st

from elden.elden_constants import keyword_tokens
from elden.elden_errors import (
    LexError,
    MalformedNumber,
    UnknownToken,
    UnterminatedString,
)
from elden.elden_lexer import (
    CharacterStream,
    Lexer,
    Token,
    tokenize,
    tokenize_with_main,
)


def types_of(source: str) -> list[str]:
    return [tok.type for tok in tokenize(source)]


def test_delimiter_tokens() -> None:
    assert types_of("( ) { } [ ] , ; .") == [
        "LPAREN",
        "RPAREN",
        "LBRACE",
        "RBRACE",
        "LBRACK",
        "RBRACK",
        "COMMA",
        "SEMICOLON",
        "DOT",
    ]


def test_single_char_operators() -> None:
    assert types_of("+ - * / % > < = !") == [
        "PLUS",
        "SUB",
        "MULT",
        "DIV",
        "MOD",
        "GT",
        "LT",
        "ASSIGN",
        "NOT",
    ]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("==", "EQ"),
        ("!=", "NE"),
        (">=", "GE"),
        ("<=", "LE"),
        ("||", "OR"),
        ("&&", "AND"),
    ],
)  # type: ignore[misc]
def test_two_char_operators_take_longest_match(source: str, expected: str) -> None:
    toks = tokenize(source)
    assert len(toks) == 1
    assert toks[0].type == expected
    assert toks[0].value == source


def test_adjacent_operators_split_greedily() -> None:
    assert types_of("a>=b==!c") == ["IDENT", "GE", "IDENT", "EQ", "NOT", "IDENT"]
    assert types_of("x===y") == ["IDENT", "EQ", "ASSIGN", "IDENT"]


@pytest.mark.parametrize("word", sorted(keyword_tokens))  # type: ignore[misc]
def test_keywords(word: str) -> None:
    tok = tokenize(word)[0]
    assert tok.type == keyword_tokens[word]
    assert tok.value == word


def test_keywords_are_case_sensitive() -> None:
    tok = tokenize("Return")[0]
    assert tok.type == "IDENT"


def test_keyword_prefix_is_identifier() -> None:
    assert tokenize("iffy")[0] == Token("IDENT", "iffy", 1, 1)
    assert tokenize("main2")[0].type == "IDENT"


def test_boolean_literals() -> None:
    assert [(t.type, t.value) for t in tokenize("true false")] == [
        ("BOOLEAN", "true"),
        ("BOOLEAN", "false"),
    ]


def test_identifier_with_digits_and_underscores() -> None:
    tok = tokenize("my_var2")[0]
    assert tok.type == "IDENT"
    assert tok.value == "my_var2"


def test_integer_and_float() -> None:
    assert [(t.type, t.value) for t in tokenize("123 45.67")] == [
        ("NUMBER", "123"),
        ("FLOAT", "45.67"),
    ]


def test_trailing_dot_is_not_folded_into_number() -> None:
    assert [(t.type, t.value) for t in tokenize("3.")] == [
        ("NUMBER", "3"),
        ("DOT", "."),
    ]


def test_second_dot_starts_new_tokens() -> None:
    assert [(t.type, t.value) for t in tokenize("1.2.3")] == [
        ("FLOAT", "1.2"),
        ("DOT", "."),
        ("NUMBER", "3"),
    ]


def test_leading_dot_is_a_delimiter() -> None:
    assert types_of(".5") == ["DOT", "NUMBER"]


def test_number_followed_by_letters_is_malformed() -> None:
    with pytest.raises(MalformedNumber, match="Malformed numeric literal '12abc'"):
        tokenize("let x = 12abc;")


def test_string_token() -> None:
    tok = tokenize('"hello world"')[0]
    assert tok.type == "STRING"
    assert tok.value == "hello world"


def test_string_keeps_backslashes_literally() -> None:
    tok = tokenize('"a\\nb"')[0]
    assert tok.value == "a\\nb"


def test_empty_string() -> None:
    assert tokenize('""') == [Token("STRING", "", 1, 1)]


def test_unterminated_string_raises() -> None:
    with pytest.raises(
        UnterminatedString, match="Unterminated string at line 1, col 9"
    ):
        tokenize('let s = "abc')


@pytest.mark.parametrize("char", ["@", "#", "$", "|", "&", "_", "~", "é"])  # type: ignore[misc]
def test_unknown_character_raises(char: str) -> None:
    with pytest.raises(UnknownToken) as excinfo:
        tokenize(f"x {char} y")
    assert excinfo.value.char == char
    assert excinfo.value.col == 3


def test_line_and_column_tracking() -> None:
    toks = tokenize("let x = 1;\n  return x;")
    ret = toks[5]
    assert ret.type == "RETURN"
    assert (ret.line, ret.col) == (2, 3)


def test_whitespace_only_is_empty() -> None:
    assert tokenize(" \t\r\n ") == []


def test_full_statement() -> None:
    assert tokenize("let x = 42;") == [
        Token("LET", "let", 1, 1),
        Token("IDENT", "x", 1, 5),
        Token("ASSIGN", "=", 1, 7),
        Token("NUMBER", "42", 1, 9),
        Token("SEMICOLON", ";", 1, 11),
    ]


def test_tokenize_with_main_reports_index() -> None:
    tokens, main_index = tokenize_with_main("func f() { } func main() { }")
    assert main_index == 7
    assert tokens[main_index].type == "MAIN"


def test_tokenize_with_main_none_without_main() -> None:
    _, main_index = tokenize_with_main("func f() { }")
    assert main_index is None


def test_lexer_returns_eof_repeatedly() -> None:
    lexer = Lexer(CharacterStream("x"))
    assert lexer.next_token().type == "IDENT"
    assert lexer.next_token().type == "EOF"
    assert lexer.next_token().type == "EOF"


def test_character_stream_methods() -> None:
    stream = CharacterStream("ab")
    assert stream.peek() == "a"
    assert stream.peek(1) == "b"
    assert stream.peek(5) == ""
    assert stream.next() == "a"
    assert not stream.end_of_file()
    stream.next()
    assert stream.end_of_file()


def test_character_stream_next_past_eof_raises() -> None:
    with pytest.raises(EOFError, match="Attempted to read past end of source"):
        CharacterStream("").next()


def test_token_repr_eq_hash() -> None:
    t1 = Token("NUMBER", "42", 1, 2)
    t2 = Token("NUMBER", "42", 1, 2)
    t3 = Token("NUMBER", "42")

    assert repr(t1) == "Token(NUMBER, 42)"
    assert t1 == t2
    assert t1 != t3
    assert len({t1, t2, t3}) == 2


def test_token_is_immutable() -> None:
    tok = Token("IDENT", "x")
    with pytest.raises(AttributeError):
        tok.value = "y"  # type: ignore[misc]


def test_token_to_dict() -> None:
    assert Token("IDENT", "x", 3, 4).to_dict() == {
        "type": "IDENT",
        "value": "x",
        "line": 3,
        "col": 4,
    }


@given(st.text(max_size=100))  # type: ignore[misc]
def test_lexer_only_raises_lex_errors(source: str) -> None:
    try:
        tokens = tokenize(source)
    except LexError:
        return
    assert all(tok.type != "EOF" for tok in tokens)


@given(
    st.lists(
        st.sampled_from(["x", "42", "3.5", "(", ")", "+", "==", "&&", '"s"', "let"]),
        max_size=20,
    )
)  # type: ignore[misc]
def test_space_separated_lexemes_map_one_to_one(lexemes: list[str]) -> None:
    tokens = tokenize(" ".join(lexemes))
    assert len(tokens) == len(lexemes)
