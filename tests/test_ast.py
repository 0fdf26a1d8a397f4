import json

import hypothesis.strategies as st
import pytest
from hypothesis import given

from elden.elden_ast import (
    ArrayLiteral,
    Assign,
    Binary,
    Function,
    FunctionCall,
    Grouping,
    If,
    Leaf,
    Program,
    Return,
    Unary,
    While,
)
from elden.elden_lexer import Token

X = Token("IDENT", "x")
Y = Token("IDENT", "y")
ONE = Token("NUMBER", "1")
PLUS = Token("PLUS", "+")
BANG = Token("NOT", "!")


def test_leaf_repr_and_dict() -> None:
    leaf = Leaf(X)
    assert repr(leaf) == "Leaf(x)"
    assert leaf.to_dict() == {"kind": "leaf", "token": X.to_dict()}


def test_binary_repr() -> None:
    node = Binary(Leaf(X), PLUS, Leaf(ONE))
    assert repr(node) == "Binary(+, Leaf(x), Leaf(1))"


def test_binary_to_dict_nests_children() -> None:
    d = Binary(Leaf(X), PLUS, Leaf(ONE)).to_dict()
    assert d["kind"] == "binary"
    assert d["operator"]["type"] == "PLUS"
    assert d["left"]["token"]["value"] == "x"
    assert d["right"]["token"]["value"] == "1"


def test_unary_and_grouping() -> None:
    node = Unary(BANG, Grouping(Leaf(X)))
    assert repr(node) == "Unary(!, Grouping(Leaf(x)))"
    assert node.to_dict()["operand"]["kind"] == "grouping"


def test_call_and_array_repr() -> None:
    assert repr(FunctionCall(Token("IDENT", "f"), [X, ONE])) == "FunctionCall(f(x, 1))"
    assert repr(ArrayLiteral([ONE, Y])) == "ArrayLiteral([1, y])"


def test_assign_declaration_flag() -> None:
    let = Assign(X, Leaf(ONE), declaration=True)
    bare = Assign(X, Leaf(ONE))
    assert repr(let) == "Assign(let x = Leaf(1))"
    assert repr(bare) == "Assign(x = Leaf(1))"
    assert let != bare
    assert let.to_dict()["declaration"] is True


def test_if_without_else_dumps_none() -> None:
    node = If(Leaf(X), [Return(Leaf(ONE))])
    d = node.to_dict()
    assert d["else_branch"] is None
    assert d["then_branch"][0]["kind"] == "return"


def test_if_with_empty_else_differs_from_no_else() -> None:
    assert If(Leaf(X), [], []) != If(Leaf(X), [])


def test_if_repr_previews_long_blocks() -> None:
    body = [Return(Leaf(ONE))] * 5
    assert repr(If(Leaf(X), body)).endswith(", ...])")


def test_while_dict() -> None:
    d = While(Leaf(X), [Assign(X, Leaf(ONE))]).to_dict()
    assert d["kind"] == "while"
    assert d["body"][0]["identifier"]["value"] == "x"


def test_function_and_program() -> None:
    func = Function(Token("MAIN", "main"), [X, Y], [Return(Leaf(X))])
    program = Program([func])
    assert repr(func).startswith("Function(main(x, y)")
    d = program.to_dict()
    assert d["kind"] == "program"
    assert [p["value"] for p in d["functions"][0]["params"]] == ["x", "y"]


def test_dump_is_json_serializable() -> None:
    program = Program(
        [
            Function(
                Token("IDENT", "f"),
                [X],
                [
                    If(
                        Binary(Leaf(X), PLUS, Leaf(ONE)),
                        [Return(FunctionCall(Token("LENGTH", "length"), [X]))],
                        [Return(ArrayLiteral([ONE]))],
                    )
                ],
            )
        ]
    )
    text = json.dumps(program.to_dict())
    assert json.loads(text) == program.to_dict()


def test_equality_is_structural() -> None:
    assert Binary(Leaf(X), PLUS, Leaf(Y)) == Binary(Leaf(X), PLUS, Leaf(Y))
    assert Binary(Leaf(X), PLUS, Leaf(Y)) != Binary(Leaf(Y), PLUS, Leaf(X))


def test_equality_respects_node_class() -> None:
    assert Leaf(X) != Grouping(Leaf(X))
    assert Leaf(X) != "Leaf(x)"


def test_nodes_are_unhashable() -> None:
    with pytest.raises(TypeError):
        hash(Leaf(X))


@given(st.from_regex(r"[a-z][a-z0-9_]{0,8}", fullmatch=True))  # type: ignore[misc]
def test_leaf_eq_same_token(name: str) -> None:
    assert Leaf(Token("IDENT", name)) == Leaf(Token("IDENT", name))


@given(
    st.from_regex(r"[a-z]{1,8}", fullmatch=True),
    st.from_regex(r"[a-z]{1,8}", fullmatch=True),
)  # type: ignore[misc]
def test_leaf_eq_different_token(a: str, b: str) -> None:
    assert Leaf(Token("IDENT", a)) != Leaf(Token("IDENT", b + "_"))
