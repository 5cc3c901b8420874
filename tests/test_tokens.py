"""Tokenizer tests: token kinds, spellings, positions and lexical errors."""

import pytest

from minim import Token, TokenizeError, tokenize
from minim.tokens import INT64_MIN, TK_EOF, TK_IDENT, TK_NUMBER, TK_OP, wrap_i64


def kinds(source: str) -> list[tuple[str, str]]:
    return [(t.type, t.value) for t in tokenize(source)]


def test_empty_source_is_just_eof():
    toks = tokenize("")
    assert len(toks) == 1
    assert toks[0].type == TK_EOF
    assert toks[0].describe() == "end of input"


def test_let_statement():
    assert kinds("let x = 5;") == [
        ("let", "let"),
        (TK_IDENT, "x"),
        (TK_OP, "="),
        (TK_NUMBER, "5"),
        (TK_OP, ";"),
        (TK_EOF, ""),
    ]


@pytest.mark.parametrize(
    "word", ["let", "fn", "if", "else", "while", "do", "for", "return", "true", "false"]
)
def test_keywords_use_their_own_type(word):
    tok = tokenize(word)[0]
    assert tok.type == word


@pytest.mark.parametrize("word", ["lets", "iffy", "_tmp", "x1", "While", "fn_2"])
def test_keyword_prefixes_are_identifiers(word):
    tok = tokenize(word)[0]
    assert tok.type == TK_IDENT
    assert tok.value == word


def test_equals_forms():
    assert kinds("= == != =") == [
        (TK_OP, "="),
        (TK_OP, "=="),
        (TK_OP, "!="),
        (TK_OP, "="),
        (TK_EOF, ""),
    ]


def test_triple_equals_is_eq_then_assign():
    assert [t.value for t in tokenize("===")] == ["==", "=", ""]


def test_all_single_char_operators():
    src = "+ - * / > < ( ) { } ; , :"
    toks = tokenize(src)
    assert [t.value for t in toks[:-1]] == src.split()
    assert all(t.type == TK_OP for t in toks[:-1])


def test_no_whitespace_needed():
    assert [t.value for t in tokenize("x=a+b*2;")] == ["x", "=", "a", "+", "b", "*", "2", ";", ""]


def test_number_values():
    toks = tokenize("0 42 007")
    assert [t.number for t in toks[:-1]] == [0, 42, 7]
    assert toks[2].value == "007"


def test_number_literal_wraps():
    tok = tokenize("9223372036854775808")[0]
    assert tok.number == INT64_MIN


def test_digits_then_letters_split():
    assert kinds("12ab") == [(TK_NUMBER, "12"), (TK_IDENT, "ab"), (TK_EOF, "")]


def test_positions():
    toks = tokenize("let x\n  = 1;")
    assert [(t.line, t.col) for t in toks] == [(1, 1), (1, 5), (2, 3), (2, 5), (2, 6), (2, 7)]


def test_lone_bang_is_error():
    with pytest.raises(TokenizeError) as exc:
        tokenize("let x = !y;")
    assert "unexpected character after '!'" in str(exc.value)
    assert exc.value.line == 1
    assert exc.value.col == 9


def test_unknown_character_is_error():
    with pytest.raises(TokenizeError) as exc:
        tokenize("let x = 1;\nlet y = $;")
    assert "unexpected character: '$'" in str(exc.value)
    assert (exc.value.line, exc.value.col) == (2, 9)
    assert exc.value.render().startswith("Syntax error: ")


def test_tokenize_is_deterministic():
    src = "fn f(a) { return a * 2; }"
    assert tokenize(src) == tokenize(src)


def test_token_repr():
    assert repr(Token(TK_IDENT, "x", 3, 4)) == "Token(IDENT, 'x', 3, 4)"


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, 0),
        (-1, -1),
        (2**63 - 1, 2**63 - 1),
        (2**63, -(2**63)),
        (2**64 + 5, 5),
        (-(2**63) - 1, 2**63 - 1),
    ],
)
def test_wrap_i64(value, expected):
    assert wrap_i64(value) == expected
