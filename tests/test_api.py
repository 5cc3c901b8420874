"""Tests for the package-level API, error rendering and logging."""

import logging

import pytest

from minim import (
    CheckError,
    MinimError,
    MinimRuntimeError,
    MinimSyntaxError,
    MinimTypeError,
    ParseError,
    check,
    execute,
    parse,
)
from minim.ast import TLetStmt, TNumber
from minim.runtime import DEFAULT_MAX_CALL_DEPTH

DEEP = "fn down(n) { if (n == 0) { return 0; } return 1 + down(n - 1); }\n"


def test_parse_returns_program():
    program = parse("let x = 1;")
    assert program.stmts == (TLetStmt(None, "x", TNumber(None, 1)),)


def test_positions_do_not_affect_equality():
    assert parse("let x = 1;") == parse("\n\n   let   x=1 ;")


def test_parse_error_position():
    with pytest.raises(ParseError) as exc:
        parse("let x = 1;\nlet = 2;")
    err = exc.value
    assert isinstance(err, MinimSyntaxError)
    assert (err.line, err.col) == (2, 5)
    assert err.msg == "expected identifier after 'let', got '='"
    assert str(err) == "expected identifier after 'let', got '=' at line 2 col 5"


def test_check_error_is_type_error():
    with pytest.raises(CheckError) as exc:
        check("if (1) { }")
    assert isinstance(exc.value, MinimTypeError)
    assert exc.value.render().startswith("Type error: condition in 'if' must be bool")


def test_check_accepts_valid_program():
    assert check("let x = 1; while (x < 3) { x = x + 1; }") is None


def test_runtime_ignores_types_by_default():
    result = execute("let b = 3; if (b) { b = 0; }")
    assert result.variables == {"b": 0}


def test_typecheck_flag_rejects_before_running():
    with pytest.raises(MinimTypeError):
        execute("let b = 3; if (b) { b = 0; }", typecheck=True)


def test_runtime_error_render():
    with pytest.raises(MinimRuntimeError) as exc:
        execute("let a = 1;\nlet b = a / 0;")
    assert exc.value.render() == "Runtime error: division by zero at line 2 col 9"


def test_all_errors_share_base():
    for cls in (MinimSyntaxError, MinimTypeError, MinimRuntimeError):
        assert issubclass(cls, MinimError)


def test_default_call_depth_allows_moderate_recursion():
    result = execute(DEEP + "let r = down(" + str(DEFAULT_MAX_CALL_DEPTH - 1) + ");")
    assert result.variables["r"] == DEFAULT_MAX_CALL_DEPTH - 1


def test_default_call_depth_is_enforced():
    with pytest.raises(MinimRuntimeError, match="maximum call depth exceeded in call to down"):
        execute(DEEP + "let r = down(" + str(DEFAULT_MAX_CALL_DEPTH) + ");")


def test_custom_call_depth():
    with pytest.raises(MinimRuntimeError):
        execute(DEEP + "let r = down(5);", max_call_depth=5)
    assert execute(DEEP + "let r = down(5);", max_call_depth=6).variables["r"] == 5


def test_run_result_fields():
    result = execute("fn f() { return 1; }\nlet a = f();\nreturn a + 1;")
    assert result.variables == {"a": 1}
    assert result.functions == ["f"]
    assert result.returned == 2


def test_calls_are_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="minim"):
        execute("fn f(a) { return a; }\nlet r = f(7);")
    messages = [r.getMessage() for r in caplog.records]
    assert "declare fn f(a)" in messages
    assert "call f(7) depth=1" in messages
    assert "return f -> 7" in messages


def test_library_is_silent_by_default(capsys):
    execute("fn f(a) { return a; }\nlet r = f(7);")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_deep_nesting_is_a_syntax_error():
    source = "let x = " + "(" * 300 + "1" + ")" * 300 + ";"
    with pytest.raises(ParseError) as exc:
        parse(source)
    assert exc.value.msg == "nesting too deep"
    assert exc.value.render().startswith("Syntax error: nesting too deep")


def test_deeply_nested_blocks_are_a_syntax_error():
    source = "if (true) { " * 600 + "}" * 600
    with pytest.raises(MinimSyntaxError, match="nesting too deep"):
        parse(source)


def test_host_recursion_limit_becomes_runtime_error():
    source = "fn forever(n) { return forever(n + 1); }\nlet r = forever(0);"
    with pytest.raises(MinimRuntimeError) as exc:
        execute(source, max_call_depth=100000)
    assert exc.value.msg == "maximum recursion depth exceeded"


def test_for_step_assigns_loop_variable():
    result = execute("let s = 0;\nfor (i = 0; i < 5; i = i + 1) { s = s + i; }")
    assert result.variables == {"s": 10, "i": 5}
