"""Minim lexer, parser, typechecker and interpreter — public API."""

from __future__ import annotations

import logging

from .ast import TProgram
from .check import CheckError as CheckError, check as check_program
from .emit import to_source
from .errors import (
    MinimError as MinimError,
    MinimRuntimeError as MinimRuntimeError,
    MinimSyntaxError as MinimSyntaxError,
    MinimTypeError as MinimTypeError,
)
from .parse import ParseError as ParseError, parse_tokens
from .runtime import DEFAULT_MAX_CALL_DEPTH, RunResult as RunResult, run as run
from .tokens import Token as Token, TokenizeError as TokenizeError, tokenize as tokenize

logging.getLogger(__name__).addHandler(logging.NullHandler())


def parse(source: str) -> TProgram:
    """Parse Minim source code into a TProgram AST."""
    return parse_tokens(tokenize(source))


def check(source: str) -> None:
    """Parse and type-check Minim source. Raises CheckError on the first error."""
    check_program(parse(source))


def emit(program: TProgram) -> str:
    """Emit a `TProgram` AST to Minim textual syntax."""
    return to_source(program)


def execute(
    source: str, *, typecheck: bool = False, max_call_depth: int = DEFAULT_MAX_CALL_DEPTH
) -> RunResult:
    """Parse and run Minim source."""
    return run(parse(source), typecheck=typecheck, max_call_depth=max_call_depth)
