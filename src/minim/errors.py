"""Minim diagnostics — one error family per pipeline phase."""

from __future__ import annotations

from .ast import Pos


class MinimError(Exception):
    """Base error for lexing, parsing, checking and evaluation."""

    kind: str = "Minim"

    def __init__(self, msg: str, pos: Pos | None = None):
        if pos is None:
            super().__init__(msg)
        else:
            super().__init__(msg + " at line " + str(pos.line) + " col " + str(pos.col))
        self.msg: str = msg
        self.pos: Pos | None = pos

    def render(self) -> str:
        """User-facing form: '<Kind> error: <message>'."""
        return self.kind + " error: " + str(self)


class MinimSyntaxError(MinimError):
    """Lexing or parsing failure."""

    kind = "Syntax"


class MinimTypeError(MinimError):
    """Static type error."""

    kind = "Type"


class MinimRuntimeError(MinimError):
    """Evaluation fault (undefined name, arity, division by zero, call depth)."""

    kind = "Runtime"
