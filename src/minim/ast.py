"""Minim AST — parse-time node definitions.

Nodes are frozen and blocks are tuples, so a program is never mutated after
parsing. Positions are carried for diagnostics only and take no part in
equality or repr.
"""

from __future__ import annotations

from dataclasses import dataclass, field


# ============================================================
# POSITION
# ============================================================


@dataclass(frozen=True)
class Pos:
    """Source position, 1-indexed."""

    line: int
    col: int


# ============================================================
# OPERATORS
# ============================================================

OP_ADD = "+"
OP_SUB = "-"
OP_MUL = "*"
OP_DIV = "/"
OP_GT = ">"
OP_LT = "<"
OP_EQ = "=="
OP_NEQ = "!="

ARITH_OPS: set[str] = {OP_ADD, OP_SUB, OP_MUL, OP_DIV}
COMPARE_OPS: set[str] = {OP_GT, OP_LT, OP_EQ, OP_NEQ}


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass(frozen=True)
class TExpr:
    """Base for all expressions."""

    pos: Pos = field(compare=False, repr=False)


@dataclass(frozen=True)
class TNumber(TExpr):
    """Integer literal; raw keeps the source digits."""

    value: int
    raw: str = field(compare=False, repr=False, default="")


@dataclass(frozen=True)
class TBool(TExpr):
    """true / false."""

    value: bool


@dataclass(frozen=True)
class TVar(TExpr):
    """Variable reference."""

    name: str


@dataclass(frozen=True)
class TBinary(TExpr):
    """left op right. Unary minus is TBinary(TNumber(0), '-', operand)."""

    left: TExpr
    op: str
    right: TExpr


@dataclass(frozen=True)
class TCall(TExpr):
    """name(args). Functions are called by name only."""

    name: str
    args: tuple[TExpr, ...]


# ============================================================
# STATEMENTS
# ============================================================


@dataclass(frozen=True)
class TStmt:
    """Base for all statements."""

    pos: Pos = field(compare=False, repr=False)


@dataclass(frozen=True)
class TLetStmt(TStmt):
    """let name = expr;"""

    name: str
    value: TExpr


@dataclass(frozen=True)
class TAssignStmt(TStmt):
    """name = expr;"""

    name: str
    value: TExpr


@dataclass(frozen=True)
class TExprStmt(TStmt):
    expr: TExpr


@dataclass(frozen=True)
class TIfStmt(TStmt):
    """if (cond) { ... } else { ... }; else_body is empty when absent."""

    cond: TExpr
    then_body: tuple[TStmt, ...]
    else_body: tuple[TStmt, ...]


@dataclass(frozen=True)
class TWhileStmt(TStmt):
    cond: TExpr
    body: tuple[TStmt, ...]


@dataclass(frozen=True)
class TDoWhileStmt(TStmt):
    """do { body } while (cond);"""

    body: tuple[TStmt, ...]
    cond: TExpr


@dataclass(frozen=True)
class TForStmt(TStmt):
    """for (var = start; cond; step) { body }

    var is rebound to the value of step after each pass.
    """

    var: str
    start: TExpr
    cond: TExpr
    step: TExpr
    body: tuple[TStmt, ...]


@dataclass(frozen=True)
class TFnDecl(TStmt):
    """fn name(params) { body }."""

    name: str
    params: tuple[str, ...]
    body: tuple[TStmt, ...]


@dataclass(frozen=True)
class TReturnStmt(TStmt):
    value: TExpr


@dataclass(frozen=True)
class TProgram:
    """Top-level program: statements in source order."""

    stmts: tuple[TStmt, ...]
