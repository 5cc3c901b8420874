"""Minim typechecker — a single forward pass over a flat type environment.

The checker is advisory: the runtime never consults it. It mirrors the
runtime's flat namespace, so there are no nested scopes and function
parameters land in the same map as every other variable. Functions are
assumed to take and return int.
"""

from __future__ import annotations

from dataclasses import dataclass

from .ast import (
    ARITH_OPS,
    COMPARE_OPS,
    Pos,
    TAssignStmt,
    TBinary,
    TBool,
    TCall,
    TDoWhileStmt,
    TExpr,
    TExprStmt,
    TFnDecl,
    TForStmt,
    TIfStmt,
    TLetStmt,
    TNumber,
    TProgram,
    TReturnStmt,
    TStmt,
    TVar,
    TWhileStmt,
)
from .errors import MinimTypeError


# ============================================================
# RESOLVED TYPE REPRESENTATION
# ============================================================

TY_INT: str = "int"
TY_BOOL: str = "bool"
TY_VOID: str = "void"


@dataclass(frozen=True)
class Type:
    kind: str


@dataclass(frozen=True)
class FnT:
    params: tuple[Type, ...]
    ret: Type


INT_T: Type = Type(kind=TY_INT)
BOOL_T: Type = Type(kind=TY_BOOL)
VOID_T: Type = Type(kind=TY_VOID)


def type_name(t: Type) -> str:
    return t.kind


# ============================================================
# CHECK ERROR
# ============================================================


class CheckError(MinimTypeError):
    def __init__(self, msg: str, line: int, col: int):
        super().__init__(msg, Pos(line, col))
        self.line: int = line
        self.col: int = col


# ============================================================
# CHECKER
# ============================================================


class Checker:
    def __init__(self) -> None:
        self.vars: dict[str, Type] = {}
        self.functions: dict[str, FnT] = {}

    def error(self, msg: str, pos: Pos) -> CheckError:
        return CheckError(msg, pos.line, pos.col)

    def expect_type(self, actual: Type, expected: Type, what: str, pos: Pos) -> None:
        if actual != expected:
            raise self.error(
                what + " must be " + type_name(expected) + ", got " + type_name(actual),
                pos,
            )

    # ── Statement checking ────────────────────────────────────

    def check_program(self, program: TProgram) -> None:
        self.check_stmts(program.stmts)

    def check_stmts(self, stmts: tuple[TStmt, ...]) -> None:
        for s in stmts:
            self.check_stmt(s)

    def check_stmt(self, stmt: TStmt) -> None:
        if isinstance(stmt, TLetStmt):
            self.vars[stmt.name] = self.check_expr(stmt.value)
        elif isinstance(stmt, TAssignStmt):
            self.check_assign_stmt(stmt)
        elif isinstance(stmt, TExprStmt):
            self.check_expr(stmt.expr)
        elif isinstance(stmt, TIfStmt):
            cond = self.check_expr(stmt.cond)
            self.expect_type(cond, BOOL_T, "condition in 'if'", stmt.cond.pos)
            self.check_stmts(stmt.then_body)
            self.check_stmts(stmt.else_body)
        elif isinstance(stmt, TWhileStmt):
            cond = self.check_expr(stmt.cond)
            self.expect_type(cond, BOOL_T, "condition in 'while'", stmt.cond.pos)
            self.check_stmts(stmt.body)
        elif isinstance(stmt, TDoWhileStmt):
            # Body runs before the first test, so its bindings are visible to cond.
            self.check_stmts(stmt.body)
            cond = self.check_expr(stmt.cond)
            self.expect_type(cond, BOOL_T, "condition in 'do-while'", stmt.cond.pos)
        elif isinstance(stmt, TForStmt):
            self.check_for_stmt(stmt)
        elif isinstance(stmt, TFnDecl):
            self.check_fn_decl(stmt)
        elif isinstance(stmt, TReturnStmt):
            # Never compared against the declared return type.
            self.check_expr(stmt.value)
        else:
            raise self.error("unhandled statement type: " + type(stmt).__name__, stmt.pos)

    def check_assign_stmt(self, stmt: TAssignStmt) -> None:
        val_type = self.check_expr(stmt.value)
        if stmt.name not in self.vars:
            raise self.error("undeclared variable: " + stmt.name, stmt.pos)
        target_type = self.vars[stmt.name]
        if val_type != target_type:
            raise self.error(
                "type mismatch in assignment to "
                + stmt.name
                + ": expected "
                + type_name(target_type)
                + ", got "
                + type_name(val_type),
                stmt.pos,
            )

    def check_for_stmt(self, stmt: TForStmt) -> None:
        start = self.check_expr(stmt.start)
        self.expect_type(start, INT_T, "start of 'for'", stmt.start.pos)
        self.vars[stmt.var] = INT_T
        cond = self.check_expr(stmt.cond)
        self.expect_type(cond, BOOL_T, "condition in 'for'", stmt.cond.pos)
        step = self.check_expr(stmt.step)
        self.expect_type(step, INT_T, "step of 'for'", stmt.step.pos)
        self.check_stmts(stmt.body)

    def check_fn_decl(self, decl: TFnDecl) -> None:
        # Registered before the body so recursive calls resolve.
        params = tuple(INT_T for _ in decl.params)
        self.functions[decl.name] = FnT(params, INT_T)
        for p in decl.params:
            self.vars[p] = INT_T
        self.check_stmts(decl.body)

    # ── Expression checking ───────────────────────────────────

    def check_expr(self, expr: TExpr) -> Type:
        """Type-check an expression and return its type."""
        if isinstance(expr, TNumber):
            return INT_T
        if isinstance(expr, TBool):
            return BOOL_T
        if isinstance(expr, TVar):
            if expr.name not in self.vars:
                raise self.error("undeclared variable: " + expr.name, expr.pos)
            return self.vars[expr.name]
        if isinstance(expr, TBinary):
            return self.check_binary(expr)
        if isinstance(expr, TCall):
            return self.check_call(expr)
        raise self.error("unhandled expression type: " + type(expr).__name__, expr.pos)

    def check_binary(self, expr: TBinary) -> Type:
        left = self.check_expr(expr.left)
        right = self.check_expr(expr.right)
        if expr.op in ARITH_OPS:
            if left != INT_T or right != INT_T:
                raise self.error(
                    "operands of "
                    + expr.op
                    + " must be int, got "
                    + type_name(left)
                    + " and "
                    + type_name(right),
                    expr.pos,
                )
            return INT_T
        if expr.op in COMPARE_OPS:
            if left != right:
                raise self.error(
                    "cannot compare " + type_name(left) + " and " + type_name(right),
                    expr.pos,
                )
            return BOOL_T
        raise self.error("unknown binary operator: " + expr.op, expr.pos)

    def check_call(self, expr: TCall) -> Type:
        if expr.name not in self.functions:
            raise self.error("undefined function: " + expr.name, expr.pos)
        fn = self.functions[expr.name]
        if len(expr.args) != len(fn.params):
            raise self.error(
                "incorrect number of arguments in call to "
                + expr.name
                + ": expected "
                + str(len(fn.params))
                + ", got "
                + str(len(expr.args)),
                expr.pos,
            )
        for i, arg in enumerate(expr.args):
            arg_type = self.check_expr(arg)
            if arg_type != fn.params[i]:
                raise self.error(
                    "argument "
                    + str(i + 1)
                    + " of "
                    + expr.name
                    + " must be "
                    + type_name(fn.params[i])
                    + ", got "
                    + type_name(arg_type),
                    arg.pos,
                )
        return fn.ret


# ============================================================
# PUBLIC API
# ============================================================


def check(program: TProgram) -> None:
    """Type-check a parsed program. Raises CheckError on the first violation."""
    Checker().check_program(program)
