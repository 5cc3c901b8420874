"""Minim runtime — tree-walking evaluation over a flat environment.

Every value is a signed 64-bit int; booleans are stored as 0/1. A call runs
its body in a fresh Interpreter whose variables and function table are
copies of the caller's, so nothing the callee does is visible afterwards
except the returned value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from .ast import (
    OP_ADD,
    OP_DIV,
    OP_EQ,
    OP_GT,
    OP_LT,
    OP_MUL,
    OP_NEQ,
    OP_SUB,
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
from .check import check
from .errors import MinimRuntimeError
from .tokens import wrap_i64

logger = logging.getLogger(__name__)

DEFAULT_MAX_CALL_DEPTH: int = 100


# ============================================================
# Control flow signals (internal)
# ============================================================


class _Signal(Exception):
    pass


@dataclass
class _Return(_Signal):
    value: int


# ============================================================
# Functions
# ============================================================


@dataclass(frozen=True)
class Function:
    """A declared function: parameter names and body."""

    name: str
    params: tuple[str, ...]
    body: tuple[TStmt, ...]


@dataclass
class RunResult:
    variables: dict[str, int]
    functions: list[str] = field(default_factory=list)
    returned: int | None = None


def _int_div_trunc(a: int, b: int) -> int:
    if b == 0:
        raise ZeroDivisionError
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q


# ============================================================
# Interpreter
# ============================================================


class Interpreter:
    def __init__(
        self,
        variables: dict[str, int] | None = None,
        functions: dict[str, Function] | None = None,
        *,
        depth: int = 0,
        max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
    ):
        self.variables: dict[str, int] = dict(variables) if variables is not None else {}
        self.functions: dict[str, Function] = dict(functions) if functions is not None else {}
        self.depth = depth
        self.max_call_depth = max_call_depth

    def execute(self, program: TProgram) -> int | None:
        """Run top-level statements. Returns the value of a top-level return, if any."""
        try:
            self.exec_block(program.stmts)
        except _Return as r:
            logger.debug("top-level return %d", r.value)
            return r.value
        return None

    # ---- Statements --------------------------------------------------------

    def exec_block(self, stmts: tuple[TStmt, ...]) -> None:
        for st in stmts:
            self.exec_stmt(st)

    def exec_stmt(self, st: TStmt) -> None:
        if isinstance(st, TLetStmt):
            self.variables[st.name] = self.eval_expr(st.value)
            return

        if isinstance(st, TAssignStmt):
            val = self.eval_expr(st.value)
            if st.name not in self.variables:
                raise MinimRuntimeError("undefined variable: " + st.name, st.pos)
            self.variables[st.name] = val
            return

        if isinstance(st, TExprStmt):
            self.eval_expr(st.expr)
            return

        if isinstance(st, TIfStmt):
            if self.eval_expr(st.cond) != 0:
                self.exec_block(st.then_body)
            else:
                self.exec_block(st.else_body)
            return

        if isinstance(st, TWhileStmt):
            while self.eval_expr(st.cond) != 0:
                self.exec_block(st.body)
            return

        if isinstance(st, TDoWhileStmt):
            while True:
                self.exec_block(st.body)
                if self.eval_expr(st.cond) == 0:
                    break
            return

        if isinstance(st, TForStmt):
            # The loop variable stays bound after the loop ends.
            self.variables[st.var] = self.eval_expr(st.start)
            while self.eval_expr(st.cond) != 0:
                self.exec_block(st.body)
                self.variables[st.var] = self.eval_expr(st.step)
            return

        if isinstance(st, TFnDecl):
            logger.debug("declare fn %s(%s)", st.name, ", ".join(st.params))
            self.functions[st.name] = Function(st.name, st.params, st.body)
            return

        if isinstance(st, TReturnStmt):
            raise _Return(self.eval_expr(st.value))

        raise MinimRuntimeError("unhandled statement type: " + type(st).__name__, st.pos)

    # ---- Expressions -------------------------------------------------------

    def eval_expr(self, expr: TExpr) -> int:
        if isinstance(expr, TNumber):
            return expr.value
        if isinstance(expr, TBool):
            return 1 if expr.value else 0
        if isinstance(expr, TVar):
            if expr.name not in self.variables:
                raise MinimRuntimeError("undefined variable: " + expr.name, expr.pos)
            return self.variables[expr.name]
        if isinstance(expr, TBinary):
            left = self.eval_expr(expr.left)
            right = self.eval_expr(expr.right)
            return self.eval_binary(expr, left, right)
        if isinstance(expr, TCall):
            return self.eval_call(expr)
        raise MinimRuntimeError("unhandled expression type: " + type(expr).__name__, expr.pos)

    def eval_binary(self, expr: TBinary, left: int, right: int) -> int:
        op = expr.op
        if op == OP_ADD:
            return wrap_i64(left + right)
        if op == OP_SUB:
            return wrap_i64(left - right)
        if op == OP_MUL:
            return wrap_i64(left * right)
        if op == OP_DIV:
            try:
                return wrap_i64(_int_div_trunc(left, right))
            except ZeroDivisionError:
                raise MinimRuntimeError("division by zero", expr.pos) from None
        if op == OP_GT:
            return 1 if left > right else 0
        if op == OP_LT:
            return 1 if left < right else 0
        if op == OP_EQ:
            return 1 if left == right else 0
        if op == OP_NEQ:
            return 1 if left != right else 0
        raise MinimRuntimeError("unknown binary operator: " + op, expr.pos)

    def eval_call(self, expr: TCall) -> int:
        if expr.name not in self.functions:
            raise MinimRuntimeError("undefined function: " + expr.name, expr.pos)
        fn = self.functions[expr.name]
        if len(expr.args) != len(fn.params):
            raise MinimRuntimeError(
                "incorrect argument count in call to "
                + fn.name
                + ": expected "
                + str(len(fn.params))
                + ", got "
                + str(len(expr.args)),
                expr.pos,
            )
        if self.depth >= self.max_call_depth:
            raise MinimRuntimeError(
                "maximum call depth exceeded in call to " + fn.name, expr.pos
            )
        # Arguments see the caller's environment, before any parameter binding.
        args = [self.eval_expr(a) for a in expr.args]
        env = dict(self.variables)
        for param, value in zip(fn.params, args):
            env[param] = value
        callee = Interpreter(
            env,
            self.functions,
            depth=self.depth + 1,
            max_call_depth=self.max_call_depth,
        )
        logger.debug("call %s(%s) depth=%d", fn.name, ", ".join(str(a) for a in args), callee.depth)
        try:
            callee.exec_block(fn.body)
        except _Return as r:
            logger.debug("return %s -> %d", fn.name, r.value)
            return r.value
        logger.debug("return %s -> 0 (no return)", fn.name)
        return 0


# ============================================================
# Public API
# ============================================================


def run(
    program: TProgram,
    *,
    typecheck: bool = False,
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
) -> RunResult:
    """Optionally typecheck, then execute a parsed Minim program."""
    if typecheck:
        check(program)
        logger.debug("typecheck passed")
    interp = Interpreter(max_call_depth=max_call_depth)
    try:
        returned = interp.execute(program)
    except RecursionError:
        raise MinimRuntimeError("maximum recursion depth exceeded") from None
    return RunResult(
        variables=dict(interp.variables),
        functions=list(interp.functions),
        returned=returned,
    )
