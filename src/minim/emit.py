"""Minim emitter — converts AST back into Minim textual syntax.

Output is canonical and re-parseable: parsing the emitted text yields a
program equal to the one emitted.
"""

from __future__ import annotations

from .ast import (
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


def to_source(program: TProgram) -> str:
    """Render a `TProgram` back into Minim source text."""
    return _Emitter().emit_program(program)


class _Emitter:
    _INDENT: str = "    "

    # Expression precedence (higher binds tighter)
    _PREC_EQUALITY: int = 1
    _PREC_COMPARE: int = 2
    _PREC_TERM: int = 3
    _PREC_FACTOR: int = 4
    _PREC_UNARY: int = 5
    _PREC_PRIMARY: int = 6

    _BIN_PREC: dict[str, int] = {
        "==": _PREC_EQUALITY,
        "!=": _PREC_EQUALITY,
        ">": _PREC_COMPARE,
        "<": _PREC_COMPARE,
        "+": _PREC_TERM,
        "-": _PREC_TERM,
        "*": _PREC_FACTOR,
        "/": _PREC_FACTOR,
    }

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._indent_level: int = 0

    # ── Public ──────────────────────────────────────────────

    def emit_program(self, program: TProgram) -> str:
        self._lines = []
        self._indent_level = 0
        for stmt in program.stmts:
            self._emit_stmt(stmt)
        text = "\n".join(self._lines)
        if text == "":
            return ""
        return text + "\n"

    # ── Lines / Blocks ──────────────────────────────────────

    def _emit_line(self, line: str) -> None:
        self._lines.append(self._INDENT * self._indent_level + line)

    def _emit_stmt_block(self, stmts: tuple[TStmt, ...]) -> None:
        self._indent_level += 1
        for stmt in stmts:
            self._emit_stmt(stmt)
        self._indent_level -= 1

    # ── Stmts ───────────────────────────────────────────────

    def _emit_stmt(self, stmt: TStmt) -> None:
        if isinstance(stmt, TLetStmt):
            self._emit_line(f"let {stmt.name} = {self._render_expr(stmt.value, 0)};")
            return
        if isinstance(stmt, TAssignStmt):
            self._emit_line(f"{stmt.name} = {self._render_expr(stmt.value, 0)};")
            return
        if isinstance(stmt, TExprStmt):
            text = self._render_expr(stmt.expr, 0)
            # A statement led by an identifier must be exactly `name;` to parse.
            if not isinstance(stmt.expr, TVar) and self._leads_with_ident(stmt.expr):
                text = f"({text})"
            self._emit_line(text + ";")
            return
        if isinstance(stmt, TIfStmt):
            self._emit_line(f"if ({self._render_expr(stmt.cond, 0)}) {{")
            self._emit_stmt_block(stmt.then_body)
            if stmt.else_body:
                self._emit_line("} else {")
                self._emit_stmt_block(stmt.else_body)
            self._emit_line("}")
            return
        if isinstance(stmt, TWhileStmt):
            self._emit_line(f"while ({self._render_expr(stmt.cond, 0)}) {{")
            self._emit_stmt_block(stmt.body)
            self._emit_line("}")
            return
        if isinstance(stmt, TDoWhileStmt):
            self._emit_line("do {")
            self._emit_stmt_block(stmt.body)
            self._emit_line(f"}} while ({self._render_expr(stmt.cond, 0)});")
            return
        if isinstance(stmt, TForStmt):
            start = self._render_expr(stmt.start, 0)
            cond = self._render_expr(stmt.cond, 0)
            step = self._render_expr(stmt.step, 0)
            self._emit_line(f"for ({stmt.var} = {start}; {cond}; {stmt.var} = {step}) {{")
            self._emit_stmt_block(stmt.body)
            self._emit_line("}")
            return
        if isinstance(stmt, TFnDecl):
            self._emit_line(f"fn {stmt.name}({', '.join(stmt.params)}) {{")
            self._emit_stmt_block(stmt.body)
            self._emit_line("}")
            return
        if isinstance(stmt, TReturnStmt):
            self._emit_line(f"return {self._render_expr(stmt.value, 0)};")
            return
        raise TypeError("unhandled stmt type")

    # ── Exprs ───────────────────────────────────────────────

    def _is_negation(self, expr: TExpr) -> bool:
        """0 - primary, which is exactly what unary minus parses to."""
        return (
            isinstance(expr, TBinary)
            and expr.op == OP_SUB
            and isinstance(expr.left, TNumber)
            and expr.left.value == 0
            and self._expr_prec(expr.right) == self._PREC_PRIMARY
        )

    def _leads_with_ident(self, expr: TExpr) -> bool:
        if isinstance(expr, (TVar, TCall)):
            return True
        if isinstance(expr, TBinary) and not self._is_negation(expr):
            return self._leads_with_ident(expr.left)
        return False

    def _expr_prec(self, expr: TExpr) -> int:
        if isinstance(expr, TBinary):
            if expr.op not in self._BIN_PREC:
                raise ValueError(f"unknown binary operator: {expr.op}")
            if self._is_negation(expr):
                return self._PREC_UNARY
            return self._BIN_PREC[expr.op]
        return self._PREC_PRIMARY

    def _render_expr(self, expr: TExpr, parent_prec: int, side: str = "") -> str:
        prec = self._expr_prec(expr)
        text = self._render_expr_inner(expr)
        # All binary operators are left-associative.
        if prec < parent_prec or (prec == parent_prec and side == "right"):
            return f"({text})"
        return text

    def _render_expr_inner(self, expr: TExpr) -> str:
        if isinstance(expr, TNumber):
            return expr.raw if expr.raw else str(expr.value)
        if isinstance(expr, TBool):
            return "true" if expr.value else "false"
        if isinstance(expr, TVar):
            return expr.name
        if isinstance(expr, TCall):
            args: list[str] = []
            for a in expr.args:
                args.append(self._render_expr(a, 0))
            return f"{expr.name}({', '.join(args)})"
        if isinstance(expr, TBinary):
            if self._is_negation(expr):
                return "-" + self._render_expr(expr.right, self._PREC_PRIMARY)
            op_prec = self._BIN_PREC[expr.op]
            left = self._render_expr(expr.left, op_prec, "left")
            right = self._render_expr(expr.right, op_prec, "right")
            return f"{left} {expr.op} {right}"
        raise TypeError("unhandled expr type")
