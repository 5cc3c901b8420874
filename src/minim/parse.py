"""Minim parser — recursive descent, one method per grammar production."""

from __future__ import annotations

from .ast import (
    OP_SUB,
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
from .errors import MinimSyntaxError
from .tokens import TK_EOF, TK_IDENT, TK_NUMBER, TK_OP, Token


class ParseError(MinimSyntaxError):
    """Parse error with location info."""

    def __init__(self, msg: str, line: int, col: int):
        super().__init__(msg, Pos(line, col))
        self.line: int = line
        self.col: int = col


class Parser:
    """Recursive descent parser for Minim. Expects a TK_EOF-terminated list."""

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.pos: int = 0

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.type != TK_EOF:
            self.pos += 1
        return tok

    def peek(self) -> Token:
        """Token after the current one; EOF once the list is exhausted."""
        if self.pos + 1 < len(self.tokens):
            return self.tokens[self.pos + 1]
        return self.tokens[-1]

    def at(self, value: str) -> bool:
        tok = self.current()
        return tok.type != TK_EOF and tok.value == value

    def at_type(self, type_: str) -> bool:
        return self.current().type == type_

    def expect(self, value: str) -> Token:
        tok = self.current()
        if tok.type == TK_EOF or tok.value != value:
            raise self.error("expected '" + value + "', got " + tok.describe())
        return self.advance()

    def expect_ident(self, what: str) -> Token:
        tok = self.current()
        if tok.type != TK_IDENT:
            raise self.error("expected " + what + ", got " + tok.describe())
        return self.advance()

    def error(self, msg: str) -> ParseError:
        tok = self.current()
        return ParseError(msg, tok.line, tok.col)

    def _pos(self) -> Pos:
        tok = self.current()
        return Pos(tok.line, tok.col)

    # ── Top Level ────────────────────────────────────────────

    def parse_program(self) -> TProgram:
        stmts: list[TStmt] = []
        while not self.at_type(TK_EOF):
            stmts.append(self.parse_stmt())
        return TProgram(tuple(stmts))

    def parse_block(self) -> tuple[TStmt, ...]:
        self.expect("{")
        stmts: list[TStmt] = []
        while not self.at("}"):
            stmts.append(self.parse_stmt())
        self.expect("}")
        return tuple(stmts)

    # ── Statements ───────────────────────────────────────────

    def parse_stmt(self) -> TStmt:
        tok = self.current()
        if tok.type == "let":
            return self.parse_let_stmt()
        if tok.type == "if":
            return self.parse_if_stmt()
        if tok.type == "while":
            return self.parse_while_stmt()
        if tok.type == "do":
            return self.parse_do_while_stmt()
        if tok.type == "for":
            return self.parse_for_stmt()
        if tok.type == "fn":
            return self.parse_fn_decl()
        if tok.type == "return":
            return self.parse_return_stmt()
        if tok.type == TK_IDENT:
            return self.parse_ident_stmt()
        return self.parse_expr_stmt()

    def parse_let_stmt(self) -> TLetStmt:
        pos = self._pos()
        self.expect("let")
        name_tok = self.expect_ident("identifier after 'let'")
        self.expect("=")
        value = self.parse_expr()
        self.expect(";")
        return TLetStmt(pos, name_tok.value, value)

    def parse_ident_stmt(self) -> TStmt:
        """IDENT '=' Expr ';' | IDENT ';'

        Only the token after the identifier is consulted. Anything other than
        '=' makes the identifier a complete expression statement, so
        `f(1);` or `x + 1;` fail here with an expected ';'.
        """
        pos = self._pos()
        name_tok = self.advance()
        if self.at("="):
            self.advance()
            value = self.parse_expr()
            self.expect(";")
            return TAssignStmt(pos, name_tok.value, value)
        self.expect(";")
        return TExprStmt(pos, TVar(pos, name_tok.value))

    def parse_expr_stmt(self) -> TExprStmt:
        pos = self._pos()
        expr = self.parse_expr()
        self.expect(";")
        return TExprStmt(pos, expr)

    def parse_if_stmt(self) -> TIfStmt:
        pos = self._pos()
        self.expect("if")
        self.expect("(")
        cond = self.parse_expr()
        self.expect(")")
        then_body = self.parse_block()
        else_body: tuple[TStmt, ...] = ()
        if self.at("else"):
            self.advance()
            else_body = self.parse_block()
        return TIfStmt(pos, cond, then_body, else_body)

    def parse_while_stmt(self) -> TWhileStmt:
        pos = self._pos()
        self.expect("while")
        self.expect("(")
        cond = self.parse_expr()
        self.expect(")")
        body = self.parse_block()
        return TWhileStmt(pos, cond, body)

    def parse_do_while_stmt(self) -> TDoWhileStmt:
        pos = self._pos()
        self.expect("do")
        body = self.parse_block()
        self.expect("while")
        self.expect("(")
        cond = self.parse_expr()
        self.expect(")")
        self.expect(";")
        return TDoWhileStmt(pos, body, cond)

    def parse_for_stmt(self) -> TForStmt:
        pos = self._pos()
        self.expect("for")
        self.expect("(")
        var_tok = self.expect_ident("identifier in for loop")
        self.expect("=")
        start = self.parse_expr()
        self.expect(";")
        cond = self.parse_expr()
        self.expect(";")
        step = self.parse_for_step(var_tok.value)
        self.expect(")")
        body = self.parse_block()
        return TForStmt(pos, var_tok.value, start, cond, step, body)

    def parse_for_step(self, var: str) -> TExpr:
        """Step = ( IDENT '=' )? Expr

        The step value is always rebound to the loop variable, so the optional
        `IDENT =` prefix must name that variable.
        """
        if self.at_type(TK_IDENT) and self.peek().value == "=":
            name_tok = self.current()
            if name_tok.value != var:
                raise self.error(
                    "step of 'for' assigns "
                    + name_tok.value
                    + ", expected loop variable "
                    + var
                )
            self.advance()
            self.advance()
        return self.parse_expr()

    def parse_fn_decl(self) -> TFnDecl:
        pos = self._pos()
        self.expect("fn")
        name_tok = self.expect_ident("function name")
        self.expect("(")
        params = self.parse_param_list()
        self.expect(")")
        body = self.parse_block()
        return TFnDecl(pos, name_tok.value, params, body)

    def parse_param_list(self) -> tuple[str, ...]:
        params: list[str] = []
        if self.at(")"):
            return ()
        params.append(self.expect_ident("parameter name").value)
        while self.at(","):
            self.advance()
            params.append(self.expect_ident("parameter name").value)
        return tuple(params)

    def parse_return_stmt(self) -> TReturnStmt:
        pos = self._pos()
        self.expect("return")
        value = self.parse_expr()
        self.expect(";")
        return TReturnStmt(pos, value)

    # ── Expressions ──────────────────────────────────────────

    def parse_expr(self) -> TExpr:
        return self.parse_equality()

    def parse_equality(self) -> TExpr:
        """Equality = Comparison ( ( '==' | '!=' ) Comparison )*"""
        left = self.parse_comparison()
        while self.at("==") or self.at("!="):
            op = self.advance().value
            right = self.parse_comparison()
            left = TBinary(left.pos, left, op, right)
        return left

    def parse_comparison(self) -> TExpr:
        """Comparison = Term ( ( '>' | '<' ) Term )*"""
        left = self.parse_term()
        while self.at(">") or self.at("<"):
            op = self.advance().value
            right = self.parse_term()
            left = TBinary(left.pos, left, op, right)
        return left

    def parse_term(self) -> TExpr:
        """Term = Factor ( ( '+' | '-' ) Factor )*"""
        left = self.parse_factor()
        while self.at("+") or self.at("-"):
            op = self.advance().value
            right = self.parse_factor()
            left = TBinary(left.pos, left, op, right)
        return left

    def parse_factor(self) -> TExpr:
        """Factor = Unary ( ( '*' | '/' ) Unary )*"""
        left = self.parse_unary()
        while self.at("*") or self.at("/"):
            op = self.advance().value
            right = self.parse_unary()
            left = TBinary(left.pos, left, op, right)
        return left

    def parse_unary(self) -> TExpr:
        """Unary = '-'? Primary, desugared to 0 - Primary."""
        tok = self.current()
        if tok.type == TK_OP and tok.value == "-":
            pos = self._pos()
            self.advance()
            operand = self.parse_primary()
            return TBinary(pos, TNumber(pos, 0, "0"), OP_SUB, operand)
        return self.parse_primary()

    def parse_primary(self) -> TExpr:
        """Parse a primary expression."""
        tok = self.current()
        pos = self._pos()

        if tok.type == TK_NUMBER:
            self.advance()
            return TNumber(pos, tok.number, tok.value)
        if tok.type == "true":
            self.advance()
            return TBool(pos, True)
        if tok.type == "false":
            self.advance()
            return TBool(pos, False)

        if tok.type == TK_IDENT:
            self.advance()
            if self.at("("):
                self.advance()
                args = self.parse_arg_list()
                self.expect(")")
                return TCall(pos, tok.value, args)
            return TVar(pos, tok.value)

        if tok.type == TK_OP and tok.value == "(":
            self.advance()
            inner = self.parse_expr()
            self.expect(")")
            return inner

        raise self.error("expected expression, got " + tok.describe())

    def parse_arg_list(self) -> tuple[TExpr, ...]:
        """ArgList = ( Expr ( ',' Expr )* )?"""
        args: list[TExpr] = []
        if self.at(")"):
            return ()
        args.append(self.parse_expr())
        while self.at(","):
            self.advance()
            args.append(self.parse_expr())
        return tuple(args)


def parse_tokens(tokens: list[Token]) -> TProgram:
    """Parse an already-tokenized program."""
    parser = Parser(tokens)
    try:
        return parser.parse_program()
    except RecursionError:
        raise parser.error("nesting too deep") from None
