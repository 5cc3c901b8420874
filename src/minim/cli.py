"""Minim CLI — tokenize, parse, check and run .mn files."""

from __future__ import annotations

import logging
import pprint
import sys

from . import emit, parse, tokenize
from .check import check as check_program
from .errors import MinimError
from .runtime import DEFAULT_MAX_CALL_DEPTH, run


USAGE: str = """\
minim [OPTIONS] FILE

Run a Minim program. FILE may be '-' to read from stdin.

Options:
  --tokens           Print the token stream and stop
  --ast              Print the syntax tree and stop
  --emit             Print the program in canonical form and stop
  --check            Typecheck only
  --typecheck        Typecheck before running
  --max-depth N      Maximum function call depth (default 100)
  --verbose          Log evaluation steps to stderr
  --help             Show this help message
"""


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    mode = "run"
    typecheck = False
    verbose = False
    max_depth = DEFAULT_MAX_CALL_DEPTH
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg in ("--tokens", "--ast", "--emit", "--check"):
            mode = arg[2:]
            i += 1
        elif arg == "--typecheck":
            typecheck = True
            i += 1
        elif arg == "--verbose":
            verbose = True
            i += 1
        elif arg == "--max-depth":
            value = args[i + 1] if i + 1 < len(args) else ""
            if not (value.isascii() and value.isdigit()):
                print("minim: --max-depth requires a non-negative integer", file=sys.stderr)
                return 2
            max_depth = int(value)
            i += 2
        elif arg.startswith("-") and arg != "-":
            print("minim: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif filepath == "":
            filepath = arg
            i += 1
        else:
            print("minim: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2
    if filepath == "":
        print("minim: missing file argument", file=sys.stderr)
        return 2

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s: %(message)s",
            stream=sys.stderr,
        )

    if filepath == "-":
        source = sys.stdin.read()
    else:
        try:
            with open(filepath, "rb") as f:
                raw = f.read()
        except FileNotFoundError:
            print("minim: " + filepath + ": No such file or directory", file=sys.stderr)
            return 1
        except OSError as e:
            print("minim: " + filepath + ": " + str(e), file=sys.stderr)
            return 1
        try:
            source = raw.decode("utf-8")
        except ValueError:
            print("minim: " + filepath + ": invalid utf-8", file=sys.stderr)
            return 1

    try:
        if mode == "tokens":
            for tok in tokenize(source):
                print(repr(tok))
            return 0
        program = parse(source)
        if mode == "ast":
            for stmt in program.stmts:
                print(pprint.pformat(stmt))
            return 0
        if mode == "emit":
            sys.stdout.write(emit(program))
            return 0
        if mode == "check":
            check_program(program)
            print("ok")
            return 0
        result = run(program, typecheck=typecheck, max_call_depth=max_depth)
    except MinimError as e:
        print(e.render(), file=sys.stderr)
        return 1

    for name, value in result.variables.items():
        print(name + " = " + str(value))
    if result.returned is not None:
        print("return = " + str(result.returned))
    return 0


if __name__ == "__main__":
    sys.exit(main())
