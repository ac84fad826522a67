"""
Command line front end: parse Kaleidoscope source and print the ASTs.

    kaleidoscope-parse program.kal
    echo 'def binary| 5 (x y) x; a | b' | kaleidoscope-parse
    kaleidoscope-parse --tokens program.kal
"""

import argparse
import logging
import sys
from typing import List, Optional, TextIO, Tuple

from . import __version__
from .backend import RecordingBackend
from .driver import Driver
from .lexer.lexer import Lexer
from .parser.ast_nodes import TopLevelForm
from .parser.operators import OperatorTable
from .parser.parser import Parser
from .parser.printer import format_ast


def _operator_arg(text: str) -> Tuple[str, int]:
    if text.startswith("=="):
        # the symbol itself is '='
        symbol, sep, precedence = "=", "=", text[2:]
    else:
        symbol, sep, precedence = text.partition("=")
    if len(symbol) != 1 or not sep:
        raise argparse.ArgumentTypeError(f"expected SYM=PREC with a single-character symbol, got {text!r}")
    try:
        value = int(precedence)
    except ValueError:
        raise argparse.ArgumentTypeError(f"precedence must be an integer, got {precedence!r}")
    return symbol, value


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kaleidoscope-parse",
        description="Parse Kaleidoscope source and print one AST per top-level form",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    kaleidoscope-parse fib.kal                # Parse a file
    kaleidoscope-parse < fib.kal              # Parse stdin
    kaleidoscope-parse -o '%=40' mod.kal      # Pre-declare an operator
    kaleidoscope-parse --tokens fib.kal       # Dump the token stream instead
        """
    )
    parser.add_argument("file", nargs="?", help="source file (default: stdin)")
    parser.add_argument("-o", "--operator", action="append", default=[], type=_operator_arg,
                        metavar="SYM=PREC", help="add a binary operator before parsing")
    parser.add_argument("--tokens", action="store_true",
                        help="print tokens instead of ASTs")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _dump_tokens(stream: TextIO, filename: str, out: TextIO) -> int:
    for token in Lexer(stream, filename).tokenize():
        print(f"{token.location}\t{token}", file=out)
    return 0


def _dump_forms(stream: TextIO, filename: str, operators: OperatorTable,
                out: TextIO, err: TextIO) -> int:
    parser = Parser(Lexer(stream, filename), operators)

    # Print as forms are accepted so interactive input gets immediate output.
    def print_form(form: TopLevelForm):
        try:
            print(format_ast(form), file=out)
        except RecursionError:
            print(f"{form.location}: form nested too deeply to print", file=err)

    Driver(parser, RecordingBackend(operators), on_accept=print_form).run()

    for error in parser.errors:
        print(str(error.diagnostic), file=err, end="")
    return 1 if parser.errors else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the parse tool."""
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    operators = OperatorTable()
    for symbol, precedence in args.operator:
        operators.define(symbol, precedence)

    try:
        if args.file:
            with open(args.file, "r", encoding="utf-8", newline="") as stream:
                if args.tokens:
                    return _dump_tokens(stream, args.file, sys.stdout)
                return _dump_forms(stream, args.file, operators, sys.stdout, sys.stderr)
        if args.tokens:
            return _dump_tokens(sys.stdin, "<stdin>", sys.stdout)
        return _dump_forms(sys.stdin, "<stdin>", operators, sys.stdout, sys.stderr)
    except (OSError, UnicodeDecodeError) as e:
        print(f"kaleidoscope-parse: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
