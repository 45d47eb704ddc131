"""``ratson`` command: run a program file and print its result as JSON."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import IO, Sequence

from .errors import RatsonError
from .interpreter import Interpreter
from .render import dumps
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ratson",
        description="Run a ratson program and print its result as JSON.",
    )
    parser.add_argument("input", type=Path, help="Path to the program file.")
    parser.add_argument(
        "--indent", type=int, default=None, metavar="N",
        help="Pretty-print the JSON output with N spaces.",
    )
    parser.add_argument(
        "--tokens", action="store_true",
        help="List the decoded instructions instead of running the program.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log every executed instruction to stderr.",
    )
    return parser


def _print_tokens(program: bytes, dest: IO[str]) -> None:
    """Print ``offset mode instruction`` for every recognised byte."""
    tok = Tokenizer(program)
    while not tok.exhausted:
        offset, mode = tok.pos, tok.mode
        tok, instr = tok.step()
        if instr is not None:
            print(f"{offset:6d}  {mode.name:<9}  {instr.name}", file=dest)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for ``ratson`` / ``python -m ratson``. Returns the exit status."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        program = args.input.read_bytes()
    except OSError as exc:
        print(f"Error reading '{args.input}': {exc}", file=sys.stderr)
        return 1
    logger.debug("read %d bytes from %s", len(program), args.input)

    if args.tokens:
        _print_tokens(program, sys.stdout)
        return 0

    try:
        result = Interpreter(program).run()
    except RatsonError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if result is None:
        print("Error: program produced no value", file=sys.stderr)
        return 1

    print(dumps(result, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
