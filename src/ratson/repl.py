"""RatsonRepl — incremental REPL for interactive use.

Also provides the ``ratson-repl`` CLI entry point via ``main()``.

A line starting with ``:`` in its first column is a command; every other
line is program text. Program text that itself starts with ``:`` (the
secondary-dialect swap) can be entered with a leading space.
"""

from __future__ import annotations

import sys
from typing import IO

from .errors import RatsonError
from .interpreter import Interpreter
from .render import dumps
from .tokenizer import Mode
from .values import Value, VArray, VObject


# ---------------------------------------------------------------------------
# RatsonRepl class (programmatic use)
# ---------------------------------------------------------------------------

class RatsonRepl:
    """Stateful REPL that keeps the value stack and dialect mode across calls.

    Usage::

        repl = RatsonRepl()
        repl.eval("Buu")      # → VInt(2)
        repl.eval("@")        # → VArray([])
        repl.eval("%s")       # → VArray([VInt(2)])

        repl.stack            # current value stack
        repl.reset()          # clear state
    """

    def __init__(self) -> None:
        self.vm = Interpreter()

    @property
    def stack(self) -> list[Value]:
        return self.vm.stack

    @property
    def mode(self) -> Mode:
        return self.vm.mode

    def eval(self, text: str | bytes) -> Value | None:
        """Execute *text* on the accumulated stack.

        Returns the top of the stack (not popped), or ``None`` when the stack
        is empty. Raises ``StackUnderflowError`` if a swap underflows.
        """
        # surrogateescape restores raw bytes read from non-UTF-8 batch files
        if isinstance(text, str):
            text = text.encode("utf-8", errors="surrogateescape")
        self.vm.feed(text)
        return self.vm.peek()

    def reset(self) -> None:
        """Clear the stack and return to the primary dialect."""
        self.vm = Interpreter()


# ---------------------------------------------------------------------------
# CLI helpers
# ---------------------------------------------------------------------------

def _fmt_inline(value: Value | None) -> str:
    """Format a single value for compact one-line display."""
    if value is None:
        return "(empty stack)"
    return dumps(value)


def _fmt_inspect(value: Value | None) -> str:
    """Pretty-print a value for :i / :inspect."""
    if value is None:
        return "(empty stack)"
    if isinstance(value, (VArray, VObject)):
        size = len(value.items) if isinstance(value, VArray) else len(value.entries)
        return f"{type(value).__name__}({size}) {dumps(value, indent=2)}"
    return f"{type(value).__name__} {dumps(value)}"


def _show_stack(repl: RatsonRepl, dest: IO[str]) -> None:
    """Print the stack, bottom first."""
    if not repl.stack:
        print("  (empty stack)", file=dest)
        return
    width = len(str(len(repl.stack)))
    for i, value in enumerate(repl.stack):
        print(f"  {i:>{width}}: {_fmt_inline(value)}", file=dest)


def _feed(repl: RatsonRepl, text: str) -> Value | None:
    try:
        return repl.eval(text)
    except RatsonError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _process_line(repl: RatsonRepl, line: str, dest: IO[str]) -> bool:
    """Process one input line.  Returns False when the session should end."""
    if not line.strip():
        return True

    # ── Program text ──────────────────────────────────────────────────────
    if not line.startswith(":"):
        _feed(repl, line)
        return True

    command, _, arg = line[1:].strip().partition(" ")
    arg = arg.strip()

    # ── Exit ──────────────────────────────────────────────────────────────
    if command in ("q", "quit"):
        return False

    # ── Control commands ──────────────────────────────────────────────────
    if command == "stack":
        _show_stack(repl, dest)
    elif command == "mode":
        print(f"  {repl.mode.name.lower()}", file=dest)
    elif command == "reset":
        repl.reset()

    # ── :? program  /  :i program ─────────────────────────────────────────
    elif command == "?":
        print(_fmt_inline(_feed(repl, arg)), file=dest)
    elif command in ("i", "inspect"):
        print(_fmt_inspect(_feed(repl, arg)), file=dest)

    # ── Batch file ────────────────────────────────────────────────────────
    elif command == "<<":
        try:
            with open(arg, encoding="utf-8", errors="surrogateescape") as fh:
                for file_line in fh:
                    _process_line(repl, file_line.rstrip("\r\n"), dest)
        except OSError as exc:
            print(f"Error reading '{arg}': {exc}", file=sys.stderr)

    else:
        print(f"Unknown command ':{command}'", file=sys.stderr)
    return True


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Interactive shell (``ratson-repl`` / ``python -m ratson.repl``)."""
    repl = RatsonRepl()

    print(
        "ratson REPL  (:q to quit  |  :stack  :mode  :reset  |  "
        ":? <prog>  :i <prog>  :<< <file>  |  other lines run as program text)"
    )

    while True:
        try:
            line = input("ratson> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            continue

        if not _process_line(repl, line, sys.stdout):
            break


if __name__ == "__main__":
    main()
