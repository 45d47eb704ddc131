"""Interpreter: executes an instruction stream against a value stack."""

from __future__ import annotations

import logging
import math
import struct
from typing import Callable

from .errors import StackUnderflowError
from .instructions import Instruction
from .tokenizer import Mode, Tokenizer
from .values import (
    Nil,
    Value,
    VArray,
    VBool,
    VFloat,
    VInt,
    VObject,
    VString,
    VUint,
    clone,
)

logger = logging.getLogger(__name__)

_U64 = 1 << 64


def wrap_i64(n: int) -> int:
    """Reduce *n* to a signed 64-bit two's complement value."""
    n &= _U64 - 1
    return n - _U64 if n >= 1 << 63 else n


def bits_to_float(n: int) -> float:
    """Reinterpret the 64-bit pattern of signed *n* as an IEEE-754 double."""
    return struct.unpack("<d", struct.pack("<q", n))[0]


def bits_to_uint(n: int) -> int:
    return n & (_U64 - 1)


# ---------------------------------------------------------------------------
# Interpreter
# ---------------------------------------------------------------------------

class Interpreter:
    """Stack machine for one program.

    Usage::

        vm = Interpreter(b"Buu")
        vm.run()    # → VInt(2)

    Every instruction except ``GSWP`` is lenient: when the stack is too small
    or an operand has the wrong type, the stack is left as it was.
    """

    def __init__(self, program: bytes = b"") -> None:
        self.stack: list[Value] = []
        self.tokenizer = Tokenizer(bytes(program))
        self._dispatch: dict[Instruction, Callable[[], None]] = {
            Instruction.INEW: self._inew,
            Instruction.IINC: self._iinc,
            Instruction.ISHL: self._ishl,
            Instruction.IADD: self._iadd,
            Instruction.INEG: self._ineg,
            Instruction.ISHT: self._isht,
            Instruction.ITOF: self._itof,
            Instruction.ITOU: self._itou,
            Instruction.FINF: self._finf,
            Instruction.FNAN: self._fnan,
            Instruction.FNEG: self._fneg,
            Instruction.SNEW: self._snew,
            Instruction.SADD: self._sadd,
            Instruction.ONEW: self._onew,
            Instruction.OADD: self._oadd,
            Instruction.ANEW: self._anew,
            Instruction.AADD: self._aadd,
            Instruction.BNEW: self._bnew,
            Instruction.BNEG: self._bneg,
            Instruction.NNEW: self._nnew,
            Instruction.GDUP: self._gdup,
            Instruction.GPOP: self._gpop,
            Instruction.GSWP: self._gswp,
        }

    @property
    def mode(self) -> Mode:
        return self.tokenizer.mode

    # -- Execution ------------------------------------------------------

    def run(self) -> Value | None:
        """Execute the program and pop its result (``None`` if the stack is empty)."""
        for instr in self.tokenizer:
            if instr is not None:
                self.execute(instr)
        self.tokenizer = self.tokenizer.end()
        return self.stack.pop() if self.stack else None

    def feed(self, data: bytes) -> None:
        """Execute *data* on the current stack, continuing in the current mode."""
        tok = Tokenizer(bytes(data), mode=self.tokenizer.mode)
        try:
            while not tok.exhausted:
                tok, instr = tok.step()
                if instr is not None:
                    self.execute(instr)
        finally:
            self.tokenizer = tok

    def execute(self, instr: Instruction) -> None:
        logger.debug("execute %s (depth %d)", instr.name, len(self.stack))
        self._dispatch[instr]()

    def peek(self) -> Value | None:
        return self.stack[-1] if self.stack else None

    # -- Stack helpers --------------------------------------------------

    def _top(self, *types: type) -> Value | None:
        """Return the top value if it is one of *types*."""
        if not self.stack:
            logger.debug("no-op: empty stack")
            return None
        if not isinstance(self.stack[-1], types):
            self._skip(self.stack[-1])
            return None
        return self.stack[-1]

    def _operands(self, count: int) -> list[Value] | None:
        """Return ``[target, *operands]`` from the top ``count + 1`` entries."""
        if len(self.stack) < count + 1:
            logger.debug("no-op: stack depth %d < %d", len(self.stack), count + 1)
            return None
        return self.stack[-(count + 1):]

    def _drop(self, count: int) -> None:
        del self.stack[-count:]

    def _skip(self, *values: Value) -> None:
        logger.debug("no-op: operand types %s", ", ".join(type(v).__name__ for v in values))

    # -- Integers -------------------------------------------------------

    def _inew(self) -> None:
        self.stack.append(VInt(0))

    def _iinc(self) -> None:
        top = self._top(VInt)
        if top is not None:
            top.value = wrap_i64(top.value + 1)

    def _ishl(self) -> None:
        top = self._top(VInt)
        if top is not None:
            top.value = wrap_i64(top.value << 1)

    def _iadd(self) -> None:
        ops = self._operands(1)
        if ops is None:
            return
        top, y = ops
        if not (isinstance(top, VInt) and isinstance(y, VInt)):
            self._skip(top, y)
            return
        self._drop(1)
        top.value = wrap_i64(top.value + y.value)

    def _ineg(self) -> None:
        top = self._top(VInt)
        if top is not None:
            top.value = wrap_i64(-top.value)

    def _isht(self) -> None:
        ops = self._operands(1)
        if ops is None:
            return
        top, y = ops
        if not (isinstance(top, VInt) and isinstance(y, VInt)):
            self._skip(top, y)
            return
        self._drop(1)
        # shift count is masked to 6 bits like the native 64-bit shift
        top.value = wrap_i64(top.value << (y.value & 63))

    def _itof(self) -> None:
        top = self._top(VInt)
        if top is not None:
            self.stack[-1] = VFloat(bits_to_float(top.value))

    def _itou(self) -> None:
        top = self._top(VInt)
        if top is not None:
            self.stack[-1] = VUint(bits_to_uint(top.value))

    # -- Floats ---------------------------------------------------------

    def _finf(self) -> None:
        self.stack.append(VFloat(math.inf))

    def _fnan(self) -> None:
        self.stack.append(VFloat(math.nan))

    def _fneg(self) -> None:
        top = self._top(VFloat)
        if top is not None:
            top.value = -top.value

    # -- Strings --------------------------------------------------------

    def _snew(self) -> None:
        self.stack.append(VString())

    def _sadd(self) -> None:
        ops = self._operands(1)
        if ops is None:
            return
        top, y = ops
        if not (isinstance(top, VString) and isinstance(y, VInt)):
            self._skip(top, y)
            return
        self._drop(1)
        top.value.append(y.value & 0xFF)

    # -- Objects --------------------------------------------------------

    def _onew(self) -> None:
        self.stack.append(VObject())

    def _oadd(self) -> None:
        ops = self._operands(2)
        if ops is None:
            return
        top, key, value = ops
        if not (isinstance(top, VObject) and isinstance(key, VString)):
            self._skip(top, key, value)
            return
        self._drop(2)
        top.entries[bytes(key.value)] = value

    # -- Arrays ---------------------------------------------------------

    def _anew(self) -> None:
        self.stack.append(VArray())

    def _aadd(self) -> None:
        ops = self._operands(1)
        if ops is None:
            return
        top, y = ops
        if not isinstance(top, VArray):
            self._skip(top, y)
            return
        self._drop(1)
        top.items.append(y)

    # -- Booleans / nil -------------------------------------------------

    def _bnew(self) -> None:
        self.stack.append(VBool(False))

    def _bneg(self) -> None:
        top = self._top(VBool)
        if top is not None:
            top.value = not top.value

    def _nnew(self) -> None:
        self.stack.append(Nil)

    # -- Generic --------------------------------------------------------

    def _gdup(self) -> None:
        if self.stack:
            self.stack.append(clone(self.stack[-1]))

    def _gpop(self) -> None:
        if self.stack:
            self.stack.pop()

    def _gswp(self) -> None:
        if len(self.stack) < 2:
            raise StackUnderflowError(
                f"swap needs 2 values on the stack, found {len(self.stack)}"
            )
        self.stack[-1], self.stack[-2] = self.stack[-2], self.stack[-1]


def run(program: bytes) -> Value | None:
    """Run *program* and return its result, or ``None`` if it leaves no value."""
    return Interpreter(program).run()
