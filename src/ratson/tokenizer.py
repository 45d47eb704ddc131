"""Byte → Instruction tokenizer with two dialects.

A program is a flat byte string. Every byte is looked up in the table of the
current *mode*; bytes missing from that table are skipped. The byte that
produces ``SNEW`` (``?`` in the primary dialect, ``$`` in the secondary one)
also flips the mode, so the dialect of every later byte depends on how many
new-string bytes came before it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from types import MappingProxyType
from typing import Iterator, Mapping

from .errors import TokenizerExhausted
from .instructions import Instruction


# ---------------------------------------------------------------------------
# Mode
# ---------------------------------------------------------------------------

class Mode(Enum):
    PRIMARY = auto()
    SECONDARY = auto()

    def flipped(self) -> Mode:
        return Mode.SECONDARY if self is Mode.PRIMARY else Mode.PRIMARY


# ---------------------------------------------------------------------------
# Dialect tables
# ---------------------------------------------------------------------------

def _table(spellings: dict[str, Instruction]) -> Mapping[int, Instruction]:
    return MappingProxyType({ord(ch): instr for ch, instr in spellings.items()})


I = Instruction

PRIMARY_TABLE: Mapping[int, Instruction] = _table({
    "B": I.INEW,
    "u": I.IINC,
    "b": I.ISHL,
    "a": I.IADD,
    "A": I.INEG,
    "e": I.ISHT,
    "i": I.ITOF,
    "'": I.ITOU,
    "q": I.FINF,
    "t": I.FNAN,
    "p": I.FNEG,
    "?": I.SNEW,
    "!": I.SADD,
    "~": I.ONEW,
    "M": I.OADD,
    "@": I.ANEW,
    "s": I.AADD,
    "z": I.BNEW,
    "o": I.BNEG,
    ".": I.NNEW,
    "E": I.GDUP,
    "#": I.GPOP,
    "%": I.GSWP,
})

SECONDARY_TABLE: Mapping[int, Instruction] = _table({
    "S": I.INEW,
    "h": I.IINC,
    "a": I.ISHL,
    "k": I.IADD,
    "r": I.INEG,
    "A": I.ISHT,
    "z": I.ITOF,
    "i": I.ITOU,
    "m": I.FINF,
    "b": I.FNAN,
    "u": I.FNEG,
    "$": I.SNEW,
    "-": I.SADD,
    "+": I.ONEW,
    "g": I.OADD,
    "v": I.ANEW,
    "?": I.AADD,
    "^": I.BNEW,
    "!": I.BNEG,
    "y": I.NNEW,
    "/": I.GDUP,
    "e": I.GPOP,
    ":": I.GSWP,
})

del I

_TABLES: dict[Mode, Mapping[int, Instruction]] = {
    Mode.PRIMARY: PRIMARY_TABLE,
    Mode.SECONDARY: SECONDARY_TABLE,
}


def step(mode: Mode, byte: int) -> tuple[Mode, Instruction | None]:
    """Classify one byte under *mode* and return ``(next_mode, instruction)``."""
    instr = _TABLES[mode].get(byte)
    if instr is Instruction.SNEW:
        return mode.flipped(), instr
    return mode, instr


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Tokenizer:
    """Remaining input plus the current mode.

    The tokenizer is an immutable value: ``step()`` returns a new tokenizer
    instead of advancing this one, and iterating never consumes it. Iterating
    the same tokenizer twice therefore yields the same sequence.
    """

    data: bytes
    pos: int = 0
    mode: Mode = Mode.PRIMARY

    @property
    def exhausted(self) -> bool:
        return self.pos >= len(self.data)

    def step(self) -> tuple[Tokenizer, Instruction | None]:
        if self.exhausted:
            raise TokenizerExhausted(f"no input left at offset {self.pos}")
        mode, instr = step(self.mode, self.data[self.pos])
        return replace(self, pos=self.pos + 1, mode=mode), instr

    def __iter__(self) -> Iterator[Instruction | None]:
        mode = self.mode
        for byte in self.data[self.pos:]:
            mode, instr = step(mode, byte)
            yield instr

    def end(self) -> Tokenizer:
        """Return the state reached after consuming all remaining input."""
        mode = self.mode
        for byte in self.data[self.pos:]:
            mode, _ = step(mode, byte)
        return replace(self, pos=len(self.data), mode=mode)


def tokenize(data: bytes, mode: Mode = Mode.PRIMARY) -> list[Instruction | None]:
    """Return one ``Instruction | None`` per byte of *data*."""
    return list(Tokenizer(bytes(data), mode=mode))
