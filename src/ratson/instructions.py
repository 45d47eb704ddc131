"""Instruction set shared by both dialects."""

from __future__ import annotations

from enum import Enum, auto


class Instruction(Enum):
    # integers
    INEW = auto()
    IINC = auto()
    ISHL = auto()
    IADD = auto()
    INEG = auto()
    ISHT = auto()
    ITOF = auto()
    ITOU = auto()
    # floats
    FINF = auto()
    FNAN = auto()
    FNEG = auto()
    # strings
    SNEW = auto()
    SADD = auto()
    # objects
    ONEW = auto()
    OADD = auto()
    # arrays
    ANEW = auto()
    AADD = auto()
    # booleans / nil
    BNEW = auto()
    BNEG = auto()
    NNEW = auto()
    # generic stack ops
    GDUP = auto()
    GPOP = auto()
    GSWP = auto()

    def __repr__(self) -> str:
        return f"Instruction.{self.name}"
