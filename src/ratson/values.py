"""Value types produced by the ratson interpreter."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Union


# ---------------------------------------------------------------------------
# Nil — singleton for the null value
# ---------------------------------------------------------------------------

class _NilType:
    """Unit value pushed by the ``NNEW`` instruction."""

    _instance: _NilType | None = None

    def __new__(cls) -> _NilType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Nil"

    def __bool__(self) -> bool:
        return False


Nil = _NilType()


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class VInt:
    value: int  # signed 64-bit


@dataclass(slots=True)
class VUint:
    value: int  # unsigned 64-bit


@dataclass(slots=True)
class VFloat:
    value: float


@dataclass(slots=True)
class VBool:
    value: bool


@dataclass(slots=True)
class VString:
    """Raw byte string; not guaranteed to be valid UTF-8."""

    value: bytearray = field(default_factory=bytearray)


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class VArray:
    items: list[Value] = field(default_factory=list)


@dataclass(slots=True)
class VObject:
    entries: dict[bytes, Value] = field(default_factory=dict)


Value = Union[VInt, VUint, VFloat, VString, VArray, VObject, VBool, _NilType]


def clone(value: Value) -> Value:
    """Return an independent deep copy of *value*.

    Walks containers with an explicit work list, so nesting depth is not
    limited by the interpreter's recursion limit.
    """
    result: list[Value] = []
    work: list[tuple[Value, Callable[[Value], None]]] = [(value, result.append)]
    while work:
        item, put = work.pop()
        if isinstance(item, VArray):
            out = VArray()
            put(out)
            work.extend((v, out.items.append) for v in reversed(item.items))
        elif isinstance(item, VObject):
            out = VObject()
            put(out)
            work.extend(
                (v, partial(out.entries.__setitem__, k))
                for k, v in reversed(item.entries.items())
            )
        elif isinstance(item, VString):
            put(VString(bytearray(item.value)))
        elif isinstance(item, _NilType):
            put(Nil)
        else:
            put(type(item)(item.value))
    return result[0]
