"""JSON rendering of interpreter values.

Both entry points walk containers with an explicit work list instead of
recursing, so arbitrarily deep values built by a program render without
hitting the recursion limit. ``json`` only ever encodes scalars here.
"""

from __future__ import annotations

import json
import math
from functools import partial
from typing import Any, Callable, Iterator

from .values import (
    Value,
    VArray,
    VBool,
    VFloat,
    VInt,
    VObject,
    VString,
    VUint,
    _NilType,
)


def decode_bytes(raw: bytes | bytearray) -> str:
    """Decode raw bytes as UTF-8, replacing invalid sequences."""
    return bytes(raw).decode("utf-8", errors="replace")


def _scalar(value: Value) -> Any:
    if isinstance(value, (VInt, VUint)):
        return value.value
    if isinstance(value, VFloat):
        return value.value if math.isfinite(value.value) else None
    if isinstance(value, VString):
        return decode_bytes(value.value)
    if isinstance(value, VBool):
        return value.value
    if isinstance(value, _NilType):
        return None
    raise TypeError(f"not a ratson value: {value!r}")


def _object_items(value: VObject) -> list[tuple[str, Value]]:
    """Entries with decoded keys; a later entry wins when two keys decode alike."""
    decoded: dict[str, Value] = {}
    for k, v in value.entries.items():
        decoded[decode_bytes(k)] = v
    return list(decoded.items())


def to_json(value: Value) -> Any:
    """Convert *value* to plain Python data accepted by :func:`json.dumps`.

    - VInt / VUint → int
    - VFloat → float; NaN and ±inf → None (rendered ``null``)
    - VString → str (lossy UTF-8)
    - VObject → dict with lossily decoded keys
    - VArray → list
    - VBool → bool, Nil → None
    """
    result: list[Any] = []
    work: list[tuple[Value, Callable[[Any], None]]] = [(value, result.append)]
    while work:
        item, put = work.pop()
        if isinstance(item, VArray):
            out: list[Any] = []
            put(out)
            work.extend((v, out.append) for v in reversed(item.items))
        elif isinstance(item, VObject):
            mapping: dict[str, Any] = {}
            put(mapping)
            work.extend(
                (v, partial(mapping.__setitem__, k))
                for k, v in reversed(_object_items(item))
            )
        else:
            put(_scalar(item))
    return result[0]


def _encode_scalar(value: Value) -> str:
    return json.dumps(_scalar(value), ensure_ascii=False, allow_nan=False)


def _iterencode(value: Value, indent: int | None) -> Iterator[str]:
    item_sep, key_sep = (",", ":") if indent is None else (",", ": ")
    # work entries are either literal text or (value, depth) still to encode
    work: list[str | tuple[Value, int]] = [(value, 0)]
    while work:
        item = work.pop()
        if isinstance(item, str):
            yield item
            continue
        node, depth = item
        if isinstance(node, VArray):
            children = [[(v, depth + 1)] for v in node.items]
            open_, close = "[", "]"
        elif isinstance(node, VObject):
            children = [
                [json.dumps(k, ensure_ascii=False) + key_sep, (v, depth + 1)]
                for k, v in _object_items(node)
            ]
            open_, close = "{", "}"
        else:
            yield _encode_scalar(node)
            continue

        if not children:
            yield open_ + close
            continue
        if indent is None:
            inner, outer = "", ""
        else:
            inner = "\n" + " " * (indent * (depth + 1))
            outer = "\n" + " " * (indent * depth)

        parts: list[str | tuple[Value, int]] = [open_]
        for i, child in enumerate(children):
            parts.append(inner if i == 0 else item_sep + inner)
            parts.extend(child)
        parts.append(outer + close)
        work.extend(reversed(parts))


def dumps(value: Value, indent: int | None = None) -> str:
    """Render *value* as JSON text (compact unless *indent* is given)."""
    return "".join(_iterencode(value, indent))
