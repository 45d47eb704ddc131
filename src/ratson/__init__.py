"""ratson — two-dialect stack language that evaluates to a JSON value."""

import logging

from .errors import RatsonError, StackUnderflowError, TokenizerExhausted
from .instructions import Instruction
from .interpreter import Interpreter, run
from .render import dumps, to_json
from .repl import RatsonRepl
from .tokenizer import PRIMARY_TABLE, SECONDARY_TABLE, Mode, Tokenizer, tokenize
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
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "run",
    "dumps",
    "to_json",
    "tokenize",
    "Interpreter",
    "Instruction",
    "Mode",
    "Tokenizer",
    "PRIMARY_TABLE",
    "SECONDARY_TABLE",
    "Nil",
    "Value",
    "VArray",
    "VBool",
    "VFloat",
    "VInt",
    "VObject",
    "VString",
    "VUint",
    "RatsonError",
    "StackUnderflowError",
    "TokenizerExhausted",
    "RatsonRepl",
]
