"""Exceptions raised by ratson."""


class RatsonError(Exception):
    """Base class for every error raised by the package."""


class StackUnderflowError(RatsonError, IndexError):
    """A swap found fewer than two values on the stack."""


class TokenizerExhausted(RatsonError, IndexError):
    """``Tokenizer.step()`` was called with no input left."""
