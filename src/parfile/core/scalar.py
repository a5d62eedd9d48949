"""Typed leaf values of a parameter file.

Every token of a parameter file becomes one :class:`ScalarValue`. The kind is
decided once from the lexical shape of the token (or forced to string for
quoted literals) and the numeric interpretation is stored next to the raw
text, so accessors never re-parse.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum

from .errors import ValueKindError
from .types import PyScalar

INT_PATTERN = re.compile(r"[+-]?[0-9]+")
FLOAT_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

# Token separators of the grammar
BLANKS = " \t\r\f\v"
BRACES = "{}"

# Characters that force a string to be written as a quoted literal
_QUOTE_TRIGGERS = frozenset(BLANKS + BRACES + '"\n')


class ValueKind(str, Enum):
    """Kind of a scalar value."""

    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"


def infer_kind(token: str) -> ValueKind:
    """Classify a bare token by its lexical shape."""
    if INT_PATTERN.fullmatch(token):
        return ValueKind.INTEGER
    if FLOAT_PATTERN.fullmatch(token):
        return ValueKind.FLOAT
    return ValueKind.STRING


@dataclass(frozen=True)
class ScalarValue:
    """One immutable, typed value.

    Attributes:
        text: Raw token text (quotes and escapes already removed)
        kind: Inferred or forced kind
        value: ``int``/``float`` for numeric kinds, ``text`` otherwise
    """

    text: str
    kind: ValueKind
    value: PyScalar

    @classmethod
    def from_token(cls, token: str) -> ScalarValue:
        """Build a value from a bare token, inferring its kind."""
        kind = infer_kind(token)
        if kind is ValueKind.INTEGER:
            return cls(token, kind, int(token))
        if kind is ValueKind.FLOAT:
            return cls(token, kind, float(token))
        return cls(token, kind, token)

    @classmethod
    def from_quoted(cls, text: str) -> ScalarValue:
        """Build a string value from the body of a quoted literal."""
        return cls(text, ValueKind.STRING, text)

    @classmethod
    def from_python(cls, value: PyScalar) -> ScalarValue:
        """Build a value from a Python scalar, keeping its type as the kind."""
        if isinstance(value, bool):
            return cls.from_token(str(int(value)))
        if isinstance(value, int):
            return cls(str(value), ValueKind.INTEGER, value)
        if isinstance(value, float):
            return cls(repr(value), ValueKind.FLOAT, value)
        return cls.from_quoted(str(value))

    @property
    def is_numeric(self) -> bool:
        return self.kind is not ValueKind.STRING

    def as_int(self) -> int:
        if self.kind is not ValueKind.INTEGER:
            raise ValueKindError(f"Value {self.text!r} is not an integer ({self.kind.value})")
        return self.value  # type: ignore[return-value]

    def as_float(self) -> float:
        """Numeric value as float; integers widen, strings raise."""
        if self.kind is ValueKind.STRING:
            raise ValueKindError(f"Value {self.text!r} is not numeric")
        return float(self.value)

    def as_str(self) -> str:
        return self.text

    def canonical(self) -> str:
        """Textual form used when writing the value back to a file.

        Numbers are normalized (``+5`` becomes ``5``, ``1e3`` becomes
        ``1000.0``). Strings are quoted whenever the bare token would not
        read back as the same string.
        """
        if self.kind is ValueKind.INTEGER:
            return str(self.value)
        if self.kind is ValueKind.FLOAT:
            # inf from an overflowing literal would read back as a string
            return repr(self.value) if math.isfinite(self.value) else self.text  # type: ignore[arg-type]
        return quote_if_needed(self.text)

    def __str__(self) -> str:
        return self.text


def quote_if_needed(text: str) -> str:
    """Return ``text`` as it must appear in a parameter file to stay a string."""
    needs_quotes = (
        not text
        or text[0] == "#"
        or any(c in _QUOTE_TRIGGERS for c in text)
        or infer_kind(text) is not ValueKind.STRING
    )
    if not needs_quotes:
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


__all__ = [
    "ValueKind",
    "ScalarValue",
    "infer_kind",
    "quote_if_needed",
    "INT_PATTERN",
    "BLANKS",
    "BRACES",
    "FLOAT_PATTERN",
]
