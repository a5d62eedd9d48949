"""Scanner and parser for the parameter file grammar.

A parameter file holds one entry per line::

    # comment
    size      128
    name      "hello world"
    box       { 1 2 3 }
    mat       { {1 2} {3 4} }

Group values are rectangular: every group at a given depth must hold the same
number of elements, so a field's size vector is exact once parsing succeeds.
"""

from __future__ import annotations

import io
from typing import Iterable

from .errors import (
    DepthExceededError,
    DuplicateFieldError,
    ParameterSyntaxError,
    RaggedArrayError,
)
from .field import NamedField
from .scalar import BLANKS, BRACES, ScalarValue
from .types import MAX_DEPTH


class LineCursor:
    """Character cursor over one physical line."""

    def __init__(self, line: str, lineno: int, filename: str | None = None):
        self.line = line
        self.lineno = lineno
        self.filename = filename
        self.pos = 0

    def error(self, message: str, cls: type[ParameterSyntaxError] = ParameterSyntaxError):
        return cls(message, self.filename, self.lineno)

    def at_end(self) -> bool:
        return self.pos >= len(self.line)

    def peek(self) -> str:
        return self.line[self.pos] if self.pos < len(self.line) else ""

    def advance(self) -> str:
        c = self.line[self.pos]
        self.pos += 1
        return c

    def skip_blanks(self) -> None:
        while self.pos < len(self.line) and self.line[self.pos] in BLANKS:
            self.pos += 1

    def read_bare(self) -> str:
        """Read up to the next blank or brace."""
        start = self.pos
        while self.pos < len(self.line) and self.line[self.pos] not in BLANKS + BRACES:
            self.pos += 1
        return self.line[start : self.pos]

    def read_quoted(self, name: str) -> str:
        """Read a quoted literal; the cursor sits on the opening quote."""
        self.pos += 1
        chars = []
        while True:
            if self.at_end():
                raise self.error(
                    f"Unexpected end of line while parsing quotation mark enclosed variable {name}"
                )
            c = self.advance()
            if c == "\\" and self.peek() in ('"', "\\"):
                chars.append(self.advance())
            elif c == '"':
                break
            else:
                chars.append(c)
        if not self.at_end() and self.peek() not in BLANKS + "}":
            raise self.error(f"Unexpected data after quoted value of {name}")
        return "".join(chars)


def read_scalar(cursor: LineCursor, name: str) -> ScalarValue:
    """Read one bare token or quoted literal."""
    if cursor.peek() == '"':
        return ScalarValue.from_quoted(cursor.read_quoted(name))
    token = cursor.read_bare()
    if not token:
        raise cursor.error(f"Unexpected '{cursor.peek()}' while parsing variable {name}")
    return ScalarValue.from_token(token)


def read_group(cursor: LineCursor, field: NamedField) -> None:
    """Read a brace-delimited array into ``field``.

    ``counts[d]`` is the number of elements in the group currently open at
    depth ``d``, ``prev_sizes[d]`` the size shared by all groups closed so far
    at that depth. ``leaf_depth`` is the depth at which the first group
    closed; scalars may only appear there and no group may open there.
    """
    name = field.name
    depth = 0
    leaf_depth: int | None = None
    counts = [0] * (MAX_DEPTH + 1)
    prev_sizes: list[int | None] = [None] * (MAX_DEPTH + 1)
    has_scalars = [False] * (MAX_DEPTH + 1)

    while True:
        cursor.skip_blanks()
        if cursor.at_end():
            raise cursor.error(f"Missing closing '}}' while parsing variable {name}")
        c = cursor.peek()
        if c == "{":
            if depth > 0 and has_scalars[depth]:
                raise cursor.error(
                    f"Variable {name} mixes values and groups in depth {depth}", RaggedArrayError
                )
            if depth == leaf_depth or depth == MAX_DEPTH:
                raise cursor.error(
                    f"Exceeding maximum depth while parsing variable {name}", DepthExceededError
                )
            cursor.advance()
            depth += 1
            counts[depth] = 0
            has_scalars[depth] = False
        elif c == "}":
            cursor.advance()
            if leaf_depth is None:
                leaf_depth = depth
            if prev_sizes[depth] is None:
                prev_sizes[depth] = counts[depth]
            elif counts[depth] != prev_sizes[depth]:
                raise cursor.error(
                    f"Sizes in depth {depth} of variable {name} not constant: "
                    f"prevDim = {prev_sizes[depth]}, dim = {counts[depth]}",
                    RaggedArrayError,
                )
            depth -= 1
            if depth == 0:
                break
            counts[depth] += 1
        else:
            if leaf_depth is not None and depth != leaf_depth:
                raise cursor.error(
                    f"Variable {name} mixes values and groups in depth {depth}", RaggedArrayError
                )
            field.append(read_scalar(cursor, name))
            counts[depth] += 1
            has_scalars[depth] = True

    field.set_dim_sizes([prev_sizes[d] for d in range(1, leaf_depth + 1)])  # type: ignore[misc]


def parse_lines(lines: Iterable[str], filename: str | None = None) -> list[NamedField]:
    """Parse parameter file lines into fields, in file order.

    Raises:
        ParameterSyntaxError: On malformed input
        DuplicateFieldError: When a name is defined twice
    """
    fields: list[NamedField] = []
    seen: set[str] = set()

    for lineno, raw in enumerate(lines, start=1):
        cursor = LineCursor(raw.rstrip("\n"), lineno, filename)
        cursor.skip_blanks()
        if cursor.at_end() or cursor.peek() == "#":
            continue

        name = cursor.read_bare()
        if not name:
            raise cursor.error(f"Expected a variable name, found '{cursor.peek()}'")
        if name in seen:
            raise cursor.error(f'Variable "{name}" already defined', DuplicateFieldError)

        cursor.skip_blanks()
        if cursor.at_end():
            raise cursor.error(f"Unexpected end of line while parsing variable {name}")

        field = NamedField(name)
        if cursor.peek() == "{":
            read_group(cursor, field)
        else:
            field.append(read_scalar(cursor, name))

        cursor.skip_blanks()
        if not cursor.at_end():
            raise cursor.error(
                f'Error while parsing variable "{name}": '
                "Unexpected data after the variable value found"
            )

        seen.add(name)
        fields.append(field)

    return fields


def parse_text(text: str, filename: str | None = None) -> list[NamedField]:
    """Parse text exactly as it would be read back from a file."""
    return parse_lines(io.StringIO(text, newline=None), filename)


__all__ = [
    "LineCursor",
    "read_scalar",
    "read_group",
    "parse_lines",
    "parse_text",
]
