"""Custom exception types for parameter file handling."""

from __future__ import annotations


class ParameterError(Exception):
    """Base exception for all parameter file errors."""

    pass


class ParameterSyntaxError(ParameterError):
    """Malformed parameter file content.

    Carries the originating file name and the 1-based line number when they
    are known so that drivers can point the operator at the offending entry.
    """

    def __init__(self, message: str, filename: str | None = None, line: int | None = None):
        self.message = message
        self.filename = filename
        self.line = line
        super().__init__(self._format())

    def _format(self) -> str:
        if self.filename is None and self.line is None:
            return self.message
        where = self.filename or "<string>"
        if self.line is not None:
            where = f"{where}:{self.line}"
        return f"{where}: {self.message}"


class RaggedArrayError(ParameterSyntaxError):
    """Sibling groups at one depth differ in size."""

    pass


class DepthExceededError(ParameterSyntaxError):
    """A group is nested deeper than allowed."""

    pass


class DuplicateFieldError(ParameterSyntaxError):
    """A field name is defined more than once."""

    pass


class NoMatchError(ParameterError, LookupError):
    """No field matches the requested name, dimensionality and type."""

    pass


class FieldAccessError(ParameterError, IndexError):
    """Wrong index arity or index out of range on a field."""

    pass


class ValueKindError(ParameterError, TypeError):
    """Numeric access on a string value."""

    pass


class ParameterIOError(ParameterError, OSError):
    """Parameter file cannot be opened or written."""

    pass


class UsageError(ParameterError):
    """Bad command line for a parameter-driven program."""

    pass


__all__ = [
    "ParameterError",
    "ParameterSyntaxError",
    "RaggedArrayError",
    "DepthExceededError",
    "DuplicateFieldError",
    "NoMatchError",
    "FieldAccessError",
    "ValueKindError",
    "ParameterIOError",
    "UsageError",
]
