"""Type definitions and aliases for parameter handling."""

from __future__ import annotations

import os
from typing import Any, Union

# Python value of a single scalar entry
PyScalar = Union[int, float, str]

# Scalar or arbitrarily nested list of scalars, as produced by ``to_dict``
Nested = Union[PyScalar, list[Any]]

StrPath = Union[str, "os.PathLike[str]"]

# Deepest group nesting the grammar accepts
MAX_DEPTH = 16

__all__ = [
    "PyScalar",
    "Nested",
    "StrPath",
    "MAX_DEPTH",
]
