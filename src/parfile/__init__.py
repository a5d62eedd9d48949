"""Parameter file parser for simulation drivers.

Reads the brace-structured parameter files used to configure finite-element
and level-set runs, checks their shape, and serves typed values to drivers.
"""

from .core.errors import (
    DuplicateFieldError,
    NoMatchError,
    ParameterError,
    ParameterSyntaxError,
    RaggedArrayError,
)
from .core.field import NamedField
from .core.scalar import ScalarValue, ValueKind
from .core.store import ParameterStore, add_counter_to_save_directory

__version__ = "0.1.0"

__all__ = [
    "ParameterStore",
    "NamedField",
    "ScalarValue",
    "ValueKind",
    "add_counter_to_save_directory",
    "ParameterError",
    "ParameterSyntaxError",
    "RaggedArrayError",
    "DuplicateFieldError",
    "NoMatchError",
]
