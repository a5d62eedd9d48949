"""Parameter store: parsed fields and the typed query API.

Drivers construct a :class:`ParameterStore` from a parameter file and read
their settings through ``get_int``, ``get_double`` and ``get_string``::

    params = ParameterStore.from_argv(sys.argv, "default.par")
    steps = params.get_int("timesteps")
    tau = params.get_double("tau")
    origin = params.get_double("origin", 1)

Getters raise :class:`NoMatchError` when the name is missing, the number of
indices does not match the field's dimensionality, or the value kind does
not fit. The ``*_or_default`` variants and :meth:`has_variable` are the only
way to treat a missing field as optional.
"""

from __future__ import annotations

import copy
import io
import re
import sys
from pathlib import Path
from typing import Sequence, TextIO

from .errors import FieldAccessError, NoMatchError, ParameterIOError, UsageError
from .field import NamedField
from .logging import get_logger
from .scalar import ScalarValue, ValueKind
from .scanner import parse_lines, parse_text
from .types import PyScalar, StrPath

logger = get_logger(__name__)

_NUMERIC_KINDS = (ValueKind.INTEGER, ValueKind.FLOAT)
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


class ParameterStore:
    """Ordered collection of :class:`NamedField` read from a parameter file.

    Args:
        path: Parameter file to read; ``None`` creates an empty store
        echo: Write ``name = value`` to ``echo_stream`` on every successful query
        echo_stream: Trace sink for echo mode, stdout by default
    """

    def __init__(
        self,
        path: StrPath | None = None,
        echo: bool = False,
        echo_stream: TextIO | None = None,
    ):
        self._fields: list[NamedField] = []
        self.echo = echo
        self._echo_stream = echo_stream
        self.parameter_file_name: str | None = None
        if path is not None:
            self.initialize(path)

    @classmethod
    def from_argv(
        cls,
        argv: Sequence[str],
        default_path: StrPath,
        echo: bool = False,
        echo_stream: TextIO | None = None,
    ) -> ParameterStore:
        """Build a store from a program's argument list.

        ``argv[0]`` is the program name. One further argument names the
        parameter file; without it ``default_path`` is used.

        Raises:
            UsageError: If more than one argument follows the program name
        """
        if len(argv) > 2:
            raise UsageError(f"USAGE: {argv[0]} <parameterfile>")
        path = argv[1] if len(argv) == 2 else default_path
        logger.info(f"Reading parameters from {path}")
        return cls(path, echo=echo, echo_stream=echo_stream)

    @classmethod
    def from_string(cls, text: str, filename: str | None = None, echo: bool = False) -> ParameterStore:
        store = cls(echo=echo)
        store._fields = parse_text(text, filename)
        store.parameter_file_name = filename
        return store

    def initialize(self, path: StrPath) -> None:
        """Read and parse ``path``, replacing the current fields.

        Raises:
            ParameterIOError: If the file cannot be opened
            ParameterSyntaxError: If the file content is malformed
        """
        filename = str(path)
        try:
            fh = open(filename, encoding="utf-8")
        except OSError as e:
            raise ParameterIOError(f'ParameterParser: Can\'t open file "{filename}".') from e
        with fh:
            fields = parse_lines(fh, filename)
        self._fields = fields
        self.parameter_file_name = filename
        logger.bind(parameter_file=filename).debug(
            f"Parsed {len(fields)} field(s) from {filename}", {"fields": len(fields)}
        )

    def copy(self) -> ParameterStore:
        """Independent copy; patching it leaves this store untouched."""
        return copy.deepcopy(self)

    def __deepcopy__(self, memo: dict) -> ParameterStore:
        other = ParameterStore(echo=self.echo, echo_stream=self._echo_stream)
        other._fields = copy.deepcopy(self._fields, memo)
        other.parameter_file_name = self.parameter_file_name
        return other

    # -- inspection ---------------------------------------------------------

    @property
    def fields(self) -> tuple[NamedField, ...]:
        return tuple(self._fields)

    @property
    def echo_stream(self) -> TextIO:
        return self._echo_stream if self._echo_stream is not None else sys.stdout

    def set_echo(self, echo: bool, stream: TextIO | None = None) -> None:
        self.echo = echo
        if stream is not None:
            self._echo_stream = stream

    def names(self) -> list[str]:
        return [f.name for f in self._fields]

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self):
        return iter(self._fields)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_variable(name)

    def has_variable(self, name: str) -> bool:
        """True if a field called ``name`` exists, whatever its type or shape."""
        return any(f.name == name for f in self._fields)

    def check_variable(self, name: str) -> bool:
        """Like :meth:`has_variable`, but log a warning when the field is missing."""
        if self.has_variable(name):
            return True
        logger.bind(parameter_file=self.parameter_file_name).warning(
            f'Parameter file "{self.parameter_file_name}" is supposed to contain field "{name}".',
            {"field": name},
        )
        return False

    def find_field(self, name: str) -> NamedField:
        for f in self._fields:
            if f.name == name:
                return f
        raise NoMatchError(f"No match found for {name}.")

    def get_num_dim(self, name: str) -> int:
        return self.find_field(name).num_dim

    def get_dim_size(self, name: str, k: int = 0) -> int:
        return self.find_field(name).get_dim_size(k)

    # -- typed queries ------------------------------------------------------

    def _lookup(
        self,
        name: str,
        indices: tuple[int, ...],
        kinds: tuple[ValueKind, ...] | None,
        label: str,
    ) -> ScalarValue:
        for f in self._fields:
            if f.name == name and f.num_dim == len(indices):
                value = f.get_variable(*indices)
                if kinds is None or value.kind in kinds:
                    return value
        prefix = f"No match found for {label} " if label else "No match found for "
        raise NoMatchError(f"{prefix}{name}")

    def _echo(self, name: str, shown: object) -> None:
        if self.echo:
            self.echo_stream.write(f"{name} = {shown}\n")

    def get_int(self, name: str, *indices: int) -> int:
        """Integer value of ``name`` at ``indices``."""
        result = self._lookup(name, indices, (ValueKind.INTEGER,), "integer").as_int()
        self._echo(name, result)
        return result

    def get_double(self, name: str, *indices: int) -> float:
        """Floating point value of ``name``; integer fields are widened."""
        result = self._lookup(name, indices, _NUMERIC_KINDS, "double").as_float()
        self._echo(name, result)
        return result

    def get_string(self, name: str, *indices: int) -> str:
        """Text of ``name`` at ``indices``; numeric fields return their token."""
        result = self._lookup(name, indices, None, "").as_str()
        self._echo(name, result)
        return result

    def get_int_or_default(self, name: str, default: int) -> int:
        return self.get_int(name) if self.has_variable(name) else default

    def get_double_or_default(self, name: str, default: float) -> float:
        return self.get_double(name) if self.has_variable(name) else default

    def get_string_or_default(self, name: str, default: str) -> str:
        return self.get_string(name) if self.has_variable(name) else default

    def check_and_get_bool(self, name: str) -> bool:
        """True iff ``name`` exists and is the single integer 1."""
        if not self.has_variable(name):
            return False
        field = self.find_field(name)
        if not field.is_single_field() or field.get_variable().kind is not ValueKind.INTEGER:
            return False
        return self.get_int(name) == 1

    def get_int_vec(self, name: str) -> list[int]:
        """All entries of a one-dimensional integer field."""
        size = self.get_dim_size(name)
        return [self.get_int(name, i) for i in range(size)]

    # -- modification and output --------------------------------------------

    def change_variable_value(self, name: str, new_value: PyScalar) -> None:
        """Replace the value of the single field ``name``.

        ``int`` and ``float`` keep their numeric kind, anything else is
        stored as a string.

        Raises:
            NoMatchError: If no field is called ``name``
            FieldAccessError: If the field is not a single field
        """
        field = self.find_field(name)
        field.replace_value(ScalarValue.from_python(new_value))
        logger.debug(f"Changed {name} to {new_value}", {"field": name, "value": new_value})

    def dump(self, stream: TextIO | None = None) -> None:
        """Write all fields in parameter file syntax, in file order."""
        out = stream if stream is not None else sys.stdout
        for f in self._fields:
            f.write(out)

    def dumps(self) -> str:
        buf = io.StringIO()
        self.dump(buf)
        return buf.getvalue()

    def dump_to_file(self, filename: StrPath, directory: StrPath | None = None) -> Path:
        """Write all fields to ``directory/filename`` and return the path."""
        out_path = Path(directory) / filename if directory is not None else Path(filename)
        try:
            with open(out_path, "w", encoding="utf-8") as fh:
                self.dump(fh)
        except OSError as e:
            raise ParameterIOError(f'Cannot write parameter file "{out_path}".') from e
        return out_path

    def __repr__(self) -> str:
        return f"ParameterStore({self.parameter_file_name!r}, fields={self.names()})"


def add_counter_to_save_directory(
    store: ParameterStore,
    counter_file: StrPath,
    key: str = "saveDirectory",
) -> int:
    """Number the save directory of a run.

    Reads the run counter from ``counter_file`` (created with 0 when
    missing), increments and stores it, and appends ``-<counter>`` to the
    string field ``key``. Returns the new counter.

    Like C ``atoi``, only the leading integer of the first line counts; a
    file without one reads as 0. ``key`` is looked up before the counter
    file is touched.

    Raises:
        NoMatchError: If ``key`` is not a single field of ``store``
        ParameterIOError: If the counter file cannot be read or written
    """
    save_directory = store.get_string(key)
    counter_path = Path(counter_file)
    try:
        if not counter_path.exists():
            counter_path.write_text("0\n")
        first_line = next(iter(counter_path.read_text().splitlines()), "")
        match = _LEADING_INT.match(first_line)
        counter = int(match.group(1)) + 1 if match else 1
        counter_path.write_text(f"{counter}\n")
    except OSError as e:
        raise ParameterIOError(f'Cannot update counter file "{counter_path}".') from e

    store.change_variable_value(key, f"{save_directory}-{counter}")
    logger.bind(parameter_file=store.parameter_file_name).info(
        f"Numbered save directory {key} as run {counter}", {"field": key, "counter": counter}
    )
    return counter


__all__ = [
    "ParameterStore",
    "add_counter_to_save_directory",
]
