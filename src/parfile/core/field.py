"""Named, rectangular fields of scalar values."""

from __future__ import annotations

import math
from typing import Any, TextIO

from .errors import FieldAccessError
from .scalar import ScalarValue
from .types import MAX_DEPTH, Nested


class NamedField:
    """A named scalar or rectangular tensor of :class:`ScalarValue`.

    Values are stored flat in row-major order. ``dim_sizes`` holds one entry
    per nesting level, outermost first; a single field has no dimensions and
    exactly one value.
    """

    def __init__(self, name: str, dim_sizes: list[int] | tuple[int, ...] = ()):
        if len(dim_sizes) > MAX_DEPTH:
            raise FieldAccessError(f"Field {name!r}: more than {MAX_DEPTH} dimensions")
        self.name = name
        self._dim_sizes = list(dim_sizes)
        self._values: list[ScalarValue] = []

    @property
    def num_dim(self) -> int:
        return len(self._dim_sizes)

    @property
    def dim_sizes(self) -> tuple[int, ...]:
        return tuple(self._dim_sizes)

    @property
    def values(self) -> tuple[ScalarValue, ...]:
        return tuple(self._values)

    def set_dim_sizes(self, dim_sizes: list[int] | tuple[int, ...]) -> None:
        if len(dim_sizes) > MAX_DEPTH:
            raise FieldAccessError(f"Field {self.name!r}: more than {MAX_DEPTH} dimensions")
        self._dim_sizes = list(dim_sizes)

    def get_dim_size(self, k: int = 0) -> int:
        if not 0 <= k < self.num_dim:
            raise FieldAccessError(
                f"Field {self.name!r} has {self.num_dim} dimension(s), no dimension {k}"
            )
        return self._dim_sizes[k]

    def is_single_field(self) -> bool:
        return self.num_dim == 0

    def append(self, value: ScalarValue) -> None:
        """Append one value; only used while the field is being parsed."""
        self._values.append(value)

    def _offset(self, indices: tuple[int, ...]) -> int:
        if len(indices) != self.num_dim:
            raise FieldAccessError(
                f"Field {self.name!r} has {self.num_dim} dimension(s), "
                f"got {len(indices)} index(es)"
            )
        offset = 0
        for k, (index, size) in enumerate(zip(indices, self._dim_sizes)):
            if not 0 <= index < size:
                raise FieldAccessError(
                    f"Index {index} out of range [0, {size}) in dimension {k} of {self.name!r}"
                )
            offset = offset * size + index
        return offset

    def get_variable(self, *indices: int) -> ScalarValue:
        """Value at ``indices``; the number of indices must equal ``num_dim``."""
        offset = self._offset(tuple(indices))
        if offset >= len(self._values):
            raise FieldAccessError(f"Field {self.name!r} holds no value at {indices}")
        return self._values[offset]

    def replace_value(self, value: ScalarValue) -> None:
        """Replace the value of a single field."""
        if not self.is_single_field():
            raise FieldAccessError(
                f"Cannot replace value of {self.name!r}: field has {self.num_dim} dimension(s)"
            )
        if "\n" in value.text or "\r" in value.text:
            raise FieldAccessError(f"Value for {self.name!r} must not contain line breaks")
        self._values = [value]

    def to_nested(self) -> Nested:
        """Python scalar for single fields, nested lists otherwise."""
        if self.is_single_field():
            return self._values[0].value
        flat = [v.value for v in self._values]

        def build(depth: int, start: int) -> list[Any]:
            size = self._dim_sizes[depth]
            if depth == self.num_dim - 1:
                return flat[start : start + size]
            stride = math.prod(self._dim_sizes[depth + 1 :])
            return [build(depth + 1, start + i * stride) for i in range(size)]

        return build(0, 0)

    def format_value(self) -> str:
        """Value in parameter-file syntax, groups re-nested by ``dim_sizes``."""
        if self.is_single_field():
            return self._values[0].canonical()
        count = 0

        def group(depth: int) -> str:
            nonlocal count
            parts = []
            for _ in range(self._dim_sizes[depth]):
                if depth == self.num_dim - 1:
                    parts.append(self._values[count].canonical())
                    count += 1
                else:
                    parts.append(group(depth + 1))
            return "{ " + "".join(p + " " for p in parts) + "}"

        return group(0)

    def write(self, stream: TextIO) -> None:
        """Write ``<name> <value>`` followed by a newline."""
        stream.write(f"{self.name} {self.format_value()}\n")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NamedField):
            return NotImplemented
        return (
            self.name == other.name
            and self._dim_sizes == other._dim_sizes
            and self._values == other._values
        )

    def __repr__(self) -> str:
        return f"NamedField({self.name!r}, dim_sizes={self.dim_sizes}, values={len(self._values)})"


__all__ = ["NamedField"]
