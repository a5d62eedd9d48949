"""Typed driver configurations on top of a parameter store.

A driver can declare its parameters as a pydantic model and bind a parsed
store to it instead of calling the getters one by one::

    class DiffusionParams(BaseModel):
        tau: float
        timesteps: int
        saveName: str
        origin: tuple[float, float, float] = (0.0, 0.0, 0.0)

    params = bind(ParameterStore("diffusion.par"), DiffusionParams)

Stores can also be exported to YAML or JSON for inspection by other tools.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from .errors import NoMatchError, ParameterError, ParameterIOError
from .logging import get_logger
from .store import ParameterStore
from .types import Nested, StrPath

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class BindingError(ParameterError):
    """Store content does not satisfy a driver configuration model."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


def to_dict(store: ParameterStore) -> dict[str, Nested]:
    """Map each field name to a Python scalar or nested list, in file order."""
    return {f.name: f.to_nested() for f in store}


def bind(store: ParameterStore, model: type[ModelT], strict: bool = False) -> ModelT:
    """Validate the store against ``model``.

    Fields the model does not declare are ignored unless the model forbids
    extras. With ``strict`` every declared field must be present in the file
    even when the model gives it a default.

    Raises:
        NoMatchError: In strict mode, for the first declared field missing from the file
        BindingError: If pydantic rejects the values
    """
    data = to_dict(store)
    if strict:
        for name in model.model_fields:
            if name not in data:
                raise NoMatchError(f"No match found for {name}.")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        source = store.parameter_file_name or "<string>"
        raise BindingError(f"{source}: {e}", e.errors()) from e


def export_store(store: ParameterStore, path: StrPath) -> Path:
    """Write the store as YAML (``.yaml``/``.yml``) or JSON (anything else)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = to_dict(store)

    try:
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix.lower() in [".yaml", ".yml"]:
                yaml.safe_dump(data, f, default_flow_style=None, sort_keys=False)
            else:
                json.dump(data, f, indent=2)
    except OSError as e:
        raise ParameterIOError(f'Cannot write export file "{path}".') from e

    logger.debug(f"Exported {len(data)} field(s) to {path}", {"export": str(path)})
    return path


__all__ = [
    "BindingError",
    "to_dict",
    "bind",
    "export_store",
]
