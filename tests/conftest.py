from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from parfile.core.store import ParameterStore

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


@pytest.fixture()
def write_par(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a parameter file into tmp_path and return its path."""

    def _write(text: str, name: str = "test.par") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def load_par(write_par) -> Callable[[str], ParameterStore]:
    def _load(text: str) -> ParameterStore:
        return ParameterStore(write_par(text))

    return _load


@pytest.fixture()
def example_par() -> Path:
    return EXAMPLES / "diffusion.par"
