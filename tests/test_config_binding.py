"""Test pydantic binding and YAML/JSON export of parameter stores."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from pydantic import BaseModel, Field, field_validator
from parfile.core.config import BindingError, bind, export_store, to_dict
from parfile.core.errors import NoMatchError
from parfile.core.store import ParameterStore


class DiffusionParams(BaseModel):
    """Parameters of a level set diffusion driver."""

    tau: float
    timesteps: int
    saveName: str
    levels: list[int]
    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)
    useMultigrid: bool = False

    @field_validator("tau")
    @classmethod
    def validate_tau(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"tau must be positive, got {v}")
        return v


class NeedsEpsilon(BaseModel):
    epsilon: float = Field(default=1e-6)


def test_to_dict_nests_arrays():
    store = ParameterStore.from_string('a 1\nb "x y"\nc { {1 2} {3 4} }\nd { 0.5 }\n')
    assert to_dict(store) == {"a": 1, "b": "x y", "c": [[1, 2], [3, 4]], "d": [0.5]}
    assert list(to_dict(store)) == ["a", "b", "c", "d"]


def test_bind_example(example_par: Path):
    params = bind(ParameterStore(example_par), DiffusionParams)
    assert params.tau == 0.25
    assert params.timesteps == 100
    assert params.levels == [2, 3, 4]
    assert params.origin == (0.0, 0.0, -1.5)
    assert params.useMultigrid is True


def test_bind_rejects_invalid_values():
    store = ParameterStore.from_string(
        "tau -1\ntimesteps 3\nsaveName out\nlevels { 1 }\n", filename="bad.par"
    )
    with pytest.raises(BindingError, match="tau must be positive") as info:
        bind(store, DiffusionParams)
    assert str(info.value).startswith("bad.par:")
    assert info.value.errors[0]["loc"] == ("tau",)


def test_bind_reports_missing_required():
    store = ParameterStore.from_string("tau 0.1\n")
    with pytest.raises(BindingError, match="timesteps"):
        bind(store, DiffusionParams)


def test_bind_strict_requires_defaults_in_file():
    store = ParameterStore.from_string("other 1\n")
    assert bind(store, NeedsEpsilon).epsilon == 1e-6
    with pytest.raises(NoMatchError, match="epsilon"):
        bind(store, NeedsEpsilon, strict=True)


def test_export_yaml(example_par: Path, tmp_path: Path):
    out = export_store(ParameterStore(example_par), tmp_path / "run.yaml")
    data = yaml.safe_load(out.read_text())
    assert data["timesteps"] == 100
    assert data["tensor"][2] == [0, 0, 2.5]
    assert data["loadName"] == "data/volume 64.bz2"


def test_export_json(example_par: Path, tmp_path: Path):
    out = export_store(ParameterStore(example_par), tmp_path / "nested" / "run.json")
    data = json.loads(out.read_text())
    assert data["origin"] == [0.0, 0.0, -1.5]
    assert list(data)[0] == "loadName"
