from pathlib import Path

import pytest
import yaml

from run_config import InvalidInputError, RunConfig, config_from_sources, load_config, missing_fields

BASE = {
    "temperature": 1200.0,
    "pressure": 2.0,
    "mechanism": "mech.yaml",
    "composition": "Ar:0.99,O2:0.009,C3H8:0.001",
    "filebase": "20240104",
    "duration": 0.001,
    "dt": 0.0001,
    "fuel": "C3H8",
}


def test_derived_quantities():
    cfg = RunConfig(**BASE).validate()
    assert cfg.pressure_pa == 2.0 * 101325.0
    assert cfg.n_steps == 10
    assert cfg.output_path == Path(".") / "20240104_cantera.csv"
    assert cfg.user_species == "UserDefinedSpecies"


def test_overrides_win_over_file_values():
    cfg = config_from_sources(BASE, {"dt": 0.0002, "fuel": None})
    assert cfg.dt == 0.0002
    assert cfg.fuel == "C3H8"
    assert cfg.n_steps == 5


def test_load_config_yaml(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text(yaml.safe_dump({**BASE, "filebase": 20240104}))
    cfg = config_from_sources(load_config(path))
    assert cfg.filebase == "20240104"
    assert cfg.temperature == 1200.0


def test_load_config_rejects_unknown_keys(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text(yaml.safe_dump({**BASE, "timestep": 1e-6}))
    with pytest.raises(InvalidInputError, match="timestep"):
        load_config(path)


def test_missing_fields_reported():
    values = dict(BASE)
    del values["fuel"]
    del values["dt"]
    assert missing_fields(values) == ["dt", "fuel"]
    with pytest.raises(InvalidInputError, match="dt, fuel"):
        config_from_sources(values)


def test_prompt_fills_missing_fields():
    values = dict(BASE)
    del values["duration"]
    del values["dt"]
    del values["fuel"]
    asked = {}

    def prompt(label, default):
        asked[label] = default
        return default or "C3H8"

    cfg = config_from_sources(values, prompt=prompt)
    assert asked == {
        "Simulation time [s]": "0.003",
        "Time step [s]": "0.0000015",
        "Fuel (as defined in the mechanism file)": "",
    }
    assert cfg.duration == 0.003
    assert cfg.dt == 0.0000015
    assert cfg.n_steps == 2000


@pytest.mark.parametrize(
    "field, value",
    [
        ("temperature", -300.0),
        ("pressure", 0.0),
        ("duration", float("inf")),
        ("dt", "fast"),
        ("composition", "Ar;0.99"),
        ("filebase", "  "),
    ],
)
def test_invalid_values(field, value):
    with pytest.raises(InvalidInputError) as info:
        config_from_sources({**BASE, field: value})
    assert any(field in p or "composition" in p.lower() for p in info.value.problems)


def test_dt_longer_than_duration():
    with pytest.raises(InvalidInputError, match="must not exceed duration"):
        config_from_sources({**BASE, "duration": 1e-5, "dt": 1e-4})


def test_all_problems_listed_together():
    with pytest.raises(InvalidInputError) as info:
        RunConfig(**{**BASE, "temperature": -1.0, "pressure": -1.0}).validate()
    assert len(info.value.problems) == 2
