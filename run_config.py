"""
Run configuration for a shock-tube species-history simulation.

Values come from a YAML file, command-line options, or both (command line
wins), and are checked in a single pass before any simulation work starts.
"""

import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

import yaml

from mechanism.mix import atm_to_pa, parse_composition
from reactor.batch import step_count
from species_table import USER_SPECIES_KEY, output_filename

REQUIRED_FIELDS = (
    "temperature",
    "pressure",
    "mechanism",
    "composition",
    "filebase",
    "duration",
    "dt",
    "fuel",
)

FLOAT_FIELDS = ("temperature", "pressure", "duration", "dt")

# Defaults offered when prompting an operator for missing values
PROMPT_DEFAULTS = {
    "duration": "0.003",
    "dt": "0.0000015",
}

PROMPT_LABELS = {
    "temperature": "Temperature [K]",
    "pressure": "Pressure [atm]",
    "mechanism": "Mechanism file (.yaml)",
    "composition": "Test gas composition (name:frac,...)",
    "filebase": "Output file base",
    "duration": "Simulation time [s]",
    "dt": "Time step [s]",
    "fuel": "Fuel (as defined in the mechanism file)",
}


class InvalidInputError(ValueError):
    """One or more run inputs are missing or out of range."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("Invalid input: " + "; ".join(self.problems))


@dataclass
class RunConfig:
    """Inputs of one simulation run."""
    temperature: float          # K
    pressure: float             # atm
    mechanism: str              # path or Cantera data file name
    composition: str            # "name:frac,name:frac,..."
    filebase: str               # output file prefix
    duration: float             # s
    dt: float                   # s
    fuel: str                   # species name in the mechanism
    phase: Optional[str] = None                 # phase name inside the mechanism file
    user_species: str = USER_SPECIES_KEY        # sampled into the UserDefinedSpecies column
    output_dir: str = "."

    @property
    def pressure_pa(self) -> float:
        return atm_to_pa(self.pressure)

    @property
    def n_steps(self) -> int:
        return step_count(self.duration, self.dt)

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir) / output_filename(self.filebase)

    def validate(self) -> "RunConfig":
        """Check every field, raising one error that lists all problems."""
        problems = []
        for name in FLOAT_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                problems.append(f"{name} must be a number, got {value!r}")
            elif not math.isfinite(value) or value <= 0.0:
                problems.append(f"{name} must be a positive number, got {value!r}")
        for name in ("mechanism", "composition", "filebase", "fuel", "user_species"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                problems.append(f"{name} must be a non-empty string")
        if isinstance(self.composition, str) and self.composition.strip():
            try:
                parse_composition(self.composition)
            except ValueError as e:
                problems.append(str(e))
        if not problems and self.n_steps < 1:
            problems.append(f"dt ({self.dt!r} s) must not exceed duration ({self.duration!r} s)")
        if problems:
            raise InvalidInputError(problems)
        return self


def load_config(path) -> Dict[str, Any]:
    """Read a YAML mapping of run settings."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise InvalidInputError([f"{path}: expected a mapping of settings"])
    known = {f.name for f in fields(RunConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidInputError([f"{path}: unknown setting(s) {', '.join(unknown)}"])
    return data


def missing_fields(values: Mapping[str, Any]) -> List[str]:
    return [name for name in REQUIRED_FIELDS if values.get(name) in (None, "")]


def _coerce(name: str, value: Any) -> Any:
    if name in FLOAT_FIELDS and isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            raise InvalidInputError([f"{name} must be a number, got {value!r}"]) from None
    if name not in FLOAT_FIELDS and value is not None and not isinstance(value, str):
        return str(value)
    return value


def config_from_sources(
    file_values: Optional[Mapping[str, Any]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    prompt: Optional[Callable[[str, str], str]] = None,
) -> RunConfig:
    """Merge file values and overrides into a validated :class:`RunConfig`.

    ``prompt(label, default)`` is asked for each required field still missing
    after the merge; without it, missing fields are an error.
    """
    values: Dict[str, Any] = dict(file_values or {})
    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    missing = missing_fields(values)
    if missing and prompt is not None:
        for name in missing:
            values[name] = prompt(PROMPT_LABELS[name], PROMPT_DEFAULTS.get(name, ""))
        missing = missing_fields(values)
    if missing:
        raise InvalidInputError([f"missing required setting(s): {', '.join(missing)}"])

    values = {k: _coerce(k, v) for k, v in values.items()}
    return RunConfig(**values).validate()
