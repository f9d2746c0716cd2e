"""Test-gas mixture helpers: composition strings and unit conversion."""

from __future__ import annotations

from typing import Dict, Mapping

ONE_ATM_PA = 101325.0


def atm_to_pa(pressure_atm: float) -> float:
    """Convert a pressure in atmospheres to pascals."""
    return pressure_atm * ONE_ATM_PA


def parse_composition(text: str) -> Dict[str, float]:
    """Parse ``'Ar:0.99,O2:0.009,C3H8:0.001'`` into a mole-fraction mapping.

    Whitespace around names and values is ignored and empty entries are
    skipped. Repeated names are summed. Values are not normalised; Cantera
    does that when the state is set.
    """
    if not isinstance(text, str):
        raise ValueError(f"Composition must be a string, got {type(text).__name__}")

    x: Dict[str, float] = {}
    for entry in text.split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, sep, value = entry.rpartition(":")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"Malformed composition entry '{entry}' (expected name:value)")
        try:
            frac = float(value)
        except ValueError:
            raise ValueError(f"Non-numeric mole fraction for '{name}': '{value.strip()}'") from None
        if frac != frac or frac < 0.0:
            raise ValueError(f"Mole fraction for '{name}' must be non-negative, got {value.strip()}")
        x[name] = x.get(name, 0.0) + frac

    if not x:
        raise ValueError("Composition is empty")
    if sum(x.values()) <= 0.0:
        raise ValueError("Composition has no non-zero mole fractions")
    return x


def format_composition(x: Mapping[str, float]) -> str:
    """Inverse of :func:`parse_composition`, used as the re-prompt default."""
    return ",".join(f"{name}:{frac:.12g}" for name, frac in x.items())
