"""Ignition markers extracted from sampled reactor histories."""

from __future__ import annotations

from typing import Dict, Sequence

import numpy as np


def ignition_delay(
    time: np.ndarray,
    T: np.ndarray,
    Y: np.ndarray | None = None,
    species_idx: int | None = None,
) -> float | None:
    """Estimate ignition delay from temperature or species profiles.

    Uses the time of the steepest rise. Returns None when fewer than three
    samples are available.
    """
    time = np.asarray(time, dtype=float)
    if time.size < 3:
        return None
    if species_idx is not None and Y is not None:
        deriv = np.gradient(np.asarray(Y)[:, species_idx], time)
    else:
        deriv = np.gradient(np.asarray(T, dtype=float), time)
    idx = int(np.argmax(deriv))
    return float(time[idx])


def peak_time(time: np.ndarray, values: np.ndarray) -> float | None:
    """Time at which ``values`` peaks, e.g. an OH* or CH* emission marker."""
    values = np.asarray(values, dtype=float)
    if values.size == 0 or not np.any(values):
        return None
    return float(np.asarray(time, dtype=float)[int(np.argmax(values))])


# excited-state and ground-state ignition markers, in reporting order
IGNITION_MARKERS = ("OH*", "OHV", "CH*", "CHV", "OH", "CH")


def marker_peaks(
    time: np.ndarray,
    mole_fractions: np.ndarray,
    species: Sequence[str],
    markers: Sequence[str] = IGNITION_MARKERS,
) -> Dict[str, float]:
    """Peak times of the marker species that are sampled and non-zero."""
    peaks: Dict[str, float] = {}
    X = np.asarray(mole_fractions, dtype=float)
    for name in markers:
        if name not in species:
            continue
        t = peak_time(time, X[:, list(species).index(name)])
        if t is not None:
            peaks[name] = t
    return peaks
