"""Closed fixed-volume reactor integrated on a fixed output grid."""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import cantera as ct
import numpy as np

from metrics import ignition_delay

logger = logging.getLogger(__name__)

# tolerance on duration/dt so exact multiples are not lost to rounding
STEP_COUNT_RTOL = 1e-9


class SolverNonConvergenceError(RuntimeError):
    """The reactor network could not be advanced to a requested time."""

    def __init__(self, step: int, target_time: float, cause: Exception):
        self.step = step
        self.target_time = target_time
        super().__init__(f"Integration failed at step {step} (t={target_time:.6e} s): {cause}")


@dataclass
class SampleHistory:
    """Sampled reactor history, one row per fixed time step."""

    time: np.ndarray
    temperature: np.ndarray
    mole_fractions: np.ndarray
    species: List[str]
    ignition_delay: Optional[float] = None

    def __len__(self) -> int:
        return len(self.time)


def step_count(duration: float, dt: float) -> int:
    """Number of whole ``dt`` steps that fit in ``duration``.

    A trailing partial step is dropped.
    """
    ratio = duration / dt
    return int(math.floor(ratio * (1.0 + STEP_COUNT_RTOL)))


def make_reactor(gas: ct.Solution) -> ct.Reactor:
    """Closed, adiabatic, fixed-volume reactor using the phase's own equation of state."""
    return ct.Reactor(gas, energy="on", clone=False)


def make_network(reactors: Sequence[ct.Reactor]) -> ct.ReactorNet:
    return ct.ReactorNet(list(reactors))


def run_fixed_step(
    net: ct.ReactorNet,
    reactor: ct.Reactor,
    duration: float,
    dt: float,
    species: Sequence[str],
    species_index: Optional[Sequence[Optional[int]]] = None,
    detect_ignition: bool = True,
) -> SampleHistory:
    """Advance ``net`` to ``dt, 2*dt, ...`` and sample ``reactor`` after each step.

    ``species_index`` gives the column's index in the reactor's phase, or None
    for species the mechanism lacks (sampled as 0.0). When omitted it is
    looked up by exact name.
    """
    nsteps = step_count(duration, dt)
    names = list(species)
    if species_index is None:
        known = set(reactor.phase.species_names)
        species_index = [reactor.phase.species_index(s) if s in known else None for s in names]
    if len(species_index) != len(names):
        raise ValueError("species_index length must match species")

    present = [(col, idx) for col, idx in enumerate(species_index) if idx is not None]
    cols = np.array([c for c, _ in present], dtype=int)
    idxs = np.array([i for _, i in present], dtype=int)

    times = np.zeros(nsteps)
    temps = np.zeros(nsteps)
    X = np.zeros((nsteps, len(names)))

    logger.info("Integrating %d steps of %.3e s (t_end=%.3e s)", nsteps, dt, nsteps * dt)
    t = 0.0
    for n in range(nsteps):
        t += dt
        try:
            net.advance(t)
        except ct.CanteraError as e:
            raise SolverNonConvergenceError(n + 1, t, e) from e
        times[n] = net.time
        temps[n] = reactor.T
        if cols.size:
            X[n, cols] = reactor.phase.X[idxs]
        if logger.isEnabledFor(logging.DEBUG) and (n + 1) % max(nsteps // 10, 1) == 0:
            logger.debug("step %d/%d: t=%.4e s, T=%.1f K", n + 1, nsteps, times[n], temps[n])

    delay = None
    if detect_ignition:
        delay = ignition_delay(times, temps)

    return SampleHistory(times, temps, X, names, ignition_delay=delay)
