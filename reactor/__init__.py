"""Reactor models for shock-tube species histories."""

from .batch import (
    SampleHistory,
    SolverNonConvergenceError,
    make_network,
    make_reactor,
    run_fixed_step,
    step_count,
)

__all__ = [
    "SampleHistory",
    "SolverNonConvergenceError",
    "make_network",
    "make_reactor",
    "run_fixed_step",
    "step_count",
]
