#!/usr/bin/env python3
"""Shock-tube species histories - command line interface.

Solves a kinetic mechanism in a closed zero-D reactor at the post-shock
conditions of a shock-tube experiment and writes mole-fraction histories to
``<filebase>_cantera.csv``.
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Callable, Optional, Tuple

from mechanism import Mechanism, UnknownSpeciesError, resolve_state
from metrics import marker_peaks
from reactor import SampleHistory, SolverNonConvergenceError, make_network, make_reactor, run_fixed_step
from run_config import RunConfig, config_from_sources, load_config
from species_table import lookup_names, to_frame, write_table

logger = logging.getLogger(__name__)

Prompt = Callable[[str, str], str]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Zero-D shock-tube reactor: species mole-fraction histories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Propane oxidation behind a reflected shock
  shock-kinetics --mechanism mech.yaml --temperature 1200 --pressure 2 \\
      --composition "Ar:0.99,O2:0.009,C3H8:0.001" --fuel C3H8 \\
      --duration 0.003 --dt 1.5e-6 --filebase 20240104

  # Settings from a YAML file, overriding the time step
  shock-kinetics --config run.yaml --dt 1e-6

  # Ask for anything missing and allow one corrected composition
  shock-kinetics --config run.yaml --interactive
        """
    )
    parser.add_argument("--config", help="YAML file of run settings")
    parser.add_argument("--temperature", "-T", type=float, help="Test section temperature, e.g. T2 or T5 [K]")
    parser.add_argument("--pressure", "-P", type=float, help="Test section pressure, e.g. P2 or P5 [atm]")
    parser.add_argument("--mechanism", help="Mechanism file (.yaml)")
    parser.add_argument("--phase", help="Phase name inside the mechanism file (e.g. a real-gas phase)")
    parser.add_argument("--composition", help="Test gas mole fractions, e.g. 'Ar:0.99,O2:0.009,C3H8:0.001'")
    parser.add_argument("--fuel", help="Fuel species name as defined in the mechanism")
    parser.add_argument("--duration", type=float, help="Simulation time [s]")
    parser.add_argument("--dt", type=float, help="Output time step [s]")
    parser.add_argument("--filebase", help="Output file prefix; results go to <filebase>_cantera.csv")
    parser.add_argument("--output-dir", help="Directory for the output file (default: current directory)")
    parser.add_argument("--user-species", help="Species sampled into the UserDefinedSpecies column")
    parser.add_argument("--interactive", "-i", action="store_true",
                        help="Prompt for missing settings and for one corrected composition")
    parser.add_argument("--plot", action="store_true", help="Also save a PNG of the species histories")
    parser.add_argument("--log-file", help="Also write log messages to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    return parser


def ask(message: str, default: str = "") -> str:
    """Read one value from the operator; an empty reply keeps ``default``."""
    suffix = f" [{default}]" if default else ""
    reply = input(f"{message}{suffix}: ").strip()
    return reply or default


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    handlers = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def run(config: RunConfig, prompt: Optional[Prompt] = None) -> Tuple[Path, SampleHistory]:
    """Simulate one configured run and write its species table.

    Nothing is written unless the whole integration succeeds.
    """
    mech = Mechanism(config.mechanism, config.phase)
    fuel = mech.resolve(config.fuel)
    if fuel is None:
        raise UnknownSpeciesError([config.fuel], mech.file_path)

    gas = resolve_state(mech, config.temperature, config.pressure_pa, config.composition, prompt)
    reactor = make_reactor(gas)
    net = make_network([reactor])

    species = lookup_names(fuel, config.user_species)
    indices = [mech.species_index(s) for s in species]
    absent = [s for s, i in zip(species, indices) if i is None]
    if absent:
        logger.info("Not in mechanism, written as zeros: %s", ", ".join(absent))

    history = run_fixed_step(net, reactor, config.duration, config.dt, species, indices)
    if history.ignition_delay is not None:
        logger.info("Max dT/dt at t=%.4e s", history.ignition_delay)
    for name, t_peak in marker_peaks(history.time, history.mole_fractions, history.species).items():
        logger.info("%s peak at t=%.4e s", name, t_peak)

    frame = to_frame(history.time, history.mole_fractions, config.fuel)
    path = write_table(frame, config.output_path)
    return path, history


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    start = time.perf_counter()
    prompt = ask if args.interactive else None
    overrides = {
        "temperature": args.temperature,
        "pressure": args.pressure,
        "mechanism": args.mechanism,
        "phase": args.phase,
        "composition": args.composition,
        "fuel": args.fuel,
        "duration": args.duration,
        "dt": args.dt,
        "filebase": args.filebase,
        "output_dir": args.output_dir,
        "user_species": args.user_species,
    }

    try:
        file_values = load_config(args.config) if args.config else {}
        config = config_from_sources(file_values, overrides, prompt)
        path, history = run(config, prompt)
        if args.plot:
            from plot_results import plot_species_history
            plot_species_history(path)
    # also InvalidInputError, UnknownSpeciesError and malformed re-prompt compositions
    except (ValueError, SolverNonConvergenceError) as e:
        logger.debug("Run aborted", exc_info=True)
        print(f"Error: {e}")
        return 1
    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 2

    elapsed = time.perf_counter() - start
    print(f"Wrote {len(history)} steps to: {path}")
    print(f"Elapsed time is {elapsed:.2f} seconds.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
