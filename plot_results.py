#!/usr/bin/env python3
"""
Plot species histories from a ``*_cantera.csv`` table.

Columns that are zero for the whole run (species the mechanism lacks) are
skipped.
"""

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

logger = logging.getLogger(__name__)

plt.rcParams.update({
    'font.size': 12,
    'axes.labelsize': 12,
    'legend.fontsize': 9,
    'savefig.dpi': 300,
    'savefig.bbox': 'tight',
})


def plot_species_history(
    csv_path,
    species: Optional[Sequence[str]] = None,
    out_base=None,
    log_scale: bool = True,
) -> Optional[Path]:
    """Plot mole fraction against time for the selected columns.

    Args:
        csv_path: Table written by the simulation
        species: Column labels to plot; defaults to every non-zero column
        out_base: Output path without extension; defaults to the CSV stem
        log_scale: Use a logarithmic mole-fraction axis

    Returns:
        Path of the PNG written, or None if nothing was plottable.
    """
    csv_path = Path(csv_path)
    df = pd.read_csv(csv_path)
    time_col = df.columns[0]
    candidates = list(species) if species else list(df.columns[1:])
    missing = [s for s in candidates if s not in df.columns]
    if missing:
        raise KeyError(f"Columns not in {csv_path.name}: {', '.join(missing)}")
    plotted = [s for s in candidates if (df[s] > 0).any()]
    if not plotted:
        logger.warning("No non-zero species columns in %s, nothing to plot", csv_path)
        return None

    fig, ax = plt.subplots(figsize=(8, 5))
    t_ms = df[time_col] * 1e3
    for s in plotted:
        ax.plot(t_ms, df[s], label=s)
    if log_scale:
        ax.set_yscale("log")
    ax.set_xlabel("Time [ms]")
    ax.set_ylabel("Mole fraction [-]")
    ax.grid(True, alpha=0.3)
    ax.legend(frameon=False, ncol=2)

    out = Path(out_base) if out_base else csv_path.with_suffix("")
    png = out.with_name(out.name + ".png")
    png.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(png)
    plt.close(fig)
    logger.info("Saved species plot to %s", png)
    return png


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Plot species histories from a *_cantera.csv file")
    parser.add_argument("csv", help="Species history CSV")
    parser.add_argument("--species", nargs="+", help="Column labels to plot")
    parser.add_argument("--out", help="Output path without extension")
    parser.add_argument("--linear", action="store_true", help="Linear mole-fraction axis")
    args = parser.parse_args(argv)

    png = plot_species_history(args.csv, args.species, args.out, log_scale=not args.linear)
    if png is None:
        print("Nothing to plot")
        return 1
    print(f"Plot saved to: {png}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
