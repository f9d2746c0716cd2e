"""Output columns of the species-history table and the CSV writer.

``OUTPUT_SPECIES`` is the one place the sampled species are listed: the
sampling loop reads the lookup names from it and the writer reads the header
labels, so the two cannot drift apart. The fuel column is inserted ahead of
the fixed list at run time.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections import OrderedDict
from pathlib import Path
from typing import List, Tuple, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

USER_SPECIES_KEY = "UserDefinedSpecies"

# key -> (mechanism lookup name, header label)
OUTPUT_SPECIES: "OrderedDict[str, Tuple[str, str]]" = OrderedDict([
    # other reactants
    ("HE", ("HE", "HE")),
    ("AR", ("AR", "AR")),
    ("N2", ("N2", "N2")),
    ("O2", ("O2", "O2")),
    # ignition markers
    ("CH2O", ("CH2O", "CH2O")),
    ("CH", ("CH", "CH")),
    ("CH*", ("CH*", "CH*-radical")),
    ("CHV", ("CHV", "CHV-radical")),
    ("SCH", ("SCH", "SCH-radical")),
    ("CH-S", ("CH-S", "CH-S-radical")),
    ("OH", ("OH", "OH")),
    ("OH*", ("OH*", "OH*-radical")),
    ("OHV", ("OHV", "OHV-radical")),
    ("SOH", ("SOH", "SOH-radical")),
    ("OH-S", ("OH-S", "OH-S-radical")),
    ("CH3", ("CH3", "CH3")),
    ("H", ("H", "H")),
    # products
    ("H2O", ("H2O", "H2O")),
    ("CO", ("CO", "CO")),
    ("CO2", ("CO2", "CO2")),
    ("NO", ("NO", "NO")),
    ("NO2", ("NO2", "NO2")),
    # HyChem intermediates
    ("C2H4", ("C2H4", "Ethylene C2H4")),
    ("H2", ("H2", "Hydrogen H2")),
    ("CH4", ("CH4", "Methane CH4")),
    ("C2H2", ("C2H2", "acetylene C2H2")),
    ("C3H6", ("C3H6", "Propene C3H6")),
    ("C3H8", ("C3H8", "Propane C3H8")),
    ("IC4H8", ("IC4H8", "iso-Butene IC4H8")),
    ("C4H8-1", ("C4H8-1", "1-butene C4H8-1")),
    ("C4H8-2", ("C4H8-2", "2-Butene C4H8-2")),
    ("C6H6", ("C6H6", "Benzene C6H6")),
    ("C7H8", ("C7H8", "Toluene C7H8")),
    (USER_SPECIES_KEY, (USER_SPECIES_KEY, USER_SPECIES_KEY)),
])

TIME_LABEL = "time"


def lookup_names(fuel: str, user_species: str = USER_SPECIES_KEY) -> List[str]:
    """Mechanism names to sample, in column order (fuel first)."""
    names = [fuel]
    for key, (lookup, _) in OUTPUT_SPECIES.items():
        names.append(user_species if key == USER_SPECIES_KEY else lookup)
    return names


def header(fuel: str) -> List[str]:
    """Column labels of the output table, ``time`` first."""
    return [TIME_LABEL, fuel] + [label for _, label in OUTPUT_SPECIES.values()]


def output_filename(filebase: str) -> str:
    return f"{filebase}_cantera.csv"


def to_frame(time: np.ndarray, mole_fractions: np.ndarray, fuel: str) -> pd.DataFrame:
    """Assemble the time column and sampled mole fractions into one table."""
    columns = header(fuel)
    data = np.column_stack([np.asarray(time, dtype=float), np.asarray(mole_fractions, dtype=float)])
    if data.shape[1] != len(columns):
        raise ValueError(
            f"Sample width {data.shape[1] - 1} does not match the {len(columns) - 1} output species"
        )
    return pd.DataFrame(data, columns=columns)


def write_table(frame: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Write ``frame`` as CSV, replacing any existing file in one step."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", newline="", encoding="utf-8") as f:
            frame.to_csv(f, index=False)
        umask = os.umask(0)
        os.umask(umask)
        os.chmod(tmp, 0o666 & ~umask)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
    logger.info("Wrote %d rows x %d columns to %s", len(frame), frame.shape[1], path)
    return path
