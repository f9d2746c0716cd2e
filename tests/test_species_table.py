import os
import stat

import numpy as np
import pandas as pd
import pytest

from species_table import OUTPUT_SPECIES, header, lookup_names, output_filename, to_frame, write_table

EXPECTED_ORDER = [
    "HE", "AR", "N2", "O2",
    "CH2O", "CH", "CH*", "CHV", "SCH", "CH-S", "OH", "OH*", "OHV", "SOH", "OH-S", "CH3", "H",
    "H2O", "CO", "CO2", "NO", "NO2",
    "C2H4", "H2", "CH4", "C2H2", "C3H6", "C3H8", "IC4H8", "C4H8-1", "C4H8-2", "C6H6", "C7H8",
    "UserDefinedSpecies",
]


def test_fixed_species_order():
    assert list(OUTPUT_SPECIES) == EXPECTED_ORDER
    assert lookup_names("NC12H26") == ["NC12H26"] + EXPECTED_ORDER


def test_header_has_36_columns():
    cols = header("C3H8")
    assert len(cols) == 36
    assert cols[:3] == ["time", "C3H8", "HE"]
    assert cols[8] == "CH*-radical"
    assert "Ethylene C2H4" in cols
    assert cols[-1] == "UserDefinedSpecies"


def test_user_species_replaces_placeholder_lookup_only():
    names = lookup_names("C3H8", user_species="IC8H18")
    assert names[-1] == "IC8H18"
    assert header("C3H8")[-1] == "UserDefinedSpecies"


def test_output_filename():
    assert output_filename("20240104") == "20240104_cantera.csv"


def test_to_frame_shape_mismatch():
    with pytest.raises(ValueError):
        to_frame(np.arange(3.0), np.zeros((3, 5)), "C3H8")


def test_write_table_overwrites_in_place(tmp_path):
    path = tmp_path / output_filename("run")
    path.write_text("stale\n")
    frame = to_frame(np.array([1e-4, 2e-4]), np.full((2, 35), 0.5), "C3H8")
    write_table(frame, path)

    df = pd.read_csv(path)
    assert list(df.columns) == header("C3H8")
    assert len(df) == 2
    assert [p.name for p in tmp_path.iterdir()] == [path.name]


def test_write_table_honours_umask(tmp_path):
    umask = os.umask(0o027)
    try:
        path = write_table(to_frame(np.array([1e-4]), np.zeros((1, 35)), "H2"), tmp_path / "run_cantera.csv")
    finally:
        os.umask(umask)
    assert stat.S_IMODE(path.stat().st_mode) == 0o640
