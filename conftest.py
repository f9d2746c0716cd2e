import json

import cantera as ct
import pytest
import yaml

MINI_SPECIES = ("AR", "O2", "C3H8", "CO2", "H2O")


def write_subset_mechanism(path, names, source="gri30.yaml"):
    """Write a reaction-free mechanism holding ``names`` taken from ``source``."""
    species = [s for s in ct.Species.list_from_file(source) if s.name in names]
    elements = sorted({el for s in species for el in s.composition})
    doc = {
        "units": {"length": "cm", "time": "s", "quantity": "mol", "activation-energy": "cal/mol"},
        "phases": [{
            "name": "gas",
            "thermo": "ideal-gas",
            "elements": elements,
            "species": [s.name for s in species],
            "kinetics": "gas",
            "reactions": "none",
            "state": {"T": 300.0, "P": 101325.0},
        }],
        "species": [json.loads(json.dumps(s.input_data)) for s in species],
    }
    with open(path, "w") as f:
        yaml.safe_dump(doc, f, sort_keys=False)
    return path


@pytest.fixture
def mini_mech(tmp_path):
    """Mechanism with only AR, O2, C3H8, CO2 and H2O and no reactions."""
    return write_subset_mechanism(tmp_path / "mini.yaml", MINI_SPECIES)
