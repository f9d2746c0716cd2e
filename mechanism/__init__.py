from .loader import Mechanism, UnknownSpeciesError, resolve_state
from .mix import ONE_ATM_PA, atm_to_pa, format_composition, parse_composition

__all__ = [
    "Mechanism",
    "UnknownSpeciesError",
    "resolve_state",
    "ONE_ATM_PA",
    "atm_to_pa",
    "format_composition",
    "parse_composition",
]
