import logging
from typing import Callable, Dict, List, Mapping, Optional, Union

import cantera as ct

from .mix import format_composition, parse_composition

logger = logging.getLogger(__name__)

Composition = Union[str, Mapping[str, float]]


class UnknownSpeciesError(ValueError):
    """Composition names species that the mechanism does not define."""

    def __init__(self, names: List[str], mechanism: str = ""):
        self.names = list(names)
        self.mechanism = mechanism
        where = f" in mechanism '{mechanism}'" if mechanism else ""
        super().__init__(
            f"Unrecognised species{where}: {', '.join(self.names)}. "
            "Check the species block of the mechanism file; being listed under "
            "elements is not enough."
        )


class Mechanism:
    """Wrapper around Cantera Solution with case-insensitive species lookup."""

    def __init__(self, file_path: str, phase: Optional[str] = None):
        self.file_path = str(file_path)
        self.phase = phase
        try:
            self.solution = ct.Solution(self.file_path, phase or "")
        except ct.CanteraError as e:
            raise RuntimeError(f"Failed to load mechanism {self.file_path}: {e}") from e

        self._exact = {name: name for name in self.species_names}
        folded: Dict[str, List[str]] = {}
        for name in self.species_names:
            folded.setdefault(name.upper(), []).append(name)
        # names differing only by case cannot be resolved case-insensitively
        self._folded = {k: v[0] for k, v in folded.items() if len(v) == 1}
        logger.debug(
            "Loaded %s (%d species, %d reactions)",
            self.file_path, self.solution.n_species, self.solution.n_reactions,
        )

    @property
    def species_names(self) -> List[str]:
        return list(self.solution.species_names)

    def resolve(self, name: str) -> Optional[str]:
        """Return the mechanism's spelling of ``name``, or None if absent."""
        if name in self._exact:
            return name
        return self._folded.get(name.upper())

    def species_index(self, name: str) -> Optional[int]:
        resolved = self.resolve(name)
        if resolved is None:
            return None
        return self.solution.species_index(resolved)

    def unknown_species(self, composition: Mapping[str, float]) -> List[str]:
        return [name for name in composition if self.resolve(name) is None]

    def build_state(self, temperature: float, pressure_pa: float, composition: Composition) -> ct.Solution:
        """Set ``T``, ``P`` and mole fractions on the mechanism's solution.

        Raises :class:`UnknownSpeciesError` before touching the state if any
        composition entry cannot be resolved.
        """
        if isinstance(composition, str):
            composition = parse_composition(composition)
        unknown = self.unknown_species(composition)
        if unknown:
            raise UnknownSpeciesError(unknown, self.file_path)

        x: Dict[str, float] = {}
        for name, frac in composition.items():
            resolved = self.resolve(name)
            x[resolved] = x.get(resolved, 0.0) + frac

        self.solution.TPX = temperature, pressure_pa, x
        logger.info(
            "Initial state: T=%.1f K, P=%.6g Pa, X=%s",
            temperature, pressure_pa, format_composition(x),
        )
        return self.solution


def resolve_state(
    mech: Mechanism,
    temperature: float,
    pressure_pa: float,
    composition: Composition,
    prompt: Optional[Callable[[str, str], str]] = None,
) -> ct.Solution:
    """Build the initial state, allowing one corrected composition.

    ``prompt(message, default)`` is asked once for a replacement composition
    string when the first attempt names unknown species; a second failure
    propagates. Without ``prompt`` the first failure propagates.
    """
    try:
        return mech.build_state(temperature, pressure_pa, composition)
    except UnknownSpeciesError as e:
        if prompt is None:
            raise
        logger.warning("%s", e)
        default = composition if isinstance(composition, str) else format_composition(composition)
        corrected = prompt(
            f"{e} Enter a corrected composition (name:frac,...)", default
        )
        return mech.build_state(temperature, pressure_pa, corrected)
