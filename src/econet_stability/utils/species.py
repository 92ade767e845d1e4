"""Species selectors: all species, or an explicit ordered index set."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from econet_stability.errors import InvalidArgumentError


class AllSpecies:
    """Sentinel selecting every species in model order."""

    _instance: AllSpecies | None = None

    def __new__(cls) -> AllSpecies:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ALL_SPECIES"

    def __reduce__(self) -> str:
        return "ALL_SPECIES"


ALL_SPECIES = AllSpecies()


@dataclass(frozen=True)
class IndexSet:
    """Ordered, duplicate-free 0-based species indices.

    ``scalar`` records that the selection was given as a single species, in
    which case results drop the corresponding axis.
    """

    indices: tuple[int, ...]
    scalar: bool = False

    def __len__(self) -> int:
        return len(self.indices)

    def __iter__(self):
        return iter(self.indices)


SpeciesSelection = AllSpecies | IndexSet


def _resolve_one(item: object, species: Sequence[str]) -> int:
    if isinstance(item, (bool, np.bool_)):
        raise InvalidArgumentError(f"Booleans are not valid species selectors: {item!r}")
    if isinstance(item, (int, np.integer)):
        idx = int(item)
        if not 0 <= idx < len(species):
            raise InvalidArgumentError(
                f"Species index {idx} out of range: there are {len(species)} species "
                f"(valid indices 0..{len(species) - 1})"
            )
        return idx
    if isinstance(item, str):
        if item not in species:
            raise InvalidArgumentError(
                f"Species {item!r} is not found in the network. Any misspelling?"
            )
        return list(species).index(item)
    raise InvalidArgumentError(
        f"Species selectors should be integers (species indices) or strings "
        f"(species names), got {type(item).__name__}"
    )


def resolve_species(
    selection: object, species: Sequence[str]
) -> SpeciesSelection:
    """Validate a user-facing species selector against the species list.

    Accepts ``ALL_SPECIES``, ``None`` or ``"all"`` for every species; an
    int index or a species name for one species; or a collection of either.
    """
    if selection is None or selection is ALL_SPECIES:
        return ALL_SPECIES
    if isinstance(selection, IndexSet):
        for idx in selection.indices:
            _resolve_one(idx, species)
        return selection
    if isinstance(selection, str) and selection.lower() == "all" and "all" not in species:
        return ALL_SPECIES
    if isinstance(selection, (int, np.integer, str, bool, np.bool_)):
        return IndexSet((_resolve_one(selection, species),), scalar=True)
    if not isinstance(selection, Iterable):
        raise InvalidArgumentError(
            f"Species selection must be ALL_SPECIES, an index, a name or a collection, "
            f"got {type(selection).__name__}"
        )

    indices = tuple(_resolve_one(item, species) for item in selection)
    if not indices:
        raise InvalidArgumentError("Species selection must not be empty")
    if len(set(indices)) != len(indices):
        raise InvalidArgumentError(f"Species selection contains duplicates: {indices}")
    return IndexSet(indices)


def selected_indices(selection: SpeciesSelection, richness: int) -> np.ndarray:
    """Index array of a resolved selection."""
    if selection is ALL_SPECIES:
        return np.arange(richness)
    return np.array(selection.indices, dtype=int)
