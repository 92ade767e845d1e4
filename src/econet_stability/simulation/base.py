"""Abstract base class for population-dynamics models."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod

import numpy as np

from econet_stability.errors import InvalidArgumentError


class DynamicsModel(ABC):
    """Base class for all community dynamics models.

    Subclasses implement the growth-rate vector field via ``dudt`` and
    ``dudt_per_capita``. The base class owns species naming, the mutable
    mortality vector used for press perturbations, and biomass validation.
    """

    def __init__(self, species: list[str], mortality: np.ndarray) -> None:
        self.species = list(species)
        self._mortality = np.asarray(mortality, dtype=np.float64).copy()
        if self._mortality.shape != (self.richness,):
            raise InvalidArgumentError(
                f"Expected {self.richness} mortality rates, got {self._mortality.shape}"
            )

    @property
    def richness(self) -> int:
        return len(self.species)

    @property
    def mortality(self) -> np.ndarray:
        return self._mortality

    @mortality.setter
    def mortality(self, value: np.ndarray) -> None:
        value = np.asarray(value, dtype=np.float64)
        if value.shape != (self.richness,):
            raise InvalidArgumentError(
                f"Expected {self.richness} mortality rates, got {value.shape}"
            )
        self._mortality = value.copy()

    @abstractmethod
    def dudt(self, B: np.ndarray) -> np.ndarray:
        """Absolute growth rates dB/dt at biomass B."""

    @abstractmethod
    def dudt_per_capita(self, B: np.ndarray) -> np.ndarray:
        """Per-capita growth rates (1/B) dB/dt at biomass B.

        Must stay finite where a species has zero biomass.
        """

    def copy(self) -> DynamicsModel:
        """Deep value copy; edits to the copy never reach the original."""
        return copy.deepcopy(self)

    def check_biomass(self, B: np.ndarray) -> np.ndarray:
        """Validate a biomass vector and return it as a fresh float array."""
        B = np.array(B, dtype=np.float64)
        if B.shape != (self.richness,):
            raise InvalidArgumentError(
                f"Biomass vector must have length {self.richness}, got shape {B.shape}"
            )
        if not np.all(np.isfinite(B)):
            raise InvalidArgumentError(f"Biomass vector contains non-finite values: {B}")
        if np.any(B < 0):
            raise InvalidArgumentError(f"Biomass vector contains negative values: {B}")
        return B
