"""Trajectory container returned by the simulator."""

from __future__ import annotations

import numpy as np
from pydantic import BaseModel, Field


class Trajectory(BaseModel):
    """Timestamped biomass sequence of a simulated community.

    ``biomass`` has shape (n_timesteps, richness); row ``k`` is the state
    at ``times[k]``.
    """

    model_config = {"arbitrary_types_allowed": True}

    species: list[str] = Field(default_factory=list)
    t_end: float = 0.0
    method: str = ""
    message: str = ""

    # These hold the actual numerical data (not serialized via Pydantic)
    _times: np.ndarray | None = None
    _biomass: np.ndarray | None = None

    @property
    def times(self) -> np.ndarray | None:
        return self._times

    @times.setter
    def times(self, value: np.ndarray) -> None:
        self._times = value

    @property
    def biomass(self) -> np.ndarray | None:
        return self._biomass

    @biomass.setter
    def biomass(self, value: np.ndarray) -> None:
        self._biomass = value

    @property
    def final(self) -> np.ndarray:
        """Terminal biomass vector (a copy, safe to mutate)."""
        if self._biomass is None or len(self._biomass) == 0:
            return np.zeros(len(self.species))
        return self._biomass[-1].copy()

    @property
    def n_timesteps(self) -> int:
        if self._biomass is not None:
            return len(self._biomass)
        return 0

    @property
    def richness(self) -> int:
        return len(self.species)
