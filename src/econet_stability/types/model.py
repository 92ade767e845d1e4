"""Parameter types for bioenergetic food-web models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class FunctionalResponse(str, Enum):
    BIOENERGETIC = "bioenergetic"
    CLASSIC = "classic"


class ModelConfig(BaseModel):
    """Configuration for instantiating a food-web dynamics model.

    ``adjacency[i][j] == 1`` means species i eats species j. Species without
    prey are producers. Per-species vectors left as ``None`` receive
    allometric defaults when the model is built.
    """

    adjacency: list[list[int]]
    species: list[str] | None = None
    functional_response: FunctionalResponse = FunctionalResponse.BIOENERGETIC

    # Per-species parameters
    growth_rate: list[float] | None = None
    carrying_capacity: list[float] | None = None
    mortality: list[float] | None = None
    metabolic_rate: list[float] | None = None
    max_consumption: list[float] | None = None
    body_mass: list[float] | None = None
    producer_competition: list[list[float]] | None = None

    # Trophic interaction parameters
    e_herbivory: float = 0.45
    e_carnivory: float = 0.85
    half_saturation: float = 0.5
    hill_exponent: float = 2.0
    interference: float = 0.0
    attack_rate: float = 50.0
    handling_time: float = 1.0

    @property
    def richness(self) -> int:
        return len(self.adjacency)
