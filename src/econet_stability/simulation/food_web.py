"""Bioenergetic food-web model.

Implements the consumer-resource dynamics of a trophic network with
logistic producers:

    dB_i/dt = r_i*B_i*(1 - sum_j(c_ij*B_j)/K_i)          (producers)
              + x_i*y_i*B_i*sum_j(F_ij)                  (consumption gain)
              - sum_k(x_k*y_k*B_k*F_ki/e_ki)             (predation loss)
              - x_i*B_i - d_i*B_i                        (metabolism, mortality)

with the bioenergetic functional response

    F_ij = w_ij*B_j^h / (B0^h*(1 + c*B_i) + sum_l(w_il*B_l^h))

or, for the classic response, F_ij = w_ij*a*B_j^h / (M_i*(1 + c*B_i + sum_l(w_il*a*ht*B_l^h)))
where the gain is B_i*sum_j(e_ij*F_ij) and the loss sum_k(B_k*F_ki).

Defaults follow the allometric parametrisation of Brose et al. (2006) for
invertebrate consumers with unit body mass.
"""

from __future__ import annotations

import numpy as np

from econet_stability.errors import InvalidArgumentError
from econet_stability.simulation.base import DynamicsModel
from econet_stability.types.model import FunctionalResponse, ModelConfig


class FoodWebModel(DynamicsModel):
    """Food-web dynamics for n species on a fixed trophic network.

    State vector: [B_1, ..., B_n] species biomasses.

    Parameters (via ModelConfig):
        adjacency: n x n binary matrix, adjacency[i][j] = 1 if i eats j
        growth_rate: producer intrinsic growth rates (default 1, 0 for consumers)
        carrying_capacity: producer carrying capacities (default 1)
        metabolic_rate: x_i (default 0.314*M^-0.25 for consumers, 0 for producers)
        max_consumption: y_i (default 8 for consumers, 0 for producers)
        mortality: d_i linear mortality (default 0)
        producer_competition: c_ij among producers (default identity)
    """

    DEFAULT_METABOLIC_SCALING = 0.314
    DEFAULT_MAX_CONSUMPTION = 8.0

    def __init__(self, config: ModelConfig) -> None:
        adjacency = np.asarray(config.adjacency, dtype=np.float64)
        if adjacency.ndim != 2 or adjacency.shape[0] != adjacency.shape[1]:
            raise InvalidArgumentError(
                f"Adjacency matrix must be square, got shape {adjacency.shape}"
            )
        n = adjacency.shape[0]
        if n == 0:
            raise InvalidArgumentError("Adjacency matrix must contain at least one species")
        if not np.all((adjacency == 0) | (adjacency == 1)):
            raise InvalidArgumentError("Adjacency matrix entries must be 0 or 1")

        species = config.species or [f"s{i + 1}" for i in range(n)]
        if len(species) != n:
            raise InvalidArgumentError(f"Expected {n} species names, got {len(species)}")
        if len(set(species)) != n:
            raise InvalidArgumentError(f"Species names must be unique: {species}")

        self.config = config
        self.adjacency = adjacency
        self.producers = adjacency.sum(axis=1) == 0
        self.consumers = ~self.producers

        # Homogeneous diet preferences: w_ij = 1 / number of prey of i
        n_prey = adjacency.sum(axis=1, keepdims=True)
        self.w = np.divide(adjacency, n_prey, out=np.zeros_like(adjacency), where=n_prey > 0)

        self.body_mass = self._vector("body_mass", config.body_mass, np.ones(n), n)
        self.r = self._vector(
            "growth_rate", config.growth_rate, np.where(self.producers, 1.0, 0.0), n
        )
        self.K = self._vector("carrying_capacity", config.carrying_capacity, np.ones(n), n)
        self.x = self._vector(
            "metabolic_rate",
            config.metabolic_rate,
            np.where(
                self.producers, 0.0, self.DEFAULT_METABOLIC_SCALING * self.body_mass**-0.25
            ),
            n,
        )
        self.y = self._vector(
            "max_consumption",
            config.max_consumption,
            np.where(self.producers, 0.0, self.DEFAULT_MAX_CONSUMPTION),
            n,
        )
        mortality = self._vector("mortality", config.mortality, np.zeros(n), n)

        if np.any(self.K[self.producers] <= 0):
            raise InvalidArgumentError("Producer carrying capacities must be positive")
        if config.hill_exponent < 1:
            raise InvalidArgumentError(
                f"Hill exponent must be >= 1, got {config.hill_exponent}"
            )

        # Assimilation efficiency e_ij of consumer i eating j
        self.e = adjacency * np.where(
            self.producers[np.newaxis, :], config.e_herbivory, config.e_carnivory
        )
        self._inv_e = np.divide(1.0, self.e, out=np.zeros_like(self.e), where=self.e > 0)

        if config.producer_competition is None:
            self.competition = np.diag(self.producers.astype(np.float64))
        else:
            self.competition = np.asarray(config.producer_competition, dtype=np.float64)
            if self.competition.shape != (n, n):
                raise InvalidArgumentError(
                    f"Producer competition must be {n}x{n}, got {self.competition.shape}"
                )

        self.functional_response = FunctionalResponse(config.functional_response)
        self.B0 = config.half_saturation
        self.h = config.hill_exponent
        self.c = config.interference
        self.attack_rate = config.attack_rate
        self.handling_time = config.handling_time

        super().__init__(species, mortality)

    @staticmethod
    def _vector(
        name: str, values: list[float] | None, default: np.ndarray, n: int
    ) -> np.ndarray:
        if values is None:
            return np.asarray(default, dtype=np.float64)
        arr = np.asarray(values, dtype=np.float64)
        if arr.shape != (n,):
            raise InvalidArgumentError(f"`{name}` must have length {n}, got {arr.shape}")
        return arr

    @classmethod
    def from_config(cls, config: ModelConfig) -> FoodWebModel:
        return cls(config)

    @property
    def trophic_links(self) -> list[tuple[int, int]]:
        """(consumer, resource) index pairs."""
        return [(int(i), int(j)) for i, j in zip(*np.nonzero(self.adjacency))]

    def dudt(self, B: np.ndarray) -> np.ndarray:
        B = np.asarray(B, dtype=np.float64)
        return B * self.dudt_per_capita(B)

    def dudt_per_capita(self, B: np.ndarray) -> np.ndarray:
        B = np.asarray(B, dtype=np.float64)
        B_h = B**self.h
        # B_j^(h-1): prey loss per unit prey biomass, finite at B_j = 0
        B_h1 = B ** (self.h - 1.0)

        growth = np.where(
            self.producers, self.r * (1.0 - (self.competition @ B) / self.K), 0.0
        )

        if self.functional_response is FunctionalResponse.BIOENERGETIC:
            denom = self.B0**self.h * (1.0 + self.c * B) + self.w @ B_h
            gain = self.x * self.y * (self.w @ B_h) / denom
            coef = (self.x * self.y * B / denom)[:, np.newaxis] * self.w * self._inv_e
        else:
            a, ht = self.attack_rate, self.handling_time
            denom = self.body_mass * (1.0 + self.c * B + (self.w * a * ht) @ B_h)
            gain = ((self.e * self.w * a) @ B_h) / denom
            coef = (B / denom)[:, np.newaxis] * self.w * a
        loss = coef.sum(axis=0) * B_h1

        return growth + gain - loss - self.x - self.mortality

    def feeding_rates(self, B: np.ndarray) -> np.ndarray:
        """Functional response matrix F_ij at biomass B."""
        B = np.asarray(B, dtype=np.float64)
        B_h = B**self.h
        if self.functional_response is FunctionalResponse.BIOENERGETIC:
            denom = self.B0**self.h * (1.0 + self.c * B) + self.w @ B_h
            return self.w * B_h[np.newaxis, :] / denom[:, np.newaxis]
        a, ht = self.attack_rate, self.handling_time
        denom = self.body_mass * (1.0 + self.c * B + (self.w * a * ht) @ B_h)
        return self.w * a * B_h[np.newaxis, :] / denom[:, np.newaxis]


def default_model(adjacency: list[list[int]], **parameters) -> FoodWebModel:
    """Build a FoodWebModel from an adjacency matrix and parameter overrides.

    Keyword arguments are ModelConfig fields, e.g. ``mortality=[0.1, 0.0]``
    or ``functional_response="classic"``.
    """
    config = ModelConfig(adjacency=np.asarray(adjacency, dtype=int).tolist(), **parameters)
    return FoodWebModel(config)
