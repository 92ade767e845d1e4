"""Jacobian of community dynamics and local stability metrics.

The Jacobian J[i, j] = d(dB_i/dt)/dB_j evaluated at a biomass vector
characterises the linearised dynamics around that point:

- resilience = max Re(eig(J)), the asymptotic return rate after a pulse
  disturbance (negative => locally stable).
- reactivity = max eig((J + J^T)/2), the worst initial amplification rate
  of a pulse disturbance.

See Arnoldi et al. (2019), doi:10.1016/j.jtbi.2017.10.003.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

import numpy as np

from econet_stability.errors import InvalidArgumentError, NumericalInstabilityError
from econet_stability.simulation.base import DynamicsModel

logger = logging.getLogger(__name__)

GrowthFunction = Callable[[np.ndarray], np.ndarray]


def growth_rate_function(model: DynamicsModel) -> GrowthFunction:
    """Return B -> dB/dt for the model, all other parameters held fixed.

    The closure captures a private copy of the model, so later edits to
    ``model`` (e.g. mortality presses) do not change the returned function.
    """
    frozen = model.copy()
    return lambda B: frozen.dudt(B)


def per_capita_growth_rate_function(model: DynamicsModel) -> GrowthFunction:
    """Return B -> (1/B) dB/dt for the model, all other parameters held fixed."""
    frozen = model.copy()
    return lambda B: frozen.dudt_per_capita(B)


class Differentiator(ABC):
    """Strategy computing the Jacobian of a vector function at a point."""

    @abstractmethod
    def jacobian(self, f: GrowthFunction, x: np.ndarray) -> np.ndarray:
        """Return the (m x n) matrix df_i/dx_j at x."""


class CentralDifference(Differentiator):
    """Central finite differences with per-component scaled steps.

    The step for component k is ``rel_step * max(1, |x_k|)``. Where the
    backward step would push a biomass below zero, the second-order forward
    stencil (-3f(x) + 4f(x+h) - f(x+2h)) / 2h is used instead, so the
    function is only ever evaluated at non-negative biomass.
    """

    def __init__(self, rel_step: float | None = None) -> None:
        eps = np.finfo(np.float64).eps
        self.rel_step = rel_step if rel_step is not None else eps ** (1.0 / 3.0)

    def jacobian(self, f: GrowthFunction, x: np.ndarray) -> np.ndarray:
        x = np.array(x, dtype=np.float64)
        n = x.size
        f0 = np.asarray(f(x.copy()), dtype=np.float64).ravel()
        J = np.zeros((f0.size, n))
        dx = self.rel_step * np.maximum(1.0, np.abs(x))

        for k in range(n):
            ek = np.zeros(n)
            ek[k] = dx[k]
            if x[k] - dx[k] >= 0:
                f_plus = np.asarray(f(x + ek), dtype=np.float64).ravel()
                f_minus = np.asarray(f(x - ek), dtype=np.float64).ravel()
                J[:, k] = (f_plus - f_minus) / (2.0 * dx[k])
            else:
                f_1 = np.asarray(f(x + ek), dtype=np.float64).ravel()
                f_2 = np.asarray(f(x + 2.0 * ek), dtype=np.float64).ravel()
                J[:, k] = (-3.0 * f0 + 4.0 * f_1 - f_2) / (2.0 * dx[k])
        return J


_DEFAULT_DIFFERENTIATOR = CentralDifference()


def jacobian(
    f: GrowthFunction,
    B: np.ndarray,
    differentiator: Differentiator | None = None,
) -> np.ndarray:
    """Jacobian of ``f`` at ``B``. B is not mutated.

    Raises:
        NumericalInstabilityError: if any entry is not finite.
    """
    differentiator = differentiator or _DEFAULT_DIFFERENTIATOR
    B = np.array(B, dtype=np.float64)
    J = differentiator.jacobian(f, B)
    if not np.all(np.isfinite(J)):
        raise NumericalInstabilityError(f"Non-finite Jacobian at B={B}")
    return J


def model_jacobian(
    model: DynamicsModel,
    B: np.ndarray,
    differentiator: Differentiator | None = None,
) -> np.ndarray:
    """Jacobian of the model's absolute growth rates at biomass B."""
    B = model.check_biomass(B)
    return jacobian(growth_rate_function(model), B, differentiator)


def _check_square(j: np.ndarray) -> np.ndarray:
    j = np.asarray(j, dtype=np.float64)
    if j.ndim != 2 or j.shape[0] != j.shape[1] or j.shape[0] == 0:
        raise InvalidArgumentError(f"Expected a non-empty square matrix, got shape {j.shape}")
    return j


def resilience(j: np.ndarray) -> float:
    """Community resilience: the largest real part among eigenvalues of j."""
    j = _check_square(j)
    try:
        eigs = np.linalg.eigvals(j)
    except np.linalg.LinAlgError as exc:
        raise NumericalInstabilityError(f"Eigenvalue computation failed: {exc}") from exc
    return float(np.max(np.real(eigs)))


def reactivity(j: np.ndarray) -> float:
    """Community reactivity: the largest eigenvalue of the symmetric part of j."""
    j = _check_square(j)
    try:
        eigs = np.linalg.eigvalsh((j + j.T) / 2.0)
    except np.linalg.LinAlgError as exc:
        raise NumericalInstabilityError(f"Eigenvalue computation failed: {exc}") from exc
    return float(np.max(eigs))
