"""Numerical integration of community dynamics."""

from __future__ import annotations

import logging

import numpy as np
from scipy.integrate import solve_ivp

from econet_stability.errors import NumericalInstabilityError, check_positive
from econet_stability.simulation.base import DynamicsModel
from econet_stability.types.trajectory import Trajectory

logger = logging.getLogger(__name__)


def simulate(
    model: DynamicsModel,
    B0: np.ndarray,
    t_end: float,
    *,
    method: str = "LSODA",
    extinction_threshold: float = 1e-12,
    n_points: int | None = None,
    rtol: float = 1e-8,
    atol: float = 1e-10,
) -> Trajectory:
    """Integrate the model forward from B0 over [0, t_end].

    Biomasses are clamped at zero inside the vector field, and any biomass
    below ``extinction_threshold`` in the returned trajectory is set to
    exactly zero. B0 is copied, never mutated.

    Args:
        model: dynamics model providing ``dudt``.
        B0: initial biomass vector of length ``model.richness``.
        t_end: simulation horizon, must be positive.
        method: scipy.integrate.solve_ivp method.
        extinction_threshold: biomass treated as extinct.
        n_points: number of evenly spaced output times (solver steps if None).

    Returns:
        Trajectory with times, biomass matrix and the terminal state in ``final``.
    """
    B0 = model.check_biomass(B0)
    check_positive("t_end", t_end)

    def system_derivative(t, B):
        return model.dudt(np.maximum(B, 0.0))

    t_eval = np.linspace(0.0, float(t_end), n_points) if n_points else None
    sol = solve_ivp(
        system_derivative,
        (0.0, float(t_end)),
        B0,
        t_eval=t_eval,
        method=method,
        rtol=rtol,
        atol=atol,
    )
    if not sol.success:
        raise NumericalInstabilityError(f"Simulation failed: {sol.message}")

    biomass = np.maximum(sol.y.T, 0.0)
    if not np.all(np.isfinite(biomass)):
        raise NumericalInstabilityError("Simulation produced non-finite biomass")
    biomass[biomass < extinction_threshold] = 0.0

    logger.debug(
        f"Simulated {model.richness} species to t={t_end} "
        f"({len(sol.t)} steps, {int(np.sum(biomass[-1] > 0))} alive)"
    )

    traj = Trajectory(species=model.species, t_end=float(t_end), method=method, message=sol.message)
    traj.times = sol.t
    traj.biomass = biomass
    return traj
