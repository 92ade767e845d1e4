"""Interaction and sensitivity matrices, keystoneness and resistance.

The interaction matrix A[i, j] = d(pgr_i)/dB_j is the Jacobian of the
per-capita growth rates (Novak et al. 2016,
doi:10.1146/annurev-ecolsys-032416-010215). Interactions are
density-dependent, so A is always evaluated at an explicit biomass vector.

The sensitivity matrix S = -A^{-1} gives the equilibrium response of each
species to a sustained unit decrease of another species' growth rate
(a press perturbation such as increased mortality):

    dB* = -S @ dd

for a small mortality increment dd.
"""

from __future__ import annotations

import logging

import numpy as np

from econet_stability.analysis.jacobian import (
    Differentiator,
    jacobian,
    per_capita_growth_rate_function,
)
from econet_stability.errors import (
    UNDEFINED,
    InvalidArgumentError,
    NumericalInstabilityError,
    SingularSystemError,
    check_positive,
)
from econet_stability.simulation.base import DynamicsModel
from econet_stability.simulation.integrate import simulate
from econet_stability.utils.species import (
    ALL_SPECIES,
    IndexSet,
    resolve_species,
    selected_indices,
)

logger = logging.getLogger(__name__)


def interaction_matrix(
    model: DynamicsModel,
    B: np.ndarray,
    differentiator: Differentiator | None = None,
) -> np.ndarray:
    """Interaction matrix A of the model at biomass B.

    ``A[i, j]`` is the effect of species j on the per-capita growth of species i.
    """
    B = model.check_biomass(B)
    return jacobian(per_capita_growth_rate_function(model), B, differentiator)


def _negative_inverse(A: np.ndarray) -> np.ndarray:
    try:
        cond = np.linalg.cond(A)
    except np.linalg.LinAlgError as exc:
        raise NumericalInstabilityError(f"SVD of interaction matrix failed: {exc}") from exc
    if not np.isfinite(cond) or cond > 1.0 / np.finfo(np.float64).eps:
        raise SingularSystemError(
            f"Interaction matrix is singular (condition number {cond:.3e}); "
            "the sensitivity matrix is undefined"
        )
    try:
        inverse = np.linalg.inv(A)
    except np.linalg.LinAlgError as exc:
        raise SingularSystemError(f"Interaction matrix is singular: {exc}") from exc
    if not np.all(np.isfinite(inverse)):
        raise NumericalInstabilityError("Inverse of the interaction matrix is not finite")
    return -inverse


def sensitivity_matrix(
    model: DynamicsModel,
    B: np.ndarray,
    differentiator: Differentiator | None = None,
) -> np.ndarray:
    """Sensitivity matrix S = -A^{-1} of the model at biomass B.

    Raises:
        SingularSystemError: if the interaction matrix is not invertible.
    """
    A = interaction_matrix(model, B, differentiator)
    return _negative_inverse(A)


def keystoneness(
    model: DynamicsModel,
    B: np.ndarray,
    differentiator: Differentiator | None = None,
) -> np.ndarray:
    """Keystoneness of each species: sum_{j != i} |S[j, i]|.

    Measures how far a press on species i ripples through the rest of the
    community. Zero for a species decoupled from all others.
    """
    S = sensitivity_matrix(model, B, differentiator)
    off_diagonal = np.where(np.eye(len(S), dtype=bool), 0.0, np.abs(S))
    return off_diagonal.sum(axis=0)


def resistance(
    model: DynamicsModel,
    B: np.ndarray,
    *,
    response_of=ALL_SPECIES,
    perturbation_on=ALL_SPECIES,
    aggregated: bool = False,
    differentiator: Differentiator | None = None,
) -> np.ndarray | float:
    """Analytic resistance of species biomass to mortality presses.

    Selects ``S[response_of, perturbation_on]``, sums over the perturbation
    axis, optionally over the response axis (``aggregated``), and negates
    the result: resistance is the biomass change per unit mortality increase.

    Selectors are ``ALL_SPECIES`` (default), a species index or name, or a
    collection of them. A single index or name returns a scalar.

    Species indices are 0-based positions in ``model.species``: index 0 is
    the species named ``"s1"`` by default. Pass names to select species by
    their 1-based labels.
    """
    response = resolve_species(response_of, model.species)
    perturbation = resolve_species(perturbation_on, model.species)
    S = sensitivity_matrix(model, B, differentiator)

    n = model.richness
    rows = selected_indices(response, n)
    cols = selected_indices(perturbation, n)
    summed = S[np.ix_(rows, cols)].sum(axis=1)

    if aggregated:
        return -float(summed.sum())
    if isinstance(response, IndexSet) and response.scalar:
        return -float(summed[0])
    return -summed


def resistance_simulation(
    model: DynamicsModel,
    B: np.ndarray,
    *,
    mortality_increment: np.ndarray | None = None,
    response_of=ALL_SPECIES,
    aggregated: bool = False,
    normalized: bool = True,
    t_end: float = 1_000,
    **simulate_kwargs,
):
    """Empirical resistance from re-simulating the pressed community.

    The model is cloned, ``mortality_increment`` (default 0.1 for every
    species) is added to its mortality, and the community is simulated from
    B for ``t_end``. The biomass change dB = B_end - B is restricted to
    ``response_of``.

    - not aggregated, normalized: dB_i / increment_i per species. Species with
      a zero increment get ``UNDEFINED`` and the result is an object array.
    - not aggregated, not normalized: raw dB.
    - aggregated: sum of dB, divided by the mean increment when normalized
      (``UNDEFINED`` if that mean is zero).

    For small increments this converges to ``resistance`` with the same
    selectors.
    """
    response = resolve_species(response_of, model.species)
    B = model.check_biomass(B)
    n = model.richness
    check_positive("t_end", t_end)

    if mortality_increment is None:
        increment = np.full(n, 0.1)
    else:
        increment = np.asarray(mortality_increment, dtype=np.float64)
        if increment.shape != (n,):
            raise InvalidArgumentError(
                f"`mortality_increment` must have length {n}, got shape {increment.shape}"
            )
        if not np.all(np.isfinite(increment)):
            raise InvalidArgumentError("`mortality_increment` must be finite")

    pressed = model.copy()
    pressed.mortality = pressed.mortality + increment
    B_end = simulate(pressed, B, t_end, **simulate_kwargs).final

    rows = selected_indices(response, n)
    delta = (B_end - B)[rows]
    scalar = isinstance(response, IndexSet) and response.scalar

    if aggregated:
        total = float(delta.sum())
        if not normalized:
            return total
        mean_increment = float(np.mean(increment))
        if mean_increment == 0:
            logger.warning("Mean mortality increment is zero: aggregated resistance undefined")
            return UNDEFINED
        return total / mean_increment

    if not normalized:
        return float(delta[0]) if scalar else delta

    inc = increment[rows]
    undefined = inc == 0
    if not np.any(undefined):
        result = delta / inc
        return float(result[0]) if scalar else result

    logger.warning(
        f"Zero mortality increment for species "
        f"{[model.species[i] for i in rows[undefined]]}: resistance undefined"
    )
    result = np.empty(len(rows), dtype=object)
    for k in range(len(rows)):
        result[k] = UNDEFINED if undefined[k] else float(delta[k] / inc[k])
    return result[0] if scalar else result
