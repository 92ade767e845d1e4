"""Secondary extinctions and community robustness to species loss.

A robustness trial starts from the reference equilibrium, removes species
one at a time in a random order, re-simulates after each removal and
counts the species that went extinct as a consequence (secondary
extinctions). The trial score is the mean number of secondary extinctions
per removal; the estimate averages trial scores and reports

    robustness = 1 / mean secondary extinctions

which is infinite for a community where removals never cascade.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field

import numpy as np

from econet_stability.errors import (
    InvalidArgumentError,
    NumericalInstabilityError,
    TrialFailedError,
    check_non_negative,
    check_positive,
)
from econet_stability.simulation.base import DynamicsModel
from econet_stability.simulation.integrate import simulate
from econet_stability.utils.species import IndexSet, resolve_species

logger = logging.getLogger(__name__)


@dataclass
class RobustnessEstimate:
    """Result of a Monte-Carlo robustness estimation."""

    trial_scores: list[float]
    extinction_sequences: list[list[int]] = field(default_factory=list)
    secondary_counts: list[list[int]] = field(default_factory=list)
    reference_biomass: np.ndarray | None = None
    t_end: float = 1_000
    threshold: float = 1e-6

    @property
    def n_rep(self) -> int:
        return len(self.trial_scores)

    @property
    def mean_secondary_extinctions(self) -> float:
        return float(np.mean(self.trial_scores))

    @property
    def is_unbounded(self) -> bool:
        """True when no removal ever caused a secondary extinction."""
        return self.mean_secondary_extinctions == 0

    @property
    def robustness(self) -> float:
        """Reciprocal of the mean secondary-extinction count (inf if zero)."""
        mean = self.mean_secondary_extinctions
        if mean == 0:
            return math.inf
        return 1.0 / mean

    def __float__(self) -> float:
        return self.robustness

    def to_dict(self) -> dict:
        return {
            "robustness": None if self.is_unbounded else self.robustness,
            "unbounded": self.is_unbounded,
            "mean_secondary_extinctions": self.mean_secondary_extinctions,
            "n_rep": self.n_rep,
            "trial_scores": self.trial_scores,
        }


def secondary_extinctions(
    model: DynamicsModel,
    extinct_species: int | str,
    B_start: np.ndarray,
    *,
    t_end: float = 1_000,
    threshold: float = 1e-6,
    **simulate_kwargs,
) -> set[int]:
    """Species driven extinct by the primary extinction of ``extinct_species``.

    The biomass of ``extinct_species`` (index or name) is set to zero in a copy
    of B_start, the community is simulated for ``t_end``, and every other
    species whose final biomass is <= ``threshold`` is returned.
    """
    selection = resolve_species(extinct_species, model.species)
    if not (isinstance(selection, IndexSet) and selection.scalar):
        raise InvalidArgumentError(
            f"`extinct_species` must be a single index or name, got {extinct_species!r}"
        )
    idx = selection.indices[0]
    B = model.check_biomass(B_start)
    check_positive("t_end", t_end)
    check_non_negative("threshold", threshold)

    B[idx] = 0.0
    B_end = simulate(model, B, t_end, **simulate_kwargs).final
    return {int(i) for i in np.flatnonzero(B_end <= threshold) if i != idx}


def _check_sequence(sequence, richness: int) -> list[int]:
    seq = list(sequence)
    for sp in seq:
        if isinstance(sp, (bool, np.bool_)) or not isinstance(sp, (int, np.integer)):
            raise InvalidArgumentError(
                f"Extinction sequence must hold species indices, got {seq!r}"
            )
    seq = [int(sp) for sp in seq]
    if sorted(seq) != list(range(richness)):
        raise InvalidArgumentError(
            f"Extinction sequence must be a permutation of 0..{richness - 1}, got {seq}"
        )
    return seq


def run_trial(
    model: DynamicsModel,
    B0: np.ndarray,
    sequence: np.ndarray | list[int],
    *,
    t_end: float = 1_000,
    threshold: float = 1e-6,
    trial: int = 0,
    **simulate_kwargs,
) -> list[int]:
    """Run one extinction sequence and return secondary extinctions per step.

    Species are forced extinct in ``sequence`` order until no species has
    positive biomass. After each removal the community is re-simulated and
    biomasses below ``threshold`` are set to zero. A species counts as a
    secondary extinction of a step if it became zero during that step and
    was never forced extinct.

    ``sequence`` must be a permutation of all 0-based species indices.

    Raises:
        InvalidArgumentError: for a sequence that is not a permutation of the
            species, an invalid B0, a non-positive t_end or a negative threshold.
        TrialFailedError: if a re-simulation fails.
    """
    B = model.check_biomass(B0)
    check_positive("t_end", t_end)
    check_non_negative("threshold", threshold)
    sequence = _check_sequence(sequence, model.richness)
    forced = np.zeros(model.richness, dtype=bool)
    counts: list[int] = []

    for step, sp in enumerate(sequence):
        if not np.any(B > 0):
            break
        zero_before = B == 0
        B[sp] = 0.0
        forced[sp] = True
        try:
            B = simulate(model, B, t_end, **simulate_kwargs).final
        except NumericalInstabilityError as exc:
            raise TrialFailedError(trial, step, str(exc)) from exc
        B[B < threshold] = 0.0
        newly_extinct = (B == 0) & ~zero_before & ~forced
        counts.append(int(np.sum(newly_extinct)))

    return counts


def _trial_task(args: tuple) -> list[int]:
    model, B0, sequence, t_end, threshold, trial, simulate_kwargs = args
    return run_trial(
        model, B0, sequence, t_end=t_end, threshold=threshold, trial=trial, **simulate_kwargs
    )


def robustness(
    model: DynamicsModel,
    *,
    t_end: float = 1_000,
    n_rep: int = 100,
    threshold: float = 1e-6,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
    n_workers: int = 1,
    **simulate_kwargs,
) -> RobustnessEstimate:
    """Estimate community robustness to random sequential species loss.

    The reference state is the model simulated from unit biomass for
    ``t_end``. Each of the ``n_rep`` trials removes species in a uniformly
    random order drawn from ``rng`` (or a generator seeded with ``seed``).
    Orderings are drawn up front, so the estimate does not depend on
    ``n_workers``; with ``n_workers > 1`` trials run in a process pool.

    Returns:
        RobustnessEstimate; its ``robustness`` is ``math.inf`` when no
        removal ever causes a secondary extinction.

    Raises:
        InvalidArgumentError: for non-positive t_end, n_rep or n_workers, or
            a reference state with no surviving species.
        TrialFailedError: if any trial fails; the whole estimate is aborted.
    """
    check_positive("t_end", t_end)
    if isinstance(n_rep, bool) or not isinstance(n_rep, (int, np.integer)):
        raise InvalidArgumentError(f"`n_rep` must be an integer, got {n_rep!r}")
    check_positive("n_rep", n_rep)
    check_positive("n_workers", n_workers)
    check_non_negative("threshold", threshold)
    if rng is None:
        rng = np.random.default_rng(seed)

    n = model.richness
    B0 = simulate(model, np.ones(n), t_end, **simulate_kwargs).final
    B0[B0 < threshold] = 0.0
    if not np.any(B0 > 0):
        raise InvalidArgumentError("No species survives at the reference equilibrium")

    sequences = [rng.permutation(n) for _ in range(int(n_rep))]
    logger.info(
        f"Robustness: {n_rep} trials on {n} species "
        f"({int(np.sum(B0 > 0))} alive at reference), t_end={t_end}"
    )

    tasks = [
        (model, B0, seq, t_end, threshold, k, simulate_kwargs)
        for k, seq in enumerate(sequences)
    ]
    if n_workers == 1:
        counts = []
        for task in tasks:
            counts.append(_trial_task(task))
            logger.debug(f"  trial {task[5]}: secondary extinctions {counts[-1]}")
    else:
        with ProcessPoolExecutor(max_workers=n_workers) as pool:
            counts = list(pool.map(_trial_task, tasks))

    scores = [float(np.mean(c)) if c else 0.0 for c in counts]
    estimate = RobustnessEstimate(
        trial_scores=scores,
        extinction_sequences=[seq.tolist() for seq in sequences],
        secondary_counts=counts,
        reference_biomass=B0,
        t_end=t_end,
        threshold=threshold,
    )
    logger.info(
        f"Robustness: mean secondary extinctions {estimate.mean_secondary_extinctions:.4f}, "
        f"robustness {estimate.robustness:.4f}"
    )
    return estimate
