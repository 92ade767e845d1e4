"""Extraction helpers over simulated trajectories."""

from __future__ import annotations

import logging

import numpy as np

from econet_stability.errors import InvalidArgumentError
from econet_stability.types.trajectory import Trajectory
from econet_stability.utils.species import ALL_SPECIES, IndexSet, resolve_species

logger = logging.getLogger(__name__)


def process_idxs(trajectory: Trajectory, idxs=None) -> IndexSet:
    """Validate species indices or names against the trajectory's species."""
    selection = resolve_species(idxs, trajectory.species)
    if selection is ALL_SPECIES:
        return IndexSet(tuple(range(trajectory.richness)))
    return selection


def process_last_timesteps(trajectory: Trajectory, last: int | str = 1, quiet: bool = False) -> int:
    """Convert ``last`` (a count or a percentage string like ``"10%"``) to a count."""
    n_timesteps = trajectory.n_timesteps

    if isinstance(last, str):
        if not last.endswith("%"):
            raise InvalidArgumentError(
                "The `last` argument, when given as a string, should end with character '%'"
            )
        try:
            perc = float(last[:-1])
        except ValueError as exc:
            raise InvalidArgumentError(f"Cannot parse a percentage from {last!r}") from exc
        if not 0.0 < perc <= 100.0:
            raise InvalidArgumentError(
                f"Cannot extract {perc}% of the trajectory's timesteps: "
                "0% < `last` <= 100% must hold."
            )
        last = round(n_timesteps * perc / 100)
        if last == 0 and not quiet:
            logger.warning(
                f"{perc}% of {n_timesteps} timesteps correspond to 0 output lines: "
                "an empty table has been extracted."
            )
    elif isinstance(last, (bool, np.bool_)):
        raise InvalidArgumentError("`last` should be a positive integer, not a boolean")
    elif isinstance(last, (int, np.integer)):
        if last <= 0:
            raise InvalidArgumentError(
                f"Cannot extract {last} timesteps. `last` should be a positive integer."
            )
    elif isinstance(last, float):
        raise InvalidArgumentError(
            f"Cannot extract `last` from a floating point number. Did you mean \"{last}%\"?"
        )
    else:
        raise InvalidArgumentError(
            f"Cannot extract timesteps with `last={last}` of type {type(last).__name__}. "
            "`last` should be a positive integer or a string representing a percentage."
        )

    if last > n_timesteps:
        raise InvalidArgumentError(
            f"Cannot extract {last} timesteps from a trajectory with only {n_timesteps} "
            "timesteps. Consider decreasing `last` and/or giving it as a percentage "
            "instead (e.g. \"10%\")."
        )
    return int(last)


def get_extinction_timesteps(trajectory: Trajectory, idxs=None) -> dict:
    """First timestep at which each selected species has zero biomass.

    Returns:
        Dict with ``species`` names, ``idxs`` and ``extinction_timestep`` of
        the species that went extinct (never-extinct species are omitted).
    """
    selection = process_idxs(trajectory, idxs)
    species, indices, timesteps = [], [], []
    for i in selection.indices:
        zero = np.flatnonzero(trajectory.biomass[:, i] == 0)
        if zero.size:
            species.append(trajectory.species[i])
            indices.append(i)
            timesteps.append(int(zero[0]))
    return {"species": species, "idxs": indices, "extinction_timestep": timesteps}


def check_last_extinction(trajectory: Trajectory, idxs=None, last: int = 1) -> None:
    """Warn about selected species that went extinct inside the last window."""
    ext = get_extinction_timesteps(trajectory, idxs)
    n_timesteps = trajectory.n_timesteps
    inside = [
        (sp, t)
        for sp, t in zip(ext["species"], ext["extinction_timestep"])
        if t > n_timesteps - last
    ]
    if inside:
        max_last = n_timesteps - max(ext["extinction_timestep"])
        logger.warning(
            f"With `last` = {last}, a table has been extracted with the species "
            f"{[sp for sp, _ in inside]}, that went extinct at timesteps = "
            f"{[t for _, t in inside]}. Set `last` <= {max_last} to get rid of them."
        )


def extract_last_timesteps(
    trajectory: Trajectory,
    last: int | str = 1,
    idxs=None,
    quiet: bool = False,
) -> np.ndarray:
    """Biomass matrix (species x time) over the ``last`` timesteps.

    Args:
        trajectory: simulated trajectory.
        last: number of final timesteps, or a percentage string such as "10%".
        idxs: species indices or names (all species by default). A single
            index or name returns a vector instead of a matrix.
        quiet: skip the warning about species going extinct inside the window.
    """
    n_last = process_last_timesteps(trajectory, last, quiet=quiet)
    selection = process_idxs(trajectory, idxs)
    rows = list(selection.indices)

    if n_last == 0:
        out = np.zeros((len(rows), 0))
    else:
        out = trajectory.biomass[-n_last:, :].T[rows, :]

    if not quiet and n_last > 0:
        check_last_extinction(trajectory, idxs=rows, last=n_last)

    out = out.copy()
    return out[0] if selection.scalar else out


def get_alive_species(obj: Trajectory | np.ndarray, threshold: float = 0.0, idxs=None):
    """Species with biomass above ``threshold`` at the end of a trajectory.

    Given a Trajectory, returns a dict with ``species`` names and ``idxs``.
    Given a biomass vector, returns the list of alive indices.
    """
    if isinstance(obj, Trajectory):
        selection = process_idxs(obj, idxs)
        final = obj.final
        alive = [i for i in selection.indices if final[i] > threshold]
        return {"species": [obj.species[i] for i in alive], "idxs": alive}
    return [int(i) for i in np.flatnonzero(np.asarray(obj) > threshold)]


def get_extinct_species(biomass: np.ndarray, threshold: float = 0.0) -> list[int]:
    """Indices of a biomass vector at or below ``threshold``."""
    return [int(i) for i in np.flatnonzero(np.asarray(biomass) <= threshold)]
