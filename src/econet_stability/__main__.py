"""CLI entry point for econet-stability.

Usage:
    econet-stability stability <model>         Jacobian, resilience and reactivity at equilibrium
    econet-stability sensitivity <model>       Sensitivity matrix, keystoneness and resistance
    econet-stability robustness <model> [n]    Robustness to random species loss (n trials)
    econet-stability version                   Show version

<model> is a YAML file or the name of a model in configs/models/
(e.g. consumer_resource). Next to its `model:` section the file may override
`log_level` and `analysis:` settings of configs/default.yaml. Results are
printed as JSON.
"""
from __future__ import annotations

import json
import logging
import sys


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(0)

    command = sys.argv[1].lower()

    if command in ("version", "--version", "-v"):
        from econet_stability import __version__
        print(f"econet-stability {__version__}")
    elif command in ("help", "--help", "-h"):
        print(__doc__)
    elif command in ("stability", "sensitivity", "robustness"):
        if len(sys.argv) < 3:
            print(f"Missing <model> argument for `{command}`")
            print(__doc__)
            sys.exit(1)
        _run_analysis(command, sys.argv[2], sys.argv[3:])
    else:
        print(f"Unknown command: {command}")
        print(__doc__)
        sys.exit(1)


def _load(model_arg: str):
    from econet_stability.simulation import FoodWebModel
    from econet_stability.utils.config import load_run_config

    config = load_run_config(model_arg)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    return FoodWebModel(config.model), config.analysis


def _run_analysis(command: str, model_arg: str, extra: list[str]) -> None:
    from econet_stability.errors import StabilityAnalysisError

    try:
        model, analysis = _load(model_arg)
        if command == "stability":
            result = _stability(model, analysis)
        elif command == "sensitivity":
            result = _sensitivity(model, analysis)
        else:
            n_rep = int(extra[0]) if extra else analysis.n_rep
            result = _robustness(model, analysis, n_rep)
    except (StabilityAnalysisError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(json.dumps(result, indent=2))


def _equilibrium(model, analysis):
    import numpy as np

    from econet_stability.simulation import simulate

    return simulate(model, np.ones(model.richness), analysis.t_end).final


def _stability(model, analysis) -> dict:
    from econet_stability.analysis import model_jacobian, reactivity, resilience

    B_eq = _equilibrium(model, analysis)
    j = model_jacobian(model, B_eq)
    return {
        "species": model.species,
        "equilibrium": B_eq.tolist(),
        "jacobian": j.tolist(),
        "resilience": resilience(j),
        "reactivity": reactivity(j),
    }


def _sensitivity(model, analysis) -> dict:
    import numpy as np

    from econet_stability.analysis import (
        keystoneness,
        resistance,
        resistance_simulation,
        sensitivity_matrix,
    )
    from econet_stability.errors import UNDEFINED

    B_eq = _equilibrium(model, analysis)
    empirical = resistance_simulation(
        model,
        B_eq,
        mortality_increment=np.full(model.richness, analysis.mortality_increment),
        t_end=analysis.t_end,
    )
    return {
        "species": model.species,
        "equilibrium": B_eq.tolist(),
        "sensitivity": sensitivity_matrix(model, B_eq).tolist(),
        "keystoneness": keystoneness(model, B_eq).tolist(),
        "resistance": resistance(model, B_eq).tolist(),
        "community_resistance": resistance(model, B_eq, aggregated=True),
        # UNDEFINED entries (zero increment) are reported as null
        "empirical_resistance": [None if v is UNDEFINED else float(v) for v in empirical],
    }


def _robustness(model, analysis, n_rep: int) -> dict:
    from econet_stability.analysis import robustness

    estimate = robustness(
        model,
        t_end=analysis.t_end,
        n_rep=n_rep,
        threshold=analysis.threshold,
        seed=analysis.seed,
        n_workers=analysis.n_workers,
    )
    return {"species": model.species, **estimate.to_dict()}


if __name__ == "__main__":
    main()
