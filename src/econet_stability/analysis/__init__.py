"""Stability, sensitivity and robustness analyses."""

from econet_stability.analysis.jacobian import (
    CentralDifference,
    Differentiator,
    growth_rate_function,
    jacobian,
    model_jacobian,
    per_capita_growth_rate_function,
    reactivity,
    resilience,
)
from econet_stability.analysis.robustness import (
    RobustnessEstimate,
    robustness,
    run_trial,
    secondary_extinctions,
)
from econet_stability.analysis.sensitivity import (
    interaction_matrix,
    keystoneness,
    resistance,
    resistance_simulation,
    sensitivity_matrix,
)

__all__ = [
    # jacobian
    "CentralDifference",
    "Differentiator",
    "growth_rate_function",
    "jacobian",
    "model_jacobian",
    "per_capita_growth_rate_function",
    "reactivity",
    "resilience",
    # sensitivity
    "interaction_matrix",
    "keystoneness",
    "resistance",
    "resistance_simulation",
    "sensitivity_matrix",
    # robustness
    "RobustnessEstimate",
    "robustness",
    "run_trial",
    "secondary_extinctions",
]
