"""econet_stability: stability, sensitivity and robustness of ecological network dynamics."""

__version__ = "0.1.0"

from econet_stability.analysis import (
    RobustnessEstimate,
    interaction_matrix,
    keystoneness,
    model_jacobian,
    reactivity,
    resilience,
    resistance,
    resistance_simulation,
    robustness,
    secondary_extinctions,
    sensitivity_matrix,
)
from econet_stability.errors import (
    UNDEFINED,
    InvalidArgumentError,
    NumericalInstabilityError,
    SingularSystemError,
    TrialFailedError,
)
from econet_stability.simulation import FoodWebModel, default_model, simulate
from econet_stability.utils.species import ALL_SPECIES

__all__ = [
    "ALL_SPECIES",
    "FoodWebModel",
    "InvalidArgumentError",
    "NumericalInstabilityError",
    "RobustnessEstimate",
    "SingularSystemError",
    "TrialFailedError",
    "UNDEFINED",
    "__version__",
    "default_model",
    "interaction_matrix",
    "keystoneness",
    "model_jacobian",
    "reactivity",
    "resilience",
    "resistance",
    "resistance_simulation",
    "robustness",
    "secondary_extinctions",
    "sensitivity_matrix",
    "simulate",
]
