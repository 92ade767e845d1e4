"""Exception hierarchy and the undefined-response marker."""

from __future__ import annotations


class StabilityAnalysisError(Exception):
    """Base class for all errors raised by econet_stability."""


class InvalidArgumentError(StabilityAnalysisError, ValueError):
    """Bad species selector, biomass length, horizon or replicate count."""


class SingularSystemError(StabilityAnalysisError):
    """The interaction matrix cannot be inverted."""


class NumericalInstabilityError(StabilityAnalysisError):
    """A numerical routine (integration, eigensolver, differentiation) failed."""


class TrialFailedError(NumericalInstabilityError):
    """A robustness trial aborted while re-simulating the community."""

    def __init__(self, trial: int, step: int, reason: str) -> None:
        self.trial = trial
        self.step = step
        self.reason = reason
        super().__init__(f"Robustness trial {trial} failed at step {step}: {reason}")

    def __reduce__(self):
        return (type(self), (self.trial, self.step, self.reason))


class UndefinedResponse:
    """Marker for a normalized response whose perturbation was zero.

    Arithmetic with the marker raises ``TypeError`` so it cannot leak into
    an aggregate unnoticed.
    """

    _instance: UndefinedResponse | None = None

    def __new__(cls) -> UndefinedResponse:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = UndefinedResponse()


def check_positive(name: str, value: float) -> None:
    """Raise InvalidArgumentError unless ``value`` is strictly positive."""
    if not value > 0:
        raise InvalidArgumentError(f"`{name}` must be positive, got {value}")


def check_non_negative(name: str, value: float) -> None:
    """Raise InvalidArgumentError unless ``value`` is zero or positive."""
    if not value >= 0:
        raise InvalidArgumentError(f"`{name}` must be non-negative, got {value}")
