"""Community dynamics models and their integrator."""

from econet_stability.simulation.base import DynamicsModel
from econet_stability.simulation.food_web import FoodWebModel, default_model
from econet_stability.simulation.integrate import simulate

__all__ = ["DynamicsModel", "FoodWebModel", "default_model", "simulate"]
