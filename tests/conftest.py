"""Shared test fixtures for econet_stability."""

import numpy as np
import pytest

from econet_stability.simulation import default_model, simulate


@pytest.fixture
def two_producers():
    """Two independent logistic producers with r = K = 1."""
    return default_model([[0, 0], [0, 0]])


@pytest.fixture
def consumer_resource():
    """Species 1 consumes species 0 through a bioenergetic response."""
    return default_model([[0, 0], [1, 0]])


@pytest.fixture
def competing_producers():
    """Two producers with asymmetric competition, so that A = -C."""
    return default_model([[0, 0], [0, 0]], producer_competition=[[1.0, 0.2], [0.3, 1.0]])


@pytest.fixture
def consumer_resource_equilibrium(consumer_resource):
    return simulate(consumer_resource, np.ones(2), 1_000).final
