"""Tests for the bioenergetic food-web model."""
from __future__ import annotations

import numpy as np
import pytest

from econet_stability.errors import InvalidArgumentError
from econet_stability.simulation import FoodWebModel, default_model
from econet_stability.types.model import FunctionalResponse, ModelConfig


class TestFoodWebCreation:
    def test_default_species_names(self, consumer_resource):
        assert consumer_resource.species == ["s1", "s2"]
        assert consumer_resource.richness == 2

    def test_producers_and_consumers(self, consumer_resource):
        np.testing.assert_array_equal(consumer_resource.producers, [True, False])
        np.testing.assert_array_equal(consumer_resource.consumers, [False, True])
        assert consumer_resource.trophic_links == [(1, 0)]

    def test_allometric_defaults(self, consumer_resource):
        np.testing.assert_allclose(consumer_resource.r, [1.0, 0.0])
        np.testing.assert_allclose(consumer_resource.x, [0.0, 0.314])
        np.testing.assert_allclose(consumer_resource.y, [0.0, 8.0])
        np.testing.assert_allclose(consumer_resource.mortality, [0.0, 0.0])
        assert consumer_resource.e[1, 0] == pytest.approx(0.45)

    def test_carnivory_efficiency(self):
        m = default_model([[0, 0, 0], [1, 0, 0], [0, 1, 0]])
        assert m.e[1, 0] == pytest.approx(0.45)
        assert m.e[2, 1] == pytest.approx(0.85)

    def test_diet_preferences_sum_to_one(self):
        m = default_model([[0, 0, 0], [0, 0, 0], [1, 1, 0]])
        np.testing.assert_allclose(m.w.sum(axis=1), [0.0, 0.0, 1.0])

    def test_from_config(self):
        config = ModelConfig(adjacency=[[0]], species=["grass"], growth_rate=[2.0])
        m = FoodWebModel.from_config(config)
        assert m.species == ["grass"]
        assert m.r[0] == 2.0

    def test_custom_functional_response(self):
        m = default_model([[0, 0], [1, 0]], functional_response="classic")
        assert m.functional_response is FunctionalResponse.CLASSIC


class TestFoodWebValidation:
    def test_non_square_adjacency(self):
        with pytest.raises(InvalidArgumentError):
            FoodWebModel(ModelConfig(adjacency=[[0, 1]]))

    def test_non_binary_adjacency(self):
        with pytest.raises(InvalidArgumentError):
            default_model([[0, 0], [2, 0]])

    def test_vector_length_mismatch(self):
        with pytest.raises(InvalidArgumentError, match="growth_rate"):
            default_model([[0, 0], [0, 0]], growth_rate=[1.0])

    def test_duplicate_species_names(self):
        with pytest.raises(InvalidArgumentError):
            default_model([[0, 0], [0, 0]], species=["a", "a"])

    def test_hill_exponent_below_one(self):
        with pytest.raises(InvalidArgumentError):
            default_model([[0, 0], [1, 0]], hill_exponent=0.5)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            default_model([[0, 0], [0, 0]], mortality=[0.1])


class TestGrowthRates:
    def test_logistic_producers(self, two_producers):
        B = np.array([0.5, 2.0])
        np.testing.assert_allclose(two_producers.dudt(B), [0.25, -2.0])
        np.testing.assert_allclose(two_producers.dudt_per_capita(B), [0.5, -1.0])

    def test_zero_growth_at_carrying_capacity(self, two_producers):
        np.testing.assert_allclose(two_producers.dudt(np.ones(2)), [0.0, 0.0])

    def test_absolute_is_biomass_times_per_capita(self, consumer_resource):
        B = np.array([0.3, 0.7])
        np.testing.assert_allclose(
            consumer_resource.dudt(B), B * consumer_resource.dudt_per_capita(B)
        )

    def test_per_capita_finite_at_zero_biomass(self, consumer_resource):
        pgr = consumer_resource.dudt_per_capita(np.zeros(2))
        assert np.all(np.isfinite(pgr))
        # Starving consumer only pays its metabolic cost
        assert pgr[1] == pytest.approx(-0.314)

    def test_bioenergetic_consumer_equations(self, consumer_resource):
        B = np.array([0.4, 0.2])
        F = 0.4**2 / (0.5**2 + 0.4**2)
        x, y, e = 0.314, 8.0, 0.45
        expected = np.array([
            0.4 * (1 - 0.4) - x * y * 0.2 * F / e,
            x * y * 0.2 * F - x * 0.2,
        ])
        np.testing.assert_allclose(consumer_resource.dudt(B), expected)
        assert consumer_resource.feeding_rates(B)[1, 0] == pytest.approx(F)

    def test_classic_consumer_equations(self):
        m = default_model([[0, 0], [1, 0]], functional_response="classic")
        B = np.array([0.4, 0.2])
        a, ht, e, x = 50.0, 1.0, 0.45, 0.314
        F = a * 0.4**2 / (1 + a * ht * 0.4**2)
        expected = np.array([
            0.4 * (1 - 0.4) - 0.2 * F,
            e * 0.2 * F - x * 0.2,
        ])
        np.testing.assert_allclose(m.dudt(B), expected)

    def test_mortality_reduces_growth(self, two_producers):
        pressed = two_producers.copy()
        pressed.mortality = pressed.mortality + 0.1
        np.testing.assert_allclose(pressed.dudt_per_capita(np.ones(2)), [-0.1, -0.1])


class TestModelCopy:
    def test_copy_is_independent(self, two_producers):
        clone = two_producers.copy()
        clone.mortality = [0.5, 0.5]
        np.testing.assert_allclose(two_producers.mortality, [0.0, 0.0])

    def test_mortality_setter_validates_length(self, two_producers):
        with pytest.raises(InvalidArgumentError):
            two_producers.mortality = [0.1, 0.2, 0.3]

    def test_check_biomass_rejects_negative(self, two_producers):
        with pytest.raises(InvalidArgumentError):
            two_producers.check_biomass([-1.0, 1.0])

    def test_check_biomass_rejects_wrong_length(self, two_producers):
        with pytest.raises(InvalidArgumentError):
            two_producers.check_biomass([1.0, 1.0, 1.0])
