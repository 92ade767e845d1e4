"""Tests for the configuration system."""

import pytest
import yaml

from econet_stability.simulation import FoodWebModel
from econet_stability.types.model import FunctionalResponse, ModelConfig
from econet_stability.utils.config import (
    AnalysisConfig,
    EconetStabilityConfig,
    load_config,
    load_model_config,
    load_run_config,
)


class TestAnalysisConfig:
    def test_defaults(self):
        config = AnalysisConfig()
        assert config.t_end == 1_000
        assert config.threshold == 1e-6
        assert config.n_rep == 100
        assert config.seed == 42
        assert config.n_workers == 1

    def test_custom_values(self):
        config = AnalysisConfig(n_rep=10, seed=None)
        assert config.n_rep == 10
        assert config.seed is None


class TestEconetStabilityConfig:
    def test_defaults(self):
        config = EconetStabilityConfig()
        assert config.log_level == "INFO"
        assert config.model is None

    def test_nested_configs(self):
        config = EconetStabilityConfig()
        assert isinstance(config.analysis, AnalysisConfig)


class TestModelConfig:
    def test_defaults(self):
        config = ModelConfig(adjacency=[[0, 0], [1, 0]])
        assert config.richness == 2
        assert config.functional_response == FunctionalResponse.BIOENERGETIC
        assert config.e_herbivory == 0.45
        assert config.e_carnivory == 0.85

    def test_string_functional_response(self):
        config = ModelConfig(adjacency=[[0]], functional_response="classic")
        assert config.functional_response is FunctionalResponse.CLASSIC


class TestLoadConfig:
    def test_load_default_config(self):
        config = load_config()
        assert isinstance(config, EconetStabilityConfig)
        assert config.log_level == "INFO"
        assert config.analysis.seed == 42

    def test_load_nonexistent_returns_defaults(self, tmp_path):
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config.log_level == "INFO"
        assert config.analysis == AnalysisConfig()

    def test_load_from_yaml(self, tmp_path):
        yaml_path = tmp_path / "test.yaml"
        yaml_path.write_text(yaml.dump({
            "log_level": "DEBUG",
            "analysis": {"n_rep": 7, "t_end": 500},
            "model": {"adjacency": [[0, 0], [1, 0]]},
        }))
        config = load_config(yaml_path)
        assert config.log_level == "DEBUG"
        assert config.analysis.n_rep == 7
        assert config.analysis.t_end == 500
        assert config.model.richness == 2


class TestLoadModelConfig:
    def test_load_by_name(self):
        config = load_model_config("consumer_resource")
        assert config.adjacency == [[0, 0], [1, 0]]
        model = FoodWebModel(config)
        assert model.trophic_links == [(1, 0)]

    def test_load_chain(self):
        config = load_model_config("three_species_chain")
        assert config.richness == 3
        assert config.body_mass == [1.0, 10.0, 100.0]

    def test_load_competition(self):
        model = FoodWebModel(load_model_config("producer_competition"))
        assert model.competition[0, 1] == pytest.approx(0.2)

    def test_load_from_path_without_model_key(self, tmp_path):
        path = tmp_path / "web.yaml"
        path.write_text(yaml.dump({"adjacency": [[0]], "species": ["grass"]}))
        config = load_model_config(path)
        assert config.species == ["grass"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_model_config(tmp_path / "nope.yaml")
        with pytest.raises(FileNotFoundError):
            load_model_config("no_such_model")


class TestLoadRunConfig:
    def test_model_file_inherits_global_defaults(self):
        config = load_run_config("consumer_resource")
        assert config.model.adjacency == [[0, 0], [1, 0]]
        assert config.analysis == load_config().analysis
        assert config.log_level == "INFO"

    def test_analysis_overrides(self, tmp_path):
        path = tmp_path / "web.yaml"
        path.write_text(yaml.dump({
            "log_level": "WARNING",
            "analysis": {"n_rep": 3, "threshold": 1e-8},
            "model": {"adjacency": [[0]]},
        }))
        config = load_run_config(path)
        assert config.log_level == "WARNING"
        assert config.analysis.n_rep == 3
        assert config.analysis.threshold == 1e-8
        # Settings left out keep the global values
        assert config.analysis.seed == 42
        assert config.model.richness == 1

    def test_explicit_defaults(self, tmp_path):
        path = tmp_path / "web.yaml"
        path.write_text(yaml.dump({"adjacency": [[0]]}))
        defaults = EconetStabilityConfig(analysis=AnalysisConfig(t_end=50))
        config = load_run_config(path, defaults=defaults)
        assert config.analysis.t_end == 50

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_run_config("no_such_model")
