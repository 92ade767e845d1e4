"""Configuration loading and validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from econet_stability.types.model import ModelConfig

# Default config directory relative to package root
_PACKAGE_ROOT = Path(__file__).resolve().parent.parent.parent.parent
_CONFIGS_DIR = _PACKAGE_ROOT / "configs"


class AnalysisConfig(BaseModel):
    """Defaults for the simulation-driven analyses."""

    t_end: float = 1_000
    threshold: float = 1e-6
    n_rep: int = 100
    seed: int | None = 42
    n_workers: int = 1
    mortality_increment: float = 0.1


class EconetStabilityConfig(BaseModel):
    """Top-level configuration for an analysis run.

    ``model`` is the food web under analysis; it is set when the config is
    read from a model file with ``load_run_config``.
    """

    log_level: str = "INFO"
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    model: ModelConfig | None = None


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _model_path(path: str | Path) -> Path:
    path = Path(path)
    if not path.exists() and path.suffix == "":
        path = _CONFIGS_DIR / "models" / f"{path.name}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Model config not found: {path}")
    return path


def load_config(path: str | Path | None = None) -> EconetStabilityConfig:
    """Load global config from a YAML file.

    Falls back to configs/default.yaml if no path is given.
    """
    if path is None:
        path = _CONFIGS_DIR / "default.yaml"
    path = Path(path)

    if not path.exists():
        return EconetStabilityConfig()

    return EconetStabilityConfig(**_read_yaml(path))


def load_run_config(
    path: str | Path, defaults: EconetStabilityConfig | None = None
) -> EconetStabilityConfig:
    """Load a model file as a complete run configuration.

    A bare name (e.g. ``"consumer_resource"``) is looked up in configs/models/.
    The file holds either the ModelConfig fields at top level, or a ``model:``
    section optionally accompanied by ``log_level`` and ``analysis:``
    overrides. Settings the file leaves out come from ``defaults`` (the
    global config by default).
    """
    raw = _read_yaml(_model_path(path))
    if "model" not in raw:
        raw = {"model": raw}
    if defaults is None:
        defaults = load_config()

    analysis = {**defaults.analysis.model_dump(), **(raw.get("analysis") or {})}
    return EconetStabilityConfig(
        log_level=raw.get("log_level", defaults.log_level),
        analysis=AnalysisConfig(**analysis),
        model=ModelConfig(**raw["model"]),
    )


def load_model_config(path: str | Path) -> ModelConfig:
    """Load a food-web model definition from a YAML file or model name."""
    return load_run_config(path, defaults=EconetStabilityConfig()).model
