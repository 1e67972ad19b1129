"""
Session configuration models and loader.

A session can be described in a YAML file; every field is optional and
falls back to the reference session (start (-5, -5), goal (7, 7), 20
waypoints, two obstacles of radius 2).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from .core.optimizer import get_registered_optimizers
from .core.trajectory import get_initialization_policies


class ObstacleConfig(BaseModel):
    """A circular obstacle present when the session starts."""

    center: Tuple[float, float] = Field(..., description="(x, y) center of the obstacle")
    radius: float = Field(default=2.0, gt=0, description="Obstacle radius")


class OptimizerConfig(BaseModel):
    """Which optimizer to run and its keyword parameters."""

    name: str = Field(default="chomp", description="Registered optimizer name")
    params: Dict[str, Any] = Field(
        default_factory=dict, description="Keyword arguments for the optimizer factory"
    )

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        available = get_registered_optimizers()
        if value not in available:
            raise ValueError(f"Unknown optimizer '{value}'. Available optimizers: {available}")
        return value


def _reference_obstacles() -> List[ObstacleConfig]:
    return [
        ObstacleConfig(center=(3.0, 0.0), radius=2.0),
        ObstacleConfig(center=(0.0, 3.0), radius=2.0),
    ]


class SessionConfig(BaseModel):
    """Top-level configuration object for an interactive session."""

    title: str = Field(default="chomp", description="Window title")
    start: Tuple[float, float] = Field(default=(-5.0, -5.0), description="Fixed start configuration")
    goal: Tuple[float, float] = Field(default=(7.0, 7.0), description="Fixed goal configuration")
    num_waypoints: int = Field(default=20, ge=1, description="Number of optimized waypoints")
    obstacles: List[ObstacleConfig] = Field(
        default_factory=_reference_obstacles, description="Obstacles present at startup"
    )
    initial_trajectory: str = Field(
        default="linear", description="Waypoint initialization policy (linear, jumble, or custom)"
    )
    seed: Optional[int] = Field(default=None, description="Seed for stochastic initialization")
    default_obstacle_radius: float = Field(
        default=2.0, gt=0, description="Radius of obstacles created with the secondary button"
    )
    view_margin: float = Field(
        default=2.0, ge=0, description="Padding around the trajectory bounding box"
    )
    optimizer: OptimizerConfig = Field(default_factory=OptimizerConfig)

    @field_validator("initial_trajectory")
    @classmethod
    def _validate_policy(cls, value: str) -> str:
        available = get_initialization_policies()
        if value not in available:
            raise ValueError(
                f"Unknown initialization policy '{value}'. Available policies: {available}"
            )
        return value


def reference_session_config() -> SessionConfig:
    return SessionConfig()


def load_session_config(path: Union[str, Path]) -> SessionConfig:
    """
    Load and validate a session description from a YAML file.

    Parameters
    ----------
    path:
        Path to the YAML configuration file.

    Returns
    -------
    SessionConfig
        Parsed and validated configuration object.
    """

    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        raw_data = yaml.safe_load(handle) or {}

    return SessionConfig.model_validate(raw_data)
