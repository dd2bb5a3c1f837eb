"""Configuration loading for critpath.

A single YAML file (critpath_config.yaml) holds engine behavior and per-format
rendering options. Every section is optional.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigError
from .models import GraphFormat

DEFAULT_CONFIG_NAME = "critpath_config.yaml"


class EngineConfig(BaseModel):
    """Behavior of the build pipeline."""

    strict_resolution: bool = False  # Raise on unknown dependency names instead of dropping
    fail_on_cycle: bool = False  # Raise instead of reporting the cycle on the result
    effort_scale: float = Field(default=0.5, gt=0, allow_inf_nan=False)
    formats: list[GraphFormat] = Field(default_factory=lambda: [GraphFormat.GANTT])


class GanttConfig(BaseModel):
    """Configuration for the Mermaid gantt network chart."""

    title: str = "Project Timeline"
    axis_format: str | None = None
    # "resolved": after-references use resolved predecessor ids
    # "first-name": after-reference is the first declared dependency name
    anchor: Literal["resolved", "first-name"] = "resolved"


class FlowchartConfig(BaseModel):
    """Configuration for the Mermaid flowchart."""

    direction: Literal["LR", "RL", "TB", "BT", "TD"] = "LR"


class DotConfig(BaseModel):
    """Configuration for the Graphviz output."""

    rankdir: Literal["LR", "RL", "TB", "BT"] = "LR"
    critical_color: str = "red"

    @field_validator("critical_color")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("critical_color must not be empty")
        return v


class CritpathConfig(BaseModel):
    """Top-level configuration."""

    engine: EngineConfig = Field(default_factory=EngineConfig)
    gantt: GanttConfig = Field(default_factory=GanttConfig)
    flowchart: FlowchartConfig = Field(default_factory=FlowchartConfig)
    dot: DotConfig = Field(default_factory=DotConfig)


class _Context:
    """Application context for the CLI's global options."""

    def __init__(self) -> None:
        self.config_path: Path | None = None


_context = _Context()


def get_config_path() -> Path | None:
    """Get the config path set by the CLI's --config option."""
    return _context.config_path


def set_config_path(path: Path | None) -> None:
    """Set the global config path."""
    _context.config_path = path


def load_config(config_path: Path | str) -> CritpathConfig:
    """Load configuration from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the file is empty, not YAML, or fails validation
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config YAML: {e}") from e

    if not data:
        raise ConfigError("Empty configuration file")
    if not isinstance(data, dict):
        raise ConfigError("Config must contain a mapping at the root level")

    try:
        return CritpathConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e


def discover_config(
    plan_path: Path | None = None, config_path: Path | None = None
) -> CritpathConfig:
    """Find and load configuration, falling back to defaults.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. plan directory / critpath_config.yaml
    4. Current directory / critpath_config.yaml
    """
    # An explicitly named file must exist
    explicit = config_path or get_config_path()
    if explicit is not None:
        return load_config(explicit)

    candidates: list[Path] = []
    if plan_path is not None:
        candidates.append(Path(plan_path).parent / DEFAULT_CONFIG_NAME)
    candidates.append(Path(DEFAULT_CONFIG_NAME))

    for candidate in candidates:
        if candidate.exists():
            return load_config(candidate)

    return CritpathConfig()
