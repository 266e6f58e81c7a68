"""
Engine configuration.

Hand-tuned thresholds (dedup window, zoom threshold, hint bands) live here
as configurable values. Configuration may be built in code or loaded from
a YAML or JSON file.

Example:
    config = EngineConfig.from_file("turnabout.yaml")
    dispatcher = Dispatcher.from_config(probe, config)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any

import yaml

from turnabout_access.errors import ConfigError


SPEECH_MODES = ("auto", "universal", "nvda", "orca", "say", "none")
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass(frozen=True)
class HintBands:
    """Connection-count bands for the 12-dot puzzle hints.

    0 connections -> start; 1..first_shape_max -> continue first shape;
    ..second_shape_max -> draw second shape; above -> done.
    """
    start: int = 0
    first_shape_max: int = 2
    second_shape_max: int = 5

    def band(self, connections: int) -> str:
        if connections <= self.start:
            return "start"
        if connections <= self.first_shape_max:
            return "first_shape"
        if connections <= self.second_shape_max:
            return "second_shape"
        return "done"


@dataclass
class EngineConfig:
    """Configuration for the announcement engine.

    Attributes:
        duplicate_window_s: Identical announcements within this window collapse
        zoom_threshold: Minimum change of the rounded zoom ratio to announce
        hint_bands: Dot puzzle hint bands
        speech_mode: Speech capability selection
        language: Message catalog language
        interrupt_navigation: Deliver navigation announcements with interrupt
        diagnostic_capacity: Size of the diagnostic ring buffer
        log_level: Minimum log level
        log_json: Structured log lines as JSON
    """
    duplicate_window_s: float = 0.5
    zoom_threshold: float = 0.05
    hint_bands: HintBands = field(default_factory=HintBands)
    speech_mode: str = "auto"
    language: str = "en"
    interrupt_navigation: bool = False
    diagnostic_capacity: int = 200
    log_level: str = "info"
    log_json: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.hint_bands, dict):
            try:
                self.hint_bands = HintBands(**self.hint_bands)
            except TypeError as e:
                raise ConfigError(f"Invalid hint_bands: {e}") from e
        elif not isinstance(self.hint_bands, HintBands):
            raise ConfigError(
                f"hint_bands must be a mapping, got {type(self.hint_bands).__name__}"
            )
        self.validate()

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigError: If any value is out of range
        """
        if self.duplicate_window_s < 0:
            raise ConfigError("duplicate_window_s must be >= 0")
        if self.zoom_threshold <= 0:
            raise ConfigError("zoom_threshold must be > 0")
        if self.speech_mode not in SPEECH_MODES:
            raise ConfigError(
                f"Unknown speech_mode '{self.speech_mode}'",
                {"allowed": list(SPEECH_MODES)},
            )
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log_level '{self.log_level}'")
        if self.diagnostic_capacity < 1:
            raise ConfigError("diagnostic_capacity must be >= 1")
        bands = self.hint_bands
        if not (bands.start <= bands.first_shape_max <= bands.second_shape_max):
            raise ConfigError("hint_bands must be non-decreasing")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigError(str(e)) from e

    @classmethod
    def from_file(cls, path: str | Path) -> "EngineConfig":
        """Load a config from a .yaml/.yml or .json file."""
        path = Path(path)
        try:
            with open(path) as f:
                if path.suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                elif path.suffix == ".json":
                    data = json.load(f)
                else:
                    raise ConfigError(f"Unsupported file format: {path.suffix}")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot parse {path}: {e}") from e

        return cls.from_dict(data or {})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        path = Path(path)
        data = self.to_dict()
        if path.suffix in (".yaml", ".yml"):
            with open(path, "w") as f:
                yaml.dump(data, f, default_flow_style=False)
        elif path.suffix == ".json":
            with open(path, "w") as f:
                json.dump(data, f, indent=2)
        else:
            raise ConfigError(f"Unsupported file format: {path.suffix}")
