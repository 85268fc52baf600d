"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.throttle import THROTTLE_LIMITS, ThrottleConfig

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ThrottleSettings(BaseModel):
    """Limits for one throttle key, in seconds for readability in YAML."""
    max_attempts: int
    window_seconds: int
    block_seconds: Optional[int] = None

    @field_validator("max_attempts", "window_seconds")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure counts and windows are positive."""
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("block_seconds")
    @classmethod
    def validate_block(cls, value: Optional[int]) -> Optional[int]:
        """A block, when given, must be positive."""
        if value is not None and value <= 0:
            raise ValueError("block_seconds must be greater than zero")
        return value

    def to_throttle_config(self) -> ThrottleConfig:
        return ThrottleConfig(
            max_attempts=self.max_attempts,
            window_ms=self.window_seconds * 1000,
            block_duration_ms=self.block_seconds * 1000 if self.block_seconds else None,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Warsaw"
    locale: str = "en"
    slot_step_minutes: int = 30
    upcoming_days: int = 5
    upcoming_per_day: int = 5
    data_file: Optional[Path] = None
    log_level: str = "WARNING"
    throttle: Dict[str, ThrottleSettings] = Field(default_factory=dict)

    @field_validator("slot_step_minutes", "upcoming_days", "upcoming_per_day")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure step and preview sizes are positive."""
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value}")
        return level

    @model_validator(mode="after")
    def validate_slot_step_fits_day(self) -> "AppConfig":
        """A step longer than a day can never produce a second slot."""
        if self.slot_step_minutes > 24 * 60:
            raise ValueError("slot_step_minutes must not exceed one day")
        return self

    def get_log_level(self) -> int:
        return getattr(logging, self.log_level)

    def get_throttle_limits(self) -> Dict[str, ThrottleConfig]:
        """
        Built-in throttle presets with configured overrides applied.
        """
        limits = dict(THROTTLE_LIMITS)
        for key, settings in self.throttle.items():
            limits[key] = settings.to_throttle_config()
        return limits

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative data files are resolved against the config file's folder
        if config.data_file is not None and not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file

        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
