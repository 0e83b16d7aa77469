"""Configuration management with Pydantic and YAML support."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pomoline.clock.state import ClockConfig


def _xdg_dir(env_var: str, fallback: str) -> Path:
    base = os.environ.get(env_var)
    return (Path(base) if base else Path.home() / fallback) / "pomoline"


class ClockSettings(BaseModel):
    """Interval schedule configuration."""

    work_minutes: int = Field(default=25, ge=1, description="Length of a work set")
    short_break_minutes: int = Field(default=5, ge=1, description="Break between work sets")
    long_break_minutes: int = Field(default=15, ge=1, description="Break after the last set")
    sets_until_long_break: int = Field(default=4, ge=1, description="Work sets per cycle")
    tick_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Seconds per clock minute; lower only for demos and testing",
    )

    def to_clock_config(self) -> ClockConfig:
        return ClockConfig(
            work_minutes=self.work_minutes,
            short_break_minutes=self.short_break_minutes,
            long_break_minutes=self.long_break_minutes,
            sets_until_long_break=self.sets_until_long_break,
        )


class NotificationConfig(BaseModel):
    """Desktop notification configuration."""

    enabled: bool = True
    backend: str = Field(default="auto", pattern="^(auto|notify-send|osascript|none)$")
    icon: str | None = Field(
        default="appointment-soon",
        description="Icon path or freedesktop icon name",
    )
    timeout_seconds: float = Field(default=5.0, gt=0)


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="POMOLINE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(default_factory=lambda: _xdg_dir("XDG_STATE_HOME", ".local/state"))
    log_dir: Path = Field(
        default_factory=lambda: _xdg_dir("XDG_STATE_HOME", ".local/state") / "logs"
    )
    config_dir: Path = Field(default_factory=lambda: _xdg_dir("XDG_CONFIG_HOME", ".config"))

    # Log level
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    control_poll_seconds: float = Field(
        default=0.5, gt=0, description="How often the daemon checks for commands"
    )

    # Sub-configurations
    clock: ClockSettings = Field(default_factory=ClockSettings)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)

    @property
    def pid_file(self) -> Path:
        """Path to daemon PID file."""
        return self.data_dir / "daemon.pid"

    @property
    def control_dir(self) -> Path:
        """Directory of queued commands read by the daemon."""
        return self.data_dir / "control"

    @property
    def status_file(self) -> Path:
        """Path to the status file written by the daemon."""
        return self.data_dir / "status.json"

    @property
    def config_file(self) -> Path:
        """Path to YAML config file."""
        return self.config_dir / "config.yaml"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        os.chmod(self.data_dir, 0o700)

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from YAML file, environment variables, and defaults.

        Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values
        """
        env_settings = cls()
        config_path = config_path or env_settings.config_file

        yaml_config: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f) or {}

        # Init kwargs outrank env vars in pydantic-settings, so env values
        # have to be merged over the file explicitly.
        env_config = env_settings.model_dump(exclude_unset=True)
        return cls(**_deep_merge(yaml_config, env_config))

    def save(self, config_path: Path | None = None) -> None:
        """Save current configuration to YAML file."""
        config_path = config_path or self.config_file
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode="json", exclude_none=True)

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@lru_cache
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.load()
