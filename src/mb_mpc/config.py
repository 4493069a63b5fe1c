"""Centralized application configuration."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

DEFAULT_DATA_DIR = Path.home() / ".local" / "mb-mpc"

# config.toml keys and the types they must have to be used
_TOML_FIELDS: dict[str, type] = {
    "host": str,
    "port": int,
    "password": str,
    "timeout": int,
    "connect_timeout": int,
    "idle_timeout": int,
    "tag_filtering": bool,
    "report_missing_tags": bool,
}


class Config(BaseModel):
    """Application-wide configuration."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = Field(description="Base directory for configuration and logs")
    host: str = Field(default="localhost", min_length=1, description="MPD host, IP address, or unix socket path")
    port: int = Field(default=6600, ge=1, le=65535, description="MPD TCP port")
    password: str | None = Field(default=None, description="MPD password (None = do not authenticate)")
    timeout: int = Field(default=30, ge=1, description="Read deadline for one command in seconds")
    connect_timeout: int = Field(default=5, ge=1, description="Deadline for connecting and the greeting in seconds")
    idle_timeout: int = Field(default=86400, ge=1, description="Read deadline for idle in seconds")
    tag_filtering: bool = Field(default=True, description="Reduce queue tracks to the essential tags")
    report_missing_tags: bool = Field(default=False, description="Fail when queue tracks lack essential tags")

    @computed_field(description="Optional TOML configuration file")
    @property
    def config_path(self) -> Path:
        """Optional TOML configuration file."""
        return self.data_dir / "config.toml"

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.data_dir / "mpc.log"

    @staticmethod
    def build(data_dir: Path | None = None, *, host: str | None = None, port: int | None = None) -> Config:
        """Build a Config from defaults, optional config.toml, and command line overrides."""
        resolved_dir = data_dir if data_dir is not None else DEFAULT_DATA_DIR
        config_path = resolved_dir / "config.toml"

        kwargs: dict[str, Any] = {"data_dir": resolved_dir}
        if config_path.is_file():
            with config_path.open("rb") as f:
                toml_data = tomllib.load(f)
            for key, expected in _TOML_FIELDS.items():
                value = toml_data.get(key)
                # bool is an int subclass; keep it out of the integer fields
                if isinstance(value, expected) and not (expected is int and isinstance(value, bool)):
                    kwargs[key] = value

        if host is not None:
            kwargs["host"] = host
        if port is not None:
            kwargs["port"] = port
        return Config(**kwargs)
