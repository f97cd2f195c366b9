"""Configuration for the Spawn Config plugin."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .discovery import DEFAULT_EXCLUDE_PATTERNS, DEFAULT_INCLUDE_PATTERNS, DEFAULT_SUFFIX


class SpawnConfigSettings(BaseSettings):
    """Plugin settings loaded from SPAWN_CONFIG_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SPAWN_CONFIG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Config document (relative paths resolve against the host data dir)
    config_path: Path = Path("config/SpawnConfig.json")

    # Delay before the startup sweep so the engine finishes its own population
    grace_seconds: float = 1.0
    shutdown_timeout: float = 3.0

    # Discovery filters (substring matches against manifest paths)
    include_patterns: list[str] = list(DEFAULT_INCLUDE_PATTERNS)
    exclude_patterns: list[str] = list(DEFAULT_EXCLUDE_PATTERNS)
    required_suffix: str = DEFAULT_SUFFIX

    # Seed for the gate's random source; None = nondeterministic
    seed: Optional[int] = None

    @classmethod
    def from_context(cls, overrides: dict[str, Any] | None = None) -> SpawnConfigSettings:
        """Environment values with per-plugin host settings applied on top."""
        return cls(**(overrides or {}))

    def resolve_config_path(self, data_dir: Path) -> Path:
        if self.config_path.is_absolute():
            return self.config_path
        return Path(data_dir) / self.config_path
