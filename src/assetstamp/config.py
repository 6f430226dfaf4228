"""
assetstamp Configuration.

Centralized configuration management using Pydantic Settings.
Loads configuration from environment variables.
"""

import os
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HASH_EXCLUDE = ["__pycache__", "*.pyc", "*.pyo", ".git", ".DS_Store"]


def get_xdg_state_dir() -> str:
    """
    Get XDG-compliant state directory for assetstamp logs.

    Follows XDG Base Directory Specification:
    - Uses $XDG_STATE_HOME/assetstamp if XDG_STATE_HOME is set
    - Falls back to $HOME/.local/state/assetstamp if not set
    - Returns relative path ./logs if HOME not available (dev/testing)

    Returns:
        str: Path to state/logs directory
    """
    xdg_state_home = os.getenv("XDG_STATE_HOME")
    if xdg_state_home:
        return str(Path(xdg_state_home) / "assetstamp" / "logs")

    home = os.getenv("HOME")
    if home:
        return str(Path(home) / ".local" / "state" / "assetstamp" / "logs")

    # Fallback for development/testing environments without HOME
    return "./logs"


def split_modules(value: list[str] | str) -> list[str]:
    """Accept comma-separated env values as well as lists."""
    if isinstance(value, str):
        return [m.strip() for m in value.split(",") if m.strip()]
    return [m for m in value if m]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Versioning
    asset_version_param: str = "version"  # Query parameter carrying the tag
    asset_tag_length: int = 12  # Hex characters kept from derived digests
    asset_root: str = ""  # Base for relative dir: references (cwd if empty)
    asset_manifest_path: str = ""  # Build manifest with precomputed tags
    asset_pinned_tag: str = ""  # Constant tag for every unit (e.g. CI commit SHA)
    asset_cache_tags: bool = True  # Cache tags per unit for the resolver lifetime
    asset_hash_exclude: list[str] = list(DEFAULT_HASH_EXCLUDE)
    provider_modules: list[str] | str = []  # Optional additional provider modules

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = False

    # Application
    environment: str = "development"

    # Logging
    log_level: str = "INFO"
    log_dir: str = ""  # XDG-compliant log directory (defaults to XDG state dir if empty)
    log_format: str = "standard"  # standard or json
    log_console_enabled: bool = True  # Enable console (stdout) logging
    log_file_enabled: bool = False  # Enable file-based logging
    log_max_bytes: int = 10_485_760  # 10MB per log file
    log_backup_count: int = 5  # Keep 5 backup files

    @field_validator("asset_tag_length")
    @classmethod
    def _check_tag_length(cls, value: int) -> int:
        if not 8 <= value <= 64:
            raise ValueError("asset_tag_length must be between 8 and 64")
        return value

    @field_validator("asset_version_param")
    @classmethod
    def _check_param(cls, value: str) -> str:
        if not value or any(c in value for c in "?&=#"):
            raise ValueError(f"Invalid query parameter name: {value!r}")
        return value

    @property
    def log_directory(self) -> Path:
        """Get the log directory path, using XDG default if not specified."""
        if self.log_dir:
            return Path(self.log_dir).expanduser()
        return Path(get_xdg_state_dir())

    @property
    def asset_root_path(self) -> Path:
        """Base directory for relative asset directories."""
        if self.asset_root:
            return Path(self.asset_root).expanduser()
        return Path.cwd()

    @property
    def provider_module_list(self) -> list[str]:
        return split_modules(self.provider_modules)


# Global settings instance
settings = Settings()
