"""
Configuration Management for Mes Comptes

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: The blob store backend is chosen here, once, at process
start. The persistence layer receives a ready store and never inspects
the platform it runs on.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where and how the app data document is stored."""

    model_config = SettingsConfigDict(
        env_prefix="MES_COMPTES_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["file", "key_value"] = Field(
        default="file",
        description="file: a document next to the host process; "
                    "key_value: one key in a key/value namespace"
    )
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".mes-comptes",
        description="Directory holding the data file"
    )
    data_file_name: str = Field(
        default="donnees-comptes.json",
        min_length=1,
        description="Name of the data file inside data_dir"
    )
    storage_key: str = Field(
        default="mes_comptes_data_v1",
        min_length=1,
        description="Key used by the key/value backend"
    )
    shelf_path: Optional[Path] = Field(
        default=None,
        description="Shelf file for the key/value backend (in-memory when unset)"
    )

    @field_validator("data_file_name")
    @classmethod
    def validate_data_file_name(cls, v: str) -> str:
        """The file name must not escape data_dir."""
        if Path(v).name != v:
            raise ValueError(f"data_file_name must be a bare file name, got {v!r}")
        return v

    @property
    def data_file_path(self) -> Path:
        """Full path of the data file."""
        return self.data_dir / self.data_file_name


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Minimum level for diagnostic logging"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry for each group that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
