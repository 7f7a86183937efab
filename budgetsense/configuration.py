"""Mini README: Centralised configuration models and helpers for BudgetSense.

Structure:
    * BudgetSenseSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables, pick the storage
    backend, tune the save debounce window, and specify service ports. The
    configuration is cached so the cost of validation is incurred only once
    per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BudgetSenseSettings(BaseSettings):
    """Runtime configuration for the BudgetSense ledger."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGETSENSE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory where the json-file backend keeps one document per dataset.",
    )
    storage_backend: str = Field(
        "json-file",
        description="Identifier of the registered storage backend (json-file, memory or a plugin).",
    )
    save_debounce_seconds: float = Field(
        0.5,
        description="Quiet period after the last edit before a dataset is written.",
        ge=0.0,
    )
    seed_years_back: int = Field(
        2,
        description="Years before the current one created when no ledger has been saved yet.",
        ge=0,
    )
    seed_years_forward: int = Field(
        5,
        description="Years after the current one created when no ledger has been saved yet.",
        ge=0,
    )
    default_theme: str = Field(
        "light",
        description="Theme preference used until the user toggles it.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the JSON API to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the JSON API exposes.",
        ge=1,
        le=65535,
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level applied by the command line entry point.",
    )

    @field_validator("data_directory", mode="before")
    @classmethod
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories."""

        return Path(value or "data").expanduser().resolve()

    @field_validator("default_theme")
    @classmethod
    def _check_theme(cls, value: str) -> str:
        """Only the two themes the interface knows how to render are accepted."""

        normalised = value.strip().lower()
        if normalised not in {"light", "dark"}:
            raise ValueError("default_theme must be 'light' or 'dark'")
        return normalised


@lru_cache()
def get_settings() -> BudgetSenseSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return BudgetSenseSettings()
