# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for famlink.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A cached instance is provided via get_settings() for dependency wiring.

Example:
    >>> from famlink.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.store.backend)
    'memory'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """Document store backend selection.

    Attributes:
        backend: Which StoreAdapter implementation to build.
    """

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        extra="ignore",
    )

    backend: Literal["memory", "firebase"] = "memory"


class FirebaseSettings(BaseSettings):
    """Firebase Realtime Database configuration.

    Credentials are resolved in order: service account file, then
    Application Default Credentials.

    Attributes:
        database_url: Realtime Database URL (https://<project>.firebaseio.com).
        credentials_path: Optional path to a service account JSON file.
        project_id: Optional Google Cloud project ID override.
        app_name: Name of the firebase_admin App instance to create or reuse.
        max_workers: Thread pool size for the synchronous Admin SDK.
    """

    model_config = SettingsConfigDict(
        env_prefix="FIREBASE_",
        extra="ignore",
    )

    database_url: str | None = None
    credentials_path: str | None = Field(
        default=None,
        validation_alias="GOOGLE_APPLICATION_CREDENTIALS",
    )
    project_id: str | None = None
    app_name: str = "famlink"
    max_workers: int = 10


class RelationSettings(BaseSettings):
    """Parent-student relationship synchronization configuration.

    Attributes:
        list_update_strategy: How reference lists are mutated.
            "transaction" runs each list change as a conditional
            read-modify-write on the store; "patch" reads, merges
            client-side and patches the owned fields.
    """

    model_config = SettingsConfigDict(
        env_prefix="RELATIONS_",
        extra="ignore",
    )

    list_update_strategy: Literal["transaction", "patch"] = "transaction"


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        store: Store backend settings.
        firebase: Firebase Realtime Database settings.
        relations: Relationship synchronization settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    store: StoreSettings = Field(default_factory=StoreSettings)
    firebase: FirebaseSettings = Field(default_factory=FirebaseSettings)
    relations: RelationSettings = Field(default_factory=RelationSettings)

    @model_validator(mode="after")
    def validate_store_settings(self) -> Self:
        """Validate that the selected store backend is usable.

        Raises:
            ValueError: If Firebase is selected without a database URL, or
                the in-memory store is selected in production.
        """
        if self.store.backend == "firebase" and not self.firebase.database_url:
            raise ValueError(
                "Firebase store backend requires a database URL. "
                "Set FIREBASE_DATABASE_URL environment variable."
            )
        if self.environment == "production" and self.store.backend == "memory":
            raise ValueError(
                "In-memory store cannot be used in production. "
                "Set STORE_BACKEND=firebase."
            )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
