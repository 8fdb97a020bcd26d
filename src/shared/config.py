"""Environment configuration management using pydantic-settings."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from src.shared.constants import DEFAULT_CONFIG_FILE


class SharedConfig(BaseSettings):
    """Base configuration shared across all entry points."""
    log_level: str = Field(default="info", validation_alias="LOG_LEVEL")
    log_format: str = Field(default="text", validation_alias="LOG_FORMAT")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class CoherenceSettings(SharedConfig):
    """Settings for the coherence verification CLI."""
    config_path: str = Field(
        default=DEFAULT_CONFIG_FILE, validation_alias="COHERENCE_CONFIG"
    )
    teamcity_version: str | None = Field(
        default=None, validation_alias="TEAMCITY_VERSION"
    )

    @property
    def under_teamcity(self) -> bool:
        """True when running inside a TeamCity build agent."""
        return self.teamcity_version is not None
