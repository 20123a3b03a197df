"""
Application Settings
===================

Generator settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from language_atlas.models.schemas import GeneratorStrategy


class Settings(BaseSettings):
    """Generator settings with environment variable support."""

    # Application Configuration
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )

    # Generation Configuration
    placeholder_text: str = Field(
        default="ToDo!", description="Text returned by fields without any template"
    )
    default_strategy: GeneratorStrategy = Field(
        default=GeneratorStrategy.SOURCE, description="Emitter strategy: source or table"
    )
    generated_header: str = Field(
        default="Generated by language-atlas. Do not edit by hand.",
        description="Header comment written at the top of generated modules",
    )
    enum_module: Optional[str] = Field(
        default=None, description="Module generated sources import the target enum from"
    )

    # Monitoring Configuration
    log_level: str = Field(default="INFO", description="Logging level")

    @property
    def deprecation_note(self) -> str:
        """Deprecation note attached to placeholder accessors."""
        return f"No language string provided for this field. Defaulting to {self.placeholder_text!r}"

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("placeholder_text")
    @classmethod
    def validate_placeholder_text(cls, v: str) -> str:
        """Placeholder text is emitted verbatim and must not look like a template."""
        if "{" in v or "}" in v:
            raise ValueError("Placeholder text cannot contain braces")
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="LANGUAGE_ATLAS_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
