"""Configuration management for crewmatch."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="CREWMATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application Configuration
    debug: bool = Field(False, description="Enable debug mode (console log rendering)")
    log_level: str = Field("INFO", description="Logging level")

    # Recommendation Configuration
    preview_size: int = Field(5, ge=0, description="Number of postings in the recommendation preview")

    # Workflow Configuration
    max_transition_retries: int = Field(
        3, ge=1, description="Attempts for a status write that loses an optimistic-concurrency race"
    )
    retry_backoff_seconds: float = Field(
        0.0, ge=0.0, description="Base delay between conflicting write attempts"
    )


# Global settings instance
settings = Settings()
