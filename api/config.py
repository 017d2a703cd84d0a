"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models import NestingPolicy, ParserOptions


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = Field(default="development", description="Environment: development, stage, prod")
    debug: bool = Field(default=False, description="Debug mode")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    max_document_bytes: int = Field(
        default=10 * 1024 * 1024, gt=0, description="Largest accepted document in bytes"
    )

    # Parser defaults
    nesting_policy: NestingPolicy = Field(
        default=NestingPolicy.LITERAL,
        description="Same-kind nesting handling: literal or reject",
    )
    strip_emphasis: bool = Field(default=True, description="Strip paired emphasis markers")
    honor_escapes: bool = Field(default=True, description="Backslash escapes range markers")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("nesting_policy", mode="before")
    @classmethod
    def parse_nesting_policy(cls, v: Any) -> Any:
        """Accept the policy name in any case, e.g. ``REJECT``."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v: Any) -> Any:
        """Normalise and validate the logging level name."""
        if isinstance(v, str):
            value = v.strip().upper()
            if value not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
                raise ValueError(f"Unknown log level: {v}")
            return value
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env in {"prod", "production"}

    def parser_options(self) -> ParserOptions:
        """Build the per-parse options from the configured defaults."""
        return ParserOptions(
            nesting_policy=self.nesting_policy,
            strip_emphasis=self.strip_emphasis,
            honor_escapes=self.honor_escapes,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
