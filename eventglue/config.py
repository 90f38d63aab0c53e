"""Configuration management using Pydantic Settings."""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from EVENTGLUE_* environment variables."""

    model_config = SettingsConfigDict(
        # Only load .env file in development (not Lambda/production)
        env_file=".env" if os.getenv("AWS_EXECUTION_ENV") is None else None,
        env_file_encoding="utf-8",
        env_prefix="EVENTGLUE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"

    # Attribute resolution
    # Strict mode rejects conflicting kinds and modifiers the kind cannot use
    strict_attributes: bool = True

    # Code generation
    runtime_module: str = "eventglue.runtime"
    bindings_module: str = "eventglue.runtime.bindings"
    output_suffix: str = "_glue"

    # Hosts
    handler_module: str | None = None
    dev_host: str = "127.0.0.1"
    dev_port: int = 8787

    @field_validator("runtime_module", "bindings_module")
    @classmethod
    def validate_module_path(cls, v: str) -> str:
        """Ensure generated imports name a dotted module path."""
        if not v or not all(part.isidentifier() for part in v.split(".")):
            raise ValueError(f"not a dotted module path: {v!r}")
        return v

    @field_validator("handler_module", mode="before")
    @classmethod
    def convert_empty_string_to_none(cls, v):
        """Treat an empty handler path as unset."""
        if isinstance(v, str) and v.strip() == "":
            return None
        return v


# Global settings instance
settings = Settings()
