"""Validator configuration using Pydantic Settings.

This module centralizes runtime configuration for the document validator.
Values can be provided via environment variables (preferred) or fall back to
the defaults below. A ``Settings`` instance is intended to be retrieved via
``get_settings`` which caches the object for reuse across the process.

Environment variable prefix: ``DOC_VALIDATOR_`` (e.g. ``DOC_VALIDATOR_TAX_RATE``).
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime validator settings.

    Attributes map directly to environment variables using the ``DOC_VALIDATOR_``
    prefix (case-insensitive). For example, ``tax_rate`` <- ``DOC_VALIDATOR_TAX_RATE``.
    """

    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Application log level",
    )

    # Timeout budgets, one per default check
    schema_timeout_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Timeout budget of the content schema check",
    )  # fmt: skip
    credential_timeout_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Timeout budget of the signing credential check",
    )  # fmt: skip
    tax_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout budget of the tax rules check",
    )  # fmt: skip
    registry_timeout_seconds: float = Field(
        default=4.0,
        gt=0,
        description="Timeout budget of the duplicate registry check",
    )  # fmt: skip
    authorization_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout budget of the external authorization check",
    )  # fmt: skip

    # Business rule parameters
    tax_rate: float = Field(
        default=0.35,
        ge=0,
        description="Expected tax as a fraction of the document total",
    )  # fmt: skip
    tax_tolerance: float = Field(
        default=0.01,
        ge=0,
        description="Accepted absolute difference between expected and declared tax",
    )  # fmt: skip
    simulated_latency_seconds: float = Field(
        default=0.0,
        ge=0,
        description="Artificial processing delay applied by the default checks (demo only)",
    )  # fmt: skip

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | None) -> str:
        """Normalize and validate log level."""
        if v is None:
            return "INFO"

        v_upper = str(v).upper()

        allowed = {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR"}
        if v_upper not in allowed:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {', '.join(sorted(allowed))}")

        return v_upper

    model_config = SettingsConfigDict(
        env_prefix="DOC_VALIDATOR_",
        case_sensitive=False,
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the cached ``Settings`` instance.

    The first invocation reads environment variables / .env file; subsequent
    calls reuse the same object to ensure consistent config.
    """

    return Settings()


__all__ = ["Settings", "get_settings"]
