"""
Code Optimizer Configuration — pydantic-settings based.

All settings are read from environment variables (prefix CODE_OPTIMIZER_)
or a .env file. These are service defaults; per-analysis policy lives in
AnalysisConfig.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from code_optimizer.models.config_models import DEFAULT_MINIMUM_CONFIDENCE, clamp_confidence

VERSION = "0.4.0"


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── Analysis defaults ──
    default_minimum_confidence: float = Field(
        default=DEFAULT_MINIMUM_CONFIDENCE,
        description="Minimum confidence applied when a request carries no configuration",
    )
    strict_language: bool = Field(
        default=False,
        description="Reject unrecognized languages instead of returning no suggestions",
    )
    rules_config_path: str | None = Field(
        default=None,
        description="Optional configuration file (JSON or directive text) loaded as the default policy",
    )

    # ── Input limits ──
    max_source_bytes: int = Field(
        default=1_000_000, description="Largest source text accepted per file (bytes)"
    )
    max_batch_files: int = Field(
        default=200, description="Largest number of files accepted per batch request"
    )

    # ── Cache ──
    cache_ttl_seconds: int = Field(
        default=3600, description="Time-to-live for cached analysis reports"
    )
    cache_max_entries: int = Field(
        default=10_000, description="Cached reports kept before the oldest are evicted"
    )

    # ── Server ──
    port: int = Field(default=5001, description="Server port")
    host: str = Field(default="0.0.0.0", description="Server bind host")
    cors_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )

    # ── Logging / Audit ──
    log_level: str = Field(default="INFO", description="Root log level")
    audit_log_path: str = Field(
        default="audit.jsonl", description="Path to JSON-lines audit log file"
    )

    @field_validator("default_minimum_confidence", mode="before")
    @classmethod
    def _clamp_default_confidence(cls, value: Any) -> float:
        return clamp_confidence(value, "default_minimum_confidence")

    model_config = {
        "env_prefix": "CODE_OPTIMIZER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Shared instance; import this rather than constructing Settings()
settings = Settings()
