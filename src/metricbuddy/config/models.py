"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic.
"""

from __future__ import annotations

import logging
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class NamingConfig(BaseModel):
    """How operation names become metric names."""

    strategy: Literal["identity", "snake", "path"] = "identity"
    separator: Optional[str] = Field(default=None, min_length=1, max_length=1)


class ReportingConfig(BaseModel):
    """Exposition of collected metrics."""

    prometheus: bool = False


class BackendConfig(BaseModel):
    """In-memory metric registry settings."""

    reservoir_size: int = Field(default=1028, ge=1)


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    json_output: bool = Field(default=False, alias="json")

    model_config = {"populate_by_name": True}

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


class MetricsConfig(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    naming: NamingConfig = Field(default_factory=NamingConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"populate_by_name": True}
