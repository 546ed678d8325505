"""
Configuration Package - Models and Loaders.

Configuration Structure:
    - MetricsConfig: Root configuration object
    - NamingConfig: Naming strategy and separator
    - ReportingConfig: Prometheus exposition
    - BackendConfig: In-memory registry settings
    - LoggingConfig: Log level and output format

Design Principles:
    - Type-safe via Pydantic
    - Validation on load (fail fast)
    - Support for profiles
"""

from metricbuddy.config.loader import ConfigLoader, load_config
from metricbuddy.config.models import (
    BackendConfig,
    LoggingConfig,
    MetricsConfig,
    NamingConfig,
    ReportingConfig,
)

__all__ = [
    "ConfigLoader",
    "load_config",
    "BackendConfig",
    "LoggingConfig",
    "MetricsConfig",
    "NamingConfig",
    "ReportingConfig",
]
