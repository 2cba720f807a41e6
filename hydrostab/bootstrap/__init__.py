"""
Bootstrap layer: configuration and logging.
"""

from hydrostab.bootstrap.config import (
    ComputeConfig,
    APIConfig,
    LoggingConfig,
    HydroConfig,
    load_config,
    get_config,
)
from hydrostab.bootstrap.logging_setup import configure_logging, JSONFormatter

__all__ = [
    "ComputeConfig",
    "APIConfig",
    "LoggingConfig",
    "HydroConfig",
    "load_config",
    "get_config",
    "configure_logging",
    "JSONFormatter",
]
