"""
bootstrap/config.py - Application configuration

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional
from pathlib import Path
import os
import json
import logging

from hydrostab.core.constants import (
    DEFAULT_DECIMAL_PLACES,
    FULL_IMMERSION_MAX_ITERATIONS,
    FULL_IMMERSION_VOLUME_TOLERANCE,
    GRAVITY_M_S2,
    SEAWATER_DENSITY_KG_M3,
)
from hydrostab.errors import InvalidArgumentError

logger = logging.getLogger("bootstrap.config")

ENV_PREFIX = "HYDROSTAB_"


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


@dataclass
class ComputeConfig:
    """Numerical settings for the calculators."""

    default_rho: float = SEAWATER_DENSITY_KG_M3
    gravity: float = GRAVITY_M_S2
    displacement_convention: str = "mass"  # "mass" -> V·rho (kg), "force" -> V·rho·g (N)
    decimal_places: int = DEFAULT_DECIMAL_PLACES
    max_workers: int = 1  # 1 = sequential
    full_immersion_tolerance: float = FULL_IMMERSION_VOLUME_TOLERANCE
    full_immersion_max_iterations: int = FULL_IMMERSION_MAX_ITERATIONS
    default_curve_points: int = 50

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.displacement_convention not in ("mass", "force"):
            raise InvalidArgumentError(
                f"displacement_convention must be 'mass' or 'force', got '{self.displacement_convention}'",
                param="displacement_convention",
            )
        if self.default_rho <= 0:
            raise InvalidArgumentError("default_rho must be positive", param="default_rho")
        if self.max_workers < 1:
            raise InvalidArgumentError("max_workers must be >= 1", param="max_workers")
        if self.decimal_places < 0:
            raise InvalidArgumentError("decimal_places must be >= 0", param="decimal_places")
        if self.default_curve_points < 2:
            raise InvalidArgumentError("default_curve_points must be >= 2", param="default_curve_points")

    @classmethod
    def from_env(cls) -> "ComputeConfig":
        return cls(
            default_rho=float(_env("DEFAULT_RHO", str(SEAWATER_DENSITY_KG_M3))),
            gravity=float(_env("GRAVITY", str(GRAVITY_M_S2))),
            displacement_convention=_env("DISPLACEMENT_CONVENTION", "mass").lower(),
            decimal_places=int(_env("DECIMAL_PLACES", str(DEFAULT_DECIMAL_PLACES))),
            max_workers=int(_env("MAX_WORKERS", "1")),
            full_immersion_tolerance=float(_env("FI_TOLERANCE", str(FULL_IMMERSION_VOLUME_TOLERANCE))),
            full_immersion_max_iterations=int(_env("FI_MAX_ITERATIONS", str(FULL_IMMERSION_MAX_ITERATIONS))),
            default_curve_points=int(_env("CURVE_POINTS", "50")),
        )


@dataclass
class APIConfig:
    """API server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    enable_docs: bool = True
    docs_url: str = "/docs"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "APIConfig":
        cors = _env("API_CORS_ORIGINS", "*")
        return cls(
            host=_env("API_HOST", "0.0.0.0"),
            port=int(_env("API_PORT", "8000")),
            enable_docs=_env("API_ENABLE_DOCS", "true").lower() == "true",
            docs_url=_env("API_DOCS_URL", "/docs"),
            cors_origins=cors.split(",") if cors else ["*"],
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=_env("LOG_LEVEL", "INFO"),
            format=_env("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv(f"{ENV_PREFIX}LOG_FILE"),
            json_logs=_env("JSON_LOGS", "false").lower() == "true",
        )


@dataclass
class HydroConfig:
    """Root configuration for hydrostab."""

    environment: str = "development"
    debug: bool = False
    version: str = "1.0.0"

    compute: ComputeConfig = field(default_factory=ComputeConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "HydroConfig":
        """Create configuration from environment variables."""
        return cls(
            environment=_env("ENVIRONMENT", "development"),
            debug=_env("DEBUG", "false").lower() == "true",
            compute=ComputeConfig.from_env(),
            api=APIConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "HydroConfig":
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HydroConfig":
        """Environment configuration overridden by dictionary values."""
        config = cls.from_env()

        if "environment" in data:
            config.environment = data["environment"]
        if "debug" in data:
            config.debug = data["debug"]

        for section in ("compute", "api", "logging"):
            target = getattr(config, section)
            for key, value in data.get(section, {}).items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning(f"Ignoring unknown config key: {section}.{key}")

        config.compute.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "version": self.version,
            "compute": asdict(self.compute),
            "api": {
                "host": self.api.host,
                "port": self.api.port,
                "enable_docs": self.api.enable_docs,
            },
            "logging": {
                "level": self.logging.level,
                "json_logs": self.logging.json_logs,
            },
        }


# Global config instance
_config: Optional[HydroConfig] = None


def load_config(filepath: Optional[str] = None) -> HydroConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        HydroConfig instance
    """
    global _config

    if filepath:
        _config = HydroConfig.from_file(filepath)
    else:
        default_paths = [
            "./hydrostab.json",
            "./config/hydrostab.json",
            os.path.expanduser("~/.hydrostab/config.json"),
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = HydroConfig.from_file(path)
                return _config

        _config = HydroConfig.from_env()

    logger.info(f"Configuration loaded: environment={_config.environment}")
    return _config


def get_config() -> HydroConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
