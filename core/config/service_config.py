#!/usr/bin/env python3
"""Album service main configuration

Combines all sub-configs for the album membership service.
"""
import os
from dataclasses import dataclass, field

from .logging_config import LoggingConfig
from .sharing_config import SharingAuthorityConfig


def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class ServiceConfig:
    """Album service configuration with all sub-configs"""

    # Environment
    environment: str = "development"
    debug: bool = False

    # Service settings
    service_name: str = "album_service"
    service_host: str = "0.0.0.0"
    service_port: int = 8219

    # Sub-configurations
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    sharing: SharingAuthorityConfig = field(default_factory=SharingAuthorityConfig)

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """Load complete configuration from environment"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            environment=env,
            debug=_bool(os.getenv("DEBUG", "true" if env == "development" else "false")),
            service_name=os.getenv("SERVICE_NAME", "album_service"),
            service_host=os.getenv("HOST", "0.0.0.0"),
            service_port=_int(os.getenv("ALBUM_SERVICE_PORT", "8219"), 8219),
            logging=LoggingConfig.from_env(),
            sharing=SharingAuthorityConfig.from_env(),
        )
