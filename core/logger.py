"""
Service Logger Setup

Configures the stdlib logging hierarchy for a service from LoggingConfig.
Modules keep using logging.getLogger(__name__); this only installs handlers.
"""

import logging
import sys
from typing import Optional

from .config.logging_config import LoggingConfig


def setup_service_logger(
    service_name: str,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Configure root handlers and return the service logger.

    Args:
        service_name: Logger name for the service
        config: Logging configuration (loaded from env if omitted)

    Returns:
        Configured service logger
    """
    config = config or LoggingConfig.from_env()
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    formatter = logging.Formatter(config.log_format)

    root = logging.getLogger()
    root.setLevel(level)

    # Replace handlers installed by a previous call
    for handler in list(root.handlers):
        if getattr(handler, "_album_service_handler", False):
            root.removeHandler(handler)

    handlers = []
    if config.enable_console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        handler._album_service_handler = True
        root.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger = logging.getLogger(service_name)
    logger.debug(f"Logger initialized for {service_name} ({config.environment})")
    return logger


__all__ = ["setup_service_logger"]
