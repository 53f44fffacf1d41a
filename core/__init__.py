#!/usr/bin/env python3
"""
Core Module for the Album Service

Shared components used by the album service package.

COMPONENTS:
    - config/: Dataclass configuration loaded from the environment
    - logger.py: Service logger setup
    - events.py: Event envelope published to the event bus
    - service_client_base.py: httpx base client for remote services

USAGE:
    from core.config import get_settings
    from core.logger import setup_service_logger

    settings = get_settings()
    logger = setup_service_logger(settings.service_name)
"""

from .events import Event, EventType, ServiceSource
from .logger import setup_service_logger
from .service_client_base import BaseServiceClient

__all__ = [
    "Event",
    "EventType",
    "ServiceSource",
    "setup_service_logger",
    "BaseServiceClient",
]
