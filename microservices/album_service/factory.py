"""
Album Service Factory

Factory functions for creating service instances with real dependencies.
Persistence is owned by the host: repositories are passed in.

Usage:
    from .factory import create_album_service
    service = create_album_service(
        repository, user_repository, album_user_repository, access_repository,
        config=settings.sharing, event_bus=event_bus,
    )
"""
import logging
from typing import Optional

import httpx

from core.config import get_settings
from core.config.sharing_config import SharingAuthorityConfig

from .access import AccessFilter
from .album_service import AlbumService
from .clients.sharing_client import SharingAuthorityClient
from .events.publishers import AlbumEventPublishers
from .protocols import (
    AccessRepositoryProtocol,
    AlbumConfigurationError,
    AlbumRepositoryProtocol,
    AlbumUserRepositoryProtocol,
    UserRepositoryProtocol,
)
from .sharing import SharingDelegate

logger = logging.getLogger(__name__)


def validate_sharing_config(config: SharingAuthorityConfig) -> None:
    """
    Fail fast when a sharing authority endpoint is missing.

    Raises:
        AlbumConfigurationError: If any endpoint is not configured
    """
    missing = config.missing_endpoints()
    if missing:
        raise AlbumConfigurationError(
            f"Sharing authority endpoints not configured: {', '.join(missing)}"
        )


def create_album_service(
    repository: AlbumRepositoryProtocol,
    user_repository: UserRepositoryProtocol,
    album_user_repository: AlbumUserRepositoryProtocol,
    access_repository: AccessRepositoryProtocol,
    config: Optional[SharingAuthorityConfig] = None,
    event_bus=None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> AlbumService:
    """
    Create AlbumService with real dependencies.

    Args:
        repository: Album repository (membership store)
        user_repository: User lookups
        album_user_repository: Collaborator entries
        access_repository: Raw access lookups
        config: Sharing authority endpoints (loaded from settings if omitted)
        event_bus: Optional event bus for publishing notifications
        http_client: Optional HTTP client for the sharing authority

    Returns:
        AlbumService: Configured service instance

    Raises:
        AlbumConfigurationError: If the sharing authority is not configured
    """
    config = config or get_settings().sharing
    validate_sharing_config(config)

    access = AccessFilter(access_repository)
    emitter = AlbumEventPublishers(event_bus)
    client = SharingAuthorityClient(config, client=http_client)
    sharing = SharingDelegate(
        client=client,
        access=access,
        user_repository=user_repository,
        album_user_repository=album_user_repository,
        emitter=emitter,
    )

    logger.info("Album service created with sharing authority endpoints configured")
    return AlbumService(
        repository=repository,
        user_repository=user_repository,
        album_user_repository=album_user_repository,
        access=access,
        sharing=sharing,
        emitter=emitter,
    )
