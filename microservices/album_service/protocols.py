"""
Album Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Dict, List, Optional, Protocol, Sequence, Set, runtime_checkable

# Import only models (no I/O dependencies)
from .models import (
    Album,
    AlbumAssetPair,
    AlbumMetadata,
    AlbumUser,
    AlbumUserRole,
    ContributorCount,
    User,
)


# Custom exceptions - defined here to avoid importing repository
class AlbumServiceError(Exception):
    """Base exception for album service errors"""

    def __init__(self, message: str = "", pending_ids: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        # Items of a sequential loop that were never attempted
        self.pending_ids = list(pending_ids or [])


class AlbumValidationError(AlbumServiceError):
    """Album validation error"""
    pass


class AlbumNotFoundError(AlbumServiceError):
    """Album or user not found error"""
    pass


class AlbumPermissionError(AlbumServiceError):
    """Album permission denied error"""
    pass


class AlbumOwnershipError(AlbumPermissionError):
    """Principal is not the original owner of an album"""

    def __init__(self, message: str = "", album_ids: Optional[List[str]] = None):
        super().__init__(message)
        self.album_ids = list(album_ids or [])


class AlbumConflictError(AlbumServiceError):
    """Duplicate collaborator or membership"""
    pass


class AlbumConfigurationError(AlbumServiceError):
    """Required external endpoint is not configured"""
    pass


class AlbumRemoteError(AlbumServiceError):
    """External sharing authority rejected the call or was unreachable"""
    pass


@runtime_checkable
class AlbumRepositoryProtocol(Protocol):
    """
    Interface for Album Repository (membership store).

    Implementations must provide these methods.
    Cascading deletes and thumbnail sweeps are the store's responsibility.
    """

    # ==================== Album Operations ====================

    async def get_by_id(self, album_id: str, with_assets: bool = False) -> Optional[Album]:
        """Get album by album_id"""
        ...

    async def create(
        self, album: Album, asset_ids: List[str], album_users: List[AlbumUser]
    ) -> Album:
        """Create album with initial members and collaborator rows"""
        ...

    async def update(self, album_id: str, update_data: Dict[str, Any]) -> Album:
        """Update album fields"""
        ...

    async def delete(self, album_id: str) -> None:
        """Delete album with its membership and collaborator rows"""
        ...

    async def get_by_asset_id(self, owner_id: str, asset_id: str) -> List[Album]:
        """Albums visible to owner_id that contain asset_id"""
        ...

    async def get_owned(self, owner_id: str) -> List[Album]:
        """Albums owned by the user"""
        ...

    async def get_shared(self, owner_id: str) -> List[Album]:
        """Albums shared with or by the user"""
        ...

    async def get_not_shared(self, owner_id: str) -> List[Album]:
        """Owned albums without collaborators or shared links"""
        ...

    async def get_metadata_for_ids(self, album_ids: List[str]) -> List[AlbumMetadata]:
        """Asset count and date range per album"""
        ...

    async def get_contributor_counts(self, album_id: str) -> List[ContributorCount]:
        """Asset counts per contributing user"""
        ...

    # ==================== Membership Operations ====================

    async def get_asset_ids(self, album_id: str, asset_ids: Sequence[str]) -> Set[str]:
        """Subset of asset_ids that are members of the album"""
        ...

    async def add_asset_ids(self, album_id: str, asset_ids: List[str]) -> None:
        """Add member assets to one album"""
        ...

    async def remove_asset_ids(self, album_id: str, asset_ids: List[str]) -> None:
        """Remove member assets from one album"""
        ...

    async def add_asset_ids_to_albums(self, pairs: List[AlbumAssetPair]) -> None:
        """Batched membership write across albums"""
        ...

    async def update_thumbnails(self) -> int:
        """Repair every album whose thumbnail is not a member (returns count)"""
        ...


@runtime_checkable
class AlbumUserRepositoryProtocol(Protocol):
    """Interface for collaborator entry persistence"""

    async def create(self, album_user: AlbumUser) -> AlbumUser:
        """Create collaborator entry"""
        ...

    async def update(self, album_id: str, user_id: str, role: AlbumUserRole) -> bool:
        """Update collaborator role (False when no entry)"""
        ...

    async def delete(self, album_id: str, user_id: str) -> bool:
        """Delete collaborator entry (False when no entry)"""
        ...


@runtime_checkable
class UserRepositoryProtocol(Protocol):
    """Interface for user lookups"""

    async def get_user(self, user_id: str) -> Optional[User]:
        """Get user by id"""
        ...


@runtime_checkable
class AccessRepositoryProtocol(Protocol):
    """Interface for raw access lookups used by the access filter"""

    async def check_album_owner_access(self, user_id: str, album_ids: Set[str]) -> Set[str]:
        """Albums in album_ids owned by user_id"""
        ...

    async def check_album_shared_access(
        self, user_id: str, album_ids: Set[str], roles: Set[AlbumUserRole]
    ) -> Set[str]:
        """Albums in album_ids where user_id holds one of roles"""
        ...

    async def check_asset_owner_access(self, user_id: str, asset_ids: Set[str]) -> Set[str]:
        """Assets in asset_ids owned by user_id"""
        ...


@runtime_checkable
class NotificationEmitterProtocol(Protocol):
    """Interface for membership notifications - fire-and-forget"""

    async def emit(self, kind: str, payload: Dict[str, Any]) -> None:
        """Emit a notification"""
        ...


@runtime_checkable
class EventBusProtocol(Protocol):
    """Interface for Event Bus - no I/O imports"""

    async def publish_event(self, event: Any) -> None:
        """Publish an event"""
        ...
