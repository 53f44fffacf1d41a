"""
Album Service Business Logic

Album membership business logic layer for the microservice.
Composes access checks, bulk asset assignment and the sharing delegate
into the public album operations.

Uses dependency injection for testability:
- Repositories and the sharing delegate are injected, not created at import time
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

# Import protocols (no I/O dependencies) - NOT a concrete repository!
from .protocols import (
    AlbumConflictError,
    AlbumNotFoundError,
    AlbumServiceError,
    AlbumRepositoryProtocol,
    AlbumUserRepositoryProtocol,
    AlbumValidationError,
    NotificationEmitterProtocol,
    UserRepositoryProtocol,
)
from .access import AccessFilter
from .asset_assignment import AlbumAssetAssignment
from .sharing import SharingDelegate
from .models import (
    AddUsersRequest,
    Album,
    AlbumCreateRequest,
    AlbumMetadata,
    AlbumResponse,
    AlbumsAddAssetsRequest,
    AlbumsAddAssetsResponse,
    AlbumStatisticsResponse,
    AlbumUpdateRequest,
    AlbumUserResponse,
    AssetOrder,
    BulkIdResponse,
    BulkIdsRequest,
    Permission,
    Principal,
    UpdateAlbumUserRequest,
)

logger = logging.getLogger(__name__)


# ==================== Album Service ====================

class AlbumService:
    """
    Album membership business logic service

    Handles album lifecycle, membership and sharing while delegating
    persistence to repositories and sharing decisions to the external
    authority.
    """

    def __init__(
        self,
        repository: AlbumRepositoryProtocol,
        user_repository: UserRepositoryProtocol,
        album_user_repository: AlbumUserRepositoryProtocol,
        access: AccessFilter,
        sharing: SharingDelegate,
        emitter: Optional[NotificationEmitterProtocol] = None,
    ):
        """
        Initialize service with injected dependencies.

        Args:
            repository: Album repository (membership store)
            user_repository: User lookups
            album_user_repository: Collaborator entries
            access: Access filter
            sharing: Sharing delegate
            emitter: Notification emitter
        """
        self.repo = repository
        self.user_repo = user_repository
        self.album_user_repo = album_user_repository
        self.access = access
        self.sharing = sharing
        self.emitter = emitter
        self.assets = AlbumAssetAssignment(repository, access, sharing, emitter)

    # ==================== Album Lifecycle Operations ====================

    async def create_album(self, principal: Principal, request: AlbumCreateRequest) -> AlbumResponse:
        """
        Create a new album

        Args:
            principal: User creating the album (becomes owner)
            request: Album creation request

        Returns:
            AlbumResponse: Created album with assets

        Raises:
            AlbumValidationError: If sharing with the owner
            AlbumNotFoundError: If a collaborator does not exist
            AlbumRemoteError: If an initial invite fails; the album already
                exists and its id is named in the message
        """
        seen = set()
        for album_user in request.album_users:
            if album_user.user_id == principal.user_id:
                raise AlbumValidationError("Cannot share album with owner")
            if album_user.user_id in seen:
                raise AlbumConflictError("User already added")
            seen.add(album_user.user_id)
            if not await self.user_repo.get_user(album_user.user_id):
                raise AlbumNotFoundError(f"User not found: {album_user.user_id}")

        allowed = await self.access.filter(principal, Permission.ASSET_SHARE, request.asset_ids)
        asset_ids = [asset_id for asset_id in dict.fromkeys(request.asset_ids) if asset_id in allowed]

        owner = await self.user_repo.get_user(principal.user_id)
        order = owner.default_asset_order if owner else AssetOrder.DESC

        now = datetime.now(timezone.utc)
        album = await self.repo.create(
            Album(
                album_id=str(uuid.uuid4()),
                owner_id=principal.user_id,
                album_name=request.album_name,
                description=request.description,
                album_thumbnail_asset_id=asset_ids[0] if asset_ids else None,
                order=order,
                created_at=now,
                updated_at=now,
            ),
            asset_ids,
            [],
        )

        if request.album_users:
            try:
                await self.sharing.invite_users(
                    principal, album, request.album_users, require_share_access=False
                )
            except AlbumServiceError as e:
                # The album row is already committed
                logger.warning(f"Album {album.album_id} created but sharing failed: {e}")
                raise type(e)(
                    f"Album {album.album_id} created but sharing failed: {e}",
                    pending_ids=e.pending_ids,
                ) from e

        logger.info(f"Album created: {album.album_id} by user {principal.user_id}")
        created = await self._find_or_fail(album.album_id, with_assets=True)
        return self._to_response(created, with_assets=True)

    async def get_album(
        self,
        principal: Principal,
        album_id: str,
        without_assets: bool = False,
    ) -> AlbumResponse:
        """
        Get album with its live collaborator roster

        Raises:
            AlbumPermissionError: If user doesn't have read access
            AlbumNotFoundError: If album not found
            AlbumRemoteError: If the roster lookup fails
        """
        await self.access.require(principal, Permission.ALBUM_READ, [album_id])
        await self.repo.update_thumbnails()

        with_assets = not without_assets
        album = await self._find_or_fail(album_id, with_assets=with_assets)
        metadata = await self.repo.get_metadata_for_ids([album.album_id])

        album_users = await self.sharing.list_collaborators(principal, album)
        is_shared = bool(album_users) or bool(album.shared_link_ids)
        contributor_counts = await self.repo.get_contributor_counts(album.album_id) if is_shared else None

        return self._to_response(
            album,
            with_assets=with_assets,
            album_users=album_users,
            metadata=metadata[0] if metadata else None,
            contributor_counts=contributor_counts,
        )

    async def get_all_albums(
        self,
        principal: Principal,
        asset_id: Optional[str] = None,
        shared: Optional[bool] = None,
    ) -> List[AlbumResponse]:
        """
        List albums for the principal

        Args:
            principal: Requesting user
            asset_id: Only albums containing this asset
            shared: True for shared albums, False for not shared, None for owned

        Returns:
            Albums without assets, each with its live roster
        """
        await self.repo.update_thumbnails()

        user_id = principal.user_id
        if asset_id:
            albums = await self.repo.get_by_asset_id(user_id, asset_id)
        elif shared is True:
            albums = await self.repo.get_shared(user_id)
        elif shared is False:
            albums = await self.repo.get_not_shared(user_id)
        else:
            albums = await self.repo.get_owned(user_id)

        results = await self.repo.get_metadata_for_ids([album.album_id for album in albums])
        metadata: Dict[str, AlbumMetadata] = {item.album_id: item for item in results}

        rosters = await asyncio.gather(
            *(self.sharing.list_collaborators(principal, album) for album in albums)
        )

        return [
            self._to_response(
                album,
                with_assets=False,
                album_users=roster,
                metadata=metadata.get(album.album_id),
            )
            for album, roster in zip(albums, rosters)
        ]

    async def update_album(
        self,
        principal: Principal,
        album_id: str,
        request: AlbumUpdateRequest,
    ) -> AlbumResponse:
        """
        Update album

        Raises:
            AlbumPermissionError: If user may not update the album
            AlbumNotFoundError: If album not found
            AlbumValidationError: If the new thumbnail is not a member
        """
        await self.access.require(principal, Permission.ALBUM_UPDATE, [album_id])
        album = await self._find_or_fail(album_id, with_assets=True)

        if request.album_thumbnail_asset_id is not None:
            members = await self.repo.get_asset_ids(album_id, [request.album_thumbnail_asset_id])
            if not members:
                raise AlbumValidationError("Invalid album thumbnail")

        update_data = request.model_dump(exclude_none=True)
        update_data["updated_at"] = datetime.now(timezone.utc)
        updated = await self.repo.update(album.album_id, update_data)

        logger.info(f"Album updated: {album_id} by user {principal.user_id}")
        return self._to_response(updated.model_copy(update={"asset_ids": album.asset_ids}), with_assets=False)

    async def delete_album(self, principal: Principal, album_id: str) -> None:
        """
        Delete album (membership and collaborator rows cascade in the store)

        Raises:
            AlbumPermissionError: If user may not delete the album
        """
        await self.access.require(principal, Permission.ALBUM_DELETE, [album_id])
        await self.repo.delete(album_id)
        logger.info(f"Album deleted: {album_id} by user {principal.user_id}")

    async def get_statistics(self, principal: Principal) -> AlbumStatisticsResponse:
        """Count owned, shared and not-shared albums"""
        owned, shared, not_shared = await asyncio.gather(
            self.repo.get_owned(principal.user_id),
            self.repo.get_shared(principal.user_id),
            self.repo.get_not_shared(principal.user_id),
        )
        return AlbumStatisticsResponse(owned=len(owned), shared=len(shared), not_shared=len(not_shared))

    # ==================== Album Asset Operations ====================

    async def add_assets(
        self, principal: Principal, album_id: str, request: BulkIdsRequest
    ) -> List[BulkIdResponse]:
        """Add assets to one album"""
        return await self.assets.add_assets(principal, album_id, request.ids)

    async def add_assets_to_albums(
        self, principal: Principal, request: AlbumsAddAssetsRequest
    ) -> AlbumsAddAssetsResponse:
        """Add assets to several albums"""
        return await self.assets.add_assets_to_albums(principal, request.album_ids, request.asset_ids)

    async def remove_assets(
        self, principal: Principal, album_id: str, request: BulkIdsRequest
    ) -> List[BulkIdResponse]:
        """Remove assets from one album"""
        return await self.assets.remove_assets(principal, album_id, request.ids)

    # ==================== Album User Operations ====================

    async def add_users(
        self, principal: Principal, album_id: str, request: AddUsersRequest
    ) -> AlbumResponse:
        """
        Share album with users through the sharing authority

        Raises:
            AlbumPermissionError: If user may not share the album
            AlbumNotFoundError: If album or a target user not found
            AlbumConflictError: If a target already collaborates
            AlbumRemoteError: If the authority rejects an invite
        """
        await self.access.require(principal, Permission.ALBUM_SHARE, [album_id])
        album = await self._find_or_fail(album_id)

        await self.sharing.invite_users(principal, album, request.album_users, require_share_access=False)

        updated = await self._find_or_fail(album_id, with_assets=True)
        return self._to_response(updated, with_assets=False)

    async def remove_user(self, principal: Principal, album_id: str, user_id: str) -> None:
        """Remove a collaborator ("me" removes the principal)"""
        album = await self._find_or_fail(album_id)
        await self.sharing.remove_user(principal, album, user_id)

    async def update_user(
        self,
        principal: Principal,
        album_id: str,
        user_id: str,
        request: UpdateAlbumUserRequest,
    ) -> None:
        """Change a collaborator's role"""
        await self.sharing.update_user_role(principal, album_id, user_id, request.role)

    # ==================== Helpers ====================

    async def _find_or_fail(self, album_id: str, with_assets: bool = False) -> Album:
        album = await self.repo.get_by_id(album_id, with_assets=with_assets)
        if not album:
            raise AlbumNotFoundError(f"Album not found: {album_id}")
        return album

    def _to_response(
        self,
        album: Album,
        with_assets: bool,
        album_users: Optional[List[AlbumUserResponse]] = None,
        metadata: Optional[AlbumMetadata] = None,
        contributor_counts=None,
    ) -> AlbumResponse:
        has_shared_link = bool(album.shared_link_ids)
        if album_users is None:
            # No live roster fetched: fall back to local collaborator entries
            album_users = []
            shared = bool(album.album_users) or has_shared_link
        else:
            shared = bool(album_users) or has_shared_link
        return AlbumResponse(
            album_id=album.album_id,
            owner_id=album.owner_id,
            album_name=album.album_name,
            description=album.description,
            album_thumbnail_asset_id=album.album_thumbnail_asset_id,
            order=album.order,
            is_activity_enabled=album.is_activity_enabled,
            created_at=album.created_at,
            updated_at=album.updated_at,
            shared=shared,
            has_shared_link=has_shared_link,
            album_users=album_users,
            asset_ids=list(album.asset_ids) if with_assets else [],
            asset_count=metadata.asset_count if metadata else len(album.asset_ids),
            start_date=metadata.start_date if metadata else None,
            end_date=metadata.end_date if metadata else None,
            last_modified_asset_timestamp=metadata.last_modified_asset_timestamp if metadata else None,
            contributor_counts=contributor_counts,
        )
