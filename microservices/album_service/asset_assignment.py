"""
Album Asset Assignment

Bulk add/remove of assets to and from albums with per-id accounting.

Every requested id yields exactly one BulkIdResponse, in input order.
The thumbnail of an album always references a member asset or is null:
adds fill an empty thumbnail, removals of the thumbnail trigger a repair.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .access import AccessFilter
from .models import (
    Album,
    AlbumAssetPair,
    AlbumAssetsResult,
    AlbumsAddAssetsResponse,
    BulkIdErrorReason,
    BulkIdResponse,
    Permission,
    Principal,
)
from .protocols import (
    AlbumNotFoundError,
    AlbumRepositoryProtocol,
    NotificationEmitterProtocol,
)
from .sharing import SharingDelegate

logger = logging.getLogger(__name__)


# ==================== Generic Membership Routines ====================

async def add_assets(
    principal: Principal,
    access: AccessFilter,
    repository: AlbumRepositoryProtocol,
    album_id: str,
    asset_ids: List[str],
) -> List[BulkIdResponse]:
    """
    Add assets to one album.

    Members (and ids repeated within the request) report duplicate; ids
    without AssetShare report no_permission. New ids are written once.
    """
    existing_ids = set(await repository.get_asset_ids(album_id, asset_ids))
    not_present_ids = [asset_id for asset_id in asset_ids if asset_id not in existing_ids]
    allowed_ids = await access.filter(principal, Permission.ASSET_SHARE, not_present_ids)

    results: List[BulkIdResponse] = []
    for asset_id in asset_ids:
        if asset_id in existing_ids:
            results.append(BulkIdResponse(id=asset_id, success=False, error=BulkIdErrorReason.DUPLICATE))
            continue

        if asset_id not in allowed_ids:
            results.append(BulkIdResponse(id=asset_id, success=False, error=BulkIdErrorReason.NO_PERMISSION))
            continue

        existing_ids.add(asset_id)
        results.append(BulkIdResponse(id=asset_id, success=True))

    new_ids = [result.id for result in results if result.success]
    if new_ids:
        await repository.add_asset_ids(album_id, new_ids)

    return results


async def remove_assets(
    principal: Principal,
    access: AccessFilter,
    repository: AlbumRepositoryProtocol,
    album_id: str,
    asset_ids: List[str],
    can_always_remove: Permission,
) -> List[BulkIdResponse]:
    """
    Remove assets from one album.

    Non-members report not_found. Holders of can_always_remove on the
    album may remove any member; others only assets they may share.
    """
    always_allowed = await access.filter(principal, can_always_remove, [album_id])
    existing_ids = set(await repository.get_asset_ids(album_id, asset_ids))
    if album_id in always_allowed:
        allowed_ids = set(existing_ids)
    else:
        allowed_ids = await access.filter(principal, Permission.ASSET_SHARE, existing_ids)

    results: List[BulkIdResponse] = []
    for asset_id in asset_ids:
        if asset_id not in existing_ids:
            results.append(BulkIdResponse(id=asset_id, success=False, error=BulkIdErrorReason.NOT_FOUND))
            continue

        if asset_id not in allowed_ids:
            results.append(BulkIdResponse(id=asset_id, success=False, error=BulkIdErrorReason.NO_PERMISSION))
            continue

        existing_ids.discard(asset_id)
        results.append(BulkIdResponse(id=asset_id, success=True))

    removed_ids = [result.id for result in results if result.success]
    if removed_ids:
        await repository.remove_asset_ids(album_id, removed_ids)

    return results


# ==================== Album Asset Assignment ====================

class AlbumAssetAssignment:
    """Album-level asset assignment with ownership checks and notifications"""

    def __init__(
        self,
        repository: AlbumRepositoryProtocol,
        access: AccessFilter,
        sharing: SharingDelegate,
        emitter: Optional[NotificationEmitterProtocol] = None,
    ):
        self.repo = repository
        self.access = access
        self.sharing = sharing
        self.emitter = emitter

    async def _find_or_fail(self, album_id: str) -> Album:
        album = await self.repo.get_by_id(album_id, with_assets=False)
        if not album:
            raise AlbumNotFoundError(f"Album not found: {album_id}")
        return album

    async def _notify_update(self, album: Album, actor_id: str) -> None:
        if not self.emitter:
            return
        for recipient_id in album.recipients_except(actor_id):
            await self.emitter.emit("album.update", {"album_id": album.album_id, "recipient_id": recipient_id})

    async def _after_add(self, album: Album, first_new_id: str, actor_id: str) -> None:
        """Touch the album, fill an empty thumbnail and notify collaborators"""
        await self.repo.update(album.album_id, {
            "updated_at": datetime.now(timezone.utc),
            "album_thumbnail_asset_id": album.album_thumbnail_asset_id or first_new_id,
        })
        await self._notify_update(album, actor_id)

    async def add_assets(
        self,
        principal: Principal,
        album_id: str,
        asset_ids: List[str],
    ) -> List[BulkIdResponse]:
        """
        Add assets to an album

        Raises:
            AlbumNotFoundError: If album not found
            AlbumPermissionError: If principal may not add to the album
            AlbumOwnershipError: If principal is not the original owner
            AlbumRemoteError: If the ownership check fails
        """
        album = await self._find_or_fail(album_id)
        await self.access.require(principal, Permission.ALBUM_ASSET_CREATE, [album_id])
        await self.sharing.check_original_ownership(principal, [album_id])

        results = await add_assets(principal, self.access, self.repo, album_id, asset_ids)

        first_new = next((result.id for result in results if result.success), None)
        if first_new:
            await self._after_add(album, first_new, principal.user_id)

        added = sum(1 for result in results if result.success)
        logger.info(f"Added {added}/{len(asset_ids)} assets to album {album_id}")
        return results

    async def add_assets_to_albums(
        self,
        principal: Principal,
        album_ids: List[str],
        asset_ids: List[str],
    ) -> AlbumsAddAssetsResponse:
        """
        Add assets to several albums with a single membership write.

        Raises:
            AlbumOwnershipError: If any permitted album is not originally owned
            AlbumRemoteError: If an ownership check fails
        """
        response = AlbumsAddAssetsResponse(success=False, error=BulkIdErrorReason.DUPLICATE)

        allowed_album_set = await self.access.filter(principal, Permission.ALBUM_ASSET_CREATE, album_ids)
        allowed_album_ids = [album_id for album_id in dict.fromkeys(album_ids) if album_id in allowed_album_set]

        await self.sharing.check_original_ownership(principal, allowed_album_ids)

        denied = [
            AlbumAssetsResult(album_id=album_id, success=False, error=BulkIdErrorReason.NO_PERMISSION)
            for album_id in dict.fromkeys(album_ids) if album_id not in allowed_album_set
        ]

        if not allowed_album_ids:
            response.error = BulkIdErrorReason.NO_PERMISSION
            response.albums = denied
            return response

        allowed_asset_set = await self.access.filter(principal, Permission.ASSET_SHARE, asset_ids)
        allowed_asset_ids = [asset_id for asset_id in dict.fromkeys(asset_ids) if asset_id in allowed_asset_set]
        if not allowed_asset_ids:
            response.error = BulkIdErrorReason.NO_PERMISSION
            response.albums = denied + [
                AlbumAssetsResult(album_id=album_id, success=False, error=BulkIdErrorReason.NO_PERMISSION)
                for album_id in allowed_album_ids
            ]
            return response

        pairs: List[AlbumAssetPair] = []
        per_album: Dict[str, AlbumAssetsResult] = {}
        changed: List[Album] = []
        for album_id in allowed_album_ids:
            existing_ids = await self.repo.get_asset_ids(album_id, allowed_asset_ids)
            not_present_ids = [asset_id for asset_id in allowed_asset_ids if asset_id not in existing_ids]
            if not not_present_ids:
                per_album[album_id] = AlbumAssetsResult(
                    album_id=album_id, success=False, error=BulkIdErrorReason.DUPLICATE
                )
                continue

            album = await self._find_or_fail(album_id)
            response.success = True
            response.error = None

            pairs.extend(AlbumAssetPair(album_id=album_id, asset_id=asset_id) for asset_id in not_present_ids)
            per_album[album_id] = AlbumAssetsResult(
                album_id=album_id, success=True, added_asset_ids=not_present_ids
            )
            changed.append(album)

        if pairs:
            await self.repo.add_asset_ids_to_albums(pairs)

        for album in changed:
            await self._after_add(album, per_album[album.album_id].added_asset_ids[0], principal.user_id)

        response.albums = denied + [per_album[album_id] for album_id in allowed_album_ids]
        logger.info(
            f"Added {len(pairs)} memberships across {len(changed)}/{len(allowed_album_ids)} albums"
        )
        return response

    async def remove_assets(
        self,
        principal: Principal,
        album_id: str,
        asset_ids: List[str],
    ) -> List[BulkIdResponse]:
        """
        Remove assets from an album

        Raises:
            AlbumPermissionError: If principal may not remove from the album
            AlbumNotFoundError: If album not found
        """
        await self.access.require(principal, Permission.ALBUM_ASSET_DELETE, [album_id])
        album = await self._find_or_fail(album_id)

        results = await remove_assets(
            principal,
            self.access,
            self.repo,
            album_id,
            asset_ids,
            can_always_remove=Permission.ALBUM_DELETE,
        )

        removed_ids = {result.id for result in results if result.success}
        if album.album_thumbnail_asset_id and album.album_thumbnail_asset_id in removed_ids:
            repaired = await self.repo.update_thumbnails()
            logger.debug(f"Thumbnail of album {album_id} removed, repaired {repaired} albums")

        logger.info(f"Removed {len(removed_ids)}/{len(asset_ids)} assets from album {album_id}")
        return results
