"""
Album Access Filter

Narrows candidate album/asset ids to those a principal may act on.

- filter(): silent narrowing, used by list and bulk operations
- require(): all-or-nothing, used by single-resource mutations
"""

import logging
from typing import Iterable, Set

from .models import AlbumUserRole, Permission, Principal
from .protocols import AccessRepositoryProtocol, AlbumPermissionError

logger = logging.getLogger(__name__)

# Roles allowed per album permission for non-owners
_SHARED_ROLES = {
    Permission.ALBUM_READ: {AlbumUserRole.EDITOR, AlbumUserRole.VIEWER},
    Permission.ALBUM_ASSET_CREATE: {AlbumUserRole.EDITOR},
    Permission.ALBUM_ASSET_DELETE: {AlbumUserRole.EDITOR},
    Permission.ALBUM_UPDATE: set(),
    Permission.ALBUM_DELETE: set(),
    Permission.ALBUM_SHARE: set(),
}


class AccessFilter:
    """Permission checks over album and asset ids"""

    def __init__(self, repository: AccessRepositoryProtocol):
        self.repo = repository

    async def filter(
        self,
        principal: Principal,
        permission: Permission,
        ids: Iterable[str],
    ) -> Set[str]:
        """
        Return the subset of ids the principal holds permission on.

        Never raises for denied ids. Duplicates are collapsed.
        """
        candidates = set(ids)
        if not candidates:
            return set()

        user_id = principal.user_id

        if permission == Permission.ASSET_SHARE:
            return await self.repo.check_asset_owner_access(user_id, candidates)

        if permission not in _SHARED_ROLES:
            logger.warning(f"Unknown permission requested: {permission}")
            return set()

        allowed = await self.repo.check_album_owner_access(user_id, candidates)

        roles = _SHARED_ROLES[permission]
        remaining = candidates - allowed
        if roles and remaining:
            allowed = allowed | await self.repo.check_album_shared_access(user_id, remaining, roles)

        return allowed

    async def require(
        self,
        principal: Principal,
        permission: Permission,
        ids: Iterable[str],
    ) -> None:
        """
        Raise AlbumPermissionError unless every id is permitted.

        Raises:
            AlbumPermissionError: If any id is denied
        """
        requested = set(ids)
        allowed = await self.filter(principal, permission, requested)
        if allowed != requested:
            denied = sorted(requested - allowed)
            logger.info(
                f"Access denied: user {principal.user_id} lacks {permission.value} on {denied}"
            )
            raise AlbumPermissionError(f"Not found or no {permission.value} access")
