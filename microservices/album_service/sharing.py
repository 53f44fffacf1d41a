"""
Album Sharing Delegate

Orchestrates calls to the external sharing authority: collaborator roster,
invites, removals and original-ownership checks.

Ordering per mutation: validate -> authorize -> remote call -> local write
-> notify. A remote failure is terminal for the call (no retries) and
nothing local is written after it.
"""

import asyncio
import logging
from typing import List, Optional

from .access import AccessFilter
from .clients.sharing_client import RemoteResult, RemoteStatus, SharingAuthorityClient
from .models import (
    Album,
    AlbumUser,
    AlbumUserAddRequest,
    AlbumUserResponse,
    AlbumUserRole,
    Permission,
    Principal,
    UserResponse,
)
from .protocols import (
    AlbumConflictError,
    AlbumNotFoundError,
    AlbumOwnershipError,
    AlbumRemoteError,
    AlbumServiceError,
    AlbumUserRepositoryProtocol,
    AlbumValidationError,
    NotificationEmitterProtocol,
    UserRepositoryProtocol,
)

logger = logging.getLogger(__name__)

ME = "me"


def _remote_error(prefix: str, result: RemoteResult, pending_ids: Optional[List[str]] = None) -> AlbumRemoteError:
    return AlbumRemoteError(f"{prefix}: {result.message}", pending_ids=pending_ids)


class SharingDelegate:
    """Collaborator management backed by the external sharing authority"""

    def __init__(
        self,
        client: SharingAuthorityClient,
        access: AccessFilter,
        user_repository: UserRepositoryProtocol,
        album_user_repository: AlbumUserRepositoryProtocol,
        emitter: Optional[NotificationEmitterProtocol] = None,
    ):
        self.client = client
        self.access = access
        self.user_repo = user_repository
        self.album_user_repo = album_user_repository
        self.emitter = emitter

    # ==================== Roster ====================

    async def list_collaborators(self, principal: Principal, album: Album) -> List[AlbumUserResponse]:
        """
        Live collaborator roster of an album.

        Users unknown to local storage are dropped; a missing role
        defaults to viewer.

        Raises:
            AlbumConfigurationError: If the roster endpoint is missing
            AlbumRemoteError: If the authority call fails
        """
        result = await self.client.fetch_roster(album.album_id, album.owner_id, principal.user_id)
        if not result.ok:
            raise _remote_error("Failed to fetch shared users", result)

        entries = result.payload.users
        users = await asyncio.gather(*(self.user_repo.get_user(entry.user_id) for entry in entries))
        roles = {entry.user_id: entry.role for entry in entries}

        collaborators = []
        for user in users:
            if user is None:
                continue
            role = roles.get(user.user_id) or AlbumUserRole.VIEWER
            collaborators.append(
                AlbumUserResponse(
                    user=UserResponse.model_validate(user.model_dump()),
                    role=role,
                )
            )

        dropped = len(entries) - len(collaborators)
        if dropped:
            logger.debug(f"Dropped {dropped} unknown users from roster of album {album.album_id}")
        return collaborators

    # ==================== Invite ====================

    async def invite_users(
        self,
        principal: Principal,
        album: Album,
        album_users: List[AlbumUserAddRequest],
        require_share_access: bool = True,
    ) -> List[AlbumUser]:
        """
        Share an album with each requested user, one remote call at a time.

        Every entry is validated before the first remote call. The loop
        stops at the first failure; the raised error carries the user ids
        that were never attempted.

        Raises:
            AlbumPermissionError: If the principal may not share the album
            AlbumValidationError: If the owner is a target
            AlbumConflictError: If a target already collaborates
            AlbumNotFoundError: If a target user does not exist
            AlbumRemoteError: If the authority rejects an invite
        """
        if require_share_access:
            await self.access.require(principal, Permission.ALBUM_SHARE, [album.album_id])

        await self._validate_invites(album, album_users)

        invited: List[AlbumUser] = []
        failure: Optional[AlbumServiceError] = None
        for index, request in enumerate(album_users):
            failure = await self._invite_one(album, request)
            if failure is not None:
                failure.pending_ids = [pending.user_id for pending in album_users[index + 1:]]
                break
            invited.append(AlbumUser(album_id=album.album_id, user_id=request.user_id, role=request.role))

        if failure is not None:
            logger.warning(
                f"Invite to album {album.album_id} stopped after {len(invited)} users: {failure}"
            )
            raise failure

        logger.info(f"Album {album.album_id} shared with {len(invited)} users")
        return invited

    async def _validate_invites(self, album: Album, album_users: List[AlbumUserAddRequest]) -> None:
        existing = set(album.collaborator_ids)
        seen = set()
        for request in album_users:
            if request.user_id == album.owner_id:
                raise AlbumValidationError("Cannot be shared with owner")
            if request.user_id in existing or request.user_id in seen:
                raise AlbumConflictError("User already added")
            seen.add(request.user_id)

            user = await self.user_repo.get_user(request.user_id)
            if not user:
                raise AlbumNotFoundError(f"User not found: {request.user_id}")

    async def _invite_one(self, album: Album, request: AlbumUserAddRequest) -> Optional[AlbumServiceError]:
        """Remote invite, then local entry, then notification"""
        result = await self.client.invite(album.owner_id, album.album_id, request.user_id, request.role)
        if not result.ok:
            if result.status == RemoteStatus.REMOTE_ERROR and result.service_message:
                return AlbumRemoteError(result.service_message)
            return _remote_error("Failed to share album", result)

        await self.album_user_repo.create(
            AlbumUser(album_id=album.album_id, user_id=request.user_id, role=request.role)
        )
        if self.emitter:
            await self.emitter.emit("album.invite", {"album_id": album.album_id, "user_id": request.user_id})
        return None

    # ==================== Remove ====================

    async def remove_user(self, principal: Principal, album: Album, user_id: str) -> None:
        """
        Remove a collaborator from an album.

        "me" resolves to the principal. Collaborators may always remove
        themselves; removing anyone else requires share access.

        Raises:
            AlbumValidationError: If the target is the owner
            AlbumPermissionError: If removing someone else without share access
            AlbumNotFoundError: If the target has no collaborator entry
            AlbumRemoteError: If the authority rejects the removal
        """
        if user_id == ME:
            user_id = principal.user_id

        if album.owner_id == user_id:
            raise AlbumValidationError("Cannot remove album owner")

        if principal.user_id != user_id:
            await self.access.require(principal, Permission.ALBUM_SHARE, [album.album_id])

        if user_id not in album.collaborator_ids:
            raise AlbumNotFoundError("Album not shared with user")

        result = await self.client.remove(album.owner_id, album.album_id, user_id)
        if not result.ok:
            raise _remote_error("Failed to remove user from album", result)

        await self.album_user_repo.delete(album.album_id, user_id)
        logger.info(f"User {user_id} removed from album {album.album_id}")

    async def update_user_role(
        self, principal: Principal, album_id: str, user_id: str, role: AlbumUserRole
    ) -> None:
        """
        Change the role of an existing collaborator.

        Raises:
            AlbumPermissionError: If the principal may not share the album
            AlbumNotFoundError: If the user has no collaborator entry
        """
        await self.access.require(principal, Permission.ALBUM_SHARE, [album_id])
        updated = await self.album_user_repo.update(album_id, user_id, role)
        if not updated:
            raise AlbumNotFoundError("Album not shared with user")

    # ==================== Ownership ====================

    async def check_original_ownership(self, principal: Principal, album_ids: List[str]) -> None:
        """
        Confirm the principal is the original owner of every album.

        One remote call per album, sequentially. A failed call stops the
        loop; non-owned albums are collected and named together.

        Raises:
            AlbumRemoteError: If an ownership call fails
            AlbumOwnershipError: If any album is not originally owned
        """
        non_owned: List[str] = []
        for index, album_id in enumerate(album_ids):
            result = await self.client.is_owner(album_id, principal.user_id)
            if not result.ok:
                raise _remote_error(
                    f"Ownership check failed for album {album_id}",
                    result,
                    pending_ids=list(album_ids[index + 1:]),
                )
            if not result.payload.is_owner:
                non_owned.append(album_id)

        if non_owned:
            raise AlbumOwnershipError(
                f"User is not the original owner of album(s): {', '.join(non_owned)}",
                album_ids=non_owned,
            )
