"""
Sharing Authority Client for Album Service

HTTP client for the external sharing/ownership authority.
Every call returns a RemoteResult instead of raising, so callers decide
how a remote rejection or a transport failure maps to a domain error.
"""

import httpx
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.config.sharing_config import SharingAuthorityConfig
from core.service_client_base import BaseServiceClient

from ..models import AlbumUserRole
from ..protocols import AlbumConfigurationError

logger = logging.getLogger(__name__)


# ==================== Remote Payloads ====================

class RosterEntry(BaseModel):
    """Collaborator as reported by the authority"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    role: Optional[AlbumUserRole] = None

    @field_validator('role', mode='before')
    @classmethod
    def drop_unknown_role(cls, v):
        if isinstance(v, str) and v.lower() in {r.value for r in AlbumUserRole}:
            return v.lower()
        return None


class RosterPayload(BaseModel):
    users: List[RosterEntry] = Field(default_factory=list)


class OwnershipPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_owner: bool = Field(False, alias="isOwner")


# ==================== Result Variant ====================

class RemoteStatus(str, Enum):
    """Outcome of a single remote exchange"""
    OK = "ok"
    REMOTE_ERROR = "remote_error"
    TRANSPORT_ERROR = "transport_error"


class RemoteResult(BaseModel):
    """Tagged result of a remote call"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: RemoteStatus
    payload: Any = None
    message: Optional[str] = None
    # serviceStatus.message from a parsed body, if any
    service_message: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == RemoteStatus.OK


# ==================== Client ====================

class SharingAuthorityClient(BaseServiceClient):
    """Client for the external sharing authority"""

    service_name = "sharing_authority"

    def __init__(
        self,
        config: SharingAuthorityConfig,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize sharing authority client

        Args:
            config: Endpoint configuration
            client: Optional pre-built HTTP client (tests)
        """
        self.config = config
        headers = {"X-Api-Key": config.api_key} if config.api_key else None
        super().__init__(timeout=config.timeout, headers=headers, client=client)

    def _endpoint(self, name: str, label: str) -> str:
        url = getattr(self.config, name)
        if not url:
            raise AlbumConfigurationError(f"{label} API URL not configured")
        return url

    async def _call(self, url: str, body: Dict[str, Any]) -> RemoteResult:
        """POST body to url and classify the outcome"""
        try:
            response = await self.post(url, json=body)
        except httpx.HTTPError as e:
            logger.warning(f"Transport error calling {self.service_name}: {e}")
            return RemoteResult(status=RemoteStatus.TRANSPORT_ERROR, message=str(e) or type(e).__name__)

        try:
            data = response.json()
        except ValueError:
            data = None

        service_message = None
        if isinstance(data, dict):
            service_status = data.get("serviceStatus") or {}
            if isinstance(service_status, dict):
                service_message = service_status.get("message")

        if response.status_code >= 400:
            message = None
            if isinstance(data, dict):
                message = data.get("message")
            if not message:
                message = _reason_phrase(response)
            logger.warning(
                f"{self.service_name} rejected call ({response.status_code}): {message}"
            )
            return RemoteResult(
                status=RemoteStatus.REMOTE_ERROR,
                payload=data,
                message=message,
                service_message=service_message,
                status_code=response.status_code,
            )

        return RemoteResult(
            status=RemoteStatus.OK,
            payload=data,
            service_message=service_message,
            status_code=response.status_code,
        )

    def _parse(self, result: RemoteResult, model: type, require_payload: bool = True) -> RemoteResult:
        """Validate the payload shape of a successful result once"""
        if not result.ok:
            return result
        body = result.payload if isinstance(result.payload, dict) else {}
        payload = body.get("payload")
        if not isinstance(payload, dict):
            if require_payload:
                logger.warning(f"Missing {self.service_name} payload in {result.status_code} reply")
                return RemoteResult(
                    status=RemoteStatus.REMOTE_ERROR,
                    message="Malformed response from sharing authority",
                    status_code=result.status_code,
                )
            payload = {}
        try:
            parsed = model.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Malformed {self.service_name} payload: {e}")
            return RemoteResult(
                status=RemoteStatus.REMOTE_ERROR,
                message="Malformed response from sharing authority",
                status_code=result.status_code,
            )
        return result.model_copy(update={"payload": parsed})

    # =============================================================================
    # Authority operations
    # =============================================================================

    async def fetch_roster(self, album_id: str, owner_id: str, current_user_id: str) -> RemoteResult:
        """Roster lookup; payload is a RosterPayload on success"""
        url = self._endpoint("shared_users_url", "Shared users")
        result = await self._call(url, {
            "albumOwnerId": owner_id,
            "albumId": album_id,
            "currentUserId": current_user_id,
        })
        return self._parse(result, RosterPayload)

    async def invite(self, owner_id: str, album_id: str, user_id: str, role: AlbumUserRole) -> RemoteResult:
        """Share album with user"""
        url = self._endpoint("share_album_url", "Share album")
        return await self._call(url, {
            "currentUserId": owner_id,
            "albumId": album_id,
            "shareWithUserId": user_id,
            "userRole": role.value,
        })

    async def remove(self, owner_id: str, album_id: str, user_id: str) -> RemoteResult:
        """Remove user from shared album"""
        url = self._endpoint("remove_user_url", "Share delete user from album")
        return await self._call(url, {
            "currentUserId": owner_id,
            "albumId": album_id,
            "deleteFromAlbumUserId": user_id,
        })

    async def is_owner(self, album_id: str, user_id: str) -> RemoteResult:
        """Original-ownership check; payload is an OwnershipPayload on success"""
        url = self._endpoint("is_owner_url", "Is owner")
        result = await self._call(url, {"albumId": album_id, "userId": user_id})
        return self._parse(result, OwnershipPayload, require_payload=False)


def _reason_phrase(response) -> str:
    reason = getattr(response, "reason_phrase", None)
    if reason:
        return reason
    return f"HTTP {response.status_code}"


__all__ = [
    "SharingAuthorityClient",
    "RemoteResult",
    "RemoteStatus",
    "RosterEntry",
    "RosterPayload",
    "OwnershipPayload",
]
