#!/usr/bin/env python3
"""External sharing authority configuration

Endpoints of the remote service that owns album sharing decisions
(collaborator roster, invites, removals and original-ownership checks).
Each endpoint is a full URL; all four are required in a deployed service.
"""
import os
from dataclasses import dataclass
from typing import Dict, List, Optional


def _float(val: str) -> Optional[float]:
    try:
        return float(val) if val else None
    except ValueError:
        return None


@dataclass
class SharingAuthorityConfig:
    """Sharing authority endpoints"""

    shared_users_url: str = ""
    share_album_url: str = ""
    remove_user_url: str = ""
    is_owner_url: str = ""

    # Optional credential forwarded as X-Api-Key
    api_key: str = ""

    # None keeps the httpx default
    timeout: Optional[float] = None

    @property
    def endpoints(self) -> Dict[str, str]:
        return {
            "shared_users_url": self.shared_users_url,
            "share_album_url": self.share_album_url,
            "remove_user_url": self.remove_user_url,
            "is_owner_url": self.is_owner_url,
        }

    def missing_endpoints(self) -> List[str]:
        """Names of endpoints that are not configured"""
        return [name for name, url in self.endpoints.items() if not url]

    @classmethod
    def from_env(cls) -> 'SharingAuthorityConfig':
        """Load sharing authority endpoints from environment variables"""
        return cls(
            shared_users_url=os.getenv("GET_SHARED_USERS_FOR_ALBUM_FULL_API_URL", ""),
            share_album_url=os.getenv("SHARE_ALBUM_FULL_API_URL", ""),
            remove_user_url=os.getenv("DELETE_USER_FROM_SHARED_ALBUM_FULL_API_URL", ""),
            is_owner_url=os.getenv("IS_ALBUM_OWNER_FULL_API_URL", ""),
            api_key=os.getenv("SHARING_AUTHORITY_API_KEY", ""),
            timeout=_float(os.getenv("SHARING_AUTHORITY_TIMEOUT", "")),
        )
