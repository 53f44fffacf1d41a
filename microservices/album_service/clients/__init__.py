"""
Clients module for album_service

HTTP clients for synchronous calls to remote services
"""

from .sharing_client import SharingAuthorityClient, RemoteResult, RemoteStatus

__all__ = [
    "SharingAuthorityClient",
    "RemoteResult",
    "RemoteStatus",
]
