"""
Event Data Models for Album Service

Defines Pydantic models for membership notifications published by album_service
"""

from pydantic import BaseModel, Field
from enum import Enum

# =============================================================================
# Event Type Definitions (Service-Specific)
# =============================================================================

class AlbumEventType(str, Enum):
    """
    Notification kinds published by album_service.

    Subjects: album.>
    """
    ALBUM_INVITE = "album.invite"
    ALBUM_UPDATE = "album.update"


# ====================
# Outbound Event Models (Published by album_service)
# ====================

class AlbumInviteEventData(BaseModel):
    """Data for album.invite event"""
    album_id: str = Field(..., description="Album ID")
    user_id: str = Field(..., description="Invited user ID")
    timestamp: str = Field(..., description="ISO timestamp")


class AlbumUpdateEventData(BaseModel):
    """Data for album.update event (membership changed)"""
    album_id: str = Field(..., description="Album ID")
    recipient_id: str = Field(..., description="User to notify")
    timestamp: str = Field(..., description="ISO timestamp")
