"""
Album Service Models

Independent models for the album membership microservice.
Handles albums, collaborator entries, asset membership and bulk results.
"""

from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from enum import Enum


# ==================== Enumerations ====================

class AlbumUserRole(str, Enum):
    """Collaborator role on an album"""
    EDITOR = "editor"
    VIEWER = "viewer"


class AssetOrder(str, Enum):
    """Asset ordering preference of an album"""
    ASC = "asc"
    DESC = "desc"


class Permission(str, Enum):
    """Permissions checked through the access filter"""
    ALBUM_READ = "album.read"
    ALBUM_UPDATE = "album.update"
    ALBUM_DELETE = "album.delete"
    ALBUM_SHARE = "album.share"
    ALBUM_ASSET_CREATE = "album.asset.create"
    ALBUM_ASSET_DELETE = "album.asset.delete"
    ASSET_SHARE = "asset.share"


class BulkIdErrorReason(str, Enum):
    """Failure reason of a single id in a bulk operation"""
    DUPLICATE = "duplicate"
    NO_PERMISSION = "no_permission"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


# ==================== Core Models ====================

class Principal(BaseModel):
    """Authenticated user issuing a request"""
    user_id: str


class User(BaseModel):
    """User model"""
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_color: Optional[str] = None
    profile_image_path: Optional[str] = None
    profile_changed_at: Optional[datetime] = None
    preferences: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('preferences', mode='before')
    @classmethod
    def parse_preferences(cls, v):
        return v if v is not None else {}

    @property
    def default_asset_order(self) -> AssetOrder:
        albums = self.preferences.get("albums") or {}
        try:
            return AssetOrder(albums.get("default_asset_order", AssetOrder.DESC.value))
        except ValueError:
            return AssetOrder.DESC

    class Config:
        from_attributes = True


class AlbumUser(BaseModel):
    """Collaborator entry (album, user, role)"""
    album_id: str
    user_id: str
    role: AlbumUserRole = AlbumUserRole.EDITOR

    class Config:
        from_attributes = True


class Album(BaseModel):
    """Album model"""
    album_id: str
    owner_id: str
    album_name: str = "Untitled"
    description: str = ""
    order: AssetOrder = AssetOrder.DESC
    album_thumbnail_asset_id: Optional[str] = None
    is_activity_enabled: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    asset_ids: List[str] = Field(default_factory=list)
    album_users: List[AlbumUser] = Field(default_factory=list)
    shared_link_ids: List[str] = Field(default_factory=list)

    @field_validator('asset_ids', 'album_users', 'shared_link_ids', mode='before')
    @classmethod
    def parse_list(cls, v):
        return v if v is not None else []

    @property
    def collaborator_ids(self) -> List[str]:
        return [album_user.user_id for album_user in self.album_users]

    def recipients_except(self, user_id: str) -> List[str]:
        """Collaborators and owner, excluding the given user"""
        return [
            recipient_id
            for recipient_id in [*self.collaborator_ids, self.owner_id]
            if recipient_id != user_id
        ]

    class Config:
        from_attributes = True


class AlbumAssetPair(BaseModel):
    """Single asset membership row"""
    album_id: str
    asset_id: str


class AlbumMetadata(BaseModel):
    """Aggregate asset metadata of an album"""
    album_id: str
    asset_count: int = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    last_modified_asset_timestamp: Optional[datetime] = None


class ContributorCount(BaseModel):
    """Number of assets contributed by a user to an album"""
    user_id: str
    asset_count: int = 0


# ==================== Request Models ====================

class AlbumUserAddRequest(BaseModel):
    """Single collaborator to add"""
    user_id: str = Field(..., description="User ID to share with")
    role: AlbumUserRole = Field(AlbumUserRole.EDITOR, description="Collaborator role")


class AlbumCreateRequest(BaseModel):
    """Album creation request"""
    album_name: str = Field(..., description="Album name", min_length=1, max_length=255)
    description: str = Field("", description="Album description", max_length=1000)
    album_users: List[AlbumUserAddRequest] = Field(default_factory=list, description="Initial collaborators")
    asset_ids: List[str] = Field(default_factory=list, description="Initial asset IDs")


class AlbumUpdateRequest(BaseModel):
    """Album update request"""
    album_name: Optional[str] = Field(None, description="Album name", min_length=1, max_length=255)
    description: Optional[str] = Field(None, description="Album description", max_length=1000)
    album_thumbnail_asset_id: Optional[str] = Field(None, description="Thumbnail asset ID")
    is_activity_enabled: Optional[bool] = Field(None, description="Enable activity feed")
    order: Optional[AssetOrder] = Field(None, description="Asset ordering")


class BulkIdsRequest(BaseModel):
    """Bulk asset ids request"""
    ids: List[str] = Field(..., description="Asset IDs", min_length=1)


class AlbumsAddAssetsRequest(BaseModel):
    """Add assets to several albums request"""
    album_ids: List[str] = Field(..., description="Album IDs", min_length=1)
    asset_ids: List[str] = Field(..., description="Asset IDs", min_length=1)


class AddUsersRequest(BaseModel):
    """Add collaborators request"""
    album_users: List[AlbumUserAddRequest] = Field(..., description="Collaborators", min_length=1)


class UpdateAlbumUserRequest(BaseModel):
    """Update collaborator role request"""
    role: AlbumUserRole


# ==================== Response Models ====================

class BulkIdResponse(BaseModel):
    """Per-id bulk operation result"""
    id: str
    success: bool
    error: Optional[BulkIdErrorReason] = None


class AlbumAssetsResult(BaseModel):
    """Per-album outcome of a multi-album add"""
    album_id: str
    success: bool
    error: Optional[BulkIdErrorReason] = None
    added_asset_ids: List[str] = Field(default_factory=list)


class AlbumsAddAssetsResponse(BaseModel):
    """Aggregate outcome of a multi-album add"""
    success: bool = False
    error: Optional[BulkIdErrorReason] = BulkIdErrorReason.DUPLICATE
    albums: List[AlbumAssetsResult] = Field(default_factory=list)


class UserResponse(BaseModel):
    """Public user summary"""
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_color: Optional[str] = None
    profile_image_path: Optional[str] = None
    profile_changed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AlbumUserResponse(BaseModel):
    """Collaborator as reported by the sharing authority"""
    user: UserResponse
    role: AlbumUserRole


class AlbumResponse(BaseModel):
    """Album response"""
    album_id: str
    owner_id: str
    album_name: str
    description: str
    album_thumbnail_asset_id: Optional[str]
    order: AssetOrder
    is_activity_enabled: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    shared: bool = False
    has_shared_link: bool = False
    album_users: List[AlbumUserResponse] = Field(default_factory=list)
    asset_ids: List[str] = Field(default_factory=list)
    asset_count: int = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    last_modified_asset_timestamp: Optional[datetime] = None
    contributor_counts: Optional[List[ContributorCount]] = None


class AlbumStatisticsResponse(BaseModel):
    """Album statistics for a user"""
    owned: int
    shared: int
    not_shared: int


# ==================== Export Models ====================

__all__ = [
    # Enums
    'AlbumUserRole', 'AssetOrder', 'Permission', 'BulkIdErrorReason',
    # Core Models
    'Principal', 'User', 'AlbumUser', 'Album', 'AlbumAssetPair',
    'AlbumMetadata', 'ContributorCount',
    # Request Models
    'AlbumUserAddRequest', 'AlbumCreateRequest', 'AlbumUpdateRequest',
    'BulkIdsRequest', 'AlbumsAddAssetsRequest', 'AddUsersRequest',
    'UpdateAlbumUserRequest',
    # Response Models
    'BulkIdResponse', 'AlbumAssetsResult', 'AlbumsAddAssetsResponse',
    'UserResponse', 'AlbumUserResponse', 'AlbumResponse',
    'AlbumStatisticsResponse',
]
