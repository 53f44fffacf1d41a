"""
Album Microservice

HTTP surface for album membership management.
The host builds an AlbumService (see factory.py) with its own repositories
and mounts the app returned by create_app().

Port: 8219
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.logger import setup_service_logger

from .album_service import AlbumService
from .models import (
    AddUsersRequest,
    AlbumCreateRequest,
    AlbumResponse,
    AlbumsAddAssetsRequest,
    AlbumsAddAssetsResponse,
    AlbumStatisticsResponse,
    AlbumUpdateRequest,
    BulkIdResponse,
    BulkIdsRequest,
    Principal,
    UpdateAlbumUserRequest,
)
from .protocols import (
    AlbumConfigurationError,
    AlbumConflictError,
    AlbumNotFoundError,
    AlbumPermissionError,
    AlbumRemoteError,
    AlbumServiceError,
    AlbumValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first: AlbumOwnershipError is an AlbumPermissionError
_STATUS_CODES = [
    (AlbumValidationError, 400),
    (AlbumConfigurationError, 400),
    (AlbumPermissionError, 403),
    (AlbumNotFoundError, 404),
    (AlbumConflictError, 409),
    (AlbumRemoteError, 502),
]


def to_http_exception(error: AlbumServiceError) -> HTTPException:
    """Map a domain error to an HTTP error"""
    for error_type, status_code in _STATUS_CODES:
        if isinstance(error, error_type):
            break
    else:
        status_code = 500

    detail = {"message": str(error)}
    if error.pending_ids:
        detail["pending_ids"] = error.pending_ids
    return HTTPException(status_code=status_code, detail=detail)


# ==================== Dependency Injection ====================


def get_album_service(request: Request) -> AlbumService:
    """Get album service instance"""
    service = getattr(request.app.state, "album_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return service


def get_principal(user_id: str = Query(..., description="User ID")) -> Principal:
    """Extract the acting user from query parameters"""
    if not user_id:
        raise HTTPException(status_code=400, detail="user_id is required")
    return Principal(user_id=user_id)


def create_app(album_service: Optional[AlbumService] = None) -> FastAPI:
    """
    Build the album service FastAPI application.

    Args:
        album_service: Configured service (see factory.create_album_service)

    Returns:
        FastAPI application
    """
    settings = get_settings()
    setup_service_logger(settings.service_name, settings.logging)

    app = FastAPI(
        title="Album Service",
        description="Album membership and sharing management",
        version="1.0.0",
    )
    app.state.album_service = album_service

    # ==================== Health Check ====================

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        ready = app.state.album_service is not None
        health = {
            "status": "healthy" if ready else "unhealthy",
            "service": settings.service_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        return JSONResponse(content=health, status_code=200 if ready else 503)

    # ==================== Album Management ====================

    @app.get("/api/v1/albums/statistics", response_model=AlbumStatisticsResponse)
    async def get_album_statistics(
        principal: Principal = Depends(get_principal),
        service: AlbumService = Depends(get_album_service),
    ):
        """Owned / shared / not shared album counts"""
        try:
            return await service.get_statistics(principal)
        except AlbumServiceError as e:
            raise to_http_exception(e)

    @app.get("/api/v1/albums", response_model=List[AlbumResponse])
    async def get_all_albums(
        asset_id: Optional[str] = Query(None, description="Only albums containing this asset"),
        shared: Optional[bool] = Query(None, description="Filter by sharing status"),
        principal: Principal = Depends(get_principal),
        service: AlbumService = Depends(get_album_service),
    ):
        """List albums with live collaborator rosters"""
        try:
            return await service.get_all_albums(principal, asset_id=asset_id, shared=shared)
        except AlbumServiceError as e:
            raise to_http_exception(e)

    @app.post("/api/v1/albums", response_model=AlbumResponse, status_code=201)
    async def create_album(
        request: AlbumCreateRequest,
        principal: Principal = Depends(get_principal),
        service: AlbumService = Depends(get_album_service),
    ):
        """Create a new album"""
        try:
            return await service.create_album(principal, request)
        except AlbumServiceError as e:
            raise to_http_exception(e)

    @app.put("/api/v1/albums/assets", response_model=AlbumsAddAssetsResponse)
    async def add_assets_to_albums(
        request: AlbumsAddAssetsRequest,
        principal: Principal = Depends(get_principal),
        service: AlbumService = Depends(get_album_service),
    ):
        """Add assets to several albums"""
        try:
            return await service.add_assets_to_albums(principal, request)
        except AlbumServiceError as e:
            raise to_http_exception(e)

    @app.get("/api/v1/albums/{album_id}", response_model=AlbumResponse)
    async def get_album(
        album_id: str,
        without_assets: bool = Query(False, description="Omit member asset ids"),
        principal: Principal = Depends(get_principal),
        service: AlbumService = Depends(get_album_service),
    ):
        """Get album by ID"""
        try:
            return await service.get_album(principal, album_id, without_assets=without_assets)
        except AlbumServiceError as e:
            raise to_http_exception(e)

    @app.patch("/api/v1/albums/{album_id}", response_model=AlbumResponse)
    async def update_album(
        album_id: str,
        request: AlbumUpdateRequest,
        principal: Principal = Depends(get_principal),
        service: AlbumService = Depends(get_album_service),
    ):
        """Update album"""
        try:
            return await service.update_album(principal, album_id, request)
        except AlbumServiceError as e:
            raise to_http_exception(e)

    @app.delete("/api/v1/albums/{album_id}")
    async def delete_album(
        album_id: str,
        principal: Principal = Depends(get_principal),
        service: AlbumService = Depends(get_album_service),
    ):
        """Delete album"""
        try:
            await service.delete_album(principal, album_id)
        except AlbumServiceError as e:
            raise to_http_exception(e)
        return JSONResponse(
            content={"success": True, "message": f"Album {album_id} deleted"},
            status_code=200,
        )

    # ==================== Album Asset Management ====================

    @app.put("/api/v1/albums/{album_id}/assets", response_model=List[BulkIdResponse])
    async def add_assets(
        album_id: str,
        request: BulkIdsRequest,
        principal: Principal = Depends(get_principal),
        service: AlbumService = Depends(get_album_service),
    ):
        """Add assets to album"""
        try:
            return await service.add_assets(principal, album_id, request)
        except AlbumServiceError as e:
            raise to_http_exception(e)

    @app.delete("/api/v1/albums/{album_id}/assets", response_model=List[BulkIdResponse])
    async def remove_assets(
        album_id: str,
        request: BulkIdsRequest,
        principal: Principal = Depends(get_principal),
        service: AlbumService = Depends(get_album_service),
    ):
        """Remove assets from album"""
        try:
            return await service.remove_assets(principal, album_id, request)
        except AlbumServiceError as e:
            raise to_http_exception(e)

    # ==================== Album User Management ====================

    @app.put("/api/v1/albums/{album_id}/users", response_model=AlbumResponse)
    async def add_users(
        album_id: str,
        request: AddUsersRequest,
        principal: Principal = Depends(get_principal),
        service: AlbumService = Depends(get_album_service),
    ):
        """Share album with users"""
        try:
            return await service.add_users(principal, album_id, request)
        except AlbumServiceError as e:
            raise to_http_exception(e)

    @app.put("/api/v1/albums/{album_id}/user/{target_user_id}", status_code=204)
    async def update_album_user(
        album_id: str,
        target_user_id: str,
        request: UpdateAlbumUserRequest,
        principal: Principal = Depends(get_principal),
        service: AlbumService = Depends(get_album_service),
    ):
        """Change a collaborator's role"""
        try:
            await service.update_user(principal, album_id, target_user_id, request)
        except AlbumServiceError as e:
            raise to_http_exception(e)

    @app.delete("/api/v1/albums/{album_id}/user/{target_user_id}", status_code=204)
    async def remove_album_user(
        album_id: str,
        target_user_id: str,
        principal: Principal = Depends(get_principal),
        service: AlbumService = Depends(get_album_service),
    ):
        """Remove a collaborator ("me" leaves the album)"""
        try:
            await service.remove_user(principal, album_id, target_user_id)
        except AlbumServiceError as e:
            raise to_http_exception(e)

    logger.info("Album Service routes registered")
    return app
