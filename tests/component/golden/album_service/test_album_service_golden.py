"""
Album Service Component Golden Tests

These tests document AlbumService album lifecycle behavior with mocked deps.
Uses proper dependency injection - no patching needed!

Usage:
    pytest tests/component/golden/album_service -v
"""
import pytest

from microservices.album_service.models import (
    AlbumCreateRequest,
    AlbumResponse,
    AlbumUpdateRequest,
    AlbumUserAddRequest,
    AlbumUserRole,
    AssetOrder,
    Principal,
)
from microservices.album_service.protocols import (
    AlbumConflictError,
    AlbumNotFoundError,
    AlbumPermissionError,
    AlbumRemoteError,
    AlbumValidationError,
)
from tests.component.golden.album_service.mocks import SHARE_ALBUM_URL, SHARED_USERS_URL

pytestmark = [pytest.mark.component, pytest.mark.golden, pytest.mark.asyncio]

OWNER = Principal(user_id="usr_owner")
VIEWER = Principal(user_id="usr_viewer")
STRANGER = Principal(user_id="usr_stranger")


# =============================================================================
# AlbumService.create_album() Tests
# =============================================================================

class TestAlbumServiceCreateGolden:
    """Golden: AlbumService.create_album() current behavior"""

    async def test_create_keeps_shareable_assets_in_order(self, album_service, album_repo):
        """GOLDEN: only assets the owner may share are added, thumbnail is the first"""
        for asset_id in ("a2", "a1"):
            album_repo.set_asset(asset_id, "usr_owner")
        album_repo.set_asset("a3", "usr_stranger")

        result = await album_service.create_album(
            OWNER, AlbumCreateRequest(album_name="Trip", asset_ids=["a2", "a3", "a1"])
        )

        assert isinstance(result, AlbumResponse)
        assert result.owner_id == "usr_owner"
        assert result.album_name == "Trip"
        assert result.asset_ids == ["a2", "a1"]
        assert result.album_thumbnail_asset_id == "a2"
        assert result.shared is False

    async def test_create_uses_owner_order_preference(self, album_service, album_repo, user_repo):
        """GOLDEN: album order comes from the owner's preferences"""
        user_repo.set_user("usr_owner", preferences={"albums": {"default_asset_order": "asc"}})

        result = await album_service.create_album(OWNER, AlbumCreateRequest(album_name="Sorted"))

        assert result.order == AssetOrder.ASC
        assert result.album_thumbnail_asset_id is None

    async def test_create_invites_initial_collaborators(self, album_service, authority, mock_event_bus):
        """GOLDEN: initial collaborators are invited through the authority"""
        result = await album_service.create_album(
            OWNER,
            AlbumCreateRequest(
                album_name="Shared",
                album_users=[AlbumUserAddRequest(user_id="usr_viewer", role=AlbumUserRole.VIEWER)],
            ),
        )

        assert result.shared is True
        request = authority.requests_to(SHARE_ALBUM_URL)[0]["json"]
        assert request["shareWithUserId"] == "usr_viewer"
        assert request["userRole"] == "viewer"
        mock_event_bus.assert_event_published("album.invite", {"user_id": "usr_viewer"})

    async def test_create_with_owner_as_collaborator_fails(self, album_service, album_repo):
        """GOLDEN: owner cannot be an initial collaborator"""
        with pytest.raises(AlbumValidationError):
            await album_service.create_album(
                OWNER,
                AlbumCreateRequest(album_name="Bad", album_users=[AlbumUserAddRequest(user_id="usr_owner")]),
            )

        album_repo.assert_not_called("create")

    async def test_create_with_unknown_collaborator_fails(self, album_service, album_repo):
        """GOLDEN: unknown collaborator fails before the album exists"""
        with pytest.raises(AlbumNotFoundError):
            await album_service.create_album(
                OWNER,
                AlbumCreateRequest(album_name="Bad", album_users=[AlbumUserAddRequest(user_id="usr_ghost")]),
            )

        album_repo.assert_not_called("create")

    async def test_create_with_repeated_collaborator_fails(self, album_service, album_repo):
        """GOLDEN: repeated collaborator is a conflict"""
        with pytest.raises(AlbumConflictError):
            await album_service.create_album(
                OWNER,
                AlbumCreateRequest(
                    album_name="Bad",
                    album_users=[AlbumUserAddRequest(user_id="usr_viewer"), AlbumUserAddRequest(user_id="usr_viewer")],
                ),
            )

    async def test_create_reports_album_id_when_invite_fails(self, album_service, album_repo, authority):
        """GOLDEN: a rejected initial invite names the album that was already created"""
        authority.reject_invite("usr_viewer", "Sharing limit reached")

        with pytest.raises(AlbumRemoteError) as exc_info:
            await album_service.create_album(
                OWNER,
                AlbumCreateRequest(
                    album_name="Shared",
                    album_users=[
                        AlbumUserAddRequest(user_id="usr_viewer"),
                        AlbumUserAddRequest(user_id="usr_editor", role=AlbumUserRole.EDITOR),
                    ],
                ),
            )

        album_id = album_repo.calls("create")[0]["kwargs"]["album_id"]
        assert album_repo.album(album_id) is not None
        assert str(exc_info.value) == f"Album {album_id} created but sharing failed: Sharing limit reached"
        assert exc_info.value.pending_ids == ["usr_editor"]
        assert isinstance(exc_info.value.__cause__, AlbumRemoteError)


# =============================================================================
# AlbumService.get_album() Tests
# =============================================================================

class TestAlbumServiceGetGolden:
    """Golden: AlbumService.get_album() current behavior"""

    async def test_get_returns_assets_and_metadata(self, album_service, album_repo):
        """GOLDEN: get_album includes members and asset count"""
        album_repo.set_album("alb_1", "usr_owner", asset_ids=["a1", "a2"], thumbnail_id="a1")

        result = await album_service.get_album(OWNER, "alb_1")

        assert result.asset_ids == ["a1", "a2"]
        assert result.asset_count == 2
        assert result.shared is False
        assert result.contributor_counts is None

    async def test_get_without_assets(self, album_service, album_repo):
        """GOLDEN: without_assets omits member ids but keeps the count"""
        album_repo.set_album("alb_1", "usr_owner", asset_ids=["a1"])

        result = await album_service.get_album(OWNER, "alb_1", without_assets=True)

        assert result.asset_ids == []
        assert result.asset_count == 1

    async def test_get_shared_album_includes_contributors(self, album_service, album_repo):
        """GOLDEN: shared albums report contributor counts"""
        album_repo.set_album(
            "alb_1", "usr_owner", asset_ids=["a1"],
            album_users={"usr_viewer": AlbumUserRole.VIEWER},
        )

        result = await album_service.get_album(VIEWER, "alb_1")

        assert result.shared is True
        assert [(c.user_id, c.asset_count) for c in result.contributor_counts] == [("usr_owner", 1)]

    async def test_get_repairs_stale_thumbnail(self, album_service, album_repo):
        """GOLDEN: a thumbnail that is no longer a member is repaired on read"""
        album_repo.set_album("alb_1", "usr_owner", asset_ids=["a2"], thumbnail_id="a1")

        result = await album_service.get_album(OWNER, "alb_1")

        assert result.album_thumbnail_asset_id == "a2"

    async def test_get_without_access_fails(self, album_service, album_repo):
        """GOLDEN: strangers cannot read the album"""
        album_repo.set_album("alb_1", "usr_owner")

        with pytest.raises(AlbumPermissionError):
            await album_service.get_album(STRANGER, "alb_1")

    async def test_get_with_roster_reply_missing_payload_fails(self, album_service, album_repo, authority):
        """GOLDEN: a roster reply without a payload is not read as an empty roster"""
        album_repo.set_album("alb_1", "usr_owner", album_users={"usr_editor": AlbumUserRole.EDITOR})
        authority.set_raw_roster_reply("alb_1", {"unexpected": True})

        with pytest.raises(AlbumRemoteError) as exc_info:
            await album_service.get_album(OWNER, "alb_1")

        assert str(exc_info.value) == "Failed to fetch shared users: Malformed response from sharing authority"
        assert len(authority.requests_to(SHARED_USERS_URL)) == 1


# =============================================================================
# AlbumService.get_all_albums() Tests
# =============================================================================

class TestAlbumServiceListGolden:
    """Golden: AlbumService.get_all_albums() current behavior"""

    @pytest.fixture
    def populated(self, album_repo):
        album_repo.set_album("alb_private", "usr_owner", asset_ids=["a1"])
        album_repo.set_album("alb_shared", "usr_owner", album_users={"usr_viewer": AlbumUserRole.VIEWER})
        album_repo.set_album("alb_linked", "usr_owner", shared_link_ids=["link_1"])
        album_repo.set_album("alb_theirs", "usr_stranger", album_users={"usr_owner": AlbumUserRole.EDITOR})
        return album_repo

    async def test_default_lists_owned(self, album_service, populated):
        """GOLDEN: no filter lists owned albums"""
        result = await album_service.get_all_albums(OWNER)

        assert {a.album_id for a in result} == {"alb_private", "alb_shared", "alb_linked"}
        assert all(a.asset_ids == [] for a in result)

    async def test_shared_filter(self, album_service, populated):
        """GOLDEN: shared=True lists shared albums, owned or not"""
        result = await album_service.get_all_albums(OWNER, shared=True)

        assert {a.album_id for a in result} == {"alb_shared", "alb_linked", "alb_theirs"}
        by_id = {a.album_id: a for a in result}
        assert [u.user.user_id for u in by_id["alb_shared"].album_users] == ["usr_viewer"]
        assert by_id["alb_linked"].has_shared_link is True

    async def test_not_shared_filter(self, album_service, populated):
        """GOLDEN: shared=False lists owned albums without collaborators or links"""
        result = await album_service.get_all_albums(OWNER, shared=False)

        assert [a.album_id for a in result] == ["alb_private"]
        assert result[0].asset_count == 1

    async def test_asset_filter(self, album_service, populated):
        """GOLDEN: asset_id lists albums containing the asset"""
        result = await album_service.get_all_albums(OWNER, asset_id="a1")

        assert [a.album_id for a in result] == ["alb_private"]


# =============================================================================
# AlbumService.update_album() / delete_album() Tests
# =============================================================================

class TestAlbumServiceUpdateGolden:
    """Golden: AlbumService.update_album() and delete_album()"""

    async def test_update_changes_fields(self, album_service, album_repo):
        """GOLDEN: provided fields are updated, others kept"""
        album_repo.set_album("alb_1", "usr_owner", asset_ids=["a1", "a2"], thumbnail_id="a1")

        result = await album_service.update_album(
            OWNER, "alb_1",
            AlbumUpdateRequest(album_name="Renamed", album_thumbnail_asset_id="a2", order=AssetOrder.ASC),
        )

        assert result.album_name == "Renamed"
        assert result.album_thumbnail_asset_id == "a2"
        assert result.order == AssetOrder.ASC
        update_data = album_repo.calls("update")[0]["kwargs"]["update_data"]
        assert "description" not in update_data
        assert "updated_at" in update_data

    async def test_update_with_non_member_thumbnail_fails(self, album_service, album_repo):
        """GOLDEN: thumbnail must be a member asset"""
        album_repo.set_album("alb_1", "usr_owner", asset_ids=["a1"], thumbnail_id="a1")

        with pytest.raises(AlbumValidationError) as exc_info:
            await album_service.update_album(
                OWNER, "alb_1", AlbumUpdateRequest(album_thumbnail_asset_id="a9")
            )

        assert str(exc_info.value) == "Invalid album thumbnail"
        album_repo.assert_not_called("update")

    async def test_update_with_empty_thumbnail_fails(self, album_service, album_repo):
        """GOLDEN: an empty thumbnail id is checked like any other id"""
        album_repo.set_album("alb_1", "usr_owner", asset_ids=["a1"], thumbnail_id="a1")

        with pytest.raises(AlbumValidationError) as exc_info:
            await album_service.update_album(
                OWNER, "alb_1", AlbumUpdateRequest(album_thumbnail_asset_id="")
            )

        assert str(exc_info.value) == "Invalid album thumbnail"
        album_repo.assert_not_called("update")
        assert album_repo.album("alb_1").album_thumbnail_asset_id == "a1"

    async def test_viewer_may_not_update(self, album_service, album_repo):
        """GOLDEN: only the owner updates album fields"""
        album_repo.set_album("alb_1", "usr_owner", album_users={"usr_viewer": AlbumUserRole.VIEWER})

        with pytest.raises(AlbumPermissionError):
            await album_service.update_album(VIEWER, "alb_1", AlbumUpdateRequest(album_name="Mine"))

    async def test_delete_by_owner(self, album_service, album_repo):
        """GOLDEN: owner deletes the album"""
        album_repo.set_album("alb_1", "usr_owner", asset_ids=["a1"])

        await album_service.delete_album(OWNER, "alb_1")

        assert await album_repo.get_by_id("alb_1") is None

    async def test_delete_by_collaborator_fails(self, album_service, album_repo):
        """GOLDEN: collaborators cannot delete"""
        album_repo.set_album("alb_1", "usr_owner", album_users={"usr_viewer": AlbumUserRole.VIEWER})

        with pytest.raises(AlbumPermissionError):
            await album_service.delete_album(VIEWER, "alb_1")

        album_repo.assert_not_called("delete")


# =============================================================================
# AlbumService.get_statistics() Tests
# =============================================================================

class TestAlbumServiceStatisticsGolden:
    """Golden: AlbumService.get_statistics() current behavior"""

    async def test_statistics_counts(self, album_service, album_repo):
        """GOLDEN: owned / shared / not shared counts"""
        album_repo.set_album("alb_1", "usr_owner")
        album_repo.set_album("alb_2", "usr_owner", album_users={"usr_viewer": AlbumUserRole.VIEWER})
        album_repo.set_album("alb_3", "usr_stranger", album_users={"usr_owner": AlbumUserRole.VIEWER})

        result = await album_service.get_statistics(OWNER)

        assert (result.owned, result.shared, result.not_shared) == (2, 2, 1)
