"""
Component Test Layer Configuration

Structure:
    tests/component/
    ├── golden/      🔒 Characterization (never modify)
    ├── tdd/         🆕 TDD (new features)
    └── mocks/       Mock implementations

Usage:
    pytest tests/component -v
    pytest tests/component/golden -v
    pytest tests/component/tdd/album_service -v
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ["ENV"] = "testing"
os.environ["ENVIRONMENT"] = "testing"

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from tests.component.mocks import MockEventBus
from tests.component.golden.album_service.mocks import (
    MockAlbumRepository,
    MockSharingAuthority,
    MockUserRepository,
    make_album_service,
)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "component: marks tests as component tests"
    )
    config.addinivalue_line(
        "markers", "golden: safety net tests - DO NOT MODIFY"
    )


# =============================================================================
# Event Bus Mocks
# =============================================================================

@pytest.fixture
def mock_event_bus() -> MockEventBus:
    """Mock event bus"""
    return MockEventBus()


# =============================================================================
# Album Repository Mocks
# =============================================================================

@pytest.fixture
def album_repo() -> MockAlbumRepository:
    """Empty in-memory album store"""
    return MockAlbumRepository()


@pytest.fixture
def user_repo() -> MockUserRepository:
    """Known users: owner, editor, viewer, stranger"""
    repo = MockUserRepository()
    for user_id in ("usr_owner", "usr_editor", "usr_viewer", "usr_stranger", "usr_new"):
        repo.set_user(user_id)
    return repo


@pytest.fixture
def authority(album_repo: MockAlbumRepository) -> MockSharingAuthority:
    """Sharing authority mirroring album_repo collaborator rows"""
    return MockSharingAuthority(album_repo)


@pytest.fixture
def album_service(album_repo, user_repo, authority, mock_event_bus):
    """AlbumService wired through the factory with mocked dependencies"""
    return make_album_service(album_repo, user_repo, authority, mock_event_bus)
