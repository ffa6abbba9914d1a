"""
Global pytest configuration and fixtures for the Org Access API test suite.
"""

from typing import Generator
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from src.core.authority import AuthorityStore
from src.core.authority.memory import InMemoryAuthority
from src.main import app

# Import fixtures from fixture modules
from tests.fixtures.organization_fixtures import *  # noqa: F403, F401
from tests.fixtures.organization_fixtures import FakeClock
from tests.helpers.route_testing import RouteTestHelper


@pytest.fixture
def mock_authority() -> Mock:
    """
    Mock authority for unit tests that don't need a real store.
    """
    authority = Mock(spec=AuthorityStore)
    # Make async methods return AsyncMock
    authority.get_membership = AsyncMock(return_value=None)
    authority.upsert_membership = AsyncMock()
    authority.deactivate_membership = AsyncMock()
    authority.list_memberships = AsyncMock(return_value=[])
    authority.create_invitation = AsyncMock()
    authority.get_invitation = AsyncMock()
    authority.update_invitation_status = AsyncMock()
    authority.reissue_invitation = AsyncMock()
    authority.list_invitations = AsyncMock(return_value=[])
    return authority


@pytest.fixture
def memory_authority(fake_clock: FakeClock) -> InMemoryAuthority:
    """In-memory authority sharing the test clock."""
    return InMemoryAuthority(clock=fake_clock)


@pytest.fixture
def client(memory_authority: InMemoryAuthority) -> Generator[TestClient, None, None]:
    """FastAPI test client wired to the in-memory authority."""
    RouteTestHelper.override_authority(memory_authority)
    yield TestClient(app)
    RouteTestHelper.clear_overrides()


# Test data fixtures for consistent test scenarios
@pytest.fixture
def test_organization_id() -> str:
    """Standard test organization ID."""
    return "42f929b1-8fdb-45b1-a7cf-34fae2314561"


@pytest.fixture
def test_user_id() -> str:
    """Standard test user ID."""
    return "test-user-id-123"
