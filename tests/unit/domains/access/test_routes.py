"""
Tests for access routes in src/domains/access/routes.py
"""

from unittest.mock import Mock

from fastapi.testclient import TestClient

from src.main import app
from src.shared.exceptions import TransportFault
from src.shared.roles import OrganizationRole
from tests.helpers.route_testing import RouteTestHelper

ORG_ID = "test-org-id-123"


def _check(level: str, specific_users=None) -> dict:
    return {
        "entity": "projects",
        "action": "update",
        "permission": {
            "entity": "projects",
            "action": "update",
            "level": level,
            "specific_users": specific_users,
        },
    }


class TestGetOrganizationAccess:
    def test_member_access(self, client: TestClient, memory_authority):
        RouteTestHelper.seed_member(
            memory_authority, ORG_ID, "u1", OrganizationRole.manager
        )

        response = client.get(f"/api/v1/organizations/{ORG_ID}/access/u1")

        assert response.status_code == 200
        body = response.json()
        assert body["can_access"] is True
        assert body["role"] == "manager"
        assert body["verified"] is True

    def test_non_member(self, client: TestClient):
        response = client.get(f"/api/v1/organizations/{ORG_ID}/access/nobody")

        assert response.status_code == 200
        assert response.json()["can_access"] is False
        assert response.json()["role"] is None

    def test_authority_unavailable_assumes_member(self, mock_authority: Mock):
        mock_authority.get_membership.side_effect = TransportFault()
        RouteTestHelper.override_authority(mock_authority)
        try:
            response = TestClient(app).get(f"/api/v1/organizations/{ORG_ID}/access/u1")
        finally:
            RouteTestHelper.clear_overrides()

        assert response.status_code == 200
        body = response.json()
        assert body["can_access"] is True
        assert body["role"] == "member"
        assert body["verified"] is False


class TestEvaluatePermission:
    url = f"/api/v1/organizations/{ORG_ID}/access/evaluate"

    def test_specific_user_allowed(self, client: TestClient, memory_authority):
        RouteTestHelper.seed_member(memory_authority, ORG_ID, "u1")

        response = RouteTestHelper.request_as(
            client, "post", self.url, "u1", json=_check("specific", ["u1"])
        )

        assert response.status_code == 200
        assert response.json() == {"allowed": True, "role": "member", "verified": True}

    def test_unlisted_user_denied(self, client: TestClient, memory_authority):
        RouteTestHelper.seed_member(memory_authority, ORG_ID, "u2")

        response = RouteTestHelper.request_as(
            client, "post", self.url, "u2", json=_check("specific", ["u1"])
        )

        assert response.json()["allowed"] is False

    def test_super_admin_bypass(self, client: TestClient, memory_authority):
        RouteTestHelper.seed_member(
            memory_authority, ORG_ID, "owner", OrganizationRole.super_admin
        )

        response = RouteTestHelper.request_as(
            client, "post", self.url, "owner", json=_check("none")
        )

        assert response.json()["allowed"] is True

    def test_non_member_always_denied(self, client: TestClient):
        response = RouteTestHelper.request_as(
            client, "post", self.url, "stranger", json=_check("all")
        )

        assert response.status_code == 200
        assert response.json()["allowed"] is False
        assert response.json()["role"] is None

    def test_misconfigured_level_denied(self, client: TestClient, memory_authority):
        RouteTestHelper.seed_member(memory_authority, ORG_ID, "u1")

        response = RouteTestHelper.request_as(
            client, "post", self.url, "u1", json=_check("sometimes")
        )

        assert response.status_code == 200
        assert response.json()["allowed"] is False

    def test_missing_identity(self, client: TestClient):
        response = RouteTestHelper.request_as(
            client, "post", self.url, None, json=_check("all")
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Missing user identity"
