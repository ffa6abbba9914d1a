"""
Tests for organization routes in src/domains/organizations/routes.py

Tests organization creation and member management over HTTP.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi.testclient import TestClient

from src.shared.roles import OrganizationRole
from tests.helpers.route_testing import RouteTestHelper

ORG_ID = "test-org-id-123"
BASE = "/api/v1/organizations"


@pytest.fixture
def seeded(memory_authority):
    RouteTestHelper.seed_member(
        memory_authority, ORG_ID, "owner-id", OrganizationRole.super_admin
    )
    RouteTestHelper.seed_member(
        memory_authority, ORG_ID, "admin-id", OrganizationRole.admin
    )
    RouteTestHelper.seed_member(
        memory_authority, ORG_ID, "manager-id", OrganizationRole.manager
    )
    RouteTestHelper.seed_member(memory_authority, ORG_ID, "member-id")
    return memory_authority


class TestCreateOrganizationRoute:
    def test_create_organization(self, client: TestClient):
        response = RouteTestHelper.request_as(
            client, "post", BASE, "u1", json={"name": "Test Organization"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Test Organization"
        assert body["role"] == "super_admin"

        members = RouteTestHelper.request_as(
            client, "get", f"{BASE}/{body['organization_id']}/members", "u1"
        )
        assert [m["user_id"] for m in members.json()] == ["u1"]

    def test_empty_name_is_unprocessable(self, client: TestClient):
        response = RouteTestHelper.request_as(
            client, "post", BASE, "u1", json={"name": ""}
        )

        assert response.status_code == 422

    def test_requires_identity(self, client: TestClient):
        response = client.post(BASE, json={"name": "Test Organization"})

        assert response.status_code == 401

    def test_service_called_with_caller(self, client: TestClient):
        with patch(
            "src.domains.organizations.routes.OrganizationService"
        ) as mock_service_class:
            mock_service_instance = Mock()
            mock_service_instance.create_organization = AsyncMock(
                return_value={
                    "organization_id": "new-org",
                    "name": "Test Organization",
                    "role": "super_admin",
                }
            )
            mock_service_class.return_value = mock_service_instance

            response = RouteTestHelper.request_as(
                client, "post", BASE, "u1", json={"name": "Test Organization"}
            )

        assert response.status_code == 201
        args = mock_service_instance.create_organization.call_args.args
        assert args[0].name == "Test Organization"
        assert args[1] == "u1"


class TestOrganizationMembersRoute:
    def test_manager_views_members(self, client: TestClient, seeded):
        response = RouteTestHelper.request_as(
            client, "get", f"{BASE}/{ORG_ID}/members", "manager-id"
        )

        assert response.status_code == 200
        assert len(response.json()) == 4

    def test_member_cannot_view_members(self, client: TestClient, seeded):
        response = RouteTestHelper.request_as(
            client, "get", f"{BASE}/{ORG_ID}/members", "member-id"
        )

        assert response.status_code == 403

    def test_non_member_denied(self, client: TestClient, seeded):
        response = RouteTestHelper.request_as(
            client, "get", f"{BASE}/{ORG_ID}/members", "stranger"
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Access denied to organization"


class TestUpdateOrganizationMemberRoute:
    def test_admin_removes_member(self, client: TestClient, seeded):
        response = RouteTestHelper.request_as(
            client,
            "patch",
            f"{BASE}/{ORG_ID}/members/member-id",
            "admin-id",
            json={"status": "removed"},
        )

        assert response.status_code == 200
        assert response.json()["is_active"] is False

        access = client.get(f"{BASE}/{ORG_ID}/access/member-id").json()
        assert access["can_access"] is False

    def test_admin_changes_role(self, client: TestClient, seeded):
        response = RouteTestHelper.request_as(
            client,
            "patch",
            f"{BASE}/{ORG_ID}/members/member-id",
            "admin-id",
            json={"role": "viewer"},
        )

        assert response.status_code == 200
        assert response.json()["role"] == "viewer"

    def test_manager_cannot_update(self, client: TestClient, seeded):
        response = RouteTestHelper.request_as(
            client,
            "patch",
            f"{BASE}/{ORG_ID}/members/member-id",
            "manager-id",
            json={"status": "removed"},
        )

        assert response.status_code == 403

    def test_admin_cannot_remove_super_admin(self, client: TestClient, seeded):
        response = RouteTestHelper.request_as(
            client,
            "patch",
            f"{BASE}/{ORG_ID}/members/owner-id",
            "admin-id",
            json={"status": "removed"},
        )

        assert response.status_code == 403

    def test_cannot_remove_yourself(self, client: TestClient, seeded):
        response = RouteTestHelper.request_as(
            client,
            "patch",
            f"{BASE}/{ORG_ID}/members/owner-id",
            "owner-id",
            json={"status": "removed"},
        )

        assert response.status_code == 400

    def test_empty_update_is_unprocessable(self, client: TestClient, seeded):
        response = RouteTestHelper.request_as(
            client, "patch", f"{BASE}/{ORG_ID}/members/member-id", "admin-id", json={}
        )

        assert response.status_code == 422

    def test_unknown_member(self, client: TestClient, seeded):
        response = RouteTestHelper.request_as(
            client,
            "patch",
            f"{BASE}/{ORG_ID}/members/ghost",
            "admin-id",
            json={"status": "removed"},
        )

        assert response.status_code == 404
