"""
Tests for shared permissions models (Capability enum, ROLE_CAPABILITIES mapping
and default permission records).
"""

import pytest

from src.shared.permissions.models import (
    ROLE_CAPABILITIES,
    ActionType,
    Capability,
    EntityType,
    Permission,
    PermissionLevel,
    ProjectPermissions,
    TaskPermissions,
)
from src.shared.roles import OrganizationRole
from tests.utils.permission_testing import CapabilityTestHelpers


class TestCapabilityEnum:
    """Test the Capability enum definition."""

    def test_capability_naming(self):
        """All capabilities are UPPERCASE ACTION_RESOURCE with lowercase values."""
        for capability in Capability:
            assert capability.name.isupper()
            assert "_" in capability.name
            assert capability.value == capability.name.lower()

    def test_core_capabilities_exist(self):
        assert Capability.VIEW_MEMBERS.value == "view_members"
        assert Capability.MANAGE_USERS.value == "manage_users"
        assert Capability.EDIT_OWN_TASKS.value == "edit_own_tasks"


class TestRoleCapabilities:
    """Test the ROLE_CAPABILITIES mapping."""

    def test_all_roles_have_capabilities(self):
        for role in OrganizationRole:
            assert role in ROLE_CAPABILITIES
            assert ROLE_CAPABILITIES[role], f"{role.value} has no capabilities"

    def test_role_hierarchy(self):
        assert CapabilityTestHelpers.validate_role_hierarchy()

    def test_super_admin_has_everything(self):
        CapabilityTestHelpers.assert_role_has_exactly_capabilities(
            OrganizationRole.super_admin, set(Capability)
        )

    def test_admin_capabilities(self):
        expected = set(Capability) - {
            Capability.MANAGE_ORGANIZATION,
            Capability.MANAGE_BILLING,
            Capability.EDIT_OWN_TASKS,
        }
        CapabilityTestHelpers.assert_role_has_exactly_capabilities(
            OrganizationRole.admin, expected
        )

    def test_viewer_is_read_only(self):
        viewer = CapabilityTestHelpers.get_role_capabilities(OrganizationRole.viewer)
        assert viewer <= CapabilityTestHelpers.get_capabilities_with_prefix("VIEW_")
        assert Capability.VIEW_MEMBERS not in viewer

    @pytest.mark.parametrize(
        "role",
        [OrganizationRole.manager, OrganizationRole.member, OrganizationRole.viewer],
    )
    def test_only_admins_manage(self, role):
        manage = CapabilityTestHelpers.get_capabilities_with_prefix("MANAGE_")
        assert not (CapabilityTestHelpers.get_role_capabilities(role) & manage)


class TestPermissionRecords:
    def test_level_is_kept_as_given(self):
        permission = Permission(
            entity=EntityType.tasks, action=ActionType.read, level="sometimes"
        )
        assert permission.level == "sometimes"
        assert permission.specific_users is None

    def test_project_defaults(self):
        permissions = ProjectPermissions()
        assert permissions.read.level == PermissionLevel.all.value
        assert permissions.update.level == PermissionLevel.specific.value
        assert permissions.update.specific_users == []
        assert permissions.assign_to_user.action == ActionType.assign

    def test_defaults_are_not_shared(self):
        first = TaskPermissions()
        second = TaskPermissions()
        first.delete.specific_users.append("u1")
        assert second.delete.specific_users == []
