"""
Dynamic capability testing utilities.

Expected role capabilities are derived from the Capability enum and
ROLE_CAPABILITIES, so tests keep working as new capabilities are added.
"""

from typing import List, Set

from src.shared.permissions.models import ROLE_CAPABILITIES, Capability
from src.shared.roles import OrganizationRole, rank


class CapabilityTestHelpers:
    """Helper class for dynamic capability testing."""

    @staticmethod
    def get_all_capabilities() -> Set[Capability]:
        return set(Capability)

    @staticmethod
    def get_role_capabilities(role: OrganizationRole) -> Set[Capability]:
        return ROLE_CAPABILITIES.get(role, set())

    @staticmethod
    def get_capabilities_with_prefix(prefix: str) -> Set[Capability]:
        """Get all capabilities whose name starts with `prefix` (e.g. "VIEW_")."""
        return {c for c in Capability if c.name.startswith(prefix)}

    @staticmethod
    def roles_by_rank() -> List[OrganizationRole]:
        """Roles ordered from most to least privileged."""
        return sorted(OrganizationRole, key=rank, reverse=True)

    @staticmethod
    def validate_role_hierarchy() -> bool:
        """
        Validate that the role hierarchy makes logical sense.

        Super admin holds every capability and each role holds at least as
        many capabilities as the role ranked below it.
        """
        roles = CapabilityTestHelpers.roles_by_rank()
        top = CapabilityTestHelpers.get_role_capabilities(roles[0])
        if top != CapabilityTestHelpers.get_all_capabilities():
            return False

        for higher, lower in zip(roles, roles[1:]):
            higher_caps = CapabilityTestHelpers.get_role_capabilities(higher)
            lower_caps = CapabilityTestHelpers.get_role_capabilities(lower)
            if len(higher_caps) < len(lower_caps):
                return False

        return True

    @staticmethod
    def assert_role_has_exactly_capabilities(
        role: OrganizationRole, expected: Set[Capability]
    ) -> None:
        """
        Assert that a role has exactly the expected capabilities.

        Provides detailed error messages about missing or unexpected ones.
        """
        actual = CapabilityTestHelpers.get_role_capabilities(role)
        missing = expected - actual
        unexpected = actual - expected

        error_parts = []
        if missing:
            error_parts.append(
                f"Missing capabilities: {sorted(c.name for c in missing)}"
            )
        if unexpected:
            error_parts.append(
                f"Unexpected capabilities: {sorted(c.name for c in unexpected)}"
            )

        if error_parts:
            raise AssertionError(
                f"Role {role.value} capability mismatch. " + "; ".join(error_parts)
            )
