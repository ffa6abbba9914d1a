"""
Permission evaluation engine.

`evaluate` is the single decision algorithm; every `can_*` helper below is a
pass-through projection of it for one (entity, action) pair.
"""

import logging
from typing import Optional, Union

from src.shared.exceptions import AuthorizationFault, ConfigurationFault
from src.shared.roles import SUPER_PRIVILEGED_ROLE, OrganizationRole, coerce_role

from .models import (
    ROLE_CAPABILITIES,
    ActionType,
    Capability,
    EntityType,
    OrganizationPermissions,
    Permission,
    PermissionLevel,
    ProjectPermissions,
    TaskPermissions,
)

logger = logging.getLogger(__name__)

RoleInput = Optional[Union[OrganizationRole, str]]


def _is_super_privileged(actor_role: RoleInput) -> bool:
    # Exact match only: an unknown role string must never reach the bypass
    return actor_role == SUPER_PRIVILEGED_ROLE


def _decide(actor_id: str, permission: Permission, actor_role: RoleInput) -> bool:
    if _is_super_privileged(actor_role):
        return True

    try:
        level = PermissionLevel(permission.level)
    except ValueError:
        raise ConfigurationFault(
            f"Unknown permission level {permission.level!r} for "
            f"{permission.entity.value}:{permission.action.value}"
        )

    if level == PermissionLevel.none:
        return False
    if level == PermissionLevel.all:
        return True
    return actor_id in (permission.specific_users or [])


def evaluate(
    actor_id: str,
    entity: EntityType,
    action: ActionType,
    permission: Permission,
    actor_role: RoleInput = None,
) -> bool:
    """
    Decide whether an actor may perform an action on an entity.

    Args:
        actor_id: ID of the user performing the action
        entity: Entity type being acted on
        action: Action being performed
        permission: Permission record governing the (entity, action) pair
        actor_role: The actor's organization role, if known

    Returns:
        True if allowed. A misconfigured permission level is logged and denied.
    """
    try:
        return _decide(actor_id, permission, actor_role)
    except ConfigurationFault as e:
        logger.error(
            f"Denying {entity.value}:{action.value} for {actor_id}: {e.message}"
        )
        return False


def authorize(
    actor_id: str,
    entity: EntityType,
    action: ActionType,
    permission: Permission,
    actor_role: RoleInput = None,
) -> None:
    """
    Raising variant of `evaluate`.

    Raises:
        ConfigurationFault: If the permission level is outside the closed set
        AuthorizationFault: If the actor is denied
    """
    if not _decide(actor_id, permission, actor_role):
        raise AuthorizationFault(
            f"Insufficient permissions: {entity.value}:{action.value} required"
        )


# Projects
def can_create_project(
    user_id: str, permissions: ProjectPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id, EntityType.projects, ActionType.create, permissions.create, user_role
    )


def can_read_project(
    user_id: str, permissions: ProjectPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id, EntityType.projects, ActionType.read, permissions.read, user_role
    )


def can_update_project(
    user_id: str, permissions: ProjectPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id, EntityType.projects, ActionType.update, permissions.update, user_role
    )


def can_delete_project(
    user_id: str, permissions: ProjectPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id, EntityType.projects, ActionType.delete, permissions.delete, user_role
    )


def can_assign_project(
    user_id: str, permissions: ProjectPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id,
        EntityType.projects,
        ActionType.assign,
        permissions.assign_to_user,
        user_role,
    )


def can_manage_project_members(
    user_id: str, permissions: ProjectPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id,
        EntityType.projects,
        ActionType.manage_members,
        permissions.manage_members,
        user_role,
    )


# Tasks
def can_create_task(
    user_id: str, permissions: TaskPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id, EntityType.tasks, ActionType.create, permissions.create, user_role
    )


def can_read_task(
    user_id: str, permissions: TaskPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id, EntityType.tasks, ActionType.read, permissions.read, user_role
    )


def can_update_task(
    user_id: str, permissions: TaskPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id, EntityType.tasks, ActionType.update, permissions.update, user_role
    )


def can_delete_task(
    user_id: str, permissions: TaskPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id, EntityType.tasks, ActionType.delete, permissions.delete, user_role
    )


def can_assign_task(
    user_id: str, permissions: TaskPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id,
        EntityType.tasks,
        ActionType.assign,
        permissions.assign_to_user,
        user_role,
    )


def can_change_task_status(
    user_id: str, permissions: TaskPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id,
        EntityType.tasks,
        ActionType.change_status,
        permissions.change_status,
        user_role,
    )


# Organizations
def can_create_organization(
    user_id: str, permissions: OrganizationPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id,
        EntityType.organizations,
        ActionType.create,
        permissions.create,
        user_role,
    )


def can_read_organization(
    user_id: str, permissions: OrganizationPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id, EntityType.organizations, ActionType.read, permissions.read, user_role
    )


def can_update_organization(
    user_id: str, permissions: OrganizationPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id,
        EntityType.organizations,
        ActionType.update,
        permissions.update,
        user_role,
    )


def can_delete_organization(
    user_id: str, permissions: OrganizationPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id,
        EntityType.organizations,
        ActionType.delete,
        permissions.delete,
        user_role,
    )


def can_manage_organization_members(
    user_id: str, permissions: OrganizationPermissions, user_role: RoleInput = None
) -> bool:
    return evaluate(
        user_id,
        EntityType.organizations,
        ActionType.manage_members,
        permissions.manage_members,
        user_role,
    )


def has_capability(role: RoleInput, capability: Capability) -> bool:
    """
    Check if a role holds an organization-wide capability.

    Args:
        role: The organization role to check; unknown values are treated as viewer
        capability: The capability to validate

    Returns:
        True if the role has the capability, False otherwise
    """
    if role is None:
        return False
    return capability in ROLE_CAPABILITIES.get(coerce_role(role), set())
