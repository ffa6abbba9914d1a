"""
Shared permission system for role-based access control.

Three layers live here:
- the permission engine (`evaluate`), deciding per-resource actions from a
  Permission record and the actor's role
- per-instance project and task checks (`check_project_permission`,
  `check_task_permission`) layering owner, creator and team roles on top
- organization-wide capabilities granted by role (`has_capability`,
  `require_capability`)

Usage:
    from src.shared.permissions import Capability, require_capability

    @router.get("/{org_id}/members")
    async def get_members(
        decision: AccessDecision = Depends(
            require_capability(Capability.VIEW_MEMBERS)
        )
    ):
        pass
"""

from .assignment import available_assignees, can_assign
from .dependencies import require_capability
from .models import (
    ROLE_CAPABILITIES,
    ActionType,
    Capability,
    EntityType,
    OrganizationPermissions,
    Permission,
    PermissionLevel,
    Project,
    ProjectPermissions,
    ProjectTeamMember,
    ProjectTeamRole,
    Task,
    TaskPermissions,
)
from .resources import (
    can_delete_project,
    can_edit_project,
    can_view_project,
    check_project_permission,
    check_task_permission,
)
from .services import authorize, evaluate, has_capability

__all__ = [
    "ActionType",
    "Capability",
    "EntityType",
    "OrganizationPermissions",
    "Permission",
    "PermissionLevel",
    "Project",
    "ProjectPermissions",
    "ProjectTeamMember",
    "ProjectTeamRole",
    "ROLE_CAPABILITIES",
    "Task",
    "TaskPermissions",
    "authorize",
    "available_assignees",
    "can_assign",
    "can_delete_project",
    "can_edit_project",
    "can_view_project",
    "check_project_permission",
    "check_task_permission",
    "evaluate",
    "has_capability",
    "require_capability",
]
