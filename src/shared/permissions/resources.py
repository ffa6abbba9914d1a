"""
Per-resource permission checks for projects and tasks.

Checks run in order: the project owner (or task creator) always passes, then
the user's role on the project team, then the project's own permission
records through `evaluate`. Tasks inherit from their project.
"""

from typing import Dict, FrozenSet

from src.shared.roles import SUPER_PRIVILEGED_ROLE

from .models import ActionType, EntityType, Project, ProjectTeamRole, Task
from .services import RoleInput, evaluate

# Actions each project team role grants on its project
TEAM_ROLE_ACTIONS: Dict[ProjectTeamRole, FrozenSet[ActionType]] = {
    ProjectTeamRole.owner: frozenset(ActionType),
    ProjectTeamRole.admin: frozenset(ActionType),
    ProjectTeamRole.member: frozenset(
        {ActionType.create, ActionType.read, ActionType.update}
    ),
    ProjectTeamRole.viewer: frozenset({ActionType.read}),
}

# ProjectPermissions field holding the record for each project action
_PROJECT_PERMISSION_FIELDS: Dict[ActionType, str] = {
    ActionType.create: "create",
    ActionType.read: "read",
    ActionType.update: "update",
    ActionType.delete: "delete",
    ActionType.assign: "assign_to_user",
    ActionType.manage_members: "manage_members",
}

# Project action a task action is decided by, once the project is readable
_TASK_INHERITS: Dict[ActionType, ActionType] = {
    ActionType.update: ActionType.update,
    ActionType.change_status: ActionType.update,
    ActionType.delete: ActionType.delete,
    ActionType.assign: ActionType.assign,
}


def check_project_permission(
    user_id: str,
    project: Project,
    action: ActionType,
    user_role: RoleInput = None,
) -> bool:
    """
    Decide whether a user may perform an action on one project.

    Args:
        user_id: ID of the acting user
        project: The project being acted on
        action: Project action
        user_role: The user's organization role, if known

    Returns:
        True for the project owner; otherwise the team role decides if the
        user has a recognized one, then the project's permission record.
        A project without permission records denies everyone else.
    """
    if not user_id:
        return False
    if project.owner_id == user_id:
        return True

    member = project.team_member(user_id)
    if member is not None and member.role is not None:
        return action in TEAM_ROLE_ACTIONS[member.role]

    field = _PROJECT_PERMISSION_FIELDS.get(action)
    if field is None or project.permissions is None:
        return False
    return evaluate(
        user_id,
        EntityType.projects,
        action,
        getattr(project.permissions, field),
        user_role,
    )


def check_task_permission(
    user_id: str,
    task: Task,
    project: Project,
    action: ActionType,
    user_role: RoleInput = None,
) -> bool:
    """
    Decide whether a user may perform an action on one task of a project.

    The task creator always passes. Creating a task needs project create;
    every other action needs project read first, then the project action it
    inherits from (update and change_status from update, delete from delete,
    assign from assign). Reading needs nothing more.
    """
    if not user_id:
        return False
    if task.created_by == user_id:
        return True

    if action == ActionType.create:
        return check_project_permission(user_id, project, ActionType.create, user_role)

    if not check_project_permission(user_id, project, ActionType.read, user_role):
        return False
    if action == ActionType.read:
        return True

    inherited = _TASK_INHERITS.get(action)
    if inherited is None:
        return False
    return check_project_permission(user_id, project, inherited, user_role)


def can_view_project(
    user_id: str, project: Project, user_role: RoleInput = None
) -> bool:
    # Any team entry may view, even one with an unrecognized team role
    if user_id and project.team_member(user_id) is not None:
        return True
    return check_project_permission(user_id, project, ActionType.read, user_role)


def can_edit_project(
    user_id: str, project: Project, user_role: RoleInput = None
) -> bool:
    return check_project_permission(user_id, project, ActionType.update, user_role)


def can_delete_project(
    user_id: str, project: Project, user_role: RoleInput = None
) -> bool:
    if user_id and user_role == SUPER_PRIVILEGED_ROLE:
        return True
    return check_project_permission(user_id, project, ActionType.delete, user_role)
