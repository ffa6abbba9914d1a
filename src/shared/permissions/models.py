from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field, field_validator

from src.shared.roles import OrganizationRole


class PermissionLevel(str, Enum):
    """Who may perform an action: nobody, a named set of users, or everyone."""

    none = "none"
    specific = "specific"
    all = "all"


class EntityType(str, Enum):
    projects = "projects"
    tasks = "tasks"
    organizations = "organizations"


class ActionType(str, Enum):
    create = "create"
    read = "read"
    update = "update"
    delete = "delete"

    # Extension actions
    assign = "assign"
    manage_members = "manage_members"
    change_status = "change_status"


class Permission(BaseModel):
    """
    Permission record for one (entity, action) pair.

    `level` keeps the stored value as-is; values outside PermissionLevel are
    rejected by the engine, not at parse time.
    """

    entity: EntityType
    action: ActionType
    level: str
    specific_users: Optional[List[str]] = Field(
        None, description="User IDs granted access when level is 'specific'"
    )


def _specific(entity: EntityType, action: ActionType) -> Permission:
    return Permission(
        entity=entity,
        action=action,
        level=PermissionLevel.specific.value,
        specific_users=[],
    )


def _everyone(entity: EntityType, action: ActionType) -> Permission:
    return Permission(entity=entity, action=action, level=PermissionLevel.all.value)


class ProjectPermissions(BaseModel):
    create: Permission = Field(
        default_factory=lambda: _everyone(EntityType.projects, ActionType.create)
    )
    read: Permission = Field(
        default_factory=lambda: _everyone(EntityType.projects, ActionType.read)
    )
    update: Permission = Field(
        default_factory=lambda: _specific(EntityType.projects, ActionType.update)
    )
    delete: Permission = Field(
        default_factory=lambda: _specific(EntityType.projects, ActionType.delete)
    )
    assign_to_user: Permission = Field(
        default_factory=lambda: _specific(EntityType.projects, ActionType.assign)
    )
    manage_members: Permission = Field(
        default_factory=lambda: _specific(
            EntityType.projects, ActionType.manage_members
        )
    )


class TaskPermissions(BaseModel):
    create: Permission = Field(
        default_factory=lambda: _everyone(EntityType.tasks, ActionType.create)
    )
    read: Permission = Field(
        default_factory=lambda: _everyone(EntityType.tasks, ActionType.read)
    )
    update: Permission = Field(
        default_factory=lambda: _everyone(EntityType.tasks, ActionType.update)
    )
    delete: Permission = Field(
        default_factory=lambda: _specific(EntityType.tasks, ActionType.delete)
    )
    assign_to_user: Permission = Field(
        default_factory=lambda: _everyone(EntityType.tasks, ActionType.assign)
    )
    change_status: Permission = Field(
        default_factory=lambda: _everyone(EntityType.tasks, ActionType.change_status)
    )


class OrganizationPermissions(BaseModel):
    create: Permission = Field(
        default_factory=lambda: _specific(EntityType.organizations, ActionType.create)
    )
    read: Permission = Field(
        default_factory=lambda: _everyone(EntityType.organizations, ActionType.read)
    )
    update: Permission = Field(
        default_factory=lambda: _specific(EntityType.organizations, ActionType.update)
    )
    delete: Permission = Field(
        default_factory=lambda: _specific(EntityType.organizations, ActionType.delete)
    )
    manage_members: Permission = Field(
        default_factory=lambda: _specific(
            EntityType.organizations, ActionType.manage_members
        )
    )


class ProjectTeamRole(str, Enum):
    """A user's role within a single project's team."""

    owner = "owner"
    admin = "admin"
    member = "member"
    viewer = "viewer"


class ProjectTeamMember(BaseModel):
    id: str
    # Unrecognized team roles grant nothing by themselves
    role: Optional[ProjectTeamRole] = None

    @field_validator("role", mode="before")
    @classmethod
    def unknown_role_to_none(cls, v: Any) -> Optional[ProjectTeamRole]:
        try:
            return ProjectTeamRole(v)
        except ValueError:
            return None


class Project(BaseModel):
    """The parts of a project that decide who may act on it."""

    id: str
    owner_id: Optional[str] = None
    team: List[ProjectTeamMember] = Field(default_factory=list)
    permissions: Optional[ProjectPermissions] = None

    def team_member(self, user_id: str) -> Optional[ProjectTeamMember]:
        return next((m for m in self.team if m.id == user_id), None)


class Task(BaseModel):
    id: str
    project_id: Optional[str] = None
    created_by: Optional[str] = None


class Capability(Enum):
    """
    Organization-wide capabilities granted by role.

    Capabilities should follow the pattern: ACTION_RESOURCE
    """

    # Organization permissions
    MANAGE_ORGANIZATION = "manage_organization"  # Settings and data
    MANAGE_BILLING = "manage_billing"  # Subscription and billing
    VIEW_MEMBERS = "view_members"  # View member list and invitations
    MANAGE_USERS = "manage_users"  # Invite, remove and manage members
    ASSIGN_ROLES = "assign_roles"  # Change member roles

    # Project permissions
    CREATE_PROJECTS = "create_projects"
    EDIT_PROJECTS = "edit_projects"
    DELETE_PROJECTS = "delete_projects"
    VIEW_PROJECTS = "view_projects"
    ASSIGN_PROJECTS = "assign_projects"

    # Task permissions
    CREATE_TASKS = "create_tasks"
    EDIT_TASKS = "edit_tasks"
    EDIT_OWN_TASKS = "edit_own_tasks"  # Tasks they own or are assigned to
    DELETE_TASKS = "delete_tasks"
    VIEW_TASKS = "view_tasks"
    ASSIGN_TASKS = "assign_tasks"


ROLE_CAPABILITIES: Dict[OrganizationRole, Set[Capability]] = {
    # Super admins hold every capability
    OrganizationRole.super_admin: set(Capability),
    OrganizationRole.admin: {
        Capability.VIEW_MEMBERS,
        Capability.MANAGE_USERS,
        Capability.ASSIGN_ROLES,
        Capability.CREATE_PROJECTS,
        Capability.EDIT_PROJECTS,
        Capability.DELETE_PROJECTS,
        Capability.VIEW_PROJECTS,
        Capability.ASSIGN_PROJECTS,
        Capability.CREATE_TASKS,
        Capability.EDIT_TASKS,
        Capability.DELETE_TASKS,
        Capability.VIEW_TASKS,
        Capability.ASSIGN_TASKS,
    },
    OrganizationRole.manager: {
        Capability.VIEW_MEMBERS,
        Capability.CREATE_PROJECTS,
        Capability.EDIT_PROJECTS,
        Capability.VIEW_PROJECTS,
        Capability.ASSIGN_PROJECTS,
        Capability.CREATE_TASKS,
        Capability.EDIT_TASKS,
        Capability.VIEW_TASKS,
        Capability.ASSIGN_TASKS,
    },
    OrganizationRole.member: {
        Capability.VIEW_PROJECTS,
        Capability.CREATE_TASKS,
        Capability.EDIT_OWN_TASKS,
        Capability.VIEW_TASKS,
    },
    OrganizationRole.viewer: {
        Capability.VIEW_PROJECTS,
        Capability.VIEW_TASKS,
    },
}


class PermissionCheckRequest(BaseModel):
    """Ask whether the caller may perform `action` on `entity` under `permission`."""

    entity: EntityType
    action: ActionType
    permission: Permission
