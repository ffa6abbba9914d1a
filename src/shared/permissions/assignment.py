"""
Task assignment rules.

OWNER may not assign a resource to itself; every other tier may assign to
anyone, including itself. `available_assignees` is the list form of the same
rule.
"""

from typing import Any, List, Protocol, Sequence, TypeVar, Union

from src.shared.roles import MembershipTier, coerce_tier


class HasId(Protocol):
    id: Any


UserT = TypeVar("UserT", bound=HasId)


def can_assign(
    assigner_id: str,
    assignee_id: str,
    assigner_role: Union[MembershipTier, str],
) -> bool:
    """
    Check if the assigner may assign a task to the assignee.

    Args:
        assigner_id: ID of the user making the assignment
        assignee_id: ID of the user receiving the assignment
        assigner_role: The assigner's membership tier

    Returns:
        False only for an OWNER assigning to itself
    """
    if coerce_tier(assigner_role) == MembershipTier.OWNER:
        return assigner_id != assignee_id
    return True


def available_assignees(
    all_users: Sequence[UserT],
    assigner_id: str,
    assigner_role: Union[MembershipTier, str],
) -> List[UserT]:
    """Users the assigner may pick from; an OWNER's own entry is excluded."""
    if coerce_tier(assigner_role) == MembershipTier.OWNER:
        return [user for user in all_users if user.id != assigner_id]
    return list(all_users)
