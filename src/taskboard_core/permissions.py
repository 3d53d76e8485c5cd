"""Field-level authorization for task updates.

Two independent facts decide what an actor may change on a task:
- The actor's organization-wide role (MemberRole)
- Whether the actor leads this specific project (project_team_leads)

Admins and super admins may change everything. A team leader may change
everything only on projects they lead. A plain assignee may only move the
task's status. Everyone else is denied.
"""
import logging
from typing import Iterable

from .errors import PermissionDeniedError, ValidationError
from .models import MemberRole

logger = logging.getLogger("taskboard-core.permissions")


# Every field a task update may carry
TASK_UPDATE_FIELDS: frozenset[str] = frozenset({
    "title",
    "description",
    "assignee_ids",
    "status",
    "start_date",
    "end_date",
    "expense",
    "color",
    "display_order",
})

# Fields an assignee without management rights may change
ASSIGNEE_UPDATE_FIELDS: frozenset[str] = frozenset({"status"})


def can_manage_project(role: MemberRole, is_project_lead: bool) -> bool:
    """
    Check whether an actor has full management rights on a project.

    Args:
        role: Actor's role in the project's organization
        is_project_lead: True if the actor is a team lead of this project

    Returns:
        True for admins and super admins, and for team leaders who lead
        this exact project
    """
    role = MemberRole(role)
    if role >= MemberRole.ADMIN:
        return True
    return role == MemberRole.TEAM_LEADER and is_project_lead


def check_task_update_permission(
    role: MemberRole,
    is_project_lead: bool,
    is_assignee: bool,
    requested_fields: Iterable[str],
) -> frozenset[str]:
    """
    Decide which of the requested task fields the actor may change.

    Args:
        role: Actor's role in the task's organization
        is_project_lead: True if the actor is a team lead of the task's project
        is_assignee: True if the actor is currently assigned to the task
        requested_fields: Names of the fields the request wants to change

    Returns:
        The full requested field set when permitted

    Raises:
        ValidationError: If a requested field is not an updatable task field
        PermissionDeniedError: If the actor may not change the requested fields
    """
    requested = frozenset(requested_fields)

    unknown = requested - TASK_UPDATE_FIELDS
    if unknown:
        raise ValidationError(
            f"Unknown task fields: {', '.join(sorted(unknown))}.",
            field=sorted(unknown)[0],
        )

    if can_manage_project(role, is_project_lead):
        return requested

    if is_assignee:
        restricted = requested - ASSIGNEE_UPDATE_FIELDS
        if restricted:
            names = sorted(restricted)
            logger.warning(f"Assignee attempted to update restricted fields: {names}")
            raise PermissionDeniedError(
                f"Assignees can only update 'status'. Attempted to update: {', '.join(names)}.",
                fields=names,
            )
        return requested

    logger.warning(f"Denied task update for role {MemberRole(role).value} (not a lead or assignee)")
    raise PermissionDeniedError("You do not have permission to update this task.")
