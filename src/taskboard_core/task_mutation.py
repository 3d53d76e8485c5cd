"""Task update flow: authorize, validate, apply, diff, notify.

The prior status and assignee set are read from the store inside the same
operation, never taken from the client. Every check runs before the first
write, and the assignee replacement plus scalar changes commit together in
one transaction, so readers never see a half-applied update.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from . import crud, models
from .errors import ValidationError
from .notifications import NotificationService
from .permissions import check_task_update_permission

logger = logging.getLogger("taskboard-core.task_mutation")

# Columns that may not be cleared by an update
REQUIRED_FIELDS = ("title", "status", "start_date", "end_date", "color", "display_order")


@dataclass(frozen=True)
class TaskChange:
    """Observable effect of a task update, consumed by the notification fan-out."""

    status_changed: bool
    old_status: models.TaskStatus
    new_status: models.TaskStatus
    assignees_added: tuple[UUID, ...] = ()
    assignees_removed: tuple[UUID, ...] = ()

    @property
    def has_changes(self) -> bool:
        return self.status_changed or bool(self.assignees_added) or bool(self.assignees_removed)


@dataclass
class TaskUpdateResult:
    """Updated task with the change that was applied."""

    task: models.Task
    change: TaskChange
    notifications: list[models.Notification] = field(default_factory=list)


def diff_assignees(old: Iterable[UUID], new: Iterable[UUID]) -> tuple[tuple[UUID, ...], tuple[UUID, ...]]:
    """
    Compare two assignee sets.

    Returns:
        Tuple of (added, removed), each sorted for a stable order
    """
    old, new = set(old), set(new)
    return tuple(sorted(new - old, key=str)), tuple(sorted(old - new, key=str))


def parse_calendar_date(value: Any, field_name: str) -> date:
    """
    Parse a calendar date from a date or an ISO ``YYYY-MM-DD`` string.

    Raises:
        ValidationError: If the value is not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"Invalid date for '{field_name}': {value!r}.", field=field_name)


def _validate_scalars(task: models.Task, changes: dict) -> dict:
    """Normalize scalar field values, raising ValidationError before any write."""
    values = dict(changes)

    for name in REQUIRED_FIELDS:
        if name in values and values[name] is None:
            raise ValidationError(f"'{name}' cannot be cleared.", field=name)

    for name in ("title", "color"):
        if name in values and not str(values[name]).strip():
            raise ValidationError(f"'{name}' cannot be empty.", field=name)

    if "status" in values:
        try:
            values["status"] = models.TaskStatus(values["status"])
        except ValueError:
            raise ValidationError(f"Invalid task status: {values['status']!r}.", field="status")

    for name in ("start_date", "end_date"):
        if name in values:
            values[name] = parse_calendar_date(values[name], name)

    start = values.get("start_date", task.start_date)
    end = values.get("end_date", task.end_date)
    if start and end and end < start:
        raise ValidationError("end_date must not be before start_date.", field="end_date")

    if values.get("expense") is not None:
        try:
            expense = Decimal(str(values["expense"]))
            negative = expense < 0
        except ArithmeticError:
            raise ValidationError(f"Invalid expense: {values['expense']!r}.", field="expense")
        if negative:
            raise ValidationError("Expense cannot be negative.", field="expense")
        values["expense"] = expense

    if "display_order" in values:
        order = values["display_order"]
        if isinstance(order, bool) or not isinstance(order, int) or order < 0:
            raise ValidationError("display_order must be a non-negative integer.", field="display_order")

    return values


def update_task(
    db: Session,
    organization_id: UUID,
    project_id: UUID,
    task_id: UUID,
    actor_id: UUID,
    actor_role: models.MemberRole,
    changes: dict,
    notifier: Optional[NotificationService] = None,
) -> TaskUpdateResult:
    """
    Apply a partial update to a task on behalf of an actor.

    Args:
        db: Database session
        organization_id: Organization the project must belong to
        project_id: Project the task must belong to
        task_id: Task UUID
        actor_id: User making the change
        actor_role: Actor's role in the organization
        changes: Field name to new value; only present keys are applied
        notifier: Notification service for the fan-out (skipped when None)

    Returns:
        TaskUpdateResult with the refreshed task and the change descriptor

    Raises:
        NotFoundError: If the task is not in the project or the project is not
            in the organization
        PermissionDeniedError: If the actor may not change the requested fields
        ValidationError: On malformed values or assignees outside the organization
        ConflictError: If the write violates a store constraint
    """
    project, task = crud.get_task_in_project(db, organization_id, project_id, task_id)

    if not changes:
        raise ValidationError("No valid fields provided for update.")

    # Snapshot from the store, not from the request
    old_status = task.status
    old_assignees = task.assignee_ids

    allowed = check_task_update_permission(
        actor_role,
        is_project_lead=actor_id in project.team_lead_ids,
        is_assignee=actor_id in old_assignees,
        requested_fields=changes.keys(),
    )
    permitted = {name: value for name, value in changes.items() if name in allowed}

    new_assignee_ids = permitted.pop("assignee_ids", None)
    scalars = _validate_scalars(task, permitted)

    new_assignees = None
    if new_assignee_ids is not None:
        new_assignees = crud.require_members(db, organization_id, new_assignee_ids, "assignee_ids")

    if new_assignees is not None:
        task.assignees = new_assignees
    for name, value in scalars.items():
        setattr(task, name, value)
    crud.commit_or_rollback(db, "update task")
    db.refresh(task)

    added, removed = diff_assignees(old_assignees, task.assignee_ids) if new_assignees is not None else ((), ())
    change = TaskChange(
        status_changed=task.status != old_status,
        old_status=old_status,
        new_status=task.status,
        assignees_added=added,
        assignees_removed=removed,
    )
    logger.info(
        f"Updated task {task.id} fields={sorted(allowed)} "
        f"status_changed={change.status_changed} added={len(added)} removed={len(removed)}"
    )

    result = TaskUpdateResult(task=task, change=change)
    if notifier is not None and change.has_changes:
        result.notifications = notifier.notify_task_change(db, task, project, change, actor_id)
    return result
